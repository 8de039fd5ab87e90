from dataclasses import dataclass
from datetime import datetime

from domain.models.patch import Patch


@dataclass(frozen=True)
class NewProvider:
    name: str
    base_url: str
    api_key: str  # Plaintext, encrypted before it reaches storage
    is_active: bool = True


@dataclass(frozen=True)
class ProviderCredential:
    id: int | None
    name: str
    base_url: str
    encrypted_api_key: str
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ProviderPatch(Patch):
    name: str | None = None
    base_url: str | None = None
    api_key: str | None = None
    is_active: bool | None = None
