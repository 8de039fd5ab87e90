from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from domain.models.patch import Patch


class UserRole(str, Enum):
    SUBSCRIBER = 'subscriber'
    ADMIN = 'admin'


class TokenPurpose(str, Enum):
    ACCESS = 'access'
    REFRESH = 'refresh'


@dataclass(frozen=True)
class NewUser:
    username: str
    email: str
    first_name: str = ''
    last_name: str = ''


@dataclass(frozen=True)
class User:
    id: int | None
    username: str
    email: str
    hash_password: str
    first_name: str = ''
    last_name: str = ''
    is_active: bool = True
    role: UserRole = UserRole.SUBSCRIBER
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UserPatch(Patch):
    username: str | None = None
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenClaims:
    subject_id: int
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    access_expires_at: datetime
    refresh_expires_at: datetime
