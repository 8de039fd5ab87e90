from typing import Any, Protocol

from domain.models.provider import ProviderCredential


class ExchangeRateProvider(Protocol):
    async def fetch_rates(self, provider: ProviderCredential, api_key: str) -> dict[str, Any]:
        ...

    async def close(self) -> None:
        ...
