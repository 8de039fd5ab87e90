import httpx

from domain.exceptions.currency import ProviderError
from domain.models.provider import ProviderCredential


class ProviderRatesClient:
	"""Fetches raw rate payloads with ``GET {base_url}?apikey={key}``."""

	def __init__(self, client: httpx.AsyncClient | None = None, timeout: int = 10):
		self.timeout = timeout
		self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

	async def fetch_rates(self, provider: ProviderCredential, api_key: str) -> dict:
		try:
			response = await self._client.get(provider.base_url, params={'apikey': api_key})
		except httpx.RequestError as e:
			raise ProviderError(
				f'{provider.name} request failed: {e.__class__.__name__}', provider=provider.name
			) from e

		if not response.is_success:
			raise ProviderError(
				f'{provider.name} HTTP error {response.status_code}: {response.text[:200]}',
				provider=provider.name,
				status_code=response.status_code,
				body=response.text,
			)

		try:
			data = response.json()
		except ValueError as e:
			raise ProviderError(
				f'{provider.name} response parsing error: {e}',
				provider=provider.name,
				status_code=response.status_code,
				body=response.text[:200],
			) from e

		if not isinstance(data, dict):
			raise ProviderError(
				f'{provider.name} response parsing error: expected a JSON object',
				provider=provider.name,
				status_code=response.status_code,
			)
		return data

	async def close(self) -> None:
		await self._client.aclose()
