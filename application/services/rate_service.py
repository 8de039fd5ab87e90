import asyncio
import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal

from domain.exceptions.currency import ProviderError
from domain.exceptions.security import CryptoError
from domain.models.currency import AggregatedRate, NormalizedRate, ProviderOutcome, RateUpdateResult
from domain.models.provider import ProviderCredential
from infrastructure.persistence.repositories.provider import ProviderCredentialRepository
from infrastructure.persistence.repositories.rate import RateRepository
from infrastructure.providers.base import ExchangeRateProvider
from infrastructure.providers.normalizers import normalize_payload
from infrastructure.security.vault import CredentialVault

logger = logging.getLogger(__name__)


def aggregate_rates(
	records: Iterable[NormalizedRate], timestamp: datetime | None = None
) -> dict[tuple[str, str], AggregatedRate]:
	"""Average same-pair records across providers.

	Works from the raw per-provider values so the mean is exact regardless of
	the order in which providers finished.
	"""
	timestamp = timestamp or datetime.now(UTC)
	groups: dict[tuple[str, str], list[NormalizedRate]] = defaultdict(list)
	for record in records:
		groups[(record.base_currency, record.quote_currency)].append(record)

	aggregated = {}
	for (base, quote), group in groups.items():
		total = sum((r.rate for r in group), Decimal(0))
		aggregated[(base, quote)] = AggregatedRate(
			base_currency=base,
			quote_currency=quote,
			rate=total / len(group),
			timestamp=timestamp,
			sources=[r.provider for r in group],
		)
	return aggregated


class RateAggregationService:
	def __init__(
		self,
		provider_repository: ProviderCredentialRepository,
		rate_repository: RateRepository,
		vault: CredentialVault,
		rates_client: ExchangeRateProvider,
		base_currency: str = 'USD',
		fail_fast: bool = False,
	):
		self.provider_repository = provider_repository
		self.rate_repository = rate_repository
		self.vault = vault
		self.rates_client = rates_client
		self.base_currency = base_currency
		self.fail_fast = fail_fast

	async def _fetch_provider(self, provider: ProviderCredential) -> list[NormalizedRate]:
		# Plaintext key lives only for the duration of this request.
		api_key = self.vault.decrypt(provider.encrypted_api_key)
		payload = await self.rates_client.fetch_rates(provider, api_key)
		return normalize_payload(provider.name, payload, default_base=self.base_currency)

	async def _fetch_sequentially(self, providers: list[ProviderCredential]) -> list[list[NormalizedRate]]:
		# Stops at the first failure so no further keys are decrypted or providers called.
		results = []
		for provider in providers:
			try:
				results.append(await self._fetch_provider(provider))
			except (ProviderError, CryptoError) as e:
				logger.error(f'Provider {provider.name} failed: {e}')
				raise
		return results

	async def update_rates(self) -> RateUpdateResult:
		providers = await self.provider_repository.list_active()
		logger.info(f'Updating rates from {len(providers)} active providers')

		if not providers:
			return RateUpdateResult(rates={}, outcomes=[], updated_at=datetime.now(UTC))

		if self.fail_fast:
			results = await self._fetch_sequentially(providers)
		else:
			tasks = [self._fetch_provider(provider) for provider in providers]
			results = await asyncio.gather(*tasks, return_exceptions=True)

		records: list[NormalizedRate] = []
		outcomes: list[ProviderOutcome] = []
		for provider, result in zip(providers, results, strict=True):
			if isinstance(result, ProviderError | CryptoError):
				logger.error(f'Provider {provider.name} failed: {result}')
				outcomes.append(ProviderOutcome(provider=provider.name, succeeded=False, error=str(result)))
			elif isinstance(result, BaseException):
				raise result
			else:
				records.extend(result)
				outcomes.append(
					ProviderOutcome(provider=provider.name, succeeded=True, rate_count=len(result))
				)

		if not any(o.succeeded for o in outcomes):
			raise ProviderError(f'All {len(providers)} providers failed to return rates')

		updated_at = datetime.now(UTC)
		aggregated = aggregate_rates(records, timestamp=updated_at)
		await self.rate_repository.save_aggregated_rates(list(aggregated.values()))

		logger.info(
			f'Aggregated {len(aggregated)} rates from '
			f'{sum(o.succeeded for o in outcomes)}/{len(outcomes)} providers'
		)
		return RateUpdateResult(rates=aggregated, outcomes=outcomes, updated_at=updated_at)

	async def get_rate(self, base_currency: str, quote_currency: str) -> AggregatedRate | None:
		return await self.rate_repository.get_rate(base_currency, quote_currency)

	async def list_rates(self, base_currency: str | None = None) -> list[AggregatedRate]:
		return await self.rate_repository.list_rates(base_currency or self.base_currency)
