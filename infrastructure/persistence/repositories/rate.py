import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.exceptions.currency import CacheError
from domain.models.currency import AggregatedRate
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.persistence.models.rate import AggregatedRateDB
from infrastructure.persistence.repositories.errors import translate_errors

logger = logging.getLogger(__name__)


def _to_domain(row: AggregatedRateDB) -> AggregatedRate:
	return AggregatedRate(
		base_currency=row.base_currency,
		quote_currency=row.quote_currency,
		rate=Decimal(row.rate),
		timestamp=row.timestamp,
		sources=[s for s in row.sources.split(',') if s],
	)


class RateRepository:
	def __init__(self, db_session: AsyncSession, cache_service: RedisCacheService):
		self.db_session = db_session
		self.cache = cache_service

	async def save_aggregated_rates(self, rates: list[AggregatedRate]) -> None:
		if not rates:
			return

		bases = {r.base_currency for r in rates}
		with translate_errors('rate'):
			existing = {
				(row.base_currency, row.quote_currency): row
				for row in (
					await self.db_session.execute(
						select(AggregatedRateDB).filter(AggregatedRateDB.base_currency.in_(bases))
					)
				).scalars().all()
			}
			for rate in rates:
				row = existing.get((rate.base_currency, rate.quote_currency))
				if row is None:
					row = AggregatedRateDB(
						base_currency=rate.base_currency, quote_currency=rate.quote_currency
					)
					self.db_session.add(row)
				row.rate = str(rate.rate)
				row.source_count = rate.source_count
				row.sources = ','.join(rate.sources)
				row.timestamp = rate.timestamp
			await self.db_session.flush()

		try:
			await self.cache.set_rates(rates)
		except CacheError as e:
			# Database row is authoritative.
			logger.warning(f'Rate cache update failed: {e}')

	async def get_rate(self, base_currency: str, quote_currency: str) -> AggregatedRate | None:
		try:
			cached = await self.cache.get_rate(base_currency, quote_currency)
		except CacheError as e:
			logger.warning(f'Rate cache read failed: {e}')
			cached = None
		if cached:
			return cached

		with translate_errors('rate'):
			result = await self.db_session.execute(
				select(AggregatedRateDB).filter(
					AggregatedRateDB.base_currency == base_currency,
					AggregatedRateDB.quote_currency == quote_currency,
				)
			)
			row = result.scalars().first()
		return _to_domain(row) if row else None

	async def list_rates(self, base_currency: str) -> list[AggregatedRate]:
		with translate_errors('rate'):
			result = await self.db_session.execute(
				select(AggregatedRateDB)
				.filter(AggregatedRateDB.base_currency == base_currency)
				.order_by(AggregatedRateDB.quote_currency)
			)
			rows = result.scalars().all()
		return [_to_domain(r) for r in rows]
