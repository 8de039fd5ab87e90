import json
from datetime import datetime, timedelta
from decimal import Decimal

from redis import asyncio as redis
from redis.exceptions import RedisError

from domain.exceptions.currency import CacheError
from domain.models.currency import AggregatedRate


class RedisCacheService:
    def __init__(self, redis_client: redis.Redis, rate_ttl: timedelta = timedelta(minutes=5)):
        self.redis = redis_client
        self.rate_ttl = rate_ttl

    def _make_rate_key(self, base_currency: str, quote_currency: str) -> str:
        return f"rate:{base_currency}:{quote_currency}"

    async def get_rate(self, base_currency: str, quote_currency: str) -> AggregatedRate | None:
        key = self._make_rate_key(base_currency, quote_currency)
        try:
            data = await self.redis.get(key)
        except RedisError as e:
            raise CacheError(f"Failed to read {key}: {e}") from e

        if not data:
            return None

        try:
            rate_dict = json.loads(data)
            return AggregatedRate(
                base_currency=rate_dict["base_currency"],
                quote_currency=rate_dict["quote_currency"],
                rate=Decimal(rate_dict["rate"]),
                timestamp=datetime.fromisoformat(rate_dict["timestamp"]),
                sources=list(rate_dict["sources"]),
            )
        except (ValueError, KeyError, TypeError, ArithmeticError) as e:
            raise CacheError(f"Invalid json data for {key}: {e}") from e

    async def set_rates(self, rates: list[AggregatedRate]) -> None:
        if not rates:
            return
        try:
            async with self.redis.pipeline(transaction=False) as pipe:
                for rate in rates:
                    key = self._make_rate_key(rate.base_currency, rate.quote_currency)
                    rate_dict = {
                        "base_currency": rate.base_currency,
                        "quote_currency": rate.quote_currency,
                        "rate": str(rate.rate),
                        "timestamp": rate.timestamp.isoformat(),
                        "sources": rate.sources,
                    }
                    pipe.setex(key, self.rate_ttl, json.dumps(rate_dict))
                await pipe.execute()
        except RedisError as e:
            raise CacheError(f"Failed to cache {len(rates)} rates: {e}") from e
