from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class NormalizedRate:
    provider: str
    base_currency: str
    quote_currency: str
    rate: Decimal


@dataclass(frozen=True)
class AggregatedRate:
    base_currency: str
    quote_currency: str
    rate: Decimal  # Mean of the contributing provider rates
    timestamp: datetime
    sources: list[str]  # Which providers contributed

    @property
    def source_count(self) -> int:
        return len(self.sources)


@dataclass(frozen=True)
class ProviderOutcome:
    provider: str
    succeeded: bool
    rate_count: int = 0
    error: str | None = None


@dataclass(frozen=True)
class RateUpdateResult:
    rates: dict[tuple[str, str], AggregatedRate]
    outcomes: list[ProviderOutcome] = field(default_factory=list)
    updated_at: datetime | None = None

    @property
    def failed_providers(self) -> list[str]:
        return [o.provider for o in self.outcomes if not o.succeeded]

    @property
    def is_partial(self) -> bool:
        return bool(self.failed_providers) and bool(self.rates)
