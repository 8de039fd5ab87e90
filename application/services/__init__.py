from .auth_service import AuthService
from .provider_service import ProviderService
from .rate_service import RateAggregationService, aggregate_rates

__all__ = ['AuthService', 'ProviderService', 'RateAggregationService', 'aggregate_rates']
