from .requests import (
	AccessTokenRequest,
	LoginRequest,
	ProviderCreateRequest,
	ProviderUpdateRequest,
	RegisterRequest,
)
from .responses import (
	AggregatedRateResponse,
	LoginResponse,
	ProviderOutcomeResponse,
	ProviderResponse,
	RateListResponse,
	RateUpdateResponse,
	SecurityData,
	UserResponse,
)

__all__ = [
	'AccessTokenRequest',
	'AggregatedRateResponse',
	'LoginRequest',
	'LoginResponse',
	'ProviderCreateRequest',
	'ProviderOutcomeResponse',
	'ProviderResponse',
	'ProviderUpdateRequest',
	'RateListResponse',
	'RateUpdateResponse',
	'RegisterRequest',
	'SecurityData',
	'UserResponse',
]
