from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
	id: int
	username: str
	email: str
	first_name: str
	last_name: str
	is_active: bool
	role: str


class SecurityData(BaseModel):
	access_token: str
	refresh_token: str
	access_expires_at: datetime
	refresh_expires_at: datetime
	token_type: str = 'bearer'


class LoginResponse(BaseModel):
	data: UserResponse
	security: SecurityData


class ProviderResponse(BaseModel):
	id: int
	name: str
	base_url: str
	is_active: bool
	created_at: datetime | None = None
	updated_at: datetime | None = None


class AggregatedRateResponse(BaseModel):
	base_currency: str = Field(..., description='Base currency code')
	quote_currency: str = Field(..., description='Quote currency code')
	rate: Decimal = Field(..., description='Mean rate across contributing providers')
	source_count: int = Field(..., description='Number of contributing providers')
	sources: list[str] = Field(..., description='Providers of rates')
	timestamp: datetime = Field(..., description='When the rate was aggregated')

	model_config = ConfigDict(
		json_schema_extra={
			'example': {
				'base_currency': 'USD',
				'quote_currency': 'EUR',
				'rate': 0.9215,
				'source_count': 2,
				'sources': ['fixerio', 'currencyapi'],
				'timestamp': '2025-09-27T10:30:00Z',
			}
		}
	)


class ProviderOutcomeResponse(BaseModel):
	provider: str
	succeeded: bool
	rate_count: int
	error: str | None = None


class RateUpdateResponse(BaseModel):
	updated_at: datetime | None
	rates: list[AggregatedRateResponse]
	providers: list[ProviderOutcomeResponse]
	partial: bool = Field(..., description='True when some providers failed')


class RateListResponse(BaseModel):
	base_currency: str
	rates: list[AggregatedRateResponse]
