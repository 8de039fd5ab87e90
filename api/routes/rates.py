from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status

from api.dependencies import get_current_user, get_rate_service
from api.schemas import (
	AggregatedRateResponse,
	ProviderOutcomeResponse,
	RateListResponse,
	RateUpdateResponse,
)
from application.services import RateAggregationService
from domain.exceptions.repository import NotFoundError
from domain.models.currency import AggregatedRate
from domain.models.user import User

router = APIRouter(prefix='/api/rates', tags=['rates'])

CurrencyCode = Annotated[str, Path(min_length=3, max_length=5)]


def to_rate_response(rate: AggregatedRate) -> AggregatedRateResponse:
	return AggregatedRateResponse(
		base_currency=rate.base_currency,
		quote_currency=rate.quote_currency,
		rate=rate.rate,
		source_count=rate.source_count,
		sources=rate.sources,
		timestamp=rate.timestamp,
	)


@router.put(
	'',
	response_model=RateUpdateResponse,
	status_code=status.HTTP_200_OK,
	summary='Fetch, aggregate and store rates from all active providers',
)
async def update_rates(
	service: Annotated[RateAggregationService, Depends(get_rate_service)],
	_: Annotated[User, Depends(get_current_user)],
) -> RateUpdateResponse:
	result = await service.update_rates()
	return RateUpdateResponse(
		updated_at=result.updated_at,
		rates=[to_rate_response(r) for r in result.rates.values()],
		providers=[
			ProviderOutcomeResponse(
				provider=o.provider, succeeded=o.succeeded, rate_count=o.rate_count, error=o.error
			)
			for o in result.outcomes
		],
		partial=result.is_partial,
	)


@router.get('', response_model=RateListResponse, summary='List stored aggregated rates')
async def list_rates(
	service: Annotated[RateAggregationService, Depends(get_rate_service)],
	base: Annotated[str | None, Query(min_length=3, max_length=5)] = None,
) -> RateListResponse:
	base_currency = (base or service.base_currency).upper()
	rates = await service.list_rates(base_currency)
	return RateListResponse(base_currency=base_currency, rates=[to_rate_response(r) for r in rates])


@router.get(
	'/{base_currency}/{quote_currency}',
	response_model=AggregatedRateResponse,
	summary='Get a stored aggregated rate',
)
async def get_rate(
	base_currency: CurrencyCode,
	quote_currency: CurrencyCode,
	service: Annotated[RateAggregationService, Depends(get_rate_service)],
) -> AggregatedRateResponse:
	base_currency = base_currency.upper()
	quote_currency = quote_currency.upper()
	rate = await service.get_rate(base_currency, quote_currency)
	if rate is None:
		raise NotFoundError('rate', f'{base_currency}/{quote_currency}')
	return to_rate_response(rate)
