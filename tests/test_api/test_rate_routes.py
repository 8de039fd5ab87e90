from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from api.dependencies import get_rate_service, get_token_service, get_user_repository
from api.main import app
from application.services import RateAggregationService
from domain.exceptions.currency import ProviderError
from domain.models.currency import AggregatedRate, ProviderOutcome, RateUpdateResult
from infrastructure.persistence.repositories.user import UserRepository

UPDATED_AT = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def make_rate(quote='EUR', rate='1.0', sources=('provA', 'provB')):
    return AggregatedRate(
        base_currency='USD',
        quote_currency=quote,
        rate=Decimal(rate),
        timestamp=UPDATED_AT,
        sources=list(sources),
    )


@pytest.fixture
def rate_service():
    service = AsyncMock(spec=RateAggregationService)
    service.base_currency = 'USD'
    app.dependency_overrides[get_rate_service] = lambda: service
    return service


def test_update_rates_reports_partial_failure(client, authenticated, rate_service):
    rate_service.update_rates.return_value = RateUpdateResult(
        rates={('USD', 'EUR'): make_rate()},
        outcomes=[
            ProviderOutcome(provider='provA', succeeded=True, rate_count=1),
            ProviderOutcome(provider='provB', succeeded=True, rate_count=1),
            ProviderOutcome(provider='provC', succeeded=False, error='provC HTTP error 500'),
        ],
        updated_at=UPDATED_AT,
    )

    response = client.put('/api/rates')

    assert response.status_code == 200
    data = response.json()
    assert data['partial'] is True
    assert Decimal(data['rates'][0]['rate']) == Decimal('1.0')
    assert data['rates'][0]['source_count'] == 2
    failed = [p for p in data['providers'] if not p['succeeded']]
    assert [p['provider'] for p in failed] == ['provC']


def test_update_rates_all_failed_is_unavailable(client, authenticated, rate_service):
    rate_service.update_rates.side_effect = ProviderError('All 2 providers failed to return rates')

    response = client.put('/api/rates')

    assert response.status_code == 503


def test_update_rates_requires_auth(client, rate_service, token_service):
    app.dependency_overrides[get_token_service] = lambda: token_service
    app.dependency_overrides[get_user_repository] = lambda: AsyncMock(spec=UserRepository)

    response = client.put('/api/rates')

    assert response.status_code == 401
    rate_service.update_rates.assert_not_called()


def test_get_rate_normalizes_codes(client, rate_service):
    rate_service.get_rate.return_value = make_rate(rate='0.92')

    response = client.get('/api/rates/usd/eur')

    assert response.status_code == 200
    assert Decimal(response.json()['rate']) == Decimal('0.92')
    rate_service.get_rate.assert_awaited_once_with('USD', 'EUR')


def test_get_missing_rate(client, rate_service):
    rate_service.get_rate.return_value = None

    response = client.get('/api/rates/USD/XYZ')

    assert response.status_code == 404


def test_list_rates_defaults_to_base(client, rate_service):
    rate_service.list_rates.return_value = [make_rate(), make_rate(quote='GBP', rate='0.8')]

    response = client.get('/api/rates')

    assert response.status_code == 200
    data = response.json()
    assert data['base_currency'] == 'USD'
    assert [r['quote_currency'] for r in data['rates']] == ['EUR', 'GBP']
    rate_service.list_rates.assert_awaited_once_with('USD')


def test_list_rates_for_explicit_base(client, rate_service):
    rate_service.list_rates.return_value = []

    response = client.get('/api/rates', params={'base': 'eur'})

    assert response.json()['base_currency'] == 'EUR'
    rate_service.list_rates.assert_awaited_once_with('EUR')
