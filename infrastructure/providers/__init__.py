from .base import ExchangeRateProvider
from .normalizers import normalize_payload
from .rates_client import ProviderRatesClient

__all__ = ['ExchangeRateProvider', 'ProviderRatesClient', 'normalize_payload']
