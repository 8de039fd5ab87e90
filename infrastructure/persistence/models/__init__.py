from .base import Base
from .provider import ProviderCredentialDB
from .rate import AggregatedRateDB
from .user import UserDB

__all__ = ['AggregatedRateDB', 'Base', 'ProviderCredentialDB', 'UserDB']
