from .provider import ProviderCredentialRepository
from .rate import RateRepository
from .user import UserRepository

__all__ = ['ProviderCredentialRepository', 'RateRepository', 'UserRepository']
