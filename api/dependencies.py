import logging
from collections.abc import AsyncGenerator
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from application.services import AuthService, ProviderService, RateAggregationService
from config.settings import get_settings
from domain.exceptions.auth import NotAuthenticated
from domain.exceptions.repository import NotFoundError
from domain.models.user import TokenPurpose, User
from infrastructure.cache.redis_cache import RedisCacheService
from infrastructure.persistence.database import Database
from infrastructure.persistence.repositories import (
	ProviderCredentialRepository,
	RateRepository,
	UserRepository,
)
from infrastructure.providers import ExchangeRateProvider, ProviderRatesClient
from infrastructure.security.passwords import PasswordHasher
from infrastructure.security.tokens import TokenService
from infrastructure.security.vault import CredentialVault

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class AppDependencies:
	"""Container for application-wide singleton dependencies."""

	db: Database | None = None
	redis_client: Redis | None = None
	redis_cache: RedisCacheService | None = None
	vault: CredentialVault | None = None
	password_hasher: PasswordHasher | None = None
	token_service: TokenService | None = None
	rates_client: ExchangeRateProvider | None = None


deps = AppDependencies()


def init_dependencies() -> None:
	"""Initialize all singleton dependencies. Called at app startup."""
	logger.info('Initializing dependencies...')
	settings = get_settings()

	if not settings.API_KEY_ENCRYPTION_KEY:
		raise RuntimeError('API_KEY_ENCRYPTION_KEY is not configured')
	if not settings.JWT_SECRET:
		raise RuntimeError('JWT_SECRET is not configured')

	deps.db = Database(settings.DATABASE_URL)
	deps.redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
	deps.redis_cache = RedisCacheService(
		deps.redis_client, rate_ttl=timedelta(minutes=settings.RATE_CACHE_TTL_MINUTES)
	)

	deps.vault = CredentialVault.from_config(settings.API_KEY_ENCRYPTION_KEY)
	deps.password_hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
	deps.token_service = TokenService(
		secret=settings.JWT_SECRET,
		access_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
		refresh_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
		algorithm=settings.JWT_ALGORITHM,
	)
	deps.rates_client = ProviderRatesClient(timeout=settings.PROVIDER_TIMEOUT)
	logger.info('Dependencies initialized')


async def cleanup_dependencies() -> None:
	logger.info('Cleaning up dependencies...')

	if deps.redis_client:
		await deps.redis_client.aclose()
	if deps.db:
		await deps.db.close()
	if deps.rates_client:
		await deps.rates_client.close()

	logger.info('Cleanup complete')


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
	if deps.db is None:
		raise RuntimeError('Database is not initialized')

	async with deps.db.session() as session:
		yield session


def get_redis_cache() -> RedisCacheService:
	if deps.redis_cache is None:
		raise RuntimeError('Redis cache not initialized')
	return deps.redis_cache


def get_vault() -> CredentialVault:
	if deps.vault is None:
		raise RuntimeError('Credential vault not initialized')
	return deps.vault


def get_password_hasher() -> PasswordHasher:
	if deps.password_hasher is None:
		raise RuntimeError('Password hasher not initialized')
	return deps.password_hasher


def get_token_service() -> TokenService:
	if deps.token_service is None:
		raise RuntimeError('Token service not initialized')
	return deps.token_service


def get_rates_client() -> ExchangeRateProvider:
	if deps.rates_client is None:
		raise RuntimeError('Rates client not initialized')
	return deps.rates_client


async def get_user_repository(
	session: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserRepository:
	return UserRepository(db_session=session)


async def get_provider_repository(
	session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProviderCredentialRepository:
	return ProviderCredentialRepository(db_session=session)


async def get_rate_repository(
	session: Annotated[AsyncSession, Depends(get_db_session)],
	cache: Annotated[RedisCacheService, Depends(get_redis_cache)],
) -> RateRepository:
	return RateRepository(db_session=session, cache_service=cache)


async def get_auth_service(
	repository: Annotated[UserRepository, Depends(get_user_repository)],
	password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
	token_service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
	return AuthService(
		repository=repository, password_hasher=password_hasher, token_service=token_service
	)


async def get_provider_service(
	repository: Annotated[ProviderCredentialRepository, Depends(get_provider_repository)],
	vault: Annotated[CredentialVault, Depends(get_vault)],
) -> ProviderService:
	return ProviderService(repository=repository, vault=vault)


async def get_rate_service(
	provider_repository: Annotated[ProviderCredentialRepository, Depends(get_provider_repository)],
	rate_repository: Annotated[RateRepository, Depends(get_rate_repository)],
	vault: Annotated[CredentialVault, Depends(get_vault)],
	rates_client: Annotated[ExchangeRateProvider, Depends(get_rates_client)],
) -> RateAggregationService:
	settings = get_settings()
	return RateAggregationService(
		provider_repository=provider_repository,
		rate_repository=rate_repository,
		vault=vault,
		rates_client=rates_client,
		base_currency=settings.RATES_BASE_CURRENCY,
		fail_fast=settings.RATES_FAIL_FAST,
	)


async def get_current_user(
	credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
	token_service: Annotated[TokenService, Depends(get_token_service)],
	repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> User:
	if credentials is None:
		raise NotAuthenticated('Missing bearer token')

	claims = token_service.verify_and_decode(credentials.credentials, TokenPurpose.ACCESS)
	try:
		user = await repository.get_by_id(claims.subject_id)
	except NotFoundError as e:
		raise NotAuthenticated('Unknown user') from e
	if not user.is_active:
		raise NotAuthenticated('Inactive user')
	return user
