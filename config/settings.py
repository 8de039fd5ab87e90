from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	DATABASE_URL: str = 'sqlite+aiosqlite:///./currency_converter.db'

	REDIS_URL: str = 'redis://localhost:6379'
	RATE_CACHE_TTL_MINUTES: int = 5

	# Security
	API_KEY_ENCRYPTION_KEY: str = ''
	JWT_SECRET: str = ''
	JWT_ALGORITHM: str = 'HS256'
	ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
	REFRESH_TOKEN_EXPIRE_DAYS: int = 7
	BCRYPT_ROUNDS: int = 12

	# Rate providers
	PROVIDER_TIMEOUT: int = 10
	RATES_BASE_CURRENCY: str = 'USD'
	RATES_FAIL_FAST: bool = False

	# Application
	APP_NAME: str = 'Currency Converter API'
	DEBUG: bool = True
	LOG_LEVEL: str = 'INFO'
	LOG_JSON: bool = False

	model_config = SettingsConfigDict(env_file='.env', case_sensitive=False, extra='ignore')


@lru_cache
def get_settings() -> Settings:
	return Settings()
