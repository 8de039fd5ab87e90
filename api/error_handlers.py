import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from domain.exceptions.auth import AuthError
from domain.exceptions.currency import ProviderError
from domain.exceptions.repository import AlreadyExists, NotFoundError, RepositoryError, ValidationError
from domain.exceptions.security import CryptoError

logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
	@app.exception_handler(ValidationError)
	async def validation_error_handler(request: Request, exc: ValidationError):
		return JSONResponse(status_code=400, content={'detail': str(exc)})

	@app.exception_handler(AuthError)
	async def auth_error_handler(request: Request, exc: AuthError):
		return JSONResponse(
			status_code=401,
			content={'detail': str(exc)},
			headers={'WWW-Authenticate': 'Bearer'},
		)

	@app.exception_handler(NotFoundError)
	async def not_found_handler(request: Request, exc: NotFoundError):
		return JSONResponse(status_code=404, content={'detail': str(exc)})

	@app.exception_handler(AlreadyExists)
	async def already_exists_handler(request: Request, exc: AlreadyExists):
		return JSONResponse(status_code=409, content={'detail': str(exc), 'field': exc.field})

	@app.exception_handler(RepositoryError)
	async def repository_error_handler(request: Request, exc: RepositoryError):
		logger.error(f'Repository error: {exc}')
		return JSONResponse(status_code=500, content={'detail': 'Error in repository operation'})

	@app.exception_handler(CryptoError)
	async def crypto_error_handler(request: Request, exc: CryptoError):
		logger.error(f'Crypto error: {exc}')
		return JSONResponse(status_code=500, content={'detail': 'Internal server error'})

	@app.exception_handler(ProviderError)
	async def provider_error_handler(request: Request, exc: ProviderError):
		logger.error(f'Provider error: {exc}')
		return JSONResponse(
			status_code=503, content={'detail': 'Exchange rate service unavailable'}
		)
