from typing import Annotated

from fastapi import APIRouter, Depends, status

from api.dependencies import get_auth_service
from api.schemas import (
	AccessTokenRequest,
	LoginRequest,
	LoginResponse,
	RegisterRequest,
	SecurityData,
	UserResponse,
)
from application.services import AuthService
from domain.models.user import NewUser, TokenPair, User

router = APIRouter(prefix='/api/auth', tags=['auth'])


def to_user_response(user: User) -> UserResponse:
	return UserResponse(
		id=user.id,
		username=user.username,
		email=user.email,
		first_name=user.first_name,
		last_name=user.last_name,
		is_active=user.is_active,
		role=user.role.value,
	)


def to_login_response(user: User, tokens: TokenPair) -> LoginResponse:
	return LoginResponse(
		data=to_user_response(user),
		security=SecurityData(
			access_token=tokens.access_token,
			refresh_token=tokens.refresh_token,
			access_expires_at=tokens.access_expires_at,
			refresh_expires_at=tokens.refresh_expires_at,
		),
	)


@router.post(
	'/register',
	response_model=UserResponse,
	status_code=status.HTTP_201_CREATED,
	summary='Register a new user',
)
async def register(
	request: RegisterRequest,
	service: Annotated[AuthService, Depends(get_auth_service)],
) -> UserResponse:
	user = await service.register(
		NewUser(
			username=request.username,
			email=request.email,
			first_name=request.first_name,
			last_name=request.last_name,
		),
		request.password,
	)
	return to_user_response(user)


@router.post(
	'/login',
	response_model=LoginResponse,
	status_code=status.HTTP_200_OK,
	summary='Exchange credentials for an access and refresh token',
)
async def login(
	request: LoginRequest,
	service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
	user, tokens = await service.login(request.email, request.password)
	return to_login_response(user, tokens)


@router.post(
	'/access-token',
	response_model=LoginResponse,
	status_code=status.HTTP_200_OK,
	summary='Issue a new access token from a refresh token',
)
async def access_token(
	request: AccessTokenRequest,
	service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
	user, tokens = await service.refresh_access_token(request.refresh_token)
	return to_login_response(user, tokens)
