from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from api.dependencies import get_current_user, get_provider_service
from api.schemas import ProviderCreateRequest, ProviderResponse, ProviderUpdateRequest
from application.services import ProviderService
from domain.models.provider import NewProvider, ProviderCredential, ProviderPatch
from domain.models.user import User

router = APIRouter(prefix='/api/providers', tags=['providers'])

ProviderId = Annotated[int, Path(gt=0)]


def to_provider_response(provider: ProviderCredential) -> ProviderResponse:
	return ProviderResponse(
		id=provider.id,
		name=provider.name,
		base_url=provider.base_url,
		is_active=provider.is_active,
		created_at=provider.created_at,
		updated_at=provider.updated_at,
	)


@router.post(
	'',
	response_model=ProviderResponse,
	status_code=status.HTTP_201_CREATED,
	summary='Register a rate provider',
)
async def create_provider(
	request: ProviderCreateRequest,
	service: Annotated[ProviderService, Depends(get_provider_service)],
	_: Annotated[User, Depends(get_current_user)],
) -> ProviderResponse:
	provider = await service.register(
		NewProvider(
			name=request.name,
			base_url=str(request.base_url),
			api_key=request.api_key,
			is_active=request.is_active,
		)
	)
	return to_provider_response(provider)


@router.get('', response_model=list[ProviderResponse], summary='List rate providers')
async def list_providers(
	service: Annotated[ProviderService, Depends(get_provider_service)],
	_: Annotated[User, Depends(get_current_user)],
) -> list[ProviderResponse]:
	return [to_provider_response(p) for p in await service.list_providers()]


@router.get('/{provider_id}', response_model=ProviderResponse, summary='Get a rate provider')
async def get_provider(
	provider_id: ProviderId,
	service: Annotated[ProviderService, Depends(get_provider_service)],
	_: Annotated[User, Depends(get_current_user)],
) -> ProviderResponse:
	return to_provider_response(await service.get_provider(provider_id))


@router.patch('/{provider_id}', response_model=ProviderResponse, summary='Update a rate provider')
async def update_provider(
	provider_id: ProviderId,
	request: ProviderUpdateRequest,
	service: Annotated[ProviderService, Depends(get_provider_service)],
	_: Annotated[User, Depends(get_current_user)],
) -> ProviderResponse:
	changes = request.model_dump(exclude_unset=True, exclude_none=True)
	if 'base_url' in changes:
		changes['base_url'] = str(request.base_url)
	provider = await service.update(provider_id, ProviderPatch.from_mapping(changes))
	return to_provider_response(provider)


@router.delete(
	'/{provider_id}', status_code=status.HTTP_204_NO_CONTENT, summary='Delete a rate provider'
)
async def delete_provider(
	provider_id: ProviderId,
	service: Annotated[ProviderService, Depends(get_provider_service)],
	_: Annotated[User, Depends(get_current_user)],
) -> None:
	await service.delete(provider_id)
