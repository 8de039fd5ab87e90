import dataclasses
from unittest.mock import AsyncMock

import pytest

from application.services.provider_service import ProviderService
from domain.exceptions.repository import AlreadyExists, ValidationError
from domain.models.provider import NewProvider, ProviderCredential, ProviderPatch
from infrastructure.persistence.repositories.provider import ProviderCredentialRepository


@pytest.fixture
def repository():
    repo = AsyncMock(spec=ProviderCredentialRepository)
    repo.get_by_name.return_value = None
    repo.create.side_effect = lambda provider: dataclasses.replace(provider, id=1)
    return repo


@pytest.fixture
def service(repository, vault):
    return ProviderService(repository=repository, vault=vault)


@pytest.mark.asyncio
async def test_register_stores_only_ciphertext(service, repository, vault):
    created = await service.register(
        NewProvider(name='provA', base_url='https://a.example.com/latest', api_key='plain-key')
    )

    persisted = repository.create.call_args[0][0]
    assert persisted.encrypted_api_key != 'plain-key'
    assert 'plain-key' not in repr(persisted)
    assert vault.decrypt(persisted.encrypted_api_key) == 'plain-key'
    assert created.id == 1


@pytest.mark.asyncio
async def test_register_duplicate_name_rejected(service, repository):
    repository.get_by_name.return_value = ProviderCredential(
        id=1, name='provA', base_url='https://a.example.com', encrypted_api_key='x'
    )

    with pytest.raises(AlreadyExists):
        await service.register(NewProvider(name='provA', base_url='https://a.example.com', api_key='k'))

    repository.create.assert_not_called()


@pytest.mark.asyncio
async def test_register_empty_key_rejected(service):
    with pytest.raises(ValidationError):
        await service.register(NewProvider(name='provA', base_url='https://a.example.com', api_key=''))


@pytest.mark.asyncio
async def test_update_reencrypts_new_key(service, repository, vault):
    await service.update(1, ProviderPatch(api_key='rotated-key', is_active=False))

    provider_id, patch = repository.update.call_args[0]
    assert provider_id == 1
    assert patch.api_key != 'rotated-key'
    assert vault.decrypt(patch.api_key) == 'rotated-key'
    assert patch.is_active is False


@pytest.mark.asyncio
async def test_update_without_key_passes_patch_through(service, repository):
    patch = ProviderPatch(base_url='https://new.example.com')

    await service.update(1, patch)

    repository.update.assert_awaited_once_with(1, patch)


@pytest.mark.asyncio
async def test_empty_update_rejected(service, repository):
    with pytest.raises(ValidationError):
        await service.update(1, ProviderPatch())

    repository.update.assert_not_called()


@pytest.mark.asyncio
async def test_delete_delegates(service, repository):
    await service.delete(3)

    repository.delete.assert_awaited_once_with(3)
