import dataclasses
import logging

from domain.exceptions.repository import AlreadyExists, ValidationError
from domain.models.provider import NewProvider, ProviderCredential, ProviderPatch
from infrastructure.persistence.repositories.provider import ProviderCredentialRepository
from infrastructure.security.vault import CredentialVault

logger = logging.getLogger(__name__)


class ProviderService:
	def __init__(self, repository: ProviderCredentialRepository, vault: CredentialVault):
		self.repository = repository
		self.vault = vault

	async def register(self, new_provider: NewProvider) -> ProviderCredential:
		if not new_provider.api_key:
			raise ValidationError('api_key must not be empty')
		if await self.repository.get_by_name(new_provider.name) is not None:
			raise AlreadyExists('name')

		provider = ProviderCredential(
			id=None,
			name=new_provider.name,
			base_url=new_provider.base_url,
			encrypted_api_key=self.vault.encrypt(new_provider.api_key),
			is_active=new_provider.is_active,
		)
		created = await self.repository.create(provider)
		logger.info(f'Registered provider {created.name} ({created.id})')
		return created

	async def list_providers(self) -> list[ProviderCredential]:
		return await self.repository.list_all()

	async def get_provider(self, provider_id: int) -> ProviderCredential:
		return await self.repository.get_by_id(provider_id)

	async def update(self, provider_id: int, patch: ProviderPatch) -> ProviderCredential:
		if patch.is_empty():
			raise ValidationError('No fields to update')
		if patch.api_key is not None:
			if not patch.api_key:
				raise ValidationError('api_key must not be empty')
			patch = dataclasses.replace(patch, api_key=self.vault.encrypt(patch.api_key))

		updated = await self.repository.update(provider_id, patch)
		logger.info(f'Updated provider {provider_id}: {sorted(patch.changes())}')
		return updated

	async def delete(self, provider_id: int) -> None:
		await self.repository.delete(provider_id)
		logger.info(f'Deleted provider {provider_id}')
