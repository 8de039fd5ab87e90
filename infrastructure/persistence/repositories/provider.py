from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.exceptions.repository import NotFoundError
from domain.models.provider import ProviderCredential, ProviderPatch
from infrastructure.persistence.models.provider import ProviderCredentialDB
from infrastructure.persistence.repositories.errors import translate_errors

# Patch fields whose column name differs from the field name.
PATCH_COLUMNS = {'api_key': 'encrypted_api_key'}


def _to_domain(row: ProviderCredentialDB) -> ProviderCredential:
	return ProviderCredential(
		id=row.id,
		name=row.name,
		base_url=row.base_url,
		encrypted_api_key=row.encrypted_api_key,
		is_active=row.is_active,
		created_at=row.created_at,
		updated_at=row.updated_at,
	)


class ProviderCredentialRepository:
	"""Stores provider credentials. API keys arrive here already encrypted."""

	def __init__(self, db_session: AsyncSession):
		self.db_session = db_session

	async def create(self, provider: ProviderCredential) -> ProviderCredential:
		row = ProviderCredentialDB(
			name=provider.name,
			base_url=provider.base_url,
			encrypted_api_key=provider.encrypted_api_key,
			is_active=provider.is_active,
		)
		with translate_errors('provider', ('name',)):
			self.db_session.add(row)
			await self.db_session.flush()
			await self.db_session.refresh(row)
		return _to_domain(row)

	async def _get_row(self, provider_id: int) -> ProviderCredentialDB:
		with translate_errors('provider'):
			row = await self.db_session.get(ProviderCredentialDB, provider_id)
		if row is None:
			raise NotFoundError('provider', provider_id)
		return row

	async def get_by_id(self, provider_id: int) -> ProviderCredential:
		return _to_domain(await self._get_row(provider_id))

	async def get_by_name(self, name: str) -> ProviderCredential | None:
		with translate_errors('provider'):
			result = await self.db_session.execute(
				select(ProviderCredentialDB).filter(ProviderCredentialDB.name == name)
			)
			row = result.scalars().first()
		return _to_domain(row) if row else None

	async def list_all(self) -> list[ProviderCredential]:
		with translate_errors('provider'):
			result = await self.db_session.execute(
				select(ProviderCredentialDB).order_by(ProviderCredentialDB.id)
			)
			rows = result.scalars().all()
		return [_to_domain(r) for r in rows]

	async def list_active(self) -> list[ProviderCredential]:
		with translate_errors('provider'):
			result = await self.db_session.execute(
				select(ProviderCredentialDB)
				.filter(ProviderCredentialDB.is_active.is_(True))
				.order_by(ProviderCredentialDB.id)
			)
			rows = result.scalars().all()
		return [_to_domain(r) for r in rows]

	async def update(self, provider_id: int, patch: ProviderPatch) -> ProviderCredential:
		row = await self._get_row(provider_id)
		with translate_errors('provider', ('name',)):
			for field, value in patch.changes().items():
				setattr(row, PATCH_COLUMNS.get(field, field), value)
			await self.db_session.flush()
			await self.db_session.refresh(row)
		return _to_domain(row)

	async def delete(self, provider_id: int) -> None:
		with translate_errors('provider'):
			result = await self.db_session.execute(
				delete(ProviderCredentialDB).where(ProviderCredentialDB.id == provider_id)
			)
		if result.rowcount == 0:
			raise NotFoundError('provider', provider_id)
