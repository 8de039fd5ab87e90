from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.exceptions.repository import NotFoundError
from domain.models.user import User, UserPatch, UserRole
from infrastructure.persistence.models.user import UserDB
from infrastructure.persistence.repositories.errors import translate_errors

UNIQUE_FIELDS = ('username', 'email')


def _to_domain(row: UserDB) -> User:
	return User(
		id=row.id,
		username=row.username,
		email=row.email,
		hash_password=row.hash_password,
		first_name=row.first_name,
		last_name=row.last_name,
		is_active=row.is_active,
		role=UserRole(row.role),
		created_at=row.created_at,
		updated_at=row.updated_at,
	)


class UserRepository:
	def __init__(self, db_session: AsyncSession):
		self.db_session = db_session

	async def create(self, user: User) -> User:
		row = UserDB(
			username=user.username,
			email=user.email,
			first_name=user.first_name,
			last_name=user.last_name,
			hash_password=user.hash_password,
			is_active=user.is_active,
			role=user.role.value,
		)
		with translate_errors('user', UNIQUE_FIELDS):
			self.db_session.add(row)
			await self.db_session.flush()
			await self.db_session.refresh(row)
		return _to_domain(row)

	async def _get_row(self, user_id: int) -> UserDB:
		with translate_errors('user'):
			row = await self.db_session.get(UserDB, user_id)
		if row is None:
			raise NotFoundError('user', user_id)
		return row

	async def get_by_id(self, user_id: int) -> User:
		return _to_domain(await self._get_row(user_id))

	async def _get_by(self, column, value: str) -> User | None:
		with translate_errors('user'):
			result = await self.db_session.execute(select(UserDB).filter(column == value))
			row = result.scalars().first()
		return _to_domain(row) if row else None

	async def get_by_username(self, username: str) -> User | None:
		return await self._get_by(UserDB.username, username)

	async def get_by_email(self, email: str) -> User | None:
		return await self._get_by(UserDB.email, email)

	async def update(self, user_id: int, patch: UserPatch) -> User:
		row = await self._get_row(user_id)
		with translate_errors('user', UNIQUE_FIELDS):
			for column, value in patch.changes().items():
				setattr(row, column, value)
			await self.db_session.flush()
			await self.db_session.refresh(row)
		return _to_domain(row)

	async def delete(self, user_id: int) -> None:
		with translate_errors('user'):
			result = await self.db_session.execute(delete(UserDB).where(UserDB.id == user_id))
		if result.rowcount == 0:
			raise NotFoundError('user', user_id)
