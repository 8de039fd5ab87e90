import logging

from domain.exceptions.auth import NotAuthenticated
from domain.exceptions.repository import AlreadyExists
from domain.models.user import NewUser, TokenPair, TokenPurpose, User, UserRole
from infrastructure.persistence.repositories.user import UserRepository
from infrastructure.security.passwords import PasswordHasher
from infrastructure.security.tokens import TokenService

logger = logging.getLogger(__name__)


class AuthService:
	def __init__(
		self,
		repository: UserRepository,
		password_hasher: PasswordHasher,
		token_service: TokenService,
	):
		self.repository = repository
		self.password_hasher = password_hasher
		self.token_service = token_service

	async def register(self, new_user: NewUser, password: str) -> User:
		logger.info(f'Registering new user {new_user.username}')

		if await self.repository.get_by_username(new_user.username) is not None:
			raise AlreadyExists('username')
		if await self.repository.get_by_email(new_user.email) is not None:
			raise AlreadyExists('email')

		user = User(
			id=None,
			username=new_user.username,
			email=new_user.email,
			first_name=new_user.first_name,
			last_name=new_user.last_name,
			hash_password=self.password_hasher.hash(password),
			is_active=True,
			role=UserRole.SUBSCRIBER,
		)
		created = await self.repository.create(user)
		logger.info(f'Registered user {created.id}')
		return created

	async def login(self, email: str, password: str) -> tuple[User, TokenPair]:
		user = await self.repository.get_by_email(email)
		if user is None:
			self.password_hasher.verify_dummy(password)
			logger.warning('Login failed: unknown email')
			raise NotAuthenticated()

		if not self.password_hasher.verify(password, user.hash_password):
			logger.warning(f'Login failed: invalid password for user {user.id}')
			raise NotAuthenticated()

		if not user.is_active:
			logger.warning(f'Login failed: user {user.id} is inactive')
			raise NotAuthenticated()

		access = self.token_service.issue(user.id, TokenPurpose.ACCESS)
		refresh = self.token_service.issue(user.id, TokenPurpose.REFRESH)

		logger.info(f'User {user.id} logged in')
		return user, TokenPair(
			access_token=access.token,
			refresh_token=refresh.token,
			access_expires_at=access.expires_at,
			refresh_expires_at=refresh.expires_at,
		)

	async def refresh_access_token(self, refresh_token: str) -> tuple[User, TokenPair]:
		claims = self.token_service.verify_and_decode(refresh_token, TokenPurpose.REFRESH)
		user = await self.repository.get_by_id(claims.subject_id)
		if not user.is_active:
			logger.warning(f'Refresh refused: user {user.id} is inactive')
			raise NotAuthenticated('Inactive user')

		access = self.token_service.issue(user.id, TokenPurpose.ACCESS)

		logger.info(f'Access token refreshed for user {user.id}')
		return user, TokenPair(
			access_token=access.token,
			refresh_token=refresh_token,
			access_expires_at=access.expires_at,
			refresh_expires_at=claims.expires_at,
		)
