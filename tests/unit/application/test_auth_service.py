import dataclasses
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from application.services.auth_service import AuthService
from domain.exceptions.auth import NotAuthenticated, TokenExpired, TokenInvalid, TokenPurposeMismatch
from domain.exceptions.repository import AlreadyExists, NotFoundError, RepositoryError, ValidationError
from domain.models.user import NewUser, TokenPurpose, User, UserRole
from infrastructure.persistence.repositories.user import UserRepository
from infrastructure.security.tokens import TokenService


def stored_user(password_hasher, password='s3cret-pass', is_active=True, user_id=1):
    return User(
        id=user_id,
        username='alice',
        email='alice@example.com',
        hash_password=password_hasher.hash(password),
        is_active=is_active,
    )


@pytest.fixture
def repository():
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_username.return_value = None
    repo.get_by_email.return_value = None
    repo.create.side_effect = lambda user: dataclasses.replace(user, id=1)
    return repo


@pytest.fixture
def service(repository, password_hasher, token_service):
    return AuthService(
        repository=repository, password_hasher=password_hasher, token_service=token_service
    )


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_hashes_password_and_sets_defaults(self, service, repository, password_hasher):
        user = await service.register(NewUser(username='alice', email='alice@example.com'), 's3cret-pass')

        assert user.id == 1
        assert user.role is UserRole.SUBSCRIBER
        assert user.is_active is True
        assert user.hash_password != 's3cret-pass'
        assert password_hasher.verify('s3cret-pass', user.hash_password)
        assert 's3cret-pass' not in repr(user)

        persisted = repository.create.call_args[0][0]
        assert 's3cret-pass' not in repr(persisted)

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected_before_email_lookup(self, service, repository, password_hasher):
        repository.get_by_username.return_value = stored_user(password_hasher)

        with pytest.raises(AlreadyExists) as exc_info:
            await service.register(NewUser(username='alice', email='new@example.com'), 'pw-12345678')

        assert exc_info.value.field == 'username'
        repository.get_by_email.assert_not_called()
        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, service, repository, password_hasher):
        repository.get_by_email.return_value = stored_user(password_hasher)

        with pytest.raises(AlreadyExists) as exc_info:
            await service.register(NewUser(username='bob', email='alice@example.com'), 'pw-12345678')

        assert exc_info.value.field == 'email'
        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_persistence_failure_propagates_unchanged(self, service, repository):
        error = RepositoryError('disk full')
        repository.create.side_effect = error

        with pytest.raises(RepositoryError) as exc_info:
            await service.register(NewUser(username='bob', email='bob@example.com'), 'pw-12345678')

        assert exc_info.value is error


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_issues_access_and_refresh_tokens(self, service, repository, password_hasher, token_service):
        repository.get_by_email.return_value = stored_user(password_hasher)

        user, tokens = await service.login('alice@example.com', 's3cret-pass')

        assert user.id == 1
        assert tokens.access_expires_at < tokens.refresh_expires_at
        assert token_service.verify_and_decode(tokens.access_token, TokenPurpose.ACCESS).subject_id == 1
        assert token_service.verify_and_decode(tokens.refresh_token, TokenPurpose.REFRESH).subject_id == 1

    @pytest.mark.asyncio
    async def test_unknown_email_and_wrong_password_are_indistinguishable(self, service, repository, password_hasher):
        repository.get_by_email.return_value = None
        with pytest.raises(NotAuthenticated) as unknown:
            await service.login('nobody@example.com', 's3cret-pass')

        repository.get_by_email.return_value = stored_user(password_hasher)
        with pytest.raises(NotAuthenticated) as wrong:
            await service.login('alice@example.com', 'wrong-pass')

        assert type(unknown.value) is type(wrong.value)
        assert str(unknown.value) == str(wrong.value)

    @pytest.mark.asyncio
    async def test_inactive_user_cannot_login(self, service, repository, password_hasher):
        repository.get_by_email.return_value = stored_user(password_hasher, is_active=False)

        with pytest.raises(NotAuthenticated) as exc_info:
            await service.login('alice@example.com', 's3cret-pass')

        assert str(exc_info.value) == str(NotAuthenticated())


class TestRefreshAccessToken:
    @pytest.mark.asyncio
    async def test_refresh_echoes_refresh_token_and_expiry(self, service, repository, password_hasher, token_service):
        repository.get_by_email.return_value = stored_user(password_hasher)
        repository.get_by_id.return_value = stored_user(password_hasher)
        _, login_tokens = await service.login('alice@example.com', 's3cret-pass')

        user, tokens = await service.refresh_access_token(login_tokens.refresh_token)

        assert user.id == 1
        assert tokens.refresh_token == login_tokens.refresh_token
        assert tokens.refresh_expires_at == login_tokens.refresh_expires_at
        assert token_service.verify_and_decode(tokens.access_token, TokenPurpose.ACCESS).subject_id == 1
        repository.get_by_id.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_refresh_with_access_token_rejected(self, service, repository, token_service):
        access = token_service.issue(1, TokenPurpose.ACCESS)

        with pytest.raises(TokenPurposeMismatch):
            await service.refresh_access_token(access.token)

        repository.get_by_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_with_garbage_token_rejected(self, service):
        with pytest.raises(TokenInvalid):
            await service.refresh_access_token('not-a-token')

    @pytest.mark.asyncio
    async def test_refresh_with_expired_token_rejected(self, repository, password_hasher):
        issued_at = datetime.now(UTC) - timedelta(days=8)
        old_service = TokenService(
            secret='test-signing-secret-with-at-least-32-bytes', clock=lambda: issued_at
        )
        refresh = old_service.issue(1, TokenPurpose.REFRESH)
        service = AuthService(
            repository=repository,
            password_hasher=password_hasher,
            token_service=TokenService(secret='test-signing-secret-with-at-least-32-bytes'),
        )

        with pytest.raises(TokenExpired):
            await service.refresh_access_token(refresh.token)

    @pytest.mark.asyncio
    async def test_refresh_for_deleted_user_propagates_lookup_error(self, service, repository, token_service):
        repository.get_by_id.side_effect = NotFoundError('user', 1)
        refresh = token_service.issue(1, TokenPurpose.REFRESH)

        with pytest.raises(NotFoundError):
            await service.refresh_access_token(refresh.token)

    @pytest.mark.asyncio
    async def test_refresh_for_deactivated_user_rejected(self, service, repository, password_hasher, token_service):
        repository.get_by_id.return_value = stored_user(password_hasher, is_active=False)
        refresh = token_service.issue(1, TokenPurpose.REFRESH)

        with pytest.raises(NotAuthenticated):
            await service.refresh_access_token(refresh.token)


class TestLongPasswords:
    @pytest.mark.asyncio
    async def test_login_with_overlong_wrong_password_is_not_authenticated(self, service, repository, password_hasher):
        repository.get_by_email.return_value = stored_user(password_hasher)

        with pytest.raises(NotAuthenticated):
            await service.login('alice@example.com', 'x' * 100)

    @pytest.mark.asyncio
    async def test_register_with_overlong_password_rejected(self, service, repository):
        with pytest.raises(ValidationError):
            await service.register(NewUser(username='alice', email='alice@example.com'), 'é' * 72)

        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_email_still_runs_bcrypt(self, service, repository, password_hasher, monkeypatch):
        calls = []
        monkeypatch.setattr(password_hasher, 'verify_dummy', lambda password: calls.append(password))

        with pytest.raises(NotAuthenticated):
            await service.login('nobody@example.com', 's3cret-pass')

        assert calls == ['s3cret-pass']
