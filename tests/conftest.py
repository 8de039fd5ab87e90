"""
Shared fixtures: deterministic keys, fast bcrypt, and a throwaway SQLite database.
"""

from datetime import timedelta

import pytest
import pytest_asyncio

from infrastructure.persistence.database import Database
from infrastructure.security.passwords import PasswordHasher
from infrastructure.security.tokens import TokenService
from infrastructure.security.vault import CredentialVault

TEST_MASTER_KEY = b'0123456789abcdef0123456789abcdef'
TEST_JWT_SECRET = 'test-signing-secret-with-at-least-32-bytes'


@pytest.fixture
def vault():
    return CredentialVault(TEST_MASTER_KEY)


@pytest.fixture
def password_hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service():
    return TokenService(
        secret=TEST_JWT_SECRET,
        access_ttl=timedelta(minutes=15),
        refresh_ttl=timedelta(days=7),
    )


@pytest_asyncio.fixture
async def database(tmp_path):
    db = Database(f'sqlite+aiosqlite:///{tmp_path / "test.db"}')
    await db.create_tables()
    yield db
    await db.close()
