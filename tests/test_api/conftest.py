from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_current_user
from api.main import app
from domain.models.user import User, UserRole


@pytest.fixture
def current_user():
    return User(
        id=1,
        username='alice',
        email='alice@example.com',
        hash_password='$2b$04$hash',
        role=UserRole.SUBSCRIBER,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def client():
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def authenticated(current_user):
    app.dependency_overrides[get_current_user] = lambda: current_user
    return current_user

