"""
Shared fixtures: an isolated application per test on a temporary SQLite file
"""
import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app
from helpers import register


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        REDIS_URL=None,
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_ENABLED=False,
        ADMIN_PASSCODE="let-me-in",
        JWT_SECRET="test-secret",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def admin_headers(client):
    return register(client, "admin@example.com", role="admin", first_name="Ada", last_name="Admin")[1]


@pytest.fixture
def user(client):
    """(user_id, headers) for a regular account"""
    return register(client, "user@example.com", first_name="Uma", last_name="User")
