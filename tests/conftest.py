"""
Pytest configuration and shared fixtures.
"""

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from api.services import BookshopService
from catalog.repository import BookCatalog
from identity.credentials import CredentialStore
from identity.passwords import PasswordHasher
from identity.tokens import TokenService
from utilities.config import BookshopConfig

TEST_SECRET = "test-signing-secret"
TEST_TTL = 7200


class FakeClock:
    """Controllable time source for token tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def test_config():
    """Configuration with cheap hashing and no seeded user."""
    return BookshopConfig(
        jwt_secret=TEST_SECRET,
        token_ttl_seconds=TEST_TTL,
        bcrypt_rounds=4,
        seed_sample_user=False,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def hasher():
    """bcrypt at its minimum cost to keep the suite fast."""
    return PasswordHasher(rounds=4)


@pytest.fixture
def token_service(clock):
    return TokenService(secret=TEST_SECRET, ttl_seconds=TEST_TTL, clock=clock)


@pytest.fixture
def catalog():
    return BookCatalog.with_default_books()


@pytest.fixture
def service(catalog, hasher, token_service):
    """Service over the demo catalog with an empty credential store."""
    return BookshopService(
        catalog=catalog,
        credentials=CredentialStore(),
        hasher=hasher,
        tokens=token_service,
    )


@pytest.fixture
def app(service):
    return create_app(service=service)


@pytest.fixture
def client(app):
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_and_login(client):
    """Register a user over HTTP and return its Authorization header."""
    def _register_and_login(username: str = "alice", password: str = "password123") -> dict:
        response = client.post("/register", json={"username": username, "password": password})
        assert response.status_code == 201
        response = client.post("/login", json={"username": username, "password": password})
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['token']}"}
    return _register_and_login
