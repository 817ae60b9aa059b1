"""
Shared fixtures: a throwaway SQLite credential store and an app wired to it.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.gate import AuthGate
from auth.jwt import TokenIssuer
from config.settings import Settings
from database.store import CredentialStore

TEST_SECRET = "test-signing-secret-0123456789abcdef"


class RecordingSleep:
    """Stands in for ``asyncio.sleep`` so timing-floor tests run instantly."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        auth_timing_floor_ms=100,
    )


@pytest_asyncio.fixture
async def store(settings):
    credential_store = CredentialStore.from_url(settings.database_url)
    await credential_store.create_schema()
    yield credential_store
    await credential_store.close()


@pytest.fixture
def tokens() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def gate(store, tokens) -> AuthGate:
    return AuthGate(store, tokens, bcrypt_rounds=4, timing_floor_ms=0)


@pytest.fixture
def client(settings):
    from main import create_app

    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()
