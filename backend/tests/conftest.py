from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.api.deps import get_client_cache, get_resolver
from app.client.persistence import LocalPersistence
from app.client.storage import MemoryStorage, SQLStorage
from app.main import app
from app.services.credentials import CredentialResolver
from app.services.providers import ProviderClientCache

NOW_MS = 1_760_000_000_000
DAY_MS = 24 * 60 * 60 * 1000


def make_stream(*deltas: str):
    """Async iterator shaped like an OpenAI streamed chat completion."""

    async def stream():
        for delta in deltas:
            chunk = MagicMock()
            chunk.choices = [MagicMock()]
            chunk.choices[0].delta.content = delta
            yield chunk

    return stream()


@pytest.fixture
def env() -> dict[str, str]:
    return {
        "OPENAI_API_KEY": "sk-test",
        "VOLCENGINE_API_KEY": "volc-test",
        "VOLCENGINE_MODEL_DOUBAO_PRO": "ep-pro",
        "VOLCENGINE_MODEL_DOUBAO_LITE": "ep-lite",
    }


@pytest.fixture
def provider_client() -> MagicMock:
    mock_client = MagicMock()
    mock_client.chat.completions.create = AsyncMock(
        side_effect=lambda **kwargs: make_stream("Hello", ", ", "world")
    )
    return mock_client


@pytest.fixture
def client_cache(provider_client: MagicMock) -> ProviderClientCache:
    return ProviderClientCache(factory=lambda credentials: provider_client)


@pytest.fixture(name="client")
def client_fixture(env: dict[str, str], client_cache: ProviderClientCache):
    app.dependency_overrides[get_resolver] = lambda: CredentialResolver([env])
    app.dependency_overrides[get_client_cache] = lambda: client_cache
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def persistence(storage: MemoryStorage) -> LocalPersistence:
    return LocalPersistence(storage, clock=lambda: NOW_MS)


@pytest.fixture
def sql_storage() -> SQLStorage:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return SQLStorage(engine)
