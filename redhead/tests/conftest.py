import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from redhead.main import app
from redhead.database.core import Base
from redhead.exceptions import ProviderConfigurationError
from redhead.generation.provider import ImageProvider, get_image_provider
from redhead.rate_limiting import limiter
from redhead.storage.database import SqlStorage
from redhead.storage.dependency import get_storage
from redhead.storage.memory import MemStorage


class FakeImageProvider(ImageProvider):
    """Records calls and returns canned URLs instead of reaching a real provider."""

    name = "fake"

    def __init__(self, image_urls=None, error=None, configured=True, on_generate=None):
        self.image_urls = (
            ["https://images.example.com/fox.png"] if image_urls is None else image_urls
        )
        self.error = error
        self.configured = configured
        self.on_generate = on_generate
        self.calls = []

    def ensure_configured(self):
        if not self.configured:
            raise ProviderConfigurationError("Fake provider not configured")

    async def generate(self, prompt, size):
        self.calls.append((prompt, size))
        if self.on_generate:
            self.on_generate()
        if self.error:
            raise self.error
        return list(self.image_urls)


# In-memory SQLite shared by every thread of the TestClient
@pytest.fixture
def sql_storage():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    yield SqlStorage(session)

    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(params=["memory", "database"])
def storage(request):
    """Runs the test once per storage backend."""
    if request.param == "memory":
        return MemStorage()
    return request.getfixturevalue("sql_storage")


@pytest.fixture
def image_provider():
    return FakeImageProvider()


@pytest.fixture
def client(storage, image_provider):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_image_provider] = lambda: image_provider
    limiter.reset()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def register(client, username="alice", email="a@x.com", password=None):
    body = {"username": username, "email": email}
    if password:
        body["password"] = password
    response = client.post("/api/auth/register", json=body)
    assert response.status_code == 200, response.text
    return response.json()["user"]


@pytest.fixture
def alice(client):
    return register(client)
