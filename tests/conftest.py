import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from task_tracker.database import Base, get_db
from task_tracker.dependencies import get_token_service
from task_tracker.main import app
from task_tracker.models import tasks, user  # noqa: F401
from task_tracker.services.tokens import TokenService


@pytest.fixture
async def engine():
    # One shared in-memory SQLite connection per test
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def token_service():
    return TokenService(access_secret="test-access-secret", refresh_secret="test-refresh-secret")


@pytest.fixture
def override_dependencies(session_factory, token_service):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_service] = lambda: token_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(override_dependencies):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def lenient_client(override_dependencies):
    """Client that turns unhandled server errors into 500 responses instead of raising."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user through the API and return its id, tokens and auth headers."""

    async def _register(name="Ada Lovelace", email="ada@example.com", password="analytical-engine"):
        response = await client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {
            "id": data["user"]["id"],
            "email": email,
            "password": password,
            "access_token": data["accessToken"],
            "refresh_token": data["refreshToken"],
            "headers": auth_headers(data["accessToken"]),
        }

    return _register


@pytest.fixture
async def alice(register):
    return await register("Alice", "alice@example.com", "alice-password")


@pytest.fixture
async def bob(register):
    return await register("Bob", "bob@example.com", "bob-password")
