from unittest.mock import AsyncMock

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from usuarios_api.coordinator import UserWriteCoordinator
from usuarios_api.database import create_session_factory
from usuarios_api.deps import get_coordinator
from usuarios_api.main import create_app
from usuarios_api.media import MediaUploader
from usuarios_api.models import Base
from usuarios_api.store import UserStore

UPLOADED_URL = "https://host/usuarios/abc.jpg"


@pytest.fixture
def uploaded_url() -> str:
    return UPLOADED_URL


@pytest.fixture
async def engine():
    """In-memory SQLite shared by every session through a single connection."""
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
    return create_session_factory(engine)


@pytest.fixture
def store(session_factory) -> UserStore:
    return UserStore(session_factory, timeout=5.0)


@pytest.fixture
def uploader(uploaded_url: str) -> AsyncMock:
    uploader = AsyncMock(spec=MediaUploader)
    uploader.upload.return_value = uploaded_url
    return uploader


@pytest.fixture
def coordinator(store: UserStore, uploader: AsyncMock) -> UserWriteCoordinator:
    return UserWriteCoordinator(store, uploader)


@pytest.fixture
def app(coordinator: UserWriteCoordinator, engine):
    app = create_app()
    app.state.engine = engine
    app.dependency_overrides[get_coordinator] = lambda: coordinator
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
