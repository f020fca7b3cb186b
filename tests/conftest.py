"""Shared fixtures: fake clock, token service, file store, database and HTTP client."""

import os
from typing import AsyncGenerator

os.environ.setdefault("CINEVAULT_ENVIRONMENT", "testing")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from cinevault.domain.entities import MediaLink, MediaType, MovieData, MovieMetadata
from cinevault.domain.services import AuthService, ContentAddressedFileStore, MovieService
from cinevault.infrastructure.auth import JWTService
from cinevault.infrastructure.persistence import models  # noqa: F401
from cinevault.infrastructure.persistence.database import Base
from cinevault.infrastructure.persistence.models import MovieModel, UserModel
from tests.support import ACCESS_SECRET, REFRESH_SECRET, FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def jwt_service(clock: FakeClock) -> JWTService:
    return JWTService(
        access_secret=ACCESS_SECRET,
        refresh_secret=REFRESH_SECRET,
        clock=clock,
    )


@pytest.fixture
def file_store(tmp_path) -> ContentAddressedFileStore:
    return ContentAddressedFileStore(tmp_path / "uploads", max_file_size=1024 * 1024)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session on a fresh database.

    Every test gets its own in-memory SQLite schema.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    jwt_service: JWTService,
    file_store: ContentAddressedFileStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden session, token service and file store."""
    from cinevault.infrastructure.api.app import app
    from cinevault.infrastructure.api.dependencies import get_file_store
    from cinevault.infrastructure.auth import get_jwt_service
    from cinevault.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_jwt_service] = lambda: jwt_service
    app.dependency_overrides[get_file_store] = lambda: file_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def user(db_session: AsyncSession, jwt_service: JWTService) -> UserModel:
    """Register the user alice with password secret123."""
    return await AuthService(db_session, jwt_service).register("alice", "secret123")


@pytest.fixture
def auth_headers(user: UserModel, jwt_service: JWTService) -> dict[str, str]:
    token = jwt_service.issue_pair(user.id).access_token
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def movie(db_session: AsyncSession) -> MovieModel:
    """Create a movie with one poster and metadata."""
    return await MovieService(db_session).create_movie(
        MovieData(
            title="Inception",
            director="Christopher Nolan",
            year=2010,
            plot="A thief steals secrets through dreams.",
            genre="Sci-Fi",
            rating=8.8,
            duration=148,
            media_files=[
                MediaLink(type=MediaType.POSTER, url="https://img.example.com/inception.jpg", is_main=True),
                MediaLink(type=MediaType.TRAILER, url="https://video.example.com/inception.mp4"),
            ],
            metadata=MovieMetadata(language="en", country="USA", cast="Leonardo DiCaprio"),
        )
    )
