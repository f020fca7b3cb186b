"""Movie repository for database operations."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cinevault.infrastructure.persistence.models import (
    MovieMediaModel,
    MovieModel,
)


class MovieRepository:
    """Repository for movies, their media links and metadata.

    Soft-deleted movies are invisible to every read method.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, movie: MovieModel) -> MovieModel:
        """Create a new movie (with any attached media and metadata)."""
        self.session.add(movie)
        await self.session.flush()
        return movie

    async def get_by_id(self, movie_id: int) -> MovieModel | None:
        """Get a live movie by ID with media and metadata loaded.

        Args:
            movie_id: Movie ID.

        Returns:
            Movie model if found and not soft-deleted, None otherwise.
        """
        result = await self.session.execute(
            select(MovieModel)
            .where(MovieModel.id == movie_id, MovieModel.deleted_at.is_(None))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def exists(self, movie_id: int) -> bool:
        """Check whether a live movie exists."""
        result = await self.session.execute(
            select(MovieModel.id).where(
                MovieModel.id == movie_id, MovieModel.deleted_at.is_(None)
            )
        )
        return result.scalar_one_or_none() is not None

    async def list_all(self) -> list[MovieModel]:
        """List all live movies ordered by ID."""
        result = await self.session.execute(
            select(MovieModel)
            .where(MovieModel.deleted_at.is_(None))
            .order_by(MovieModel.id)
        )
        return list(result.scalars().all())

    async def soft_delete(self, movie: MovieModel) -> None:
        """Mark a movie as deleted."""
        movie.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()

    async def replace_media(self, movie: MovieModel, media: list[MovieMediaModel]) -> None:
        """Replace all media links of a movie; orphaned links are deleted."""
        movie.media_files = media
        await self.session.flush()

    async def list_media(self, movie_id: int, media_type: str | None = None) -> list[MovieMediaModel]:
        """List media links of a movie, optionally filtered by type."""
        query = select(MovieMediaModel).where(MovieMediaModel.movie_id == movie_id)
        if media_type is not None:
            query = query.where(MovieMediaModel.type == media_type)
        result = await self.session.execute(query.order_by(MovieMediaModel.id))
        return list(result.scalars().all())
