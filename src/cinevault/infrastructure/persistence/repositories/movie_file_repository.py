"""Repository for uploaded movie file records."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cinevault.infrastructure.persistence.models import MovieFileModel


class MovieFileRepository:
    """Repository for movie file metadata records."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, movie_file: MovieFileModel) -> MovieFileModel:
        """Create a new file record."""
        self.session.add(movie_file)
        await self.session.flush()
        return movie_file

    async def get_for_movie(self, movie_id: int, file_id: int) -> MovieFileModel | None:
        """Get a file record by ID, scoped to its movie.

        Args:
            movie_id: Owning movie ID.
            file_id: File record ID.

        Returns:
            File record if it exists and belongs to the movie, None otherwise.
        """
        result = await self.session.execute(
            select(MovieFileModel).where(
                MovieFileModel.id == file_id,
                MovieFileModel.movie_id == movie_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_movie(self, movie_id: int) -> list[MovieFileModel]:
        """List file records of a movie, newest first."""
        result = await self.session.execute(
            select(MovieFileModel)
            .where(MovieFileModel.movie_id == movie_id)
            .order_by(MovieFileModel.id.desc())
        )
        return list(result.scalars().all())

    async def count_by_path(self, file_path: str) -> int:
        """Count records referencing a storage key."""
        result = await self.session.execute(
            select(func.count()).select_from(MovieFileModel).where(
                MovieFileModel.file_path == file_path
            )
        )
        return result.scalar_one()

    async def delete(self, movie_file: MovieFileModel) -> None:
        """Delete a file record."""
        await self.session.delete(movie_file)
        await self.session.flush()
