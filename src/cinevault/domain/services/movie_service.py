"""Movie catalog service.

Provides create, read, update and soft-delete operations over movies along
with their media links and metadata.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cinevault.core.logging import get_logger
from cinevault.domain.entities import MediaType, MovieData
from cinevault.infrastructure.persistence.models import (
    MovieMediaModel,
    MovieMetadataModel,
    MovieModel,
)
from cinevault.infrastructure.persistence.repositories import MovieRepository

logger = get_logger(__name__)


class MovieNotFoundError(Exception):
    """Raised when a movie does not exist or has been deleted."""

    def __init__(self, movie_id: int) -> None:
        self.movie_id = movie_id
        super().__init__(f"Movie {movie_id} not found")


class MovieService:
    """Service for movie catalog business logic."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the movie service.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session
        self.movie_repo = MovieRepository(session)

    async def list_movies(self) -> list[MovieModel]:
        """List all live movies with media and metadata loaded."""
        return await self.movie_repo.list_all()

    async def get_movie(self, movie_id: int) -> MovieModel | None:
        """Get a live movie, or None if it is missing or deleted."""
        return await self.movie_repo.get_by_id(movie_id)

    async def create_movie(self, data: MovieData) -> MovieModel:
        """Create a movie with its media links and metadata in one transaction.

        Args:
            data: Movie fields. Title, director and year are required.

        Returns:
            The created movie with relationships loaded.

        Raises:
            ValueError: If a required field is missing.
        """
        if not data.title or not data.director or not data.year:
            raise ValueError("Title, director and year are required")

        movie = MovieModel(
            title=data.title,
            director=data.director,
            year=data.year,
            plot=data.plot,
            genre=data.genre,
            rating=data.rating,
            duration=data.duration,
            media_files=[
                MovieMediaModel(type=link.type.value, url=link.url, is_main=link.is_main)
                for link in data.media_files
            ],
            movie_metadata=MovieMetadataModel(
                language=data.metadata.language,
                country=data.metadata.country,
                awards=data.metadata.awards,
                cast=data.metadata.cast,
            ),
        )
        await self.movie_repo.create(movie)
        await self.session.commit()

        created = await self.movie_repo.get_by_id(movie.id)
        logger.info("Movie created", movie_id=movie.id, title=movie.title)
        return created

    async def update_movie(self, movie_id: int, data: MovieData) -> MovieModel:
        """Apply a partial update to a movie.

        Falsy scalar fields are ignored. A non-empty ``media_files`` replaces
        every existing link; non-empty metadata creates or overwrites the
        metadata row.

        Raises:
            MovieNotFoundError: If the movie does not exist.
        """
        movie = await self.movie_repo.get_by_id(movie_id)
        if movie is None:
            raise MovieNotFoundError(movie_id)

        for name, value in data.changed_fields().items():
            setattr(movie, name, value)

        if data.media_files:
            await self.movie_repo.replace_media(
                movie,
                [
                    MovieMediaModel(type=link.type.value, url=link.url, is_main=link.is_main)
                    for link in data.media_files
                ],
            )

        if not data.metadata.is_empty:
            metadata = movie.movie_metadata
            if metadata is None:
                metadata = MovieMetadataModel()
                movie.movie_metadata = metadata
            metadata.language = data.metadata.language
            metadata.country = data.metadata.country
            metadata.awards = data.metadata.awards
            metadata.cast = data.metadata.cast

        await self.session.commit()

        updated = await self.movie_repo.get_by_id(movie_id)
        logger.info("Movie updated", movie_id=movie_id)
        return updated

    async def delete_movie(self, movie_id: int) -> None:
        """Soft-delete a movie.

        Raises:
            MovieNotFoundError: If the movie does not exist.
        """
        movie = await self.movie_repo.get_by_id(movie_id)
        if movie is None:
            raise MovieNotFoundError(movie_id)

        await self.movie_repo.soft_delete(movie)
        await self.session.commit()
        logger.info("Movie deleted", movie_id=movie_id)

    async def list_media(
        self, movie_id: int, media_type: MediaType | None = None
    ) -> list[MovieMediaModel]:
        """List a movie's media links, optionally of one type.

        Raises:
            MovieNotFoundError: If the movie does not exist.
        """
        if not await self.movie_repo.exists(movie_id):
            raise MovieNotFoundError(movie_id)
        return await self.movie_repo.list_media(
            movie_id, media_type.value if media_type is not None else None
        )
