"""Movie file upload flow.

Connects the content-addressed file store to the ``movie_files`` table.
This service is the only place that creates or deletes stored bytes, and it
always does so together with the matching metadata record.
"""

import asyncio
import weakref
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cinevault.core.logging import get_logger
from cinevault.domain.services.file_store import (
    ContentAddressedFileStore,
    StorageIOError,
    StoredFileNotFoundError,
)
from cinevault.domain.services.movie_service import MovieNotFoundError
from cinevault.infrastructure.persistence.models import MovieFileModel
from cinevault.infrastructure.persistence.repositories import (
    MovieFileRepository,
    MovieRepository,
)

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
MAX_FILE_NAME_LENGTH = 255

# Every storage key of a movie lives under its own directory, and a key is
# only known once the upload has been hashed. Uploads and deletes for one
# movie therefore take the same lock, so a delete that found a key
# unreferenced cannot unlink bytes an upload has just written there.
_movie_locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()


def movie_storage_lock(movie_id: int) -> asyncio.Lock:
    """Return the lock guarding the stored bytes of one movie.

    Locks are shared by every ``MovieFileService`` in the process and are
    dropped once nobody holds them.
    """
    lock = _movie_locks.get(movie_id)
    if lock is None:
        lock = asyncio.Lock()
        _movie_locks[movie_id] = lock
    return lock


class MovieFileNotFoundError(Exception):
    """Raised when a file record, or the bytes behind it, cannot be found."""

    def __init__(self, movie_id: int, file_id: int) -> None:
        self.movie_id = movie_id
        self.file_id = file_id
        super().__init__(f"File {file_id} not found for movie {movie_id}")


def display_name(filename: str | None) -> str:
    """Reduce an uploader-supplied filename to a bare display name."""
    if not filename:
        return "upload"
    name = PurePosixPath(filename.replace("\\", "/")).name.replace("\x00", "")
    if name in ("", ".", ".."):
        return "upload"
    return name[:MAX_FILE_NAME_LENGTH]


def normalize_content_type(content_type: str | None) -> str:
    """Reduce a Content-Type header to its lowercased media type.

    Args:
        content_type: Header value as sent by the client, possibly with
            parameters such as ``; charset=utf-8``.

    Returns:
        The bare media type, or ``application/octet-stream`` when the
        header is missing or empty.
    """
    if not content_type:
        return DEFAULT_CONTENT_TYPE
    return content_type.split(";", 1)[0].strip().lower() or DEFAULT_CONTENT_TYPE


class MovieFileService:
    """Service for uploading, reading and deleting movie attachments."""

    def __init__(
        self,
        session: AsyncSession,
        file_store: ContentAddressedFileStore,
        upload_timeout: float | None = None,
        allowed_mime_types: list[str] | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            file_store: Store that holds the file bytes.
            upload_timeout: Seconds allowed for writing one upload, or None.
            allowed_mime_types: Accepted content types, or None to accept any.
        """
        self.session = session
        self.file_store = file_store
        self.upload_timeout = upload_timeout
        self.allowed_mime_types = allowed_mime_types
        self.movie_repo = MovieRepository(session)
        self.file_repo = MovieFileRepository(session)

    def validate_content_type(self, content_type: str) -> None:
        if self.allowed_mime_types is not None and content_type not in self.allowed_mime_types:
            raise ValueError(
                f"File type '{content_type}' is not allowed. "
                f"Allowed types: {', '.join(self.allowed_mime_types)}"
            )

    async def _require_movie(self, movie_id: int) -> None:
        if not await self.movie_repo.exists(movie_id):
            raise MovieNotFoundError(movie_id)

    async def upload(
        self,
        movie_id: int,
        content: BinaryIO,
        filename: str | None,
        content_type: str | None,
    ) -> MovieFileModel:
        """Store an uploaded file and record it against a movie.

        Uploading identical bytes twice reuses the same storage key but
        creates a second record.

        Raises:
            MovieNotFoundError: If the movie does not exist.
            ValueError: If the content type is not allowed or the file is too large.
            StorageIOError: If the bytes could not be written in time.
        """
        await self._require_movie(movie_id)
        content_type = normalize_content_type(content_type)
        self.validate_content_type(content_type)

        async with movie_storage_lock(movie_id):
            movie_file = await self._store_and_record(movie_id, content, filename, content_type)

        await self.session.refresh(movie_file)
        logger.info(
            "Movie file uploaded",
            movie_id=movie_id,
            file_id=movie_file.id,
            size=movie_file.file_size,
            content_type=content_type,
        )
        return movie_file

    async def _store_and_record(
        self,
        movie_id: int,
        content: BinaryIO,
        filename: str | None,
        content_type: str,
    ) -> MovieFileModel:
        try:
            saved = await asyncio.wait_for(
                asyncio.to_thread(self.file_store.save, movie_id, content, filename),
                timeout=self.upload_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(
                "File upload timed out",
                movie_id=movie_id,
                timeout=self.upload_timeout,
            )
            raise StorageIOError("Timed out writing file to storage") from e

        movie_file = MovieFileModel(
            movie_id=movie_id,
            file_name=display_name(filename),
            file_size=saved.size,
            content_type=content_type,
            file_path=saved.storage_path,
            file_hash=saved.content_hash,
        )
        try:
            await self.file_repo.create(movie_file)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.error("Failed to record uploaded file", movie_id=movie_id)
            await self._discard_if_unreferenced(saved.storage_path)
            raise
        return movie_file

    async def _discard_if_unreferenced(self, storage_path: str) -> None:
        if await self.file_repo.count_by_path(storage_path) > 0:
            return
        try:
            await asyncio.to_thread(self.file_store.delete, storage_path)
        except (StoredFileNotFoundError, StorageIOError) as e:
            logger.warning(
                "Failed to discard unrecorded file",
                path=storage_path,
                exc_type=type(e).__name__,
            )

    async def get(self, movie_id: int, file_id: int) -> MovieFileModel:
        """Get a file record belonging to a movie.

        Raises:
            MovieNotFoundError: If the movie does not exist.
            MovieFileNotFoundError: If the record does not exist.
        """
        await self._require_movie(movie_id)
        movie_file = await self.file_repo.get_for_movie(movie_id, file_id)
        if movie_file is None:
            raise MovieFileNotFoundError(movie_id, file_id)
        return movie_file

    async def open(self, movie_id: int, file_id: int) -> tuple[MovieFileModel, Path]:
        """Get a file record together with the absolute path of its bytes.

        Raises:
            MovieFileNotFoundError: If the record or its bytes are missing.
        """
        movie_file = await self.get(movie_id, file_id)
        try:
            absolute_path = self.file_store.resolve(movie_file.file_path)
        except ValueError as e:
            logger.error("Stored file path escapes storage root", file_id=file_id)
            raise MovieFileNotFoundError(movie_id, file_id) from e

        if not absolute_path.is_file():
            logger.warning("Stored file missing on disk", movie_id=movie_id, file_id=file_id)
            raise MovieFileNotFoundError(movie_id, file_id)
        return movie_file, absolute_path

    async def delete(self, movie_id: int, file_id: int) -> None:
        """Delete a file record and, when nothing else uses them, its bytes.

        Raises:
            MovieFileNotFoundError: If the record does not exist.
            StorageIOError: If the bytes could not be removed; the record is kept.
        """
        async with movie_storage_lock(movie_id):
            movie_file = await self.get(movie_id, file_id)
            storage_path = movie_file.file_path

            await self.file_repo.delete(movie_file)
            if await self.file_repo.count_by_path(storage_path) == 0:
                try:
                    await asyncio.to_thread(self.file_store.delete, storage_path)
                except StoredFileNotFoundError:
                    logger.warning("Stored file already missing", movie_id=movie_id, file_id=file_id)
                except StorageIOError:
                    await self.session.rollback()
                    logger.error("Failed to delete stored file", movie_id=movie_id, file_id=file_id)
                    raise

            await self.session.commit()
        logger.info("Movie file deleted", movie_id=movie_id, file_id=file_id)

    async def list_files(self, movie_id: int) -> list[MovieFileModel]:
        """List a movie's files, newest first.

        Raises:
            MovieNotFoundError: If the movie does not exist.
        """
        await self._require_movie(movie_id)
        return await self.file_repo.list_for_movie(movie_id)
