"""Content-addressed storage for uploaded movie files.

Files are stored at ``<base>/movie_<owner_id>/<first 12 hex of sha256><ext>``.
The only parts of the caller's filename that reach the path are a
lowercased, strictly alphanumeric extension; the owner segment comes from an
integer ID. Identical bytes for the same owner always land on the same path.
"""

import hashlib
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from cinevault.core.logging import get_logger

logger = get_logger(__name__)

HASH_PREFIX_LENGTH = 12
DEFAULT_CHUNK_SIZE = 64 * 1024
_EXTENSION_PATTERN = re.compile(r"^\.[a-z0-9]{1,16}$")


class FileStoreError(Exception):
    """Base exception for file store errors."""

    pass


class StorageIOError(FileStoreError):
    """Raised when the underlying filesystem fails (disk full, permissions)."""

    pass


class StoredFileNotFoundError(FileStoreError):
    """Raised when a stored file does not exist."""

    pass


class FileTooLargeError(FileStoreError, ValueError):
    """Raised when an upload exceeds the configured maximum size."""

    def __init__(self, max_size: int) -> None:
        self.max_size = max_size
        max_size_mb = max_size / (1024 * 1024)
        super().__init__(f"File exceeds maximum allowed size ({max_size_mb:.2f}MB)")


@dataclass(frozen=True)
class SavedFile:
    """Result of a successful save."""

    storage_path: str
    content_hash: str
    size: int


def safe_extension(original_filename: str | None) -> str:
    """Return the lowercased extension of a filename, or "" if unsafe.

    Backslashes are treated as separators so Windows-style names cannot
    smuggle a directory into the extension.

    Example:
        >>> safe_extension("Trailer.MP4")
        '.mp4'
        >>> safe_extension("../../etc/passwd")
        ''
        >>> safe_extension("clip.mp\\x004")
        ''
    """
    if not original_filename:
        return ""
    name = PurePosixPath(original_filename.replace("\\", "/")).name
    suffix = PurePosixPath(name).suffix.lower()
    if _EXTENSION_PATTERN.match(suffix):
        return suffix
    return ""


def owner_directory(owner_id: int) -> str:
    """Return the directory name for an owner ID."""
    if isinstance(owner_id, bool) or not isinstance(owner_id, int) or owner_id < 0:
        raise ValueError("Owner ID must be a non-negative integer")
    return f"movie_{owner_id}"


class ContentAddressedFileStore:
    """Filesystem store that names files after a hash of their content.

    Instances hold only immutable configuration and may be shared across
    threads.
    """

    def __init__(
        self,
        base_path: str | Path,
        max_file_size: int | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.base_path = Path(base_path)
        self.max_file_size = max_file_size
        self.chunk_size = chunk_size

    @staticmethod
    def storage_path_for(owner_id: int, content_hash: str, extension: str = "") -> str:
        """Derive the storage key for a piece of content.

        Args:
            owner_id: Owning movie ID.
            content_hash: Hex SHA-256 of the content.
            extension: Extension including the dot (e.g. ".mp4"), or "".

        Returns:
            Storage key relative to the store root, e.g. ``movie_42/3f786850e387.mp4``.
        """
        if not re.fullmatch(r"[0-9a-f]{64}", content_hash):
            raise ValueError("Content hash must be a hex SHA-256 digest")
        extension = extension.lower()
        if extension and not _EXTENSION_PATTERN.match(extension):
            raise ValueError("Invalid file extension")
        filename = f"{content_hash[:HASH_PREFIX_LENGTH]}{extension}"
        return f"{owner_directory(owner_id)}/{filename}"

    def resolve(self, storage_path: str) -> Path:
        """Resolve a storage key to an absolute path inside the store root.

        Raises:
            ValueError: If the key would escape the store root.
        """
        root = self.base_path.resolve()
        absolute_path = (root / storage_path).resolve()
        if absolute_path == root or not absolute_path.is_relative_to(root):
            raise ValueError("Invalid file path")
        return absolute_path

    def exists(self, storage_path: str) -> bool:
        """Check whether a stored file exists."""
        return self.resolve(storage_path).is_file()

    def save(self, owner_id: int, content: BinaryIO, original_filename: str | None) -> SavedFile:
        """Store a stream under its content-derived path.

        The stream is hashed while it is copied to a temporary file in the
        owner's directory; the temporary file is then atomically renamed to
        its final name. Saving identical bytes again rewrites the same path.

        Args:
            owner_id: Owning movie ID.
            content: Binary stream to consume.
            original_filename: Uploader-supplied filename; only its extension is used.

        Returns:
            SavedFile with the relative storage key, full hex digest and size.

        Raises:
            ValueError: If ``owner_id`` is not a non-negative integer.
            FileTooLargeError: If the stream exceeds ``max_file_size``.
            StorageIOError: If the filesystem fails.
        """
        owner_dir = self.base_path / owner_directory(owner_id)
        digest = hashlib.sha256()
        size = 0
        tmp_path: Path | None = None

        try:
            owner_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=".upload-", suffix=".part", dir=owner_dir)
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as tmp_file:
                while chunk := content.read(self.chunk_size):
                    size += len(chunk)
                    if self.max_file_size is not None and size > self.max_file_size:
                        raise FileTooLargeError(self.max_file_size)
                    digest.update(chunk)
                    tmp_file.write(chunk)
                tmp_file.flush()
                os.fsync(tmp_file.fileno())

            content_hash = digest.hexdigest()
            storage_path = self.storage_path_for(
                owner_id, content_hash, safe_extension(original_filename)
            )
            os.replace(tmp_path, self.base_path / storage_path)
            tmp_path = None
        except OSError as e:
            logger.error(
                "File store write failed",
                owner_id=owner_id,
                error=str(e),
                exc_type=type(e).__name__,
            )
            raise StorageIOError("Failed to write file to storage") from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        logger.info(
            "File stored",
            owner_id=owner_id,
            path=storage_path,
            size=size,
        )
        return SavedFile(storage_path=storage_path, content_hash=content_hash, size=size)

    def delete(self, storage_path: str) -> None:
        """Remove a stored file.

        Raises:
            StoredFileNotFoundError: If the file does not exist.
            StorageIOError: If the filesystem refuses the removal.
            ValueError: If the key escapes the store root.
        """
        absolute_path = self.resolve(storage_path)
        try:
            absolute_path.unlink()
        except FileNotFoundError as e:
            raise StoredFileNotFoundError(f"File not found: {storage_path}") from e
        except OSError as e:
            raise StorageIOError("Failed to delete file from storage") from e
        logger.info("File deleted", path=storage_path)
