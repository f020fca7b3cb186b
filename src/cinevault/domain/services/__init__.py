"""Domain services for CineVault.

Services hold the business flows: authentication, the movie catalog and
content-addressed file uploads. They receive their collaborators (session,
token service, file store) from the caller.
"""

from cinevault.domain.services.auth_service import (
    AuthenticationError,
    AuthService,
    InvalidCredentialsError,
    UsernameTakenError,
)
from cinevault.domain.services.file_store import (
    ContentAddressedFileStore,
    FileStoreError,
    FileTooLargeError,
    SavedFile,
    StorageIOError,
    StoredFileNotFoundError,
)
from cinevault.domain.services.movie_file_service import (
    MovieFileNotFoundError,
    MovieFileService,
)
from cinevault.domain.services.movie_service import MovieNotFoundError, MovieService

__all__ = [
    "AuthService",
    "AuthenticationError",
    "ContentAddressedFileStore",
    "FileStoreError",
    "FileTooLargeError",
    "InvalidCredentialsError",
    "MovieFileNotFoundError",
    "MovieFileService",
    "MovieNotFoundError",
    "MovieService",
    "SavedFile",
    "StorageIOError",
    "StoredFileNotFoundError",
    "UsernameTakenError",
]
