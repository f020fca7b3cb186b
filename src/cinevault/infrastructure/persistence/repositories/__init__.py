"""Persistence repositories for database operations."""

from cinevault.infrastructure.persistence.repositories.movie_file_repository import (
    MovieFileRepository,
)
from cinevault.infrastructure.persistence.repositories.movie_repository import (
    MovieRepository,
)
from cinevault.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
)

__all__ = [
    "MovieFileRepository",
    "MovieRepository",
    "UserRepository",
]
