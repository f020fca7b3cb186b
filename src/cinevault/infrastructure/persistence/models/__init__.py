"""SQLAlchemy models for CineVault tables.

All models inherit from the Base class defined in database.py and are
created on application startup outside production.
"""

from cinevault.infrastructure.persistence.models.movie import (
    MovieMediaModel,
    MovieMetadataModel,
    MovieModel,
)
from cinevault.infrastructure.persistence.models.movie_file import MovieFileModel
from cinevault.infrastructure.persistence.models.user import UserModel

__all__ = [
    "MovieFileModel",
    "MovieMediaModel",
    "MovieMetadataModel",
    "MovieModel",
    "UserModel",
]
