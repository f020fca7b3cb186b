"""API Routes for CineVault."""

from cinevault.infrastructure.api.routes.auth_router import router as auth_router
from .movie_files_router import router as movie_files_router
from .movies_router import router as movies_router

__all__ = [
    "auth_router",
    "movie_files_router",
    "movies_router",
]
