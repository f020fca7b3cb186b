"""API request and response schemas."""

from cinevault.infrastructure.api.schemas.auth_schemas import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from cinevault.infrastructure.api.schemas.file_schemas import MovieFileResponse
from cinevault.infrastructure.api.schemas.movie_schemas import (
    CreateMovieRequest,
    MovieMediaRequest,
    MovieMediaResponse,
    MovieMetadataRequest,
    MovieMetadataResponse,
    MovieResponse,
    UpdateMovieRequest,
)

__all__ = [
    "CreateMovieRequest",
    "LoginRequest",
    "LoginResponse",
    "MovieFileResponse",
    "MovieMediaRequest",
    "MovieMediaResponse",
    "MovieMetadataRequest",
    "MovieMetadataResponse",
    "MovieResponse",
    "RefreshResponse",
    "RefreshTokenRequest",
    "RegisterRequest",
    "TokenPairResponse",
    "UpdateMovieRequest",
    "UserResponse",
]
