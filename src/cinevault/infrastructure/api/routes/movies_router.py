"""Movie catalog API routes.

Reads are public; creating, updating and deleting movies requires a valid
access token.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from cinevault.core.logging import get_logger
from cinevault.domain.entities import MediaType
from cinevault.domain.services import MovieNotFoundError, MovieService
from cinevault.infrastructure.api.dependencies import AuthenticatedUserId, get_movie_service
from cinevault.infrastructure.api.schemas import (
    CreateMovieRequest,
    MovieMediaResponse,
    MovieResponse,
    UpdateMovieRequest,
)

logger = get_logger(__name__)

router = APIRouter()

MovieServiceDep = Annotated[MovieService, Depends(get_movie_service)]


def movie_not_found(movie_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Movie {movie_id} not found",
    )


@router.get("", response_model=list[MovieResponse])
async def list_movies(movie_service: MovieServiceDep) -> list[MovieResponse]:
    """List all movies."""
    movies = await movie_service.list_movies()
    return [MovieResponse.model_validate(m) for m in movies]


@router.get(
    "/{movie_id}",
    response_model=MovieResponse,
    responses={404: {"description": "Movie not found"}},
)
async def get_movie(movie_id: int, movie_service: MovieServiceDep) -> MovieResponse:
    """Get a movie with its media links and metadata."""
    movie = await movie_service.get_movie(movie_id)
    if movie is None:
        raise movie_not_found(movie_id)
    return MovieResponse.model_validate(movie)


@router.get(
    "/{movie_id}/media",
    response_model=list[MovieMediaResponse],
    responses={
        400: {"description": "Unknown media type"},
        404: {"description": "Movie not found"},
    },
)
async def list_movie_media(
    movie_id: int,
    movie_service: MovieServiceDep,
    media_type: Annotated[str | None, Query(alias="type")] = None,
) -> list[MovieMediaResponse]:
    """List a movie's media links, optionally filtered by ``?type=``."""
    parsed_type = None
    if media_type:
        try:
            parsed_type = MediaType.parse(media_type)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        media = await movie_service.list_media(movie_id, parsed_type)
    except MovieNotFoundError:
        raise movie_not_found(movie_id)
    return [MovieMediaResponse.model_validate(m) for m in media]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=MovieResponse,
)
async def create_movie(
    request: CreateMovieRequest,
    user_id: AuthenticatedUserId,
    movie_service: MovieServiceDep,
) -> MovieResponse:
    """Create a movie with optional media links and metadata."""
    try:
        movie = await movie_service.create_movie(request.to_entity())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("Movie created via API", movie_id=movie.id, user_id=user_id)
    return MovieResponse.model_validate(movie)


@router.put(
    "/{movie_id}",
    response_model=MovieResponse,
    responses={404: {"description": "Movie not found"}},
)
async def update_movie(
    movie_id: int,
    request: UpdateMovieRequest,
    user_id: AuthenticatedUserId,
    movie_service: MovieServiceDep,
) -> MovieResponse:
    """Partially update a movie.

    Empty fields are ignored. Non-empty ``media_files`` replaces all links.
    """
    try:
        movie = await movie_service.update_movie(movie_id, request.to_entity())
    except MovieNotFoundError:
        raise movie_not_found(movie_id)

    logger.info("Movie updated via API", movie_id=movie_id, user_id=user_id)
    return MovieResponse.model_validate(movie)


@router.delete(
    "/{movie_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Movie not found"}},
)
async def delete_movie(
    movie_id: int,
    user_id: AuthenticatedUserId,
    movie_service: MovieServiceDep,
) -> Response:
    """Soft-delete a movie."""
    try:
        await movie_service.delete_movie(movie_id)
    except MovieNotFoundError:
        raise movie_not_found(movie_id)

    logger.info("Movie deleted via API", movie_id=movie_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
