"""Movie file API endpoints for uploading, downloading and deleting files.

All endpoints require a valid access token. Responses never expose storage
keys, content hashes or filesystem paths.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile, status
from fastapi.responses import FileResponse

from cinevault.core.logging import get_logger
from cinevault.domain.services import (
    FileTooLargeError,
    MovieFileNotFoundError,
    MovieFileService,
    MovieNotFoundError,
    StorageIOError,
)
from cinevault.infrastructure.api.dependencies import (
    AuthenticatedUserId,
    get_movie_file_service,
)
from cinevault.infrastructure.api.schemas import MovieFileResponse

logger = get_logger(__name__)

router = APIRouter()

MovieFileServiceDep = Annotated[MovieFileService, Depends(get_movie_file_service)]


@router.get("/{movie_id}/files", response_model=list[MovieFileResponse])
async def list_movie_files(
    movie_id: int,
    user_id: AuthenticatedUserId,
    file_service: MovieFileServiceDep,
) -> list[MovieFileResponse]:
    """List the files attached to a movie, newest first."""
    try:
        files = await file_service.list_files(movie_id)
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [MovieFileResponse.model_validate(f) for f in files]


@router.post(
    "/{movie_id}/file",
    status_code=status.HTTP_201_CREATED,
    response_model=MovieFileResponse,
    responses={
        400: {"description": "File type not allowed"},
        404: {"description": "Movie not found"},
        413: {"description": "File too large"},
    },
)
async def upload_movie_file(
    movie_id: int,
    user_id: AuthenticatedUserId,
    file_service: MovieFileServiceDep,
    file: UploadFile = File(..., description="File to upload"),
) -> MovieFileResponse:
    """Upload a file for a movie.

    The file is stored under a name derived from the SHA-256 of its content.
    """
    try:
        movie_file = await file_service.upload(
            movie_id,
            file.file,
            file.filename,
            file.content_type,
        )
    except MovieNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except FileTooLargeError as e:
        logger.warning("File upload rejected: too large", movie_id=movie_id, user_id=user_id)
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=str(e))
    except ValueError as e:
        logger.warning(
            "File upload validation failed",
            movie_id=movie_id,
            user_id=user_id,
            error=str(e),
        )
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StorageIOError:
        logger.error("File upload failed", movie_id=movie_id, user_id=user_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to store file",
        )
    finally:
        await file.close()

    logger.info(
        "File uploaded successfully",
        movie_id=movie_id,
        file_id=movie_file.id,
        user_id=user_id,
    )
    return MovieFileResponse.model_validate(movie_file)


@router.get(
    "/{movie_id}/files/{file_id}",
    response_class=FileResponse,
    response_model=None,
    responses={404: {"description": "File not found"}},
)
async def download_movie_file(
    movie_id: int,
    file_id: int,
    user_id: AuthenticatedUserId,
    file_service: MovieFileServiceDep,
) -> FileResponse:
    """Download a movie file."""
    try:
        movie_file, absolute_path = await file_service.open(movie_id, file_id)
    except (MovieNotFoundError, MovieFileNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    logger.info("File downloaded", movie_id=movie_id, file_id=file_id, user_id=user_id)
    return FileResponse(
        path=absolute_path,
        filename=movie_file.file_name,
        media_type=movie_file.content_type,
    )


@router.delete(
    "/{movie_id}/files/{file_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "File not found"}},
)
async def delete_movie_file(
    movie_id: int,
    file_id: int,
    user_id: AuthenticatedUserId,
    file_service: MovieFileServiceDep,
) -> Response:
    """Delete a movie file record and its stored bytes."""
    try:
        await file_service.delete(movie_id, file_id)
    except (MovieNotFoundError, MovieFileNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageIOError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete file",
        )

    logger.info("File deleted via API", movie_id=movie_id, file_id=file_id, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
