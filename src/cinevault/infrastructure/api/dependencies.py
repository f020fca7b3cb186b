"""FastAPI dependencies for authentication and service wiring.

Provides dependencies for extracting and validating JWT tokens from requests
and for building the services that route handlers call.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from cinevault.core.config import get_settings
from cinevault.core.logging import get_logger
from cinevault.domain.services import (
    AuthenticationError,
    AuthService,
    ContentAddressedFileStore,
    MovieFileService,
    MovieService,
)
from cinevault.infrastructure.auth import JWTService, get_jwt_service
from cinevault.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)


def credentials_exception() -> HTTPException:
    """The single 401 returned for every authentication failure."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )


@lru_cache
def get_file_store() -> ContentAddressedFileStore:
    """Get the process-wide file store built from settings."""
    settings = get_settings()
    return ContentAddressedFileStore(
        base_path=settings.storage_path,
        max_file_size=settings.max_file_size,
    )


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
JWTServiceDep = Annotated[JWTService, Depends(get_jwt_service)]
FileStoreDep = Annotated[ContentAddressedFileStore, Depends(get_file_store)]


async def get_current_user_id(
    jwt_service: JWTServiceDep,
    authorization: Annotated[str | None, Header()] = None,
) -> int:
    """Extract and validate the user ID from the Authorization header.

    Args:
        jwt_service: Token service used to validate the access token.
        authorization: The Authorization header value (e.g., "Bearer <token>").

    Returns:
        int: The authenticated user's ID.

    Raises:
        HTTPException: 401 if the header is missing or malformed, or the
            token fails validation for any reason.
    """
    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise credentials_exception()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise credentials_exception()

    try:
        return AuthService.authenticate_request(jwt_service, parts[1])
    except AuthenticationError:
        raise credentials_exception()


# Type alias for dependency injection
AuthenticatedUserId = Annotated[int, Depends(get_current_user_id)]


def get_auth_service(session: SessionDep, jwt_service: JWTServiceDep) -> AuthService:
    return AuthService(session, jwt_service)


def get_movie_service(session: SessionDep) -> MovieService:
    return MovieService(session)


def get_movie_file_service(session: SessionDep, file_store: FileStoreDep) -> MovieFileService:
    settings = get_settings()
    return MovieFileService(
        session,
        file_store,
        upload_timeout=settings.upload_timeout_seconds,
        allowed_mime_types=settings.allowed_mime_types,
    )
