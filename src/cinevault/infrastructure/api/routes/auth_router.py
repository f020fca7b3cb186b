"""Authentication API routes.

Provides endpoints for user registration, login, and token refresh.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from cinevault.core.logging import get_logger
from cinevault.domain.services import (
    AuthenticationError,
    AuthService,
    InvalidCredentialsError,
    UsernameTakenError,
)
from cinevault.infrastructure.api.dependencies import credentials_exception, get_auth_service
from cinevault.infrastructure.api.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RefreshTokenRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)

logger = get_logger(__name__)

router = APIRouter()

AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses={
        409: {"description": "Conflict - username already exists"},
    },
)
async def register(request: RegisterRequest, auth_service: AuthServiceDep) -> UserResponse:
    """Register a new user.

    Only the Argon2 digest of the password is stored. Registration does not
    log the user in; call ``/login`` afterwards.
    """
    try:
        user = await auth_service.register(request.username, request.password)
    except UsernameTakenError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return UserResponse.model_validate(user)


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    responses={
        401: {"description": "Invalid credentials"},
    },
)
async def login(request: LoginRequest, auth_service: AuthServiceDep) -> LoginResponse:
    """Authenticate a user and return a token pair.

    Security:
    - Unknown usernames and wrong passwords return the same 401 message
    - Password verification always runs (against a dummy digest if needed)
    """
    try:
        user, tokens = await auth_service.login(request.username, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    return LoginResponse(
        user=UserResponse.model_validate(user),
        tokens=TokenPairResponse.model_validate(tokens),
    )


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=RefreshResponse,
    responses={
        401: {"description": "Invalid or expired refresh token"},
    },
)
async def refresh(request: RefreshTokenRequest, auth_service: AuthServiceDep) -> RefreshResponse:
    """Exchange a refresh token for a new token pair.

    The presented refresh token is not revoked and remains usable until it
    expires.
    """
    try:
        tokens = await auth_service.refresh(request.refresh_token)
    except AuthenticationError:
        raise credentials_exception()

    return RefreshResponse(tokens=TokenPairResponse.model_validate(tokens))
