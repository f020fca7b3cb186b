"""Pydantic schemas for authentication endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request body for user registration."""

    username: str = Field(..., min_length=3, max_length=50, description="Login name")
    password: str = Field(..., min_length=6, description="User's password")


class LoginRequest(BaseModel):
    """Request body for user login."""

    username: str = Field(..., min_length=1, description="Login name")
    password: str = Field(..., min_length=1, description="User's password")


class RefreshTokenRequest(BaseModel):
    """Request body for exchanging a refresh token."""

    refresh_token: str = Field(..., min_length=1, description="JWT refresh token")


class UserResponse(BaseModel):
    """User information in auth responses."""

    id: int = Field(..., description="User ID")
    username: str = Field(..., description="Login name")
    created_at: datetime = Field(..., description="When the user was created")

    model_config = {"from_attributes": True}


class TokenPairResponse(BaseModel):
    """An access token and a refresh token issued together."""

    access_token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., description="JWT refresh token")
    token_type: str = Field("bearer", description="Authorization scheme")
    expires_in: int = Field(..., description="Access token expiration time in seconds")

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """Response for a successful login."""

    user: UserResponse = Field(..., description="User information")
    tokens: TokenPairResponse = Field(..., description="Issued token pair")


class RefreshResponse(BaseModel):
    """Response for a successful token refresh."""

    tokens: TokenPairResponse = Field(..., description="Newly issued token pair")
