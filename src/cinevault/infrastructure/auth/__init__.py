"""Authentication infrastructure components.

This module provides password hashing, JWT token services, and
other authentication-related utilities.
"""

from cinevault.infrastructure.auth.jwt_service import (
    InvalidSignatureError,
    JWTError,
    JWTService,
    MalformedTokenError,
    TokenExpiredError,
    WrongTokenTypeError,
    get_jwt_service,
)
from cinevault.infrastructure.auth.password_hasher import (
    DUMMY_PASSWORD_HASH,
    hash_password,
    needs_rehash,
    verify_password,
)
from cinevault.infrastructure.auth.token_types import TokenKind, TokenPair

__all__ = [
    "DUMMY_PASSWORD_HASH",
    "InvalidSignatureError",
    "JWTError",
    "JWTService",
    "MalformedTokenError",
    "TokenExpiredError",
    "TokenKind",
    "TokenPair",
    "WrongTokenTypeError",
    "get_jwt_service",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
