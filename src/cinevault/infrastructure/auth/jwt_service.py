"""JWT token service.

Issues and validates signed, typed, expiring tokens. Access tokens and refresh
tokens are signed with two independent secrets, so a leaked access token can
never be presented as a refresh token and vice versa.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Callable

import jwt

from cinevault.core.config import get_settings
from cinevault.infrastructure.auth.token_types import TokenKind, TokenPair

Clock = Callable[[], datetime]


class JWTError(Exception):
    """Base exception for JWT-related errors."""

    pass


class InvalidSignatureError(JWTError):
    """Raised when a token's signature or algorithm does not check out."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class WrongTokenTypeError(JWTError):
    """Raised when a token of one kind is presented as the other."""

    pass


class MalformedTokenError(JWTError):
    """Raised when a token cannot be parsed or lacks required claims."""

    pass


def utcnow() -> datetime:
    """Return the current UTC time."""
    return datetime.now(timezone.utc)


class JWTService:
    """Service for creating and validating JWT tokens.

    Supports access tokens (short-lived) and refresh tokens (long-lived),
    each signed with its own secret. All configuration is fixed at
    construction; rotating a secret means building a new service.
    """

    ALGORITHM = "HS256"
    REQUIRED_CLAIMS = ("user_id", "type", "iat", "exp")

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Clock = utcnow,
    ) -> None:
        """Initialize the JWT service.

        Args:
            access_secret: Secret key for signing access tokens.
            refresh_secret: Secret key for signing refresh tokens.
            access_ttl: Lifetime of access tokens.
            refresh_ttl: Lifetime of refresh tokens.
            clock: Callable returning the current aware UTC datetime.
        """
        if not access_secret or not refresh_secret:
            raise ValueError("Token secrets must not be empty")
        self._secrets = {
            TokenKind.ACCESS: access_secret,
            TokenKind.REFRESH: refresh_secret,
        }
        self._ttls = {
            TokenKind.ACCESS: access_ttl,
            TokenKind.REFRESH: refresh_ttl,
        }
        self._clock = clock

    @property
    def access_ttl(self) -> timedelta:
        return self._ttls[TokenKind.ACCESS]

    @property
    def refresh_ttl(self) -> timedelta:
        return self._ttls[TokenKind.REFRESH]

    def _now(self) -> int:
        return int(self._clock().timestamp())

    def _encode(self, user_id: int, kind: TokenKind, issued_at: int, ttl: timedelta) -> str:
        payload = {
            "user_id": user_id,
            "type": kind.value,
            "iat": issued_at,
            "exp": issued_at + int(ttl.total_seconds()),
        }
        return jwt.encode(payload, self._secrets[kind], algorithm=self.ALGORITHM)

    def issue(self, user_id: int, kind: TokenKind, ttl: timedelta | None = None) -> str:
        """Create a signed token of the given kind.

        Args:
            user_id: The user's identifier.
            kind: Token kind; selects the signing secret.
            ttl: Custom lifetime. Defaults to the kind's configured lifetime.

        Returns:
            Encoded JWT.
        """
        kind = TokenKind(kind)
        if ttl is None:
            ttl = self._ttls[kind]
        return self._encode(user_id, kind, self._now(), ttl)

    def issue_pair(self, user_id: int) -> TokenPair:
        """Create an access token and a refresh token from one clock reading.

        If signing either token fails, the error propagates and no pair
        is returned.
        """
        issued_at = self._now()
        access_token = self._encode(user_id, TokenKind.ACCESS, issued_at, self.access_ttl)
        refresh_token = self._encode(user_id, TokenKind.REFRESH, issued_at, self.refresh_ttl)
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.get_expires_in(),
        )

    def decode_token(self, token: str, expected_kind: TokenKind) -> dict[str, Any]:
        """Decode a token with the secret for ``expected_kind``.

        Only HS256 is accepted, which rejects ``none`` and any
        algorithm-confusion attempt. Expiry is checked against the
        service clock rather than the library's wall clock.

        Raises:
            InvalidSignatureError: Bad signature or unexpected algorithm.
            TokenExpiredError: ``exp`` is not in the future.
            WrongTokenTypeError: The ``type`` claim differs from ``expected_kind``.
            MalformedTokenError: Undecodable token or missing/invalid claims.
        """
        expected_kind = TokenKind(expected_kind)
        if not isinstance(token, str) or not token:
            raise MalformedTokenError("Token must be a non-empty string")

        try:
            payload = jwt.decode(
                token,
                self._secrets[expected_kind],
                algorithms=[self.ALGORITHM],
                options={
                    "require": list(self.REQUIRED_CLAIMS),
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            raise InvalidSignatureError("Invalid token signature") from e
        except jwt.InvalidTokenError as e:
            raise MalformedTokenError("Invalid token") from e

        user_id = payload["user_id"]
        expires_at = payload["exp"]
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise MalformedTokenError("Invalid user_id claim")
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise MalformedTokenError("Invalid exp claim")

        if self._now() >= expires_at:
            raise TokenExpiredError("Token has expired")

        if payload["type"] != expected_kind.value:
            raise WrongTokenTypeError(f"Not an {expected_kind.value} token")

        return payload

    def validate(self, token: str, expected_kind: TokenKind) -> int:
        """Validate a token and return the user ID it was issued for."""
        return self.decode_token(token, expected_kind)["user_id"]

    def validate_access_token(self, token: str) -> int:
        """Validate that a token is an access token and return its user ID."""
        return self.validate(token, TokenKind.ACCESS)

    def validate_refresh_token(self, token: str) -> int:
        """Validate that a token is a refresh token and return its user ID."""
        return self.validate(token, TokenKind.REFRESH)

    def get_expires_in(self) -> int:
        """Get the access token lifetime in seconds."""
        return int(self.access_ttl.total_seconds())


@lru_cache
def get_jwt_service() -> JWTService:
    """Get the process-wide JWT service built from settings."""
    settings = get_settings()
    return JWTService(
        access_secret=settings.access_token_secret,
        refresh_secret=settings.refresh_token_secret,
        access_ttl=timedelta(minutes=settings.access_token_expire_minutes),
        refresh_ttl=timedelta(days=settings.refresh_token_expire_days),
    )
