"""Session and authentication flow.

Turns credentials into token pairs, refresh tokens into new pairs, and
bearer tokens into user IDs. Every failure reaching a caller is one of two
generic errors so that responses never reveal which check failed.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinevault.core.logging import get_logger
from cinevault.infrastructure.auth import (
    DUMMY_PASSWORD_HASH,
    JWTError,
    JWTService,
    TokenKind,
    TokenPair,
    hash_password,
    needs_rehash,
    verify_password,
)
from cinevault.infrastructure.persistence.models import UserModel
from cinevault.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Raised for any token or session failure; deliberately uninformative."""

    def __init__(self, message: str = "Could not validate credentials") -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(AuthenticationError):
    """Raised when a username/password pair does not match a user."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials")


class UsernameTakenError(Exception):
    """Raised when registering a username that already exists."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__("Username already exists")


class AuthService:
    """Orchestrates the password hasher and the JWT service."""

    def __init__(self, session: AsyncSession, jwt_service: JWTService) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            jwt_service: Token issuer/validator.
        """
        self.session = session
        self.jwt_service = jwt_service
        self.users = UserRepository(session)

    async def register(self, username: str, password: str) -> UserModel:
        """Create a user, storing only the password digest.

        Raises:
            UsernameTakenError: If the username is already registered.
        """
        users = self.users
        if await users.username_exists(username):
            logger.info("Registration failed: username exists", username=username)
            raise UsernameTakenError(username)

        user = UserModel(username=username, password_hash=hash_password(password))
        try:
            await users.create(user)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.info("Registration failed: username exists", username=username)
            raise UsernameTakenError(username) from e

        await self.session.refresh(user)
        logger.info("User registered", user_id=user.id, username=username)
        return user

    async def login(self, username: str, password: str) -> tuple[UserModel, TokenPair]:
        """Verify credentials and issue a token pair.

        An unknown username is verified against a dummy digest so it costs
        the same as a wrong password, and both raise the same error.

        Raises:
            InvalidCredentialsError: Unknown user or wrong password.
        """
        users = self.users
        user = await users.get_by_username(username)

        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
            logger.info("Login failed: user not found", username=username)
            raise InvalidCredentialsError()

        if not verify_password(password, user.password_hash):
            logger.info("Login failed: invalid password", user_id=user.id)
            raise InvalidCredentialsError()

        if needs_rehash(user.password_hash):
            await users.update_password_hash(user, hash_password(password))
            await self.session.commit()
            logger.info("Password digest upgraded", user_id=user.id)

        tokens = self.jwt_service.issue_pair(user.id)
        logger.info("User logged in", user_id=user.id)
        return user, tokens

    async def refresh(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a brand-new token pair.

        The presented refresh token is not revoked; it stays valid until it
        expires.

        Raises:
            AuthenticationError: Invalid refresh token or the user no longer exists.
        """
        try:
            user_id = self.jwt_service.validate(refresh_token, TokenKind.REFRESH)
        except JWTError as e:
            logger.info("Token refresh failed", reason=type(e).__name__)
            raise AuthenticationError() from e

        if await self.users.get_by_id(user_id) is None:
            logger.info("Token refresh failed: user not found", user_id=user_id)
            raise AuthenticationError()

        logger.info("Tokens refreshed", user_id=user_id)
        return self.jwt_service.issue_pair(user_id)

    @staticmethod
    def authenticate_request(jwt_service: JWTService, bearer_token: str) -> int:
        """Resolve an access token to a user ID.

        Needs no database session, so request dependencies call it directly.

        Raises:
            AuthenticationError: Any signature, expiry, kind or format failure.
        """
        try:
            return jwt_service.validate(bearer_token, TokenKind.ACCESS)
        except JWTError as e:
            logger.info("Authentication failed", reason=type(e).__name__)
            raise AuthenticationError() from e
