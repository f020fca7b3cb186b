"""Token kinds and the token pair returned by login and refresh."""

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Kinds of bearer token issued by CineVault.

    The kind is embedded in the signed claims and selects the signing secret.
    """

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class TokenPair:
    """An access token and a refresh token minted at the same instant.

    Attributes:
        access_token: Short-lived token authorizing individual requests.
        refresh_token: Long-lived token used only to mint a new pair.
        expires_in: Access token lifetime in seconds.
    """

    access_token: str
    refresh_token: str
    expires_in: int
