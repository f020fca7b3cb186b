"""Argon2id credential hashing.

Stored digests are PHC strings (``$argon2id$v=19$m=...,t=...,p=...$salt$hash``)
so each one carries its own salt and cost parameters. Raising the cost later
leaves old digests verifiable; ``needs_rehash`` tells the login flow when to
upgrade them.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_argon2 = PasswordHasher()

# Checked on unknown usernames so a lookup miss takes as long as a bad password.
DUMMY_PASSWORD_HASH = _argon2.hash("cinevault-timing-equalizer")


def hash_password(password: str) -> str:
    """Return a salted Argon2id digest of ``password``.

    >>> hash_password("secret123").startswith("$argon2id$")
    True
    """
    return _argon2.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Check ``password`` against a stored digest in constant time.

    Garbage in ``hashed`` counts as a mismatch, never an exception. That
    includes non-ASCII text, which argon2 rejects with ``UnicodeEncodeError``
    before parsing.
    """
    try:
        return _argon2.verify(hashed, password)
    except (VerificationError, InvalidHashError, ValueError):
        return False


def needs_rehash(hashed: str) -> bool:
    """Tell whether a digest was made with weaker parameters than today's.

    Args:
        hashed: A stored digest that has just been verified.

    Returns:
        True if the digest should be replaced with a fresh ``hash_password``
        result. False for current digests and for anything unparseable.
    """
    try:
        return _argon2.check_needs_rehash(hashed)
    except (InvalidHashError, ValueError):
        return False
