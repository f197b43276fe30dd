"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic per-call salting
and a configurable work factor.
"""

import bcrypt
import structlog

from utilities.errors import HashingError

logger = structlog.get_logger(__name__)

# bcrypt only reads the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted, deliberately slow one-way hashing of passwords."""

    def __init__(self, rounds: int = 12):
        """
        Initialize the hasher.

        Args:
            rounds: bcrypt cost factor (log2 of the iteration count)
        """
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            plaintext: Password to hash

        Returns:
            bcrypt digest with the salt and cost embedded

        Raises:
            HashingError: If bcrypt rejects the input
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("ascii")
        except (ValueError, TypeError, AttributeError) as e:
            logger.error("Password hashing failed", error=type(e).__name__)
            raise HashingError() from e

    def verify(self, plaintext: str, digest: str) -> bool:
        """
        Check a password against a digest.

        bcrypt.checkpw compares in constant time. Any bad input, including
        a malformed digest, is reported as a mismatch rather than raised.
        """
        if not isinstance(plaintext, str) or not isinstance(digest, str):
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), digest.encode("ascii"))
        except (ValueError, TypeError):
            return False
