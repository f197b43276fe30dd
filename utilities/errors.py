"""
Error taxonomy for the bookshop service.

Every error raised by the identity and catalog layers derives from
BookshopError and is converted into an HTTP response at the API boundary.
TokenError and its subclasses stay internal to token verification.
"""

from enum import Enum
from typing import Optional


class BookshopError(Exception):
    """Base class for caller-visible errors."""

    default_message = "Bookshop error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BookshopError):
    """A required field is missing, empty or out of bounds."""

    default_message = "Invalid request"


class ConflictError(BookshopError):
    """A uniqueness constraint would be violated."""

    default_message = "Conflict"


class UsernameTakenError(ConflictError):
    default_message = "Username already exists"


class DuplicateBookError(ConflictError):
    default_message = "Book already exists"


class NotFoundError(BookshopError):
    """The addressed resource does not exist."""

    default_message = "Not found"


class BookNotFoundError(NotFoundError):
    default_message = "Book not found"


class ReviewNotFoundError(NotFoundError):
    default_message = "No review by this user to delete"


class AuthFailure(str, Enum):
    """Reasons an authentication attempt can be rejected."""
    MISSING_HEADER = "missing_header"
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    INVALID_CREDENTIALS = "invalid_credentials"


_AUTH_MESSAGES = {
    AuthFailure.MISSING_HEADER: "Authorization header missing",
    AuthFailure.MISSING_TOKEN: "Token missing",
    AuthFailure.INVALID_TOKEN: "Token invalid or expired",
    AuthFailure.INVALID_CREDENTIALS: "Invalid credentials",
}


class AuthError(BookshopError):
    """
    Authentication failed.

    The message depends only on the reason, never on which token check
    failed, so callers cannot tell a forged token from an expired one.
    """

    def __init__(self, reason: AuthFailure):
        self.reason = reason
        super().__init__(_AUTH_MESSAGES[reason])


class InvalidCredentialsError(AuthError):
    """Unknown username or wrong password, deliberately indistinguishable."""

    def __init__(self):
        super().__init__(AuthFailure.INVALID_CREDENTIALS)


class InternalError(BookshopError):
    """Server-side fault; details are logged, never returned."""

    default_message = "Internal server error"


class SigningKeyError(InternalError):
    default_message = "Token signing key is not configured"


class HashingError(InternalError):
    default_message = "Password hashing failed"


class TokenError(Exception):
    """Raised by the token verifier; mapped to AuthError by the gateway."""

    defect = "invalid"


class MalformedTokenError(TokenError):
    defect = "malformed"


class BadSignatureError(TokenError):
    defect = "bad_signature"


class ExpiredTokenError(TokenError):
    defect = "expired"
