"""
Pydantic models for users, session claims and authenticated identities.
"""

from pydantic import BaseModel, Field


class User(BaseModel):
    """
    A registered user. Only the bcrypt digest of the password is kept.
    """
    username: str = Field(..., min_length=1, description="Unique, case-sensitive username")
    password_hash: str = Field(..., description="Opaque bcrypt digest")

    class Config:
        """Pydantic configuration."""
        frozen = True

    def __repr__(self) -> str:
        return f"User(username={self.username!r})"


class SessionClaim(BaseModel):
    """
    Facts asserted by a session token: who, and for which window.
    Timestamps are UNIX seconds.
    """
    username: str = Field(..., min_length=1, description="Authenticated username")
    issued_at: int = Field(..., ge=0, description="Issue time (UNIX seconds)")
    expires_at: int = Field(..., ge=0, description="Expiry time (UNIX seconds)")

    class Config:
        """Pydantic configuration."""
        frozen = True

    def is_expired(self, now: float) -> bool:
        """A claim is expired from its expiry instant onwards."""
        return now >= self.expires_at


class Identity(BaseModel):
    """The acting principal of an authenticated request."""
    username: str = Field(..., min_length=1, description="Username taken from a verified token")

    class Config:
        """Pydantic configuration."""
        frozen = True
