"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class CredentialsRequest(BaseModel):
    """Body of /register and /login. Presence is checked by the service."""
    username: Optional[str] = Field(None, description="Username")
    password: Optional[str] = Field(None, description="Password")


class ReviewRequest(BaseModel):
    """Body of a review add/modify request."""
    review: Optional[str] = Field(None, description="Review text")


class BookSummary(BaseModel):
    """Book listing entry, without reviews."""
    isbn: str = Field(..., description="Book ISBN")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")


class BookDetailResponse(BookSummary):
    """Single book with its reviews keyed by username."""
    reviews: Dict[str, str] = Field(default_factory=dict, description="Reviews keyed by username")


class ReviewEntry(BaseModel):
    """One review in a review listing."""
    username: str = Field(..., description="Reviewer username")
    review: str = Field(..., description="Review text")


class ReviewListResponse(BaseModel):
    """All reviews of a book."""
    isbn: str = Field(..., description="Book ISBN")
    title: str = Field(..., description="Book title")
    reviews: List[ReviewEntry] = Field(..., description="Reviews of the book")


class ReviewMutationResponse(BaseModel):
    """Result of adding, modifying or deleting a review."""
    message: str = Field(..., description="Outcome message")
    isbn: str = Field(..., description="Book ISBN")
    reviewer: str = Field(..., description="Username of the acting reviewer")


class MessageResponse(BaseModel):
    """Plain message response."""
    message: str = Field(..., description="Outcome message")


class TokenResponse(BaseModel):
    """Login response carrying the bearer token."""
    token: str = Field(..., description="Signed bearer token")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    books: int = Field(..., description="Books in the catalog")
    users: int = Field(..., description="Registered users")
    reviews: int = Field(..., description="Reviews across all books")
