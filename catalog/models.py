"""
Pydantic models for catalog books and their reviews.
"""

from pydantic import BaseModel, Field


class Book(BaseModel):
    """
    Catalog metadata for a book. Reviews are held by the book's ReviewLedger.
    """
    isbn: str = Field(..., min_length=1, description="Unique ISBN")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")

    class Config:
        """Pydantic configuration."""
        frozen = True
        json_schema_extra = {
            "example": {
                "isbn": "9780143127741",
                "title": "The Martian",
                "author": "Andy Weir"
            }
        }


class Review(BaseModel):
    """A single user's review of a book."""
    username: str = Field(..., description="Reviewer username")
    review: str = Field(..., description="Review text")

    class Config:
        """Pydantic configuration."""
        frozen = True
