# app/schemas/book_schema.py
"""
Book schemas for request/response models.

This module defines Pydantic schemas for book-related operations,
including creation, full replacement, and the response formats.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional, List, Annotated

from pydantic import (
    BaseModel,
    Field,
    ConfigDict,
    field_validator,
)

from app.schemas.review_schema import ReviewResponse


class BookBase(BaseModel):
    """Base schema for book data."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="The title of the book",
        examples=["The Great Gatsby"],
    )
    description: Optional[str] = Field(
        None,
        max_length=4000,
        description="Back-cover description",
    )
    price: Annotated[
        Decimal,
        Field(
            ge=0,
            max_digits=10,
            decimal_places=2,
            description="Shelf price",
            examples=["12.99"],
        ),
    ] = Decimal("0.00")
    cover_image_url: Optional[str] = Field(
        None,
        max_length=500,
        description="Location of the cover image",
        examples=["https://covers.example.com/gatsby.jpg"],
    )

    @field_validator("title")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Strip leading and trailing whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v


class BookCreate(BookBase):
    """Schema for creating a new book."""

    id: Optional[Annotated[int, Field(gt=0)]] = Field(
        None, description="Client supplied identifier; generated when omitted"
    )
    author_ids: List[int] = Field(
        default_factory=list, description="IDs of the book's authors"
    )
    genre_ids: List[int] = Field(
        default_factory=list, description="IDs of the book's genres"
    )

    @field_validator("author_ids", "genre_ids")
    @classmethod
    def dedupe_ids(cls, v: List[int]) -> List[int]:
        """Drop repeated ids while keeping their order."""
        return list(dict.fromkeys(v))


class BookReplace(BookBase):
    """
    Schema for a full-record replacement.

    `id` must match the path identifier. When `version` is supplied the
    write only succeeds if the stored row still carries that version.
    """

    id: int = Field(..., gt=0, description="Identifier of the book being replaced")
    review_count: int = Field(0, ge=0, description="Stored review counter")
    average_rating: Optional[float] = Field(
        None, ge=0.0, le=5.0, description="Stored average rating"
    )
    version: Optional[int] = Field(
        None, ge=1, description="Expected concurrency version of the stored row"
    )


class BookResponse(BookBase):
    """Basic book response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique identifier for the book")
    review_count: int = Field(..., ge=0, description="Stored review counter")
    average_rating: Optional[float] = Field(
        None, description="Average rating from all reviews"
    )
    version: int = Field(..., description="Concurrency version of the row")
    created_at: datetime = Field(..., description="When the book was created")
    updated_at: datetime = Field(..., description="When the book was last updated")


class BookDetailResponse(BookResponse):
    """Book response with author and genre names flattened to strings."""

    authors: List[str] = Field(default_factory=list, description="Author names")
    genres: List[str] = Field(default_factory=list, description="Genre names")


class BookWithReviewsResponse(BookResponse):
    """Book response including every review used to compute its aggregates."""

    reviews: List[ReviewResponse] = Field(
        default_factory=list, description="Reviews for this book"
    )


__all__ = [
    "BookBase",
    "BookCreate",
    "BookReplace",
    "BookResponse",
    "BookDetailResponse",
    "BookWithReviewsResponse",
]
