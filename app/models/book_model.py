# app/models/book_model.py
"""
Book model definition.

This module defines the Book SQLModel for storing catalog entries, their
derived review aggregates, and their relationships with authors, genres
and reviews.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Optional, List
from datetime import datetime

from sqlmodel import SQLModel, Field, Column, DateTime, Float, Integer, Relationship
from sqlalchemy import CheckConstraint, Index, func

from app.models.book_link_model import BookAuthor, BookGenre

if TYPE_CHECKING:
    from app.models.author_model import Author
    from app.models.genre_model import Genre
    from app.models.review_model import BookReview


class BookBase(SQLModel):

    title: str = Field(
        min_length=1,
        max_length=255,
        description="The title of the book",
        schema_extra={"example": "The Great Gatsby"},
    )
    description: Optional[str] = Field(
        default=None,
        max_length=4000,
        description="Back-cover description",
    )
    price: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Shelf price",
        schema_extra={"example": "12.99"},
    )
    cover_image_url: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Location of the cover image",
    )


class Book(BookBase, table=True):
    __tablename__ = "books"
    __table_args__ = (
        Index("idx_book_title", "title"),
        CheckConstraint("review_count >= 0", name="ck_book_review_count_positive"),
    )

    id: Optional[int] = Field(
        default=None, primary_key=True, description="A unique identifier for Book"
    )

    # Aggregates derived from the book's reviews.
    review_count: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, server_default="0"),
        description="Number of reviews recorded for this book",
    )
    average_rating: Optional[float] = Field(
        default=None,
        sa_column=Column(Float, nullable=True),
        description="Mean rating across the book's reviews",
    )

    # Optimistic concurrency stamp, bumped on every versioned write.
    version: int = Field(
        default=1,
        sa_column=Column(Integer, nullable=False, server_default="1"),
    )

    created_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Book creation timestamp",
    )
    updated_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            nullable=False,
        ),
        description="Book last updated timestamp",
    )

    # Relationships
    authors: List["Author"] = Relationship(
        back_populates="books",
        link_model=BookAuthor,
        sa_relationship_kwargs={"lazy": "selectin"},
    )
    genres: List["Genre"] = Relationship(
        back_populates="books",
        link_model=BookGenre,
        sa_relationship_kwargs={"lazy": "selectin"},
    )
    reviews: List["BookReview"] = Relationship(
        back_populates="book",
        sa_relationship_kwargs={"lazy": "selectin", "cascade": "all, delete"},
    )

    @property
    def author_names(self) -> List[str]:
        return [author.name for author in self.authors]

    @property
    def genre_names(self) -> List[str]:
        return [genre.name for genre in self.genres]

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', version={self.version})>"
