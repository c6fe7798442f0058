from typing import TYPE_CHECKING, Optional
from datetime import datetime

from sqlmodel import (
    SQLModel,
    Field,
    Relationship,
    Column,
    DateTime,
    Text,
)
from sqlalchemy import Index, CheckConstraint, func

if TYPE_CHECKING:
    from app.models.book_model import Book


class BookReviewBase(SQLModel):
    rating: int = Field(
        ...,
        ge=1,
        le=5,
        description="Rating from 1 to 5 stars",
        schema_extra={"example": 5},
    )
    reviewer_name: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Display name of the reviewer",
        schema_extra={"example": "Jordan"},
    )


class BookReview(BookReviewBase, table=True):

    __tablename__ = "book_reviews"
    __table_args__ = (
        Index("idx_book_review_book_id", "book_id"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_book_review_rating"),
    )

    id: Optional[int] = Field(
        primary_key=True, default=None, description="Unique identifier for a review"
    )

    comment: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    book_id: int = Field(
        foreign_key="books.id",
        nullable=False,
        ondelete="CASCADE",
        description="ID of the reviewed book",
    )

    created_at: datetime = Field(
        default=None,
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        ),
        description="Review creation timestamp",
    )

    book: Optional["Book"] = Relationship(back_populates="reviews")

    def __repr__(self) -> str:
        return f"<BookReview(id={self.id}, book_id={self.book_id}, rating={self.rating})>"
