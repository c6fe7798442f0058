# app/schemas/review_schema.py
"""
Review schemas for request/response models.
"""

from typing import Optional, Annotated
from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict, field_validator


class ReviewBase(BaseModel):
    """Base schema for review data."""

    rating: Annotated[
        int, Field(ge=1, le=5, description="Rating from 1 to 5 stars", examples=[5])
    ]
    reviewer_name: Optional[
        Annotated[
            str,
            Field(
                min_length=1,
                max_length=100,
                description="Display name of the reviewer",
                examples=["Jordan"],
            ),
        ]
    ] = None
    comment: Optional[
        Annotated[
            str,
            Field(
                max_length=5000,
                description="Free-text review",
                examples=["Couldn't put it down."],
            ),
        ]
    ] = None

    @field_validator("reviewer_name")
    @classmethod
    def clean_reviewer_name(cls, v: Optional[str]) -> Optional[str]:
        """Collapse repeated whitespace in the display name."""
        if v:
            return " ".join(v.strip().split())
        return v


class ReviewCreate(ReviewBase):
    """Schema for recording a review against a book."""

    pass


class ReviewResponse(ReviewBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    book_id: int
    created_at: datetime
