import logging
from typing import List

from app.models.review_model import BookReview
from app.crud.base_crud import BaseRepository

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import InternalServerError


logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[BookReview]):
    """Repository for the book_reviews table."""

    def __init__(self):
        super().__init__(BookReview)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_book_reviews(
        self, db: AsyncSession, *, book_id: int, skip: int = 0, limit: int = 100
    ) -> List[BookReview]:
        """Get reviews for a book, oldest first"""
        statement = (
            select(self.model)
            .where(self.model.book_id == book_id)
            .order_by(self.model.id)
            .offset(skip)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: BookReview) -> BookReview:
        """Create a review"""
        db.add(obj_in)
        await db.commit()
        await db.refresh(obj_in)
        self._logger.info(f"Review created: {obj_in.id} for book {obj_in.book_id}")
        return obj_in


review_repository = ReviewRepository()
