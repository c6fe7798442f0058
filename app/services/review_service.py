import logging
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession
from app.crud.book_crud import book_repository
from app.crud.review_crud import review_repository
from app.schemas.review_schema import ReviewCreate
from app.models.review_model import BookReview

from app.core.exception_utils import raise_for_status
from app.core.exceptions import ResourceNotFound, ValidationError

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Records and lists book reviews.

    Recording a review does not touch the book's stored aggregates; those
    are only advanced through the rating service.
    """

    def __init__(self):
        self.review_repository = review_repository
        self.book_repository = book_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def _ensure_book_exists(self, db: AsyncSession, book_id: int) -> None:
        if book_id <= 0:
            raise ValidationError("Book ID must be a positive integer")
        raise_for_status(
            condition=not await self.book_repository.exists(db=db, obj_id=book_id),
            exception=ResourceNotFound,
            resource_type="Book",
            detail=f"Book with id {book_id} not found.",
        )

    async def get_book_reviews(
        self, db: AsyncSession, *, book_id: int, skip: int = 0, limit: int = 100
    ) -> List[BookReview]:
        """Get all reviews for a book"""
        await self._ensure_book_exists(db, book_id)
        reviews = await self.review_repository.get_book_reviews(
            db=db, book_id=book_id, skip=skip, limit=limit
        )
        self._logger.info(f"Review list retrieved : {len(reviews)} reviews returned")
        return reviews

    async def create_review(
        self, db: AsyncSession, *, book_id: int, review_data: ReviewCreate
    ) -> BookReview:
        """Attach a new review to a book"""
        await self._ensure_book_exists(db, book_id)
        review = BookReview(**review_data.model_dump(), book_id=book_id)
        new_review = await self.review_repository.create(db=db, obj_in=review)
        self._logger.info(
            f"New review {new_review.id} recorded for book {book_id}",
            extra={"book_id": book_id, "rating": new_review.rating},
        )
        return new_review


review_service = ReviewService()
