"""
Rating Service

Maintains the denormalized review aggregates stored on a Book:
- review_count: a counter bumped once per increment request
- average_rating: the mean of the ratings of the book's reviews

The counter is advanced independently of review rows, so it can drift from
the number of rows in book_reviews; clients record a review and then call
the increment endpoint.
"""

import logging
from typing import Iterable, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from app.crud.book_crud import book_repository
from app.models.book_model import Book
from app.core.exception_utils import raise_for_status
from app.core.exceptions import ConcurrencyConflict, ResourceNotFound

logger = logging.getLogger(__name__)


def mean_rating(ratings: Iterable[int]) -> Optional[float]:
    """Unweighted mean of `ratings`, or None when there are none."""
    ratings = [float(rating) for rating in ratings]
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


class RatingService:
    def __init__(self):
        self.book_repository = book_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def increment_review_count(self, db: AsyncSession, *, book_id: int) -> Book:
        """
        Bump the book's review counter by one and recompute its average
        rating from every review currently attached to it.

        The write is checked against the version the book was loaded at. If
        another writer got there first the book is looked up again: gone
        means ResourceNotFound, still there means ConcurrencyConflict. The
        increment is never retried here.
        """
        book = await self.book_repository.get_with_reviews(db=db, obj_id=book_id)
        raise_for_status(
            condition=book is None,
            exception=ResourceNotFound,
            resource_type="Book",
            detail=f"Book with id {book_id} not found.",
        )

        fields_to_update = {"review_count": book.review_count + 1}
        average = mean_rating(review.rating for review in book.reviews)
        if average is not None:
            fields_to_update["average_rating"] = average

        try:
            await self.book_repository.update(
                db=db,
                obj_id=book_id,
                fields_to_update=fields_to_update,
                expected_version=book.version,
            )
        except ConcurrencyConflict:
            if not await self.book_repository.exists(db=db, obj_id=book_id):
                self._logger.error(
                    f"Concurrency exception on incrementing review count for book {book_id}, but book does not exist",
                    extra={"operation": "increment_review_count", "book_id": book_id},
                )
                raise ResourceNotFound(
                    detail=f"Book with id {book_id} not found.", resource_type="Book"
                )
            self._logger.error(
                f"Concurrency exception on incrementing review count for book {book_id}",
                extra={"operation": "increment_review_count", "book_id": book_id},
            )
            raise

        book = await self.book_repository.get_with_reviews(db=db, obj_id=book_id)
        raise_for_status(
            condition=book is None,
            exception=ResourceNotFound,
            resource_type="Book",
            detail=f"Book with id {book_id} not found.",
        )
        self._logger.info(
            f"Review count for book {book_id} incremented to {book.review_count}",
            extra={
                "operation": "increment_review_count",
                "book_id": book_id,
                "average_rating": book.average_rating,
            },
        )
        return book


rating_service = RatingService()
