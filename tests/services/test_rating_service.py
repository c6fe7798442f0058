# tests/services/test_rating_service.py
from decimal import Decimal
from typing import List, Optional

import pytest

from app.core.exceptions import ConcurrencyConflict, ResourceNotFound
from app.models.book_model import Book
from app.models.review_model import BookReview
from app.services.rating_service import RatingService, mean_rating
from tests.mocks.mock_book_repository import FakeBookRepository

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio


def build_book(
    book_id: int,
    ratings: List[int],
    review_count: int = 0,
    average_rating: Optional[float] = None,
    version: int = 1,
) -> Book:
    book = Book(
        id=book_id,
        title=f"Book {book_id}",
        price=Decimal("9.99"),
        review_count=review_count,
        average_rating=average_rating,
        version=version,
    )
    book.reviews = [BookReview(book_id=book_id, rating=rating) for rating in ratings]
    return book


@pytest.fixture
def rating_service() -> RatingService:
    """RatingService backed by a fresh fake repository for each test."""
    service = RatingService()
    service.book_repository = FakeBookRepository(
        [
            build_book(5, [3, 5], review_count=7, average_rating=1.0),
            build_book(6, [], review_count=2, average_rating=4.5),
        ]
    )
    return service


# ==================== mean_rating TESTS ====================


async def test_mean_rating_is_unweighted_average():
    assert mean_rating([3, 5]) == 4.0
    assert mean_rating([1, 2, 2]) == pytest.approx(5 / 3)


async def test_mean_rating_of_nothing_is_none():
    assert mean_rating([]) is None


# ==================== increment_review_count TESTS ====================


async def test_increment_recomputes_average_from_reviews(rating_service: RatingService):
    book = await rating_service.increment_review_count(db=None, book_id=5)

    assert book.review_count == 8
    assert book.average_rating == 4.0
    assert book.version == 2


async def test_increment_without_reviews_keeps_average(rating_service: RatingService):
    book = await rating_service.increment_review_count(db=None, book_id=6)

    assert book.review_count == 3
    assert book.average_rating == 4.5

    call = rating_service.book_repository.update_calls[-1]
    assert "average_rating" not in call["fields"]


async def test_increment_writes_against_loaded_version(rating_service: RatingService):
    await rating_service.increment_review_count(db=None, book_id=5)

    call = rating_service.book_repository.update_calls[-1]
    assert call["expected_version"] == 1
    assert call["fields"] == {"review_count": 8, "average_rating": 4.0}


async def test_increment_missing_book_raises_not_found(rating_service: RatingService):
    with pytest.raises(ResourceNotFound, match="999"):
        await rating_service.increment_review_count(db=None, book_id=999)

    assert rating_service.book_repository.update_calls == []


async def test_increment_non_positive_id_is_not_found(rating_service: RatingService):
    with pytest.raises(ResourceNotFound):
        await rating_service.increment_review_count(db=None, book_id=0)

    assert rating_service.book_repository.update_calls == []


async def test_concurrent_modification_surfaces_conflict(rating_service: RatingService):
    """Another writer bumps the version between load and commit."""
    repo = rating_service.book_repository

    def concurrent_writer(repository: FakeBookRepository) -> None:
        repository.books[5].version += 1

    repo.before_update = concurrent_writer

    with pytest.raises(ConcurrencyConflict):
        await rating_service.increment_review_count(db=None, book_id=5)

    # Only one attempt: conflicts are not retried.
    assert len(repo.update_calls) == 1
    assert repo.books[5].review_count == 7


async def test_concurrent_delete_surfaces_not_found(rating_service: RatingService):
    """The book disappears between load and commit."""
    repo = rating_service.book_repository

    def concurrent_delete(repository: FakeBookRepository) -> None:
        repository.books.pop(5)

    repo.before_update = concurrent_delete

    with pytest.raises(ResourceNotFound):
        await rating_service.increment_review_count(db=None, book_id=5)


async def test_delete_after_commit_surfaces_not_found(rating_service: RatingService):
    """The increment lands, then the book is deleted before it is read back."""
    repo = rating_service.book_repository
    original_update = repo.update

    async def update_then_delete(db, **kwargs):
        version = await original_update(db, **kwargs)
        repo.books.pop(kwargs["obj_id"])
        return version

    repo.update = update_then_delete

    with pytest.raises(ResourceNotFound):
        await rating_service.increment_review_count(db=None, book_id=5)

    assert len(repo.update_calls) == 1
