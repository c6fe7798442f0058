import pytest
from decimal import Decimal
from unittest.mock import patch

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.crud.book_crud import book_repository
from app.core.exceptions import (
    ConcurrencyConflict,
    IntegrityConflict,
    InternalServerError,
    ResourceNotFound,
)
from app.models.book_link_model import BookAuthor
from app.models.book_model import Book
from app.models.review_model import BookReview
from app.services.rating_service import RatingService

# Mark all tests in this file as async
pytestmark = pytest.mark.asyncio


# ==================== CREATE TESTS ====================


async def test_create_book_success(db_session: AsyncSession, sample_author):
    book = Book(title="Tender Is the Night", price=Decimal("10.50"))
    book.authors = [sample_author]

    new_book = await book_repository.create(db=db_session, obj_in=book)

    assert new_book.id is not None
    assert new_book.version == 1
    assert new_book.review_count == 0
    assert new_book.average_rating is None
    assert new_book.created_at is not None


async def test_create_with_existing_id_raises_integrity_conflict(
    db_session: AsyncSession, make_book, session_factory
):
    await make_book(id=7)

    async with session_factory() as other_session:
        with pytest.raises(IntegrityConflict):
            await book_repository.create(
                db=other_session, obj_in=Book(id=7, title="Duplicate")
            )


async def test_create_many_is_all_or_nothing(
    db_session: AsyncSession, make_book, session_factory
):
    await make_book(id=3)

    async with session_factory() as other_session:
        with pytest.raises(IntegrityConflict):
            await book_repository.create_many(
                db=other_session,
                objs_in=[Book(id=20, title="Fresh"), Book(id=3, title="Clash")],
            )

    assert await book_repository.exists(db=db_session, obj_id=20) is False


async def test_create_database_error_handling(db_session: AsyncSession):
    with patch.object(db_session, "commit", side_effect=Exception("Database error")):
        with pytest.raises(InternalServerError):
            await book_repository.create(db=db_session, obj_in=Book(title="Broken"))


# ==================== GET TESTS ====================


async def test_get_with_reviews_loads_every_review(db_session: AsyncSession, make_book):
    book = await make_book(ratings=[3, 5, 4])

    loaded = await book_repository.get_with_reviews(db=db_session, obj_id=book.id)

    assert sorted(review.rating for review in loaded.reviews) == [3, 4, 5]


async def test_get_details_loads_names(
    db_session: AsyncSession, make_book, sample_author, sample_genre
):
    book = await make_book(authors=[sample_author], genres=[sample_genre])

    loaded = await book_repository.get_details(db=db_session, obj_id=book.id)

    assert loaded.author_names == ["F. Scott Fitzgerald"]
    assert loaded.genre_names == ["Classic"]


async def test_get_missing_returns_none(db_session: AsyncSession):
    assert await book_repository.get(db=db_session, obj_id=12345) is None
    assert await book_repository.exists(db=db_session, obj_id=12345) is False


async def test_get_many_orders_by_id(db_session: AsyncSession, make_book):
    await make_book(id=9, title="Nine")
    await make_book(id=2, title="Two")

    books = await book_repository.get_many(db=db_session)

    assert [book.id for book in books] == [2, 9]


async def test_existing_ids(db_session: AsyncSession, make_book):
    await make_book(id=4)
    assert await book_repository.existing_ids(db=db_session, obj_ids=[4, 5]) == {4}
    assert await book_repository.existing_ids(db=db_session, obj_ids=[]) == set()


# ==================== UPDATE TESTS ====================


async def test_update_bumps_version(db_session: AsyncSession, make_book):
    book = await make_book()

    new_version = await book_repository.update(
        db=db_session,
        obj_id=book.id,
        fields_to_update={"title": "Renamed", "version": 99, "id": 500},
        expected_version=1,
    )

    assert new_version == 2
    stored = await book_repository.get(db=db_session, obj_id=book.id)
    await db_session.refresh(stored)
    assert stored.title == "Renamed"
    assert stored.id == book.id


async def test_update_with_stale_version_raises_conflict(
    db_session: AsyncSession, make_book, session_factory
):
    """Two sessions load the same row; the slower writer loses."""
    book = await make_book(ratings=[2, 4], review_count=5)

    async with session_factory() as slow_session:
        stale = await book_repository.get_with_reviews(db=slow_session, obj_id=book.id)
        stale_version = stale.version

        async with session_factory() as fast_session:
            await RatingService().increment_review_count(db=fast_session, book_id=book.id)

        with pytest.raises(ConcurrencyConflict):
            await book_repository.update(
                db=slow_session,
                obj_id=book.id,
                fields_to_update={"review_count": 6},
                expected_version=stale_version,
            )

    async with session_factory() as check_session:
        stored = await book_repository.get(db=check_session, obj_id=book.id)
        assert stored.review_count == 6
        assert stored.version == 2


async def test_increment_after_concurrent_delete_is_not_found(
    db_session: AsyncSession, make_book, session_factory
):
    """The row is deleted by another session between load and update."""
    book = await make_book(ratings=[3], review_count=1)
    original_update = book_repository.update

    async def delete_then_update(*, db, **kwargs):
        async with session_factory() as other_session:
            loaded = await book_repository.get(db=other_session, obj_id=book.id)
            await book_repository.delete(db=other_session, db_obj=loaded)
        return await original_update(db=db, **kwargs)

    async with session_factory() as session:
        with patch.object(book_repository, "update", new=delete_then_update):
            with pytest.raises(ResourceNotFound):
                await RatingService().increment_review_count(db=session, book_id=book.id)

    async with session_factory() as check_session:
        assert await book_repository.exists(db=check_session, obj_id=book.id) is False


async def test_increment_deleted_after_commit_is_not_found(
    db_session: AsyncSession, make_book, session_factory
):
    """The increment commits, then another session deletes the row before it is read back."""
    book = await make_book(ratings=[4], review_count=2)
    original_update = book_repository.update

    async def update_then_delete(*, db, **kwargs):
        version = await original_update(db=db, **kwargs)
        async with session_factory() as other_session:
            loaded = await book_repository.get(db=other_session, obj_id=book.id)
            await book_repository.delete(db=other_session, db_obj=loaded)
        return version

    async with session_factory() as session:
        with patch.object(book_repository, "update", new=update_then_delete):
            with pytest.raises(ResourceNotFound):
                await RatingService().increment_review_count(db=session, book_id=book.id)


async def test_update_missing_row_raises_conflict(db_session: AsyncSession):
    with pytest.raises(ConcurrencyConflict):
        await book_repository.update(
            db=db_session, obj_id=31337, fields_to_update={"title": "Ghost"}
        )


# ==================== DELETE TESTS ====================


async def test_delete_cascades_to_reviews_and_links(
    db_session: AsyncSession, make_book, sample_author, session_factory
):
    book = await make_book(ratings=[5], authors=[sample_author])
    book_id = book.id

    async with session_factory() as session:
        loaded = await book_repository.get(db=session, obj_id=book_id)
        await book_repository.delete(db=session, db_obj=loaded)

    async with session_factory() as session:
        assert await book_repository.exists(db=session, obj_id=book_id) is False
        reviews = (
            await session.execute(select(BookReview).where(BookReview.book_id == book_id))
        ).scalars().all()
        links = (
            await session.execute(select(BookAuthor).where(BookAuthor.book_id == book_id))
        ).scalars().all()
        assert reviews == []
        assert links == []
