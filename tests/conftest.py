from decimal import Decimal
from typing import AsyncGenerator, Callable, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from app.db import base  # noqa: F401
from app.db.session import get_session
from app.main import app
from app.models.author_model import Author
from app.models.book_model import Book
from app.models.genre_model import Genre
from app.models.review_model import BookReview

# --- Test Database Setup ---


@pytest_asyncio.fixture
async def test_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh SQLite file per test. Each session gets its own connection, so
    two sessions can race each other like two requests would.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an HTTP client for API testing, overriding the DB dependency
    with a new session per request.
    """

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client

    app.dependency_overrides.clear()


# --- Test Data Fixtures ---


@pytest.fixture
def make_book(db_session: AsyncSession) -> Callable:
    """Factory inserting a book, optionally with reviews, authors and genres."""

    async def _make_book(
        *,
        id: Optional[int] = None,
        title: str = "The Great Gatsby",
        ratings: Optional[List[int]] = None,
        review_count: int = 0,
        average_rating: Optional[float] = None,
        authors: Optional[List[Author]] = None,
        genres: Optional[List[Genre]] = None,
    ) -> Book:
        book = Book(
            id=id,
            title=title,
            description="A novel of the Jazz Age.",
            price=Decimal("12.99"),
            cover_image_url="https://covers.example.com/gatsby.jpg",
            review_count=review_count,
            average_rating=average_rating,
        )
        book.authors = authors or []
        book.genres = genres or []
        db_session.add(book)
        await db_session.commit()
        await db_session.refresh(book)

        for rating in ratings or []:
            db_session.add(BookReview(book_id=book.id, rating=rating))
        await db_session.commit()

        return book

    return _make_book


@pytest_asyncio.fixture
async def sample_author(db_session: AsyncSession) -> Author:
    author = Author(name="F. Scott Fitzgerald")
    db_session.add(author)
    await db_session.commit()
    await db_session.refresh(author)
    return author


@pytest_asyncio.fixture
async def sample_genre(db_session: AsyncSession) -> Genre:
    genre = Genre(name="Classic")
    db_session.add(genre)
    await db_session.commit()
    await db_session.refresh(genre)
    return genre
