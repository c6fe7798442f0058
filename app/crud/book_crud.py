import logging
from typing import Optional, List, Dict, Any, Iterable, Set

from app.models.book_model import Book
from app.crud.base_crud import BaseRepository

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, func
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import (
    ConcurrencyConflict,
    IntegrityConflict,
    InternalServerError,
)


logger = logging.getLogger(__name__)

# Columns a caller may never write through `update`.
PROTECTED_FIELDS = frozenset({"id", "version", "created_at", "updated_at"})


class BookRepository(BaseRepository[Book]):
    """Repository for all database operations related to the Book model."""

    def __init__(self):
        super().__init__(Book)
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get(self, db: AsyncSession, *, obj_id: int) -> Optional[Book]:
        """Retrieves a book by its ID."""
        statement = select(self.model).where(self.model.id == obj_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_with_reviews(
        self, db: AsyncSession, *, obj_id: int
    ) -> Optional[Book]:
        """
        Retrieves a book with its full review collection loaded in the same
        round trip, so aggregates can be computed without a count query.
        """
        statement = (
            select(self.model)
            .where(self.model.id == obj_id)
            .options(selectinload(self.model.reviews))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_details(self, db: AsyncSession, *, obj_id: int) -> Optional[Book]:
        """Retrieves a book with its authors and genres eagerly loaded."""
        statement = (
            select(self.model)
            .where(self.model.id == obj_id)
            .options(
                selectinload(self.model.authors),
                selectinload(self.model.genres),
            )
        )
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_many(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Book]:
        """Retrieve books with their authors and genres, ordered by id."""
        statement = (
            select(self.model)
            .options(
                selectinload(self.model.authors),
                selectinload(self.model.genres),
            )
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
    async def create(self, db: AsyncSession, *, obj_in: Book) -> Book:
        """Insert a pre-constructed Book."""
        created = await self.create_many(db=db, objs_in=[obj_in])
        return created[0]

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create_many(self, db: AsyncSession, *, objs_in: List[Book]) -> List[Book]:
        """Insert several books in a single transaction."""
        db.add_all(objs_in)
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            self._logger.warning(
                "Book insert rejected by the database",
                extra={"book_ids": [book.id for book in objs_in]},
            )
            raise IntegrityConflict(
                detail="The database rejected the new book(s).", resource_type="Book"
            ) from e

        for book in objs_in:
            await db.refresh(book)

        self._logger.info(f"Books created: {[book.id for book in objs_in]}")
        return objs_in

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def update(
        self,
        db: AsyncSession,
        *,
        obj_id: int,
        fields_to_update: Dict[str, Any],
        expected_version: Optional[int] = None,
    ) -> int:
        """
        Write `fields_to_update` to the row and bump its version, in a single
        conditional UPDATE.

        With `expected_version` the statement only matches a row still at
        that version. No matched row raises ConcurrencyConflict; the caller
        decides whether that means "deleted" or "modified". Returns the new
        version.
        """
        values = {
            field: value
            for field, value in fields_to_update.items()
            if field not in PROTECTED_FIELDS
        }

        conditions = [self.model.id == obj_id]
        if expected_version is not None:
            conditions.append(self.model.version == expected_version)

        statement = (
            update(self.model)
            .where(*conditions)
            .values(
                **values,
                version=self.model.version + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(statement)

        if result.rowcount == 0:
            await db.rollback()
            self._logger.warning(
                "Versioned update matched no row",
                extra={"book_id": obj_id, "expected_version": expected_version},
            )
            raise ConcurrencyConflict(
                detail=f"Book {obj_id} was changed by another request.",
                resource_type="Book",
            )

        await db.commit()

        new_version = (
            await db.execute(
                select(self.model.version).where(self.model.id == obj_id)
            )
        ).scalar_one()

        self._logger.info(
            f"Book fields updated for {obj_id}: {list(values.keys())}",
            extra={"book_id": obj_id, "version": new_version},
        )
        return new_version

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def delete(self, db: AsyncSession, *, db_obj: Book) -> None:
        """Delete a loaded book; its reviews and join rows go with it."""
        book_id = db_obj.id
        await db.delete(db_obj)
        await db.commit()
        self._logger.info(f"Book hard deleted: {book_id}")

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def exists(self, db: AsyncSession, *, obj_id: int) -> bool:
        """Check if a book exists by id"""
        statement = (
            select(func.count()).select_from(self.model).where(self.model.id == obj_id)
        )
        result = await db.execute(statement)
        return result.scalar_one() > 0

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def existing_ids(self, db: AsyncSession, *, obj_ids: Iterable[int]) -> Set[int]:
        """Return the subset of `obj_ids` already present in the table."""
        obj_ids = list(obj_ids)
        if not obj_ids:
            return set()
        statement = select(self.model.id).where(self.model.id.in_(obj_ids))
        result = await db.execute(statement)
        return set(result.scalars().all())


book_repository = BookRepository()
