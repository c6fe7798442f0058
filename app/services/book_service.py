import logging
from collections import Counter
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession
from app.crud.book_crud import book_repository
from app.crud.catalog_crud import author_repository, genre_repository
from app.schemas.book_schema import (
    BookCreate,
    BookReplace,
    BookDetailResponse,
    BookResponse,
)
from app.models.book_model import Book

from app.core.exception_utils import raise_for_status
from app.core.exceptions import (
    BadRequestException,
    ConcurrencyConflict,
    IntegrityConflict,
    ResourceAlreadyExists,
    ResourceNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)


class BookService:
    """
    Book catalog service.

    Sits between the routers and the repositories: validates identifiers,
    resolves author and genre links, and turns database-level failures
    into NotFound / Conflict signals after re-checking existence.
    """

    def __init__(self):
        self.book_repository = book_repository
        self.author_repository = author_repository
        self.genre_repository = genre_repository
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def to_detail(book: Book) -> BookDetailResponse:
        """Flatten a book's authors and genres into name lists."""
        base = BookResponse.model_validate(book).model_dump()
        return BookDetailResponse(
            **base,
            authors=book.author_names,
            genres=book.genre_names,
        )

    # ======= READ OPERATIONS =======
    async def get_books(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100
    ) -> List[BookDetailResponse]:
        """Get all books with author and genre names."""
        if skip < 0:
            raise ValidationError("Skip parameter must be non-negative")
        if limit <= 0 or limit > 100:
            raise ValidationError("Limit must be between 1 and 100")

        self._logger.info("Getting all books", extra={"skip": skip, "limit": limit})
        books = await self.book_repository.get_many(db=db, skip=skip, limit=limit)
        return [self.to_detail(book) for book in books]

    async def get_book_by_id(self, db: AsyncSession, *, book_id: int) -> BookDetailResponse:
        """Get Book by its ID"""
        if book_id <= 0:
            raise ValidationError("Book ID must be a positive integer")

        self._logger.info(f"Getting book with id {book_id}")
        book = await self.book_repository.get_details(db=db, obj_id=book_id)
        if book is None:
            self._logger.warning(
                f"Book with id {book_id} not found",
                extra={"operation": "get_book", "book_id": book_id},
            )
            raise ResourceNotFound(
                detail=f"Book with id {book_id} not found.", resource_type="Book"
            )
        return self.to_detail(book)

    # ======= WRITE OPERATIONS =======
    async def create_book(self, db: AsyncSession, *, book_data: BookCreate) -> Book:
        """Create a book"""
        self._logger.info("Creating new book", extra={"book_id": book_data.id})
        book = await self._build_book(db, book_data)

        try:
            return await self.book_repository.create(db=db, obj_in=book)
        except IntegrityConflict:
            if book_data.id is not None and await self.book_repository.exists(
                db=db, obj_id=book_data.id
            ):
                self._logger.warning(
                    f"Attempted to create a book, but a book with id {book_data.id} already exists",
                    extra={"operation": "create_book", "book_id": book_data.id},
                )
                raise ResourceAlreadyExists(
                    detail=f"Book with id {book_data.id} already exists.",
                    resource_type="Book",
                )
            raise

    async def create_books(
        self, db: AsyncSession, *, books_data: List[BookCreate]
    ) -> List[Book]:
        """Create several books atomically."""
        raise_for_status(
            condition=not books_data,
            exception=BadRequestException,
            detail="At least one book must be provided.",
        )

        requested_ids = [data.id for data in books_data if data.id is not None]
        repeated = sorted(i for i, n in Counter(requested_ids).items() if n > 1)
        raise_for_status(
            condition=bool(repeated),
            exception=BadRequestException,
            detail=f"Book ids repeated in request: {repeated}",
            resource_type="Book",
        )

        self._logger.info(f"Creating {len(books_data)} new books")
        books = [await self._build_book(db, data) for data in books_data]

        try:
            return await self.book_repository.create_many(db=db, objs_in=books)
        except IntegrityConflict:
            clashing = await self.book_repository.existing_ids(
                db=db, obj_ids=requested_ids
            )
            if clashing:
                self._logger.warning(
                    "Attempted to create books, but one or more books with the same id already exists",
                    extra={"operation": "create_books", "book_ids": sorted(clashing)},
                )
                raise ResourceAlreadyExists(
                    detail=f"Books with ids {sorted(clashing)} already exist.",
                    resource_type="Book",
                )
            raise

    async def replace_book(
        self, db: AsyncSession, *, book_id: int, book_data: BookReplace
    ) -> None:
        """
        Overwrite every scalar field of a book.

        The path id and body id must agree; nothing touches the store
        otherwise.
        """
        if book_id != book_data.id:
            self._logger.warning(
                f"Mismatched book id in PUT request. Expected {book_id}, but got {book_data.id}",
                extra={"operation": "replace_book", "book_id": book_id},
            )
            raise BadRequestException(
                detail=f"Book id in path ({book_id}) does not match body ({book_data.id}).",
                resource_type="Book",
            )

        fields_to_update = book_data.model_dump(exclude={"id", "version"})

        try:
            self._logger.info(f"Updating book with id {book_id}")
            await self.book_repository.update(
                db=db,
                obj_id=book_id,
                fields_to_update=fields_to_update,
                expected_version=book_data.version,
            )
        except ConcurrencyConflict:
            if not await self.book_repository.exists(db=db, obj_id=book_id):
                self._logger.error(
                    f"Concurrency exception on updating book with id {book_id}, but book does not exist",
                    extra={"operation": "replace_book", "book_id": book_id},
                )
                raise ResourceNotFound(
                    detail=f"Book with id {book_id} not found.", resource_type="Book"
                )
            self._logger.error(
                f"Concurrency exception on updating book with id {book_id}",
                extra={"operation": "replace_book", "book_id": book_id},
            )
            raise

    async def delete_book(self, db: AsyncSession, *, book_id: int) -> None:
        """Hard deleting a book by its ID"""
        if book_id <= 0:
            raise ValidationError("Book ID must be a positive integer")

        self._logger.info(f"Deleting book with id {book_id}")
        book = await self.book_repository.get(db=db, obj_id=book_id)
        if book is None:
            self._logger.warning(
                f"Book with id {book_id} not found",
                extra={"operation": "delete_book", "book_id": book_id},
            )
            raise ResourceNotFound(
                detail=f"Book with id {book_id} not found.", resource_type="Book"
            )

        await self.book_repository.delete(db=db, db_obj=book)

    # Helper Functions
    async def _build_book(self, db: AsyncSession, book_data: BookCreate) -> Book:
        """Turn a create payload into a Book with its author/genre links."""
        authors = await self.author_repository.get_by_ids(db=db, obj_ids=book_data.author_ids)
        missing_authors = set(book_data.author_ids) - {a.id for a in authors}
        raise_for_status(
            condition=bool(missing_authors),
            exception=BadRequestException,
            detail=f"Unknown author ids: {sorted(missing_authors)}",
            resource_type="Author",
        )

        genres = await self.genre_repository.get_by_ids(db=db, obj_ids=book_data.genre_ids)
        missing_genres = set(book_data.genre_ids) - {g.id for g in genres}
        raise_for_status(
            condition=bool(missing_genres),
            exception=BadRequestException,
            detail=f"Unknown genre ids: {sorted(missing_genres)}",
            resource_type="Genre",
        )

        book = Book(**book_data.model_dump(exclude={"author_ids", "genre_ids"}))
        book.authors = authors
        book.genres = genres
        return book


book_service = BookService()
