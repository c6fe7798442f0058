import logging

from typing import List
from fastapi import APIRouter, Depends, Request, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.db.session import get_session
from app.utils.deps import PaginationParams, get_pagination_params

from app.schemas.book_schema import (
    BookCreate,
    BookDetailResponse,
    BookReplace,
    BookResponse,
    BookWithReviewsResponse,
)
from app.services.book_service import book_service
from app.services.rating_service import rating_service


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Books"],
    prefix=f"{settings.API_V1_STR}/books",
)


@router.patch(
    "/{book_id}/incrementReviewCount",
    response_model=BookWithReviewsResponse,
    status_code=status.HTTP_200_OK,
    summary="Increment a book's review count",
    description="Bump the review counter and recompute the average rating from the book's reviews.",
)
async def increment_review_count(*, db: AsyncSession = Depends(get_session), book_id: int):
    """
    Increment the stored review count by one and recompute the average
    rating from every review currently attached to the book.

    Returns 404 if the book does not exist (or vanished mid-update) and a
    server error if another request modified it concurrently.
    """
    return await rating_service.increment_review_count(db=db, book_id=book_id)


@router.get(
    "",
    response_model=List[BookDetailResponse],
    status_code=status.HTTP_200_OK,
    summary="Get all books",
    description="List books with author and genre names flattened to strings.",
)
async def get_books(
    *,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
):
    return await book_service.get_books(
        db=db, skip=pagination.skip, limit=pagination.limit
    )


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get book by id",
)
async def get_book(*, db: AsyncSession = Depends(get_session), book_id: int):
    """Get book by its ID"""
    return await book_service.get_book_by_id(db=db, book_id=book_id)


@router.put(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace a book",
    description="Overwrite every field of a book. The body id must match the path id.",
)
async def replace_book(
    *,
    db: AsyncSession = Depends(get_session),
    book_id: int,
    book_data: BookReplace,
):
    """
    Replace a book.

    - **id** must equal the id in the path, otherwise 400
    - **version**, when sent, must match the stored version
    """
    await book_service.replace_book(db=db, book_id=book_id, book_data=book_data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "",
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
)
async def create_book(
    *,
    db: AsyncSession = Depends(get_session),
    request: Request,
    response: Response,
    book_data: BookCreate,
):
    """
    Create a new book.
    - **id**: optional; a clash with an existing book returns 409
    - **title**: The title of the book (required)
    - **author_ids** / **genre_ids**: existing authors and genres to link
    """
    book = await book_service.create_book(db=db, book_data=book_data)
    response.headers["Location"] = str(request.url_for("get_book", book_id=book.id))
    return book


@router.post(
    "/multiple",
    response_model=List[BookResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create several books",
    description="Create a batch of books in one transaction.",
)
async def create_books(
    *,
    db: AsyncSession = Depends(get_session),
    books_data: List[BookCreate],
):
    return await book_service.create_books(db=db, books_data=books_data)


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a book",
)
async def delete_book(*, db: AsyncSession = Depends(get_session), book_id: int):
    """
    Delete a book.

    This will also delete all associated reviews.
    """
    await book_service.delete_book(db=db, book_id=book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
