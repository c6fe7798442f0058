import logging

from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.db.session import get_session
from app.utils.deps import PaginationParams, get_pagination_params

from app.schemas.review_schema import ReviewCreate, ReviewResponse
from app.services.review_service import review_service


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["Reviews"],
    prefix=f"{settings.API_V1_STR}/books/{{book_id}}/reviews",
)


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=List[ReviewResponse],
    summary="Get a book's reviews",
)
async def get_book_reviews(
    *,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
    book_id: int,
):
    return await review_service.get_book_reviews(
        db=db, book_id=book_id, skip=pagination.skip, limit=pagination.limit
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ReviewResponse,
    summary="Record a review",
    description="Record a review row. The book's review count is advanced separately via incrementReviewCount.",
)
async def create_review(
    *,
    db: AsyncSession = Depends(get_session),
    book_id: int,
    review_data: ReviewCreate,
):
    return await review_service.create_review(
        db=db, book_id=book_id, review_data=review_data
    )
