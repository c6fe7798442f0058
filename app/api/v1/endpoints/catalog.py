from typing import List
from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.db.session import get_session
from app.utils.deps import PaginationParams, get_pagination_params

from app.schemas.author_schema import AuthorCreate, AuthorResponse
from app.schemas.genre_schema import GenreCreate, GenreResponse
from app.services.catalog_service import author_service, genre_service


author_router = APIRouter(tags=["Authors"], prefix=f"{settings.API_V1_STR}/authors")
genre_router = APIRouter(tags=["Genres"], prefix=f"{settings.API_V1_STR}/genres")


@author_router.get("", response_model=List[AuthorResponse], summary="List authors")
async def get_authors(
    *,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
):
    return await author_service.list(db=db, skip=pagination.skip, limit=pagination.limit)


@author_router.post(
    "",
    response_model=AuthorResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an author",
)
async def create_author(*, db: AsyncSession = Depends(get_session), author_data: AuthorCreate):
    return await author_service.create(db=db, name=author_data.name)


@genre_router.get("", response_model=List[GenreResponse], summary="List genres")
async def get_genres(
    *,
    db: AsyncSession = Depends(get_session),
    pagination: PaginationParams = Depends(get_pagination_params),
):
    return await genre_service.list(db=db, skip=pagination.skip, limit=pagination.limit)


@genre_router.post(
    "",
    response_model=GenreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a genre",
)
async def create_genre(*, db: AsyncSession = Depends(get_session), genre_data: GenreCreate):
    return await genre_service.create(db=db, name=genre_data.name)
