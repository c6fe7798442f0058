import logging
from typing import Optional, List, Iterable, TypeVar

from app.models.author_model import Author
from app.models.genre_model import Genre
from app.crud.base_crud import BaseRepository

from sqlmodel.ext.asyncio.session import AsyncSession
from sqlmodel import select, func

from app.core.exception_utils import handle_exceptions
from app.core.exceptions import InternalServerError

NamedModel = TypeVar("NamedModel", Author, Genre)


class NamedRepository(BaseRepository[NamedModel]):
    """Repository for a lookup table keyed by a unique `name` (authors, genres)."""

    def __init__(self, model: type[NamedModel]):
        super().__init__(model)
        self._logger = logging.getLogger(
            f"{__name__}.{self.__class__.__name__}.{model.__name__}"
        )

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[NamedModel]:
        """Case-insensitive lookup by name."""
        statement = select(self.model).where(func.lower(self.model.name) == name.lower())
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_by_ids(
        self, db: AsyncSession, *, obj_ids: Iterable[int]
    ) -> List[NamedModel]:
        obj_ids = list(obj_ids)
        if not obj_ids:
            return []
        statement = select(self.model).where(self.model.id.in_(obj_ids))
        result = await db.execute(statement)
        return list(result.scalars().all())

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def get_many(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100
    ) -> List[NamedModel]:
        statement = select(self.model).order_by(self.model.name).offset(skip).limit(limit)
        result = await db.execute(statement)
        return list(result.scalars().all())

    @handle_exceptions(
        default_exception=InternalServerError,
        message="An unexpected database error occurred.",
    )
    async def create(self, db: AsyncSession, *, obj_in: NamedModel) -> NamedModel:
        db.add(obj_in)
        await db.commit()
        await db.refresh(obj_in)
        self._logger.info(f"{self.model.__name__} created: {obj_in.id}")
        return obj_in


author_repository = NamedRepository(Author)
genre_repository = NamedRepository(Genre)
