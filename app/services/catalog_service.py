"""
Authors and genres.

Both are simple named lookups a book links to; they share one service
class parameterised by repository and display name.
"""

import logging
from typing import Any, List

from sqlmodel.ext.asyncio.session import AsyncSession

from app.crud.catalog_crud import author_repository, genre_repository
from app.models.author_model import Author
from app.models.genre_model import Genre
from app.core.exception_utils import raise_for_status
from app.core.exceptions import ResourceAlreadyExists, ValidationError

logger = logging.getLogger(__name__)


class NamedEntityService:
    def __init__(self, repository: Any, model: type, resource_type: str):
        self.repository = repository
        self.model = model
        self.resource_type = resource_type
        self._logger = logging.getLogger(
            f"{__name__}.{self.__class__.__name__}.{resource_type}"
        )

    async def list(self, db: AsyncSession, *, skip: int = 0, limit: int = 100) -> List[Any]:
        if skip < 0:
            raise ValidationError("Skip parameter must be non-negative")
        if limit <= 0 or limit > 100:
            raise ValidationError("Limit must be between 1 and 100")
        return await self.repository.get_many(db=db, skip=skip, limit=limit)

    async def create(self, db: AsyncSession, *, name: str) -> Any:
        """Create an entry, rejecting names that already exist (case-insensitive)."""
        existing = await self.repository.get_by_name(db=db, name=name)
        raise_for_status(
            condition=existing is not None,
            exception=ResourceAlreadyExists,
            resource_type=self.resource_type,
            detail=f"{self.resource_type} '{name}' already exists.",
        )
        created = await self.repository.create(db=db, obj_in=self.model(name=name))
        self._logger.info(f"New {self.resource_type.lower()} created: {created.name}")
        return created


author_service = NamedEntityService(author_repository, Author, "Author")
genre_service = NamedEntityService(genre_repository, Genre, "Genre")
