# app/models/genre_model.py
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import SQLModel, Field, Relationship

from app.models.book_link_model import BookGenre

if TYPE_CHECKING:
    from app.models.book_model import Book


class GenreBase(SQLModel):
    name: str = Field(
        min_length=1,
        max_length=100,
        unique=True,
        index=True,
        description="Genre name",
        schema_extra={"example": "Classic"},
    )


class Genre(GenreBase, table=True):
    __tablename__ = "genres"

    id: Optional[int] = Field(default=None, primary_key=True)

    books: List["Book"] = Relationship(back_populates="genres", link_model=BookGenre)

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"
