# app/models/author_model.py
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import SQLModel, Field, Relationship

from app.models.book_link_model import BookAuthor

if TYPE_CHECKING:
    from app.models.book_model import Book


class AuthorBase(SQLModel):
    name: str = Field(
        min_length=1,
        max_length=255,
        unique=True,
        index=True,
        description="Full name of the author",
        schema_extra={"example": "F. Scott Fitzgerald"},
    )


class Author(AuthorBase, table=True):
    __tablename__ = "authors"

    id: Optional[int] = Field(default=None, primary_key=True)

    books: List["Book"] = Relationship(back_populates="authors", link_model=BookAuthor)

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"
