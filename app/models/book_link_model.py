# app/models/book_link_model.py
"""
Association models.

This module defines the many-to-many join rows between books and their
authors and genres.
"""

from sqlmodel import SQLModel, Field
from sqlalchemy import Index


class BookAuthor(SQLModel, table=True):
    __tablename__ = "book_authors"
    __table_args__ = (Index("idx_book_author_author_id", "author_id"),)

    book_id: int = Field(
        foreign_key="books.id", primary_key=True, ondelete="CASCADE", description="Book ID"
    )
    author_id: int = Field(
        foreign_key="authors.id", primary_key=True, ondelete="CASCADE", description="Author ID"
    )

    def __repr__(self) -> str:
        return f"<BookAuthor(book_id={self.book_id}, author_id={self.author_id})>"


class BookGenre(SQLModel, table=True):
    __tablename__ = "book_genres"
    __table_args__ = (Index("idx_book_genre_genre_id", "genre_id"),)

    book_id: int = Field(
        foreign_key="books.id", primary_key=True, ondelete="CASCADE", description="Book ID"
    )
    genre_id: int = Field(
        foreign_key="genres.id", primary_key=True, ondelete="CASCADE", description="Genre ID"
    )

    def __repr__(self) -> str:
        return f"<BookGenre(book_id={self.book_id}, genre_id={self.genre_id})>"
