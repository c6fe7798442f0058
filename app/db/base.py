# app/db/base.py
"""
Imports every table model so SQLModel.metadata knows about all of them
before create_all runs.
"""

from app.models.author_model import Author  # noqa: F401
from app.models.genre_model import Genre  # noqa: F401
from app.models.book_link_model import BookAuthor, BookGenre  # noqa: F401
from app.models.book_model import Book  # noqa: F401
from app.models.review_model import BookReview  # noqa: F401
