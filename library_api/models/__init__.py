"""Database models."""

from library_api.models.author import Author
from library_api.models.book import Book

__all__ = ["Author", "Book"]
