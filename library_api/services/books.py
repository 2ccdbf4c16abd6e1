"""Book service."""

import logging
from typing import Any

from sqlalchemy import select

from library_api.api.schemas import BookPayload
from library_api.core.cache import BOOKS_TAG
from library_api.core.database import fits_integer_column
from library_api.models import Author, Book
from library_api.services.base import ResourceService

logger = logging.getLogger(__name__)


class BookService(ResourceService):
    """Create, read, update and delete books."""

    model = Book
    resource_name = "Book"
    list_operation = "getAllBooks"
    list_tag = BOOKS_TAG

    async def create(self, payload: BookPayload) -> tuple[dict[str, Any], str]:
        """Persist a new book and return its representation and location."""
        book = Book(
            title=payload.title,
            cover_text=payload.cover_text,
            comment=payload.comment,
            author=await self._find_author(payload.id_author),
        )
        self.db.add(book)
        await self.db.commit()
        self.cache.invalidate_tags(BOOKS_TAG)
        logger.info(f"Created book {book.id}")

        location = self.context.url_for("book_detail", book_id=book.id)
        return self.with_links(self.shape(book)), location

    async def update(self, book_id: int, payload: BookPayload) -> None:
        """Replace the title, cover text and author of a book."""
        book = await self.find(book_id)
        book.title = payload.title
        book.cover_text = payload.cover_text
        book.author = await self._find_author(payload.id_author)
        await self.db.commit()
        self.cache.invalidate_tags(BOOKS_TAG)
        logger.info(f"Updated book {book_id}")

    async def delete(self, book_id: int) -> None:
        """Delete a book."""
        book = await self.find(book_id)
        self.cache.invalidate_tags(BOOKS_TAG)
        await self.db.delete(book)
        await self.db.commit()
        # Drop pages a concurrent reader may have cached before the commit
        self.cache.invalidate_tags(BOOKS_TAG)
        logger.info(f"Deleted book {book_id}")

    async def _find_author(self, author_id: int | None) -> Author | None:
        """Resolve an author id; an unknown id leaves the book without an author."""
        if author_id is None:
            return None
        author = None
        if fits_integer_column(author_id):
            result = await self.db.execute(select(Author).where(Author.id == author_id))
            author = result.scalar_one_or_none()
        if author is None:
            logger.info(f"Author {author_id} not found, book left without author")
        return author
