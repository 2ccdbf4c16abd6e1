"""Author service."""

import logging
from typing import Any

from library_api.api.schemas import AuthorPayload
from library_api.core.cache import AUTHORS_TAG, BOOKS_TAG
from library_api.models import Author
from library_api.services.base import ResourceService

logger = logging.getLogger(__name__)

# Book representations embed their author, so author changes reach both lists
AFFECTED_TAGS = (AUTHORS_TAG, BOOKS_TAG)


class AuthorService(ResourceService):
    """Create, read, update and delete authors."""

    model = Author
    resource_name = "Author"
    list_operation = "getAllAuthors"
    list_tag = AUTHORS_TAG

    async def create(self, payload: AuthorPayload) -> tuple[dict[str, Any], str]:
        """Persist a new author and return its representation and location."""
        author = Author(first_name=payload.first_name, last_name=payload.last_name)
        self.db.add(author)
        await self.db.commit()
        self.cache.invalidate_tags(AUTHORS_TAG)
        logger.info(f"Created author {author.id}")

        location = self.context.url_for("author_detail", author_id=author.id)
        return self.with_links(self.shape(author)), location

    async def update(self, author_id: int, payload: AuthorPayload) -> None:
        """Replace the first and last name of an author."""
        author = await self.find(author_id)
        author.first_name = payload.first_name
        author.last_name = payload.last_name
        await self.db.commit()
        self.cache.invalidate_tags(*AFFECTED_TAGS)
        logger.info(f"Updated author {author_id}")

    async def delete(self, author_id: int) -> None:
        """Delete an author; the store cascades the delete to their books."""
        author = await self.find(author_id)
        self.cache.invalidate_tags(*AFFECTED_TAGS)
        await self.db.delete(author)
        await self.db.commit()
        self.cache.invalidate_tags(*AFFECTED_TAGS)
        logger.info(f"Deleted author {author_id} and their books")
