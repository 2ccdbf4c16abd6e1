"""Shared read path for resource services."""

import json
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.cache import TagAwareCache
from library_api.core.config import get_settings
from library_api.core.database import fits_integer_column
from library_api.core.exceptions import NotFoundError
from library_api.services.pagination import PageRequest, paginate_query
from library_api.services.shaping import RepresentationContext, attach_links, shape


class ResourceService:
    """Base class wiring a model to the store, the cache and response shaping.

    Subclasses set ``model``, ``resource_name`` (used in 404 messages),
    ``list_operation`` (the cache key prefix) and ``list_tag``.
    """

    model: type
    resource_name: str
    list_operation: str
    list_tag: str

    def __init__(
        self,
        db: AsyncSession,
        cache: TagAwareCache,
        context: RepresentationContext,
        ttl_seconds: int | None = None,
    ) -> None:
        self.db = db
        self.cache = cache
        self.context = context
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else get_settings().cache_ttl_seconds

    def cache_key(self, page_request: PageRequest) -> str:
        """Key of one cached list page, e.g. ``getAllBooks-2-3-1.0``."""
        return (
            f"{self.list_operation}-{page_request.page}-{page_request.limit}"
            f"-{self.context.version}"
        )

    async def get_page(self, page_request: PageRequest) -> list[dict[str, Any]]:
        """Return one page of the collection, served from the cache when possible."""

        async def compute() -> str:
            if page_request.is_beyond_store:
                return "[]"
            stmt = paginate_query(select(self.model), self.model, page_request)
            result = await self.db.execute(stmt)
            return json.dumps([self.shape(entity) for entity in result.scalars().all()])

        body = await self.cache.get_or_compute(
            self.cache_key(page_request),
            self.list_tag,
            self.ttl_seconds,
            compute,
        )
        return [self.with_links(document) for document in json.loads(body)]

    async def get_by_id(self, entity_id: int) -> dict[str, Any]:
        """Return one entity, always read fresh from the store."""
        entity = await self.find(entity_id)
        return self.with_links(self.shape(entity))

    async def find(self, entity_id: int):
        """Load an entity or raise NotFoundError."""
        if not fits_integer_column(entity_id):
            raise NotFoundError(self.resource_name, entity_id)
        result = await self.db.execute(select(self.model).where(self.model.id == entity_id))
        entity = result.scalar_one_or_none()
        if entity is None:
            raise NotFoundError(self.resource_name, entity_id)
        return entity

    def shape(self, entity) -> dict[str, Any]:
        return shape(entity, self.context.group, self.context.version)

    def with_links(self, document: dict[str, Any]) -> dict[str, Any]:
        return attach_links(document, self.model, self.context)
