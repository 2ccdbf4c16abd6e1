"""FastAPI dependencies that assemble services per request."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from library_api.core.cache import TagAwareCache, get_cache
from library_api.core.database import get_db
from library_api.core.security import Caller, get_caller
from library_api.core.versioning import get_api_version
from library_api.services.authors import AuthorService
from library_api.services.books import BookService
from library_api.services.shaping import RepresentationContext


def get_representation_context(
    request: Request,
    caller: Caller = Depends(get_caller),
    version: str = Depends(get_api_version),
) -> RepresentationContext:
    """Dependency bundling the active version, the caller and absolute URL generation."""

    def url_for(route_name: str, **params: int) -> str:
        return str(request.url_for(route_name, **params))

    return RepresentationContext(version=version, caller=caller, url_for=url_for)


async def get_book_service(
    db: AsyncSession = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    context: RepresentationContext = Depends(get_representation_context),
) -> BookService:
    """Dependency that provides the book service."""
    return BookService(db, cache, context)


async def get_author_service(
    db: AsyncSession = Depends(get_db),
    cache: TagAwareCache = Depends(get_cache),
    context: RepresentationContext = Depends(get_representation_context),
) -> AuthorService:
    """Dependency that provides the author service."""
    return AuthorService(db, cache, context)
