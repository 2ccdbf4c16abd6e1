"""Author API routes."""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from library_api.api.dependencies import get_author_service
from library_api.api.schemas import AuthorPayload
from library_api.core.security import ROLE_ADMIN, Caller, require_role
from library_api.services.authors import AuthorService
from library_api.services.pagination import PageRequest, get_page_request

router = APIRouter(prefix="/authors", tags=["authors"])


@router.get("", name="author_list", response_class=JSONResponse)
async def list_authors(
    page_request: PageRequest = Depends(get_page_request),
    service: AuthorService = Depends(get_author_service),
) -> JSONResponse:
    """List authors, one page at a time."""
    return JSONResponse(await service.get_page(page_request))


@router.get("/{author_id}", name="author_detail", response_class=JSONResponse)
async def get_author(
    author_id: int,
    service: AuthorService = Depends(get_author_service),
) -> JSONResponse:
    """Get a specific author by ID."""
    return JSONResponse(await service.get_by_id(author_id))


@router.post(
    "",
    name="author_create",
    status_code=status.HTTP_201_CREATED,
    response_class=JSONResponse,
)
async def create_author(
    author_data: AuthorPayload,
    _: Caller = Depends(
        require_role(ROLE_ADMIN, "You do not have sufficient rights to create an author")
    ),
    service: AuthorService = Depends(get_author_service),
) -> JSONResponse:
    """Create a new author."""
    document, location = await service.create(author_data)
    return JSONResponse(
        document,
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location},
    )


@router.put("/{author_id}", name="author_update", status_code=status.HTTP_204_NO_CONTENT)
async def update_author(
    author_id: int,
    author_data: AuthorPayload,
    _: Caller = Depends(
        require_role(ROLE_ADMIN, "You do not have sufficient rights to edit an author")
    ),
    service: AuthorService = Depends(get_author_service),
) -> Response:
    """Replace an author's first and last name."""
    await service.update(author_id, author_data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{author_id}", name="author_delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_author(
    author_id: int,
    _: Caller = Depends(
        require_role(ROLE_ADMIN, "You do not have sufficient rights to delete an author")
    ),
    service: AuthorService = Depends(get_author_service),
) -> Response:
    """Delete an author together with their books."""
    await service.delete(author_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
