"""Book API routes."""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from library_api.api.dependencies import get_book_service
from library_api.api.schemas import BookPayload
from library_api.core.security import ROLE_ADMIN, Caller, require_role
from library_api.services.books import BookService
from library_api.services.pagination import PageRequest, get_page_request

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", name="book_list", response_class=JSONResponse)
async def list_books(
    page_request: PageRequest = Depends(get_page_request),
    service: BookService = Depends(get_book_service),
) -> JSONResponse:
    """List books, one page at a time."""
    return JSONResponse(await service.get_page(page_request))


@router.get("/{book_id}", name="book_detail", response_class=JSONResponse)
async def get_book(
    book_id: int,
    service: BookService = Depends(get_book_service),
) -> JSONResponse:
    """Get a specific book by ID."""
    return JSONResponse(await service.get_by_id(book_id))


@router.post(
    "",
    name="book_create",
    status_code=status.HTTP_201_CREATED,
    response_class=JSONResponse,
)
async def create_book(
    book_data: BookPayload,
    _: Caller = Depends(
        require_role(ROLE_ADMIN, "You do not have sufficient rights to create a book")
    ),
    service: BookService = Depends(get_book_service),
) -> JSONResponse:
    """Create a new book."""
    document, location = await service.create(book_data)
    return JSONResponse(
        document,
        status_code=status.HTTP_201_CREATED,
        headers={"Location": location},
    )


@router.put("/{book_id}", name="book_update", status_code=status.HTTP_204_NO_CONTENT)
async def update_book(
    book_id: int,
    book_data: BookPayload,
    _: Caller = Depends(
        require_role(ROLE_ADMIN, "You do not have sufficient rights to edit a book")
    ),
    service: BookService = Depends(get_book_service),
) -> Response:
    """Replace a book's title, cover text and author."""
    await service.update(book_id, book_data)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{book_id}", name="book_delete", status_code=status.HTTP_204_NO_CONTENT)
async def delete_book(
    book_id: int,
    _: Caller = Depends(
        require_role(ROLE_ADMIN, "You do not have sufficient rights to delete a book")
    ),
    service: BookService = Depends(get_book_service),
) -> Response:
    """Delete a book."""
    await service.delete(book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
