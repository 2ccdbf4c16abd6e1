"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from library_api.api.authors import router as authors_router
from library_api.api.books import router as books_router
from library_api.api.schemas import ValidationErrorResponse, Violation
from library_api.core.config import get_settings
from library_api.core.database import engine, init_db
from library_api.core.exceptions import NotFoundError
from library_api.core.tracing import setup_tracing, shutdown_tracing

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    await init_db()
    yield
    # Shutdown
    await engine.dispose()
    shutdown_tracing()


settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Library API",
    description="Paginated, cached REST API for books and their authors",
    version="0.1.0",
    lifespan=lifespan,
)

# Setup OpenTelemetry tracing (must be done before adding routes)
setup_tracing(app)


def violations_from(exc: RequestValidationError) -> list[Violation]:
    """Flatten pydantic errors into (field, message) pairs."""
    violations = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        # Drop the "body"/"query"/"path" prefix unless it is all there is
        field = ".".join(loc[1:]) if len(loc) > 1 else ".".join(loc)
        violations.append(Violation(field=field, message=error.get("msg", "Invalid value")))
    return violations


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    body = ValidationErrorResponse(errors=violations_from(exc))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


@app.exception_handler(NotFoundError)
async def not_found_exception_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": exc.detail})


# Include routers
app.include_router(books_router)
app.include_router(authors_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "library_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
