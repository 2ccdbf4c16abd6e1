"""Domain errors raised by services and mapped to HTTP responses in main."""


class LibraryError(Exception):
    """Base class for library API errors."""


class NotFoundError(LibraryError):
    """Raised when an id does not resolve to a stored entity."""

    def __init__(self, resource: str, identifier: int) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")

    @property
    def detail(self) -> str:
        return f"{self.resource} not found"


class CacheUnavailableError(LibraryError):
    """Raised by a cache backend that cannot serve a request."""
