"""Resolve the response version requested by the client."""

import re

from fastapi import Request

from library_api.core.config import get_settings

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+)*$")


def version_from_accept(accept: str | None, default: str) -> str:
    """Extract the ``version`` parameter from an Accept header.

    ``application/json; version=2.0`` yields ``"2.0"``. A missing header,
    missing parameter or malformed value yields ``default``.
    """
    if not accept:
        return default

    for media_range in accept.split(","):
        for param in media_range.split(";")[1:]:
            name, _, value = param.partition("=")
            if name.strip().lower() != "version":
                continue
            value = value.strip().strip('"')
            if _VERSION_PATTERN.match(value):
                return value
    return default


def get_api_version(request: Request) -> str:
    """Dependency that provides the active response version."""
    return version_from_accept(
        request.headers.get("accept"),
        get_settings().default_api_version,
    )
