"""Versioned field groups and hypermedia links for API representations.

Every model has a table of exposed fields. A field is emitted when it belongs
to the active serialization group and was introduced at or before the active
API version. Links are kept out of ``shape`` because list pages are cached:
``attach_links`` runs per request so role-gated links never leak from one
caller's cached page to another.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from library_api.core.security import ROLE_ADMIN, Caller
from library_api.models import Author, Book

READ_GROUP = "getBooks"


@dataclass(frozen=True)
class ExposedField:
    """One field of a representation."""

    name: str
    attribute: str
    groups: frozenset[str] = frozenset({READ_GROUP})
    since: str | None = None
    embedded: type | None = None


@dataclass(frozen=True)
class Relation:
    """A hypermedia link pointing at a named route."""

    rel: str
    route_name: str
    id_param: str
    groups: frozenset[str] = frozenset({READ_GROUP})
    required_role: str | None = None


AUTHOR_FIELDS = (
    ExposedField("id", "id"),
    ExposedField("firstName", "first_name"),
    ExposedField("lastName", "last_name"),
)

BOOK_FIELDS = (
    ExposedField("id", "id"),
    ExposedField("title", "title"),
    ExposedField("coverText", "cover_text"),
    ExposedField("comment", "comment", since="2.0"),
    ExposedField("author", "author", embedded=Author),
)

FIELDS: dict[type, tuple[ExposedField, ...]] = {
    Author: AUTHOR_FIELDS,
    Book: BOOK_FIELDS,
}

RELATIONS: dict[type, tuple[Relation, ...]] = {
    Author: (
        Relation("self", "author_detail", "author_id"),
        Relation("update", "author_update", "author_id", required_role=ROLE_ADMIN),
        Relation("delete", "author_delete", "author_id", required_role=ROLE_ADMIN),
    ),
    Book: (
        Relation("self", "book_detail", "book_id"),
        Relation("update", "book_update", "book_id", required_role=ROLE_ADMIN),
        Relation("delete", "book_delete", "book_id", required_role=ROLE_ADMIN),
    ),
}


@dataclass(frozen=True)
class RepresentationContext:
    """Per-request inputs to shaping: version, caller and URL generation."""

    version: str
    caller: Caller
    url_for: Callable[..., str]
    group: str = field(default=READ_GROUP)


def parse_version(version: str) -> tuple[int, ...]:
    """Turn ``"2.0"`` into ``(2, 0)`` with trailing zeros dropped, so 2 == 2.0."""
    parts = [int(part) for part in version.split(".")]
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


def is_visible(exposed: ExposedField, group: str, version: str) -> bool:
    if group not in exposed.groups:
        return False
    if exposed.since is None:
        return True
    return parse_version(version) >= parse_version(exposed.since)


def shape(entity: Any, group: str, version: str) -> dict[str, Any]:
    """Serialize ``entity`` to a dict of the fields visible in ``group`` at ``version``."""
    document: dict[str, Any] = {}
    for exposed in FIELDS[type(entity)]:
        if not is_visible(exposed, group, version):
            continue
        value = getattr(entity, exposed.attribute)
        if exposed.embedded is not None and value is not None:
            value = shape(value, group, version)
        document[exposed.name] = value
    return document


def build_links(model: type, identifier: int, context: RepresentationContext) -> dict[str, Any]:
    """Build the ``_links`` object for one entity as seen by ``context.caller``."""
    links: dict[str, Any] = {}
    for relation in RELATIONS[model]:
        if context.group not in relation.groups:
            continue
        if relation.required_role and not context.caller.is_granted(relation.required_role):
            continue
        href = context.url_for(relation.route_name, **{relation.id_param: identifier})
        links[relation.rel] = {"href": href}
    return links


def attach_links(
    document: dict[str, Any], model: type, context: RepresentationContext
) -> dict[str, Any]:
    """Add ``_links`` to a shaped document and to the documents embedded in it."""
    for exposed in FIELDS[model]:
        nested = document.get(exposed.name)
        if exposed.embedded is not None and isinstance(nested, dict):
            attach_links(nested, exposed.embedded, context)
    links = build_links(model, document["id"], context)
    if links:
        document["_links"] = links
    return document
