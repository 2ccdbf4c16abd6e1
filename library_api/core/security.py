"""Bearer token authentication and role checks.

Tokens are static and configured through ``settings.api_tokens``, which maps
each token to the roles it grants. Requests without a token act as an
anonymous caller with no roles, which is enough for the read endpoints.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from library_api.core.config import get_settings

logger = logging.getLogger(__name__)

ROLE_ADMIN = "ROLE_ADMIN"

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    """The authenticated (or anonymous) party issuing a request."""

    subject: str
    roles: frozenset[str] = field(default_factory=frozenset)

    def is_granted(self, role: str) -> bool:
        return role in self.roles

    @property
    def is_anonymous(self) -> bool:
        return self.subject == ANONYMOUS.subject


ANONYMOUS = Caller(subject="anonymous")


def get_caller(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Caller:
    """Dependency that resolves the caller from the Authorization header."""
    if credentials is None:
        return ANONYMOUS

    roles = get_settings().api_tokens.get(credentials.credentials)
    if roles is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return Caller(subject="bearer", roles=frozenset(roles))


def require_role(role: str, message: str) -> Callable[[Caller], Caller]:
    """Dependency factory that rejects callers lacking ``role`` with a 403.

    Use as ``Depends(require_role(ROLE_ADMIN, "..."))``. The check runs before
    the body is validated, so a rejected request has no side effects. A body
    that is not JSON at all is still rejected with a 400 first, since FastAPI
    decodes it before resolving dependencies.
    """

    def _role_dependency(caller: Caller = Depends(get_caller)) -> Caller:
        if not caller.is_granted(role):
            if caller.is_anonymous:
                logger.info(f"Denied anonymous request: missing {role}, no bearer token sent")
            else:
                logger.info(f"Denied {caller.subject}: missing {role}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=message,
            )
        return caller

    return _role_dependency
