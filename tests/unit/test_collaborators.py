"""Unit tests for authorization and version resolution."""

import logging

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from library_api.core.security import ANONYMOUS, ROLE_ADMIN, Caller, get_caller, require_role
from library_api.core.versioning import version_from_accept

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "user-token"


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestVersionFromAccept:
    @pytest.mark.parametrize(
        ("accept", "expected"),
        [
            (None, "1.0"),
            ("", "1.0"),
            ("application/json", "1.0"),
            ("application/json; version=2.0", "2.0"),
            ("application/json;version=2.0", "2.0"),
            ('application/json; version="2.0"', "2.0"),
            ("text/html, application/json; q=0.9; version=2.1", "2.1"),
            ("application/json; version=latest", "1.0"),
        ],
    )
    def test_version(self, accept, expected):
        assert version_from_accept(accept, "1.0") == expected


class TestCaller:
    def test_anonymous_has_no_roles(self):
        assert ANONYMOUS.is_anonymous
        assert not ANONYMOUS.is_granted(ROLE_ADMIN)

    def test_no_credentials_is_anonymous(self):
        assert get_caller(None) is ANONYMOUS

    def test_known_token_grants_roles(self):
        caller = get_caller(bearer(ADMIN_TOKEN))
        assert caller.is_granted(ROLE_ADMIN)
        assert not caller.is_anonymous

    def test_unknown_token_is_rejected(self):
        with pytest.raises(HTTPException) as exc_info:
            get_caller(bearer("nope"))
        assert exc_info.value.status_code == 401


class TestRequireRole:
    def test_missing_role_is_forbidden(self):
        dependency = require_role(ROLE_ADMIN, "You do not have sufficient rights to delete a book")
        user = get_caller(bearer(USER_TOKEN))

        with pytest.raises(HTTPException) as exc_info:
            dependency(user)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "You do not have sufficient rights to delete a book"

    def test_granted_role_passes_caller_through(self):
        dependency = require_role(ROLE_ADMIN, "denied")
        admin = Caller(subject="bearer", roles=frozenset({ROLE_ADMIN}))
        assert dependency(admin) is admin

    def test_anonymous_denial_is_logged_as_anonymous(self, caplog):
        dependency = require_role(ROLE_ADMIN, "denied")

        with caplog.at_level(logging.INFO, logger="library_api.core.security"):
            with pytest.raises(HTTPException):
                dependency(ANONYMOUS)

        assert "Denied anonymous request: missing ROLE_ADMIN" in caplog.text

    def test_token_denial_names_the_caller(self, caplog):
        dependency = require_role(ROLE_ADMIN, "denied")
        user = get_caller(bearer(USER_TOKEN))

        with caplog.at_level(logging.INFO, logger="library_api.core.security"):
            with pytest.raises(HTTPException):
                dependency(user)

        assert "Denied bearer: missing ROLE_ADMIN" in caplog.text
        assert "anonymous" not in caplog.text
