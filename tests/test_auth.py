"""Summary: Tests for login, identity resolution, and the access policy.

Importance: Ensures authentication degrades to unauthenticated instead of failing requests.
Alternatives: Cover these rules only through end-to-end API tests.
"""

from __future__ import annotations

import pytest
from starlette.datastructures import State

from taskpilot.auth import Access, AccessPolicy, AuthService, resolve_identity
from taskpilot.errors import ErrorKind
from taskpilot.middleware import attach_identity
from taskpilot.models import Credentials, Identity
from taskpilot.tokens import TokenService


def test_login_with_fixed_credentials_issues_verifiable_token() -> None:
    """Summary: Verify the fixed pair yields a token for the same subject.

    Importance: Confirms the login flow feeds token verification.
    Alternatives: Only check the token is non-empty.
    """

    tokens = TokenService()
    outcome = AuthService(tokens=tokens).login(Credentials(username="admin", password="admin123"))
    assert outcome.ok
    assert tokens.verify(outcome.value).value == Identity(subject="admin")


@pytest.mark.parametrize(
    ("username", "password"),
    [("admin", "wrong"), ("root", "admin123"), ("", ""), ("Admin", "admin123")],
)
def test_login_rejects_other_credentials(username: str, password: str) -> None:
    """Summary: Verify any other credentials fail with INVALID_CREDENTIALS.

    Importance: Only one account exists.
    Alternatives: Test a single wrong password.
    """

    outcome = AuthService(tokens=TokenService()).login(Credentials(username=username, password=password))
    assert outcome.error is ErrorKind.INVALID_CREDENTIALS


def test_resolve_identity_with_valid_bearer_token() -> None:
    tokens = TokenService()
    result = resolve_identity("GET", f"Bearer {tokens.issue('admin')}", tokens)
    assert result.authenticated
    assert result.identity.subject == "admin"
    assert result.error is None


@pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer", "Bearer   ", "bearer token"])
def test_resolve_identity_without_usable_header(header: str | None) -> None:
    """Summary: Verify missing or malformed headers resolve to unauthenticated.

    Importance: The resolver never rejects on its own.
    Alternatives: Return 400 for malformed headers.
    """

    result = resolve_identity("GET", header, TokenService())
    assert not result.authenticated
    assert result.error is None


def test_resolve_identity_reports_failed_verification() -> None:
    result = resolve_identity("GET", "Bearer not-a-token", TokenService())
    assert not result.authenticated
    assert result.error is ErrorKind.INVALID_TOKEN


def test_resolve_identity_skips_preflight() -> None:
    tokens = TokenService()
    result = resolve_identity("OPTIONS", f"Bearer {tokens.issue('admin')}", tokens)
    assert not result.authenticated
    assert result.error is None


def test_attach_identity_is_idempotent() -> None:
    """Summary: Verify a second pass never replaces the first identity.

    Importance: Running authentication twice must not corrupt the identity slot.
    Alternatives: Guard against double registration of the middleware instead.
    """

    state = State()
    first = attach_identity(state, Identity(subject="admin"))
    second = attach_identity(state, Identity(subject="other"))
    third = attach_identity(state, None)
    assert first == second == third == Identity(subject="admin")
    assert state.identity == Identity(subject="admin")


@pytest.mark.parametrize(
    ("path", "method", "expected"),
    [
        ("/api/auth/login", "POST", Access.PUBLIC),
        ("/api/auth", "POST", Access.PUBLIC),
        ("/auth/login", "POST", Access.PUBLIC),
        ("/api/tasks", "OPTIONS", Access.PUBLIC),
        ("/anything/else", "options", Access.PUBLIC),
        ("/health", "GET", Access.PUBLIC),
        ("/api/tasks", "GET", Access.PROTECTED),
        ("/api/tasks/1", "DELETE", Access.PROTECTED),
        ("/api/authentication", "POST", Access.PROTECTED),
        ("/API/auth/login", "POST", Access.PROTECTED),
        ("/", "GET", Access.PROTECTED),
    ],
)
def test_access_policy_rules(path: str, method: str, expected: Access) -> None:
    """Summary: Verify the rule table and its default.

    Importance: Prefixes match on segment boundaries and are case-sensitive.
    Alternatives: Match raw string prefixes.
    """

    assert AccessPolicy().decide(path, method) is expected
