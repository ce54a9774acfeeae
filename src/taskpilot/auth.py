"""Summary: Login, bearer identity resolution, and route access policy.

Importance: Holds the authentication rules independent of the HTTP framework.
Alternatives: Inline the checks in FastAPI dependencies per route.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from enum import Enum

from taskpilot.errors import ErrorKind, Outcome
from taskpilot.models import Credentials, Identity
from taskpilot.tokens import TokenService


logger = logging.getLogger(__name__)

# Single hardcoded account; there is no user registration.
FIXED_CREDENTIALS = Credentials(username="admin", password="admin123")
BEARER_PREFIX = "Bearer "
PREFLIGHT_METHOD = "OPTIONS"


@dataclass(frozen=True)
class AuthService:
    """Summary: Validates login credentials and issues tokens.

    Importance: Backs the public login route.
    Alternatives: Check credentials against a users table.
    """

    tokens: TokenService
    credentials: Credentials = FIXED_CREDENTIALS

    def login(self, candidate: Credentials) -> Outcome[str]:
        """Summary: Issue a token when the credentials match the fixed pair.

        Importance: Entry point for obtaining a bearer token.
        Alternatives: Hash stored passwords with passlib.
        """

        username_ok = hmac.compare_digest(
            candidate.username.encode("utf-8"), self.credentials.username.encode("utf-8")
        )
        password_ok = hmac.compare_digest(
            candidate.password.encode("utf-8"), self.credentials.password.encode("utf-8")
        )
        if not (username_ok and password_ok):
            logger.warning("Rejected login for user %r.", candidate.username)
            return Outcome.failure(ErrorKind.INVALID_CREDENTIALS)
        logger.info("Issued token for %s.", candidate.username)
        return Outcome.success(self.tokens.issue(candidate.username))


@dataclass(frozen=True)
class AuthResult:
    """Summary: Outcome of resolving an identity for one request.

    Importance: Makes "unauthenticated" an explicit branch, with the reason when known.
    Alternatives: Return None and log inside the resolver.
    """

    identity: Identity | None = None
    error: ErrorKind | None = None

    @property
    def authenticated(self) -> bool:
        return self.identity is not None


def resolve_identity(method: str, authorization: str | None, tokens: TokenService) -> AuthResult:
    """Summary: Resolve the request identity from the Authorization header.

    Importance: Never rejects; failed verification degrades to unauthenticated.
    Alternatives: Raise 401 directly when the header is invalid.
    """

    if method.upper() == PREFLIGHT_METHOD:
        return AuthResult()
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return AuthResult()
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        return AuthResult()
    outcome = tokens.verify(token)
    if not outcome.ok:
        return AuthResult(error=outcome.error)
    return AuthResult(identity=outcome.value)


class Access(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"


@dataclass(frozen=True)
class AccessRule:
    """Summary: One row of the access policy table.

    Importance: A rule matches a path prefix (on segment boundaries) and optionally a method.
    Alternatives: Use regular expressions for path matching.
    """

    prefix: str
    access: Access
    method: str | None = None

    def matches(self, path: str, method: str) -> bool:
        if self.method is not None and self.method != method.upper():
            return False
        if self.prefix == "/":
            return True
        return path == self.prefix or path.startswith(self.prefix.rstrip("/") + "/")


DEFAULT_RULES = (
    AccessRule(prefix="/", access=Access.PUBLIC, method=PREFLIGHT_METHOD),
    AccessRule(prefix="/api/auth", access=Access.PUBLIC),
    AccessRule(prefix="/auth", access=Access.PUBLIC),
    AccessRule(prefix="/health", access=Access.PUBLIC),
)


@dataclass(frozen=True)
class AccessPolicy:
    """Summary: Decides whether a route requires an authenticated identity.

    Importance: Method-specific rules win over path rules, then the longest prefix wins;
    unmatched routes are protected.
    Alternatives: Mark each route with a dependency instead of a central table.
    """

    rules: tuple[AccessRule, ...] = DEFAULT_RULES
    default: Access = Access.PROTECTED

    def decide(self, path: str, method: str) -> Access:
        matching = [rule for rule in self.rules if rule.matches(path, method)]
        if not matching:
            return self.default
        best = max(matching, key=lambda rule: (rule.method is not None, len(rule.prefix)))
        return best.access
