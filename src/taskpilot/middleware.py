"""Summary: Starlette middleware for bearer authentication and access policy.

Importance: Resolves the request identity once and rejects protected routes before handlers run.
Alternatives: Use FastAPI dependencies on every protected route.
"""

from __future__ import annotations

import logging

from starlette.datastructures import State
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from taskpilot.auth import Access, AccessPolicy, resolve_identity
from taskpilot.errors import ErrorKind
from taskpilot.models import Identity
from taskpilot.tokens import TokenService


logger = logging.getLogger(__name__)


def attach_identity(state: State, identity: Identity | None) -> Identity | None:
    """Summary: Store the identity on request state unless one is already there.

    Importance: Running authentication twice never replaces or duplicates the identity.
    Alternatives: Always overwrite with the latest result.
    """

    current = getattr(state, "identity", None)
    if current is not None:
        return current
    state.identity = identity
    return identity


def current_identity(request: Request) -> Identity | None:
    return getattr(request.state, "identity", None)


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Summary: Attaches the bearer token identity (or none) to request state.

    Importance: Never rejects a request; the access policy makes the final decision.
    Alternatives: Validate tokens inside each route handler.
    """

    def __init__(self, app: ASGIApp, tokens: TokenService) -> None:
        super().__init__(app)
        self.tokens = tokens

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if current_identity(request) is None:
            result = resolve_identity(
                request.method, request.headers.get("Authorization"), self.tokens
            )
            if result.error is not None:
                logger.warning(
                    "Token verification failed (%s) for %s %s; continuing unauthenticated.",
                    result.error.value,
                    request.method,
                    request.url.path,
                )
            attach_identity(request.state, result.identity)
        return await call_next(request)


class AccessPolicyMiddleware(BaseHTTPMiddleware):
    """Summary: Enforces the access policy using the identity on request state.

    Importance: Protected routes without an identity get an empty 401 and the handler never runs.
    Alternatives: Return 403 like servlet security filters.
    """

    def __init__(self, app: ASGIApp, policy: AccessPolicy) -> None:
        super().__init__(app)
        self.policy = policy

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        access = self.policy.decide(request.url.path, request.method)
        if access is Access.PROTECTED and current_identity(request) is None:
            logger.info("Denied %s %s: not authenticated.", request.method, request.url.path)
            return Response(
                status_code=ErrorKind.UNAUTHORIZED.status_code,
                headers={"WWW-Authenticate": "Bearer"},
            )
        return await call_next(request)
