"""Summary: Signed, time-bounded identity tokens.

Importance: Provides stateless bearer authentication without a session store.
Alternatives: Store opaque session IDs in the database.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from taskpilot.errors import ErrorKind, Outcome
from taskpilot.models import Identity


logger = logging.getLogger(__name__)

TOKEN_TTL = timedelta(hours=24)
SIGNING_ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "iat", "exp"]


def utc_now() -> datetime:
    """Summary: Return the current time as an aware UTC datetime.

    Importance: Single clock source that tests can replace.
    Alternatives: Call datetime.now(timezone.utc) inline everywhere.
    """

    return datetime.now(timezone.utc)


class TokenService:
    """Summary: Issues and verifies HS256 tokens with a process-lifetime key.

    Importance: Tokens are only valid inside the process that issued them; the key
    is generated on construction, held in memory, and never persisted or rotated.
    Alternatives: Load a shared secret from configuration to support multiple instances.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now, ttl: timedelta = TOKEN_TTL) -> None:
        self._key = secrets.token_bytes(64)
        self._clock = clock
        self._ttl = ttl

    def issue(self, subject: str) -> str:
        """Summary: Issue a signed token for a subject.

        Importance: Produces the bearer credential returned by the login route.
        Alternatives: Return a random token and keep a server-side lookup table.
        """

        issued_at = self._clock()
        claims = {
            "sub": subject,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._key, algorithm=SIGNING_ALGORITHM)

    def verify(self, token: str) -> Outcome[Identity]:
        """Summary: Verify a token signature and expiry.

        Importance: Resolves the identity carried by a bearer token.
        Alternatives: Let PyJWT check expiry against the wall clock.
        """

        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=[SIGNING_ALGORITHM],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", exc)
            return Outcome.failure(ErrorKind.INVALID_TOKEN)
        subject = claims["sub"]
        expires_at = claims["exp"]
        if not isinstance(subject, str) or not subject or not isinstance(expires_at, (int, float)):
            return Outcome.failure(ErrorKind.INVALID_TOKEN)
        if self._clock().timestamp() >= expires_at:
            return Outcome.failure(ErrorKind.EXPIRED_TOKEN)
        return Outcome.success(Identity(subject=subject))
