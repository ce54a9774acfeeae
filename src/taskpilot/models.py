"""Summary: Domain model dataclasses for TaskPilot.

Importance: Defines the core entities shared across services, storage, and the API.
Alternatives: Use Pydantic models or ORM classes directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


DEFAULT_TASK_STATUS = "PENDING"


@dataclass(frozen=True)
class Task:
    """Summary: Represents a task, either as a client draft or a stored record.

    Importance: Core unit for the task resource; id and created_at are set by storage and service.
    Alternatives: Split drafts and stored records into separate classes.
    """

    title: str
    description: str | None = None
    status: str | None = None
    due_date: datetime | None = None
    created_at: datetime | None = None
    id: int | None = None


@dataclass(frozen=True)
class Credentials:
    """Summary: Login credentials submitted by a client.

    Importance: Keeps username and password together for the login check.
    Alternatives: Pass username and password as loose arguments.
    """

    username: str
    password: str


@dataclass(frozen=True)
class Identity:
    """Summary: The authenticated subject resolved from a verified token.

    Importance: Attached to the request state for the lifetime of one request.
    Alternatives: Store the raw token claims on the request.
    """

    subject: str
