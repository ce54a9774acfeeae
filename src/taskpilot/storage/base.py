"""Summary: Storage interface for task persistence.

Importance: Keeps services independent of the persistence mechanism.
Alternatives: Let services talk to SQLite directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from taskpilot.models import Task


class TaskStore(ABC):
    """Summary: Abstract task repository with pass-through CRUD operations.

    Importance: Implementations provide their own per-call concurrency safety.
    Alternatives: Use an ORM session as the service dependency.
    """

    @abstractmethod
    def find_all(self) -> list[Task]:
        """Summary: Return all tasks in insertion order."""

    @abstractmethod
    def find_by_id(self, task_id: int) -> Task | None:
        """Summary: Return a task by id, or None when absent."""

    @abstractmethod
    def save(self, task: Task) -> Task | None:
        """Summary: Insert a task without id, or overwrite the task with its id.

        Importance: Returns the persisted record including its assigned id, or None when
        the task to overwrite no longer exists.
        Alternatives: Split into separate insert and update calls.
        """

    @abstractmethod
    def delete_by_id(self, task_id: int) -> None:
        """Summary: Remove a task; a missing id is not an error."""
