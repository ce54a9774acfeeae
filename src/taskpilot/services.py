"""Summary: Core application services for TaskPilot.

Importance: Orchestrates the task lifecycle on top of storage and enrichment.
Alternatives: Build a full service layer with dependency injection framework.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from datetime import datetime
from typing import Callable

from taskpilot.enrichment import EnrichmentClient
from taskpilot.errors import ErrorKind, Outcome
from taskpilot.models import DEFAULT_TASK_STATUS, Task
from taskpilot.storage.base import TaskStore
from taskpilot.tokens import utc_now


logger = logging.getLogger(__name__)

SUGGESTION_PREFIX = "External suggestion: "


@dataclass(frozen=True)
class TaskService:
    """Summary: Manages task listing, creation, update, and deletion.

    Importance: Owns the enrichment rule for blank descriptions and the update semantics.
    Alternatives: Let the HTTP layer call storage directly.
    """

    store: TaskStore
    enrichment: EnrichmentClient
    clock: Callable[[], datetime] = utc_now

    def list_tasks(self) -> list[Task]:
        """Summary: List all tasks in storage order.

        Importance: Backs the task listing route.
        Alternatives: Sort by due date in the service.
        """

        return self.store.find_all()

    def create_task(self, draft: Task) -> Task:
        """Summary: Create a task, filling a blank description from enrichment.

        Importance: Task creation always succeeds even when enrichment is unavailable.
        Alternatives: Reject tasks without a description.
        """

        description = draft.description
        if description is None or not description.strip():
            description = SUGGESTION_PREFIX + self.enrichment.suggest()
        task = replace(
            draft,
            id=None,
            description=description,
            status=draft.status or DEFAULT_TASK_STATUS,
            created_at=self.clock(),
        )
        saved = self.store.save(task)
        logger.info("Created task %s.", saved.id)
        return saved

    def update_task(self, task_id: int, changes: Task) -> Outcome[Task]:
        """Summary: Overwrite a task's editable fields.

        Importance: Title, description and status are always replaced; due_date only
        when a new one is given. Blank descriptions are not re-enriched.
        Alternatives: Apply a full JSON merge patch.
        """

        existing = self.store.find_by_id(task_id)
        if existing is None:
            return Outcome.failure(ErrorKind.NOT_FOUND)
        updated = replace(
            existing,
            title=changes.title,
            description=changes.description,
            status=changes.status,
            due_date=changes.due_date if changes.due_date is not None else existing.due_date,
        )
        saved = self.store.save(updated)
        if saved is None:
            return Outcome.failure(ErrorKind.NOT_FOUND)
        logger.info("Updated task %s.", task_id)
        return Outcome.success(saved)

    def delete_task(self, task_id: int) -> None:
        """Summary: Delete a task by id.

        Importance: Deleting a missing task is not an error.
        Alternatives: Return 404 for unknown ids.
        """

        self.store.delete_by_id(task_id)
        logger.info("Deleted task %s.", task_id)
