"""Summary: Tests for the task service.

Importance: Ensures enrichment, fallback, and update semantics hold.
Alternatives: Validate tasks manually through the API.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from taskpilot.enrichment import FALLBACK_SUGGESTION, EnrichmentClient
from taskpilot.errors import ErrorKind
from taskpilot.models import Task
from taskpilot.services import TaskService
from taskpilot.storage.sqlite_store import SqliteStore


NOW = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)


class _StaticEnrichment:
    """Summary: Enrichment stub returning a fixed suggestion and counting calls.

    Importance: Keeps service tests offline and deterministic.
    Alternatives: Monkeypatch urllib in every test.
    """

    def __init__(self, suggestion: str = "Read chapter one.") -> None:
        self.suggestion = suggestion
        self.calls = 0

    def suggest(self) -> str:
        self.calls += 1
        return self.suggestion


def _service(tmp_path: Path, enrichment: object | None = None) -> TaskService:
    store = SqliteStore(str(tmp_path / "test.db"))
    store.initialize()
    return TaskService(store=store, enrichment=enrichment or _StaticEnrichment(), clock=lambda: NOW)


def test_create_keeps_given_description(tmp_path: Path) -> None:
    """Summary: Verify a non-empty description is stored unchanged.

    Importance: Enrichment only fills blanks.
    Alternatives: Always append a suggestion.
    """

    enrichment = _StaticEnrichment()
    service = _service(tmp_path, enrichment)
    task = service.create_task(Task(title="Write report", description="Quarterly numbers"))
    assert task.description == "Quarterly numbers"
    assert enrichment.calls == 0


@pytest.mark.parametrize("description", [None, "", "   ", "\n\t"])
def test_create_enriches_blank_description(tmp_path: Path, description: str | None) -> None:
    enrichment = _StaticEnrichment()
    service = _service(tmp_path, enrichment)
    task = service.create_task(Task(title="Write report", description=description))
    assert task.description == "External suggestion: Read chapter one."
    assert enrichment.calls == 1


def test_create_uses_fallback_when_enrichment_unreachable(tmp_path: Path) -> None:
    """Summary: Verify creation succeeds with the fallback when the endpoint is down.

    Importance: The external call must never abort task creation.
    Alternatives: Fail the request with a 502.
    """

    unreachable = EnrichmentClient("http://127.0.0.1:9/posts/1", timeout=1.0)
    service = _service(tmp_path, unreachable)
    task = service.create_task(Task(title="Write report", description=""))
    assert task.description == f"External suggestion: {FALLBACK_SUGGESTION}"
    assert task.status == "PENDING"


def test_create_sets_defaults_and_ignores_draft_id(tmp_path: Path) -> None:
    service = _service(tmp_path)
    task = service.create_task(Task(title="Write report", description="x", id=42))
    assert task.status == "PENDING"
    assert task.created_at == NOW
    assert task.id == 1
    assert service.list_tasks() == [task]


def test_create_keeps_explicit_status(tmp_path: Path) -> None:
    service = _service(tmp_path)
    task = service.create_task(Task(title="Write report", description="x", status="DONE"))
    assert task.status == "DONE"


def test_update_missing_task_is_not_found(tmp_path: Path) -> None:
    service = _service(tmp_path)
    outcome = service.update_task(404, Task(title="Nope"))
    assert outcome.error is ErrorKind.NOT_FOUND
    assert service.list_tasks() == []


def test_update_overwrites_fields_and_keeps_due_date_when_null(tmp_path: Path) -> None:
    """Summary: Verify update overwrites title, description, and status but not a null due date.

    Importance: due_date is the one partially-updated field.
    Alternatives: Treat every null field as "unchanged".
    """

    service = _service(tmp_path)
    due = datetime(2026, 2, 1, 9, 0)
    created = service.create_task(Task(title="Draft", description="d", due_date=due))

    outcome = service.update_task(created.id, Task(title="Final", description=None, status=None))
    assert outcome.ok
    updated = outcome.value
    assert updated.title == "Final"
    assert updated.description is None
    assert updated.status is None
    assert updated.due_date == due
    assert updated.id == created.id
    assert updated.created_at == created.created_at


def test_update_overwrites_due_date_when_given(tmp_path: Path) -> None:
    service = _service(tmp_path)
    created = service.create_task(Task(title="Draft", description="d", due_date=datetime(2026, 2, 1)))
    new_due = datetime(2026, 3, 1, 12, 0)
    updated = service.update_task(created.id, Task(title="Draft", description="d", due_date=new_due)).value
    assert updated.due_date == new_due
    assert service.list_tasks()[0].due_date == new_due


def test_update_never_enriches(tmp_path: Path) -> None:
    enrichment = _StaticEnrichment()
    service = _service(tmp_path, enrichment)
    created = service.create_task(Task(title="Draft", description="given"))
    updated = service.update_task(created.id, Task(title="Draft", description="  ")).value
    assert updated.description == "  "
    assert enrichment.calls == 0


def test_delete_is_idempotent(tmp_path: Path) -> None:
    service = _service(tmp_path)
    created = service.create_task(Task(title="Draft", description="d"))
    service.delete_task(created.id)
    service.delete_task(created.id)
    service.delete_task(12345)
    assert service.list_tasks() == []


class _DeletingStore(SqliteStore):
    """Summary: Store that deletes a task right after it is looked up.

    Importance: Reproduces a delete landing between the lookup and the write.
    Alternatives: Run two real threads against the database.
    """

    def find_by_id(self, task_id: int) -> Task | None:
        task = super().find_by_id(task_id)
        self.delete_by_id(task_id)
        return task


def test_update_racing_delete_is_not_found(tmp_path: Path) -> None:
    store = _DeletingStore(str(tmp_path / "test.db"))
    store.initialize()
    service = TaskService(store=store, enrichment=_StaticEnrichment(), clock=lambda: NOW)
    created = service.create_task(Task(title="Draft", description="d"))

    outcome = service.update_task(created.id, Task(title="Final", description="d"))
    assert outcome.error is ErrorKind.NOT_FOUND
    assert service.list_tasks() == []
