"""Summary: SQLite storage implementation for TaskPilot.

Importance: Provides a local-first persistence layer for the task resource.
Alternatives: Use an ORM or an external database immediately.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Iterator

from taskpilot.models import Task
from taskpilot.storage.base import TaskStore


_COLUMNS = "id, title, description, status, due_date, created_at"


class SqliteStore(TaskStore):
    """Summary: SQLite-backed task storage.

    Importance: Opens one connection per call so each operation is its own transaction.
    Alternatives: Use Postgres and SQLAlchemy from day one.
    """

    def __init__(self, db_path: str) -> None:
        """Summary: Initialize the storage with a database path.

        Importance: Allows configurable database location per environment.
        Alternatives: Hardcode a default path in the class.
        """

        self._db_path = Path(db_path)

    def initialize(self) -> None:
        """Summary: Create tables if they do not exist.

        Importance: Ensures the database is ready before the API serves requests.
        Alternatives: Run migrations using a dedicated migration tool.
        """

        with self._connection() as connection:
            connection.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    status TEXT,
                    due_date TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
            connection.commit()

    def find_all(self) -> list[Task]:
        with self._connection() as connection:
            rows = connection.execute(f"SELECT {_COLUMNS} FROM tasks ORDER BY id ASC").fetchall()
        return [_row_to_task(row) for row in rows]

    def find_by_id(self, task_id: int) -> Task | None:
        with self._connection() as connection:
            row = connection.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        return _row_to_task(row) if row else None

    def save(self, task: Task) -> Task | None:
        """Summary: Insert a new task record or overwrite an existing one.

        Importance: An overwrite never recreates a deleted row; it returns None instead.
        Alternatives: Expose separate insert and update methods.
        """

        if task.created_at is None:
            raise ValueError("Task created_at must be set before saving")
        values = (
            task.title,
            task.description,
            task.status,
            _format_datetime(task.due_date),
            _format_datetime(task.created_at),
        )
        with self._connection() as connection:
            cursor = connection.cursor()
            if task.id is None:
                cursor.execute(
                    """
                    INSERT INTO tasks (title, description, status, due_date, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    values,
                )
                task = replace(task, id=int(cursor.lastrowid))
            else:
                cursor.execute(
                    """
                    UPDATE tasks
                    SET title = ?, description = ?, status = ?, due_date = ?
                    WHERE id = ?
                    """,
                    (*values[:4], task.id),
                )
                if cursor.rowcount == 0:
                    return None
            connection.commit()
        return task

    def delete_by_id(self, task_id: int) -> None:
        with self._connection() as connection:
            connection.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            connection.commit()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Summary: Context manager for SQLite connections.

        Importance: Ensures connections are closed cleanly after use.
        Alternatives: Keep a single long-lived connection.
        """

        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
        finally:
            connection.close()


def _row_to_task(row: tuple) -> Task:
    task_id, title, description, status, due_date, created_at = row
    return Task(
        id=task_id,
        title=title,
        description=description,
        status=status,
        due_date=_parse_datetime(due_date),
        created_at=_parse_datetime(created_at),
    )


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None

