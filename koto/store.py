"""
Task persistence.

The protocol defines the interface the TUI talks to; implementations
can be swapped for testing or alternative backends.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Protocol

from .errors import NotFoundError, StoreError, ValidationError
from .models import Priority, Task, TaskStatus

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS todos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    description TEXT DEFAULT '',
    status INTEGER NOT NULL DEFAULT 0,
    priority INTEGER NOT NULL DEFAULT 0,
    due_date TEXT,
    work_duration INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_todos_status ON todos(status);
CREATE INDEX IF NOT EXISTS idx_todos_due_date ON todos(due_date);
CREATE INDEX IF NOT EXISTS idx_todos_created_at ON todos(created_at);
"""


class TaskStore(Protocol):
    """Protocol for task persistence."""

    def create(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task:
        """Insert a new pending task and return it with its id."""
        ...

    def get(self, task_id: int) -> Task:
        """Return a task or raise NotFoundError."""
        ...

    def list(self) -> list[Task]:
        """All tasks, newest first."""
        ...

    def list_by_status(self, status: TaskStatus) -> list[Task]:
        """Tasks with the given status, newest first."""
        ...

    def update(self, task: Task) -> Task:
        """Replace title/description/status/priority/due date."""
        ...

    def delete(self, task_id: int) -> None:
        ...

    def complete(self, task_id: int) -> None:
        ...

    def add_work_duration(self, task_id: int, minutes: int) -> None:
        """Add minutes (> 0) to the task's accumulated work time."""
        ...


def clean_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("title cannot be empty")
    return title


def check_priority(priority: int) -> Priority:
    try:
        return Priority(priority)
    except ValueError:
        raise ValidationError("invalid priority") from None


def check_minutes(minutes: int) -> int:
    if minutes <= 0:
        raise ValidationError("work duration must be positive")
    return minutes


def _now() -> datetime:
    return datetime.now().replace(microsecond=0)


class SQLiteTaskStore:
    """TaskStore backed by a SQLite file."""

    def __init__(self, db_path: Path | str):
        self.db_path = str(db_path)
        # Store calls run on worker threads; serialise them on one connection
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA_SQL)
        except sqlite3.Error as e:
            raise StoreError(f"failed to open database: {e}") from e
        logger.debug("Opened task database at %s", self.db_path)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _execute(self, query: str, params: tuple = ()) -> sqlite3.Cursor:
        try:
            with self._lock, self._conn:
                return self._conn.execute(query, params)
        except (sqlite3.Error, UnicodeError) as e:
            raise StoreError(str(e)) from e

    def _query(self, query: str, params: tuple = ()) -> list[sqlite3.Row]:
        try:
            with self._lock:
                return self._conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            status=TaskStatus(row["status"]),
            priority=Priority(row["priority"]),
            due_date=datetime.fromisoformat(row["due_date"]) if row["due_date"] else None,
            work_duration=row["work_duration"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def create(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task:
        title = clean_title(title)
        priority = check_priority(priority)
        now = _now()
        cur = self._execute(
            """
            INSERT INTO todos (title, description, status, priority, due_date,
                               work_duration, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, 0, ?, ?)
            """,
            (
                title,
                (description or "").strip(),
                int(TaskStatus.PENDING),
                int(priority),
                due_date.isoformat() if due_date else None,
                now.isoformat(),
                now.isoformat(),
            ),
        )
        logger.debug("Created todo #%d", cur.lastrowid)
        return self.get(cur.lastrowid)

    def get(self, task_id: int) -> Task:
        rows = self._query("SELECT * FROM todos WHERE id = ?", (task_id,))
        row = rows[0] if rows else None
        if row is None:
            raise NotFoundError(task_id)
        return self._row_to_task(row)

    def list(self) -> list[Task]:
        rows = self._query(
            "SELECT * FROM todos ORDER BY created_at DESC, id DESC"
        )
        return [self._row_to_task(r) for r in rows]

    def list_by_status(self, status: TaskStatus) -> list[Task]:
        rows = self._query(
            "SELECT * FROM todos WHERE status = ? ORDER BY created_at DESC, id DESC",
            (int(status),),
        )
        return [self._row_to_task(r) for r in rows]

    def update(self, task: Task) -> Task:
        title = clean_title(task.title)
        priority = check_priority(task.priority)
        cur = self._execute(
            """
            UPDATE todos
            SET title = ?, description = ?, status = ?, priority = ?,
                due_date = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                title,
                (task.description or "").strip(),
                int(task.status),
                int(priority),
                task.due_date.isoformat() if task.due_date else None,
                _now().isoformat(),
                task.id,
            ),
        )
        if cur.rowcount == 0:
            raise NotFoundError(task.id)
        logger.debug("Updated todo #%d", task.id)
        return self.get(task.id)

    def delete(self, task_id: int) -> None:
        cur = self._execute("DELETE FROM todos WHERE id = ?", (task_id,))
        if cur.rowcount == 0:
            raise NotFoundError(task_id)
        logger.debug("Deleted todo #%d", task_id)

    def complete(self, task_id: int) -> None:
        cur = self._execute(
            "UPDATE todos SET status = ?, updated_at = ? WHERE id = ?",
            (int(TaskStatus.COMPLETED), _now().isoformat(), task_id),
        )
        if cur.rowcount == 0:
            raise NotFoundError(task_id)
        logger.debug("Completed todo #%d", task_id)

    def add_work_duration(self, task_id: int, minutes: int) -> None:
        check_minutes(minutes)
        cur = self._execute(
            """
            UPDATE todos
            SET work_duration = work_duration + ?, updated_at = ?
            WHERE id = ?
            """,
            (minutes, _now().isoformat(), task_id),
        )
        if cur.rowcount == 0:
            raise NotFoundError(task_id)
        logger.debug("Recorded %d minutes on todo #%d", minutes, task_id)


class MemoryTaskStore:
    """In-process TaskStore. Used by tests and `koto --memory`."""

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: dict[int, Task] = {t.id: t for t in tasks or []}
        self._next_id = max(self._tasks, default=0) + 1

    def close(self) -> None:
        pass

    def create(
        self,
        title: str,
        description: str = "",
        priority: Priority = Priority.MEDIUM,
        due_date: datetime | None = None,
    ) -> Task:
        now = _now()
        task = Task(
            id=self._next_id,
            title=clean_title(title),
            description=(description or "").strip(),
            priority=check_priority(priority),
            due_date=due_date,
            created_at=now,
            updated_at=now,
        )
        self._tasks[task.id] = task
        self._next_id += 1
        return task

    def get(self, task_id: int) -> Task:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise NotFoundError(task_id) from None

    def list(self) -> list[Task]:
        return sorted(
            self._tasks.values(),
            key=lambda t: (t.created_at or datetime.min, t.id),
            reverse=True,
        )

    def list_by_status(self, status: TaskStatus) -> list[Task]:
        return [t for t in self.list() if t.status == status]

    def update(self, task: Task) -> Task:
        current = self.get(task.id)
        updated = replace(
            current,
            title=clean_title(task.title),
            description=(task.description or "").strip(),
            status=task.status,
            priority=check_priority(task.priority),
            due_date=task.due_date,
            updated_at=_now(),
        )
        self._tasks[task.id] = updated
        return updated

    def delete(self, task_id: int) -> None:
        self.get(task_id)
        del self._tasks[task_id]

    def complete(self, task_id: int) -> None:
        task = self.get(task_id)
        self._tasks[task_id] = replace(
            task, status=TaskStatus.COMPLETED, updated_at=_now()
        )

    def add_work_duration(self, task_id: int, minutes: int) -> None:
        check_minutes(minutes)
        task = self.get(task_id)
        self._tasks[task_id] = replace(
            task, work_duration=task.work_duration + minutes, updated_at=_now()
        )
