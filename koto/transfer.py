"""
JSON export/import of the task list.

Export writes every task as a JSON array. Import parses and validates the
whole document against TASK_FILE_SCHEMA before any record is written, then
inserts each record as a new task (ids and timestamps are regenerated).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jsonschema import ValidationError as SchemaValidationError
from jsonschema import validate

from .errors import ImportFormatError, KotoError, StoreError, TaskFileNotFoundError
from .models import Priority, Task, TaskStatus, format_timestamp, parse_timestamp
from .store import TaskStore

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_PATH = "todos_export.json"

_TIMESTAMP_PATTERN = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$"

TASK_FILE_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["title", "status", "priority"],
        "properties": {
            "id": {"type": "integer"},
            "title": {"type": "string", "pattern": r"\S"},
            "description": {"type": "string"},
            "status": {"enum": [s.value for s in TaskStatus]},
            "priority": {"enum": [p.value for p in Priority]},
            "due_date": {
                "anyOf": [
                    {"type": "null"},
                    {"type": "string", "pattern": _TIMESTAMP_PATTERN},
                ]
            },
            "work_duration": {"type": "integer", "minimum": 0},
            "created_at": {"type": ["string", "null"]},
            "updated_at": {"type": ["string", "null"]},
        },
    },
}


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "title": task.title,
        "description": task.description,
        "status": int(task.status),
        "priority": int(task.priority),
        "due_date": format_timestamp(task.due_date),
        "work_duration": task.work_duration,
        "created_at": format_timestamp(task.created_at),
        "updated_at": format_timestamp(task.updated_at),
    }


def tasks_to_json(tasks: list[Task]) -> str:
    return json.dumps([task_to_dict(t) for t in tasks], indent=2, ensure_ascii=False)


def tasks_from_json(text: str) -> list[Task]:
    """Parse and validate an export document. Raises ImportFormatError."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"invalid JSON format: {e.msg} (line {e.lineno})") from e

    try:
        validate(instance=data, schema=TASK_FILE_SCHEMA)
    except SchemaValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "root"
        raise ImportFormatError(f"invalid JSON format at {where}: {e.message}") from e

    tasks = []
    for index, record in enumerate(data):
        try:
            due_date = parse_timestamp(record.get("due_date"))
        except ValueError as e:
            raise ImportFormatError(f"invalid JSON format at {index}/due_date: {e}") from e
        tasks.append(
            Task(
                id=record.get("id", 0),
                title=record["title"].strip(),
                description=record.get("description", ""),
                status=TaskStatus(record["status"]),
                priority=Priority(record["priority"]),
                due_date=due_date,
                work_duration=record.get("work_duration", 0),
            )
        )
    return tasks


def export_tasks(store: TaskStore, path: str | Path = DEFAULT_EXPORT_PATH) -> int:
    """Write all tasks to path. Returns the number exported."""
    tasks = store.list()
    path = Path(path).expanduser()
    try:
        path.write_text(tasks_to_json(tasks) + "\n", encoding="utf-8")
        path.chmod(0o600)
    except OSError as e:
        raise StoreError(f"export failed: {e.strerror or e}") from e
    logger.info("Exported %d todos to %s", len(tasks), path)
    return len(tasks)


def import_tasks(store: TaskStore, path: str | Path) -> int:
    """Insert every task from path as a new task. Returns the number imported.

    Format errors abort before anything is written. A store failure part way
    through keeps the records already created and reports how many there were.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise TaskFileNotFoundError(str(path))
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"invalid JSON format: file is not UTF-8 ({e.reason})") from e
    except OSError as e:
        raise StoreError(f"import failed: {e.strerror or e}") from e

    tasks = tasks_from_json(text)

    imported = 0
    for task in tasks:
        try:
            created = store.create(task.title, task.description, task.priority, task.due_date)
            if task.work_duration > 0:
                store.add_work_duration(created.id, task.work_duration)
            if task.is_completed:
                store.complete(created.id)
        except KotoError as e:
            logger.warning("Import stopped after %d of %d todos: %s", imported, len(tasks), e)
            raise StoreError(
                f"import failed after {imported} of {len(tasks)} todos: {e}"
            ) from e
        imported += 1

    logger.info("Imported %d todos from %s", imported, path)
    return imported
