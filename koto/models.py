"""Task snapshot types shared by the store and the TUI."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum

# Fixed textual date-time format used for export files
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


class TaskStatus(IntEnum):
    PENDING = 0
    COMPLETED = 1

    @property
    def label(self) -> str:
        return self.name.capitalize()


class Priority(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class Task:
    """Immutable snapshot of a stored task."""

    id: int
    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    due_date: datetime | None = None
    work_duration: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def is_pending(self) -> bool:
        return self.status == TaskStatus.PENDING

    def is_overdue(self, now: datetime | None = None) -> bool:
        """True if the due date has passed and the task is still pending."""
        if self.due_date is None:
            return False
        return (now or datetime.now()) > self.due_date and self.is_pending

    @property
    def work_duration_label(self) -> str:
        """Format accumulated work as '1h 30m' / '45m'; empty when none."""
        if self.work_duration <= 0:
            return ""
        hours, minutes = divmod(self.work_duration, 60)
        if hours:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.strptime(value, TIMESTAMP_FORMAT)
