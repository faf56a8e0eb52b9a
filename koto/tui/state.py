"""Immutable view state owned by the event loop."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..models import Priority, Task, TaskStatus
from .pomodoro import PomodoroState


class Mode(Enum):
    """Top-level view. Exactly one is active at a time."""

    BANNER = "banner"
    LIST = "list"
    HELP = "help"
    ADD_WIZARD = "add"
    EDIT_WIZARD = "edit"
    POMODORO = "pomodoro"
    DETAIL = "detail"


class WizardStep:
    TITLE = 0
    DESCRIPTION = 1
    PRIORITY = 2


@dataclass(frozen=True)
class WizardState:
    """Fields collected so far by the add/edit wizard."""

    step: int = WizardStep.TITLE
    title: str = ""
    description: str = ""
    priority: Priority = Priority.MEDIUM
    task_id: int | None = None


@dataclass(frozen=True)
class ViewState:
    mode: Mode = Mode.BANNER
    tasks: tuple[Task, ...] = ()
    cursor: int = 0
    input_buffer: str = ""
    wizard: WizardState = field(default_factory=WizardState)
    pomodoro: PomodoroState = field(default_factory=PomodoroState)
    detail_task_id: int | None = None
    help_offset: int = 0
    status_filter: TaskStatus | None = None
    message: str = ""
    error: str = ""
    width: int = 0
    height: int = 0
    quitting: bool = False

    @property
    def selected_task(self) -> Task | None:
        if not self.tasks:
            return None
        return self.tasks[self.cursor]

    def find_task(self, task_id: int | None) -> Task | None:
        if task_id is None:
            return None
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


def clamp_cursor(cursor: int, task_count: int) -> int:
    if task_count == 0:
        return 0
    return max(0, min(cursor, task_count - 1))
