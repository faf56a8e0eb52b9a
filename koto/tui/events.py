"""
Events fed into the state machine and effects it asks the loop to run.

Events come from the terminal (keys, resizes), from the timer, or from
completed store calls. Effects are descriptions only; the EffectRunner
executes them and turns the outcome back into events.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Priority, Task, TaskStatus

# --- events -----------------------------------------------------------------


@dataclass(frozen=True)
class KeyPressed:
    """A key press. `key` uses Textual key names ('enter', 'ctrl+c', 'a')."""

    key: str
    character: str | None = None


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class Tick:
    session: int


@dataclass(frozen=True)
class TasksLoaded:
    tasks: tuple[Task, ...] = ()
    error: str = ""


@dataclass(frozen=True)
class CommandFinished:
    message: str = ""
    error: str = ""


@dataclass(frozen=True)
class PomodoroFinished:
    session: int
    task_id: int | None = None
    error: str = ""


Event = KeyPressed | Resized | Tick | TasksLoaded | CommandFinished | PomodoroFinished

# --- effects ----------------------------------------------------------------


@dataclass(frozen=True)
class LoadTasks:
    status: TaskStatus | None = None


@dataclass(frozen=True)
class CreateTask:
    title: str
    description: str = ""
    priority: Priority = Priority.MEDIUM


@dataclass(frozen=True)
class UpdateTask:
    task_id: int
    title: str
    description: str
    priority: Priority


@dataclass(frozen=True)
class DeleteTask:
    task_id: int


@dataclass(frozen=True)
class CompleteTask:
    task_id: int


@dataclass(frozen=True)
class CountTasks:
    """Run a /list query and report how many tasks it matched."""

    status: TaskStatus | None = None


@dataclass(frozen=True)
class ExportTasks:
    path: str


@dataclass(frozen=True)
class ImportTasks:
    path: str


@dataclass(frozen=True)
class RecordWork:
    """Add minutes to a task after a stopped Pomodoro."""

    task_id: int
    minutes: int


@dataclass(frozen=True)
class FinishPomodoro:
    """Record the full 25 minutes (if targeted) and report completion."""

    session: int
    task_id: int | None = None


@dataclass(frozen=True)
class ScheduleTick:
    session: int
    delay: float = 1.0


@dataclass(frozen=True)
class Quit:
    pass


StoreEffect = (
    LoadTasks | CreateTask | UpdateTask | DeleteTask | CompleteTask | CountTasks
    | ExportTasks | ImportTasks | RecordWork | FinishPomodoro
)
Effect = StoreEffect | ScheduleTick | Quit
