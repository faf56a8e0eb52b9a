"""
Executes store effects and converts the outcome into an event.

`EffectRunner.run` is synchronous and never raises for store or file
failures; the app calls it from a worker thread and posts the returned
event back into the loop.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from ..errors import KotoError
from ..models import TaskStatus
from ..store import TaskStore
from ..transfer import export_tasks, import_tasks
from .events import (
    CommandFinished,
    CompleteTask,
    CountTasks,
    CreateTask,
    DeleteTask,
    Event,
    ExportTasks,
    FinishPomodoro,
    ImportTasks,
    LoadTasks,
    PomodoroFinished,
    RecordWork,
    StoreEffect,
    TasksLoaded,
    UpdateTask,
)
from .pomodoro import POMODORO_MINUTES

logger = logging.getLogger(__name__)


class EffectRunner:
    """Runs store effects against a TaskStore."""

    def __init__(self, store: TaskStore):
        self._store = store
        self._handlers: dict[type, Callable[[StoreEffect], Event]] = {
            LoadTasks: self._load,
            CreateTask: self._create,
            UpdateTask: self._update,
            DeleteTask: self._delete,
            CompleteTask: self._complete,
            CountTasks: self._count,
            ExportTasks: self._export,
            ImportTasks: self._import,
            RecordWork: self._record_work,
            FinishPomodoro: self._finish_pomodoro,
        }

    def handles(self, effect: object) -> bool:
        return type(effect) in self._handlers

    def run(self, effect: StoreEffect) -> Event:
        handler = self._handlers[type(effect)]
        try:
            return handler(effect)
        except (KotoError, OSError) as e:
            logger.warning("%s failed: %s", type(effect).__name__, e)
            return self.failure(effect, str(e))

    def failure(self, effect: StoreEffect, error: str) -> Event:
        """Result event reporting that effect failed with error."""
        if isinstance(effect, LoadTasks):
            return TasksLoaded(error=error)
        if isinstance(effect, FinishPomodoro):
            return PomodoroFinished(
                effect.session,
                effect.task_id,
                error=f"failed to record work duration: {error}",
            )
        if isinstance(effect, RecordWork):
            return CommandFinished(error=f"failed to record work duration: {error}")
        return CommandFinished(error=error)

    def _list(self, status: TaskStatus | None):
        if status is None:
            return self._store.list()
        return self._store.list_by_status(status)

    def _load(self, effect: LoadTasks) -> Event:
        return TasksLoaded(tuple(self._list(effect.status)))

    def _create(self, effect: CreateTask) -> Event:
        task = self._store.create(effect.title, effect.description, effect.priority)
        logger.info("Added todo #%d", task.id)
        return CommandFinished(message="Todo added successfully")

    def _update(self, effect: UpdateTask) -> Event:
        task = self._store.get(effect.task_id)
        self._store.update(
            replace(
                task,
                title=effect.title,
                description=effect.description,
                priority=effect.priority,
            )
        )
        return CommandFinished(message="Todo updated successfully")

    def _delete(self, effect: DeleteTask) -> Event:
        self._store.delete(effect.task_id)
        return CommandFinished(message=f"Deleted todo #{effect.task_id}")

    def _complete(self, effect: CompleteTask) -> Event:
        self._store.complete(effect.task_id)
        return CommandFinished(message=f"Marked todo #{effect.task_id} as completed")

    def _count(self, effect: CountTasks) -> Event:
        return CommandFinished(message=f"Showing {len(self._list(effect.status))} todos")

    def _export(self, effect: ExportTasks) -> Event:
        count = export_tasks(self._store, effect.path)
        return CommandFinished(message=f"Exported {count} todos to {effect.path}")

    def _import(self, effect: ImportTasks) -> Event:
        count = import_tasks(self._store, effect.path)
        return CommandFinished(message=f"Imported {count} todos from {effect.path}")

    def _record_work(self, effect: RecordWork) -> Event:
        self._store.add_work_duration(effect.task_id, effect.minutes)
        return CommandFinished(
            message=(
                f"Pomodoro stopped. {effect.minutes} minutes recorded "
                f"for todo #{effect.task_id}"
            )
        )

    def _finish_pomodoro(self, effect: FinishPomodoro) -> Event:
        if effect.task_id is not None:
            self._store.add_work_duration(effect.task_id, POMODORO_MINUTES)
        return PomodoroFinished(effect.session, effect.task_id)
