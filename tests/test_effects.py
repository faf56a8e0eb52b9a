"""Tests for the effect runner, including end-to-end loop scenarios."""

from pathlib import Path

import pytest

from koto.errors import StoreError
from koto.models import Priority, TaskStatus
from koto.store import MemoryTaskStore
from koto.tui.effects import EffectRunner
from koto.tui.events import (
    CommandFinished,
    CompleteTask,
    CountTasks,
    CreateTask,
    DeleteTask,
    ExportTasks,
    FinishPomodoro,
    ImportTasks,
    KeyPressed,
    LoadTasks,
    PomodoroFinished,
    Quit,
    RecordWork,
    ScheduleTick,
    TasksLoaded,
    Tick,
    UpdateTask,
)
from koto.tui.machine import initial_effects, initial_state, update
from koto.tui.state import Mode


@pytest.fixture
def store() -> MemoryTaskStore:
    return MemoryTaskStore()


@pytest.fixture
def runner(store: MemoryTaskStore) -> EffectRunner:
    return EffectRunner(store)


class Loop:
    """Synchronous stand-in for the app: runs store effects inline, records ticks."""

    def __init__(self, store: MemoryTaskStore):
        self.runner = EffectRunner(store)
        self.state = initial_state(120, 40)
        self.scheduled: list[ScheduleTick] = []
        self.quit = False
        self.run(initial_effects())

    def run(self, effects: list) -> None:
        for effect in effects:
            if isinstance(effect, ScheduleTick):
                self.scheduled.append(effect)
            elif isinstance(effect, Quit):
                self.quit = True
            else:
                self.feed(self.runner.run(effect))

    def feed(self, event) -> None:
        self.state, effects = update(self.state, event)
        self.run(effects)

    def key(self, key: str, character: str | None = None) -> None:
        self.feed(KeyPressed(key, character))

    def type(self, text: str) -> None:
        for ch in text:
            self.key("space" if ch == " " else ch, ch)

    def submit(self, text: str) -> None:
        self.type(text)
        self.key("enter")

    def fire_ticks(self) -> None:
        while self.scheduled:
            tick = self.scheduled.pop(0)
            self.feed(Tick(tick.session))


class TestEffectRunner:
    """Tests for individual effects."""

    def test_load(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        store.create("one")
        event = runner.run(LoadTasks())
        assert isinstance(event, TasksLoaded)
        assert [t.title for t in event.tasks] == ["one"]
        assert event.error == ""

    def test_load_by_status(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        store.create("open")
        done = store.create("done")
        store.complete(done.id)
        event = runner.run(LoadTasks(TaskStatus.COMPLETED))
        assert [t.title for t in event.tasks] == ["done"]

    def test_create(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        event = runner.run(CreateTask("Buy milk", "", Priority.MEDIUM))
        assert event == CommandFinished(message="Todo added successfully")
        assert store.list()[0].title == "Buy milk"

    def test_create_empty_title(self, runner: EffectRunner) -> None:
        event = runner.run(CreateTask("  "))
        assert event == CommandFinished(error="title cannot be empty")

    def test_update(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        task = store.create("old", "desc", Priority.LOW)
        event = runner.run(UpdateTask(task.id, "new", "better", Priority.HIGH))
        assert event.message == "Todo updated successfully"
        updated = store.get(task.id)
        assert (updated.title, updated.description, updated.priority) == ("new", "better", Priority.HIGH)

    def test_delete_and_missing(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        task = store.create("gone")
        assert runner.run(DeleteTask(task.id)).message == f"Deleted todo #{task.id}"
        assert runner.run(DeleteTask(task.id)).error == "todo not found"

    def test_complete(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        task = store.create("finish me")
        event = runner.run(CompleteTask(task.id))
        assert event.message == f"Marked todo #{task.id} as completed"
        assert store.get(task.id).is_completed

    def test_count(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        store.create("a")
        store.create("b")
        assert runner.run(CountTasks()).message == "Showing 2 todos"
        assert runner.run(CountTasks(TaskStatus.COMPLETED)).message == "Showing 0 todos"

    def test_record_work(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        task = store.create("focus")
        event = runner.run(RecordWork(task.id, 12))
        assert event.message == f"Pomodoro stopped. 12 minutes recorded for todo #{task.id}"
        assert store.get(task.id).work_duration == 12

    def test_record_work_failure(self, runner: EffectRunner) -> None:
        event = runner.run(RecordWork(404, 5))
        assert event.error == "failed to record work duration: todo not found"

    def test_finish_pomodoro(self, store: MemoryTaskStore, runner: EffectRunner) -> None:
        task = store.create("focus")
        event = runner.run(FinishPomodoro(3, task.id))
        assert event == PomodoroFinished(3, task.id)
        assert store.get(task.id).work_duration == 25

    def test_finish_general_pomodoro(self, runner: EffectRunner) -> None:
        assert runner.run(FinishPomodoro(1)) == PomodoroFinished(1)

    def test_finish_pomodoro_failure(self, runner: EffectRunner) -> None:
        event = runner.run(FinishPomodoro(2, 404))
        assert event.session == 2
        assert event.error == "failed to record work duration: todo not found"

    def test_export_import(self, store: MemoryTaskStore, runner: EffectRunner, tmp_path: Path) -> None:
        store.create("a")
        path = str(tmp_path / "out.json")
        assert runner.run(ExportTasks(path)).message == f"Exported 1 todos to {path}"
        assert runner.run(ImportTasks(path)).message == f"Imported 1 todos from {path}"
        assert len(store.list()) == 2

    def test_import_missing_file(self, runner: EffectRunner, tmp_path: Path) -> None:
        path = str(tmp_path / "missing.json")
        assert runner.run(ImportTasks(path)).error == f"file not found: {path}"

    @pytest.mark.parametrize(
        "content",
        [
            b"\xff\xfe[]",
            b'[{"title": "x", "status": 0, "priority": 1, "due_date": "2024-13-45T99:99:99"}]',
        ],
    )
    def test_import_bad_file_reports_error(
        self, store: MemoryTaskStore, runner: EffectRunner, tmp_path: Path, content: bytes
    ) -> None:
        path = tmp_path / "bad.json"
        path.write_bytes(content)
        event = runner.run(ImportTasks(str(path)))
        assert isinstance(event, CommandFinished)
        assert event.error.startswith("invalid JSON format")
        assert store.list() == []

    def test_load_failure(self, runner: EffectRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        def broken():
            raise StoreError("database is locked")

        monkeypatch.setattr(runner._store, "list", broken)
        assert runner.run(LoadTasks()) == TasksLoaded(error="database is locked")

    def test_handles(self, runner: EffectRunner) -> None:
        assert runner.handles(LoadTasks())
        assert not runner.handles(ScheduleTick(1))
        assert not runner.handles(Quit())


class TestScenarios:
    """End-to-end runs of the loop against an in-memory store."""

    def test_add_buy_milk(self, store: MemoryTaskStore) -> None:
        loop = Loop(store)
        loop.key("a", "a")
        assert loop.state.mode is Mode.LIST

        loop.submit("/add")
        loop.submit("Buy milk")
        loop.key("enter")

        tasks = store.list()
        assert len(tasks) == 1
        task = tasks[0]
        assert task.title == "Buy milk"
        assert task.status == TaskStatus.PENDING
        assert task.priority == Priority.MEDIUM
        assert task.work_duration == 0
        assert loop.state.mode is Mode.LIST
        assert loop.state.message == "Todo added successfully"
        assert loop.state.tasks == tuple(tasks)

    def test_full_pomodoro_records_25_minutes(self, store: MemoryTaskStore) -> None:
        task = store.create("deep work")
        loop = Loop(store)
        loop.key("x", "x")
        loop.submit(f"/pomo {task.id}")
        assert loop.state.mode is Mode.POMODORO

        loop.fire_ticks()

        assert store.get(task.id).work_duration == 25
        assert loop.state.mode is Mode.LIST
        assert loop.state.tasks[0].work_duration == 25
        assert loop.state.message == f"Pomodoro completed! 25 minutes recorded for todo #{task.id}"

    def test_done_then_filter(self, store: MemoryTaskStore) -> None:
        first = store.create("first")
        store.create("second")
        loop = Loop(store)
        loop.key("x", "x")

        loop.submit(f"/done {first.id}")
        assert loop.state.message == f"Marked todo #{first.id} as completed"

        loop.submit("/list --status=completed")
        assert loop.state.message == "Showing 1 todos"
        assert [t.id for t in loop.state.tasks] == [first.id]

    def test_delete_unknown(self, store: MemoryTaskStore) -> None:
        loop = Loop(store)
        loop.key("x", "x")
        loop.submit("/delete 9")
        assert loop.state.error == "todo not found"
        assert loop.state.mode is Mode.LIST

    def test_exit(self, store: MemoryTaskStore) -> None:
        loop = Loop(store)
        loop.key("x", "x")
        loop.submit("/exit")
        assert loop.quit
        assert loop.state.quitting
