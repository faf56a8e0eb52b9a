"""
The view-state machine.

`update(state, event)` is the only way the view changes. It returns the
next ViewState and a list of effects for the loop to run; it never touches
the store, the clock or the terminal itself. Results of effects come back
as ordinary events (TasksLoaded, CommandFinished, PomodoroFinished, Tick).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from ..errors import ParseError
from ..models import Priority
from .commands import (
    AddCommand,
    Command,
    DeleteCommand,
    DoneCommand,
    EditCommand,
    ExitCommand,
    ExportCommand,
    HelpCommand,
    ImportCommand,
    ListCommand,
    PomodoroCommand,
    parse_command,
)
from .events import (
    CommandFinished,
    CompleteTask,
    CountTasks,
    CreateTask,
    DeleteTask,
    Effect,
    Event,
    ExportTasks,
    FinishPomodoro,
    ImportTasks,
    KeyPressed,
    LoadTasks,
    PomodoroFinished,
    Quit,
    RecordWork,
    Resized,
    ScheduleTick,
    TasksLoaded,
    Tick,
    UpdateTask,
)
from .help import help_lines
from .pomodoro import POMODORO_MINUTES
from .state import Mode, ViewState, WizardState, WizardStep, clamp_cursor

Result = tuple[ViewState, list[Effect]]

TASK_NOT_FOUND = "task not found"
PRIORITY_KEYS = {"1": Priority.LOW, "2": Priority.MEDIUM, "3": Priority.HIGH}


def require_all_modes(table: dict, name: str) -> dict:
    """Fail at import time if a per-mode dispatch table misses a mode."""
    missing = set(Mode) - set(table)
    if missing:
        names = ", ".join(sorted(m.name for m in missing))
        raise TypeError(f"{name} has no entry for: {names}")
    return table


def initial_state(width: int = 0, height: int = 0) -> ViewState:
    return ViewState(mode=Mode.BANNER, width=width, height=height)


def initial_effects() -> list[Effect]:
    return [LoadTasks()]


def update(state: ViewState, event: Event) -> Result:
    handler = EVENT_HANDLERS[type(event)]
    return handler(state, event)


# --- helpers -----------------------------------------------------------------


def _quit(state: ViewState) -> Result:
    return replace(state, quitting=True), [Quit()]


def _to_list(state: ViewState, **changes) -> ViewState:
    return replace(
        state,
        mode=Mode.LIST,
        input_buffer="",
        wizard=WizardState(),
        detail_task_id=None,
        help_offset=0,
        **changes,
    )


def _edit_buffer(state: ViewState, event: KeyPressed) -> ViewState | None:
    """Apply a line-editing key to the input buffer. None if not an edit key."""
    if event.key == "backspace":
        return replace(state, input_buffer=state.input_buffer[:-1])
    if event.key == "ctrl+u":
        return replace(state, input_buffer="")
    if event.character and event.character.isprintable():
        return replace(state, input_buffer=state.input_buffer + event.character)
    return None


def _open_help(state: ViewState) -> ViewState:
    return replace(state, mode=Mode.HELP, input_buffer="", help_offset=0)


def _open_add(state: ViewState) -> ViewState:
    return replace(state, mode=Mode.ADD_WIZARD, wizard=WizardState(), input_buffer="")


def _open_edit(state: ViewState, task_id: int) -> Result:
    task = state.find_task(task_id)
    if task is None:
        return replace(state, error=TASK_NOT_FOUND), []
    wizard = WizardState(
        step=WizardStep.TITLE,
        title=task.title,
        description=task.description,
        priority=task.priority,
        task_id=task.id,
    )
    return replace(
        state,
        mode=Mode.EDIT_WIZARD,
        wizard=wizard,
        input_buffer=task.title,
        detail_task_id=None,
    ), []


def _start_pomodoro(state: ViewState, task_id: int | None) -> Result:
    if task_id is not None and state.find_task(task_id) is None:
        return replace(state, error=TASK_NOT_FOUND), []
    pomodoro = state.pomodoro.start(task_id)
    new_state = replace(
        state,
        mode=Mode.POMODORO,
        pomodoro=pomodoro,
        input_buffer="",
        detail_task_id=None,
    )
    return new_state, [ScheduleTick(pomodoro.session)]


# --- commands ----------------------------------------------------------------


def _run_command(state: ViewState, command: Command) -> Result:
    if isinstance(command, AddCommand):
        return _open_add(state), []
    if isinstance(command, EditCommand):
        return _open_edit(state, command.task_id)
    if isinstance(command, PomodoroCommand):
        return _start_pomodoro(state, command.task_id)
    if isinstance(command, DeleteCommand):
        return state, [DeleteTask(command.task_id)]
    if isinstance(command, DoneCommand):
        return state, [CompleteTask(command.task_id)]
    if isinstance(command, ListCommand):
        return replace(state, status_filter=command.status), [CountTasks(command.status)]
    if isinstance(command, ExportCommand):
        return state, [ExportTasks(command.path)]
    if isinstance(command, ImportCommand):
        return state, [ImportTasks(command.path)]
    if isinstance(command, HelpCommand):
        return _open_help(state), []
    if isinstance(command, ExitCommand):
        return _quit(state)
    raise TypeError(f"unhandled command: {command!r}")


def _submit_list_input(state: ViewState) -> Result:
    line = state.input_buffer.strip()
    state = replace(state, input_buffer="")

    if not line:
        task = state.selected_task
        if task is None:
            return state, []
        return replace(state, mode=Mode.DETAIL, detail_task_id=task.id), []

    try:
        command = parse_command(line)
    except ParseError as e:
        return replace(state, error=str(e)), []
    return _run_command(state, command)


# --- key handlers per mode ---------------------------------------------------


def _banner_key(state: ViewState, event: KeyPressed) -> Result:
    return replace(state, mode=Mode.LIST), []


def _list_key(state: ViewState, event: KeyPressed) -> Result:
    key = event.key
    if key == "escape":
        return replace(state, input_buffer=""), []
    if key == "enter":
        return _submit_list_input(state)

    # j/k/? are text once the user has started typing a command
    navigating = not state.input_buffer
    if key == "up" or (navigating and key == "k"):
        return replace(state, cursor=clamp_cursor(state.cursor - 1, len(state.tasks))), []
    if key == "down" or (navigating and key == "j"):
        return replace(state, cursor=clamp_cursor(state.cursor + 1, len(state.tasks))), []
    if navigating and event.character == "?":
        return _open_help(state), []

    edited = _edit_buffer(state, event)
    return (edited or state), []


def _help_key(state: ViewState, event: KeyPressed) -> Result:
    key, char = event.key, event.character
    if key in ("escape", "ctrl+c") or char in ("q", "?"):
        return _to_list(state), []

    page = max(state.height - 2, 1)
    last = max(len(help_lines()) - page, 0)
    offset = state.help_offset
    if key == "up" or char == "k":
        offset -= 1
    elif key == "down" or char == "j":
        offset += 1
    elif key == "pageup" or char == "b":
        offset -= page
    elif key in ("pagedown", "space") or char in ("f", " "):
        offset += page
    elif key == "home" or char == "g":
        offset = 0
    elif key == "end" or char == "G":
        offset = last
    return replace(state, help_offset=max(0, min(offset, last))), []


def _commit_wizard(state: ViewState, wizard: WizardState) -> Result:
    if state.mode is Mode.ADD_WIZARD:
        effect = CreateTask(wizard.title, wizard.description, wizard.priority)
    else:
        effect = UpdateTask(wizard.task_id, wizard.title, wizard.description, wizard.priority)
    return _to_list(state), [effect]


def _wizard_enter(state: ViewState) -> Result:
    wizard = state.wizard
    value = state.input_buffer

    if wizard.step == WizardStep.TITLE:
        title = value.strip()
        if not title:
            return replace(state, error="title cannot be empty"), []
        wizard = replace(wizard, title=title, step=WizardStep.DESCRIPTION)
        return replace(state, wizard=wizard, input_buffer=wizard.description), []

    if wizard.step == WizardStep.DESCRIPTION:
        return _commit_wizard(state, replace(wizard, description=value.strip()))

    choice = value.strip()
    if choice and choice not in PRIORITY_KEYS:
        return replace(state, error="invalid priority (use 1, 2 or 3)"), []
    priority = PRIORITY_KEYS.get(choice, wizard.priority)
    return _commit_wizard(state, replace(wizard, priority=priority))


def _wizard_key(state: ViewState, event: KeyPressed) -> Result:
    wizard = state.wizard
    key = event.key

    if key == "escape":
        if wizard.step == WizardStep.TITLE:
            what = "Add" if state.mode is Mode.ADD_WIZARD else "Edit"
            return _to_list(state, message=f"{what} cancelled"), []
        wizard = replace(wizard, step=WizardStep.TITLE)
        return replace(state, wizard=wizard, input_buffer=wizard.title), []

    if key == "enter":
        return _wizard_enter(state)

    if key == "tab" and wizard.step == WizardStep.DESCRIPTION:
        wizard = replace(wizard, description=state.input_buffer.strip(), step=WizardStep.PRIORITY)
        choice = next(k for k, p in PRIORITY_KEYS.items() if p == wizard.priority)
        return replace(state, wizard=wizard, input_buffer=choice), []

    edited = _edit_buffer(state, event)
    return (edited or state), []


def _pomodoro_key(state: ViewState, event: KeyPressed) -> Result:
    if event.key not in ("escape", "enter"):
        return state, []

    pomodoro = state.pomodoro
    if not pomodoro.running:
        # Completed: FinishPomodoro already records the full session
        return _to_list(state, pomodoro=pomodoro), []

    stopped = pomodoro.stop()
    verb = "cancelled" if event.key == "escape" else "stopped"
    new_state = _to_list(state, pomodoro=stopped, message=f"Pomodoro {verb}")

    minutes = stopped.elapsed_minutes
    if stopped.target_task_id is not None and minutes > 0:
        return new_state, [RecordWork(stopped.target_task_id, minutes)]
    return new_state, []


def _detail_key(state: ViewState, event: KeyPressed) -> Result:
    key, char = event.key, event.character
    task_id = state.detail_task_id

    if key in ("enter", "escape") or char == "q":
        return _to_list(state), []
    if char == "e":
        return _open_edit(state, task_id)
    if char == "d":
        if state.find_task(task_id) is None:
            return replace(state, error=TASK_NOT_FOUND), []
        return _to_list(state), [CompleteTask(task_id)]
    if char == "p":
        return _start_pomodoro(state, task_id)
    return state, []


KEY_HANDLERS: dict[Mode, Callable[[ViewState, KeyPressed], Result]] = require_all_modes(
    {
        Mode.BANNER: _banner_key,
        Mode.LIST: _list_key,
        Mode.HELP: _help_key,
        Mode.ADD_WIZARD: _wizard_key,
        Mode.EDIT_WIZARD: _wizard_key,
        Mode.POMODORO: _pomodoro_key,
        Mode.DETAIL: _detail_key,
    },
    "KEY_HANDLERS",
)


# --- event handlers ----------------------------------------------------------


def _on_key(state: ViewState, event: KeyPressed) -> Result:
    # Ctrl+C quits from everywhere except help, where it closes the page
    if event.key == "ctrl+c" and state.mode is not Mode.HELP:
        return _quit(state)
    state = replace(state, message="", error="")
    return KEY_HANDLERS[state.mode](state, event)


def _on_resize(state: ViewState, event: Resized) -> Result:
    return replace(state, width=event.width, height=event.height), []


def _on_tick(state: ViewState, event: Tick) -> Result:
    pomodoro = state.pomodoro
    if state.mode is not Mode.POMODORO or not pomodoro.accepts(event.session):
        return state, []

    pomodoro = pomodoro.tick()
    state = replace(state, pomodoro=pomodoro)
    if pomodoro.completed:
        return state, [FinishPomodoro(pomodoro.session, pomodoro.target_task_id)]
    return state, [ScheduleTick(pomodoro.session)]


def _on_tasks_loaded(state: ViewState, event: TasksLoaded) -> Result:
    if event.error:
        return replace(state, error=event.error), []
    tasks = tuple(event.tasks)
    return replace(state, tasks=tasks, cursor=clamp_cursor(state.cursor, len(tasks))), []


def _on_command_finished(state: ViewState, event: CommandFinished) -> Result:
    state = replace(state, message=event.message, error=event.error)
    return state, [LoadTasks(state.status_filter)]


def _on_pomodoro_finished(state: ViewState, event: PomodoroFinished) -> Result:
    reload = [LoadTasks(state.status_filter)]
    if event.session != state.pomodoro.session:
        return state, reload

    if state.mode is Mode.POMODORO:
        state = _to_list(state)
    if event.error:
        return replace(state, error=event.error), reload
    if event.task_id is not None:
        message = (
            f"Pomodoro completed! {POMODORO_MINUTES} minutes recorded "
            f"for todo #{event.task_id}"
        )
    else:
        message = "Pomodoro completed!"
    return replace(state, message=message), reload


EVENT_HANDLERS: dict[type, Callable[[ViewState, Event], Result]] = {
    KeyPressed: _on_key,
    Resized: _on_resize,
    Tick: _on_tick,
    TasksLoaded: _on_tasks_loaded,
    CommandFinished: _on_command_finished,
    PomodoroFinished: _on_pomodoro_finished,
}
