"""Parse input lines such as '/done 3' into command values.

The parser performs no I/O. The state machine decides what each command
does: /add, /edit, /pomo and /help change the view, the rest become
effects against the store.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidID, NotACommand, UnknownCommand, UsageError
from ..models import TaskStatus
from ..transfer import DEFAULT_EXPORT_PATH


@dataclass(frozen=True)
class AddCommand:
    pass


@dataclass(frozen=True)
class EditCommand:
    task_id: int


@dataclass(frozen=True)
class PomodoroCommand:
    task_id: int | None = None


@dataclass(frozen=True)
class DeleteCommand:
    task_id: int


@dataclass(frozen=True)
class DoneCommand:
    task_id: int


@dataclass(frozen=True)
class ListCommand:
    status: TaskStatus | None = None


@dataclass(frozen=True)
class ExportCommand:
    path: str = DEFAULT_EXPORT_PATH


@dataclass(frozen=True)
class ImportCommand:
    path: str


@dataclass(frozen=True)
class HelpCommand:
    pass


@dataclass(frozen=True)
class ExitCommand:
    pass


Command = (
    AddCommand | EditCommand | PomodoroCommand | DeleteCommand | DoneCommand
    | ListCommand | ExportCommand | ImportCommand | HelpCommand | ExitCommand
)

STATUS_FILTERS = {
    "pending": TaskStatus.PENDING,
    "completed": TaskStatus.COMPLETED,
    "all": None,
}


def _parse_id(raw: str) -> int:
    # int() also takes digit separators and non-ASCII digits
    if not raw.isascii() or "_" in raw:
        raise InvalidID(raw)
    try:
        return int(raw, 10)
    except ValueError:
        raise InvalidID(raw) from None


def _one_id(args: list[str], usage: str) -> int:
    if len(args) != 1:
        raise UsageError(usage)
    return _parse_id(args[0])


def _parse_add(args: list[str]) -> Command:
    if args:
        raise UsageError("usage: /add")
    return AddCommand()


def _parse_edit(args: list[str]) -> Command:
    return EditCommand(_one_id(args, "usage: /edit <id>"))


def _parse_pomo(args: list[str]) -> Command:
    if len(args) > 1:
        raise UsageError("usage: /pomo [todo_id]")
    if not args:
        return PomodoroCommand()
    return PomodoroCommand(_parse_id(args[0]))


def _parse_delete(args: list[str]) -> Command:
    return DeleteCommand(_one_id(args, "usage: /delete <id>"))


def _parse_done(args: list[str]) -> Command:
    return DoneCommand(_one_id(args, "usage: /done <id>"))


def _parse_list(args: list[str]) -> Command:
    status = None
    for arg in args:
        if not arg.startswith("--status="):
            raise UsageError("usage: /list [--status=pending|completed|all]")
        value = arg.removeprefix("--status=").lower()
        if value not in STATUS_FILTERS:
            raise UsageError("invalid status (use: pending, completed, all)")
        status = STATUS_FILTERS[value]
    return ListCommand(status)


def _parse_export(args: list[str]) -> Command:
    if len(args) > 1:
        raise UsageError("usage: /export [filepath]")
    return ExportCommand(args[0]) if args else ExportCommand()


def _parse_import(args: list[str]) -> Command:
    if len(args) != 1:
        raise UsageError("usage: /import <filepath>")
    return ImportCommand(args[0])


def _parse_help(args: list[str]) -> Command:
    return HelpCommand()


def _parse_exit(args: list[str]) -> Command:
    return ExitCommand()


PARSERS = {
    "/add": _parse_add,
    "/edit": _parse_edit,
    "/pomo": _parse_pomo,
    "/delete": _parse_delete,
    "/done": _parse_done,
    "/list": _parse_list,
    "/export": _parse_export,
    "/import": _parse_import,
    "/help": _parse_help,
    "/exit": _parse_exit,
}


def parse_command(line: str) -> Command:
    """Parse one input line.

    Raises NotACommand, UnknownCommand, UsageError or InvalidID.
    """
    line = line.strip()
    if not line.startswith("/"):
        raise NotACommand(line)

    token, *args = line.split()
    parser = PARSERS.get(token)
    if parser is None:
        raise UnknownCommand(token)
    return parser(args)
