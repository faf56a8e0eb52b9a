"""Exception types raised by the store, the transfer layer and the parser.

The TUI never lets these escape the event loop: the effect runner turns
them into result events and the state machine shows them as transient
error text.
"""


class KotoError(Exception):
    """Base class for all koto errors."""


class ValidationError(KotoError):
    """Rejected input: empty title, bad priority, non-positive duration."""


class NotFoundError(KotoError):
    """No task with the requested id."""

    def __init__(self, task_id: int | None = None):
        self.task_id = task_id
        super().__init__("todo not found")


class StoreError(KotoError):
    """Generic persistence failure."""


class ImportFormatError(KotoError):
    """Import file is not valid JSON or does not match the task schema."""


class TaskFileNotFoundError(KotoError, FileNotFoundError):
    """Import path does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"file not found: {path}")

    def __str__(self) -> str:
        return f"file not found: {self.path}"


class ParseError(KotoError):
    """Bad command syntax. Never reaches the store."""


class NotACommand(ParseError):
    def __init__(self, line: str = ""):
        self.line = line
        super().__init__("commands must start with /")


class UnknownCommand(ParseError):
    def __init__(self, token: str):
        self.token = token
        super().__init__(f"unknown command: {token}")


class UsageError(ParseError):
    def __init__(self, usage: str):
        self.usage = usage
        super().__init__(usage)


class InvalidID(ParseError):
    def __init__(self, raw: str = ""):
        self.raw = raw
        super().__init__("invalid todo ID")
