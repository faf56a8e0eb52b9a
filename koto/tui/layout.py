"""Responsive column widths and display-width aware string helpers.

Widths are terminal cells, not characters: East Asian wide characters and
most emoji take two cells, combining marks take none.
"""

from __future__ import annotations

from dataclasses import dataclass

from wcwidth import wcwidth

MIN_TERMINAL_WIDTH = 100
ELLIPSIS = "..."

# Fixed list columns
NO_COL = 5
PRIORITY_COL = 12
WORK_TIME_COL = 12
CREATED_COL = 13
COLUMN_GAP = 2
MIN_TITLE_COL = 20

MARGIN_BUFFER = 4


def char_width(ch: str) -> int:
    """Cells occupied by one code point; control characters count as 0."""
    return max(wcwidth(ch), 0)


def display_width(s: str) -> int:
    return sum(char_width(ch) for ch in s)


def truncate(s: str, width: int) -> str:
    """Cut s to at most width cells, ending in '...' when anything was cut."""
    if display_width(s) <= width:
        return s
    if width <= len(ELLIPSIS):
        return ELLIPSIS[: max(width, 0)]

    target = width - len(ELLIPSIS)
    out = []
    used = 0
    for ch in s:
        w = char_width(ch)
        if used + w > target:
            break
        out.append(ch)
        used += w
    return "".join(out) + ELLIPSIS


def pad(s: str, width: int) -> str:
    """Right-pad s with spaces to width cells. Wider strings are returned as-is."""
    missing = width - display_width(s)
    if missing <= 0:
        return s
    return s + " " * missing


def center(s: str, width: int) -> str:
    """Center s within width cells (extra space goes to the right)."""
    missing = width - display_width(s)
    if missing <= 0:
        return s
    left = missing // 2
    return " " * left + s + " " * (missing - left)


@dataclass(frozen=True)
class ResponsiveLayout:
    """Widths for every view, derived from the terminal width."""

    terminal_width: int
    content_width: int
    no_col: int
    title_col: int
    priority_col: int
    work_time_col: int
    created_col: int
    detail_box: int
    detail_column: int
    pomodoro_box: int
    progress_bar: int
    edit_input: int

    @property
    def too_narrow(self) -> bool:
        return self.terminal_width < MIN_TERMINAL_WIDTH

    @property
    def list_row(self) -> int:
        """Width of one rendered table row, edge spaces included."""
        return (
            self.no_col + self.title_col + self.priority_col
            + self.work_time_col + self.created_col + 4 * COLUMN_GAP + 2
        )

    @classmethod
    def for_width(cls, terminal_width: int) -> "ResponsiveLayout":
        content = terminal_width - MARGIN_BUFFER
        fixed = NO_COL + PRIORITY_COL + WORK_TIME_COL + CREATED_COL + 4 * COLUMN_GAP

        return cls(
            terminal_width=terminal_width,
            content_width=content,
            no_col=NO_COL,
            title_col=max(content - fixed, MIN_TITLE_COL),
            priority_col=PRIORITY_COL,
            work_time_col=WORK_TIME_COL,
            created_col=CREATED_COL,
            detail_box=max(content - 6, 60),
            detail_column=max((content - 12) // 3, 20),
            pomodoro_box=max(content - 26, 50),
            progress_bar=max(content - 36, 40),
            edit_input=max(content - 16, 40),
        )
