"""
Frame renderer.

`render(state, layout, theme)` turns a ViewState into the text of one full
frame. It is a pure function: widths come from the ResponsiveLayout,
colours from the Theme, everything else from the state. All measuring and
truncation happens on plain text before the theme paints it.
"""

from __future__ import annotations

from typing import Callable

from .. import __version__
from ..models import Priority, Task
from .help import help_lines
from .layout import (
    MIN_TERMINAL_WIDTH,
    ResponsiveLayout,
    center,
    display_width,
    pad,
    truncate,
)
from .machine import require_all_modes
from .pomodoro import POMODORO_SECONDS
from .state import Mode, ViewState, WizardStep
from .theme import PLAIN_THEME, Theme

# Box drawing characters
BOX_H = "─"
BOX_V = "│"
BOX_TL = "┌"
BOX_TR = "┐"
BOX_BL = "└"
BOX_BR = "┘"

LOGO = [
    "██╗  ██╗ ██████╗ ████████╗ ██████╗ ",
    "██║ ██╔╝██╔═══██╗╚══██╔══╝██╔═══██╗",
    "█████╔╝ ██║   ██║   ██║   ██║   ██║",
    "██╔═██╗ ██║   ██║   ██║   ██║   ██║",
    "██║  ██╗╚██████╔╝   ██║   ╚██████╔╝",
    "╚═╝  ╚═╝ ╚═════╝    ╚═╝    ╚═════╝ ",
]
SUBTITLE = "✨ Your Beautiful Terminal ToDo Manager ✨"

BANNER_BOX_WIDTH = 40
BANNER_TITLE_WIDTH = 22
BANNER_TODO_LIMIT = 5

# Lines of the list view that are not table rows
LIST_CHROME = 12

LIST_HINT = (
    "Commands: /add, /list, /done, /edit, /pomo, /help | "
    "Navigate: ↑/↓ or j/k | Help: ? | Quit: /exit or Ctrl+C"
)

PRIORITY_ROLES = {
    Priority.HIGH: "priority.high",
    Priority.MEDIUM: "priority.medium",
    Priority.LOW: "priority.low",
}

DIGITS = {
    "0": ["█████", "█   █", "█   █", "█   █", "█████"],
    "1": ["  ██ ", " ███ ", "  ██ ", "  ██ ", "█████"],
    "2": ["█████", "    █", "█████", "█    ", "█████"],
    "3": ["█████", "    █", "█████", "    █", "█████"],
    "4": ["█   █", "█   █", "█████", "    █", "    █"],
    "5": ["█████", "█    ", "█████", "    █", "█████"],
    "6": ["█████", "█    ", "█████", "█   █", "█████"],
    "7": ["█████", "    █", "   ██", "  ██ ", " ██  "],
    "8": ["█████", "█   █", "█████", "█   █", "█████"],
    "9": ["█████", "█   █", "█████", "    █", "█████"],
    ":": ["     ", " ██  ", "     ", " ██  ", "     "],
}


def render(
    state: ViewState,
    layout: ResponsiveLayout | None = None,
    theme: Theme = PLAIN_THEME,
) -> str:
    """Render one frame for the current mode."""
    if state.quitting:
        return "Goodbye!"
    if layout is None:
        layout = ResponsiveLayout.for_width(state.width)
    if layout.too_narrow:
        lines = render_too_narrow(state, layout, theme)
    else:
        lines = RENDERERS[state.mode](state, layout, theme)
    return "\n".join(lines)


# --- helpers -----------------------------------------------------------------


def one_line(s: str) -> str:
    return " ".join(s.splitlines())


def tail(s: str, width: int) -> str:
    """The last `width` cells of s, so the cursor end of an input stays visible."""
    out = []
    used = 0
    for ch in reversed(s):
        w = display_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(reversed(out))


def centered(theme: Theme, role: str, text: str, width: int) -> str:
    """Center text by display width, painting only the text itself."""
    text = truncate(text, width)
    missing = max(width - display_width(text), 0)
    left = missing // 2
    return " " * left + theme.paint(role, text)


def box_line(left: str, fill: str, right: str, width: int, theme: Theme) -> str:
    return theme.paint("box", left + fill * (width - 2) + right)


def box_text(
    text: str, width: int, theme: Theme, role: str = "text", align: str = "left"
) -> str:
    """A box row holding text, truncated and padded to the inner width."""
    inner = width - 4
    text = truncate(one_line(text), inner)
    if align == "center":
        padded = center(text, inner)
    else:
        padded = pad(text, inner)
    border = theme.paint("box", BOX_V)
    return f"{border} {theme.paint(role, padded)} {border}"


def box(rows: list[tuple[str, str]], width: int, theme: Theme) -> list[str]:
    """A closed box around (role, text) rows."""
    lines = [box_line(BOX_TL, BOX_H, BOX_TR, width, theme)]
    lines.extend(box_text(text, width, theme, role) for role, text in rows)
    lines.append(box_line(BOX_BL, BOX_H, BOX_BR, width, theme))
    return lines


def side_by_side(boxes: list[list[str]], gap: int = 2) -> list[str]:
    """Join equally tall boxes horizontally."""
    return [(" " * gap).join(parts) for parts in zip(*boxes)]


def status_lines(state: ViewState, theme: Theme) -> list[str]:
    lines = []
    if state.message:
        lines.append(theme.paint("message", state.message))
    if state.error:
        lines.append(theme.paint("error", f"Error: {state.error}"))
    return lines


def visible_window(cursor: int, count: int, capacity: int) -> tuple[int, int]:
    """[start, end) of the rows to draw so that the cursor row is on screen."""
    if capacity <= 0 or count <= capacity:
        return 0, count
    start = max(0, min(cursor - capacity // 2, count - capacity))
    return start, start + capacity


# --- views -------------------------------------------------------------------


def render_too_narrow(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    return [
        theme.paint("error", "⚠️  Terminal Too Narrow"),
        "",
        f"Current width: {layout.terminal_width} characters",
        f"Required width: {MIN_TERMINAL_WIDTH} characters",
        "",
        theme.paint(
            "dim",
            f"Please resize your terminal window to at least "
            f"{MIN_TERMINAL_WIDTH} characters wide.",
        ),
    ]


def render_banner(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    width = layout.terminal_width
    lines = [""]
    lines.extend(centered(theme, "banner", row, width) for row in LOGO)
    lines.append("")
    lines.append(centered(theme, "subtitle", SUBTITLE, width))
    lines.append(centered(theme, "version", f"v{__version__}", width))
    lines.append("")

    rows: list[tuple[str, str]] = [("title", "📋 Recent Todos"), ("", "")]
    if not state.tasks:
        rows.append(("empty", "No todos yet!"))
    else:
        for i, task in enumerate(state.tasks[:BANNER_TODO_LIMIT], start=1):
            rows.append(("text", f"{i}. {truncate(one_line(task.title), BANNER_TITLE_WIDTH)}"))
        extra = len(state.tasks) - BANNER_TODO_LIMIT
        if extra > 0:
            rows.append(("", ""))
            rows.append(("dim", f"+ {extra} more todos..."))

    indent = " " * ((width - BANNER_BOX_WIDTH) // 2)
    lines.extend(indent + line for line in box(rows, BANNER_BOX_WIDTH, theme))
    lines.append("")
    lines.append(centered(theme, "hint", "Press any key to continue...", width))
    return lines


def task_cells(task: Task, layout: ResponsiveLayout) -> list[str]:
    """The five padded, truncated cells of a list row."""
    values = [
        (str(task.id), layout.no_col),
        (one_line(task.title), layout.title_col),
        (task.priority.label, layout.priority_col),
        (task.work_duration_label or "-", layout.work_time_col),
        (task.created_at.strftime("%Y-%m-%d") if task.created_at else "", layout.created_col),
    ]
    return [pad(truncate(value, width), width) for value, width in values]


def render_task_row(
    task: Task, layout: ResponsiveLayout, theme: Theme, selected: bool = False
) -> str:
    cells = task_cells(task, layout)
    marker = ">" if selected else " "
    if selected or task.is_completed:
        role = "selected" if selected else "completed"
        return theme.paint(role, marker + "  ".join(cells) + " ")

    painted = [theme.paint("text", cell) for cell in cells]
    painted[2] = theme.paint(PRIORITY_ROLES[task.priority], cells[2])
    return marker + "  ".join(painted) + " "


def render_list(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    lines = [theme.paint("title", " 📝 koto - ToDo Manager "), ""]

    if not state.tasks:
        lines.append(theme.paint("empty", "  No todos yet. Use /add to create your first todo!  "))
    else:
        header = [
            pad("No.", layout.no_col),
            pad("Title", layout.title_col),
            pad("Priority", layout.priority_col),
            pad("Total time", layout.work_time_col),
            pad("Create Date", layout.created_col),
        ]
        lines.append(" " + theme.paint("header", "  ".join(header)) + " ")
        lines.append(theme.paint("dim", BOX_H * layout.list_row))

        capacity = state.height - LIST_CHROME if state.height else 0
        start, end = visible_window(state.cursor, len(state.tasks), capacity)
        for index in range(start, end):
            task = state.tasks[index]
            lines.append(render_task_row(task, layout, theme, index == state.cursor))
        if (start, end) != (0, len(state.tasks)):
            lines.append(theme.paint("dim", f"  {start + 1}-{end} of {len(state.tasks)}"))

    lines.append("")
    prompt = tail(one_line(state.input_buffer), layout.content_width - 2)
    lines.append(theme.paint("command", "> ") + theme.paint("text", prompt))
    lines.append("")
    lines.extend(status_lines(state, theme))
    lines.append(theme.paint("hint", truncate(LIST_HINT, layout.content_width)))
    return lines


def render_help(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    content = help_lines()
    page = max(state.height - 2, 1)
    window = content[state.help_offset:state.help_offset + page]
    lines = [
        theme.paint(role, truncate(text, layout.content_width)) if role else ""
        for role, text in window
    ]
    end = min(state.help_offset + page, len(content))
    lines.append("")
    lines.append(theme.paint("dim", f"  lines {state.help_offset + 1}-{end} of {len(content)}"))
    return lines


WIZARD_STEPS = {
    Mode.ADD_WIZARD: {
        WizardStep.TITLE: "Step 1/3: Enter Title",
        WizardStep.DESCRIPTION: "Step 2/3: Enter Description (Optional)",
        WizardStep.PRIORITY: "Step 3/3: Select Priority",
    },
    Mode.EDIT_WIZARD: {
        WizardStep.TITLE: "Step 1/3: Edit Title",
        WizardStep.DESCRIPTION: "Step 2/3: Edit Description (Optional)",
        WizardStep.PRIORITY: "Step 3/3: Select Priority",
    },
}

WIZARD_HINTS = {
    WizardStep.TITLE: "Press Enter to continue | Esc to cancel",
    WizardStep.DESCRIPTION: "Press Enter to save | Tab to set priority | Esc to go back",
    WizardStep.PRIORITY: "Press Enter to save | Esc to go back",
}


def render_wizard(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    wizard = state.wizard
    if state.mode is Mode.ADD_WIZARD:
        title = " ➕ Add New Todo "
    else:
        title = f" ✏️  Edit Todo #{wizard.task_id} "
    lines = [theme.paint("title", title), ""]
    lines.append(theme.paint("header", f" {WIZARD_STEPS[state.mode][wizard.step]} "))
    lines.append("")

    if wizard.step >= WizardStep.DESCRIPTION:
        text = truncate(f"Title: {wizard.title}", layout.content_width)
        lines.extend([theme.paint("message", text), ""])
    if wizard.step == WizardStep.PRIORITY:
        if wizard.description:
            text = truncate(one_line(f"Description: {wizard.description}"), layout.content_width)
            lines.append(theme.paint("message", text))
        else:
            lines.append(theme.paint("empty", "Description: (none)"))
        lines.extend(["", theme.paint("label", "Priority Options:")])
        for key, priority in ((1, Priority.LOW), (2, Priority.MEDIUM), (3, Priority.HIGH)):
            current = " (current)" if priority == wizard.priority else ""
            lines.append(theme.paint(PRIORITY_ROLES[priority], f"  {key} = {priority.label}{current}"))
        lines.append("")

    prompt = tail(one_line(state.input_buffer), layout.edit_input)
    lines.append(theme.paint("command", "> ") + theme.paint("text", prompt))
    lines.append("")
    lines.extend(status_lines(state, theme))
    lines.append(theme.paint("hint", WIZARD_HINTS[wizard.step]))
    return lines


def large_digits(text: str) -> list[str]:
    """Five rows of block art for a string of digits and colons."""
    rows = []
    for i in range(5):
        rows.append("  ".join(DIGITS[ch][i] for ch in text))
    return rows


def progress_bar(progress: float, width: int) -> str:
    progress = max(0.0, min(progress, 1.0))
    filled = int(width * progress)
    return "█" * filled + "░" * (width - filled) + f" {progress * 100:3.0f}%"


def render_pomodoro(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    pomodoro = state.pomodoro
    width = layout.terminal_width
    minutes, seconds = divmod(pomodoro.remaining_seconds, 60)

    lines = [theme.paint("title", " 🍅 Pomodoro Timer "), ""]
    lines.extend(centered(theme, "timer", row, width) for row in large_digits(f"{minutes:02d}:{seconds:02d}"))
    lines.append("")
    lines.append(centered(theme, "progress", progress_bar(pomodoro.progress, layout.progress_bar), width))
    lines.append("")

    if pomodoro.target_task_id is not None:
        task = state.find_task(pomodoro.target_task_id)
        rows = [("label", f"📋 Task #{pomodoro.target_task_id}")]
        if task is not None:
            rows.append(("text", task.title))
    else:
        rows = [("dim", "General Pomodoro session")]
    indent = " " * max((width - layout.pomodoro_box) // 2, 0)
    lines.extend(indent + line for line in box(rows, layout.pomodoro_box, theme))
    lines.append("")

    if pomodoro.completed:
        lines.append(centered(theme, "alarm", "🔔 Timer Complete! Press Enter or Esc to return", width))
    elif pomodoro.running:
        lines.append(centered(theme, "timer", "⏱️  Timer is running...", width))
    else:
        lines.append(centered(theme, "dim", "Timer paused", width))
    lines.append("")
    if pomodoro.remaining_seconds < POMODORO_SECONDS and not pomodoro.completed:
        lines.append(centered(theme, "dim", f"{pomodoro.elapsed_minutes} min elapsed", width))
    lines.append(centered(theme, "hint", "Press Esc or Enter to stop timer", width))
    return lines


def _timestamp(value) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "-"


def render_detail(state: ViewState, layout: ResponsiveLayout, theme: Theme) -> list[str]:
    task = state.find_task(state.detail_task_id)
    if task is None:
        return [
            theme.paint("error", "Todo not found"),
            "",
            theme.paint("hint", "Press Esc to return to main view"),
        ]

    lines = [theme.paint("title", f" 📋 Todo Details #{task.id} "), ""]
    lines.extend(box([("label", "Title"), ("text", task.title)], layout.detail_box, theme))
    lines.append("")

    description = [("text", line) for line in task.description.splitlines()]
    if not description:
        description = [("empty", "(no description)")]
    lines.extend(box([("label", "Description"), *description], layout.detail_box, theme))
    lines.append("")

    work = f"🍅 {task.work_duration // 60}h {task.work_duration % 60}m" if task.work_duration else "(no records)"
    due = _timestamp(task.due_date) if task.due_date else "(none)"
    if task.is_overdue():
        due += " (overdue)"

    column = layout.detail_column
    first = [
        box([("label", "Priority"), (PRIORITY_ROLES[task.priority], task.priority.label)], column, theme),
        box([("label", "Total Work Time"), ("text" if task.work_duration else "empty", work)], column, theme),
        box([("label", "Status"), ("completed" if task.is_completed else "text", task.status.label)], column, theme),
    ]
    second = [
        box([("label", "Due Date"), ("text", due)], column, theme),
        box([("label", "Created"), ("text", _timestamp(task.created_at))], column, theme),
        box([("label", "Updated"), ("text", _timestamp(task.updated_at))], column, theme),
    ]
    lines.extend(side_by_side(first))
    lines.extend(side_by_side(second))
    lines.append("")
    lines.extend(status_lines(state, theme))
    lines.append(theme.paint("hint", "Enter/Esc/q: back | e: edit | d: mark done | p: start pomodoro"))
    return lines


RENDERERS: dict[Mode, Callable[[ViewState, ResponsiveLayout, Theme], list[str]]] = require_all_modes(
    {
        Mode.BANNER: render_banner,
        Mode.LIST: render_list,
        Mode.HELP: render_help,
        Mode.ADD_WIZARD: render_wizard,
        Mode.EDIT_WIZARD: render_wizard,
        Mode.POMODORO: render_pomodoro,
        Mode.DETAIL: render_detail,
    },
    "RENDERERS",
)
