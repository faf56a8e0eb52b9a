"""Help screen content, shared by the renderer and the scroll logic."""

COMMANDS = [
    ("/add", "Add a new todo (interactive)", "/add"),
    ("", "  -> Step 1: Enter title", ""),
    ("", "  -> Step 2: Enter description (optional, Tab to set priority)", ""),
    ("", "  -> Step 3: Select priority (1-3)", ""),
    None,
    ("/list", "List all todos", "/list"),
    ("/list --status=<pending|completed|all>", "List by status", "/list --status=pending"),
    None,
    ("/done <id>", "Mark a todo as completed", "/done 1"),
    ("/delete <id>", "Delete a todo", "/delete 1"),
    ("/edit <id>", "Edit a todo (interactive)", "/edit 1"),
    None,
    ("/pomo [id]", "Start a 25-minute Pomodoro timer", "/pomo"),
    ("", "  -> General timer (no task)", "/pomo"),
    ("", "  -> Task-specific timer (records time)", "/pomo 1"),
    None,
    ("/export [filepath]", "Export todos to JSON", "/export ~/todos.json"),
    ("/import <filepath>", "Import todos from JSON", "/import ~/todos.json"),
    None,
    ("/help", "Show this help screen", "/help"),
    ("/exit", "Quit the application", "/exit"),
]

KEYS = [
    ("Up/k", "Move cursor up"),
    ("Down/j", "Move cursor down"),
    ("Enter", "Execute command / open selected todo"),
    ("Esc", "Clear input"),
    ("?", "Toggle help"),
    ("Ctrl+C", "Quit"),
]

SCROLL_KEYS = [
    ("Up/k", "Scroll up one line"),
    ("Down/j", "Scroll down one line"),
    ("Space/f", "Page down"),
    ("b", "Page up"),
    ("g", "Go to top"),
    ("G", "Go to bottom"),
]


def help_lines() -> list[tuple[str, str]]:
    """(role, text) pairs; the role names a theme style."""
    lines: list[tuple[str, str]] = [
        ("title", " koto - Help "),
        ("", ""),
        ("hint", "  You can scroll this page using Up/Down or j/k keys"),
        ("", ""),
        ("header", " COMMANDS "),
        ("", ""),
    ]
    for entry in COMMANDS:
        if entry is None:
            lines.append(("", ""))
            continue
        command, desc, example = entry
        if command:
            lines.append(("command", f"  {command:<45}  {desc}"))
            lines.append(("dim", f"    Example: {example}"))
        else:
            lines.append(("text", f"  {'':<45}  {desc}"))

    for heading, keys in ((" KEYBOARD SHORTCUTS ", KEYS), (" SCROLL NAVIGATION ", SCROLL_KEYS)):
        lines.append(("", ""))
        lines.append(("header", heading))
        lines.append(("", ""))
        for key, desc in keys:
            lines.append(("command", f"  {key:<9}  {desc}"))

    lines.append(("", ""))
    lines.append(("dim", "  Press 'q', 'Esc', or 'Ctrl+C' to return to the main view"))
    return lines
