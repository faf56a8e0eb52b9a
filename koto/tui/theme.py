"""Colour themes for the renderer.

A Theme maps a role name ('title', 'error', 'priority.high', ...) to a Rich
style. The renderer asks the theme to paint each piece of text; the plain
theme leaves text untouched so frames stay measurable and testable.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from rich.markup import escape


@dataclass(frozen=True)
class Theme:
    name: str
    markup: bool = False
    styles: dict[str, str] = field(default_factory=dict)

    def paint(self, role: str, text: str) -> str:
        if not self.markup:
            return text
        text = escape(text)
        style = self.styles.get(role)
        if not style or not text:
            return text
        return f"[{style}]{text}[/]"


PLAIN_THEME = Theme(name="plain")

DEFAULT_THEME = Theme(
    name="default",
    markup=True,
    styles={
        "title": "bold #a6e3a1",
        "header": "bold underline #ff87ff",
        "text": "#cdd6f4",
        "dim": "#6c7086",
        "hint": "italic #6c7086",
        "empty": "italic #6c7086",
        "message": "bold #a6e3a1",
        "error": "bold #f38ba8",
        "selected": "bold #1e1e2e on #39ff14",
        "completed": "strike #585b70",
        "command": "bold #a6e3a1",
        "banner": "bold #06c775",
        "subtitle": "italic #ff87ff",
        "version": "#626262",
        "box": "#585b70",
        "label": "bold #ff87ff",
        "priority.high": "#ff0000",
        "priority.medium": "#ffd700",
        "priority.low": "#5fff00",
        "timer": "bold #ff87ff",
        "progress": "#ff5faf",
        "alarm": "bold #ff0000",
    },
)


def theme_for(use_color: bool) -> Theme:
    return DEFAULT_THEME if use_color else PLAIN_THEME
