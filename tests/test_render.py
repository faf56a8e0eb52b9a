"""Tests for the frame renderer and themes."""

from dataclasses import replace
from datetime import datetime

import pytest

from koto.models import Priority, Task, TaskStatus
from koto.tui.layout import ResponsiveLayout, display_width
from koto.tui.pomodoro import PomodoroState
from koto.tui.render import (
    RENDERERS,
    large_digits,
    progress_bar,
    render,
    render_task_row,
    visible_window,
)
from koto.tui.state import Mode, ViewState, WizardState, WizardStep
from koto.tui.theme import DEFAULT_THEME, PLAIN_THEME, Theme, theme_for


def make_task(task_id: int, title: str, **kwargs) -> Task:
    stamp = datetime(2024, 3, task_id, 8, 30, 0)
    return Task(id=task_id, title=title, created_at=stamp, updated_at=stamp, **kwargs)


TASKS = tuple(
    make_task(i, title, priority=priority, work_duration=minutes)
    for i, title, priority, minutes in [
        (7, "A very long title " * 8, Priority.HIGH, 95),
        (6, "日本語のタスクとても長いタイトルです" * 3, Priority.MEDIUM, 0),
        (5, "emoji 🍅 task", Priority.LOW, 25),
        (4, "four", Priority.MEDIUM, 0),
        (3, "three", Priority.MEDIUM, 0),
        (2, "two", Priority.MEDIUM, 0),
        (1, "one", Priority.MEDIUM, 0),
    ]
)


@pytest.fixture
def listing() -> ViewState:
    return ViewState(mode=Mode.LIST, tasks=TASKS, width=120, height=40)


class TestRenderFrames:
    """Each mode produces a frame."""

    def test_every_mode_has_a_renderer(self) -> None:
        assert set(RENDERERS) == set(Mode)

    @pytest.mark.parametrize("mode", list(Mode))
    def test_renders_every_mode(self, listing: ViewState, mode: Mode) -> None:
        state = replace(listing, mode=mode, detail_task_id=5, wizard=WizardState(task_id=5))
        frame = render(state)
        assert frame
        for line in frame.split("\n"):
            assert display_width(line) <= state.width

    def test_too_narrow(self, listing: ViewState) -> None:
        frame = render(replace(listing, width=80))
        assert "Terminal Too Narrow" in frame
        assert "Current width: 80 characters" in frame
        assert "Required width: 100 characters" in frame

    def test_goodbye(self, listing: ViewState) -> None:
        assert render(replace(listing, quitting=True)) == "Goodbye!"


class TestBanner:
    def test_first_five_and_more(self, listing: ViewState) -> None:
        frame = render(replace(listing, mode=Mode.BANNER))
        assert "Recent Todos" in frame
        assert "1. A very long title" in frame
        assert "4. four" in frame
        assert "5. three" in frame
        assert "two" not in frame
        assert "+ 2 more todos..." in frame
        assert "v1.0.0" in frame
        assert "Press any key to continue..." in frame

    def test_banner_titles_truncated(self, listing: ViewState) -> None:
        frame = render(replace(listing, mode=Mode.BANNER))
        line = next(l for l in frame.split("\n") if "1. " in l)
        assert "1. A very long title A..." in line

    def test_empty(self) -> None:
        frame = render(ViewState(mode=Mode.BANNER, width=120, height=40))
        assert "No todos yet!" in frame
        assert "more todos" not in frame


class TestListView:
    def test_header_and_rows(self, listing: ViewState) -> None:
        frame = render(listing)
        assert "No." in frame
        assert "Create Date" in frame
        assert "Total time" in frame
        assert "2024-03-07" in frame
        assert "1h 35m" in frame
        assert "High" in frame

    def test_zero_work_shows_dash(self) -> None:
        layout = ResponsiveLayout.for_width(120)
        row = render_task_row(make_task(1, "x"), layout, PLAIN_THEME)
        cells = row.split()
        assert "-" in cells

    @pytest.mark.parametrize("width", [100, 121, 180])
    def test_rows_fit(self, listing: ViewState, width: int) -> None:
        layout = ResponsiveLayout.for_width(width)
        for i, task in enumerate(TASKS):
            row = render_task_row(task, layout, PLAIN_THEME, selected=(i == 0))
            assert display_width(row) == layout.list_row
            assert display_width(row) <= width

    def test_cursor_marker(self, listing: ViewState) -> None:
        lines = render(replace(listing, cursor=3)).split("\n")
        marked = [l for l in lines if l.startswith(">") and not l.startswith("> ")]
        assert len(marked) == 1
        assert marked[0][1:].lstrip().startswith("4")

    def test_empty_list(self) -> None:
        frame = render(ViewState(mode=Mode.LIST, width=120, height=40))
        assert "No todos yet. Use /add to create your first todo!" in frame

    def test_input_message_and_error(self, listing: ViewState) -> None:
        frame = render(replace(listing, input_buffer="/done 4", message="Saved", error="oops"))
        assert "> /done 4" in frame
        assert "Saved" in frame
        assert "Error: oops" in frame
        assert "Navigate" in frame

    def test_completed_row(self) -> None:
        layout = ResponsiveLayout.for_width(120)
        task = make_task(1, "finished", status=TaskStatus.COMPLETED)
        assert "finished" in render_task_row(task, layout, PLAIN_THEME)

    def test_windowed_rows(self, listing: ViewState) -> None:
        frame = render(replace(listing, height=15, cursor=6))
        assert "one" in frame
        assert "of 7" in frame

    def test_visible_window(self) -> None:
        assert visible_window(0, 5, 10) == (0, 5)
        assert visible_window(0, 20, 5) == (0, 5)
        assert visible_window(19, 20, 5) == (15, 20)
        start, end = visible_window(10, 20, 5)
        assert start <= 10 < end


class TestHelpView:
    def test_viewport(self, listing: ViewState) -> None:
        state = replace(listing, mode=Mode.HELP, height=20)
        top = render(state)
        assert "koto - Help" in top
        scrolled = render(replace(state, help_offset=10))
        assert "koto - Help" not in scrolled
        assert len(top.split("\n")) == len(scrolled.split("\n"))


class TestWizardView:
    def test_add_step_one(self, listing: ViewState) -> None:
        frame = render(replace(listing, mode=Mode.ADD_WIZARD, input_buffer="Buy"))
        assert "Add New Todo" in frame
        assert "Step 1/3: Enter Title" in frame
        assert "> Buy" in frame

    def test_priority_step(self, listing: ViewState) -> None:
        wizard = WizardState(step=WizardStep.PRIORITY, title="Buy milk", priority=Priority.HIGH)
        frame = render(replace(listing, mode=Mode.ADD_WIZARD, wizard=wizard))
        assert "Step 3/3: Select Priority" in frame
        assert "Title: Buy milk" in frame
        assert "Description: (none)" in frame
        assert "1 = Low" in frame
        assert "3 = High (current)" in frame

    def test_edit(self, listing: ViewState) -> None:
        wizard = WizardState(step=WizardStep.DESCRIPTION, title="four", task_id=4)
        frame = render(replace(listing, mode=Mode.EDIT_WIZARD, wizard=wizard, error="title cannot be empty"))
        assert "Edit Todo #4" in frame
        assert "Step 2/3: Edit Description (Optional)" in frame
        assert "Error: title cannot be empty" in frame


class TestPomodoroView:
    def test_running_with_task(self, listing: ViewState) -> None:
        pomodoro = PomodoroState(target_task_id=5, remaining_seconds=1499, running=True, session=1)
        frame = render(replace(listing, mode=Mode.POMODORO, pomodoro=pomodoro))
        assert "Pomodoro Timer" in frame
        assert "Task #5" in frame
        assert "emoji 🍅 task" in frame
        assert "Timer is running" in frame
        assert "Press Esc or Enter to stop timer" in frame

    def test_general_completed(self, listing: ViewState) -> None:
        pomodoro = PomodoroState(remaining_seconds=0, completed=True, session=1)
        frame = render(replace(listing, mode=Mode.POMODORO, pomodoro=pomodoro))
        assert "General Pomodoro session" in frame
        assert "Timer Complete!" in frame
        assert "100%" in frame

    def test_large_digits(self) -> None:
        rows = large_digits("25:00")
        assert len(rows) == 5
        assert len({display_width(r) for r in rows}) == 1

    def test_progress_bar(self) -> None:
        assert progress_bar(0.5, 10) == "█████░░░░░  50%"
        assert progress_bar(0.0, 4) == "░░░░   0%"
        assert progress_bar(1.0, 4) == "████ 100%"


class TestDetailView:
    def test_fields(self, listing: ViewState) -> None:
        frame = render(replace(listing, mode=Mode.DETAIL, detail_task_id=7))
        assert "Todo Details #7" in frame
        assert "(no description)" in frame
        assert "High" in frame
        assert "1h 35m" in frame
        assert "Pending" in frame
        assert "(none)" in frame
        assert "2024-03-07 08:30:00" in frame

    def test_no_work(self, listing: ViewState) -> None:
        frame = render(replace(listing, mode=Mode.DETAIL, detail_task_id=4))
        assert "(no records)" in frame

    def test_missing(self, listing: ViewState) -> None:
        frame = render(replace(listing, mode=Mode.DETAIL, detail_task_id=99))
        assert "Todo not found" in frame


class TestTheme:
    def test_plain_passthrough(self) -> None:
        assert PLAIN_THEME.paint("error", "[x]") == "[x]"

    def test_markup_escapes(self) -> None:
        painted = DEFAULT_THEME.paint("error", "[bold]x")
        assert painted.startswith("[bold #f38ba8]")
        assert painted.endswith("[/]")
        assert "\\[bold]x" in painted

    def test_unknown_role(self) -> None:
        assert Theme(name="t", markup=True).paint("nope", "text") == "text"

    def test_theme_for(self) -> None:
        assert theme_for(True) is DEFAULT_THEME
        assert theme_for(False) is PLAIN_THEME

    def test_markup_frame_renders(self, listing: ViewState) -> None:
        for mode in Mode:
            assert render(replace(listing, mode=mode, detail_task_id=5), theme=DEFAULT_THEME)
