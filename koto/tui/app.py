"""
koto TUI application.

The App owns the single ViewState. Every terminal key, resize, timer tick
and finished store call becomes an event fed through `update()`; the
returned effects are executed here and the frame is redrawn.
"""

from __future__ import annotations

import logging
from functools import partial

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.message import Message
from textual.screen import Screen
from textual.widgets import Static

from ..config import Config
from ..store import TaskStore
from .effects import EffectRunner
from .events import Effect, Event, KeyPressed, LoadTasks, Quit, Resized, ScheduleTick, Tick
from .machine import initial_effects, initial_state, update
from .render import render
from .state import ViewState
from .theme import PLAIN_THEME, Theme, theme_for

logger = logging.getLogger(__name__)


class EffectResult(Message):
    """Outcome of a store effect, posted from a worker thread.

    load_seq numbers task list reloads in the order they were requested;
    it is 0 for every other effect.
    """

    def __init__(self, event: Event, load_seq: int = 0) -> None:
        super().__init__()
        self.event = event
        self.load_seq = load_seq


class FrameScreen(Screen, inherit_bindings=False):
    """Full-screen view showing the rendered frame and forwarding keys."""

    DEFAULT_CSS = """
    FrameScreen {
        background: $surface;
    }

    #frame {
        width: 100%;
        height: 100%;
    }
    """

    def __init__(self, markup: bool = False, **kwargs) -> None:
        super().__init__(**kwargs)
        self._markup = markup
        self._text = ""

    def compose(self) -> ComposeResult:
        yield Static(self._text, id="frame", markup=self._markup)

    def show(self, text: str) -> None:
        self._text = text
        try:
            frame = self.query_one("#frame", Static)
        except NoMatches:
            # Not composed yet; compose() picks up the stored text
            return
        frame.update(text)

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()
        self.app.feed(KeyPressed(event.key, event.character))


class KotoApp(App, inherit_bindings=False):
    """Interactive task manager."""

    TITLE = "koto"
    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", show=False, priority=True),
    ]

    def __init__(self, store: TaskStore, theme: Theme = PLAIN_THEME, **kwargs) -> None:
        super().__init__(**kwargs)
        self._runner = EffectRunner(store)
        self._theme = theme
        self._state = initial_state()
        self._frame = FrameScreen(markup=theme.markup)
        self._load_seq = 0
        self._applied_load_seq = 0

    @property
    def view_state(self) -> ViewState:
        return self._state

    def on_mount(self) -> None:
        """Called when app is mounted."""
        logger.info("koto started (%dx%d)", self.size.width, self.size.height)
        self._state = initial_state(self.size.width, self.size.height)
        self.push_screen(self._frame)
        self._run_effects(initial_effects())
        self._redraw()

    def on_resize(self, event: events.Resize) -> None:
        self.feed(Resized(event.size.width, event.size.height))

    def on_effect_result(self, message: EffectResult) -> None:
        if message.load_seq:
            # Reloads run in parallel workers and may finish out of order
            if message.load_seq < self._applied_load_seq:
                logger.debug("Dropping stale task list #%d", message.load_seq)
                return
            self._applied_load_seq = message.load_seq
        self.feed(message.event)

    def action_interrupt(self) -> None:
        self.feed(KeyPressed("ctrl+c"))

    def feed(self, event: Event) -> None:
        """Apply one event to the view state, run its effects and redraw."""
        self._state, effects = update(self._state, event)
        self._run_effects(effects)
        self._redraw()

    def _run_effects(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Quit):
                logger.info("koto exiting")
                self.exit()
            elif isinstance(effect, ScheduleTick):
                self.set_timer(effect.delay, partial(self.feed, Tick(effect.session)))
            elif self._runner.handles(effect):
                load_seq = 0
                if isinstance(effect, LoadTasks):
                    self._load_seq += 1
                    load_seq = self._load_seq
                self.run_worker(
                    partial(self._run_store_effect, effect, load_seq),
                    thread=True,
                    group="store",
                    exit_on_error=False,
                )
            else:
                raise TypeError(f"unhandled effect: {effect!r}")

    def _run_store_effect(self, effect: Effect, load_seq: int = 0) -> None:
        # Runs in a worker thread; post_message hands the result to the loop
        try:
            event = self._runner.run(effect)
        except Exception as e:
            logger.exception("%s crashed", type(effect).__name__)
            event = self._runner.failure(effect, str(e) or type(e).__name__)
        self.post_message(EffectResult(event, load_seq))

    def _redraw(self) -> None:
        self._frame.show(render(self._state, theme=self._theme))


def run(store: TaskStore, config: Config | None = None) -> None:
    """Run the TUI application."""
    config = config or Config()
    app = KotoApp(store, theme=theme_for(config.use_color))
    app.run()
