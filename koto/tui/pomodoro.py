"""Pomodoro countdown state.

The timer never schedules anything itself. The state machine emits one
ScheduleTick effect per accepted tick; a tick whose session does not match
the current one, or that arrives after the timer stopped, is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

POMODORO_MINUTES = 25
POMODORO_SECONDS = POMODORO_MINUTES * 60


@dataclass(frozen=True)
class PomodoroState:
    target_task_id: int | None = None
    remaining_seconds: int = POMODORO_SECONDS
    running: bool = False
    completed: bool = False
    session: int = 0

    @property
    def elapsed_seconds(self) -> int:
        return POMODORO_SECONDS - self.remaining_seconds

    @property
    def elapsed_minutes(self) -> int:
        return self.elapsed_seconds // 60

    @property
    def progress(self) -> float:
        return self.elapsed_seconds / POMODORO_SECONDS

    def accepts(self, session: int) -> bool:
        """True if a tick scheduled for session should advance this timer."""
        return self.running and session == self.session

    def start(self, target_task_id: int | None) -> "PomodoroState":
        """A fresh running session, numbered after this one."""
        return PomodoroState(
            target_task_id=target_task_id,
            remaining_seconds=POMODORO_SECONDS,
            running=True,
            completed=False,
            session=self.session + 1,
        )

    def tick(self) -> "PomodoroState":
        """Advance by one second. Reaching zero stops and completes the timer."""
        if not self.running:
            return self
        remaining = max(self.remaining_seconds - 1, 0)
        if remaining == 0:
            return replace(self, remaining_seconds=0, running=False, completed=True)
        return replace(self, remaining_seconds=remaining)

    def stop(self) -> "PomodoroState":
        return replace(self, running=False)
