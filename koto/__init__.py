"""koto - a terminal task manager with a built-in Pomodoro timer."""

__version__ = "1.0.0"
