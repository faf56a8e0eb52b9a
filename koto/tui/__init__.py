"""
koto TUI - interactive terminal task manager.

Architecture:
- state.py / events.py: immutable view state, events and effect values
- machine.py: update(state, event) -> (state, effects), no I/O
- commands.py: slash-command parser
- pomodoro.py: countdown state driven by session-numbered ticks
- layout.py / theme.py / render.py: pure frame rendering
- effects.py: runs store effects and turns results into events
- app.py: Textual application owning the loop

Extensibility points:
1. New modes: add to Mode, then to KEY_HANDLERS and RENDERERS
2. New commands: add a parser to commands.PARSERS and a branch in machine
3. New storage: implement the store.TaskStore protocol
"""
