"""Terminal front end for the interactive notes browser."""

from __future__ import annotations

import os
from typing import Any

from .model import TuiModel
from .store import NotesError

try:
    import curses
except ImportError:  # pragma: no cover - platforms without a curses module
    curses = None  # type: ignore[assignment]

_CHAR_NAMES = {
    "\n": "enter",
    "\r": "enter",
    "\x1b": "esc",
    "\x7f": "backspace",
    "\b": "backspace",
    "\t": "tab",
    "\x00": "ctrl+@",
}

if curses is not None:
    _SPECIAL_KEYS = {
        curses.KEY_UP: "up",
        curses.KEY_DOWN: "down",
        curses.KEY_LEFT: "left",
        curses.KEY_RIGHT: "right",
        curses.KEY_HOME: "home",
        curses.KEY_END: "end",
        curses.KEY_PPAGE: "pgup",
        curses.KEY_NPAGE: "pgdown",
        curses.KEY_DC: "delete",
        curses.KEY_BACKSPACE: "backspace",
        curses.KEY_ENTER: "enter",
        curses.KEY_RESIZE: "resize",
    }
else:  # pragma: no cover
    _SPECIAL_KEYS = {}


def key_name(code: int | str) -> str:
    """Name a key read from the terminal, e.g. ``enter``, ``ctrl+a`` or ``x``.

    Unknown special keys give an empty string.
    """
    if isinstance(code, int):
        if code in _SPECIAL_KEYS:
            return _SPECIAL_KEYS[code]
        if not 0 <= code < 0x110000 or code >= 0x100 and code in range(0x100, 0x200):
            return ""
        code = chr(code)
    if not code:
        return ""
    if code in _CHAR_NAMES:
        return _CHAR_NAMES[code]
    if len(code) == 1 and 1 <= ord(code) <= 26:
        return "ctrl+" + chr(ord(code) + ord("a") - 1)
    return code


def _draw(screen: Any, text: str, width: int, height: int) -> None:
    screen.erase()
    for row, line in enumerate(text.split("\n")[:height]):
        try:
            screen.addnstr(row, 0, line, max(0, width - 1))
        except curses.error:
            pass
    screen.refresh()


def _loop(screen: Any, model: TuiModel) -> None:
    curses.raw()
    screen.keypad(True)
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    while not model.quitting:
        height, width = screen.getmaxyx()
        if (width, height) != (model.width, model.height):
            model.resize(width, height)
        _draw(screen, model.view(), width, height)
        try:
            code = screen.get_wch()
        except KeyboardInterrupt:
            code = "\x03"
        except curses.error:
            continue
        name = key_name(code)
        if name == "resize":
            curses.update_lines_cols()
            continue
        if name:
            model.handle_key(name)


def run_tui(root: str | os.PathLike[str] | None = None) -> list[str]:
    """Run the notes browser until the user quits; return its messages."""
    try:
        model = TuiModel(root)
    except (NotesError, OSError) as exc:
        raise NotesError(f"failed to initialize TUI: {exc}") from exc
    if curses is None:
        raise NotesError("the terminal interface is not available on this platform")
    os.environ.setdefault("ESCDELAY", "25")
    curses.wrapper(_loop, model)
    return list(model.messages)