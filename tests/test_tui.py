import curses

import pytest

from projnotes.store import NotesError, notes_path
from projnotes.tui import key_name, run_tui


@pytest.mark.parametrize(
    "code, expected",
    [
        ("\n", "enter"),
        ("\r", "enter"),
        ("\x1b", "esc"),
        ("\x01", "ctrl+a"),
        ("\x04", "ctrl+d"),
        ("\x05", "ctrl+e"),
        ("\x06", "ctrl+f"),
        ("\x11", "ctrl+q"),
        ("\x03", "ctrl+c"),
        ("q", "q"),
        ("/", "/"),
        ("y", "y"),
    ],
)
def test_key_name_for_characters(code, expected):
    assert key_name(code) == expected


def test_key_name_for_integer_characters():
    assert key_name(ord("q")) == "q"
    assert key_name(1) == "ctrl+a"
    assert key_name(10) == "enter"


def test_key_name_for_special_keys():
    assert key_name(curses.KEY_UP) == "up"
    assert key_name(curses.KEY_DOWN) == "down"
    assert key_name(curses.KEY_DC) == "delete"


def test_key_name_backspace_variants_agree():
    assert key_name("\x7f") == key_name(curses.KEY_BACKSPACE)


def test_key_name_empty_string():
    assert key_name("") == ""


def test_run_tui_reports_unreadable_notes(tmp_path):
    path = notes_path(tmp_path)
    path.parent.mkdir()
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(NotesError, match="failed to initialize TUI"):
        run_tui(tmp_path)