"""State and rendering of the interactive notes browser."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Sequence

from .items import NoteItem, filter_items, list_project_files
from .store import (
    Note,
    NotesError,
    delete_note_by_id,
    load_all_notes,
    notes_path,
    read_notes,
    save_note,
    write_notes,
)

NO_FILE = "(No File)"
NOTES_TITLE = "Notes (press ↑/↓ to scroll, Delete to delete, q to quit)"
HELP_LINE = (
    "(Use Ctrl+D to remove, Ctrl+E to edit, Ctrl+A to add, "
    "Ctrl+F to search, Ctrl+Q to quit)"
)
SEARCH_PLACEHOLDER = "Search (use # to search by tag)"

_LIST_WIDTH = 20
_LIST_HEIGHT = 10
_CHAR_LIMIT = 256
_QUIT_KEYS = {"q", "esc", "ctrl+c", "ctrl+q"}
_CANCEL_KEYS = {"esc", "ctrl+c"}
_CONFIRM_KEYS = {"y", "yes", "Y", "enter"}


class _TextInput:
    """A single-line editable text field."""

    def __init__(self, placeholder: str = "", width: int = _LIST_WIDTH - 2) -> None:
        self.value = ""
        self.cursor = 0
        self.placeholder = placeholder
        self.width = width
        self.char_limit = _CHAR_LIMIT
        self.focused = False

    def set_value(self, value: str) -> None:
        self.value = value[: self.char_limit]
        self.cursor = len(self.value)

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        self.focused = False

    def update(self, key: str) -> None:
        if not self.focused:
            return
        if key == "backspace":
            if self.cursor > 0:
                self.value = self.value[: self.cursor - 1] + self.value[self.cursor:]
                self.cursor -= 1
        elif key in ("delete", "ctrl+d"):
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1:]
        elif key in ("left", "ctrl+b"):
            self.cursor = max(0, self.cursor - 1)
        elif key in ("right", "ctrl+f"):
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key in ("home", "ctrl+a"):
            self.cursor = 0
        elif key in ("end", "ctrl+e"):
            self.cursor = len(self.value)
        elif key == "ctrl+u":
            self.value = self.value[self.cursor:]
            self.cursor = 0
        elif key == "ctrl+k":
            self.value = self.value[: self.cursor]
        elif len(key) == 1 and key.isprintable():
            if len(self.value) < self.char_limit:
                self.value = self.value[: self.cursor] + key + self.value[self.cursor:]
                self.cursor += 1

    def view(self) -> str:
        if not self.value and self.placeholder:
            return "> " + self.placeholder
        text = self.value
        if self.width > 0 and len(text) > self.width:
            start = max(0, self.cursor - self.width)
            text = text[start: start + self.width]
        return "> " + text


class _ListView:
    """A scrollable, paginated list of note items with one selected."""

    def __init__(self, items: Sequence[NoteItem], title: str, width: int, height: int) -> None:
        self.items = list(items)
        self.title = title
        self.width = width
        self.height = height
        self.index = 0

    @property
    def selected(self) -> NoteItem | None:
        return self.items[self.index] if self.items else None

    @property
    def per_page(self) -> int:
        return max(1, (self.height - 1) // 3)

    def set_items(self, items: Sequence[NoteItem]) -> None:
        self.items = list(items)
        self.index = min(self.index, max(0, len(self.items) - 1))

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def select(self, index: int) -> None:
        self.index = max(0, min(index, len(self.items) - 1)) if self.items else 0

    def update(self, key: str) -> None:
        if not self.items:
            return
        last = len(self.items) - 1
        if key in ("up", "k"):
            self.index = max(0, self.index - 1)
        elif key in ("down", "j"):
            self.index = min(last, self.index + 1)
        elif key in ("left", "h", "pgup", "b", "u"):
            self.index = max(0, self.index - self.per_page)
        elif key in ("right", "l", "pgdown", "f", "d"):
            self.index = min(last, self.index + self.per_page)
        elif key in ("home", "g"):
            self.index = 0
        elif key in ("end", "G"):
            self.index = last

    def view(self) -> str:
        lines = [self.title, ""]
        if not self.items:
            lines.append("No items.")
            return "\n".join(lines)
        per_page = self.per_page
        page = self.index // per_page
        pages = (len(self.items) + per_page - 1) // per_page
        start = page * per_page
        shown = self.items[start: start + per_page]
        for offset, item in enumerate(shown):
            prefix = "│ " if start + offset == self.index else "  "
            lines.append(prefix + item.title())
            lines.append(prefix + item.description())
            if offset < len(shown) - 1:
                lines.append("")
        if pages > 1:
            lines.extend(["", f"{page + 1}/{pages}"])
        return "\n".join(lines)


def _box(text: str, max_width: int | None = None) -> str:
    lines = text.split("\n")
    if max_width is not None and max_width > 0:
        lines = [line[:max_width] for line in lines]
    inner = max((len(line) for line in lines), default=0)
    span = inner + 4
    blank = "│" + " " * span + "│"
    out = ["╭" + "─" * span + "╮", blank]
    out.extend("│  " + line.ljust(inner) + "  │" for line in lines)
    out.extend([blank, "╰" + "─" * span + "╯"])
    return "\n".join(out)


def _place(width: int, height: int, block: str) -> str:
    lines = block.split("\n")
    block_width = max((len(line) for line in lines), default=0)
    full = max(width, block_width)
    left = (full - block_width) // 2
    placed = [(" " * left + line.ljust(block_width)).ljust(full) for line in lines]
    if height > len(placed):
        top = (height - len(placed)) // 2
        bottom = height - len(placed) - top
        placed = [" " * full] * top + placed + [" " * full] * bottom
    return "\n".join(placed)


def _parse_tags(raw: str) -> list[str] | None:
    raw = raw.strip()
    if not raw:
        return None
    return [part.strip() for part in raw.split(",")]


class TuiModel:
    """The notes browser: a list with add, edit, delete and search modes."""

    def __init__(self, root: str | os.PathLike[str] | None = None) -> None:
        self.root = Path(root) if root is not None else Path.cwd()
        self.width = 0
        self.height = 0
        self.quitting = False
        self.messages: list[str] = []
        self._reset(load_all_notes(self.root))

    def _reset(self, notes: Sequence[Note]) -> None:
        self.all_items = [NoteItem.from_note(note) for note in notes]
        self.notes_list = _ListView(self.all_items, NOTES_TITLE, _LIST_WIDTH, _LIST_HEIGHT)
        self.confirming_delete = False
        self.delete_index = -1
        self.add_stage = 0
        self.edit_stage = 0
        self.edit_item = NoteItem()
        self.text_input = _TextInput()
        self.search_input = _TextInput(SEARCH_PLACEHOLDER)
        self.search_mode = False
        self.file_list = _ListView([], "Select a file...", _LIST_WIDTH, _LIST_HEIGHT)
        self.new_msg = ""
        self.selected_file = ""
        self.new_tags: list[str] = []

    def _list_size(self) -> tuple[int, int]:
        return max(1, self.width - 2), max(1, self.height - 4)

    def reload(self) -> None:
        """Reload notes from disk and return to the plain list view."""
        try:
            notes = load_all_notes(self.root)
        except NotesError as exc:
            self.messages.append(f"failed to load notes: {exc}")
            notes = []
        self._reset(notes)
        self.notes_list.set_size(*self._list_size())

    def resize(self, width: int, height: int) -> None:
        """Adapt the layout to a terminal of the given size."""
        self.width, self.height = width, height
        size = self._list_size()
        self.notes_list.set_size(*size)
        self.text_input.width = max(1, width - 6)
        if self.add_stage == 2 or self.edit_stage == 2:
            self.file_list.set_size(*size)
        if self.search_mode:
            self.search_input.width = max(1, width - 2)

    def _make_file_list(self, title: str) -> _ListView:
        choices = [NoteItem(message=NO_FILE)]
        choices.extend(NoteItem(message=path) for path in list_project_files(self.root))
        return _ListView(choices, title, *self._list_size())

    def _chosen_file(self) -> str:
        selected = self.file_list.selected
        if selected is None or selected.message == NO_FILE:
            return ""
        return selected.message

    def handle_key(self, key: str) -> None:
        """Apply one key press, named as in ``enter``, ``ctrl+a`` or ``x``."""
        if self.search_mode:
            self._handle_search(key)
        elif self.add_stage > 0:
            self._handle_add(key)
        elif self.edit_stage > 0:
            self._handle_edit(key)
        elif self.confirming_delete:
            self._handle_confirm(key)
        else:
            self._handle_browse(key)

    def _handle_search(self, key: str) -> None:
        if key in _CANCEL_KEYS:
            self.search_mode = False
            self.notes_list.set_items(self.all_items)
            return
        self.search_input.update(key)
        self.notes_list.set_items(filter_items(self.all_items, self.search_input.value))

    def _handle_add(self, key: str) -> None:
        if key == "enter":
            if self.add_stage == 1:
                self.new_msg = self.text_input.value.strip()
                self.add_stage = 2
                self.file_list = self._make_file_list(
                    "Step 2/3: Select file (Enter to choose, Esc to cancel)"
                )
            elif self.add_stage == 2:
                self.selected_file = self._chosen_file()
                self.add_stage = 3
                self.text_input.set_value("")
                self.text_input.placeholder = "Tags (comma separated, leave blank for none)"
                self.text_input.focus()
            elif self.add_stage == 3:
                tags = _parse_tags(self.text_input.value)
                if tags is not None:
                    self.new_tags = tags
                try:
                    save_note(self.new_msg, self.selected_file, 0, self.new_tags, self.root)
                except (NotesError, OSError) as exc:
                    self.messages.append(f"failed to save note: {exc}")
                    return
                self.reload()
            return
        if key in _CANCEL_KEYS:
            self.add_stage = 0
            self.text_input.blur()
            return
        if self.add_stage == 2:
            self.file_list.update(key)
        else:
            self.text_input.update(key)

    def _handle_edit(self, key: str) -> None:
        if key == "enter":
            if self.edit_stage == 1:
                self.edit_item.message = self.text_input.value.strip()
                self.edit_stage = 2
                self.file_list = self._make_file_list(
                    "Step 2/3: Select file (Enter to choose, Esc to skip)"
                )
                if self.edit_item.file:
                    for index, item in enumerate(self.file_list.items[1:], start=1):
                        if item.message == self.edit_item.file:
                            self.file_list.select(index)
                            break
                else:
                    self.file_list.select(0)
            elif self.edit_stage == 2:
                self.edit_item.file = self._chosen_file()
                self.edit_stage = 3
                self.text_input.set_value(", ".join(self.edit_item.tags))
                self.text_input.placeholder = "Edit tags (comma-separated, Esc to skip)"
                self.text_input.focus()
            elif self.edit_stage == 3:
                self.edit_item.tags = _parse_tags(self.text_input.value) or []
                self._store_edit()
                self.reload()
            return
        if key in _CANCEL_KEYS:
            self.edit_stage = 0
            self.text_input.blur()
            return
        if self.edit_stage == 2:
            self.file_list.update(key)
        else:
            self.text_input.update(key)

    def _store_edit(self) -> None:
        path = notes_path(self.root)
        try:
            notes = read_notes(path)
        except (NotesError, OSError):
            notes = []
        for note in notes:
            if note.id == self.edit_item.id:
                note.message = self.edit_item.message
                note.file = self.edit_item.file
                note.tags = list(self.edit_item.tags)
                note.created_at = self.edit_item.created_at
                break
        try:
            write_notes(path, notes)
        except OSError:
            pass

    def _handle_confirm(self, key: str) -> None:
        if key in _CONFIRM_KEYS:
            item = self.notes_list.items[self.delete_index]
            try:
                delete_note_by_id(item.id, self.root)
            except (NotesError, OSError) as exc:
                self.messages.append(f"Error deleting note: {exc}")
            self.reload()
        else:
            self.confirming_delete = False
            self.delete_index = -1

    def _handle_browse(self, key: str) -> None:
        index = self.notes_list.index
        has_selection = 0 <= index < len(self.notes_list.items)
        if key in _QUIT_KEYS:
            self.quitting = True
            return
        if key == "ctrl+a":
            self.add_stage = 1
            self.new_msg = ""
            self.selected_file = ""
            self.new_tags = []
            self.text_input.set_value("")
            self.text_input.placeholder = "Note message"
            self.text_input.focus()
            self.text_input.width = max(1, self.width - 6)
            return
        if key == "ctrl+e":
            if has_selection:
                selected = self.notes_list.items[index]
                self.edit_item = dataclasses.replace(selected, tags=list(selected.tags))
                self.edit_stage = 1
                self.text_input.set_value(selected.message)
                self.text_input.placeholder = "Edit message (Enter to continue, Esc to cancel)"
                self.text_input.focus()
                self.text_input.width = max(1, self.width - 6)
            return
        if key in ("delete", "ctrl+d"):
            if has_selection:
                self.confirming_delete = True
                self.delete_index = index
        elif key in ("/", "ctrl+f"):
            self.search_mode = True
            self.search_input.set_value("")
            self.search_input.focus()
            self.search_input.width = max(1, self.width - 2)
            return
        self.notes_list.update(key)

    def _prompt_box(self, prompt: str) -> str:
        raw = prompt + "\n\n" + self.text_input.view()
        return _place(self.width, self.height, _box(raw, self.width - 6))

    def view(self) -> str:
        """Render the current screen as text."""
        if self.search_mode:
            bar = "Search: " + self.search_input.view()
            return f"{bar}\n\n{self.notes_list.view()}\n\n(Enter to filter, Esc to clear)"

        if self.add_stage == 1:
            return self._prompt_box(
                "Step 1/3: Enter note message (Enter to continue, Esc to cancel)"
            )
        if self.add_stage == 2:
            return "\n" + self.file_list.view() + "\n\n(Use ↑/↓, Enter to pick, Esc to cancel)"
        if self.add_stage == 3:
            return self._prompt_box(
                "Step 3/3: Enter tags (comma-separated, leave blank) "
                "(Enter to save, Esc to cancel)"
            )
        if self.edit_stage == 1:
            return self._prompt_box("Edit message (Enter to continue, Esc to cancel)")
        if self.edit_stage == 2:
            return "\n" + self.file_list.view() + "\n\n(Use ↑/↓, Enter to choose, Esc to cancel)"
        if self.edit_stage == 3:
            return self._prompt_box(
                "Edit tags (comma-separated, leave blank) (Enter to save, Esc to cancel)"
            )

        if self.confirming_delete:
            item = self.notes_list.items[self.delete_index]
            lines = ["Delete note:", "", f'"{item.message}"', ""]
            if item.file:
                lines.append(f"File: {item.file}:{item.line}")
            if item.tags:
                lines.append("Tags: " + ", ".join(item.tags))
            lines.extend(["", "Press Y/Enter to confirm, any other key to cancel"])
            return _place(self.width, self.height, _box("\n".join(lines)))

        return "\n" + self.notes_list.view() + "\n\n" + HELP_LINE