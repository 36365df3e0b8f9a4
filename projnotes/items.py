"""List entries for notes, search filtering and project file discovery."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from .store import Note

_TITLE_LIMIT = 40
_TITLE_KEEP = 37
_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass
class NoteItem:
    """A note as shown in an interactive list."""

    id: str = ""
    message: str = ""
    file: str = ""
    line: int = 0
    created_at: datetime = field(default_factory=lambda: _ZERO_TIME)
    tags: list[str] = field(default_factory=list)

    def title(self) -> str:
        """The message, shortened with an ellipsis when it is too long."""
        if len(self.message) > _TITLE_LIMIT:
            return self.message[:_TITLE_KEEP] + "..."
        return self.message

    def description(self) -> str:
        """The file location and tags of the note, or an empty string."""
        text = ""
        if self.file:
            text += " "
            text += f"{self.file}:{self.line}" if self.line > 0 else self.file
        if self.tags:
            text += " [" + ", ".join(self.tags) + "]"
        return text

    def filter_value(self) -> str:
        """The text a list filter matches against."""
        return self.message

    @classmethod
    def from_note(cls, note: Note) -> "NoteItem":
        """Build a list entry from a stored note."""
        return cls(
            id=note.id,
            message=note.message,
            file=note.file,
            line=note.line,
            created_at=note.created_at,
            tags=list(note.tags),
        )


def filter_items(items: Iterable[NoteItem], query: str) -> list[NoteItem]:
    """Items matching every term of ``query``.

    A term ``#tag`` requires that tag (case-insensitive); any other term must
    appear in the message or the file name (case-insensitive).
    """
    items = list(items)
    raw = query.strip()
    if not raw:
        return items

    tag_filters: list[str] = []
    text_filters: list[str] = []
    for term in raw.split():
        if term.startswith("#") and len(term) > 1:
            tag_filters.append(term[1:].lower())
        else:
            text_filters.append(term.lower())

    def matches(item: NoteItem) -> bool:
        message = item.message.lower()
        file = item.file.lower()
        if not all(term in message or term in file for term in text_filters):
            return False
        tags = {tag.lower() for tag in item.tags}
        return all(tag in tags for tag in tag_filters)

    return [item for item in items if matches(item)]


def list_project_files(root: str | os.PathLike[str] | None = None) -> list[str]:
    """Paths, relative to ``root``, of the files under it in lexical order.

    Directories whose names start with a dot are skipped entirely. Walking
    stops at the first directory that cannot be read.
    """
    base = (Path(root) if root is not None else Path.cwd()).absolute()
    if base.name.startswith("."):
        return []

    found: list[str] = []

    def walk(directory: str) -> None:
        with os.scandir(directory) as scan:
            entries = sorted(scan, key=lambda entry: entry.name)
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                if not entry.name.startswith("."):
                    walk(entry.path)
            else:
                found.append(os.path.relpath(entry.path, base))

    try:
        walk(str(base))
    except OSError:
        pass
    return found