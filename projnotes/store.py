"""Storage of project notes in ``.notes/notes.json`` under a project root."""

from __future__ import annotations

import json
import os
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable

NOTES_DIR = ".notes"
NOTES_FILE = "notes.json"
SHORT_ID_LENGTH = 8

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_TIMESTAMP = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$"
)


class NotesError(Exception):
    """Raised when the notes file is missing, unreadable or malformed."""


def _format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if len(text) < 19:
        text = f"{moment.year:04d}" + text[text.index("-"):]
    if moment.microsecond:
        text += f".{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_timestamp(text: Any) -> datetime:
    if not isinstance(text, str):
        raise NotesError(f"invalid created_at value: {text!r}")
    match = _TIMESTAMP.match(text)
    if match is None:
        raise NotesError(f"invalid created_at value: {text!r}")
    base, fraction, zone = match.groups()
    try:
        moment = datetime.strptime(base, "%Y-%m-%dT%H:%M:%S")
    except ValueError as exc:
        raise NotesError(f"invalid created_at value: {text!r}") from exc
    if fraction:
        moment = moment.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        hours, minutes = int(zone[1:3]), int(zone[4:6])
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))
    return moment.replace(tzinfo=tz)


@dataclass
class Note:
    """A single note, optionally tied to a file, a line and some tags."""

    id: str
    message: str
    file: str = ""
    line: int = 0
    created_at: datetime = field(default_factory=lambda: _ZERO_TIME)
    tags: list[str] = field(default_factory=list)

    def short_id(self) -> str:
        """The first eight characters of the id."""
        return self.id[:SHORT_ID_LENGTH]

    def matches_id(self, note_id: str) -> bool:
        """Whether ``note_id`` is this note's full or short id."""
        return note_id in (self.id, self.short_id())

    def to_dict(self) -> dict[str, Any]:
        """The JSON object for this note; empty optional fields are left out."""
        data: dict[str, Any] = {"id": self.id, "message": self.message}
        if self.file:
            data["file"] = self.file
        if self.line:
            data["line"] = self.line
        data["created_at"] = _format_timestamp(self.created_at)
        if self.tags:
            data["tags"] = list(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "Note":
        """Build a note from a decoded JSON object."""
        if not isinstance(data, dict):
            raise NotesError(f"note must be an object, got {type(data).__name__}")

        def text(key: str) -> str:
            value = data.get(key)
            if value is None:
                return ""
            if not isinstance(value, str):
                raise NotesError(f"note field {key!r} must be a string")
            return value

        line = data.get("line")
        if line is None:
            line = 0
        if isinstance(line, bool) or not isinstance(line, int):
            raise NotesError("note field 'line' must be an integer")

        tags = data.get("tags")
        if tags is None:
            tags = []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise NotesError("note field 'tags' must be a list of strings")

        created = data.get("created_at")
        created_at = _ZERO_TIME if created is None else _parse_timestamp(created)

        return cls(
            id=text("id"),
            message=text("message"),
            file=text("file"),
            line=line,
            created_at=created_at,
            tags=list(tags),
        )


def _root(root: str | os.PathLike[str] | None) -> Path:
    return Path(root) if root is not None else Path.cwd()


def _relative_path(root: Path, file: str) -> str:
    """Express an absolute ``file`` relative to ``root``; leave others alone."""
    if not file or not os.path.isabs(file):
        return file
    try:
        return os.path.relpath(file, os.path.abspath(root))
    except ValueError:
        return file


def notes_path(root: str | os.PathLike[str] | None = None) -> Path:
    """Location of the notes file for the project at ``root``."""
    return _root(root) / NOTES_DIR / NOTES_FILE


def hide_file(path: str | os.PathLike[str]) -> None:
    """Keep ``path`` out of sight; its leading dot already hides it, so nothing more is done."""
    return None


def read_notes(path: str | os.PathLike[str]) -> list[Note]:
    """Read and decode the notes stored at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise NotesError("notes file does not exist") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise NotesError(f"cannot parse notes: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise NotesError("notes file must hold a list of notes")
    return [Note.from_dict(entry) for entry in data]


def write_notes(path: str | os.PathLike[str], notes: Iterable[Note]) -> None:
    """Write ``notes`` to ``path`` as indented JSON."""
    payload = [note.to_dict() for note in notes]
    Path(path).write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def load_all_notes(root: str | os.PathLike[str] | None = None) -> list[Note]:
    """All notes of the project, or an empty list when there is no notes file."""
    path = notes_path(root)
    if not path.exists():
        return []
    return read_notes(path)


def save_note(
    message: str,
    file: str = "",
    line: int = 0,
    tags: Iterable[str] | None = None,
    root: str | os.PathLike[str] | None = None,
) -> Note:
    """Append a new note to the project's notes file and return it."""
    base = _root(root)
    note = Note(
        id=str(uuid.uuid4()),
        message=message,
        file=_relative_path(base, file),
        line=line,
        created_at=datetime.now().astimezone(),
        tags=list(tags or []),
    )

    notes_dir = base / NOTES_DIR
    notes_dir.mkdir(parents=True, exist_ok=True)
    hide_file(notes_dir)

    path = notes_dir / NOTES_FILE
    notes: list[Note] = []
    if path.exists():
        try:
            notes = read_notes(path)
        except NotesError:
            notes = []
    notes.append(note)
    write_notes(path, notes)
    return note


def delete_note_by_id(
    note_id: str, root: str | os.PathLike[str] | None = None
) -> list[Note]:
    """Remove every note whose full or short id is ``note_id``; return them."""
    path = notes_path(root)
    if not path.exists():
        raise NotesError("notes file does not exist")
    notes = read_notes(path)
    removed = [note for note in notes if note.matches_id(note_id)]
    if not removed:
        raise NotesError(f"no note found with id {note_id}")
    write_notes(path, (note for note in notes if not note.matches_id(note_id)))
    return removed