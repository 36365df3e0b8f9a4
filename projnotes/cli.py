"""Command line interface for managing per-project notes."""

from __future__ import annotations

import argparse
import os
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Sequence

from termcolor import colored as _termcolor

from .store import Note, NotesError, notes_path, read_notes, save_note, write_notes
from .tui import run_tui

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _zone_name(moment: datetime) -> str:
    offset = moment.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return "UTC"
    local = moment.astimezone()
    name = local.tzname()
    if local.utcoffset() == offset and name and name[0].isalpha():
        return name
    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def _rfc822(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return (
        f"{moment.day:02d} {_MONTHS[moment.month - 1]} {moment.year % 100:02d} "
        f"{moment.hour:02d}:{moment.minute:02d} {_zone_name(moment)}"
    )


def format_note(note: Note, colored: bool = False) -> str:
    """The lines ``list`` prints for one note, optionally in colour."""
    paint: Callable[[str, str], str]
    if colored:
        def paint(text: str, color: str) -> str:
            return _termcolor(text, color, force_color=True)
    else:
        def paint(text: str, color: str) -> str:
            return text

    location = ""
    if note.file:
        location = f" → {note.file}"
        if note.line > 0:
            location += f":{note.line}"

    lines = [f"[{paint(note.short_id(), 'light_cyan')}] {paint(note.message, 'light_grey')}{location}"]
    if note.tags:
        lines.append("    Tags: " + ", ".join(paint(tag, "green") for tag in note.tags))
    lines.append("    " + paint(_rfc822(note.created_at), "dark_grey"))
    return "\n".join(lines)


def _split_tags(values: Sequence[str] | None) -> list[str] | None:
    if values is None:
        return None
    return [tag for value in values if value for tag in value.split(",")]


def _relative_to(root: Path, file: str) -> str:
    if not os.path.isabs(file):
        return file
    try:
        return os.path.relpath(file, os.path.abspath(root))
    except ValueError:
        return file


def _confirm(prompt: str) -> bool:
    print(prompt, end="", flush=True)
    try:
        answer = input()
    except EOFError:
        answer = ""
    words = answer.split()
    return bool(words) and words[0] in ("y", "Y")


def _use_color() -> bool:
    return sys.stdout.isatty() and "NO_COLOR" not in os.environ


def _cmd_add(args: argparse.Namespace) -> int:
    try:
        save_note(args.message, args.file, args.line, _split_tags(args.tags) or [], Path.cwd())
    except (NotesError, OSError) as exc:
        print(f"Error saving note: {exc}")
        return 1
    print("Note Saved Successfully")
    return 0


def _load(path: Path, parse_error: str) -> list[Note] | None:
    try:
        return read_notes(path)
    except NotesError as exc:
        print(f"{parse_error} {exc}")
    except OSError as exc:
        print(f"Error reading notes file: {exc}")
    return None


def _store(path: Path, notes: list[Note]) -> bool:
    try:
        write_notes(path, notes)
    except OSError as exc:
        print(f"Error writing updated notes: {exc}")
        return False
    return True


def _cmd_delete(args: argparse.Namespace) -> int:
    path = notes_path(Path.cwd())
    if not path.exists():
        print("No notes file found.")
        return 0
    notes = _load(path, "Error parsing notes:")
    if notes is None:
        return 1

    if args.tag:
        kept: list[Note] = []
        deleted = 0
        for note in notes:
            if args.tag in note.tags:
                prompt = f'Delete note "{note.message}" (file: {note.file})? (y/N): '
                if args.yes or _confirm(prompt):
                    deleted += 1
                    continue
            kept.append(note)
        if not deleted:
            print(f'No notes found with tag "{args.tag}"')
            return 0
        if not _store(path, kept):
            return 1
        print(f'Deleted {deleted} note(s) with tag "{args.tag}".')
        return 0

    if args.id is None:
        print("Please provide a note ID or use --tag to delete all notes with a given tag")
        return 0

    kept = []
    deleted_any = False
    for note in notes:
        if note.matches_id(args.id):
            prompt = f'Are you sure you want to delete note "{note.message}"? (y/N): '
            if not args.yes and not _confirm(prompt):
                print("Aborted.")
                return 0
            deleted_any = True
            continue
        kept.append(note)

    if not deleted_any:
        print(f"No note found with ID {args.id}")
        return 0
    if not _store(path, kept):
        return 1
    print(f"Note with ID {args.id} deleted successfully.")
    return 0


def _cmd_edit(args: argparse.Namespace) -> int:
    root = Path.cwd()
    path = notes_path(root)
    if not path.exists():
        print("No notes found in current project")
        return 0
    notes = _load(path, "Error parsing notes:")
    if notes is None:
        return 1

    target = next((note for note in notes if note.matches_id(args.id)), None)
    if target is None:
        print(f"No note found with ID {args.id}")
        return 0
    if args.message:
        target.message = args.message
    if args.file is not None:
        target.file = _relative_to(root, args.file) if args.file else ""
    tags = _split_tags(args.tags)
    if tags is not None:
        target.tags = tags

    try:
        write_notes(path, notes)
    except OSError as exc:
        print(f"Error writing notes: {exc}")
        return 1
    print(f"Note {args.id} updated successfully")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    path = notes_path(Path.cwd())
    if not path.exists():
        print("No notes found")
        return 0
    notes = _load(path, "Error unmarshalling notes:")
    if notes is None:
        return 1
    if not notes:
        print("No notes found")
        return 0

    color = _use_color()
    for note in notes:
        if args.file:
            same_base = os.path.basename(note.file or ".") == os.path.basename(args.file)
            if note.file != args.file and not same_base:
                continue
        if args.tag and args.tag not in note.tags:
            continue
        print(format_note(note, color))
        print()
    return 0


def _cmd_tui(args: argparse.Namespace) -> int:
    try:
        messages = run_tui(Path.cwd())
    except NotesError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for message in messages:
        print(message, file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the ``notes`` command and its subcommands."""
    parser = argparse.ArgumentParser(
        prog="notes",
        description=(
            "Notes is a simple CLI for managing notes. It allows you to create, "
            "view, and delete notes per project."
        ),
    )
    parser.add_argument("-t", "--toggle", action="store_true", help="Help message for toggle")
    sub = parser.add_subparsers(dest="command", metavar="command")

    add = sub.add_parser(
        "add",
        help="Add a new note",
        description=(
            "Adds a new note to your project. Save a new note by providing a "
            "message after the add command surrounded by quotes."
        ),
    )
    add.add_argument("message")
    add.add_argument("-f", "--file", default="",
                     help="Optional file to associate with the note (e.g. --file cmd/root.go)")
    add.add_argument("-l", "--line", type=int, default=0,
                     help="Optional line number in the file to associate with the note")
    add.add_argument("-t", "--tags", action="append", default=None,
                     help="Optional comma-separated tags for the note (e.g. --tags bug,urgent)")
    add.set_defaults(handler=_cmd_add)

    delete = sub.add_parser("delete", help="Delete a note by ID",
                            description="Deletes a note from your project.")
    delete.add_argument("id", nargs="?")
    delete.add_argument("-t", "--tag", default="", help="Delete all notes with a given tag")
    delete.add_argument("-y", "--yes", action="store_true", help="Delete without confirmation")
    delete.set_defaults(handler=_cmd_delete)

    edit = sub.add_parser(
        "edit",
        help="Edit an existing note by ID",
        description=(
            "Edit an existing note in the current project. You must supply the note ID "
            "(first 8 chars or full). Provide any of --message, --file, or --tags to "
            "update just those fields."
        ),
    )
    edit.add_argument("id")
    edit.add_argument("-m", "--message", default="", help="Update note message")
    edit.add_argument("-f", "--file", default=None, help="New file to associate (optional)")
    edit.add_argument("-t", "--tags", action="append", default=None,
                      help="New comma-separated tags (optional)")
    edit.set_defaults(handler=_cmd_edit)

    listing = sub.add_parser("list", help="List your saved notes",
                             description="Lists all notes saved for the current project.")
    listing.add_argument("-f", "--file", default="", help="Optional file to filter notes by")
    listing.add_argument("-t", "--tag", default="", help="Optional tag to filter notes by")
    listing.set_defaults(handler=_cmd_list)

    tui = sub.add_parser("tui", help="Shows a TUI for your saved notes for your current project",
                         description="Show your current project's notes in a nice TUI.")
    tui.set_defaults(handler=_cmd_tui)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the ``notes`` command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())