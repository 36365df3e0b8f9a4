# projnotes

Short notes that live with your project. Each note goes into
`.notes/notes.json` under the directory where you run the command. A note
can point at a file and a line in that file, and can carry any number of
tags.

## Installation

```
pip install projnotes
```

This installs the `notes` command.

## Usage

Run every command from the root of your project.

### Add

```
notes add "Refactor the parser"
notes add "Off-by-one here" --file src/parser.py --line 42 --tags bug,urgent
```

An absolute `--file` is stored relative to the current directory; a relative
one is stored as given. `--tags` takes a comma-separated list and may be
repeated.

### List

```
notes list
notes list --file parser.py
notes list --tag bug
```

Each note is shown with the first 8 characters of its ID, its message, its
file and line, its tags and the time it was created (for example
`30 May 25 12:00 UTC`). `--file` keeps notes whose file is the given path or
has the same base name; `--tag` keeps notes carrying exactly that tag. Output
is coloured when it goes to a terminal and `NO_COLOR` is not set.

The short ID can be used anywhere a command asks for an ID.

### Edit

Only the fields you give are changed:

```
notes edit 1a2b3c4d --message "Refactor the tokenizer"
notes edit 1a2b3c4d --file src/lexer.py
notes edit 1a2b3c4d --tags cleanup
```

`--file ""` removes the file from a note. `--tags` replaces all tags of the
note. The line and the creation time are never changed by `edit`.

### Delete

```
notes delete 1a2b3c4d
notes delete --tag done
notes delete --tag done --yes
```

You are asked to confirm each deletion (`y` or `Y`) unless you pass `--yes`.
When deleting by tag, each matching note is asked about in turn and the ones
you decline are kept; when deleting by ID, declining aborts without change.

### Terminal UI

```
notes tui
```

| Key | Action |
| --- | --- |
| Up / Down (or k / j) | move through notes |
| PgUp / PgDown, Home / End | jump by page or to either end |
| Ctrl+A | add a note: message, then file, then tags |
| Ctrl+E | edit the selected note: message, then file, then tags |
| Ctrl+D or Delete | delete the selected note; Y or Enter confirms, any other key cancels |
| Ctrl+F or `/` | search |
| Esc | leave the current prompt, or leave search and show all notes |
| q, Esc, Ctrl+C, Ctrl+Q | quit (from the note list) |

In search, words match the message or the file name, ignoring case; a word
written `#tag` must match one of the note's tags, also ignoring case. Every
word has to match.

The file step offers "(No File)" followed by every file under the current
directory, skipping directories whose names start with a dot. Notes added in
the UI have no line number, and editing in the UI keeps the existing one.

## Using it from Python

`projnotes.store` reads and writes the notes file: `Note`, `load_all_notes`,
`save_note`, `delete_note_by_id`, `read_notes`, `write_notes` and
`notes_path`, each taking an optional project root (the current directory by
default). Problems with the notes file raise `NotesError`.

## Storage

Notes are kept as a JSON array in `.notes/notes.json`, indented by two
spaces. Empty file, line and tag fields are left out of each entry.

## What it does not do

- The `.notes` directory is not given a hidden attribute on Windows; it is
  hidden only by its leading dot where the system treats such names as
  hidden.
- `notes tui` needs Python's `curses` module. Where it is missing, the
  command prints an error and exits with status 1; the other commands work
  everywhere.