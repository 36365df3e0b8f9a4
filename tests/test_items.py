from datetime import datetime, timezone

import pytest

from projnotes.items import NoteItem, filter_items, list_project_files
from projnotes.store import Note


def test_title_short_message_unchanged():
    item = NoteItem(id="1", message="a" * 40)
    assert item.title() == "a" * 40


def test_title_long_message_truncated():
    item = NoteItem(id="1", message="x" * 41)
    assert item.title() == "x" * 37 + "..."
    assert len(item.title()) == 40


def test_description_with_file_and_line():
    item = NoteItem(message="m", file="a.go", line=3)
    assert item.description() == " a.go:3"


def test_description_file_without_line():
    item = NoteItem(message="m", file="a.go")
    assert item.description() == " a.go"


def test_description_tags_only():
    item = NoteItem(message="m", tags=["bug", "urgent"])
    assert item.description() == " [bug, urgent]"


def test_description_empty():
    assert NoteItem(message="m").description() == ""


def test_filter_value_is_message():
    assert NoteItem(message="hello world").filter_value() == "hello world"


def test_from_note_copies_fields():
    created = datetime(2025, 5, 30, 12, 0, tzinfo=timezone.utc)
    note = Note(id="abc", message="m", file="f.py", line=4, created_at=created, tags=["t"])
    item = NoteItem.from_note(note)
    assert (item.id, item.message, item.file, item.line, item.created_at, item.tags) == (
        "abc", "m", "f.py", 4, created, ["t"],
    )
    item.tags.append("other")
    assert note.tags == ["t"]


@pytest.fixture
def sample():
    return [
        NoteItem(id="1", message="Buy Milk", file="home.txt", tags=["Home"]),
        NoteItem(id="2", message="Fix bug", file="src/main.py", tags=["work", "bug"]),
        NoteItem(id="3", message="Write #docs", tags=[]),
    ]


@pytest.mark.parametrize("query", ["", "   "])
def test_filter_blank_query_returns_all(sample, query):
    assert filter_items(sample, query) == sample


def test_filter_text_matches_message_case_insensitive(sample):
    assert [i.id for i in filter_items(sample, "milk")] == ["1"]


def test_filter_text_matches_file(sample):
    assert [i.id for i in filter_items(sample, "MAIN")] == ["2"]


def test_filter_tag(sample):
    assert [i.id for i in filter_items(sample, "#home")] == ["1"]


def test_filter_all_terms_required(sample):
    assert filter_items(sample, "fix #home") == []
    assert [i.id for i in filter_items(sample, "fix #work #bug")] == ["2"]


def test_filter_lone_hash_is_text(sample):
    assert [i.id for i in filter_items(sample, "#")] == ["3"]


def test_filter_no_match(sample):
    assert filter_items(sample, "nothing-here") == []


def test_list_project_files_skips_dot_dirs(tmp_path):
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.txt").write_text("c")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "config").write_text("x")
    (tmp_path / ".hidden_file").write_text("x")
    files = list_project_files(tmp_path)
    assert files == [
        ".hidden_file",
        "a.txt",
        "b.txt",
        str((tmp_path / "sub" / "c.txt").relative_to(tmp_path)),
    ]


def test_list_project_files_missing_root(tmp_path):
    assert list_project_files(tmp_path / "missing") == []