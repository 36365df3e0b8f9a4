import pytest

from projnotes.model import HELP_LINE, NO_FILE, TuiModel
from projnotes.store import NotesError, load_all_notes, notes_path, save_note


def type_text(model, text):
    for ch in text:
        model.handle_key(ch)


def messages(model):
    return [item.message for item in model.notes_list.items]


def test_init_loads_notes_in_order(tmp_path):
    save_note("first", root=tmp_path)
    save_note("second", root=tmp_path)
    model = TuiModel(tmp_path)
    assert messages(model) == ["first", "second"]


def test_init_with_corrupt_file_raises(tmp_path):
    path = notes_path(tmp_path)
    path.parent.mkdir()
    path.write_text("{broken")
    with pytest.raises(NotesError):
        TuiModel(tmp_path)


def test_add_flow_with_file_and_tags(tmp_path):
    (tmp_path / "x.txt").write_text("x")
    model = TuiModel(tmp_path)
    model.handle_key("ctrl+a")
    assert model.add_stage == 1
    type_text(model, "hello")
    model.handle_key("enter")
    assert model.add_stage == 2
    assert [i.message for i in model.file_list.items] == [NO_FILE, "x.txt"]
    model.handle_key("down")
    model.handle_key("enter")
    assert model.add_stage == 3
    type_text(model, " a , b ")
    model.handle_key("enter")
    assert model.add_stage == 0
    notes = load_all_notes(tmp_path)
    assert [(n.message, n.file, n.tags) for n in notes] == [("hello", "x.txt", ["a", "b"])]
    assert messages(model) == ["hello"]


def test_add_flow_without_file_or_tags(tmp_path):
    model = TuiModel(tmp_path)
    model.handle_key("ctrl+a")
    type_text(model, "plain")
    model.handle_key("enter")
    model.handle_key("enter")
    model.handle_key("enter")
    notes = load_all_notes(tmp_path)
    assert [(n.message, n.file, n.tags) for n in notes] == [("plain", "", [])]


def test_escape_cancels_add(tmp_path):
    model = TuiModel(tmp_path)
    model.handle_key("ctrl+a")
    type_text(model, "draft")
    model.handle_key("esc")
    assert model.add_stage == 0
    assert load_all_notes(tmp_path) == []


def test_backspace_edits_input(tmp_path):
    model = TuiModel(tmp_path)
    model.handle_key("ctrl+a")
    type_text(model, "abc")
    model.handle_key("backspace")
    assert model.text_input.value == "ab"


def test_search_filters_and_escape_restores(tmp_path):
    save_note("buy milk", tags=["home"], root=tmp_path)
    save_note("fix bug", tags=["work"], root=tmp_path)
    model = TuiModel(tmp_path)
    model.handle_key("/")
    assert model.search_mode
    type_text(model, "#work")
    assert messages(model) == ["fix bug"]
    model.handle_key("esc")
    assert not model.search_mode
    assert messages(model) == ["buy milk", "fix bug"]


def test_delete_confirmed(tmp_path):
    save_note("keep", root=tmp_path)
    save_note("drop", root=tmp_path)
    model = TuiModel(tmp_path)
    model.handle_key("down")
    model.handle_key("ctrl+d")
    assert model.confirming_delete
    model.handle_key("y")
    assert [n.message for n in load_all_notes(tmp_path)] == ["keep"]
    assert messages(model) == ["keep"]
    assert not model.confirming_delete


def test_delete_cancelled_by_other_key(tmp_path):
    save_note("stay", root=tmp_path)
    model = TuiModel(tmp_path)
    model.handle_key("delete")
    model.handle_key("n")
    assert not model.confirming_delete
    assert model.delete_index == -1
    assert [n.message for n in load_all_notes(tmp_path)] == ["stay"]


def test_delete_error_is_reported(tmp_path):
    save_note("gone", root=tmp_path)
    model = TuiModel(tmp_path)
    model.handle_key("ctrl+d")
    notes_path(tmp_path).unlink()
    model.handle_key("enter")
    assert any("notes file does not exist" in m for m in model.messages)
    assert model.notes_list.items == []


def test_edit_flow(tmp_path):
    (tmp_path / "a.txt").write_text("a")
    original = save_note("orig", file="a.txt", line=7, tags=["x", "y"], root=tmp_path)
    model = TuiModel(tmp_path)
    model.handle_key("ctrl+e")
    assert model.edit_stage == 1
    assert model.text_input.value == "orig"
    type_text(model, " more")
    model.handle_key("enter")
    assert model.file_list.selected.message == "a.txt"
    model.handle_key("enter")
    assert model.text_input.value == "x, y"
    type_text(model, ", z")
    model.handle_key("enter")
    [note] = load_all_notes(tmp_path)
    assert note.message == "orig more"
    assert note.file == "a.txt"
    assert note.line == 7
    assert note.tags == ["x", "y", "z"]
    assert note.created_at == original.created_at
    assert model.edit_stage == 0


@pytest.mark.parametrize("key", ["q", "esc", "ctrl+c", "ctrl+q"])
def test_quit_keys(tmp_path, key):
    model = TuiModel(tmp_path)
    model.handle_key(key)
    assert model.quitting


def test_list_navigation_clamps(tmp_path):
    save_note("one", root=tmp_path)
    save_note("two", root=tmp_path)
    model = TuiModel(tmp_path)
    model.handle_key("up")
    assert model.notes_list.index == 0
    model.handle_key("down")
    model.handle_key("down")
    assert model.notes_list.index == 1


def test_resize_keeps_sizes_positive(tmp_path):
    model = TuiModel(tmp_path)
    model.resize(3, 2)
    assert (model.notes_list.width, model.notes_list.height) == (1, 1)
    assert model.text_input.width >= 1


def test_main_view_lists_notes(tmp_path):
    save_note("visible note", root=tmp_path)
    model = TuiModel(tmp_path)
    text = model.view()
    assert "visible note" in text
    assert text.endswith(HELP_LINE)


def test_confirm_view(tmp_path):
    save_note("to remove", file="f.py", tags=["t1"], root=tmp_path)
    model = TuiModel(tmp_path)
    model.resize(80, 24)
    model.handle_key("ctrl+d")
    text = model.view()
    assert "Delete note:" in text
    assert '"to remove"' in text
    assert "Tags: t1" in text
    assert "Press Y/Enter to confirm, any other key to cancel" in text


def test_add_prompt_view(tmp_path):
    model = TuiModel(tmp_path)
    model.resize(100, 20)
    model.handle_key("ctrl+a")
    text = model.view()
    assert "Step 1/3: Enter note message (Enter to continue, Esc to cancel)" in text
    assert len(text.split("\n")) == 20
    assert all(len(line) == 100 for line in text.split("\n"))