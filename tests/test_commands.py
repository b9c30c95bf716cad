"""Tests for edit commands against AppState."""

import pytest

from core.commands import (
    AddLayerCommand, AddNoteCommand, DeleteSelectionCommand,
    DuplicateSelectionCommand, NudgeSelectionCommand, RemoveLayerCommand,
    RemoveNoteCommand, RenameLayerCommand, SetLayerInstrumentCommand,
)
from core.models import Layer, Note, Project
from core.state import AppState
from audio.trigger import RecordingTrigger


@pytest.fixture
def audio():
    return RecordingTrigger()


def state_with(*notes, instrument=0):
    return AppState(Project(layers=(Layer("Layer 1", instrument, notes),)))


# ── Point edits ──────────────────────────────────────────────────────


class TestAddNote:

    def test_add_appends_previews_and_marks_dirty(self, audio):
        state = state_with(instrument=4)
        assert AddNoteCommand(3, 60, audio).execute(state)
        assert state.get_active_layer().notes == (Note(3, 60),)
        assert audio.calls == [(4, 60)]
        assert state.is_dirty()

    def test_duplicate_add_leaves_one_note(self, audio):
        state = AppState()
        AddNoteCommand(3, 60, audio).execute(state)
        assert not AddNoteCommand(3, 60, audio).execute(state)
        assert state.get_active_layer().notes == (Note(3, 60),)
        # Preview still plays for the rejected click
        assert audio.calls == [(0, 60), (0, 60)]

    def test_add_clears_selection(self, audio):
        state = state_with(Note(0, 1))
        state.selection.add(0)
        AddNoteCommand(5, 5, audio).execute(state)
        assert state.selection.is_empty()


class TestRemoveNote:

    def test_remove_first_match_only(self):
        state = state_with(Note(1, 1), Note(2, 2), Note(1, 1))
        assert RemoveNoteCommand(1, 1).execute(state)
        assert state.get_active_layer().notes == (Note(2, 2), Note(1, 1))
        assert state.is_dirty()

    def test_remove_on_empty_layer_is_noop(self):
        state = AppState()
        assert not RemoveNoteCommand(1, 1).execute(state)
        assert state.get_current_project() == Project.new()
        assert not state.is_dirty()

    def test_remove_absent_position_is_noop(self):
        state = state_with(Note(1, 1))
        assert not RemoveNoteCommand(1, 2).execute(state)
        assert state.get_active_layer().notes == (Note(1, 1),)
        assert not state.is_dirty()


# ── Batch edits ──────────────────────────────────────────────────────


class TestBatch:

    def test_delete_selection_descending(self):
        state = state_with(Note(0, 10), Note(1, 11), Note(2, 12))
        state.selection.add(2)
        state.selection.add(0)
        assert DeleteSelectionCommand().execute(state)
        assert state.get_active_layer().notes == (Note(1, 11),)
        assert state.selection.is_empty()
        assert state.is_dirty()

    def test_duplicate_offsets_and_reselects(self):
        state = state_with(Note(0, 0), Note(5, 60))
        state.selection.add(1)
        assert DuplicateSelectionCommand().execute(state)
        notes = state.get_active_layer().notes
        assert notes == (Note(0, 0), Note(5, 60), Note(7, 62))
        assert state.selection.indices == [2]

    def test_duplicate_keeps_selection_order(self):
        state = state_with(Note(0, 0), Note(1, 1), Note(2, 127))
        state.selection.add(2)
        state.selection.add(0)
        DuplicateSelectionCommand().execute(state)
        notes = state.get_active_layer().notes
        assert notes[3:] == (Note(4, 127), Note(2, 2))
        assert state.selection.indices == [3, 4]

    def test_nudge_saturates_at_zero(self):
        state = state_with(Note(0, 0))
        state.selection.add(0)
        assert NudgeSelectionCommand("left").execute(state)
        NudgeSelectionCommand("down").execute(state)
        assert state.get_active_layer().notes == (Note(0, 0),)
        assert state.selection.indices == [0]

    @pytest.mark.parametrize("direction, expected", [
        ("left", Note(4, 60)), ("right", Note(6, 60)),
        ("up", Note(5, 61)), ("down", Note(5, 59)),
    ])
    def test_nudge_directions(self, direction, expected):
        state = state_with(Note(5, 60))
        state.selection.add(0)
        NudgeSelectionCommand(direction).execute(state)
        assert state.get_active_layer().notes == (expected,)

    def test_nudge_may_stack_notes_on_one_cell(self):
        state = state_with(Note(5, 60), Note(6, 60))
        state.selection.add(0)
        NudgeSelectionCommand("right").execute(state)
        assert state.get_active_layer().notes == (Note(6, 60), Note(6, 60))

    def test_invalid_direction(self):
        with pytest.raises(ValueError):
            NudgeSelectionCommand("sideways")

    @pytest.mark.parametrize("command", [
        DeleteSelectionCommand(), DuplicateSelectionCommand(), NudgeSelectionCommand("up"),
    ])
    def test_empty_selection_is_noop(self, command):
        state = state_with(Note(5, 60))
        assert not command.execute(state)
        assert not state.is_dirty()


# ── Layers ───────────────────────────────────────────────────────────


class TestLayers:

    def test_add_layer_becomes_active(self):
        state = AppState()
        state.selection.add(0)
        AddLayerCommand().execute(state)
        project = state.get_current_project()
        assert [layer.name for layer in project.layers] == ["Layer 1", "Layer 2"]
        assert state.get_active_layer_index() == 1
        assert state.selection.is_empty()
        assert state.is_dirty()

    def test_last_layer_is_never_removed(self):
        state = AppState()
        assert not RemoveLayerCommand(0).execute(state)
        assert len(state.get_current_project().layers) == 1
        assert not state.is_dirty()

    def test_removing_last_layer_reclamps_active(self):
        state = AppState()
        AddLayerCommand().execute(state)
        AddLayerCommand().execute(state)
        assert state.get_active_layer_index() == 2
        state.selection.add(0)
        assert RemoveLayerCommand(2).execute(state)
        assert state.get_active_layer_index() == 1
        assert state.selection.is_empty()

    def test_removing_earlier_layer_shifts_active(self):
        state = AppState()
        AddLayerCommand().execute(state)
        AddLayerCommand().execute(state)
        RemoveLayerCommand(0).execute(state)
        assert state.get_active_layer_index() == 1
        assert state.get_active_layer().name == "Layer 3"

    def test_removing_later_layer_keeps_active(self):
        state = AppState()
        AddLayerCommand().execute(state)
        state.set_active_layer_index(0)
        RemoveLayerCommand(1).execute(state)
        assert state.get_active_layer_index() == 0

    def test_out_of_range_remove_is_noop(self):
        state = AppState()
        AddLayerCommand().execute(state)
        state.mark_clean()
        assert not RemoveLayerCommand(5).execute(state)
        assert not state.is_dirty()

    def test_rename_keeps_notes(self):
        state = state_with(Note(1, 1))
        RenameLayerCommand(0, "Drums").execute(state)
        assert state.get_active_layer() == Layer("Drums", 0, (Note(1, 1),))
        assert state.is_dirty()

    def test_set_instrument_previews_reference_pitch(self, audio):
        state = AppState()
        SetLayerInstrumentCommand(0, 7, audio).execute(state)
        assert state.get_active_layer().instrument == 7
        assert audio.calls == [(7, 66)]
        assert state.is_dirty()

    def test_set_instrument_out_of_range(self):
        with pytest.raises(ValueError):
            SetLayerInstrumentCommand(0, 16)

    @pytest.mark.parametrize("index", [-1, 2, 9])
    def test_layer_edits_reject_bad_index(self, index, audio):
        state = AppState()
        AddLayerCommand().execute(state)
        state.mark_clean()
        before = state.get_current_project()
        assert not RemoveLayerCommand(index).execute(state)
        assert not RenameLayerCommand(index, "Oops").execute(state)
        assert not SetLayerInstrumentCommand(index, 3, audio).execute(state)
        assert state.get_current_project() == before
        assert audio.calls == []
        assert not state.is_dirty()
