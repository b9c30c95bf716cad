"""Tests for Note, Layer and Project models."""

import dataclasses

import pytest

from core.constants import MAX_TICK
from core.models import Layer, Note, Project


class TestNote:

    def test_note_is_immutable(self):
        note = Note(time=3, pitch=60)
        with pytest.raises(dataclasses.FrozenInstanceError):
            note.pitch = 61

    @pytest.mark.parametrize("time, pitch", [(-1, 60), (0, 128), (0, -1), (MAX_TICK + 1, 0)])
    def test_out_of_range_fields_rejected(self, time, pitch):
        with pytest.raises(ValueError):
            Note(time=time, pitch=pitch)

    def test_shifted_saturates(self):
        assert Note(0, 0).shifted(-1, -1) == Note(0, 0)
        assert Note(MAX_TICK, 127).shifted(2, 2) == Note(MAX_TICK, 127)
        assert Note(5, 60).shifted(2, 2) == Note(7, 62)

    def test_dict_uses_note_key_for_pitch(self):
        assert Note(5, 60).to_dict() == {"time": 5, "note": 60}
        assert Note.from_dict({"time": 5, "note": 60}) == Note(5, 60)

    @pytest.mark.parametrize("data", [
        {"time": 3.7, "note": 60},
        {"time": 3.0, "note": 60},
        {"time": 3, "note": "60"},
        {"time": True, "note": 60},
    ])
    def test_from_dict_rejects_non_integer_fields(self, data):
        with pytest.raises(ValueError):
            Note.from_dict(data)


class TestProject:

    def test_new_project_has_one_empty_layer(self):
        project = Project.new()
        assert len(project.layers) == 1
        assert project.layers[0] == Layer(name="Layer 1", instrument=0, notes=())

    def test_empty_project_rejected(self):
        with pytest.raises(ValueError):
            Project(layers=())

    def test_layer_notes_normalised_to_tuple(self):
        layer = Layer("L", 0, [Note(1, 2)])
        assert layer.notes == (Note(1, 2),)

    def test_bad_instrument_rejected(self):
        with pytest.raises(ValueError):
            Layer("L", 16)

    def test_round_trip_two_layers(self):
        project = Project(layers=(
            Layer("Empty", 3),
            Layer("Melody", 7, (Note(0, 60), Note(4, 62), Note(2, 64))),
        ))
        assert Project.from_dict(project.to_dict()) == project

    def test_document_schema(self):
        project = Project(layers=(Layer("Bass", 1, (Note(2, 40),)),))
        assert project.to_dict() == {
            "layers": [
                {"name": "Bass", "instrument": 1, "notes": [{"time": 2, "note": 40}]}
            ]
        }

    @pytest.mark.parametrize("document", [
        {},
        {"layers": []},
        {"layers": [{"name": "L", "instrument": 0}]},
        {"layers": [{"name": "L", "instrument": 0, "notes": [{"time": 1}]}]},
        {"layers": [{"name": 5, "instrument": 0, "notes": []}]},
        {"layers": [{"name": "L", "instrument": 99, "notes": []}]},
        {"layers": None},
        {"layers": [{"name": "L", "instrument": 0, "notes": [{"time": 3.7, "note": 60}]}]},
        {"layers": [{"name": "L", "instrument": "2", "notes": []}]},
    ])
    def test_malformed_documents_raise_value_error(self, document):
        with pytest.raises(ValueError):
            Project.from_dict(document)

    def test_notes_at_visits_layers_in_order(self):
        project = Project(layers=(
            Layer("A", 0, (Note(1, 60), Note(2, 61), Note(1, 62))),
            Layer("B", 5, (Note(1, 70),)),
        ))
        assert list(project.notes_at(1)) == [(0, 60), (0, 62), (5, 70)]
        assert list(project.notes_at(3)) == []

    def test_last_tick(self):
        assert Project.new().last_tick == -1
        project = Project(layers=(Layer("A", 0, (Note(9, 60),)), Layer("B", 0, (Note(4, 1),))))
        assert project.last_tick == 9
