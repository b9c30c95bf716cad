"""
Command pattern for project edits.

All project modifications go through commands so that:
- Selection is cleared whenever note indices may have shifted
- The dirty flag is set exactly when the document changes
- Audible previews happen in one place

Undo/redo is not supported; commands only execute.
"""
from abc import ABC, abstractmethod
from typing import Optional

from core.constants import DUPLICATE_OFFSET, INSTRUMENTS, REFERENCE_PITCH
from core.models import Layer, Note, Project
from core.state import AppState
from audio.trigger import AudioTrigger, NullTrigger


# Nudge direction to (ticks, semitones)
NUDGE_STEPS = {
    "left": (-1, 0),
    "right": (1, 0),
    "up": (0, 1),
    "down": (0, -1),
}


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, state: AppState) -> bool:
        """
        Execute command against the editor state.

        Args:
            state: Current app state (mutated in place)

        Returns:
            True if the project document changed
        """
        raise NotImplementedError()

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable command description for UI."""
        raise NotImplementedError()


class AddNoteCommand(Command):
    """Command to place a note in the active layer."""

    def __init__(self, time: int, pitch: int, audio: Optional[AudioTrigger] = None):
        """
        Args:
            time: Tick to place the note on
            pitch: Pitch row (0-127)
            audio: Collaborator that previews the placed pitch
        """
        self.note = Note(time=time, pitch=pitch)
        self.audio = audio or NullTrigger()

    def execute(self, state: AppState) -> bool:
        """Append note unless its cell is already taken."""
        layer = state.get_active_layer()
        state.selection.clear()

        changed = layer.find(self.note.time, self.note.pitch) is None
        if changed:
            state.set_active_layer(layer.with_notes(layer.notes + (self.note,)))
            state.mark_dirty()

        # Preview plays even when the cell was already occupied
        self.audio.trigger(layer.instrument, self.note.pitch)
        return changed

    @property
    def description(self) -> str:
        return "Add Note"


class RemoveNoteCommand(Command):
    """Command to remove the first note at a position in the active layer."""

    def __init__(self, time: int, pitch: int):
        self.time = time
        self.pitch = pitch

    def execute(self, state: AppState) -> bool:
        layer = state.get_active_layer()
        state.selection.clear()

        found = layer.find(self.time, self.pitch)
        if found is None:
            return False

        notes = list(layer.notes)
        notes.pop(found)
        state.set_active_layer(layer.with_notes(notes))
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return "Remove Note"


class DuplicateSelectionCommand(Command):
    """
    Command to duplicate selected notes.

    Each copy is offset by DUPLICATE_OFFSET ticks and semitones (saturating)
    and appended; the copies become the new selection.
    """

    def execute(self, state: AppState) -> bool:
        selection = state.selection
        if selection.is_empty():
            return False

        layer = state.get_active_layer()
        notes = list(layer.notes)
        for position, index in enumerate(selection.indices):
            notes.append(notes[index].shifted(DUPLICATE_OFFSET, DUPLICATE_OFFSET))
            selection.replace(position, len(notes) - 1)

        state.set_active_layer(layer.with_notes(notes))
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return "Duplicate Notes"


class DeleteSelectionCommand(Command):
    """Command to delete selected notes from the active layer."""

    def execute(self, state: AppState) -> bool:
        selection = state.selection
        if selection.is_empty():
            return False

        layer = state.get_active_layer()
        notes = list(layer.notes)

        # Highest index first so earlier removals don't shift later ones
        for index in selection.descending():
            notes.pop(index)

        selection.clear()
        state.set_active_layer(layer.with_notes(notes))
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return "Delete Notes"


class NudgeSelectionCommand(Command):
    """Command to move selected notes one step in a direction."""

    def __init__(self, direction: str):
        """
        Args:
            direction: "left", "right", "up" or "down"
        """
        if direction not in NUDGE_STEPS:
            raise ValueError(f"Invalid direction: {direction}. Expected one of {list(NUDGE_STEPS)}")
        self.direction = direction

    def execute(self, state: AppState) -> bool:
        selection = state.selection
        if selection.is_empty():
            return False

        dt, dp = NUDGE_STEPS[self.direction]
        layer = state.get_active_layer()
        notes = list(layer.notes)
        for index in selection:
            notes[index] = notes[index].shifted(dt, dp)

        state.set_active_layer(layer.with_notes(notes))
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return f"Nudge Notes {self.direction.capitalize()}"


class AddLayerCommand(Command):
    """Command to append a new layer and make it active."""

    def execute(self, state: AppState) -> bool:
        project = state.get_current_project()
        layer = Layer(name=f"Layer {len(project.layers) + 1}", instrument=0)
        state.set_current_project(
            Project(layers=project.layers + (layer,))
        )
        state.set_active_layer_index(len(project.layers))
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return "Add Layer"


class RemoveLayerCommand(Command):
    """Command to remove a layer (never the last one)."""

    def __init__(self, layer_index: int):
        self.layer_index = layer_index

    def execute(self, state: AppState) -> bool:
        project = state.get_current_project()
        if len(project.layers) <= 1 or not 0 <= self.layer_index < len(project.layers):
            return False

        layers = list(project.layers)
        layers.pop(self.layer_index)

        active = state.get_active_layer_index()
        if active >= self.layer_index:
            active = max(active - 1, 0)

        state.set_current_project(Project(layers=tuple(layers)))
        state.set_active_layer_index(active)
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return f"Remove Layer {self.layer_index + 1}"


class RenameLayerCommand(Command):
    """Command to rename a layer."""

    def __init__(self, layer_index: int, name: str):
        self.layer_index = layer_index
        self.name = name

    def execute(self, state: AppState) -> bool:
        project = state.get_current_project()
        if not 0 <= self.layer_index < len(project.layers):
            return False
        layer = project.layers[self.layer_index]
        state.set_current_project(
            project.with_layer(self.layer_index, Layer(self.name, layer.instrument, layer.notes))
        )
        state.mark_dirty()
        return True

    @property
    def description(self) -> str:
        return "Rename Layer"


class SetLayerInstrumentCommand(Command):
    """Command to change a layer's instrument and preview it."""

    def __init__(self, layer_index: int, instrument: int, audio: Optional[AudioTrigger] = None):
        if not 0 <= instrument < len(INSTRUMENTS):
            raise ValueError(f"Instrument must be 0-{len(INSTRUMENTS) - 1}, got {instrument}")
        self.layer_index = layer_index
        self.instrument = instrument
        self.audio = audio or NullTrigger()

    def execute(self, state: AppState) -> bool:
        project = state.get_current_project()
        if not 0 <= self.layer_index < len(project.layers):
            return False
        layer = project.layers[self.layer_index]
        state.set_current_project(
            project.with_layer(self.layer_index, Layer(layer.name, self.instrument, layer.notes))
        )
        state.mark_dirty()
        self.audio.trigger(self.instrument, REFERENCE_PITCH)
        return True

    @property
    def description(self) -> str:
        return "Set Instrument"
