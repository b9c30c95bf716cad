"""
Immutable data models for Note Block Music.

All models are immutable dataclasses to support:
- Cheap copies when edits replace a layer or project
- Safe reads from the audio thread while the editor mutates state
- Field-for-field equality for round-trip checks
"""
from dataclasses import dataclass, field, replace
from typing import Tuple, Optional, Dict, Any, Iterator

from core.constants import INSTRUMENTS, MAX_PITCH, MAX_TICK, MIN_PITCH


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _require_int(data: Dict[str, Any], key: str) -> int:
    """Read an integer field from a document without truncating floats or parsing strings."""
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Field '{key}' must be an integer, got {value!r}")
    return value


@dataclass(frozen=True)
class Note:
    """
    Single note block event on the grid.

    A note has no identity beyond its (time, pitch) pair and its position
    in the owning layer.

    Attributes:
        time: Tick the note fires on (0 to 2^32 - 1)
        pitch: Pitch row (0-127)
    """
    time: int
    pitch: int

    def __post_init__(self):
        """Validate note values."""
        if not 0 <= self.time <= MAX_TICK:
            raise ValueError(f"Time must be 0-{MAX_TICK}, got {self.time}")
        if not MIN_PITCH <= self.pitch <= MAX_PITCH:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")

    def shifted(self, dt: int = 0, dp: int = 0) -> "Note":
        """
        Return a copy moved by dt ticks and dp semitones.

        Both fields saturate at their bounds instead of wrapping.
        """
        return Note(
            time=_clamp(self.time + dt, 0, MAX_TICK),
            pitch=_clamp(self.pitch + dp, MIN_PITCH, MAX_PITCH),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "time": self.time,
            "note": self.pitch,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """Create Note from dictionary."""
        return cls(
            time=_require_int(data, "time"),
            pitch=_require_int(data, "note"),
        )


@dataclass(frozen=True)
class Layer:
    """
    Independent track of notes sharing one instrument.

    Attributes:
        name: Layer name shown in the layer bar
        instrument: Index into the instrument catalog (0-15)
        notes: Tuple of Note objects in insertion order (not time-sorted)
    """
    name: str
    instrument: int = 0
    notes: Tuple[Note, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate layer and normalise notes to a tuple."""
        if not 0 <= self.instrument < len(INSTRUMENTS):
            raise ValueError(
                f"Instrument must be 0-{len(INSTRUMENTS) - 1}, got {self.instrument}"
            )
        if not isinstance(self.notes, tuple):
            # Use object.__setattr__ to modify frozen dataclass during init
            object.__setattr__(self, 'notes', tuple(self.notes))

    def find(self, time: int, pitch: int) -> Optional[int]:
        """
        Find the first note at an exact position.

        Returns:
            Index of the note, or None if the cell is empty
        """
        for index, note in enumerate(self.notes):
            if note.time == time and note.pitch == pitch:
                return index
        return None

    def with_notes(self, notes) -> "Layer":
        """Return a copy of this layer holding the given notes."""
        return replace(self, notes=tuple(notes))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "instrument": self.instrument,
            "notes": [n.to_dict() for n in self.notes],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Layer":
        """Create Layer from dictionary."""
        name = data["name"]
        if not isinstance(name, str):
            raise ValueError(f"Layer name must be a string, got {type(name).__name__}")

        return cls(
            name=name,
            instrument=_require_int(data, "instrument"),
            notes=tuple(Note.from_dict(n) for n in data["notes"]),
        )


@dataclass(frozen=True)
class Project:
    """
    Complete project document.

    Attributes:
        layers: Tuple of Layer objects (never empty)
    """
    layers: Tuple[Layer, ...]

    def __post_init__(self):
        """Validate project structure."""
        if not isinstance(self.layers, tuple):
            object.__setattr__(self, 'layers', tuple(self.layers))
        if not self.layers:
            raise ValueError("Project must contain at least one layer")

    @classmethod
    def new(cls) -> "Project":
        """Create a fresh project with a single empty layer."""
        return cls(layers=(Layer(name="Layer 1", instrument=0),))

    def with_layer(self, index: int, layer: Layer) -> "Project":
        """Return a copy with the layer at index replaced."""
        layers = list(self.layers)
        layers[index] = layer
        return replace(self, layers=tuple(layers))

    def notes_at(self, tick: int) -> Iterator[Tuple[int, int]]:
        """
        Yield (instrument, pitch) for every note on a tick.

        Layers are visited in order, notes in insertion order.
        """
        for layer in self.layers:
            for note in layer.notes:
                if note.time == tick:
                    yield layer.instrument, note.pitch

    @property
    def last_tick(self) -> int:
        """Tick of the latest note in any layer (-1 when there are no notes)."""
        return max((n.time for layer in self.layers for n in layer.notes), default=-1)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "layers": [layer.to_dict() for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """
        Create Project from dictionary.

        Raises:
            ValueError: If the document does not match the project schema
        """
        try:
            layers = tuple(Layer.from_dict(layer) for layer in data["layers"])
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid project document: {e!r}") from e

        return cls(layers=layers)
