"""
Note selection within the active layer.

Selected notes are stored as positional indices into the active layer's
note tuple. Indices survive only edits that neither insert nor remove
notes (nudges); every structural edit clears the selection.
"""
from typing import Iterable, List, Optional, Tuple

from core.models import Note


GridPoint = Tuple[float, float]


def cell_intersects(note: Note, rect: Tuple[float, float, float, float]) -> bool:
    """
    Check whether a note's unit cell touches a grid rectangle.

    Args:
        note: Note whose cell spans [time, time + 1] x [pitch, pitch + 1]
        rect: (min_time, min_pitch, max_time, max_pitch)

    Returns:
        True if the closed rectangles overlap (touching edges count)
    """
    min_time, min_pitch, max_time, max_pitch = rect
    return (note.time <= max_time and min_time <= note.time + 1 and
            note.pitch <= max_pitch and min_pitch <= note.pitch + 1)


class Selection:
    """
    Selected note indices plus an in-progress drag rectangle.

    Membership has set semantics but insertion order is kept, so batch
    duplicate can replace each entry in place.
    """

    def __init__(self):
        self._indices: List[int] = []
        self._anchor: Optional[GridPoint] = None

    @property
    def indices(self) -> List[int]:
        """Selected indices in selection order (copy)."""
        return list(self._indices)

    @property
    def anchor(self) -> Optional[GridPoint]:
        """Drag start in (time, pitch) grid space, None when not dragging."""
        return self._anchor

    def __len__(self) -> int:
        return len(self._indices)

    def __contains__(self, index: int) -> bool:
        return index in self._indices

    def __iter__(self):
        return iter(list(self._indices))

    def is_empty(self) -> bool:
        return not self._indices

    def add(self, index: int):
        """Add an index if it is not already selected."""
        if index not in self._indices:
            self._indices.append(index)

    def replace(self, position: int, index: int):
        """Replace the entry at a selection position with another note index."""
        self._indices[position] = index

    def clear(self):
        """Empty the selection (the drag anchor is left alone)."""
        self._indices.clear()

    def select_all(self, count: int):
        """Replace the selection with every index of a layer holding count notes."""
        self._indices = list(range(count))

    def begin_drag(self, time: float, pitch: float):
        """Record the grid-space anchor of a rectangular selection."""
        self._anchor = (time, pitch)

    def end_drag(self, time: float, pitch: float, notes: Iterable[Note]) -> List[int]:
        """
        Finish a rectangular selection at the release point.

        Adds every note whose cell intersects the rectangle spanned by the
        anchor and the release point. Selection is additive.

        Returns:
            Indices newly added to the selection
        """
        if self._anchor is None:
            return []

        (t0, p0), (t1, p1) = self._anchor, (time, pitch)
        self._anchor = None
        rect = (min(t0, t1), min(p0, p1), max(t0, t1), max(p0, p1))

        added = []
        for index, note in enumerate(notes):
            if index not in self._indices and cell_intersects(note, rect):
                self._indices.append(index)
                added.append(index)
        return added

    def select_rectangle(self, start: GridPoint, end: GridPoint, notes: Iterable[Note]) -> List[int]:
        """Drag-select from start to end in one step."""
        self.begin_drag(*start)
        return self.end_drag(end[0], end[1], notes)

    def descending(self) -> List[int]:
        """Snapshot of selected indices sorted for safe removal."""
        return sorted(set(self._indices), reverse=True)
