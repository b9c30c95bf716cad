"""
Piano roll view geometry.

Maps screen coordinates of the note grid to (time, pitch) grid space.
Time grows to the right, pitch grows upwards.
"""
from typing import Optional, Tuple

from core.constants import DEFAULT_VSCROLL, MAX_PITCH, MAX_TICK

# Fraction of the panel height taken by one pitch row (25 rows visible)
ROW_FRACTION = 0.04

# Scroll speed applied to raw wheel deltas
SCROLL_SPEED = 0.05


class Viewport:
    """
    Scroll and zoom state of the note grid.

    Attributes:
        left: Screen x of the grid panel's left edge
        bottom: Screen y of the grid panel's bottom edge
        time_scale: Pixels per tick
        pitch_scale: Pixels per pitch row
        scroll: Horizontal scroll in ticks (never negative)
        vscroll: Vertical scroll in pitch rows
    """

    def __init__(self, left: float = 0.0, bottom: float = 0.0,
                 time_scale: float = 20.0, pitch_scale: float = 20.0,
                 vscroll: float = DEFAULT_VSCROLL):
        self.left = left
        self.bottom = bottom
        self.time_scale = time_scale
        self.pitch_scale = pitch_scale
        self.scroll = 0.0
        self.vscroll = vscroll
        self._default_vscroll = vscroll

    @classmethod
    def for_height(cls, height: float, left: float = 0.0, bottom: Optional[float] = None,
                   vscroll: float = DEFAULT_VSCROLL) -> "Viewport":
        """Create a viewport whose rows are sized to a panel height."""
        scale = height * ROW_FRACTION
        return cls(left=left, bottom=height if bottom is None else bottom,
                   time_scale=scale, pitch_scale=scale, vscroll=vscroll)

    @property
    def origin(self) -> Tuple[float, float]:
        """Screen position of tick 0, pitch 0 after scrolling."""
        return (self.left - self.scroll * self.time_scale,
                self.bottom + self.vscroll * self.pitch_scale)

    def to_grid(self, x: float, y: float) -> Tuple[float, float]:
        """Convert a screen point to fractional (time, pitch)."""
        origin_x, origin_y = self.origin
        return ((x - origin_x) / self.time_scale,
                (origin_y - y) / self.pitch_scale)

    def to_screen(self, time: float, pitch: float) -> Tuple[float, float]:
        """Convert (time, pitch) to the screen point of the cell's bottom-left corner."""
        origin_x, origin_y = self.origin
        return (origin_x + time * self.time_scale,
                origin_y - pitch * self.pitch_scale)

    def cell_at(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """
        Get the note cell under a screen point.

        Returns:
            (time, pitch), or None outside the grid
        """
        time, pitch = self.to_grid(x, y)
        if time < 0 or time > MAX_TICK or pitch < 0 or pitch >= MAX_PITCH + 1:
            return None
        return int(time), int(pitch)

    def position_at(self, x: float) -> float:
        """Playhead position (in ticks) for a screen x."""
        return self.to_grid(x, self.bottom)[0]

    def scroll_by(self, dx: float, dy: float):
        """
        Apply a wheel delta.

        Vertical wheel scrolls time, horizontal wheel scrolls pitch, matching
        the piano roll's sideways layout.
        """
        self.vscroll -= dx * SCROLL_SPEED
        self.scroll = max(0.0, self.scroll - dy * SCROLL_SPEED)

    def reset(self):
        """Return to tick 0 and the default pitch window."""
        self.scroll = 0.0
        self.vscroll = self._default_vscroll
