"""
Note scheduler for real-time playback.

Tick-based transport: the playhead advances in fractional ticks and notes
fire when the playhead lands on a new integer tick.
"""
import math
from typing import List, Optional, Tuple

from core.constants import DEFAULT_TPS, MAX_TICK
from core.models import Project
from audio.trigger import AudioTrigger, NullTrigger


# Playhead value meaning "stopped, next play starts from tick 0"
NOT_STARTED = -math.inf

# last_fired_tick value meaning "nothing fired yet"
NO_TICK = MAX_TICK


class Transport:
    """
    Play/pause/stop state machine with edge-triggered note firing.

    Each tick fires its notes once when the playhead first lands on it.
    Ticks skipped by a large advance or a seek are not fired; only the
    tick the playhead lands on after each call is checked.
    """

    def __init__(self, audio: Optional[AudioTrigger] = None, ticks_per_second: float = DEFAULT_TPS):
        """
        Initialize transport.

        Args:
            audio: Collaborator that plays fired notes
            ticks_per_second: Playback speed
        """
        self.audio = audio or NullTrigger()
        self.playback_position = NOT_STARTED
        self.is_playing = False
        self.last_fired_tick = NO_TICK
        self._ticks_per_second = DEFAULT_TPS
        self.ticks_per_second = ticks_per_second

    @property
    def ticks_per_second(self) -> float:
        return self._ticks_per_second

    @ticks_per_second.setter
    def ticks_per_second(self, value: float):
        """Change playback speed; only affects future advance() calls."""
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"Ticks per second must be a non-negative number, got {value}")
        self._ticks_per_second = float(value)

    @property
    def is_started(self) -> bool:
        """Check if the playhead is on the timeline."""
        return self.playback_position >= 0

    @property
    def current_tick(self) -> int:
        """Integer tick under the playhead (NO_TICK before the start)."""
        if self.playback_position < 0:
            return NO_TICK
        if not self.playback_position < NO_TICK:
            # past the last representable tick, or a runaway advance
            return NO_TICK
        return math.floor(self.playback_position)

    def stop(self):
        """Stop playback and rewind to the not-started position."""
        self.is_playing = False
        self.playback_position = NOT_STARTED

    def toggle_play(self):
        """Play or pause. Playing from the not-started position rewinds to tick 0."""
        self.is_playing = not self.is_playing
        if self.playback_position < 0:
            self.playback_position = 0.0
            # Make tick 0 fire on the next check
            self.last_fired_tick = NO_TICK

    def advance(self, dt: float, project: Project) -> List[Tuple[int, int]]:
        """
        Advance the playhead by one frame and fire notes.

        Args:
            dt: Elapsed wall time in seconds
            project: Project whose notes are fired

        Returns:
            (instrument, pitch) pairs fired by this call
        """
        if self.is_playing:
            self.playback_position += dt * self._ticks_per_second
        return self.check_and_trigger(project)

    def seek(self, position: float, project: Project) -> List[Tuple[int, int]]:
        """
        Move the playhead directly, independent of play state.

        Args:
            position: New playhead position in ticks (negative means not started)
            project: Project whose notes are fired

        Returns:
            (instrument, pitch) pairs fired at the destination tick

        Raises:
            ValueError: If position is not finite
        """
        position = float(position)
        if not math.isfinite(position):
            raise ValueError(f"Seek position must be finite, got {position}")
        self.playback_position = position
        return self.check_and_trigger(project)

    def check_and_trigger(self, project: Project) -> List[Tuple[int, int]]:
        """Fire the current tick's notes if the playhead crossed onto a new tick."""
        tick = self.current_tick
        if tick == self.last_fired_tick:
            return []

        triggered = []
        if tick != NO_TICK:
            for instrument, pitch in project.notes_at(tick):
                self.audio.trigger(instrument, pitch)
                triggered.append((instrument, pitch))

        self.last_fired_tick = tick
        return triggered
