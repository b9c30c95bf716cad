"""
Audio trigger interface.

The core only decides which sample to trigger and when. Anything that can
play (instrument, pitch) pairs implements AudioTrigger; the call must be
fire-and-forget and safe to repeat while earlier triggers still sound.
"""
from abc import ABC, abstractmethod
from typing import List, Tuple


class AudioTrigger(ABC):
    """Base class for audio collaborators."""

    @abstractmethod
    def trigger(self, instrument: int, pitch: int):
        """
        Start playing a note without waiting for it.

        Args:
            instrument: Instrument index (0-15)
            pitch: Pitch (0-127)
        """
        raise NotImplementedError()


class NullTrigger(AudioTrigger):
    """Discards every trigger (head-less editing)."""

    def trigger(self, instrument: int, pitch: int):
        pass


class RecordingTrigger(AudioTrigger):
    """Records triggers instead of producing sound."""

    def __init__(self):
        self.calls: List[Tuple[int, int]] = []

    def trigger(self, instrument: int, pitch: int):
        self.calls.append((instrument, pitch))

    def clear(self):
        self.calls.clear()
