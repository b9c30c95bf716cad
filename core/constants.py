"""
Note block constants and utilities.

Instrument catalog, note names, playback rates and grid limits.
"""
import math

# Instrument catalog (index is the instrument identifier used everywhere)
INSTRUMENTS = [
    "harp", "dbass", "bdrum", "sdrum", "click", "guitar", "flute", "bell",
    "icechime", "xylobone", "iron_xylophone", "cow_bell", "didgeridoo",
    "bit", "banjo", "pling",
]

# Note number to name mapping
NOTE_NAMES = [
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"
]

# Pitch grid
MIN_PITCH = 0
MAX_PITCH = 127

# Ticks are unsigned 32-bit
MAX_TICK = 2 ** 32 - 1

# Pitch at which a sample plays at its recorded rate
REFERENCE_PITCH = 66

# Range a real note block can play (F#3 - F#5)
NOTEBLOCK_RANGE = (54, 78)

# Playback defaults
DEFAULT_TPS = 10.0

# Offset (in ticks and semitones) applied to duplicated notes
DUPLICATE_OFFSET = 2

# Default vertical scroll of the grid (in pitch rows)
DEFAULT_VSCROLL = 54.0

# Project files
PROJECT_EXTENSION = ".nbm"
PACKED_PROJECT_EXTENSION = ".nbmp"


def instrument_name(index: int) -> str:
    """
    Get the sound identifier for an instrument index.

    Args:
        index: Instrument index (0-15)

    Returns:
        Sound identifier (e.g., "harp", "bdrum")
    """
    if not 0 <= index < len(INSTRUMENTS):
        raise ValueError(f"Instrument must be 0-{len(INSTRUMENTS) - 1}, got {index}")
    return INSTRUMENTS[index]


def instrument_index(name: str) -> int:
    """
    Get the instrument index for a sound identifier.

    Raises:
        ValueError: If the identifier is unknown
    """
    try:
        return INSTRUMENTS.index(name.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown instrument: {name}. Available instruments: {INSTRUMENTS}") from None


def note_name(pitch: int) -> str:
    """
    Convert a pitch to its name with octave.

    Args:
        pitch: Pitch (0-127)

    Returns:
        Note name (e.g., "C4", "F#3")

    Example:
        >>> note_name(60)
        'C4'
        >>> note_name(0)
        'C-1'
    """
    if not MIN_PITCH <= pitch <= MAX_PITCH:
        raise ValueError(f"Pitch must be 0-127, got {pitch}")
    octave = (pitch // 12) - 1
    return f"{NOTE_NAMES[pitch % 12]}{octave}"


def in_noteblock_range(pitch: int) -> bool:
    """Check whether a pitch falls in the two octaves a note block can play."""
    low, high = NOTEBLOCK_RANGE
    return low <= pitch <= high


def playback_rate(pitch: int) -> float:
    """
    Convert a pitch to a sample playback speed multiplier.

    Args:
        pitch: Pitch (0-127)

    Returns:
        Speed multiplier (1.0 at REFERENCE_PITCH)

    Example:
        >>> playback_rate(66)
        1.0
        >>> playback_rate(78)
        2.0
    """
    if not MIN_PITCH <= pitch <= MAX_PITCH:
        raise ValueError(f"Pitch must be 0-127, got {pitch}")

    # Formula: rate = 2^((pitch - 66) / 12)
    return math.pow(2.0, (pitch - REFERENCE_PITCH) / 12.0)
