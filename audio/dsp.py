"""
Sample rendering utilities.

Loading, pitch-shifting by playback rate, and summing voices into output
blocks. Pure numpy so it can run outside the audio callback.
"""
from pathlib import Path
from typing import List, Union

import numpy as np
from scipy.io import wavfile


class Voice:
    """A rendered sample and how far it has been played."""

    def __init__(self, audio: np.ndarray):
        self.audio = audio
        self.position = 0

    @property
    def finished(self) -> bool:
        return self.position >= len(self.audio)


def to_float_mono(data: np.ndarray) -> np.ndarray:
    """
    Convert wav data of any integer/float dtype to mono float32 in [-1, 1].

    Multi-channel input keeps only the first channel.
    """
    if data.ndim > 1:
        data = data[:, 0]

    if np.issubdtype(data.dtype, np.integer):
        info = np.iinfo(data.dtype)
        # Unsigned formats (8-bit wav) are centred on the midpoint
        offset = (int(info.max) + int(info.min) + 1) / 2.0
        scale = max(abs(info.min - offset), info.max - offset)
        return ((data.astype(np.float32) - offset) / scale).astype(np.float32)

    return data.astype(np.float32)


def load_sample(path: Union[str, Path]) -> tuple:
    """
    Load a wav file as a mono float32 buffer.

    Returns:
        (sample_rate, samples)
    """
    sample_rate, data = wavfile.read(str(path))
    return sample_rate, to_float_mono(data)


def resample(samples: np.ndarray, rate: float) -> np.ndarray:
    """
    Play samples back `rate` times faster (higher pitch, shorter sound).

    Linear interpolation; rate 1.0 returns a copy of the input.
    """
    if rate <= 0:
        raise ValueError(f"Rate must be positive, got {rate}")
    if len(samples) == 0:
        return samples.astype(np.float32)

    length = max(1, int(len(samples) / rate))
    positions = np.arange(length, dtype=np.float64) * rate
    return np.interp(positions, np.arange(len(samples)), samples).astype(np.float32)


def convert_rate(samples: np.ndarray, source_rate: int, target_rate: int) -> np.ndarray:
    """Resample a buffer recorded at source_rate for playback at target_rate."""
    if source_rate == target_rate:
        return samples.astype(np.float32)
    return resample(samples, source_rate / target_rate)


def mix_voices(voices: List[Voice], frames: int, gain: float = 1.0) -> np.ndarray:
    """
    Sum the next block of every voice and drop finished ones.

    Args:
        voices: Active voices (advanced and pruned in place)
        frames: Block size in samples
        gain: Output gain

    Returns:
        Mono float32 block of length frames, clipped to [-1, 1]
    """
    output = np.zeros(frames, dtype=np.float32)

    for voice in voices:
        to_copy = min(len(voice.audio) - voice.position, frames)
        if to_copy > 0:
            output[:to_copy] += voice.audio[voice.position:voice.position + to_copy]
            voice.position += to_copy

    voices[:] = [v for v in voices if not v.finished]

    return np.clip(output * gain, -1.0, 1.0)
