"""
Real-time sample player.

One pre-decoded sample per instrument; each trigger renders a pitched copy
and hands it to a sounddevice output stream that mixes all active voices.
"""
import threading
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import sounddevice as sd

from core.config import AudioConfig
from core.constants import INSTRUMENTS, playback_rate
from audio.dsp import Voice, convert_rate, load_sample, mix_voices, resample
from audio.trigger import AudioTrigger


class SamplePlayer(AudioTrigger):
    """
    Sample-based audio collaborator.

    trigger() never blocks on the device: it renders the voice and appends
    it under a lock; the stream callback thread does the mixing.
    """

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()
        self.sample_rate = self.config.sample_rate
        self.samples: Dict[int, np.ndarray] = {}
        self._voices: List[Voice] = []
        self._lock = threading.Lock()
        self._stream: Optional[sd.OutputStream] = None

    def load_samples(self, sounds_dir: Optional[str] = None) -> int:
        """
        Load `<sounds_dir>/<instrument>.wav` for every instrument.

        Missing or unreadable files leave that instrument silent.

        Returns:
            Number of samples loaded
        """
        directory = Path(sounds_dir or self.config.sounds_dir)
        for index, name in enumerate(INSTRUMENTS):
            path = directory / f"{name}.wav"
            try:
                source_rate, data = load_sample(path)
            except (OSError, ValueError) as e:
                print(f"[AUDIO] Could not load {path}: {e}")
                continue
            self.samples[index] = convert_rate(data, source_rate, self.sample_rate)
        return len(self.samples)

    def start(self) -> bool:
        """Open the output stream. Returns False if no device is available."""
        if self._stream is not None:
            return True
        try:
            self._stream = sd.OutputStream(samplerate=self.sample_rate, channels=1,
                                           blocksize=self.config.blocksize, dtype='float32',
                                           latency='low', callback=self._audio_callback)
            self._stream.start()
        except Exception as e:
            print(f"[AUDIO] Failed to open output stream: {e}")
            self._stream = None
            return False
        return True

    def close(self):
        """Stop the stream and drop all voices."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        with self._lock:
            self._voices.clear()

    @property
    def active_voices(self) -> int:
        with self._lock:
            return len(self._voices)

    def trigger(self, instrument: int, pitch: int):
        """Start a pitched copy of the instrument's sample (dropped while no stream is open)."""
        if self._stream is None:
            return
        sample = self.samples.get(instrument)
        if sample is None:
            return
        voice = Voice(resample(sample, playback_rate(pitch)))
        with self._lock:
            self._voices.append(voice)

    def render(self, frames: int) -> np.ndarray:
        """Mix the next block of all voices (also used by the stream callback)."""
        with self._lock:
            return mix_voices(self._voices, frames, self.config.gain)

    def _audio_callback(self, outdata, frames, time_info, status):
        """Called by sounddevice for each audio block."""
        outdata[:, 0] = self.render(frames)
