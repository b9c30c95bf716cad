"""Tests for sample loading, pitch shifting and mixing."""

import numpy as np
import pytest
from scipy.io import wavfile

from audio.dsp import Voice, convert_rate, load_sample, mix_voices, resample, to_float_mono


def test_int16_wav_is_normalised(tmp_path):
    path = tmp_path / "harp.wav"
    wavfile.write(str(path), 22050, np.array([0, 16384, -32768], dtype=np.int16))
    rate, samples = load_sample(path)
    assert rate == 22050
    assert samples.dtype == np.float32
    assert samples.tolist() == pytest.approx([0.0, 0.5, -1.0])


def test_stereo_keeps_first_channel():
    data = np.array([[0.25, -1.0], [0.5, -1.0]], dtype=np.float32)
    assert to_float_mono(data).tolist() == [0.25, 0.5]


def test_uint8_is_centred():
    data = np.array([128, 255, 0], dtype=np.uint8)
    assert to_float_mono(data).tolist() == pytest.approx([0.0, 127 / 128, -1.0])


def test_resample_doubles_speed():
    samples = np.arange(8, dtype=np.float32)
    shifted = resample(samples, 2.0)
    assert shifted.tolist() == [0.0, 2.0, 4.0, 6.0]


def test_resample_halves_speed():
    samples = np.array([0.0, 1.0], dtype=np.float32)
    assert resample(samples, 0.5).tolist() == [0.0, 0.5, 1.0, 1.0]


def test_resample_rejects_non_positive_rate():
    with pytest.raises(ValueError):
        resample(np.zeros(4, dtype=np.float32), 0)


def test_convert_rate_identity():
    samples = np.ones(3, dtype=np.float32)
    assert convert_rate(samples, 44100, 44100).tolist() == [1.0, 1.0, 1.0]


def test_mix_voices_sums_and_prunes():
    voices = [Voice(np.full(3, 0.25, dtype=np.float32)), Voice(np.full(6, 0.25, dtype=np.float32))]
    block = mix_voices(voices, 4)
    assert block.tolist() == [0.5, 0.5, 0.5, 0.25]
    assert len(voices) == 1
    block = mix_voices(voices, 4)
    assert block.tolist() == [0.25, 0.25, 0.0, 0.0]
    assert voices == []


def test_mix_voices_clips():
    voices = [Voice(np.ones(2, dtype=np.float32)) for _ in range(3)]
    assert mix_voices(voices, 2, gain=0.8).tolist() == [1.0, 1.0]
