from __future__ import annotations

import numpy as np
import pytest
import soundfile as sf

from babel_player.lyrics.timestamp import Timestamp
from babel_player.playback.audio import load_audio
from babel_player.playback.errors import AudioLoadError, PlaybackError


def write_tone(path, seconds: float = 0.5, samplerate: int = 8000, channels: int = 2):
    t = np.arange(int(seconds * samplerate)) / samplerate
    tone = 0.2 * np.sin(2 * np.pi * 440 * t)
    data = np.column_stack([tone] * channels) if channels > 1 else tone
    sf.write(str(path), data, samplerate)
    return path


def test_load_audio(tmp_path):
    clip = load_audio(write_tone(tmp_path / "tone.wav"))
    assert clip.samplerate == 8000
    assert clip.channels == 2
    assert clip.frames == 4000
    assert clip.duration == Timestamp(500)
    assert clip.samples.dtype == np.float32
    assert clip.size_bytes == 4000 * 2 * 4
    assert clip.path.name == "tone.wav"


def test_mono_is_two_dimensional(tmp_path):
    clip = load_audio(write_tone(tmp_path / "mono.wav", channels=1))
    assert clip.samples.shape == (4000, 1)


def test_undecodable_file_raises(tmp_path):
    bogus = tmp_path / "song.flac"
    bogus.write_bytes(b"definitely not audio")
    with pytest.raises(AudioLoadError) as exc:
        load_audio(bogus)
    assert isinstance(exc.value, PlaybackError)
    assert "song.flac" in str(exc.value)


def test_missing_file_raises(tmp_path):
    with pytest.raises(AudioLoadError):
        load_audio(tmp_path / "missing.wav")
