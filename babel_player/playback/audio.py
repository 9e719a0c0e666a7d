from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import numpy as np
import soundfile as sf

from babel_player.lyrics.timestamp import Timestamp

from .errors import AudioLoadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AudioClip:
    """Decoded audio: float32 samples shaped (frames, channels)."""

    samples: np.ndarray
    samplerate: int
    path: Path | None = None

    @property
    def frames(self) -> int:
        return int(self.samples.shape[0])

    @property
    def channels(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration(self) -> Timestamp:
        return Timestamp(self.frames * 1000 // self.samplerate)

    @property
    def size_bytes(self) -> int:
        return int(self.samples.nbytes)


def load_audio(path: Path) -> AudioClip:
    path = Path(path)
    try:
        samples, samplerate = sf.read(str(path), dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, OSError) as e:
        raise AudioLoadError(f"Cannot decode {path.name}: {e}") from e
    clip = AudioClip(samples=samples, samplerate=int(samplerate), path=path)
    logger.info(
        "Decoded %s: %s, %d Hz, %d ch, %.1f MiB",
        path.name,
        clip.duration,
        clip.samplerate,
        clip.channels,
        clip.size_bytes / 2**20,
    )
    return clip
