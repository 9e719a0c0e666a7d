from __future__ import annotations

import logging
import threading

import numpy as np
import sounddevice as sd

from babel_player.lyrics.timestamp import Timestamp

from .audio import AudioClip
from .errors import PlaybackError

logger = logging.getLogger(__name__)


class SoundDeviceBackend:
    """Streams an in-memory AudioClip to the default output device."""

    def __init__(self, clip: AudioClip):
        self.clip = clip
        self._frame = 0
        self._lock = threading.Lock()
        self._stream: sd.OutputStream | None = None

    def _callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            logger.debug("Output stream status: %s", status)
        with self._lock:
            start = self._frame
            chunk = self.clip.samples[start : start + frames]
            self._frame = start + len(chunk)
        outdata[: len(chunk)] = chunk
        if len(chunk) < frames:
            outdata[len(chunk) :] = 0
            raise sd.CallbackStop

    def _ensure_stream(self) -> sd.OutputStream:
        if self._stream is None:
            try:
                self._stream = sd.OutputStream(
                    samplerate=self.clip.samplerate,
                    channels=self.clip.channels,
                    dtype="float32",
                    callback=self._callback,
                )
            except sd.PortAudioError as e:
                raise PlaybackError(f"Cannot open audio output: {e}") from e
        return self._stream

    def total_duration(self) -> Timestamp | None:
        return self.clip.duration

    def seek(self, position: Timestamp) -> None:
        frame = position.ms * self.clip.samplerate // 1000
        with self._lock:
            self._frame = min(max(frame, 0), self.clip.frames)

    def play(self) -> None:
        stream = self._ensure_stream()
        if stream.active:
            return
        if not stream.stopped:
            # ran off the end of the clip; must be stopped before restarting
            stream.stop()
        stream.start()

    def pause(self) -> None:
        if self._stream is not None and self._stream.active:
            self._stream.stop()

    def close(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None
