from __future__ import annotations

import logging

from babel_player.lyrics.timestamp import Timestamp

from .backend import AudioBackend, NullBackend
from .clock import PlaybackClock, Paused, Playing, Stopped

logger = logging.getLogger(__name__)


class Player:
    """
    Playback control surface: every action is applied to the backend and the
    clock at once, so the lyrics position never drifts from what is audible.
    """

    def __init__(self, backend: AudioBackend | None = None, clock: PlaybackClock | None = None):
        self.backend: AudioBackend = backend or NullBackend()
        self.clock = clock or PlaybackClock()

    def total_duration(self) -> Timestamp | None:
        return self.backend.total_duration()

    def position(self) -> Timestamp:
        pos = self.clock.position()
        total = self.total_duration()
        if total is not None and pos > total:
            return total
        return pos

    @property
    def is_playing(self) -> bool:
        return self.clock.is_playing

    @property
    def state_name(self) -> str:
        st = self.clock.state
        if isinstance(st, Playing):
            return "playing"
        if isinstance(st, Paused):
            return "paused"
        return "stopped"

    def finished(self) -> bool:
        total = self.total_duration()
        return total is not None and self.is_playing and self.clock.position() >= total

    def _clamp(self, position: Timestamp) -> Timestamp:
        total = self.total_duration()
        if total is not None and position > total:
            return total
        return position

    def replace_backend(self, backend: AudioBackend) -> None:
        self.backend.pause()
        self.backend.close()
        self.backend = backend
        self.clock.reset()
        backend.pause()

    def play(self) -> None:
        if self.is_playing:
            return
        self.backend.seek(self.clock.position())
        self.clock.play()
        self.backend.play()

    def pause(self) -> None:
        if not self.is_playing:
            return
        self.clock.pause()
        self.backend.pause()

    def toggle(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def reset(self) -> None:
        self.clock.reset()
        self.backend.pause()
        self.backend.seek(Timestamp.zero())

    def seek(self, position: Timestamp | int) -> Timestamp:
        target = self._clamp(Timestamp.coerce(position))
        self.clock.seek(target)
        self.backend.seek(target)
        logger.debug("Seek to %s", target)
        return target

    def scrub(self, delta_ms: int) -> Timestamp:
        target = Timestamp(max(self.clock.position().ms + delta_ms, 0))
        return self.seek(target)

