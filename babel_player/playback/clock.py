from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Union

from babel_player.lyrics.timestamp import Timestamp


@dataclass(frozen=True, slots=True)
class Stopped:
    pass


@dataclass(frozen=True, slots=True)
class Paused:
    at: Timestamp


@dataclass(frozen=True, slots=True)
class Playing:
    started_at: float  # monotonic seconds
    offset: Timestamp


ClockState = Union[Stopped, Paused, Playing]


class PlaybackClock:
    """
    Elapsed playback position as an explicit state machine:
    Stopped | Paused(at) | Playing(started_at, offset).

    While playing, position = offset + (now - started_at).
    """

    def __init__(self, now: Callable[[], float] = time.monotonic):
        self._now = now
        self.state: ClockState = Stopped()

    @property
    def is_playing(self) -> bool:
        return isinstance(self.state, Playing)

    def position(self) -> Timestamp:
        st = self.state
        if isinstance(st, Playing):
            elapsed_ms = round((self._now() - st.started_at) * 1000)
            return st.offset + Timestamp(max(elapsed_ms, 0))
        if isinstance(st, Paused):
            return st.at
        return Timestamp.zero()

    def play(self) -> None:
        st = self.state
        if isinstance(st, Playing):
            return
        offset = st.at if isinstance(st, Paused) else Timestamp.zero()
        self.state = Playing(started_at=self._now(), offset=offset)

    def pause(self) -> None:
        if isinstance(self.state, Playing):
            self.state = Paused(at=self.position())

    def reset(self) -> None:
        self.state = Stopped()

    def seek(self, position: Timestamp) -> None:
        # rebase while playing so a later resume continues from here
        if isinstance(self.state, Playing):
            self.state = Playing(started_at=self._now(), offset=position)
        else:
            self.state = Paused(at=position)

    def scrub(self, delta_ms: int) -> Timestamp:
        target = Timestamp(max(self.position().ms + delta_ms, 0))
        self.seek(target)
        return target
