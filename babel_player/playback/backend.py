from __future__ import annotations

from typing import Protocol

from babel_player.lyrics.timestamp import Timestamp


class AudioBackend(Protocol):
    """Audio output collaborator: decoding and the sound card live behind this."""

    def total_duration(self) -> Timestamp | None: ...

    def seek(self, position: Timestamp) -> None: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def close(self) -> None: ...


class NullBackend:
    """Silent backend, for lyrics-only sessions."""

    def __init__(self, duration: Timestamp | None = None):
        self._duration = duration

    def total_duration(self) -> Timestamp | None:
        return self._duration

    def seek(self, position: Timestamp) -> None:
        pass

    def play(self) -> None:
        pass

    def pause(self) -> None:
        pass

    def close(self) -> None:
        pass
