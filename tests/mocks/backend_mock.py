from __future__ import annotations

from babel_player.lyrics.timestamp import Timestamp


class FakeAudioBackend:
    """
    Records every call so tests can check the player drives the backend.
    """

    def __init__(self, duration_ms: int | None = 10_000):
        self.duration = Timestamp(duration_ms) if duration_ms is not None else None
        self.calls: list[tuple] = []
        self.playing = False
        self.position = Timestamp.zero()
        self.closed = False

    def total_duration(self) -> Timestamp | None:
        return self.duration

    def seek(self, position: Timestamp) -> None:
        self.calls.append(("seek", position.ms))
        self.position = position

    def play(self) -> None:
        self.calls.append(("play",))
        self.playing = True

    def pause(self) -> None:
        self.calls.append(("pause",))
        self.playing = False

    def close(self) -> None:
        self.calls.append(("close",))
        self.closed = True


class FakeClock:
    """Manually advanced monotonic clock, in seconds."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += ms / 1000


class FakeKeys:
    """Stands in for KeyReader: hands out one scripted batch of keys per read()."""

    def __init__(self, *batches: list[str]):
        self.batches = list(batches)
        self.entered = False
        self.exited = False

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited = True

    def read(self) -> list[str]:
        return self.batches.pop(0) if self.batches else []
