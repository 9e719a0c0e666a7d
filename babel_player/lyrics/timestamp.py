from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class Timestamp:
    """
    Non-negative duration with millisecond resolution.

    Subtraction saturates at zero instead of going negative.
    """

    ms: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.ms, int) or isinstance(self.ms, bool):
            raise TypeError(f"Timestamp expects int milliseconds, got {type(self.ms).__name__}")
        if self.ms < 0:
            raise ValueError(f"Timestamp cannot be negative: {self.ms}")

    @classmethod
    def zero(cls) -> "Timestamp":
        return cls(0)

    @classmethod
    def coerce(cls, value: "Timestamp | int") -> "Timestamp":
        if isinstance(value, Timestamp):
            return value
        return cls(max(int(value), 0))

    def __add__(self, other: "Timestamp") -> "Timestamp":
        if not isinstance(other, Timestamp):
            return NotImplemented
        return Timestamp(self.ms + other.ms)

    def __sub__(self, other: "Timestamp") -> "Timestamp":
        if not isinstance(other, Timestamp):
            return NotImplemented
        return Timestamp(max(self.ms - other.ms, 0))

    def format(self) -> str:
        # h:mm:ss.mmm
        h, rem = divmod(self.ms, 3_600_000)
        m, rem = divmod(rem, 60_000)
        s, ms = divmod(rem, 1_000)
        return f"{h}:{m:02d}:{s:02d}.{ms:03d}"

    def __str__(self) -> str:
        return self.format()
