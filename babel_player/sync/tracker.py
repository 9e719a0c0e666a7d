from __future__ import annotations

from dataclasses import dataclass

from babel_player.lyrics.model import BabelLyrics
from babel_player.lyrics.timestamp import Timestamp

from .resolver import ActiveWindow, resolve


@dataclass(slots=True)
class WindowTracker:
    """
    Resolve once per tick, report only on change.
    """

    doc: BabelLyrics
    last_key: tuple | None = None

    def changed_window(self, now: Timestamp | int) -> ActiveWindow | None:
        window = resolve(self.doc, now)
        key = window.key
        if key != self.last_key:
            self.last_key = key
            return window
        return None

    def invalidate(self) -> None:
        # force the next tick to report, e.g. after an edit or a resize
        self.last_key = None
