from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from babel_player.lyrics.model import BabelLyrics, Line, Lyrics, LyricsMetadata, Segment
from babel_player.lyrics.timestamp import Timestamp


@dataclass(frozen=True, slots=True)
class TimedWord:
    begin_ms: int
    end_ms: int
    text: str


@dataclass(frozen=True, slots=True)
class TimedLine:
    begin_ms: int
    end_ms: int
    words: tuple[TimedWord, ...] = ()


def _span(begin_ms: int, end_ms: int) -> tuple[Timestamp, Timestamp]:
    begin = Timestamp(max(int(begin_ms), 0))
    end = Timestamp(max(int(end_ms), 0))
    return begin, max(begin, end)


def document_from_timed_lines(lines: Iterable[TimedLine]) -> BabelLyrics:
    """
    One Line per timed line (fresh uuid, no agent), one Segment per word.
    No translation languages are registered.
    """
    out: list[Line] = []
    for tl in lines:
        segments = []
        for w in tl.words:
            begin, end = _span(w.begin_ms, w.end_ms)
            segments.append(Segment(begin=begin, end=end, text=w.text))
        begin, end = _span(tl.begin_ms, tl.end_ms)
        out.append(Line(begin=begin, end=end, original=segments))
    return BabelLyrics(metadata=LyricsMetadata(), lyrics=Lyrics(lines=out))
