from __future__ import annotations

from dataclasses import dataclass, field
import re
from pathlib import Path

from babel_player.lyrics.model import BabelLyrics

from .errors import LrcParseError
from .timed import TimedLine, TimedWord, document_from_timed_lines

_TS_RE = re.compile(r"\[(\d{1,2}):(\d{2})(?:\.(\d{1,3}))?\]")  # [mm:ss] / [mm:ss.xx] / [mm:ss.xxx]
_LEADING_TS_RE = re.compile(r"^(?:\s*\[\d{1,2}:\d{2}(?:\.\d{1,3})?\])+")
_WORD_TS_RE = re.compile(r"<(\d{1,2}):(\d{2})(?:\.(\d{1,3}))?>")  # enhanced LRC word stamp
_OFFSET_RE = re.compile(r"^\[offset:([+-]?\d+)\]\s*$", re.IGNORECASE)
_TAG_RE = re.compile(r"^\[([a-zA-Z]{1,8}):(.*)\]\s*$")


@dataclass(frozen=True, slots=True)
class LrcParseStats:
    lines_total: int
    lyric_lines: int
    words_total: int
    lines_with_timestamps: int
    lines_ignored: int


@dataclass(frozen=True, slots=True)
class LrcLyrics:
    lines: tuple[TimedLine, ...]
    offset_ms: int = 0
    tags: dict[str, str] = field(default_factory=dict)


def _parse_ts_to_ms(m: int, s: int, frac: str | None) -> int:
    if not (0 <= s <= 59):
        raise LrcParseError(f"Invalid seconds: {s}")
    if frac is None:
        ms = 0
    else:
        # "2" -> 200ms, "23" -> 230ms, "234" -> 234ms
        ms = int(frac.ljust(3, "0")[:3])
    return (m * 60 + s) * 1000 + ms


def _match_ms(m: re.Match[str], offset_ms: int) -> int:
    t_ms = _parse_ts_to_ms(int(m.group(1)), int(m.group(2)), m.group(3)) + offset_ms
    return max(t_ms, 0)


def _build_words(
    begin_ms: int, payload: str, next_begin: int | None, offset_ms: int
) -> tuple[tuple[TimedWord, ...], int]:
    """Split one payload into words; returns (words, line_end_ms)."""
    stamps = list(_WORD_TS_RE.finditer(payload))
    if not stamps:
        text = payload.strip()
        end = next_begin if next_begin is not None else begin_ms
        words = (TimedWord(begin_ms=begin_ms, end_ms=end, text=text),) if text else ()
        return words, end

    words: list[TimedWord] = []
    lead = payload[: stamps[0].start()]
    first_ms = _match_ms(stamps[0], offset_ms)
    if lead.strip():
        words.append(TimedWord(begin_ms=begin_ms, end_ms=first_ms, text=lead.lstrip()))

    line_end = first_ms
    for i, m in enumerate(stamps):
        start = _match_ms(m, offset_ms)
        text_end = stamps[i + 1].start() if i + 1 < len(stamps) else len(payload)
        text = payload[m.end() : text_end]
        if i + 1 < len(stamps):
            end = _match_ms(stamps[i + 1], offset_ms)
        elif text.strip():
            end = next_begin if next_begin is not None else start
        else:
            # trailing stamp only closes the previous word
            line_end = max(line_end, start)
            break
        if text:
            words.append(TimedWord(begin_ms=start, end_ms=max(end, start), text=text.rstrip("\r")))
        line_end = max(line_end, end)
    return tuple(words), line_end


def parse_lrc_with_stats(
    text: str, last_line_duration_ms: int = 5000
) -> tuple[LrcLyrics, LrcParseStats]:
    """
    Supported:
    - [mm:ss], [mm:ss.xx], [mm:ss.xxx], several per line
    - enhanced word stamps <mm:ss.xx> inside a line
    - [offset:+/-ms]
    - basic tags: [ar:], [ti:], [al:], ...

    Lines are sorted by start time; a line without word stamps becomes one
    word lasting until the next line starts (the last one lasts
    `last_line_duration_ms`). Negative times clamp to 0.
    """
    offset_ms = 0
    tags: dict[str, str] = {}
    entries: list[tuple[int, str]] = []

    total = 0
    lines_with_ts = 0
    ignored = 0

    for raw in text.splitlines():
        total += 1
        line = raw.rstrip("\n")
        if not line.strip():
            ignored += 1
            continue

        off = _OFFSET_RE.match(line)
        if off:
            try:
                offset_ms = int(off.group(1))
            except ValueError as e:
                raise LrcParseError("Invalid offset") from e
            continue

        tag = _TAG_RE.match(line)
        if tag and not _TS_RE.search(line):
            k = tag.group(1).strip().lower()
            v = tag.group(2).strip()
            if k and v:
                tags[k] = v
            continue

        lead = _LEADING_TS_RE.match(line)
        if not lead:
            ignored += 1
            continue

        lines_with_ts += 1
        payload = line[lead.end() :]
        for m in _TS_RE.finditer(lead.group(0)):
            entries.append((_match_ms(m, offset_ms), payload))

    entries.sort(key=lambda e: e[0])

    out: list[TimedLine] = []
    for i, (begin_ms, payload) in enumerate(entries):
        next_begin = entries[i + 1][0] if i + 1 < len(entries) else begin_ms + last_line_duration_ms
        words, end_ms = _build_words(begin_ms, payload, next_begin, offset_ms)
        out.append(TimedLine(begin_ms=begin_ms, end_ms=max(end_ms, begin_ms), words=words))

    doc = LrcLyrics(lines=tuple(out), offset_ms=offset_ms, tags=tags)
    stats = LrcParseStats(
        lines_total=total,
        lyric_lines=len(out),
        words_total=sum(len(tl.words) for tl in out),
        lines_with_timestamps=lines_with_ts,
        lines_ignored=ignored,
    )
    return doc, stats


def parse_lrc(text: str) -> LrcLyrics:
    doc, _stats = parse_lrc_with_stats(text)
    return doc


def load_lrc(path: Path) -> BabelLyrics:
    text = Path(path).read_text(encoding="utf-8")
    return document_from_timed_lines(parse_lrc(text).lines)
