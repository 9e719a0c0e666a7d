from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path

from babel_player.lyrics.model import BabelLyrics

from .errors import TtmlParseError
from .timed import TimedLine, TimedWord, document_from_timed_lines

logger = logging.getLogger(__name__)

_CLOCK_RE = re.compile(r"^(?:(?:(\d+):)?(\d{1,2}):)?(\d+)(?:\.(\d+))?$")  # [[hh:]mm:]ss[.fff]
_OFFSET_RE = re.compile(r"^(\d+(?:\.\d+)?)(h|m|s|ms)$")
_OFFSET_SCALE = {"h": 3_600_000, "m": 60_000, "s": 1_000, "ms": 1}


def _local(name: str) -> str:
    return name.rsplit("}", 1)[-1]


def parse_time_ms(value: str) -> int:
    v = value.strip()
    m = _CLOCK_RE.match(v)
    if m:
        hh, mm, ss, frac = m.groups()
        ms = int(frac.ljust(3, "0")[:3]) if frac else 0
        return ((int(hh or 0) * 60 + int(mm or 0)) * 60 + int(ss)) * 1000 + ms
    m = _OFFSET_RE.match(v)
    if m:
        return int(round(float(m.group(1)) * _OFFSET_SCALE[m.group(2)]))
    raise TtmlParseError(f"Invalid time expression: {value!r}")


def _attr(elem: ET.Element, name: str) -> str | None:
    for k, v in elem.attrib.items():
        if _local(k) == name:
            return v
    return None


def _append_gap(words: list[TimedWord], text: str | None) -> None:
    # untimed text between words, e.g. the space separating them
    if not text or not words:
        return
    at = words[-1].end_ms
    gap = " " if not text.strip() else text.strip()
    words.append(TimedWord(begin_ms=at, end_ms=at, text=gap))


def _collect_words(elem: ET.Element, words: list[TimedWord]) -> None:
    for child in elem:
        if _local(child.tag) == "span" and _attr(child, "role") is None:
            begin = _attr(child, "begin")
            end = _attr(child, "end")
            if begin is not None and end is not None:
                words.append(
                    TimedWord(
                        begin_ms=parse_time_ms(begin),
                        end_ms=parse_time_ms(end),
                        text="".join(child.itertext()),
                    )
                )
            else:
                _collect_words(child, words)
        _append_gap(words, child.tail)


def _parse_line(p: ET.Element) -> TimedLine | None:
    words: list[TimedWord] = []
    _collect_words(p, words)
    while words and words[-1].begin_ms == words[-1].end_ms and not words[-1].text.strip():
        words.pop()

    begin = _attr(p, "begin")
    end = _attr(p, "end")
    begin_ms = parse_time_ms(begin) if begin is not None else None
    end_ms = parse_time_ms(end) if end is not None else None

    if not words:
        text = "".join(p.itertext()).strip()
        if begin_ms is None or end_ms is None:
            if text:
                raise TtmlParseError(f"Untimed lyric line: {text!r}")
            return None
        words = [TimedWord(begin_ms=begin_ms, end_ms=end_ms, text=text)] if text else []

    if begin_ms is None:
        begin_ms = min(w.begin_ms for w in words)
    if end_ms is None:
        end_ms = max(w.end_ms for w in words)
    return TimedLine(begin_ms=begin_ms, end_ms=end_ms, words=tuple(words))


def parse_ttml(text: str | bytes) -> list[TimedLine]:
    """
    Parse word-by-word TTML.

    - every <p> is a line, every timed <span> a word
    - spans with ttm:role (translation, romanisation, background) are skipped
    - whitespace between words becomes a zero-length " " word
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise TtmlParseError(f"Malformed TTML: {e}") from e
    if _local(root.tag) != "tt":
        raise TtmlParseError(f"Not a TTML document (root element <{_local(root.tag)}>)")

    lines: list[TimedLine] = []
    for elem in root.iter():
        if _local(elem.tag) != "p":
            continue
        line = _parse_line(elem)
        if line is not None:
            lines.append(line)
    logger.debug("Parsed %d TTML lines", len(lines))
    return lines


def load_ttml(path: Path) -> BabelLyrics:
    data = Path(path).read_bytes()
    return document_from_timed_lines(parse_ttml(data))
