"""
Structural edits over a BabelLyrics document.

Segment associations are positional indices into the line's translated word
lists, so every mutation that can shift those positions lives here.
Out-of-range input is clamped or ignored, never raised.
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from .model import BabelLyrics, Line, Segment, TranslationLanguage
from .timestamp import Timestamp

logger = logging.getLogger(__name__)


def add_language(doc: BabelLyrics, name: str) -> UUID:
    new_id = uuid4()
    doc.metadata.translations.append(TranslationLanguage(id=new_id, display_name=name))
    for line in doc.lines:
        line.translations[new_id] = []
        for seg in line.original:
            seg.translations[new_id] = []
    return new_id


def remove_language(doc: BabelLyrics, language_id: UUID) -> None:
    before = len(doc.metadata.translations)
    doc.metadata.translations = [t for t in doc.metadata.translations if t.id != language_id]
    if len(doc.metadata.translations) == before:
        return
    for line in doc.lines:
        line.translations.pop(language_id, None)
        for seg in line.original:
            seg.translations.pop(language_id, None)


def rename_language(doc: BabelLyrics, language_id: UUID, name: str) -> None:
    lang = doc.language(language_id)
    if lang is not None:
        lang.display_name = name


def add_line(doc: BabelLyrics) -> Line:
    line = Line(translations={lang_id: [] for lang_id in doc.language_ids()})
    doc.lines.append(line)
    return line


def set_line_agent(line: Line, agent_id: str) -> None:
    line.agent_id = agent_id


def insert_segment(doc: BabelLyrics, line: Line, at_index: int) -> Segment:
    """Insert an empty zero-length segment; indices past the end append."""
    seg = Segment(translations={lang_id: [] for lang_id in doc.language_ids()})
    at = min(max(at_index, 0), len(line.original))
    line.original.insert(at, seg)
    return seg


def remove_segment(line: Line, index: int) -> Segment | None:
    if not 0 <= index < len(line.original):
        return None
    return line.original.pop(index)


def move_segment(line: Line, from_index: int, to_index: int) -> None:
    """Swap two segment positions. Associations travel with their segment."""
    n = len(line.original)
    if not (0 <= from_index < n and 0 <= to_index < n) or from_index == to_index:
        return
    segs = line.original
    segs[from_index], segs[to_index] = segs[to_index], segs[from_index]


def update_segment(
    line: Line,
    index: int,
    *,
    begin: Timestamp | None = None,
    end: Timestamp | None = None,
    text: str | None = None,
) -> None:
    if not 0 <= index < len(line.original):
        return
    seg = line.original[index]
    if begin is not None:
        seg.begin = begin
    if end is not None:
        seg.end = end
    if seg.end < seg.begin:
        seg.end = seg.begin
    if text is not None:
        seg.text = text


def add_translation_word(line: Line, language_id: UUID, text: str = "") -> int | None:
    words = line.translations.get(language_id)
    if words is None:
        return None
    words.append(text)
    return len(words) - 1


def set_translation_word(line: Line, language_id: UUID, word_index: int, text: str) -> None:
    words = line.translations.get(language_id)
    if words is None or not 0 <= word_index < len(words):
        return
    words[word_index] = text


def remove_translation_word(line: Line, language_id: UUID, word_index: int) -> None:
    """
    Remove one translated word and renumber every segment association of the
    same language: the removed index disappears, higher indices move down by one.
    """
    words = line.translations.get(language_id)
    if words is None or not 0 <= word_index < len(words):
        return
    del words[word_index]
    for seg in line.original:
        indices = seg.translations.get(language_id)
        if indices is None:
            continue
        seg.translations[language_id] = [i - 1 if i > word_index else i for i in indices if i != word_index]


def toggle_segment_word_association(
    segment: Segment, language_id: UUID, word_index: int, include: bool
) -> None:
    indices = segment.translations.get(language_id)
    if indices is None or word_index < 0:
        return
    if include:
        if word_index not in indices:
            indices.append(word_index)
    else:
        segment.translations[language_id] = [i for i in indices if i != word_index]


def repair(doc: BabelLyrics) -> int:
    """
    Restore per-language entries on a document that came from outside the
    editor: missing entries are added, entries of unregistered languages and
    negative or duplicate associations are dropped, end is raised to begin.
    Associations pointing past the word list are only reported; they are
    checked when read. Returns the number of fixes applied.
    """
    registered = doc.language_ids()
    known = set(registered)
    missing = stray = bad_index = bad_timing = dangling = 0

    for line in doc.lines:
        for lang_id in [k for k in line.translations if k not in known]:
            del line.translations[lang_id]
            stray += 1
        for lang_id in registered:
            if lang_id not in line.translations:
                line.translations[lang_id] = []
                missing += 1
        if line.end < line.begin:
            line.end = line.begin
            bad_timing += 1

        for seg in line.original:
            for lang_id in [k for k in seg.translations if k not in known]:
                del seg.translations[lang_id]
                stray += 1
            for lang_id in registered:
                indices = seg.translations.get(lang_id)
                if indices is None:
                    seg.translations[lang_id] = []
                    missing += 1
                    continue
                cleaned: list[int] = []
                for i in indices:
                    if i >= 0 and i not in cleaned:
                        cleaned.append(i)
                if len(cleaned) != len(indices):
                    bad_index += len(indices) - len(cleaned)
                    seg.translations[lang_id] = cleaned
                limit = len(line.translations[lang_id])
                dangling += sum(1 for i in cleaned if i >= limit)
            if seg.end < seg.begin:
                seg.end = seg.begin
                bad_timing += 1

    if missing:
        logger.warning("Added %d missing translation entries", missing)
    if stray:
        logger.warning("Dropped %d translation entries for unregistered languages", stray)
    if bad_index:
        logger.warning("Dropped %d negative or duplicate word associations", bad_index)
    if bad_timing:
        logger.warning("Fixed %d items whose end preceded begin", bad_timing)
    if dangling:
        logger.warning("%d word associations point past their translation", dangling)
    return missing + stray + bad_index + bad_timing
