from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping
from uuid import UUID

from babel_player.lyrics.model import BabelLyrics, Line, Segment
from babel_player.lyrics.timestamp import Timestamp


@dataclass(frozen=True, slots=True)
class ActiveWindow:
    """What is "current" at one playback instant."""

    active_line: Line | None = None
    active_segment: Segment | None = None
    line_index: int | None = None
    segment_indices: tuple[int, ...] = ()
    highlighted_translation_indices: Mapping[UUID, frozenset[int]] = field(default_factory=dict)

    def is_line_active(self, line: Line) -> bool:
        return self.active_line is not None and self.active_line.uuid == line.uuid

    def is_segment_active(self, index: int) -> bool:
        return index in self.segment_indices

    def is_word_highlighted(self, language_id: UUID, word_index: int) -> bool:
        return word_index in self.highlighted_translation_indices.get(language_id, frozenset())

    @property
    def key(self) -> tuple:
        # hashable identity of the window, for render-on-change
        line_uuid = self.active_line.uuid if self.active_line is not None else None
        highlighted = tuple(
            (lang_id, tuple(sorted(indices)))
            for lang_id, indices in self.highlighted_translation_indices.items()
        )
        return (line_uuid, self.segment_indices, highlighted)


def _is_active(begin: Timestamp, end: Timestamp, now: Timestamp) -> bool:
    # open interval: an item ending exactly now is finished
    return begin < now < end


def resolve(doc: BabelLyrics, timestamp: Timestamp | int) -> ActiveWindow:
    """
    Linear scan: first line whose (begin, end) contains the timestamp, then
    every segment of that line under the same rule. Highlighted translation
    indices are the union of the active segments' associations.
    """
    now = Timestamp.coerce(timestamp)
    for line_idx, line in enumerate(doc.lines):
        if not _is_active(line.begin, line.end, now):
            continue

        highlighted: dict[UUID, set[int]] = {lang_id: set() for lang_id in line.translations}
        active: list[int] = []
        for seg_idx, seg in enumerate(line.original):
            if not _is_active(seg.begin, seg.end, now):
                continue
            active.append(seg_idx)
            for lang_id, indices in seg.translations.items():
                highlighted.setdefault(lang_id, set()).update(indices)

        return ActiveWindow(
            active_line=line,
            active_segment=line.original[active[0]] if active else None,
            line_index=line_idx,
            segment_indices=tuple(active),
            highlighted_translation_indices={k: frozenset(v) for k, v in highlighted.items()},
        )
    return ActiveWindow()
