from __future__ import annotations

import copy
from dataclasses import dataclass, field
from uuid import UUID, uuid4

from .timestamp import Timestamp


@dataclass(eq=False, slots=True)
class TranslationLanguage:
    id: UUID
    display_name: str = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TranslationLanguage):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True, slots=True)
class Agent:
    # not cross-checked against Line.agent_id
    id: str


@dataclass(slots=True)
class Segment:
    """
    Word-level timed unit of original text.

    `translations` maps a language id to indices into the owning line's
    translated word list for that language.
    """

    begin: Timestamp = field(default_factory=Timestamp.zero)
    end: Timestamp = field(default_factory=Timestamp.zero)
    text: str = ""
    translations: dict[UUID, list[int]] = field(default_factory=dict)


@dataclass(eq=False, slots=True)
class Line:
    begin: Timestamp = field(default_factory=Timestamp.zero)
    end: Timestamp = field(default_factory=Timestamp.zero)
    agent_id: str = ""
    uuid: UUID = field(default_factory=uuid4)
    original: list[Segment] = field(default_factory=list)
    translations: dict[UUID, list[str]] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "".join(seg.text for seg in self.original)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        return hash(self.uuid)


@dataclass(slots=True)
class Lyrics:
    # playback order, not necessarily chronological
    lines: list[Line] = field(default_factory=list)


@dataclass(slots=True)
class LyricsMetadata:
    agents: list[Agent] = field(default_factory=list)
    translations: list[TranslationLanguage] = field(default_factory=list)


@dataclass(slots=True)
class BabelLyrics:
    metadata: LyricsMetadata = field(default_factory=LyricsMetadata)
    lyrics: Lyrics = field(default_factory=Lyrics)

    @classmethod
    def empty(cls) -> "BabelLyrics":
        return cls()

    @property
    def lines(self) -> list[Line]:
        return self.lyrics.lines

    def language_ids(self) -> list[UUID]:
        return [lang.id for lang in self.metadata.translations]

    def language(self, language_id: UUID) -> TranslationLanguage | None:
        for lang in self.metadata.translations:
            if lang.id == language_id:
                return lang
        return None

    def clone(self) -> "BabelLyrics":
        """Deep copy for handing the document to another component."""
        return copy.deepcopy(self)
