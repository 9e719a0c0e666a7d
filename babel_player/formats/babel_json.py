"""
Persisted BabelLyrics format.

{
  "metadata": {"agents": [{"id": ...}], "translations": [{"language": ..., "id": ...}]},
  "lyrics": {"lines": [{"begin_ms", "end_ms", "agent_id", "uuid",
                        "original": [{"begin_ms", "end_ms", "text",
                                      "translations": [[language_id, [word_index, ...]], ...]}],
                        "translations": [[language_id, [word, ...]], ...]}]}
}
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any
from uuid import UUID

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from babel_player.lyrics.editor import repair
from babel_player.lyrics.model import (
    Agent,
    BabelLyrics,
    Line,
    Lyrics,
    LyricsMetadata,
    Segment,
    TranslationLanguage,
)
from babel_player.lyrics.timestamp import Timestamp

from .errors import BabelJsonError, LyricsExportError

logger = logging.getLogger(__name__)

# "begin"/"end" were written by earlier versions
BeginMs = Annotated[StrictInt, Field(ge=0, validation_alias=AliasChoices("begin_ms", "begin"))]
EndMs = Annotated[StrictInt, Field(ge=0, validation_alias=AliasChoices("end_ms", "end"))]


def _unique_language_ids(ids: list[UUID]) -> None:
    seen: set[UUID] = set()
    for lang_id in ids:
        if lang_id in seen:
            raise ValueError(f"duplicate language id {lang_id}")
        seen.add(lang_id)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore")


class AgentRecord(_Record):
    id: StrictStr


class LanguageRecord(_Record):
    language: StrictStr = ""
    id: UUID


class MetadataRecord(_Record):
    agents: list[AgentRecord] = Field(default_factory=list)
    translations: list[LanguageRecord] = Field(default_factory=list)

    @field_validator("translations")
    @classmethod
    def _check_translations(cls, v: list[LanguageRecord]) -> list[LanguageRecord]:
        _unique_language_ids([t.id for t in v])
        return v


class SegmentRecord(_Record):
    begin_ms: BeginMs
    end_ms: EndMs
    text: StrictStr
    translations: list[tuple[UUID, list[StrictInt]]]

    @field_validator("translations")
    @classmethod
    def _check_translations(cls, v: list[tuple[UUID, list[int]]]) -> list[tuple[UUID, list[int]]]:
        _unique_language_ids([lang_id for lang_id, _ in v])
        return v


class LineRecord(_Record):
    begin_ms: BeginMs
    end_ms: EndMs
    agent_id: StrictStr = ""
    uuid: UUID
    original: list[SegmentRecord]
    translations: list[tuple[UUID, list[StrictStr]]]

    @field_validator("translations")
    @classmethod
    def _check_translations(cls, v: list[tuple[UUID, list[str]]]) -> list[tuple[UUID, list[str]]]:
        _unique_language_ids([lang_id for lang_id, _ in v])
        return v


class LyricsRecord(_Record):
    lines: list[LineRecord]


class DocumentRecord(_Record):
    metadata: MetadataRecord
    lyrics: LyricsRecord


# --- document -> record ------------------------------------------------------


def _segment_record(seg: Segment) -> SegmentRecord:
    return SegmentRecord(
        begin_ms=seg.begin.ms,
        end_ms=seg.end.ms,
        text=seg.text,
        translations=[(lang_id, list(indices)) for lang_id, indices in seg.translations.items()],
    )


def _line_record(line: Line) -> LineRecord:
    return LineRecord(
        begin_ms=line.begin.ms,
        end_ms=line.end.ms,
        agent_id=line.agent_id,
        uuid=line.uuid,
        original=[_segment_record(seg) for seg in line.original],
        translations=[(lang_id, list(words)) for lang_id, words in line.translations.items()],
    )


def to_record(doc: BabelLyrics) -> DocumentRecord:
    return DocumentRecord(
        metadata=MetadataRecord(
            agents=[AgentRecord(id=a.id) for a in doc.metadata.agents],
            translations=[LanguageRecord(language=t.display_name, id=t.id) for t in doc.metadata.translations],
        ),
        lyrics=LyricsRecord(lines=[_line_record(line) for line in doc.lines]),
    )


def to_dict(doc: BabelLyrics) -> dict[str, Any]:
    return to_record(doc).model_dump(mode="json")


def dumps(doc: BabelLyrics) -> str:
    return to_record(doc).model_dump_json(indent=2)


# --- record -> document ------------------------------------------------------


def _segment(rec: SegmentRecord) -> Segment:
    return Segment(
        begin=Timestamp(rec.begin_ms),
        end=Timestamp(rec.end_ms),
        text=rec.text,
        translations={lang_id: list(indices) for lang_id, indices in rec.translations},
    )


def _line(rec: LineRecord) -> Line:
    return Line(
        begin=Timestamp(rec.begin_ms),
        end=Timestamp(rec.end_ms),
        agent_id=rec.agent_id,
        uuid=rec.uuid,
        original=[_segment(s) for s in rec.original],
        translations={lang_id: list(words) for lang_id, words in rec.translations},
    )


def from_record(rec: DocumentRecord) -> BabelLyrics:
    doc = BabelLyrics(
        metadata=LyricsMetadata(
            agents=[Agent(id=a.id) for a in rec.metadata.agents],
            translations=[TranslationLanguage(id=t.id, display_name=t.language) for t in rec.metadata.translations],
        ),
        lyrics=Lyrics(lines=[_line(line) for line in rec.lyrics.lines]),
    )
    repair(doc)
    return doc


def _format_error(e: ValidationError) -> str:
    first = e.errors()[0]
    where = ".".join(str(part) for part in first["loc"]) or "document"
    more = f" (+{e.error_count() - 1} more)" if e.error_count() > 1 else ""
    return f"Invalid Babel JSON at {where}: {first['msg']}{more}"


def from_dict(data: Any) -> BabelLyrics:
    try:
        rec = DocumentRecord.model_validate(data)
    except ValidationError as e:
        raise BabelJsonError(_format_error(e)) from e
    return from_record(rec)


def loads(text: str | bytes) -> BabelLyrics:
    try:
        rec = DocumentRecord.model_validate_json(text)
    except ValidationError as e:
        raise BabelJsonError(_format_error(e)) from e
    return from_record(rec)


def load_file(path: Path) -> BabelLyrics:
    path = Path(path)
    doc = loads(path.read_bytes())
    logger.info("Loaded %d lines, %d languages from %s", len(doc.lines), len(doc.metadata.translations), path)
    return doc


def save_file(doc: BabelLyrics, path: Path) -> None:
    path = Path(path)
    data = dumps(doc)
    try:
        path.write_text(data, encoding="utf-8")
    except OSError as e:
        raise LyricsExportError(f"Cannot write {path}: {e.strerror or e}") from e
    logger.info("Saved %d lines to %s", len(doc.lines), path)
