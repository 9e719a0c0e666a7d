from __future__ import annotations

from pathlib import Path

from babel_player.lyrics.model import BabelLyrics

from .babel_json import load_file
from .errors import (
    BabelJsonError,
    LrcParseError,
    LyricsExportError,
    LyricsFormatError,
    TtmlParseError,
)
from .lrc import load_lrc
from .ttml import load_ttml

_LOADERS = {
    ".json": load_file,
    ".ttml": load_ttml,
    ".xml": load_ttml,
    ".lrc": load_lrc,
}


def load_document(path: Path) -> BabelLyrics:
    """Load any supported lyrics file, picked by suffix."""
    path = Path(path)
    loader = _LOADERS.get(path.suffix.lower())
    if loader is None:
        raise LyricsFormatError(f"Unsupported lyrics file type: {path.suffix or path.name}")
    return loader(path)


__all__ = [
    "BabelJsonError",
    "LrcParseError",
    "LyricsExportError",
    "LyricsFormatError",
    "TtmlParseError",
    "load_document",
]
