from .model import Agent, BabelLyrics, Line, Lyrics, LyricsMetadata, Segment, TranslationLanguage
from .timestamp import Timestamp

__all__ = [
    "Agent",
    "BabelLyrics",
    "Line",
    "Lyrics",
    "LyricsMetadata",
    "Segment",
    "Timestamp",
    "TranslationLanguage",
]
