from .backend import AudioBackend, NullBackend
from .clock import Paused, PlaybackClock, Playing, Stopped
from .errors import AudioLoadError, PlaybackError
from .player import Player

__all__ = [
    "AudioBackend",
    "AudioLoadError",
    "NullBackend",
    "Paused",
    "PlaybackClock",
    "PlaybackError",
    "Player",
    "Playing",
    "Stopped",
]
