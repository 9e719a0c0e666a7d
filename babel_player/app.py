from __future__ import annotations

import logging
from pathlib import Path
import signal
import time
from typing import Callable

from babel_player.config import AppConfig
from babel_player.formats import load_document
from babel_player.keys import KeyReader
from babel_player.loader import BackgroundLoader, Failed, Succeeded
from babel_player.lyrics.model import BabelLyrics
from babel_player.lyrics.timestamp import Timestamp
from babel_player.playback.audio import AudioClip, load_audio
from babel_player.playback.backend import AudioBackend, NullBackend
from babel_player.playback.errors import PlaybackError
from babel_player.playback.player import Player
from babel_player.render.ansi import AnsiRenderer
from babel_player.sync.resolver import ActiveWindow
from babel_player.sync.tracker import WindowTracker

logger = logging.getLogger(__name__)

BackendFactory = Callable[[AudioClip], AudioBackend]

SCRUB_MS = 5000


def _silent_backend(clip: AudioClip) -> AudioBackend:
    return NullBackend(clip.duration)


class PlayerSession:
    """
    Owns the document, the player and the two background loaders.

    Load results are applied in tick() only, so a frame never sees a
    half-replaced document; a failed load leaves the previous state as is.
    """

    def __init__(
        self,
        cfg: AppConfig,
        *,
        player: Player | None = None,
        renderer: AnsiRenderer | None = None,
        backend_factory: BackendFactory | None = None,
    ):
        self.cfg = cfg
        self.player = player or Player()
        self.renderer = renderer
        self.backend_factory = backend_factory or _silent_backend
        self.lyrics_loader: BackgroundLoader[BabelLyrics] = BackgroundLoader("lyrics")
        self.audio_loader: BackgroundLoader[AudioClip] = BackgroundLoader("audio")

        self.document: BabelLyrics | None = None
        self.lyrics_source: str | None = None
        self.audio: AudioClip | None = None
        self.tracker: WindowTracker | None = None
        self.window = ActiveWindow()
        self._anchor: int | None = None

    @property
    def loading(self) -> bool:
        return self.lyrics_loader.loading or self.audio_loader.loading

    def open_lyrics(self, path: Path) -> bool:
        path = Path(path)
        return self.lyrics_loader.start(load_document, path, label=path.name)

    def open_audio(self, path: Path) -> bool:
        path = Path(path)
        return self.audio_loader.start(load_audio, path, label=path.name)

    def load_from_editor(self, doc: BabelLyrics) -> None:
        self._install_document(doc.clone(), "From editor")

    def _install_document(self, doc: BabelLyrics, source: str) -> None:
        self.document = doc
        self.lyrics_source = source
        self.tracker = WindowTracker(doc)
        self._anchor = None
        logger.info("Lyrics ready: %s (%d lines)", source, len(doc.lines))

    def _install_audio(self, clip: AudioClip) -> None:
        try:
            backend = self.backend_factory(clip)
        except PlaybackError as e:
            logger.error("Audio output unavailable: %s", e)
            return
        self.player.replace_backend(backend)
        self.audio = clip
        if self.tracker is not None:
            self.tracker.invalidate()

    def _apply_loads(self) -> None:
        st = self.lyrics_loader.poll()
        if isinstance(st, Succeeded):
            self._install_document(self.lyrics_loader.take(), st.label)
        elif isinstance(st, Failed):
            self.lyrics_loader.take()

        st = self.audio_loader.poll()
        if isinstance(st, Succeeded):
            self._install_audio(self.audio_loader.take())
        elif isinstance(st, Failed):
            self.audio_loader.take()

    def lyrics_end(self) -> Timestamp:
        if self.document is None or not self.document.lines:
            return Timestamp.zero()
        return max(line.end for line in self.document.lines)

    def done(self) -> bool:
        if self.player.total_duration() is not None:
            return self.player.finished()
        return self.player.is_playing and self.player.position() > self.lyrics_end()

    def title(self) -> str:
        parts = [p for p in (self.audio.path.name if self.audio and self.audio.path else None, self.lyrics_source) if p]
        return " · ".join(parts) or "babel-player"

    def status(self) -> str:
        total = self.player.total_duration()
        return f"{self.player.state_name} · {total.format() if total is not None else '???'}"

    def seek_line(self, step: int) -> None:
        """Jump to the start of the line `step` lines away from the current one."""
        if self.document is None or not self.document.lines:
            return
        if self._anchor is None:
            target = 0 if step > 0 else len(self.document.lines) - 1
        else:
            target = min(max(self._anchor + step, 0), len(self.document.lines) - 1)
        line = self.document.lines[target]
        # just inside the line: its begin instant is not active yet
        at = line.begin + Timestamp(1) if line.end.ms - line.begin.ms > 1 else line.begin
        self.player.seek(at)
        self._anchor = target

    def seek_fraction(self, fraction: float) -> None:
        total = self.player.total_duration() or self.lyrics_end()
        self.player.seek(Timestamp(int(total.ms * fraction)))

    def handle_key(self, key: str) -> bool:
        """
        Apply one key press. Returns False when the user asked to quit.

        space: play/pause, left/right: scrub, up/down: previous/next line,
        0-9: seek to that tenth of the track, r: back to the start, q: quit.
        """
        if key == "q":
            return False
        if key == " ":
            self.player.toggle()
        elif key == "LEFT":
            self.player.scrub(-SCRUB_MS)
        elif key == "RIGHT":
            self.player.scrub(SCRUB_MS)
        elif key == "UP":
            self.seek_line(-1)
        elif key == "DOWN":
            self.seek_line(1)
        elif len(key) == 1 and key.isdigit():
            self.seek_fraction(int(key) / 10)
        elif key == "r":
            self.player.reset()
        else:
            return True
        # status line changed even if the window did not
        if self.tracker is not None:
            self.tracker.invalidate()
        return True

    def tick(self) -> ActiveWindow | None:
        """One refresh cycle. Returns the window when it changed."""
        self._apply_loads()
        if self.tracker is None or self.document is None:
            return None
        window = self.tracker.changed_window(self.player.position())
        if window is None:
            return None
        self.window = window
        if window.line_index is not None:
            self._anchor = window.line_index
        if self.renderer is not None:
            self.renderer.render(
                self.title(),
                self.document,
                window,
                anchor=self._anchor,
                status=self.status(),
                context_lines=self.cfg.context_lines,
                show_translations=self.cfg.show_translations,
            )
        return window

    def close(self) -> None:
        self.player.pause()
        self.player.backend.close()
        self.lyrics_loader.shutdown()
        self.audio_loader.shutdown()


def watch(
    cfg: AppConfig,
    lyrics_path: Path,
    audio_path: Path | None = None,
    *,
    backend_factory: BackendFactory | None = None,
    keys: KeyReader | None = None,
) -> int:
    """
    Main play loop:
    load (background) -> play -> keys -> position -> resolve -> render on change.
    """
    renderer = AnsiRenderer(use_alt_screen=cfg.use_alt_screen)
    session = PlayerSession(cfg, renderer=renderer, backend_factory=backend_factory)
    session.open_lyrics(lyrics_path)
    if audio_path is not None:
        session.open_audio(audio_path)
    if keys is None:
        keys = KeyReader()

    tick_s = 1.0 / max(cfg.refresh_hz, 1.0)

    # Handle SIGINT (Ctrl+C) gracefully
    def _on_sigint(signum, frame):
        raise KeyboardInterrupt

    with renderer, keys:
        signal.signal(signal.SIGINT, _on_sigint)
        try:
            started = False
            while True:
                for key in keys.read():
                    if not session.handle_key(key):
                        return 0
                session.tick()
                if not started and not session.loading:
                    if session.document is None:
                        logger.error("No lyrics to show")
                        return 1
                    session.player.play()
                    started = True
                elif started and session.done():
                    return 0
                time.sleep(tick_s)
        except KeyboardInterrupt:
            return 0
        finally:
            session.close()
