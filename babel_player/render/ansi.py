from __future__ import annotations

import shutil
import signal
import sys
from dataclasses import dataclass
from typing import Callable

import colorama
from colorama import Fore, Style

from babel_player.lyrics.model import BabelLyrics, Line
from babel_player.sync.resolver import ActiveWindow

CSI = "\x1b["


@dataclass(frozen=True, slots=True)
class Theme:
    title: str = Fore.CYAN + Style.BRIGHT
    current: str = Fore.YELLOW + Style.BRIGHT  # active segment / highlighted word
    plain: str = Style.NORMAL  # rest of the active line
    dim: str = Fore.LIGHTBLACK_EX  # translated words not sung right now
    faint: str = Fore.LIGHTBLACK_EX + Style.DIM  # lines that are not active
    reset: str = Style.RESET_ALL


def _active_line_rows(
    line: Line, window: ActiveWindow, doc: BabelLyrics, theme: Theme, show_translations: bool
) -> list[str]:
    parts = []
    for i, seg in enumerate(line.original):
        color = theme.current if window.is_segment_active(i) else theme.plain
        parts.append(f"{color}{seg.text}{theme.reset}")
    rows = ["".join(parts)]
    if not show_translations:
        return rows

    # registered order first, then anything the line carries beyond that
    lang_ids = [k for k in doc.language_ids() if k in line.translations]
    lang_ids += [k for k in line.translations if k not in lang_ids]
    for lang_id in lang_ids:
        words = line.translations[lang_id]
        if not words:
            continue
        parts = []
        for i, word in enumerate(words):
            color = theme.current if window.is_word_highlighted(lang_id, i) else theme.dim
            parts.append(f"{color}{word}{theme.reset}")
        rows.append("".join(parts))
    return rows


def compose_frame(
    doc: BabelLyrics,
    window: ActiveWindow,
    *,
    theme: Theme | None = None,
    anchor: int | None = None,
    context_lines: int = 2,
    body_rows: int = 24,
    show_translations: bool = True,
) -> list[str]:
    """
    Rows to paint for one frame: the active line (with its translations)
    plus up to `context_lines` lines before it, filled downwards.
    `anchor` keeps the view in place between lines.
    """
    theme = theme or Theme()
    lines = doc.lines
    if not lines:
        return []

    center = window.line_index if window.line_index is not None else anchor
    start = max((center or 0) - context_lines, 0)
    rows: list[str] = []
    for idx in range(start, len(lines)):
        line = lines[idx]
        if window.is_line_active(line):
            rows.extend(_active_line_rows(line, window, doc, theme, show_translations))
        else:
            rows.append(f"{theme.faint}{line.text}{theme.reset}")
        if len(rows) >= body_rows:
            break
    return rows[: max(body_rows, 1)]


class AnsiRenderer:
    def __init__(self, use_alt_screen: bool = True, theme: Theme | None = None):
        self.use_alt_screen = use_alt_screen
        self.theme = theme or Theme()
        self._entered = False
        self._resize_handler: Callable[..., None] | None = None
        self._last_render_args: tuple | None = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._entered:
            return
        colorama.just_fix_windows_console()
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049h")  # alt screen
        sys.stdout.write(CSI + "?25l")  # hide cursor
        sys.stdout.write(CSI + "H" + CSI + "2J")  # home + clear
        sys.stdout.flush()
        self._entered = True

        # Register SIGWINCH handler for resize
        def _on_resize(signum=None, frame=None):
            if self._last_render_args:
                title, doc, window, anchor, kwargs = self._last_render_args
                self.render(title, doc, window, anchor=anchor, **kwargs)

        self._resize_handler = _on_resize
        if hasattr(signal, "SIGWINCH"):
            signal.signal(signal.SIGWINCH, _on_resize)

    def exit(self) -> None:
        if not self._entered:
            return
        # Restore default SIGWINCH handler
        if self._resize_handler:
            if hasattr(signal, "SIGWINCH"):
                signal.signal(signal.SIGWINCH, signal.SIG_DFL)
            self._resize_handler = None
        sys.stdout.write(self.theme.reset)
        sys.stdout.write(CSI + "?25h")  # show cursor
        if self.use_alt_screen:
            sys.stdout.write(CSI + "?1049l")  # normal screen
        sys.stdout.flush()
        self._entered = False
        self._last_render_args = None

    def render(
        self,
        title: str,
        doc: BabelLyrics,
        window: ActiveWindow,
        *,
        anchor: int | None = None,
        status: str = "",
        context_lines: int = 2,
        show_translations: bool = True,
    ) -> None:
        # Store args for SIGWINCH redraw
        kwargs = {"status": status, "context_lines": context_lines, "show_translations": show_translations}
        self._last_render_args = (title, doc, window, anchor, kwargs)

        cols, rows = shutil.get_terminal_size(fallback=(80, 24))
        # reserve 1 line for title, 1 for status
        body_rows = max(rows - 2, 1)

        out: list[str] = [f"{self.theme.title}♫ {title} ♫{self.theme.reset}"]
        out.extend(
            compose_frame(
                doc,
                window,
                theme=self.theme,
                anchor=anchor,
                context_lines=context_lines,
                body_rows=body_rows,
                show_translations=show_translations,
            )
        )
        if status:
            out.append(f"{self.theme.dim}{status}{self.theme.reset}")

        # move home + clear, then print full frame
        sys.stdout.write(CSI + "H" + CSI + "2J")
        sys.stdout.write("\n".join(out))
        sys.stdout.write(self.theme.reset)
        sys.stdout.flush()
