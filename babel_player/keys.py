from __future__ import annotations

import os
import select
import sys

# POSIX escape sequences for the arrow keys
_ARROWS = {
    b"\x1b[A": "UP",
    b"\x1b[B": "DOWN",
    b"\x1b[C": "RIGHT",
    b"\x1b[D": "LEFT",
    b"\x1bOA": "UP",
    b"\x1bOB": "DOWN",
    b"\x1bOC": "RIGHT",
    b"\x1bOD": "LEFT",
}


def decode_keys(data: bytes) -> list[str]:
    """
    Translate raw terminal input to high-level keys: arrows become
    "UP"/"DOWN"/"LEFT"/"RIGHT", printable characters are lower-cased.
    Other control bytes and unknown escape sequences are dropped.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        seq = data[i : i + 3]
        if seq in _ARROWS:
            keys.append(_ARROWS[seq])
            i += 3
            continue
        if data[i : i + 1] == b"\x1b":
            # skip the rest of an unknown CSI sequence
            i += 1
            if data[i : i + 1] in (b"[", b"O"):
                i += 1
                while i < len(data) and not 0x40 <= data[i] <= 0x7E:
                    i += 1
                i += 1
            continue
        ch = chr(data[i])
        i += 1
        if ord(ch) >= 32 and ord(ch) != 127:
            keys.append(ch.lower())
    return keys


class KeyReader:
    """
    Non-blocking keyboard input for the play loop.

    Puts a terminal stdin into cbreak mode for the duration of the `with`
    block; when stdin is not a terminal, read() never returns anything.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._fd: int | None = None
        self._saved = None

    def __enter__(self):
        self.enter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exit()

    def enter(self) -> None:
        if self._fd is not None or sys.platform == "win32":
            return
        try:
            fd = self.stream.fileno()
        except (AttributeError, OSError, ValueError):
            return
        if not os.isatty(fd):
            return

        import termios
        import tty

        self._saved = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._fd = fd

    def exit(self) -> None:
        if self._fd is None:
            return
        import termios

        termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved)
        self._fd = None
        self._saved = None

    def read(self) -> list[str]:
        if sys.platform == "win32":
            return self._read_console()
        if self._fd is None:
            return []
        ready, _, _ = select.select([self._fd], [], [], 0)
        if not ready:
            return []
        return decode_keys(os.read(self._fd, 64))

    @staticmethod
    def _read_console() -> list[str]:
        import msvcrt

        keys: list[str] = []
        while msvcrt.kbhit():
            b = msvcrt.getch()
            # extended keys come as 0x00/0xE0 followed by a scan code
            if b in (b"\x00", b"\xe0"):
                code = msvcrt.getch()
                key = {b"H": "UP", b"P": "DOWN", b"K": "LEFT", b"M": "RIGHT"}.get(code)
                if key:
                    keys.append(key)
                continue
            keys.extend(decode_keys(b))
        return keys
