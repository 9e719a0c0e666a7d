import io
import sys

import pytest

from babel_player.keys import KeyReader, decode_keys


@pytest.mark.parametrize(
    "data, keys",
    [
        (b" ", [" "]),
        (b"Q", ["q"]),
        (b"\x1b[D\x1b[C", ["LEFT", "RIGHT"]),
        (b"\x1bOA5", ["UP", "5"]),
        (b"\x1b[1;5Dx", ["x"]),  # ctrl+left is dropped
        (b"\x03\x7f\t", []),
    ],
)
def test_decode_keys(data, keys):
    assert decode_keys(data) == keys


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX terminal handling")
def test_reader_without_terminal_reads_nothing():
    with KeyReader(io.StringIO("q")) as reader:
        assert reader.read() == []
