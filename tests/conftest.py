from __future__ import annotations

import pytest

from babel_player.lyrics import editor
from babel_player.lyrics.model import BabelLyrics, Line, Segment
from babel_player.lyrics.timestamp import Timestamp


def seg(begin: int, end: int, text: str) -> Segment:
    return Segment(begin=Timestamp(begin), end=Timestamp(end), text=text)


@pytest.fixture
def hello_doc() -> BabelLyrics:
    """One line "Hello World" with a Spanish translation "Hola Mundo"."""
    doc = BabelLyrics.empty()
    line = Line(
        begin=Timestamp(0),
        end=Timestamp(1000),
        original=[seg(0, 500, "Hello"), seg(500, 1000, "World")],
    )
    doc.lines.append(line)
    es = editor.add_language(doc, "es")
    editor.add_translation_word(line, es, "Hola")
    editor.add_translation_word(line, es, "Mundo")
    editor.toggle_segment_word_association(line.original[0], es, 0, include=True)
    editor.toggle_segment_word_association(line.original[1], es, 1, include=True)
    return doc
