from __future__ import annotations

from uuid import uuid4

from babel_player.lyrics import editor
from babel_player.lyrics.model import BabelLyrics, Line
from babel_player.lyrics.timestamp import Timestamp
from tests.conftest import seg


def _doc_with_lines(n_lines: int = 2, n_segments: int = 2) -> BabelLyrics:
    doc = BabelLyrics.empty()
    for i in range(n_lines):
        base = i * 1000
        doc.lines.append(
            Line(
                begin=Timestamp(base),
                end=Timestamp(base + 1000),
                original=[seg(base + j * 100, base + (j + 1) * 100, f"w{i}{j}") for j in range(n_segments)],
            )
        )
    return doc


def _assert_one_entry_per_language(doc: BabelLyrics) -> None:
    registered = doc.language_ids()
    for line in doc.lines:
        assert list(line.translations) == registered
        for s in line.original:
            assert list(s.translations) == registered


class TestLanguages:
    def test_add_language_reaches_every_line_and_segment(self):
        doc = _doc_with_lines()
        fr = editor.add_language(doc, "fr")
        de = editor.add_language(doc, "de")
        assert fr != de
        assert [t.display_name for t in doc.metadata.translations] == ["fr", "de"]
        _assert_one_entry_per_language(doc)
        assert all(line.translations[fr] == [] for line in doc.lines)

    def test_remove_language_drops_all_entries(self):
        doc = _doc_with_lines()
        fr = editor.add_language(doc, "fr")
        de = editor.add_language(doc, "de")
        editor.add_translation_word(doc.lines[0], fr, "mot")
        editor.remove_language(doc, fr)
        assert doc.language_ids() == [de]
        for line in doc.lines:
            assert fr not in line.translations
            assert all(fr not in s.translations for s in line.original)
        _assert_one_entry_per_language(doc)

    def test_remove_unknown_language_is_noop(self):
        doc = _doc_with_lines()
        fr = editor.add_language(doc, "fr")
        editor.remove_language(doc, uuid4())
        assert doc.language_ids() == [fr]
        _assert_one_entry_per_language(doc)

    def test_rename_language(self, hello_doc):
        lang_id = hello_doc.language_ids()[0]
        editor.rename_language(hello_doc, lang_id, "Español")
        assert hello_doc.language(lang_id).display_name == "Español"
        editor.rename_language(hello_doc, uuid4(), "ignored")


class TestLines:
    def test_add_line_has_empty_entry_per_language(self):
        doc = _doc_with_lines(1)
        fr = editor.add_language(doc, "fr")
        first_uuid = doc.lines[0].uuid
        line = editor.add_line(doc)
        assert doc.lines[-1] is line
        assert line.begin == line.end == Timestamp.zero()
        assert line.original == []
        assert line.translations == {fr: []}
        assert line.uuid != first_uuid

    def test_line_identity_is_uuid(self):
        a = Line(original=[seg(0, 1, "x")])
        b = Line(uuid=a.uuid)
        assert a == b
        assert len({a, b}) == 1

    def test_set_line_agent(self):
        line = Line()
        editor.set_line_agent(line, "v1")
        assert line.agent_id == "v1"


class TestSegments:
    def test_insert_segment_carries_language_entries(self, hello_doc):
        line = hello_doc.lines[0]
        new = editor.insert_segment(hello_doc, line, 1)
        assert [s.text for s in line.original] == ["Hello", "", "World"]
        assert new.begin == new.end == Timestamp.zero()
        assert new.translations == {lang_id: [] for lang_id in hello_doc.language_ids()}
        # associations are positions in the translated words, not segment positions
        assert line.original[2].translations[hello_doc.language_ids()[0]] == [1]

    def test_insert_past_end_appends_and_negative_prepends(self, hello_doc):
        line = hello_doc.lines[0]
        last = editor.insert_segment(hello_doc, line, 99)
        first = editor.insert_segment(hello_doc, line, -4)
        assert line.original[-1] is last
        assert line.original[0] is first

    def test_remove_segment(self, hello_doc):
        line = hello_doc.lines[0]
        removed = editor.remove_segment(line, 0)
        assert removed.text == "Hello"
        assert [s.text for s in line.original] == ["World"]
        assert editor.remove_segment(line, 5) is None
        assert editor.remove_segment(line, -1) is None
        assert len(line.original) == 1

    def test_move_segment_swaps_and_keeps_associations(self, hello_doc):
        line = hello_doc.lines[0]
        es = hello_doc.language_ids()[0]
        editor.move_segment(line, 0, 1)
        assert [s.text for s in line.original] == ["World", "Hello"]
        assert line.original[0].translations[es] == [1]
        assert line.original[1].translations[es] == [0]
        editor.move_segment(line, 0, 7)
        assert [s.text for s in line.original] == ["World", "Hello"]

    def test_insert_then_move_ordering(self):
        doc = _doc_with_lines(1)
        line = doc.lines[0]
        a, b = line.original
        new = editor.insert_segment(doc, line, 1)
        assert line.original == [a, new, b]
        editor.move_segment(line, 1, 0)
        assert [id(s) for s in line.original] == [id(new), id(a), id(b)]

    def test_update_segment_keeps_begin_before_end(self, hello_doc):
        line = hello_doc.lines[0]
        editor.update_segment(line, 0, begin=Timestamp(700))
        assert line.original[0].begin == Timestamp(700)
        assert line.original[0].end == Timestamp(700)
        editor.update_segment(line, 0, end=Timestamp(900), text="Hi")
        assert (line.original[0].end, line.original[0].text) == (Timestamp(900), "Hi")
        editor.update_segment(line, 9, text="nope")


class TestTranslationWords:
    def test_add_and_set_word(self, hello_doc):
        line = hello_doc.lines[0]
        es = hello_doc.language_ids()[0]
        assert editor.add_translation_word(line, es) == 2
        editor.set_translation_word(line, es, 2, "!")
        assert line.translations[es] == ["Hola", "Mundo", "!"]
        editor.set_translation_word(line, es, 10, "x")
        assert editor.add_translation_word(line, uuid4(), "x") is None

    def test_remove_word_renumbers_associations(self, hello_doc):
        line = hello_doc.lines[0]
        es = hello_doc.language_ids()[0]
        editor.remove_translation_word(line, es, 0)
        assert line.translations[es] == ["Mundo"]
        assert line.original[0].translations[es] == []
        assert line.original[1].translations[es] == [0]

    def test_remove_word_shifts_only_higher_indices(self):
        doc = _doc_with_lines(1, 3)
        line = doc.lines[0]
        lang = editor.add_language(doc, "fr")
        other = editor.add_language(doc, "de")
        for w in "abcde":
            editor.add_translation_word(line, lang, w)
            editor.add_translation_word(line, other, w)
        line.original[0].translations[lang] = [0, 2, 4]
        line.original[1].translations[lang] = [1, 3]
        line.original[2].translations[lang] = [2]
        line.original[0].translations[other] = [3, 4]

        editor.remove_translation_word(line, lang, 2)

        assert line.translations[lang] == ["a", "b", "d", "e"]
        assert line.original[0].translations[lang] == [0, 3]
        assert line.original[1].translations[lang] == [1, 2]
        assert line.original[2].translations[lang] == []
        # other language untouched
        assert line.original[0].translations[other] == [3, 4]

    def test_remove_word_out_of_range_is_noop(self, hello_doc):
        line = hello_doc.lines[0]
        es = hello_doc.language_ids()[0]
        editor.remove_translation_word(line, es, 5)
        editor.remove_translation_word(line, uuid4(), 0)
        assert line.translations[es] == ["Hola", "Mundo"]
        assert line.original[1].translations[es] == [1]

    def test_toggle_is_idempotent(self, hello_doc):
        s = hello_doc.lines[0].original[0]
        es = hello_doc.language_ids()[0]
        editor.toggle_segment_word_association(s, es, 1, include=True)
        once = list(s.translations[es])
        editor.toggle_segment_word_association(s, es, 1, include=True)
        assert s.translations[es] == once == [0, 1]
        editor.toggle_segment_word_association(s, es, 0, include=False)
        editor.toggle_segment_word_association(s, es, 0, include=False)
        assert s.translations[es] == [1]

    def test_toggle_ignores_unknown_language_and_negative_index(self, hello_doc):
        s = hello_doc.lines[0].original[0]
        es = hello_doc.language_ids()[0]
        editor.toggle_segment_word_association(s, uuid4(), 0, include=True)
        editor.toggle_segment_word_association(s, es, -1, include=True)
        assert s.translations == {es: [0]}


class TestRepair:
    def test_repair_restores_entries(self, hello_doc):
        es = hello_doc.language_ids()[0]
        line = hello_doc.lines[0]
        stray = uuid4()
        del line.translations[es]
        line.original[0].translations[stray] = [0]
        line.original[1].translations[es] = [1, 1, -2]

        fixes = editor.repair(hello_doc)

        assert fixes == 4
        assert line.translations == {es: []}
        assert line.original[0].translations == {es: [0]}
        assert line.original[1].translations == {es: [1]}

    def test_repair_fixes_inverted_timing(self):
        doc = _doc_with_lines(1, 1)
        doc.lines[0].original[0].end = Timestamp(0)
        assert editor.repair(doc) == 1
        s = doc.lines[0].original[0]
        assert s.end == s.begin

    def test_repair_on_consistent_document_changes_nothing(self, hello_doc):
        assert editor.repair(hello_doc) == 0
