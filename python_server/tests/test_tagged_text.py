"""Tests for the tagged-block writer and reader."""

import pytest

from matchrecorder.persistence.tagged_text import (
    RecordingFormatError,
    TagWriter,
    escape,
    parse_tagged,
    unescape,
)


class TestTagWriter:
    def test_nested_blocks_are_indented(self):
        w = TagWriter()
        w.open("tick")
        w.value("netid", 3)
        w.close("tick")
        assert w.getvalue() == "<tick>\n  <netid>3</netid>\n</tick>\n"

    def test_values_are_escaped(self):
        w = TagWriter()
        w.value("name", "<Sir & Knight>")
        assert w.getvalue() == "<name>&lt;Sir &amp; Knight&gt;</name>\n"

    def test_mismatched_close_raises(self):
        w = TagWriter()
        w.open("a")
        with pytest.raises(ValueError):
            w.close("b")

    def test_unclosed_block_raises(self):
        w = TagWriter()
        w.open("a")
        with pytest.raises(ValueError):
            w.getvalue()


class TestEscaping:
    def test_roundtrip(self):
        text = "a<b>&c&amp;"
        assert unescape(escape(text)) == text


class TestParseTagged:
    def test_leaf_and_container(self):
        root = parse_tagged("<a>\n  <b>1</b>\n  <c>x y</c>\n</a>\n")
        assert root.tag == "a"
        assert [c.tag for c in root.children] == ["b", "c"]
        assert root.children[1].text == "x y"

    def test_cursor_reads_in_order(self):
        c = parse_tagged("<a><b>1</b><c>2.5</c></a>").cursor()
        assert c.int_value("b") == 1
        assert c.float_value("c") == pytest.approx(2.5)
        c.finish()

    def test_cursor_rejects_out_of_order(self):
        c = parse_tagged("<a><c>1</c><b>2</b></a>").cursor()
        with pytest.raises(RecordingFormatError, match="Expected <b>"):
            c.int_value("b")

    def test_cursor_optional(self):
        c = parse_tagged("<a><b>1</b></a>").cursor()
        assert c.take_optional("x") is None
        assert c.take_optional("b") is not None

    def test_finish_rejects_leftovers(self):
        c = parse_tagged("<a><b>1</b></a>").cursor()
        with pytest.raises(RecordingFormatError, match="Unexpected <b>"):
            c.finish()

    def test_empty_container(self):
        root = parse_tagged("<a>\n  <tick>\n  </tick>\n</a>")
        assert root.children[0].all("blobdata") == []

    def test_all_rejects_foreign_tags(self):
        root = parse_tagged("<a><tick></tick><oops>1</oops></a>")
        with pytest.raises(RecordingFormatError):
            root.all("tick")

    def test_bad_integer(self):
        c = parse_tagged("<a><b>x</b></a>").cursor()
        with pytest.raises(RecordingFormatError, match="not an integer"):
            c.int_value("b")

    @pytest.mark.parametrize("text", [
        "<a><b>1</a>",
        "<a>1</b>",
        "<a></a><b></b>",
        "",
        "junk<a></a>",
        "<a><b>1</b>junk</a>",
        "<a></a>junk",
    ])
    def test_malformed(self, text):
        with pytest.raises(RecordingFormatError):
            parse_tagged(text)

    def test_escaped_leaf_text(self):
        root = parse_tagged("<a>&lt;x&gt; &amp; y</a>")
        assert root.text == "<x> & y"
