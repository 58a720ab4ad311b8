"""
Inline matcher tests

Tests the text-format matcher (symmetric delimiters) and the text-match
matcher (links) on import, and their export counterparts.
"""

import pytest

from mdtransform.lib.document import Editor, is_link, is_text
from mdtransform.lib.exporter import convert_to_markdown_string
from mdtransform.lib.importer import convert_from_markdown_string
from mdtransform.models.transformers import TextFormat

BOLD, ITALIC, CODE, STRIKE = TextFormat.BOLD, TextFormat.ITALIC, TextFormat.CODE, TextFormat.STRIKETHROUGH


def inline_import(markdown: str):
    """Import a single line and return its block's children"""
    editor = Editor()
    with editor.update():
        convert_from_markdown_string(markdown)
    return editor.root.first_child.children


def roundtrip(markdown: str) -> str:
    editor = Editor()
    with editor.update():
        convert_from_markdown_string(markdown)
    with editor.read():
        return convert_to_markdown_string()


class TestTextFormatImport:
    """Delimited spans become styled text nodes"""

    def test_bold_splits_run(self):
        """Prefix and suffix stay plain around the styled span"""
        children = inline_import("a **b** c")

        assert [c.text for c in children] == ["a ", "b", " c"]
        assert [c.format for c in children] == [set(), {BOLD}, set()]

    @pytest.mark.parametrize(
        "source, expected",
        [
            ("**x**", {BOLD}),
            ("__x__", {BOLD}),
            ("*x*", {ITALIC}),
            ("_x_", {ITALIC}),
            ("~~x~~", {STRIKE}),
            ("`x`", {CODE}),
        ],
    )
    def test_single_styles(self, source, expected):
        children = inline_import(source)
        assert len(children) == 1
        assert children[0].text == "x"
        assert children[0].format == expected

    def test_triple_star_is_one_node(self):
        """'***' wins over '**' and '*': one node, bold and italic"""
        children = inline_import("***abc***")

        assert len(children) == 1
        assert children[0].text == "abc"
        assert children[0].format == {BOLD, ITALIC}

    def test_triple_underscore(self):
        children = inline_import("___abc___")
        assert children[0].format == {BOLD, ITALIC}

    def test_nested_styles_union(self):
        """Inner delimiters add to the enclosing span's flags"""
        children = inline_import("**bold _both_**")

        assert [c.text for c in children] == ["bold ", "both"]
        assert children[0].format == {BOLD}
        assert children[1].format == {BOLD, ITALIC}

    def test_inline_code_is_verbatim(self):
        """Nothing inside inline code is transformed"""
        children = inline_import("`**x** [a](b)`")

        assert len(children) == 1
        assert children[0].text == "**x** [a](b)"
        assert children[0].format == {CODE}

    def test_several_spans(self):
        children = inline_import("*a* and ~~b~~")
        assert [c.text for c in children] == ["a", " and ", "b"]
        assert children[0].format == {ITALIC}
        assert children[2].format == {STRIKE}

    @pytest.mark.parametrize("source", ["**unclosed", "2 * 3 * 4", "** spaced **", "****"])
    def test_unmatched_stays_plain(self, source):
        """Delimiters that do not pair up are left as text"""
        children = inline_import(source)
        assert len(children) == 1
        assert children[0].text == source
        assert children[0].format == set()


class TestTextMatchImport:
    """Links found with the bulk-import pattern"""

    def test_link(self):
        children = inline_import("[x](http://e)")

        assert len(children) == 1
        link = children[0]
        assert is_link(link)
        assert link.url == "http://e"
        assert link.text_content() == "x"

    def test_links_left_to_right(self):
        """Every non-overlapping match is replaced, in order"""
        children = inline_import("see [a](u) and [b](v)!")

        assert [c.kind.value for c in children] == ["text", "link", "text", "link", "text"]
        assert children[0].text == "see "
        assert children[1].url == "u"
        assert children[2].text == " and "
        assert children[3].url == "v"
        assert children[4].text == "!"

    def test_link_inherits_style(self):
        """Link text keeps the style of the span it was cut from"""
        children = inline_import("**[x](http://e)**")

        link = children[0]
        assert is_link(link)
        assert link.first_child.format == {BOLD}

    def test_link_inside_styled_span(self):
        children = inline_import("_go [here](/x) now_")
        assert is_text(children[0])
        assert is_link(children[1])
        assert children[1].first_child.format == {ITALIC}


class TestInlineExport:
    """Styled text and links written back"""

    @pytest.mark.parametrize(
        "source",
        [
            "a **b** c",
            "*it*",
            "~~gone~~",
            "`code`",
            "***abc***",
            "[x](http://e)",
            "**[x](http://e)**",
            "see [a](u) and [b](v)",
        ],
    )
    def test_roundtrip(self, source):
        assert roundtrip(source) == source

    def test_underscore_styles_export_with_stars(self):
        """Export uses the first single-flag tag for each flag"""
        assert roundtrip("__b__ _i_") == "**b** *i*"

    def test_style_spanning_link_written_once(self):
        """A style shared by text and link text opens and closes once"""
        assert roundtrip("**a [x](u)**") == "**a [x](u)**"
