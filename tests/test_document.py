"""
Document tree tests

Tests tree traversal, format flags, inline line breaks and per-editor
settings.
"""

from mdtransform.config import AppSettings
from mdtransform.lib.document import (
    Editor,
    NodeKind,
    create_linebreak,
    create_link,
    create_paragraph,
    create_text,
    is_linebreak,
    settings_get,
)
from mdtransform.lib.exporter import convert_to_markdown_string
from mdtransform.lib.importer import convert_from_markdown_string
from mdtransform.models.transformers import TextFormat


class TestWalk:
    """Depth-first pre-order traversal"""

    def test_order(self):
        editor = Editor()
        with editor.update():
            convert_from_markdown_string("# a\n- b\n    - c")

        kinds = [node.kind for node in editor.root.walk()]
        assert kinds == [
            NodeKind.ROOT,
            NodeKind.HEADING, NodeKind.TEXT,
            NodeKind.LIST,
            NodeKind.LIST_ITEM, NodeKind.TEXT,
            NodeKind.LIST_ITEM, NodeKind.LIST, NodeKind.LIST_ITEM, NodeKind.TEXT,
        ]

    def test_leaf(self):
        text = create_text("x")
        assert list(text.walk()) == [text]


class TestFormatFlags:
    """Flags on text nodes"""

    def test_toggle_format(self):
        text = create_text("x")

        text.toggle_format(TextFormat.BOLD).toggle_format(TextFormat.ITALIC)
        assert text.format == {TextFormat.BOLD, TextFormat.ITALIC}

        text.toggle_format(TextFormat.BOLD)
        assert text.format == {TextFormat.ITALIC}
        assert not text.has_format(TextFormat.BOLD)

    def test_toggled_format_exported(self):
        editor = Editor()
        with editor.update():
            text = create_text("x")
            editor.root.append(create_paragraph().append(create_text("a "), text))
            text.toggle_format(TextFormat.STRIKETHROUGH)
            assert convert_to_markdown_string() == "a ~~x~~"


class TestLineBreaks:
    """Line breaks inside a block"""

    def build(self, editor: Editor, *children):
        with editor.update():
            editor.root.append(create_paragraph().append(*children))

    def test_export(self):
        editor = Editor()
        self.build(editor, create_text("a"), create_linebreak(), create_text("b"))

        paragraph = editor.root.first_child
        assert is_linebreak(paragraph.children[1])
        assert paragraph.text_content() == "a\nb"
        with editor.read():
            assert convert_to_markdown_string() == "a\nb"

    def test_styles_close_at_break(self):
        """A break is not text, so a style on both sides is written twice"""
        editor = Editor()
        self.build(
            editor,
            create_text("a", [TextFormat.BOLD]),
            create_linebreak(),
            create_text("b", [TextFormat.BOLD]),
        )
        with editor.read():
            assert convert_to_markdown_string() == "**a**\n**b**"

    def test_break_inside_link(self):
        editor = Editor()
        self.build(editor, create_link("u").append(create_text("a"), create_linebreak(), create_text("b")))
        assert editor.root.text_content() == "a\nb"
        with editor.read():
            assert convert_to_markdown_string() == "[a\nb](u)"

    def test_break_is_leaf(self):
        node = create_linebreak()
        assert not node.is_element()
        assert node.to_dict() == {"kind": "linebreak"}


class TestEditorSettings:
    """Each editor converts with its own settings"""

    def test_default_settings(self):
        editor = Editor()
        with editor.read():
            assert settings_get() is editor.settings
        assert settings_get().list_indent_size == 4

    def test_independent_indent_width(self):
        narrow = Editor(AppSettings(list_indent_size=2))
        wide = Editor()
        for editor in (narrow, wide):
            with editor.update():
                convert_from_markdown_string("- a\n  - b")

        assert narrow.root.first_child.children_size == 2
        assert narrow.root.first_child.children[1].first_child.kind is NodeKind.LIST
        assert wide.root.first_child.children_size == 2
        assert wide.root.first_child.children[1].text_content() == "b"
        assert wide.root.first_child.children[1].indent == 0

        with narrow.read():
            assert convert_to_markdown_string() == "- a\n  - b"
        with wide.read():
            assert convert_to_markdown_string() == "- a\n- b"

    def test_list_separation_per_editor(self):
        joined = Editor(AppSettings(separate_adjacent_lists=False))
        with joined.update():
            convert_from_markdown_string("- a\n\n- b")
            assert convert_to_markdown_string() == "- a\n- b"

        separated = Editor()
        with separated.update():
            convert_from_markdown_string("- a\n\n- b")
            assert convert_to_markdown_string() == "- a\n\n- b"
