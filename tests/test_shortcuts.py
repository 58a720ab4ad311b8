"""
Markdown shortcut tests

Types text one character at a time into an editor with shortcuts
registered and checks the resulting document.
"""

from mdtransform.lib.document import Editor, ListType, NodeKind, is_code, is_link, is_text
from mdtransform.lib.exporter import convert_to_markdown_string
from mdtransform.lib.shortcuts import register_shortcuts
from mdtransform.lib.transformers import HEADING
from mdtransform.models.transformers import TextFormat


def type_text(editor: Editor, text: str) -> None:
    for ch in text:
        editor.insert_text(ch)


def shortcut_editor(transformers=None):
    editor = Editor()
    unregister = register_shortcuts(editor, transformers)
    return editor, unregister


def exported(editor: Editor) -> str:
    with editor.read():
        return convert_to_markdown_string()


class TestElementShortcuts:
    """Block markers followed by a space rebuild the paragraph"""

    def test_heading(self):
        editor, _ = shortcut_editor()
        type_text(editor, "## Hi")

        heading = editor.root.first_child
        assert heading.kind is NodeKind.HEADING
        assert heading.level == 2
        assert heading.text_content() == "Hi"

    def test_quote(self):
        editor, _ = shortcut_editor()
        type_text(editor, "> said")
        assert editor.root.first_child.kind is NodeKind.QUOTE
        assert exported(editor) == "> said"

    def test_bullet_list(self):
        editor, _ = shortcut_editor()
        type_text(editor, "- a")

        list_node = editor.root.first_child
        assert list_node.kind is NodeKind.LIST
        assert list_node.list_type is ListType.BULLET
        assert list_node.first_child.text_content() == "a"

    def test_numbered_list_start(self):
        editor, _ = shortcut_editor()
        type_text(editor, "5. five")

        list_node = editor.root.first_child
        assert list_node.list_type is ListType.NUMBER
        assert list_node.start == 5
        assert exported(editor) == "5. five"

    def test_marker_without_space(self):
        editor, _ = shortcut_editor()
        type_text(editor, "#tag")
        assert editor.root.first_child.kind is NodeKind.PARAGRAPH
        assert editor.root.text_content() == "#tag"

    def test_marker_mid_paragraph(self):
        editor, _ = shortcut_editor()
        type_text(editor, "a # b")
        assert editor.root.first_child.kind is NodeKind.PARAGRAPH


class TestTextMatchShortcuts:
    """Typing the trigger character completes a link"""

    def test_link(self):
        editor, _ = shortcut_editor()
        type_text(editor, "see [a](b)")

        paragraph = editor.root.first_child
        link = paragraph.children[1]
        assert is_link(link)
        assert link.url == "b"
        assert link.text_content() == "a"

    def test_typing_after_link(self):
        """The caret lands after the link; new text is a plain sibling"""
        editor, _ = shortcut_editor()
        type_text(editor, "[a](b) x")

        paragraph = editor.root.first_child
        assert [c.kind for c in paragraph.children] == [NodeKind.LINK, NodeKind.TEXT]
        assert paragraph.children[1].text == " x"
        assert exported(editor) == "[a](b) x"

    def test_paren_without_link(self):
        editor, _ = shortcut_editor()
        type_text(editor, "f(x)")
        assert editor.root.text_content() == "f(x)"
        assert all(is_text(c) for c in editor.root.first_child.children)


class TestTextFormatShortcuts:
    """Typing a closing tag styles the enclosed text"""

    def test_bold(self):
        editor, _ = shortcut_editor()
        type_text(editor, "**bold**")

        first = editor.root.first_child.first_child
        assert first.text == "bold"
        assert first.format == {TextFormat.BOLD}
        assert exported(editor) == "**bold**"

    def test_no_empty_text_left_behind(self):
        """Closing a span at the end leaves only the styled node"""
        editor, _ = shortcut_editor()
        type_text(editor, "**bold**")

        paragraph = editor.root.first_child
        assert paragraph.children_size == 1
        assert paragraph.to_dict()["children"] == [{"kind": "text", "text": "bold", "format": ["bold"]}]
        assert editor.selection.node is paragraph
        assert editor.selection.offset == 1

    def test_typing_after_span_starts_new_node(self):
        """Text typed after a closed span keeps the flags from before the span"""
        editor, _ = shortcut_editor()
        type_text(editor, "**a** b")

        texts = [(c.text, c.format) for c in editor.root.first_child.children]
        assert texts == [("a", {TextFormat.BOLD}), (" b", set())]
        assert exported(editor) == "**a** b"

    def test_italic_inside_sentence(self):
        editor, _ = shortcut_editor()
        type_text(editor, "a *b* c")

        texts = [(c.text, c.format) for c in editor.root.first_child.children]
        assert texts == [("a ", set()), ("b", {TextFormat.ITALIC}), (" c", set())]

    def test_typing_resumes_unstyled(self):
        editor, _ = shortcut_editor()
        type_text(editor, "~~x~~y")

        children = editor.root.first_child.children
        assert children[0].format == {TextFormat.STRIKETHROUGH}
        assert children[-1].text == "y"
        assert children[-1].format == set()

    def test_empty_span_not_styled(self):
        editor, _ = shortcut_editor()
        type_text(editor, "a ** b")
        assert editor.root.text_content() == "a ** b"

    def test_inline_code(self):
        editor, _ = shortcut_editor()
        type_text(editor, "`x`")
        assert editor.root.first_child.first_child.format == {TextFormat.CODE}


class TestRegistration:
    """Shortcuts apply only while registered, and only where allowed"""

    def test_unregister(self):
        editor, unregister = shortcut_editor()
        unregister()
        type_text(editor, "# a")
        assert editor.root.first_child.kind is NodeKind.PARAGRAPH
        assert editor.root.text_content() == "# a"

    def test_code_block_content_verbatim(self):
        editor, _ = shortcut_editor()
        type_text(editor, "``` ")
        assert is_code(editor.root.first_child)

        type_text(editor, "**a** [b](c)")
        code = editor.root.first_child
        assert code.children_size == 1
        assert code.first_child.text == "**a** [b](c)"
        assert code.first_child.format == set()

    def test_custom_transformers(self):
        editor, _ = shortcut_editor([HEADING])
        type_text(editor, "- **a**")
        assert editor.root.first_child.kind is NodeKind.PARAGRAPH
        assert editor.root.text_content() == "- **a**"

    def test_multi_character_insert_ignored(self):
        editor, _ = shortcut_editor()
        editor.insert_text("# a")
        assert editor.root.first_child.kind is NodeKind.PARAGRAPH
