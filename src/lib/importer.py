"""
Block importer: Markdown text -> document tree

The importer is line oriented:

1. A fence line (```` ``` ```` with an optional language) opens a code
   block. Lines up to the closing fence are copied verbatim and no other
   transformer sees them. An unterminated fence runs to the end of input.
2. Any other line becomes a paragraph holding one text node. Element
   transformers are tried in order; the first whose pattern matches gets the
   text after the matched prefix and rebuilds the paragraph into its block
   (heading, quote, list item ...).
3. The line's text node is then run through the text-format matcher, whose
   plain leftovers go through the text-match matcher.

A blank line becomes an empty paragraph so it separates what comes before
from what comes after (two lists around a blank line stay two lists); empty
paragraphs are dropped once the whole input is read.

Example:
    >>> editor = Editor()
    >>> with editor.update():
    ...     convert_from_markdown_string("# Title\\n\\n- **a**\\n- b")
    >>> [child.kind.value for child in editor.root.children]
    ['heading', 'list']
"""

import re
from typing import List, Optional

from .document import (
    Editor,
    Node,
    active_editor,
    create_code,
    create_paragraph,
    create_text,
    is_code,
    is_paragraph,
    is_text,
)
from .log import LOG
from .registry import TransformerRegistry, TransformersArg, registry_resolve
from .text_format import textFormats_import

CODE_BLOCK_OPEN = re.compile(r"^```(\w{1,10})?\s?$")
CODE_BLOCK_CLOSE = re.compile(r"^```\s*$")
LINE_SPLIT = re.compile(r"\r?\n")


class MarkdownImporter:
    """
    Imports Markdown into an editor's root using a transformer registry

    Attributes:
        registry: Transformers to apply, in precedence order
    """

    def __init__(self, registry: TransformerRegistry) -> None:
        self.registry = registry

    def markdown_import(self, markdown: str, editor: Editor) -> None:
        """
        Replace the editor's document with the contents of ``markdown``.

        Args:
            markdown: Markdown source
            editor: Editor whose root is rebuilt; must be inside update()
        """
        root = editor.root
        root.clear()
        lines = LINE_SPLIT.split(markdown)
        LOG(f"Importing {len(lines)} lines", level=2)

        index = 0
        while index < len(lines):
            consumed = self.codeBlock_import(lines, index, root)
            if consumed:
                index += consumed
                continue
            self.line_import(lines[index], root)
            index += 1

        self.emptyParagraphs_remove(root)
        self.documentEnd_select(editor)
        LOG(f"Imported {root.children_size} blocks", level=2)

    def codeBlock_import(self, lines: List[str], start: int, root: Node) -> int:
        """
        Import a fenced code block starting at ``lines[start]``.

        Returns:
            Number of lines consumed (0 if the line does not open a fence)
        """
        match = CODE_BLOCK_OPEN.match(lines[start])
        if match is None:
            return 0

        end = start + 1
        while end < len(lines) and not CODE_BLOCK_CLOSE.match(lines[end]):
            end += 1

        code_node = create_code(match.group(1))
        content = "\n".join(lines[start + 1:end])
        if content:
            code_node.append(create_text(content))
        root.append(code_node)

        if end >= len(lines):
            LOG(f"Unterminated code fence at line {start + 1}", level=2)
            return end - start
        return end - start + 1

    def line_import(self, line: str, root: Node) -> Optional[Node]:
        """
        Import one non-fence line as a block.

        Returns:
            The line's text node (None for a blank line)
        """
        paragraph = create_paragraph()
        root.append(paragraph)
        if not line.strip():
            return None

        text_node = create_text(line)
        paragraph.append(text_node)

        for transformer in self.registry.element:
            match = transformer.reg_exp.search(line)
            if match is None:
                continue
            text_node.set_text(line[match.end():])
            transformer.replace(paragraph, [text_node], match, True)
            break

        # one-line fences ("```js code") keep their content verbatim
        if not is_code(text_node.parent):
            textFormats_import(text_node, self.registry)
        return text_node

    @staticmethod
    def emptyParagraphs_remove(root: Node) -> None:
        for child in list(root.children):
            if is_paragraph(child) and child.children_size == 0:
                child.remove()

    @staticmethod
    def documentEnd_select(editor: Editor) -> None:
        """Put the caret at the end of the document"""
        leaf = editor.root.descendant_last()
        if leaf is None:
            editor.selection = None
        elif is_text(leaf):
            leaf.select_end()
        elif leaf.is_element():
            leaf.select(0)
        else:
            leaf.parent.select(leaf.parent.children_size)


def convert_from_markdown_string(markdown: str, transformers: TransformersArg = None) -> None:
    """
    Replace the active editor's document with ``markdown``.

    Must run inside ``Editor.update()``; if a transformer raises, the update
    restores the previous document.

    Args:
        markdown: Markdown source
        transformers: TransformerRegistry, transformer list, or None for the
                      standard set

    Raises:
        RuntimeError: Outside an editor update
        ConfigurationError: If ``transformers`` is not a valid list
    """
    editor = active_editor()
    registry = registry_resolve(transformers)
    MarkdownImporter(registry).markdown_import(markdown, editor)
