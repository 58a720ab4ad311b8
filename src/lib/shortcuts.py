"""
Markdown shortcuts while typing

register_shortcuts() listens to an editor's text insertions. After every
single typed character (outside code blocks) it tries, in order:

    1. element transformers     "# " at the start of a paragraph -> heading
    2. text-match transformers  ")" closing "[a](b" -> link
    3. text-format transformers closing "**" of "**bold**" -> bold text

and applies the first one that matches. Each attempt runs inside an editor
update, so a failing transformer leaves the typed text as it was.
"""

from typing import Callable

from .document import (
    Editor,
    Node,
    TextInsertion,
    is_code,
    is_paragraph,
    is_root,
    is_text,
)
from .log import LOG
from .registry import TransformerRegistry, TransformersArg, registry_resolve
from .text_format import textFormat_applyShortcut
from .text_match import textMatch_applyShortcut


def element_applyShortcut(
    paragraph: Node, text_node: Node, offset: int, registry: TransformerRegistry
) -> bool:
    """
    Turn a paragraph into a block when its leading marker is completed by a space.

    Only fires when the caret sits in the paragraph's first text node and the
    pattern matches exactly the text before the caret.
    """
    if not is_paragraph(paragraph) or not is_root(paragraph.parent):
        return False
    if paragraph.first_child is not text_node or text_node.text[offset - 1] != " ":
        return False

    text_before = text_node.text[:offset]
    for transformer in registry.element:
        match = transformer.reg_exp.search(text_before)
        if match is None or match.start() != 0 or match.end() != offset:
            continue
        remaining = text_node.text[offset:]
        if remaining:
            text_node.set_text(remaining)
            children = [text_node, *text_node.next_siblings()]
        else:
            text_node.remove()
            children = list(paragraph.children)
        transformer.replace(paragraph, children, match, False)
        LOG(f"Shortcut {match.group(0)!r} converted paragraph", level=2)
        return True
    return False


def register_shortcuts(editor: Editor, transformers: TransformersArg = None) -> Callable[[], None]:
    """
    Apply Markdown shortcuts to text typed into ``editor``.

    Args:
        editor: Editor to watch
        transformers: TransformerRegistry, transformer list, or None for the
                      standard set

    Returns:
        Function detaching the shortcuts again

    Raises:
        ConfigurationError: If ``transformers`` is not a valid list

    Example:
        >>> editor = Editor()
        >>> unregister = register_shortcuts(editor)
        >>> for ch in "# Title":
        ...     editor.insert_text(ch)
        >>> editor.root.first_child.kind.value
        'heading'
        >>> unregister()
    """
    registry = registry_resolve(transformers)

    def textInsertion_handle(event: TextInsertion) -> None:
        node, offset = event.node, event.offset
        if len(event.text) != 1 or not is_text(node) or node.parent is None:
            return
        parent = node.parent
        if is_code(parent):
            return
        if element_applyShortcut(parent, node, offset, registry):
            return
        if textMatch_applyShortcut(node, offset, registry):
            return
        textFormat_applyShortcut(node, offset, registry)

    return editor.register_text_listener(textInsertion_handle)
