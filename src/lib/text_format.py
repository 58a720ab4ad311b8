"""
Text-format matcher

Symmetric delimiters (``**bold**``, ``_italic_``, ``~~strike~~``, ```code```)
in both directions:

    textFormats_import()       split a text node on delimited spans and style them
    textFormat_export()        wrap a styled text node in delimiters
    textFormat_applyShortcut() style text when a closing delimiter is typed

Import keeps an explicit worklist instead of recursing: each delimited span
is split out of its node, stripped of its tags, given the transformer's
flags (added to any flags the node already had, so ``**_x_**`` ends up bold
and italic), and queued again so nested delimiters still apply. Leftover
plain pieces go through the text-match matcher.
"""

from typing import Optional

from ..models.transformers import TextFormat
from .document import Node, is_text
from .log import LOG
from .registry import TextFormatIndex, TransformerRegistry
from .text_match import textMatches_import


def textFormats_import(text_node: Node, registry: TransformerRegistry) -> None:
    """
    Apply every text-format transformer to ``text_node`` and its pieces.

    Args:
        text_node: Text node attached to a block
        registry: Transformers to apply

    Example:
        "a **b** c" -> text "a ", text "b" {bold}, text " c"
    """
    index = registry.text_format_index
    worklist = [text_node]

    while worklist:
        node = worklist.pop()
        match = index.outermostMatch_find(node.text)
        if match is None:
            textMatches_import(node, registry.text_match)
            continue

        start, end = match.start(), match.end()
        pieces = node.split_text(start, end)
        if start == 0:
            leading = None
            current = pieces[0]
            remainder = pieces[1] if len(pieces) > 1 else None
        else:
            leading = pieces[0]
            current = pieces[1]
            remainder = pieces[2] if len(pieces) > 2 else None

        tag = match.group(1)
        current.set_text(match.group(2))
        current.format.update(index.transformers_byTag[tag].format)
        LOG(f"Matched {tag!r} span: {current.text!r}", level=3)

        pending = [leading, remainder]
        # code spans are verbatim
        if not current.has_format(TextFormat.CODE):
            pending.insert(1, current)
        worklist.extend(reversed([n for n in pending if n is not None]))


def textSibling_get(node: Node, backward: bool) -> Optional[Node]:
    """
    Nearest text node before/after ``node`` within the same block.

    Steps out of an enclosing inline element (a link) and into neighbouring
    ones, stopping at anything that is not inline text.
    """
    sibling = node.previous_sibling if backward else node.next_sibling
    if sibling is None:
        parent = node.parent
        if parent is not None and parent.is_inline():
            sibling = parent.previous_sibling if backward else parent.next_sibling

    while sibling is not None:
        if sibling.is_element():
            if not sibling.is_inline():
                return None
            descendant = sibling.descendant_last() if backward else sibling.descendant_first()
            if is_text(descendant):
                return descendant
            sibling = sibling.previous_sibling if backward else sibling.next_sibling
            continue
        return sibling if is_text(sibling) else None
    return None


def textFormat_export(node: Node, text_content: str, index: TextFormatIndex) -> str:
    """
    Wrap ``text_content`` in the tags of every flag ``node`` carries.

    A tag is only opened when the previous text sibling lacks the flag and
    only closed when the next one lacks it, so a style spanning several
    nodes is written once around all of them.

    Example:
        text "abc" {bold, italic} -> "***abc***"
    """
    output = text_content
    applied = set()
    for transformer in index.export_transformers:
        text_format = transformer.format[0]
        if not node.has_format(text_format) or text_format in applied:
            continue
        applied.add(text_format)
        previous_node = textSibling_get(node, backward=True)
        if previous_node is None or not previous_node.has_format(text_format):
            output = transformer.tag + output
        next_node = textSibling_get(node, backward=False)
        if next_node is None or not next_node.has_format(text_format):
            output += transformer.tag
    return output


def openTag_find(text: str, max_index: int, tag: str) -> int:
    """Last position before ``max_index`` where ``tag`` opens (not followed by whitespace)"""
    for start in range(max_index - len(tag), -1, -1):
        if text.startswith(tag, start) and not text[start + len(tag)].isspace():
            return start
    return -1


def textFormat_applyShortcut(text_node: Node, offset: int, registry: TransformerRegistry) -> bool:
    """
    Style text when the character just typed completes a closing tag.

    Args:
        text_node: Text node holding the caret
        offset: Caret offset, right after the typed character
        registry: Transformers to try

    Returns:
        True if a span was formatted

    Example:
        typing the last "*" of "hello **world**" -> "hello ", "world" {bold}
    """
    if text_node.has_format(TextFormat.CODE) or offset < 1:
        return False

    text = text_node.text
    close_char = text[offset - 1]
    for transformer in registry.text_format_byCloseChar.get(close_char, ()):
        tag = transformer.tag
        close_start = offset - len(tag)
        if close_start < 1 or text[close_start:offset] != tag:
            continue
        if text[close_start - 1].isspace():
            continue
        open_start = openTag_find(text, close_start, tag)
        if open_start < 0 or open_start + len(tag) == close_start:
            continue
        # a longer tag is still being typed
        if open_start > 0 and text[open_start - 1] == close_char:
            continue

        original_format = set(text_node.format)
        before = text[:open_start]
        inner = text[open_start + len(tag):close_start]
        after = text[offset:]
        text_node.set_text(before + inner + after)
        pieces = text_node.split_text(len(before), len(before) + len(inner))
        formatted = pieces[1] if before else pieces[0]
        formatted.format.update(transformer.format)

        if after:
            pieces[-1].select(0)
        else:
            # typing resumes in a new node with the flags the text had before
            formatted.parent.select(formatted.index_get() + 1, original_format)
        LOG(f"Shortcut {tag!r} formatted {inner!r}", level=2)
        return True
    return False
