"""
Text-match matcher

Asymmetric inline constructs such as ``[text](url)``:

    textMatches_import()      bulk import; every non-overlapping match of
                              ``import_reg_exp``, left to right
    textMatch_applyShortcut() live typing; the typed trigger character runs
                              the end-anchored ``reg_exp`` on the text before
                              the caret

In both cases the matched span is split into its own text node and handed
to the transformer's ``replace``, which swaps it for the constructed node.
The span node keeps the format of the text it was cut from, so a link typed
inside bold text gets bold link text.
"""

from typing import Iterable

from ..models.transformers import TextMatchTransformer
from .document import Node, is_text
from .log import LOG


def textMatches_import(text_node: Node, transformers: Iterable[TextMatchTransformer]) -> None:
    """
    Replace every match of the text-match transformers inside ``text_node``.

    The first transformer (in order) matching a node wins; the text before
    and after its match is queued and searched again with all transformers.

    Example:
        "see [docs](http://x) now" -> "see ", link("docs"), " now"
    """
    transformers = tuple(transformers)
    if not transformers:
        return

    worklist = [text_node]
    while worklist:
        node = worklist.pop()
        for transformer in transformers:
            match = transformer.import_reg_exp.search(node.text)
            if match is None:
                continue
            start, end = match.span()
            pieces = node.split_text(start, end)
            if start == 0:
                leading, replace_node, rest = None, pieces[0], pieces[1:]
            else:
                leading, replace_node, rest = pieces[0], pieces[1], pieces[2:]
            transformer.replace(replace_node, match)
            LOG(f"Imported text match {match.group(0)!r}", level=3)
            # leading piece is popped first, keeping left-to-right order
            worklist.extend(n for n in (rest[0] if rest else None, leading) if n is not None)
            break


def textMatch_applyShortcut(text_node: Node, offset: int, registry) -> bool:
    """
    Run the text-match transformers triggered by the character before ``offset``.

    Args:
        text_node: Text node holding the caret
        offset: Caret offset, right after the typed character
        registry: TransformerRegistry providing trigger lookups

    Returns:
        True if a span was replaced; the caret then sits after the new node
    """
    if offset < 1:
        return False
    text = text_node.text
    transformers = registry.text_match_byTrigger.get(text[offset - 1], ())
    text_before = text[:offset]

    for transformer in transformers:
        match = transformer.reg_exp.search(text_before)
        if match is None:
            continue
        start, end = match.span()
        pieces = text_node.split_text(start, end)
        replace_node = pieces[1] if start > 0 else pieces[0]
        parent = replace_node.parent
        index = replace_node.index_get()
        following = replace_node.next_sibling if end < len(text) else None

        transformer.replace(replace_node, match)
        if is_text(following):
            following.select(0)
        else:
            parent.select(index + 1)
        LOG(f"Shortcut replaced {match.group(0)!r}", level=2)
        return True
    return False
