"""
Standard transformers

The default rule set, in precedence order:

    element:     CODE, HEADING, QUOTE, UNORDERED_LIST, ORDERED_LIST
    text-format: INLINE_CODE, BOLD_ITALIC_STAR, BOLD_ITALIC_UNDERSCORE,
                 BOLD_STAR, BOLD_UNDERSCORE, STRIKETHROUGH,
                 ITALIC_STAR, ITALIC_UNDERSCORE
    text-match:  LINK

Inline code goes first since nothing is transformed inside it; longer
delimiters go before shorter ones built from the same character.

All values are frozen, so TRANSFORMERS is a default configuration value a
caller can pass, slice or extend, not shared mutable state.
"""

import re
from typing import Callable, List, Optional

from ..models.transformers import (
    ElementTransformer,
    TextFormat,
    TextFormatTransformer,
    TextMatchTransformer,
)
from .document import (
    ListType,
    Node,
    create_code,
    create_heading,
    create_link,
    create_quote,
    create_text,
    is_code,
    is_heading,
    is_link,
    is_list,
    is_quote,
    is_text,
)
from .lists import list_export, list_replace


def block_replaceWith(create_node: Callable[[re.Match], Node]) -> Callable[..., None]:
    """
    Build an element ``replace`` that swaps the line's paragraph for a new
    block and moves the line's children into it.
    """

    def replace(parent_node: Node, children: List[Node], match: re.Match, is_import: bool) -> None:
        node = create_node(match)
        node.append(*children)
        parent_node.replace(node)
        node.select(0)

    return replace


def heading_export(node: Node, export_children: Callable[[Node], str]) -> Optional[str]:
    if not is_heading(node):
        return None
    return "#" * node.level + " " + export_children(node)


def quote_export(node: Node, export_children: Callable[[Node], str]) -> Optional[str]:
    return "> " + export_children(node) if is_quote(node) else None


def code_export(node: Node, export_children: Callable[[Node], str]) -> Optional[str]:
    if not is_code(node):
        return None
    text_content = node.text_content()
    return (
        "```"
        + (node.language or "")
        + ("\n" + text_content if text_content else "")
        + "\n"
        + "```"
    )


def lists_export(node: Node, export_children: Callable[[Node], str]) -> Optional[str]:
    return list_export(node, export_children) if is_list(node) else None


def link_replace(text_node: Node, match: re.Match) -> None:
    link_text, link_url = match.group(1), match.group(2)
    link_node = create_link(link_url)
    link_node.append(create_text(link_text, text_node.format))
    text_node.replace(link_node)


def link_export(
    node: Node,
    export_children: Callable[[Node], str],
    export_format: Callable[[Node, str], str],
) -> Optional[str]:
    if not is_link(node):
        return None
    link_content = f"[{node.text_content()}]({node.url})"
    first_child = node.first_child
    # Markdown cannot express several styles inside one link, so only a
    # single text child has its style carried over
    if node.children_size == 1 and is_text(first_child):
        return export_format(first_child, link_content)
    return link_content


HEADING = ElementTransformer(
    reg_exp=re.compile(r"^(#{1,6})\s"),
    replace=block_replaceWith(lambda match: create_heading(len(match.group(1)))),
    export=heading_export,
)

QUOTE = ElementTransformer(
    reg_exp=re.compile(r"^>\s"),
    replace=block_replaceWith(lambda match: create_quote()),
    export=quote_export,
)

CODE = ElementTransformer(
    reg_exp=re.compile(r"^```(\w{1,10})?\s"),
    replace=block_replaceWith(lambda match: create_code(match.group(1) if match else None)),
    export=code_export,
)

UNORDERED_LIST = ElementTransformer(
    reg_exp=re.compile(r"^(\s*)[-*+]\s"),
    replace=list_replace(ListType.BULLET),
    export=lists_export,
)

ORDERED_LIST = ElementTransformer(
    reg_exp=re.compile(r"^(\s*)(\d{1,})\.\s"),
    replace=list_replace(ListType.NUMBER),
    export=lists_export,
)

INLINE_CODE = TextFormatTransformer(tag="`", format=[TextFormat.CODE])

BOLD_ITALIC_STAR = TextFormatTransformer(tag="***", format=[TextFormat.BOLD, TextFormat.ITALIC])

BOLD_ITALIC_UNDERSCORE = TextFormatTransformer(tag="___", format=[TextFormat.BOLD, TextFormat.ITALIC])

BOLD_STAR = TextFormatTransformer(tag="**", format=[TextFormat.BOLD])

BOLD_UNDERSCORE = TextFormatTransformer(tag="__", format=[TextFormat.BOLD])

STRIKETHROUGH = TextFormatTransformer(tag="~~", format=[TextFormat.STRIKETHROUGH])

ITALIC_STAR = TextFormatTransformer(tag="*", format=[TextFormat.ITALIC])

ITALIC_UNDERSCORE = TextFormatTransformer(tag="_", format=[TextFormat.ITALIC])

LINK = TextMatchTransformer(
    trigger=")",
    reg_exp=re.compile(r"(?:\[([^\[]+)\])(?:\(([^\(]+)\))$"),
    import_reg_exp=re.compile(r"(?:\[([^\[]+)\])(?:\(([^\(]+)\))"),
    replace=link_replace,
    export=link_export,
)

ELEMENT_TRANSFORMERS = (CODE, HEADING, QUOTE, UNORDERED_LIST, ORDERED_LIST)

TEXT_FORMAT_TRANSFORMERS = (
    INLINE_CODE,
    BOLD_ITALIC_STAR,
    BOLD_ITALIC_UNDERSCORE,
    BOLD_STAR,
    BOLD_UNDERSCORE,
    STRIKETHROUGH,
    ITALIC_STAR,
    ITALIC_UNDERSCORE,
)

TEXT_MATCH_TRANSFORMERS = (LINK,)

TRANSFORMERS = ELEMENT_TRANSFORMERS + TEXT_FORMAT_TRANSFORMERS + TEXT_MATCH_TRANSFORMERS
