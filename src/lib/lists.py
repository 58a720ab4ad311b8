"""
List merge/indent engine

Decides where an imported (or typed) list item lands and renders lists back
to Markdown.

Placement rules for a list-marker line:
    - indent = leading whitespace // list_indent_size
    - previous root block is a list of the same kind, or any list while
      indent > 0: the item joins that list
    - otherwise the line starts a new list; numbered lists keep the matched
      number as their start
    - nesting is structural: a deeper item goes into a list held by a
      wrapper item (a list item whose sole child is a list); the engine
      walks down trailing wrappers and creates the missing ones
    - indent jumps are clamped to one level below the last item, so the
      recorded indent and the tree depth always agree

Example:
    "- a\\n    - b" ->
        list(bullet)
         ├── listitem "a"
         └── listitem (wrapper)
              └── list(bullet)
                   └── listitem "b" (indent 1)
"""

from typing import Callable, List

from .document import (
    ListType,
    Node,
    create_list,
    create_list_item,
    is_list,
    is_list_item,
    is_nested_list_wrapper,
    settings_get,
)
from .log import LOG


def lastItem_depth(list_node: Node) -> int:
    """
    Nesting depth of the last content item of a list (-1 for an empty list)
    """
    depth = 0
    node = list_node
    while True:
        last = node.last_child
        if last is None:
            return depth - 1
        if is_nested_list_wrapper(last):
            node = last.first_child
            depth += 1
            continue
        return depth


def item_place(list_node: Node, list_item: Node, list_type: ListType, start: int, indent: int) -> int:
    """
    Append ``list_item`` to ``list_node`` at nesting level ``indent``.

    Args:
        list_node: Top-level list receiving the item
        list_item: Item to place
        list_type: Kind of list the item was written in
        start: Number matched in front of the item (numbered lists)
        indent: Requested nesting level

    Returns:
        Level the item was actually placed at
    """
    if settings_get().clamp_list_indent:
        clamped = min(indent, lastItem_depth(list_node) + 1)
        if clamped != indent:
            LOG(f"List indent {indent} clamped to {clamped}", level=3)
        indent = clamped

    current = list_node
    for level in range(1, indent + 1):
        wrapper = current.last_child
        inner = wrapper.first_child if is_nested_list_wrapper(wrapper) else None
        innermost = level == indent
        if inner is None or (innermost and inner.list_type is not list_type):
            inner = create_list(
                list_type if innermost else current.list_type,
                start if innermost else 1,
            )
            current.append(create_list_item().append(inner))
        current = inner

    current.append(list_item)
    list_item.set_indent(indent)
    return indent


def list_replace(list_type: ListType) -> Callable[..., None]:
    """
    Build the element ``replace`` for bulleted or numbered list lines.

    The returned function expects match group 1 to be the leading
    whitespace and, for numbered lists, group 2 to be the number.
    """

    def replace(parent_node: Node, children: List[Node], match, is_import: bool) -> None:
        indent = settings_get().indent_fromWhitespace(match.group(1))
        start = int(match.group(2)) if list_type is ListType.NUMBER else 1
        previous = parent_node.previous_sibling
        list_item = create_list_item()

        if is_list(previous) and (previous.list_type is list_type or indent > 0):
            target = previous
            parent_node.remove()
        else:
            target = create_list(list_type, start)
            parent_node.replace(target)

        item_place(target, list_item, list_type, start, indent)
        list_item.append(*children)
        list_item.select(0)

    return replace


def list_export(list_node: Node, export_children: Callable[[Node], str], depth: int = 0) -> str:
    """
    Render a list, one line per content item.

    Wrapper items recurse one level deeper and do not advance the ordinal.

    Example:
        numbered list starting at 5 with items a, b -> "5. a\\n6. b"
    """
    output = []
    index = 0
    for list_item in list_node.children:
        if not is_list_item(list_item):
            continue
        if is_nested_list_wrapper(list_item):
            output.append(list_export(list_item.first_child, export_children, depth + 1))
            continue
        indent = settings_get().indent_toWhitespace(depth)
        if list_node.list_type is ListType.NUMBER:
            prefix = f"{list_node.start + index}. "
        else:
            prefix = "- "
        output.append(indent + prefix + export_children(list_item))
        index += 1
    return "\n".join(output)
