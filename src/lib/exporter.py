"""
Exporter: document tree -> Markdown text

Each root block is offered to the element transformers' ``export`` in
order; the first non-None result wins. Blocks no transformer claims
(paragraphs) export their inline children.

Inline children are offered to the text-match transformers first (links);
otherwise text is wrapped in the tags of its style flags, line breaks become
newlines and other inline elements export their own children.

Blocks are joined with single newlines. Two adjacent lists of the same kind
get a blank line between them, otherwise importing the result would merge
them into one list.
"""

from typing import List, Optional

from .document import Node, active_editor, is_linebreak, is_list, is_text, settings_get
from .log import LOG
from .registry import TransformerRegistry, TransformersArg, registry_resolve
from .text_format import textFormat_export


class MarkdownExporter:
    """
    Exports a document tree to Markdown using a transformer registry
    """

    def __init__(self, registry: TransformerRegistry) -> None:
        self.registry = registry

    def markdown_export(self, root: Node) -> str:
        output: List[str] = []
        previous: Optional[Node] = None

        for child in root.children:
            result = self.topLevel_export(child)
            if result is None:
                continue
            if output and self.lists_needSeparation(previous, child):
                output.append("")
            output.append(result)
            previous = child

        LOG(f"Exported {len(output)} blocks", level=2)
        return "\n".join(output)

    @staticmethod
    def lists_needSeparation(previous: Optional[Node], current: Node) -> bool:
        return (
            settings_get().separate_adjacent_lists
            and is_list(previous)
            and is_list(current)
            and previous.list_type is current.list_type
        )

    def topLevel_export(self, node: Node) -> Optional[str]:
        for transformer in self.registry.element:
            result = transformer.export(node, self.children_export)
            if result is not None:
                return result
        if node.is_element():
            return self.children_export(node)
        return node.text_content()

    def children_export(self, node: Node) -> str:
        """Export the inline content of ``node``"""
        output: List[str] = []

        for child in node.children:
            result = self.textMatch_export(child)
            if result is not None:
                output.append(result)
            elif is_linebreak(child):
                output.append("\n")
            elif is_text(child):
                output.append(self.format_export(child, child.text))
            elif child.is_element():
                output.append(self.children_export(child))

        return "".join(output)

    def textMatch_export(self, node: Node) -> Optional[str]:
        for transformer in self.registry.text_match:
            result = transformer.export(node, self.children_export, self.format_export)
            if result is not None:
                return result
        return None

    def format_export(self, node: Node, text_content: str) -> str:
        return textFormat_export(node, text_content, self.registry.text_format_index)


def convert_to_markdown_string(transformers: TransformersArg = None) -> str:
    """
    Serialize the active editor's document to Markdown.

    Must run inside ``Editor.read()`` or ``Editor.update()``.

    Args:
        transformers: TransformerRegistry, transformer list, or None for the
                      standard set

    Returns:
        Markdown text, blocks separated by newlines, no trailing newline
    """
    editor = active_editor()
    registry = registry_resolve(transformers)
    return MarkdownExporter(registry).markdown_export(editor.root)
