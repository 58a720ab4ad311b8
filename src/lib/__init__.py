"""
mdtransform - Markdown <-> rich-document conversion engine

Ordered, pluggable transformers drive both directions: Markdown import
into a document tree, Markdown export back out, and shortcuts applied
while typing.
"""

__version__ = "1.0.0"

from .document import Editor, Node, NodeKind, ListType, active_editor, settings_get
from .registry import TransformerRegistry, ConfigurationError
from .transformers import TRANSFORMERS
from .importer import MarkdownImporter, convert_from_markdown_string
from .exporter import MarkdownExporter, convert_to_markdown_string
from .shortcuts import register_shortcuts
from .log import LOG, state_connectToLogger

__all__ = [
    "Editor",
    "Node",
    "NodeKind",
    "ListType",
    "active_editor",
    "settings_get",
    "TransformerRegistry",
    "ConfigurationError",
    "TRANSFORMERS",
    "MarkdownImporter",
    "MarkdownExporter",
    "convert_from_markdown_string",
    "convert_to_markdown_string",
    "register_shortcuts",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
