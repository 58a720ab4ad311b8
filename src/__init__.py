"""
mdtransform - Markdown <-> rich-document conversion engine

Converts Markdown into an in-memory document tree and back, using an
ordered list of transformers shared by both directions.
"""

__version__ = "1.0.0"

from .lib import (
    Editor,
    TransformerRegistry,
    ConfigurationError,
    TRANSFORMERS,
    convert_from_markdown_string,
    convert_to_markdown_string,
    register_shortcuts,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "Editor",
    "TransformerRegistry",
    "ConfigurationError",
    "TRANSFORMERS",
    "convert_from_markdown_string",
    "convert_to_markdown_string",
    "register_shortcuts",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
