"""
Models package for mdtransform

Contains the transformer rule models and the CLI pipeline state.
"""

from .state import ProgramState, pipeline
from .transformers import (
    TextFormat,
    ElementTransformer,
    TextFormatTransformer,
    TextMatchTransformer,
    Transformer,
)

__all__ = [
    "ProgramState",
    "pipeline",
    "TextFormat",
    "ElementTransformer",
    "TextFormatTransformer",
    "TextMatchTransformer",
    "Transformer",
]
