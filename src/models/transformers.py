"""
Transformer rule models

A transformer pairs a Markdown pattern with both directions of conversion.
There are exactly three kinds, told apart by the ``type`` tag:

    element      whole-line block patterns (headings, quotes, lists, code)
    text-format  symmetric style delimiters (``**``, ``_``, ``~~`` ...)
    text-match   asymmetric inline constructs fired by a trigger (links)

The kinds are frozen pydantic models joined in a discriminated union, so a
transformer list is plain, ordered, inspectable data. Dicts with the same
keys validate into the matching model.

Example:
    >>> t = TextFormatTransformer(tag="**", format=["bold"])
    >>> t.type, t.format
    ('text-format', (<TextFormat.BOLD: 'bold'>,))
"""

import re
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class TextFormat(Enum):
    """
    Style flags a text node can carry

    Text-format transformers toggle one or more of these on import and wrap
    text carrying them on export.
    """
    BOLD = "bold"
    ITALIC = "italic"
    STRIKETHROUGH = "strikethrough"
    CODE = "code"
    UNDERLINE = "underline"


class _TransformerBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ElementTransformer(_TransformerBase):
    """
    Block-level rule matched against the start of a line

    Attributes:
        reg_exp: Pattern anchored at line start (e.g. ``^(#{1,6})\\s``)
        replace: ``(parent_node, children, match, is_import) -> None``.
                 Builds the block in place of ``parent_node`` and moves
                 ``children`` into it.
        export: ``(node, export_children) -> str | None``. Returns None when
                the node is not this transformer's kind.
    """
    type: Literal["element"] = "element"
    reg_exp: re.Pattern
    replace: Callable[..., Any]
    export: Callable[..., Optional[str]]


class TextFormatTransformer(_TransformerBase):
    """
    Symmetric delimiter pair

    Attributes:
        tag: Delimiter written on both sides of the styled text
        format: Flags applied to the enclosed text, in order
    """
    type: Literal["text-format"] = "text-format"
    tag: str = Field(min_length=1)
    format: Tuple[TextFormat, ...] = Field(min_length=1)


class TextMatchTransformer(_TransformerBase):
    """
    Asymmetric inline construct

    Attributes:
        trigger: Character whose typing fires ``reg_exp`` against the text
                 before the caret
        reg_exp: End-anchored pattern for live typing
        import_reg_exp: Unanchored pattern for bulk import
        replace: ``(text_node, match) -> None``; swaps the matched text node
                 for the constructed node
        export: ``(node, export_children, export_format) -> str | None``
    """
    type: Literal["text-match"] = "text-match"
    trigger: str = Field(min_length=1, max_length=1)
    reg_exp: re.Pattern
    import_reg_exp: re.Pattern
    replace: Callable[..., Any]
    export: Callable[..., Optional[str]]


Transformer = Annotated[
    Union[ElementTransformer, TextFormatTransformer, TextMatchTransformer],
    Field(discriminator="type"),
]
