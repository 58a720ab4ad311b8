"""
Transformer registry

Validates a caller-supplied transformer list once and partitions it into
per-kind tuples, preserving order (order is precedence). Derived lookups
used by the matchers are built here too, so a conversion never re-inspects
the raw list.

Configuration problems (unknown ``type`` tag, missing fields, a short
delimiter shadowing a longer one) raise ConfigurationError at construction,
never during a conversion.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from pydantic import TypeAdapter, ValidationError

from ..models.transformers import (
    ElementTransformer,
    TextFormatTransformer,
    TextMatchTransformer,
    Transformer,
)
from .log import LOG


class ConfigurationError(ValueError):
    """Raised when a transformer list cannot be used"""
    pass


_transformer_adapter: TypeAdapter = TypeAdapter(Transformer)


def fullMatch_compile(tag: str) -> "re.Pattern[str]":
    """
    Compile the pattern that matches ``tag``-delimited text.

    The enclosed text may neither start nor end with whitespace or a tag
    character, and the closing tag must not run into another tag character.

    Example:
        For tag "**": matches "**bold**" in "a **bold** b", group(2) == "bold"
    """
    tag_escaped = re.escape(tag)
    tag_chars = "".join(re.escape(c) for c in sorted(set(tag)))
    return re.compile(
        rf"({tag_escaped})(?![{tag_chars}\s])(.*?[^{tag_chars}\s]){tag_escaped}(?![{tag_chars}])"
    )


@dataclass(frozen=True)
class TextFormatIndex:
    """
    Lookups over the text-format transformers

    Attributes:
        open_tags: Alternation of all tags in registry order (None if empty)
        full_match_byTag: Per-tag full-match pattern
        transformers_byTag: Tag -> transformer
        export_transformers: Single-flag transformers, used to wrap text on
                             export (multi-flag tags such as ``***`` are
                             reproduced by stacking single-flag tags)
    """
    open_tags: Optional["re.Pattern[str]"]
    full_match_byTag: Mapping[str, "re.Pattern[str]"]
    transformers_byTag: Mapping[str, TextFormatTransformer]
    export_transformers: Tuple[TextFormatTransformer, ...]

    @classmethod
    def build(cls, transformers: Tuple[TextFormatTransformer, ...]) -> "TextFormatIndex":
        open_tags = (
            re.compile("|".join(re.escape(t.tag) for t in transformers))
            if transformers else None
        )
        return cls(
            open_tags=open_tags,
            full_match_byTag=MappingProxyType({t.tag: fullMatch_compile(t.tag) for t in transformers}),
            transformers_byTag=MappingProxyType({t.tag: t for t in transformers}),
            export_transformers=tuple(t for t in transformers if len(t.format) == 1),
        )

    def outermostMatch_find(self, text: str) -> Optional[re.Match]:
        """
        Find the first delimited span, scanning opening tags left to right.

        At any position the alternation tries tags in registry order, so a
        longer tag listed first wins over a shorter one built from the same
        character.

        Returns:
            Match with group(1) = tag and group(2) = enclosed text, or None
        """
        if self.open_tags is None:
            return None
        tried = set()
        for open_match in self.open_tags.finditer(text):
            tag = open_match.group(0)
            if tag in tried:
                continue
            tried.add(tag)
            full_match = self.full_match_byTag[tag].search(text)
            if full_match is not None:
                return full_match
        return None


class TransformerRegistry:
    """
    Immutable, ordered view of a transformer list split by kind

    Attributes:
        transformers: Every transformer, validated, in order
        element: Element transformers, in order
        text_format: Text-format transformers, in order
        text_match: Text-match transformers, in order
        text_format_index: Matcher lookups over text_format
        text_match_byTrigger: Trigger character -> text-match transformers
        text_format_byCloseChar: Last tag character -> text-format transformers

    Example:
        >>> registry = TransformerRegistry()
        >>> [t.tag for t in registry.text_format][:3]
        ['`', '***', '___']
    """

    def __init__(self, transformers: Optional[Iterable[Any]] = None) -> None:
        if transformers is None:
            from .transformers import TRANSFORMERS
            transformers = TRANSFORMERS

        validated = []
        for position, entry in enumerate(transformers):
            try:
                validated.append(_transformer_adapter.validate_python(entry))
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid transformer at position {position}:\n{e}"
                ) from e

        self.transformers: Tuple[Any, ...] = tuple(validated)
        self.element: Tuple[ElementTransformer, ...] = tuple(
            t for t in self.transformers if t.type == "element"
        )
        self.text_format: Tuple[TextFormatTransformer, ...] = tuple(
            t for t in self.transformers if t.type == "text-format"
        )
        self.text_match: Tuple[TextMatchTransformer, ...] = tuple(
            t for t in self.transformers if t.type == "text-match"
        )
        self.tags_check()

        self.text_format_index = TextFormatIndex.build(self.text_format)
        self.text_match_byTrigger: Mapping[str, Tuple[TextMatchTransformer, ...]] = self.group_by(
            self.text_match, lambda t: t.trigger
        )
        self.text_format_byCloseChar: Mapping[str, Tuple[TextFormatTransformer, ...]] = self.group_by(
            self.text_format, lambda t: t.tag[-1]
        )

        LOG(
            f"Registered {len(self.element)} element, {len(self.text_format)} text-format, "
            f"{len(self.text_match)} text-match transformers",
            level=3,
        )

    def tags_check(self) -> None:
        """
        Reject duplicate tags and tags shadowed by an earlier, shorter one.

        Raises:
            ConfigurationError: e.g. ``*`` listed before ``**``
        """
        seen: list[str] = []
        for transformer in self.text_format:
            tag = transformer.tag
            if tag in seen:
                raise ConfigurationError(f"Duplicate text-format tag {tag!r}")
            for earlier in seen:
                if tag.startswith(earlier):
                    raise ConfigurationError(
                        f"Text-format tag {tag!r} is shadowed by {earlier!r}; "
                        f"list longer tags first"
                    )
            seen.append(tag)

    @staticmethod
    def group_by(transformers: Tuple[Any, ...], key) -> Mapping[str, Tuple[Any, ...]]:
        grouped: Dict[str, list] = {}
        for transformer in transformers:
            grouped.setdefault(key(transformer), []).append(transformer)
        return MappingProxyType({k: tuple(v) for k, v in grouped.items()})


TransformersArg = Union[None, TransformerRegistry, Iterable[Any]]


def registry_resolve(transformers: TransformersArg = None) -> TransformerRegistry:
    """Accept a registry, a transformer list, or None (standard set)"""
    if isinstance(transformers, TransformerRegistry):
        return transformers
    return TransformerRegistry(transformers)
