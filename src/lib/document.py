"""
Rich-document tree and editor

The tree is a tagged union: a single Node class whose ``kind`` decides which
of its fields are meaningful. Importer and exporter dispatch on the tag via
the ``is_*`` guards below rather than on a class hierarchy.

Structure:
    root
     ├── paragraph / heading / quote / code      (blocks)
     │    └── text / link / linebreak            (inline)
     └── list
          └── listitem
               ├── text / link ...               (item content)
               └── list                          (nested list wrapper)

A list item whose sole child is a list is a nesting wrapper: it carries no
content of its own and renders as a deeper level of its parent list.

The Editor owns a root, a caret and the settings its conversions read
(list indentation and export policy) through ``settings_get()``.
``Editor.update()`` is the transaction boundary: it snapshots the tree,
makes the editor the *active editor* for conversions run inside the block,
and restores the snapshot if the block raises.

Example:
    >>> editor = Editor()
    >>> with editor.update():
    ...     editor.root.append(create_paragraph().append(create_text("hi")))
    >>> editor.root.text_content()
    'hi'
"""

import copy
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Set

from ..config import AppSettings, appsettings
from ..models.transformers import TextFormat


class NodeKind(Enum):
    """Finite set of node kinds in the document tree"""
    ROOT = "root"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    QUOTE = "quote"
    CODE = "code"
    LIST = "list"
    LIST_ITEM = "listitem"
    TEXT = "text"
    LINK = "link"
    LINEBREAK = "linebreak"


class ListType(Enum):
    BULLET = "bullet"
    NUMBER = "number"


LEAF_KINDS: Set[NodeKind] = {NodeKind.TEXT, NodeKind.LINEBREAK}
INLINE_KINDS: Set[NodeKind] = {NodeKind.TEXT, NodeKind.LINK, NodeKind.LINEBREAK}


@dataclass(eq=False)
class Node:
    """
    A node in the document tree

    Attributes:
        kind: Node tag; decides which fields below are used
        children: Child nodes (element kinds only)
        parent: Owning node, None for the root and detached nodes
        text: Text content (text nodes)
        format: Style flags (text nodes)
        level: Heading level 1-6 (heading nodes)
        language: Fence language tag (code nodes)
        url: Link target (link nodes)
        list_type: Bullet or number (list nodes)
        start: First ordinal (numbered list nodes)
        indent: Nesting level recorded by the list engine (list items)
    """
    kind: NodeKind
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Node"] = field(default=None, repr=False)
    text: str = ""
    format: Set[TextFormat] = field(default_factory=set)
    level: int = 0
    language: Optional[str] = None
    url: str = ""
    list_type: Optional[ListType] = None
    start: int = 1
    indent: int = 0

    # ------------------------------------------------------------------
    # Navigation

    def is_element(self) -> bool:
        return self.kind not in LEAF_KINDS

    def is_inline(self) -> bool:
        return self.kind in INLINE_KINDS

    def index_get(self) -> int:
        """Position of this node among its parent's children"""
        if self.parent is None:
            raise ValueError(f"{self.kind.value} node has no parent")
        for index, sibling in enumerate(self.parent.children):
            if sibling is self:
                return index
        raise ValueError(f"{self.kind.value} node is not among its parent's children")

    @property
    def previous_sibling(self) -> Optional["Node"]:
        if self.parent is None:
            return None
        index = self.index_get()
        return self.parent.children[index - 1] if index > 0 else None

    @property
    def next_sibling(self) -> Optional["Node"]:
        if self.parent is None:
            return None
        index = self.index_get()
        siblings = self.parent.children
        return siblings[index + 1] if index + 1 < len(siblings) else None

    @property
    def first_child(self) -> Optional["Node"]:
        return self.children[0] if self.children else None

    @property
    def last_child(self) -> Optional["Node"]:
        return self.children[-1] if self.children else None

    @property
    def children_size(self) -> int:
        return len(self.children)

    def next_siblings(self) -> List["Node"]:
        if self.parent is None:
            return []
        return self.parent.children[self.index_get() + 1:]

    def descendant_first(self) -> Optional["Node"]:
        node = self.first_child
        while node is not None and node.is_element() and node.children:
            node = node.first_child
        return node

    def descendant_last(self) -> Optional["Node"]:
        node = self.last_child
        while node is not None and node.is_element() and node.children:
            node = node.last_child
        return node

    def walk(self) -> Iterator["Node"]:
        """Depth-first pre-order iteration over this node and its descendants"""
        yield self
        for child in self.children:
            yield from child.walk()

    # ------------------------------------------------------------------
    # Mutation

    def _detach(self) -> None:
        if self.parent is not None:
            index = self.index_get()
            del self.parent.children[index]
            self.parent = None

    def append(self, *nodes: "Node") -> "Node":
        """Append nodes as children, detaching them from any previous parent"""
        if not self.is_element():
            raise TypeError(f"cannot append children to a {self.kind.value} node")
        for node in nodes:
            node._detach()
            node.parent = self
            self.children.append(node)
        return self

    def insert_after(self, node: "Node") -> "Node":
        node._detach()
        parent = self.parent
        if parent is None:
            raise ValueError(f"{self.kind.value} node has no parent")
        parent.children.insert(self.index_get() + 1, node)
        node.parent = parent
        return node

    def insert_before(self, node: "Node") -> "Node":
        node._detach()
        parent = self.parent
        if parent is None:
            raise ValueError(f"{self.kind.value} node has no parent")
        parent.children.insert(self.index_get(), node)
        node.parent = parent
        return node

    def replace(self, node: "Node") -> "Node":
        """Put ``node`` where this node is and detach this node"""
        node._detach()
        parent = self.parent
        if parent is None:
            raise ValueError(f"{self.kind.value} node has no parent")
        parent.children[self.index_get()] = node
        node.parent = parent
        self.parent = None
        return node

    def remove(self) -> None:
        self._detach()

    def clear(self) -> "Node":
        for child in self.children:
            child.parent = None
        self.children = []
        return self

    def set_text(self, text: str) -> "Node":
        self.text = text
        return self

    def has_format(self, text_format: TextFormat) -> bool:
        return text_format in self.format

    def toggle_format(self, text_format: TextFormat) -> "Node":
        if text_format in self.format:
            self.format.discard(text_format)
        else:
            self.format.add(text_format)
        return self

    def set_indent(self, indent: int) -> "Node":
        self.indent = indent
        return self

    def split_text(self, *offsets: int) -> List["Node"]:
        """
        Split a text node at the given offsets.

        The first piece stays in this node; the others become new siblings
        with the same format. Offsets at 0 or past the end are ignored.

        Returns:
            The pieces, in order

        Example:
            "hello world".split_text(5) -> ["hello", " world"]
        """
        if not is_text(self):
            raise TypeError(f"cannot split a {self.kind.value} node")
        cuts = sorted({o for o in offsets if 0 < o < len(self.text)})
        if not cuts:
            return [self]
        bounds = [0, *cuts, len(self.text)]
        pieces = [self.text[a:b] for a, b in zip(bounds, bounds[1:])]
        self.text = pieces[0]
        nodes = [self]
        previous = self
        for piece in pieces[1:]:
            sibling = create_text(piece, self.format)
            if previous.parent is not None:
                previous.insert_after(sibling)
            nodes.append(sibling)
            previous = sibling
        return nodes

    def select(self, offset: int = 0, pending_format: Optional[Iterable[TextFormat]] = None) -> None:
        """
        Move the active editor's caret into this node.

        ``pending_format`` (element carets only) styles the text node created
        once typing resumes at this position.
        """
        editor = _active_editor.get()
        if editor is not None:
            pending = set(pending_format) if pending_format is not None else None
            editor.selection = Caret(self, offset, pending)

    def select_end(self) -> None:
        self.select(len(self.text) if is_text(self) else self.children_size)

    # ------------------------------------------------------------------
    # Reading

    def text_content(self) -> str:
        if self.kind is NodeKind.TEXT:
            return self.text
        if self.kind is NodeKind.LINEBREAK:
            return "\n"
        separator = "\n\n" if self.kind is NodeKind.ROOT else ""
        return separator.join(child.text_content() for child in self.children)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view of this subtree (used by the CLI JSON dump)"""
        data: Dict[str, Any] = {"kind": self.kind.value}
        if self.kind is NodeKind.TEXT:
            data["text"] = self.text
            if self.format:
                data["format"] = sorted(f.value for f in self.format)
        elif self.kind is NodeKind.HEADING:
            data["level"] = self.level
        elif self.kind is NodeKind.CODE and self.language:
            data["language"] = self.language
        elif self.kind is NodeKind.LINK:
            data["url"] = self.url
        elif self.kind is NodeKind.LIST and self.list_type is not None:
            data["list_type"] = self.list_type.value
            if self.list_type is ListType.NUMBER:
                data["start"] = self.start
        elif self.kind is NodeKind.LIST_ITEM and self.indent:
            data["indent"] = self.indent
        if self.is_element():
            data["children"] = [child.to_dict() for child in self.children]
        return data


# ----------------------------------------------------------------------
# Factories

def create_root() -> Node:
    return Node(NodeKind.ROOT)


def create_paragraph() -> Node:
    return Node(NodeKind.PARAGRAPH)


def create_heading(level: int) -> Node:
    if not 1 <= level <= 6:
        raise ValueError(f"heading level must be 1-6, got {level}")
    return Node(NodeKind.HEADING, level=level)


def create_quote() -> Node:
    return Node(NodeKind.QUOTE)


def create_code(language: Optional[str] = None) -> Node:
    return Node(NodeKind.CODE, language=language or None)


def create_list(list_type: ListType, start: int = 1) -> Node:
    return Node(NodeKind.LIST, list_type=list_type, start=start)


def create_list_item() -> Node:
    return Node(NodeKind.LIST_ITEM)


def create_text(text: str = "", text_format: Iterable[TextFormat] = ()) -> Node:
    return Node(NodeKind.TEXT, text=text, format=set(text_format))


def create_link(url: str) -> Node:
    return Node(NodeKind.LINK, url=url)


def create_linebreak() -> Node:
    return Node(NodeKind.LINEBREAK)


# ----------------------------------------------------------------------
# Type guards

def is_root(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.ROOT


def is_paragraph(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.PARAGRAPH


def is_heading(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.HEADING


def is_quote(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.QUOTE


def is_code(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.CODE


def is_list(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.LIST


def is_list_item(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.LIST_ITEM


def is_text(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.TEXT


def is_link(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.LINK


def is_linebreak(node: Optional[Node]) -> bool:
    return node is not None and node.kind is NodeKind.LINEBREAK


def is_nested_list_wrapper(node: Optional[Node]) -> bool:
    """True for a list item whose sole child is a list"""
    return is_list_item(node) and node.children_size == 1 and is_list(node.first_child)


# ----------------------------------------------------------------------
# Editor

@dataclass(eq=False)
class Caret:
    """
    Collapsed selection

    For text nodes ``offset`` is a character offset; for element nodes it is
    a child index. ``pending_format`` is set when the next typed text must
    start a new text node with exactly these flags.
    """
    node: Node
    offset: int
    pending_format: Optional[Set[TextFormat]] = None


@dataclass(eq=False)
class TextInsertion:
    """Event handed to text listeners after Editor.insert_text()"""
    node: Node
    offset: int
    text: str


TextListener = Callable[[TextInsertion], None]

_active_editor: ContextVar[Optional["Editor"]] = ContextVar("active_editor", default=None)


def active_editor() -> "Editor":
    """
    Editor whose update()/read() block is currently running.

    Raises:
        RuntimeError: If called outside an editor context
    """
    editor = _active_editor.get()
    if editor is None:
        raise RuntimeError(
            "No active editor: run conversions inside Editor.update() or Editor.read()"
        )
    return editor


def settings_get() -> AppSettings:
    """Settings of the active editor, or the process defaults outside one"""
    editor = _active_editor.get()
    return editor.settings if editor is not None else appsettings


class Editor:
    """
    Holds a document tree, a caret and the settings its conversions use

    All mutations go through ``update()``, which restores the previous tree
    and caret if the block raises, so a failed conversion leaves no partial
    result behind.

    Args:
        settings: List indentation and export policy for this editor;
                  defaults to the environment-driven ``appsettings``
    """

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        self.settings: AppSettings = settings if settings is not None else appsettings
        self.root: Node = create_root()
        self.selection: Optional[Caret] = None
        self._text_listeners: List[TextListener] = []

    @contextmanager
    def update(self) -> Iterator["Editor"]:
        snapshot = copy.deepcopy((self.root, self.selection))
        token = _active_editor.set(self)
        try:
            yield self
        except Exception:
            self.root, self.selection = snapshot
            raise
        finally:
            _active_editor.reset(token)

    @contextmanager
    def read(self) -> Iterator["Editor"]:
        token = _active_editor.set(self)
        try:
            yield self
        finally:
            _active_editor.reset(token)

    def register_text_listener(self, listener: TextListener) -> Callable[[], None]:
        """
        Call ``listener`` after every insert_text().

        Returns:
            Function that removes the listener again
        """
        self._text_listeners.append(listener)

        def unregister() -> None:
            if listener in self._text_listeners:
                self._text_listeners.remove(listener)

        return unregister

    def insert_text(self, text: str) -> None:
        """
        Type ``text`` at the caret, then notify text listeners.

        Each listener runs inside its own update so a shortcut either fully
        applies or leaves the typed text untouched.
        """
        with self.update():
            node, offset = self.caret_resolveText()
            node.text = node.text[:offset] + text + node.text[offset:]
            offset += len(text)
            self.selection = Caret(node, offset)
        event = TextInsertion(node=node, offset=offset, text=text)
        for listener in list(self._text_listeners):
            with self.update():
                listener(event)

    def caret_resolveText(self) -> "tuple[Node, int]":
        """
        Turn the caret into a (text node, offset) pair, creating a text node
        when the caret sits in an element without one.
        """
        caret = self.selection
        if caret is None:
            if not self.root.children:
                self.root.append(create_paragraph())
            block = self.root.last_child
            leaf = block.descendant_last()
            if is_text(leaf):
                return leaf, len(leaf.text)
            container = leaf.parent if leaf is not None else block
            caret = Caret(container, container.children_size)
        if is_text(caret.node):
            return caret.node, caret.offset
        element = caret.node
        before = element.children[caret.offset - 1] if 0 < caret.offset <= element.children_size else None
        after = element.children[caret.offset] if caret.offset < element.children_size else None
        if caret.pending_format is None:
            if is_text(before):
                return before, len(before.text)
            if is_text(after):
                return after, 0
        text_node = create_text("", caret.pending_format or ())
        if after is not None:
            after.insert_before(text_node)
        else:
            element.append(text_node)
        return text_node, 0
