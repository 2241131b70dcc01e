"""Scoped, ordered traversal helpers over a :class:`~wordscope.dom.host.HostTree`.

Everything here is computed per call. Walks are iterative so deeply nested
documents never exhaust the interpreter stack, and a node that was detached
between two steps simply ends the walk.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Collection, Iterator, Sequence

from wordscope.dom.host import HostTree
from wordscope.dom.models import Locator, Span
from wordscope.errors import HostTreeError

BLOCK_TAGS: frozenset[str] = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "div",
        "dl",
        "dt",
        "dd",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "td",
        "th",
        "ul",
    }
)


def normalize_tags(tags: Collection[str]) -> frozenset[str]:
    """Return *tags* lower-cased and stripped, dropping blanks."""

    return frozenset(tag.strip().lower() for tag in tags if tag and tag.strip())


def _index_in_parent(tree: HostTree, node: Any) -> tuple[Any, int] | None:
    parent = tree.parent_of(node)
    if parent is None:
        return None
    for index, child in enumerate(tree.children_of(parent)):
        if child is node:
            return parent, index
    return None


def _following(tree: HostTree, node: Any, root: Any, *, descend: bool = True) -> Any | None:
    if descend:
        children = tree.children_of(node)
        if children:
            return children[0]

    current = node
    while current is not root:
        located = _index_in_parent(tree, current)
        if located is None:
            return None
        parent, index = located
        siblings = tree.children_of(parent)
        if index + 1 < len(siblings):
            return siblings[index + 1]
        current = parent
    return None


def _preceding(tree: HostTree, node: Any, root: Any) -> Any | None:
    if node is root:
        return None
    located = _index_in_parent(tree, node)
    if located is None:
        return None
    parent, index = located
    if index > 0:
        candidate = tree.children_of(parent)[index - 1]
        while True:
            children: Sequence[Any] = tree.children_of(candidate)
            if not children:
                return candidate
            candidate = children[-1]
    if parent is root:
        return None
    return parent


def is_inside_ignored(tree: HostTree, node: Any) -> bool:
    """Return True when *node* or one of its ancestors is ignored UI."""

    current = tree.parent_of(node) if tree.is_text(node) else node
    while current is not None:
        if tree.is_ignored(current):
            return True
        if current is tree.root:
            return False
        current = tree.parent_of(current)
    return False


def closest_block_ancestor(
    tree: HostTree,
    node: Any,
    block_tags: Collection[str] = BLOCK_TAGS,
) -> Any:
    """Return the nearest element ancestor whose tag is block-level, else the root."""

    current = tree.parent_of(node) if tree.is_text(node) else node
    while current is not None and current is not tree.root:
        tag = tree.tag_of(current)
        if tag is not None and tag in block_tags:
            return current
        current = tree.parent_of(current)
    return tree.root


def common_ancestor(tree: HostTree, first: Any, second: Any) -> Any:
    """Return the deepest node containing both *first* and *second*."""

    lineage: list[Any] = []
    current = first
    while current is not None:
        lineage.append(current)
        current = tree.parent_of(current)
    seen = {id(node) for node in lineage}

    current = second
    while current is not None:
        if id(current) in seen:
            return current
        current = tree.parent_of(current)
    return tree.root


def next_text_node_within(tree: HostTree, node: Any, root: Any) -> Any | None:
    """Return the next non-ignored text node after *node* in document order, inside *root*."""

    current = node
    descend = True
    while True:
        current = _following(tree, current, root, descend=descend)
        if current is None:
            return None
        if tree.is_text(current):
            if not is_inside_ignored(tree, current):
                return current
            descend = True
            continue
        descend = not tree.is_ignored(current)


def previous_text_node_within(tree: HostTree, node: Any, root: Any) -> Any | None:
    """Return the previous non-ignored text node before *node*, inside *root*."""

    current = node
    while True:
        current = _preceding(tree, current, root)
        if current is None:
            return None
        if tree.is_text(current) and not is_inside_ignored(tree, current):
            return current


def iter_text_nodes(tree: HostTree, root: Any, *, include_ignored: bool = False) -> Iterator[Any]:
    """Yield text nodes under *root* in document order."""

    for entry in TextIndex.build(tree, root).entries:
        if include_ignored or not entry.ignored:
            yield entry.node


def first_text_node_within(tree: HostTree, root: Any) -> Any | None:
    return next(iter_text_nodes(tree, root), None)


def last_text_node_within(tree: HostTree, root: Any) -> Any | None:
    last = None
    for node in iter_text_nodes(tree, root):
        last = node
    return last


def char_at(tree: HostTree, node: Any, offset: int) -> str | None:
    """Return the character at *offset* of a text node, or None when out of range."""

    if not tree.is_text(node):
        return None
    text = tree.text_of(node)
    if 0 <= offset < len(text):
        return text[offset]
    return None


def iter_chars_forward(
    tree: HostTree,
    locator: Locator,
    root: Any,
    *,
    limit: int,
) -> Iterator[tuple[Any, int, str]]:
    """Yield ``(node, index, char)`` for characters at and after *locator*.

    The walk hops across non-ignored text nodes of *root* and stops after
    *limit* characters.
    """

    node, offset = locator.node, locator.offset
    steps = 0
    while steps < limit:
        if tree.is_text(node):
            text = tree.text_of(node)
            if 0 <= offset < len(text):
                yield node, offset, text[offset]
                offset += 1
                steps += 1
                continue
        following = next_text_node_within(tree, node, root)
        if following is None:
            return
        node, offset = following, 0


def iter_chars_backward(
    tree: HostTree,
    locator: Locator,
    root: Any,
    *,
    limit: int,
) -> Iterator[tuple[Any, int, str]]:
    """Yield ``(node, index, char)`` for characters before *locator*, nearest first."""

    node, offset = locator.node, locator.offset
    steps = 0
    while steps < limit:
        if tree.is_text(node):
            text = tree.text_of(node)
            offset = min(offset, len(text))
            if offset > 0:
                offset -= 1
                yield node, offset, text[offset]
                steps += 1
                continue
        preceding = previous_text_node_within(tree, node, root)
        if preceding is None:
            return
        node, offset = preceding, len(tree.text_of(preceding))


@dataclass(frozen=True)
class TextEntry:
    """One text node of an indexed subtree with its character interval."""

    node: Any
    text: str
    start: int
    ignored: bool

    @property
    def end(self) -> int:
        return self.start + len(self.text)


class TextIndex:
    """Document-order character offsets for every text node under a root.

    Ignored text still occupies offsets so that locators inside tooltips
    resolve, but it never contributes to extracted text.
    """

    def __init__(
        self,
        tree: HostTree,
        root: Any,
        entries: tuple[TextEntry, ...],
        bounds: dict[int, tuple[int, int]],
    ) -> None:
        self.tree = tree
        self.root = root
        self.entries = entries
        self._bounds = bounds

    @classmethod
    def build(cls, tree: HostTree, root: Any) -> TextIndex:
        entries: list[TextEntry] = []
        bounds: dict[int, tuple[int, int]] = {}
        total = 0
        stack: list[tuple[Any, bool, bool]] = [(root, False, is_inside_ignored(tree, root))]

        while stack:
            node, leaving, ignored = stack.pop()
            if leaving:
                bounds[id(node)] = (bounds[id(node)][0], total)
                continue
            if tree.is_text(node):
                text = tree.text_of(node)
                entries.append(TextEntry(node=node, text=text, start=total, ignored=ignored))
                bounds[id(node)] = (total, total + len(text))
                total += len(text)
                continue

            bounds[id(node)] = (total, total)
            stack.append((node, True, ignored))
            child_ignored = ignored or tree.is_ignored(node)
            for child in reversed(tree.children_of(node)):
                stack.append((child, False, child_ignored))

        return cls(tree, root, tuple(entries), bounds)

    @property
    def length(self) -> int:
        return self.entries[-1].end if self.entries else 0

    def offset_of(self, locator: Locator) -> int:
        """Return the character offset of *locator*; raise HostTreeError outside the root."""

        bounds = self._bounds.get(id(locator.node))
        if bounds is None:
            raise HostTreeError(message="Locator node is not inside the indexed subtree.")
        start, end = bounds
        if self.tree.is_text(locator.node):
            return start + max(0, min(locator.offset, end - start))

        children = self.tree.children_of(locator.node)
        position = max(0, min(locator.offset, len(children)))
        if position == len(children):
            return end
        child_bounds = self._bounds.get(id(children[position]))
        if child_bounds is None:
            raise HostTreeError(message="Locator child is not inside the indexed subtree.")
        return child_bounds[0]

    def locate(self, offset: int, *, forward: bool = True) -> Locator | None:
        """Map a character offset back to a locator inside a visible text node.

        Forward resolution prefers the node holding the character at
        *offset*; backward resolution prefers the node holding the character
        just before it.
        """

        visible = [entry for entry in self.entries if not entry.ignored]
        if not visible:
            return None

        if forward:
            for entry in visible:
                if entry.end > offset:
                    return Locator(entry.node, max(offset - entry.start, 0))
            last = visible[-1]
            return Locator(last.node, len(last.text))

        for entry in reversed(visible):
            if entry.start < offset:
                return Locator(entry.node, min(offset - entry.start, len(entry.text)))
        return Locator(visible[0].node, 0)

    def resolve(self, locator: Locator, *, forward: bool = True) -> Locator | None:
        """Return *locator* when it already points into text, else the nearest text position."""

        if self.tree.is_text(locator.node):
            length = len(self.tree.text_of(locator.node))
            return locator.moved(max(0, min(locator.offset, length)))
        return self.locate(self.offset_of(locator), forward=forward)

    def pieces(self, start: int, end: int) -> Iterator[tuple[TextEntry, int, int]]:
        """Yield visible entries overlapping ``[start, end)`` with local bounds."""

        for entry in self.entries:
            if entry.ignored or entry.end <= start or entry.start >= end:
                continue
            low = max(start, entry.start) - entry.start
            high = min(end, entry.end) - entry.start
            if low < high:
                yield entry, low, high

    def text_between(self, start: int, end: int) -> str:
        return "".join(entry.text[low:high] for entry, low, high in self.pieces(start, end))


def index_for_span(tree: HostTree, span: Span) -> TextIndex:
    """Build an index over the common ancestor of the span's endpoints."""

    return TextIndex.build(tree, common_ancestor(tree, span.start.node, span.end.node))


def clean_text(tree: HostTree, span: Span) -> str:
    """Return the span's text with ignored-UI text removed."""

    if span.collapsed:
        return ""
    index = index_for_span(tree, span)
    start = index.offset_of(span.start)
    end = index.offset_of(span.end)
    if end <= start:
        return ""
    return index.text_between(start, end)


def clean_text_of(tree: HostTree, node: Any) -> str:
    """Return every visible character under *node*."""

    index = TextIndex.build(tree, node)
    return index.text_between(0, index.length)


def span_of_contents(tree: HostTree, node: Any) -> Span:
    """Return the span selecting everything inside *node*."""

    if tree.is_text(node):
        return Span.within(node, 0, len(tree.text_of(node)))
    return Span(Locator(node, 0), Locator(node, len(tree.children_of(node))))


__all__ = [
    "BLOCK_TAGS",
    "TextEntry",
    "TextIndex",
    "char_at",
    "clean_text",
    "clean_text_of",
    "closest_block_ancestor",
    "common_ancestor",
    "first_text_node_within",
    "index_for_span",
    "is_inside_ignored",
    "iter_chars_backward",
    "iter_chars_forward",
    "iter_text_nodes",
    "last_text_node_within",
    "next_text_node_within",
    "normalize_tags",
    "previous_text_node_within",
    "span_of_contents",
]
