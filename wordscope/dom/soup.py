"""BeautifulSoup-backed host tree and helpers to address text inside it."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from wordscope.dom.host import HostTree
from wordscope.dom.models import Anchor, Locator, Span
from wordscope.dom.traversal import TextIndex, span_of_contents
from wordscope.errors import DocumentParseError

logger = logging.getLogger("wordscope.dom.soup")

DEFAULT_IGNORED_CLASSES: tuple[str, ...] = ("ai-translator-tooltip", "ai-translator-icon")
DEFAULT_ANCHOR_CLASS = "ai-translator-anchor"

# Content of these elements is never rendered as selectable text.
_NON_RENDERED_TAGS = frozenset({"script", "style", "template", "noscript", "head", "title"})


def _class_list(tag: Tag) -> tuple[str, ...]:
    value = tag.get("class")
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(value)


class SoupTree:
    """Expose a parsed BeautifulSoup document through the host tree protocol."""

    def __init__(
        self,
        soup: BeautifulSoup,
        *,
        ignored_classes: Iterable[str] = DEFAULT_IGNORED_CLASSES,
    ) -> None:
        self.soup = soup
        self.ignored_classes = frozenset(ignored_classes)
        self._root = soup.body if soup.body is not None else soup

    @property
    def root(self) -> Any:
        return self._root

    def is_text(self, node: Any) -> bool:
        return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)

    def text_of(self, node: Any) -> str:
        if isinstance(node, NavigableString):
            return str(node) if self.is_text(node) else ""
        if isinstance(node, Tag):
            return node.get_text()
        return ""

    def parent_of(self, node: Any) -> Any | None:
        return getattr(node, "parent", None)

    def children_of(self, node: Any) -> Sequence[Any]:
        if isinstance(node, Tag):
            return node.contents
        return ()

    def tag_of(self, node: Any) -> str | None:
        if isinstance(node, Tag):
            return node.name.lower()
        return None

    def is_ignored(self, node: Any) -> bool:
        if not isinstance(node, Tag):
            return False
        if node.name.lower() in _NON_RENDERED_TAGS:
            return True
        return any(name in self.ignored_classes for name in _class_list(node))

    def has_class(self, node: Any, class_name: str) -> bool:
        return isinstance(node, Tag) and class_name in _class_list(node)

    def anchors(self, anchor_class: str = DEFAULT_ANCHOR_CLASS) -> tuple[Anchor, ...]:
        """Collect existing annotations marked with *anchor_class* in document order."""

        found: list[Anchor] = []
        for position, tag in enumerate(self._root.find_all(class_=anchor_class), start=1):
            anchor_id = tag.get("id") or tag.get("data-translation-id") or f"anchor-{position}"
            found.append(Anchor(id=str(anchor_id), span=span_of_contents(self, tag)))
        return tuple(found)


def parse_html(
    markup: str,
    *,
    ignored_classes: Iterable[str] = DEFAULT_IGNORED_CLASSES,
) -> SoupTree:
    """Parse *markup* with the standard library backend and wrap it as a host tree."""

    try:
        soup = BeautifulSoup(markup, "html.parser")
    except Exception as exc:  # pragma: no cover - html.parser is lenient
        raise DocumentParseError(
            message="Unable to parse the HTML document.",
            remediation="Check that the file contains HTML markup and retry.",
        ) from exc
    return SoupTree(soup, ignored_classes=ignored_classes)


def locate_text(
    tree: HostTree,
    needle: str,
    *,
    occurrence: int = 1,
    trim_start: int = 0,
    trim_end: int = 0,
) -> Span | None:
    """Return the span of the *occurrence*-th match of *needle* in the visible text.

    ``trim_start`` and ``trim_end`` shrink the match, which lets callers
    emulate partial selections such as ``"ee: Figu"`` inside
    ``"See: Figure"``. A start falling between two text nodes opens the later
    node and an end closes the earlier one, so neither edge leaks into a
    neighbouring element.
    """

    if not needle or occurrence < 1:
        return None

    visible = [entry for entry in TextIndex.build(tree, tree.root).entries if not entry.ignored]
    spans: list[tuple[Any, int, int]] = []
    cursor = 0
    for entry in visible:
        spans.append((entry.node, cursor, cursor + len(entry.text)))
        cursor += len(entry.text)
    full_text = "".join(entry.text for entry in visible)

    found = -1
    for _ in range(occurrence):
        found = full_text.find(needle, found + 1)
        if found < 0:
            logger.debug("Selection text not found", extra={"needle": needle, "occurrence": occurrence})
            return None

    target_start = found + max(trim_start, 0)
    target_end = found + len(needle) - max(trim_end, 0)
    if target_end < target_start:
        return None

    start = _locator_at(spans, target_start, forward=True)
    end = start if target_end == target_start else _locator_at(spans, target_end, forward=False)
    if start is None or end is None:
        return None
    return Span(start, end)


def _locator_at(
    spans: Sequence[tuple[Any, int, int]],
    position: int,
    *,
    forward: bool,
) -> Locator | None:
    for node, node_start, node_end in spans:
        inside = node_start <= position < node_end if forward else node_start < position <= node_end
        if inside:
            return Locator(node, position - node_start)
    # Empty documents and positions at the very edges.
    for node, node_start, node_end in spans:
        if node_start <= position <= node_end:
            return Locator(node, position - node_start)
    return None


__all__ = [
    "DEFAULT_ANCHOR_CLASS",
    "DEFAULT_IGNORED_CLASSES",
    "SoupTree",
    "locate_text",
    "parse_html",
]
