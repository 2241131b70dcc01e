"""Detection of existing annotations that overlap a new selection."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from wordscope.dom.host import HostTree
from wordscope.dom.models import Anchor, Span
from wordscope.dom.traversal import TextIndex
from wordscope.errors import HostTreeError

logger = logging.getLogger("wordscope.selection.overlap")

DEFAULT_ANCHOR_PREFIX = "translation-anchor"


def find_overlapping(tree: HostTree, span: Span, anchors: Sequence[Anchor]) -> tuple[str, ...]:
    """Return ids of *anchors* sharing at least one character with *span*.

    Positions are document-order character offsets over the whole tree, so
    anchors that only touch the selection are not reported. An anchor nested
    with a hit (inside it or around it) is reported too, even when the
    selection misses its own text. Ids keep the order of *anchors*.
    """

    positioned = list(_positioned(tree, span, anchors))
    hits = [
        (anchor_start, anchor_end)
        for _, anchor_start, anchor_end, query_start, query_end in positioned
        if anchor_start < query_end and query_start < anchor_end
    ]
    return tuple(
        anchor.id
        for anchor, anchor_start, anchor_end, _, _ in positioned
        if any(_nested(anchor_start, anchor_end, hit_start, hit_end) for hit_start, hit_end in hits)
    )


def _nested(start: int, end: int, other_start: int, other_end: int) -> bool:
    return (other_start <= start and end <= other_end) or (start <= other_start and other_end <= end)


def find_containing(tree: HostTree, span: Span, anchors: Sequence[Anchor]) -> tuple[str, ...]:
    """Return ids of *anchors* whose text fully covers *span*."""

    return tuple(
        anchor.id
        for anchor, anchor_start, anchor_end, query_start, query_end in _positioned(tree, span, anchors)
        if anchor_start <= query_start and query_end <= anchor_end
    )


def _positioned(
    tree: HostTree,
    span: Span,
    anchors: Sequence[Anchor],
) -> Iterator[tuple[Anchor, int, int, int, int]]:
    if span.collapsed or not anchors:
        return

    try:
        index = TextIndex.build(tree, tree.root)
        query_start = index.offset_of(span.start)
        query_end = index.offset_of(span.end)
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Unable to position the selection; reporting no overlaps", exc_info=True)
        return
    if query_end <= query_start:
        return

    for anchor in anchors:
        try:
            first = index.offset_of(anchor.span.start)
            second = index.offset_of(anchor.span.end)
        except HostTreeError:
            logger.debug(
                "Skipping anchor that cannot be positioned",
                extra={"anchor_id": anchor.id},
                exc_info=True,
            )
            continue
        yield anchor, min(first, second), max(first, second), query_start, query_end


class AnchorRegistry:
    """Caller-owned collection of annotations and their id counter.

    One registry belongs to one document; nothing is shared between
    registries.
    """

    def __init__(self, anchors: Iterable[Anchor] = (), *, prefix: str = DEFAULT_ANCHOR_PREFIX) -> None:
        self.prefix = prefix
        self._anchors: dict[str, Anchor] = {}
        self._counter = 0
        for anchor in anchors:
            self.add(anchor)

    def __len__(self) -> int:
        return len(self._anchors)

    def __iter__(self) -> Iterator[Anchor]:
        return iter(tuple(self._anchors.values()))

    def __contains__(self, anchor_id: object) -> bool:
        return anchor_id in self._anchors

    @property
    def anchors(self) -> tuple[Anchor, ...]:
        return tuple(self._anchors.values())

    def get(self, anchor_id: str) -> Anchor | None:
        return self._anchors.get(anchor_id)

    def add(self, anchor: Anchor) -> Anchor:
        if anchor.id in self._anchors:
            raise ValueError(f"Anchor id '{anchor.id}' is already registered.")
        self._anchors[anchor.id] = anchor
        return anchor

    def next_id(self) -> str:
        """Reserve the next unused id of the form ``<prefix>-<n>``."""

        while True:
            candidate = f"{self.prefix}-{self._counter}"
            self._counter += 1
            if candidate not in self._anchors:
                return candidate

    def create(self, span: Span) -> Anchor:
        return self.add(Anchor(id=self.next_id(), span=span))

    def remove(self, anchor_ids: Iterable[str]) -> tuple[str, ...]:
        """Drop the given ids and return the ones that were registered."""

        removed: list[str] = []
        for anchor_id in anchor_ids:
            if self._anchors.pop(anchor_id, None) is not None:
                removed.append(anchor_id)
        return tuple(removed)

    def overlapping(self, tree: HostTree, span: Span) -> tuple[str, ...]:
        return find_overlapping(tree, span, self.anchors)

    def replace_overlapping(self, tree: HostTree, span: Span) -> tuple[Anchor, tuple[str, ...]]:
        """Register *span* as a new anchor and drop the anchors it overlapped.

        Overlaps are detected before the new anchor exists, so it is never
        removed by its own registration.
        """

        overlapping = self.overlapping(tree, span)
        anchor = self.create(span)
        removed = self.remove(anchor_id for anchor_id in overlapping if anchor_id != anchor.id)
        if removed:
            logger.info(
                "Replaced overlapping anchors",
                extra={"anchor_id": anchor.id, "removed_ids": list(removed)},
            )
        return anchor, removed


__all__ = ["AnchorRegistry", "DEFAULT_ANCHOR_PREFIX", "find_containing", "find_overlapping"]
