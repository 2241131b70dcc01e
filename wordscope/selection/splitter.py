"""Split selections that cross block-level elements into per-block spans."""
from __future__ import annotations

import logging
from typing import Any, Collection

from wordscope.dom.host import HostTree
from wordscope.dom.models import Locator, Span
from wordscope.dom.traversal import BLOCK_TAGS, TextEntry, TextIndex, closest_block_ancestor, common_ancestor

logger = logging.getLogger("wordscope.selection.splitter")


def split_by_blocks(
    tree: HostTree,
    span: Span,
    *,
    block_tags: Collection[str] = BLOCK_TAGS,
) -> tuple[Span, ...]:
    """Return one sub-span per run of text sharing a closest block ancestor.

    Sub-spans are clamped to the original endpoints, keep document order and
    never contain only whitespace.
    """

    if span.collapsed:
        return ()
    try:
        return _split(tree, span, block_tags)
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Block split failed; returning no sub-spans", exc_info=True)
        return ()


def _split(tree: HostTree, span: Span, block_tags: Collection[str]) -> tuple[Span, ...]:
    ancestor = common_ancestor(tree, span.start.node, span.end.node)
    scope = tree.parent_of(ancestor) if tree.is_text(ancestor) else ancestor
    index = TextIndex.build(tree, scope if scope is not None else ancestor)

    start = index.offset_of(span.start)
    end = index.offset_of(span.end)
    if end <= start:
        return ()

    groups: list[tuple[Any, list[tuple[TextEntry, int, int]]]] = []
    for entry, low, high in index.pieces(start, end):
        block = closest_block_ancestor(tree, entry.node, block_tags)
        if groups and groups[-1][0] is block:
            groups[-1][1].append((entry, low, high))
        else:
            groups.append((block, [(entry, low, high)]))

    spans: list[Span] = []
    for _, pieces in groups:
        if not "".join(entry.text[low:high] for entry, low, high in pieces).strip():
            continue
        first, first_low, _ = pieces[0]
        last, _, last_high = pieces[-1]
        spans.append(Span(Locator(first.node, first_low), Locator(last.node, last_high)))

    logger.debug("Split selection into block spans", extra={"block_count": len(spans)})
    return tuple(spans)


__all__ = ["split_by_blocks"]
