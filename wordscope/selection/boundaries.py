"""Boundary character rules and word/fragment classification of spans."""
from __future__ import annotations

import logging
import unicodedata
from typing import Collection

from wordscope.dom.host import HostTree
from wordscope.dom.models import Locator, Span
from wordscope.dom.traversal import (
    BLOCK_TAGS,
    closest_block_ancestor,
    index_for_span,
    iter_chars_backward,
    iter_chars_forward,
)
from wordscope.selection.models import BoundaryClassification

logger = logging.getLogger("wordscope.selection.boundaries")

_BYTE_ORDER_MARK = "\ufeff"


def is_whitespace_char(ch: str) -> bool:
    """Return True for Unicode whitespace, including the no-break space."""

    return bool(ch) and ch.isspace()


def is_boundary_char(ch: str | None) -> bool:
    """Return True when *ch* separates words.

    Whitespace, punctuation (``P*``) and symbols (``S*``) are boundaries in
    every script; the ASCII hyphen never is, so ``state-of-the-art`` stays
    one word.
    """

    if not ch:
        return False
    if ch == "-":
        return False
    if ch.isspace() or ch == _BYTE_ORDER_MARK:
        return True
    return unicodedata.category(ch)[0] in ("P", "S")


def left_neighbor_char(
    tree: HostTree,
    locator: Locator,
    *,
    block_tags: Collection[str] = BLOCK_TAGS,
) -> str | None:
    """Return the character right before *locator* within its block, if any."""

    root = closest_block_ancestor(tree, locator.node, block_tags)
    step = next(iter_chars_backward(tree, locator, root, limit=1), None)
    return step[2] if step else None


def right_neighbor_char(
    tree: HostTree,
    locator: Locator,
    *,
    block_tags: Collection[str] = BLOCK_TAGS,
) -> str | None:
    """Return the character right after *locator* within its block, if any."""

    root = closest_block_ancestor(tree, locator.node, block_tags)
    step = next(iter_chars_forward(tree, locator, root, limit=1), None)
    return step[2] if step else None


def classify(
    tree: HostTree,
    span: Span,
    *,
    block_tags: Collection[str] = BLOCK_TAGS,
) -> BoundaryClassification:
    """Classify *span* as a word or fragment and report edge completeness.

    An edge is complete when the span's own edge character is a boundary or
    when the neighbouring character inside the same block is one (or there
    is no neighbour at all).
    """

    try:
        return _classify(tree, span, block_tags)
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Boundary classification failed; treating span as complete", exc_info=True)
        return BoundaryClassification.empty()


def _classify(tree: HostTree, span: Span, block_tags: Collection[str]) -> BoundaryClassification:
    if span.collapsed:
        return BoundaryClassification.empty()

    index = index_for_span(tree, span)
    start_offset = index.offset_of(span.start)
    end_offset = index.offset_of(span.end)
    raw = index.text_between(start_offset, end_offset) if end_offset > start_offset else ""
    trimmed = raw.strip()
    has_boundary_whitespace = is_whitespace_char(raw[:1]) or is_whitespace_char(raw[-1:])

    if not trimmed:
        return BoundaryClassification(
            type="fragment",
            left_complete=True,
            right_complete=True,
            is_complete=True,
            has_boundary_whitespace=has_boundary_whitespace,
        )

    kind = "fragment" if any(ch.isspace() for ch in trimmed) else "word"

    start = index.resolve(span.start, forward=True)
    end = index.resolve(span.end, forward=False)

    left_complete = is_boundary_char(raw[0])
    if not left_complete:
        neighbor = left_neighbor_char(tree, start, block_tags=block_tags) if start else None
        left_complete = neighbor is None or is_boundary_char(neighbor)

    right_complete = is_boundary_char(raw[-1])
    if not right_complete:
        neighbor = right_neighbor_char(tree, end, block_tags=block_tags) if end else None
        right_complete = neighbor is None or is_boundary_char(neighbor)

    return BoundaryClassification(
        type=kind,
        left_complete=left_complete,
        right_complete=right_complete,
        is_complete=left_complete and right_complete,
        has_boundary_whitespace=has_boundary_whitespace,
    )


__all__ = [
    "classify",
    "is_boundary_char",
    "is_whitespace_char",
    "left_neighbor_char",
    "right_neighbor_char",
]
