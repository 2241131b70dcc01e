"""Whitespace trimming and word-boundary expansion of user selections."""
from __future__ import annotations

import logging
from typing import Callable, Collection

from wordscope.dom.host import HostTree
from wordscope.dom.models import Locator, Span
from wordscope.dom.traversal import (
    BLOCK_TAGS,
    TextIndex,
    char_at,
    clean_text,
    closest_block_ancestor,
    common_ancestor,
    iter_chars_backward,
    iter_chars_forward,
    next_text_node_within,
    previous_text_node_within,
)
from wordscope.selection.boundaries import classify, is_boundary_char, is_whitespace_char
from wordscope.selection.models import ExpandResult, TrimResult

logger = logging.getLogger("wordscope.selection.adjuster")

DEFAULT_MAX_SCAN = 50


def _shrink_edges(
    tree: HostTree,
    span: Span,
    should_drop: Callable[[str], bool],
) -> tuple[Locator, Locator, bool, bool]:
    """Move both edges inward past characters matching *should_drop*.

    Edges hop across text nodes of the span's common ancestor and never cross
    each other; a span that is consumed entirely collapses at its start.
    """

    root = common_ancestor(tree, span.start.node, span.end.node)
    index = TextIndex.build(tree, root)
    start = index.resolve(span.start, forward=True)
    end = index.resolve(span.end, forward=False)
    if start is None or end is None:
        return span.start, span.end, False, False

    moved_left = False
    limit = index.offset_of(end)
    while index.offset_of(start) < limit:
        ch = char_at(tree, start.node, start.offset)
        if ch is None:
            following = next_text_node_within(tree, start.node, root)
            if following is None:
                break
            start = Locator(following, 0)
            continue
        if not should_drop(ch):
            break
        start = start.moved(start.offset + 1)
        moved_left = True

    moved_right = False
    floor = index.offset_of(start)
    while index.offset_of(end) > floor:
        ch = char_at(tree, end.node, end.offset - 1)
        if ch is None:
            preceding = previous_text_node_within(tree, end.node, root)
            if preceding is None:
                break
            end = Locator(preceding, len(tree.text_of(preceding)))
            continue
        if not should_drop(ch):
            break
        end = end.moved(end.offset - 1)
        moved_right = True

    if index.offset_of(start) >= index.offset_of(end):
        end = start
    return start, end, moved_left, moved_right


def trim_boundary_whitespace(tree: HostTree, span: Span) -> TrimResult:
    """Strip leading and trailing whitespace (no-break space included) from *span*."""

    try:
        if span.collapsed:
            return TrimResult(span, False, False, False)
        original_text = clean_text(tree, span)
        start, end, had_leading, had_trailing = _shrink_edges(tree, span, is_whitespace_char)
        trimmed = Span(start, end)
        adjusted = had_leading or had_trailing or clean_text(tree, trimmed) != original_text
        return TrimResult(
            span=trimmed,
            adjusted=adjusted,
            had_leading_whitespace=had_leading,
            had_trailing_whitespace=had_trailing,
        )
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Whitespace trimming failed; keeping the original span", exc_info=True)
        return TrimResult(span, False, False, False)


def expand_to_word_boundaries(
    tree: HostTree,
    span: Span,
    *,
    block_tags: Collection[str] = BLOCK_TAGS,
    max_scan: int = DEFAULT_MAX_SCAN,
) -> ExpandResult:
    """Grow *span* outward until both edges sit on boundary characters.

    Each edge stays inside its own closest block ancestor and scans at most
    ``max_scan`` characters. Boundary characters left at the edges are
    trimmed afterwards.
    """

    try:
        return _expand(tree, span, block_tags, max_scan)
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Word boundary expansion failed; keeping the original span", exc_info=True)
        return ExpandResult(span, False)


def _expand(
    tree: HostTree,
    span: Span,
    block_tags: Collection[str],
    max_scan: int,
) -> ExpandResult:
    if span.collapsed:
        return ExpandResult(span, False)

    index = TextIndex.build(tree, common_ancestor(tree, span.start.node, span.end.node))
    start = index.resolve(span.start, forward=True)
    end = index.resolve(span.end, forward=False)
    if start is None or end is None:
        return ExpandResult(span, False)

    adjusted = False
    left_root = closest_block_ancestor(tree, start.node, block_tags)
    for node, position, ch in iter_chars_backward(tree, start, left_root, limit=max_scan):
        if is_boundary_char(ch):
            break
        start = Locator(node, position)
        adjusted = True

    right_root = closest_block_ancestor(tree, end.node, block_tags)
    for node, position, ch in iter_chars_forward(tree, end, right_root, limit=max_scan):
        if is_boundary_char(ch):
            break
        end = Locator(node, position + 1)
        adjusted = True

    start, end, cut_left, cut_right = _shrink_edges(tree, Span(start, end), is_boundary_char)
    return ExpandResult(Span(start, end), adjusted or cut_left or cut_right)


def adjust_selection_range(
    tree: HostTree,
    span: Span,
    *,
    block_tags: Collection[str] = BLOCK_TAGS,
    max_scan: int = DEFAULT_MAX_SCAN,
) -> ExpandResult:
    """Trim, then expand an incomplete word or any fragment to whole words.

    Unlike the stricter rule that expands a fragment only when trimming
    changed nothing, fragments are expanded even after trimming. On
    whitespace-trimmed edges the expansion cannot move, so only punctuation
    at the edges and unfinished words are affected. This keeps the operation
    idempotent.
    """

    try:
        trimmed = trim_boundary_whitespace(tree, span)
        if trimmed.span.collapsed:
            return ExpandResult(trimmed.span, trimmed.adjusted)

        classification = classify(tree, trimmed.span, block_tags=block_tags)
        if classification.type == "word" and classification.is_complete:
            return ExpandResult(trimmed.span, trimmed.adjusted)

        expanded = expand_to_word_boundaries(
            tree,
            trimmed.span,
            block_tags=block_tags,
            max_scan=max_scan,
        )
        return ExpandResult(expanded.span, trimmed.adjusted or expanded.adjusted)
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Selection adjustment failed; keeping the original span", exc_info=True)
        return ExpandResult(span, False)


__all__ = [
    "DEFAULT_MAX_SCAN",
    "adjust_selection_range",
    "expand_to_word_boundaries",
    "trim_boundary_whitespace",
]
