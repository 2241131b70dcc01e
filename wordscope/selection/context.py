"""Sentence-level context extraction around a selection."""
from __future__ import annotations

import logging
import re
from typing import Collection, Sequence

from wordscope.dom.host import HostTree
from wordscope.dom.models import Span
from wordscope.dom.traversal import (
    BLOCK_TAGS,
    TextEntry,
    TextIndex,
    clean_text,
    clean_text_of,
    closest_block_ancestor,
    common_ancestor,
)
from wordscope.selection.models import ExtractedContext, ExtractionOptions
from wordscope.utils.text import collapse_whitespace

logger = logging.getLogger("wordscope.selection.context")

_DETECTION_CLIMB_LIMIT = 2


def extract_context(
    tree: HostTree,
    span: Span,
    options: ExtractionOptions | None = None,
) -> ExtractedContext:
    """Return the sentence around *span* plus neighbouring sentences.

    The scan never leaves the closest ancestor whose tag is one of
    ``options.boundary_tags`` (or the document root). Collapsed spans yield
    an empty context; a tree that cannot be read yields the selection text
    alone.
    """

    options = options or ExtractionOptions()
    if span.collapsed:
        return ExtractedContext()

    text = ""
    try:
        text = collapse_whitespace(clean_text(tree, span)).strip()
        return _extract(tree, span, options, text)
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Context extraction failed; returning selection text only", exc_info=True)
        return ExtractedContext.minimal(text)


def _extract(
    tree: HostTree,
    span: Span,
    options: ExtractionOptions,
    text: str,
) -> ExtractedContext:
    ancestor = common_ancestor(tree, span.start.node, span.end.node)
    scope = closest_block_ancestor(tree, ancestor, options.boundary_tags)
    index = TextIndex.build(tree, scope)

    start = index.resolve(span.start, forward=True)
    end = index.resolve(span.end, forward=False)
    if start is None or end is None:
        return ExtractedContext.minimal(text)

    visible = [entry for entry in index.entries if not entry.ignored]
    flat = "".join(entry.text for entry in visible)
    selection_start = _visible_position(visible, index.offset_of(start))
    selection_end = max(selection_start, _visible_position(visible, index.offset_of(end)))

    terminators = options.terminators
    sentence_start = _sentence_start(flat, selection_start, terminators)
    sentence_end = _sentence_end(flat, selection_end, terminators)

    leading = collapse_whitespace(flat[sentence_start:selection_start])
    trailing = collapse_whitespace(flat[selection_end:sentence_end])
    current = collapse_whitespace(leading + text + trailing).strip()

    previous: list[str] = []
    if options.prev_count:
        previous = split_sentences(flat[:sentence_start], terminators)[-options.prev_count :]
    following = split_sentences(flat[sentence_end:], terminators)[: options.next_count]

    return ExtractedContext(
        text=text,
        leading_text=leading,
        trailing_text=trailing,
        current_sentence=current,
        previous_sentences=tuple(previous),
        next_sentences=tuple(following),
    )


def _visible_position(visible: Sequence[TextEntry], offset: int) -> int:
    position = 0
    for entry in visible:
        if offset <= entry.start:
            break
        position += min(offset, entry.end) - entry.start
    return position


def _sentence_start(flat: str, position: int, terminators: Sequence[str]) -> int:
    last = max((flat.rfind(term, 0, position) for term in terminators), default=-1)
    return last + 1 if last >= 0 else 0


def _sentence_end(flat: str, position: int, terminators: Sequence[str]) -> int:
    hits = [hit for hit in (flat.find(term, position) for term in terminators) if hit >= 0]
    return min(hits) + 1 if hits else len(flat)


def split_sentences(chunk: str, terminators: Sequence[str]) -> list[str]:
    """Split *chunk* after each terminator, keeping terminators and dropping blanks."""

    if terminators:
        pattern = re.compile("(?<=[" + "".join(re.escape(term) for term in terminators) + r"])\s*")
        parts = pattern.split(chunk)
    else:
        parts = [chunk]
    sentences = (collapse_whitespace(part).strip() for part in parts)
    return [sentence for sentence in sentences if sentence]


def surrounding_text(
    tree: HostTree,
    span: Span,
    *,
    min_chars: int = 150,
    block_tags: Collection[str] = BLOCK_TAGS,
) -> str:
    """Return block text around *span*, widened by up to two blocks until *min_chars*."""

    try:
        ancestor = common_ancestor(tree, span.start.node, span.end.node)
        block = closest_block_ancestor(tree, ancestor, block_tags)
        text = clean_text_of(tree, block)
        climbs = 0
        while len(text.strip()) < min_chars and block is not tree.root and climbs < _DETECTION_CLIMB_LIMIT:
            parent = tree.parent_of(block)
            if parent is None:
                break
            block = closest_block_ancestor(tree, parent, block_tags)
            text = clean_text_of(tree, block)
            climbs += 1
        text = collapse_whitespace(text).strip()
        return text or clean_text(tree, span).strip()
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Unable to read text around the selection", exc_info=True)
        return ""


__all__ = ["extract_context", "split_sentences", "surrounding_text"]
