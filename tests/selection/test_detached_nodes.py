from __future__ import annotations

from typing import Any

import pytest

from wordscope.dom import Span, locate_text, parse_html
from wordscope.errors import HostTreeError
from wordscope.selection import (
    BoundaryClassification,
    ExpandResult,
    ExtractedContext,
    TrimResult,
    adjust_selection_range,
    classify,
    expand_to_word_boundaries,
    extract_context,
    find_overlapping,
    split_by_blocks,
    trim_boundary_whitespace,
)

MARKUP = (
    '<p>The quick <b>brown</b> fox jumps over the '
    '<span class="ai-translator-anchor" id="anchor1">lazy dog</span>.</p>'
)


class VanishingTree:
    """Delegates to a real tree but fails every text read."""

    def __init__(self, tree: Any) -> None:
        self._tree = tree

    def __getattr__(self, name: str) -> Any:
        return getattr(self._tree, name)

    def text_of(self, node: Any) -> str:
        raise HostTreeError(message="Node vanished while reading.")


@pytest.fixture
def detached():
    tree = parse_html(MARKUP)
    anchors = tree.anchors()
    bold = tree.root.find("b")
    span = Span.within(bold.contents[0], 1, 5)
    bold.extract()
    return tree, span, anchors


def test_operations_survive_a_detached_selection(detached) -> None:
    tree, span, anchors = detached

    trimmed = trim_boundary_whitespace(tree, span)
    assert isinstance(trimmed, TrimResult)
    assert trimmed.span == span
    assert not trimmed.adjusted

    assert isinstance(expand_to_word_boundaries(tree, span), ExpandResult)
    assert isinstance(adjust_selection_range(tree, span), ExpandResult)
    assert isinstance(classify(tree, span), BoundaryClassification)
    assert isinstance(extract_context(tree, span), ExtractedContext)
    assert isinstance(split_by_blocks(tree, span), tuple)
    assert find_overlapping(tree, span, anchors) == ()


def test_failing_host_reads_degrade_to_fallbacks() -> None:
    real = parse_html(MARKUP)
    span = locate_text(real, "rown fo")
    assert span is not None
    anchors = real.anchors()
    tree = VanishingTree(real)

    assert trim_boundary_whitespace(tree, span) == TrimResult(span, False, False, False)
    assert expand_to_word_boundaries(tree, span) == ExpandResult(span, False)
    assert adjust_selection_range(tree, span) == ExpandResult(span, False)
    assert classify(tree, span) == BoundaryClassification.empty()
    assert extract_context(tree, span) == ExtractedContext.minimal("")
    assert split_by_blocks(tree, span) == ()
    assert find_overlapping(tree, span, anchors) == ()
