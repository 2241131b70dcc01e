"""Selection classification, adjustment, splitting, context and overlap detection."""
from __future__ import annotations

from .adjuster import adjust_selection_range, expand_to_word_boundaries, trim_boundary_whitespace
from .boundaries import classify, is_boundary_char, is_whitespace_char
from .context import extract_context, surrounding_text
from .language import detect_language, uses_spaceless_script
from .models import (
    BoundaryClassification,
    ExpandResult,
    ExtractedContext,
    ExtractionOptions,
    SelectionOutcome,
    SelectionRequest,
    TrimResult,
)
from .overlap import AnchorRegistry, find_overlapping
from .pipeline import prepare_selection
from .splitter import split_by_blocks

__all__ = [
    "AnchorRegistry",
    "BoundaryClassification",
    "ExpandResult",
    "ExtractedContext",
    "ExtractionOptions",
    "SelectionOutcome",
    "SelectionRequest",
    "TrimResult",
    "adjust_selection_range",
    "classify",
    "detect_language",
    "expand_to_word_boundaries",
    "extract_context",
    "find_overlapping",
    "is_boundary_char",
    "is_whitespace_char",
    "prepare_selection",
    "split_by_blocks",
    "surrounding_text",
    "trim_boundary_whitespace",
    "uses_spaceless_script",
]
