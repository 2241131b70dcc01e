"""Utility helpers shared across Wordscope modules."""
from __future__ import annotations

from .io import LoadedDocument, format_display_path, load_html_document, normalize_newlines
from .text import build_selection_snippet, collapse_whitespace

__all__ = [
    "LoadedDocument",
    "build_selection_snippet",
    "collapse_whitespace",
    "format_display_path",
    "load_html_document",
    "normalize_newlines",
]
