"""Text transformation helpers for shared use across modules."""
from __future__ import annotations

import re

_WHITESPACE_RUN = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Replace every whitespace run with a single space without trimming the ends."""

    return _WHITESPACE_RUN.sub(" ", text)


def build_selection_snippet(
    leading: str,
    selected: str,
    trailing: str,
    window: int = 30,
    *,
    marker: tuple[str, str] = ("[", "]"),
) -> str:
    """Return the selection wrapped in *marker* with up to *window* characters on each side."""

    if window < 0:
        raise ValueError("window must be non-negative")

    before = collapse_whitespace(leading)
    after = collapse_whitespace(trailing)

    prefix = "..." if len(before) > window else ""
    suffix = "..." if len(after) > window else ""
    before = before[-window:] if window else ""
    after = after[:window]

    opening, closing = marker
    return f"{prefix}{before}{opening}{collapse_whitespace(selected)}{closing}{after}{suffix}"


__all__ = ["build_selection_snippet", "collapse_whitespace"]
