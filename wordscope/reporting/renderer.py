"""Rendering utilities for selection inspection reports."""
from __future__ import annotations

from dataclasses import dataclass
import unicodedata
from typing import Sequence

from wordscope.selection.models import SelectionOutcome, SelectionRequest
from wordscope.utils.text import build_selection_snippet, collapse_whitespace

_INDEX_WIDTH = 3
_KIND_WIDTH = 8
_TEXT_WIDTH = 32
_OVERLAP_WIDTH = 28
_FIELD_WIDTH = 18
_VALUE_WIDTH = 72
_WIDE_VALUE_WIDTH = 120
_ID_WIDTH = 24
_ANCHOR_TEXT_WIDTH = 60
_TITLE_DEFAULT = "Selection Report"
_NO_TARGETS = "-- no translatable targets --"
_NO_ANCHORS = "-- no annotations found --"


@dataclass(frozen=True)
class ReportRenderOptions:
    """Render-time switches influencing CLI layout."""

    wide: bool = False


@dataclass(frozen=True)
class ReportEnvelope:
    """Structured data needed to render a selection report."""

    document_name: str
    outcome: SelectionOutcome
    blocks: tuple[str, ...] = ()
    render_options: ReportRenderOptions = ReportRenderOptions()

    @property
    def has_requests(self) -> bool:
        return bool(self.outcome.requests)


@dataclass(frozen=True)
class AnchorSummary:
    """An existing annotation and the visible text it wraps."""

    id: str
    text: str


def render_selection_report(envelope: ReportEnvelope) -> str:
    """Render the selection, its per-block targets and their context."""

    outcome = envelope.outcome
    value_width = _WIDE_VALUE_WIDTH if envelope.render_options.wide else _VALUE_WIDTH

    lines: list[str] = [f"{_TITLE_DEFAULT}: {envelope.document_name}"]
    lines.append(f"Selected text : {collapse_whitespace(outcome.original_text)}")
    lines.append(f"Status        : {outcome.status}")
    if outcome.reason:
        lines.append(f"Reason        : {outcome.reason}")

    if envelope.blocks:
        lines.append("")
        lines.append("Blocks")
        for position, block in enumerate(envelope.blocks, start=1):
            lines.append(f"  {position}. {_truncate(collapse_whitespace(block), value_width)}")

    lines.append("")
    lines.append("Targets")
    lines.extend(_build_target_table(outcome.requests))

    for position, request in enumerate(outcome.requests, start=1):
        lines.append("")
        lines.append(f"Context (target {position})")
        lines.extend(_build_context_table(request, value_width))

    return "\n".join(lines)


def render_anchor_listing(document_name: str, anchors: Sequence[AnchorSummary]) -> str:
    """Render the annotations already present in a page."""

    columns = (("Anchor", _ID_WIDTH, "left"), ("Text", _ANCHOR_TEXT_WIDTH, "left"))
    lines = [f"Annotations: {document_name}", _format_header(columns), _format_separator(columns)]
    if not anchors:
        lines.append(_placeholder_row(columns, _NO_ANCHORS))
    for anchor in anchors:
        lines.append(_format_row((anchor.id, anchor.text), columns))
    return "\n".join(lines)


def report_to_dict(envelope: ReportEnvelope) -> dict[str, object]:
    """Return a JSON-ready representation of the report."""

    outcome = envelope.outcome
    return {
        "document": envelope.document_name,
        "status": outcome.status,
        "reason": outcome.reason,
        "selection": outcome.original_text,
        "blocks": list(envelope.blocks),
        "targets": [_request_to_dict(request) for request in outcome.requests],
    }


def _request_to_dict(request: SelectionRequest) -> dict[str, object]:
    classification = request.classification
    return {
        "kind": request.kind,
        "text": request.text,
        "spacelessScript": request.spaceless_script,
        "classification": {
            "type": classification.type,
            "leftComplete": classification.left_complete,
            "rightComplete": classification.right_complete,
            "isComplete": classification.is_complete,
            "hasBoundaryWhitespace": classification.has_boundary_whitespace,
        },
        "overlappingAnchors": list(request.overlapping_anchor_ids),
        "payload": request.to_payload(),
    }


def _build_target_table(requests: Sequence[SelectionRequest]) -> list[str]:
    columns = (
        ("#", _INDEX_WIDTH, "right"),
        ("Kind", _KIND_WIDTH, "left"),
        ("Text", _TEXT_WIDTH, "left"),
        ("Overlaps", _OVERLAP_WIDTH, "left"),
    )
    rows = [
        _format_row(
            (
                str(position),
                request.kind,
                request.text,
                ", ".join(request.overlapping_anchor_ids) or "--",
            ),
            columns,
        )
        for position, request in enumerate(requests, start=1)
    ]
    if not rows:
        rows = [_placeholder_row(columns, _NO_TARGETS)]
    return [_format_header(columns), _format_separator(columns), *rows]


def _build_context_table(request: SelectionRequest, value_width: int) -> list[str]:
    context = request.context
    columns = (("Field", _FIELD_WIDTH, "left"), ("Value", value_width, "left"))
    values = (
        ("sentence", build_selection_snippet(context.leading_text, request.text, context.trailing_text)),
        ("leading text", repr(context.leading_text)),
        ("trailing text", repr(context.trailing_text)),
        ("current sentence", context.current_sentence),
        ("previous", " / ".join(context.previous_sentences) or "--"),
        ("next", " / ".join(context.next_sentences) or "--"),
    )
    rows = [_format_row(pair, columns) for pair in values]
    return [_format_header(columns), _format_separator(columns), *rows]


def _format_header(columns: Sequence[tuple[str, int, str]]) -> str:
    return " | ".join(_pad_text(title.upper(), width) for title, width, _ in columns)


def _format_separator(columns: Sequence[tuple[str, int, str]]) -> str:
    return "-+-".join("-" * width for _, width, _ in columns)


def _format_row(values: Sequence[str], columns: Sequence[tuple[str, int, str]]) -> str:
    return " | ".join(
        _pad_text(value, width, align=alignment)
        for value, (_, width, alignment) in zip(values, columns)
    )


def _placeholder_row(columns: Sequence[tuple[str, int, str]], placeholder: str) -> str:
    # Placeholders span the whole row.
    merged_width = sum(width for _, width, _ in columns) + 3 * (len(columns) - 1)
    return _pad_text(placeholder, merged_width)


def _pad_text(value: str, width: int, *, align: str = "left") -> str:
    text = _truncate(collapse_whitespace(str(value)).strip(), width)
    padding = " " * max(0, width - _display_width(text))
    if align == "right":
        return padding + text
    return text + padding


def _truncate(value: str, width: int) -> str:
    if _display_width(value) <= width:
        return value
    if width <= 3:
        return _clip(value, width)
    return _clip(value, width - 3) + "..."


def _clip(value: str, width: int) -> str:
    used = 0
    kept: list[str] = []
    for ch in value:
        size = _char_width(ch)
        if used + size > width:
            break
        kept.append(ch)
        used += size
    return "".join(kept)


def _char_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def _display_width(value: str) -> int:
    return sum(_char_width(ch) for ch in value)


__all__ = [
    "AnchorSummary",
    "ReportEnvelope",
    "ReportRenderOptions",
    "render_anchor_listing",
    "render_selection_report",
    "report_to_dict",
]
