"""Reporting helpers for Wordscope CLI output."""
from __future__ import annotations

from .renderer import (
    AnchorSummary,
    ReportEnvelope,
    ReportRenderOptions,
    render_anchor_listing,
    render_selection_report,
    report_to_dict,
)

__all__ = [
    "AnchorSummary",
    "ReportEnvelope",
    "ReportRenderOptions",
    "render_anchor_listing",
    "render_selection_report",
    "report_to_dict",
]
