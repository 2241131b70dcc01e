"""Orchestration layer for Wordscope."""
from __future__ import annotations

from .runner import ExecutionOutcome, handle_domain_error, list_anchors, run_inspection

__all__ = [
    "ExecutionOutcome",
    "handle_domain_error",
    "list_anchors",
    "run_inspection",
]
