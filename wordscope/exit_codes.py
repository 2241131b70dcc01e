"""Shared exit code definitions for Wordscope CLI operations."""
from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Deterministic exit codes returned by every command."""

    SUCCESS = 0
    UNEXPECTED_ERROR = 1
    INVALID_INPUT = 2
    PARSE_ERROR = 3
    CONFIG_ERROR = 4
    NO_MATCH = 5


__all__ = ["ExitCode"]
