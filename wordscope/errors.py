"""Domain-specific exception hierarchy for Wordscope."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class WordscopeError(Exception):
    """Base exception for Wordscope errors with optional remediation text."""

    message: str
    remediation: str | None = None

    def __post_init__(self) -> None:  # pragma: no cover - dataclass validation hook
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class InputValidationError(WordscopeError):
    """Raised when the CLI receives invalid or missing input."""


class DocumentParseError(WordscopeError):
    """Raised when an HTML document cannot be turned into a host tree."""


class ConfigurationError(WordscopeError):
    """Raised when a selection profile is malformed."""


class SelectionNotFoundError(WordscopeError):
    """Raised when the requested selection text does not occur in the document."""


class HostTreeError(WordscopeError):
    """Raised by host adapters when a node is detached or unreadable."""


__all__ = [
    "WordscopeError",
    "InputValidationError",
    "DocumentParseError",
    "ConfigurationError",
    "SelectionNotFoundError",
    "HostTreeError",
]
