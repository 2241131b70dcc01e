"""Selection boundary and context extraction for annotated HTML documents."""
from __future__ import annotations

from .errors import WordscopeError

__all__ = ("__version__", "WordscopeError")

__version__ = "0.1.0"
