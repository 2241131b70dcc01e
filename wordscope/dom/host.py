"""Host tree protocol read by the selection core."""
from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class HostTree(Protocol):
    """Read-only view of a document tree owned by the caller.

    The core never mutates the tree and never holds on to it between calls.
    Nodes are opaque; identity (``is``) is the only comparison the core
    performs on them.
    """

    @property
    def root(self) -> Any:
        """Top of the readable document, e.g. ``<body>``."""

    def is_text(self, node: Any) -> bool:
        """Return True for text nodes."""

    def text_of(self, node: Any) -> str:
        """Return the character content of a node."""

    def parent_of(self, node: Any) -> Any | None:
        """Return the parent of *node*, or None above the document."""

    def children_of(self, node: Any) -> Sequence[Any]:
        """Return ordered children; text nodes have none."""

    def tag_of(self, node: Any) -> str | None:
        """Return the lower-case tag name of an element, None for text."""

    def is_ignored(self, node: Any) -> bool:
        """Return True for elements whose subtree is injected UI."""


__all__ = ["HostTree"]
