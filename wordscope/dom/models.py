"""Value types describing positions and ranges inside a host tree."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, eq=False)
class Locator:
    """A position inside the tree: a node plus a character or child offset.

    Text locators count characters; element locators count children. Two
    locators are equal only when they reference the very same node object,
    because host nodes may compare equal by content.
    """

    node: Any
    offset: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locator):
            return NotImplemented
        return self.node is other.node and self.offset == other.offset

    def __hash__(self) -> int:
        return hash((id(self.node), self.offset))

    def __repr__(self) -> str:
        return f"Locator({type(self.node).__name__}@{id(self.node):#x}, {self.offset})"

    def moved(self, offset: int) -> Locator:
        """Return a locator on the same node at *offset*."""

        return Locator(self.node, offset)


@dataclass(frozen=True)
class Span:
    """An ordered pair of locators with start not after end."""

    start: Locator
    end: Locator

    @classmethod
    def within(cls, node: Any, start: int, end: int | None = None) -> Span:
        """Build a span covering ``[start, end)`` of a single node."""

        return cls(Locator(node, start), Locator(node, start if end is None else end))

    @classmethod
    def collapsed_at(cls, locator: Locator) -> Span:
        return cls(locator, locator)

    @property
    def collapsed(self) -> bool:
        """Return True when the span covers no position at all."""

        return self.start == self.end


@dataclass(frozen=True)
class Anchor:
    """An existing annotation wrapping a span, identified by a stable id."""

    id: str
    span: Span


__all__ = ["Anchor", "Locator", "Span"]
