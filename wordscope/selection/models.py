"""Result and option types produced by the selection components."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from wordscope.dom.models import Span

BoundaryType = Literal["word", "fragment"]

DEFAULT_BOUNDARY_TAGS: frozenset[str] = frozenset(
    {"p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote"}
)
DEFAULT_TERMINATORS: tuple[str, ...] = (".", "?", "!", "。", "？", "！", "…")


@dataclass(frozen=True)
class BoundaryClassification:
    """Whether a span is a word or a fragment and whether its edges are complete."""

    type: BoundaryType
    left_complete: bool
    right_complete: bool
    is_complete: bool
    has_boundary_whitespace: bool

    @classmethod
    def empty(cls) -> BoundaryClassification:
        return cls(
            type="fragment",
            left_complete=True,
            right_complete=True,
            is_complete=True,
            has_boundary_whitespace=False,
        )


@dataclass(frozen=True)
class TrimResult:
    span: Span
    adjusted: bool
    had_leading_whitespace: bool
    had_trailing_whitespace: bool


@dataclass(frozen=True)
class ExpandResult:
    span: Span
    adjusted: bool


@dataclass(frozen=True)
class ExtractedContext:
    """Sentence-level context surrounding a span."""

    text: str = ""
    leading_text: str = ""
    trailing_text: str = ""
    current_sentence: str = ""
    previous_sentences: tuple[str, ...] = ()
    next_sentences: tuple[str, ...] = ()

    @classmethod
    def minimal(cls, text: str) -> ExtractedContext:
        """Context carrying only the selection text, used when the tree cannot be read."""

        return cls(text=text, current_sentence=text)


@dataclass(frozen=True)
class ExtractionOptions:
    """Knobs for sentence context extraction.

    Tags are compared case-insensitively and terminators are single
    characters; a custom tag set replaces the default one entirely.
    """

    boundary_tags: frozenset[str] = DEFAULT_BOUNDARY_TAGS
    terminators: tuple[str, ...] = DEFAULT_TERMINATORS
    prev_count: int = 1
    next_count: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "boundary_tags",
            frozenset(tag.strip().lower() for tag in self.boundary_tags if tag and tag.strip()),
        )
        terminators = tuple(dict.fromkeys(term for term in self.terminators if term))
        if any(len(term) != 1 for term in terminators):
            raise ValueError("terminators must be single characters")
        object.__setattr__(self, "terminators", terminators)
        object.__setattr__(self, "prev_count", max(0, int(self.prev_count)))
        object.__setattr__(self, "next_count", max(0, int(self.next_count)))


@dataclass(frozen=True)
class SelectionRequest:
    """A prepared translation target: adjusted span plus the context read before mutation."""

    kind: BoundaryType
    text: str
    span: Span
    context: ExtractedContext
    classification: BoundaryClassification
    spaceless_script: bool = False
    overlapping_anchor_ids: tuple[str, ...] = ()

    def to_payload(self) -> dict[str, object]:
        """Return the context object consumed by the translation service."""

        context = self.context
        payload: dict[str, object] = {
            self.kind: self.text,
            "leadingText": context.leading_text,
            "trailingText": context.trailing_text,
            "originalSentence": context.current_sentence,
        }
        if context.previous_sentences:
            payload["previousSentences"] = list(context.previous_sentences)
        if context.next_sentences:
            payload["nextSentences"] = list(context.next_sentences)
        return payload


@dataclass(frozen=True)
class SelectionOutcome:
    """Result of running the selection pipeline over one user selection."""

    status: str
    original_text: str
    requests: tuple[SelectionRequest, ...] = field(default_factory=tuple)
    reason: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == "ok"


__all__ = [
    "BoundaryClassification",
    "BoundaryType",
    "DEFAULT_BOUNDARY_TAGS",
    "DEFAULT_TERMINATORS",
    "ExpandResult",
    "ExtractedContext",
    "ExtractionOptions",
    "SelectionOutcome",
    "SelectionRequest",
    "TrimResult",
]
