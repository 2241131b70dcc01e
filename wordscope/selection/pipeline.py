"""Turn a raw user selection into translation-ready requests."""
from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Literal

from wordscope.dom.host import HostTree
from wordscope.dom.models import Span
from wordscope.dom.traversal import clean_text, common_ancestor, is_inside_ignored
from wordscope.selection.adjuster import adjust_selection_range, trim_boundary_whitespace
from wordscope.selection.boundaries import classify
from wordscope.selection.context import extract_context, surrounding_text
from wordscope.selection.language import uses_spaceless_script
from wordscope.selection.models import SelectionOutcome, SelectionRequest
from wordscope.selection.overlap import AnchorRegistry, find_containing
from wordscope.selection.splitter import split_by_blocks

if TYPE_CHECKING:
    from wordscope.configuration.profile import SelectionProfile

logger = logging.getLogger("wordscope.selection.pipeline")

Trigger = Literal["double_click", "icon"]

_PURE_NUMBER = re.compile(r"[0-9]+")


def prepare_selection(
    tree: HostTree,
    span: Span,
    *,
    profile: SelectionProfile | None = None,
    registry: AnchorRegistry | None = None,
    trigger: Trigger = "double_click",
) -> SelectionOutcome:
    """Validate, split, adjust and contextualise a selection without touching the tree.

    Context is read for every target before the caller gets a chance to wrap
    anything, so the returned requests stay valid once annotations are
    inserted.
    """

    if profile is None:
        from wordscope.configuration.profile import SelectionProfile

        profile = SelectionProfile()
    original_text = _safe_text(tree, span)

    rejection = _rejection_reason(tree, span, original_text, profile, registry, trigger)
    if rejection is not None:
        status, reason = rejection
        logger.info(reason, extra={"status": status, "selection_length": len(original_text)})
        return SelectionOutcome(status=status, original_text=original_text, reason=reason)

    targets = split_by_blocks(tree, span, block_tags=profile.block_tags) or (span,)
    requests = tuple(
        request
        for request in (_prepare_target(tree, target, profile, registry) for target in targets)
        if request.text
    )
    if not requests:
        return SelectionOutcome(
            status="empty",
            original_text=original_text,
            reason="Selection contains no translatable text after adjustment.",
        )

    logger.info(
        "Prepared selection",
        extra={"trigger": trigger, "target_count": len(requests), "kinds": [r.kind for r in requests]},
    )
    return SelectionOutcome(status="ok", original_text=original_text, requests=requests)


def _rejection_reason(
    tree: HostTree,
    span: Span,
    text: str,
    profile: SelectionProfile,
    registry: AnchorRegistry | None,
    trigger: Trigger,
) -> tuple[str, str] | None:
    # Text inside ignored UI is always empty once cleaned, so check it first.
    ancestor = common_ancestor(tree, span.start.node, span.end.node)
    if is_inside_ignored(tree, ancestor):
        return "inside_ui", "Selection sits inside injected UI."
    if not text:
        return "empty", "Selection is empty."
    if len(text) > profile.max_selection_length:
        return "too_long", f"Selection too long ({len(text)} chars)."
    if trigger == "double_click" and _PURE_NUMBER.fullmatch(text):
        return "numeric", "Selection is a pure number."
    if trigger == "double_click" and registry is not None:
        if find_containing(tree, span, registry.anchors):
            return "inside_ui", "Selection sits inside an existing annotation."
    return None


def _prepare_target(
    tree: HostTree,
    target: Span,
    profile: SelectionProfile,
    registry: AnchorRegistry | None,
) -> SelectionRequest:
    detection_text = surrounding_text(
        tree,
        target,
        min_chars=profile.detection_min_chars,
        block_tags=profile.block_tags,
    )
    spaceless = uses_spaceless_script(detection_text)

    if spaceless:
        # Selections in spaceless scripts are trusted as drawn.
        adjusted = trim_boundary_whitespace(tree, target).span
        classification = classify(tree, adjusted, block_tags=profile.block_tags)
        kind = "fragment"
    else:
        adjusted = adjust_selection_range(
            tree,
            target,
            block_tags=profile.block_tags,
            max_scan=profile.max_scan_length,
        ).span
        classification = classify(tree, adjusted, block_tags=profile.block_tags)
        kind = classification.type

    text = _safe_text(tree, adjusted)
    context = extract_context(tree, adjusted, profile.extraction)
    overlapping = registry.overlapping(tree, adjusted) if registry is not None else ()

    logger.debug(
        "Prepared selection target",
        extra={"kind": kind, "spaceless_script": spaceless, "overlaps": list(overlapping)},
    )
    return SelectionRequest(
        kind=kind,
        text=text,
        span=adjusted,
        context=context,
        classification=classification,
        spaceless_script=spaceless,
        overlapping_anchor_ids=overlapping,
    )


def _safe_text(tree: HostTree, span: Span) -> str:
    try:
        return clean_text(tree, span).strip()
    except Exception:  # pragma: no cover - defensive guard
        logger.debug("Unable to read selection text", exc_info=True)
        return ""


__all__ = ["Trigger", "prepare_selection"]
