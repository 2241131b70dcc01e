"""Execution orchestrator for Wordscope CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from wordscope.configuration import SelectionProfile, load_profile
from wordscope.dom import SoupTree, clean_text, locate_text, parse_html
from wordscope.errors import (
    ConfigurationError,
    DocumentParseError,
    InputValidationError,
    SelectionNotFoundError,
    WordscopeError,
)
from wordscope.exit_codes import ExitCode
from wordscope.reporting import AnchorSummary, ReportEnvelope, ReportRenderOptions
from wordscope.selection import AnchorRegistry, prepare_selection, split_by_blocks
from wordscope.utils import LoadedDocument, load_html_document

logger = logging.getLogger("wordscope.orchestration.runner")


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of invoking an orchestration entry point."""

    exit_code: ExitCode
    status: str
    message: str | None = None
    remediation: str | None = None
    report: ReportEnvelope | None = None
    anchors: tuple[AnchorSummary, ...] = ()


_ERROR_MAPPINGS: tuple[
    tuple[type[WordscopeError], ExitCode, str, str | None],
    ...,
] = (
    (
        InputValidationError,
        ExitCode.INVALID_INPUT,
        "Input validation failed.",
        "Double-check the page path and file permissions.",
    ),
    (
        DocumentParseError,
        ExitCode.PARSE_ERROR,
        "Failed to parse the supplied page.",
        "Ensure the page is readable HTML encoded as UTF-8.",
    ),
    (
        ConfigurationError,
        ExitCode.CONFIG_ERROR,
        "The selection profile is invalid.",
        "Fix the profile file or run without --profile to use the defaults.",
    ),
    (
        SelectionNotFoundError,
        ExitCode.NO_MATCH,
        "The selection text was not found in the page.",
        "Copy the text exactly as rendered, or lower --occurrence.",
    ),
)


def run_inspection(
    page_path: Path,
    selection_text: str,
    *,
    occurrence: int = 1,
    trim_start: int = 0,
    trim_end: int = 0,
    profile_paths: Sequence[Path] | None = None,
    prev_count: int | None = None,
    next_count: int | None = None,
    wide: bool = False,
) -> ExecutionOutcome:
    """Locate a selection in a page and prepare it the way the annotator would."""

    try:
        document, profile, tree = _load(page_path, profile_paths)
        profile = profile.with_neighbor_counts(prev_count=prev_count, next_count=next_count)
        span = locate_text(
            tree,
            selection_text,
            occurrence=occurrence,
            trim_start=trim_start,
            trim_end=trim_end,
        )
        if span is None:
            raise SelectionNotFoundError(
                message=(
                    f"Occurrence {occurrence} of '{selection_text}' was not found in "
                    f"{document.display_name}."
                ),
            )

        registry = AnchorRegistry(tree.anchors(profile.anchor_class))
        logger.info(
            "Located selection",
            extra={
                "document": document.display_name,
                "occurrence": occurrence,
                "anchor_count": len(registry),
            },
        )
        outcome = prepare_selection(tree, span, profile=profile, registry=registry)
        blocks = tuple(
            clean_text(tree, block) for block in split_by_blocks(tree, span, block_tags=profile.block_tags)
        )
    except WordscopeError as error:
        return handle_domain_error(error)
    except Exception as error:  # pragma: no cover - defensive
        logger.exception("Unexpected error occurred while inspecting the selection.")
        return ExecutionOutcome(
            exit_code=ExitCode.UNEXPECTED_ERROR,
            status="failure",
            message=str(error) or "An unexpected error occurred while inspecting the selection.",
            remediation="Re-run without --quiet and inspect the logs before retrying.",
        )

    report = ReportEnvelope(
        document_name=document.display_name,
        outcome=outcome,
        blocks=blocks if len(blocks) > 1 else (),
        render_options=ReportRenderOptions(wide=wide),
    )
    summary = (
        f"Page {document.display_name} decoded as {document.display_encoding} "
        f"({len(document.text)} characters); {len(outcome.requests)} target(s) prepared."
    )
    return ExecutionOutcome(
        exit_code=ExitCode.SUCCESS,
        status="success" if outcome.accepted else "skipped",
        message=summary if outcome.accepted else outcome.reason,
        report=report,
    )


def list_anchors(page_path: Path, *, profile_paths: Sequence[Path] | None = None) -> ExecutionOutcome:
    """Collect the annotations already present in a page."""

    try:
        document, profile, tree = _load(page_path, profile_paths)
        summaries = tuple(
            AnchorSummary(id=anchor.id, text=clean_text(tree, anchor.span).strip())
            for anchor in tree.anchors(profile.anchor_class)
        )
    except WordscopeError as error:
        return handle_domain_error(error)

    logger.info(
        "Collected annotations",
        extra={"document": document.display_name, "anchor_count": len(summaries)},
    )
    return ExecutionOutcome(
        exit_code=ExitCode.SUCCESS,
        status="success",
        message=document.display_name,
        anchors=summaries,
    )


def _load(
    page_path: Path,
    profile_paths: Sequence[Path] | None,
) -> tuple[LoadedDocument, SelectionProfile, SoupTree]:
    profile = load_profile(profile_paths)
    document = load_html_document(page_path)
    tree = parse_html(document.text, ignored_classes=profile.ignored_classes)
    logger.info(
        "Loaded page",
        extra={
            "document": document.display_name,
            "encoding": document.display_encoding,
            "profile_sources": [str(path) for path in profile.sources],
        },
    )
    return document, profile, tree


def handle_domain_error(error: WordscopeError) -> ExecutionOutcome:
    """Translate a domain error into an execution outcome and log remediation hints."""

    exit_code, default_message, default_remediation = _map_error(error)
    message = error.message or default_message
    remediation = error.remediation or default_remediation

    logger.error(message, extra={"exit_code": int(exit_code)})
    if remediation:
        logger.error("Remediation: %s", remediation)

    return ExecutionOutcome(
        exit_code=exit_code,
        status="failure",
        message=message,
        remediation=remediation,
    )


def _map_error(error: WordscopeError) -> tuple[ExitCode, str, str | None]:
    """Match an error instance to its configured exit code and remediation."""

    for error_type, exit_code, message, remediation in _ERROR_MAPPINGS:
        if isinstance(error, error_type):
            return exit_code, message, remediation

    return (
        ExitCode.UNEXPECTED_ERROR,
        "An unexpected error occurred while inspecting the selection.",
        "Enable logging (omit --quiet) and retry. If the issue persists, file a bug with the logs.",
    )


__all__ = ["ExecutionOutcome", "handle_domain_error", "list_anchors", "run_inspection"]
