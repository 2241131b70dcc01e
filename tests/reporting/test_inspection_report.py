from __future__ import annotations

from wordscope.dom import locate_text, parse_html
from wordscope.reporting import (
    AnchorSummary,
    ReportEnvelope,
    ReportRenderOptions,
    render_anchor_listing,
    render_selection_report,
    report_to_dict,
)
from wordscope.selection import SelectionOutcome, prepare_selection


def _envelope(markup: str, needle: str, *, wide: bool = False) -> ReportEnvelope:
    tree = parse_html(markup)
    span = locate_text(tree, needle)
    assert span is not None
    return ReportEnvelope(
        document_name="page.html",
        outcome=prepare_selection(tree, span),
        render_options=ReportRenderOptions(wide=wide),
    )


def test_render_selection_report_default_layout() -> None:
    """Targets and context tables appear for an accepted selection."""

    envelope = _envelope("<p>Before. The quick brown fox jumps. After.</p>", "uic")

    output = render_selection_report(envelope)

    assert "Selection Report: page.html" in output
    assert "Selected text : uic" in output
    assert "Status        : ok" in output
    header_line = next(line for line in output.splitlines() if "KIND" in line)
    assert "TEXT" in header_line
    assert "OVERLAPS" in header_line
    assert "Context (target 1)" in output
    assert "The [quick] brown fox jumps." in output
    assert "Before." in output
    assert "After." in output
    assert "Blocks" not in output


def test_render_selection_report_rejected_selection() -> None:
    """Rejected selections show the reason and a placeholder row."""

    envelope = ReportEnvelope(
        document_name="page.html",
        outcome=SelectionOutcome(status="numeric", original_text="42", reason="Selection is a pure number."),
    )

    output = render_selection_report(envelope)

    assert "Reason        : Selection is a pure number." in output
    assert "-- no translatable targets --" in output
    assert "Context (target" not in output
    assert not envelope.has_requests


def test_render_selection_report_lists_blocks() -> None:
    tree = parse_html("<div><p>First paragraph.</p><p>Second paragraph.</p></div>")
    span = locate_text(tree, "paragraph.Second")
    envelope = ReportEnvelope(
        document_name="page.html",
        outcome=prepare_selection(tree, span),
        blocks=("paragraph.", "Second"),
    )

    output = render_selection_report(envelope)

    assert "Blocks" in output
    assert "  1. paragraph." in output
    assert "  2. Second" in output
    assert "Context (target 2)" in output


def test_wide_layout_keeps_longer_values() -> None:
    sentence = "The fox " + "walks far away " * 8 + "home."
    narrow = render_selection_report(_envelope(f"<p>{sentence}</p>", "fox"))
    wide = render_selection_report(_envelope(f"<p>{sentence}</p>", "fox", wide=True))

    narrow_line = next(line for line in narrow.splitlines() if line.startswith("current sentence"))
    wide_line = next(line for line in wide.splitlines() if line.startswith("current sentence"))
    assert narrow_line.rstrip().endswith("...")
    assert len(wide_line.rstrip()) > len(narrow_line.rstrip())


def test_report_to_dict_shape() -> None:
    envelope = _envelope("<p>The quick brown fox jumps.</p>", "uic")

    data = report_to_dict(envelope)

    assert data["document"] == "page.html"
    assert data["status"] == "ok"
    assert data["reason"] is None
    assert data["blocks"] == []
    (target,) = data["targets"]
    assert target["kind"] == "word"
    assert target["text"] == "quick"
    assert target["classification"]["isComplete"] is True
    assert target["overlappingAnchors"] == []
    assert target["payload"]["word"] == "quick"
    assert target["payload"]["originalSentence"] == "The quick brown fox jumps."


def test_render_anchor_listing() -> None:
    output = render_anchor_listing(
        "page.html",
        (AnchorSummary(id="anchor1", text="quick brown fox"), AnchorSummary(id="t-2", text="lazy")),
    )

    assert output.splitlines()[0] == "Annotations: page.html"
    assert "anchor1" in output
    assert "quick brown fox" in output
    assert "t-2" in output


def test_render_anchor_listing_placeholder() -> None:
    output = render_anchor_listing("page.html", ())

    assert "-- no annotations found --" in output
