from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from wordscope import __version__
from wordscope.cli import ExitCode, app, configure_logging
from wordscope.errors import DocumentParseError, InputValidationError

runner = CliRunner()

PAGE = """
<html>
  <body>
    <p>Intro sentence. The quick brown fox jumps over the lazy dog. It sleeps. Then it wakes.</p>
    <p>Call 12345 now.</p>
    <p>An <span class="ai-translator-anchor" id="anchor1">annotated phrase</span> lives here.</p>
  </body>
</html>
"""


@pytest.fixture(autouse=True)
def reset_logging_state() -> None:
    """Ensure each test runs with a clean logging configuration."""

    configure_logging._configured = False  # type: ignore[attr-defined]
    configure_logging._level = logging.INFO  # type: ignore[attr-defined]
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    yield
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    configure_logging._configured = False  # type: ignore[attr-defined]
    configure_logging._level = logging.INFO  # type: ignore[attr-defined]


@pytest.fixture
def page(tmp_path: Path) -> Path:
    path = tmp_path / "page.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


def _normalize(output: str) -> str:
    """Collapse whitespace to simplify assertions across Rich formatting."""

    return " ".join(output.split())


def test_root_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    normalized = _normalize(result.stdout)
    assert "inspect" in normalized
    assert "anchors" in normalized
    assert "--quiet" in normalized


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    assert result.stdout.strip() == __version__


def test_inspect_requires_selection(page: Path) -> None:
    result = runner.invoke(app, ["inspect", str(page)])

    assert result.exit_code == int(ExitCode.INVALID_INPUT)
    assert "--select" in result.output


def test_inspect_rejects_missing_page(tmp_path: Path) -> None:
    result = runner.invoke(app, ["inspect", str(tmp_path / "absent.html"), "--select", "fox"])

    assert result.exit_code == int(ExitCode.INVALID_INPUT)


def test_inspect_renders_report(page: Path) -> None:
    result = runner.invoke(app, ["inspect", str(page), "--select", "uic"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    output = _normalize(result.stdout)
    assert "Page page.html decoded as UTF-8" in output
    assert "Selection Report: page.html" in output
    assert "Status : ok" in output
    assert "The [quick] brown fox" in output
    assert "The quick brown fox jumps over the lazy dog." in output
    assert "Intro sentence." in output
    assert "It sleeps." in output


def test_inspect_json_output(page: Path) -> None:
    result = runner.invoke(
        app,
        ["--quiet", "inspect", str(page), "--select", "ick bro", "--json", "--next", "2"],
    )

    assert result.exit_code == int(ExitCode.SUCCESS)
    data = json.loads(result.stdout)
    assert data["status"] == "ok"
    (target,) = data["targets"]
    assert target["kind"] == "fragment"
    assert target["text"] == "quick brown"
    assert target["payload"]["fragment"] == "quick brown"
    assert target["payload"]["nextSentences"] == ["It sleeps.", "Then it wakes."]


def test_inspect_reports_skipped_selection(page: Path) -> None:
    result = runner.invoke(app, ["inspect", str(page), "--select", "12345"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    output = _normalize(result.stdout)
    assert "Selection is a pure number." in output
    assert "Status : numeric" in output


def test_inspect_reports_annotation_overlap(page: Path) -> None:
    result = runner.invoke(app, ["inspect", str(page), "--select", "annotated phrase lives"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    assert "anchor1" in _normalize(result.stdout)


def test_inspect_selection_not_found(page: Path) -> None:
    result = runner.invoke(app, ["inspect", str(page), "--select", "zebra"])

    assert result.exit_code == int(ExitCode.NO_MATCH)
    combined = _normalize(result.output)
    assert "was not found" in combined
    assert "Remediation" in combined


def test_inspect_rejects_invalid_profile(page: Path, tmp_path: Path) -> None:
    profile = tmp_path / "profile.yaml"
    profile.write_text("rendering:\n  wide: true\n", encoding="utf-8")

    result = runner.invoke(app, ["inspect", str(page), "--select", "fox", "--profile", str(profile)])

    assert result.exit_code == int(ExitCode.CONFIG_ERROR)
    assert "unknown section" in _normalize(result.output)


def test_inspect_applies_profile(page: Path, tmp_path: Path) -> None:
    profile = tmp_path / "profile.yaml"
    profile.write_text("extraction:\n  prev_count: 0\n  next_count: 0\n", encoding="utf-8")

    result = runner.invoke(
        app,
        ["--quiet", "inspect", str(page), "--select", "fox", "--json", "--profile", str(profile)],
    )

    assert result.exit_code == int(ExitCode.SUCCESS)
    payload = json.loads(result.stdout)["targets"][0]["payload"]
    assert "previousSentences" not in payload
    assert "nextSentences" not in payload


def test_quiet_flag_suppresses_summary(page: Path) -> None:
    result = runner.invoke(app, ["--quiet", "inspect", str(page), "--select", "fox"])

    assert result.exit_code == int(ExitCode.SUCCESS)
    assert "decoded as" not in _normalize(result.stdout)
    assert getattr(configure_logging, "_level", logging.INFO) == logging.WARNING


@pytest.mark.parametrize(
    ("target", "error_factory", "expected_code", "expected_message"),
    [
        (
            "wordscope.orchestration.runner.load_html_document",
            lambda: InputValidationError("Page is locked", remediation="Close the editor"),
            ExitCode.INVALID_INPUT,
            "Page is locked",
        ),
        (
            "wordscope.orchestration.runner.parse_html",
            lambda: DocumentParseError("Markup is unreadable"),
            ExitCode.PARSE_ERROR,
            "Markup is unreadable",
        ),
    ],
)
def test_inspect_maps_domain_errors(
    monkeypatch: pytest.MonkeyPatch,
    page: Path,
    target: str,
    error_factory,
    expected_code: ExitCode,
    expected_message: str,
) -> None:
    def _raise_error(*args: object, **kwargs: object) -> None:
        raise error_factory()

    monkeypatch.setattr(target, _raise_error)

    result = runner.invoke(app, ["inspect", str(page), "--select", "fox"], catch_exceptions=False)

    assert result.exit_code == int(expected_code)
    combined = _normalize(result.output)
    assert expected_message in combined
    assert "Remediation" in combined


def test_inspect_handles_unexpected_errors(monkeypatch: pytest.MonkeyPatch, page: Path) -> None:
    def _explode(*args: object, **kwargs: object) -> None:
        raise RuntimeError("boom")

    monkeypatch.setattr("wordscope.orchestration.runner.prepare_selection", _explode)

    result = runner.invoke(app, ["inspect", str(page), "--select", "fox"], catch_exceptions=False)

    assert result.exit_code == int(ExitCode.UNEXPECTED_ERROR)


def test_anchors_lists_existing_annotations(page: Path) -> None:
    result = runner.invoke(app, ["anchors", str(page)])

    assert result.exit_code == int(ExitCode.SUCCESS)
    output = _normalize(result.stdout)
    assert "Annotations: page.html" in output
    assert "anchor1" in output
    assert "annotated phrase" in output


def test_anchors_placeholder_for_plain_page(tmp_path: Path) -> None:
    plain = tmp_path / "plain.html"
    plain.write_text("<p>Nothing to see.</p>", encoding="utf-8")

    result = runner.invoke(app, ["anchors", str(plain)])

    assert result.exit_code == int(ExitCode.SUCCESS)
    assert "-- no annotations found --" in result.stdout
