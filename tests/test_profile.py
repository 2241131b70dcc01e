from __future__ import annotations

from pathlib import Path

import pytest

from wordscope.configuration import SelectionProfile, load_profile
from wordscope.errors import ConfigurationError
from wordscope.selection import ExtractionOptions


def _write(path: Path, content: str) -> Path:
    path.write_text(content.strip(), encoding="utf-8")
    return path


def test_load_profile_defaults() -> None:
    profile = load_profile()

    assert profile == SelectionProfile()
    assert profile.extraction.prev_count == 1
    assert profile.extraction.next_count == 1
    assert "。" in profile.extraction.terminators
    assert "p" in profile.extraction.boundary_tags
    assert "section" not in profile.extraction.boundary_tags
    assert "section" in profile.block_tags
    assert profile.max_selection_length == 800
    assert profile.sources == ()


def test_load_profile_merges_sources_in_order(tmp_path: Path) -> None:
    base = _write(
        tmp_path / "base.yaml",
        """
extraction:
  boundary_tags: [SECTION, Article]
  prev_count: 3
selection:
  max_scan_length: 10
""",
    )
    override = _write(
        tmp_path / "override.yaml",
        """
extraction:
  prev_count: 0
  terminators: [";"]
selection:
  ignored_classes: [popup]
""",
    )

    profile = load_profile([base, override])

    assert profile.extraction.boundary_tags == frozenset({"section", "article"})
    assert profile.extraction.prev_count == 0
    assert profile.extraction.terminators == (";",)
    assert profile.max_scan_length == 10
    assert profile.ignored_classes == ("popup",)
    assert profile.sources == (base.resolve(), override.resolve())


def test_empty_profile_file_keeps_defaults(tmp_path: Path) -> None:
    empty = _write(tmp_path / "empty.yaml", "")

    profile = load_profile([empty])

    assert profile.extraction.next_count == 1
    assert profile.sources == (empty.resolve(),)


@pytest.mark.parametrize(
    ("content", "fragment"),
    [
        ("extraction: [1, 2", "invalid yaml"),
        ("- just\n- a list", "mapping at the root"),
        ("rendering:\n  wide: true", "unknown section"),
        ("extraction:\n  window: 3", "unknown keys"),
        ("extraction:\n  terminators: ['...']", "single characters"),
        ("extraction:\n  prev_count: -1", "cannot be negative"),
        ("extraction:\n  next_count: two", "must be an integer"),
        ("selection:\n  block_tags: p", "list of strings"),
        ("selection:\n  anchor_class: ''", "non-empty string"),
        ("selection: 5", "must be a mapping"),
    ],
)
def test_load_profile_rejects_invalid_files(tmp_path: Path, content: str, fragment: str) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_profile([broken])

    assert fragment in exc.value.message.lower()
    assert exc.value.remediation


def test_load_profile_rejects_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc:
        load_profile([tmp_path / "missing.yaml"])

    assert "does not exist" in exc.value.message


def test_with_neighbor_counts_overrides_only_given_values() -> None:
    profile = SelectionProfile()

    updated = profile.with_neighbor_counts(next_count=4)

    assert updated.extraction.next_count == 4
    assert updated.extraction.prev_count == profile.extraction.prev_count
    assert updated.extraction.terminators == profile.extraction.terminators
    assert updated.max_selection_length == profile.max_selection_length


def test_with_neighbor_counts_keeps_every_other_setting(tmp_path: Path) -> None:
    profile = SelectionProfile(
        extraction=ExtractionOptions(boundary_tags=("section",), terminators=(";",), prev_count=2),
        anchor_class="note-anchor",
        max_scan_length=12,
        detection_min_chars=60,
        sources=(tmp_path / "profile.yaml",),
    )

    updated = profile.with_neighbor_counts(prev_count=0)

    assert updated == SelectionProfile(
        extraction=ExtractionOptions(boundary_tags=("section",), terminators=(";",), prev_count=0),
        anchor_class="note-anchor",
        max_scan_length=12,
        detection_min_chars=60,
        sources=(tmp_path / "profile.yaml",),
    )
    assert profile.with_neighbor_counts() == profile
