"""Selection profile loading and validation helpers."""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

import yaml

from wordscope.dom.soup import DEFAULT_ANCHOR_CLASS, DEFAULT_IGNORED_CLASSES
from wordscope.dom.traversal import BLOCK_TAGS
from wordscope.errors import ConfigurationError
from wordscope.selection.models import (
    DEFAULT_BOUNDARY_TAGS,
    DEFAULT_TERMINATORS,
    ExtractionOptions,
)

DEFAULT_MAX_SELECTION_LENGTH = 800
DEFAULT_MAX_SCAN_LENGTH = 50
DEFAULT_DETECTION_MIN_CHARS = 30

_EXTRACTION_KEYS = frozenset({"boundary_tags", "terminators", "prev_count", "next_count"})
_SELECTION_KEYS = frozenset(
    {
        "block_tags",
        "ignored_classes",
        "anchor_class",
        "max_selection_length",
        "max_scan_length",
        "detection_min_chars",
    }
)
_SECTIONS = {"extraction": _EXTRACTION_KEYS, "selection": _SELECTION_KEYS}


@dataclass(frozen=True)
class SelectionProfile:
    """Every tunable used while turning a raw selection into a request."""

    extraction: ExtractionOptions = field(default_factory=ExtractionOptions)
    block_tags: frozenset[str] = BLOCK_TAGS
    ignored_classes: tuple[str, ...] = DEFAULT_IGNORED_CLASSES
    anchor_class: str = DEFAULT_ANCHOR_CLASS
    max_selection_length: int = DEFAULT_MAX_SELECTION_LENGTH
    max_scan_length: int = DEFAULT_MAX_SCAN_LENGTH
    detection_min_chars: int = DEFAULT_DETECTION_MIN_CHARS
    sources: tuple[Path, ...] = ()

    def with_neighbor_counts(
        self,
        *,
        prev_count: int | None = None,
        next_count: int | None = None,
    ) -> SelectionProfile:
        """Return a copy with overridden previous/next sentence counts."""

        overrides: dict[str, int] = {}
        if prev_count is not None:
            overrides["prev_count"] = prev_count
        if next_count is not None:
            overrides["next_count"] = next_count
        return replace(self, extraction=replace(self.extraction, **overrides))


def load_profile(paths: Sequence[Path] | None = None) -> SelectionProfile:
    """Merge YAML profiles from *paths* over the built-in defaults.

    Later files win key by key. Every file is validated on its own so error
    messages can name the offending source.
    """

    extraction: dict[str, object] = {
        "boundary_tags": tuple(sorted(DEFAULT_BOUNDARY_TAGS)),
        "terminators": DEFAULT_TERMINATORS,
        "prev_count": 1,
        "next_count": 1,
    }
    selection: dict[str, object] = {
        "block_tags": tuple(sorted(BLOCK_TAGS)),
        "ignored_classes": DEFAULT_IGNORED_CLASSES,
        "anchor_class": DEFAULT_ANCHOR_CLASS,
        "max_selection_length": DEFAULT_MAX_SELECTION_LENGTH,
        "max_scan_length": DEFAULT_MAX_SCAN_LENGTH,
        "detection_min_chars": DEFAULT_DETECTION_MIN_CHARS,
    }
    resolved_sources: list[Path] = []

    for path in paths or ():
        resolved = _resolve_path(path)
        payload = _load_yaml(resolved)
        _check_sections(payload, resolved)
        extraction.update(_validate_extraction(payload.get("extraction") or {}, resolved))
        selection.update(_validate_selection(payload.get("selection") or {}, resolved))
        resolved_sources.append(resolved)

    return SelectionProfile(
        extraction=ExtractionOptions(
            boundary_tags=frozenset(extraction["boundary_tags"]),  # type: ignore[arg-type]
            terminators=tuple(extraction["terminators"]),  # type: ignore[arg-type]
            prev_count=extraction["prev_count"],  # type: ignore[arg-type]
            next_count=extraction["next_count"],  # type: ignore[arg-type]
        ),
        block_tags=frozenset(selection["block_tags"]),  # type: ignore[arg-type]
        ignored_classes=tuple(selection["ignored_classes"]),  # type: ignore[arg-type]
        anchor_class=str(selection["anchor_class"]),
        max_selection_length=selection["max_selection_length"],  # type: ignore[arg-type]
        max_scan_length=selection["max_scan_length"],  # type: ignore[arg-type]
        detection_min_chars=selection["detection_min_chars"],  # type: ignore[arg-type]
        sources=tuple(resolved_sources),
    )


def _resolve_path(path: Path) -> Path:
    candidate = path.expanduser()
    try:
        resolved = candidate.resolve()
    except OSError:
        resolved = candidate

    if not resolved.exists() or not resolved.is_file():
        raise ConfigurationError(
            message=f"Profile file {resolved} does not exist or is not a file.",
            remediation="Verify the path or remove the --profile option.",
        )
    return resolved


def _load_yaml(path: Path) -> dict:
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            message=f"Unable to read profile file {path}.",
            remediation="Check file permissions and retry.",
        ) from exc

    try:
        loaded = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            message=f"Profile file {path} contains invalid YAML.",
            remediation="Ensure the file follows the documented schema.",
        ) from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            message=f"Profile file {path} must define a mapping at the root level.",
            remediation="Provide optional 'extraction' and 'selection' mappings.",
        )
    return loaded


def _check_sections(payload: Mapping[str, object], source: Path) -> None:
    for section, value in payload.items():
        allowed = _SECTIONS.get(section)
        if allowed is None:
            raise ConfigurationError(
                message=f"Profile file {source} has unknown section '{section}'.",
                remediation="Use only the 'extraction' and 'selection' sections.",
            )
        if value is None:
            continue
        if not isinstance(value, Mapping):
            raise ConfigurationError(
                message=f"Section '{section}' in {source} must be a mapping.",
                remediation=f"Provide key: value pairs under '{section}'.",
            )
        unknown = sorted(str(key) for key in value if key not in allowed)
        if unknown:
            raise ConfigurationError(
                message=f"Section '{section}' in {source} has unknown keys: {', '.join(unknown)}.",
                remediation=f"Supported keys: {', '.join(sorted(allowed))}.",
            )


def _validate_extraction(data: Mapping[str, object], source: Path) -> dict[str, object]:
    values: dict[str, object] = {}
    if "boundary_tags" in data:
        values["boundary_tags"] = _string_list(data["boundary_tags"], "extraction.boundary_tags", source, lower=True)
    if "terminators" in data:
        terminators = _string_list(data["terminators"], "extraction.terminators", source, strip=False)
        invalid = [term for term in terminators if len(term) != 1]
        if invalid:
            raise ConfigurationError(
                message=f"Terminators in {source} must be single characters, got {invalid!r}.",
                remediation="List each terminator character separately, e.g. ['.', '!'].",
            )
        values["terminators"] = terminators
    for key in ("prev_count", "next_count"):
        if key in data:
            values[key] = _non_negative_int(data[key], f"extraction.{key}", source)
    return values


def _validate_selection(data: Mapping[str, object], source: Path) -> dict[str, object]:
    values: dict[str, object] = {}
    if "block_tags" in data:
        values["block_tags"] = _string_list(data["block_tags"], "selection.block_tags", source, lower=True)
    if "ignored_classes" in data:
        values["ignored_classes"] = _string_list(data["ignored_classes"], "selection.ignored_classes", source)
    if "anchor_class" in data:
        value = data["anchor_class"]
        if not isinstance(value, str) or not value.strip():
            raise ConfigurationError(
                message=f"selection.anchor_class in {source} must be a non-empty string.",
                remediation="Provide the CSS class used on annotation wrappers.",
            )
        values["anchor_class"] = value.strip()
    for key in ("max_selection_length", "max_scan_length", "detection_min_chars"):
        if key in data:
            values[key] = _non_negative_int(data[key], f"selection.{key}", source)
    return values


def _string_list(
    value: object,
    label: str,
    source: Path,
    *,
    lower: bool = False,
    strip: bool = True,
) -> tuple[str, ...]:
    if not isinstance(value, Sequence) or isinstance(value, str | bytes):
        raise ConfigurationError(
            message=f"{label} in {source} must be a list of strings.",
            remediation="Use a YAML list, e.g. ['p', 'div'].",
        )

    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigurationError(
                message=f"{label} in {source} must only contain strings.",
                remediation="Quote non-text entries so YAML reads them as strings.",
            )
        text = item.strip() if strip else item
        if not text:
            raise ConfigurationError(
                message=f"{label} in {source} cannot contain empty entries.",
                remediation="Remove blank entries.",
            )
        items.append(text.lower() if lower else text)
    return tuple(dict.fromkeys(items))


def _non_negative_int(value: object, label: str, source: Path) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            message=f"{label} in {source} must be an integer.",
            remediation="Provide a whole number.",
        )
    if value < 0:
        raise ConfigurationError(
            message=f"{label} in {source} cannot be negative.",
            remediation="Use zero or a positive number.",
        )
    return value


__all__ = [
    "DEFAULT_DETECTION_MIN_CHARS",
    "DEFAULT_MAX_SCAN_LENGTH",
    "DEFAULT_MAX_SELECTION_LENGTH",
    "SelectionProfile",
    "load_profile",
]
