"""Filesystem helpers for reading HTML pages from disk."""

from __future__ import annotations

import codecs
from dataclasses import dataclass
from pathlib import Path

from bs4.dammit import EncodingDetector

from wordscope.errors import InputValidationError

_BOM_ENCODING = "utf-8-sig"
_FALLBACK_ENCODING = "cp1252"
_ENCODING_LABELS: dict[str, str] = {
    "utf-8-sig": "UTF-8",
    "utf-8": "UTF-8",
    "cp1252": "Windows-1252",
}


@dataclass(frozen=True)
class LoadedDocument:
    """Markup loaded from disk with the encoding that decoded it."""

    path: Path
    text: str
    encoding: str

    @property
    def display_name(self) -> str:
        return format_display_path(self.path)

    @property
    def display_encoding(self) -> str:
        return _ENCODING_LABELS.get(self.encoding, self.encoding.upper())


def normalize_newlines(text: str) -> str:
    """Convert Windows/legacy newline sequences to Unix-style newlines."""

    if "\r" not in text:
        return text
    return text.replace("\r\n", "\n").replace("\r", "\n")


def format_display_path(path: Path) -> str:
    """Return the file name, quoted when it contains spaces."""

    name = path.name
    return f'"{name}"' if " " in name else name


def declared_charset(data: bytes) -> str | None:
    """Return the codec named by a ``<meta charset>`` declaration, if Python knows it."""

    name = EncodingDetector.find_declared_encoding(data, is_html=True)
    if not name:
        return None
    try:
        codecs.lookup(name)
    except LookupError:
        return None
    return name


def _candidate_encodings(data: bytes) -> list[str]:
    candidates = [_BOM_ENCODING]
    declared = declared_charset(data)
    if declared is not None and codecs.lookup(declared).name not in ("utf-8", _FALLBACK_ENCODING):
        candidates.append(declared)
    candidates.append(_FALLBACK_ENCODING)
    return candidates


def load_html_document(path: Path) -> LoadedDocument:
    """Read an HTML page from disk.

    UTF-8 (BOM tolerated) is tried first, then the charset the page declares
    in a ``<meta>`` tag and finally Windows-1252. Newlines are normalised.
    """

    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InputValidationError(
            message=f"Unable to read the page {format_display_path(path)}.",
            remediation="Verify the path and file permissions, then retry.",
        ) from exc

    candidates = _candidate_encodings(data)
    last_error: UnicodeDecodeError | None = None
    for encoding in candidates:
        try:
            text = data.decode(encoding)
        except UnicodeDecodeError as exc:
            last_error = exc
            continue
        return LoadedDocument(path=path, text=normalize_newlines(text), encoding=encoding)

    tried = " or ".join(_ENCODING_LABELS.get(enc, enc.upper()) for enc in candidates)
    raise InputValidationError(
        message=f"The page {format_display_path(path)} is not encoded as {tried}.",
        remediation="Save the page as UTF-8 and retry.",
    ) from last_error


__all__ = [
    "LoadedDocument",
    "declared_charset",
    "format_display_path",
    "load_html_document",
    "normalize_newlines",
]
