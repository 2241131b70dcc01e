from __future__ import annotations

from pathlib import Path

import pytest

from wordscope.errors import InputValidationError
from wordscope.utils import build_selection_snippet, load_html_document, normalize_newlines
from wordscope.utils.io import declared_charset


def test_load_html_document_prefers_utf8(tmp_path: Path) -> None:
    document = tmp_path / "página.html"
    document.write_text("<p>línea uno</p>\r\n<p>linea dos</p>", encoding="utf-8-sig")

    loaded = load_html_document(document)

    assert loaded.encoding == "utf-8-sig"
    assert loaded.display_encoding == "UTF-8"
    assert loaded.text == "<p>línea uno</p>\n<p>linea dos</p>"
    assert loaded.display_name == "página.html"


def test_load_html_document_falls_back_to_cp1252(tmp_path: Path) -> None:
    document = tmp_path / "legacy page.html"
    document.write_bytes("<p>requisición</p>".encode("cp1252"))

    loaded = load_html_document(document)

    assert loaded.encoding == "cp1252"
    assert loaded.display_encoding == "Windows-1252"
    assert loaded.text == "<p>requisición</p>"
    assert loaded.display_name == '"legacy page.html"'


def test_load_html_document_raises_when_unsupported(tmp_path: Path) -> None:
    document = tmp_path / "page.html"
    document.write_bytes(bytes([0x81, 0x8D, 0x8F]))

    with pytest.raises(InputValidationError) as exc:
        load_html_document(document)

    assert "Windows-1252" in exc.value.message


def test_load_html_document_raises_when_missing(tmp_path: Path) -> None:
    with pytest.raises(InputValidationError) as exc:
        load_html_document(tmp_path / "absent.html")

    assert "Unable to read" in exc.value.message


def test_normalize_newlines_converts_carriage_returns() -> None:
    text = "uno\r\ndos\rtres\n"

    assert normalize_newlines(text) == "uno\ndos\ntres\n"


def test_build_selection_snippet_windows_context() -> None:
    snippet = build_selection_snippet("The quick  brown ", "fox", " jumps over the lazy dog.", window=6)

    assert snippet == "...brown [fox] jumps..."


def test_build_selection_snippet_rejects_negative_window() -> None:
    with pytest.raises(ValueError):
        build_selection_snippet("a", "b", "c", window=-1)


def test_load_html_document_honours_declared_charset(tmp_path: Path) -> None:
    document = tmp_path / "euro.html"
    markup = '<html><head><meta charset="iso-8859-15"></head><body><p>5 €</p></body></html>'
    document.write_bytes(markup.encode("iso-8859-15"))

    loaded = load_html_document(document)

    assert loaded.encoding == "iso-8859-15"
    assert loaded.display_encoding == "ISO-8859-15"
    assert "<p>5 €</p>" in loaded.text


def test_declared_charset_ignores_unknown_codecs() -> None:
    assert declared_charset(b'<meta http-equiv="Content-Type" content="text/html; charset=UTF-8">') == "utf-8"
    assert declared_charset(b'<meta charset="klingon-8">') is None
    assert declared_charset(b"<p>no declaration</p>") is None
