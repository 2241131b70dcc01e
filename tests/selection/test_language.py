from __future__ import annotations

import pytest

from wordscope.selection import detect_language, uses_spaceless_script


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("这是一个用于测试语言检测功能的中文句子。", "zh"),
        ("今日は天気がいいので、私は公園に行きます。", "ja"),
        ("The quick brown fox jumps over the lazy dog.", "en"),
    ],
)
def test_detect_language_returns_two_letter_codes(text: str, expected: str) -> None:
    assert detect_language(text) == expected


def test_detect_language_gives_up_without_letters() -> None:
    assert detect_language("") is None
    assert detect_language("   ") is None
    assert detect_language("12345 ...") is None


def test_spaceless_script_detection() -> None:
    assert uses_spaceless_script("今日は天気がいいので、私は公園に行きます。")
    assert uses_spaceless_script("今日はいい天気")
    assert uses_spaceless_script("한국어 문장")
    assert not uses_spaceless_script("The quick brown fox jumps over the lazy dog.")
    assert not uses_spaceless_script("abc 中")
    assert not uses_spaceless_script("123 ...")


def test_detector_decides_for_longer_text(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("wordscope.selection.language.detect_language", lambda text: "ko")

    assert uses_spaceless_script("romanized hangul sentence")


def test_script_share_used_when_detector_gives_up(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("wordscope.selection.language.detect_language", lambda text: None)

    assert uses_spaceless_script("这是一个用于测试语言检测功能的中文句子。")
    assert not uses_spaceless_script("plain English text here")


def test_short_text_skips_the_detector(monkeypatch: pytest.MonkeyPatch) -> None:
    def _unexpected(text: str) -> str:
        raise AssertionError("detector should not run for short text")

    monkeypatch.setattr("wordscope.selection.language.detect_language", _unexpected)

    assert uses_spaceless_script("公園")
    assert not uses_spaceless_script("park")
