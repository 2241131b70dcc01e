"""Language detection used to spot scripts written without spaces."""
from __future__ import annotations

import logging
import unicodedata

from langdetect import DetectorFactory, detect
from langdetect.lang_detect_exception import LangDetectException

logger = logging.getLogger("wordscope.selection.language")

# langdetect samples randomly; a fixed seed keeps results stable across runs.
DetectorFactory.seed = 0

SPACELESS_LANGUAGES = frozenset({"zh", "ja", "ko"})
MIN_DETECTION_LETTERS = 10

_SPACELESS_PREFIXES = ("CJK ", "HIRAGANA", "KATAKANA", "HANGUL")
_SPACELESS_THRESHOLD = 0.5


def detect_language(text: str) -> str | None:
    """Return the ISO 639-1 code of *text*, or None when it cannot be told."""

    trimmed = text.strip()
    if not trimmed:
        return None
    try:
        code = detect(trimmed)
    except LangDetectException:
        logger.debug("Language detection found no usable features", extra={"text_length": len(trimmed)})
        return None
    return code.split("-", 1)[0].lower()


def uses_spaceless_script(text: str) -> bool:
    """Return True when *text* is Chinese, Japanese or Korean.

    Text with fewer than ``MIN_DETECTION_LETTERS`` letters is too short for
    the detector, so the share of Han, kana and Hangul letters decides
    instead. The same share is used when the detector gives up.
    """

    letters = [ch for ch in text if ch.isalpha()]
    if not letters:
        return False
    if len(letters) >= MIN_DETECTION_LETTERS:
        language = detect_language(text)
        if language is not None:
            return language in SPACELESS_LANGUAGES
    return _spaceless_share(letters) >= _SPACELESS_THRESHOLD


def _spaceless_share(letters: list[str]) -> float:
    spaceless = sum(1 for ch in letters if unicodedata.name(ch, "").startswith(_SPACELESS_PREFIXES))
    return spaceless / len(letters)


__all__ = ["MIN_DETECTION_LETTERS", "SPACELESS_LANGUAGES", "detect_language", "uses_spaceless_script"]
