"""Host tree abstraction, value types and the BeautifulSoup adapter."""
from __future__ import annotations

from .host import HostTree
from .models import Anchor, Locator, Span
from .soup import (
    DEFAULT_ANCHOR_CLASS,
    DEFAULT_IGNORED_CLASSES,
    SoupTree,
    locate_text,
    parse_html,
)
from .traversal import BLOCK_TAGS, clean_text, span_of_contents

__all__ = [
    "Anchor",
    "BLOCK_TAGS",
    "DEFAULT_ANCHOR_CLASS",
    "DEFAULT_IGNORED_CLASSES",
    "HostTree",
    "Locator",
    "Span",
    "SoupTree",
    "clean_text",
    "locate_text",
    "parse_html",
    "span_of_contents",
]
