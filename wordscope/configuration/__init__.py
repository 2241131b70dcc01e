"""Configuration utilities for Wordscope."""
from __future__ import annotations

from .profile import SelectionProfile, load_profile

__all__ = ["SelectionProfile", "load_profile"]
