"""Inline shortcut dictionary and built-in shortcut table."""

from __future__ import annotations

from .defaults import DEFAULT_INLINE_SHORTCUTS, MANDATORY_ESCAPES, build_shortcut_dictionary
from .dictionary import (
    AFTER_CONDITIONS,
    ShortcutContext,
    ShortcutDictionary,
    ShortcutEntry,
    ShortcutMatch,
    coerce_entry,
    parse_after,
)

__all__ = [
    "AFTER_CONDITIONS",
    "DEFAULT_INLINE_SHORTCUTS",
    "MANDATORY_ESCAPES",
    "ShortcutContext",
    "ShortcutDictionary",
    "ShortcutEntry",
    "ShortcutMatch",
    "build_shortcut_dictionary",
    "coerce_entry",
    "parse_after",
]
