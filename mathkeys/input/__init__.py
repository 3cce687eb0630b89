"""Input-layer public API: keystrokes, key bindings and the shortcut buffer."""

from __future__ import annotations

from .buffer import BufferResolution, KeystrokeBuffer, ShortcutResolver, resolve_shortcut
from .key_registry import (
    DEFAULT_KEY_BINDINGS,
    KeyComboBinding,
    KeyComboRegistry,
    default_key_registry,
    normalize_combo,
)
from .keys import Keystroke, event_to_char, is_named_key_token
from .timer import DeadlineTimer

__all__ = [
    "Keystroke",
    "is_named_key_token",
    "event_to_char",
    "KeyComboBinding",
    "KeyComboRegistry",
    "DEFAULT_KEY_BINDINGS",
    "default_key_registry",
    "normalize_combo",
    "DeadlineTimer",
    "KeystrokeBuffer",
    "BufferResolution",
    "ShortcutResolver",
    "resolve_shortcut",
]
