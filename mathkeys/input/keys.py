"""Keystroke model: named keys, modifiers and produced characters."""

from __future__ import annotations

from dataclasses import dataclass

MODIFIER_ORDER = ("Ctrl", "Meta", "Alt", "Shift")
MODIFIER_ALIASES = {
    "ctrl": "Ctrl",
    "control": "Ctrl",
    "meta": "Meta",
    "cmd": "Meta",
    "super": "Meta",
    "alt": "Alt",
    "option": "Alt",
    "shift": "Shift",
}
NAMED_KEYS = {
    "spacebar": "Spacebar",
    "space": "Spacebar",
    "esc": "Esc",
    "escape": "Esc",
    "backspace": "Backspace",
    "del": "Del",
    "delete": "Del",
    "return": "Return",
    "enter": "Return",
    "tab": "Tab",
    "left": "Left",
    "right": "Right",
    "up": "Up",
    "down": "Down",
    "home": "Home",
    "end": "End",
    "pageup": "PageUp",
    "pagedown": "PageDown",
}
# Named keys that still produce a single character.
NAMED_KEY_CHARS = {"Spacebar": " ", "Esc": "\x1b", "Tab": "\t"}


@dataclass(frozen=True)
class Keystroke:
    """One key press: canonical key name, produced character and modifiers."""

    name: str
    char: str | None
    modifiers: frozenset[str] = frozenset()

    @classmethod
    def from_char(cls, char: str) -> Keystroke:
        if char == " ":
            return cls("Spacebar", " ")
        return cls(char, char)

    @classmethod
    def parse(cls, token: str) -> Keystroke:
        """Parse ``x``, ``Spacebar``, ``Ctrl-z`` or ``Shift-Alt-t`` style tokens."""
        if len(token) == 1:
            return cls.from_char(token)
        parts = token.split("-")
        if token.endswith("-") and len(parts) > 1:
            raw_modifiers, key = parts[:-2], "-"
        else:
            raw_modifiers, key = parts[:-1], parts[-1]
        modifiers = [MODIFIER_ALIASES.get(part.lower()) for part in raw_modifiers]
        if any(modifier is None for modifier in modifiers) or not key:
            # Not a modifier combo: treat the whole token as a key name.
            raw_modifiers, key, modifiers = [], token, []
        name = NAMED_KEYS.get(key.lower(), key)
        if len(name) == 1:
            char: str | None = name
            if modifiers == ["Shift"] and name.isalpha():
                char = name.upper()
            elif any(modifier != "Shift" for modifier in modifiers):
                char = None
            return cls(name, char, frozenset(modifiers))
        return cls(name, NAMED_KEY_CHARS.get(name), frozenset(modifiers))

    @property
    def ctrl_or_meta(self) -> bool:
        return "Ctrl" in self.modifiers or "Meta" in self.modifiers

    @property
    def printable(self) -> bool:
        """Whether the keystroke inserts a visible character."""
        return self.char is not None and len(self.char) == 1 and self.char.isprintable()

    @property
    def combo(self) -> str:
        """Canonical ``Mod-Mod-key`` spelling used for key bindings."""
        ordered = [modifier for modifier in MODIFIER_ORDER if modifier in self.modifiers]
        return "-".join([*ordered, self.name])

    def __str__(self) -> str:
        return self.combo


def is_named_key_token(token: str) -> bool:
    """Whether ``token`` denotes a single keystroke rather than text to type."""
    if len(token) == 1:
        return True
    if token.lower() in NAMED_KEYS:
        return True
    parts = token.split("-")
    return len(parts) > 1 and all(part.lower() in MODIFIER_ALIASES for part in parts[:-1] if part)


def event_to_char(keystroke: Keystroke) -> str:
    """Return the produced character, or the key name for keys that produce none."""
    if keystroke.char is not None:
        return keystroke.char
    return keystroke.name
