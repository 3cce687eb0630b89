"""Context-sensitive inline shortcut dictionary.

A key maps to one or more ``ShortcutEntry`` variants. An entry applies only
in its mode (``None`` means any mode) and, when ``after`` is set, only when
the atom preceding the candidate satisfies one of the named conditions.
Variants of one key are tried in registration order; the first applicable
one wins.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from ..document.atoms import Atom, Mode

AFTER_CONDITIONS: dict[str, Callable[[Atom | None], bool]] = {
    "nothing": lambda atom: atom is None,
    "digit": lambda atom: atom is not None and atom.mode is Mode.MATH and atom.type == "mord" and atom.body.isdigit(),
    "letter": lambda atom: atom is not None
    and atom.mode is Mode.MATH
    and atom.type == "mord"
    and len(atom.body) == 1
    and atom.body.isalpha(),
    "function": lambda atom: atom is not None and atom.type == "mop",
    "frac": lambda atom: atom is not None and atom.type == "genfrac",
    "surd": lambda atom: atom is not None and atom.type == "surd",
    "binop": lambda atom: atom is not None and atom.type == "mbin",
    "relop": lambda atom: atom is not None and atom.type == "mrel",
    "punct": lambda atom: atom is not None and atom.type == "mpunct",
    "openfence": lambda atom: atom is not None and atom.type == "mopen",
    "closefence": lambda atom: atom is not None and atom.type in {"mclose", "leftright"},
    "space": lambda atom: atom is not None and (atom.type == "spacing" or atom.body == " "),
    "text": lambda atom: atom is not None and atom.mode is Mode.TEXT,
}


@dataclass(frozen=True)
class ShortcutEntry:
    """One replacement variant for a shortcut key."""

    value: str
    mode: Mode | None = Mode.MATH
    after: frozenset[str] | None = None

    def applies(self, context: ShortcutContext) -> bool:
        if self.mode is not None and self.mode is not context.mode:
            return False
        if self.after is None:
            return True
        last = context.last
        return any(AFTER_CONDITIONS[name](last) for name in self.after)


@dataclass(frozen=True)
class ShortcutContext:
    """Mode and sibling atoms preceding a candidate at the time it was typed."""

    mode: Mode
    siblings: tuple[Atom, ...] = ()

    @property
    def last(self) -> Atom | None:
        for atom in reversed(self.siblings):
            if atom.type != "first":
                return atom
        return None


@dataclass(frozen=True)
class ShortcutMatch:
    """Result of resolving a candidate against the dictionary."""

    key: str
    value: str
    matched_at: int


def parse_after(conditions: str | Iterable[str] | None) -> frozenset[str] | None:
    """Parse ``"nothing+digit"`` style condition lists, dropping unknown names."""
    if conditions is None:
        return None
    names = conditions.split("+") if isinstance(conditions, str) else list(conditions)
    known = frozenset(name.strip() for name in names if name.strip() in AFTER_CONDITIONS)
    return known or None


def coerce_entry(raw: object) -> ShortcutEntry | None:
    """Build an entry from a string or ``{"value", "mode", "after"}`` mapping."""
    if isinstance(raw, ShortcutEntry):
        return raw
    if isinstance(raw, str):
        return ShortcutEntry(raw) if raw else None
    if not isinstance(raw, Mapping):
        return None
    value = raw.get("value")
    if not isinstance(value, str) or not value:
        return None
    raw_mode = raw.get("mode", "math")
    if raw_mode in (None, "any"):
        mode = None
    else:
        try:
            mode = Mode(raw_mode)
        except ValueError:
            return None
    after = raw.get("after")
    if after is not None and not isinstance(after, (str, list, tuple)):
        return None
    return ShortcutEntry(value=value, mode=mode, after=parse_after(after))


class ShortcutDictionary:
    """Keyed shortcut table with prefix queries."""

    def __init__(self, entries: Mapping[str, object] | None = None) -> None:
        self._entries: dict[str, list[ShortcutEntry]] = {}
        if entries:
            self.update(entries)

    def add(self, key: str, entry: object) -> None:
        """Append variant(s) for ``key``; malformed entries are ignored."""
        raw_variants = entry if isinstance(entry, (list, tuple)) else [entry]
        for raw in raw_variants:
            coerced = coerce_entry(raw)
            if key and coerced is not None:
                self._entries.setdefault(key, []).append(coerced)

    def update(self, entries: Mapping[str, object]) -> None:
        """Replace variants for every key in ``entries``."""
        for key, entry in entries.items():
            self._entries.pop(key, None)
            self.add(key, entry)

    def keys(self) -> list[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, candidate: str, context: ShortcutContext) -> ShortcutEntry | None:
        """Return the first variant of ``candidate`` applicable in ``context``."""
        for entry in self._entries.get(candidate, ()):
            if entry.applies(context):
                return entry
        return None

    def starts_with(self, prefix: str) -> list[str]:
        return [key for key in self._entries if key.startswith(prefix)]

    def could_extend(self, candidate: str) -> bool:
        """Whether some other key has ``candidate`` as a proper prefix."""
        return any(key != candidate and key.startswith(candidate) for key in self._entries)
