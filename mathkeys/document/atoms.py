"""Atom datatypes for the math/text expression tree."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum

_NEXT_ATOM_ID = itertools.count(1)

# Types whose ``body`` is plain character content.
ORD_TYPES = frozenset({"mord", "textord", "mpunct"})
SCRIPT_RELATIONS = ("superscript", "subscript")


class Mode(str, Enum):
    """Input mode governing how typed characters are interpreted."""

    MATH = "math"
    TEXT = "text"
    COMMAND = "command"

    def toggled(self) -> Mode:
        """Return the opposite of math/text; command mode maps to math."""
        return Mode.TEXT if self is Mode.MATH else Mode.MATH


@dataclass(eq=False)
class Atom:
    """One node in the expression tree.

    Child lists live in ``branches`` keyed by relation name (``body``,
    ``superscript``, ``subscript``, ``numer``, ``denom``). Every child list
    starts with a ``first`` sentinel so that caret offsets can address the
    position before the first real atom.
    """

    type: str
    mode: Mode = Mode.MATH
    body: str = ""
    latex: str | None = None
    font_family: str | None = None
    branches: dict[str, list[Atom]] = field(default_factory=dict)
    left_delim: str | None = None
    right_delim: str | None = None
    error: bool = False
    id: int = field(default_factory=lambda: next(_NEXT_ATOM_ID))

    @property
    def superscript(self) -> list[Atom] | None:
        return self.branches.get("superscript")

    @property
    def subscript(self) -> list[Atom] | None:
        return self.branches.get("subscript")

    def has_scripts(self) -> bool:
        return bool(self.superscript or self.subscript)

    def branch(self, relation: str, create: bool = False) -> list[Atom] | None:
        """Return child list for ``relation``, optionally creating it empty."""
        siblings = self.branches.get(relation)
        if siblings is None and create:
            siblings = [first_atom(self.mode)]
            self.branches[relation] = siblings
        return siblings

    def clone(self) -> Atom:
        """Deep copy preserving ids, used for immutable snapshots."""
        return Atom(
            type=self.type,
            mode=self.mode,
            body=self.body,
            latex=self.latex,
            font_family=self.font_family,
            branches={rel: [child.clone() for child in children] for rel, children in self.branches.items()},
            left_delim=self.left_delim,
            right_delim=self.right_delim,
            error=self.error,
            id=self.id,
        )

    def __repr__(self) -> str:
        return f"Atom({self.type!r}, {self.mode.value!r}, {self.body!r})"


def first_atom(mode: Mode = Mode.MATH) -> Atom:
    """Return the sentinel that starts every sibling list."""
    return Atom(type="first", mode=mode)


def root_atom(children: list[Atom] | None = None) -> Atom:
    root = Atom(type="root")
    root.branches["body"] = [first_atom(), *(children or [])]
    return root


_MATH_BINOPS = frozenset("+-*·×÷±∓∘∪∩")
_MATH_RELOPS = frozenset("=<>≤≥≠≈≡∼→←⇒⇐⇔↔∈∉⊂⊃⊆⊇")
_MATH_OPEN = frozenset("([{")
_MATH_CLOSE = frozenset(")]}")
_MATH_PUNCT = frozenset(",;:!")


def classify_math_char(char: str) -> str:
    """Return atom type for a character inserted in math mode."""
    if char in _MATH_BINOPS:
        return "mbin"
    if char in _MATH_RELOPS:
        return "mrel"
    if char in _MATH_OPEN:
        return "mopen"
    if char in _MATH_CLOSE:
        return "mclose"
    if char in _MATH_PUNCT:
        return "mpunct"
    return "mord"


def make_char_atom(char: str, mode: Mode) -> Atom:
    """Build the atom for one literal character in ``mode``."""
    if mode is Mode.TEXT:
        return Atom(type="textord", mode=Mode.TEXT, body=char, latex=char, font_family="main")
    if mode is Mode.COMMAND:
        return Atom(type="command", mode=Mode.COMMAND, body=char, latex=char)
    atom_type = classify_math_char(char)
    font = "mathit" if char.isalpha() and len(char) == 1 and char.isascii() else "main"
    return Atom(type=atom_type, mode=Mode.MATH, body=char, latex=escape_math_char(char), font_family=font)


def escape_math_char(char: str) -> str:
    if char in "{}#$%&_^":
        return "\\" + char
    if char == "\\":
        return "\\backslash "
    return char
