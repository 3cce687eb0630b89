"""Parser for the LaTeX subset used by shortcut expansions and ``set_latex``.

Produces flat atom lists (without the leading ``first`` sentinel). Any
construct outside the supported subset raises ``MarkupError`` so callers can
fall back to literal insertion.
"""

from __future__ import annotations

from ..errors import MarkupError
from .atoms import Atom, Mode, first_atom, make_char_atom
from .symbols import ESCAPED_CHARS, FENCE_DELIMITERS, SYMBOLS


def parse_latex(markup: str, mode: Mode = Mode.MATH) -> list[Atom]:
    """Parse ``markup`` into a list of atoms in ``mode``."""
    parser = _Parser(markup)
    atoms = parser.parse_list(mode, stop="")
    if parser.pos < len(markup):
        raise MarkupError(f"unexpected {markup[parser.pos]!r}", markup, parser.pos)
    return atoms


class _Parser:
    def __init__(self, markup: str) -> None:
        self.markup = markup
        self.pos = 0

    def _error(self, message: str) -> MarkupError:
        return MarkupError(message, self.markup, self.pos)

    def _peek(self) -> str:
        return self.markup[self.pos] if self.pos < len(self.markup) else ""

    def _skip_spaces(self) -> None:
        while self._peek().isspace() and self._peek():
            self.pos += 1

    def _read_command_name(self) -> str:
        # Caller has consumed the backslash.
        start = self.pos
        while self._peek().isalpha() and self._peek().isascii():
            self.pos += 1
        if self.pos == start:
            if not self._peek():
                raise self._error("dangling backslash")
            self.pos += 1
        return self.markup[start:self.pos]

    def parse_list(self, mode: Mode, stop: str) -> list[Atom]:
        """Parse until ``stop`` (``}``, ``\\right`` or end of input)."""
        atoms: list[Atom] = []
        while True:
            if mode is Mode.MATH:
                self._skip_spaces()
            ch = self._peek()
            if not ch:
                if stop:
                    raise self._error(f"missing {stop!r}")
                return atoms
            if ch == "}":
                if stop != "}":
                    raise self._error("unbalanced '}'")
                self.pos += 1
                return atoms
            if ch == "{":
                self.pos += 1
                atoms.extend(self.parse_list(mode, stop="}"))
                continue
            if ch in "^_" and mode is Mode.MATH:
                self.pos += 1
                self._attach_script(atoms, "superscript" if ch == "^" else "subscript")
                continue
            if ch == "\\":
                self.pos += 1
                name = self._read_command_name()
                if name == "right":
                    if stop != "\\right":
                        raise self._error("unexpected \\right")
                    return atoms
                atoms.extend(self._parse_command(name, mode))
                continue
            self.pos += 1
            atoms.append(make_char_atom(ch, mode))

    def _parse_argument(self, mode: Mode) -> list[Atom]:
        self._skip_spaces()
        ch = self._peek()
        if not ch:
            raise self._error("missing argument")
        if ch == "{":
            self.pos += 1
            return self.parse_list(mode, stop="}")
        if ch == "\\":
            self.pos += 1
            return self._parse_command(self._read_command_name(), mode)
        if ch == "}":
            raise self._error("missing argument")
        self.pos += 1
        return [make_char_atom(ch, mode)]

    def _attach_script(self, atoms: list[Atom], relation: str) -> None:
        script = self._parse_argument(Mode.MATH)
        if atoms and atoms[-1].type not in {"spacing"}:
            nucleus = atoms[-1]
        else:
            nucleus = Atom(type="msubsup", mode=Mode.MATH)
            atoms.append(nucleus)
        if relation in nucleus.branches:
            raise self._error(f"double {relation}")
        nucleus.branches[relation] = [first_atom(), *script]

    def _read_delimiter(self) -> str:
        self._skip_spaces()
        ch = self._peek()
        if not ch:
            raise self._error("missing delimiter")
        self.pos += 1
        delimiter = "\\" + self._read_command_name() if ch == "\\" else ch
        if delimiter not in FENCE_DELIMITERS:
            raise self._error(f"invalid delimiter {delimiter}")
        return delimiter

    def _parse_command(self, name: str, mode: Mode) -> list[Atom]:
        if name == "text":
            children = self._parse_argument(Mode.TEXT)
            for atom in children:
                atom.mode = Mode.TEXT
            return children
        if name in ESCAPED_CHARS:
            atom_type, body = ESCAPED_CHARS[name]
            if mode is Mode.TEXT:
                atom_type = "textord"
            return [Atom(type=atom_type, mode=mode, body=body, latex="\\" + name)]
        if mode is Mode.TEXT:
            raise self._error(f"command \\{name} not allowed in text")
        if name == "frac":
            numer = self._parse_argument(Mode.MATH)
            denom = self._parse_argument(Mode.MATH)
            atom = Atom(type="genfrac", mode=Mode.MATH)
            atom.branches["numer"] = [first_atom(), *numer]
            atom.branches["denom"] = [first_atom(), *denom]
            return [atom]
        if name == "sqrt":
            atom = Atom(type="surd", mode=Mode.MATH)
            atom.branches["body"] = [first_atom(), *self._parse_argument(Mode.MATH)]
            return [atom]
        if name == "left":
            left = self._read_delimiter()
            inner = self.parse_list(Mode.MATH, stop="\\right")
            right = self._read_delimiter()
            atom = Atom(type="leftright", mode=Mode.MATH, left_delim=left, right_delim=right)
            atom.branches["body"] = [first_atom(), *inner]
            return [atom]
        if name == "mathrm":
            children = self._parse_argument(Mode.MATH)
            for atom in children:
                atom.font_family = "mathrm"
                if atom.type == "mord" and len(atom.body) == 1:
                    atom.latex = f"\\mathrm{{{atom.body}}}"
            return children
        if name in SYMBOLS:
            atom_type, body = SYMBOLS[name]
            return [Atom(type=atom_type, mode=Mode.MATH, body=body, latex="\\" + name, font_family="main")]
        raise self._error(f"unknown command \\{name}")
