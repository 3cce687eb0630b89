"""Atom tree to LaTeX serialization."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .atoms import Atom, Mode

_TRAILING_COMMAND_RE = re.compile(r"\\[a-zA-Z]+$")
_TEXT_ESCAPES = {"{": "\\{", "}": "\\}", "\\": "\\backslash ", "%": "\\%", "#": "\\#", "$": "\\$", "&": "\\&", "_": "\\_", "^": "\\^"}


def atoms_to_latex(atoms: Iterable[Atom]) -> str:
    """Serialize a sibling list, skipping the ``first`` sentinel."""
    chunks: list[str] = []
    text_run: list[str] = []

    def flush_text() -> None:
        if text_run:
            chunks.append("\\text{" + "".join(text_run) + "}")
            text_run.clear()

    for atom in atoms:
        if atom.type == "first":
            continue
        if atom.mode is Mode.TEXT:
            text_run.append(_TEXT_ESCAPES.get(atom.body, atom.body))
            continue
        flush_text()
        chunks.append(atom_to_latex(atom))
    flush_text()
    return _join(chunks)


def _join(chunks: list[str]) -> str:
    out = ""
    for chunk in chunks:
        if not chunk:
            continue
        if _TRAILING_COMMAND_RE.search(out) and chunk[0].isalpha():
            out += " "
        out += chunk
    return out


def atom_to_latex(atom: Atom) -> str:
    if atom.mode is Mode.COMMAND:
        return atom.body
    if atom.type == "leftright":
        right = "." if atom.right_delim in (None, "?") else atom.right_delim
        inner = atoms_to_latex(atom.branches.get("body", []))
        base = f"\\left{atom.left_delim}{inner}\\right{right}"
    elif atom.type == "genfrac":
        numer = atoms_to_latex(atom.branches.get("numer", []))
        denom = atoms_to_latex(atom.branches.get("denom", []))
        base = f"\\frac{{{numer}}}{{{denom}}}"
    elif atom.type == "surd":
        base = f"\\sqrt{{{atoms_to_latex(atom.branches.get('body', []))}}}"
    elif atom.type == "msubsup":
        base = ""
    else:
        base = atom.latex if atom.latex is not None else atom.body
    if atom.subscript is not None:
        base += "_{" + atoms_to_latex(atom.subscript) + "}"
    if atom.superscript is not None:
        base += "^{" + atoms_to_latex(atom.superscript) + "}"
    return base
