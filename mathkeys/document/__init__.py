"""Expression-tree document: atoms, paths, parsing and serialization.

The editing engine treats this package as its document collaborator.
``MathList`` is the only stateful type; everything else is plain data.
"""

from __future__ import annotations

from .atoms import ORD_TYPES, Atom, Mode, classify_math_char, first_atom, make_char_atom, root_atom
from .mathlist import CLOSING_FENCES, MathList
from .parser import parse_latex
from .path import DOCUMENT_START, ROOT_PATH, Path, PathSegment, Selection, path_to_string
from .serialize import atom_to_latex, atoms_to_latex

__all__ = [
    "Atom",
    "Mode",
    "ORD_TYPES",
    "classify_math_char",
    "first_atom",
    "make_char_atom",
    "root_atom",
    "MathList",
    "CLOSING_FENCES",
    "parse_latex",
    "Path",
    "PathSegment",
    "Selection",
    "ROOT_PATH",
    "DOCUMENT_START",
    "path_to_string",
    "atom_to_latex",
    "atoms_to_latex",
]
