"""Tree mutations used by the smart-mode heuristic."""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..document import ORD_TYPES, Atom, MathList, Mode
from ..document.atoms import escape_math_char
from ..document.path import path_with_offset
from .smart_mode import ConvertAtoms, ModeAction, RemoveIsolatedSpace, RewriteAsCdot

logger = logging.getLogger(__name__)


def convert_last_atoms_to_text(
    mathlist: MathList,
    count: int | None = None,
    until: Callable[[Atom], bool] | None = None,
) -> int:
    """Turn trailing ordinary math atoms into text, stopping at the first misfit."""
    converted = 0
    mathlist.content_will_change()
    index = 0
    while count is None or converted < count:
        atom = mathlist.sibling(index)
        if atom is None or atom.mode is not Mode.MATH or atom.type not in ORD_TYPES or atom.has_scripts():
            break
        if until is not None and not until(atom):
            break
        atom.type = "textord"
        atom.mode = Mode.TEXT
        atom.font_family = "main"
        atom.latex = atom.body
        converted += 1
        index -= 1
    mathlist.content_did_change()
    return converted


def convert_last_atoms_to_math(
    mathlist: MathList,
    count: int | None = None,
    until: Callable[[Atom], bool] | None = None,
) -> int:
    """Turn trailing text atoms into italic math ordinals, then drop an isolated space."""
    converted = 0
    mathlist.content_will_change()
    index = 0
    while count is None or converted < count:
        atom = mathlist.sibling(index)
        if atom is None or atom.mode is not Mode.TEXT or atom.body == " ":
            break
        if until is not None and not until(atom):
            break
        atom.type = "mord"
        atom.mode = Mode.MATH
        atom.font_family = "mathit"
        atom.latex = escape_math_char(atom.body)
        converted += 1
        index -= 1
    remove_isolated_space(mathlist)
    mathlist.content_did_change()
    return converted


def remove_isolated_space(mathlist: MathList) -> bool:
    """Delete a text-mode space that sits alone between math atoms.

    Walks back past the math atoms before the caret. When the atom reached is
    a text space preceded by nothing or by math, it is removed and the caret
    shifts left by one.
    """
    index = 0
    while True:
        atom = mathlist.sibling(index)
        if atom is None or atom.mode is not Mode.MATH:
            break
        index -= 1
    atom = mathlist.sibling(index)
    if atom is None or atom.mode is not Mode.TEXT or atom.body != " ":
        return False
    before = mathlist.sibling(index - 1)
    if before is not None and before.mode is not Mode.MATH:
        return False
    mathlist.content_will_change()
    offset = mathlist.anchor_offset()
    mathlist.splice(offset + index - 1, 1)
    mathlist.content_did_change()
    saved = mathlist.suppress_change_notifications
    mathlist.suppress_change_notifications = True
    try:
        mathlist.set_caret(path_with_offset(mathlist.selection.anchor, offset - 1))
    finally:
        mathlist.suppress_change_notifications = saved
    logger.debug("removed isolated space at offset %d", offset + index)
    return True


def rewrite_as_cdot(mathlist: MathList) -> bool:
    atom = mathlist.sibling(0)
    if atom is None:
        return False
    mathlist.content_will_change()
    atom.body = "⋅"
    atom.font_family = "mathrm"
    atom.latex = "\\cdot"
    atom.mode = Mode.MATH
    atom.type = "mord"
    mathlist.content_did_change()
    return True


def apply_mode_action(mathlist: MathList, action: ModeAction | None) -> None:
    if action is None:
        return
    if isinstance(action, RewriteAsCdot):
        rewrite_as_cdot(mathlist)
    elif isinstance(action, RemoveIsolatedSpace):
        remove_isolated_space(mathlist)
    elif isinstance(action, ConvertAtoms):
        if action.target is Mode.TEXT:
            convert_last_atoms_to_text(mathlist, action.count, action.until)
        else:
            convert_last_atoms_to_math(mathlist, action.count, action.until)
        if action.remove_isolated_space:
            remove_isolated_space(mathlist)
