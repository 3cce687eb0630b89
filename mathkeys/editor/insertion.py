"""Applies one resolved keystroke outcome to the document.

An outcome is a literal insertion, a structural selector guarded by the
script depth limit, or a shortcut substitution. Depth checks run before any
mutation, so a rejected edit leaves the tree untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..document import Atom, Mode
from ..errors import MarkupError
from ..shortcuts import MANDATORY_ESCAPES, ShortcutMatch
from .callbacks import EditorCallbacks
from .conversion import remove_isolated_space
from .state import EditorState
from .undo import UndoSnapshot

logger = logging.getLogger(__name__)

SCRIPT_SELECTORS = {
    "move_to_superscript": "superscript",
    "move_to_subscript": "subscript",
}


@dataclass(frozen=True)
class InsertionResult:
    applied: bool
    rejected: bool = False
    reason: str = ""


class InsertionPipeline:
    """Inserts characters, structural edits and shortcut expansions."""

    def __init__(
        self,
        state: EditorState,
        callbacks: EditorCallbacks,
        *,
        script_depth: tuple[int | None, int | None] = (None, None),
        smart_fence: bool = True,
    ) -> None:
        self.state = state
        self.callbacks = callbacks
        self.script_depth = script_depth
        self.smart_fence = smart_fence
        self.rejections = 0

    def render(self) -> None:
        self.callbacks.render()
        self.state.dirty = False

    def reject(self, reason: str) -> InsertionResult:
        self.rejections += 1
        logger.info("rejected edit: %s", reason)
        self.callbacks.announce("plonk", [])
        return InsertionResult(applied=False, rejected=True, reason=reason)

    def depth_limit(self, relation: str) -> int | None:
        subscript, superscript = self.script_depth
        return superscript if relation == "superscript" else subscript

    def script_depth_exceeded(self, relation: str) -> bool:
        limit = self.depth_limit(relation)
        return limit is not None and self.state.mathlist.script_depth(relation) >= limit

    def insert_literal(self, text: str, mode: Mode | None = None) -> InsertionResult:
        mathlist = self.state.mathlist
        mode = mode or self.state.mode
        if mode is Mode.MATH and self.smart_fence and len(text) == 1 and mathlist.insert_smart_fence(text):
            return InsertionResult(applied=True)
        mathlist.insert(text, mode=mode)
        return InsertionResult(applied=True)

    def insert_markup(self, markup: str, mode: Mode) -> None:
        """Insert parsed markup, falling back to the raw text when it is malformed."""
        try:
            self.state.mathlist.insert(markup, mode=mode, latex=True)
        except MarkupError as error:
            logger.warning("malformed markup %r (%s); inserting it literally", markup, error)
            self.state.mathlist.insert(markup, mode=mode)

    def apply_structural(self, selector: str) -> InsertionResult:
        relation = SCRIPT_SELECTORS.get(selector)
        if relation is not None and self.script_depth_exceeded(relation):
            return self.reject(f"{relation} depth limit {self.depth_limit(relation)} reached")
        handled = getattr(self.state.mathlist, selector)()
        return InsertionResult(applied=bool(handled))

    def substitute_shortcut(self, char: str, match: ShortcutMatch, restore_to: UndoSnapshot) -> InsertionResult:
        """Replace the typed prefix with the shortcut expansion as one undo step.

        The typed character is inserted and journaled first, so undoing the
        substitution brings back exactly what was typed.
        """
        state = self.state
        mathlist = state.mathlist
        mode = state.mode
        if match.value not in MANDATORY_ESCAPES:
            mathlist.insert(char, mode=mode, suppress_change_notifications=True)
            state.journal.snapshot_and_coalesce()
            state.journal.restore(restore_to, suppress_change_notifications=True)
            state.mode = mode

        mathlist.content_will_change()
        saved = mathlist.suppress_change_notifications
        mathlist.suppress_change_notifications = True
        try:
            if not (self.smart_fence and mathlist.insert_smart_fence(match.value)):
                self.insert_markup(match.value, mode)
            remove_isolated_space(mathlist)
        finally:
            mathlist.suppress_change_notifications = saved
        mathlist.content_did_change()

        state.journal.snapshot()
        self.render()
        inserted = mathlist.sibling(0)
        self.callbacks.announce("replacement", _as_list(inserted))
        logger.debug("replaced %r with %r", match.key, match.value)
        return InsertionResult(applied=True)


def _as_list(atom: Atom | None) -> list[Atom]:
    return [atom] if atom is not None else []
