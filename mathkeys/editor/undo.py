"""Undo journal over (tree, selection, mode) snapshots.

Snapshots hold a private copy of the root atom; restoring clones it again so
a snapshot is never mutated after capture. ``snapshot_and_coalesce`` replaces
the previous snapshot when that one was itself taken by a coalescing call, so
an uninterrupted typing run collapses into a single undo step. Any plain
``snapshot``, ``undo`` or ``redo`` ends the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..document import Atom, MathList, Mode, Selection, atoms_to_latex

logger = logging.getLogger(__name__)

MAXIMUM_DEPTH = 1000


@dataclass(frozen=True)
class UndoSnapshot:
    """Immutable capture of document content, selection and mode."""

    root: Atom
    markup: str
    selection: Selection
    mode: Mode

    def siblings_before_caret(self) -> tuple[Atom, ...]:
        """Atoms preceding the caret in the captured tree (sentinel excluded)."""
        probe = MathList(self.root, self.selection)
        return tuple(probe.siblings()[1:probe.anchor_offset() + 1])


class UndoJournal:
    """Linear undo stack with coalescing and pop."""

    def __init__(
        self,
        mathlist: MathList,
        mode_getter: Callable[[], Mode],
        maximum_depth: int = MAXIMUM_DEPTH,
    ) -> None:
        self.mathlist = mathlist
        self._mode_getter = mode_getter
        self.maximum_depth = max(1, maximum_depth)
        self.recording = False
        self.can_coalesce = False
        self.stack: list[UndoSnapshot] = []
        self.index = -1

    def reset(self) -> None:
        self.stack = []
        self.index = -1
        self.can_coalesce = False

    def start_recording(self) -> None:
        self.recording = True

    def stop_recording(self) -> None:
        self.recording = False

    def can_undo(self) -> bool:
        return self.index > 0

    def can_redo(self) -> bool:
        return self.index != len(self.stack) - 1

    def save(self) -> UndoSnapshot:
        """Capture the current state without touching the stack."""
        return UndoSnapshot(
            root=self.mathlist.root.clone(),
            markup=atoms_to_latex(self.mathlist.root.branches["body"]),
            selection=self.mathlist.selection,
            mode=self._mode_getter(),
        )

    def snapshot(self) -> None:
        if not self.recording:
            return
        del self.stack[self.index + 1:]
        self.stack.append(self.save())
        self.index += 1
        if len(self.stack) > self.maximum_depth:
            del self.stack[0]
            self.index -= 1
        self.can_coalesce = False

    def snapshot_and_coalesce(self) -> None:
        if not self.recording:
            return
        if self.can_coalesce:
            self.pop()
        self.snapshot()
        self.can_coalesce = True

    def pop(self) -> None:
        """Discard the latest snapshot (and any redo entries after it)."""
        if self.can_undo():
            del self.stack[self.index:]
            self.index -= 1

    def restore(self, snapshot: UndoSnapshot, *, suppress_change_notifications: bool = False) -> None:
        """Put ``snapshot`` content and selection back; the stack is unchanged."""
        saved = self.mathlist.suppress_change_notifications
        self.mathlist.suppress_change_notifications = saved or suppress_change_notifications
        try:
            self.mathlist.replace_root(snapshot.root.clone(), snapshot.selection)
        finally:
            self.mathlist.suppress_change_notifications = saved

    def undo(self) -> UndoSnapshot | None:
        if not self.can_undo():
            return None
        target = self.stack[self.index - 1]
        self.restore(target)
        self.index -= 1
        self.can_coalesce = False
        logger.debug("undo to %r", target.markup)
        return target

    def redo(self) -> UndoSnapshot | None:
        if not self.can_redo():
            return None
        self.index += 1
        target = self.stack[self.index]
        self.restore(target)
        self.can_coalesce = False
        logger.debug("redo to %r", target.markup)
        return target
