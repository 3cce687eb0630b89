from __future__ import annotations

from dataclasses import dataclass

from ..document import MathList, Mode
from ..input import ShortcutResolver
from .undo import UndoJournal, UndoSnapshot


@dataclass
class EditorState:
    """Per-editor mutable state shared by the resolver, pipeline and editor."""

    mathlist: MathList
    journal: UndoJournal
    resolver: ShortcutResolver[UndoSnapshot]
    mode: Mode = Mode.MATH
    smart_mode_suppressed: bool = False
    dirty: bool = True
    suggestion_index: int = 0
