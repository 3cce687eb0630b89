"""Keystroke resolution engine: shortcuts, smart mode, insertion and undo."""

from __future__ import annotations

from .callbacks import EditorCallbacks, EventLog
from .conversion import (
    apply_mode_action,
    convert_last_atoms_to_math,
    convert_last_atoms_to_text,
    remove_isolated_space,
    rewrite_as_cdot,
)
from .editor import Editor, KeystrokeOutcome, normalize_selector
from .insertion import InsertionPipeline, InsertionResult
from .smart_mode import (
    MATH_TO_TEXT_RULES,
    TEXT_TO_MATH_RULES,
    ConvertAtoms,
    ModeContext,
    ModeRule,
    ModeSwitchDecision,
    RemoveIsolatedSpace,
    RewriteAsCdot,
    build_mode_context,
    decide_mode_switch,
    text_before_anchor,
)
from .state import EditorState
from .undo import UndoJournal, UndoSnapshot

__all__ = [
    "Editor",
    "EditorCallbacks",
    "EditorState",
    "EventLog",
    "KeystrokeOutcome",
    "normalize_selector",
    "InsertionPipeline",
    "InsertionResult",
    "UndoJournal",
    "UndoSnapshot",
    "ModeContext",
    "ModeRule",
    "ModeSwitchDecision",
    "ConvertAtoms",
    "RemoveIsolatedSpace",
    "RewriteAsCdot",
    "TEXT_TO_MATH_RULES",
    "MATH_TO_TEXT_RULES",
    "build_mode_context",
    "decide_mode_switch",
    "text_before_anchor",
    "apply_mode_action",
    "convert_last_atoms_to_math",
    "convert_last_atoms_to_text",
    "remove_isolated_space",
    "rewrite_as_cdot",
]
