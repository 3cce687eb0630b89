"""Exception types raised inside the engine.

These never cross ``Editor.resolve_keystroke``: callers see outcomes, not
exceptions. They exist so collaborators can signal failures to the pipeline.
"""

from __future__ import annotations


class MathKeysError(Exception):
    """Base class for engine errors."""


class MarkupError(MathKeysError, ValueError):
    """Raised when a markup string cannot be parsed into atoms."""

    def __init__(self, message: str, markup: str = "", position: int | None = None) -> None:
        super().__init__(message)
        self.markup = markup
        self.position = position


class StaleSelectionError(MathKeysError, LookupError):
    """Raised when a stored path no longer resolves in the current tree."""

    def __init__(self, message: str, path: tuple = ()) -> None:
        super().__init__(message)
        self.path = path
