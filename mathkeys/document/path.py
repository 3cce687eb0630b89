"""Paths and selections addressing positions in the atom tree.

A path is a tuple of ``(relation, offset)`` segments from the root. Every
segment but the last picks the atom at ``offset`` whose ``relation`` branch
the next segment descends into; the last segment's offset is a caret
position (caret after ``siblings[offset]``).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PathSegment:
    relation: str
    offset: int


Path = tuple[PathSegment, ...]

ROOT_PATH: Path = (PathSegment("body", 0),)


def path_with_offset(path: Path, offset: int) -> Path:
    """Return ``path`` with its last segment moved to ``offset``."""
    return (*path[:-1], PathSegment(path[-1].relation, offset))


def path_to_string(path: Path) -> str:
    return "/".join(f"{segment.relation}:{segment.offset}" for segment in path)


@dataclass(frozen=True)
class Selection:
    """Anchor/focus pair sharing a parent sibling list."""

    anchor: Path
    focus: Path

    @classmethod
    def caret(cls, path: Path) -> Selection:
        return cls(anchor=path, focus=path)

    @property
    def collapsed(self) -> bool:
        return self.anchor == self.focus

    @property
    def start_offset(self) -> int:
        return min(self.anchor[-1].offset, self.focus[-1].offset)

    @property
    def end_offset(self) -> int:
        return max(self.anchor[-1].offset, self.focus[-1].offset)

    @property
    def parent_path(self) -> Path:
        return self.anchor[:-1]

    @property
    def relation(self) -> str:
        return self.anchor[-1].relation

    def __str__(self) -> str:
        if self.collapsed:
            return path_to_string(self.anchor)
        return f"{path_to_string(self.anchor)}..{path_to_string(self.focus)}"


DOCUMENT_START = Selection.caret(ROOT_PATH)
