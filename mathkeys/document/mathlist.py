"""In-memory expression tree with a selection and editing commands.

``MathList`` owns the root atom and the current selection. Editing commands
are plain methods named after the selectors that invoke them
(``delete_previous_char``, ``move_to_superscript``...). Each returns whether
it changed the tree or the selection.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..errors import StaleSelectionError
from .atoms import SCRIPT_RELATIONS, Atom, Mode, first_atom, make_char_atom, root_atom
from .parser import parse_latex
from .path import DOCUMENT_START, Path, PathSegment, Selection, path_to_string, path_with_offset
from .serialize import atoms_to_latex

logger = logging.getLogger(__name__)

# closing char -> left delimiter it closes
CLOSING_FENCES = {")": "(", "]": "[", "}": "\\{"}
OPENING_FENCES = {"(": "(", "[": "[", "{": "\\{"}


def _noop() -> None:
    return None


class MathList:
    """Atom tree plus selection, with selector-style editing commands."""

    def __init__(
        self,
        root: Atom | None = None,
        selection: Selection = DOCUMENT_START,
        *,
        on_content_will_change: Callable[[], None] = _noop,
        on_content_did_change: Callable[[], None] = _noop,
    ) -> None:
        self.root = root if root is not None else root_atom()
        self.selection = DOCUMENT_START
        self.suppress_change_notifications = False
        self.on_content_will_change = on_content_will_change
        self.on_content_did_change = on_content_did_change
        self.set_selection(selection)

    @classmethod
    def from_latex(cls, markup: str, **kwargs) -> MathList:
        """Build a document from markup with the caret at the end."""
        mathlist = cls(root_atom(parse_latex(markup)), **kwargs)
        mathlist.move_to_mathfield_end()
        return mathlist

    # Notifications

    def content_will_change(self) -> None:
        if not self.suppress_change_notifications:
            self.on_content_will_change()

    def content_did_change(self) -> None:
        if not self.suppress_change_notifications:
            self.on_content_did_change()

    # Path resolution

    def resolve(self, path: Path) -> tuple[Atom, list[Atom]]:
        """Return ``(parent atom, sibling list)`` addressed by ``path``.

        Raises ``StaleSelectionError`` when any segment no longer resolves.
        """
        if not path:
            raise StaleSelectionError("empty path", path)
        node = self.root
        for segment in path[:-1]:
            siblings = node.branches.get(segment.relation)
            if siblings is None or not 0 < segment.offset < len(siblings):
                raise StaleSelectionError(f"path {path_to_string(path)} does not resolve", path)
            node = siblings[segment.offset]
        siblings = node.branches.get(path[-1].relation)
        if siblings is None or not 0 <= path[-1].offset < len(siblings):
            raise StaleSelectionError(f"path {path_to_string(path)} does not resolve", path)
        return node, siblings

    def is_valid_selection(self, selection: Selection) -> bool:
        if selection.anchor[:-1] != selection.focus[:-1]:
            return False
        if selection.anchor[-1].relation != selection.focus[-1].relation:
            return False
        try:
            self.resolve(selection.anchor)
            self.resolve(selection.focus)
        except StaleSelectionError:
            return False
        return True

    def set_selection(self, selection: Selection) -> bool:
        """Set the selection, resetting to document start when it is stale."""
        if self.is_valid_selection(selection):
            self.selection = selection
            return True
        logger.warning("stale selection %s; resetting to document start", selection)
        self.selection = DOCUMENT_START
        return False

    def validate_selection(self) -> bool:
        return self.set_selection(self.selection)

    def set_caret(self, path: Path) -> bool:
        return self.set_selection(Selection.caret(path))

    def _set_caret_offset(self, offset: int) -> None:
        self.selection = Selection.caret(path_with_offset(self.selection.anchor, offset))

    # Queries

    @property
    def path(self) -> Path:
        return self.selection.anchor

    def siblings(self) -> list[Atom]:
        return self.resolve(self.selection.anchor)[1]

    def parent(self) -> Atom | None:
        """Return the atom owning the current sibling list, ``None`` at root."""
        if len(self.selection.anchor) == 1:
            return None
        return self.resolve(self.selection.anchor)[0]

    def relation(self) -> str:
        return self.selection.relation

    def ancestor(self, level: int) -> Atom | None:
        """Return the ``level``-th enclosing atom (0 is the direct parent)."""
        path = self.selection.anchor
        depth = len(path) - 1 - level
        if depth <= 0:
            return None
        node = self.root
        for segment in path[:depth]:
            node = node.branches[segment.relation][segment.offset]
        return node

    def anchor_offset(self) -> int:
        return self.selection.anchor[-1].offset

    def start_offset(self) -> int:
        return self.selection.start_offset

    def end_offset(self) -> int:
        return self.selection.end_offset

    def is_collapsed(self) -> bool:
        return self.selection.collapsed

    def is_at_end(self) -> bool:
        return self.end_offset() >= len(self.siblings()) - 1

    def sibling(self, index: int) -> Atom | None:
        """Return atom ``index`` positions from the anchor (0 is before the caret)."""
        siblings = self.siblings()
        position = self.anchor_offset() + index
        if 1 <= position < len(siblings):
            return siblings[position]
        return None

    def script_depth(self, relation: str) -> int:
        """Nesting depth of scripts around the caret.

        Counts every script segment in the path, reported only when the
        innermost script relation is ``relation``.
        """
        scripts = [segment.relation for segment in self.selection.anchor if segment.relation in SCRIPT_RELATIONS]
        if not scripts or scripts[-1] != relation:
            return 0
        return len(scripts)

    def to_latex(self) -> str:
        return atoms_to_latex(self.root.branches["body"])

    def __str__(self) -> str:
        return self.to_latex()

    # Mutation primitives

    def splice(self, start: int, delete_count: int, atoms: list[Atom] | None = None) -> list[Atom]:
        """Replace ``delete_count`` atoms after offset ``start`` in the current list."""
        siblings = self.siblings()
        begin = start + 1
        removed = siblings[begin:begin + delete_count]
        siblings[begin:begin + delete_count] = list(atoms or [])
        return removed

    def _delete_selected_range(self) -> bool:
        if self.is_collapsed():
            return False
        start = self.start_offset()
        self.splice(start, self.end_offset() - start)
        self._set_caret_offset(start)
        return True

    def insert_atoms(self, atoms: list[Atom], *, select_placeholder: bool = True) -> None:
        """Insert ``atoms`` at the caret, replacing any selected range."""
        self.content_will_change()
        self._delete_selected_range()
        offset = self.anchor_offset()
        self.splice(offset, 0, atoms)
        self._set_caret_offset(offset + len(atoms))
        if select_placeholder:
            base = self.selection.anchor
            for index, atom in enumerate(atoms, start=offset + 1):
                empty = _first_empty_branch(atom)
                if empty is not None:
                    self.selection = Selection.caret((*path_with_offset(base, index), PathSegment(empty, 0)))
                    break
        self.content_did_change()

    def insert(self, text: str, *, mode: Mode, latex: bool = False, suppress_change_notifications: bool = False) -> None:
        """Insert ``text`` literally, or parsed as markup when ``latex`` is set.

        Markup parse failures propagate as ``MarkupError`` before any mutation.
        """
        if latex:
            atoms = parse_latex(text, Mode.TEXT if mode is Mode.TEXT else Mode.MATH)
        else:
            atoms = [make_char_atom(char, mode) for char in text]
        saved = self.suppress_change_notifications
        self.suppress_change_notifications = saved or suppress_change_notifications
        try:
            self.insert_atoms(atoms, select_placeholder=latex)
        finally:
            self.suppress_change_notifications = saved

    def replace_root(self, root: Atom, selection: Selection) -> None:
        """Swap in a new root (already cloned by the caller) and selection."""
        self.content_will_change()
        self.root = root
        self.set_selection(selection)
        self.content_did_change()

    # Smart fences

    def insert_smart_fence(self, char: str) -> bool:
        """Open, close or seal a ``leftright`` fence; ``False`` if ``char`` is not one."""
        parent = self.parent()
        pending = parent is not None and parent.type == "leftright" and parent.right_delim == "?"
        if char in OPENING_FENCES:
            fence = Atom(type="leftright", mode=Mode.MATH, left_delim=OPENING_FENCES[char], right_delim="?")
            fence.branches["body"] = [first_atom()]
            self.content_will_change()
            self._delete_selected_range()
            offset = self.anchor_offset()
            self.splice(offset, 0, [fence])
            self.selection = Selection.caret(
                (*path_with_offset(self.selection.anchor, offset + 1), PathSegment("body", 0))
            )
            self.content_did_change()
            return True
        if not pending:
            return False
        assert parent is not None
        if char in CLOSING_FENCES and CLOSING_FENCES[char] == parent.left_delim:
            self.content_will_change()
            parent.right_delim = "\\}" if char == "}" else char
            self.move_after_parent()
            self.content_did_change()
            return True
        if char == "." and self.is_at_end():
            self.content_will_change()
            parent.right_delim = "."
            self.move_after_parent()
            self.content_did_change()
            return True
        return False

    # Selector commands: movement

    def move_to_previous_char(self) -> bool:
        if not self.is_collapsed():
            self._set_caret_offset(self.start_offset())
            return True
        offset = self.anchor_offset()
        if offset > 0:
            self._set_caret_offset(offset - 1)
            return True
        path = self.selection.anchor
        if len(path) == 1:
            return False
        self.selection = Selection.caret((*path[:-2], PathSegment(path[-2].relation, path[-2].offset - 1)))
        return True

    def move_to_next_char(self) -> bool:
        if not self.is_collapsed():
            self._set_caret_offset(self.end_offset())
            return True
        offset = self.anchor_offset()
        if offset < len(self.siblings()) - 1:
            self._set_caret_offset(offset + 1)
            return True
        return self.move_after_parent()

    def move_after_parent(self) -> bool:
        path = self.selection.anchor
        if len(path) == 1:
            return False
        self.selection = Selection.caret(path[:-1])
        return True

    def move_to_mathfield_start(self) -> bool:
        self.selection = DOCUMENT_START
        return True

    def move_to_mathfield_end(self) -> bool:
        self.selection = Selection.caret((PathSegment("body", len(self.root.branches["body"]) - 1),))
        return True

    def extend_to_previous_char(self) -> bool:
        focus = self.selection.focus
        if focus[-1].offset == 0:
            return False
        self.selection = Selection(self.selection.anchor, path_with_offset(focus, focus[-1].offset - 1))
        return True

    def extend_to_next_char(self) -> bool:
        focus = self.selection.focus
        if focus[-1].offset >= len(self.siblings()) - 1:
            return False
        self.selection = Selection(self.selection.anchor, path_with_offset(focus, focus[-1].offset + 1))
        return True

    def select_all(self) -> bool:
        last = len(self.root.branches["body"]) - 1
        self.selection = Selection((PathSegment("body", 0),), (PathSegment("body", last),))
        return True

    def _move_into_script(self, relation: str) -> bool:
        self.content_will_change()
        self._delete_selected_range()
        offset = self.anchor_offset()
        nucleus = self.sibling(0)
        if nucleus is None or nucleus.mode is not Mode.MATH or nucleus.type in {"first", "command"}:
            nucleus = Atom(type="msubsup", mode=Mode.MATH)
            self.splice(offset, 0, [nucleus])
            offset += 1
        script = nucleus.branch(relation, create=True)
        assert script is not None
        self.selection = Selection.caret(
            (*path_with_offset(self.selection.anchor, offset), PathSegment(relation, len(script) - 1))
        )
        self.content_did_change()
        return True

    def move_to_superscript(self) -> bool:
        return self._move_into_script("superscript")

    def move_to_subscript(self) -> bool:
        return self._move_into_script("subscript")

    # Selector commands: editing

    def delete_previous_char(self) -> bool:
        self.content_will_change()
        try:
            if self._delete_selected_range():
                return True
            offset = self.anchor_offset()
            if offset > 0:
                self.splice(offset - 1, 1)
                self._set_caret_offset(offset - 1)
                return True
            return self._delete_at_group_start()
        finally:
            self.content_did_change()

    def _delete_at_group_start(self) -> bool:
        path = self.selection.anchor
        if len(path) == 1:
            return False
        parent, siblings = self.resolve(path)
        outer = path[:-1]
        relation = path[-1].relation
        if relation in SCRIPT_RELATIONS:
            if len(siblings) == 1:
                del parent.branches[relation]
            if parent.type == "msubsup" and not parent.branches:
                self.selection = Selection.caret(outer)
                self.splice(outer[-1].offset - 1, 1)
                self._set_caret_offset(outer[-1].offset - 1)
                return True
            self.selection = Selection.caret(outer)
            return True
        # Unwrap fences, fractions and roots, keeping their content.
        hoisted = [atom for branch in parent.branches.values() for atom in branch if atom.type != "first"]
        self.selection = Selection.caret(outer)
        self.splice(outer[-1].offset - 1, 1, hoisted)
        self._set_caret_offset(outer[-1].offset - 1)
        return True

    def delete_next_char(self) -> bool:
        self.content_will_change()
        try:
            if self._delete_selected_range():
                return True
            offset = self.anchor_offset()
            if offset < len(self.siblings()) - 1:
                self.splice(offset, 1)
                return True
            return False
        finally:
            self.content_did_change()

    def transpose(self) -> bool:
        """Swap the atoms around the caret (or the two before it at the end)."""
        if not self.is_collapsed():
            return False
        siblings = self.siblings()
        offset = self.anchor_offset()
        if offset < 1 or len(siblings) < 3:
            return False
        if offset == len(siblings) - 1:
            if offset < 2:
                return False
            left = offset - 1
        else:
            left = offset
        self.content_will_change()
        siblings[left], siblings[left + 1] = siblings[left + 1], siblings[left]
        self._set_caret_offset(left + 1)
        self.content_did_change()
        return True

    # Command-mode support

    def command_range(self) -> tuple[int, int] | None:
        """Return ``(start, end)`` offsets of the command-mode run around the caret."""
        siblings = self.siblings()
        offset = self.anchor_offset()
        start = offset
        while start >= 1 and siblings[start].mode is Mode.COMMAND:
            start -= 1
        end = offset
        while end + 1 < len(siblings) and siblings[end + 1].mode is Mode.COMMAND:
            end += 1
        if start == end:
            return None
        return start, end

    def command_string(self) -> str:
        span = self.command_range()
        if span is None:
            return ""
        start, end = span
        return "".join(atom.body for atom in self.siblings()[start + 1:end + 1])

    def splice_command_string(self, atoms: list[Atom] | None) -> None:
        """Replace the command run with ``atoms`` (or remove it when ``None``)."""
        span = self.command_range()
        if span is None:
            return
        start, end = span
        self.content_will_change()
        self.splice(start, end - start, atoms or [])
        self._set_caret_offset(start + len(atoms or []))
        self.content_did_change()

    def decorate_command_string(self, error: bool) -> None:
        span = self.command_range()
        if span is None:
            return
        start, end = span
        for atom in self.siblings()[start + 1:end + 1]:
            atom.error = error


def _first_empty_branch(atom: Atom) -> str | None:
    for relation in ("body", "numer", "denom", "superscript", "subscript"):
        branch = atom.branches.get(relation)
        if branch is not None and len(branch) == 1:
            return relation
    return None
