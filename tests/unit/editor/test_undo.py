from __future__ import annotations

import unittest

from mathkeys.document import MathList, Mode
from mathkeys.editor import UndoJournal


class UndoJournalTests(unittest.TestCase):
    def setUp(self) -> None:
        self.mode = Mode.MATH
        self.mathlist = MathList()
        self.journal = UndoJournal(self.mathlist, lambda: self.mode)
        self.journal.start_recording()
        self.journal.snapshot()

    def _type(self, text: str) -> None:
        self.mathlist.insert(text, mode=Mode.MATH)

    def test_initial_state_cannot_undo_or_redo(self) -> None:
        self.assertFalse(self.journal.can_undo())
        self.assertFalse(self.journal.can_redo())

    def test_coalesced_typing_is_one_step(self) -> None:
        for char in "abc":
            self._type(char)
            self.journal.snapshot_and_coalesce()

        self.assertEqual(len(self.journal.stack), 2)
        self.journal.undo()
        self.assertEqual(self.mathlist.to_latex(), "")

    def test_plain_snapshot_ends_the_typing_run(self) -> None:
        self._type("a")
        self.journal.snapshot_and_coalesce()
        self._type("+")
        self.journal.snapshot()
        self._type("b")
        self.journal.snapshot_and_coalesce()

        self.assertEqual([entry.markup for entry in self.journal.stack], ["", "a", "a+", "a+b"])

    def test_undo_and_redo_restore_content_and_selection(self) -> None:
        self._type("x")
        self.journal.snapshot()
        selection = self.mathlist.selection

        self.journal.undo()
        self.assertEqual(self.mathlist.to_latex(), "")
        self.assertTrue(self.journal.can_redo())

        snapshot = self.journal.redo()
        self.assertEqual(snapshot.markup, "x")
        self.assertEqual(self.mathlist.to_latex(), "x")
        self.assertEqual(self.mathlist.selection, selection)

    def test_snapshot_after_undo_discards_redo_entries(self) -> None:
        self._type("x")
        self.journal.snapshot()
        self.journal.undo()
        self._type("y")
        self.journal.snapshot()

        self.assertFalse(self.journal.can_redo())
        self.assertEqual([entry.markup for entry in self.journal.stack], ["", "y"])

    def test_restore_leaves_stack_untouched(self) -> None:
        saved = self.journal.save()
        self._type("x")
        self.journal.snapshot()
        depth = len(self.journal.stack)

        self.journal.restore(saved)

        self.assertEqual(self.mathlist.to_latex(), "")
        self.assertEqual(len(self.journal.stack), depth)

    def test_snapshots_are_isolated_from_later_edits(self) -> None:
        self._type("x")
        saved = self.journal.save()
        self.mathlist.siblings()[1].body = "changed"

        self.assertEqual(saved.root.branches["body"][1].body, "x")

        self.journal.restore(saved)
        self.mathlist.siblings()[1].body = "again"
        self.assertEqual(saved.root.branches["body"][1].body, "x")

    def test_pop_discards_latest_snapshot(self) -> None:
        self._type("x")
        self.journal.snapshot()
        self.journal.pop()

        self.assertEqual(len(self.journal.stack), 1)
        self.assertFalse(self.journal.can_undo())

    def test_snapshot_records_mode(self) -> None:
        self.mode = Mode.TEXT
        self.journal.snapshot()

        self.assertEqual(self.journal.stack[-1].mode, Mode.TEXT)

    def test_maximum_depth_drops_oldest_entries(self) -> None:
        journal = UndoJournal(self.mathlist, lambda: self.mode, maximum_depth=3)
        journal.start_recording()
        for char in "abcde":
            self._type(char)
            journal.snapshot()

        self.assertEqual(len(journal.stack), 3)
        self.assertEqual(journal.index, 2)
        self.assertEqual(journal.stack[0].markup, "abc")

    def test_snapshots_are_ignored_while_not_recording(self) -> None:
        self.journal.stop_recording()
        self._type("x")
        self.journal.snapshot()

        self.assertEqual(len(self.journal.stack), 1)


if __name__ == "__main__":
    unittest.main()
