from __future__ import annotations

import unittest

from mathkeys.document import DOCUMENT_START, MathList, Mode, PathSegment, Selection
from mathkeys.errors import StaleSelectionError


def _bodies(mathlist: MathList) -> list[str]:
    return [atom.body for atom in mathlist.siblings()[1:]]


class MathListEditingTests(unittest.TestCase):
    def test_insert_places_caret_after_inserted_atoms(self) -> None:
        mathlist = MathList()
        mathlist.insert("ab", mode=Mode.MATH)

        self.assertEqual(_bodies(mathlist), ["a", "b"])
        self.assertEqual(mathlist.anchor_offset(), 2)
        self.assertTrue(mathlist.is_at_end())

    def test_sibling_indexes_relative_to_caret(self) -> None:
        mathlist = MathList.from_latex("xyz")

        self.assertEqual(mathlist.sibling(0).body, "z")
        self.assertEqual(mathlist.sibling(-2).body, "x")
        self.assertIsNone(mathlist.sibling(-3))
        self.assertIsNone(mathlist.sibling(1))

    def test_latex_insert_moves_caret_into_first_placeholder(self) -> None:
        mathlist = MathList()
        mathlist.insert("\\sqrt{}", mode=Mode.MATH, latex=True)

        self.assertEqual(mathlist.relation(), "body")
        self.assertEqual(mathlist.parent().type, "surd")

    def test_delete_previous_char_removes_atom(self) -> None:
        mathlist = MathList.from_latex("ab")
        mathlist.delete_previous_char()

        self.assertEqual(mathlist.to_latex(), "a")
        self.assertEqual(mathlist.anchor_offset(), 1)

    def test_delete_at_start_of_empty_superscript_removes_it(self) -> None:
        mathlist = MathList.from_latex("x")
        mathlist.move_to_superscript()
        self.assertEqual(mathlist.to_latex(), "x^{}")

        mathlist.delete_previous_char()

        self.assertEqual(mathlist.to_latex(), "x")
        self.assertEqual(len(mathlist.selection.anchor), 1)

    def test_transpose_swaps_last_two_atoms_at_end(self) -> None:
        mathlist = MathList.from_latex("ab")
        mathlist.transpose()

        self.assertEqual(mathlist.to_latex(), "ba")

    def test_selection_extends_and_deletes_range(self) -> None:
        mathlist = MathList.from_latex("abc")
        mathlist.extend_to_previous_char()
        mathlist.extend_to_previous_char()

        self.assertFalse(mathlist.is_collapsed())
        mathlist.delete_previous_char()
        self.assertEqual(mathlist.to_latex(), "a")

    def test_script_depth_counts_nested_superscripts(self) -> None:
        mathlist = MathList()
        mathlist.move_to_superscript()
        mathlist.move_to_superscript()

        self.assertEqual(mathlist.script_depth("superscript"), 2)
        self.assertEqual(mathlist.script_depth("subscript"), 0)

    def test_smart_fence_opens_and_closes(self) -> None:
        mathlist = MathList()
        mathlist.insert_smart_fence("(")
        mathlist.insert("x", mode=Mode.MATH)
        self.assertEqual(mathlist.parent().right_delim, "?")

        self.assertTrue(mathlist.insert_smart_fence(")"))
        self.assertEqual(mathlist.to_latex(), "\\left(x\\right)")
        self.assertEqual(len(mathlist.selection.anchor), 1)

    def test_period_seals_pending_fence_at_end(self) -> None:
        mathlist = MathList()
        mathlist.insert_smart_fence("[")
        mathlist.insert("x", mode=Mode.MATH)

        self.assertTrue(mathlist.insert_smart_fence("."))
        self.assertEqual(mathlist.to_latex(), "\\left[x\\right.")

    def test_mismatched_closer_is_not_a_fence(self) -> None:
        mathlist = MathList()
        mathlist.insert_smart_fence("(")

        self.assertFalse(mathlist.insert_smart_fence("]"))

    def test_change_notifications_can_be_suppressed(self) -> None:
        calls: list[str] = []
        mathlist = MathList(
            on_content_will_change=lambda: calls.append("will"),
            on_content_did_change=lambda: calls.append("did"),
        )
        mathlist.insert("a", mode=Mode.MATH)
        mathlist.insert("b", mode=Mode.MATH, suppress_change_notifications=True)

        self.assertEqual(calls, ["will", "did"])
        self.assertEqual(mathlist.to_latex(), "ab")


class MathListSelectionTests(unittest.TestCase):
    def test_resolve_raises_for_stale_path(self) -> None:
        mathlist = MathList.from_latex("a")

        with self.assertRaises(StaleSelectionError):
            mathlist.resolve((PathSegment("body", 5),))

    def test_stale_selection_resets_to_document_start(self) -> None:
        mathlist = MathList.from_latex("a")

        with self.assertLogs("mathkeys.document.mathlist", level="WARNING"):
            accepted = mathlist.set_selection(Selection.caret((PathSegment("body", 9),)))

        self.assertFalse(accepted)
        self.assertEqual(mathlist.selection, DOCUMENT_START)

    def test_validate_selection_recovers_after_external_mutation(self) -> None:
        mathlist = MathList.from_latex("abc")
        mathlist.root.branches["body"][1:] = []

        with self.assertLogs("mathkeys.document.mathlist", level="WARNING"):
            self.assertFalse(mathlist.validate_selection())
        self.assertEqual(mathlist.anchor_offset(), 0)

    def test_ancestor_walks_outward_from_caret(self) -> None:
        mathlist = MathList()
        mathlist.insert("\\sqrt{}", mode=Mode.MATH, latex=True)
        mathlist.insert("x", mode=Mode.MATH)
        mathlist.move_to_superscript()

        self.assertEqual(mathlist.ancestor(0).body, "x")
        self.assertEqual(mathlist.ancestor(1).type, "surd")
        self.assertIsNone(mathlist.ancestor(2))


class CommandStringTests(unittest.TestCase):
    def test_command_atoms_are_collected_around_caret(self) -> None:
        mathlist = MathList.from_latex("x")
        mathlist.insert("\\al", mode=Mode.COMMAND)

        self.assertEqual(mathlist.command_string(), "\\al")
        mathlist.decorate_command_string(True)
        self.assertTrue(all(atom.error for atom in mathlist.siblings()[2:]))

        mathlist.splice_command_string(None)
        self.assertEqual(mathlist.to_latex(), "x")
        self.assertEqual(mathlist.anchor_offset(), 1)


if __name__ == "__main__":
    unittest.main()
