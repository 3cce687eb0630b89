"""Parser and serializer behavior for the supported LaTeX subset."""

from __future__ import annotations

import unittest

from mathkeys.document import Mode, atoms_to_latex, parse_latex
from mathkeys.errors import MarkupError


class ParseLatexTests(unittest.TestCase):
    def test_characters_become_math_atoms_with_types(self) -> None:
        atoms = parse_latex("x+1=y")

        self.assertEqual([atom.body for atom in atoms], ["x", "+", "1", "=", "y"])
        self.assertEqual([atom.type for atom in atoms], ["mord", "mbin", "mord", "mrel", "mord"])
        self.assertTrue(all(atom.mode is Mode.MATH for atom in atoms))

    def test_symbol_commands_keep_their_markup(self) -> None:
        atoms = parse_latex("\\alpha+\\beta")

        self.assertEqual(atoms[0].body, "α")
        self.assertEqual(atoms[0].latex, "\\alpha")
        self.assertEqual(atoms_to_latex(atoms), "\\alpha+\\beta")

    def test_superscript_attaches_to_previous_atom(self) -> None:
        atoms = parse_latex("x^2")

        self.assertEqual(len(atoms), 1)
        self.assertEqual([atom.body for atom in atoms[0].superscript], ["", "2"])
        self.assertEqual(atoms_to_latex(atoms), "x^{2}")

    def test_script_without_nucleus_creates_empty_base(self) -> None:
        atoms = parse_latex("_n")

        self.assertEqual(atoms[0].type, "msubsup")
        self.assertEqual(atoms_to_latex(atoms), "_{n}")

    def test_fraction_and_root_round_trip(self) -> None:
        self.assertEqual(atoms_to_latex(parse_latex("\\frac{1}{2}")), "\\frac{1}{2}")
        self.assertEqual(atoms_to_latex(parse_latex("\\sqrt{x}")), "\\sqrt{x}")

    def test_fence_keeps_delimiters(self) -> None:
        atoms = parse_latex("\\left(x\\right)")

        self.assertEqual(atoms[0].type, "leftright")
        self.assertEqual((atoms[0].left_delim, atoms[0].right_delim), ("(", ")"))
        self.assertEqual(atoms_to_latex(atoms), "\\left(x\\right)")

    def test_fence_accepts_command_delimiters_only_from_known_set(self) -> None:
        atoms = parse_latex("\\left\\langle x\\right\\rangle")

        self.assertEqual((atoms[0].left_delim, atoms[0].right_delim), ("\\langle", "\\rangle"))
        with self.assertRaises(MarkupError):
            parse_latex("\\left<x\\right>")

    def test_text_command_produces_text_atoms(self) -> None:
        atoms = parse_latex("\\text{if }x")

        self.assertEqual([atom.mode for atom in atoms], [Mode.TEXT, Mode.TEXT, Mode.TEXT, Mode.MATH])
        self.assertEqual(atoms_to_latex(atoms), "\\text{if }x")

    def test_space_is_inserted_between_command_and_letter(self) -> None:
        self.assertEqual(atoms_to_latex(parse_latex("\\sin x")), "\\sin x")

    def test_unknown_command_raises(self) -> None:
        with self.assertRaises(MarkupError) as caught:
            parse_latex("\\notacommand")

        self.assertEqual(caught.exception.markup, "\\notacommand")

    def test_unbalanced_braces_raise(self) -> None:
        with self.assertRaises(MarkupError):
            parse_latex("{x")
        with self.assertRaises(MarkupError):
            parse_latex("x}")

    def test_double_superscript_raises(self) -> None:
        with self.assertRaises(MarkupError):
            parse_latex("x^1^2")

    def test_markup_error_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_latex("\\")


if __name__ == "__main__":
    unittest.main()
