from __future__ import annotations

import unittest

from mathkeys.document.symbols import is_known_command, suggest


class SuggestTests(unittest.TestCase):
    def test_shortest_completion_comes_first(self) -> None:
        self.assertEqual(suggest("\\si"), ["\\sim", "\\sin", "\\sinh", "\\sigma"])

    def test_exact_command_leads_its_longer_relatives(self) -> None:
        self.assertEqual(suggest("\\sin")[0], "\\sin")

    def test_no_suggestions_without_a_letter_prefix(self) -> None:
        self.assertEqual(suggest("\\"), [])
        self.assertEqual(suggest("\\{"), [])
        self.assertEqual(suggest("\\zz"), [])


class KnownCommandTests(unittest.TestCase):
    def test_prefix_of_structural_command_is_known(self) -> None:
        self.assertTrue(is_known_command("fr", prefix=True))
        self.assertFalse(is_known_command("fr"))
        self.assertTrue(is_known_command("frac"))


if __name__ == "__main__":
    unittest.main()
