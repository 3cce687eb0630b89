"""End-to-end keystroke sequences through ``Editor.resolve_keystroke``.

Each test drives a fresh editor with raw key tokens and checks the final
document, mode and buffer, the way a host would observe them.
"""

from __future__ import annotations

import unittest

from mathkeys.config import EditorConfig
from mathkeys.document import Mode
from mathkeys.editor import Editor, EventLog, KeystrokeOutcome


def _editor(**config) -> tuple[Editor, EventLog]:
    config.setdefault("inline_shortcut_timeout", 0)
    events = EventLog()
    return Editor(EditorConfig(**config), events.callbacks()), events


def _press(editor: Editor, *tokens: str) -> list[KeystrokeOutcome]:
    return [editor.resolve_keystroke(token) for token in tokens]


class ShortcutScenarioTests(unittest.TestCase):
    def test_user_shortcut_replaces_typed_prefix(self) -> None:
        editor, _events = _editor(inline_shortcuts={"=>": "⇒"}, override_default_inline_shortcuts=True)

        outcomes = _press(editor, "=", ">")

        self.assertEqual(editor.latex(), "⇒")
        self.assertEqual(editor.resolver.buffer.text, "")
        self.assertEqual(outcomes[1].shortcut.key, "=>")

    def test_longest_shortcut_wins(self) -> None:
        editor, _events = _editor(
            inline_shortcuts={"->": "\\to", "-->": "\\longrightarrow"},
            override_default_inline_shortcuts=True,
        )

        outcomes = _press(editor, "-", "-", ">")

        self.assertEqual(editor.latex(), "\\longrightarrow")
        self.assertEqual(outcomes[2].shortcut.matched_at, 0)
        self.assertEqual(editor.resolver.buffer.text, "")

    def test_buffer_keeps_growing_while_a_longer_key_is_possible(self) -> None:
        editor, _events = _editor()

        _press(editor, "-", "-")

        self.assertEqual(editor.resolver.buffer.text, "--")
        self.assertEqual(editor.latex(), "--")

    def test_non_printable_key_resets_buffer(self) -> None:
        editor, _events = _editor()

        _press(editor, "-", "End", ">")

        self.assertEqual(editor.latex(), "->")
        self.assertEqual(editor.resolver.buffer.text, ">")

    def test_replacement_text_does_not_start_another_shortcut(self) -> None:
        editor, _events = _editor()

        _press(editor, "<", "=", "=")

        self.assertEqual(editor.latex(), "\\le=")

    def test_repeated_equals_expands_once(self) -> None:
        editor, _events = _editor()

        _press(editor, "=", "=", "=")

        self.assertEqual(editor.latex(), "\\equiv=")

    def test_expanded_shortcut_still_grows_into_longer_key(self) -> None:
        editor, _events = _editor()

        _press(editor, "<", "=", ">")
        self.assertEqual(editor.latex(), "\\Leftrightarrow")

        other, _events = _editor()
        _press(other, "=", "=", ">")
        self.assertEqual(other.latex(), "\\Longrightarrow")

    def test_buffer_stays_empty_for_unmatchable_input(self) -> None:
        editor, _events = _editor(smart_mode=False)

        _press(editor, "2", "2", "2", "2")

        self.assertEqual(editor.latex(), "2222")
        self.assertEqual(editor.resolver.buffer.text, "")
        self.assertEqual(editor.resolver.buffer.states, [])

    def test_substitution_undo_redo_round_trip(self) -> None:
        editor, _events = _editor(smart_mode=False)
        _press(editor, "x", "=", ">")
        self.assertEqual(editor.latex(), "x\\Rightarrow")

        _press(editor, "Ctrl-z")
        self.assertEqual(editor.latex(), "x=>")
        _press(editor, "Ctrl-z")
        self.assertEqual(editor.latex(), "")
        _press(editor, "Ctrl-y", "Ctrl-y")
        self.assertEqual(editor.latex(), "x\\Rightarrow")

    def test_same_input_gives_same_result(self) -> None:
        tokens = ["x", "^", "2", "+", "t", "h", "e", "Spacebar", "=", ">"]
        first, _ = _editor()
        second, _ = _editor()

        first_outcomes = _press(first, *tokens)
        second_outcomes = _press(second, *tokens)

        self.assertEqual(first.latex(), second.latex())
        self.assertEqual(first_outcomes, second_outcomes)


class SmartModeScenarioTests(unittest.TestCase):
    def test_word_followed_by_space_stays_text(self) -> None:
        editor, _events = _editor(default_mode=Mode.TEXT)

        _press(editor, "c", "a", "t", "Spacebar")

        self.assertEqual(editor.latex(), "\\text{cat }")
        self.assertIs(editor.mode, Mode.TEXT)

    def test_paren_then_digit_switches_to_math(self) -> None:
        editor, _events = _editor(default_mode=Mode.TEXT)

        outcomes = _press(editor, "(", "1")

        self.assertEqual(editor.latex(), "(1")
        self.assertIs(outcomes[1].new_mode, Mode.MATH)
        self.assertEqual(outcomes[1].rule, "paren-then-number")

    def test_letter_run_in_math_becomes_text(self) -> None:
        editor, _events = _editor()

        outcomes = _press(editor, "t", "h", "e")

        self.assertEqual(editor.latex(), "\\text{the}")
        self.assertEqual(outcomes[2].rule, "word-run")
        self.assertIs(editor.mode, Mode.TEXT)

    def test_space_after_math_letter_turns_it_into_text(self) -> None:
        editor, _events = _editor()

        outcomes = _press(editor, "x", "Spacebar")

        self.assertEqual(editor.latex(), "\\text{x }")
        self.assertEqual(outcomes[1].rule, "spacebar")
        self.assertIs(editor.mode, Mode.TEXT)

    def test_space_after_math_digit_keeps_digit_in_math(self) -> None:
        editor, _events = _editor()

        _press(editor, "2", "Spacebar")

        self.assertEqual(editor.latex(), "2\\text{ }")
        self.assertIs(editor.mode, Mode.TEXT)

    def test_period_between_letters_becomes_cdot(self) -> None:
        editor, _events = _editor(default_mode=Mode.TEXT)

        _press(editor, "a", "b", ".", "c")

        self.assertEqual(editor.latex(), "\\text{ab}\\cdot c")
        self.assertIs(editor.mode, Mode.MATH)

    def test_disabled_smart_mode_never_switches(self) -> None:
        editor, events = _editor(smart_mode=False)

        _press(editor, "t", "h", "e")

        self.assertEqual(editor.latex(), "the")
        self.assertNotIn("mode_did_change", events.names())


class ScriptDepthScenarioTests(unittest.TestCase):
    def test_third_superscript_is_rejected(self) -> None:
        editor, events = _editor(script_depth=(None, 2))

        outcomes = _press(editor, "^", "^")
        before = editor.latex()
        events.clear()
        rejected = editor.resolve_keystroke("^")

        self.assertFalse(any(outcome.rejected for outcome in outcomes))
        self.assertTrue(rejected.rejected)
        self.assertFalse(rejected.mutated)
        self.assertEqual(editor.latex(), before)
        self.assertEqual(events.announcements(), ["plonk"])


class IdempotenceTests(unittest.TestCase):
    def test_unbound_keys_leave_everything_alone(self) -> None:
        editor, events = _editor()
        _press(editor, "x", "-")
        snapshot = (editor.latex(), editor.mathlist.selection, editor.resolver.buffer.text, editor.mode)
        events.clear()

        outcomes = _press(editor, "Ctrl-q", "Meta-k")

        self.assertTrue(all(not outcome.handled and not outcome.mutated for outcome in outcomes))
        self.assertEqual(
            (editor.latex(), editor.mathlist.selection, editor.resolver.buffer.text, editor.mode),
            snapshot,
        )
        self.assertEqual(events.events, [])


if __name__ == "__main__":
    unittest.main()
