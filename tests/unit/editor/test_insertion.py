from __future__ import annotations

import unittest

from mathkeys.config import EditorConfig
from mathkeys.document import Mode
from mathkeys.editor import Editor, EventLog
from mathkeys.shortcuts import ShortcutDictionary, ShortcutMatch


def _editor(**config) -> tuple[Editor, EventLog]:
    events = EventLog()
    dictionary = ShortcutDictionary({"=>": "\\Rightarrow", "bad": "\\nosuchthing", "(": "("})
    editor = Editor(EditorConfig(inline_shortcut_timeout=0, **config), events.callbacks(), dictionary=dictionary)
    return editor, events


class StructuralInsertionTests(unittest.TestCase):
    def test_script_depth_limit_rejects_without_mutation(self) -> None:
        editor, events = _editor(script_depth=(None, 1))
        self.assertTrue(editor.pipeline.apply_structural("move_to_superscript").applied)
        before = (editor.latex(), editor.mathlist.selection)
        events.clear()

        result = editor.pipeline.apply_structural("move_to_superscript")

        self.assertTrue(result.rejected)
        self.assertFalse(result.applied)
        self.assertEqual((editor.latex(), editor.mathlist.selection), before)
        self.assertEqual(events.announcements(), ["plonk"])

    def test_subscript_limit_is_independent(self) -> None:
        editor, _events = _editor(script_depth=(0, None))

        self.assertTrue(editor.pipeline.apply_structural("move_to_subscript").rejected)
        self.assertTrue(editor.pipeline.apply_structural("move_to_superscript").applied)

    def test_unlimited_depth_never_rejects(self) -> None:
        editor, _events = _editor()
        for _ in range(5):
            self.assertFalse(editor.pipeline.apply_structural("move_to_superscript").rejected)


class ShortcutSubstitutionTests(unittest.TestCase):
    def _type(self, editor: Editor, chars: str) -> None:
        for char in chars:
            editor.resolve_keystroke(char)

    def test_substitution_replaces_prefix_and_announces(self) -> None:
        editor, events = _editor()
        self._type(editor, "x=")
        state = editor.resolver.buffer.states[-1]
        events.clear()

        editor.pipeline.substitute_shortcut(">", ShortcutMatch("=>", "\\Rightarrow", 0), state)

        self.assertEqual(editor.latex(), "x\\Rightarrow")
        self.assertIn("replacement", events.announcements())
        self.assertIn("render", events.names())

    def test_malformed_expansion_is_inserted_literally(self) -> None:
        editor, _events = _editor(smart_mode=False)

        with self.assertLogs("mathkeys.editor.insertion", level="WARNING"):
            self._type(editor, "bad")

        self.assertEqual(editor.latex(), "\\backslash nosuchthing")

    def test_expansion_can_open_a_smart_fence(self) -> None:
        editor, _events = _editor()
        state = editor.journal.save()

        editor.pipeline.substitute_shortcut("(", ShortcutMatch("(", "(", 0), state)

        self.assertEqual(editor.mathlist.parent().type, "leftright")

    def test_substitution_is_undone_back_to_typed_text(self) -> None:
        editor, _events = _editor()
        self._type(editor, "=>")
        self.assertEqual(editor.latex(), "\\Rightarrow")

        editor.undo()
        self.assertEqual(editor.latex(), "=>")
        editor.undo()
        self.assertEqual(editor.latex(), "")


class LiteralInsertionTests(unittest.TestCase):
    def test_text_mode_literal_ignores_smart_fence(self) -> None:
        editor, _events = _editor()

        editor.pipeline.insert_literal("(", Mode.TEXT)

        self.assertEqual(editor.latex(), "\\text{(}")

    def test_smart_fence_disabled_inserts_plain_paren(self) -> None:
        editor, _events = _editor(smart_fence=False)

        editor.pipeline.insert_literal("(", Mode.MATH)

        self.assertEqual(editor.latex(), "(")


if __name__ == "__main__":
    unittest.main()
