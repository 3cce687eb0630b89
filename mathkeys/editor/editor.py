"""Keystroke-driven math editor.

``Editor.resolve_keystroke`` is the single entry point for key events. Each
keystroke is resolved to completion before it returns:

1. printable characters are buffered and matched against inline shortcuts;
2. the smart-mode heuristic may flip between math and text;
3. otherwise the key binding table supplies a selector;
4. failing all of those, the produced character is typed.

Errors raised by collaborators stop at this boundary and are reported
through ``KeystrokeOutcome`` and the log.
"""

from __future__ import annotations

import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..config import EditorConfig
from ..document import DOCUMENT_START, MathList, Mode, Selection, parse_latex, root_atom
from ..document.symbols import is_known_command, suggest
from ..errors import MarkupError, MathKeysError
from ..input import DeadlineTimer, KeyComboRegistry, Keystroke, ShortcutResolver, default_key_registry, event_to_char
from ..shortcuts import ShortcutContext, ShortcutDictionary, ShortcutMatch, build_shortcut_dictionary
from .callbacks import EditorCallbacks
from .conversion import apply_mode_action
from .insertion import InsertionPipeline, InsertionResult
from .smart_mode import ModeSwitchDecision, build_mode_context, decide_mode_switch
from .state import EditorState
from .undo import UndoJournal, UndoSnapshot

logger = logging.getLogger(__name__)

# Selectors implemented by MathList itself.
DOCUMENT_SELECTORS = frozenset(
    {
        "move_to_previous_char",
        "move_to_next_char",
        "move_after_parent",
        "move_to_mathfield_start",
        "move_to_mathfield_end",
        "extend_to_previous_char",
        "extend_to_next_char",
        "select_all",
        "delete_previous_char",
        "delete_next_char",
        "transpose",
    }
)
EDITOR_SELECTORS = frozenset(
    {
        "undo",
        "redo",
        "complete",
        "enter_command_mode",
        "switch_mode",
        "move_to_superscript",
        "move_to_subscript",
        "next_suggestion",
        "previous_suggestion",
    }
)
EDITING_PREFIXES = ("delete", "transpose", "add")
_BUFFER_RESET_SELECTORS = frozenset({"transpose", "complete", "move_to_next_char", "move_to_previous_char"})
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_UNKNOWN_COMMAND = re.compile(r"^\\[a-zA-Z\\*]+$")


def normalize_selector(selector: str) -> str:
    """Map ``moveToSuperscript`` and ``move-to-superscript`` to snake case."""
    return _CAMEL_BOUNDARY.sub("_", selector).replace("-", "_").lower()


@dataclass(frozen=True)
class KeystrokeOutcome:
    """What one keystroke did."""

    handled: bool
    new_mode: Mode
    mutated: bool
    rejected: bool = False
    shortcut: ShortcutMatch | None = None
    rule: str | None = None


class Editor:
    def __init__(
        self,
        config: EditorConfig | None = None,
        callbacks: EditorCallbacks | None = None,
        *,
        dictionary: ShortcutDictionary | None = None,
        registry: KeyComboRegistry | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config if config is not None else EditorConfig()
        self.callbacks = callbacks if callbacks is not None else EditorCallbacks()
        self.dictionary = dictionary if dictionary is not None else build_shortcut_dictionary(
            self.config.inline_shortcuts,
            override_defaults=self.config.override_default_inline_shortcuts,
        )
        self.registry = registry if registry is not None else default_key_registry()

        mathlist = MathList(
            on_content_will_change=self.callbacks.content_will_change,
            on_content_did_change=self._content_did_change,
        )
        resolver: ShortcutResolver[UndoSnapshot] = ShortcutResolver(
            self.dictionary,
            timer=DeadlineTimer(clock),
            timeout_ms=self.config.inline_shortcut_timeout,
        )
        journal = UndoJournal(mathlist, lambda: self.state.mode, self.config.max_undo_depth)
        self.state = EditorState(mathlist=mathlist, journal=journal, resolver=resolver, mode=self.config.default_mode)
        self.pipeline = InsertionPipeline(
            self.state,
            self.callbacks,
            script_depth=self.config.script_depth,
            smart_fence=self.config.smart_fence,
        )
        journal.start_recording()
        journal.snapshot()

    # Convenience accessors

    @property
    def mode(self) -> Mode:
        return self.state.mode

    @property
    def mathlist(self) -> MathList:
        return self.state.mathlist

    @property
    def journal(self) -> UndoJournal:
        return self.state.journal

    @property
    def resolver(self) -> ShortcutResolver[UndoSnapshot]:
        return self.state.resolver

    def _content_did_change(self) -> None:
        self.state.dirty = True
        self.callbacks.content_did_change()

    def _render(self) -> None:
        self.pipeline.render()

    def _set_mode(self, mode: Mode, *, notify: bool = True) -> None:
        if mode is self.state.mode:
            return
        logger.debug("mode %s -> %s", self.state.mode.value, mode.value)
        self.state.mode = mode
        if notify:
            self.callbacks.mode_did_change(mode)

    # Shortcut contexts

    def _live_context(self) -> ShortcutContext:
        mathlist = self.state.mathlist
        siblings = mathlist.siblings()[1:mathlist.anchor_offset() + 1]
        return ShortcutContext(mode=self.state.mode, siblings=tuple(siblings))

    @staticmethod
    def _context_for_snapshot(snapshot: UndoSnapshot) -> ShortcutContext:
        return ShortcutContext(mode=snapshot.mode, siblings=snapshot.siblings_before_caret())

    # Keystroke resolution

    def resolve_keystroke(self, keystroke: Keystroke | str, mode: Mode | str | None = None) -> KeystrokeOutcome:
        """Resolve one keystroke; ``mode`` sets the input mode first when given."""
        if isinstance(keystroke, str):
            keystroke = Keystroke.parse(keystroke)
        if mode is not None:
            self._set_mode(Mode(mode))
        before = self.state.mathlist.to_latex()
        rejections = self.pipeline.rejections
        handled = False
        match: ShortcutMatch | None = None
        rule: str | None = None
        try:
            handled, match, rule = self._resolve(keystroke)
        except MathKeysError as error:
            logger.warning("keystroke %s failed: %s", keystroke, error)
            self.state.mathlist.validate_selection()
        return KeystrokeOutcome(
            handled=handled,
            new_mode=self.state.mode,
            mutated=self.state.mathlist.to_latex() != before,
            rejected=self.pipeline.rejections != rejections,
            shortcut=match,
            rule=rule,
        )

    def _resolve(self, keystroke: Keystroke) -> tuple[bool, ShortcutMatch | None, str | None]:
        state = self.state
        mathlist = state.mathlist
        resolver = state.resolver
        resolver.cancel_timer()

        char = event_to_char(keystroke)
        match: ShortcutMatch | None = None
        exhausted = False
        if state.mode is not Mode.COMMAND and not keystroke.ctrl_or_meta and keystroke.name != "Backspace":
            if keystroke.printable:
                resolution = resolver.feed(
                    char,
                    state.journal.save(),
                    live_context=self._live_context(),
                    context_for_state=self._context_for_snapshot,
                )
                match = resolution.match
                exhausted = resolution.exhausted
            else:
                resolver.reset()

        switched = False
        rule: str | None = None
        if self.config.smart_mode:
            if match is not None:
                self._set_mode(Mode.MATH)
            else:
                decision = self._smart_mode_decision(keystroke, char)
                if decision is not None:
                    rule = decision.rule
                    apply_mode_action(mathlist, decision.action)
                    if decision.switch:
                        logger.debug("smart mode rule %s switches from %s", rule, state.mode.value)
                        self._set_mode(state.mode.toggled())
                        switched = True

        selector = None
        if match is None and not switched:
            selector = self.registry.selector_for_keystroke(state.mode, keystroke)

        if match is None and selector is None:
            if keystroke.printable and not keystroke.ctrl_or_meta:
                self.typed_text(char)
                return True, None, rule
            return switched or rule is not None, None, rule

        mathlist.decorate_command_string(False)
        if selector is not None and selector[0] == "move_after_parent":
            parent = mathlist.parent()
            if (
                parent is not None
                and parent.type == "leftright"
                and mathlist.is_at_end()
                and mathlist.insert_smart_fence(".")
            ):
                selector = None
                self._render()

        if state.mode is Mode.MATH and keystroke.name == "Spacebar":
            after, before = mathlist.sibling(1), mathlist.sibling(-1)
            if (after is not None and after.mode is Mode.TEXT) or (before is not None and before.mode is Mode.TEXT):
                mathlist.insert(" ", mode=Mode.TEXT)

        if selector is not None:
            self.perform(*selector)
        if match is not None:
            self.pipeline.substitute_shortcut(char, match, resolver.buffer.states[match.matched_at])
            if exhausted:
                resolver.reset()
        return True, match, rule

    def _smart_mode_decision(self, keystroke: Keystroke, char: str) -> ModeSwitchDecision | None:
        state = self.state
        mathlist = state.mathlist
        if state.smart_mode_suppressed or state.mode is Mode.COMMAND:
            return None
        if not mathlist.is_at_end() or not mathlist.is_collapsed():
            return None
        if keystroke.ctrl_or_meta or keystroke.char is None or len(char) != 1:
            return None
        context = build_mode_context(mathlist, state.mode, char, keystroke.name)
        return decide_mode_switch(context)

    # Selectors

    def perform(self, selector: str, *args: str) -> bool:
        """Run a selector by name; returns whether it was recognized."""
        name = normalize_selector(selector)
        state = self.state
        mathlist = state.mathlist
        editing = name.startswith(EDITING_PREFIXES)
        if name in EDITOR_SELECTORS:
            dirty = bool(getattr(self, name)(*args))
        elif name in DOCUMENT_SELECTORS:
            if editing:
                state.resolver.reset()
                state.suggestion_index = 0
            journaled = editing and state.mode is not Mode.COMMAND
            if journaled:
                state.journal.pop()
                state.journal.snapshot()
            getattr(mathlist, name)(*args)
            if journaled:
                state.journal.snapshot()
            dirty = True
        else:
            logger.debug("unknown selector %r", selector)
            return False

        if not mathlist.is_collapsed() or name in _BUFFER_RESET_SELECTORS or name.startswith("extend"):
            state.resolver.reset()
        if dirty:
            self._render()
        return True

    def move_to_superscript(self) -> bool:
        return self.pipeline.apply_structural("move_to_superscript").applied

    def move_to_subscript(self) -> bool:
        return self.pipeline.apply_structural("move_to_subscript").applied

    def typed_text(self, text: str) -> InsertionResult:
        """Insert ``text`` one character at a time in the current mode."""
        state = self.state
        mathlist = state.mathlist
        mathlist.decorate_command_string(False)
        for char in text:
            if state.mode is Mode.COMMAND:
                state.suggestion_index = 0
                command = mathlist.command_string() + char
                mathlist.insert(char, mode=Mode.COMMAND)
                if _UNKNOWN_COMMAND.match(command) and not is_known_command(command[1:], prefix=True):
                    mathlist.decorate_command_string(True)
            elif state.mode is Mode.MATH:
                result = self._type_math_char(char)
                if result.rejected:
                    return result
            else:
                mathlist.insert(char, mode=Mode.TEXT)
        if state.mode is not Mode.COMMAND:
            state.journal.snapshot_and_coalesce()
        self._render()
        return InsertionResult(applied=True)

    def _type_math_char(self, char: str) -> InsertionResult:
        mathlist = self.state.mathlist
        if char == "^":
            return self.pipeline.apply_structural("move_to_superscript")
        if char == "_":
            return self.pipeline.apply_structural("move_to_subscript")
        if char == " ":
            return self.pipeline.apply_structural("move_after_parent")
        if char == "\\":
            return InsertionResult(applied=self.enter_command_mode())
        if (
            self.config.smart_superscript
            and mathlist.relation() == "superscript"
            and char.isdigit()
            and all(atom.type == "first" for atom in mathlist.siblings())
        ):
            mathlist.insert(char, mode=Mode.MATH)
            mathlist.move_after_parent()
            return InsertionResult(applied=True)
        return self.pipeline.insert_literal(char, Mode.MATH)

    # Command mode

    @property
    def suggestions(self) -> list[str]:
        """Known commands completing the one being typed."""
        if self.state.mode is not Mode.COMMAND:
            return []
        return suggest(self.state.mathlist.command_string())

    @property
    def suggestion(self) -> str | None:
        """The highlighted suggestion, which ``complete`` commits."""
        suggestions = self.suggestions
        if not suggestions:
            return None
        return suggestions[self.state.suggestion_index % len(suggestions)]

    def next_suggestion(self) -> bool:
        return self._step_suggestion(1)

    def previous_suggestion(self) -> bool:
        return self._step_suggestion(-1)

    def _step_suggestion(self, step: int) -> bool:
        suggestions = self.suggestions
        if not suggestions:
            return False
        self.state.suggestion_index = (self.state.suggestion_index + step) % len(suggestions)
        logger.debug("suggestion %s", suggestions[self.state.suggestion_index])
        return True

    def enter_command_mode(self) -> bool:
        self.state.resolver.reset()
        self.state.suggestion_index = 0
        self.state.mathlist.decorate_command_string(False)
        self._set_mode(Mode.COMMAND)
        self.state.mathlist.insert("\\", mode=Mode.COMMAND)
        return True

    def complete(self, escape: str | bool = False) -> bool:
        """Commit (or with ``escape``, discard) the command being typed.

        When known commands complete the typed prefix, the highlighted one is
        committed instead of the raw text.
        """
        state = self.state
        mathlist = state.mathlist
        if state.mode is not Mode.COMMAND:
            return False
        suggestion = self.suggestion
        state.suggestion_index = 0
        if escape:
            mathlist.splice_command_string(None)
            self._set_mode(Mode.MATH)
            return True
        command = suggestion or mathlist.command_string()
        if not command:
            self._set_mode(Mode.MATH)
            return False
        try:
            atoms = parse_latex(command, Mode.MATH)
        except MarkupError as error:
            logger.warning("cannot complete command %r: %s", command, error)
            mathlist.decorate_command_string(True)
            return True
        mathlist.splice_command_string(atoms)
        self._set_mode(Mode.MATH)
        state.journal.snapshot()
        self.callbacks.announce("replacement", atoms)
        return True

    # Mode and selection

    def switch_mode(self, mode: Mode | str, prefix: str = "", suffix: str = "") -> bool:
        """Switch mode explicitly; smart mode stays off until the caret is re-placed."""
        mode = Mode(mode)
        self.state.resolver.reset()
        self.state.smart_mode_suppressed = True
        if prefix:
            self.pipeline.insert_markup(prefix, mode.toggled())
        self._set_mode(mode)
        if suffix:
            self.pipeline.insert_markup(suffix, mode)
        return True

    def set_selection(self, selection: Selection) -> bool:
        self.state.resolver.reset()
        self.state.smart_mode_suppressed = False
        valid = self.state.mathlist.set_selection(selection)
        self._render()
        return valid

    # Undo

    def undo(self) -> bool:
        return self._restore(self.state.journal.undo, "undo")

    def redo(self) -> bool:
        return self._restore(self.state.journal.redo, "redo")

    def _restore(self, step: Callable[[], UndoSnapshot | None], event: str) -> bool:
        if self.state.mode is Mode.COMMAND:
            self.complete()
        self.state.resolver.reset()
        snapshot = step()
        if snapshot is None:
            return False
        self._set_mode(snapshot.mode)
        self.callbacks.announce(event, [])
        return True

    # Content

    def latex(self) -> str:
        return self.state.mathlist.to_latex()

    def set_latex(self, markup: str) -> None:
        """Replace the whole document; raises ``MarkupError`` for bad markup."""
        atoms = parse_latex(markup, Mode.MATH)
        root = root_atom(atoms)
        mathlist = self.state.mathlist
        mathlist.replace_root(root, DOCUMENT_START)
        mathlist.move_to_mathfield_end()
        self.state.resolver.reset()
        self.state.journal.snapshot()
        self._render()

    def tick(self, now: float | None = None) -> bool:
        """Fire the shortcut buffer reset if its deadline has passed."""
        return self.state.resolver.timer.poll(now)
