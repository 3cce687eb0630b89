"""Mode-scoped keystroke to selector bindings."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..document.atoms import Mode
from .keys import Keystroke

Selector = tuple[str, ...]


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more ``mode:combo`` tokens to a selector.

    A token without a ``mode:`` prefix applies in every mode. The selector is
    a name followed by optional string arguments.
    """

    combos: tuple[str, ...]
    selector: Selector


def normalize_combo(token: str) -> str:
    """Canonicalize ``mode:Combo`` so ``ctrl-Z`` and ``Ctrl-Z`` compare equal."""
    mode, sep, combo = token.rpartition(":")
    if not sep or not combo:
        mode, combo = "", token
    if mode and mode.lower() not in {m.value for m in Mode}:
        mode, combo = "", token
    canonical = Keystroke.parse(combo).combo
    return f"{mode.lower()}:{canonical}" if mode else canonical


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        """Initialize empty registry with optional token normalizer."""
        self._normalize = normalize if normalize is not None else normalize_combo
        self._selectors: dict[str, Selector] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing selectors for same combos."""
        for combo in binding.combos:
            self._selectors[self._normalize(combo)] = binding.selector
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def selector_for_keystroke(self, mode: Mode, keystroke: Keystroke) -> Selector | None:
        """Return the selector bound in ``mode`` first, then the mode-less binding."""
        combo = keystroke.combo
        scoped = self._selectors.get(f"{mode.value}:{combo}")
        if scoped is not None:
            return scoped
        return self._selectors.get(combo)

    def dispatch(self, mode: Mode, keystroke: Keystroke, perform: Callable[..., bool]) -> bool | None:
        """Invoke ``perform`` with the bound selector; ``None`` when unbound."""
        selector = self.selector_for_keystroke(mode, keystroke)
        if selector is None:
            return None
        return perform(*selector)


DEFAULT_KEY_BINDINGS = (
    KeyComboBinding(("Left",), ("move_to_previous_char",)),
    KeyComboBinding(("Right",), ("move_to_next_char",)),
    KeyComboBinding(("Shift-Left",), ("extend_to_previous_char",)),
    KeyComboBinding(("Shift-Right",), ("extend_to_next_char",)),
    KeyComboBinding(("Home",), ("move_to_mathfield_start",)),
    KeyComboBinding(("End",), ("move_to_mathfield_end",)),
    KeyComboBinding(("Backspace",), ("delete_previous_char",)),
    KeyComboBinding(("Del",), ("delete_next_char",)),
    KeyComboBinding(("Ctrl-z", "Meta-z"), ("undo",)),
    KeyComboBinding(("Ctrl-y", "Ctrl-Shift-z", "Meta-Shift-z"), ("redo",)),
    KeyComboBinding(("Ctrl-a", "Meta-a"), ("select_all",)),
    KeyComboBinding(("Ctrl-t",), ("transpose",)),
    KeyComboBinding(("math:Spacebar",), ("move_after_parent",)),
    KeyComboBinding(("math:Esc",), ("enter_command_mode",)),
    KeyComboBinding(("math:Alt-t",), ("switch_mode", "text")),
    KeyComboBinding(("text:Alt-m",), ("switch_mode", "math")),
    KeyComboBinding(("command:Return", "command:Spacebar", "command:Tab"), ("complete",)),
    KeyComboBinding(("command:Esc",), ("complete", "escape")),
    KeyComboBinding(("command:Down",), ("next_suggestion",)),
    KeyComboBinding(("command:Up",), ("previous_suggestion",)),
)


def default_key_registry() -> KeyComboRegistry:
    return KeyComboRegistry().register_bindings(*DEFAULT_KEY_BINDINGS)
