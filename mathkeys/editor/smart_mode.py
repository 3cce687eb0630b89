"""Smart-mode heuristic deciding when typing should flip math/text mode.

The decision is a pure function of a ``ModeContext``. Rules are evaluated in
order and the first matching rule wins, including rules whose outcome is
"stay in this mode". The decision names the tree mutation to perform (if
any); ``conversion.apply_mode_action`` performs it afterwards.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from ..document import ORD_TYPES, Atom, MathList, Mode

# Trailing letter runs in math that stay math.
TEXT_RUN_EXCEPTIONS = ("dxd",)

_CLOSING_TO_OPENING = {")": "(", "]": "[", "}": "\\{"}


@dataclass(frozen=True)
class ModeContext:
    """Local context for one keystroke."""

    mode: Mode
    text: str
    char: str
    keystroke: str
    fence_left: str | None = None


@dataclass(frozen=True)
class ConvertAtoms:
    """Flip up to ``count`` trailing atoms (``None``: unbounded) to ``target``."""

    target: Mode
    count: int | None = None
    until: Callable[[Atom], bool] | None = None
    remove_isolated_space: bool = False


@dataclass(frozen=True)
class RewriteAsCdot:
    """Turn the trailing "." into a centered multiplication dot."""


@dataclass(frozen=True)
class RemoveIsolatedSpace:
    """Drop a lone text space left between math atoms."""


ModeAction = ConvertAtoms | RewriteAsCdot | RemoveIsolatedSpace


@dataclass(frozen=True)
class ModeRule:
    name: str
    matches: Callable[[ModeContext], bool]
    switch: bool
    action: ModeAction | None = None


@dataclass(frozen=True)
class ModeSwitchDecision:
    rule: str
    switch: bool
    action: ModeAction | None


def _search(pattern: str, flags: int = 0) -> Callable[[ModeContext], bool]:
    compiled = re.compile(pattern, flags)
    return lambda ctx: compiled.search(ctx.text) is not None


def _is_lower_or_punct(atom: Atom) -> bool:
    return re.fullmatch(r"[a-z:,;.]", atom.body) is not None


def _is_letter_or_punct(atom: Atom) -> bool:
    return re.fullmatch(r"[a-zA-Z:,;.]", atom.body) is not None


def _closes_enclosing_fence(ctx: ModeContext) -> bool:
    opening = _CLOSING_TO_OPENING.get(ctx.char)
    return opening is not None and ctx.fence_left == opening


def _is_word_run(ctx: ModeContext) -> bool:
    if re.search(r"[a-zA-Z]{3,}$", ctx.text) is None:
        return False
    return not any(ctx.text.endswith(exception) for exception in TEXT_RUN_EXCEPTIONS)


TEXT_TO_MATH_RULES: tuple[ModeRule, ...] = (
    ModeRule("command-key", lambda ctx: ctx.keystroke == "Esc" or ctx.char in "^_\\/", switch=True),
    ModeRule("closing-fence", _closes_enclosing_fence, switch=True),
    ModeRule("single-letter-word", _search(r"(^|[^a-zA-Z])(a|I) $"), switch=False),
    ModeRule(
        "isolated-letter",
        _search(r"(^|[^a-zA-Z])[a-zA-Z] $"),
        switch=False,
        action=ConvertAtoms(Mode.MATH, 1),
    ),
    ModeRule("period-as-cdot", _search(r"\.\S$"), switch=True, action=RewriteAsCdot()),
    ModeRule(
        "letter-then-symbol",
        _search(r"(^|\s)[a-zA-Z][^a-zA-Z]$"),
        switch=True,
        action=ConvertAtoms(Mode.MATH, 1, remove_isolated_space=True),
    ),
    ModeRule("period-then-digit", _search(r"\.[0-9]$"), switch=True, action=ConvertAtoms(Mode.MATH, 1)),
    ModeRule(
        "paren-then-number",
        _search(r"[(][0-9+\-.]$"),
        switch=True,
        action=ConvertAtoms(Mode.MATH, 1, remove_isolated_space=True),
    ),
    ModeRule(
        "paren-letter-separator",
        _search(r"[(][a-z][,;]$"),
        switch=True,
        action=ConvertAtoms(Mode.MATH, 2, remove_isolated_space=True),
    ),
    ModeRule(
        "math-char",
        lambda ctx: re.search(r"[0-9+\-=><*|]$", ctx.char) is not None,
        switch=True,
        action=RemoveIsolatedSpace(),
    ),
)

MATH_TO_TEXT_RULES: tuple[ModeRule, ...] = (
    ModeRule(
        "spacebar",
        lambda ctx: ctx.keystroke == "Spacebar",
        switch=True,
        action=ConvertAtoms(Mode.TEXT, until=_is_lower_or_punct),
    ),
    ModeRule("word-run", _is_word_run, switch=True, action=ConvertAtoms(Mode.TEXT, until=_is_letter_or_punct)),
    ModeRule("if", _search(r"(^|\W)(if|If)$", re.IGNORECASE), switch=True, action=ConvertAtoms(Mode.TEXT, 1)),
    ModeRule("sentence-end", lambda ctx: ctx.char in ("?", "."), switch=True),
)


def decide_mode_switch(ctx: ModeContext) -> ModeSwitchDecision | None:
    """Return the first matching rule's decision, or ``None`` to leave things be."""
    if ctx.mode is Mode.TEXT:
        rules = TEXT_TO_MATH_RULES
    elif ctx.mode is Mode.MATH:
        rules = MATH_TO_TEXT_RULES
    else:
        return None
    for rule in rules:
        if rule.matches(ctx):
            return ModeSwitchDecision(rule=rule.name, switch=rule.switch, action=rule.action)
    return None


def text_before_anchor(mathlist: MathList) -> str:
    """Bodies of the trailing run of ordinary atoms before the caret."""
    result = ""
    index = 0
    while True:
        atom = mathlist.sibling(index)
        if atom is None or atom.type not in ORD_TYPES:
            return result
        result = atom.body + result
        index -= 1


def build_mode_context(mathlist: MathList, mode: Mode, char: str, keystroke: str) -> ModeContext:
    parent = mathlist.parent()
    fence_left = parent.left_delim if parent is not None and parent.type == "leftright" else None
    return ModeContext(
        mode=mode,
        text=text_before_anchor(mathlist) + char,
        char=char,
        keystroke=keystroke,
        fence_left=fence_left,
    )
