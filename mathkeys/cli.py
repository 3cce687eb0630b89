"""Command-line front door for mathkeys.

Replays keystroke tokens into a fresh editor and prints the resulting LaTeX,
optionally with a per-keystroke trace.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator, Sequence

from .config import load_editor_config
from .document import Mode
from .editor import Editor, EventLog
from .highlight import DEFAULT_STYLE, colorize_latex
from .input import Keystroke, is_named_key_token


def _nonnegative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def iter_keystrokes(tokens: Sequence[str]) -> Iterator[Keystroke]:
    """Expand CLI tokens into keystrokes.

    Key names (``Spacebar``, ``Ctrl-z``...) and single characters are one
    keystroke each. Longer tokens are typed character by character, and two
    such tokens in a row are separated by a space.
    """
    previous_was_text = False
    for token in tokens:
        if is_named_key_token(token):
            yield Keystroke.parse(token)
            previous_was_text = False
            continue
        if previous_was_text:
            yield Keystroke.from_char(" ")
        for char in token:
            yield Keystroke.from_char(char)
        previous_was_text = True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mathkeys",
        description="Replay keystrokes into a math editor and print the resulting LaTeX.",
    )
    parser.add_argument("tokens", nargs="*", help="Keys (x, Spacebar, Ctrl-z, ...) or text to type.")
    parser.add_argument("--mode", choices=[Mode.MATH.value, Mode.TEXT.value], default=None, help="Initial input mode.")
    smart = parser.add_mutually_exclusive_group()
    smart.add_argument("--smart-mode", dest="smart_mode", action="store_true", default=None, help="Enable smart mode.")
    smart.add_argument("--no-smart-mode", dest="smart_mode", action="store_false", help="Disable smart mode.")
    parser.add_argument(
        "--timeout",
        type=_nonnegative_int,
        default=None,
        metavar="MS",
        help="Inline shortcut timeout in milliseconds (0 disables it).",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--trace", action="store_true", help="Print the outcome of every keystroke.")
    parser.add_argument("--verbose", action="store_true", help="Log engine decisions to stderr.")
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments, replay the keystrokes and print the document."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = load_editor_config().with_overrides(
        default_mode=Mode(args.mode) if args.mode else None,
        smart_mode=args.smart_mode,
        inline_shortcut_timeout=args.timeout,
    )
    events = EventLog()
    editor = Editor(config, events.callbacks())

    for keystroke in iter_keystrokes(args.tokens):
        editor.tick()
        events.clear()
        outcome = editor.resolve_keystroke(keystroke)
        if args.trace:
            flags = [name for name in ("handled", "mutated", "rejected") if getattr(outcome, name)]
            details = [f"mode={outcome.new_mode.value}", *flags]
            if outcome.shortcut is not None:
                details.append(f"shortcut={outcome.shortcut.key}->{outcome.shortcut.value}")
            if outcome.rule is not None:
                details.append(f"rule={outcome.rule}")
            details.extend(f"announce={name}" for name in events.announcements())
            sys.stdout.write(f"{keystroke.combo}\t{' '.join(details)}\n")

    no_color = args.no_color or not sys.stdout.isatty()
    sys.stdout.write(colorize_latex(editor.latex(), args.style, no_color) + "\n")


if __name__ == "__main__":
    main()
