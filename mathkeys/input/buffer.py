"""Keystroke buffer and longest-suffix shortcut resolution."""

from __future__ import annotations

import logging
from collections.abc import Callable, Container
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from ..shortcuts import ShortcutContext, ShortcutDictionary, ShortcutMatch
from .timer import DeadlineTimer

logger = logging.getLogger(__name__)

StateT = TypeVar("StateT")


@dataclass
class KeystrokeBuffer(Generic[StateT]):
    """Recently typed characters, each paired with the state saved before it.

    ``blocked`` holds start offsets inside text that a shortcut already
    consumed; no later match may begin there.
    """

    text: str = ""
    states: list[StateT] = field(default_factory=list)
    blocked: set[int] = field(default_factory=set)

    def push(self, char: str, state: StateT) -> None:
        self.text += char
        self.states.append(state)

    def drop_before(self, start: int) -> None:
        """Discard the first ``start`` characters and their states."""
        self.text = self.text[start:]
        del self.states[:start]
        self.blocked = {index - start for index in self.blocked if index >= start}

    def clear(self) -> None:
        self.text = ""
        self.states.clear()
        self.blocked.clear()

    def __len__(self) -> int:
        return len(self.text)

    def __bool__(self) -> bool:
        return bool(self.text)


def resolve_shortcut(
    dictionary: ShortcutDictionary,
    candidate: str,
    context_at: Callable[[int], ShortcutContext],
    skip: Container[int] = (),
) -> ShortcutMatch | None:
    """Return the longest suffix of ``candidate`` that is a shortcut.

    ``context_at(i)`` gives the context in which ``candidate[i:]`` started.
    Scanning ``i`` upward means the first hit is the longest suffix. Offsets
    in ``skip`` are never used as a start.
    """
    for index in range(len(candidate)):
        if index in skip:
            continue
        suffix = candidate[index:]
        entry = dictionary.lookup(suffix, context_at(index))
        if entry is not None:
            return ShortcutMatch(key=suffix, value=entry.value, matched_at=index)
    return None


@dataclass(frozen=True)
class BufferResolution:
    """Outcome of feeding one character to the resolver."""

    candidate: str
    match: ShortcutMatch | None
    exhausted: bool


class ShortcutResolver(Generic[StateT]):
    """Owns the keystroke buffer, its reset timer and the dictionary lookup."""

    def __init__(
        self,
        dictionary: ShortcutDictionary,
        *,
        timer: DeadlineTimer | None = None,
        timeout_ms: int = 0,
    ) -> None:
        self.dictionary = dictionary
        self.buffer: KeystrokeBuffer[StateT] = KeystrokeBuffer()
        self.timer = timer if timer is not None else DeadlineTimer()
        self.timeout_ms = timeout_ms

    def reset(self) -> None:
        if self.buffer:
            logger.debug("keystroke buffer reset (%r)", self.buffer.text)
        self.buffer.clear()
        self.timer.cancel()

    def cancel_timer(self) -> None:
        self.timer.cancel()

    def _extendable_start(self) -> int | None:
        """Smallest open offset whose suffix is a proper prefix of some key."""
        text = self.buffer.text
        for index in range(len(text)):
            if index not in self.buffer.blocked and self.dictionary.could_extend(text[index:]):
                return index
        return None

    def feed(
        self,
        char: str,
        state: StateT,
        *,
        live_context: ShortcutContext,
        context_for_state: Callable[[StateT], ShortcutContext],
    ) -> BufferResolution:
        """Buffer ``char`` and search for a shortcut ending with it.

        ``state`` is the snapshot taken before ``char`` is applied. On a miss
        the buffer keeps only the longest suffix that can still grow into a
        key, so it stays empty while nothing could match. On a match the
        buffer is left whole for the caller, which resets it once the match
        is applied and ``exhausted`` is set. The reset timer is re-armed on
        every call.
        """
        buffer = self.buffer
        candidate = buffer.text + char
        states = list(buffer.states)

        def context_at(index: int) -> ShortcutContext:
            if index < len(states):
                return context_for_state(states[index])
            return live_context

        match = resolve_shortcut(self.dictionary, candidate, context_at, buffer.blocked)
        buffer.push(char, state)
        if match is not None:
            logger.debug("shortcut %r -> %r at %d", match.key, match.value, match.matched_at)
            buffer.blocked.update(range(match.matched_at + 1, len(candidate)))
        start = self._extendable_start()
        if match is None:
            if start is None:
                buffer.clear()
            elif start:
                buffer.drop_before(start)
        if self.timeout_ms > 0:
            self.timer.arm(self.timeout_ms / 1000.0, self.reset)
        return BufferResolution(candidate=candidate, match=match, exhausted=start is None)
