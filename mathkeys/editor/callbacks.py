"""Host notification hooks for the editor."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from ..document import Atom, Mode


def _ignore(*_args, **_kwargs) -> None:
    return None


@dataclass(frozen=True)
class EditorCallbacks:
    """Injected notifications raised by ``Editor``.

    Every hook defaults to a no-op, so hosts only supply the ones they need.
    ``announce`` receives an event name (``"replacement"``, ``"plonk"``,
    ``"undo"``, ``"redo"``, ``"mode"``) and the atoms involved.
    """

    content_will_change: Callable[[], None] = _ignore
    content_did_change: Callable[[], None] = _ignore
    mode_did_change: Callable[[Mode], None] = _ignore
    announce: Callable[[str, list[Atom]], None] = _ignore
    render: Callable[[], None] = _ignore


@dataclass
class EventLog:
    """Records callback traffic; used by ``--trace`` and by tests."""

    events: list[tuple[str, str]] = field(default_factory=list)

    def record(self, name: str, detail: str = "") -> None:
        self.events.append((name, detail))

    def names(self) -> list[str]:
        return [name for name, _detail in self.events]

    def announcements(self) -> list[str]:
        return [detail for name, detail in self.events if name == "announce"]

    def clear(self) -> None:
        self.events.clear()

    def callbacks(self) -> EditorCallbacks:
        return EditorCallbacks(
            content_will_change=lambda: self.record("content_will_change"),
            content_did_change=lambda: self.record("content_did_change"),
            mode_did_change=lambda mode: self.record("mode_did_change", mode.value),
            announce=lambda event, _atoms: self.record("announce", event),
            render=lambda: self.record("render"),
        )
