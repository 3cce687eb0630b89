"""Editor options and their persisted JSON form.

Options live in ``config.json`` under the platform config directory.
Missing, unreadable or malformed values fall back to the defaults.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_config_dir

from .document import Mode

logger = logging.getLogger(__name__)

APP_NAME = "mathkeys"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_INLINE_SHORTCUT_TIMEOUT_MS = 750
DEFAULT_MAX_UNDO_DEPTH = 1000


@dataclass(frozen=True)
class EditorConfig:
    """Behavior switches for one ``Editor``.

    ``script_depth`` is ``(subscript, superscript)``; ``None`` means no limit.
    ``inline_shortcut_timeout`` is in milliseconds and ``0`` disables the
    buffer reset timer.
    """

    smart_mode: bool = True
    smart_fence: bool = True
    smart_superscript: bool = True
    script_depth: tuple[int | None, int | None] = (None, None)
    inline_shortcut_timeout: int = DEFAULT_INLINE_SHORTCUT_TIMEOUT_MS
    inline_shortcuts: Mapping[str, object] = field(default_factory=dict)
    override_default_inline_shortcuts: bool = False
    default_mode: Mode = Mode.MATH
    max_undo_depth: int = DEFAULT_MAX_UNDO_DEPTH

    def __post_init__(self) -> None:
        # A mode value such as "text" is accepted; unknown names raise ValueError.
        object.__setattr__(self, "default_mode", Mode(self.default_mode))

    def with_overrides(self, **changes: object) -> EditorConfig:
        """Return a copy with ``changes`` applied, ignoring ``None`` values."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> EditorConfig:
        """Build a config from decoded JSON, dropping values of the wrong shape."""
        defaults = cls()
        return cls(
            smart_mode=_coerce_bool(data.get("smart_mode"), defaults.smart_mode),
            smart_fence=_coerce_bool(data.get("smart_fence"), defaults.smart_fence),
            smart_superscript=_coerce_bool(data.get("smart_superscript"), defaults.smart_superscript),
            script_depth=_coerce_script_depth(data.get("script_depth")),
            inline_shortcut_timeout=_coerce_nonnegative_int(
                data.get("inline_shortcut_timeout"), defaults.inline_shortcut_timeout
            ),
            inline_shortcuts=_coerce_shortcuts(data.get("inline_shortcuts")),
            override_default_inline_shortcuts=_coerce_bool(
                data.get("override_default_inline_shortcuts"), defaults.override_default_inline_shortcuts
            ),
            default_mode=_coerce_mode(data.get("default_mode"), defaults.default_mode),
            max_undo_depth=max(1, _coerce_nonnegative_int(data.get("max_undo_depth"), defaults.max_undo_depth)),
        )

    def to_mapping(self) -> dict[str, object]:
        return {
            "smart_mode": self.smart_mode,
            "smart_fence": self.smart_fence,
            "smart_superscript": self.smart_superscript,
            "script_depth": list(self.script_depth),
            "inline_shortcut_timeout": self.inline_shortcut_timeout,
            "inline_shortcuts": dict(self.inline_shortcuts),
            "override_default_inline_shortcuts": self.override_default_inline_shortcuts,
            "default_mode": self.default_mode.value,
            "max_undo_depth": self.max_undo_depth,
        }


def _coerce_bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _coerce_nonnegative_int(value: object, default: int) -> int:
    """Booleans and non-integers count as invalid."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(0, value)


def _coerce_depth(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def _coerce_script_depth(value: object) -> tuple[int | None, int | None]:
    """Accept a single limit for both scripts or a ``[sub, sup]`` pair."""
    if isinstance(value, (list, tuple)) and len(value) == 2:
        return _coerce_depth(value[0]), _coerce_depth(value[1])
    depth = _coerce_depth(value)
    return depth, depth


def _coerce_mode(value: object, default: Mode) -> Mode:
    if value not in (Mode.MATH.value, Mode.TEXT.value):
        return default
    return Mode(value)


def _coerce_shortcuts(value: object) -> dict[str, object]:
    if not isinstance(value, dict):
        return {}
    return {key: entry for key, entry in value.items() if isinstance(key, str) and key}


def load_config() -> dict[str, object]:
    """Load the persisted JSON object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as error:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, error)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; failures are logged, not raised."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as error:
        logger.warning("could not write config %s: %s", CONFIG_PATH, error)


def load_editor_config() -> EditorConfig:
    return EditorConfig.from_mapping(load_config())


def save_editor_config(config: EditorConfig) -> None:
    """Merge ``config`` into the stored JSON, keeping unrelated keys."""
    data = load_config()
    data.update(config.to_mapping())
    save_config(data)
