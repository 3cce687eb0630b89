"""Terminal highlighting for LaTeX output.

Pygments is imported lazily on first use; when it is missing or fails, the
markup is returned unchanged.
"""

from __future__ import annotations

DEFAULT_STYLE = "monokai"

_PYGMENTS_READY = False
_PYGMENTS_AVAILABLE = False
_PYGMENTS_HIGHLIGHT = None
_PYGMENTS_TEX_LEXER = None
_PYGMENTS_TERMINAL_FORMATTER = None
_PYGMENTS_GET_STYLE_BY_NAME = None
_PYGMENTS_FORMATTERS: dict[str, object] = {}
_PYGMENTS_VALID_STYLES: set[str] = set()
_PYGMENTS_INVALID_STYLES: set[str] = set()


def _ensure_pygments_loaded() -> bool:
    """Lazily import and cache Pygments callables; return availability."""
    global _PYGMENTS_READY
    global _PYGMENTS_AVAILABLE
    global _PYGMENTS_HIGHLIGHT
    global _PYGMENTS_TEX_LEXER
    global _PYGMENTS_TERMINAL_FORMATTER
    global _PYGMENTS_GET_STYLE_BY_NAME

    if _PYGMENTS_READY:
        return _PYGMENTS_AVAILABLE

    _PYGMENTS_READY = True
    try:
        from pygments import highlight as pygments_highlight
        from pygments.formatters import TerminalFormatter
        from pygments.lexers import TexLexer
        from pygments.styles import get_style_by_name
    except ImportError:
        _PYGMENTS_AVAILABLE = False
        return False

    _PYGMENTS_HIGHLIGHT = pygments_highlight
    _PYGMENTS_TEX_LEXER = TexLexer
    _PYGMENTS_TERMINAL_FORMATTER = TerminalFormatter
    _PYGMENTS_GET_STYLE_BY_NAME = get_style_by_name
    _PYGMENTS_AVAILABLE = True
    return True


def normalize_style(style: str) -> str:
    """Return ``style`` if Pygments knows it, else the default style."""
    if style in _PYGMENTS_VALID_STYLES:
        return style
    if style in _PYGMENTS_INVALID_STYLES or not _ensure_pygments_loaded():
        return DEFAULT_STYLE
    try:
        assert _PYGMENTS_GET_STYLE_BY_NAME is not None
        _PYGMENTS_GET_STYLE_BY_NAME(style)
    except Exception:
        _PYGMENTS_INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _PYGMENTS_VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str):
    formatter = _PYGMENTS_FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    assert _PYGMENTS_TERMINAL_FORMATTER is not None
    formatter = _PYGMENTS_TERMINAL_FORMATTER(style=style)
    _PYGMENTS_FORMATTERS[style] = formatter
    return formatter


def pygments_highlight(markup: str, style: str = DEFAULT_STYLE) -> str | None:
    """Highlight markup with the TeX lexer, returning ``None`` on any failure."""
    if not _ensure_pygments_loaded():
        return None
    formatter = _formatter_for_style(normalize_style(style))
    try:
        assert _PYGMENTS_HIGHLIGHT is not None and _PYGMENTS_TEX_LEXER is not None
        return _PYGMENTS_HIGHLIGHT(markup, _PYGMENTS_TEX_LEXER(), formatter)
    except Exception:
        return None


def colorize_latex(markup: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Colorize markup for the terminal; trailing newline handling is the caller's."""
    if no_color:
        return markup
    rendered = pygments_highlight(markup, style)
    if not rendered:
        return markup
    return rendered.rstrip("\n")
