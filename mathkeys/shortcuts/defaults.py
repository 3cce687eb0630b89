"""Built-in inline shortcuts."""

from __future__ import annotations

from collections.abc import Mapping

from .dictionary import ShortcutDictionary

# Escapes that must never be undone back into their typed form.
MANDATORY_ESCAPES = frozenset({"\\{", "\\}", "\\[", "\\]", "\\@", "\\#", "\\$", "\\%", "\\^", "\\_", "\\backslash"})

_GREEK = (
    "alpha", "beta", "gamma", "delta", "epsilon", "varepsilon", "zeta", "eta", "theta",
    "iota", "kappa", "lambda", "mu", "nu", "xi", "pi", "rho", "sigma", "tau", "phi",
    "varphi", "chi", "psi", "omega", "Gamma", "Delta", "Theta", "Lambda", "Pi", "Sigma",
    "Phi", "Psi", "Omega",
)

_FUNCTIONS = (
    "sin", "cos", "tan", "cot", "sec", "csc", "arcsin", "arccos", "arctan",
    "sinh", "cosh", "tanh", "log", "ln", "exp", "lim", "max", "min", "det", "gcd",
)

DEFAULT_INLINE_SHORTCUTS: dict[str, object] = {
    **{name: f"\\{name}" for name in _GREEK},
    **{name: f"\\{name}" for name in _FUNCTIONS},
    "sum": "\\sum",
    "prod": "\\prod",
    "int": "\\int",
    "iint": "\\iint",
    "oint": "\\oint",
    "infty": "\\infty",
    "oo": "\\infty",
    "forall": "\\forall",
    "exists": "\\exists",
    "nabla": "\\nabla",
    "partial": "\\partial",
    "in": "\\in",
    "!in": "\\notin",
    "sqrt": "\\sqrt{}",
    "xx": "\\times",
    "+-": "\\pm",
    "-+": "\\mp",
    "...": "\\ldots",
    "<=": "\\le",
    ">=": "\\ge",
    "!=": "\\ne",
    "==": "\\equiv",
    "~~": "\\approx",
    "->": "\\to",
    "-->": "\\longrightarrow",
    "<-": "\\gets",
    "<--": "\\longleftarrow",
    "<->": "\\leftrightarrow",
    "=>": "\\Rightarrow",
    "==>": "\\Longrightarrow",
    "<=>": "\\Leftrightarrow",
    "|->": "\\mapsto",
    "ii": {
        "value": "\\mathrm{i}",
        "after": "nothing+digit+function+frac+surd+binop+relop+punct+openfence+closefence+space+text",
    },
}


def build_shortcut_dictionary(
    user_shortcuts: Mapping[str, object] | None = None,
    *,
    override_defaults: bool = False,
) -> ShortcutDictionary:
    """Merge user shortcuts over the defaults, or use them alone when overriding."""
    dictionary = ShortcutDictionary() if override_defaults else ShortcutDictionary(DEFAULT_INLINE_SHORTCUTS)
    if user_shortcuts:
        dictionary.update(user_shortcuts)
    return dictionary
