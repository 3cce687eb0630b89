"""Known LaTeX symbol commands and their atom types."""

from __future__ import annotations

# command -> (atom type, rendered body)
SYMBOLS: dict[str, tuple[str, str]] = {
    # Greek
    "alpha": ("mord", "α"),
    "beta": ("mord", "β"),
    "gamma": ("mord", "γ"),
    "delta": ("mord", "δ"),
    "epsilon": ("mord", "ϵ"),
    "varepsilon": ("mord", "ε"),
    "zeta": ("mord", "ζ"),
    "eta": ("mord", "η"),
    "theta": ("mord", "θ"),
    "iota": ("mord", "ι"),
    "kappa": ("mord", "κ"),
    "lambda": ("mord", "λ"),
    "mu": ("mord", "μ"),
    "nu": ("mord", "ν"),
    "xi": ("mord", "ξ"),
    "pi": ("mord", "π"),
    "rho": ("mord", "ρ"),
    "sigma": ("mord", "σ"),
    "tau": ("mord", "τ"),
    "phi": ("mord", "ϕ"),
    "varphi": ("mord", "φ"),
    "chi": ("mord", "χ"),
    "psi": ("mord", "ψ"),
    "omega": ("mord", "ω"),
    "Gamma": ("mord", "Γ"),
    "Delta": ("mord", "Δ"),
    "Theta": ("mord", "Θ"),
    "Lambda": ("mord", "Λ"),
    "Pi": ("mord", "Π"),
    "Sigma": ("mord", "Σ"),
    "Phi": ("mord", "Φ"),
    "Psi": ("mord", "Ψ"),
    "Omega": ("mord", "Ω"),
    # Misc ordinals
    "infty": ("mord", "∞"),
    "partial": ("mord", "∂"),
    "nabla": ("mord", "∇"),
    "forall": ("mord", "∀"),
    "exists": ("mord", "∃"),
    "emptyset": ("mord", "∅"),
    "ldots": ("mord", "…"),
    "cdots": ("mord", "⋯"),
    "imath": ("mord", "ı"),
    "backslash": ("mord", "\\"),
    # Binary operators
    "cdot": ("mbin", "⋅"),
    "times": ("mbin", "×"),
    "div": ("mbin", "÷"),
    "pm": ("mbin", "±"),
    "mp": ("mbin", "∓"),
    "cup": ("mbin", "∪"),
    "cap": ("mbin", "∩"),
    "circ": ("mbin", "∘"),
    # Relations
    "le": ("mrel", "≤"),
    "ge": ("mrel", "≥"),
    "ne": ("mrel", "≠"),
    "approx": ("mrel", "≈"),
    "equiv": ("mrel", "≡"),
    "sim": ("mrel", "∼"),
    "in": ("mrel", "∈"),
    "notin": ("mrel", "∉"),
    "subset": ("mrel", "⊂"),
    "supset": ("mrel", "⊃"),
    "subseteq": ("mrel", "⊆"),
    "supseteq": ("mrel", "⊇"),
    "to": ("mrel", "→"),
    "gets": ("mrel", "←"),
    "leftarrow": ("mrel", "←"),
    "rightarrow": ("mrel", "→"),
    "longrightarrow": ("mrel", "⟶"),
    "longleftarrow": ("mrel", "⟵"),
    "leftrightarrow": ("mrel", "↔"),
    "Rightarrow": ("mrel", "⇒"),
    "Leftarrow": ("mrel", "⇐"),
    "Leftrightarrow": ("mrel", "⇔"),
    "Longrightarrow": ("mrel", "⟹"),
    "mapsto": ("mrel", "↦"),
    # Large operators
    "sum": ("mop", "∑"),
    "prod": ("mop", "∏"),
    "int": ("mop", "∫"),
    "iint": ("mop", "∬"),
    "oint": ("mop", "∮"),
    # Functions
    "sin": ("mop", "sin"),
    "cos": ("mop", "cos"),
    "tan": ("mop", "tan"),
    "cot": ("mop", "cot"),
    "sec": ("mop", "sec"),
    "csc": ("mop", "csc"),
    "arcsin": ("mop", "arcsin"),
    "arccos": ("mop", "arccos"),
    "arctan": ("mop", "arctan"),
    "sinh": ("mop", "sinh"),
    "cosh": ("mop", "cosh"),
    "tanh": ("mop", "tanh"),
    "log": ("mop", "log"),
    "ln": ("mop", "ln"),
    "exp": ("mop", "exp"),
    "lim": ("mop", "lim"),
    "max": ("mop", "max"),
    "min": ("mop", "min"),
    "det": ("mop", "det"),
    "gcd": ("mop", "gcd"),
}

# Single non-letter escapes: ``\{`` etc.
ESCAPED_CHARS: dict[str, tuple[str, str]] = {
    "{": ("mopen", "{"),
    "}": ("mclose", "}"),
    "[": ("mord", "["),
    "]": ("mord", "]"),
    "@": ("mord", "@"),
    "#": ("mord", "#"),
    "$": ("mord", "$"),
    "%": ("mord", "%"),
    "&": ("mord", "&"),
    "^": ("mord", "^"),
    "_": ("mord", "_"),
    ",": ("spacing", " "),
    ";": ("spacing", " "),
    " ": ("spacing", " "),
}

# Commands taking arguments, handled structurally by the parser.
STRUCTURAL_COMMANDS = frozenset({"frac", "sqrt", "left", "right", "text", "mathrm"})

FENCE_DELIMITERS = frozenset({"(", ")", "[", "]", "\\{", "\\}", "|", ".", "\\langle", "\\rangle", "?"})


def is_known_command(name: str, prefix: bool = False) -> bool:
    """Whether ``name`` is a command, or with ``prefix`` the start of one."""
    if not prefix:
        return name in SYMBOLS or name in STRUCTURAL_COMMANDS
    return any(command.startswith(name) for command in (*SYMBOLS, *STRUCTURAL_COMMANDS))


def suggest(command: str) -> list[str]:
    """Symbol commands completing ``command`` (with its backslash), shortest first.

    An exact match therefore sorts ahead of its longer relatives. A bare
    backslash or a non-letter prefix has no suggestions.
    """
    prefix = command[1:] if command.startswith("\\") else command
    if not prefix.isalpha():
        return []
    names = sorted((name for name in SYMBOLS if name.startswith(prefix)), key=lambda name: (len(name), name))
    return ["\\" + name for name in names]
