"""Value coercions shared by the builders."""

import re
from typing import Any

from ..color import BLACK, WHITE, normalize_hex
from ..css.token_refs import hex_to_token_var, var_ref
from ..models import MODES, ReferenceKind
from ..references import (
    core_var_name,
    is_brace_reference,
    parse_reference,
    reference_to_css_var,
    token_css_var_name,
    unwrap_value,
)
from ..resolver import ThemeAccessor, resolve_reference
from ..token_index import TokenIndex, build_token_index, to_number

_OPACITY_REF = re.compile(r"^(?:tokens|token)\.(opacity|opacities)\.([a-z0-9_-]+)$", re.IGNORECASE)
_THEMES_PREFIX = re.compile(r"^--recursica-brand-themes-(light|dark)-")


def normalize_mode(mode: Any) -> str:
    """``'Light'``/``'dark'`` to ``'light'``/``'dark'``; anything else is light."""
    text = str(mode or "light").strip().lower()
    return text if text in MODES else "light"


def ensure_index(tokens: Any, overrides: dict[str, Any] | None = None) -> TokenIndex:
    """Reuse a prebuilt index unless overrides require a fresh one."""
    if isinstance(tokens, TokenIndex):
        if not overrides:
            return tokens
        return build_token_index(tokens.root, {**tokens.overrides, **overrides})
    return build_token_index(tokens, overrides)


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def to_px(value: Any) -> str | None:
    """Numbers gain a ``px`` suffix; unit-suffixed strings pass through."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return f"{format_number(value)}px"
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return f"{format_number(float(text))}px"
        except ValueError:
            return text
    return None


def legacy_alias_name(name: str) -> str | None:
    """``--recursica-brand-themes-light-x`` to ``--recursica-brand-light-x``."""
    if not _THEMES_PREFIX.match(name):
        return None
    return _THEMES_PREFIX.sub(lambda m: f"--recursica-brand-{m.group(1)}-", name, count=1)


def add_legacy_aliases(vars: dict[str, str], prefix: str = "") -> dict[str, str]:
    """Add a ``themes``-less alias for each themed variable.

    Only names starting with ``prefix`` are considered, and an alias that
    already exists is never overwritten.
    """
    for name, value in list(vars.items()):
        if prefix and not name.startswith(prefix):
            continue
        alias = legacy_alias_name(name)
        if alias and alias not in vars:
            vars[alias] = value
    return vars


def opacity_var(value: Any, index: TokenIndex) -> str:
    """CSS value for an opacity setting.

    Token references become token vars, numbers become the solid opacity var
    with the number (0..1, percentages scaled down) as its fallback, and
    anything else is the plain solid opacity var.
    """
    raw = unwrap_value(value)
    if isinstance(raw, str):
        text = raw.strip()
        inner = text[1:-1].strip() if text.startswith("{") and text.endswith("}") else text
        match = _OPACITY_REF.match(inner)
        if match:
            category, name = match.groups()
            return var_ref(token_css_var_name([category.lower(), name]))
    resolved = resolve_reference(raw, index).value_or(None)
    number = to_number(resolved)
    if number is not None:
        normalized = number if number <= 1 else number / 100
        clamped = max(0.0, min(1.0, normalized))
        return var_ref("--recursica-tokens-opacity-solid", format_number(clamped))
    return var_ref("--recursica-tokens-opacity-solid")


def core_black_white(hex_value: Any, mode: str) -> str | None:
    """Core black/white var for a pure black or white color."""
    normalized = normalize_hex(hex_value)
    if normalized == WHITE:
        return var_ref(core_var_name(mode, "white"))
    if normalized == BLACK:
        return var_ref(core_var_name(mode, "black"))
    return None


def color_to_var(
    value: Any,
    index: TokenIndex,
    mode: str,
    accessor: ThemeAccessor | None = None,
) -> str | None:
    """Coerce a color setting to a CSS value, preferring ``var()`` references.

    Order: existing ``var()`` strings (legacy palette forms rewritten to the
    current names), references with a generated variable, hex colors found
    in the token set, then the resolved literal. None when nothing resolves.
    """
    raw = unwrap_value(value)
    if raw is None:
        return None
    if isinstance(raw, str) and raw.strip().lower().startswith("var("):
        descriptor = parse_reference(raw)
        if descriptor is not None:
            mapped = reference_to_css_var(descriptor, mode)
            if mapped:
                return mapped
        return raw.strip()

    descriptor = parse_reference(raw)
    if descriptor is not None:
        mapped = reference_to_css_var(descriptor, mode)
        if descriptor.kind == ReferenceKind.TOKEN:
            return mapped
        if mapped:
            return mapped

    resolved = resolve_reference(raw, index, accessor).value_or(None)
    if resolved is None:
        return None
    if isinstance(resolved, str):
        # An unprefixed brace path such as {palettes.neutral.050} is not CSS
        if is_brace_reference(resolved):
            return None
        if resolved.strip().lower().startswith("var("):
            return resolved.strip()
    token_var = hex_to_token_var(resolved, index)
    if token_var:
        return token_var
    return str(resolved).strip()
