"""Conversions between token paths, hex colors and CSS var references."""

import re
from typing import Any

from ..models import ColorTokenRef
from ..references import token_css_var_name
from ..token_index import TokenIndex

_VAR_NAME = re.compile(r"^var\(\s*(--[a-z0-9-_]+)\s*(?:,(.*))?\)$", re.IGNORECASE | re.DOTALL)


def var_ref(name: str, fallback: str | None = None) -> str:
    """``--x`` to ``var(--x)``, with an optional CSS fallback."""
    if fallback is not None:
        return f"var({name}, {fallback})"
    return f"var({name})"


def extract_var_name(value: Any) -> str | None:
    """Variable name inside a ``var(--name[, fallback])`` expression."""
    if not isinstance(value, str):
        return None
    match = _VAR_NAME.match(value.strip())
    return match.group(1) if match else None


def extract_var_fallback(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    match = _VAR_NAME.match(value.strip())
    if not match or match.group(2) is None:
        return None
    return match.group(2).strip() or None


def token_path_to_css_var(path: str) -> str | None:
    """``color/gray/500`` to ``var(--recursica-tokens-color-gray-500)``."""
    parts = [p for p in str(path or "").strip().split("/") if p]
    if len(parts) < 2:
        return None
    return var_ref(token_css_var_name(parts))


def color_token_var(ref: ColorTokenRef, category: str = "color") -> str:
    return var_ref(token_css_var_name([category, ref.family, ref.level]))


def hex_to_token_var(hex_value: Any, index: TokenIndex) -> str | None:
    """Token var for a hex color present in the token set, else None."""
    ref = index.find_color_by_hex(hex_value)
    if ref is None:
        return None
    return color_token_var(ref, index.color_category(ref.family) or "color")
