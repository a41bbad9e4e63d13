"""Token variables (``--recursica-tokens-*``) that the brand variables point at."""

from typing import Any

from ..css.token_refs import var_ref
from ..references import token_css_var_name
from ..token_index import CATEGORY_ALIASES, TokenIndex
from ..vars_logging import get_logger
from .values import ensure_index, format_number

logger = get_logger()

# Font kinds as they appear in emitted variable names
FONT_VAR_KINDS = {
    "family": "family",
    "families": "family",
    "typeface": "typefaces",
    "typefaces": "typefaces",
    "size": "sizes",
    "sizes": "sizes",
    "weight": "weights",
    "weights": "weights",
    "letter-spacing": "letter-spacings",
    "letter-spacings": "letter-spacings",
    "line-height": "line-heights",
    "line-heights": "line-heights",
    "style": "styles",
    "styles": "styles",
    "case": "cases",
    "cases": "cases",
    "decoration": "decorations",
    "decorations": "decorations",
}

FAMILY_KINDS = ("family", "families", "typeface", "typefaces")


def font_var_name(kind: str, short: str) -> str:
    return f"--recursica-tokens-font-{FONT_VAR_KINDS.get(kind, kind)}-{short}"


def format_font_family(value: Any) -> str | None:
    """Quote the primary family of a stack when it contains spaces."""
    if isinstance(value, list):
        value = value[0] if value and isinstance(value[0], str) else None
    if not isinstance(value, str) or not value.strip():
        return None
    head, _, fallback = value.strip().partition(",")
    head = head.strip().strip("\"'")
    if " " in head:
        head = f'"{head}"'
    return f"{head}, {fallback.strip()}" if fallback.strip() else head


def _with_unit(value: Any, unit: str | None) -> str | None:
    if isinstance(value, dict) and "value" in value:
        inner = value["value"]
        suffix = value.get("unit") or ""
        if isinstance(inner, (int, float)) and not isinstance(inner, bool):
            return f"{format_number(inner)}{suffix or unit or ''}"
        return f"{inner}{suffix}"
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return f"{format_number(value)}{unit or ''}"
    text = str(value).strip()
    return text or None


def token_value(path: tuple[str, ...], value: Any) -> str | None:
    """CSS value for a token leaf at ``path``."""
    category = path[0] if path else ""
    if category in ("opacity", "opacities"):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            number = value if value <= 1 else value / 100
            return format_number(max(0.0, min(1.0, number)))
        return _with_unit(value, None)
    if category in ("size", "sizes"):
        return _with_unit(value, "px")
    if category == "font" and len(path) >= 2:
        kind = path[1]
        if kind in FAMILY_KINDS:
            return format_font_family(value)
        if kind in ("size", "sizes"):
            return _with_unit(value, "px")
        if kind in ("letter-spacing", "letter-spacings"):
            return _with_unit(value, "em")
        return _with_unit(value, None)
    return _with_unit(value, None)


def build_token_vars(
    tokens: Any, overrides: dict[str, Any] | None = None
) -> dict[str, str]:
    """Emit every token leaf as a CSS variable, applying path overrides.

    Singular/plural category spellings and ``scale-NN`` family aliases get
    extra names so that references written either way resolve.
    """
    index: TokenIndex = ensure_index(tokens, overrides)
    vars: dict[str, str] = {}

    for path, raw in index.leaves():
        override = index.overrides.get("/".join(path))
        value = token_value(path, override if override is not None else raw)
        if value is None:
            continue
        vars[token_css_var_name(path)] = value

    for name, value in list(vars.items()):
        for alias in _aliases_for(name, index):
            vars.setdefault(alias, var_ref(name))

    logger.debug(
        f"Built {len(vars)} token variables",
        extra={"var_count": len(vars), "operation": "tokens"},
    )
    return vars


def _aliases_for(name: str, index: TokenIndex) -> list[str]:
    rest = name[len("--recursica-tokens-"):]
    category, _, tail = rest.partition("-")
    aliases: list[str] = []

    if category == "font":
        kind = next(
            (k for k in sorted(FONT_VAR_KINDS, key=len, reverse=True) if tail.startswith(f"{k}-")),
            None,
        )
        if kind:
            canonical = FONT_VAR_KINDS[kind]
            if canonical != kind:
                aliases.append(f"--recursica-tokens-font-{canonical}-{tail[len(kind) + 1:]}")
        return aliases

    if category in CATEGORY_ALIASES:
        for other in CATEGORY_ALIASES[category][1:]:
            aliases.append(f"--recursica-tokens-{other}-{tail}")

    if category in ("color", "colors"):
        family, _, level = tail.rpartition("-")
        alias = index.family_alias(family) if family else None
        if alias:
            aliases.append(f"--recursica-tokens-color-{alias}-{level}")
            aliases.append(f"--recursica-tokens-colors-{alias}-{level}")
    return aliases
