"""Dimension variables from the theme's ``dimensions`` tree."""

import re
from typing import Any

from ..config import DEFAULT_CONFIG, ResolverConfig
from ..css.token_refs import var_ref
from ..references import extract_brace_content, token_css_var_name
from ..schema import as_theme_view
from ..vars_logging import LogCategory, get_category_logger
from .values import ensure_index, format_number, normalize_mode

logger = get_category_logger(LogCategory.DIMENSIONS)

DIMENSION_PREFIX = "--recursica-brand-dimensions-"

# new group name -> legacy group name ("" means top level)
LEGACY_GROUPS = {
    "spacers": "spacer",
    "icons": "icon",
    "general": "",
}

_NUMERIC = re.compile(r"^-?\d+(\.\d+)?$")
_TOKEN_REF = re.compile(r"^tokens?\.", re.IGNORECASE)
_BRAND_DIMENSION_REF = re.compile(r"^(?:brand|theme)\.dimensions?\.(.+)$", re.IGNORECASE)
_THEME_MODE_DIMENSION_REF = re.compile(
    r"^(?:brand|theme)\.(?:themes\.)?(?:light|dark)\.dimensions?\.(.+)$", re.IGNORECASE
)


def dimension_value(node: dict[str, Any]) -> str | None:
    """CSS value for one dimension leaf (``{"$type": ..., "$value": ...}``)."""
    value = node.get("$value")
    inner = extract_brace_content(value) if isinstance(value, str) else None
    if inner:
        if _TOKEN_REF.match(inner):
            return var_ref(token_css_var_name(inner.split(".")[1:]))
        match = _THEME_MODE_DIMENSION_REF.match(inner) or _BRAND_DIMENSION_REF.match(inner)
        if match:
            return var_ref(DIMENSION_PREFIX + match.group(1).replace(".", "-"))
        logger.debug(f"Unrecognized dimension reference {value}")
        return None

    if isinstance(value, dict) and "value" in value:
        return f"{value['value']}{value.get('unit', '')}"
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return f"{format_number(value)}px"
    text = str(value).strip()
    if _NUMERIC.match(text):
        return f"{text}px"
    return text or None


def _walk(node: Any, path: list[str], vars: dict[str, str]) -> None:
    if not isinstance(node, dict):
        return
    for key, child in node.items():
        if key.startswith("$"):
            continue
        current = path + [key]
        if isinstance(child, dict) and "$value" in child:
            value = dimension_value(child)
            if value is not None:
                vars[DIMENSION_PREFIX + "-".join(current)] = value
        else:
            _walk(child, current, vars)


def add_dimension_aliases(vars: dict[str, str]) -> dict[str, str]:
    """Emit legacy group names for produced variables whose old slot is empty."""
    for name in list(vars):
        rest = name[len(DIMENSION_PREFIX):]
        group, _, tail = rest.partition("-")
        if group not in LEGACY_GROUPS or not tail:
            continue
        legacy_group = LEGACY_GROUPS[group]
        legacy = f"{DIMENSION_PREFIX}{legacy_group}-{tail}" if legacy_group else DIMENSION_PREFIX + tail
        if legacy not in vars:
            vars[legacy] = var_ref(name)
    return vars


def build_dimension_vars(
    tokens: Any,
    theme: Any,
    mode: str = "light",
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Flatten the theme's dimensions into ``--recursica-brand-dimensions-*``.

    Token references become token vars and are not checked against the token
    set; a reference to a missing token is logged at debug level.
    """
    config = config or DEFAULT_CONFIG
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)

    vars: dict[str, str] = {}
    _walk(view.dimensions(), [], vars)

    for name, value in vars.items():
        if value.startswith("var(--recursica-tokens-"):
            path = value[len("var(--recursica-tokens-"):-1]
            category, _, key = path.partition("-")
            if index.get(f"{category}/{key}") is None:
                logger.debug(f"{name} references missing token {path}")

    if config.emit_legacy_aliases:
        add_dimension_aliases(vars)
    logger.debug(
        f"Built {len(vars)} dimension variables for {mode}",
        extra={"var_count": len(vars), "operation": "dimensions"},
    )
    return vars
