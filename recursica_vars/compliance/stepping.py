"""AA contrast stepping over a color scale.

Given a surface color and a starting scale position, walk toward lighter
levels and then darker ones until a level reads at WCAG AA over the surface.
When no scale level works, fall back to core white or black.
"""

import re
from typing import Any

from ..builders.values import ensure_index, normalize_mode
from ..color import BLACK, WHITE, blend_hex_over, contrast_ratio, normalize_hex
from ..config import DEFAULT_CONFIG, ResolverConfig
from ..css.surface import CssVarSurface
from ..css.token_refs import color_token_var, extract_var_fallback, extract_var_name, var_ref
from ..models import ColorTokenRef, ReferenceKind
from ..references import core_var_name, parse_reference, unwrap_value
from ..schema import as_theme_view, unwrap_node
from ..token_index import COLOR_LEVELS, TokenIndex, to_number
from ..vars_logging import LogCategory, get_category_logger

logger = get_category_logger(LogCategory.COMPLIANCE)

_TOKEN_COLOR_NAME = re.compile(r"^--recursica-tokens-colors?-([a-z0-9-]+)-(\d{3,4})$", re.IGNORECASE)
_TOKEN_OPACITY_NAME = re.compile(r"^--recursica-tokens-(?:opacity|opacities)-([a-z0-9-]+)$", re.IGNORECASE)


def scale_level(level: str) -> str:
    """``000`` has no scale entry of its own; it reads as ``050``."""
    return "050" if level == "000" else level


def resolve_css_var_to_hex(
    value: Any,
    surface: CssVarSurface | None,
    index: TokenIndex,
    depth: int = 0,
    max_depth: int = DEFAULT_CONFIG.color_depth_limit,
) -> str | None:
    """Follow ``var()`` chains through the surface and token set to a hex color.

    Returns:
        A normalized hex string, or None when the chain ends elsewhere or is
        deeper than ``max_depth``.
    """
    if depth > max_depth or not isinstance(value, str):
        return None
    hex_value = normalize_hex(value)
    if hex_value is not None:
        return hex_value

    name = extract_var_name(value)
    if name is None:
        return None
    if surface is not None:
        current = surface.get(name)
        if current is not None:
            return resolve_css_var_to_hex(current, surface, index, depth + 1, max_depth)

    match = _TOKEN_COLOR_NAME.match(name)
    if match:
        family, level = match.groups()
        found = index.color_hex(family, level) or index.color_hex(family, scale_level(level))
        if found:
            return found

    fallback = extract_var_fallback(value)
    if fallback is not None:
        return resolve_css_var_to_hex(fallback, surface, index, depth + 1, max_depth)
    return None


def find_color_family_and_level(
    value: Any, index: TokenIndex, surface: CssVarSurface | None = None
) -> ColorTokenRef | None:
    """Scale position of a token color var or a hex present in the token set."""
    name = extract_var_name(value)
    if name is not None:
        match = _TOKEN_COLOR_NAME.match(name)
        if match and index.color_hex(*match.groups()) is not None:
            return ColorTokenRef(family=match.group(1), level=match.group(2))
    hex_value = resolve_css_var_to_hex(value, surface, index)
    if hex_value is None:
        return None
    return index.find_color_by_hex(hex_value)


def resolve_opacity(value: Any, index: TokenIndex, surface: CssVarSurface | None = None) -> float:
    """Opacity in 0..1 from a number, percentage or opacity var; 1.0 if unknown."""
    number = to_number(value)
    if number is None and isinstance(value, str):
        name = extract_var_name(value)
        if name is not None:
            match = _TOKEN_OPACITY_NAME.match(name)
            if match:
                number = to_number(index.get(f"opacity/{match.group(1)}"))
            if number is None and surface is not None and surface.get(name) is not None:
                return resolve_opacity(surface.get(name), index, None)
            if number is None:
                number = to_number(extract_var_fallback(value))
    if number is None:
        return 1.0
    number = number if number <= 1 else number / 100
    return max(0.0, min(1.0, number))


def core_color_token(
    name: str, theme: Any, tokens: Any, mode: str = "light"
) -> ColorTokenRef | None:
    """Scale position of a core color's tone, from its reference or its hex."""
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    node = unwrap_node(view.core_colors(normalize_mode(mode)).get(name))
    if isinstance(node, dict) and isinstance(unwrap_node(node.get("default")), dict):
        node = unwrap_node(node["default"])
    if isinstance(node, dict) and "$value" not in node and "value" not in node:
        node = node.get("tone", node.get("color"))
    raw = unwrap_value(node)

    descriptor = parse_reference(raw)
    if descriptor is not None and descriptor.kind == ReferenceKind.TOKEN:
        path = descriptor.path
        if len(path) == 3 and path[0] in ("color", "colors"):
            return ColorTokenRef(family=path[1], level=path[2])
    return index.find_color_by_hex(raw)


def _core_fallback(
    surface_hex: str,
    opacity: float,
    index: TokenIndex,
    mode: str,
    surface: CssVarSurface | None,
    threshold: float,
) -> str:
    white_var = var_ref(core_var_name(mode, "white"))
    black_var = var_ref(core_var_name(mode, "black"))
    white_hex = resolve_css_var_to_hex(white_var, surface, index) or WHITE
    black_hex = resolve_css_var_to_hex(black_var, surface, index) or BLACK

    white_contrast = contrast_ratio(surface_hex, blend_hex_over(white_hex, surface_hex, opacity))
    black_contrast = contrast_ratio(surface_hex, blend_hex_over(black_hex, surface_hex, opacity))
    if white_contrast >= threshold:
        return white_var
    if black_contrast >= threshold:
        return black_var
    logger.debug(
        f"Neither core white ({white_contrast:.2f}) nor black ({black_contrast:.2f}) "
        f"reaches {threshold} on {surface_hex}"
    )
    return white_var if white_contrast >= black_contrast else black_var


def stepping_order(level: str) -> list[str] | None:
    """Levels to try from ``level``: lighter ones nearest first, then darker ones."""
    start = scale_level(level)
    if start not in COLOR_LEVELS:
        return None
    position = COLOR_LEVELS.index(start)
    order: list[str] = []
    for candidate in reversed(COLOR_LEVELS[:position]):
        candidate = scale_level(candidate)
        if candidate not in order and candidate != start:
            order.append(candidate)
    order.extend(COLOR_LEVELS[position + 1:])
    return order


def find_aa_compliant_color(
    surface_hex: Any,
    start_token: Any,
    opacity: float,
    tokens: Any,
    *,
    mode: str = "light",
    surface: CssVarSurface | None = None,
    config: ResolverConfig | None = None,
) -> str | None:
    """Find a color reading at AA over ``surface_hex``.

    Args:
        surface_hex: Background color.
        start_token: ``ColorTokenRef`` (or ``{"family", "level"}``) to step
            from, or None to go straight to core white/black.
        opacity: Opacity the foreground is drawn at.
        tokens: Token source or index.
        mode: Mode used in the core white/black variable names.
        surface: Live surface consulted for the core white/black colors.
        config: Supplies the AA threshold.

    Returns:
        A ``var()`` reference, or None when ``start_token`` was given but its
        level is not on the scale.
    """
    config = config or DEFAULT_CONFIG
    threshold = config.aa_threshold
    index = ensure_index(tokens)
    mode = normalize_mode(mode)
    background = normalize_hex(surface_hex)
    if background is None:
        logger.debug(f"Cannot step against non-hex surface {surface_hex!r}")
        return None

    if start_token is None:
        return _core_fallback(background, opacity, index, mode, surface, threshold)

    start = ColorTokenRef.from_any(start_token)
    order = stepping_order(start.level) if start is not None else None
    if start is None or order is None:
        logger.debug(f"Unrecognized starting token {start_token!r}")
        return None

    category = index.color_category(start.family) or "color"
    for level in order:
        hex_value = index.color_hex(start.family, level)
        if hex_value is None:
            continue
        blended = blend_hex_over(hex_value, background, opacity) or hex_value
        if contrast_ratio(background, blended) >= threshold:
            return color_token_var(ColorTokenRef(start.family, level), category)

    logger.debug(f"No level of {start.family} reaches {threshold} on {background}")
    return _core_fallback(background, opacity, index, mode, surface, threshold)
