"""On-tone selection for the core colors.

Each core color's on-tone is searched on the black tone scale first, then the
white one, trying the starting level and then alternating outward
(``500, 600, 400, 700, 300, ...``). The theme JSON can be patched to match,
in which case the CSS writes only happen once the patch succeeded.
"""

import copy
from typing import Any

from ..builders.values import ensure_index, normalize_mode
from ..color import blend_hex_over, contrast_ratio
from ..config import DEFAULT_CONFIG, ResolverConfig
from ..css.surface import CssVarSurface
from ..css.token_refs import color_token_var, extract_var_name, var_ref
from ..models import ColorTokenRef
from ..references import core_var_name
from ..schema import CORE_COLOR_NAMES, as_theme_view, unwrap_node
from ..token_index import COLOR_LEVELS, TokenIndex
from ..vars_logging import LogCategory, get_category_logger
from .stepping import core_color_token, resolve_css_var_to_hex, resolve_opacity, scale_level

logger = get_category_logger(LogCategory.COMPLIANCE)


def alternating_levels(level: str) -> list[str]:
    """``500`` -> ``500, 600, 400, 700, 300, ...`` over the whole scale."""
    start = scale_level(level)
    if start not in COLOR_LEVELS:
        return []
    position = COLOR_LEVELS.index(start)
    order = [start]
    for offset in range(1, len(COLOR_LEVELS)):
        for candidate in (position + offset, position - offset):
            if 0 <= candidate < len(COLOR_LEVELS):
                level_name = scale_level(COLOR_LEVELS[candidate])
                if level_name not in order:
                    order.append(level_name)
    return order


def find_on_tone_alternating(
    tone_hex: str,
    start: ColorTokenRef,
    opacity: float,
    index: TokenIndex,
    threshold: float,
) -> str | None:
    """First level of ``start``'s family, in alternating order, readable on ``tone_hex``."""
    category = index.color_category(start.family) or "color"
    for level in alternating_levels(start.level):
        hex_value = index.color_hex(start.family, level)
        if hex_value is None:
            continue
        blended = blend_hex_over(hex_value, tone_hex, opacity) or hex_value
        if contrast_ratio(tone_hex, blended) >= threshold:
            return color_token_var(ColorTokenRef(start.family, level), category)
    return None


def _tone_suffix(name: str) -> tuple[str, str]:
    if name == "interactive":
        return "default-tone", "default-on-tone"
    return "tone", "on-tone"


def plan_core_color_on_tones(
    tokens: Any,
    theme: Any,
    surface: CssVarSurface,
    mode: str = "light",
    *,
    force: bool = False,
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Work out the core on-tone variables that need replacing, without writing.

    On-tones that already pass are left alone unless ``force`` is set. When no
    level of either tone scale passes, the higher-contrast of core white and
    black is used.
    """
    config = config or DEFAULT_CONFIG
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    threshold = config.aa_threshold

    opacity = resolve_opacity(
        surface.get(f"--recursica-brand-themes-{mode}-text-emphasis-high"), index, surface
    )
    scales = [
        ref
        for ref in (
            core_color_token("black", view, index, mode),
            core_color_token("white", view, index, mode),
        )
        if ref is not None
    ]
    white_var = var_ref(core_var_name(mode, "white"))
    black_var = var_ref(core_var_name(mode, "black"))

    planned: dict[str, str] = {}
    for name in CORE_COLOR_NAMES:
        tone_suffix, on_tone_suffix = _tone_suffix(name)
        tone_value = surface.get(core_var_name(mode, name, tone_suffix))
        tone_hex = resolve_css_var_to_hex(tone_value, surface, index)
        if tone_hex is None:
            continue

        on_tone_name = core_var_name(mode, name, on_tone_suffix)
        current_hex = resolve_css_var_to_hex(surface.get(on_tone_name), surface, index)
        if not force and current_hex is not None:
            blended = blend_hex_over(current_hex, tone_hex, opacity)
            if contrast_ratio(tone_hex, blended) >= threshold:
                continue

        chosen = None
        for scale in scales:
            chosen = find_on_tone_alternating(tone_hex, scale, opacity, index, threshold)
            if chosen:
                break
        if chosen is None:
            white_hex = resolve_css_var_to_hex(white_var, surface, index) or "#ffffff"
            black_hex = resolve_css_var_to_hex(black_var, surface, index) or "#000000"
            chosen = (
                white_var
                if contrast_ratio(tone_hex, white_hex) >= contrast_ratio(tone_hex, black_hex)
                else black_var
            )
        planned[on_tone_name] = chosen
        if name == "interactive":
            planned[core_var_name(mode, name, "on-tone")] = chosen
    return planned


def update_core_color_on_tones(
    tokens: Any,
    theme: Any,
    surface: CssVarSurface,
    mode: str = "light",
    *,
    force: bool = False,
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Write readable on-tones for the core colors to the surface.

    Returns:
        The variables written.
    """
    planned = plan_core_color_on_tones(tokens, theme, surface, mode, force=force, config=config)
    written = {name: value for name, value in planned.items() if surface.set(name, value)}
    if written:
        logger.info(f"Updated {len(written)} core on-tone variables for {normalize_mode(mode)}")
    return written


def on_tone_reference(value: str, mode: str) -> str | None:
    """Theme JSON reference for a planned on-tone ``var()``."""
    name = extract_var_name(value)
    if name is None:
        return None
    for color in ("white", "black"):
        if name == core_var_name(mode, color):
            return f"{{brand.themes.{mode}.palettes.core-colors.{color}.tone}}"
    for prefix in ("--recursica-tokens-colors-", "--recursica-tokens-color-"):
        if name.startswith(prefix):
            family, _, level = name[len(prefix):].rpartition("-")
            category = prefix[len("--recursica-tokens-"):-1]
            return f"{{tokens.{category}.{family}.{level}}}"
    return None


def _set_on_tone(node: Any, reference: str) -> Any:
    """Write ``reference`` as the on-tone of a core color entry; returns the entry."""
    node = unwrap_node(node)
    if not isinstance(node, dict):
        return {"tone": node, "on-tone": reference}
    if isinstance(unwrap_node(node.get("default")), dict):
        _set_on_tone(unwrap_node(node["default"]), reference)
        return node
    existing = node.get("on-tone")
    if isinstance(existing, dict) and "$value" in existing:
        existing["$value"] = reference
    else:
        node["on-tone"] = reference
    return node


def patch_core_color_on_tones(
    theme: Any,
    tokens: Any,
    surface: CssVarSurface,
    mode: str = "light",
    *,
    force: bool = False,
    config: ResolverConfig | None = None,
) -> dict[str, Any] | None:
    """Return a copy of ``theme`` with core on-tones rewritten for AA.

    The surface is only written after the whole copy was patched, so a failure
    leaves both the theme and the surface untouched.

    Returns:
        The patched theme, or None when patching failed.
    """
    mode = normalize_mode(mode)
    planned = plan_core_color_on_tones(tokens, theme, surface, mode, force=force, config=config)
    patched = copy.deepcopy(theme)
    try:
        core = as_theme_view(patched).core_colors(mode)
        for name in CORE_COLOR_NAMES:
            value = planned.get(core_var_name(mode, name, _tone_suffix(name)[1]))
            if value is None or name not in core:
                continue
            reference = on_tone_reference(value, mode)
            if reference is None:
                raise ValueError(f"no theme reference for {value}")
            updated = _set_on_tone(core[name], reference)
            if not isinstance(unwrap_node(core[name]), dict):
                core[name] = updated
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Abandoned core on-tone patch for {mode}: {e}", exc_info=True)
        return None

    for name, value in planned.items():
        surface.set(name, value)
    return patched
