"""Keep layer text and interactive colors readable on their surfaces.

Runs after the built variables were applied: reads each layer's surface from
the live CSS surface, re-picks the element colors that fail AA and writes the
replacements back.
"""

from typing import Any

from ..builders.layers import SEMANTIC_TEXT_ROLES, layer_property_prefix
from ..builders.values import ensure_index, normalize_mode
from ..color import blend_hex_over, contrast_ratio
from ..config import DEFAULT_CONFIG, ResolverConfig
from ..css.surface import CssVarSurface
from ..css.token_refs import var_ref
from ..references import core_var_name
from ..schema import as_theme_view
from ..vars_logging import LogCategory, get_category_logger
from .stepping import (
    core_color_token,
    find_aa_compliant_color,
    resolve_css_var_to_hex,
    resolve_opacity,
)

logger = get_category_logger(LogCategory.COMPLIANCE)


def update_layer_aa_compliance(
    layer: str | int,
    tokens: Any,
    theme: Any,
    surface: CssVarSurface,
    mode: str = "light",
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Re-pick the element colors of one layer against its current surface.

    Args:
        layer: Layer id, e.g. ``1`` or ``"alternative-alert"``.
        tokens: Token source or index.
        theme: Theme source or view, for the core color references.
        surface: Live CSS surface read from and written to.
        mode: ``light`` or ``dark``.
        config: Supplies the AA threshold.

    Returns:
        The variables written.
    """
    config = config or DEFAULT_CONFIG
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    base = layer_property_prefix(mode, str(layer))

    surface_value = surface.get(f"{base}surface")
    if surface_value is None:
        return {}
    surface_hex = resolve_css_var_to_hex(surface_value, surface, index)
    if surface_hex is None:
        logger.debug(f"Layer {layer} surface {surface_value} does not resolve to a color")
        return {}

    text_opacity = resolve_opacity(surface.get(f"{base}element-text-high-emphasis"), index, surface)
    interactive_opacity = resolve_opacity(
        surface.get(f"{base}element-interactive-high-emphasis"), index, surface
    )

    def step(start: Any, opacity: float) -> str | None:
        return find_aa_compliant_color(
            surface_hex, start, opacity, index, mode=mode, surface=surface, config=config
        )

    planned: dict[str, str | None] = {
        f"{base}element-text-color": step(None, text_opacity),
    }

    interactive_var = var_ref(core_var_name(mode, "interactive"))
    interactive_hex = resolve_css_var_to_hex(interactive_var, surface, index)
    if interactive_hex is not None:
        blended = blend_hex_over(interactive_hex, surface_hex, interactive_opacity)
        if contrast_ratio(surface_hex, blended) >= config.aa_threshold:
            planned[f"{base}element-interactive-color"] = interactive_var
    if f"{base}element-interactive-color" not in planned:
        planned[f"{base}element-interactive-color"] = step(
            core_color_token("interactive", view, index, mode), interactive_opacity
        )

    for role in SEMANTIC_TEXT_ROLES:
        planned[f"{base}element-text-{role}"] = step(
            core_color_token(role, view, index, mode), text_opacity
        )

    written: dict[str, str] = {}
    for name, value in planned.items():
        if value and surface.set(name, value):
            written[name] = value
    logger.debug(
        f"Layer {layer} compliance wrote {len(written)} variables",
        extra={"var_count": len(written), "operation": "layer-compliance"},
    )
    return written


def update_alternative_layer_aa_compliance(
    alternative_key: str,
    tokens: Any,
    theme: Any,
    surface: CssVarSurface,
    mode: str = "light",
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Same as ``update_layer_aa_compliance`` for ``layer-alternative-<key>``."""
    return update_layer_aa_compliance(
        f"alternative-{alternative_key}", tokens, theme, surface, mode, config
    )


def update_all_layers_aa_compliance(
    tokens: Any,
    theme: Any,
    surface: CssVarSurface,
    mode: str = "light",
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Run the layer pass for every numbered and alternative layer in ``mode``."""
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    written: dict[str, str] = {}
    for layer_id in view.layers(mode):
        if layer_id.startswith("alternative-"):
            written.update(
                update_alternative_layer_aa_compliance(
                    layer_id[len("alternative-"):], index, view, surface, mode, config
                )
            )
        else:
            written.update(update_layer_aa_compliance(layer_id, index, view, surface, mode, config))
    return written
