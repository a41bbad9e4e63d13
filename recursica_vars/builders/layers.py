"""Layer variables: surface, border, padding, text and interactive colors.

Each layer (``layer-0`` .. ``layer-4`` and ``layer-alternative-<key>``)
expands into ``--recursica-brand-themes-<mode>-layer-layer-<id>-property-*``
variables. Surfaces that cannot be expressed as a variable are reported on
the ``missingLayerPaletteRefs`` event instead of failing the build.
"""

import re
from dataclasses import dataclass, field
from typing import Any

from ..config import DEFAULT_CONFIG, ResolverConfig
from ..css.events import MISSING_LAYER_PALETTE_REFS, EventBus
from ..css.surface import CssVarSurface
from ..css.token_refs import var_ref
from ..references import (
    core_var_name,
    palette_tone_target,
    palette_var_name,
    parse_reference,
    token_css_var_name,
    unwrap_value,
)
from ..resolver import ThemeAccessor, resolve_reference
from ..schema import ThemeView, as_theme_view, unwrap_node
from ..token_index import TokenIndex, to_number
from ..vars_logging import LogCategory, get_category_logger
from .values import (
    add_legacy_aliases,
    color_to_var,
    core_black_white,
    ensure_index,
    format_number,
    normalize_mode,
    opacity_var,
    to_px,
)

logger = get_category_logger(LogCategory.LAYERS)

SEMANTIC_TEXT_ROLES = ("alert", "warning", "success")

# (current name, legacy name, core interactive state var suffix)
INTERACTIVE_PROPERTIES = (
    ("tone", "background", "default-tone"),
    ("tone-hover", "background-hover", "hover-tone"),
    ("on-tone", "text", "default-on-tone"),
    ("on-tone-hover", "text-hover", "hover-on-tone"),
)

_SIZE_VAR = re.compile(
    r"^var\(\s*--(?:recursica-)?tokens-(sizes?)-([a-z0-9_-]+)\s*\)$", re.IGNORECASE
)


def layer_property_prefix(mode: str, layer_id: str) -> str:
    return f"--recursica-brand-themes-{mode}-layer-layer-{layer_id}-property-"


@dataclass
class _LayerContext:
    index: TokenIndex
    view: ThemeView
    mode: str
    accessor: ThemeAccessor
    palette_vars: dict[str, str]
    surface: CssVarSurface | None
    missing: list[str] = field(default_factory=list)


def _size_token_ref(raw: Any) -> str | None:
    """Token var for a size reference (``{tokens.size.md}`` or its var form)."""
    value = unwrap_value(raw)
    if not isinstance(value, str):
        return None
    text = value.strip()
    match = _SIZE_VAR.match(text)
    if match:
        category, name = match.groups()
        return var_ref(token_css_var_name([category.lower(), name]))
    descriptor = parse_reference(text)
    if (
        descriptor is not None
        and descriptor.is_token
        and len(descriptor.path) == 2
        and descriptor.path[0].lower() in ("size", "sizes")
    ):
        return var_ref(token_css_var_name([descriptor.path[0].lower(), descriptor.path[1]]))
    return None


def nearest_size_token(value: Any, index: TokenIndex) -> str | None:
    """Name of the size token closest to ``value`` by absolute distance."""
    number = to_number(value)
    if number is None:
        return None
    sizes = index.numeric_entries("size")
    best_key: str | None = None
    best_delta = float("inf")
    for key, size in sizes.items():
        delta = abs(size - number)
        if delta < best_delta:
            best_key, best_delta = key, delta
    if best_key is not None and best_delta > 0:
        logger.debug(
            f"No exact size token for {format_number(number)}, using {best_key} "
            f"({format_number(sizes[best_key])})"
        )
    return best_key


def _size_value(raw: Any, ctx: _LayerContext) -> str | None:
    token_ref = _size_token_ref(raw)
    if token_ref:
        return token_ref
    node = unwrap_value(raw)
    if isinstance(node, dict) and "unit" in node and "value" in node:
        return f"{node['value']}{node['unit']}"
    resolved = resolve_reference(raw, ctx.index, ctx.accessor).value_or(None)
    if resolved is None:
        return None
    nearest = nearest_size_token(resolved, ctx.index)
    if nearest:
        return var_ref(token_css_var_name([ctx.index.size_category(), nearest]))
    return to_px(resolved)


def _surface_vars(
    spec: dict[str, Any], layer_id: str, ctx: _LayerContext
) -> tuple[dict[str, str], tuple | None, bool]:
    """Surface variable plus the parsed palette target, if any.

    Returns:
        ``(vars, palette_target, has_surface)``.
    """
    base = layer_property_prefix(ctx.mode, layer_id)
    properties = unwrap_node(spec.get("properties")) or {}
    raw = properties.get("surface") if isinstance(properties, dict) else None
    if raw is None:
        return {}, None, False

    target = palette_tone_target(raw, ctx.mode)
    if target is not None:
        ref_mode, key, level, _ = target
        return {f"{base}surface": var_ref(palette_var_name(ref_mode, key, level, "tone"))}, target, True

    coerced = color_to_var(raw, ctx.index, ctx.mode, ctx.accessor)
    if coerced and coerced.startswith("var("):
        return {f"{base}surface": coerced}, None, True
    bw = core_black_white(coerced, ctx.mode)
    if bw:
        return {f"{base}surface": bw}, None, True

    resolved = resolve_reference(raw, ctx.index, ctx.accessor).value_or(None)
    if resolved is not None:
        ctx.missing.append(layer_id)
        logger.warning(f"Layer {layer_id} surface {resolved} has no palette variable")
    return {}, None, resolved is not None


def _property_vars(spec: dict[str, Any], layer_id: str, ctx: _LayerContext) -> dict[str, str]:
    base = layer_property_prefix(ctx.mode, layer_id)
    properties = unwrap_node(spec.get("properties"))
    if not isinstance(properties, dict):
        return {}
    vars: dict[str, str] = {}
    for name in ("padding", "border-thickness", "border-radius"):
        if name in properties:
            value = _size_value(properties[name], ctx)
            if value is not None:
                vars[f"{base}{name}"] = value
    if "border-color" in properties:
        color = color_to_var(properties["border-color"], ctx.index, ctx.mode, ctx.accessor)
        color = core_black_white(color, ctx.mode) or color
        if color and color.startswith("var("):
            vars[f"{base}border-color"] = color
    return vars


def _derived_text_color(target: tuple, ctx: _LayerContext) -> str:
    ref_mode, key, level, _ = target
    on_tone_name = palette_var_name(ref_mode, key, level, "on-tone")
    value = ctx.palette_vars.get(on_tone_name)
    if not value and ctx.surface is not None:
        value = ctx.surface.get(on_tone_name)
    if not value:
        return var_ref(on_tone_name)
    value = value.strip()
    if value.startswith("var("):
        return value
    return core_black_white(value, ctx.mode) or var_ref(on_tone_name)


def _text_vars(
    spec: dict[str, Any],
    layer_id: str,
    target: tuple | None,
    has_surface: bool,
    ctx: _LayerContext,
) -> dict[str, str]:
    base = f"{layer_property_prefix(ctx.mode, layer_id)}element-text-"
    elements = unwrap_node(spec.get("elements"))
    text = unwrap_node(elements.get("text")) if isinstance(elements, dict) else None
    text = text if isinstance(text, dict) else {}
    vars: dict[str, str] = {}

    raw_color = text.get("color")
    if raw_color is not None:
        explicit = palette_tone_target(raw_color, ctx.mode)
        if explicit is not None:
            ref_mode, key, level, kind = explicit
            vars[f"{base}color"] = var_ref(palette_var_name(ref_mode, key, level, kind))
        else:
            coerced = color_to_var(raw_color, ctx.index, ctx.mode, ctx.accessor)
            coerced = core_black_white(coerced, ctx.mode) or coerced
            if coerced and coerced.startswith("var("):
                vars[f"{base}color"] = coerced

    if f"{base}color" not in vars:
        if target is not None:
            vars[f"{base}color"] = _derived_text_color(target, ctx)
        elif has_surface:
            vars[f"{base}color"] = var_ref(core_var_name(ctx.mode, "black"))

    emphasis_prefix = f"--recursica-brand-themes-{ctx.mode}-text-emphasis"
    for level in ("high", "low"):
        explicit = text.get(f"{level}-emphasis")
        if explicit is not None:
            vars[f"{base}{level}-emphasis"] = opacity_var(explicit, ctx.index)
        else:
            vars[f"{base}{level}-emphasis"] = var_ref(f"{emphasis_prefix}-{level}")

    for role in SEMANTIC_TEXT_ROLES:
        vars[f"{base}{role}"] = var_ref(core_var_name(ctx.mode, role))
    return vars


def _interactive_vars(spec: dict[str, Any], layer_id: str, ctx: _LayerContext) -> dict[str, str]:
    base = f"{layer_property_prefix(ctx.mode, layer_id)}element-interactive-"
    text_base = f"{layer_property_prefix(ctx.mode, layer_id)}element-text-"
    elements = unwrap_node(spec.get("elements"))
    interactive = elements.get("interactive") if isinstance(elements, dict) else None
    interactive = unwrap_node(interactive)
    if not isinstance(interactive, dict):
        interactive = {"color": interactive} if interactive is not None else {}

    def coerce(raw: Any) -> str | None:
        if raw is None:
            return None
        value = color_to_var(raw, ctx.index, ctx.mode, ctx.accessor)
        value = core_black_white(value, ctx.mode) or value
        return value if value and value.startswith("var(") else None

    vars: dict[str, str] = {}
    explicit_tone = None
    for name, legacy, core_suffix in INTERACTIVE_PROPERTIES:
        value = coerce(interactive.get(name)) or coerce(interactive.get(legacy))
        if name == "tone":
            explicit_tone = value
        vars[f"{base}{name}"] = value or var_ref(
            core_var_name(ctx.mode, "interactive", core_suffix)
        )

    color = coerce(interactive.get("color"))
    if color:
        vars[f"{base}color"] = color
        if explicit_tone is None:
            vars[f"{base}tone"] = color
    else:
        vars[f"{base}color"] = vars[f"{base}tone"]

    if interactive.get("high-emphasis") is not None:
        vars[f"{base}high-emphasis"] = opacity_var(interactive["high-emphasis"], ctx.index)
    else:
        vars[f"{base}high-emphasis"] = var_ref(f"{text_base}high-emphasis")

    if interactive.get("hover-color") is not None:
        vars[f"{base}hover-color"] = coerce(interactive["hover-color"]) or var_ref(
            core_var_name(ctx.mode, "interactive", "hover-tone")
        )

    vars[f"{base}default-on-tone"] = var_ref(
        core_var_name(ctx.mode, "interactive", "default-on-tone")
    )
    vars[f"{base}hover-on-tone"] = var_ref(
        core_var_name(ctx.mode, "interactive", "hover-on-tone")
    )
    return vars


def build_single_layer_vars(
    spec: dict[str, Any], layer_id: str, ctx: _LayerContext
) -> dict[str, str]:
    surface_vars, target, has_surface = _surface_vars(spec, layer_id, ctx)
    vars = dict(surface_vars)
    vars.update(_property_vars(spec, layer_id, ctx))
    vars.update(_text_vars(spec, layer_id, target, has_surface, ctx))
    vars.update(_interactive_vars(spec, layer_id, ctx))
    return vars


def build_layer_vars(
    tokens: Any,
    theme: Any,
    mode: str = "light",
    overrides: dict[str, Any] | None = None,
    palette_vars: dict[str, str] | None = None,
    *,
    surface: CssVarSurface | None = None,
    events: EventBus | None = None,
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Build the variables of every layer present in ``mode``.

    Args:
        tokens: Token source or a prebuilt ``TokenIndex``.
        theme: Theme source or a ``ThemeView``.
        mode: ``light`` or ``dark``.
        overrides: Token path to value overrides applied during resolution.
        palette_vars: Palette variables from the same build, consulted before
            the live surface when deriving text colors.
        surface: Live CSS surface used as the secondary on-tone source.
        events: Bus receiving ``missingLayerPaletteRefs``.
        config: Resolver configuration; defaults apply when omitted.

    Returns:
        CSS variable name to value.
    """
    config = config or DEFAULT_CONFIG
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    ctx = _LayerContext(
        index=ensure_index(tokens, overrides),
        view=view,
        mode=mode,
        accessor=view.accessor(mode),
        palette_vars=palette_vars or {},
        surface=surface,
    )

    vars: dict[str, str] = {}
    for layer_id, spec in view.layers(mode).items():
        vars.update(build_single_layer_vars(spec, layer_id, ctx))

    if config.emit_legacy_aliases:
        add_legacy_aliases(vars, prefix=f"--recursica-brand-themes-{mode}-layer-layer-")

    if ctx.missing:
        bus = events if events is not None else (surface.events if surface else None)
        if bus is not None:
            bus.emit(MISSING_LAYER_PALETTE_REFS, {"layers": list(ctx.missing)})

    logger.debug(
        f"Built {len(vars)} layer variables for {mode}",
        extra={"var_count": len(vars), "operation": "layers"},
    )
    return vars
