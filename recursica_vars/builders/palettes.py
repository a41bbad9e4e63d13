"""Palette variables: tone/on-tone per level, primary alias, core colors.

Emits, per mode:

- ``--recursica-brand-themes-<mode>-palettes-<key>-<level>-tone|on-tone``
- ``--recursica-brand-themes-<mode>-palettes-<key>-primary-tone|on-tone``
- ``--recursica-brand-themes-<mode>-palettes-core-<color>[-tone|-on-tone]``
- ``--recursica-brand-themes-<mode>-text-emphasis-high|low``
- ``--recursica-brand-themes-<mode>-state-disabled|hover|overlay-opacity|overlay-color``

plus the ``--recursica-brand-<mode>-...`` names of the previous generation.
"""

from typing import Any

from ..color import normalize_hex, pick_aa_on_tone
from ..config import DEFAULT_CONFIG, ResolverConfig
from ..css.token_refs import var_ref
from ..models import ReferenceKind
from ..references import (
    core_var_name,
    palette_var_name,
    parse_reference,
    token_css_var_name,
    unwrap_value,
)
from ..resolver import ThemeAccessor, resolve_reference
from ..schema import CORE_COLOR_NAMES, as_theme_view, unwrap_node
from ..storage import KeyValueStore, read_primary_level
from ..token_index import TokenIndex
from ..vars_logging import LogCategory, get_category_logger
from .values import (
    add_legacy_aliases,
    color_to_var,
    core_black_white,
    ensure_index,
    normalize_mode,
    opacity_var,
)

logger = get_category_logger(LogCategory.PALETTES)

PALETTE_LEVELS = [
    "000",
    "050",
    "100",
    "200",
    "300",
    "400",
    "500",
    "600",
    "700",
    "800",
    "900",
    "1000",
]


def _level_colors(entry: Any) -> tuple[Any, Any]:
    """Raw ``(tone, on_tone)`` of a palette level entry, either may be None."""
    entry = unwrap_node(entry)
    if not isinstance(entry, dict):
        return None, None
    color = unwrap_node(entry.get("color"))
    holder = color if isinstance(color, dict) else entry
    tone = holder.get("tone")
    on_tone = holder.get("on-tone", entry.get("on-tone"))
    return tone, on_tone


def _token_color_var(path: tuple[str, ...], index: TokenIndex) -> str:
    category, family, level = path[0].lower(), path[1], path[2]
    if level == "000" and index.get(f"{category}/{family}/000") is None:
        level = "050"
    return var_ref(token_css_var_name([category, family, level]))


def tone_to_var(
    raw: Any, index: TokenIndex, mode: str, accessor: ThemeAccessor | None = None
) -> str | None:
    """CSS value for a palette tone source, or None when there is none."""
    value = unwrap_value(raw)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    descriptor = parse_reference(value)
    if (
        descriptor is not None
        and descriptor.kind == ReferenceKind.TOKEN
        and len(descriptor.path) == 3
        and descriptor.path[0].lower() in ("color", "colors")
    ):
        return _token_color_var(descriptor.path, index)
    return color_to_var(value, index, mode, accessor)


def on_tone_to_var(
    raw: Any, index: TokenIndex, mode: str, accessor: ThemeAccessor | None = None
) -> str:
    """CSS value for a level's on-tone.

    Black/white literals and core black/white references map to the core
    variables, other references to their own variable, and a missing
    on-tone defaults to core black.
    """
    value = unwrap_value(raw)
    if isinstance(value, str) and value.strip():
        core = core_black_white(value, mode)
        if core:
            return core
        descriptor = parse_reference(value)
        if descriptor is not None and descriptor.kind == ReferenceKind.BRAND:
            last = descriptor.path[-1].lower()
            if last in ("black", "white") and descriptor.path[0].lower() in (
                "palettes",
                "palette",
            ):
                return var_ref(core_var_name(descriptor.mode or mode, last))
        mapped = color_to_var(value, index, mode, accessor)
        if mapped:
            core = core_black_white(
                resolve_reference(value, index, accessor).value_or(None), mode
            )
            return core or mapped
    return var_ref(core_var_name(mode, "black"))


def _declared_default(
    palette: dict[str, Any], key: str, max_depth: int
) -> tuple[str | None, Any]:
    """Follow a ``default`` entry to the level it names.

    Returns:
        ``(level, None)`` when ``default`` points at a level of the same
        palette, ``(None, entry)`` when it carries its own colors, and
        ``(None, None)`` when there is no usable default.
    """
    entry = palette.get("default")
    for _ in range(max_depth):
        if entry is None:
            return None, None
        raw = unwrap_value(entry)
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            raw = str(int(raw)).zfill(3)
        if isinstance(raw, str):
            level = _level_from_ref(raw, key)
            if level is None:
                return None, None
            if level == "default":
                entry = palette.get("default")
                continue
            return level, None
        tone, _ = _level_colors(entry)
        if tone is None:
            return None, None
        target = _level_from_ref(unwrap_value(tone), key)
        if target and target != "default":
            return target, None
        if target == "default":
            entry = palette.get("default")
            continue
        return None, entry
    logger.debug(f"Palette {key} default chain exceeded {max_depth} hops")
    return None, None


def _level_from_ref(text: str, key: str) -> str | None:
    text = text.strip()
    if text in PALETTE_LEVELS:
        return text
    descriptor = parse_reference(text)
    if descriptor is None or descriptor.kind != ReferenceKind.BRAND:
        return None
    parts = [p.lower() for p in descriptor.path]
    if len(parts) >= 3 and parts[0] in ("palettes", "palette") and parts[1] == key.lower():
        level = parts[2]
        if level in PALETTE_LEVELS or level in ("default", "primary"):
            return "default" if level == "primary" else level
    return None


def _palette_level_vars(
    key: str,
    palette: dict[str, Any],
    index: TokenIndex,
    mode: str,
    accessor: ThemeAccessor,
) -> tuple[dict[str, str], list[str]]:
    vars: dict[str, str] = {}
    toned: list[str] = []
    for level in PALETTE_LEVELS:
        if level not in palette:
            continue
        tone_raw, on_tone_raw = _level_colors(palette[level])
        tone = tone_to_var(tone_raw, index, mode, accessor)
        if tone is not None:
            vars[palette_var_name(mode, key, level, "tone")] = tone
            toned.append(level)
        vars[palette_var_name(mode, key, level, "on-tone")] = on_tone_to_var(
            on_tone_raw, index, mode, accessor
        )
    return vars, toned


def _primary_vars(
    key: str,
    palette: dict[str, Any],
    toned: list[str],
    index: TokenIndex,
    mode: str,
    accessor: ThemeAccessor,
    store: KeyValueStore | None,
    config: ResolverConfig,
) -> dict[str, str]:
    tone_name = palette_var_name(mode, key, "primary", "tone")
    on_tone_name = palette_var_name(mode, key, "primary", "on-tone")

    chosen = read_primary_level(store, key, mode)
    if chosen is not None and chosen not in toned:
        logger.debug(f"Stored primary level {chosen} for {key} has no tone, ignoring")
        chosen = None

    if chosen is None:
        declared, own_entry = _declared_default(palette, key, config.token_depth_limit)
        if declared in toned:
            chosen = declared
        elif own_entry is not None:
            tone_raw, on_tone_raw = _level_colors(own_entry)
            tone = tone_to_var(tone_raw, index, mode, accessor)
            if tone is not None:
                return {
                    tone_name: tone,
                    on_tone_name: on_tone_to_var(on_tone_raw, index, mode, accessor),
                }

    if chosen is None:
        chosen = next(
            (lvl for lvl in config.primary_fallback_levels if lvl in toned), None
        )
    if chosen is None:
        return {}
    return {
        tone_name: var_ref(palette_var_name(mode, key, chosen, "tone")),
        on_tone_name: var_ref(palette_var_name(mode, key, chosen, "on-tone")),
    }


def _core_entry_colors(node: Any) -> tuple[Any, Any]:
    node = unwrap_node(node)
    if isinstance(node, dict):
        return _level_colors(node)
    return node, None


def _core_on_tone(
    on_tone_raw: Any,
    tone_raw: Any,
    index: TokenIndex,
    mode: str,
    accessor: ThemeAccessor,
) -> str:
    if unwrap_value(on_tone_raw) is not None:
        return on_tone_to_var(on_tone_raw, index, mode, accessor)
    tone_hex = normalize_hex(resolve_reference(tone_raw, index, accessor).value_or(None))
    if tone_hex is not None:
        return core_black_white(pick_aa_on_tone(tone_hex), mode) or var_ref(
            core_var_name(mode, "black")
        )
    return var_ref(core_var_name(mode, "black"))


def build_core_color_vars(
    tokens: Any, theme: Any, mode: str, config: ResolverConfig | None = None
) -> dict[str, str]:
    """Core black/white/alert/warning/success/interactive variables."""
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    accessor = view.accessor(mode)
    core = view.core_colors(mode)
    vars: dict[str, str] = {}

    for name in CORE_COLOR_NAMES:
        node = unwrap_node(core.get(name))
        if node is None:
            continue

        if name == "interactive" and isinstance(node, dict) and (
            "default" in node or "hover" in node
        ):
            states = {
                "default": node.get("default", node.get("hover")),
                "hover": node.get("hover", node.get("default")),
            }
        else:
            states = {"default": node, "hover": node} if name == "interactive" else {}

        if states:
            for state, state_node in states.items():
                tone_raw, on_tone_raw = _core_entry_colors(state_node)
                tone = tone_to_var(tone_raw, index, mode, accessor)
                if tone is not None:
                    vars[core_var_name(mode, name, f"{state}-tone")] = tone
                vars[core_var_name(mode, name, f"{state}-on-tone")] = _core_on_tone(
                    on_tone_raw, tone_raw, index, mode, accessor
                )
            default_tone = vars.get(core_var_name(mode, name, "default-tone"))
            if default_tone:
                vars[core_var_name(mode, name)] = default_tone
                vars[core_var_name(mode, name, "tone")] = default_tone
            vars[core_var_name(mode, name, "on-tone")] = vars[
                core_var_name(mode, name, "default-on-tone")
            ]
            continue

        tone_raw, on_tone_raw = _core_entry_colors(node)
        tone = tone_to_var(tone_raw, index, mode, accessor)
        if tone is None:
            logger.debug(f"Core color {name} has no resolvable tone")
            continue
        vars[core_var_name(mode, name)] = tone
        vars[core_var_name(mode, name, "tone")] = tone
        vars[core_var_name(mode, name, "on-tone")] = _core_on_tone(
            on_tone_raw, tone_raw, index, mode, accessor
        )
    return vars


def build_emphasis_and_state_vars(
    tokens: Any, theme: Any, mode: str
) -> dict[str, str]:
    """Text emphasis and interaction state opacity/color variables."""
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    prefix = f"--recursica-brand-themes-{mode}"

    emphasis = view.text_emphasis(mode)
    vars = {
        f"{prefix}-text-emphasis-high": opacity_var(emphasis.get("high"), index),
        f"{prefix}-text-emphasis-low": opacity_var(emphasis.get("low"), index),
    }

    states = view.states(mode)
    overlay = unwrap_node(states.get("overlay"))
    overlay = overlay if isinstance(overlay, dict) else {}
    vars[f"{prefix}-state-disabled"] = opacity_var(states.get("disabled"), index)
    vars[f"{prefix}-state-hover"] = opacity_var(states.get("hover"), index)
    vars[f"{prefix}-state-overlay-opacity"] = opacity_var(overlay.get("opacity"), index)
    vars[f"{prefix}-state-overlay-color"] = color_to_var(
        overlay.get("color"), index, mode, view.accessor(mode)
    ) or var_ref(core_var_name(mode, "black"))
    return vars


def build_palette_vars(
    tokens: Any,
    theme: Any,
    mode: str,
    *,
    store: KeyValueStore | None = None,
    config: ResolverConfig | None = None,
) -> dict[str, str]:
    """Build every palette, core color, emphasis and state variable for ``mode``.

    Args:
        tokens: Token source or a prebuilt ``TokenIndex``.
        theme: Theme source or a ``ThemeView``.
        mode: ``light`` or ``dark`` (case-insensitive).
        store: Optional store holding remembered primary levels.
        config: Resolver configuration; defaults apply when omitted.

    Returns:
        CSS variable name to value.
    """
    config = config or DEFAULT_CONFIG
    index = ensure_index(tokens)
    view = as_theme_view(theme)
    mode = normalize_mode(mode)
    accessor = view.accessor(mode)
    vars: dict[str, str] = {}

    for key in view.palette_keys():
        palette = view.palette(mode, key)
        if not palette:
            continue
        level_vars, toned = _palette_level_vars(key, palette, index, mode, accessor)
        vars.update(level_vars)
        vars.update(
            _primary_vars(key, palette, toned, index, mode, accessor, store, config)
        )

    vars.update(build_core_color_vars(index, view, mode, config))
    vars.update(build_emphasis_and_state_vars(index, view, mode))

    if config.emit_legacy_aliases:
        add_legacy_aliases(vars)
    logger.debug(
        f"Built {len(vars)} palette variables for {mode}",
        extra={"var_count": len(vars), "operation": "palettes"},
    )
    return vars
