"""Full theme build: every builder in dependency order, merged into one map."""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .builders import (
    build_dimension_vars,
    build_layer_vars,
    build_palette_vars,
    build_token_vars,
    build_typography_vars,
)
from .builders.values import ensure_index, normalize_mode
from .compliance import update_all_layers_aa_compliance
from .config import DEFAULT_CONFIG, ResolverConfig
from .css import MISSING_LAYER_PALETTE_REFS, CssVarMap, CssVarSurface, EventBus
from .css.varmap import find_cycles, merge
from .errors import SourceLoadError
from .schema import as_theme_view
from .storage import JsonFileStore, KeyValueStore
from .vars_logging import get_logger

logger = get_logger()


@dataclass
class ThemeBuild:
    """Result of one theme build."""

    vars: CssVarMap
    families_to_load: list[str] = field(default_factory=list)
    diagnostics: list[dict[str, Any]] = field(default_factory=list)
    mode: str = "light"

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "vars": dict(sorted(self.vars.items())),
            "familiesToLoad": list(self.families_to_load),
            "diagnostics": list(self.diagnostics),
        }


def load_json_source(path: str | Path) -> dict[str, Any]:
    """Read a token, theme or choices JSON file.

    Raises:
        SourceLoadError: When the file is unreadable, not JSON, or not an object.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SourceLoadError(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise SourceLoadError(str(path), "top level is not an object")
    return data


def _default_store(config: ResolverConfig) -> KeyValueStore | None:
    if config.store_path is None:
        return None
    return JsonFileStore(config.store_path)


def build_theme_vars(
    tokens: Any,
    theme: Any,
    mode: str | None = None,
    *,
    overrides: dict[str, Any] | None = None,
    choices: dict[str, dict[str, Any]] | None = None,
    store: KeyValueStore | None = None,
    events: EventBus | None = None,
    surface: CssVarSurface | None = None,
    config: ResolverConfig | None = None,
) -> ThemeBuild:
    """Build every CSS variable for one mode of a theme.

    Runs tokens, palettes, layers, dimensions and typography in that order,
    merges their output and drops entries caught in ``var()`` cycles.
    Missing layer surfaces are collected into ``diagnostics`` as well as
    being announced on the event bus.
    """
    config = config or DEFAULT_CONFIG
    mode = normalize_mode(mode or config.default_mode)
    store = store if store is not None else _default_store(config)
    bus = events or (surface.events if surface is not None else EventBus())
    index = ensure_index(tokens, overrides)
    view = as_theme_view(theme)

    diagnostics: list[dict[str, Any]] = []
    unsubscribe = bus.subscribe(
        MISSING_LAYER_PALETTE_REFS,
        lambda detail: diagnostics.append({"type": MISSING_LAYER_PALETTE_REFS, **(detail or {})}),
    )
    start = time.perf_counter()
    try:
        token_vars = build_token_vars(index)
        palette_vars = build_palette_vars(index, view, mode, store=store, config=config)
        layer_vars = build_layer_vars(
            index,
            view,
            mode,
            palette_vars=palette_vars,
            surface=surface,
            events=bus,
            config=config,
        )
        dimension_vars = build_dimension_vars(index, view, mode, config=config)
        typography = build_typography_vars(index, view, choices=choices)
    finally:
        unsubscribe()

    merged = merge(token_vars, palette_vars, layer_vars, dimension_vars, typography.vars)
    cyclic = find_cycles(merged)
    if cyclic:
        logger.warning(f"Dropping {len(cyclic)} cyclic CSS variables: {sorted(cyclic)}")
        diagnostics.append({"type": "cyclicVars", "vars": sorted(cyclic)})
    vars = {name: value for name, value in merged.items() if name not in cyclic}

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Built {len(vars)} CSS variables for {mode} in {duration_ms:.1f}ms",
        extra={"var_count": len(vars), "duration_ms": round(duration_ms, 2), "operation": "build"},
    )
    return ThemeBuild(
        vars=vars,
        families_to_load=typography.families_to_load,
        diagnostics=diagnostics,
        mode=mode,
    )


def rebuild(
    surface: CssVarSurface,
    tokens: Any,
    theme: Any,
    mode: str | None = None,
    *,
    overrides: dict[str, Any] | None = None,
    choices: dict[str, dict[str, Any]] | None = None,
    store: KeyValueStore | None = None,
    config: ResolverConfig | None = None,
    compliance: bool = True,
) -> ThemeBuild:
    """Rebuild after a theme or mode change and apply the result to ``surface``.

    The layer AA pass runs after the apply, and its replacements are folded
    back into the returned build.
    """
    config = config or DEFAULT_CONFIG
    index = ensure_index(tokens, overrides)
    view = as_theme_view(theme)
    build = build_theme_vars(
        index,
        view,
        mode,
        choices=choices,
        store=store,
        surface=surface,
        config=config,
    )
    surface.apply(build.vars)
    if compliance:
        written = update_all_layers_aa_compliance(index, view, surface, build.mode, config)
        build.vars.update(written)
        if written:
            build.diagnostics.append({"type": "aaCompliance", "vars": sorted(written)})
    return build
