"""Schema-tolerant view over a brand theme.

Themes arrive in several generations: optionally wrapped in ``brand`` and
``themes``, with ``palettes``/``palette``, ``layers``/``layer``,
``states``/``state`` and ``core-colors``/``core`` spellings, and with
``$value`` wrappers around whole subtrees. ``ThemeView`` absorbs those
differences once so builders only ever see one shape.
"""

import re
from collections.abc import Callable
from typing import Any

from .models import MODES

SEGMENT_ALIASES: dict[str, tuple[str, ...]] = {
    "palettes": ("palettes", "palette"),
    "palette": ("palettes", "palette"),
    "layers": ("layers", "layer"),
    "layer": ("layers", "layer"),
    "states": ("states", "state"),
    "state": ("states", "state"),
    "core-colors": ("core-colors", "core"),
    "core": ("core-colors", "core"),
    "dimensions": ("dimensions", "dimension"),
    "dimension": ("dimensions", "dimension"),
    "elevations": ("elevations", "elevation"),
    "elevation": ("elevations", "elevation"),
}

CORE_COLOR_NAMES = ("black", "white", "alert", "warning", "success", "interactive")

_LAYER_KEY = re.compile(r"^(?:layer-)?(\d+)$")
_ALT_KEY = re.compile(r"^(?:layer-)?alternative-([a-z0-9-]+)$")


def _dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def unwrap_node(node: Any) -> Any:
    """Unwrap ``$value`` around a subtree (``{"$value": {...}}``)."""
    while isinstance(node, dict) and "$value" in node and isinstance(node["$value"], dict):
        node = node["$value"]
    return node


def _pick(node: dict[str, Any], key: str) -> Any:
    for candidate in SEGMENT_ALIASES.get(key, (key,)):
        if candidate in node:
            return node[candidate]
    return None


class ThemeView:
    """Normalized read access to a theme source."""

    def __init__(self, theme: dict[str, Any] | None):
        root = _dict(theme)
        if isinstance(root.get("brand"), dict):
            root = root["brand"]
        self.root = root
        themes = root.get("themes")
        self.modes_root = themes if isinstance(themes, dict) else root

    def mode(self, mode: str) -> dict[str, Any]:
        return _dict(unwrap_node(self.modes_root.get(mode)))

    def _mode_section(self, mode: str, key: str) -> dict[str, Any]:
        return _dict(unwrap_node(_pick(self.mode(mode), key)))

    # Palettes

    def raw_palettes(self, mode: str) -> dict[str, Any]:
        return self._mode_section(mode, "palettes")

    def palette_keys(self) -> list[str]:
        """Palette keys declared in light mode (dark as a fallback), minus core."""
        palettes = self.raw_palettes("light") or self.raw_palettes("dark")
        return [
            key
            for key, value in palettes.items()
            if key not in ("core", "core-colors")
            and not key.startswith("$")
            and isinstance(value, dict)
        ]

    def palette(self, mode: str, key: str) -> dict[str, Any]:
        return _dict(unwrap_node(self.raw_palettes(mode).get(key)))

    def core_colors(self, mode: str) -> dict[str, Any]:
        palettes = self.raw_palettes(mode)
        core = _pick(palettes, "core-colors")
        if core is None:
            core = _pick(self.mode(mode), "core-colors")
        return _dict(unwrap_node(core))

    # Layers

    def layers(self, mode: str) -> dict[str, dict[str, Any]]:
        """Map layer ids (``'0'``, ``'alternative-alert'``) to their specs."""
        node = self._mode_section(mode, "layers")
        numbered: dict[int, dict[str, Any]] = {}
        alternatives: dict[str, dict[str, Any]] = {}
        for key, spec in node.items():
            spec = unwrap_node(spec)
            if not isinstance(spec, dict):
                continue
            match = _LAYER_KEY.match(key)
            if match:
                numbered[int(match.group(1))] = spec
                continue
            match = _ALT_KEY.match(key)
            if match:
                alternatives[match.group(1)] = spec
                continue
            if key in ("layer-alternative", "alternative"):
                for alt_key, alt_spec in spec.items():
                    alt_spec = unwrap_node(alt_spec)
                    if isinstance(alt_spec, dict) and not alt_key.startswith("$"):
                        alternatives.setdefault(alt_key, alt_spec)
        result = {str(n): numbered[n] for n in sorted(numbered)}
        for alt_key, spec in alternatives.items():
            result[f"alternative-{alt_key}"] = spec
        return result

    # Other sections

    def text_emphasis(self, mode: str) -> dict[str, Any]:
        return self._mode_section(mode, "text-emphasis")

    def states(self, mode: str) -> dict[str, Any]:
        return self._mode_section(mode, "states")

    def _shared_section(self, key: str) -> dict[str, Any]:
        for holder in (self.root, self.modes_root, self.mode("light"), self.mode("dark")):
            section = unwrap_node(_pick(holder, key))
            if isinstance(section, dict):
                return section
        return {}

    def typography(self) -> dict[str, Any]:
        return self._shared_section("typography")

    def dimensions(self) -> dict[str, Any]:
        return self._shared_section("dimensions")

    # Path access for the resolver

    def get_path(self, mode: str, path: str) -> Any:
        """Look up a dotted or slashed brand path.

        Leading ``themes.<mode>`` or ``<mode>`` segments select the mode;
        ``dimensions`` and ``typography`` read the shared sections.
        """
        parts = [p for p in re.split(r"[./]", path or "") if p]
        if len(parts) >= 2 and parts[0] == "themes" and parts[1] in MODES:
            mode, parts = parts[1], parts[2:]
        elif parts and parts[0] in MODES:
            mode, parts = parts[0], parts[1:]
        if not parts:
            return None

        if parts[0] in ("dimensions", "dimension"):
            node: Any = self.dimensions()
            parts = parts[1:]
        elif parts[0] == "typography":
            node = self.typography()
            parts = parts[1:]
        else:
            node = self.mode(mode)

        for part in parts:
            node = unwrap_node(node)
            if not isinstance(node, dict):
                return None
            value = _pick(node, part)
            if value is None:
                return None
            node = value
        return node

    def accessor(self, mode: str) -> Callable[[str], Any]:
        """Theme accessor callback bound to ``mode`` for the resolver."""

        def access(path: str) -> Any:
            return self.get_path(mode, path)

        return access


def as_theme_view(theme: Any) -> ThemeView:
    return theme if isinstance(theme, ThemeView) else ThemeView(theme)
