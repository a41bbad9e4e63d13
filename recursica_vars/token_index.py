"""Lookup table over the raw token JSON.

Paths are slash-separated (``color/gray/500``, ``opacity/smoky``,
``font/weights/bold``). Legacy singular and current plural category names
are interchangeable, and color families can be addressed either directly
(``color/gray/500``) or through the scale schema (``colors/scale-06/500``,
where ``scale-06`` carries ``alias: gray``).
"""

from collections.abc import Iterator
from typing import Any

from .color import normalize_hex
from .models import ColorTokenRef
from .references import unwrap_value
from .vars_logging import get_logger

logger = get_logger()

CATEGORY_ALIASES: dict[str, tuple[str, ...]] = {
    "color": ("color", "colors"),
    "colors": ("colors", "color"),
    "opacity": ("opacity", "opacities"),
    "opacities": ("opacities", "opacity"),
    "size": ("size", "sizes"),
    "sizes": ("sizes", "size"),
}

FONT_KIND_ALIASES: dict[str, tuple[str, ...]] = {}
for _singular, _plural in (
    ("weight", "weights"),
    ("size", "sizes"),
    ("letter-spacing", "letter-spacings"),
    ("line-height", "line-heights"),
    ("family", "families"),
    ("typeface", "typefaces"),
    ("style", "styles"),
    ("case", "cases"),
    ("decoration", "decorations"),
):
    FONT_KIND_ALIASES[_singular] = (_singular, _plural)
    FONT_KIND_ALIASES[_plural] = (_plural, _singular)

COLOR_LEVELS = [
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


def _is_leaf(node: Any) -> bool:
    return isinstance(node, dict) and ("$value" in node or "value" in node)


class TokenIndex:
    """Read-only index over a token source.

    Lookups never raise: unknown categories and missing keys return None.
    """

    def __init__(
        self,
        tokens: dict[str, Any] | None,
        overrides: dict[str, Any] | None = None,
    ):
        root = tokens or {}
        if isinstance(root, dict) and isinstance(root.get("tokens"), dict):
            root = root["tokens"]
        self.root: dict[str, Any] = root if isinstance(root, dict) else {}
        self._scale_aliases = self._collect_scale_aliases()
        self.overrides: dict[str, Any] = {
            "/".join(p for p in str(k).replace(".", "/").split("/") if p): v
            for k, v in (overrides or {}).items()
        }

    def _collect_scale_aliases(self) -> dict[str, str]:
        aliases: dict[str, str] = {}
        for category in ("colors", "color"):
            families = self.root.get(category)
            if not isinstance(families, dict):
                continue
            for scale_key, scale in families.items():
                if not isinstance(scale, dict):
                    continue
                alias = unwrap_value(scale.get("alias"))
                if isinstance(alias, str) and alias.strip():
                    aliases.setdefault(alias.strip(), scale_key)
        return aliases

    def get(self, path: str) -> Any:
        """Return the value at ``path``, or None when absent."""
        parts = [p for p in str(path or "").split("/") if p]
        if not parts:
            return None
        if self.overrides:
            override = self.overrides.get("/".join(parts))
            if override is not None:
                return unwrap_value(override)
        head, rest = parts[0], parts[1:]

        if head in ("color", "colors"):
            return self._get_color(head, rest)
        if head in CATEGORY_ALIASES:
            for category in CATEGORY_ALIASES[head]:
                value = self._walk(self.root.get(category), rest)
                if value is not None:
                    return value
            return None
        if head == "font":
            if not rest:
                return None
            kind, keys = rest[0], rest[1:]
            font = self.root.get("font")
            if not isinstance(font, dict):
                return None
            for candidate in FONT_KIND_ALIASES.get(kind, (kind,)):
                value = self._walk(font.get(candidate), keys)
                if value is not None:
                    return value
            return None
        return None

    def _get_color(self, head: str, rest: list[str]) -> Any:
        if len(rest) != 2:
            return None
        family, level = rest
        for category in CATEGORY_ALIASES[head]:
            value = self._walk(self.root.get(category), [family, level])
            if value is not None:
                return value
        scale_key = self._scale_aliases.get(family)
        if scale_key:
            for category in ("colors", "color"):
                value = self._walk(self.root.get(category), [scale_key, level])
                if value is not None:
                    return value
        return None

    @staticmethod
    def _walk(node: Any, keys: list[str]) -> Any:
        if not keys:
            return None
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        if _is_leaf(node):
            return unwrap_value(node)
        if isinstance(node, (str, int, float)) and not isinstance(node, bool):
            return node
        return None

    def has(self, path: str) -> bool:
        return self.get(path) is not None

    # Color helpers

    def color_families(self) -> list[tuple[str, str]]:
        """List ``(category, family)`` pairs, skipping translucent sets."""
        result = []
        for category in ("color", "colors"):
            families = self.root.get(category)
            if not isinstance(families, dict):
                continue
            for family, scale in families.items():
                if family.startswith("$") or family == "translucent":
                    continue
                if isinstance(scale, dict) and not _is_leaf(scale):
                    result.append((category, family))
        return result

    def family_alias(self, family: str) -> str | None:
        """Human alias for a ``scale-NN`` family, if declared."""
        for category in ("colors", "color"):
            families = self.root.get(category)
            scale = families.get(family) if isinstance(families, dict) else None
            if isinstance(scale, dict):
                alias = unwrap_value(scale.get("alias"))
                if isinstance(alias, str) and alias.strip():
                    return alias.strip()
        return None

    def color_category(self, family: str) -> str | None:
        """Category under which ``family`` (or its scale alias) is stored."""
        for category in ("color", "colors"):
            families = self.root.get(category)
            if isinstance(families, dict) and isinstance(families.get(family), dict):
                return category
        if family in self._scale_aliases:
            return "color"
        return None

    def color_hex(self, family: str, level: str) -> str | None:
        return normalize_hex(self.get(f"color/{family}/{level}"))

    def find_color_by_hex(self, hex_value: Any) -> ColorTokenRef | None:
        """Reverse lookup of a hex color to the first family/level holding it."""
        target = normalize_hex(hex_value)
        if target is None:
            return None
        for category, family in self.color_families():
            for level in COLOR_LEVELS:
                if normalize_hex(self._walk(self.root[category], [family, level])) == target:
                    return ColorTokenRef(family=family, level=level)
        return None

    # Size and font helpers

    def numeric_entries(self, category: str) -> dict[str, float]:
        """Numeric leaves of a flat category, e.g. ``size`` -> ``{'md': 16.0}``."""
        result: dict[str, float] = {}
        for name in CATEGORY_ALIASES.get(category, (category,)):
            node = self.root.get(name)
            if not isinstance(node, dict):
                continue
            for key, leaf in node.items():
                if key.startswith("$") or key in result:
                    continue
                number = to_number(unwrap_value(leaf))
                if number is not None:
                    result[key] = number
        return result

    def size_category(self) -> str:
        """``size`` or ``sizes``, whichever the source uses."""
        if isinstance(self.root.get("size"), dict):
            return "size"
        if isinstance(self.root.get("sizes"), dict):
            return "sizes"
        return "size"

    def font_entries(self, kind: str) -> tuple[str | None, dict[str, Any]]:
        """Return ``(stored_kind, {key: value})`` for a font sub-category."""
        font = self.root.get("font")
        if not isinstance(font, dict):
            return None, {}
        for candidate in FONT_KIND_ALIASES.get(kind, (kind,)):
            node = font.get(candidate)
            if isinstance(node, dict):
                entries = {
                    key: unwrap_value(leaf)
                    for key, leaf in node.items()
                    if not key.startswith("$") and (_is_leaf(leaf) or not isinstance(leaf, dict))
                }
                return candidate, entries
        return None, {}

    def leaves(self) -> Iterator[tuple[tuple[str, ...], Any]]:
        """Yield ``(path, value)`` for every leaf in the source."""

        def visit(node: Any, prefix: tuple[str, ...]) -> Iterator[tuple[tuple[str, ...], Any]]:
            if _is_leaf(node):
                yield prefix, unwrap_value(node)
                return
            if not isinstance(node, dict):
                if prefix and isinstance(node, (str, int, float)) and not isinstance(node, bool):
                    yield prefix, node
                return
            for key, child in node.items():
                if key.startswith("$") or key == "alias":
                    continue
                yield from visit(child, prefix + (key,))

        yield from visit(self.root, ())


def to_number(value: Any) -> float | None:
    """Parse ints, floats and strings like ``'16'`` or ``'16px'``."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text.endswith("px"):
            text = text[:-2].strip()
        try:
            return float(text)
        except ValueError:
            return None
    return None


def build_token_index(
    tokens: dict[str, Any] | None, overrides: dict[str, Any] | None = None
) -> TokenIndex:
    """Build an index over a token source, with optional path overrides."""
    index = TokenIndex(tokens, overrides)
    logger.debug(f"Indexed {len(index.color_families())} color families")
    return index
