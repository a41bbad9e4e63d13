"""Per-domain CSS variable builders."""

from .dimensions import build_dimension_vars
from .layers import build_layer_vars
from .palettes import build_core_color_vars, build_palette_vars
from .tokens import build_token_vars
from .typography import TypographyResult, build_typography_vars

__all__ = [
    "TypographyResult",
    "build_core_color_vars",
    "build_dimension_vars",
    "build_layer_vars",
    "build_palette_vars",
    "build_token_vars",
    "build_typography_vars",
]
