"""CSS variable naming, validation and the live variable surface."""

from .events import CSS_VARS_UPDATED, MISSING_LAYER_PALETTE_REFS, EventBus
from .surface import CssVarSurface
from .var_types import (
    enforce_brand_var_value,
    is_brand_var,
    is_token_var,
    validate_css_var_value,
)
from .varmap import CssVarMap, drop_cyclic, find_cycles, merge

__all__ = [
    "CSS_VARS_UPDATED",
    "MISSING_LAYER_PALETTE_REFS",
    "EventBus",
    "CssVarSurface",
    "CssVarMap",
    "enforce_brand_var_value",
    "is_brand_var",
    "is_token_var",
    "validate_css_var_value",
    "drop_cyclic",
    "find_cycles",
    "merge",
]
