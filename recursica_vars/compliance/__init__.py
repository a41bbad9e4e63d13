"""AA contrast corrections applied to the live CSS surface."""

from .core_colors import (
    alternating_levels,
    patch_core_color_on_tones,
    plan_core_color_on_tones,
    update_core_color_on_tones,
)
from .layer_compliance import (
    update_all_layers_aa_compliance,
    update_alternative_layer_aa_compliance,
    update_layer_aa_compliance,
)
from .stepping import (
    core_color_token,
    find_aa_compliant_color,
    find_color_family_and_level,
    resolve_css_var_to_hex,
    resolve_opacity,
)

__all__ = [
    "alternating_levels",
    "core_color_token",
    "find_aa_compliant_color",
    "find_color_family_and_level",
    "patch_core_color_on_tones",
    "plan_core_color_on_tones",
    "resolve_css_var_to_hex",
    "resolve_opacity",
    "update_all_layers_aa_compliance",
    "update_alternative_layer_aa_compliance",
    "update_core_color_on_tones",
    "update_layer_aa_compliance",
]
