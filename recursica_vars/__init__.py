"""Compile Recursica design tokens and brand themes into CSS variables."""

__version__ = "0.1.0"

from .builders import (  # noqa: E402
    TypographyResult,
    build_dimension_vars,
    build_layer_vars,
    build_palette_vars,
    build_token_vars,
    build_typography_vars,
)
from .compliance import find_aa_compliant_color  # noqa: E402
from .models import ColorTokenRef, LookupStatus, Resolution  # noqa: E402
from .pipeline import ThemeBuild, build_theme_vars, rebuild  # noqa: E402
from .references import parse_reference, reference_to_css_var  # noqa: E402
from .resolver import resolve_brace_ref, resolve_reference  # noqa: E402
from .token_index import TokenIndex, build_token_index  # noqa: E402

__all__ = [
    "ColorTokenRef",
    "LookupStatus",
    "Resolution",
    "ThemeBuild",
    "TokenIndex",
    "TypographyResult",
    "__version__",
    "build_dimension_vars",
    "build_layer_vars",
    "build_palette_vars",
    "build_theme_vars",
    "build_token_index",
    "build_token_vars",
    "build_typography_vars",
    "find_aa_compliant_color",
    "parse_reference",
    "rebuild",
    "reference_to_css_var",
    "resolve_brace_ref",
    "resolve_reference",
]
