"""Unit tests for layer variables."""

import pytest

from recursica_vars.builders.layers import build_layer_vars, nearest_size_token
from recursica_vars.builders.palettes import build_palette_vars
from recursica_vars.css import MISSING_LAYER_PALETTE_REFS, CssVarSurface, EventBus

LAYER0 = "--recursica-brand-themes-light-layer-layer-0-property-"
LAYER1 = "--recursica-brand-themes-light-layer-layer-1-property-"
CORE = "--recursica-brand-themes-light-palettes-core-"


@pytest.fixture
def layer_vars(sample_tokens, sample_theme):
    """Layer variables for light mode, without palette context."""
    return build_layer_vars(sample_tokens, sample_theme, "light")


class TestSurfaceAndProperties:
    """Tests for surface and box properties."""

    def test_palette_surface(self, layer_vars):
        """Test that a palette tone surface references the palette var."""
        assert layer_vars[f"{LAYER0}surface"] == (
            "var(--recursica-brand-themes-light-palettes-neutral-100-tone)"
        )

    def test_sizes_snap_to_tokens(self, layer_vars):
        """Test exact and nearest size token matches."""
        assert layer_vars[f"{LAYER0}padding"] == "var(--recursica-tokens-size-md)"
        assert layer_vars[f"{LAYER0}border-radius"] == "var(--recursica-tokens-size-sm)"

    def test_border_color(self, layer_vars):
        """Test border color token vars."""
        assert layer_vars[f"{LAYER0}border-color"] == "var(--recursica-tokens-color-gray-200)"

    def test_size_with_unit(self, sample_tokens, sample_theme):
        """Test value/unit pairs pass through."""
        layer = sample_theme["brand"]["themes"]["light"]["layers"]["layer-1"]
        layer["properties"]["border-thickness"] = {"$value": {"value": 2, "unit": "px"}}

        vars = build_layer_vars(sample_tokens, sample_theme, "light")

        assert vars[f"{LAYER1}border-thickness"] == "2px"

    def test_size_token_reference(self, sample_tokens, sample_theme):
        """Test size references keep their token."""
        layer = sample_theme["brand"]["themes"]["light"]["layers"]["layer-1"]
        layer["properties"]["padding"] = "{tokens.size.lg}"

        vars = build_layer_vars(sample_tokens, sample_theme, "light")

        assert vars[f"{LAYER1}padding"] == "var(--recursica-tokens-size-lg)"

    def test_legacy_aliases(self, layer_vars):
        """Test themes-less layer names."""
        assert (
            layer_vars["--recursica-brand-light-layer-layer-0-property-surface"]
            == layer_vars[f"{LAYER0}surface"]
        )


class TestText:
    """Tests for layer text variables."""

    def test_text_color_without_palette_context(self, layer_vars):
        """Test that the surface's on-tone var is used directly."""
        assert layer_vars[f"{LAYER0}element-text-color"] == (
            "var(--recursica-brand-themes-light-palettes-neutral-100-on-tone)"
        )

    def test_text_color_from_palette_vars(self, sample_tokens, sample_theme):
        """Test that the built on-tone is followed to core black or white."""
        palette_vars = build_palette_vars(sample_tokens, sample_theme, "light")

        vars = build_layer_vars(sample_tokens, sample_theme, "light", palette_vars=palette_vars)

        assert vars[f"{LAYER0}element-text-color"] == f"var({CORE}black)"
        assert vars[f"{LAYER1}element-text-color"] == f"var({CORE}black)"

    def test_text_color_from_surface(self, sample_tokens, sample_theme):
        """Test the live surface as the secondary on-tone source."""
        surface = CssVarSurface(
            {"--recursica-brand-themes-light-palettes-neutral-100-on-tone": "#ffffff"}
        )

        vars = build_layer_vars(sample_tokens, sample_theme, "light", surface=surface)

        assert vars[f"{LAYER0}element-text-color"] == f"var({CORE}white)"

    def test_explicit_text_color(self, sample_tokens, sample_theme):
        """Test an explicit palette on-tone text color."""
        layer = sample_theme["brand"]["themes"]["light"]["layers"]["layer-1"]
        layer["elements"] = {"text": {"color": "{brand.palettes.neutral.900.color.on-tone}"}}

        vars = build_layer_vars(sample_tokens, sample_theme, "light")

        assert vars[f"{LAYER1}element-text-color"] == (
            "var(--recursica-brand-themes-light-palettes-neutral-900-on-tone)"
        )

    def test_emphasis(self, layer_vars):
        """Test layer emphasis overrides and defaults."""
        assert layer_vars[f"{LAYER0}element-text-low-emphasis"] == "var(--recursica-tokens-opacity-smoky)"
        assert layer_vars[f"{LAYER0}element-text-high-emphasis"] == (
            "var(--recursica-brand-themes-light-text-emphasis-high)"
        )

    def test_semantic_roles(self, layer_vars):
        """Test alert, warning and success text colors."""
        assert layer_vars[f"{LAYER0}element-text-alert"] == f"var({CORE}alert)"
        assert layer_vars[f"{LAYER0}element-text-warning"] == f"var({CORE}warning)"
        assert layer_vars[f"{LAYER0}element-text-success"] == f"var({CORE}success)"


class TestInteractive:
    """Tests for layer interactive variables."""

    def test_defaults_reference_core_interactive(self, layer_vars):
        """Test the core interactive defaults."""
        base = f"{LAYER0}element-interactive-"

        assert layer_vars[f"{base}tone"] == f"var({CORE}interactive-default-tone)"
        assert layer_vars[f"{base}tone-hover"] == f"var({CORE}interactive-hover-tone)"
        assert layer_vars[f"{base}on-tone"] == f"var({CORE}interactive-default-on-tone)"
        assert layer_vars[f"{base}color"] == layer_vars[f"{base}tone"]
        assert layer_vars[f"{base}high-emphasis"] == f"var({LAYER0}element-text-high-emphasis)"

    def test_explicit_color(self, sample_tokens, sample_theme):
        """Test an interactive color given directly."""
        layer = sample_theme["brand"]["themes"]["light"]["layers"]["layer-1"]
        layer["elements"] = {"interactive": "{tokens.color.blue.300}"}

        vars = build_layer_vars(sample_tokens, sample_theme, "light")
        base = f"{LAYER1}element-interactive-"

        assert vars[f"{base}color"] == "var(--recursica-tokens-color-blue-300)"
        assert vars[f"{base}tone"] == "var(--recursica-tokens-color-blue-300)"

    def test_legacy_property_names(self, sample_tokens, sample_theme):
        """Test the background/text spellings."""
        layer = sample_theme["brand"]["themes"]["light"]["layers"]["layer-1"]
        layer["elements"] = {"interactive": {"background": "{tokens.color.blue.100}"}}

        vars = build_layer_vars(sample_tokens, sample_theme, "light")

        assert vars[f"{LAYER1}element-interactive-tone"] == "var(--recursica-tokens-color-blue-100)"

    def test_core_state_vars_kept(self, sample_tokens, sample_theme):
        """Test that explicit core interactive state vars pass through unchanged."""
        layer = sample_theme["brand"]["themes"]["light"]["layers"]["layer-1"]
        layer["elements"] = {
            "interactive": {
                "tone": f"var({CORE}interactive-default-tone)",
                "tone-hover": f"var({CORE}interactive-hover-tone)",
                "on-tone": f"var({CORE}interactive-default-on-tone)",
            }
        }

        vars = build_layer_vars(sample_tokens, sample_theme, "light")
        base = f"{LAYER1}element-interactive-"

        assert vars[f"{base}tone"] == f"var({CORE}interactive-default-tone)"
        assert vars[f"{base}tone-hover"] == f"var({CORE}interactive-hover-tone)"
        assert vars[f"{base}on-tone"] == f"var({CORE}interactive-default-on-tone)"


class TestMissingSurfaces:
    """Tests for surfaces without a variable."""

    def test_missing_palette_ref_is_reported(self, sample_tokens, sample_theme):
        """Test the missingLayerPaletteRefs event."""
        layers = sample_theme["brand"]["themes"]["light"]["layers"]
        layers["layer-2"] = {"properties": {"surface": "#123456"}}
        events = EventBus()
        received = []
        events.subscribe(MISSING_LAYER_PALETTE_REFS, received.append)

        vars = build_layer_vars(sample_tokens, sample_theme, "light", events=events)

        assert received == [{"layers": ["2"]}]
        assert "--recursica-brand-themes-light-layer-layer-2-property-surface" not in vars
        assert vars["--recursica-brand-themes-light-layer-layer-2-property-element-text-color"] == (
            f"var({CORE}black)"
        )

    def test_hex_surface_in_token_set(self, sample_tokens, sample_theme):
        """Test that a hex surface held by a token uses the token var."""
        layers = sample_theme["brand"]["themes"]["light"]["layers"]
        layers["layer-2"] = {"properties": {"surface": "#e6e6e6"}}

        vars = build_layer_vars(sample_tokens, sample_theme, "light")

        assert vars["--recursica-brand-themes-light-layer-layer-2-property-surface"] == (
            "var(--recursica-tokens-color-gray-100)"
        )


class TestNearestSizeToken:
    """Tests for nearest_size_token."""

    def test_exact_and_nearest(self, token_index):
        """Test exact matches and nearest distance."""
        assert nearest_size_token(16, token_index) == "md"
        assert nearest_size_token("22px", token_index) == "lg"
        assert nearest_size_token(1, token_index) == "none"

    def test_non_numeric(self, token_index):
        """Test that non-numbers have no match."""
        assert nearest_size_token("auto", token_index) is None
