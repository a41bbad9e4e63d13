"""Unit tests for the schema-tolerant theme view."""

from recursica_vars.schema import ThemeView, as_theme_view, unwrap_node


class TestThemeView:
    """Tests for ThemeView section access."""

    def test_palette_keys_exclude_core(self, sample_theme):
        """Test palette discovery."""
        assert ThemeView(sample_theme).palette_keys() == ["neutral", "accent"]

    def test_core_colors_unwrap_value(self, sample_theme):
        """Test that a $value-wrapped core section is unwrapped."""
        core = ThemeView(sample_theme).core_colors("light")

        assert core["black"] == "{tokens.color.gray.1000}"
        assert "interactive" in core

    def test_layers_are_ordered_numerically(self):
        """Test layer ordering and alternative layers."""
        theme = {
            "light": {
                "layer": {
                    "layer-10": {"properties": {}},
                    "layer-2": {"properties": {}},
                    "layer-alternative": {"alert": {"properties": {}}},
                    "alternative-high-contrast": {"properties": {}},
                }
            }
        }

        layers = ThemeView(theme).layers("light")

        assert list(layers) == ["2", "10", "alternative-alert", "alternative-high-contrast"]

    def test_singular_spellings(self):
        """Test older singular section names without brand/themes wrappers."""
        theme = {"dark": {"palette": {"neutral": {"500": {"color": {"tone": "#808080"}}}}}}
        view = ThemeView(theme)

        assert view.palette_keys() == ["neutral"]
        assert view.palette("dark", "neutral")["500"]["color"]["tone"] == "#808080"
        assert view.raw_palettes("light") == {}

    def test_shared_sections(self, sample_theme):
        """Test that typography and dimensions are read from the brand root."""
        view = ThemeView(sample_theme)

        assert "h1" in view.typography()
        assert "spacers" in view.dimensions()

    def test_mode_sections(self, sample_theme):
        """Test text emphasis and states."""
        view = ThemeView(sample_theme)

        assert view.text_emphasis("light")["low"] == 0.6
        assert view.states("light")["hover"] == 8
        assert view.states("dark") == {}


class TestGetPath:
    """Tests for dotted path access."""

    def test_mode_relative_path(self, sample_theme):
        """Test a path read in the given mode."""
        node = ThemeView(sample_theme).get_path("light", "palettes.neutral.500.color.tone")

        assert node == {"$value": "{tokens.color.gray.500}"}

    def test_explicit_mode_segment(self, sample_theme):
        """Test that themes.<mode> switches the mode."""
        view = ThemeView(sample_theme)

        assert view.get_path("light", "themes.dark.palettes.neutral.900.color.on-tone") == "#ffffff"
        assert view.get_path("light", "dark/palettes/neutral/900/color/on-tone") == "#ffffff"

    def test_through_value_wrapper(self, sample_theme):
        """Test that $value-wrapped subtrees are walked through."""
        view = ThemeView(sample_theme)

        assert view.get_path("light", "palettes.core-colors.alert.tone") == "{tokens.color.red.700}"
        assert view.get_path("light", "palettes.core.white") == "{tokens.color.gray.000}"

    def test_dimensions_path(self, sample_theme):
        """Test shared dimension paths."""
        node = ThemeView(sample_theme).get_path("dark", "dimensions.spacers.sm")

        assert node == {"$type": "number", "$value": 8}

    def test_missing_path(self, sample_theme):
        """Test absent paths."""
        view = ThemeView(sample_theme)

        assert view.get_path("light", "palettes.neutral.555") is None
        assert view.get_path("light", "") is None

    def test_accessor(self, sample_theme):
        """Test the resolver callback."""
        access = ThemeView(sample_theme).accessor("dark")

        assert access("palettes.neutral.900.color.on-tone") == "#ffffff"


def test_unwrap_node_only_unwraps_subtrees():
    """Test that scalar $value nodes are left intact."""
    assert unwrap_node({"$value": {"a": 1}}) == {"a": 1}
    assert unwrap_node({"$value": 1}) == {"$value": 1}


def test_as_theme_view_is_idempotent(sample_theme):
    """Test that an existing view is passed through."""
    view = ThemeView(sample_theme)

    assert as_theme_view(view) is view
    assert isinstance(as_theme_view(sample_theme), ThemeView)
