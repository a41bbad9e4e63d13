"""Unit tests for layer and core color AA compliance."""

import logging

import pytest

from recursica_vars.compliance import (
    alternating_levels,
    patch_core_color_on_tones,
    plan_core_color_on_tones,
    update_all_layers_aa_compliance,
    update_alternative_layer_aa_compliance,
    update_core_color_on_tones,
    update_layer_aa_compliance,
)
from recursica_vars.compliance import core_colors
from recursica_vars.compliance.core_colors import on_tone_reference
from recursica_vars.css import CssVarSurface
from recursica_vars.pipeline import rebuild

CORE = "--recursica-brand-themes-light-palettes-core-"
LAYER0 = "--recursica-brand-themes-light-layer-layer-0-property-"
LAYER1 = "--recursica-brand-themes-light-layer-layer-1-property-"


@pytest.fixture
def built_surface(sample_tokens, sample_theme):
    """Surface holding the light build, before any compliance pass."""
    surface = CssVarSurface()
    rebuild(surface, sample_tokens, sample_theme, "light", compliance=False)
    return surface


class TestLayerCompliance:
    """Tests for the layer AA pass."""

    def test_text_color_on_light_surface(self, built_surface, token_index, sample_theme):
        """Test that a light surface gets core black text."""
        written = update_layer_aa_compliance(0, token_index, sample_theme, built_surface)

        assert written[f"{LAYER0}element-text-color"] == f"var({CORE}black)"
        assert built_surface.get(f"{LAYER0}element-text-color") == f"var({CORE}black)"

    def test_text_color_on_dark_surface(self, built_surface, token_index, sample_theme):
        """Test that a dark surface replaces the derived black text with white."""
        assert built_surface.get(f"{LAYER1}element-text-color") == f"var({CORE}black)"

        update_layer_aa_compliance("1", token_index, sample_theme, built_surface)

        assert built_surface.get(f"{LAYER1}element-text-color") == f"var({CORE}white)"

    def test_interactive_kept_when_readable(self, built_surface, token_index, sample_theme):
        """Test that the core interactive color is kept when it passes."""
        written = update_layer_aa_compliance(1, token_index, sample_theme, built_surface)

        assert written[f"{LAYER1}element-interactive-color"] == f"var({CORE}interactive)"

    def test_interactive_stepped_when_unreadable(self, built_surface, token_index, sample_theme):
        """Test that a failing interactive color is stepped along its scale."""
        written = update_layer_aa_compliance(0, token_index, sample_theme, built_surface)

        assert written[f"{LAYER0}element-interactive-color"] == "var(--recursica-tokens-color-blue-700)"

    def test_semantic_roles_written(self, built_surface, token_index, sample_theme):
        """Test that alert, warning and success colors are re-picked."""
        written = update_layer_aa_compliance(0, token_index, sample_theme, built_surface)

        for role in ("alert", "warning", "success"):
            assert written[f"{LAYER0}element-text-{role}"].startswith("var(")

    def test_missing_layer(self, built_surface, token_index, sample_theme):
        """Test that a layer without a surface writes nothing."""
        assert update_layer_aa_compliance(7, token_index, sample_theme, built_surface) == {}

    def test_alternative_layer(self, token_index, sample_theme):
        """Test the pass for a layer-alternative entry."""
        sample_theme["brand"]["themes"]["light"]["layers"]["layer-alternative"] = {
            "alert": {"properties": {"surface": "{brand.palettes.neutral.900.color.tone}"}}
        }
        surface = CssVarSurface()
        rebuild(surface, token_index, sample_theme, "light", compliance=False)

        written = update_alternative_layer_aa_compliance("alert", token_index, sample_theme, surface)

        name = "--recursica-brand-themes-light-layer-layer-alternative-alert-property-element-text-color"
        assert written[name] == f"var({CORE}white)"

    def test_all_layers(self, built_surface, token_index, sample_theme):
        """Test the pass over every layer."""
        written = update_all_layers_aa_compliance(token_index, sample_theme, built_surface)

        assert f"{LAYER0}element-text-color" in written
        assert f"{LAYER1}element-text-color" in written


class TestAlternatingLevels:
    """Tests for the alternating search order."""

    def test_from_500(self):
        """Test the alternation around the start."""
        assert alternating_levels("500")[:5] == ["500", "600", "400", "700", "300"]

    def test_from_1000(self):
        """Test a start at the end of the scale."""
        assert alternating_levels("1000")[:3] == ["1000", "900", "800"]

    def test_covers_scale_once(self):
        """Test that 000 folds into 050 and nothing repeats."""
        order = alternating_levels("100")

        assert len(order) == len(set(order)) == 11
        assert "000" not in order

    def test_unknown_level(self):
        """Test levels off the scale."""
        assert alternating_levels("555") == []


class TestCoreColorOnTones:
    """Tests for the core on-tone pass."""

    def test_passing_on_tones_are_left_alone(self, built_surface, token_index, sample_theme):
        """Test that only the failing interactive on-tone is planned."""
        planned = plan_core_color_on_tones(token_index, sample_theme, built_surface)

        assert planned == {
            f"{CORE}interactive-default-on-tone": "var(--recursica-tokens-color-gray-1000)",
            f"{CORE}interactive-on-tone": "var(--recursica-tokens-color-gray-1000)",
        }

    def test_force_recomputes(self, built_surface, token_index, sample_theme):
        """Test that force plans every core color."""
        planned = plan_core_color_on_tones(token_index, sample_theme, built_surface, force=True)

        assert planned[f"{CORE}black-on-tone"] == "var(--recursica-tokens-color-gray-500)"
        assert f"{CORE}alert-on-tone" in planned

    def test_update_writes_surface(self, built_surface, token_index, sample_theme):
        """Test that the planned values are written."""
        written = update_core_color_on_tones(token_index, sample_theme, built_surface)

        assert built_surface.get(f"{CORE}interactive-on-tone") == "var(--recursica-tokens-color-gray-1000)"
        assert len(written) == 2

    def test_patch_returns_copy(self, built_surface, token_index, sample_theme):
        """Test that the theme copy is patched and the original is not."""
        patched = patch_core_color_on_tones(sample_theme, token_index, built_surface)

        core = patched["brand"]["themes"]["light"]["palettes"]["core-colors"]["$value"]
        assert core["interactive"]["default"]["on-tone"] == "{tokens.color.gray.1000}"
        original = sample_theme["brand"]["themes"]["light"]["palettes"]["core-colors"]["$value"]
        assert original["interactive"]["default"]["on-tone"] == "#ffffff"
        assert built_surface.get(f"{CORE}interactive-default-on-tone") == (
            "var(--recursica-tokens-color-gray-1000)"
        )

    def test_failed_patch_changes_nothing(
        self, built_surface, token_index, sample_theme, monkeypatch, caplog
    ):
        """Test that an unpatchable plan leaves theme and surface untouched."""
        monkeypatch.setattr(
            core_colors,
            "plan_core_color_on_tones",
            lambda *args, **kwargs: {f"{CORE}alert-on-tone": "var(--not-a-token)"},
        )
        before = built_surface.snapshot()

        with caplog.at_level(logging.ERROR, logger="recursica_vars"):
            result = patch_core_color_on_tones(sample_theme, token_index, built_surface)

        assert result is None
        assert built_surface.snapshot() == before
        assert "Abandoned core on-tone patch" in caplog.text
        record = next(r for r in caplog.records if "Abandoned" in r.getMessage())
        assert record.exc_info is not None
        assert record.exc_info[0] is ValueError


class TestOnToneReference:
    """Tests for mapping on-tone vars back to theme references."""

    def test_core_colors(self):
        """Test core white and black."""
        assert on_tone_reference(f"var({CORE}white)", "light") == (
            "{brand.themes.light.palettes.core-colors.white.tone}"
        )

    def test_token_colors(self):
        """Test both token color categories."""
        assert on_tone_reference("var(--recursica-tokens-color-gray-1000)", "light") == (
            "{tokens.color.gray.1000}"
        )
        assert on_tone_reference("var(--recursica-tokens-colors-scale-01-700)", "dark") == (
            "{tokens.colors.scale-01.700}"
        )

    def test_other_values(self):
        """Test values without a reference."""
        assert on_tone_reference("#ffffff", "light") is None
        assert on_tone_reference("var(--other)", "light") is None
