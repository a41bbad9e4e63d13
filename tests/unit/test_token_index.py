"""Unit tests for the token index."""

import pytest

from recursica_vars.models import ColorTokenRef
from recursica_vars.token_index import TokenIndex, build_token_index, to_number


class TestTokenLookup:
    """Tests for TokenIndex.get."""

    def test_color_path(self, token_index):
        """Test a direct color lookup."""
        assert token_index.get("color/gray/500") == "#808080"

    def test_plural_category_alias(self, token_index):
        """Test that colors/ and color/ are interchangeable."""
        assert token_index.get("colors/gray/500") == "#808080"
        assert token_index.get("opacities/smoky") == 0.6
        assert token_index.get("sizes/md") == 16

    def test_scale_family(self, token_index):
        """Test lookups through the scale schema and its alias."""
        assert token_index.get("colors/scale-01/700") == "#15803d"
        assert token_index.get("color/green/500") == "#22c55e"

    def test_font_kind_alias(self, token_index):
        """Test singular font kinds reading plural sections."""
        assert token_index.get("font/weight/bold") == 700
        assert token_index.get("font/typefaces/secondary") == "Inter"

    @pytest.mark.parametrize(
        "path",
        ["", "color/gray", "color/gray/555", "size", "font/unknown/x", "unknown/x"],
    )
    def test_missing(self, token_index, path):
        """Test that unknown paths return None."""
        assert token_index.get(path) is None
        assert not token_index.has(path)

    def test_plain_scalar_leaves(self):
        """Test sources without $value wrappers."""
        index = TokenIndex({"color": {"gray": {"500": "#808080"}}})

        assert index.get("color/gray/500") == "#808080"
        assert index.find_color_by_hex("#808080") == ColorTokenRef("gray", "500")

    def test_overrides(self, sample_tokens):
        """Test that overrides win over the source."""
        index = build_token_index(sample_tokens, {"color.gray.500": "#111111"})

        assert index.get("color/gray/500") == "#111111"
        assert index.get("color/gray/600") == "#666666"


class TestColorHelpers:
    """Tests for color family helpers."""

    def test_find_color_by_hex(self, token_index):
        """Test reverse lookup, including case and shorthand input."""
        assert token_index.find_color_by_hex("#808080") == ColorTokenRef("gray", "500")
        assert token_index.find_color_by_hex("#FFF") == ColorTokenRef("gray", "000")
        assert token_index.find_color_by_hex("#22C55E") == ColorTokenRef("scale-01", "500")

    def test_find_color_by_hex_miss(self, token_index):
        """Test unknown and invalid colors."""
        assert token_index.find_color_by_hex("#123456") is None
        assert token_index.find_color_by_hex("var(--x)") is None

    def test_color_families(self, token_index):
        """Test the family listing."""
        assert token_index.color_families() == [
            ("color", "gray"),
            ("color", "blue"),
            ("color", "red"),
            ("colors", "scale-01"),
        ]

    def test_color_category(self, token_index):
        """Test which category holds a family."""
        assert token_index.color_category("gray") == "color"
        assert token_index.color_category("scale-01") == "colors"
        assert token_index.color_category("green") == "color"
        assert token_index.color_category("pink") is None

    def test_family_alias(self, token_index):
        """Test scale alias lookup."""
        assert token_index.family_alias("scale-01") == "green"
        assert token_index.family_alias("gray") is None

    def test_color_hex(self, token_index):
        """Test normalized hex lookup."""
        assert token_index.color_hex("blue", "500") == "#3b82f6"
        assert token_index.color_hex("blue", "600") is None


class TestEntries:
    """Tests for category listings."""

    def test_numeric_entries(self, token_index):
        """Test numeric size entries."""
        assert token_index.numeric_entries("size") == {
            "none": 0.0,
            "sm": 8.0,
            "md": 16.0,
            "lg": 24.0,
        }

    def test_font_entries(self, token_index):
        """Test font entries report the stored kind."""
        kind, entries = token_index.font_entries("weight")

        assert kind == "weights"
        assert entries == {"regular": 400, "bold": 700}

    def test_font_entries_missing_kind(self, token_index):
        """Test an absent font kind."""
        assert token_index.font_entries("styles") == (None, {})

    def test_size_category(self, token_index):
        """Test the size category spelling."""
        assert token_index.size_category() == "size"
        assert TokenIndex({"sizes": {"md": 16}}).size_category() == "sizes"

    def test_leaves_skip_alias(self, token_index):
        """Test that leaves cover values but not scale aliases."""
        leaves = dict(token_index.leaves())

        assert leaves[("color", "gray", "500")] == "#808080"
        assert leaves[("font", "typefaces", "primary")] == ["Open Sans", "sans-serif"]
        assert ("colors", "scale-01", "alias") not in leaves


class TestToNumber:
    """Tests for to_number."""

    @pytest.mark.parametrize(
        "value,expected",
        [(16, 16.0), (0.5, 0.5), ("16", 16.0), ("16px", 16.0), (" 8 PX ", 8.0)],
    )
    def test_numbers(self, value, expected):
        """Test parseable values."""
        assert to_number(value) == expected

    @pytest.mark.parametrize("value", [True, None, "abc", "1rem", [1]])
    def test_non_numbers(self, value):
        """Test rejected values."""
        assert to_number(value) is None
