"""Unit tests for the scaler module."""

import pytest

from recipe_book.ingredient_parser import parse_ingredient
from recipe_book.lexicon import MULTIPLIERS
from recipe_book.scaler import (
    format_multiplier,
    format_quantity,
    format_scale_info,
    scale_ingredient_text,
    scale_ingredients,
    validate_multiplier,
)


class TestFormatQuantity:
    """Tests for format_quantity function."""

    def test_half(self):
        assert format_quantity(0.5) == "½"

    def test_mixed_half(self):
        assert format_quantity(1.5) == "1½"

    def test_whole_number(self):
        assert format_quantity(2) == "2"
        assert format_quantity(2.0) == "2"

    def test_third_within_tolerance(self):
        assert format_quantity(1.33) == "1⅓"

    def test_no_matching_fraction_uses_decimal(self):
        assert format_quantity(1.7) == "1.7"

    @pytest.mark.parametrize(
        "value,expected",
        [
            (0.25, "¼"),
            (0.333, "⅓"),
            (0.667, "⅔"),
            (0.75, "¾"),
            (2.25, "2¼"),
            (3.75, "3¾"),
            (1.334, "1⅓"),
        ],
    )
    def test_fraction_glyphs(self, value, expected):
        assert format_quantity(value) == expected

    def test_trailing_zero_trimmed(self):
        assert format_quantity(0.999) == "1"

    def test_one_decimal(self):
        assert format_quantity(2.1) == "2.1"

    def test_zero(self):
        assert format_quantity(0) == "0"

    def test_large_value(self):
        assert format_quantity(1500) == "1500"


class TestValidateMultiplier:
    """Tests for validate_multiplier function."""

    def test_positive(self):
        assert validate_multiplier(1.5) == 1.5

    @pytest.mark.parametrize("value", [0, -1, float("inf"), float("nan")])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="positive"):
            validate_multiplier(value)


class TestScaleIngredientText:
    """Tests for scale_ingredient_text function."""

    def test_triple(self):
        assert scale_ingredient_text(parse_ingredient("2 כוסות קמח"), 3) == "6 כוסות קמח"

    def test_half_to_whole_number(self):
        assert scale_ingredient_text(parse_ingredient("2 כוסות קמח"), 0.5) == "1 כוסות קמח"

    def test_half_to_fraction(self):
        assert scale_ingredient_text(parse_ingredient("1 כוס סוכר"), 0.5) == "½ כוס סוכר"

    def test_mixed_number_doubled(self):
        assert scale_ingredient_text(parse_ingredient("1½ כפות שמרים"), 2) == "3 כפות שמרים"

    def test_no_unit(self):
        assert scale_ingredient_text(parse_ingredient("3 ביצים"), 2) == "6 ביצים"

    def test_third_doubled(self):
        assert scale_ingredient_text(parse_ingredient("⅓ כוס שמן"), 2) == "⅔ כוס שמן"

    def test_approximately_marker_dropped_when_scaled(self):
        assert scale_ingredient_text(parse_ingredient("כ-2 כוסות מים"), 2) == "4 כוסות מים"

    @pytest.mark.parametrize("multiplier", [0.5, 1, 2, 3, 1.25])
    def test_header_unchanged(self, multiplier):
        parsed = parse_ingredient("לבצק:")
        assert scale_ingredient_text(parsed, multiplier) == "לבצק:"

    @pytest.mark.parametrize("multiplier", [0.5, 2, 3])
    def test_no_quantity_unchanged(self, multiplier):
        parsed = parse_ingredient("קורט מלח")
        assert scale_ingredient_text(parsed, multiplier) == "קורט מלח"

    @pytest.mark.parametrize(
        "line", ["2 כוסות קמח", "  1.50 ליטר חלב ", "לבצק:", "קורט מלח", "כ-2 כוסות מים"]
    )
    def test_identity_at_one(self, line):
        assert scale_ingredient_text(parse_ingredient(line), 1) == line

    @pytest.mark.parametrize("line", ["2 כוסות קמח", "⅓ כוס שמן", "1½ כפות שמרים", "750 גרם גבינה"])
    def test_linearity(self, line):
        parsed = parse_ingredient(line)
        scaled = scale_ingredient_text(parsed, 2)
        assert scaled.split(" ")[0] == format_quantity(parsed.quantity * 2)

    def test_invalid_multiplier(self):
        with pytest.raises(ValueError):
            scale_ingredient_text(parse_ingredient("2 כוסות קמח"), 0)


class TestScaleIngredients:
    """Tests for scale_ingredients function."""

    def test_scales_list_and_keeps_headers(self):
        lines = ["לבסיס:", "1 חבילה ביסקוויטים", "קורט מלח", "750 גרם גבינה"]
        assert scale_ingredients(lines, 2) == [
            "לבסיס:",
            "2 חבילה ביסקוויטים",
            "קורט מלח",
            "1500 גרם גבינה",
        ]

    def test_empty_list(self):
        assert scale_ingredients([], 3) == []


class TestFormatScaleInfo:
    """Tests for format_scale_info and format_multiplier."""

    def test_offered_multipliers(self):
        assert [format_multiplier(m) for m in MULTIPLIERS] == ["½×", "1×", "2×", "3×"]

    def test_original(self):
        assert format_scale_info(1) == "Original recipe"

    def test_doubled(self):
        assert "Doubled" in format_scale_info(2)

    def test_halved(self):
        assert "Halved" in format_scale_info(0.5)

    def test_tripled(self):
        assert "Tripled" in format_scale_info(3)

    def test_custom(self):
        assert format_scale_info(1.5) == "Scaled 1½×"
