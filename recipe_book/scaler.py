"""Recipe scaling and quantity formatting."""

import math
from collections.abc import Iterable

from .ingredient_parser import ParsedIngredient, parse_ingredient
from .lexicon import FORMAT_FRACTIONS, FRACTION_TOLERANCE


def format_quantity(value: float) -> str:
    """
    Format a quantity the way it is written in recipe text.

    Examples:
        0.5 -> "½"
        1.5 -> "1½"
        2 -> "2"
        1.33 -> "1⅓"
        1.7 -> "1.7"

    Args:
        value: Non-negative quantity

    A fraction glyph is used when the fractional part is within tolerance
    of a canonical fraction, unless the one-decimal form is closer to the
    value (1.7 stays "1.7" rather than "1⅔").

    Returns:
        Whole number, fraction glyph (optionally after a whole part) or a
        one-decimal number
    """
    whole = math.floor(value)
    frac = value - whole
    decimal = f"{value:.1f}"
    decimal_error = abs(float(decimal) - value)

    for frac_value, glyph in FORMAT_FRACTIONS:
        error = abs(frac - frac_value)
        if error < FRACTION_TOLERANCE and error <= decimal_error:
            return f"{whole}{glyph}" if whole > 0 else glyph

    if value == whole:
        return str(whole)

    return decimal.removesuffix(".0")


def validate_multiplier(multiplier: float) -> float:
    """
    Check that a multiplier can be used for scaling.

    Raises:
        ValueError: If the multiplier is not a positive finite number
    """
    if not math.isfinite(multiplier) or multiplier <= 0:
        raise ValueError(f"Multiplier must be a positive number, got {multiplier}")
    return multiplier


def scale_ingredient_text(parsed: ParsedIngredient, multiplier: float) -> str:
    """
    Rewrite an ingredient line at the given multiplier.

    Headers, lines without a quantity and a multiplier of 1 return the
    original text unchanged.

    Args:
        parsed: Parsed ingredient line
        multiplier: Positive scale factor (e.g., 2 for double)

    Returns:
        Display text for the scaled ingredient
    """
    validate_multiplier(multiplier)

    if parsed.is_header or parsed.quantity is None or multiplier == 1:
        return parsed.original

    parts = [format_quantity(parsed.quantity * multiplier), parsed.unit, parsed.name]
    return " ".join(part for part in parts if part)


def scale_ingredients(lines: Iterable[str], multiplier: float) -> list[str]:
    """Scale every line of an ingredient list."""
    return [scale_ingredient_text(parse_ingredient(line), multiplier) for line in lines]


def format_multiplier(multiplier: float) -> str:
    """Format a multiplier for display (e.g., 0.5 -> "½×")."""
    return f"{format_quantity(multiplier)}×"


def format_scale_info(multiplier: float) -> str:
    """
    Format scaling information for display.

    Args:
        multiplier: The multiplier in use

    Returns:
        Human-readable scaling description
    """
    if multiplier == 1:
        return "Original recipe"
    if multiplier == 2:
        return "Doubled (2×)"
    if multiplier == 0.5:
        return "Halved (½×)"
    if multiplier == 3:
        return "Tripled (3×)"
    return f"Scaled {format_multiplier(multiplier)}"
