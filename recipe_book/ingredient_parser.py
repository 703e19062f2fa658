"""Ingredient line parsing for Hebrew recipe text."""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .lexicon import FRACTION_GLYPHS, FRACTIONS, HEADER_PATTERNS, QUANTITY_PATTERN, UNITS

_LEADING_NUMBER = re.compile(r"^\d+(?:\.\d+)?")
_SIMPLE_FRACTION = re.compile(r"^(\d+)/(\d+)$")
_MIXED_NUMBER = re.compile(rf"^(\d+)([{FRACTION_GLYPHS}])$")


@dataclass(frozen=True)
class ParsedIngredient:
    """Structured view of one ingredient line."""

    original: str  # Line exactly as written
    quantity: float | None
    unit: str | None
    name: str
    is_header: bool = False

    @property
    def is_scalable(self) -> bool:
        return not self.is_header and self.quantity is not None


def is_group_header(line: str) -> bool:
    """Check if a line names a sub-section (e.g. "לבצק:") rather than an ingredient."""
    trimmed = line.strip()
    return any(pattern.search(trimmed) for pattern in HEADER_PATTERNS)


def quantity_value(token: str) -> float | None:
    """
    Convert a numeral token to its value.

    Examples:
        "2" -> 2.0
        "1.5" -> 1.5
        "½" -> 0.5
        "1½" -> 1.5
        "1/2" -> 0.5
        "½½" -> None

    Returns:
        The numeric value, or None if the token is not a number
    """
    if token in FRACTIONS:
        return FRACTIONS[token]

    mixed = _MIXED_NUMBER.match(token)
    if mixed:
        return int(mixed.group(1)) + FRACTIONS[mixed.group(2)]

    fraction = _SIMPLE_FRACTION.match(token)
    if fraction:
        denominator = int(fraction.group(2))
        if denominator == 0:
            return None
        return int(fraction.group(1)) / denominator

    # Longest leading decimal, so "5½" reads as 5
    number = _LEADING_NUMBER.match(token)
    if number:
        return float(number.group(0))

    return None


def parse_quantity(text: str) -> tuple[float | None, str, bool]:
    """
    Parse a quantity from the beginning of an ingredient string.

    An optional "approximately" marker ("כ" / "כ-") may precede the number.

    Returns:
        Tuple of (quantity, remaining_text, matched). ``matched`` is False
        when the line does not start with a numeral at all.
    """
    match = QUANTITY_PATTERN.match(text.strip())
    if not match:
        return None, text.strip(), False

    return quantity_value(match.group(2)), match.group(3), True


def parse_unit(text: str) -> tuple[str | None, str]:
    """
    Parse a measurement word from the beginning of text.

    Returns:
        Tuple of (unit, remaining_text)
    """
    for unit in UNITS:
        if text.startswith(unit + " ") or text == unit:
            return unit, text[len(unit) :].strip()

    return None, text


def parse_ingredient(line: str) -> ParsedIngredient:
    """
    Parse a single ingredient line into structured data.

    Never raises: a line without a leading number is returned unscalable,
    with the trimmed line as its name.

    Args:
        line: Raw ingredient text (e.g., "2 כוסות קמח")

    Returns:
        ParsedIngredient with quantity, unit and name
    """
    if is_group_header(line):
        return ParsedIngredient(original=line, quantity=None, unit=None, name=line, is_header=True)

    trimmed = line.strip()
    quantity, remaining, matched = parse_quantity(trimmed)
    if not matched:
        return ParsedIngredient(original=line, quantity=None, unit=None, name=trimmed)

    unit, name = parse_unit(remaining)

    return ParsedIngredient(
        original=line,
        quantity=quantity,
        unit=unit,
        name=name or trimmed,
    )


def parse_ingredients(lines: Iterable[str]) -> list[ParsedIngredient]:
    """Parse every line of an ingredient list, headers included."""
    return [parse_ingredient(line) for line in lines]


def count_ingredients(lines: Iterable[str]) -> int:
    """Count ingredient lines, ignoring group headers."""
    return sum(1 for line in lines if not is_group_header(line))
