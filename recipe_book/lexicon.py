"""Static tables for ingredient parsing, quantity formatting and categories."""

import re

# Measurement words, tested in order against the text after the quantity.
# Plural forms come before their singular so "כוסות" is not read as "כוס".
UNITS: tuple[str, ...] = (
    "כוסות",  # cups
    "כוס",  # cup
    "כפיות",  # teaspoons
    "כפית",  # teaspoon
    "כפות",  # tablespoons
    "כף",  # tablespoon
    "גרם",  # grams
    'ק"ג',  # kilograms
    "קילו",  # kilo
    "ליטר",  # liter
    'מ"ל',  # milliliters
    "חבילות",  # packages
    "חבילה",  # package
    "שקיות",  # bags
    "שקית",  # bag
    "יחידות",  # units
    "יחידה",  # unit
)

# Fraction glyphs and mixed numbers to decimal values
FRACTIONS: dict[str, float] = {
    "½": 0.5,
    "¼": 0.25,
    "¾": 0.75,
    "⅓": 0.333,
    "⅔": 0.667,
    "1½": 1.5,
    "1¼": 1.25,
    "1¾": 1.75,
    "2½": 2.5,
    "2¼": 2.25,
    "2¾": 2.75,
    "3½": 3.5,
}

FRACTION_GLYPHS = "½¼¾⅓⅔"

# Canonical fractional parts used when rendering a quantity, ascending
FORMAT_FRACTIONS: tuple[tuple[float, str], ...] = (
    (0.25, "¼"),
    (0.333, "⅓"),
    (0.5, "½"),
    (0.667, "⅔"),
    (0.75, "¾"),
)

FRACTION_TOLERANCE = 0.05

# "approximately" prefix: "כ" or "כ-"
APPROX_MARKER = "כ"

QUANTITY_PATTERN = re.compile(
    rf"^({APPROX_MARKER}-?)?([0-9{FRACTION_GLYPHS}]+(?:[./][0-9{FRACTION_GLYPHS}]+)?)\s*(.*)",
    re.DOTALL,
)

SECTION_NOUNS: tuple[str, ...] = (
    "מילוי",  # filling
    "ציפוי",  # coating
    "רוטב",  # sauce
    "קרם",  # cream
    "בצק",  # dough
    "בסיס",  # base
    "שכבת",  # layer of
    "תמהיל",  # mix
    "תערובת",  # mixture
)

HEADER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^ל\S+:"),  # "לבצק:", "לקרם:", "למילוי:"
    re.compile(rf"^({'|'.join(SECTION_NOUNS)})\b.*:", re.IGNORECASE),
    re.compile(r"^[^0-9]+:$"),  # no digits at all, ends with a colon
)

# Multipliers offered by the recipe view
MULTIPLIERS: tuple[float, ...] = (0.5, 1, 2, 3)

ALL_CATEGORIES = "all"

# (id, display name, emoji) in display order
CATEGORY_TABLE: tuple[tuple[str, str, str], ...] = (
    (ALL_CATEGORIES, "הכל", "📖"),
    ("cookies", "עוגיות", "🍪"),
    ("cakes", "עוגות", "🎂"),
    ("breads", "לחמים", "🍞"),
    ("doughs", "בצקים", "🥐"),
    ("creams", "קרמים", "🍮"),
    ("misc", "שונות", "🍽️"),
)

CATEGORY_IDS: frozenset[str] = frozenset(cid for cid, _, _ in CATEGORY_TABLE if cid != ALL_CATEGORIES)
