"""Heuristic parser for free-text ingredient lines such as "2 cups flour"."""

import re
from dataclasses import dataclass

DEFAULT_QUANTITY = "1"
DEFAULT_UNIT = "unit"
FALLBACK_NAME = "ingredient"

# Scanned in order; the first word found in the line is the unit
UNIT_WORDS: list[str] = [
    "cup",
    "cups",
    "tbsp",
    "tablespoon",
    "tablespoons",
    "tsp",
    "teaspoon",
    "teaspoons",
    "pound",
    "pounds",
    "lb",
    "lbs",
    "ounce",
    "ounces",
    "oz",
    "gram",
    "grams",
    "g",
    "kilogram",
    "kilograms",
    "kg",
    "ml",
    "milliliter",
    "milliliters",
    "l",
    "liter",
    "liters",
]

# Plural spellings reported as their singular form
_SINGULAR: dict[str, str] = {
    "cups": "cup",
    "tablespoons": "tablespoon",
    "teaspoons": "teaspoon",
    "pounds": "pound",
    "lbs": "lb",
    "ounces": "ounce",
    "grams": "gram",
    "kilograms": "kilogram",
    "milliliters": "milliliter",
    "liters": "liter",
}

QUANTITY_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?(?:/\d+)?)\s*")
_UNIT_PATTERNS = [(unit, re.compile(rf"\b{re.escape(unit)}\b", re.IGNORECASE)) for unit in UNIT_WORDS]
_ALL_UNITS_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(u) for u in sorted(UNIT_WORDS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedIngredientLine:
    """Best-effort quantity/unit/name triple."""

    quantity: str
    unit: str
    name: str


def extract_quantity(line: str) -> str:
    """Get the leading numeric quantity, or "1" when there is none."""
    match = QUANTITY_PATTERN.match(line)
    return match.group(1) if match else DEFAULT_QUANTITY


def _strip_quantities(line: str) -> str:
    """Drop leading numbers, including mixed numbers such as "2 1/2"."""
    rest = line
    while QUANTITY_PATTERN.match(rest):
        stripped = QUANTITY_PATTERN.sub("", rest, count=1)
        if stripped == rest:
            break
        rest = stripped
    return rest


def extract_unit(line: str) -> str:
    """Get the first known unit word after the quantity, or "unit".

    Units written against the number ("500g", "2tbsp") are found too.
    """
    rest = _strip_quantities(line)
    for unit, pattern in _UNIT_PATTERNS:
        if pattern.search(rest):
            return _SINGULAR.get(unit, unit)
    return DEFAULT_UNIT


def extract_name(line: str) -> str:
    """Strip the quantity and unit words and collapse whitespace."""
    without_quantity = _strip_quantities(line)
    name = _ALL_UNITS_PATTERN.sub(" ", without_quantity)
    name = _WHITESPACE.sub(" ", name).strip()
    if not name:
        # e.g. "2 cups": keep whatever text followed the number
        name = _WHITESPACE.sub(" ", without_quantity).strip()
    return name or FALLBACK_NAME


def parse_ingredient_line(line: str) -> ParsedIngredientLine:
    """
    Parse one free-text ingredient line.

    Never raises; malformed input yields defaults.

    Args:
        line: Text such as "2 cups flour" or "salt".

    Returns:
        ParsedIngredientLine with quantity, unit and name.
    """
    line = (line or "").strip()
    return ParsedIngredientLine(
        quantity=extract_quantity(line),
        unit=extract_unit(line),
        name=extract_name(line),
    )
