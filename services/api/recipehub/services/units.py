"""
Unit normalization for ingredient quantities and grocery package sizes.

Mass, volume and count are separate classes. Nothing ever converts between
them: a price per gram and a price per millilitre are not comparable.
"""

import math
from typing import Optional, Tuple

# --- Data Tables ---

# Normalized unit -> (base unit, factor_to_base)
# Base units: g (mass), ml (volume), pcs (count)
BASE_UNITS = {
    # Mass (base: g)
    "g": ("g", 1.0),
    "kg": ("g", 1000.0),

    # Volume (base: ml)
    "ml": ("ml", 1.0),
    "l": ("ml", 1000.0),

    # Count (base: pcs)
    "pcs": ("pcs", 1.0),
}

# Store labels and spelled-out forms seen in scraped data (en / lv)
SYNONYMS = {
    "gram": "g",
    "grams": "g",
    "kilogram": "kg",
    "kilograms": "kg",
    "milliliter": "ml",
    "milliliters": "ml",
    "liter": "l",
    "liters": "l",
    "pc": "pcs",
    "piece": "pcs",
    "pieces": "pcs",
    "gab": "pcs",
    "gab.": "pcs",
    "gabali": "pcs",
}

# --- Core Functions ---

def normalize_unit(unit: Optional[str]) -> Optional[str]:
    """Normalize a unit string to a key in BASE_UNITS, or None if unknown."""
    if not unit:
        return None

    u = str(unit).strip().lower()
    if u in BASE_UNITS:
        return u
    if u in SYNONYMS:
        return SYNONYMS[u]
    return None


def base_unit(unit: Optional[str]) -> Optional[str]:
    """Base unit ("g", "ml", "pcs") the given unit converts to, or None."""
    norm = normalize_unit(unit)
    if norm is None:
        return None
    return BASE_UNITS[norm][0]


def to_base(quantity: float, unit: str) -> Tuple[float, str]:
    """
    Convert a quantity to its base unit.

    Unknown units pass through unchanged so they still group with
    themselves, e.g. (2, "tbsp") -> (2, "tbsp").
    """
    norm = normalize_unit(unit)
    if norm is None:
        return quantity, unit
    base, factor = BASE_UNITS[norm]
    return quantity * factor, base


def size_in_base(size_value: Optional[float], size_unit: str, target_base: str) -> Optional[float]:
    """
    Package size expressed in target_base, or None if the package cannot be
    compared (incompatible unit, missing, zero, negative or non-finite size).
    """
    if size_value is None:
        return None
    try:
        value = float(size_value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None

    norm = normalize_unit(size_unit)
    if norm is None:
        return None
    base, factor = BASE_UNITS[norm]
    if base != target_base:
        return None
    return value * factor
