from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class IngredientItem:
    name: str
    quantity: float
    unit: str


def round_quantity(value: float) -> float:
    """Round to 2 decimals, exact halves away from zero (0.125 -> 0.13)."""
    return float(Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def scale_ingredients(
    ingredients: Sequence[IngredientItem],
    original_servings: int,
    new_servings: int,
) -> list[IngredientItem]:
    """
    Rescale quantities from original_servings to new_servings.

    Non-positive serving counts are a no-op: the input comes back unchanged.
    Quantities are rounded to 2 decimals; names, units and order are kept.
    """
    if original_servings <= 0 or new_servings <= 0:
        return list(ingredients)

    factor = new_servings / original_servings
    return [replace(i, quantity=round_quantity(i.quantity * factor)) for i in ingredients]
