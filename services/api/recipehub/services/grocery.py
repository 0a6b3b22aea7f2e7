"""Grocery list aggregation across a week of planned meals."""

from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.orm import Session, selectinload

from ..models import Recipe
from ..settings import settings
from .scaling import IngredientItem, round_quantity, scale_ingredients
from .units import to_base


@dataclass(frozen=True)
class GroceryLine:
    name: str
    total_quantity: float
    unit: str


def aggregate_grocery_list(ingredients: Iterable[IngredientItem]) -> list[GroceryLine]:
    """
    Sum ingredient quantities per (lowercased name, base unit).

    "1 kg flour" and "500 g Flour" merge into "flour 1500 g". Unknown units
    group only with themselves. Output keeps first-seen order.
    """
    totals: dict[tuple[str, str], float] = {}
    for ing in ingredients:
        value, base = to_base(ing.quantity, ing.unit)
        key = (ing.name.strip().lower(), base)
        totals[key] = totals.get(key, 0.0) + value

    return [
        GroceryLine(name=name, total_quantity=round_quantity(value), unit=base)
        for (name, base), value in totals.items()
    ]


def collect_planned_ingredients(db: Session, planned_meals) -> list[IngredientItem]:
    """Scale each planned recipe to its servings override and flatten the ingredients."""
    recipe_ids = {pm.recipe_id for pm in planned_meals}
    if not recipe_ids:
        return []

    recipes = {
        r.id: r
        for r in db.query(Recipe)
        .options(selectinload(Recipe.ingredients))
        .filter(Recipe.id.in_(recipe_ids))
        .all()
    }

    collected: list[IngredientItem] = []
    for pm in planned_meals:
        recipe = recipes.get(pm.recipe_id)
        if not recipe:
            continue
        base_servings = recipe.servings or settings.default_servings
        servings = pm.servings or base_servings
        items = [IngredientItem(i.name, i.quantity, i.unit) for i in recipe.ingredients]
        if servings != base_servings:
            items = scale_ingredients(items, base_servings, servings)
        collected.extend(items)
    return collected
