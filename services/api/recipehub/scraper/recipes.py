import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import transaction
from ..models import Recipe
from ..schemas import IngredientIn, RecipeCreate
from ..services.recipes import build_recipe

logger = logging.getLogger("recipehub.scraper.recipes")

SAMPLE_RECIPES = [
    RecipeCreate(
        title="Rupjmaize Trifle (Rupjmaizes kārtojums)",
        description="Traditional Latvian rye bread dessert layered with whipped cream and berries.",
        steps=[
            "Crumble rye bread into fine crumbs",
            "Whip cream with sugar",
            "Layer bread crumbs, jam, and cream in glasses",
            "Chill and serve with berries",
        ],
        servings=2,
        diet=["vegetarian"],
        ingredients=[
            IngredientIn(name="Rye bread", quantity=200, unit="g"),
            IngredientIn(name="Whipping cream", quantity=300, unit="ml"),
            IngredientIn(name="Jam", quantity=150, unit="g"),
        ],
    ),
    RecipeCreate(
        title="Grey peas with bacon (Pelēkie zirņi ar speķi)",
        description="Classic Latvian winter dish of grey peas with crispy bacon and onions.",
        steps=[
            "Soak peas overnight and boil until tender",
            "Fry bacon with onions",
            "Combine with peas, season, and serve hot",
        ],
        servings=2,
        ingredients=[
            IngredientIn(name="Grey peas", quantity=500, unit="g"),
            IngredientIn(name="Bacon", quantity=200, unit="g"),
            IngredientIn(name="Onion", quantity=1, unit="pcs"),
        ],
    ),
]


def seed_sample_recipes(db: Session, recipes=SAMPLE_RECIPES) -> int:
    """Insert approved sample recipes, skipping titles already present."""
    created = 0
    with transaction(db):
        for data in recipes:
            exists = db.scalar(select(Recipe.id).where(Recipe.title == data.title))
            if exists:
                logger.info(f"Skipping existing recipe '{data.title}'")
                continue
            db.add(build_recipe(data, is_approved=True))
            created += 1
    logger.info(f"Seeded {created} sample recipes")
    return created
