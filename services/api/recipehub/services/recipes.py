from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from ..models import Recipe, RecipeDietTag, RecipeIngredient
from ..schemas import RecipeCreate


@dataclass
class RecipeListFilters:
    query: Optional[str] = None
    diet: list[str] = field(default_factory=list)
    max_time_minutes: Optional[int] = None
    max_cost_cents: Optional[int] = None


def find_recipes(db: Session, filters: RecipeListFilters, limit: int = 20, offset: int = 0) -> list[Recipe]:
    """Approved recipes matching every given filter, newest first."""
    stmt = select(Recipe).where(Recipe.is_approved.is_(True))

    if filters.query:
        stmt = stmt.where(Recipe.title.ilike(f"%{filters.query}%"))
    if filters.diet:
        tagged = select(RecipeDietTag.recipe_id).where(
            RecipeDietTag.tag.in_([t.lower() for t in filters.diet])
        )
        stmt = stmt.where(Recipe.id.in_(tagged))
    if filters.max_time_minutes is not None:
        stmt = stmt.where(Recipe.total_time_minutes <= filters.max_time_minutes)
    if filters.max_cost_cents is not None:
        stmt = stmt.where(Recipe.cost_cents <= filters.max_cost_cents)

    stmt = stmt.order_by(Recipe.created_at.desc(), Recipe.id).limit(limit).offset(offset)
    return list(db.scalars(stmt))


def get_recipe(db: Session, recipe_id: str) -> Optional[Recipe]:
    stmt = (
        select(Recipe)
        .options(selectinload(Recipe.ingredients), selectinload(Recipe.diet_tags))
        .where(Recipe.id == recipe_id)
    )
    return db.scalar(stmt)


def build_recipe(data: RecipeCreate, *, is_approved: bool, author_user_id: Optional[str] = None) -> Recipe:
    recipe = Recipe(
        title=data.title.strip(),
        description=data.description,
        steps=list(data.steps),
        images=list(data.images),
        servings=data.servings,
        total_time_minutes=data.total_time_minutes,
        nutrition=data.nutrition or {},
        cost_cents=data.cost_cents,
        is_approved=is_approved,
        author_user_id=author_user_id,
    )
    recipe.ingredients = [
        RecipeIngredient(position=i, name=ing.name, quantity=ing.quantity, unit=ing.unit)
        for i, ing in enumerate(data.ingredients)
    ]
    tags = {t.strip().lower() for t in data.diet if t and t.strip()}
    recipe.diet_tags = [RecipeDietTag(tag=t) for t in sorted(tags)]
    return recipe


def create_recipe(db: Session, data: RecipeCreate, author_user_id: str) -> Recipe:
    """User submission. Starts unapproved until moderation."""
    recipe = build_recipe(data, is_approved=False, author_user_id=author_user_id)
    db.add(recipe)
    db.commit()
    db.refresh(recipe)
    return recipe


def set_recipe_approval(db: Session, recipe_id: str, is_approved: bool = True) -> bool:
    """Moderation flag. False when the recipe does not exist."""
    result = db.execute(
        update(Recipe).where(Recipe.id == recipe_id).values(is_approved=is_approved)
    )
    db.commit()
    return result.rowcount > 0
