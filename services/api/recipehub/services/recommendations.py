"""
Recipe recommendations.

Heuristic: keep recipes sharing at least one diet tag with the user's
preferences (no diet filter when the user has none), drop anything cooked in
the recent window, shuffle, truncate.
"""

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..models import Recipe, RecipeDietTag
from ..settings import settings
from .history import get_recent_cooked_recipe_ids
from .preferences import get_user_preferences

logger = logging.getLogger("recipehub.recommendations")

MIN_LIMIT = 1
MAX_LIMIT = 50


def clamp_limit(limit: Optional[int]) -> int:
    if limit is None:
        return settings.recommendation_default_limit
    return min(max(int(limit), MIN_LIMIT), MAX_LIMIT)


def recommend_recipes(db: Session, user_id: str, limit: Optional[int] = None) -> list[Recipe]:
    """
    Up to `limit` (clamped to 1..50) approved recipes for the user, in random order.

    Lookup failures for preferences or history propagate: a broken lookup
    must not silently look like "no preferences".
    """
    limit = clamp_limit(limit)
    prefs = get_user_preferences(db, user_id)
    recent = get_recent_cooked_recipe_ids(db, user_id, settings.recommendation_window_days)

    stmt = select(Recipe).where(Recipe.is_approved.is_(True))

    if prefs.diet_preferences:
        tagged = select(RecipeDietTag.recipe_id).where(
            RecipeDietTag.tag.in_(prefs.diet_preferences)
        )
        stmt = stmt.where(Recipe.id.in_(tagged))
    if recent:
        stmt = stmt.where(Recipe.id.not_in(recent))

    stmt = stmt.order_by(func.random()).limit(limit)
    recipes = list(db.scalars(stmt))

    logger.info(
        f"Recommended {len(recipes)} recipes for user {user_id} "
        f"(diet={prefs.diet_preferences}, excluded_recent={len(recent)})"
    )
    return recipes
