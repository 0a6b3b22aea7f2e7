from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..db import dialect_insert
from ..models import Favorite, Recipe


def add_favorite(db: Session, user_id: str, recipe_id: str) -> None:
    """Insert or do nothing: favoriting twice is harmless."""
    stmt = (
        dialect_insert(db, Favorite)
        .values(user_id=user_id, recipe_id=recipe_id)
        .on_conflict_do_nothing(index_elements=["user_id", "recipe_id"])
    )
    db.execute(stmt)
    db.commit()


def remove_favorite(db: Session, user_id: str, recipe_id: str) -> None:
    db.execute(
        delete(Favorite).where(Favorite.user_id == user_id, Favorite.recipe_id == recipe_id)
    )
    db.commit()


def list_favorites(db: Session, user_id: str, limit: int = 100) -> list[tuple[str, str]]:
    """(recipe_id, title) pairs, most recently favorited first."""
    stmt = (
        select(Recipe.id, Recipe.title)
        .join(Favorite, Favorite.recipe_id == Recipe.id)
        .where(Favorite.user_id == user_id)
        .order_by(Favorite.created_at.desc())
        .limit(limit)
    )
    return [(rid, title) for rid, title in db.execute(stmt)]
