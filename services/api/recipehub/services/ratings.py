from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db import dialect_insert
from ..models import RecipeRating


def upsert_recipe_rating(
    db: Session,
    user_id: str,
    recipe_id: str,
    rating: int,
    comment: Optional[str] = None,
) -> None:
    """One rating per (user, recipe); a second call overwrites the first."""
    stmt = dialect_insert(db, RecipeRating).values(
        user_id=user_id, recipe_id=recipe_id, rating=rating, comment=comment
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "recipe_id"],
        set_={
            "rating": stmt.excluded.rating,
            "comment": stmt.excluded.comment,
            "updated_at": func.now(),
        },
    )
    db.execute(stmt)
    db.commit()


def list_recipe_ratings(db: Session, recipe_id: str) -> list[RecipeRating]:
    stmt = (
        select(RecipeRating)
        .where(RecipeRating.recipe_id == recipe_id)
        .order_by(RecipeRating.created_at.desc())
    )
    return list(db.scalars(stmt))


def get_recipe_average_rating(db: Session, recipe_id: str) -> Optional[float]:
    avg = db.scalar(
        select(func.avg(RecipeRating.rating)).where(RecipeRating.recipe_id == recipe_id)
    )
    if avg is None:
        return None
    return round(float(avg), 2)
