from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from ..models import Favorite, Recipe, RecipeRating, User


def get_site_stats(db: Session) -> dict:
    avg = db.scalar(select(func.avg(RecipeRating.rating)))
    return {
        "total_users": db.scalar(select(func.count()).select_from(User)) or 0,
        "total_recipes": db.scalar(select(func.count()).select_from(Recipe)) or 0,
        "total_chefs": db.scalar(
            select(func.count(distinct(Recipe.author_user_id))).where(
                Recipe.author_user_id.is_not(None)
            )
        ) or 0,
        "total_favorites": db.scalar(select(func.count()).select_from(Favorite)) or 0,
        "average_rating": round(float(avg), 1) if avg is not None else 0.0,
    }
