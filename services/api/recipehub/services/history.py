from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import CookHistory


def add_cook_history(
    db: Session,
    user_id: str,
    recipe_id: str,
    cooked_at: Optional[datetime] = None,
) -> CookHistory:
    """Record that a user cooked a recipe."""
    entry = CookHistory(
        user_id=user_id,
        recipe_id=recipe_id,
        cooked_at=cooked_at or datetime.now(timezone.utc),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def get_recent_cooked_recipe_ids(
    db: Session,
    user_id: str,
    days: int,
    now: Optional[datetime] = None,
) -> list[str]:
    """Distinct recipe ids the user cooked within the last `days` days."""
    cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=days)
    stmt = (
        select(CookHistory.recipe_id)
        .where(CookHistory.user_id == user_id, CookHistory.cooked_at >= cutoff)
        .distinct()
    )
    return list(db.scalars(stmt))
