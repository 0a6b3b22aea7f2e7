from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.orm import Session

from ..models import UserPreferences as UserPreferencesRow


@dataclass
class UserPreferences:
    user_id: str
    diet_preferences: list[str] = field(default_factory=list)
    budget_cents: Optional[int] = None


def get_user_preferences(db: Session, user_id: str) -> UserPreferences:
    """Stored preferences, or empty defaults when the user never saved any."""
    row = db.get(UserPreferencesRow, user_id)
    if row is None:
        return UserPreferences(user_id=user_id)
    return UserPreferences(
        user_id=row.user_id,
        diet_preferences=list(row.diet_preferences or []),
        budget_cents=row.budget_cents,
    )


def upsert_user_preferences(
    db: Session,
    user_id: str,
    diet_preferences: list[str],
    budget_cents: Optional[int] = None,
) -> UserPreferences:
    # merge() resolves the row by primary key: insert when absent, update otherwise
    row = db.merge(
        UserPreferencesRow(
            user_id=user_id,
            diet_preferences=list(diet_preferences),
            budget_cents=budget_cents,
        )
    )
    db.commit()
    return UserPreferences(
        user_id=row.user_id,
        diet_preferences=list(row.diet_preferences or []),
        budget_cents=row.budget_cents,
    )
