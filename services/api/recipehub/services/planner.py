"""
Weekly meal planning.

A week plan is every PlannedMeal of one user whose date falls in a 7-day
inclusive window. Replacing a range is all-or-nothing: the old rows in the
range are deleted and the new rows inserted in one transaction.

Two concurrent replaces for the same user over overlapping ranges are not
serialized here; the later commit wins.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Union

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..db import transaction
from ..models import MEAL_SLOTS, PlannedMeal

logger = logging.getLogger("recipehub.planner")

WEEK_LENGTH_DAYS = 7

# YYYY-MM-DD, optionally followed by an ISO time part
WEEK_START_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})(T.*)?$")


class InvalidDateRange(ValueError):
    """Malformed date, start after end, or an item outside the range."""


@dataclass(frozen=True)
class PlannedMealInput:
    date: date
    meal_slot: str
    recipe_id: str
    servings: Optional[int] = None


def parse_week_start(value: Union[str, date, None]) -> date:
    """Strict YYYY-MM-DD calendar date; a trailing "T..." time part is ignored."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    m = WEEK_START_RE.match(str(value or "").strip())
    if not m:
        raise InvalidDateRange("weekStart (YYYY-MM-DD) is required")
    try:
        return datetime.strptime(m.group(1), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDateRange("weekStart (YYYY-MM-DD) is required")


def compute_week_end_inclusive(week_start: Union[str, date]) -> date:
    """Last day of the 7-day window starting at week_start.

    Pure calendar arithmetic on dates, so DST shifts cannot move the result.
    """
    start = parse_week_start(week_start)
    return start + timedelta(days=WEEK_LENGTH_DAYS - 1)


def list_planned_meals(db: Session, user_id: str, start: date, end: date) -> list[PlannedMeal]:
    if start > end:
        raise InvalidDateRange(f"start {start} is after end {end}")
    stmt = (
        select(PlannedMeal)
        .where(
            PlannedMeal.user_id == user_id,
            PlannedMeal.planned_date >= start,
            PlannedMeal.planned_date <= end,
        )
        .order_by(PlannedMeal.planned_date.asc(), PlannedMeal.meal_slot.asc())
    )
    return list(db.scalars(stmt))


def _validate_items(start: date, end: date, items: Sequence[PlannedMealInput]) -> None:
    for item in items:
        if not (start <= item.date <= end):
            raise InvalidDateRange(f"planned date {item.date} outside {start}..{end}")
        if item.meal_slot not in MEAL_SLOTS:
            raise InvalidDateRange(f"unknown meal slot '{item.meal_slot}'")


def replace_range(
    db: Session,
    user_id: str,
    start: date,
    end: date,
    items: Sequence[PlannedMealInput],
) -> list[PlannedMeal]:
    """
    Atomically replace the user's planned meals in [start, end].

    Raises InvalidDateRange before touching storage. Storage errors (e.g. an
    unknown recipe id) roll back the deletes as well and then propagate.
    """
    if start > end:
        raise InvalidDateRange(f"start {start} is after end {end}")
    _validate_items(start, end, items)

    with transaction(db):
        db.execute(
            delete(PlannedMeal).where(
                PlannedMeal.user_id == user_id,
                PlannedMeal.planned_date >= start,
                PlannedMeal.planned_date <= end,
            )
        )
        rows = [
            PlannedMeal(
                user_id=user_id,
                recipe_id=item.recipe_id,
                planned_date=item.date,
                meal_slot=item.meal_slot,
                servings=item.servings,
            )
            for item in items
        ]
        db.add_all(rows)
        db.flush()

    logger.info(f"Replaced plan for user {user_id} {start}..{end} with {len(rows)} meals")
    return rows
