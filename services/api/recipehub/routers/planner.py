"""
Router for the weekly meal plan and its grocery list.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..services.grocery import aggregate_grocery_list, collect_planned_ingredients
from ..services.planner import (
    InvalidDateRange,
    PlannedMealInput,
    compute_week_end_inclusive,
    list_planned_meals,
    parse_week_start,
    replace_range,
)
from ..services.prices import price_grocery_items

router = APIRouter()
logger = logging.getLogger("recipehub.planner")


@router.get("/week", response_model=schemas.WeekPlanOut)
def get_week(
    week_start: Optional[str] = Query(None, alias="weekStart"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    try:
        start = parse_week_start(week_start)
        end = compute_week_end_inclusive(start)
        items = list_planned_meals(db, ctx.user_id, start, end)
    except InvalidDateRange as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"week_start": start, "week_end": end, "items": items}


@router.put("/week", status_code=204)
def put_week(
    body: schemas.WeekPlanReplace,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Replace the whole week starting at body.week_start. All or nothing."""
    start = body.week_start
    end = compute_week_end_inclusive(start)
    items = [
        PlannedMealInput(
            date=i.date, meal_slot=i.meal_slot, recipe_id=i.recipe_id, servings=i.servings
        )
        for i in body.items
    ]
    try:
        replace_range(db, ctx.user_id, start, end, items)
    except InvalidDateRange as e:
        raise HTTPException(status_code=400, detail=str(e))
    except IntegrityError:
        logger.warning(f"Plan replace for user {ctx.user_id} rejected: unknown recipe")
        raise HTTPException(status_code=400, detail="Unknown recipe in plan")
    return Response(status_code=204)


@router.get("/week/grocery-list", response_model=schemas.GroceryListResponse)
def get_week_grocery_list(
    week_start: Optional[str] = Query(None, alias="weekStart"),
    include_cost: bool = Query(False, alias="includeCost"),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Aggregated ingredients for the week, scaled to each meal's servings.

    With includeCost=true each line also gets the cheapest matching offer.
    """
    try:
        start = parse_week_start(week_start)
    except InvalidDateRange as e:
        raise HTTPException(status_code=400, detail=str(e))
    end = compute_week_end_inclusive(start)

    meals = list_planned_meals(db, ctx.user_id, start, end)
    lines = aggregate_grocery_list(collect_planned_ingredients(db, meals))

    resp = {
        "week_start": start,
        "week_end": end,
        "items": [
            {"name": l.name, "total_quantity": l.total_quantity, "unit": l.unit}
            for l in lines
        ],
        "pricing": None,
    }
    if include_cost:
        resp["pricing"] = price_grocery_items(db, lines)
    return resp
