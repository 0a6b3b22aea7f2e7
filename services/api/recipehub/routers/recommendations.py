from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..services.recommendations import clamp_limit, recommend_recipes

router = APIRouter()


@router.get("/recommendations", response_model=schemas.RecommendationsResponse)
def get_recommendations(
    limit: Optional[int] = Query(None),
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Random picks matching the caller's diet, minus anything cooked recently."""
    limit = clamp_limit(limit)
    return {"recipes": recommend_recipes(db, ctx.user_id, limit), "limit": limit}
