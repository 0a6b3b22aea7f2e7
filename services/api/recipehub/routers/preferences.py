"""
Router for user preferences and the profile summary.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..services.favorites import list_favorites
from ..services.preferences import get_user_preferences, upsert_user_preferences

router = APIRouter()


@router.get("/preferences", response_model=schemas.PreferencesOut)
def get_preferences(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Current preferences; defaults when never saved."""
    return asdict(get_user_preferences(db, ctx.user_id))


@router.put("/preferences", status_code=204)
def update_preferences(
    update: schemas.PreferencesUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    upsert_user_preferences(db, ctx.user_id, update.diet_preferences, update.budget_cents)
    return Response(status_code=204)


@router.get("/profile", response_model=schemas.ProfileOut)
def get_profile(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    prefs = get_user_preferences(db, ctx.user_id)
    favs = list_favorites(db, ctx.user_id, limit=100)
    return {
        "user_id": ctx.user_id,
        "locale": ctx.locale,
        "preferences": asdict(prefs),
        "favorites": [rid for rid, _ in favs],
    }
