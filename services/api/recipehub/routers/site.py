from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..services.challenges import list_challenges
from ..services.stats import get_site_stats

router = APIRouter()


@router.get("/stats", response_model=schemas.StatsOut)
def stats(db: Session = Depends(get_db)):
    return get_site_stats(db)


@router.get("/challenges", response_model=schemas.ChallengesResponse)
def challenges(db: Session = Depends(get_db)):
    return {"challenges": list_challenges(db)}


@router.get("/billing/status", response_model=schemas.BillingStatusOut)
def billing_status(ctx: RequestContext = Depends(get_request_context)):
    """Premium flag; an unexpired premium_expires_at also counts."""
    user = ctx.user
    expires = user.premium_expires_at
    if expires is not None and expires.tzinfo is None:
        # SQLite hands back naive datetimes
        expires = expires.replace(tzinfo=timezone.utc)
    active = bool(user.is_premium) or (expires is not None and expires > datetime.now(timezone.utc))
    return {"is_premium": active, "premium_expires_at": user.premium_expires_at}
