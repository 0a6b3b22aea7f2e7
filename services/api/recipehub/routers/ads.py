from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..services.ads import InvalidAd, list_active_ads

router = APIRouter()


@router.get("/ads", response_model=schemas.AdsResponse)
def ads_for_placement(placement: Optional[str] = None, db: Session = Depends(get_db)):
    """Active ads for a placement, newest first."""
    try:
        ads = list_active_ads(db, placement or "")
    except InvalidAd as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ads": ads}
