from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..services.prices import compare_product_options, find_cheapest_product

router = APIRouter()


@router.get("/cheapest", response_model=schemas.PriceOptionOut)
def get_cheapest(
    name: str = Query(""),
    unit: str = Query("g"),
    db: Session = Depends(get_db),
):
    """Cheapest latest-priced product per base unit matching `name`."""
    name = name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    best = find_cheapest_product(db, name, unit)
    if best is None:
        raise HTTPException(status_code=404, detail="No matching product")
    return best.to_dict(query=name)


@router.get("/compare", response_model=schemas.PriceCompareResponse)
def compare_prices(
    name: str = Query(""),
    unit: str = Query("g"),
    db: Session = Depends(get_db),
):
    name = name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="name is required")

    options = compare_product_options(db, name, unit)
    return {"name": name, "unit": unit, "options": [o.to_dict(query=name) for o in options]}
