import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..infra.idempotency import idempotency_clear_key, idempotency_precheck, idempotency_store_result
from ..models import Recipe
from ..services.history import add_cook_history

router = APIRouter()
logger = logging.getLogger("recipehub.history")


@router.post("/history/{recipe_id}", response_model=schemas.CookHistoryOut, status_code=201)
async def record_cooked(
    recipe_id: str,
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Record that the caller cooked a recipe.

    Honors Idempotency-Key so client retries don't double-count.
    """
    pre = await idempotency_precheck(request, user_id=ctx.user_id, route_key="history")
    if isinstance(pre, JSONResponse):
        return pre

    try:
        if db.get(Recipe, recipe_id) is None:
            raise HTTPException(status_code=404, detail="Recipe not found")

        entry = add_cook_history(db, ctx.user_id, recipe_id)
        logger.info(f"User {ctx.user_id} cooked recipe {recipe_id}")
        res = schemas.CookHistoryOut.model_validate(entry).model_dump(mode="json")

        if pre is not None:
            redis_key, req_hash = pre
            await idempotency_store_result(redis_key, req_hash, status=201, body=res)
        return res
    except Exception:
        if pre is not None:
            await idempotency_clear_key(pre[0])
        raise
