"""Moderation and content management.

Callers must be authenticated; the admin role itself is enforced by the
gateway in front of this service.
"""
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..infra.redis_cache import cache_key, delete_key
from ..services.ads import InvalidAd, create_ad, delete_ad, update_ad
from ..services.challenges import (
    InvalidChallenge,
    create_challenge,
    delete_challenge,
    set_challenge_recipes,
    update_challenge,
)
from ..services.recipes import set_recipe_approval

router = APIRouter()
logger = logging.getLogger("recipehub.admin")


@router.put("/recipes/{recipe_id}/approval", status_code=204)
async def approve_recipe(
    recipe_id: str,
    body: Optional[schemas.RecipeApprovalUpdate] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    is_approved = body.is_approved if body is not None else True
    loop = asyncio.get_running_loop()
    found = await loop.run_in_executor(None, set_recipe_approval, db, recipe_id, is_approved)
    if not found:
        raise HTTPException(status_code=404, detail="Recipe not found")

    # cached detail carries the old flag
    key = cache_key("recipe", recipe_id)
    try:
        await delete_key(key)
    except (RedisError, OSError) as e:
        logger.warning(f"Cache invalidation failed for {key}: {e}")
    logger.info(f"User {ctx.user_id} set recipe {recipe_id} approved={is_approved}")
    return Response(status_code=204)


# --- Challenges ---

@router.post("/challenges", response_model=schemas.CreatedResponse, status_code=201)
def add_challenge(
    body: schemas.ChallengeCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    try:
        challenge = create_challenge(db, body)
    except InvalidChallenge as e:
        raise HTTPException(status_code=400, detail=str(e))
    logger.info(f"User {ctx.user_id} created challenge {challenge.id}")
    return {"id": challenge.id}


@router.put("/challenges/{challenge_id}", status_code=204)
def edit_challenge(
    challenge_id: str,
    body: schemas.ChallengeUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    try:
        challenge = update_challenge(db, challenge_id, body)
    except InvalidChallenge as e:
        raise HTTPException(status_code=400, detail=str(e))
    if challenge is None:
        raise HTTPException(status_code=404, detail="Challenge not found")
    return Response(status_code=204)


@router.delete("/challenges/{challenge_id}", status_code=204)
def remove_challenge(
    challenge_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    if not delete_challenge(db, challenge_id):
        raise HTTPException(status_code=404, detail="Challenge not found")
    logger.info(f"User {ctx.user_id} deleted challenge {challenge_id}")
    return Response(status_code=204)


@router.put("/challenges/{challenge_id}/recipes", status_code=204)
def replace_challenge_recipes(
    challenge_id: str,
    body: schemas.ChallengeRecipesUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    try:
        found = set_challenge_recipes(db, challenge_id, body.recipe_ids)
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Unknown recipe in challenge")
    if not found:
        raise HTTPException(status_code=404, detail="Challenge not found")
    return Response(status_code=204)


# --- Ads ---

@router.post("/ads", response_model=schemas.CreatedResponse, status_code=201)
def add_ad(
    body: schemas.AdCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    try:
        ad = create_ad(db, body)
    except InvalidAd as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": ad.id}


@router.put("/ads/{ad_id}", status_code=204)
def edit_ad(
    ad_id: str,
    body: schemas.AdUpdate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    try:
        ad = update_ad(db, ad_id, body)
    except InvalidAd as e:
        raise HTTPException(status_code=400, detail=str(e))
    if ad is None:
        raise HTTPException(status_code=404, detail="Ad not found")
    return Response(status_code=204)


@router.delete("/ads/{ad_id}", status_code=204)
def remove_ad(
    ad_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    if not delete_ad(db, ad_id):
        raise HTTPException(status_code=404, detail="Ad not found")
    return Response(status_code=204)
