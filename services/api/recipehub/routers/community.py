"""
Router for community features on a recipe: comments, ratings, favorites.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..models import Recipe
from ..services import comments, favorites, ratings

router = APIRouter()


def require_recipe(db: Session, recipe_id: str) -> Recipe:
    recipe = db.get(Recipe, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


# --- Comments ---

@router.get("/recipes/{recipe_id}/comments", response_model=schemas.CommentsResponse)
def get_comments(recipe_id: str, db: Session = Depends(get_db)):
    return {"comments": comments.list_recipe_comments(db, recipe_id)}


@router.post("/recipes/{recipe_id}/comments", response_model=schemas.CreatedResponse, status_code=201)
def post_comment(
    recipe_id: str,
    body: schemas.CommentCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    require_recipe(db, recipe_id)
    try:
        comment = comments.add_recipe_comment(db, ctx.user_id, recipe_id, body.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": comment.id}


@router.delete("/recipes/{recipe_id}/comments/{comment_id}", status_code=204)
def delete_comment(
    recipe_id: str,
    comment_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    if not comments.delete_recipe_comment(db, ctx.user_id, comment_id):
        raise HTTPException(status_code=404, detail="Not found")
    return Response(status_code=204)


# --- Ratings ---

@router.get("/recipes/{recipe_id}/ratings", response_model=schemas.RatingsResponse)
def get_ratings(recipe_id: str, db: Session = Depends(get_db)):
    return {
        "ratings": ratings.list_recipe_ratings(db, recipe_id),
        "average": ratings.get_recipe_average_rating(db, recipe_id),
    }


@router.put("/recipes/{recipe_id}/ratings", status_code=204)
def put_rating(
    recipe_id: str,
    body: schemas.RatingUpsert,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    require_recipe(db, recipe_id)
    ratings.upsert_recipe_rating(db, ctx.user_id, recipe_id, body.rating, body.comment)
    return Response(status_code=204)


# --- Favorites ---

@router.get("/favorites", response_model=schemas.FavoritesResponse)
def get_favorites(
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    items = favorites.list_favorites(db, ctx.user_id)
    return {"favorites": [{"id": rid, "title": title} for rid, title in items]}


@router.post("/favorites/{recipe_id}", status_code=204)
def add_favorite(
    recipe_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    require_recipe(db, recipe_id)
    favorites.add_favorite(db, ctx.user_id, recipe_id)
    return Response(status_code=204)


@router.delete("/favorites/{recipe_id}", status_code=204)
def remove_favorite(
    recipe_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    favorites.remove_favorite(db, ctx.user_id, recipe_id)
    return Response(status_code=204)
