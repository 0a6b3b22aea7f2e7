import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import schemas
from ..db import get_db
from ..deps import RequestContext, get_request_context
from ..infra.redis_cache import cache_key, get_or_set_json
from ..services.recipes import RecipeListFilters, create_recipe, find_recipes, get_recipe
from ..services.scaling import IngredientItem, scale_ingredients
from ..settings import settings

router = APIRouter()
logger = logging.getLogger("recipehub.recipes")


@router.get("/recipes", response_model=schemas.RecipeListResponse)
def list_recipes(
    q: Optional[str] = None,
    diet: list[str] = Query([]),
    max_time: Optional[int] = Query(None, ge=0),
    max_cost: Optional[int] = Query(None, ge=0),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List approved recipes with optional filtering."""
    filters = RecipeListFilters(
        query=q.strip() if q else None,
        diet=diet,
        max_time_minutes=max_time,
        max_cost_cents=max_cost,
    )
    recipes = find_recipes(db, filters, limit=limit, offset=offset)
    return {"recipes": recipes, "limit": limit, "offset": offset}


@router.post("/recipes", response_model=schemas.RecipeOut, status_code=201)
def submit_recipe(
    recipe_in: schemas.RecipeCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Submit a recipe for moderation."""
    recipe = create_recipe(db, recipe_in, author_user_id=ctx.user_id)
    logger.info(f"User {ctx.user_id} submitted recipe {recipe.id}")
    return recipe


@router.get("/recipes/{recipe_id}", response_model=schemas.RecipeOut)
async def get_recipe_detail(recipe_id: str, db: Session = Depends(get_db)):
    """Recipe detail, served from cache when possible."""

    def load():
        recipe = get_recipe(db, recipe_id)
        if recipe is None:
            return None
        return schemas.RecipeOut.model_validate(recipe).model_dump(mode="json")

    data, hit = await get_or_set_json(
        cache_key("recipe", recipe_id), settings.recipe_cache_ttl_seconds, load
    )
    if data is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    logger.debug(f"Recipe {recipe_id} cache {'hit' if hit else 'miss'}")
    return data


@router.get("/recipes/{recipe_id}/scaled", response_model=schemas.ScaledIngredientsResponse)
def get_scaled_ingredients(
    recipe_id: str,
    servings: int = Query(..., description="Target number of servings"),
    db: Session = Depends(get_db),
):
    """Ingredients rescaled to `servings`. Non-positive servings return them unchanged."""
    recipe = get_recipe(db, recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail="Recipe not found")

    items = [IngredientItem(i.name, i.quantity, i.unit) for i in recipe.ingredients]
    scaled = scale_ingredients(items, recipe.servings, servings)
    return {
        "recipe_id": recipe.id,
        "original_servings": recipe.servings,
        "servings": servings if servings > 0 else recipe.servings,
        "ingredients": [
            {"name": i.name, "quantity": i.quantity, "unit": i.unit} for i in scaled
        ],
    }
