"""Pydantic schemas for the recipe API.

Request/response models for:
- Recipes (ingredients, scaling)
- Preferences, history, recommendations
- Planner week plans and grocery lists
- Price lookups
- Community features (favorites, ratings, comments)
"""

from datetime import datetime, date
from typing import Optional, Literal

from pydantic import BaseModel, Field, field_validator


MealSlot = Literal["breakfast", "lunch", "dinner", "snack", "custom"]


# --- Recipe Ingredient ---

class IngredientIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    quantity: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1, max_length=20)


class IngredientOut(BaseModel):
    name: str
    quantity: float
    unit: str

    class Config:
        from_attributes = True


# --- Recipe ---

class RecipeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    steps: list[str] = []
    images: list[str] = []
    servings: int = Field(2, ge=1)
    total_time_minutes: Optional[int] = Field(None, ge=0)
    nutrition: Optional[dict] = None
    cost_cents: Optional[int] = Field(None, ge=0)
    diet: list[str] = []
    ingredients: list[IngredientIn] = []


class RecipeSummaryOut(BaseModel):
    id: str
    title: str
    description: Optional[str]
    servings: int
    total_time_minutes: Optional[int]
    cost_cents: Optional[int]

    class Config:
        from_attributes = True


class RecipeOut(BaseModel):
    id: str
    title: str
    description: Optional[str]
    steps: list[str] = []
    images: list[str] = []
    servings: int
    total_time_minutes: Optional[int]
    nutrition: Optional[dict]
    cost_cents: Optional[int]
    diet: list[str] = []
    is_approved: bool
    ingredients: list[IngredientOut] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RecipeListResponse(BaseModel):
    recipes: list[RecipeSummaryOut]
    limit: int
    offset: int


class ScaledIngredientsResponse(BaseModel):
    recipe_id: str
    original_servings: int
    servings: int
    ingredients: list[IngredientOut]


# --- Preferences ---

class PreferencesOut(BaseModel):
    user_id: str
    diet_preferences: list[str] = []
    budget_cents: Optional[int] = None


class PreferencesUpdate(BaseModel):
    diet_preferences: list[str] = []
    budget_cents: Optional[int] = Field(None, ge=0)

    @field_validator("diet_preferences")
    @classmethod
    def strip_tags(cls, v: list[str]) -> list[str]:
        return [t.strip().lower() for t in v if t and t.strip()]


# --- History / Recommendations ---

class CookHistoryOut(BaseModel):
    id: str
    recipe_id: str
    cooked_at: datetime

    class Config:
        from_attributes = True


class RecommendationsResponse(BaseModel):
    recipes: list[RecipeSummaryOut]
    limit: int


# --- Planner ---

class PlannedMealIn(BaseModel):
    date: date
    meal_slot: MealSlot
    recipe_id: str
    servings: Optional[int] = Field(None, ge=1)


class PlannedMealOut(BaseModel):
    id: str
    planned_date: date
    meal_slot: str
    recipe_id: str
    servings: Optional[int]

    class Config:
        from_attributes = True


class WeekPlanReplace(BaseModel):
    week_start: date
    items: list[PlannedMealIn] = []


class WeekPlanOut(BaseModel):
    week_start: date
    week_end: date
    items: list[PlannedMealOut]


class GroceryLineOut(BaseModel):
    name: str
    total_quantity: float
    unit: str


class PricedLineOut(BaseModel):
    name: str
    total_quantity: float
    unit: str
    store_name: Optional[str] = None
    product_name: Optional[str] = None
    unit_price_cents: Optional[float] = None
    estimated_cost_cents: Optional[int] = None
    affiliate_url: Optional[str] = None


class GroceryPricingOut(BaseModel):
    lines: list[PricedLineOut]
    total_cents: int


class GroceryListResponse(BaseModel):
    week_start: date
    week_end: date
    items: list[GroceryLineOut]
    pricing: Optional[GroceryPricingOut] = None


# --- Prices ---

class PriceOptionOut(BaseModel):
    store_name: str
    product_name: str
    price_cents: int
    unit_price_cents: float  # per base unit
    package_base_unit: str
    package_base_size: float
    affiliate_url: Optional[str] = None


class PriceCompareResponse(BaseModel):
    name: str
    unit: str
    options: list[PriceOptionOut]


# --- Favorites ---

class FavoriteOut(BaseModel):
    id: str
    title: str


class FavoritesResponse(BaseModel):
    favorites: list[FavoriteOut]


# --- Ratings ---

class RatingUpsert(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class RatingOut(BaseModel):
    user_id: str
    recipe_id: str
    rating: int
    comment: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RatingsResponse(BaseModel):
    ratings: list[RatingOut]
    average: Optional[float]


# --- Comments ---

class CommentCreate(BaseModel):
    content: str = Field(..., max_length=4000)


class CommentOut(BaseModel):
    id: str
    user_id: str
    recipe_id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CommentsResponse(BaseModel):
    comments: list[CommentOut]


class CreatedResponse(BaseModel):
    id: str


# --- Profile / Stats / Challenges / Billing ---

class ProfileOut(BaseModel):
    user_id: str
    locale: str
    preferences: PreferencesOut
    favorites: list[str]


class StatsOut(BaseModel):
    total_users: int
    total_recipes: int
    total_chefs: int
    total_favorites: int
    average_rating: float


class ChallengeOut(BaseModel):
    id: str
    title: str
    description: str
    start_date: Optional[date]
    end_date: Optional[date]
    recipe_ids: list[str] = Field(default_factory=list)

    class Config:
        from_attributes = True


class ChallengesResponse(BaseModel):
    challenges: list[ChallengeOut]


class BillingStatusOut(BaseModel):
    is_premium: bool
    premium_expires_at: Optional[datetime]


# --- Admin ---

class RecipeApprovalUpdate(BaseModel):
    is_approved: bool = True


class ChallengeCreate(BaseModel):
    title: str
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ChallengeUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ChallengeRecipesUpdate(BaseModel):
    recipe_ids: list[str] = Field(default_factory=list)


# --- Ads ---

class AdCreate(BaseModel):
    placement: str
    image_url: str
    target_url: str
    is_active: bool = True


class AdUpdate(BaseModel):
    placement: Optional[str] = None
    image_url: Optional[str] = None
    target_url: Optional[str] = None
    is_active: Optional[bool] = None


class AdOut(BaseModel):
    id: str
    placement: str
    image_url: str
    target_url: str

    class Config:
        from_attributes = True


class AdsResponse(BaseModel):
    ads: list[AdOut]
