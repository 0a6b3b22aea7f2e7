"""SQLAlchemy ORM models for the recipe platform.

Tables:
- users: owner of every user-scoped row (auth handled upstream)
- recipes (+ recipe_ingredients, recipe_diet_tags): catalogue, soft lifecycle only
- stores, products, product_prices: grocery price snapshots from the ingestion job
- user_preferences, cook_history, planned_meals: personalisation and planning
- favorites, recipe_ratings, recipe_comments: community features
- challenges, challenge_recipes: public cooking challenges
- ad_slots: banners per site placement
"""

from __future__ import annotations

import uuid
from datetime import datetime, date
from typing import Optional

from sqlalchemy import (
    String,
    DateTime,
    Date,
    Text,
    Integer,
    Boolean,
    Float,
    ForeignKey,
    Index,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func, false

from .db import Base
from .orm_types import JSONList, JSONDict


def generate_uuid() -> str:
    return str(uuid.uuid4())


MEAL_SLOTS = ("breakfast", "lunch", "dinner", "snack", "custom")


class User(Base):
    """Platform user. Rows are created by the auth service; we only read them."""
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    is_premium: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    premium_expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    preferences: Mapped[Optional["UserPreferences"]] = relationship(
        "UserPreferences", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )


class Recipe(Base):
    """Catalogue recipe. Created by the ingestion job or user submission."""
    __tablename__ = "recipes"
    __table_args__ = (
        Index("ix_recipes_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    steps: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    images: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    servings: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    total_time_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    nutrition: Mapped[Optional[dict]] = mapped_column(JSONDict, nullable=True)
    cost_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())
    author_user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    ingredients: Mapped[list["RecipeIngredient"]] = relationship(
        "RecipeIngredient", back_populates="recipe", cascade="all, delete-orphan",
        order_by="RecipeIngredient.position"
    )
    diet_tags: Mapped[list["RecipeDietTag"]] = relationship(
        "RecipeDietTag", back_populates="recipe", cascade="all, delete-orphan"
    )

    @property
    def diet(self) -> list[str]:
        return sorted(t.tag for t in self.diet_tags)


class RecipeIngredient(Base):
    """One ingredient line (name, quantity, unit) of a recipe."""
    __tablename__ = "recipe_ingredients"
    __table_args__ = (
        Index("ix_recipe_ingredients_recipe_id", "recipe_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    unit: Mapped[str] = mapped_column(String(20), nullable=False, default="pcs")

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="ingredients")


class RecipeDietTag(Base):
    """Diet label on a recipe (vegan, gluten-free, ...)."""
    __tablename__ = "recipe_diet_tags"
    __table_args__ = (
        Index("ix_recipe_diet_tags_tag", "tag"),
    )

    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )
    tag: Mapped[str] = mapped_column(String(80), primary_key=True)

    recipe: Mapped["Recipe"] = relationship("Recipe", back_populates="diet_tags")


class Store(Base):
    """Grocery store scraped by the ingestion job."""
    __tablename__ = "stores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), unique=True, nullable=False)
    affiliate_url_template: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="store", cascade="all, delete-orphan"
    )


class Product(Base):
    """Store product with a declared package size."""
    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("store_id", "name", name="uq_products_store_name"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    store_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    size_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    size_unit: Mapped[str] = mapped_column(String(20), nullable=False)

    store: Mapped["Store"] = relationship("Store", back_populates="products")
    prices: Mapped[list["ProductPrice"]] = relationship(
        "ProductPrice", back_populates="product", cascade="all, delete-orphan"
    )


class ProductPrice(Base):
    """Price snapshot in minor currency units (cents). Latest collected_at wins."""
    __tablename__ = "product_prices"
    __table_args__ = (
        UniqueConstraint("product_id", "collected_at", name="uq_product_prices_product_day"),
        Index("ix_product_prices_product_collected", "product_id", "collected_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    collected_at: Mapped[date] = mapped_column(Date, nullable=False)

    product: Mapped["Product"] = relationship("Product", back_populates="prices")


class UserPreferences(Base):
    """Diet tags and budget ceiling. One row per user, upserted."""
    __tablename__ = "user_preferences"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    diet_preferences: Mapped[list[str]] = mapped_column(JSONList, nullable=False, default=list)
    budget_cents: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="preferences")


class CookHistory(Base):
    """Append-only log of recipes a user cooked."""
    __tablename__ = "cook_history"
    __table_args__ = (
        Index("ix_cook_history_user_cooked", "user_id", "cooked_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    cooked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class PlannedMeal(Base):
    """A recipe assigned to a (date, meal slot) for a user."""
    __tablename__ = "planned_meals"
    __table_args__ = (
        Index("ix_planned_meals_user_date", "user_id", "planned_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    planned_date: Mapped[date] = mapped_column(Date, nullable=False)
    meal_slot: Mapped[str] = mapped_column(String(20), nullable=False)  # see MEAL_SLOTS
    servings: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class Favorite(Base):
    __tablename__ = "favorites"

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    recipe: Mapped["Recipe"] = relationship("Recipe")


class RecipeRating(Base):
    __tablename__ = "recipe_ratings"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_recipe_ratings_range"),
    )

    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class RecipeComment(Base):
    __tablename__ = "recipe_comments"
    __table_args__ = (
        Index("ix_recipe_comments_recipe_created", "recipe_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Challenge(Base):
    __tablename__ = "challenges"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    recipes: Mapped[list["ChallengeRecipe"]] = relationship(
        "ChallengeRecipe", back_populates="challenge", cascade="all, delete-orphan"
    )

    @property
    def recipe_ids(self) -> list[str]:
        return sorted(cr.recipe_id for cr in self.recipes)


class ChallengeRecipe(Base):
    """Recipe attached to a challenge."""
    __tablename__ = "challenge_recipes"

    challenge_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("challenges.id", ondelete="CASCADE"), primary_key=True
    )
    recipe_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True
    )

    challenge: Mapped["Challenge"] = relationship("Challenge", back_populates="recipes")


class AdSlot(Base):
    """Banner shown in a named placement of the site."""
    __tablename__ = "ad_slots"
    __table_args__ = (
        Index("ix_ad_slots_placement_active", "placement", "is_active"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    placement: Mapped[str] = mapped_column(String(80), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    target_url: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
