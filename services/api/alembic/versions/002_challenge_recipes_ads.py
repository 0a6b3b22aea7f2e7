"""Challenge recipe links and ad slots

Revision ID: 002_challenge_recipes_ads
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_challenge_recipes_ads"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "challenge_recipes",
        sa.Column("challenge_id", sa.String(36), sa.ForeignKey("challenges.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("recipe_id", sa.String(36), sa.ForeignKey("recipes.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "ad_slots",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("placement", sa.String(80), nullable=False),
        sa.Column("image_url", sa.Text, nullable=False),
        sa.Column("target_url", sa.Text, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_ad_slots_placement_active", "ad_slots", ["placement", "is_active"])


def downgrade() -> None:
    op.drop_index("ix_ad_slots_placement_active", table_name="ad_slots")
    op.drop_table("ad_slots")
    op.drop_table("challenge_recipes")
