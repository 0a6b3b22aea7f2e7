from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..models import RecipeComment


def list_recipe_comments(db: Session, recipe_id: str) -> list[RecipeComment]:
    stmt = (
        select(RecipeComment)
        .where(RecipeComment.recipe_id == recipe_id)
        .order_by(RecipeComment.created_at.desc())
    )
    return list(db.scalars(stmt))


def add_recipe_comment(db: Session, user_id: str, recipe_id: str, content: str) -> RecipeComment:
    content = (content or "").strip()
    if not content:
        raise ValueError("content required")
    comment = RecipeComment(user_id=user_id, recipe_id=recipe_id, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def delete_recipe_comment(db: Session, user_id: str, comment_id: str) -> bool:
    """Delete a comment the user owns. False if it doesn't exist or isn't theirs."""
    result = db.execute(
        delete(RecipeComment).where(
            RecipeComment.id == comment_id, RecipeComment.user_id == user_id
        )
    )
    db.commit()
    return (result.rowcount or 0) > 0
