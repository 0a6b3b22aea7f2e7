import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, selectinload

from ..db import dialect_insert, transaction
from ..models import Challenge, ChallengeRecipe
from ..schemas import ChallengeCreate, ChallengeUpdate

logger = logging.getLogger("recipehub.challenges")

MIN_TITLE_LENGTH = 3


class InvalidChallenge(ValueError):
    pass


def _clean_title(title: str) -> str:
    title = (title or "").strip()
    if len(title) < MIN_TITLE_LENGTH:
        raise InvalidChallenge(f"title must be at least {MIN_TITLE_LENGTH} characters")
    return title


def list_challenges(db: Session) -> list[Challenge]:
    stmt = (
        select(Challenge)
        .options(selectinload(Challenge.recipes))
        .order_by(Challenge.start_date.desc())
    )
    return list(db.scalars(stmt))


def create_challenge(db: Session, data: ChallengeCreate) -> Challenge:
    challenge = Challenge(
        title=_clean_title(data.title),
        description=data.description or "",
        start_date=data.start_date,
        end_date=data.end_date,
    )
    db.add(challenge)
    db.commit()
    db.refresh(challenge)
    return challenge


def update_challenge(db: Session, challenge_id: str, data: ChallengeUpdate) -> Optional[Challenge]:
    """Partial update; unset fields keep their value."""
    challenge = db.get(Challenge, challenge_id)
    if challenge is None:
        return None

    changes = data.model_dump(exclude_unset=True)
    if "title" in changes:
        changes["title"] = _clean_title(changes["title"])
    if changes.get("description") is None:
        changes.pop("description", None)
    for field_name, value in changes.items():
        setattr(challenge, field_name, value)
    db.commit()
    db.refresh(challenge)
    return challenge


def delete_challenge(db: Session, challenge_id: str) -> bool:
    result = db.execute(delete(Challenge).where(Challenge.id == challenge_id))
    db.commit()
    return result.rowcount > 0


def set_challenge_recipes(db: Session, challenge_id: str, recipe_ids: list[str]) -> bool:
    """Replace the recipes linked to a challenge in one transaction.

    Returns False for an unknown challenge. An unknown recipe id raises
    IntegrityError and leaves the previous links in place.
    """
    if db.get(Challenge, challenge_id) is None:
        return False

    unique_ids = list(dict.fromkeys(recipe_ids))
    with transaction(db):
        db.execute(delete(ChallengeRecipe).where(ChallengeRecipe.challenge_id == challenge_id))
        if unique_ids:
            db.execute(
                dialect_insert(db, ChallengeRecipe)
                .values([{"challenge_id": challenge_id, "recipe_id": rid} for rid in unique_ids])
                .on_conflict_do_nothing()
            )
    db.expire_all()
    logger.info(f"Challenge {challenge_id} now links {len(unique_ids)} recipes")
    return True
