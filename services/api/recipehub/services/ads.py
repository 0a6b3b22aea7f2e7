from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from ..models import AdSlot
from ..schemas import AdCreate, AdUpdate

ADS_PER_PLACEMENT = 10


class InvalidAd(ValueError):
    pass


def _require(value: Optional[str], name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidAd(f"{name} is required")
    return value


def list_active_ads(db: Session, placement: str, limit: int = ADS_PER_PLACEMENT) -> list[AdSlot]:
    """Active ads for one placement, newest first."""
    placement = _require(placement, "placement")
    stmt = (
        select(AdSlot)
        .where(AdSlot.placement == placement, AdSlot.is_active.is_(True))
        .order_by(AdSlot.created_at.desc(), AdSlot.id)
        .limit(limit)
    )
    return list(db.scalars(stmt))


def create_ad(db: Session, data: AdCreate) -> AdSlot:
    ad = AdSlot(
        placement=_require(data.placement, "placement"),
        image_url=_require(data.image_url, "image_url"),
        target_url=_require(data.target_url, "target_url"),
        is_active=data.is_active,
    )
    db.add(ad)
    db.commit()
    db.refresh(ad)
    return ad


def update_ad(db: Session, ad_id: str, data: AdUpdate) -> Optional[AdSlot]:
    ad = db.get(AdSlot, ad_id)
    if ad is None:
        return None

    changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    for name in ("placement", "image_url", "target_url"):
        if name in changes:
            changes[name] = _require(changes[name], name)
    for name, value in changes.items():
        setattr(ad, name, value)
    db.commit()
    db.refresh(ad)
    return ad


def delete_ad(db: Session, ad_id: str) -> bool:
    result = db.execute(delete(AdSlot).where(AdSlot.id == ad_id))
    db.commit()
    return result.rowcount > 0
