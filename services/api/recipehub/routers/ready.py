import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from redis.exceptions import RedisError

from ..db import get_db
from ..infra.redis_client import get_redis

router = APIRouter()
logger = logging.getLogger("recipehub.ready")


@router.get("/ready")
async def ready(db: Session = Depends(get_db)):
    db_ok = False
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as e:
        logger.warning(f"Readiness: database check failed: {e}")

    redis_ok = False
    try:
        r = await get_redis()
        redis_ok = bool(await r.ping())
    except (RedisError, OSError) as e:
        logger.warning(f"Readiness: redis check failed: {e}")

    return {"ok": db_ok, "db_ok": db_ok, "redis_ok": redis_ok}
