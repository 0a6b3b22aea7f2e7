import asyncio
import json
import logging

from redis.exceptions import RedisError

from recipehub.infra.redis_client import get_redis
from recipehub.settings import settings

logger = logging.getLogger("recipehub.cache")


def cache_key(kind: str, *identifiers) -> str:
    return ":".join([settings.cache_prefix, kind, *[str(i) for i in identifiers]])


async def get_json(key: str):
    r = await get_redis()
    raw = await r.get(key)
    return json.loads(raw) if raw else None


async def set_json(key: str, value, ttl_sec: int):
    r = await get_redis()
    await r.set(key, json.dumps(value), ex=ttl_sec)


async def delete_key(key: str):
    r = await get_redis()
    await r.delete(key)


async def get_or_set_json(key: str, ttl_sec: int, compute):
    """Return (value, hit). Redis outages degrade to computing every time.

    `compute` is a plain (blocking) callable run in the default executor so a
    database read never stalls the event loop. A None result is not cached.
    """
    loop = asyncio.get_running_loop()
    try:
        hit = await get_json(key)
    except (RedisError, OSError) as e:
        logger.warning(f"Cache read failed for {key}: {e}")
        return await loop.run_in_executor(None, compute), False
    if hit is not None:
        return hit, True

    val = await loop.run_in_executor(None, compute)
    if val is not None:
        try:
            await set_json(key, val, ttl_sec)
        except (RedisError, OSError) as e:
            logger.warning(f"Cache write failed for {key}: {e}")
    return val, False
