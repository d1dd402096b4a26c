"""Redis cache for weather forecasts."""

import json
import logging
from typing import Any

import redis.asyncio as redis

from captains_log.config import settings

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_WEATHER = settings.weather_cache_ttl_seconds


class CacheService:
    """Redis-backed JSON cache. Every call degrades to a miss when Redis is down."""

    def __init__(self):
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            logger.debug(f"Cache get failed for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = TTL_WEATHER) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception as e:
            logger.debug(f"Cache set failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.delete(key)
            return True
        except Exception:
            return False

    # Weather helpers

    def weather_key(self, latitude: float, longitude: float, start: str, end: str) -> str:
        # Two decimals is roughly 1 km, close enough to share forecasts
        return f"weather:{latitude:.2f}:{longitude:.2f}:{start}:{end}"

    async def get_weather(self, latitude: float, longitude: float, start: str, end: str) -> dict | None:
        return await self.get(self.weather_key(latitude, longitude, start, end))

    async def set_weather(self, latitude: float, longitude: float, start: str, end: str, data: dict):
        await self.set(self.weather_key(latitude, longitude, start, end), data, TTL_WEATHER)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
