"""
Redis-кеш сводной статистики пользователя.

- Включается только при заданном REDIS_URL
- TTL из STATS_CACHE_TTL, сбрасывается при любой мутации тренировок/целей
- Недоступность Redis не ломает запрос: работаем без кеша
"""
import json
import logging
from typing import Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)


class StatsCache:
    KEY_PREFIX = "stats:user"

    def __init__(self, url: Optional[str] = None, ttl: Optional[int] = None):
        self._url = url if url is not None else settings.REDIS_URL
        self._ttl = ttl if ttl is not None else settings.STATS_CACHE_TTL
        self._redis: Optional[aioredis.Redis] = None

    @property
    def enabled(self) -> bool:
        return bool(self._url)

    def _key(self, user_id: int) -> str:
        return f"{self.KEY_PREFIX}:{user_id}"

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(
                self._url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
        return self._redis

    async def get(self, user_id: int) -> Optional[Dict]:
        if not self.enabled:
            return None
        try:
            redis = await self._get_redis()
            raw = await redis.get(self._key(user_id))
        except (RedisError, OSError) as e:
            logger.warning(f"Кеш статистики недоступен: {e}")
            return None
        if raw:
            return json.loads(raw)
        return None

    async def set(self, user_id: int, data: Dict) -> None:
        if not self.enabled:
            return
        try:
            redis = await self._get_redis()
            await redis.setex(self._key(user_id), self._ttl, json.dumps(data, ensure_ascii=False, default=str))
        except (RedisError, OSError) as e:
            logger.warning(f"Не удалось записать статистику в кеш: {e}")

    async def invalidate(self, user_id: int) -> None:
        if not self.enabled:
            return
        try:
            redis = await self._get_redis()
            await redis.delete(self._key(user_id))
        except (RedisError, OSError) as e:
            logger.warning(f"Не удалось сбросить кеш статистики: {e}")


stats_cache = StatsCache()
