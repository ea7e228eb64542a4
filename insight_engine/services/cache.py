import logging
import time
from threading import Lock
from typing import Dict, Optional, Tuple

from insight_engine.config import Settings, settings

logger = logging.getLogger(__name__)


class InMemoryCacheStore:
    """Process-local TTL cache used when Redis is unavailable."""

    def __init__(self):
        self._entries: Dict[str, Tuple[float, str]] = {}
        self.lock = Lock()

    def get(self, key: str) -> Optional[str]:
        with self.lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if time.time() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl: int) -> None:
        with self.lock:
            self._entries[key] = (time.time() + ttl, value)


class RedisCacheStore:
    """Redis-backed TTL cache."""

    def __init__(self, redis_client):
        self.redis = redis_client
        # Keep in-memory cache as backup
        self.memory_store = InMemoryCacheStore()

    def get(self, key: str) -> Optional[str]:
        try:
            return self.redis.get(key)
        except Exception as e:
            logger.warning(f"Redis error in get, falling back to memory: {e}")
            return self.memory_store.get(key)

    def set(self, key: str, value: str, ttl: int) -> None:
        try:
            self.redis.setex(key, ttl, value)
        except Exception as e:
            logger.warning(f"Redis error in set, falling back to memory: {e}")
            self.memory_store.set(key, value, ttl)


def create_cache_store(config: Settings = settings):
    """Factory function to create the cache store, Redis if reachable."""
    if not config.redis_url:
        logger.info("Redis not configured, using in-memory cache")
        return InMemoryCacheStore()

    try:
        from redis import Redis

        redis_client = Redis.from_url(
            config.redis_url, decode_responses=True, socket_connect_timeout=5
        )
        redis_client.ping()
        logger.info("Redis connection established for fetch cache")
        return RedisCacheStore(redis_client)
    except Exception as e:
        logger.warning(f"Failed to connect to Redis, using in-memory cache: {e}")
        return InMemoryCacheStore()
