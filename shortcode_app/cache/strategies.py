"""
Cache strategies using Strategy Pattern.
Allows switching between different cache backends (Redis, In-Memory, Null).

Shortcode records never change once written, so cached entries are never
invalidated; they only expire through the TTL.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Dict


logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.
    
    All methods are async because cache operations involve I/O (network for Redis).
    Implementations must not raise: a broken cache degrades to a miss.
    """
    
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.
        
        Returns:
            Cached value or None if not found
        """
        pass
    
    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        """
        Set value in cache with TTL (Time To Live).
        
        Returns:
            True if successful, False otherwise
        """
        pass


class RedisCache(CacheStrategy):
    """
    Redis cache, shared between every worker process.
    """
    
    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client
    
    async def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            return value.decode('utf-8') if value else None
        except Exception:
            logger.warning("Redis get failed for %s", key, exc_info=True)
            return None
    
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        try:
            return bool(self.redis.setex(key, ttl, value))
        except Exception:
            logger.warning("Redis set failed for %s", key, exc_info=True)
            return False


class InMemoryCache(CacheStrategy):
    """
    In-memory cache using a Python dict.
    
    Per-process and lost on restart. TTL is ignored.
    """
    
    def __init__(self):
        self._cache: Dict[str, str] = {}
    
    async def get(self, key: str) -> Optional[str]:
        return self._cache.get(key)
    
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        self._cache[key] = value
        return True


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.
    
    Every lookup goes straight to the collections.
    """
    
    async def get(self, key: str) -> Optional[str]:
        return None
    
    async def set(self, key: str, value: str, ttl: int = 3600) -> bool:
        return True
