"""
Factory for creating cache instances.
"""

import logging
from enum import Enum

from .strategies import CacheStrategy, RedisCache, InMemoryCache, NullCache
from shortcode_app.config import Settings


logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Creates the lookup cache configured in settings.

    One instance per application context; there is no process-wide singleton.
    """
    
    @classmethod
    def create(cls, backend: CacheBackend, settings: Settings) -> CacheStrategy:
        """
        Args:
            backend: Type of cache backend (from enum)
            settings: Supplies the Redis URL

        Returns:
            Cache instance. Falls back to memory when Redis is unreachable.
        """
        if backend == CacheBackend.REDIS:
            import redis
            
            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                
                # Test connection immediately
                redis_client.ping()
                logger.info("Redis cache initialized")
                return RedisCache(redis_client)
                
            except redis.RedisError as e:
                logger.warning("Redis connection failed (%s), falling back to in-memory cache", e)
                return InMemoryCache()
            
        elif backend == CacheBackend.MEMORY:
            logger.info("In-memory cache initialized")
            return InMemoryCache()
            
        elif backend == CacheBackend.NULL:
            logger.info("Null cache initialized")
            return NullCache()
        
        raise ValueError(f"Unknown cache backend: {backend}")
