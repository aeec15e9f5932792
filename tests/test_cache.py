import asyncio

from shortcode_app.cache.factory import CacheBackend, CacheFactory
from shortcode_app.cache.strategies import InMemoryCache, NullCache


class TestCacheStrategies:

    def test_in_memory_round_trip(self):
        cache = InMemoryCache()

        assert asyncio.run(cache.get("shortcode:abc")) is None
        assert asyncio.run(cache.set("shortcode:abc", '{"redirect": "https://example.com"}')) is True
        assert asyncio.run(cache.get("shortcode:abc")) == '{"redirect": "https://example.com"}'

    def test_null_cache_never_hits(self):
        cache = NullCache()

        asyncio.run(cache.set("shortcode:abc", "value"))

        assert asyncio.run(cache.get("shortcode:abc")) is None


class TestCacheFactory:

    def test_memory_backend(self, settings):
        assert isinstance(CacheFactory.create(CacheBackend.MEMORY, settings), InMemoryCache)

    def test_null_backend(self, settings):
        assert isinstance(CacheFactory.create(CacheBackend.NULL, settings), NullCache)

    def test_unreachable_redis_falls_back_to_memory(self, settings):
        settings.redis_url = "redis://127.0.0.1:1/0"

        cache = CacheFactory.create(CacheBackend.REDIS, settings)

        assert isinstance(cache, InMemoryCache)
