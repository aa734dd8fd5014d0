from cachetools import TTLCache
from .config import settings

try:
    import redis  # Optional dependency
except Exception:
    redis = None

class CounterStore:
    """
    Fixed-window hit counters for rate limiting.
    Redis when enabled (shared across workers), otherwise an in-process TTLCache.
    """
    def __init__(self, ttl_seconds: int | None = None):
        self.ttl = ttl_seconds or settings.RATE_WINDOW_SECONDS
        self.backend = None
        self._local: TTLCache = TTLCache(maxsize=4096, ttl=self.ttl)
        if settings.USE_REDIS and redis is not None:
            self.backend = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)

    def incr(self, key: str) -> int:
        """Increment and return the hit count for `key` in its current window."""
        if self.backend:
            # INCR + EXPIRE in one round trip
            pipe = self.backend.pipeline()
            pipe.incr(key)
            pipe.expire(key, self.ttl)
            count, _ = pipe.execute()
            return int(count)
        count = self._local.get(key, 0) + 1
        self._local[key] = count
        return count

    def clear(self) -> None:
        self._local.clear()

counters = CounterStore()
