"""
Rate limiting per client IP
Redis fixed window when Redis is configured, in-memory token bucket otherwise.
"""
import logging
import threading
import time
from typing import Dict, Optional, Tuple

import redis
from fastapi import HTTPException, Request

from config import settings
from database import redis_client

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Token bucket rate limiter per IP address.
    Uses TTL to clean up old entries.
    """

    def __init__(
        self,
        rate: int = 100,
        per_seconds: int = 60,
        cleanup_interval: int = 300,
        redis_conn: Optional[redis.Redis] = None,
        namespace: str = "ratelimit",
    ):
        """
        Args:
            rate: Number of requests allowed
            per_seconds: Per this many seconds
            cleanup_interval: Clean up old entries every N seconds
            redis_conn: Shared counter store; None keeps state in process
            namespace: Redis key prefix
        """
        self.rate = rate
        self.per_seconds = per_seconds
        self.cleanup_interval = cleanup_interval
        self.redis = redis_conn
        self.namespace = namespace

        # token_bucket[ip] = (tokens_remaining, last_refill_time, last_access_time)
        self.token_bucket: Dict[str, Tuple[float, float, float]] = {}
        self.last_cleanup = time.time()
        self._lock = threading.Lock()

    def is_allowed(self, ip: str) -> bool:
        """Check if request from IP is allowed under rate limit"""
        if self.redis is not None:
            try:
                return self._is_allowed_redis(ip)
            except redis.RedisError as e:
                logger.warning(f"Redis rate limit check failed, using memory: {e}")
        return self._is_allowed_memory(ip)

    def _is_allowed_redis(self, ip: str) -> bool:
        window = int(time.time() // self.per_seconds)
        key = f"{self.namespace}:{ip}:{window}"
        pipe = self.redis.pipeline()
        pipe.incr(key)
        pipe.expire(key, self.per_seconds)
        count, _ = pipe.execute()
        return int(count) <= self.rate

    def _is_allowed_memory(self, ip: str) -> bool:
        now = time.time()
        with self._lock:
            if now - self.last_cleanup > self.cleanup_interval:
                self._cleanup_old_entries(now)
                self.last_cleanup = now

            tokens, last_refill, _ = self.token_bucket.get(ip, (self.rate, now, now))

            # Refill tokens based on elapsed time
            elapsed = now - last_refill
            tokens = min(self.rate, tokens + (elapsed / self.per_seconds) * self.rate)

            allowed = tokens >= 1
            if allowed:
                tokens -= 1

            self.token_bucket[ip] = (tokens, now, now)
            return allowed

    def _cleanup_old_entries(self, now: float, max_age: int = 3600):
        """Remove entries not accessed in max_age seconds"""
        keys_to_remove = [
            ip for ip, (_, _, last_access) in self.token_bucket.items()
            if now - last_access > max_age
        ]
        for ip in keys_to_remove:
            del self.token_bucket[ip]

    def reset(self):
        with self._lock:
            self.token_bucket.clear()


# Global rate limiter for chatbot and contact endpoints
rate_limiter = RateLimiter(rate=settings.RATE_LIMIT_PER_MINUTE, per_seconds=60, redis_conn=redis_client)


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency: 429 once the caller's IP exceeds its budget"""
    ip = request.client.host if request.client else "unknown"
    if not rate_limiter.is_allowed(ip):
        raise HTTPException(status_code=429, detail="Too many requests, please try again later.")
