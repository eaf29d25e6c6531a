"""
Limitation de débit à fenêtre fixe : INCR, EXPIRE au premier hit, TTL pour Retry-After.

Stockage : Redis (redis.asyncio) si REDIS_URL est défini, sinon un store
en mémoire du process exposant la même surface incr/expire/ttl.
"""
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .. import config

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    retry_after: int = 0


class MemoryStore:
    """Compteurs {clé: (valeur, expiration monotonic | None)}, process unique.

    Les clés expirées sont balayées au plus une fois par SWEEP_INTERVAL, lors d'un incr().
    """

    SWEEP_INTERVAL = 60.0

    def __init__(self):
        self._data: Dict[str, Tuple[int, Optional[float]]] = {}
        self._next_sweep = 0.0

    def _sweep(self) -> None:
        now = time.monotonic()
        if now < self._next_sweep:
            return
        self._next_sweep = now + self.SWEEP_INTERVAL
        expired = [k for k, (_, expires) in self._data.items() if expires is not None and expires <= now]
        for k in expired:
            del self._data[k]

    def _live(self, key: str) -> Optional[Tuple[int, Optional[float]]]:
        entry = self._data.get(key)
        if entry and entry[1] is not None and entry[1] <= time.monotonic():
            del self._data[key]
            return None
        return entry

    async def incr(self, key: str) -> int:
        self._sweep()
        entry = self._live(key)
        value, expires = entry if entry else (0, None)
        self._data[key] = (value + 1, expires)
        return value + 1

    async def expire(self, key: str, seconds: int) -> bool:
        entry = self._live(key)
        if entry is None:
            return False
        self._data[key] = (entry[0], time.monotonic() + seconds)
        return True

    async def ttl(self, key: str) -> int:
        entry = self._live(key)
        if entry is None:
            return -2
        if entry[1] is None:
            return -1
        return max(1, int(entry[1] - time.monotonic() + 0.999))

    async def ping(self) -> bool:
        return True

    def clear(self) -> None:
        self._data.clear()


_store = None


def get_store():
    """Store partagé : client Redis depuis REDIS_URL, sinon MemoryStore."""
    global _store
    if _store is None:
        if config.REDIS_URL:
            _store = aioredis.from_url(config.REDIS_URL, decode_responses=True)
            log.info("Rate limiting : Redis")
        else:
            _store = MemoryStore()
            log.info("Rate limiting : mémoire du process (REDIS_URL absent)")
    return _store


def reset_store() -> None:
    global _store
    _store = None


class FixedWindowRateLimiter:
    """
    Usage:
        >>> limiter = FixedWindowRateLimiter(window=60, max_requests=5, prefix="contact")
        >>> result = await limiter.hit("203.0.113.7")
    """

    def __init__(self, window: int, max_requests: int, prefix: str, store=None):
        self.window = window
        self.max_requests = max_requests
        self.prefix = prefix
        self._store = store

    @property
    def store(self):
        return self._store if self._store is not None else get_store()

    async def hit(self, identifier: str) -> RateLimitResult:
        key = f"{self.prefix}:{identifier}"
        store = self.store
        try:
            count = await store.incr(key)
            if count == 1:
                await store.expire(key, self.window)
            if count <= self.max_requests:
                return RateLimitResult(True, self.max_requests - count)

            ttl = await store.ttl(key)
            if ttl < 0:
                await store.expire(key, self.window)
                ttl = self.window
        except RedisError as e:
            log.error("Rate limiting indisponible (%s), requête autorisée", e)
            return RateLimitResult(True, self.max_requests)
        return RateLimitResult(False, 0, int(ttl))


def client_ip(headers) -> str:
    """Premier X-Forwarded-For, puis X-Real-IP, sinon "unknown"."""
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return headers.get("x-real-ip") or "unknown"


contact_limiter  = FixedWindowRateLimiter(config.CONTACT_RATE_WINDOW, config.CONTACT_RATE_MAX, "contact")
faq_vote_limiter = FixedWindowRateLimiter(config.FAQ_VOTE_RATE_WINDOW, config.FAQ_VOTE_RATE_MAX, "faq_vote")
autocomplete_limiter = FixedWindowRateLimiter(
    config.FAQ_AUTOCOMPLETE_RATE_WINDOW, config.FAQ_AUTOCOMPLETE_RATE_MAX, "faq_autocomplete")
