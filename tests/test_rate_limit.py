"""
Tests du rate limiting à fenêtre fixe (store mémoire) et de l'IP client.
"""
import asyncio
import time

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from zweitmeinung.contact.rate_limit import FixedWindowRateLimiter, MemoryStore, client_ip


# ── Helpers ───────────────────────────────────────────────────────────────

class SpyStore(MemoryStore):
    """MemoryStore qui compte les appels à expire()."""

    def __init__(self):
        super().__init__()
        self.expire_calls = []

    async def expire(self, key, seconds):
        self.expire_calls.append((key, seconds))
        return await super().expire(key, seconds)


class BrokenStore(MemoryStore):
    async def incr(self, key):
        raise RedisConnectionError("connection refused")


def hits(limiter, identifier, n):
    async def run():
        return [await limiter.hit(identifier) for _ in range(n)]
    return asyncio.run(run())


# ── Fenêtre fixe ──────────────────────────────────────────────────────────

class TestFixedWindow:
    def test_autorise_jusqu_au_maximum(self):
        limiter = FixedWindowRateLimiter(60, 3, "contact", store=MemoryStore())
        results = hits(limiter, "203.0.113.7", 4)
        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_retry_after_dans_la_fenetre(self):
        limiter = FixedWindowRateLimiter(60, 1, "contact", store=MemoryStore())
        rejected = hits(limiter, "203.0.113.7", 2)[-1]
        assert rejected.allowed is False
        assert 0 < rejected.retry_after <= 60

    def test_expire_pose_une_seule_fois(self):
        store = SpyStore()
        limiter = FixedWindowRateLimiter(60, 5, "contact", store=store)
        hits(limiter, "198.51.100.1", 4)
        assert store.expire_calls == [("contact:198.51.100.1", 60)]

    def test_identifiants_independants(self):
        limiter = FixedWindowRateLimiter(60, 1, "faq_vote", store=MemoryStore())
        assert hits(limiter, "a", 1)[0].allowed is True
        assert hits(limiter, "b", 1)[0].allowed is True
        assert hits(limiter, "a", 1)[0].allowed is False

    def test_fenetre_expiree(self):
        store = MemoryStore()
        limiter = FixedWindowRateLimiter(60, 1, "contact", store=store)
        assert hits(limiter, "x", 2)[1].allowed is False
        count, _ = store._data["contact:x"]
        store._data["contact:x"] = (count, time.monotonic() - 1)
        assert hits(limiter, "x", 1)[0].allowed is True

    def test_ttl_absent_reexpire(self):
        store = SpyStore()
        store._data["contact:x"] = (5, None)
        limiter = FixedWindowRateLimiter(30, 5, "contact", store=store)
        result = hits(limiter, "x", 1)[0]
        assert result.allowed is False
        assert result.retry_after == 30
        assert store.expire_calls == [("contact:x", 30)]

    def test_redis_en_echec_laisse_passer(self):
        limiter = FixedWindowRateLimiter(60, 1, "contact", store=BrokenStore())
        results = hits(limiter, "x", 3)
        assert all(r.allowed for r in results)


class TestMemoryStore:
    def test_ttl_codes(self):
        store = MemoryStore()

        async def run():
            missing = await store.ttl("k")
            await store.incr("k")
            persistent = await store.ttl("k")
            await store.expire("k", 10)
            return missing, persistent, await store.ttl("k")

        assert asyncio.run(run()) == (-2, -1, 10)

    def test_cles_expirees_balayees(self):
        store = MemoryStore()
        store._data.update({f"contact:203.0.113.{i}": (1, -1e9) for i in range(100)})
        store._data["contact:live"] = (1, time.monotonic() + 60)
        asyncio.run(store.incr("contact:198.51.100.1"))
        assert set(store._data) == {"contact:live", "contact:198.51.100.1"}

    def test_balayage_espace(self):
        store = MemoryStore()
        asyncio.run(store.incr("a"))
        store._data["b"] = (1, -1e9)
        asyncio.run(store.incr("c"))
        assert "b" in store._data


# ── IP client ─────────────────────────────────────────────────────────────

class TestClientIP:
    @pytest.mark.parametrize("headers,expected", [
        ({"x-forwarded-for": "203.0.113.7, 10.0.0.1"}, "203.0.113.7"),
        ({"x-forwarded-for": " 198.51.100.2 "}, "198.51.100.2"),
        ({"x-real-ip": "192.0.2.9"}, "192.0.2.9"),
        ({"x-forwarded-for": "", "x-real-ip": "192.0.2.9"}, "192.0.2.9"),
        ({}, "unknown"),
    ])
    def test_client_ip(self, headers, expected):
        assert client_ip(headers) == expected
