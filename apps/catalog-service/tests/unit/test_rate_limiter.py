import pytest

from catalog.errors import ErrorCode
from catalog.utils.rate_limit import (
    TIERS,
    RateLimitExceeded,
    RateLimiter,
    RateLimitTier,
    rate_limit_key,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class FakeConn:
    def __init__(self, headers=None, host="10.0.0.1"):
        self.headers = headers or {}
        self.client = type("Client", (), {"host": host})() if host else None


def test_tier_table():
    assert (TIERS[RateLimitTier.SHORT].window_seconds, TIERS[RateLimitTier.SHORT].max_requests) == (1, 3)
    assert (TIERS[RateLimitTier.MEDIUM].window_seconds, TIERS[RateLimitTier.MEDIUM].max_requests) == (10, 20)
    assert (TIERS[RateLimitTier.LONG].window_seconds, TIERS[RateLimitTier.LONG].max_requests) == (60, 100)


def test_short_tier_blocks_fourth_request_and_resets_after_window():
    clock = FakeClock()
    limiter = RateLimiter(timer=clock)
    for _ in range(3):
        assert limiter.hit(RateLimitTier.SHORT, "ip:1") == (True, None)
    allowed, retry_after = limiter.hit(RateLimitTier.SHORT, "ip:1")
    assert not allowed
    assert retry_after == 1

    clock.now += 1.0
    assert limiter.hit(RateLimitTier.SHORT, "ip:1")[0]


def test_keys_and_tiers_are_counted_separately():
    limiter = RateLimiter(timer=FakeClock())
    for _ in range(3):
        limiter.hit(RateLimitTier.SHORT, "ip:1")
    assert limiter.hit(RateLimitTier.SHORT, "ip:2")[0]
    assert limiter.hit(RateLimitTier.MEDIUM, "ip:1")[0]


def test_enforce_raises_with_retry_after():
    clock = FakeClock()
    limiter = RateLimiter(timer=clock)
    for _ in range(20):
        limiter.enforce(RateLimitTier.MEDIUM, "user:abc")
    clock.now += 4
    with pytest.raises(RateLimitExceeded) as excinfo:
        limiter.enforce(RateLimitTier.MEDIUM, "user:abc")
    assert excinfo.value.status == 429
    assert excinfo.value.code == ErrorCode.TOO_MANY_REQUESTS
    assert excinfo.value.retry_after == 6


def test_reset_clears_windows():
    limiter = RateLimiter(timer=FakeClock())
    for _ in range(4):
        limiter.hit(RateLimitTier.SHORT, "k")
    limiter.reset()
    assert limiter.hit(RateLimitTier.SHORT, "k")[0]


def test_rate_limit_key_prefers_user_then_forwarded_ip():
    conn = FakeConn(headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.2"})
    assert rate_limit_key(conn, "u1") == "user:u1"
    assert rate_limit_key(conn) == "ip:203.0.113.7"
    assert rate_limit_key(FakeConn()) == "ip:10.0.0.1"
    assert rate_limit_key(FakeConn(host=None)) == "ip:unknown"
