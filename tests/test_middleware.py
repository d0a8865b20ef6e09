import pytest
from starlette.requests import Request
from starlette.responses import Response

from marine_ops.api import middleware
from marine_ops.api.middleware import RateLimitMiddleware


class Clock:
    def __init__(self, now: float):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    clock = Clock(1_000_000.0)
    monkeypatch.setattr(middleware.time, "time", clock)
    return clock


def make_request(host: str, path: str = "/api/v1/marine/vessels") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": [(b"user-agent", b"pytest")],
        "client": (host, 50000),
    })


async def ok(request):
    return Response("ok")


async def test_limit_blocks_after_allowed_calls(clock):
    limiter = RateLimitMiddleware(app=None, default_calls=2, default_period=60)

    first = await limiter.dispatch(make_request("10.0.0.1"), ok)
    await limiter.dispatch(make_request("10.0.0.1"), ok)
    blocked = await limiter.dispatch(make_request("10.0.0.1"), ok)

    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert blocked.status_code == 429

    clock.now += 61
    assert (await limiter.dispatch(make_request("10.0.0.1"), ok)).status_code == 200


async def test_idle_clients_are_forgotten(clock):
    limiter = RateLimitMiddleware(app=None, default_calls=5, default_period=60)
    for host in ("10.0.0.1", "10.0.0.2", "10.0.0.3"):
        await limiter.dispatch(make_request(host), ok)
    await limiter.dispatch(make_request("10.0.0.4", "/api/v1/auth/login"), ok)
    assert len(limiter.clients) == 4

    clock.now += 120
    await limiter.dispatch(make_request("10.0.0.1"), ok)

    # login attempts are still inside their five minute window
    assert len(limiter.clients) == 2

    clock.now += 300
    await limiter.dispatch(make_request("10.0.0.1"), ok)

    assert len(limiter.clients) == 1
