# [TESTER] v1

from __future__ import annotations

import json
import threading
import urllib.request

import pytest

from liquidity_pool.core.types import Asset
from liquidity_pool.integration.api_server import TokenBucketRateLimiter, build_server, route
from liquidity_pool.integration.config import ServiceConfig
from liquidity_pool.integration.service import PoolService


@pytest.fixture
def service() -> PoolService:
    svc = PoolService.create(3, 1000)
    svc.fund("alice", Asset.ASSET0, 1000)
    svc.fund("alice", Asset.ASSET1, 2000)
    svc.add_liquidity("alice", 1000, 2000)
    return svc


def test_health(service: PoolService) -> None:
    assert route(service, "/health") == (200, {"status": "healthy", "service": "liquidity-pool-api"})


def test_pool_route(service: PoolService) -> None:
    status, body = route(service, "/pool")
    assert status == 200
    assert body["pool"] == {
        "total_shares": 1500,
        "fee_numerator": 3,
        "fee_denominator": 1000,
        "reserve0": 1000,
        "reserve1": 2000,
    }
    assert body["rate_mode"] == "floor_rate"


def test_quote_route(service: PoolService) -> None:
    status, body = route(service, "/quote?amount_in=100")
    assert status == 200
    assert body["direction"] == "zero_for_one"
    assert body["quote"]["amount_out"] == 182
    assert body["quote"]["invariant_before"] == "2000000"

    status, body = route(service, "/quote?amount_in=100&direction=one_for_zero")
    assert status == 200
    assert body["quote"]["amount_out"] == 48


@pytest.mark.parametrize(
    "target",
    [
        "/quote",
        "/quote?amount_in=abc",
        "/quote?amount_in=-1",
        "/quote?amount_in=1&amount_in=2",
        "/quote?amount_in=1&direction=sideways",
    ],
)
def test_quote_route_rejects_bad_params(service: PoolService, target: str) -> None:
    status, body = route(service, target)
    assert status == 400
    assert body["error"] == "bad_request"


def test_quote_route_maps_pool_errors(service: PoolService) -> None:
    status, body = route(service, "/quote?amount_in=" + str(1 << 64))
    assert (status, body) == (400, {"ok": False, "error": "arithmetic_overflow"})


def test_unknown_route(service: PoolService) -> None:
    assert route(service, "/admin")[0] == 404


def test_rate_limiter_refills_over_time() -> None:
    now = [0.0]
    limiter = TokenBucketRateLimiter(rpm=2, clock=lambda: now[0])
    assert limiter.allow("1.2.3.4")
    assert limiter.allow("1.2.3.4")
    assert not limiter.allow("1.2.3.4")
    assert limiter.allow("5.6.7.8")
    now[0] = 30.0
    assert limiter.allow("1.2.3.4")


def test_rate_limiter_disabled_at_zero_rpm() -> None:
    limiter = TokenBucketRateLimiter(rpm=0)
    assert all(limiter.allow("k") for _ in range(100))


def test_server_serves_pool_with_allowed_cors_origin(service: PoolService) -> None:
    config = ServiceConfig(api_port=0, cors_origins=frozenset({"https://app.example"}))
    httpd = build_server(config, service)
    thread = threading.Thread(target=httpd.serve_forever, kwargs={"poll_interval": 0.05}, daemon=True)
    thread.start()
    try:
        host, port = httpd.server_address[:2]
        opener = urllib.request.build_opener(urllib.request.ProxyHandler({}))
        req = urllib.request.Request(f"http://{host}:{port}/pool", headers={"Origin": "https://app.example"})
        with opener.open(req, timeout=5) as resp:
            assert resp.status == 200
            assert resp.headers["Access-Control-Allow-Origin"] == "https://app.example"
            body = json.loads(resp.read().decode("utf-8"))
        assert body["pool"]["reserve1"] == 2000

        req = urllib.request.Request(f"http://{host}:{port}/health", headers={"Origin": "https://evil.example"})
        with opener.open(req, timeout=5) as resp:
            assert resp.headers.get("Access-Control-Allow-Origin") is None
    finally:
        httpd.shutdown()
        httpd.server_close()
        thread.join(timeout=5)
