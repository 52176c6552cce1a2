"""
Read-only HTTP API for a file-backed pool.

Routes:
- GET /health
- GET /pool                                    -> reserves, total_shares, fee
- GET /quote?amount_in=N&direction=zero_for_one -> swap estimate

Security posture:
- Default-deny CORS (no wildcard; see `parse_cors_origins`)
- Basic rate limiting (per-IP, token bucket)
- No state-changing routes
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import threading
import time
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, FrozenSet, Mapping, Optional, Sequence, Tuple
from urllib.parse import parse_qs

from ..core.types import SwapDirection
from ..errors import PoolError
from .config import ServiceConfig, load_config
from .service import PoolService

logger = logging.getLogger(__name__)

SERVICE_NAME = "liquidity-pool-api"


@dataclass
class RateLimitBucket:
    tokens: float
    updated_at: float


class TokenBucketRateLimiter:
    """
    Per-IP token bucket. `rpm <= 0` disables limiting.
    """

    def __init__(self, *, rpm: int, clock=time.monotonic) -> None:
        self._rpm = int(max(0, rpm))
        self._capacity = float(max(1, rpm)) if rpm > 0 else 0.0
        self._refill_per_s = float(rpm) / 60.0 if rpm > 0 else 0.0
        self._buckets: dict[str, RateLimitBucket] = {}
        self._clock = clock
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        if self._rpm <= 0:
            return True
        with self._lock:
            now = self._clock()
            b = self._buckets.get(key)
            if b is None:
                self._buckets[key] = RateLimitBucket(tokens=self._capacity - 1.0, updated_at=now)
                return True
            dt = max(0.0, now - b.updated_at)
            b.tokens = min(self._capacity, b.tokens + dt * self._refill_per_s)
            b.updated_at = now
            if b.tokens >= 1.0:
                b.tokens -= 1.0
                return True
            return False


def _single(query: Mapping[str, list[str]], name: str) -> Optional[str]:
    values = query.get(name)
    if not values:
        return None
    if len(values) != 1:
        raise ValueError(f"{name} given more than once")
    return values[0]


def _quote_params(raw_query: str) -> Tuple[int, SwapDirection]:
    query = parse_qs(raw_query, keep_blank_values=True, max_num_fields=8)
    raw_amount = _single(query, "amount_in")
    if raw_amount is None:
        raise ValueError("amount_in is required")
    # Decimal digits only: no sign, no whitespace, no underscores.
    if not raw_amount.isascii() or not raw_amount.isdigit() or len(raw_amount) > 40:
        raise ValueError("amount_in must be a decimal integer")
    raw_direction = _single(query, "direction") or SwapDirection.ZERO_FOR_ONE.value
    try:
        direction = SwapDirection(raw_direction)
    except ValueError as exc:
        raise ValueError(f"unknown direction: {raw_direction!r}") from exc
    return int(raw_amount), direction


def route(service: PoolService, target: str) -> Tuple[int, Any]:
    """
    Resolve a GET request target to (status, JSON body).

    Kept free of socket handling so it can be exercised directly.
    """
    path, _, raw_query = (target or "").partition("?")

    if path == "/health":
        return 200, {"status": "healthy", "service": SERVICE_NAME}

    if path == "/pool":
        return 200, {"ok": True, "pool": service.snapshot().to_dict(), "rate_mode": service.rate_mode.value}

    if path == "/quote":
        try:
            amount_in, direction = _quote_params(raw_query)
        except ValueError as exc:
            return 400, {"ok": False, "error": "bad_request", "detail": str(exc)}
        try:
            quote = service.quote_swap(amount_in, direction)
        except PoolError as exc:
            return 400, {"ok": False, "error": exc.code}
        body = dataclasses.asdict(quote)
        # u128 intermediates exceed JSON-safe integers in most clients.
        body["invariant_before"] = str(quote.invariant_before)
        body["new_reserve_src"] = str(quote.new_reserve_src)
        body["new_reserve_dst"] = str(quote.new_reserve_dst)
        return 200, {"ok": True, "direction": direction.value, "quote": body}

    return 404, {"ok": False, "error": "not_found"}


class _Handler(BaseHTTPRequestHandler):
    server_version = "LiquidityPoolApi/1"

    # BaseHTTPRequestHandler uses these to cap the request line and headers.
    max_requestline = 8192
    max_headers = 100

    def _client_ip(self) -> str:
        # X-Forwarded-For is not trusted.
        try:
            return str(self.client_address[0])
        except (TypeError, IndexError):
            return "unknown"

    def _allowed_cors_origin_or_none(self) -> Optional[str]:
        allowed: FrozenSet[str] = self.server.cors_origins  # type: ignore[attr-defined]
        origin = self.headers.get("Origin")
        if not isinstance(origin, str) or not origin:
            return None
        return origin if origin in allowed else None

    def _write_json(self, status: int, obj: object, *, cors_origin: Optional[str]) -> None:
        body = json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        self.send_response(int(status))
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Cache-Control", "no-store")
        self.send_header("Content-Length", str(len(body)))
        if cors_origin is not None:
            self.send_header("Access-Control-Allow-Origin", cors_origin)
            self.send_header("Vary", "Origin")
        self.end_headers()
        self.wfile.write(body)

    def do_OPTIONS(self) -> None:  # noqa: N802
        cors_origin = self._allowed_cors_origin_or_none()
        self.send_response(204)
        if cors_origin is not None:
            self.send_header("Access-Control-Allow-Origin", cors_origin)
            self.send_header("Access-Control-Allow-Methods", "GET,OPTIONS")
            self.send_header("Access-Control-Allow-Headers", "Content-Type")
            self.send_header("Access-Control-Max-Age", "600")
            self.send_header("Vary", "Origin")
        self.end_headers()

    def do_GET(self) -> None:  # noqa: N802
        limiter: TokenBucketRateLimiter = self.server.rate_limiter  # type: ignore[attr-defined]
        if not limiter.allow(self._client_ip()):
            self._write_json(429, {"ok": False, "error": "rate_limited"}, cors_origin=None)
            return
        service: PoolService = self.server.pool_service  # type: ignore[attr-defined]
        status, body = route(service, self.path)
        self._write_json(status, body, cors_origin=self._allowed_cors_origin_or_none())

    def log_message(self, fmt: str, *args: object) -> None:
        # Drop the query string and client address from access logs.
        msg = fmt % args if args else fmt
        logger.info("%s %s => %s", self.command, (self.path or "").split("?", 1)[0], msg)


def build_server(config: ServiceConfig, service: Optional[PoolService] = None) -> ThreadingHTTPServer:
    httpd = ThreadingHTTPServer((config.api_host, config.api_port), _Handler)
    # Handler reads these off the server instance.
    httpd.cors_origins = config.cors_origins  # type: ignore[attr-defined]
    httpd.rate_limiter = TokenBucketRateLimiter(rpm=config.rate_limit_rpm)  # type: ignore[attr-defined]
    httpd.pool_service = service if service is not None else PoolService.from_config(config)  # type: ignore[attr-defined]
    return httpd


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="liquidity-pool-api", description="Read-only pool HTTP API")
    ap.add_argument("--config", default=None, help="YAML config file")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = load_config(args.config)
    httpd = build_server(config)
    logger.info(
        "%s listening on http://%s:%d (cors_origins=%s, rpm=%d)",
        SERVICE_NAME,
        config.api_host,
        config.api_port,
        sorted(config.cors_origins),
        config.rate_limit_rpm,
    )
    try:
        httpd.serve_forever(poll_interval=0.25)
    finally:
        httpd.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
