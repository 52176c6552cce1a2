"""
Service configuration.

Precedence (lowest to highest):
1. `ServiceConfig` defaults,
2. an optional YAML file (flat mapping of field names),
3. environment variables.

Out-of-range integers from the environment are clamped, matching the
behaviour operators already rely on for the API server knobs.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, FrozenSet, Mapping, Optional

import yaml

from ..kernels.python.lp_shares_v1 import RateMode
from ..kernels.python.wide_math import U64_MAX
from ..state.pools import DEFAULT_FEE_DENOMINATOR, DEFAULT_FEE_NUMERATOR


@dataclass(frozen=True)
class ServiceConfig:
    # Persisted ledger location.
    state_path: str = "pool_state.json"
    # Steady-state deposit rule; FLOOR_RATE matches deployed pools.
    rate_mode: RateMode = RateMode.FLOOR_RATE
    # Fee schedule used by `init` when none is given explicitly.
    fee_numerator: int = DEFAULT_FEE_NUMERATOR
    fee_denominator: int = DEFAULT_FEE_DENOMINATOR

    # Read-only HTTP surface.
    api_host: str = "127.0.0.1"
    api_port: int = 8000
    cors_origins: FrozenSet[str] = field(default_factory=frozenset)
    rate_limit_rpm: int = 600


def _env_int(env: Mapping[str, str], name: str, default: int, *, lo: int, hi: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return int(default)
    try:
        v = int(raw.strip())
    except ValueError:
        return int(default)
    if v < lo:
        return int(lo)
    if v > hi:
        return int(hi)
    return int(v)


def _env_str(env: Mapping[str, str], name: str, default: str) -> str:
    raw = env.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def parse_cors_origins(value: str) -> FrozenSet[str]:
    """
    Parse CORS origins list. Supports comma-separated values.

    Default is empty (deny CORS). '*' is ignored; operators must list
    trusted origins explicitly.
    """
    out = set()
    for item in (value or "").split(","):
        origin = item.strip()
        if not origin or origin == "*":
            continue
        out.add(origin)
    return frozenset(out)


def parse_rate_mode(value: Any) -> RateMode:
    if isinstance(value, RateMode):
        return value
    if not isinstance(value, str):
        raise TypeError("rate_mode must be a string")
    try:
        return RateMode(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(m.value for m in RateMode)
        raise ValueError(f"unknown rate_mode {value!r} (expected one of: {choices})") from exc


def _coerce(name: str, value: Any) -> Any:
    if name == "rate_mode":
        return parse_rate_mode(value)
    if name == "cors_origins":
        if isinstance(value, str):
            return parse_cors_origins(value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return parse_cors_origins(",".join(str(v) for v in value))
        raise TypeError("cors_origins must be a string or a list")
    if name in ("state_path", "api_host"):
        if not isinstance(value, str) or not value:
            raise TypeError(f"{name} must be a non-empty string")
        return value
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    return value


def load_yaml_config(path: Path, base: Optional[ServiceConfig] = None) -> ServiceConfig:
    obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    if obj is None:
        obj = {}
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")

    known = {f.name for f in fields(ServiceConfig)}
    unknown = sorted(set(obj) - known)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(map(str, unknown))}")

    updates = {name: _coerce(name, value) for name, value in obj.items()}
    return replace(base or ServiceConfig(), **updates)


def apply_env(config: ServiceConfig, env: Mapping[str, str]) -> ServiceConfig:
    rate_mode = config.rate_mode
    raw_mode = env.get("POOL_RATE_MODE")
    if raw_mode is not None and raw_mode.strip():
        rate_mode = parse_rate_mode(raw_mode)

    cors = config.cors_origins
    if env.get("CORS_ORIGINS") is not None:
        cors = parse_cors_origins(env["CORS_ORIGINS"])

    return replace(
        config,
        state_path=_env_str(env, "POOL_STATE_PATH", config.state_path),
        rate_mode=rate_mode,
        fee_numerator=_env_int(env, "POOL_FEE_NUMERATOR", config.fee_numerator, lo=0, hi=U64_MAX),
        fee_denominator=_env_int(env, "POOL_FEE_DENOMINATOR", config.fee_denominator, lo=1, hi=U64_MAX),
        api_host=_env_str(env, "API_HOST", config.api_host),
        api_port=_env_int(env, "API_PORT", config.api_port, lo=1, hi=65535),
        cors_origins=cors,
        rate_limit_rpm=_env_int(env, "RATE_LIMIT_RPM", config.rate_limit_rpm, lo=0, hi=1_000_000),
    )


def load_config(
    path: Optional[os.PathLike[str] | str] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
) -> ServiceConfig:
    """Build the effective config from defaults, an optional YAML file and the environment."""
    config = ServiceConfig()
    if path is not None:
        config = load_yaml_config(Path(path), config)
    return apply_env(config, os.environ if env is None else env)
