# [TESTER] v1

from __future__ import annotations

import pytest

from liquidity_pool.integration.config import ServiceConfig, load_config, parse_cors_origins
from liquidity_pool.kernels.python.lp_shares_v1 import RateMode


def test_defaults_without_file_or_env() -> None:
    assert load_config(None, env={}) == ServiceConfig()


def test_yaml_file_overrides_defaults(tmp_path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text(
        "state_path: /var/lib/pool/state.json\n"
        "rate_mode: exact_ratio\n"
        "fee_numerator: 1\n"
        "fee_denominator: 10000\n"
        "cors_origins:\n"
        "  - https://app.example\n"
        "  - '*'\n",
        encoding="utf-8",
    )
    config = load_config(path, env={})
    assert config.state_path == "/var/lib/pool/state.json"
    assert config.rate_mode is RateMode.EXACT_RATIO
    assert (config.fee_numerator, config.fee_denominator) == (1, 10_000)
    assert config.cors_origins == frozenset({"https://app.example"})
    assert config.api_port == 8000


def test_env_overrides_yaml(tmp_path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("api_port: 9000\nrate_mode: exact_ratio\n", encoding="utf-8")
    config = load_config(path, env={"API_PORT": "9100", "POOL_RATE_MODE": "FLOOR_RATE"})
    assert config.api_port == 9100
    assert config.rate_mode is RateMode.FLOOR_RATE


def test_env_integers_are_clamped_or_defaulted() -> None:
    config = load_config(None, env={"API_PORT": "70000", "RATE_LIMIT_RPM": "-5", "POOL_FEE_DENOMINATOR": "abc"})
    assert config.api_port == 65535
    assert config.rate_limit_rpm == 0
    assert config.fee_denominator == 1000


def test_empty_yaml_is_allowed(tmp_path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path, env={}) == ServiceConfig()


def test_unknown_yaml_keys_are_rejected(tmp_path) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text("fee_bps: 30\n", encoding="utf-8")
    with pytest.raises(ValueError, match="unknown config keys: fee_bps"):
        load_config(path, env={})


@pytest.mark.parametrize(
    "body,exc",
    [
        ("rate_mode: ceiling\n", ValueError),
        ("api_port: '8000'\n", TypeError),
        ("- a\n- b\n", TypeError),
    ],
)
def test_malformed_yaml_values(tmp_path, body: str, exc: type) -> None:
    path = tmp_path / "pool.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(exc):
        load_config(path, env={})


def test_cors_wildcard_is_ignored() -> None:
    assert parse_cors_origins("*, https://a.example ,,https://b.example") == frozenset(
        {"https://a.example", "https://b.example"}
    )
