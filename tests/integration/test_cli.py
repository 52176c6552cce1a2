# [TESTER] v1

from __future__ import annotations

import json

import pytest

from liquidity_pool.integration.cli import main

_ENV_KEYS = (
    "POOL_STATE_PATH",
    "POOL_RATE_MODE",
    "POOL_FEE_NUMERATOR",
    "POOL_FEE_DENOMINATOR",
)


@pytest.fixture
def state(tmp_path, monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return str(tmp_path / "state.json")


def _run(capsys, state: str, *argv: str) -> tuple[int, object, str]:
    rc = main(["--state", state, *argv])
    captured = capsys.readouterr()
    out = json.loads(captured.out) if captured.out.strip() else None
    return rc, out, captured.err


def test_cli_session(capsys, state: str) -> None:
    rc, out, _ = _run(capsys, state, "init", "--fee-numerator", "1", "--fee-denominator", "10000")
    assert rc == 0
    assert out == {"total_shares": 0, "fee_numerator": 1, "fee_denominator": 10000, "reserve0": 0, "reserve1": 0}

    assert _run(capsys, state, "fund", "alice", "asset0", "5000")[0] == 0
    assert _run(capsys, state, "fund", "alice", "asset1", "5000")[0] == 0
    assert _run(capsys, state, "fund", "bob", "asset0", "100")[0] == 0

    rc, out, _ = _run(capsys, state, "add-liquidity", "alice", "1000", "2000")
    assert rc == 0
    assert out == {"deposit0": 1000, "deposit1": 2000, "shares_minted": 1500}

    rc, out, _ = _run(capsys, state, "quote", "100")
    assert rc == 0
    assert out["amount_out"] == 182

    rc, out, _ = _run(capsys, state, "swap", "bob", "100", "--min-out", "182")
    assert rc == 0
    assert out["amount_out"] == 182
    assert out["direction"] == "zero_for_one"

    rc, out, _ = _run(capsys, state, "remove-liquidity", "alice", "1500")
    assert rc == 0
    assert out == {"amount0_out": 1100, "amount1_out": 1818, "shares_burned": 1500}

    rc, out, _ = _run(capsys, state, "show", "--account", "bob")
    assert rc == 0
    assert out["pool"]["total_shares"] == 0
    assert out["rate_mode"] == "floor_rate"
    assert out["account"] == {"name": "bob", "asset0": 0, "asset1": 182, "shares": 0}


def test_cli_reports_pool_errors(capsys, state: str) -> None:
    _run(capsys, state, "init")
    _run(capsys, state, "fund", "alice", "asset0", "10")
    _run(capsys, state, "fund", "alice", "asset1", "10")

    rc, out, err = _run(capsys, state, "add-liquidity", "alice", "1", "0")
    assert rc == 1
    assert out is None
    assert "error: zero_mint_amount:" in err


def test_cli_refuses_to_overwrite_state(capsys, state: str) -> None:
    assert _run(capsys, state, "init")[0] == 0
    rc, _, err = _run(capsys, state, "init")
    assert rc == 1
    assert "already exists" in err
    assert _run(capsys, state, "init", "--force")[0] == 0


def test_cli_missing_state_file(capsys, state: str) -> None:
    rc, _, err = _run(capsys, state, "show")
    assert rc == 1
    assert "error:" in err


def test_cli_rejects_negative_amounts(capsys, state: str) -> None:
    with pytest.raises(SystemExit):
        main(["--state", state, "fund", "alice", "asset0", "-5"])


@pytest.mark.parametrize(
    "corrupt",
    [
        lambda state: state.__setitem__("balances", [5]),
        lambda state: state.__setitem__("shares", [None]),
        lambda state: state["pool"].pop("fee_numerator"),
    ],
)
def test_cli_reports_corrupt_state_file(capsys, state: str, corrupt) -> None:
    assert _run(capsys, state, "init")[0] == 0
    with open(state, encoding="utf-8") as fh:
        raw = json.load(fh)
    corrupt(raw["state"])
    with open(state, "w", encoding="utf-8") as fh:
        json.dump(raw, fh)

    rc, out, err = _run(capsys, state, "show")
    assert rc == 1
    assert out is None
    assert "error:" in err
