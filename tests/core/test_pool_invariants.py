# [TESTER] v1

from __future__ import annotations

from liquidity_pool.core.invariants import INVARIANT_REGISTRY, check_pool, share_value_covered
from liquidity_pool.core.types import ReservePair
from liquidity_pool.state.pools import PoolState


def test_valid_pool_has_no_violations() -> None:
    assert check_pool(PoolState(fee_numerator=3, fee_denominator=1000, total_shares=10)) == []


def test_mutated_pool_reports_violation_ids() -> None:
    pool = PoolState(fee_numerator=3, fee_denominator=1000)
    pool.fee_numerator = 2000
    pool.total_shares = -1
    violations = check_pool(pool)
    assert "fee_within_unity" in violations
    assert "total_shares_in_u64" in violations
    assert set(violations) <= set(INVARIANT_REGISTRY)


def test_share_value_covered_with_floor_entitlements() -> None:
    reserves = ReservePair(1000, 2001)
    assert share_value_covered(reserves, 3, [1, 1, 1])
    assert share_value_covered(reserves, 3, [2])
    assert share_value_covered(ReservePair(0, 0), 0, [])


def test_share_value_rejects_holdings_above_supply() -> None:
    assert not share_value_covered(ReservePair(1000, 1000), 3, [2, 2])
