# [TESTER] v1

from __future__ import annotations

import pytest

from liquidity_pool.errors import ArithmeticOverflowError, InvalidFeeScheduleError
from liquidity_pool.kernels.python.wide_math import U64_MAX
from liquidity_pool.state.pools import PoolState, initialize_pool


def test_initialize_pool_starts_empty() -> None:
    pool = initialize_pool(1, 10_000)
    assert pool.total_shares == 0
    assert not pool.is_initialized
    assert (pool.fee_numerator, pool.fee_denominator) == (1, 10_000)


def test_initialize_pool_defaults_to_thirty_bps() -> None:
    pool = initialize_pool()
    assert (pool.fee_numerator, pool.fee_denominator) == (3, 1000)


@pytest.mark.parametrize("num,den", [(1, 0), (5, 4)])
def test_initialize_pool_rejects_bad_fee(num: int, den: int) -> None:
    with pytest.raises(InvalidFeeScheduleError):
        initialize_pool(num, den)


def test_total_shares_must_fit_u64() -> None:
    with pytest.raises(ArithmeticOverflowError):
        PoolState(fee_numerator=0, fee_denominator=1, total_shares=U64_MAX + 1)


def test_dict_roundtrip_and_copy_independence() -> None:
    pool = PoolState(fee_numerator=3, fee_denominator=1000, total_shares=42)
    assert pool.to_dict() == {"total_shares": 42, "fee_numerator": 3, "fee_denominator": 1000}
    assert PoolState.from_dict(pool.to_dict()) == pool

    clone = pool.copy()
    clone.total_shares = 7
    assert pool.total_shares == 42


def test_from_dict_rejects_missing_and_non_int_fields() -> None:
    with pytest.raises(ValueError, match="missing fields: total_shares"):
        PoolState.from_dict({"fee_numerator": 3, "fee_denominator": 1000})
    with pytest.raises(TypeError):
        PoolState.from_dict({"total_shares": "1", "fee_numerator": 3, "fee_denominator": 1000})
    with pytest.raises(TypeError):
        PoolState.from_dict({"total_shares": True, "fee_numerator": 3, "fee_denominator": 1000})
