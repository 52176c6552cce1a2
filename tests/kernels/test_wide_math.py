# [TESTER] v1

from __future__ import annotations

import pytest

from liquidity_pool.errors import ArithmeticOverflowError
from liquidity_pool.kernels.python.wide_math import (
    U64_MAX,
    U128_MAX,
    checked_add_u64,
    checked_div,
    checked_mul_u64,
    checked_sub_u64,
    mul_div_floor,
    narrow_u64,
    require_u64,
    wide_add,
    wide_mul,
)


def test_u64_add_overflow_raises_instead_of_wrapping() -> None:
    assert checked_add_u64(U64_MAX - 1, 1) == U64_MAX
    with pytest.raises(ArithmeticOverflowError):
        checked_add_u64(U64_MAX, 1)


def test_u64_sub_underflow_raises() -> None:
    with pytest.raises(ArithmeticOverflowError):
        checked_sub_u64(0, 1)


def test_u64_mul_overflow_raises() -> None:
    assert checked_mul_u64(1 << 32, (1 << 32) - 1) == (1 << 64) - (1 << 32)
    with pytest.raises(ArithmeticOverflowError):
        checked_mul_u64(1 << 32, 1 << 32)


def test_division_by_zero_is_an_overflow() -> None:
    with pytest.raises(ArithmeticOverflowError, match="division by zero"):
        checked_div(5, 0)


def test_wide_mul_holds_max_u64_square() -> None:
    product = wide_mul(U64_MAX, U64_MAX)
    assert product == U64_MAX * U64_MAX
    assert product <= U128_MAX


def test_wide_mul_rejects_operands_outside_u64() -> None:
    with pytest.raises(ArithmeticOverflowError):
        wide_mul(U64_MAX + 1, 1)


def test_wide_add_rejects_u128_overflow() -> None:
    with pytest.raises(ArithmeticOverflowError):
        wide_add(U128_MAX, 1)


def test_mul_div_floor_at_u64_max() -> None:
    # The product needs all 128 bits; the quotient fits back into 64.
    assert mul_div_floor(U64_MAX, U64_MAX, U64_MAX) == U64_MAX
    assert mul_div_floor(7, 3, 2) == 10


def test_mul_div_floor_rejects_quotient_wider_than_u64() -> None:
    with pytest.raises(ArithmeticOverflowError):
        mul_div_floor(U64_MAX, 2, 1)


def test_narrow_u64_boundary() -> None:
    assert narrow_u64("x", U64_MAX) == U64_MAX
    with pytest.raises(ArithmeticOverflowError):
        narrow_u64("x", U64_MAX + 1)


@pytest.mark.parametrize("value", [-1, U64_MAX + 1])
def test_require_u64_rejects_out_of_domain(value: int) -> None:
    with pytest.raises(ArithmeticOverflowError):
        require_u64("value", value)


@pytest.mark.parametrize("value", [True, 1.0, "1"])
def test_require_u64_rejects_non_ints(value: object) -> None:
    with pytest.raises(TypeError):
        require_u64("value", value)  # type: ignore[arg-type]
