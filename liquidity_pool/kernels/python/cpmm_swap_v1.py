"""
CPMM swap kernel (v1 semantics).

Constant-product exchange with a proportional fee on the input:
- `fee = floor(amount_in * fee_numerator / fee_denominator)`
- `effective_in = amount_in - fee`
- `invariant = reserve_src * reserve_dst` (pre-trade, never recomputed)
- `new_reserve_dst = floor(invariant / (reserve_src + effective_in))`
- `amount_out = reserve_dst - new_reserve_dst`

The trader pays the full `amount_in`; the fee stays in the source reserve and
accrues to liquidity providers through reserve growth.
"""

from __future__ import annotations

from dataclasses import dataclass

from ...errors import InvalidFeeScheduleError, SlippageExceededError
from .wide_math import (
    U64_MAX,
    checked_add_u64,
    checked_div,
    mul_div_floor,
    narrow_u64,
    require_int,
    require_u64,
    wide_add,
    wide_mul,
    wide_sub,
)


def validate_fee_schedule(fee_numerator: int, fee_denominator: int) -> None:
    """Fee rate must be a fraction in [0, 1] with u64 parts and a positive denominator."""
    require_int("fee_numerator", fee_numerator)
    require_int("fee_denominator", fee_denominator)
    if not (0 <= fee_numerator <= U64_MAX) or not (0 <= fee_denominator <= U64_MAX):
        raise InvalidFeeScheduleError(
            f"fee parts must be u64: {fee_numerator}/{fee_denominator}"
        )
    if fee_denominator == 0:
        raise InvalidFeeScheduleError("fee_denominator must be positive")
    if fee_numerator > fee_denominator:
        raise InvalidFeeScheduleError(
            f"fee_numerator ({fee_numerator}) exceeds fee_denominator ({fee_denominator})"
        )


@dataclass(frozen=True)
class SwapQuote:
    amount_in: int
    fee: int
    effective_in: int
    amount_out: int
    invariant_before: int
    new_reserve_src: int
    new_reserve_dst: int
    reserve_src_after: int
    reserve_dst_after: int

    @property
    def invariant_after(self) -> int:
        return self.reserve_src_after * self.reserve_dst_after


def compute_fee(*, amount_in: int, fee_numerator: int, fee_denominator: int) -> int:
    """
    Compute `fee = floor(amount_in * fee_numerator / fee_denominator)`.
    """
    validate_fee_schedule(fee_numerator, fee_denominator)
    return mul_div_floor(amount_in, fee_numerator, fee_denominator, name="fee")


def quote_exact_in(
    *,
    reserve_src: int,
    reserve_dst: int,
    fee_numerator: int,
    fee_denominator: int,
    amount_in: int,
) -> SwapQuote:
    """
    Exact-in swap quote + post-state. No balance or slippage checks.
    """
    for name, v in (
        ("reserve_src", reserve_src),
        ("reserve_dst", reserve_dst),
        ("amount_in", amount_in),
    ):
        require_u64(name, v)

    fee = compute_fee(amount_in=amount_in, fee_numerator=fee_numerator, fee_denominator=fee_denominator)
    # fee <= amount_in because fee_numerator <= fee_denominator.
    effective_in = amount_in - fee

    invariant = wide_mul(reserve_src, reserve_dst)
    new_reserve_src = wide_add(reserve_src, effective_in)
    new_reserve_dst = checked_div(invariant, new_reserve_src)
    amount_out = narrow_u64("amount_out", wide_sub(reserve_dst, new_reserve_dst))

    # The full input (fee included) lands in the source reserve, which must
    # still be representable as a u64 balance.
    reserve_src_after = checked_add_u64(reserve_src, amount_in)

    return SwapQuote(
        amount_in=amount_in,
        fee=fee,
        effective_in=effective_in,
        amount_out=amount_out,
        invariant_before=invariant,
        new_reserve_src=new_reserve_src,
        new_reserve_dst=new_reserve_dst,
        reserve_src_after=reserve_src_after,
        reserve_dst_after=narrow_u64("reserve_dst_after", new_reserve_dst),
    )


def swap_exact_in(
    *,
    reserve_src: int,
    reserve_dst: int,
    fee_numerator: int,
    fee_denominator: int,
    amount_in: int,
    min_amount_out: int,
) -> SwapQuote:
    """
    Exact-in swap with a minimum-output floor.

    Raises SlippageExceededError if `amount_out < min_amount_out`.
    """
    require_u64("min_amount_out", min_amount_out)
    quote = quote_exact_in(
        reserve_src=reserve_src,
        reserve_dst=reserve_dst,
        fee_numerator=fee_numerator,
        fee_denominator=fee_denominator,
        amount_in=amount_in,
    )
    if quote.amount_out < min_amount_out:
        raise SlippageExceededError(
            f"amount_out ({quote.amount_out}) < min_amount_out ({min_amount_out})"
        )
    return quote
