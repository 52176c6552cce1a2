"""
Constant Product Market Maker (CPMM) swap operations.

Algorithm Design:
- Type: Fixed-Point Integer Arithmetic / Deterministic Rounding
- Time Complexity: O(1) per swap operation
- Space Complexity: O(1) auxiliary
- Invariant: reserve_src' * reserve_dst' >= reserve_src * reserve_dst; fees
  strictly grow it, zero-fee swaps lose at most floor-rounding dust.

Swaps never touch PoolState; only the fee schedule is read from it.
"""

from __future__ import annotations

from typing import Optional

from ..errors import InsufficientBalanceError
from ..kernels.python.cpmm_swap_v1 import SwapQuote, quote_exact_in, swap_exact_in
from ..kernels.python.wide_math import require_u64
from ..state.pools import PoolState
from .types import ReservePair, SwapDirection, SwapRequest, SwapResult


def quote_swap(
    pool: PoolState,
    reserves: ReservePair,
    amount_in: int,
    direction: SwapDirection,
) -> SwapQuote:
    """
    Read-only pre-trade estimate for an exact-in swap.

    Runs the same arithmetic as `swap` without balance or slippage checks.
    """
    reserve_src, reserve_dst = reserves.select(direction)
    return quote_exact_in(
        reserve_src=reserve_src,
        reserve_dst=reserve_dst,
        fee_numerator=pool.fee_numerator,
        fee_denominator=pool.fee_denominator,
        amount_in=amount_in,
    )


def swap(
    pool: PoolState,
    reserves: ReservePair,
    request: SwapRequest,
    *,
    available_in: Optional[int] = None,
) -> SwapResult:
    """
    Compute the output of an exact-in swap.

    The CPMM formula, with the fee charged on input:
        fee = floor(amount_in * fee_numerator / fee_denominator)
        new_reserve_dst = floor(reserve_src * reserve_dst / (reserve_src + amount_in - fee))
        amount_out = reserve_dst - new_reserve_dst

    Args:
        pool: Pool state (fee schedule)
        reserves: Current custodied reserves
        request: amount_in, min_amount_out and direction
        available_in: Trader's source-asset balance, re-validated when given

    Returns:
        SwapResult carrying amount_out and the full quote

    Raises:
        InsufficientBalanceError: amount_in exceeds the trader's balance
        SlippageExceededError: amount_out < min_amount_out
        ArithmeticOverflowError: A checked step overflowed
    """
    require_u64("amount_in", request.amount_in)
    if available_in is not None:
        require_u64("available_in", available_in)
        if request.amount_in > available_in:
            raise InsufficientBalanceError(
                f"amount_in ({request.amount_in}) exceeds available ({available_in})"
            )

    reserve_src, reserve_dst = reserves.select(request.direction)
    quote = swap_exact_in(
        reserve_src=reserve_src,
        reserve_dst=reserve_dst,
        fee_numerator=pool.fee_numerator,
        fee_denominator=pool.fee_denominator,
        amount_in=request.amount_in,
        min_amount_out=request.min_amount_out,
    )
    return SwapResult(amount_out=quote.amount_out, direction=request.direction, quote=quote)
