"""
Liquidity management operations: add/remove liquidity.

Both operations read `(reserves, pool.total_shares)` as one snapshot, do all
checks and arithmetic first, and only then write the new `total_shares` back
to the pool. A raised error therefore leaves the pool untouched.
"""

from __future__ import annotations

from typing import Optional

from ..errors import InsufficientBalanceError, SlippageExceededError
from ..kernels.python.lp_shares_v1 import RateMode, burn_shares, mint_shares
from ..kernels.python.wide_math import require_u64
from ..state.pools import PoolState
from .types import (
    AddLiquidityRequest,
    AddLiquidityResult,
    RemoveLiquidityRequest,
    RemoveLiquidityResult,
    ReservePair,
)


def _check_available(name: str, requested: int, available: Optional[int]) -> None:
    if available is None:
        return
    require_u64(f"available {name}", available)
    if requested > available:
        raise InsufficientBalanceError(f"{name} requested ({requested}) exceeds available ({available})")


def add_liquidity(
    pool: PoolState,
    reserves: ReservePair,
    request: AddLiquidityRequest,
    *,
    available0: Optional[int] = None,
    available1: Optional[int] = None,
    rate_mode: RateMode = RateMode.FLOOR_RATE,
) -> AddLiquidityResult:
    """
    Add liquidity to a pool.

    Empty pool (both reserves zero): both amounts are deposited in full and
    the depositor receives floor((amount0 + amount1) / 2) shares.

    Otherwise the deposit matches the current ratio:
        deposit0 = amount0
        deposit1 = deposit0 * floor(reserve1 / reserve0)     (FLOOR_RATE)
        shares   = floor(deposit1 * total_shares / reserve1)

    Args:
        pool: Pool state; `total_shares` is updated on success
        reserves: Current custodied reserves
        request: Requested amounts of both assets
        available0: Caller's asset-0 balance, re-validated when given
        available1: Caller's asset-1 balance, re-validated when given
        rate_mode: Steady-state deposit rule

    Returns:
        AddLiquidityResult(deposit0, deposit1, shares_minted)

    Raises:
        InsufficientBalanceError: Amounts exceed balances, or amount1 cannot cover the ratio
        ZeroMintAmountError: The deposit would mint zero shares
        ArithmeticOverflowError: A checked step overflowed
    """
    require_u64("amount0", request.amount0)
    require_u64("amount1", request.amount1)
    _check_available("amount0", request.amount0, available0)
    _check_available("amount1", request.amount1, available1)

    minted = mint_shares(
        reserve0=reserves.reserve0,
        reserve1=reserves.reserve1,
        total_shares=pool.total_shares,
        amount0=request.amount0,
        amount1=request.amount1,
        rate_mode=rate_mode,
    )

    pool.total_shares = minted.new_total_shares
    return AddLiquidityResult(
        deposit0=minted.deposit0,
        deposit1=minted.deposit1,
        shares_minted=minted.shares_minted,
    )


def remove_liquidity(
    pool: PoolState,
    reserves: ReservePair,
    request: RemoveLiquidityRequest,
    *,
    share_balance: Optional[int] = None,
) -> RemoveLiquidityResult:
    """
    Remove liquidity from a pool.

    Outputs:
        amount0_out = floor(shares * reserve0 / total_shares)
        amount1_out = floor(shares * reserve1 / total_shares)

    `request.min_amount0_out` / `min_amount1_out` default to 0, which accepts
    any computed amounts.

    Raises:
        InsufficientBalanceError: Caller holds fewer than `shares_burned`
        BurnExceedsSupplyError: `shares_burned > total_shares`
        SlippageExceededError: An output is below its requested floor
        ArithmeticOverflowError: A checked step overflowed (or total_shares is 0)
    """
    shares = require_u64("shares_burned", request.shares_burned)
    require_u64("min_amount0_out", request.min_amount0_out)
    require_u64("min_amount1_out", request.min_amount1_out)
    if share_balance is not None:
        require_u64("share_balance", share_balance)
        if shares > share_balance:
            raise InsufficientBalanceError(
                f"shares_burned ({shares}) exceeds share balance ({share_balance})"
            )

    burned = burn_shares(
        shares=shares,
        reserve0=reserves.reserve0,
        reserve1=reserves.reserve1,
        total_shares=pool.total_shares,
    )

    if burned.amount0_out < request.min_amount0_out:
        raise SlippageExceededError(
            f"amount0_out ({burned.amount0_out}) < min_amount0_out ({request.min_amount0_out})"
        )
    if burned.amount1_out < request.min_amount1_out:
        raise SlippageExceededError(
            f"amount1_out ({burned.amount1_out}) < min_amount1_out ({request.min_amount1_out})"
        )

    pool.total_shares = burned.new_total_shares
    return RemoveLiquidityResult(
        amount0_out=burned.amount0_out,
        amount1_out=burned.amount1_out,
        shares_burned=shares,
    )
