"""
Liquidity share kernel (v1 semantics).

Two regimes, selected by whether both reserves are empty:

- bootstrap: both amounts are accepted in full and
      shares = floor((amount0 + amount1) / 2)
- steady state: the deposit must match the current ratio,
      rate     = floor(reserve1 / reserve0)          (FLOOR_RATE)
      deposit1 = deposit0 * rate
  or, with EXACT_RATIO,
      deposit1 = floor(deposit0 * reserve1 / reserve0)
  and shares = floor(deposit1 * total_shares / reserve1).

Burns return floor(shares * reserve_i / total_shares) of each asset.

Every division truncates, so rounding always favours the pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Optional

from ...errors import BurnExceedsSupplyError, InsufficientBalanceError, ZeroMintAmountError
from .wide_math import (
    checked_add_u64,
    checked_div,
    checked_mul_u64,
    checked_sub_u64,
    mul_div_floor,
    narrow_u64,
    require_u64,
    wide_add,
)


@unique
class RateMode(Enum):
    """How the steady-state deposit of asset 1 is derived from asset 0."""

    # Integer exchange rate first, then multiply. Matches deployed pools.
    FLOOR_RATE = "floor_rate"
    # Single multiply-then-divide, no intermediate rate.
    EXACT_RATIO = "exact_ratio"


@dataclass(frozen=True)
class MintSharesResult:
    deposit0: int
    deposit1: int
    shares_minted: int
    new_total_shares: int
    bootstrap: bool
    rate: Optional[int] = None


@dataclass(frozen=True)
class BurnSharesResult:
    amount0_out: int
    amount1_out: int
    new_total_shares: int


def is_empty_pool(reserve0: int, reserve1: int) -> bool:
    return reserve0 == 0 and reserve1 == 0


def bootstrap_shares(*, amount0: int, amount1: int) -> int:
    """
    Shares for the first deposit: the floor average of both amounts.

    The sum is formed in u128 so two large u64 amounts never overflow; the
    halved result always fits u64.
    """
    require_u64("amount0", amount0)
    require_u64("amount1", amount1)
    shares = narrow_u64("shares_minted", wide_add(amount0, amount1) >> 1)
    if shares == 0:
        raise ZeroMintAmountError(f"bootstrap deposit ({amount0}, {amount1}) mints zero shares")
    return shares


def required_deposit1(
    *,
    reserve0: int,
    reserve1: int,
    deposit0: int,
    rate_mode: RateMode = RateMode.FLOOR_RATE,
) -> tuple[int, Optional[int]]:
    """
    Amount of asset 1 that must accompany `deposit0` at the current ratio.

    Returns (deposit1, rate); `rate` is None in EXACT_RATIO mode.
    """
    if rate_mode is RateMode.FLOOR_RATE:
        rate = checked_div(require_u64("reserve1", reserve1), require_u64("reserve0", reserve0))
        return checked_mul_u64(deposit0, rate), rate
    if rate_mode is RateMode.EXACT_RATIO:
        return mul_div_floor(deposit0, reserve1, reserve0, name="deposit1"), None
    raise ValueError(f"unsupported rate_mode: {rate_mode!r}")


def mint_shares(
    *,
    reserve0: int,
    reserve1: int,
    total_shares: int,
    amount0: int,
    amount1: int,
    rate_mode: RateMode = RateMode.FLOOR_RATE,
) -> MintSharesResult:
    """
    Deposit amounts and shares to mint for an add-liquidity request.

    Raises:
        InsufficientBalanceError: `amount1` cannot cover the ratio-matched deposit.
        ZeroMintAmountError: the deposit would mint zero shares.
        ArithmeticOverflowError: a checked step left its domain.
    """
    for name, v in (
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_shares", total_shares),
        ("amount0", amount0),
        ("amount1", amount1),
    ):
        require_u64(name, v)

    if is_empty_pool(reserve0, reserve1):
        shares = bootstrap_shares(amount0=amount0, amount1=amount1)
        return MintSharesResult(
            deposit0=amount0,
            deposit1=amount1,
            shares_minted=shares,
            new_total_shares=checked_add_u64(total_shares, shares),
            bootstrap=True,
        )

    deposit0 = amount0
    deposit1, rate = required_deposit1(
        reserve0=reserve0,
        reserve1=reserve1,
        deposit0=deposit0,
        rate_mode=rate_mode,
    )
    # Never partially fill: the caller must supply enough asset 1.
    if deposit1 > amount1:
        raise InsufficientBalanceError(
            f"deposit1 ({deposit1}) exceeds amount1 supplied ({amount1})"
        )

    shares = mul_div_floor(deposit1, total_shares, reserve1, name="shares_minted")
    if shares == 0:
        raise ZeroMintAmountError(f"deposit ({deposit0}, {deposit1}) mints zero shares")

    return MintSharesResult(
        deposit0=deposit0,
        deposit1=deposit1,
        shares_minted=shares,
        new_total_shares=checked_add_u64(total_shares, shares),
        bootstrap=False,
        rate=rate,
    )


def burn_shares(*, shares: int, reserve0: int, reserve1: int, total_shares: int) -> BurnSharesResult:
    """
    Burn shares for underlying assets (floor rounding).

    Burning the whole supply returns both reserves exactly.
    """
    for name, v in (
        ("shares", shares),
        ("reserve0", reserve0),
        ("reserve1", reserve1),
        ("total_shares", total_shares),
    ):
        require_u64(name, v)

    if shares > total_shares:
        raise BurnExceedsSupplyError(f"cannot burn {shares} shares, supply is {total_shares}")

    amount0_out = mul_div_floor(shares, reserve0, total_shares, name="amount0_out")
    amount1_out = mul_div_floor(shares, reserve1, total_shares, name="amount1_out")
    return BurnSharesResult(
        amount0_out=amount0_out,
        amount1_out=amount1_out,
        new_total_shares=checked_sub_u64(total_shares, shares),
    )
