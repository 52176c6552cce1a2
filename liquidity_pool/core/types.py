"""Value types for the liquidity and swap engines.

Requests and results are frozen dataclasses and never stored. Each result can
render the fund-movement instructions the custody layer has to execute; the
engines themselves never move funds.

Units/conventions:
- all amounts are u64 integers in the asset's smallest unit,
- asset 0 / asset 1 follow the pool's fixed pair ordering.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Union

from ..kernels.python.cpmm_swap_v1 import SwapQuote
from ..kernels.python.lp_shares_v1 import RateMode
from ..kernels.python.wide_math import require_u64
from ..state.pools import PoolState


@unique
class Asset(Enum):
    """Pooled assets; the value is the custody asset id."""
    ASSET0 = "asset0"
    ASSET1 = "asset1"


@unique
class SwapDirection(Enum):
    ZERO_FOR_ONE = "zero_for_one"  # asset 0 in, asset 1 out
    ONE_FOR_ZERO = "one_for_zero"  # asset 1 in, asset 0 out

    @property
    def source(self) -> Asset:
        return Asset.ASSET0 if self is SwapDirection.ZERO_FOR_ONE else Asset.ASSET1

    @property
    def destination(self) -> Asset:
        return Asset.ASSET1 if self is SwapDirection.ZERO_FOR_ONE else Asset.ASSET0


@unique
class Flow(Enum):
    USER_TO_POOL = "user_to_pool"
    POOL_TO_USER = "pool_to_user"


# -- Fund-movement instructions ----------------------------------------------

@dataclass(frozen=True)
class Transfer:
    asset: Asset
    flow: Flow
    amount: int


@dataclass(frozen=True)
class MintShares:
    amount: int


@dataclass(frozen=True)
class BurnShares:
    amount: int


Instruction = Union[Transfer, MintShares, BurnShares]


# -- Snapshot ----------------------------------------------------------------

@dataclass(frozen=True)
class ReservePair:
    """Custodied reserves of both assets, read together with total_shares."""

    reserve0: int
    reserve1: int

    def __post_init__(self) -> None:
        require_u64("reserve0", self.reserve0)
        require_u64("reserve1", self.reserve1)

    def select(self, direction: SwapDirection) -> tuple[int, int]:
        """Return (reserve_src, reserve_dst) for a swap direction."""
        if direction is SwapDirection.ZERO_FOR_ONE:
            return self.reserve0, self.reserve1
        return self.reserve1, self.reserve0


@dataclass(frozen=True)
class PoolSnapshot:
    """One consistent view of (reserve0, reserve1, total_shares) plus the fee."""

    pool: PoolState
    reserves: ReservePair

    def to_dict(self) -> dict[str, int]:
        return {
            **self.pool.to_dict(),
            "reserve0": self.reserves.reserve0,
            "reserve1": self.reserves.reserve1,
        }


# -- Requests / results ------------------------------------------------------

@dataclass(frozen=True)
class AddLiquidityRequest:
    amount0: int
    amount1: int


@dataclass(frozen=True)
class AddLiquidityResult:
    deposit0: int
    deposit1: int
    shares_minted: int

    def instructions(self) -> list[Instruction]:
        return [
            Transfer(Asset.ASSET0, Flow.USER_TO_POOL, self.deposit0),
            Transfer(Asset.ASSET1, Flow.USER_TO_POOL, self.deposit1),
            MintShares(self.shares_minted),
        ]


@dataclass(frozen=True)
class RemoveLiquidityRequest:
    shares_burned: int
    # Optional floors; 0 accepts any computed amount.
    min_amount0_out: int = 0
    min_amount1_out: int = 0


@dataclass(frozen=True)
class RemoveLiquidityResult:
    amount0_out: int
    amount1_out: int
    shares_burned: int

    def instructions(self) -> list[Instruction]:
        return [
            BurnShares(self.shares_burned),
            Transfer(Asset.ASSET0, Flow.POOL_TO_USER, self.amount0_out),
            Transfer(Asset.ASSET1, Flow.POOL_TO_USER, self.amount1_out),
        ]


@dataclass(frozen=True)
class SwapRequest:
    amount_in: int
    min_amount_out: int
    direction: SwapDirection


@dataclass(frozen=True)
class SwapResult:
    amount_out: int
    direction: SwapDirection
    quote: SwapQuote

    def instructions(self) -> list[Instruction]:
        return [
            Transfer(self.direction.source, Flow.USER_TO_POOL, self.quote.amount_in),
            Transfer(self.direction.destination, Flow.POOL_TO_USER, self.amount_out),
        ]


OperationResult = Union[AddLiquidityResult, RemoveLiquidityResult, SwapResult]

__all__ = [
    "Asset",
    "SwapDirection",
    "Flow",
    "Transfer",
    "MintShares",
    "BurnShares",
    "Instruction",
    "ReservePair",
    "PoolSnapshot",
    "AddLiquidityRequest",
    "AddLiquidityResult",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResult",
    "SwapRequest",
    "SwapResult",
    "OperationResult",
    "RateMode",
    "SwapQuote",
]
