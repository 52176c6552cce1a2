"""
Core pool engines
"""

from .cpmm import quote_swap, swap
from .invariants import check_pool, share_value_covered
from .liquidity import add_liquidity, remove_liquidity
from .types import (
    AddLiquidityRequest,
    AddLiquidityResult,
    Asset,
    BurnShares,
    Flow,
    MintShares,
    PoolSnapshot,
    RateMode,
    RemoveLiquidityRequest,
    RemoveLiquidityResult,
    ReservePair,
    SwapDirection,
    SwapQuote,
    SwapRequest,
    SwapResult,
    Transfer,
)

__all__ = [
    "quote_swap",
    "swap",
    "check_pool",
    "share_value_covered",
    "add_liquidity",
    "remove_liquidity",
    "AddLiquidityRequest",
    "AddLiquidityResult",
    "Asset",
    "BurnShares",
    "Flow",
    "MintShares",
    "PoolSnapshot",
    "RateMode",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResult",
    "ReservePair",
    "SwapDirection",
    "SwapQuote",
    "SwapRequest",
    "SwapResult",
    "Transfer",
]
