"""
State management for the liquidity pool
"""

from .balances import POOL_ACCOUNT, BalanceTable
from .pools import PoolState, initialize_pool
from .shares import ShareLedger

__all__ = [
    "POOL_ACCOUNT",
    "BalanceTable",
    "PoolState",
    "initialize_pool",
    "ShareLedger",
]
