"""
Pool state record.

PoolState is the only durable state the core owns: the outstanding share
supply and the fee schedule. Reserves are not stored here; they are custodied
balances supplied alongside the state for each operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..kernels.python.cpmm_swap_v1 import validate_fee_schedule
from ..kernels.python.wide_math import require_u64


# 0.3%, the conventional constant-product fee.
DEFAULT_FEE_NUMERATOR = 3
DEFAULT_FEE_DENOMINATOR = 1000

POOL_STATE_FIELDS: tuple[str, ...] = ("total_shares", "fee_numerator", "fee_denominator")


@dataclass
class PoolState:
    """
    State of a two-asset liquidity pool.

    Attributes:
        fee_numerator: Fee rate numerator, applied to swap input
        fee_denominator: Fee rate denominator (positive, >= fee_numerator)
        total_shares: Outstanding liquidity-share supply (0 for a fresh pool)

    Engines mutate `total_shares` in place; callers own the instance and
    serialize access to it.
    """
    fee_numerator: int
    fee_denominator: int
    total_shares: int = 0

    def __post_init__(self) -> None:
        """Validate pool state invariants."""
        validate_fee_schedule(self.fee_numerator, self.fee_denominator)
        require_u64("total_shares", self.total_shares)

    @property
    def is_initialized(self) -> bool:
        return self.total_shares > 0

    def copy(self) -> "PoolState":
        return PoolState(
            fee_numerator=self.fee_numerator,
            fee_denominator=self.fee_denominator,
            total_shares=self.total_shares,
        )

    def to_dict(self) -> Dict[str, int]:
        return {name: int(getattr(self, name)) for name in POOL_STATE_FIELDS}

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "PoolState":
        """Deserialize a dict to a PoolState. Raises ValueError on missing fields."""
        missing = [name for name in POOL_STATE_FIELDS if name not in d]
        if missing:
            raise ValueError(f"pool is missing fields: {', '.join(missing)}")
        kwargs: Dict[str, int] = {}
        for name in POOL_STATE_FIELDS:
            val = d[name]
            if not isinstance(val, int) or isinstance(val, bool):
                raise TypeError(f"pool field {name!r} must be an int, got {type(val).__name__}")
            kwargs[name] = int(val)
        return cls(**kwargs)

    def __repr__(self) -> str:
        return (
            f"PoolState(total_shares={self.total_shares}, "
            f"fee={self.fee_numerator}/{self.fee_denominator})"
        )


def initialize_pool(
    fee_numerator: int = DEFAULT_FEE_NUMERATOR,
    fee_denominator: int = DEFAULT_FEE_DENOMINATOR,
) -> PoolState:
    """
    Create an empty pool with the given fee schedule.

    Raises:
        InvalidFeeScheduleError: If the fee is not a fraction in [0, 1]
    """
    return PoolState(fee_numerator=fee_numerator, fee_denominator=fee_denominator, total_shares=0)
