"""Invariant checkers for the pool.

Each function returns True when the invariant holds, and `check_pool()`
returns the list of violated invariant IDs (empty = all pass).

`share_value_covered()` is the solvency law across holders: the sum of every
holder's floor entitlement never exceeds either reserve.
"""

from __future__ import annotations

from typing import Callable, Iterable

from ..kernels.python.wide_math import U64_MAX
from ..state.pools import PoolState
from .types import ReservePair


def _is_u64(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= U64_MAX


def inv_fee_fields_in_u64(p: PoolState) -> bool:
    return _is_u64(p.fee_numerator) and _is_u64(p.fee_denominator)


def inv_fee_denominator_positive(p: PoolState) -> bool:
    return p.fee_denominator > 0


def inv_fee_within_unity(p: PoolState) -> bool:
    return p.fee_numerator <= p.fee_denominator


def inv_total_shares_in_u64(p: PoolState) -> bool:
    return _is_u64(p.total_shares)


INVARIANT_REGISTRY: dict[str, Callable[[PoolState], bool]] = {
    "fee_fields_in_u64": inv_fee_fields_in_u64,
    "fee_denominator_positive": inv_fee_denominator_positive,
    "fee_within_unity": inv_fee_within_unity,
    "total_shares_in_u64": inv_total_shares_in_u64,
}


def check_pool(pool: PoolState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(pool)
    ]


def share_value_covered(reserves: ReservePair, total_shares: int, holdings: Iterable[int]) -> bool:
    """
    True when the holders' combined entitlements fit inside the reserves.

    `holdings` are the individual share balances; they must not add up to
    more than `total_shares`.
    """
    holdings = list(holdings)
    if sum(holdings) > total_shares:
        return False
    if total_shares == 0:
        return True
    owed0 = sum((h * reserves.reserve0) // total_shares for h in holdings)
    owed1 = sum((h * reserves.reserve1) // total_shares for h in holdings)
    return owed0 <= reserves.reserve0 and owed1 <= reserves.reserve1
