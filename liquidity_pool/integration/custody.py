"""
Custody, share-token and ledger collaborators.

The engines only *describe* fund movements. This module is the imperative
side: it defines the collaborator contracts and executes a result's
instructions against them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol

from ..core.types import (
    Asset,
    BurnShares,
    Flow,
    Instruction,
    MintShares,
    PoolSnapshot,
    ReservePair,
    Transfer,
)
from ..state.balances import POOL_ACCOUNT, Account, AssetId, BalanceTable
from ..state.pools import PoolState
from ..state.shares import ShareLedger


class Custody(Protocol):
    def get(self, account: Account, asset: AssetId) -> int: ...

    def debit(self, account: Account, asset: AssetId, amount: int) -> None: ...

    def credit(self, account: Account, asset: AssetId, amount: int) -> None: ...


class ShareToken(Protocol):
    def balance_of(self, account: Account) -> int: ...

    def mint(self, account: Account, amount: int) -> None: ...

    def burn(self, account: Account, amount: int) -> None: ...


def execute_instructions(
    instructions: Iterable[Instruction],
    *,
    user: Account,
    custody: Custody,
    shares: ShareToken,
) -> None:
    """
    Apply instructions in order. Collaborator errors propagate unchanged.

    Not atomic on its own: callers stage against copies (see `PoolLedger`).
    """
    if user == POOL_ACCOUNT:
        raise ValueError(f"{POOL_ACCOUNT!r} is reserved for pool custody")
    for ins in instructions:
        if isinstance(ins, Transfer):
            if ins.flow is Flow.USER_TO_POOL:
                src, dst = user, POOL_ACCOUNT
            else:
                src, dst = POOL_ACCOUNT, user
            custody.debit(src, ins.asset.value, ins.amount)
            custody.credit(dst, ins.asset.value, ins.amount)
        elif isinstance(ins, MintShares):
            shares.mint(user, ins.amount)
        elif isinstance(ins, BurnShares):
            shares.burn(user, ins.amount)
        else:
            raise TypeError(f"unknown instruction: {ins!r}")


@dataclass
class PoolLedger:
    """
    Everything a host persists for one pool: the PoolState record, the custody
    balances (pool reserves live under POOL_ACCOUNT) and the share balances.
    """

    pool: PoolState
    balances: BalanceTable
    shares: ShareLedger

    def reserves(self) -> ReservePair:
        return ReservePair(
            reserve0=self.balances.get(POOL_ACCOUNT, Asset.ASSET0.value),
            reserve1=self.balances.get(POOL_ACCOUNT, Asset.ASSET1.value),
        )

    def snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(pool=self.pool.copy(), reserves=self.reserves())

    def copy(self) -> "PoolLedger":
        return PoolLedger(pool=self.pool.copy(), balances=self.balances.copy(), shares=self.shares.copy())

    @classmethod
    def empty(cls, pool: PoolState) -> "PoolLedger":
        return cls(pool=pool, balances=BalanceTable(), shares=ShareLedger())
