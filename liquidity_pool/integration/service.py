"""
Pool service: the caller-facing surface.

This is an imperative-shell wrapper around the functional core:
- Reads one consistent snapshot of (reserves, total_shares, balances).
- Runs the liquidity / swap engine against a staged copy of the ledger.
- Executes the returned instructions against the staged custody and share
  collaborators, checks pool invariants, then swaps the staged ledger in and
  persists it.

Any error leaves the live ledger and the stored state untouched.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..core.cpmm import quote_swap as _quote_swap
from ..core.cpmm import swap as _swap
from ..core.invariants import check_pool
from ..core.liquidity import add_liquidity as _add_liquidity
from ..core.liquidity import remove_liquidity as _remove_liquidity
from ..core.types import (
    AddLiquidityRequest,
    AddLiquidityResult,
    Asset,
    OperationResult,
    PoolSnapshot,
    RateMode,
    RemoveLiquidityRequest,
    RemoveLiquidityResult,
    SwapDirection,
    SwapQuote,
    SwapRequest,
    SwapResult,
)
from ..errors import PoolError, PoolInvariantError
from ..state.balances import POOL_ACCOUNT, Account
from ..state.pools import initialize_pool
from .config import ServiceConfig
from .custody import PoolLedger, execute_instructions
from .store import JsonFileStore

logger = logging.getLogger(__name__)


class PoolService:
    """
    Serializes operations against one pool.

    The lock only covers this process; hosts sharing a state file across
    processes must serialize at a higher level.
    """

    def __init__(
        self,
        ledger: PoolLedger,
        *,
        rate_mode: RateMode = RateMode.FLOOR_RATE,
        store: Optional[JsonFileStore] = None,
    ) -> None:
        self._ledger = ledger
        self._rate_mode = rate_mode
        self._store = store
        self._lock = threading.Lock()

    @classmethod
    def create(
        cls,
        fee_numerator: int,
        fee_denominator: int,
        *,
        rate_mode: RateMode = RateMode.FLOOR_RATE,
        store: Optional[JsonFileStore] = None,
    ) -> "PoolService":
        """Initialize a fresh pool (and persist it when a store is given)."""
        ledger = PoolLedger.empty(initialize_pool(fee_numerator, fee_denominator))
        if store is not None:
            store.save(ledger)
        logger.info("pool initialized fee=%d/%d", fee_numerator, fee_denominator)
        return cls(ledger, rate_mode=rate_mode, store=store)

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "PoolService":
        store = JsonFileStore(config.state_path)
        return cls(store.load(), rate_mode=config.rate_mode, store=store)

    @property
    def rate_mode(self) -> RateMode:
        return self._rate_mode

    def snapshot(self) -> PoolSnapshot:
        with self._lock:
            return self._ledger.snapshot()

    def balance(self, account: Account, asset: Asset) -> int:
        with self._lock:
            return self._ledger.balances.get(account, asset.value)

    def share_balance(self, account: Account) -> int:
        with self._lock:
            return self._ledger.shares.balance_of(account)

    # -- Operations ----------------------------------------------------------

    def fund(self, account: Account, asset: Asset, amount: int) -> None:
        """Credit an account in the in-memory custody table (faucet)."""
        if account == POOL_ACCOUNT:
            raise ValueError(f"{POOL_ACCOUNT!r} is reserved for pool custody")

        def _apply(staged: PoolLedger) -> None:
            staged.balances.credit(account, asset.value, amount)

        self._commit("fund", account, _apply)

    def add_liquidity(self, account: Account, amount0: int, amount1: int) -> AddLiquidityResult:
        def _apply(staged: PoolLedger) -> AddLiquidityResult:
            return _add_liquidity(
                staged.pool,
                staged.reserves(),
                AddLiquidityRequest(amount0=amount0, amount1=amount1),
                available0=staged.balances.get(account, Asset.ASSET0.value),
                available1=staged.balances.get(account, Asset.ASSET1.value),
                rate_mode=self._rate_mode,
            )

        return self._commit("add_liquidity", account, _apply)

    def remove_liquidity(
        self,
        account: Account,
        shares: int,
        *,
        min_amount0_out: int = 0,
        min_amount1_out: int = 0,
    ) -> RemoveLiquidityResult:
        def _apply(staged: PoolLedger) -> RemoveLiquidityResult:
            return _remove_liquidity(
                staged.pool,
                staged.reserves(),
                RemoveLiquidityRequest(
                    shares_burned=shares,
                    min_amount0_out=min_amount0_out,
                    min_amount1_out=min_amount1_out,
                ),
                share_balance=staged.shares.balance_of(account),
            )

        return self._commit("remove_liquidity", account, _apply)

    def swap(self, account: Account, amount_in: int, min_amount_out: int, direction: SwapDirection) -> SwapResult:
        def _apply(staged: PoolLedger) -> SwapResult:
            return _swap(
                staged.pool,
                staged.reserves(),
                SwapRequest(amount_in=amount_in, min_amount_out=min_amount_out, direction=direction),
                available_in=staged.balances.get(account, direction.source.value),
            )

        return self._commit("swap", account, _apply)

    def quote_swap(self, amount_in: int, direction: SwapDirection) -> SwapQuote:
        with self._lock:
            return _quote_swap(self._ledger.pool, self._ledger.reserves(), amount_in, direction)

    # -- Transaction shell ---------------------------------------------------

    def _commit(
        self,
        op: str,
        account: Account,
        apply: Callable[[PoolLedger], Optional[OperationResult]],
    ) -> Optional[OperationResult]:
        with self._lock:
            staged = self._ledger.copy()
            try:
                result = apply(staged)
                if result is not None:
                    execute_instructions(
                        result.instructions(),
                        user=account,
                        custody=staged.balances,
                        shares=staged.shares,
                    )
                violations = check_pool(staged.pool)
                if violations:
                    raise PoolInvariantError(violations)
            except PoolError as exc:
                logger.warning("%s rejected for %s: %s: %s", op, account, exc.code, exc)
                raise

            if self._store is not None:
                commitment = self._store.save(staged)
                logger.debug("state stored commitment=%s", commitment)
            self._ledger = staged
            logger.info("%s committed for %s: %r", op, account, result)
            return result
