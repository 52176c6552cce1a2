"""Exception types for the liquidity pool core.

Every rejection is detected before PoolState is mutated or any instruction is
emitted, so catching one of these means nothing changed.
"""

from __future__ import annotations


class PoolError(ValueError):
    """Base class for pool rejections. `code` is stable and safe to expose."""

    code = "pool_error"


class InsufficientBalanceError(PoolError):
    """Requested amount exceeds the caller's available funds or shares."""

    code = "insufficient_balance"


class ZeroMintAmountError(PoolError):
    """A deposit would mint zero shares."""

    code = "zero_mint_amount"


class BurnExceedsSupplyError(PoolError):
    """Withdrawal requests more shares than are outstanding."""

    code = "burn_exceeds_supply"


class SlippageExceededError(PoolError):
    """Computed output is below the caller's floor."""

    code = "slippage_exceeded"


class ArithmeticOverflowError(PoolError):
    """A checked step left its integer domain (or divided by zero)."""

    code = "arithmetic_overflow"


class InvalidFeeScheduleError(PoolError):
    """Fee schedule is not a fraction in [0, 1] with a positive denominator."""

    code = "invalid_fee_schedule"


class PoolInvariantError(PoolError):
    """Raised when a post-state violates one or more pool invariants."""

    code = "invariant_violation"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
