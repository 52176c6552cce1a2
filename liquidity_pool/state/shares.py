"""
Liquidity-share token balances.

Shares are tracked separately from asset balances and implement the share-token
collaborator's `mint` / `burn` contract.
"""

from __future__ import annotations

from typing import Dict

from ..errors import InsufficientBalanceError
from ..kernels.python.wide_math import checked_add_u64, require_u64
from .balances import Account, Amount


class ShareLedger:
    """
    Share balance table mapping account -> shares.

    Notes:
    - Share balances are always non-negative u64 values.
    - Zero balances are omitted to keep the table sparse.
    """

    def __init__(self) -> None:
        self._balances: Dict[Account, Amount] = {}

    def balance_of(self, account: Account) -> Amount:
        """Share balance for `account`. Returns 0 if not found."""
        return self._balances.get(account, 0)

    def set(self, account: Account, amount: Amount) -> None:
        require_u64("amount", amount)
        if amount == 0:
            self._balances.pop(account, None)
        else:
            self._balances[account] = amount

    def mint(self, account: Account, amount: Amount) -> None:
        self.set(account, checked_add_u64(self.balance_of(account), amount))

    def burn(self, account: Account, amount: Amount) -> None:
        require_u64("amount", amount)
        current = self.balance_of(account)
        if amount > current:
            raise InsufficientBalanceError(f"{account} holds {current} shares, cannot burn {amount}")
        self.set(account, current - amount)

    def total(self) -> Amount:
        """Sum of all holder balances."""
        return sum(self._balances.values())

    def get_all_balances(self) -> Dict[Account, Amount]:
        return dict(self._balances)

    def copy(self) -> "ShareLedger":
        out = ShareLedger()
        out._balances = dict(self._balances)
        return out

    def __repr__(self) -> str:
        return f"ShareLedger({len(self._balances)} holders)"
