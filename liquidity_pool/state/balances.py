"""
Asset balance tracking for the in-memory custody layer.

Implements BalanceTable[Account, AssetId] -> Amount with the custody
collaborator's `debit` / `credit` contract.
"""

from __future__ import annotations

from typing import Dict, Tuple

from ..errors import InsufficientBalanceError
from ..kernels.python.wide_math import checked_add_u64, require_u64


# Type aliases
Account = str
AssetId = str  # "asset0" / "asset1"
Amount = int  # u64

# Custody account holding the pool's reserves.
POOL_ACCOUNT = "pool"


class BalanceTable:
    """
    Balance table mapping (account, asset) -> amount.

    Note: balances live in a plain dict. Callers sort keys explicitly at
    serialization boundaries (see `integration/store.py`).
    """

    def __init__(self) -> None:
        # Zero balances are omitted to keep the table sparse.
        self._balances: Dict[Tuple[Account, AssetId], Amount] = {}

    def get(self, account: Account, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (account, asset).

        Raises:
            ArithmeticOverflowError: If amount is not a u64
        """
        require_u64("amount", amount)
        if amount == 0:
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def credit(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """Add `amount` to a balance."""
        self.set(account, asset, checked_add_u64(self.get(account, asset), amount))

    def debit(self, account: Account, asset: AssetId, amount: Amount) -> None:
        """
        Remove `amount` from a balance.

        Raises:
            InsufficientBalanceError: If the balance is below `amount`
        """
        require_u64("amount", amount)
        current = self.get(account, asset)
        if amount > current:
            raise InsufficientBalanceError(
                f"{account} holds {current} of {asset}, cannot debit {amount}"
            )
        self.set(account, asset, current - amount)

    def get_all_balances(self) -> Dict[Tuple[Account, AssetId], Amount]:
        return dict(self._balances)

    def copy(self) -> "BalanceTable":
        out = BalanceTable()
        out._balances = dict(self._balances)
        return out

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"
