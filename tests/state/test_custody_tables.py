# [TESTER] v1

from __future__ import annotations

import pytest

from liquidity_pool.errors import ArithmeticOverflowError, InsufficientBalanceError
from liquidity_pool.kernels.python.wide_math import U64_MAX
from liquidity_pool.state.balances import BalanceTable
from liquidity_pool.state.shares import ShareLedger


def test_balance_table_credit_debit() -> None:
    t = BalanceTable()
    t.credit("alice", "asset0", 100)
    t.debit("alice", "asset0", 40)
    assert t.get("alice", "asset0") == 60
    assert t.get("alice", "asset1") == 0


def test_balance_table_is_sparse() -> None:
    t = BalanceTable()
    t.credit("alice", "asset0", 5)
    t.debit("alice", "asset0", 5)
    assert t.get_all_balances() == {}


def test_balance_table_overdraft_and_overflow() -> None:
    t = BalanceTable()
    t.set("alice", "asset0", U64_MAX)
    with pytest.raises(ArithmeticOverflowError):
        t.credit("alice", "asset0", 1)
    with pytest.raises(InsufficientBalanceError):
        t.debit("bob", "asset0", 1)
    assert t.get("alice", "asset0") == U64_MAX


def test_balance_table_copy_is_independent() -> None:
    t = BalanceTable()
    t.set("alice", "asset0", 10)
    c = t.copy()
    c.debit("alice", "asset0", 10)
    assert t.get("alice", "asset0") == 10
    assert c.get("alice", "asset0") == 0


def test_share_ledger_mint_burn_total() -> None:
    s = ShareLedger()
    s.mint("alice", 10)
    s.mint("bob", 5)
    s.burn("alice", 4)
    assert s.balance_of("alice") == 6
    assert s.total() == 11
    with pytest.raises(InsufficientBalanceError):
        s.burn("bob", 6)
    assert s.balance_of("bob") == 5


def test_share_ledger_copy_is_independent() -> None:
    s = ShareLedger()
    s.mint("alice", 3)
    c = s.copy()
    c.burn("alice", 3)
    assert s.get_all_balances() == {"alice": 3}
    assert c.get_all_balances() == {}
