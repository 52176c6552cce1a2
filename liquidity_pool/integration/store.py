"""
Pool ledger snapshot encoding and file-backed persistence.

Goals:
- Deterministic JSON serialization (sorted entries, canonical encoding).
- Round-trippable into `PoolLedger`.
- A SHA-256 commitment over the canonical bytes, checked on load.
"""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

from ..state.balances import BalanceTable
from ..state.canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex
from ..state.pools import PoolState
from ..state.shares import ShareLedger
from .custody import PoolLedger


LEDGER_SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str) or not value:
        raise TypeError(f"{name} must be a non-empty string")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Deterministic, versioned snapshot of a `PoolLedger`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_hex(self) -> str:
        payload = domain_sep_bytes("ledger_snapshot", version=self.version) + self.canonical_bytes()
        return sha256_hex(payload)


def snapshot_from_ledger(ledger: PoolLedger, *, version: int = LEDGER_SNAPSHOT_VERSION) -> LedgerSnapshot:
    balances_entries = [
        {"account": account, "asset": asset, "amount": int(amount)}
        for (account, asset), amount in ledger.balances.get_all_balances().items()
    ]
    balances_entries.sort(key=lambda e: (e["account"], e["asset"]))

    share_entries = [
        {"account": account, "amount": int(amount)}
        for account, amount in ledger.shares.get_all_balances().items()
    ]
    share_entries.sort(key=lambda e: e["account"])

    data: Dict[str, Any] = {
        "version": int(version),
        "pool": ledger.pool.to_dict(),
        "balances": balances_entries,
        "shares": share_entries,
    }
    return LedgerSnapshot(version=version, data=data)


def ledger_from_snapshot(data: Mapping[str, Any]) -> PoolLedger:
    if not isinstance(data, Mapping):
        raise TypeError("snapshot must be an object")
    version = _require_int(data.get("version"), name="version")
    if version != LEDGER_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    pool_obj = data.get("pool")
    if not isinstance(pool_obj, Mapping):
        raise TypeError("pool must be an object")
    pool = PoolState.from_dict(pool_obj)

    balances_entries = data.get("balances", [])
    if not isinstance(balances_entries, list):
        raise TypeError("snapshot.balances must be a list")
    balances = BalanceTable()
    seen_balances: set[tuple[str, str]] = set()
    for i, entry in enumerate(balances_entries):
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.balances entries must be objects")
        account = _require_str(entry.get("account"), name=f"balances[{i}].account")
        asset = _require_str(entry.get("asset"), name=f"balances[{i}].asset")
        if (account, asset) in seen_balances:
            raise ValueError("duplicate balance entry (account, asset)")
        seen_balances.add((account, asset))
        balances.set(account, asset, _require_int(entry.get("amount"), name=f"balances[{i}].amount"))

    share_entries = data.get("shares", [])
    if not isinstance(share_entries, list):
        raise TypeError("snapshot.shares must be a list")
    shares = ShareLedger()
    seen_holders: set[str] = set()
    for i, entry in enumerate(share_entries):
        if not isinstance(entry, Mapping):
            raise TypeError("snapshot.shares entries must be objects")
        account = _require_str(entry.get("account"), name=f"shares[{i}].account")
        if account in seen_holders:
            raise ValueError("duplicate share entry (account)")
        seen_holders.add(account)
        shares.set(account, _require_int(entry.get("amount"), name=f"shares[{i}].amount"))

    return PoolLedger(pool=pool, balances=balances, shares=shares)


class JsonFileStore:
    """
    State-persistence collaborator backed by one JSON file.

    File layout: {"commitment": "0x..", "state": <snapshot data>}. Writes go
    to a temp file in the same directory and are moved into place, so a
    reader never sees a half-written state.
    """

    def __init__(self, path: os.PathLike[str] | str) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> PoolLedger:
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(raw, Mapping):
            raise TypeError("state file must contain a JSON object")
        data = raw.get("state")
        if not isinstance(data, Mapping):
            raise TypeError("state file is missing the 'state' object")
        ledger = ledger_from_snapshot(data)
        expected = snapshot_from_ledger(ledger).commitment_hex()
        if raw.get("commitment") != expected:
            raise ValueError(f"state file commitment mismatch: {self.path}")
        return ledger

    def save(self, ledger: PoolLedger) -> str:
        """Commit `ledger` to disk; returns the snapshot commitment."""
        snap = snapshot_from_ledger(ledger)
        commitment = snap.commitment_hex()
        body = canonical_json_bytes({"commitment": commitment, "state": snap.data})

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(body)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        return commitment
