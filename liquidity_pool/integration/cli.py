"""
Command-line surface for a file-backed pool.

    liquidity-pool init --fee-numerator 3 --fee-denominator 1000
    liquidity-pool fund alice asset0 5000
    liquidity-pool add-liquidity alice 1000 2000
    liquidity-pool swap alice 100 --min-out 150 --direction zero_for_one
    liquidity-pool quote 100 --direction one_for_zero
    liquidity-pool remove-liquidity alice 500
    liquidity-pool show

Results are printed as JSON. Pool rejections exit with status 1.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence

from ..core.types import Asset, SwapDirection
from ..errors import PoolError
from .config import ServiceConfig, load_config, parse_rate_mode
from .service import PoolService
from .store import JsonFileStore


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out = {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        return out
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    return value


def _emit(obj: Any) -> None:
    print(json.dumps(_jsonable(obj), sort_keys=True))


def _u64_arg(raw: str) -> int:
    try:
        v = int(raw, 10)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from exc
    if v < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative: {raw!r}")
    return v


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="liquidity-pool", description="Two-asset constant-product pool")
    p.add_argument("--config", type=Path, default=None, help="YAML config file")
    p.add_argument("--state", type=Path, default=None, help="State file (overrides config)")
    p.add_argument("--rate-mode", default=None, help="floor_rate | exact_ratio (overrides config)")
    p.add_argument("-v", "--verbose", action="store_true", help="Log committed operations to stderr")

    sub = p.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init", help="Create an empty pool")
    init.add_argument("--fee-numerator", type=_u64_arg, default=None)
    init.add_argument("--fee-denominator", type=_u64_arg, default=None)
    init.add_argument("--force", action="store_true", help="Overwrite an existing state file")

    fund = sub.add_parser("fund", help="Credit an account (test faucet)")
    fund.add_argument("account")
    fund.add_argument("asset", choices=[a.value for a in Asset])
    fund.add_argument("amount", type=_u64_arg)

    add = sub.add_parser("add-liquidity", help="Deposit both assets for shares")
    add.add_argument("account")
    add.add_argument("amount0", type=_u64_arg)
    add.add_argument("amount1", type=_u64_arg)

    rm = sub.add_parser("remove-liquidity", help="Burn shares for both assets")
    rm.add_argument("account")
    rm.add_argument("shares", type=_u64_arg)
    rm.add_argument("--min-amount0-out", type=_u64_arg, default=0)
    rm.add_argument("--min-amount1-out", type=_u64_arg, default=0)

    directions = [d.value for d in SwapDirection]
    sw = sub.add_parser("swap", help="Exact-in swap")
    sw.add_argument("account")
    sw.add_argument("amount_in", type=_u64_arg)
    sw.add_argument("--min-out", type=_u64_arg, default=0)
    sw.add_argument("--direction", choices=directions, default=SwapDirection.ZERO_FOR_ONE.value)

    q = sub.add_parser("quote", help="Read-only swap estimate")
    q.add_argument("amount_in", type=_u64_arg)
    q.add_argument("--direction", choices=directions, default=SwapDirection.ZERO_FOR_ONE.value)

    show = sub.add_parser("show", help="Print pool state, reserves and holdings")
    show.add_argument("--account", default=None)

    return p


def _effective_config(args: argparse.Namespace) -> ServiceConfig:
    config = load_config(args.config)
    if args.state is not None:
        config = dataclasses.replace(config, state_path=str(args.state))
    if args.rate_mode is not None:
        config = dataclasses.replace(config, rate_mode=parse_rate_mode(args.rate_mode))
    return config


def _run(args: argparse.Namespace, config: ServiceConfig) -> int:
    if args.command == "init":
        store = JsonFileStore(config.state_path)
        if store.exists() and not args.force:
            print(f"error: state file already exists: {config.state_path}", file=sys.stderr)
            return 1
        num = config.fee_numerator if args.fee_numerator is None else args.fee_numerator
        den = config.fee_denominator if args.fee_denominator is None else args.fee_denominator
        service = PoolService.create(num, den, rate_mode=config.rate_mode, store=store)
        _emit(service.snapshot().to_dict())
        return 0

    service = PoolService.from_config(config)

    if args.command == "fund":
        service.fund(args.account, Asset(args.asset), args.amount)
        _emit({"account": args.account, "asset": args.asset, "balance": service.balance(args.account, Asset(args.asset))})
    elif args.command == "add-liquidity":
        _emit(service.add_liquidity(args.account, args.amount0, args.amount1))
    elif args.command == "remove-liquidity":
        _emit(
            service.remove_liquidity(
                args.account,
                args.shares,
                min_amount0_out=args.min_amount0_out,
                min_amount1_out=args.min_amount1_out,
            )
        )
    elif args.command == "swap":
        result = service.swap(args.account, args.amount_in, args.min_out, SwapDirection(args.direction))
        _emit({"amount_out": result.amount_out, "direction": result.direction, "quote": result.quote})
    elif args.command == "quote":
        _emit(service.quote_swap(args.amount_in, SwapDirection(args.direction)))
    elif args.command == "show":
        out: dict[str, Any] = {"pool": service.snapshot().to_dict(), "rate_mode": service.rate_mode}
        if args.account is not None:
            out["account"] = {
                "name": args.account,
                "asset0": service.balance(args.account, Asset.ASSET0),
                "asset1": service.balance(args.account, Asset.ASSET1),
                "shares": service.share_balance(args.account),
            }
        _emit(out)
    else:  # pragma: no cover - argparse enforces the choices
        raise AssertionError(f"unhandled command: {args.command}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        config = _effective_config(args)
        return _run(args, config)
    except PoolError as exc:
        print(f"error: {exc.code}: {exc}", file=sys.stderr)
        return 1
    except (OSError, ValueError, TypeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
