"""
Accounting core for a two-asset constant-product liquidity pool.

Layering (imports only point downwards):
- `kernels/` integer-only math with explicit u64/u128 widths,
- `state/` pool record and the in-memory custody and share tables,
- `core/` the liquidity and swap engines,
- `integration/` service shell, persistence, config, CLI and HTTP surface.
"""

__version__ = "0.1.0"
