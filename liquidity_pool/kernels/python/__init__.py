"""
Production Python kernels.

These modules are designed to be:
- deterministic (integer-only),
- width-faithful (u64 values, u128 intermediates, checked at every step),
- easy to audit (explicit intermediate variables),
- small surface-area (pure functions, typed results).
"""
