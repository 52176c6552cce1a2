"""
Checked fixed-width integer arithmetic.

Pool amounts are unsigned 64-bit values; every multiply-before-divide runs in an
unsigned 128-bit intermediate. Python ints never wrap, so the widths are
enforced explicitly here: operands are checked on the way in (widen), results
on the way out (narrow), and any step that leaves its domain raises
`ArithmeticOverflowError`. Nothing saturates and nothing wraps.

Division uses Python's `//`; all operands are non-negative so this is floor
division, i.e. truncation toward zero.
"""

from __future__ import annotations

from ...errors import ArithmeticOverflowError


U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1


def require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def require_u64(name: str, value: int) -> int:
    """Return `value` if it is a u64, else raise."""
    require_int(name, value)
    if value < 0 or value > U64_MAX:
        raise ArithmeticOverflowError(f"{name} outside u64 domain: {value}")
    return value


def require_u128(name: str, value: int) -> int:
    require_int(name, value)
    if value < 0 or value > U128_MAX:
        raise ArithmeticOverflowError(f"{name} outside u128 domain: {value}")
    return value


def narrow_u64(name: str, value: int) -> int:
    """Narrow a u128 intermediate back to u64."""
    require_u128(name, value)
    if value > U64_MAX:
        raise ArithmeticOverflowError(f"{name} does not fit u64: {value}")
    return value


def checked_add_u64(a: int, b: int) -> int:
    require_u64("a", a)
    require_u64("b", b)
    total = a + b
    if total > U64_MAX:
        raise ArithmeticOverflowError(f"u64 addition overflow: {a} + {b}")
    return total


def checked_sub_u64(a: int, b: int) -> int:
    require_u64("a", a)
    require_u64("b", b)
    if b > a:
        raise ArithmeticOverflowError(f"u64 subtraction underflow: {a} - {b}")
    return a - b


def checked_mul_u64(a: int, b: int) -> int:
    require_u64("a", a)
    require_u64("b", b)
    product = a * b
    if product > U64_MAX:
        raise ArithmeticOverflowError(f"u64 multiplication overflow: {a} * {b}")
    return product


def checked_div(numerator: int, denominator: int) -> int:
    """Floor division over non-negative ints; division by zero is an overflow."""
    require_u128("numerator", numerator)
    require_u128("denominator", denominator)
    if denominator == 0:
        raise ArithmeticOverflowError("division by zero")
    return numerator // denominator


def wide_mul(a: int, b: int) -> int:
    """
    Widen two u64 operands and multiply in the u128 domain.

    (2**64 - 1)**2 < 2**128, so this cannot overflow for valid operands; the
    result is still checked so a widened operand can never slip through.
    """
    require_u64("a", a)
    require_u64("b", b)
    return require_u128("product", a * b)


def wide_add(a: int, b: int) -> int:
    require_u128("a", a)
    require_u128("b", b)
    total = a + b
    if total > U128_MAX:
        raise ArithmeticOverflowError(f"u128 addition overflow: {a} + {b}")
    return total


def wide_sub(a: int, b: int) -> int:
    require_u128("a", a)
    require_u128("b", b)
    if b > a:
        raise ArithmeticOverflowError(f"u128 subtraction underflow: {a} - {b}")
    return a - b


def mul_div_floor(a: int, b: int, denominator: int, *, name: str = "result") -> int:
    """
    Compute `floor(a * b / denominator)` for u64 inputs.

    The product is formed in u128 before dividing (multiply first to keep
    precision), and the quotient is narrowed back to u64.
    """
    require_u64("denominator", denominator)
    return narrow_u64(name, checked_div(wide_mul(a, b), denominator))
