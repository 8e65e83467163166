"""Safe integer wrapper for arithmetic on token amounts.

This module provides SafeInt, a lightweight wrapper that makes arithmetic
operations safe by default:
- Division by zero raises DivideByZero
- Subtraction underflow raises Underflow
- uint128/uint256 overflow is caught on conversion

On-chain amounts are 128-bit and intermediate products are 256-bit, so
every engine function wraps its inputs, computes with unbounded Python
integers and validates the width when it unwraps.

Usage pattern:
    from dexcore.safe_int import S

    def share_of(amount: int, total: int, reserve: int) -> int:
        # Wrap at entry
        sa = S(amount)

        # Natural arithmetic - automatically safe
        result = sa.multiply_ratio(total, reserve)  # Raises if reserve == 0

        # Unwrap at exit
        return result.to_uint128()
"""

from __future__ import annotations

import math

from dexcore.constants import UINT128_MAX, UINT256_MAX
from dexcore.errors import ArithmeticOverflow, DivideByZero, Underflow


class SafeInt:
    """Integer with safe arithmetic operations.

    Wraps an integer and provides arithmetic operators that raise
    descriptive errors instead of producing invalid results:
    - Division by zero raises DivideByZero
    - Negative results from subtraction raise Underflow
    - Values exceeding uint128/uint256 raise ArithmeticOverflow on conversion

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = value
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _extract_value(other))

    def __radd__(self, other: int) -> SafeInt:
        return SafeInt(other + self._value)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _extract_value(other))

    def __rmul__(self, other: int) -> SafeInt:
        return SafeInt(other * self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division (floor).

        Raises:
            DivideByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivideByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivideByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivideByZero(f"Modulo by zero: {self._value} % 0")
        return SafeInt(self._value % other_val)

    def __pow__(self, exponent: int) -> SafeInt:
        return SafeInt(self._value**exponent)

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        """Absolute difference, never underflows."""
        return SafeInt(abs(self._value - _extract_value(other)))

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _extract_value(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(max(self._value, _extract_value(other)))

    def multiply_ratio(self, numerator: SafeInt | int, denominator: SafeInt | int) -> SafeInt:
        """Compute self * numerator // denominator with a 256-bit intermediate.

        Raises:
            DivideByZero: If denominator is zero
            ArithmeticOverflow: If the intermediate product exceeds uint256
        """
        product = SafeInt(self._value * _extract_value(numerator))
        product.to_uint256()
        return product // denominator

    def isqrt(self) -> SafeInt:
        """Floor square root, for values that fit in uint256.

        Raises:
            ArithmeticOverflow: If value is negative or exceeds uint256
        """
        return SafeInt(math.isqrt(self.to_uint256()))

    def iroot(self, n: int) -> SafeInt:
        """Floor n-th root (largest r with r**n <= value).

        Raises:
            ArithmeticOverflow: If value is negative or exceeds uint256
            ValueError: If n < 1
        """
        if n < 1:
            raise ValueError(f"Root degree must be positive, got {n}")
        value = self.to_uint256()
        if n == 1 or value < 2:
            return SafeInt(value)
        if n == 2:
            return SafeInt(math.isqrt(value))
        # Newton iteration from an upper bound; decreases monotonically to the floor root
        r = 1 << ((value.bit_length() + n - 1) // n)
        while True:
            nxt = ((n - 1) * r + value // r ** (n - 1)) // n
            if nxt >= r:
                return SafeInt(r)
            r = nxt

    def to_uint128(self) -> int:
        """Convert to int, validating uint128 bounds.

        Raises:
            ArithmeticOverflow: If value is negative or exceeds 2^128-1
        """
        if self._value < 0:
            raise ArithmeticOverflow(f"Negative value cannot be uint128: {self._value}")
        if self._value > UINT128_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint128 max: {self._value}")
        return self._value

    def to_uint256(self) -> int:
        """Convert to int, validating uint256 bounds.

        Raises:
            ArithmeticOverflow: If value is negative or exceeds 2^256-1
        """
        if self._value < 0:
            raise ArithmeticOverflow(f"Negative value cannot be uint256: {self._value}")
        if self._value > UINT256_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint256 max: {self._value}")
        return self._value

    def is_uint128(self) -> bool:
        return 0 <= self._value <= UINT128_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
