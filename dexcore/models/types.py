"""Shared type definitions for pool models.

These types are used across asset, pool and result models.
"""

from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from dexcore.constants import UINT128_MAX


def validate_uint(value: Any, maximum: int, name: str) -> int:
    """Validate that a value is a non-negative integer within ``maximum``.

    Accepts ints and decimal strings (ledger JSON encodes 128-bit amounts as
    strings).

    Raises:
        ValueError: If value is not a valid integer in range
    """
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got bool")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as err:
            raise ValueError(f"{name} must be a decimal integer string: '{value}'") from err
    if not isinstance(value, int):
        raise ValueError(f"{name} must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} cannot be negative: {value}")
    if value > maximum:
        raise ValueError(f"{name} overflow: {value} > {maximum}")
    return value


def validate_uint128(value: Any) -> int:
    return validate_uint(value, UINT128_MAX, "Uint128")


# 128-bit unsigned token amount
Uint128 = Annotated[
    int,
    BeforeValidator(validate_uint128),
    Field(description="128-bit unsigned integer"),
]

# Fraction between 0 and 1 (slippage tolerance, price impact)
Ratio = Annotated[Decimal, Field(ge=0, le=1)]

# Seconds since epoch (block time)
Timestamp = Annotated[int, Field(ge=0)]
