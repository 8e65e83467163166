"""Error hierarchy for pool math and pool operations.

Every engine function raises one of these instead of returning an
approximate or clamped value. The hierarchy groups errors by how a caller
is expected to react:

- InputError: the request itself is invalid (reject it)
- NumericError: corrupt snapshot data or a defect (abort the operation)
- ScheduleError: malformed amplification ramp
- GuardError: the simulated result is worse than the caller's bound
"""

from __future__ import annotations

from typing import Any


class PoolError(Exception):
    """Base error for all pool operations."""

    pass


# --- Input validity ---


class InputError(PoolError):
    """The request is not valid for this pool."""

    pass


class InvalidZeroAmount(InputError):
    """Zero amount where a positive amount is required."""

    def __init__(self, message: str = "Event of zero transfer") -> None:
        super().__init__(message)


class InvalidProvideLPsWithSingleToken(InputError):
    """Single-sided deposit into an empty reserve."""

    def __init__(self) -> None:
        super().__init__(
            "It is not possible to provide liquidity with one token for an empty pool"
        )


class InvalidInAsset(InputError):
    """Offered asset is not a member of the pool."""

    def __init__(self, asset: Any) -> None:
        self.asset = asset
        super().__init__(f"Invalid input asset: {asset}")


class InvalidOutAsset(InputError):
    """Requested asset is not a member of the pool."""

    def __init__(self, asset: Any) -> None:
        self.asset = asset
        super().__init__(f"Invalid output asset: {asset}")


class InvalidLpToken(InputError):
    """Asset is not this pool's LP token."""

    def __init__(self, asset: Any) -> None:
        self.asset = asset
        super().__init__(f"Invalid LP token: {asset}")


class NotLpToken(InputError):
    """Asset could not be resolved to any known pool."""

    def __init__(self, asset: Any) -> None:
        self.asset = asset
        super().__init__(f"Asset is not an LP token: {asset}")


class UnsupportedPool(InputError):
    """Pool resolved to a curve kind this package has no math for."""

    pass


class InsufficientShares(InputError):
    """Operation needs more LP shares than the caller provides."""

    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(f"Insufficient LP shares: required {required}, available {available}")


class InsufficientLiquidity(InputError):
    """Withdrawal exceeds what the pool holds."""

    pass


class PriceAssetMismatch(InputError):
    """A price was asked for in assets it does not quote."""

    def __init__(self, base: Any, quote: Any) -> None:
        self.base = base
        self.quote = quote
        super().__init__(f"Price not for requested assets: {base}, {quote}")


# --- Numeric ---


class NumericError(PoolError):
    """Arithmetic failure inside the invariant math."""

    pass


class ArithmeticOverflow(NumericError, ArithmeticError):
    """Result does not fit in the target integer width."""

    pass


class Underflow(ArithmeticOverflow):
    """Subtraction would produce a negative result."""

    pass


class DivideByZero(NumericError, ArithmeticError):
    """Division or modulo by zero."""

    pass


class LiquidityAmountTooSmall(NumericError):
    """Minted shares round to zero or fall below the protocol floor."""

    def __init__(self, message: str = "Insufficient amount of liquidity") -> None:
        super().__init__(message)


# --- Schedule ---


class ScheduleError(PoolError):
    """Base error for amplification schedule problems."""

    pass


class InvalidSchedule(ScheduleError):
    """Amplification ramp parameters are malformed."""

    pass


# --- Guard failure ---


class GuardError(PoolError):
    """Simulated result violates a caller-supplied bound."""

    pass


class MinOutNotReceived(GuardError):
    """Simulated output is below the caller's minimum."""

    def __init__(self, wanted: int, got: int, asset: Any = None) -> None:
        self.wanted = wanted
        self.got = got
        self.asset = asset
        suffix = f" of {asset}" if asset is not None else ""
        super().__init__(
            f"Did not receive expected amount of tokens{suffix}. "
            f"Expected: {wanted}, received: {got}"
        )


class PriceSlippageExceeded(GuardError):
    """Pool price after the operation is outside the caller's tolerance."""

    def __init__(self, old_price: Any, new_price: Any) -> None:
        self.old_price = old_price
        self.new_price = new_price
        super().__init__(
            f"Slippage control price check failed. Old price: {old_price}, new price: {new_price}"
        )


# --- Environment ---


class QueryError(PoolError):
    """An environment read failed."""

    pass


__all__ = [
    "PoolError",
    "InputError",
    "InvalidZeroAmount",
    "InvalidProvideLPsWithSingleToken",
    "InvalidInAsset",
    "InvalidOutAsset",
    "InvalidLpToken",
    "NotLpToken",
    "UnsupportedPool",
    "InsufficientShares",
    "InsufficientLiquidity",
    "PriceAssetMismatch",
    "NumericError",
    "ArithmeticOverflow",
    "Underflow",
    "DivideByZero",
    "LiquidityAmountTooSmall",
    "ScheduleError",
    "InvalidSchedule",
    "GuardError",
    "MinOutNotReceived",
    "PriceSlippageExceeded",
    "QueryError",
]
