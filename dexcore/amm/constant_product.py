"""Constant product (x * y = k) share math.

Reproduces the LP share accounting of a two-asset constant product pair:
- the first deposit mints sqrt(d0 * d1) shares
- later deposits mint shares for the limiting side only
- withdrawals return each reserve pro rata, rounded down

Swap pricing is not computed here; pools read the pair's own quote and only
apply the minimum-output guard to it.

IMPORTANT: All calculations use SafeInt for overflow protection and explicit
bounds checking.
"""

from collections.abc import Sequence
from decimal import Decimal

from dexcore.constants import MINIMUM_LIQUIDITY_AMOUNT
from dexcore.errors import (
    DivideByZero,
    InsufficientShares,
    InvalidZeroAmount,
    LiquidityAmountTooSmall,
)
from dexcore.safe_int import S


def provide_shares(
    deposits: Sequence[int],
    reserves: Sequence[int],
    total_shares: int,
    minimum_liquidity: int = MINIMUM_LIQUIDITY_AMOUNT,
) -> int:
    """Calculate LP shares minted for a two-asset deposit.

    Formula:
        total_shares == 0: isqrt(d0 * d1)  (product at 256-bit width)
        otherwise:         min(d0 * S // r0, d1 * S // r1)

    Taking the minimum means the side deposited in excess of the pool ratio
    earns nothing, so minted shares never exceed the collateral added.

    Args:
        deposits: Deposit amounts, in pool order
        reserves: Current reserves, in pool order
        total_shares: Current LP token supply
        minimum_liquidity: Floor for the first mint

    Returns:
        Shares to mint

    Raises:
        InvalidZeroAmount: If either deposit is zero
        LiquidityAmountTooSmall: If the first mint is below minimum_liquidity
        DivideByZero: If a reserve is zero while shares exist
        ArithmeticOverflow: If the result exceeds uint128
        ValueError: If not exactly two deposits and reserves are given
    """
    if len(deposits) != 2 or len(reserves) != 2:
        raise ValueError("Constant product pools have exactly two assets")

    d0, d1 = S(deposits[0]), S(deposits[1])
    if d0 == 0 or d1 == 0:
        raise InvalidZeroAmount("Either asset cannot be zero")

    if total_shares == 0:
        share = (d0 * d1).isqrt()
        if share < minimum_liquidity:
            raise LiquidityAmountTooSmall(
                f"Share {share} cannot be less than minimum liquidity amount {minimum_liquidity}"
            )
        return share.to_uint128()

    share0 = d0.multiply_ratio(total_shares, reserves[0])
    share1 = d1.multiply_ratio(total_shares, reserves[1])
    return share0.min(share1).to_uint128()


def withdraw_amounts(reserves: Sequence[int], total_shares: int, share_amount: int) -> list[int]:
    """Calculate assets returned for burning ``share_amount`` LP shares.

    Formula: reserve_i * share_amount // total_shares for each reserve.
    An empty pool (total_shares == 0) returns zero for every asset.

    Args:
        reserves: Current reserves, in pool order
        total_shares: Current LP token supply
        share_amount: Shares to burn

    Returns:
        Amount of each reserve returned, in pool order

    Raises:
        InsufficientShares: If share_amount exceeds total_shares
    """
    if total_shares == 0:
        return [0 for _ in reserves]
    if share_amount > total_shares:
        raise InsufficientShares(required=share_amount, available=total_shares)

    return [S(r).multiply_ratio(share_amount, total_shares).to_uint128() for r in reserves]


def spot_price(reserves: Sequence[int]) -> Decimal:
    """Price of the first asset in units of the second: reserve1 / reserve0.

    Raises:
        DivideByZero: If the first reserve is empty
    """
    if reserves[0] == 0:
        raise DivideByZero("Spot price of an empty reserve")
    return Decimal(reserves[1]) / Decimal(reserves[0])


__all__ = ["provide_shares", "withdraw_amounts", "spot_price"]
