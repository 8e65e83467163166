"""Stableswap (Curve-style) invariant and share math.

Core math functions for stable pools. Balances passed to these functions
must already be normalized to one common precision (see
dexcore.math.precision); amplification is scaled by AMP_PRECISION.

Uses Newton's method for the invariant D, capped at ITERATIONS steps. The
cap is part of the on-chain behavior: after the last step the current D is
used as-is, it is not an error.

IMPORTANT: All financial calculations use SafeInt for overflow protection
and explicit bounds checking.
"""

from collections.abc import Sequence
from decimal import Decimal

from dexcore.constants import AMP_PRECISION, FEE_DENOMINATOR, ITERATIONS, MINIMUM_LIQUIDITY_AMOUNT
from dexcore.errors import (
    DivideByZero,
    InsufficientLiquidity,
    InsufficientShares,
    InvalidProvideLPsWithSingleToken,
    InvalidZeroAmount,
    LiquidityAmountTooSmall,
)
from dexcore.math.precision import adjust_precision
from dexcore.safe_int import S, SafeInt


def compute_d(
    amp: int,
    balances: Sequence[int],
    max_iterations: int = ITERATIONS,
    amp_precision: int = AMP_PRECISION,
) -> int:
    """Calculate the stableswap invariant D using Newton's method.

    Solves:
        A * n^n * sum(x_i) + D = A * D * n^n + D^(n+1) / (n^n * prod(x_i))

    with the on-chain parameterization ``leverage = amp * n`` (the stored
    amplification already carries the remaining n^(n-1) factor).

    Algorithm:
        1. Initial guess: D = sum(balances)
        2. D_P = D^(n+1) / prod(n * x_i + 1), one balance at a time
        3. D = (leverage * S / AP + D_P * n) * D
               / ((leverage - AP) * D / AP + (n + 1) * D_P)
        4. Stop once |D - D_prev| <= 1, or after max_iterations steps

    Args:
        amp: Amplification coefficient (scaled by amp_precision)
        balances: Normalized pool balances
        max_iterations: Newton ceiling (default 32)
        amp_precision: Amplification scale (default 100)

    Returns:
        The invariant D; 0 if any balance is 0

    Raises:
        ValueError: If fewer than two balances are given
        Underflow: If leverage is below amp_precision
        ArithmeticOverflow: If D exceeds uint128
    """
    n_coins = len(balances)
    if n_coins < 2:
        raise ValueError(f"Stable pools need at least two assets, got {n_coins}")

    # An empty or degenerate pool has no invariant
    if any(b == 0 for b in balances):
        return 0

    sum_x = S(0)
    for b in balances:
        sum_x = sum_x + S(b)

    leverage = S(amp) * n_coins
    d = sum_x

    for _ in range(max_iterations):
        # d_p = D^(n+1) / (n^n * prod(x_i)), each divisor offset by one as on-chain
        d_p = d
        for b in balances:
            d_p = (d_p * d) // (S(b) * n_coins + 1)

        d_prev = d
        d = _newton_step(d, leverage, sum_x, d_p, n_coins, amp_precision)

        if d.abs_diff(d_prev) <= 1:
            break

    return d.to_uint128()


def _newton_step(
    d: SafeInt,
    leverage: SafeInt,
    sum_x: SafeInt,
    d_p: SafeInt,
    n_coins: int,
    amp_precision: int,
) -> SafeInt:
    """One Newton step for D.

    D = (leverage * S / AP + D_P * n) * D / ((leverage - AP) * D / AP + (n + 1) * D_P)
    """
    numerator = ((leverage * sum_x) // amp_precision + d_p * n_coins) * d
    denominator = ((leverage - amp_precision) * d) // amp_precision + d_p * (n_coins + 1)
    return numerator // denominator


def initial_provide_shares(
    deposits: Sequence[int],
    precision: int,
    lp_token_precision: int,
    minimum_liquidity: int = MINIMUM_LIQUIDITY_AMOUNT,
) -> int:
    """Calculate shares minted by the first deposit into an empty pool.

    Shares are the integer geometric mean of the normalized deposits,
    projected from the pool precision to the LP token's own precision. For
    two assets this is exactly isqrt(d0 * d1).

    Args:
        deposits: Normalized deposit amounts (every asset must be present)
        precision: Precision the deposits are normalized to
        lp_token_precision: Decimals of the LP token
        minimum_liquidity: Floor the minted amount must exceed

    Returns:
        Shares to mint

    Raises:
        InvalidProvideLPsWithSingleToken: If any deposit is zero
        LiquidityAmountTooSmall: If the mint does not exceed minimum_liquidity
        ArithmeticOverflow: If the product exceeds uint256
    """
    if len(deposits) < 2:
        raise ValueError(f"Stable pools need at least two assets, got {len(deposits)}")
    if any(d == 0 for d in deposits):
        raise InvalidProvideLPsWithSingleToken()

    product = S(1)
    for d in deposits:
        product = product * d

    root = product.iroot(len(deposits))
    shares = adjust_precision(root.value, precision, lp_token_precision)
    if shares <= minimum_liquidity:
        raise LiquidityAmountTooSmall(
            f"Share {shares} must exceed minimum liquidity amount {minimum_liquidity}"
        )
    return shares


def imbalance_fee_rate(fee: int, n_coins: int) -> int:
    """Per-asset fee rate charged on imbalanced operations.

    fee * n / (4 * (n - 1)), in units of FEE_DENOMINATOR.
    """
    return (S(fee) * n_coins // (4 * (n_coins - 1))).value


def _charge_imbalance_fee(
    d_before: int,
    d_after: int,
    old_balances: Sequence[int],
    new_balances: Sequence[int],
    fee: int,
) -> list[int]:
    """Reduce each post-operation balance by a fee on its deviation from ideal.

    The ideal balance of asset i is old_i scaled by the post-operation
    invariant, ``d_after * old_i // d_before``. The fee is always taken from
    the balances, so it reduces minted shares on a deposit and increases
    burned shares on a withdrawal.
    """
    rate = imbalance_fee_rate(fee, len(old_balances))
    charged = []
    for i, (old, new) in enumerate(zip(old_balances, new_balances, strict=True)):
        ideal = S(old).multiply_ratio(d_after, d_before)
        fee_amount = (ideal.abs_diff(new) * rate) // FEE_DENOMINATOR
        if fee_amount > new:
            raise InsufficientLiquidity(
                f"Imbalance fee {fee_amount.value} exceeds balance {new} of asset {i}"
            )
        charged.append((S(new) - fee_amount).value)
    return charged


def provide_shares(
    amp: int,
    balances: Sequence[int],
    deposits: Sequence[int],
    total_shares: int,
    fee: int,
    max_iterations: int = ITERATIONS,
    amp_precision: int = AMP_PRECISION,
) -> int:
    """Calculate shares minted for a (possibly imbalanced) deposit.

    Algorithm:
        1. D0 = D(balances), D1 = D(balances + deposits)
        2. Charge the imbalance fee on each new balance's deviation from
           its ideal ``D1 * old_i / D0``
        3. D2 = D(fee-reduced balances)
        4. shares = total_shares * (D2 - D0) // D0

    Args:
        amp: Amplification coefficient (scaled by amp_precision)
        balances: Normalized pool balances
        deposits: Normalized deposit amounts, in pool order
        total_shares: Current LP supply (must be non-zero)
        fee: Stableswap fee in units of FEE_DENOMINATOR

    Returns:
        Shares to mint

    Raises:
        InvalidZeroAmount: If every deposit is zero
        InvalidProvideLPsWithSingleToken: If a zero deposit targets an empty reserve
        LiquidityAmountTooSmall: If D does not grow or the mint rounds to zero
        DivideByZero: If D0 is zero while shares exist
        ValueError: If total_shares is zero or lengths differ
    """
    _check_lengths(balances, deposits)
    if total_shares == 0:
        raise ValueError("Pool has no shares; use initial_provide_shares")
    if all(d == 0 for d in deposits):
        raise InvalidZeroAmount()
    for deposit, balance in zip(deposits, balances, strict=True):
        if deposit == 0 and balance == 0:
            raise InvalidProvideLPsWithSingleToken()

    d0 = compute_d(amp, balances, max_iterations, amp_precision)
    new_balances = [(S(b) + d).to_uint128() for b, d in zip(balances, deposits, strict=True)]
    d1 = compute_d(amp, new_balances, max_iterations, amp_precision)

    # D may not grow for dust deposits because of rounding
    if d1 <= d0:
        raise LiquidityAmountTooSmall()

    charged = _charge_imbalance_fee(d0, d1, balances, new_balances, fee)
    d2 = compute_d(amp, charged, max_iterations, amp_precision)
    if d2 <= d0:
        raise LiquidityAmountTooSmall()

    shares = S(total_shares).multiply_ratio(S(d2) - d0, d0)
    if shares == 0:
        raise LiquidityAmountTooSmall()
    return shares.to_uint128()


def withdraw_burn_amount(
    amp: int,
    balances: Sequence[int],
    withdrawals: Sequence[int],
    total_shares: int,
    fee: int,
    provided_shares: int | None = None,
    max_iterations: int = ITERATIONS,
    amp_precision: int = AMP_PRECISION,
) -> int:
    """Calculate shares burned to withdraw an exact set of assets.

    Mirror image of provide_shares:
        1. D0 = D(balances), D1 = D(balances - withdrawals)
        2. Charge the imbalance fee on each raw balance's deviation from
           its ideal ``D1 * old_i / D0``, shrinking balances further
        3. D2 = D(fee-reduced balances)
        4. burn = total_shares * (D0 - D2) // D0 + 1

    The +1 rounds in the pool's favor.

    Args:
        amp: Amplification coefficient (scaled by amp_precision)
        balances: Normalized pool balances
        withdrawals: Normalized amounts requested, in pool order
        total_shares: Current LP supply
        fee: Stableswap fee in units of FEE_DENOMINATOR
        provided_shares: Shares the caller is willing to burn, if bounded

    Returns:
        Shares to burn

    Raises:
        InvalidZeroAmount: If every withdrawal is zero
        InsufficientLiquidity: If a withdrawal empties its reserve, the pool is empty,
            or the burn exceeds the LP supply
        InsufficientShares: If the burn exceeds provided_shares
    """
    _check_lengths(balances, withdrawals)
    if all(w == 0 for w in withdrawals):
        raise InvalidZeroAmount()
    if total_shares == 0:
        raise InsufficientLiquidity("Cannot withdraw from a pool with no shares")
    for i, (withdrawal, balance) in enumerate(zip(withdrawals, balances, strict=True)):
        if withdrawal >= balance:
            raise InsufficientLiquidity(
                f"Withdrawal {withdrawal} would empty reserve {balance} of asset {i}"
            )

    d0 = compute_d(amp, balances, max_iterations, amp_precision)
    raw_balances = [(S(b) - w).value for b, w in zip(balances, withdrawals, strict=True)]
    d1 = compute_d(amp, raw_balances, max_iterations, amp_precision)

    charged = _charge_imbalance_fee(d0, d1, balances, raw_balances, fee)
    d2 = compute_d(amp, charged, max_iterations, amp_precision)

    burn = (S(total_shares).multiply_ratio(S(d0) - d2, d0) + 1).to_uint128()
    if burn > total_shares:
        raise InsufficientLiquidity(f"Burn {burn} exceeds LP supply {total_shares}")
    if provided_shares is not None and burn > provided_shares:
        raise InsufficientShares(required=burn, available=provided_shares)
    return burn


def spot_price(
    amp: int,
    balances: Sequence[int],
    max_iterations: int = ITERATIONS,
    amp_precision: int = AMP_PRECISION,
) -> Decimal:
    """Marginal price of the first asset in units of the second.

    The slope -dF/dx / dF/dy of the invariant at the current balances. With
    Ann = leverage / AP:

        price = (n^n * Ann * x^2 * y^2 + D^3 * y) / (n^n * Ann * x^2 * y^2 + D^3 * x)

    Numerator and denominator are exact integers (both scaled by AP); only the
    final ratio is rounded. Equal balances price at exactly 1.

    Args:
        amp: Amplification coefficient (scaled by amp_precision)
        balances: Two normalized pool balances

    Returns:
        Units of balances[1] per unit of balances[0]

    Raises:
        ValueError: If not exactly two balances are given
        DivideByZero: If either balance is zero
    """
    if len(balances) != 2:
        raise ValueError(f"Spot price needs exactly two balances, got {len(balances)}")
    x, y = balances
    if x == 0 or y == 0:
        raise DivideByZero("Spot price of an empty reserve")

    n_coins = 2
    d = compute_d(amp, balances, max_iterations, amp_precision)
    leverage_term = n_coins**n_coins * amp * n_coins * x * x * y * y
    d_term = amp_precision * d ** (n_coins + 1)
    return Decimal(leverage_term + d_term * y) / Decimal(leverage_term + d_term * x)


def _check_lengths(balances: Sequence[int], amounts: Sequence[int]) -> None:
    if len(balances) < 2:
        raise ValueError(f"Stable pools need at least two assets, got {len(balances)}")
    if len(balances) != len(amounts):
        raise ValueError(f"Got {len(amounts)} amounts for {len(balances)} balances")


__all__ = [
    "compute_d",
    "initial_provide_shares",
    "imbalance_fee_rate",
    "provide_shares",
    "withdraw_burn_amount",
    "spot_price",
]
