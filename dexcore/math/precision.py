"""Decimal precision normalization.

Invariant math runs on balances expressed at one common precision, the
greatest among the pool's members. Amounts are scaled up exactly and scaled
down with floor division, so a derived share or withdrawal amount is never
overstated.

All functions use SafeInt and validate that results fit in uint128.
"""

from collections.abc import Sequence

from dexcore.safe_int import S


def adjust_precision(value: int, current_precision: int, new_precision: int) -> int:
    """Return ``value`` re-expressed at ``new_precision`` decimals.

    Args:
        value: Amount at ``current_precision`` decimals
        current_precision: Decimals ``value`` is expressed in
        new_precision: Decimals to express the result in

    Returns:
        ``value * 10^(new - current)`` when scaling up, or
        ``value // 10^(current - new)`` when scaling down

    Raises:
        ArithmeticOverflow: If the result exceeds uint128 or value is negative
        ValueError: If a precision is negative
    """
    if current_precision < 0 or new_precision < 0:
        raise ValueError(
            f"Precision must be non-negative, got {current_precision}, {new_precision}"
        )

    amount = S(value)
    if current_precision == new_precision:
        return amount.to_uint128()
    if current_precision < new_precision:
        return (amount * 10 ** (new_precision - current_precision)).to_uint128()
    return (amount // 10 ** (current_precision - new_precision)).to_uint128()


def greatest_precision(precisions: Sequence[int]) -> int:
    """Greatest of ``precisions``.

    Raises:
        ValueError: If precisions is empty
    """
    if not precisions:
        raise ValueError("Cannot take the greatest of no precisions")
    return max(precisions)


def normalize_amounts(amounts: Sequence[int], precisions: Sequence[int], target: int) -> list[int]:
    """Scale each amount from its own precision to ``target``.

    Raises:
        ValueError: If amounts and precisions differ in length
        ArithmeticOverflow: If any scaled amount exceeds uint128
    """
    if len(amounts) != len(precisions):
        raise ValueError(f"Got {len(amounts)} amounts for {len(precisions)} precisions")
    return [adjust_precision(a, p, target) for a, p in zip(amounts, precisions, strict=True)]


def denormalize_amounts(
    amounts: Sequence[int], precisions: Sequence[int], source: int
) -> list[int]:
    """Project amounts at ``source`` precision back to each asset's own precision."""
    if len(amounts) != len(precisions):
        raise ValueError(f"Got {len(amounts)} amounts for {len(precisions)} precisions")
    return [adjust_precision(a, source, p) for a, p in zip(amounts, precisions, strict=True)]
