"""Mathematical utilities shared by the invariant engines.

This package provides:
- precision normalization between assets with different decimals
- the stableswap amplification schedule
"""

from dexcore.math.amplification import compute_current_amp
from dexcore.math.precision import (
    adjust_precision,
    denormalize_amounts,
    greatest_precision,
    normalize_amounts,
)

__all__ = [
    "adjust_precision",
    "greatest_precision",
    "normalize_amounts",
    "denormalize_amounts",
    "compute_current_amp",
]
