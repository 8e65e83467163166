"""AMM (Automated Market Maker) implementations."""

from dexcore.amm.base import PoolCapability
from dexcore.amm.stableswap import StableSwapPool
from dexcore.amm.xyk import ConstantProductPool

__all__ = [
    # Base class
    "PoolCapability",
    # Pool variants
    "ConstantProductPool",
    "StableSwapPool",
]
