"""dexcore - off-chain simulation of constant product and stableswap pool math."""

from dexcore.amm import ConstantProductPool, PoolCapability, StableSwapPool
from dexcore.config import DEFAULT_POOL_CONFIG, PoolConfig
from dexcore.pools import Pool
from dexcore.querier import PoolQuerier, StaticQuerier

__version__ = "0.1.0"
__all__ = [
    "PoolCapability",
    "ConstantProductPool",
    "StableSwapPool",
    "Pool",
    "PoolQuerier",
    "StaticQuerier",
    "PoolConfig",
    "DEFAULT_POOL_CONFIG",
    "__version__",
]
