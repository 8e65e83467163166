"""Protocol configuration for pool math."""

from dataclasses import dataclass

from dexcore.constants import (
    AMP_PRECISION,
    ITERATIONS,
    LP_DENOM_PREFIX,
    MINIMUM_LIQUIDITY_AMOUNT,
    NATIVE_TOKEN_PRECISION,
    STABLE_SWAP_FEE,
)


@dataclass(frozen=True)
class PoolConfig:
    """Centralized configuration for pool math.

    This dataclass holds every protocol parameter the invariant engines
    depend on, making it easy to test with different configurations and
    ensuring the simulation matches the AMM it targets.

    Attributes:
        minimum_liquidity_amount: Floor for shares minted by the first
            deposit (default: 1,000)
        max_iterations: Newton ceiling for the stableswap invariant (default: 32)
        amp_precision: Scale of stored amplification values (default: 100)
        stable_fee: Stableswap fee in units of FEE_DENOMINATOR
            (default: 5,000,000 = 0.05%)
        native_token_precision: Decimals assumed for native denoms (default: 6)
        lp_denom_prefix: Reserved prefix of native LP denoms
            (default: "gamm/pool/")
    """

    minimum_liquidity_amount: int = MINIMUM_LIQUIDITY_AMOUNT
    max_iterations: int = ITERATIONS
    amp_precision: int = AMP_PRECISION
    stable_fee: int = STABLE_SWAP_FEE
    native_token_precision: int = NATIVE_TOKEN_PRECISION
    lp_denom_prefix: str = LP_DENOM_PREFIX


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
