"""Protocol constants for pool math.

Centralizes integer widths and the parameters the target AMMs use on-chain.
"""

# Integer widths used by the ledger
UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1

# Stableswap amplification is stored multiplied by this factor
AMP_PRECISION = 100

# Newton ceiling for the stableswap invariant; non-convergence is accepted
ITERATIONS = 32

# Shares minted by the first deposit must reach this floor
MINIMUM_LIQUIDITY_AMOUNT = 1_000

# Stableswap fees are expressed in units of 1e-10
FEE_DENOMINATOR = 10**10

# 0.05% (5_000_000 / 1e10), the stable pair default
STABLE_SWAP_FEE = 5_000_000

# Decimals assumed for native ledger denoms
NATIVE_TOKEN_PRECISION = 6

# Largest decimal precision accepted for any asset
MAX_PRECISION = 38

# Native LP denoms look like "gamm/pool/<id>"
LP_DENOM_PREFIX = "gamm/pool/"
