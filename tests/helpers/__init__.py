"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Asset identities, pool addresses and decimals
- factories: Querier, identity and asset list factory functions
"""

from tests.helpers.constants import (
    ATOM,
    DAI,
    DEFAULT_AMP,
    NATIVE_LP,
    NATIVE_POOL_ADDRESS,
    NATIVE_POOL_ID,
    STABLE_LP,
    STABLE_PAIR,
    TOKEN_DECIMALS,
    USDC,
    USDT,
    XYK_LP,
    XYK_PAIR,
)
from tests.helpers.factories import (
    assets,
    constant_amp,
    make_querier,
    make_stable_identity,
    make_xyk_identity,
)

__all__ = [
    # Constants
    "USDC",
    "ATOM",
    "DAI",
    "USDT",
    "XYK_PAIR",
    "XYK_LP",
    "STABLE_PAIR",
    "STABLE_LP",
    "NATIVE_POOL_ID",
    "NATIVE_POOL_ADDRESS",
    "NATIVE_LP",
    "TOKEN_DECIMALS",
    "DEFAULT_AMP",
    # Factories
    "assets",
    "constant_amp",
    "make_querier",
    "make_xyk_identity",
    "make_stable_identity",
]
