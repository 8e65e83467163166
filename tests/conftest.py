"""Pytest configuration and fixtures."""

import pytest

from dexcore.amm import ConstantProductPool, StableSwapPool
from dexcore.models import PoolIdentity
from dexcore.querier import StaticQuerier, reserves_of
from tests.helpers import constant_amp, make_querier, make_stable_identity, make_xyk_identity


@pytest.fixture
def querier() -> StaticQuerier:
    """Empty snapshot with test token decimals registered."""
    return make_querier()


@pytest.fixture
def xyk_identity() -> PoolIdentity:
    return make_xyk_identity()


@pytest.fixture
def stable_identity() -> PoolIdentity:
    return make_stable_identity()


@pytest.fixture
def xyk_pool(querier: StaticQuerier, xyk_identity: PoolIdentity) -> ConstantProductPool:
    """USDC / USDT pair with reserves (1_000_000, 1_000_000) and 1_000_000 shares."""
    querier.add_pool(xyk_identity, reserves_of(xyk_identity, [1_000_000, 1_000_000], 1_000_000))
    return ConstantProductPool(identity=xyk_identity)


@pytest.fixture
def stable_pool(querier: StaticQuerier, stable_identity: PoolIdentity) -> StableSwapPool:
    """USDC / DAI pool holding 1000 of each with 2000 LP shares (6 decimals), A = 100."""
    querier.add_pool(
        stable_identity,
        reserves_of(stable_identity, [1_000 * 10**6, 1_000 * 10**18], 2_000 * 10**6),
        constant_amp(),
    )
    return StableSwapPool(identity=stable_identity)
