"""Environment reads consumed by pool operations.

Pool math never talks to a ledger itself. Every snapshot it needs (reserves,
decimals, amplification ramp, block time, swap quotes, LP token provenance)
comes through an object implementing PoolQuerier, read once per call.

StaticQuerier answers those reads from an in-memory snapshot, which is what
offline simulation and the test-suite use.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import structlog

from dexcore.config import DEFAULT_POOL_CONFIG, PoolConfig
from dexcore.errors import QueryError
from dexcore.models import (
    AmplificationParams,
    Asset,
    AssetInfo,
    AssetList,
    PoolIdentity,
    PoolReserves,
)

logger = structlog.get_logger()


@runtime_checkable
class PoolQuerier(Protocol):
    """Protocol for reading pool state from the environment.

    Implementations raise QueryError when a read fails; they never return a
    placeholder value.
    """

    def query_reserves(self, identity: PoolIdentity) -> PoolReserves:
        """Current reserves and LP supply of a pool."""
        ...

    def query_precision(self, info: AssetInfo) -> int:
        """Decimal precision of an asset."""
        ...

    def query_amp_params(self, identity: PoolIdentity) -> AmplificationParams:
        """Amplification ramp of a stableswap pool."""
        ...

    def query_block_time(self) -> int:
        """Current block time in seconds."""
        ...

    def query_simulation(self, identity: PoolIdentity, offer: Asset, ask: AssetInfo) -> int:
        """Amount of ``ask`` the pool itself quotes for ``offer``."""
        ...

    def query_contract_creator(self, address: str) -> str:
        """Address that instantiated the contract at ``address``."""
        ...

    def query_pair_info(self, address: str) -> PoolIdentity:
        """Identity of the pair contract at ``address``."""
        ...

    def query_native_pool(self, pool_id: int) -> PoolIdentity:
        """Identity of a native-module pool."""
        ...


class StaticQuerier:
    """In-memory PoolQuerier over a fixed snapshot.

    Pools are registered with add_pool(); contract provenance, decimals and
    swap quotes with their own add_* methods. Native denoms without an
    explicit precision use config.native_token_precision. Any read with no
    registered answer raises QueryError.
    """

    def __init__(self, block_time: int = 0, config: PoolConfig = DEFAULT_POOL_CONFIG) -> None:
        """Initialize an empty snapshot.

        Args:
            block_time: Value returned by query_block_time()
            config: Supplies the default precision of native denoms
        """
        self.block_time = block_time
        self._config = config
        self._pairs: dict[str, PoolIdentity] = {}
        self._native_pools: dict[int, PoolIdentity] = {}
        self._reserves: dict[str, PoolReserves] = {}
        self._amp_params: dict[str, AmplificationParams] = {}
        self._precisions: dict[AssetInfo, int] = {}
        self._creators: dict[str, str] = {}
        # Quotes keyed by (pool address, exact offer, ask)
        self._quotes: dict[tuple[str, Asset, AssetInfo], int] = {}

    def add_pool(
        self,
        identity: PoolIdentity,
        reserves: PoolReserves,
        amp_params: AmplificationParams | None = None,
    ) -> None:
        """Register a pool with its reserves (and ramp, for stable pools).

        A contract-issued LP token is recorded as created by the pool
        address; a pool with a pool_id is also reachable as a native pool.
        """
        self._pairs[identity.address] = identity
        self._reserves[identity.address] = reserves
        if amp_params is not None:
            self._amp_params[identity.address] = amp_params
        if not identity.lp_token.is_native:
            self._creators[identity.lp_token.identifier] = identity.address
        if identity.pool_id is not None:
            self._native_pools[identity.pool_id] = identity
        logger.debug(
            "static_querier_pool_added",
            pool=identity.address,
            lp_token=str(identity.lp_token),
            curve=identity.curve.value,
        )

    def set_reserves(self, identity: PoolIdentity, reserves: PoolReserves) -> None:
        """Replace the reserves snapshot of a registered pool."""
        if identity.address not in self._pairs:
            raise QueryError(f"Unknown pool {identity.address}")
        self._reserves[identity.address] = reserves

    def add_precision(self, info: AssetInfo, precision: int) -> None:
        self._precisions[info] = precision

    def add_contract_creator(self, address: str, creator: str) -> None:
        self._creators[address] = creator

    def add_quote(self, identity: PoolIdentity, offer: Asset, ask: AssetInfo, amount: int) -> None:
        """Register the pool's own quote for swapping exactly ``offer``."""
        self._quotes[(identity.address, offer, ask)] = amount

    # --- PoolQuerier ---

    def query_reserves(self, identity: PoolIdentity) -> PoolReserves:
        try:
            return self._reserves[identity.address]
        except KeyError:
            raise QueryError(f"No reserves for pool {identity.address}") from None

    def query_precision(self, info: AssetInfo) -> int:
        precision = self._precisions.get(info)
        if precision is not None:
            return precision
        if info.is_native:
            return self._config.native_token_precision
        raise QueryError(f"No token info for {info}")

    def query_amp_params(self, identity: PoolIdentity) -> AmplificationParams:
        try:
            return self._amp_params[identity.address]
        except KeyError:
            raise QueryError(f"No amplification parameters for pool {identity.address}") from None

    def query_block_time(self) -> int:
        return self.block_time

    def query_simulation(self, identity: PoolIdentity, offer: Asset, ask: AssetInfo) -> int:
        try:
            return self._quotes[(identity.address, offer, ask)]
        except KeyError:
            raise QueryError(f"No quote for {offer} -> {ask} on pool {identity.address}") from None

    def query_contract_creator(self, address: str) -> str:
        try:
            return self._creators[address]
        except KeyError:
            raise QueryError(f"No contract info for {address}") from None

    def query_pair_info(self, address: str) -> PoolIdentity:
        try:
            return self._pairs[address]
        except KeyError:
            raise QueryError(f"No pair at {address}") from None

    def query_native_pool(self, pool_id: int) -> PoolIdentity:
        try:
            return self._native_pools[pool_id]
        except KeyError:
            raise QueryError(f"No native pool with id {pool_id}") from None


def reserves_of(identity: PoolIdentity, amounts: list[int], total_shares: int) -> PoolReserves:
    """Build a reserves snapshot from amounts given in pool order."""
    assets = AssetList.of(
        Asset(info=info, amount=amount)
        for info, amount in zip(identity.asset_infos, amounts, strict=True)
    )
    return PoolReserves(assets=assets, total_shares=total_shares)


__all__ = ["PoolQuerier", "StaticQuerier", "reserves_of"]
