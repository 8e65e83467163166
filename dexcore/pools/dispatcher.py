"""Closed, serializable union over supported pool variants.

Pool wraps exactly one variant, tagged by ``kind`` in its JSON form, and
forwards every pool operation to it through the match in ``variant``. New
variants are added to AnyPool and to the matches in from_identity and variant.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Annotated, TypeAlias

import structlog
from pydantic import ConfigDict, Field, RootModel

from dexcore.amm import ConstantProductPool, PoolCapability, StableSwapPool
from dexcore.config import DEFAULT_POOL_CONFIG, PoolConfig
from dexcore.errors import UnsupportedPool
from dexcore.models import (
    Asset,
    AssetInfo,
    AssetList,
    CurveKind,
    ImbalancedWithdrawSimulation,
    Instruction,
    PoolIdentity,
    Price,
    ProvideSimulation,
    SlippageControl,
    SwapSimulation,
    WithdrawSimulation,
)
from dexcore.pools.resolver import resolve_lp_token

if TYPE_CHECKING:
    from dexcore.querier import PoolQuerier

logger = structlog.get_logger()

# Union type for all pool variants
AnyPool: TypeAlias = Annotated[
    ConstantProductPool | StableSwapPool,
    Field(discriminator="kind"),
]


class Pool(RootModel[AnyPool]):
    """A pool of any supported variant."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_identity(
        cls, identity: PoolIdentity, config: PoolConfig = DEFAULT_POOL_CONFIG
    ) -> Pool:
        """Build the variant handling ``identity``.

        Raises:
            UnsupportedPool: If the pool's curve has no implementation
        """
        match identity.curve:
            case CurveKind.CONSTANT_PRODUCT:
                return cls(ConstantProductPool(identity=identity, config=config))
            case CurveKind.STABLE_SWAP:
                return cls(StableSwapPool(identity=identity, config=config))
            case _:
                logger.debug("unsupported_pool", pool=identity.address, curve=identity.curve.value)
                raise UnsupportedPool(
                    f"Pool {identity.address} has unsupported curve {identity.curve.value}"
                )

    @classmethod
    def for_lp_token(
        cls,
        querier: PoolQuerier,
        lp_token: AssetInfo,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
    ) -> Pool:
        """Resolve the pool issuing ``lp_token``.

        Raises:
            NotLpToken: If the token cannot be resolved to a pool
            UnsupportedPool: If it resolves to a pool with an unsupported curve
        """
        return cls.from_identity(resolve_lp_token(querier, lp_token, config), config)

    @property
    def variant(self) -> PoolCapability:
        """The wrapped pool variant; every operation is forwarded through here."""
        match self.root:
            case ConstantProductPool() | StableSwapPool() as pool:
                return pool
            case _:
                raise UnsupportedPool(f"Unknown pool variant {type(self.root).__name__}")

    @property
    def identity(self) -> PoolIdentity:
        return self.variant.identity

    @property
    def lp_token(self) -> AssetInfo:
        return self.variant.lp_token

    @property
    def pool_assets(self) -> tuple[AssetInfo, ...]:
        return self.variant.pool_assets

    def get_pool_liquidity(self, querier: PoolQuerier) -> AssetList:
        return self.variant.get_pool_liquidity(querier)

    def simulate_provide_liquidity(
        self, querier: PoolQuerier, assets: AssetList
    ) -> ProvideSimulation:
        return self.variant.simulate_provide_liquidity(querier, assets)

    def simulate_withdraw_liquidity(
        self, querier: PoolQuerier, lp_token: Asset
    ) -> WithdrawSimulation:
        return self.variant.simulate_withdraw_liquidity(querier, lp_token)

    def simulate_swap(self, querier: PoolQuerier, offer: Asset, ask: AssetInfo) -> SwapSimulation:
        return self.variant.simulate_swap(querier, offer, ask)

    def spot_price(self, querier: PoolQuerier, amounts: Sequence[int] | None = None) -> Price:
        return self.variant.spot_price(querier, amounts)

    def provide_liquidity(
        self,
        querier: PoolQuerier,
        assets: AssetList,
        min_shares_out: int = 0,
        slippage: SlippageControl | None = None,
    ) -> list[Instruction]:
        return self.variant.provide_liquidity(querier, assets, min_shares_out, slippage)

    def withdraw_liquidity(
        self,
        querier: PoolQuerier,
        lp_token: Asset,
        min_assets_out: AssetList | None = None,
    ) -> list[Instruction]:
        return self.variant.withdraw_liquidity(querier, lp_token, min_assets_out)

    def swap(
        self, querier: PoolQuerier, offer: Asset, ask: AssetInfo, min_out: int = 0
    ) -> list[Instruction]:
        return self.variant.swap(querier, offer, ask, min_out)

    def simulate_withdraw_liquidity_imbalanced(
        self,
        querier: PoolQuerier,
        assets: AssetList,
        provided_shares: int | None = None,
    ) -> ImbalancedWithdrawSimulation:
        """Simulate an exact-output withdrawal (stableswap pools only).

        Raises:
            UnsupportedPool: If the variant has no imbalanced withdrawal
        """
        return self._stable().simulate_withdraw_liquidity_imbalanced(
            querier, assets, provided_shares
        )

    def withdraw_liquidity_imbalanced(
        self, querier: PoolQuerier, assets: AssetList, max_burn: int
    ) -> list[Instruction]:
        """Build an exact-output withdrawal (stableswap pools only).

        Raises:
            UnsupportedPool: If the variant has no imbalanced withdrawal
        """
        return self._stable().withdraw_liquidity_imbalanced(querier, assets, max_burn)

    def _stable(self) -> StableSwapPool:
        match self.root:
            case StableSwapPool() as pool:
                return pool
            case _:
                raise UnsupportedPool(
                    f"{self.root.kind} pool {self.root.address} has no imbalanced withdrawal"
                )


__all__ = ["AnyPool", "Pool"]
