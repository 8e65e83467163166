"""Constant product pool.

A two-asset pair priced by x * y = k. Liquidity simulations run the shared
constant product share math on the raw reserves; swaps use the pair's own
quote.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

import structlog
from pydantic import field_validator

from dexcore.amm import constant_product
from dexcore.amm.base import PoolCapability
from dexcore.models import (
    Asset,
    AssetList,
    CurveKind,
    PoolIdentity,
    ProvideSimulation,
    WithdrawSimulation,
)

if TYPE_CHECKING:
    from dexcore.querier import PoolQuerier

logger = structlog.get_logger()


class ConstantProductPool(PoolCapability):
    """Two-asset constant product pool."""

    kind: Literal["constant_product"] = "constant_product"

    @field_validator("identity")
    @classmethod
    def _check_identity(cls, identity: PoolIdentity) -> PoolIdentity:
        if identity.curve != CurveKind.CONSTANT_PRODUCT:
            raise ValueError(f"Expected a constant_product pool, got {identity.curve.value}")
        if len(identity.asset_infos) != 2:
            raise ValueError(
                f"Constant product pools have exactly two assets, got {len(identity.asset_infos)}"
            )
        return identity

    def simulate_provide_liquidity(
        self, querier: PoolQuerier, assets: AssetList
    ) -> ProvideSimulation:
        """Simulate a deposit into the pair.

        Raises:
            InvalidInAsset: If an asset is not a pool member
            InvalidZeroAmount: If either side of the deposit is zero
            LiquidityAmountTooSmall: If the first deposit mints below the floor
        """
        deposits = self._ordered_amounts(assets)
        reserves = querier.query_reserves(self.identity)

        shares = constant_product.provide_shares(
            deposits,
            reserves.amounts_for(self.pool_assets),
            reserves.total_shares,
            minimum_liquidity=self.config.minimum_liquidity_amount,
        )

        logger.debug(
            "simulated_provide_liquidity",
            pool=self.address,
            deposits=deposits,
            total_shares=reserves.total_shares,
            shares=shares,
        )
        return ProvideSimulation(shares=Asset(info=self.lp_token, amount=shares))

    def simulate_withdraw_liquidity(
        self, querier: PoolQuerier, lp_token: Asset
    ) -> WithdrawSimulation:
        """Simulate burning LP shares for a pro rata share of both reserves.

        Raises:
            InvalidLpToken: If the asset is not this pool's LP token
            InvalidZeroAmount: If the amount is zero
            InsufficientShares: If the amount exceeds the LP supply
        """
        self._check_lp_token(lp_token)
        reserves = querier.query_reserves(self.identity)

        amounts = constant_product.withdraw_amounts(
            reserves.amounts_for(self.pool_assets),
            reserves.total_shares,
            lp_token.amount,
        )

        logger.debug(
            "simulated_withdraw_liquidity",
            pool=self.address,
            shares=lp_token.amount,
            amounts=amounts,
        )
        return WithdrawSimulation(
            assets=AssetList.of(
                Asset(info=info, amount=amount)
                for info, amount in zip(self.pool_assets, amounts, strict=True)
            )
        )

    def _spot_price(self, querier: PoolQuerier, amounts: Sequence[int]) -> Decimal:
        return constant_product.spot_price(amounts)


__all__ = ["ConstantProductPool"]
