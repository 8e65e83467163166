"""Stableswap pool.

An N-asset pool priced by the Curve-style stableswap invariant. Deposits and
imbalanced withdrawals run on balances normalized to the greatest precision
among the pool's members, with the amplification coefficient read at the
current block time. Proportional withdrawals need no invariant and use the
raw reserves.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Literal

import structlog
from pydantic import field_validator

from dexcore.amm import constant_product, stable_math
from dexcore.amm.base import PoolCapability
from dexcore.errors import InsufficientShares, InvalidOutAsset, InvalidZeroAmount
from dexcore.math import compute_current_amp, normalize_amounts
from dexcore.models import (
    Action,
    Asset,
    AssetList,
    CurveKind,
    ImbalancedWithdrawSimulation,
    Instruction,
    PoolIdentity,
    PrecisionTable,
    ProvideSimulation,
    WithdrawSimulation,
)

if TYPE_CHECKING:
    from dexcore.querier import PoolQuerier

logger = structlog.get_logger()


class StableSwapPool(PoolCapability):
    """Stableswap pool with two or more assets."""

    kind: Literal["stable_swap"] = "stable_swap"

    @field_validator("identity")
    @classmethod
    def _check_identity(cls, identity: PoolIdentity) -> PoolIdentity:
        if identity.curve != CurveKind.STABLE_SWAP:
            raise ValueError(f"Expected a stable_swap pool, got {identity.curve.value}")
        return identity

    def current_amp(self, querier: PoolQuerier) -> int:
        """Amplification coefficient at the current block time."""
        params = querier.query_amp_params(self.identity)
        return compute_current_amp(params, querier.query_block_time())

    def precision_table(self, querier: PoolQuerier) -> PrecisionTable:
        """Decimals of every pool member and of the LP token."""
        infos = (*self.pool_assets, self.lp_token)
        return PrecisionTable({info: querier.query_precision(info) for info in infos})

    def _spot_price(self, querier: PoolQuerier, amounts: Sequence[int]) -> Decimal:
        """Invariant slope on normalized balances, rescaled to raw units of each asset."""
        table = self.precision_table(querier)
        precisions = [table.precision_of(info) for info in self.pool_assets]
        greatest = table.greatest(self.pool_assets)
        price = stable_math.spot_price(
            self.current_amp(querier),
            normalize_amounts(amounts, precisions, greatest),
            max_iterations=self.config.max_iterations,
            amp_precision=self.config.amp_precision,
        )
        # One raw unit of the base is worth 10^(quote - base) raw units of the quote at par
        return price.scaleb(precisions[1] - precisions[0])

    def simulate_provide_liquidity(
        self, querier: PoolQuerier, assets: AssetList
    ) -> ProvideSimulation:
        """Simulate a (possibly imbalanced) deposit.

        The first deposit mints the geometric mean of the normalized amounts
        at LP token precision; later deposits are charged the imbalance fee.

        Raises:
            InvalidInAsset: If an asset is not a pool member
            InvalidZeroAmount: If nothing is deposited
            InvalidProvideLPsWithSingleToken: If an empty reserve gets no deposit
            LiquidityAmountTooSmall: If the mint rounds to zero or below the floor
        """
        deposits = self._ordered_amounts(assets)
        if all(d == 0 for d in deposits):
            raise InvalidZeroAmount()

        reserves = querier.query_reserves(self.identity)
        table = self.precision_table(querier)
        precisions = [table.precision_of(info) for info in self.pool_assets]
        greatest = table.greatest(self.pool_assets)
        normalized_deposits = normalize_amounts(deposits, precisions, greatest)

        if reserves.total_shares == 0:
            shares = stable_math.initial_provide_shares(
                normalized_deposits,
                greatest,
                table.precision_of(self.lp_token),
                minimum_liquidity=self.config.minimum_liquidity_amount,
            )
        else:
            amp = self.current_amp(querier)
            balances = normalize_amounts(
                reserves.amounts_for(self.pool_assets), precisions, greatest
            )
            shares = stable_math.provide_shares(
                amp,
                balances,
                normalized_deposits,
                reserves.total_shares,
                self.config.stable_fee,
                max_iterations=self.config.max_iterations,
                amp_precision=self.config.amp_precision,
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
        """Simulate burning LP shares for a pro rata share of every reserve."""
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

    def simulate_withdraw_liquidity_imbalanced(
        self,
        querier: PoolQuerier,
        assets: AssetList,
        provided_shares: int | None = None,
    ) -> ImbalancedWithdrawSimulation:
        """Simulate the LP burn needed to receive exactly ``assets``.

        Args:
            querier: Source of the pool snapshot
            assets: Amounts to receive, any order; members not listed receive zero
            provided_shares: Shares available to burn, if bounded

        Raises:
            InvalidOutAsset: If an asset is not a pool member
            InvalidZeroAmount: If nothing is requested
            InsufficientLiquidity: If a request empties its reserve
            InsufficientShares: If the burn exceeds provided_shares
        """
        requested = self._in_pool_order(assets, InvalidOutAsset)
        withdrawals = [a.amount for a in requested]

        reserves = querier.query_reserves(self.identity)
        table = self.precision_table(querier)
        precisions = [table.precision_of(info) for info in self.pool_assets]
        greatest = table.greatest(self.pool_assets)

        burn = stable_math.withdraw_burn_amount(
            self.current_amp(querier),
            normalize_amounts(reserves.amounts_for(self.pool_assets), precisions, greatest),
            normalize_amounts(withdrawals, precisions, greatest),
            reserves.total_shares,
            self.config.stable_fee,
            provided_shares=provided_shares,
            max_iterations=self.config.max_iterations,
            amp_precision=self.config.amp_precision,
        )

        logger.debug(
            "simulated_withdraw_liquidity_imbalanced",
            pool=self.address,
            withdrawals=withdrawals,
            total_shares=reserves.total_shares,
            burn=burn,
        )
        return ImbalancedWithdrawSimulation(
            burn=Asset(info=self.lp_token, amount=burn),
            assets=requested,
        )

    def withdraw_liquidity_imbalanced(
        self, querier: PoolQuerier, assets: AssetList, max_burn: int
    ) -> list[Instruction]:
        """Build the calls withdrawing exactly ``assets``, burning at most ``max_burn``.

        The full ``max_burn`` is sent; the pool refunds what it does not burn.

        Raises:
            InsufficientShares: If the simulated burn exceeds max_burn
        """
        simulation = self.simulate_withdraw_liquidity_imbalanced(querier, assets)
        try:
            simulation.check(max_burn)
        except InsufficientShares as e:
            logger.info(
                "max_burn_exceeded",
                pool=self.address,
                required=e.required,
                available=e.available,
            )
            raise

        lp_token = Asset(info=self.lp_token, amount=max_burn)
        instructions, funds = self._transfers(AssetList.of([lp_token]))
        instructions.append(
            Instruction(
                target=self.address,
                action=Action.WITHDRAW_LIQUIDITY_IMBALANCED,
                funds=funds,
                payload={
                    "amount": max_burn,
                    "assets": simulation.assets.model_dump(mode="json"),
                    "expected_burn": simulation.burn.amount,
                },
            )
        )
        return instructions


__all__ = ["StableSwapPool"]
