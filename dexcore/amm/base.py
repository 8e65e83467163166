"""Base class for pool implementations.

PoolCapability is the uniform operation set every pool variant offers. The
mutating operations (provide, withdraw, swap) are implemented here once: they
run the variant's simulation, enforce the caller's minimum-output bound, and
only then build instructions. A variant cannot produce an instruction whose
pricing was not checked.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict

from dexcore.config import DEFAULT_POOL_CONFIG, PoolConfig
from dexcore.errors import (
    InputError,
    InvalidInAsset,
    InvalidLpToken,
    InvalidOutAsset,
    InvalidZeroAmount,
    MinOutNotReceived,
    PriceSlippageExceeded,
    UnsupportedPool,
)
from dexcore.models import (
    Action,
    Asset,
    AssetInfo,
    AssetList,
    Instruction,
    MinOut,
    PoolIdentity,
    Price,
    ProvideSimulation,
    SlippageControl,
    SwapSimulation,
    WithdrawSimulation,
)

if TYPE_CHECKING:
    from dexcore.querier import PoolQuerier

logger = structlog.get_logger()


class PoolCapability(BaseModel, ABC):
    """Abstract base class for pool variants.

    Subclasses implement the liquidity simulations for their invariant;
    swaps are priced by the pool's own quote, so simulate_swap is shared.
    Every method reads state through the querier passed as first argument.

    Attributes:
        identity: The pool this object operates on
        config: Protocol parameters used by the invariant math
    """

    model_config = ConfigDict(frozen=True)

    identity: PoolIdentity
    config: PoolConfig = DEFAULT_POOL_CONFIG

    @property
    def address(self) -> str:
        return self.identity.address

    @property
    def lp_token(self) -> AssetInfo:
        """Identity of this pool's liquidity token."""
        return self.identity.lp_token

    @property
    def pool_assets(self) -> tuple[AssetInfo, ...]:
        """Pool members, in pool order."""
        return self.identity.asset_infos

    def get_pool_liquidity(self, querier: PoolQuerier) -> AssetList:
        """Current reserves of every pool member."""
        return querier.query_reserves(self.identity).assets

    # --- Simulations ---

    @abstractmethod
    def simulate_provide_liquidity(
        self, querier: PoolQuerier, assets: AssetList
    ) -> ProvideSimulation:
        """Simulate depositing ``assets``.

        Args:
            querier: Source of the pool snapshot
            assets: Deposit, any order; members not listed deposit zero

        Returns:
            LP shares the pool would mint
        """
        ...

    @abstractmethod
    def simulate_withdraw_liquidity(
        self, querier: PoolQuerier, lp_token: Asset
    ) -> WithdrawSimulation:
        """Simulate burning ``lp_token`` for a proportional share of reserves.

        Args:
            querier: Source of the pool snapshot
            lp_token: LP shares to burn

        Returns:
            Assets the pool would return, in pool order
        """
        ...

    def simulate_swap(self, querier: PoolQuerier, offer: Asset, ask: AssetInfo) -> SwapSimulation:
        """Simulate swapping ``offer`` for ``ask`` using the pool's own quote.

        Raises:
            InvalidInAsset: If the offered asset is not a pool member
            InvalidOutAsset: If the asked asset is not a pool member or equals the offer
            InvalidZeroAmount: If the offer amount is zero
        """
        self._check_swap(offer, ask)
        amount = querier.query_simulation(self.identity, offer, ask)
        logger.debug(
            "simulated_swap",
            pool=self.address,
            offer=str(offer),
            ask=str(ask),
            receive=amount,
        )
        return SwapSimulation(offer=offer, receive=Asset(info=ask, amount=amount))

    # --- Prices ---

    @abstractmethod
    def _spot_price(self, querier: PoolQuerier, amounts: Sequence[int]) -> Decimal:
        """Units of the second asset per unit of the first at raw reserves ``amounts``."""
        ...

    def spot_price(self, querier: PoolQuerier, amounts: Sequence[int] | None = None) -> Price:
        """Marginal pool price, quoted as the second pool asset per the first.

        Args:
            querier: Source of the pool snapshot
            amounts: Reserves to price at, in pool order; current reserves if None

        Raises:
            UnsupportedPool: If the pool does not have exactly two assets
            DivideByZero: If a reserve is empty
        """
        if len(self.pool_assets) != 2:
            raise UnsupportedPool(
                f"Pool {self.address} has {len(self.pool_assets)} assets; "
                "prices are quoted for two-asset pools only"
            )
        if amounts is None:
            amounts = querier.query_reserves(self.identity).amounts_for(self.pool_assets)
        base, quote = self.pool_assets
        return Price(
            base_asset=base, quote_asset=quote, price=self._spot_price(querier, amounts)
        )

    # --- Guarded operations ---

    def provide_liquidity(
        self,
        querier: PoolQuerier,
        assets: AssetList,
        min_shares_out: int = 0,
        slippage: SlippageControl | None = None,
    ) -> list[Instruction]:
        """Build the calls depositing ``assets``, after checking the minted shares.

        Args:
            querier: Source of the pool snapshot
            assets: Deposit, any order
            min_shares_out: Lower bound on the minted shares
            slippage: Optional further guard; price-based modes compare the
                pool price after the deposit with a belief or the price before it

        Raises:
            MinOutNotReceived: If the simulated mint is below either share bound
            PriceSlippageExceeded: If the post-deposit price is out of tolerance
        """
        simulation = self.simulate_provide_liquidity(querier, assets)
        self._enforce("provide_liquidity", simulation.check, min_shares_out)

        deposit = self._in_pool_order(assets)
        if slippage is not None:
            self._enforce_slippage(querier, deposit, simulation.shares.amount, slippage)

        instructions, funds = self._transfers(deposit)
        instructions.append(
            Instruction(
                target=self.address,
                action=Action.PROVIDE_LIQUIDITY,
                funds=funds,
                payload={
                    "assets": deposit.model_dump(mode="json"),
                    "min_shares_out": min_shares_out,
                    "slippage": None if slippage is None else slippage.model_dump(mode="json"),
                },
            )
        )
        return instructions

    def withdraw_liquidity(
        self,
        querier: PoolQuerier,
        lp_token: Asset,
        min_assets_out: AssetList | None = None,
    ) -> list[Instruction]:
        """Build the calls burning ``lp_token``, after checking the returned assets.

        Raises:
            MinOutNotReceived: If any simulated asset is below its bound
        """
        simulation = self.simulate_withdraw_liquidity(querier, lp_token)
        self._enforce("withdraw_liquidity", simulation.check, min_assets_out)

        instructions, funds = self._transfers(AssetList.of([lp_token]))
        instructions.append(
            Instruction(
                target=self.address,
                action=Action.WITHDRAW_LIQUIDITY,
                funds=funds,
                payload={
                    "amount": lp_token.amount,
                    "min_assets_out": (
                        None if min_assets_out is None else min_assets_out.model_dump(mode="json")
                    ),
                },
            )
        )
        return instructions

    def swap(
        self, querier: PoolQuerier, offer: Asset, ask: AssetInfo, min_out: int = 0
    ) -> list[Instruction]:
        """Build the calls swapping ``offer`` for ``ask``, after checking the quote.

        Raises:
            MinOutNotReceived: If the quoted amount is below min_out
        """
        simulation = self.simulate_swap(querier, offer, ask)
        self._enforce("swap", simulation.check, min_out)

        instructions, funds = self._transfers(AssetList.of([offer]))
        instructions.append(
            Instruction(
                target=self.address,
                action=Action.SWAP,
                funds=funds,
                payload={
                    "offer": offer.model_dump(mode="json"),
                    "ask": ask.model_dump(mode="json"),
                    "min_out": min_out,
                },
            )
        )
        return instructions

    # --- Helpers ---

    def _enforce(self, operation: str, check: Callable[[Any], None], bound: Any) -> None:
        """Run a simulation guard, logging a failure before re-raising it."""
        try:
            check(bound)
        except MinOutNotReceived as e:
            logger.info(
                "min_out_not_received",
                pool=self.address,
                operation=operation,
                wanted=e.wanted,
                got=e.got,
            )
            raise

    def _enforce_slippage(
        self, querier: PoolQuerier, deposit: AssetList, shares: int, slippage: SlippageControl
    ) -> None:
        """Check a deposit against a slippage control, logging a failure before re-raising it."""
        old_price = new_price = None
        if not isinstance(slippage, MinOut):
            reserves = querier.query_reserves(self.identity).amounts_for(self.pool_assets)
            after = [r + a.amount for r, a in zip(reserves, deposit, strict=True)]
            # An empty pool has no price before the deposit
            if all(r > 0 for r in reserves):
                old_price = self.spot_price(querier, reserves)
            new_price = self.spot_price(querier, after)

        try:
            slippage.check(old_price, new_price, shares)
        except MinOutNotReceived as e:
            logger.info(
                "min_out_not_received",
                pool=self.address,
                operation="provide_liquidity",
                wanted=e.wanted,
                got=e.got,
            )
            raise
        except PriceSlippageExceeded:
            logger.info(
                "price_slippage_exceeded",
                pool=self.address,
                slippage=slippage.kind,
                old_price=str(old_price),
                new_price=str(new_price),
            )
            raise

    def _transfers(self, assets: AssetList) -> tuple[list[Instruction], AssetList]:
        """Allowances for token-contract assets, and native funds to attach."""
        allowances = [
            Instruction(
                target=asset.info.identifier,
                action=Action.INCREASE_ALLOWANCE,
                payload={"spender": self.address, "amount": asset.amount},
            )
            for asset in assets
            if not asset.info.is_native and asset.amount > 0
        ]
        funds = AssetList.of(a for a in assets if a.info.is_native and a.amount > 0)
        return allowances, funds

    def _ordered_amounts(
        self, assets: AssetList, error: type[InputError] = InvalidInAsset
    ) -> list[int]:
        """Amounts of ``assets`` in pool order, zero for members not listed.

        Raises:
            InvalidInAsset: If an asset is not a pool member (or ``error``)
        """
        amounts = [0] * len(self.pool_assets)
        for asset in assets:
            index = self.identity.index_of(asset.info)
            if index is None:
                raise error(asset.info)
            amounts[index] += asset.amount
        return amounts

    def _in_pool_order(
        self, assets: AssetList, error: type[InputError] = InvalidInAsset
    ) -> AssetList:
        amounts = self._ordered_amounts(assets, error)
        return AssetList.of(
            Asset(info=info, amount=amount)
            for info, amount in zip(self.pool_assets, amounts, strict=True)
        )

    def _check_lp_token(self, lp_token: Asset) -> None:
        """
        Raises:
            InvalidLpToken: If the asset is not this pool's LP token
            InvalidZeroAmount: If the amount is zero
        """
        if lp_token.info != self.lp_token:
            raise InvalidLpToken(lp_token.info)
        if lp_token.amount == 0:
            raise InvalidZeroAmount()

    def _check_swap(self, offer: Asset, ask: AssetInfo) -> None:
        if not self.identity.has_asset(offer.info):
            raise InvalidInAsset(offer.info)
        if not self.identity.has_asset(ask) or ask == offer.info:
            raise InvalidOutAsset(ask)
        if offer.amount == 0:
            raise InvalidZeroAmount()


__all__ = ["PoolCapability"]
