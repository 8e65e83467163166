"""Invariant result types and slippage controls.

Each simulation result carries what a caller needs to enforce a
minimum-output guard before turning it into an outbound instruction.
SlippageControl adds price-based guards on top of the share bound: the pool
price after a deposit is compared with a belief price or with the price
before it.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field

from dexcore.errors import (
    InsufficientShares,
    MinOutNotReceived,
    PriceAssetMismatch,
    PriceSlippageExceeded,
)
from dexcore.models.assets import Asset, AssetInfo, AssetList
from dexcore.models.types import Ratio, Uint128


def check_min_out(got: int, wanted: int, asset: object = None) -> None:
    """Raise if ``got`` is below the caller's bound.

    Raises:
        MinOutNotReceived: If got < wanted
    """
    if got < wanted:
        raise MinOutNotReceived(wanted=wanted, got=got, asset=asset)


class ProvideSimulation(BaseModel):
    """LP shares minted by a deposit."""

    model_config = ConfigDict(frozen=True)

    shares: Asset

    def meets(self, min_shares_out: int) -> bool:
        return self.shares.amount >= min_shares_out

    def check(self, min_shares_out: int) -> None:
        check_min_out(self.shares.amount, min_shares_out, self.shares.info)


class WithdrawSimulation(BaseModel):
    """Assets returned for burning LP shares."""

    model_config = ConfigDict(frozen=True)

    assets: AssetList

    def meets(self, min_assets_out: AssetList | None) -> bool:
        try:
            self.check(min_assets_out)
        except MinOutNotReceived:
            return False
        return True

    def check(self, min_assets_out: AssetList | None) -> None:
        """Every bound in ``min_assets_out`` must be met by the matching asset."""
        if min_assets_out is None:
            return
        for bound in min_assets_out:
            check_min_out(self.assets.amount_of(bound.info), bound.amount, bound.info)


class SwapSimulation(BaseModel):
    """Amount received for an offer."""

    model_config = ConfigDict(frozen=True)

    offer: Asset
    receive: Asset

    def meets(self, min_out: int) -> bool:
        return self.receive.amount >= min_out

    def check(self, min_out: int) -> None:
        check_min_out(self.receive.amount, min_out, self.receive.info)


class ImbalancedWithdrawSimulation(BaseModel):
    """LP shares burned to receive an exact set of assets."""

    model_config = ConfigDict(frozen=True)

    burn: Asset
    assets: AssetList

    def meets(self, max_burn: int) -> bool:
        return self.burn.amount <= max_burn

    def check(self, max_burn: int) -> None:
        """
        Raises:
            InsufficientShares: If the burn is above max_burn
        """
        if not self.meets(max_burn):
            raise InsufficientShares(required=self.burn.amount, available=max_burn)


# --- Price-based slippage control ---


class Price(BaseModel):
    """Units of ``quote_asset`` paid per unit of ``base_asset``."""

    model_config = ConfigDict(frozen=True)

    base_asset: AssetInfo
    quote_asset: AssetInfo
    price: Annotated[Decimal, Field(gt=0)]

    def get_price(self, base_asset: AssetInfo, quote_asset: AssetInfo) -> Decimal:
        """This price quoted as ``quote_asset`` per ``base_asset``, inverting if needed.

        Raises:
            PriceAssetMismatch: If the pair is not the one this price quotes
        """
        if base_asset == self.base_asset and quote_asset == self.quote_asset:
            return self.price
        if base_asset == self.quote_asset and quote_asset == self.base_asset:
            return 1 / self.price
        raise PriceAssetMismatch(base_asset, quote_asset)

    def __str__(self) -> str:
        return f"{self.price} {self.quote_asset} per {self.base_asset}"


def _outside(price: Decimal, reference: Decimal, tolerance: Decimal) -> bool:
    return price > reference * (1 + tolerance) or price < reference * (1 - tolerance)


class MinOut(BaseModel):
    """Require at least ``min_out`` LP shares."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["min_out"] = "min_out"
    min_out: Uint128

    def check(self, old_price: Price | None, new_price: Price | None, shares: int) -> None:
        check_min_out(shares, self.min_out)


class BeliefPrice(BaseModel):
    """Require the pool price after the operation to stay near the caller's belief."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["belief_price"] = "belief_price"
    belief_price: Price
    slippage_tolerance: Ratio

    def check(self, old_price: Price | None, new_price: Price | None, shares: int) -> None:
        if new_price is None:
            raise ValueError("Belief price check needs the pool price after the operation")
        observed = new_price.get_price(self.belief_price.base_asset, self.belief_price.quote_asset)
        if _outside(observed, self.belief_price.price, self.slippage_tolerance):
            raise PriceSlippageExceeded(old_price=old_price, new_price=new_price)


class MaxPriceImpact(BaseModel):
    """Require the operation to move the pool price by at most ``max_price_impact``.

    An empty pool has no price to move, so a first deposit always passes.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["max_price_impact"] = "max_price_impact"
    max_price_impact: Ratio = Decimal("0.03")

    def check(self, old_price: Price | None, new_price: Price | None, shares: int) -> None:
        if old_price is None or new_price is None:
            return
        if _outside(new_price.price, old_price.price, self.max_price_impact):
            raise PriceSlippageExceeded(old_price=old_price, new_price=new_price)


SlippageControl: TypeAlias = Annotated[
    MinOut | BeliefPrice | MaxPriceImpact,
    Field(discriminator="kind"),
]


__all__ = [
    "check_min_out",
    "ProvideSimulation",
    "WithdrawSimulation",
    "SwapSimulation",
    "ImbalancedWithdrawSimulation",
    "Price",
    "MinOut",
    "BeliefPrice",
    "MaxPriceImpact",
    "SlippageControl",
]
