"""Tests for ConstantProductPool."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from dexcore.amm import ConstantProductPool
from dexcore.errors import (
    InvalidInAsset,
    InvalidLpToken,
    InvalidOutAsset,
    InvalidZeroAmount,
    MinOutNotReceived,
    PriceAssetMismatch,
    PriceSlippageExceeded,
    QueryError,
)
from dexcore.models import (
    Action,
    Asset,
    AssetList,
    BeliefPrice,
    MaxPriceImpact,
    MinOut,
    Price,
)
from dexcore.querier import reserves_of
from tests.helpers import ATOM, DAI, USDC, USDT, XYK_LP, XYK_PAIR, assets, make_stable_identity


class TestConstruction:
    """Tests for building a constant product pool."""

    def test_properties(self, xyk_pool):
        assert xyk_pool.kind == "constant_product"
        assert xyk_pool.address == XYK_PAIR
        assert xyk_pool.lp_token == XYK_LP
        assert xyk_pool.pool_assets == (USDC, USDT)

    def test_rejects_stable_identity(self):
        with pytest.raises(ValidationError):
            ConstantProductPool(identity=make_stable_identity())

    def test_rejects_three_assets(self, xyk_identity):
        identity = xyk_identity.model_copy(update={"asset_infos": (USDC, USDT, DAI)})
        with pytest.raises(ValidationError):
            ConstantProductPool(identity=identity)

    def test_get_pool_liquidity(self, querier, xyk_pool):
        liquidity = xyk_pool.get_pool_liquidity(querier)
        assert liquidity.amount_of(USDC) == 1_000_000
        assert liquidity.amount_of(USDT) == 1_000_000


class TestSimulateProvide:
    """Tests for simulated deposits."""

    def test_proportional_deposit(self, querier, xyk_pool):
        """Depositing half the reserves mints half the supply."""
        simulation = xyk_pool.simulate_provide_liquidity(
            querier, assets((USDC, 500_000), (USDT, 500_000))
        )
        assert simulation.shares == Asset(info=XYK_LP, amount=500_000)

    def test_order_does_not_matter(self, querier, xyk_pool):
        simulation = xyk_pool.simulate_provide_liquidity(
            querier, assets((USDT, 100_000), (USDC, 500_000))
        )
        assert simulation.shares.amount == 100_000

    def test_initial_deposit(self, querier, xyk_identity):
        querier.add_pool(xyk_identity, reserves_of(xyk_identity, [0, 0], 0))
        pool = ConstantProductPool(identity=xyk_identity)
        simulation = pool.simulate_provide_liquidity(
            querier, assets((USDC, 1_000_000), (USDT, 1_000_000))
        )
        assert simulation.shares.amount == 1_000_000

    def test_missing_side_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidZeroAmount):
            xyk_pool.simulate_provide_liquidity(querier, assets((USDC, 500_000)))

    def test_non_member_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidInAsset):
            xyk_pool.simulate_provide_liquidity(querier, assets((USDC, 1), (ATOM, 1)))


class TestProvideLiquidity:
    """Tests for guarded deposits."""

    def test_guard_failure_produces_no_instructions(self, querier, xyk_pool):
        """(1, 1) mints 1 share, so a bound of 2 fails."""
        with pytest.raises(MinOutNotReceived) as exc_info:
            xyk_pool.provide_liquidity(querier, assets((USDC, 1), (USDT, 1)), min_shares_out=2)
        assert exc_info.value.wanted == 2
        assert exc_info.value.got == 1

    def test_bound_equal_to_simulation_passes(self, querier, xyk_pool):
        instructions = xyk_pool.provide_liquidity(
            querier, assets((USDC, 1), (USDT, 1)), min_shares_out=1
        )
        assert instructions[-1].action == Action.PROVIDE_LIQUIDITY

    def test_instructions(self, querier, xyk_pool):
        """Token-contract assets get an allowance; native assets are attached."""
        instructions = xyk_pool.provide_liquidity(
            querier, assets((USDC, 500_000), (USDT, 500_000)), min_shares_out=500_000
        )

        assert len(instructions) == 2
        allowance, provide = instructions
        assert allowance.action == Action.INCREASE_ALLOWANCE
        assert allowance.target == USDT.identifier
        assert allowance.payload == {"spender": XYK_PAIR, "amount": 500_000}

        assert provide.target == XYK_PAIR
        assert provide.funds == AssetList.of([Asset(info=USDC, amount=500_000)])
        assert provide.payload["min_shares_out"] == 500_000
        assert len(provide.payload["assets"]) == 2


class TestSlippageControl:
    """Tests for price-based deposit guards.

    Depositing 500_000 USDC and 250_000 USDT into the 1:1 fixture pool moves
    the price from 1 to 1_250_000 / 1_500_000 (about 0.833 USDT per USDC).
    """

    SKEWED = ((USDC, 500_000), (USDT, 250_000))

    def test_spot_price(self, querier, xyk_pool):
        assert xyk_pool.spot_price(querier) == Price(
            base_asset=USDC, quote_asset=USDT, price=Decimal(1)
        )

    def test_spot_price_at_amounts(self, querier, xyk_pool):
        assert xyk_pool.spot_price(querier, [1_000_000, 2_500_000]).price == Decimal("2.5")

    def test_max_price_impact_within_tolerance(self, querier, xyk_pool):
        instructions = xyk_pool.provide_liquidity(
            querier,
            assets(*self.SKEWED),
            slippage=MaxPriceImpact(max_price_impact=Decimal("0.2")),
        )
        assert instructions[-1].payload["slippage"]["kind"] == "max_price_impact"

    def test_max_price_impact_exceeded(self, querier, xyk_pool):
        with pytest.raises(PriceSlippageExceeded) as exc_info:
            xyk_pool.provide_liquidity(
                querier,
                assets(*self.SKEWED),
                slippage=MaxPriceImpact(max_price_impact=Decimal("0.1")),
            )
        assert exc_info.value.old_price.price == 1
        assert exc_info.value.new_price.price < Decimal("0.84")

    def test_balanced_deposit_has_no_price_impact(self, querier, xyk_pool):
        xyk_pool.provide_liquidity(
            querier,
            assets((USDC, 100_000), (USDT, 100_000)),
            slippage=MaxPriceImpact(max_price_impact=Decimal(0)),
        )

    def test_default_price_impact_is_three_percent(self, querier, xyk_pool):
        with pytest.raises(PriceSlippageExceeded):
            xyk_pool.provide_liquidity(querier, assets(*self.SKEWED), slippage=MaxPriceImpact())

    def test_first_deposit_has_no_price_to_move(self, querier, xyk_identity):
        querier.add_pool(xyk_identity, reserves_of(xyk_identity, [0, 0], 0))
        pool = ConstantProductPool(identity=xyk_identity)
        pool.provide_liquidity(
            querier,
            assets((USDC, 1_000_000), (USDT, 4_000_000)),
            slippage=MaxPriceImpact(max_price_impact=Decimal(0)),
        )

    def test_belief_price_is_inverted_when_quoted_the_other_way(self, querier, xyk_pool):
        """A belief of 1.2 USDC per USDT matches the post-deposit 0.833 USDT per USDC."""
        belief = Price(base_asset=USDT, quote_asset=USDC, price=Decimal("1.2"))
        xyk_pool.provide_liquidity(
            querier,
            assets(*self.SKEWED),
            slippage=BeliefPrice(belief_price=belief, slippage_tolerance=Decimal("0.01")),
        )

    def test_belief_price_exceeded(self, querier, xyk_pool):
        belief = Price(base_asset=USDC, quote_asset=USDT, price=Decimal(1))
        with pytest.raises(PriceSlippageExceeded):
            xyk_pool.provide_liquidity(
                querier,
                assets(*self.SKEWED),
                slippage=BeliefPrice(belief_price=belief, slippage_tolerance=Decimal("0.05")),
            )

    def test_belief_price_for_other_assets_raises(self, querier, xyk_pool):
        belief = Price(base_asset=USDC, quote_asset=ATOM, price=Decimal(1))
        with pytest.raises(PriceAssetMismatch):
            xyk_pool.provide_liquidity(
                querier,
                assets(*self.SKEWED),
                slippage=BeliefPrice(belief_price=belief, slippage_tolerance=Decimal("0.05")),
            )

    def test_min_out(self, querier, xyk_pool):
        """The skewed deposit mints 250_000 shares."""
        xyk_pool.provide_liquidity(
            querier, assets(*self.SKEWED), slippage=MinOut(min_out=250_000)
        )
        with pytest.raises(MinOutNotReceived):
            xyk_pool.provide_liquidity(
                querier, assets(*self.SKEWED), slippage=MinOut(min_out=250_001)
            )


class TestWithdraw:
    """Tests for simulated and guarded withdrawals."""

    def test_simulate(self, querier, xyk_pool):
        simulation = xyk_pool.simulate_withdraw_liquidity(
            querier, Asset(info=XYK_LP, amount=100_000)
        )
        assert simulation.assets.amount_of(USDC) == 100_000
        assert simulation.assets.amount_of(USDT) == 100_000

    def test_wrong_lp_token_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidLpToken):
            xyk_pool.simulate_withdraw_liquidity(querier, Asset(info=USDC, amount=100))

    def test_zero_amount_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidZeroAmount):
            xyk_pool.simulate_withdraw_liquidity(querier, Asset(info=XYK_LP, amount=0))

    def test_guard_failure(self, querier, xyk_pool):
        with pytest.raises(MinOutNotReceived) as exc_info:
            xyk_pool.withdraw_liquidity(
                querier,
                Asset(info=XYK_LP, amount=100_000),
                min_assets_out=assets((USDT, 100_001)),
            )
        assert exc_info.value.asset == USDT

    def test_instructions(self, querier, xyk_pool):
        instructions = xyk_pool.withdraw_liquidity(
            querier,
            Asset(info=XYK_LP, amount=100_000),
            min_assets_out=assets((USDC, 100_000), (USDT, 100_000)),
        )
        allowance, withdraw = instructions
        assert allowance.target == XYK_LP.identifier
        assert withdraw.action == Action.WITHDRAW_LIQUIDITY
        assert withdraw.payload["amount"] == 100_000
        assert len(withdraw.funds) == 0

    def test_round_trip_never_returns_more(self, querier, xyk_identity):
        reserves = [1_000_003, 2_000_007]
        querier.add_pool(xyk_identity, reserves_of(xyk_identity, reserves, 1_414_215))
        pool = ConstantProductPool(identity=xyk_identity)

        deposits = [1_000, 2_000]
        shares = pool.simulate_provide_liquidity(
            querier, assets((USDC, deposits[0]), (USDT, deposits[1]))
        ).shares

        new_reserves = [r + d for r, d in zip(reserves, deposits, strict=True)]
        querier.set_reserves(
            xyk_identity, reserves_of(xyk_identity, new_reserves, 1_414_215 + shares.amount)
        )
        returned = pool.simulate_withdraw_liquidity(querier, shares).assets
        assert returned.amount_of(USDC) <= deposits[0]
        assert returned.amount_of(USDT) <= deposits[1]


class TestSwap:
    """Tests for swaps priced by the pair's own quote."""

    def test_simulate_uses_quote(self, querier, xyk_pool, xyk_identity):
        offer = Asset(info=USDC, amount=10_000)
        querier.add_quote(xyk_identity, offer, USDT, 9_870)
        simulation = xyk_pool.simulate_swap(querier, offer, USDT)
        assert simulation.receive == Asset(info=USDT, amount=9_870)

    def test_guard_failure(self, querier, xyk_pool, xyk_identity):
        offer = Asset(info=USDC, amount=10_000)
        querier.add_quote(xyk_identity, offer, USDT, 9_870)
        with pytest.raises(MinOutNotReceived):
            xyk_pool.swap(querier, offer, USDT, min_out=9_871)

    def test_native_offer_is_attached(self, querier, xyk_pool, xyk_identity):
        offer = Asset(info=USDC, amount=10_000)
        querier.add_quote(xyk_identity, offer, USDT, 9_870)
        instructions = xyk_pool.swap(querier, offer, USDT, min_out=9_800)
        assert len(instructions) == 1
        assert instructions[0].action == Action.SWAP
        assert instructions[0].funds == AssetList.of([offer])

    def test_token_offer_gets_allowance(self, querier, xyk_pool, xyk_identity):
        offer = Asset(info=USDT, amount=10_000)
        querier.add_quote(xyk_identity, offer, USDC, 9_870)
        instructions = xyk_pool.swap(querier, offer, USDC, min_out=9_800)
        assert [i.action for i in instructions] == [Action.INCREASE_ALLOWANCE, Action.SWAP]

    def test_non_member_offer_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidInAsset):
            xyk_pool.simulate_swap(querier, Asset(info=ATOM, amount=1), USDT)

    def test_non_member_ask_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidOutAsset):
            xyk_pool.simulate_swap(querier, Asset(info=USDC, amount=1), ATOM)

    def test_ask_equal_to_offer_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidOutAsset):
            xyk_pool.simulate_swap(querier, Asset(info=USDC, amount=1), USDC)

    def test_zero_offer_raises(self, querier, xyk_pool):
        with pytest.raises(InvalidZeroAmount):
            xyk_pool.simulate_swap(querier, Asset(info=USDC, amount=0), USDT)

    def test_missing_quote_raises(self, querier, xyk_pool):
        with pytest.raises(QueryError):
            xyk_pool.simulate_swap(querier, Asset(info=USDC, amount=5), USDT)
