"""Tests for the Pool dispatcher and LP token resolution."""

import pytest

from dexcore.amm import ConstantProductPool, StableSwapPool
from dexcore.config import PoolConfig
from dexcore.errors import NotLpToken, UnsupportedPool
from dexcore.models import AmplificationParams, Asset, AssetInfo, CurveKind, PoolIdentity
from dexcore.pools import Pool, parse_native_pool_id, resolve_lp_token
from dexcore.querier import reserves_of
from tests.helpers import (
    ATOM,
    NATIVE_LP,
    NATIVE_POOL_ADDRESS,
    NATIVE_POOL_ID,
    STABLE_LP,
    USDC,
    USDT,
    XYK_LP,
    XYK_PAIR,
    assets,
    make_stable_identity,
)


@pytest.fixture
def native_identity() -> PoolIdentity:
    return make_stable_identity(
        address=NATIVE_POOL_ADDRESS,
        lp_token=NATIVE_LP,
        asset_infos=(USDC, ATOM),
        pool_id=NATIVE_POOL_ID,
    )


@pytest.fixture
def native_pool(querier, native_identity) -> PoolIdentity:
    querier.add_pool(
        native_identity,
        reserves_of(native_identity, [10**9, 10**9], 10**9),
        AmplificationParams.constant(10_000),
    )
    return native_identity


class TestParseNativePoolId:
    """Tests for reserved-prefix native denoms."""

    @pytest.mark.parametrize(
        "denom,expected",
        [
            ("gamm/pool/7", 7),
            ("gamm/pool/1234", 1234),
            ("gamm/pool/", None),
            ("gamm/pool/abc", None),
            ("gamm/pool/-1", None),
            ("gamm/pool/1a", None),
            ("uatom", None),
            ("factory/gamm/pool/7", None),
        ],
    )
    def test_parse(self, denom, expected):
        assert parse_native_pool_id(denom, "gamm/pool/") == expected

    def test_custom_prefix(self):
        assert parse_native_pool_id("lp/3", "lp/") == 3


class TestForLpToken:
    """Tests for resolving a pool from its LP token."""

    def test_contract_lp_token(self, querier, xyk_pool):
        """A contract-issued LP token resolves through its creator."""
        pool = Pool.for_lp_token(querier, XYK_LP)
        assert isinstance(pool.root, ConstantProductPool)
        assert pool.identity.address == XYK_PAIR

    def test_stable_contract_lp_token(self, querier, stable_pool):
        pool = Pool.for_lp_token(querier, STABLE_LP)
        assert isinstance(pool.root, StableSwapPool)

    def test_native_lp_token(self, querier, native_pool):
        """A reserved-prefix denom resolves to the native pool with that id."""
        pool = Pool.for_lp_token(querier, NATIVE_LP)
        assert isinstance(pool.root, StableSwapPool)
        assert pool.identity.pool_id == NATIVE_POOL_ID

    def test_config_is_passed_to_variant(self, querier, xyk_pool):
        config = PoolConfig(minimum_liquidity_amount=1)
        pool = Pool.for_lp_token(querier, XYK_LP, config)
        assert pool.variant.config == config

    def test_plain_native_denom_is_not_lp(self, querier):
        with pytest.raises(NotLpToken):
            Pool.for_lp_token(querier, USDC)

    def test_malformed_pool_id_is_not_lp(self, querier):
        with pytest.raises(NotLpToken):
            Pool.for_lp_token(querier, AssetInfo.native("gamm/pool/abc"))

    def test_unknown_native_pool_is_not_lp(self, querier):
        with pytest.raises(NotLpToken):
            Pool.for_lp_token(querier, AssetInfo.native("gamm/pool/99"))

    def test_token_without_creator_is_not_lp(self, querier):
        with pytest.raises(NotLpToken):
            Pool.for_lp_token(querier, USDT)

    def test_creator_that_is_not_a_pair_is_not_lp(self, querier):
        querier.add_contract_creator(USDT.identifier, "wasm1someone")
        with pytest.raises(NotLpToken):
            Pool.for_lp_token(querier, USDT)

    def test_pair_with_other_lp_token_is_not_lp(self, querier, xyk_pool):
        """A token created by a pair is only accepted if it is that pair's LP token."""
        other = AssetInfo.cw20("wasm1othertoken")
        querier.add_contract_creator(other.identifier, XYK_PAIR)
        with pytest.raises(NotLpToken):
            resolve_lp_token(querier, other)

    def test_unsupported_curve(self, querier):
        identity = PoolIdentity(
            address="wasm1weightedpair",
            lp_token=AssetInfo.cw20("wasm1weightedlp"),
            asset_infos=(USDC, USDT),
            curve=CurveKind.UNSUPPORTED,
        )
        querier.add_pool(identity, reserves_of(identity, [1, 1], 1))
        with pytest.raises(UnsupportedPool):
            Pool.for_lp_token(querier, identity.lp_token)


class TestFromIdentity:
    """Tests for building a pool from a known identity."""

    def test_constant_product(self, xyk_identity):
        assert isinstance(Pool.from_identity(xyk_identity).root, ConstantProductPool)

    def test_stable_swap(self, stable_identity):
        assert isinstance(Pool.from_identity(stable_identity).root, StableSwapPool)


class TestSerialization:
    """Tests for the tagged JSON form."""

    @pytest.mark.parametrize("fixture", ["xyk_identity", "stable_identity"])
    def test_json_round_trip_preserves_variant(self, request, fixture):
        identity = request.getfixturevalue(fixture)
        pool = Pool.from_identity(identity, PoolConfig(stable_fee=4_000_000))

        restored = Pool.model_validate_json(pool.model_dump_json())

        assert restored == pool
        assert type(restored.root) is type(pool.root)
        assert restored.variant.config.stable_fee == 4_000_000

    def test_json_is_tagged(self, xyk_identity):
        data = Pool.from_identity(xyk_identity).model_dump(mode="json")
        assert data["kind"] == "constant_product"

    def test_unknown_tag_rejected(self, xyk_identity):
        data = Pool.from_identity(xyk_identity).model_dump(mode="json")
        data["kind"] = "weighted"
        with pytest.raises(ValueError):
            Pool.model_validate(data)


class TestForwarding:
    """Tests that Pool forwards operations to its variant."""

    def test_simulate_provide(self, querier, xyk_pool):
        pool = Pool.for_lp_token(querier, XYK_LP)
        deposit = assets((USDC, 500_000), (USDT, 500_000))
        assert pool.simulate_provide_liquidity(
            querier, deposit
        ) == xyk_pool.simulate_provide_liquidity(querier, deposit)

    def test_withdraw(self, querier, xyk_pool):
        pool = Pool.for_lp_token(querier, XYK_LP)
        instructions = pool.withdraw_liquidity(querier, Asset(info=XYK_LP, amount=1_000))
        assert instructions == xyk_pool.withdraw_liquidity(
            querier, Asset(info=XYK_LP, amount=1_000)
        )

    def test_lp_token_and_assets(self, querier, xyk_pool):
        pool = Pool.for_lp_token(querier, XYK_LP)
        assert pool.lp_token == XYK_LP
        assert pool.pool_assets == (USDC, USDT)
        assert pool.get_pool_liquidity(querier).amount_of(USDC) == 1_000_000

    def test_imbalanced_withdraw_on_stable(self, querier, stable_pool):
        pool = Pool.for_lp_token(querier, STABLE_LP)
        simulation = pool.simulate_withdraw_liquidity_imbalanced(
            querier, assets((USDC, 100 * 10**6))
        )
        assert simulation.burn.info == STABLE_LP

    def test_imbalanced_withdraw_on_constant_product_raises(self, querier, xyk_pool):
        pool = Pool.for_lp_token(querier, XYK_LP)
        with pytest.raises(UnsupportedPool):
            pool.simulate_withdraw_liquidity_imbalanced(querier, assets((USDC, 1)))
        with pytest.raises(UnsupportedPool):
            pool.withdraw_liquidity_imbalanced(querier, assets((USDC, 1)), max_burn=10)
