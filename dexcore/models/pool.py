"""Pool identity and snapshot models.

These are value types built fresh for every call from externally supplied
reads. None of them is mutated by pool math; on-chain state changes happen
outside this package.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from dexcore.errors import InvalidSchedule
from dexcore.models.assets import AssetInfo, AssetList
from dexcore.models.types import Timestamp, Uint128


class CurveKind(str, Enum):
    """Invariant family a pool prices with."""

    CONSTANT_PRODUCT = "constant_product"
    STABLE_SWAP = "stable_swap"
    UNSUPPORTED = "unsupported"


class PoolIdentity(BaseModel):
    """Stable handle to a pool.

    Attributes:
        address: Pair contract address, or the pool module address for
            native-ledger pools
        lp_token: Identity of the pool's liquidity token
        asset_infos: Pool members, in pool order
        curve: Invariant family
        pool_id: Numeric id for native-ledger pools
    """

    model_config = ConfigDict(frozen=True)

    address: str
    lp_token: AssetInfo
    asset_infos: tuple[AssetInfo, ...] = Field(min_length=2)
    curve: CurveKind
    pool_id: int | None = Field(default=None, ge=0)

    def index_of(self, info: AssetInfo) -> int | None:
        """Position of ``info`` among pool members, None if not a member."""
        for i, member in enumerate(self.asset_infos):
            if member == info:
                return i
        return None

    def has_asset(self, info: AssetInfo) -> bool:
        return self.index_of(info) is not None


class PoolReserves(BaseModel):
    """Snapshot of a pool's balances and LP supply."""

    model_config = ConfigDict(frozen=True)

    assets: AssetList
    total_shares: Uint128

    def amounts_for(self, infos: tuple[AssetInfo, ...]) -> list[int]:
        """Reserve amounts ordered as ``infos`` (zero for missing members)."""
        return [self.assets.amount_of(info) for info in infos]


class AmplificationParams(BaseModel):
    """Linear ramp of the stableswap amplification coefficient.

    Amplification values are stored multiplied by AMP_PRECISION, as on-chain.

    Raises:
        InvalidSchedule: On construction if next_amp_time < init_amp_time
    """

    model_config = ConfigDict(frozen=True)

    init_amp: int = Field(ge=0)
    init_amp_time: Timestamp
    next_amp: int = Field(ge=0)
    next_amp_time: Timestamp

    @model_validator(mode="after")
    def _check_ramp(self) -> AmplificationParams:
        if self.next_amp_time < self.init_amp_time:
            raise InvalidSchedule(
                f"next_amp_time {self.next_amp_time} is before init_amp_time {self.init_amp_time}"
            )
        return self

    @classmethod
    def constant(cls, amp: int, since: int = 0) -> AmplificationParams:
        """Schedule with no ramp."""
        return cls(init_amp=amp, init_amp_time=since, next_amp=amp, next_amp_time=since)


__all__ = [
    "CurveKind",
    "PoolIdentity",
    "PoolReserves",
    "AmplificationParams",
]
