"""Asset value types.

An asset is identified either by a native ledger denom or by the address of
the token contract that issued it. Amounts are 128-bit unsigned integers.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, ConfigDict, RootModel

from dexcore.constants import MAX_PRECISION
from dexcore.errors import InvalidInAsset
from dexcore.models.types import Uint128


class AssetKind(str, Enum):
    """Where an asset is issued."""

    NATIVE = "native"
    CW20 = "cw20"


class AssetInfo(BaseModel):
    """Opaque, comparable identity of a token."""

    model_config = ConfigDict(frozen=True)

    kind: AssetKind
    identifier: str

    @classmethod
    def native(cls, denom: str) -> AssetInfo:
        return cls(kind=AssetKind.NATIVE, identifier=denom)

    @classmethod
    def cw20(cls, address: str) -> AssetInfo:
        return cls(kind=AssetKind.CW20, identifier=address)

    @property
    def is_native(self) -> bool:
        return self.kind == AssetKind.NATIVE

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.identifier}"


class Asset(BaseModel):
    """An amount of a specific token."""

    model_config = ConfigDict(frozen=True)

    info: AssetInfo
    amount: Uint128

    def __str__(self) -> str:
        return f"{self.amount} {self.info}"


class AssetList(RootModel[tuple[Asset, ...]]):
    """Ordered collection of assets, at most one entry per identity."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def of(cls, assets: Iterable[Asset]) -> AssetList:
        return cls(tuple(assets))

    def __iter__(self) -> Iterator[Asset]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> Asset:
        return self.root[index]

    @property
    def infos(self) -> tuple[AssetInfo, ...]:
        return tuple(a.info for a in self.root)

    def find(self, info: AssetInfo) -> Asset | None:
        """Get the entry for a specific asset."""
        for asset in self.root:
            if asset.info == info:
                return asset
        return None

    def amount_of(self, info: AssetInfo) -> int:
        """Amount held of ``info``, zero when absent."""
        asset = self.find(info)
        return asset.amount if asset is not None else 0

    def __str__(self) -> str:
        return ", ".join(str(a) for a in self.root)


@dataclass(frozen=True)
class PrecisionTable:
    """Decimal precision per asset, read from the environment for one call.

    Attributes:
        precisions: Mapping from asset identity to its decimal precision
    """

    precisions: Mapping[AssetInfo, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate every precision is within 0..=MAX_PRECISION."""
        for info, precision in self.precisions.items():
            if isinstance(precision, bool) or not 0 <= precision <= MAX_PRECISION:
                raise ValueError(
                    f"Precision of {info} must be between 0 and {MAX_PRECISION}, got {precision}"
                )

    def precision_of(self, info: AssetInfo) -> int:
        """Precision for ``info``.

        Raises:
            InvalidInAsset: If the table has no entry for ``info``
        """
        try:
            return self.precisions[info]
        except KeyError:
            raise InvalidInAsset(info) from None

    def greatest(self, infos: Iterable[AssetInfo]) -> int:
        """Greatest precision among ``infos``."""
        return max(self.precision_of(info) for info in infos)


__all__ = [
    "AssetKind",
    "AssetInfo",
    "Asset",
    "AssetList",
    "PrecisionTable",
]
