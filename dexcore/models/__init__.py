"""Value types for pool identities, snapshots, results and instructions."""

from dexcore.models.assets import Asset, AssetInfo, AssetKind, AssetList, PrecisionTable
from dexcore.models.instructions import Action, Instruction
from dexcore.models.pool import AmplificationParams, CurveKind, PoolIdentity, PoolReserves
from dexcore.models.results import (
    BeliefPrice,
    ImbalancedWithdrawSimulation,
    MaxPriceImpact,
    MinOut,
    Price,
    ProvideSimulation,
    SlippageControl,
    SwapSimulation,
    WithdrawSimulation,
    check_min_out,
)
from dexcore.models.types import Ratio, Timestamp, Uint128

__all__ = [
    # Assets
    "AssetKind",
    "AssetInfo",
    "Asset",
    "AssetList",
    "PrecisionTable",
    # Pools
    "CurveKind",
    "PoolIdentity",
    "PoolReserves",
    "AmplificationParams",
    # Results
    "ProvideSimulation",
    "WithdrawSimulation",
    "SwapSimulation",
    "ImbalancedWithdrawSimulation",
    "check_min_out",
    # Slippage control
    "Price",
    "MinOut",
    "BeliefPrice",
    "MaxPriceImpact",
    "SlippageControl",
    # Instructions
    "Action",
    "Instruction",
    # Types
    "Uint128",
    "Ratio",
    "Timestamp",
]
