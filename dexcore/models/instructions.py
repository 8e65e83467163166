"""Outbound instruction model.

Mutating pool operations return instructions describing the contract call a
caller must submit. Encoding an instruction for a specific ledger is left to
the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dexcore.models.assets import AssetList


class Action(str, Enum):
    """Kind of outbound call."""

    PROVIDE_LIQUIDITY = "provide_liquidity"
    WITHDRAW_LIQUIDITY = "withdraw_liquidity"
    WITHDRAW_LIQUIDITY_IMBALANCED = "withdraw_liquidity_imbalanced"
    SWAP = "swap"
    INCREASE_ALLOWANCE = "increase_allowance"


class Instruction(BaseModel):
    """A single outbound call.

    Attributes:
        target: Address of the contract or module that executes the call
        action: What the call does
        funds: Native assets attached to the call
        payload: Action arguments, already validated by the simulation
    """

    model_config = ConfigDict(frozen=True)

    target: str
    action: Action
    funds: AssetList = Field(default_factory=lambda: AssetList(()))
    payload: dict[str, Any] = Field(default_factory=dict)


__all__ = ["Action", "Instruction"]
