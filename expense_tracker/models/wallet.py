from __future__ import annotations
from datetime import date as Date
from typing import Literal, Optional
import math

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import CURRENCY_TABLE, MAX_AMOUNT


class WalletIn(BaseModel):
    name: str
    balance: float
    currency: str = "USD"

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name cannot be empty")
        return v.strip()

    @field_validator("balance")
    @classmethod
    def balance_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("balance must be a finite number")
        if abs(v) > MAX_AMOUNT:
            raise ValueError(f"balance must be within ±{MAX_AMOUNT:,.0f}")
        return v

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in CURRENCY_TABLE:
            raise ValueError("unsupported currency")
        return v


class Wallet(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    balance: float
    currency: str
    # Cached copy of the currency table rate at the time of the last save
    exchange_rate: Optional[float] = None


class BalanceAdjustmentIn(BaseModel):
    amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    kind: Literal["add", "subtract"] = "add"
    reason: str = ""


class BalanceAdjustment(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    wallet_id: str
    amount: float
    kind: Literal["add", "subtract"]
    reason: str = ""
    date: Date
    balance_before: float
    balance_after: float
