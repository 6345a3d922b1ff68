from __future__ import annotations
from pydantic import BaseModel, ConfigDict, field_validator, Field, model_validator
from typing import Optional
from datetime import date as Date
from .constants import CURRENCY_TABLE, MAX_AMOUNT


def _check_currency(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip().upper()
    if v not in CURRENCY_TABLE:
        raise ValueError("unsupported currency")
    return v


class ExpenseIn(BaseModel):
    """Expense submission.

    `currency` may be omitted; the ledger then takes it from the referenced
    wallet, matching how the entry form derives it.
    """

    amount: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    category: str
    wallet: str
    description: str = ""
    date: Optional[Date] = None
    currency: Optional[str] = None

    @field_validator("category", "wallet")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("field cannot be empty")
        return v.strip()

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: Optional[str]) -> Optional[str]:
        return _check_currency(v)


class Expense(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    amount: float
    category: str
    wallet: str
    description: str = ""
    date: Date
    currency: str


class ExpenseUpdateIn(BaseModel):
    """Partial update model.

    All fields optional; at least one must be provided. When the wallet
    changes and no currency is given, the new wallet's currency is used.
    """

    amount: Optional[float] = Field(None, gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    category: Optional[str] = None
    wallet: Optional[str] = None
    description: Optional[str] = None
    date: Optional[Date] = None
    currency: Optional[str] = None

    @field_validator("category", "wallet")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("field cannot be empty")
        return v.strip() if v is not None else None

    @field_validator("currency")
    @classmethod
    def valid_currency(cls, v: Optional[str]) -> Optional[str]:
        return _check_currency(v)

    @model_validator(mode="after")
    def at_least_one(self) -> "ExpenseUpdateIn":
        if not any(
            getattr(self, f) is not None
            for f in ("amount", "category", "wallet", "description", "date", "currency")
        ):
            raise ValueError("at least one field must be provided for update")
        return self
