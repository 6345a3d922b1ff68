from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from expense_tracker.core.errors import UnknownCurrencyError
from expense_tracker.models.constants import MAX_AMOUNT
from expense_tracker.models.currency import CATEGORIES, CURRENCIES, Category, Currency
from expense_tracker.services.currency import CurrencyService
from .deps import get_currency_service

"""Reference data and the two-currency converter.

Endpoints:
    - GET /currencies/          -> static currency table
    - GET /currencies/convert   -> amount converted between two codes
    - GET /currencies/format    -> display string for an amount
    - GET /categories/          -> fixed category set
"""

router = APIRouter(prefix="/currencies", tags=["currencies"])
categories_router = APIRouter(prefix="/categories", tags=["categories"])


class ConversionOut(BaseModel):
    amount: float
    from_currency: str
    to_currency: str
    converted: float
    rate: float
    amount_formatted: str
    converted_formatted: str


class FormatOut(BaseModel):
    amount: float
    currency: str
    formatted: str


@router.get("/", response_model=List[Currency], summary="List supported currencies")
async def list_currencies():
    return list(CURRENCIES.values())


@router.get("/convert", response_model=ConversionOut, summary="Convert an amount")
async def convert_endpoint(
    amount: float = Query(
        ...,
        allow_inf_nan=False,
        ge=-MAX_AMOUNT,
        le=MAX_AMOUNT,
        description="Amount in the source currency",
    ),
    from_currency: str = Query(..., alias="from", description="Source currency code"),
    to_currency: str = Query(..., alias="to", description="Target currency code"),
    svc: CurrencyService = Depends(get_currency_service),
):
    src, dst = from_currency.upper(), to_currency.upper()
    try:
        result = svc.conversion(amount, src, dst)
        return ConversionOut(
            amount=amount,
            from_currency=src,
            to_currency=dst,
            converted=result.converted_amount,
            rate=result.rate,
            amount_formatted=svc.format(amount, src),
            converted_formatted=svc.format(result.converted_amount, dst),
        )
    except UnknownCurrencyError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get("/format", response_model=FormatOut, summary="Format an amount for display")
async def format_endpoint(
    amount: float = Query(..., allow_inf_nan=False, ge=-MAX_AMOUNT, le=MAX_AMOUNT),
    currency: str = Query(..., description="Currency code"),
    svc: CurrencyService = Depends(get_currency_service),
):
    code = currency.upper()
    try:
        return FormatOut(amount=amount, currency=code, formatted=svc.format(amount, code))
    except UnknownCurrencyError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@categories_router.get("/", response_model=List[Category], summary="List expense categories")
async def list_categories():
    return CATEGORIES
