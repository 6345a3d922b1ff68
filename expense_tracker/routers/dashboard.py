from __future__ import annotations

from typing import Dict, List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from expense_tracker.services.aggregation import (
    aggregate_expenses,
    compute_category_breakdown,
    compute_currency_cards,
    compute_portfolio,
)
from expense_tracker.services.currency import CurrencyService
from expense_tracker.store import Ledger
from .deps import get_currency_service, get_ledger

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class CategoryTotalOut(BaseModel):
    category: str
    total: float
    percent: float
    count: int
    color: str
    icon: str


class CurrencyCardOut(BaseModel):
    currency: str
    total: float
    formatted: str
    counterpart_currency: str
    counterpart_total: float
    counterpart_formatted: str


class DashboardSummary(BaseModel):
    count: int
    base_currency: str
    total_in_base: float
    total_formatted: str
    by_currency: Dict[str, float]
    currency_cards: List[CurrencyCardOut]
    by_category: List[CategoryTotalOut]


class WalletStatusOut(BaseModel):
    id: str
    name: str
    currency: str
    initial_balance: float
    spent: float
    current_balance: float
    transaction_count: int
    current_in_base: float
    can_delete: bool


class PortfolioOut(BaseModel):
    base_currency: str
    total_in_base: float
    total_formatted: str
    wallets: List[WalletStatusOut]


@router.get(
    "/summary",
    response_model=DashboardSummary,
    summary="Totals per currency, per category and unified in the base currency",
)
async def summary_endpoint(
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    """Return the dashboard's headline numbers.

    `by_currency` sums raw amounts per currency; category totals and the
    unified total are converted to the base currency first.
    """
    expenses = ledger.state.expenses
    result = aggregate_expenses(expenses, svc)
    return DashboardSummary(
        count=result.count,
        base_currency=result.base_currency,
        total_in_base=result.total_in_base,
        total_formatted=svc.format(result.total_in_base, result.base_currency),
        by_currency=result.by_currency,
        currency_cards=[CurrencyCardOut(**vars(c)) for c in compute_currency_cards(expenses, svc)],
        by_category=[CategoryTotalOut(**vars(c)) for c in result.by_category],
    )


@router.get(
    "/categories",
    response_model=List[CategoryTotalOut],
    summary="Category totals with percent of total, largest first",
)
async def categories_endpoint(
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    items = compute_category_breakdown(ledger.state.expenses, svc)
    return [CategoryTotalOut(**vars(i)) for i in items]


@router.get(
    "/portfolio",
    response_model=PortfolioOut,
    summary="Current wallet balances and their combined value in the base currency",
)
async def portfolio_endpoint(
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    state = ledger.state
    portfolio = compute_portfolio(state.wallets, state.expenses, svc)
    return PortfolioOut(
        base_currency=portfolio.base_currency,
        total_in_base=portfolio.total_in_base,
        total_formatted=svc.format(portfolio.total_in_base, portfolio.base_currency),
        wallets=[WalletStatusOut(**vars(w)) for w in portfolio.wallets],
    )
