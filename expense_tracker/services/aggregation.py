from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from expense_tracker.models.currency import category_style
from expense_tracker.models.expense import Expense
from expense_tracker.models.wallet import Wallet
from .currency import CurrencyService, counterpart_currency
from .money import round2
from .wallet_utils import can_delete_wallet, wallet_balance

"""Aggregation helpers for the dashboard and export views.

Scopes implemented:
    - Per-currency raw totals (no conversion)
    - Per-category totals & percentage share (base-currency converted)
    - Unified total in the base currency
    - Wallet portfolio (current balances converted to base)
    - Export summary (count, date range, distinct categories / wallets)

Design notes:
    Computations are pure over the expense / wallet sequences they receive;
    conversion goes through an injected `CurrencyService` so strictness and
    base currency follow configuration.
"""


def _service(converter: Optional[CurrencyService]) -> CurrencyService:
    return converter if converter is not None else CurrencyService()


# ---------------- Category breakdown -----------------
@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
    percent: float
    count: int
    color: str
    icon: str


def compute_category_breakdown(
    expenses: Iterable[Expense], converter: Optional[CurrencyService] = None
) -> List[CategoryTotal]:
    """Return non-zero category totals in the base currency, largest first.

    Each expense is converted before summing so riel amounts do not swamp
    dollar amounts. Percent is the share of the sum of all category totals
    (0 for every item when that sum is 0).
    """
    svc = _service(converter)
    totals: Dict[str, float] = defaultdict(float)
    counts: Dict[str, int] = defaultdict(int)
    for e in expenses:
        totals[e.category] += svc.to_base(e.amount, e.currency)
        counts[e.category] += 1
    grand = sum(totals.values())
    items = [
        CategoryTotal(
            category=name,
            total=round2(total),
            percent=round2(total / grand * 100) if grand > 0 else 0.0,
            count=counts[name],
            **category_style(name),
        )
        for name, total in totals.items()
        if total != 0
    ]
    return sorted(items, key=lambda i: i.total, reverse=True)


# ---------------- Currency totals -----------------
def compute_currency_totals(expenses: Iterable[Expense]) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for e in expenses:
        totals[e.currency] += e.amount
    return dict(totals)


@dataclass(frozen=True)
class CurrencyCard:
    currency: str
    total: float
    formatted: str
    counterpart_currency: str
    counterpart_total: float
    counterpart_formatted: str


def compute_currency_cards(
    expenses: Iterable[Expense], converter: Optional[CurrencyService] = None
) -> List[CurrencyCard]:
    """Per-currency totals with their approximate value in the other currency."""
    svc = _service(converter)
    cards: List[CurrencyCard] = []
    for code, total in compute_currency_totals(expenses).items():
        other = counterpart_currency(code)
        other_total = svc.convert(total, code, other)
        cards.append(
            CurrencyCard(
                currency=code,
                total=total,
                formatted=svc.format(total, code),
                counterpart_currency=other,
                counterpart_total=other_total,
                counterpart_formatted=svc.format(other_total, other),
            )
        )
    return cards


# ---------------- Summary -----------------
@dataclass(frozen=True)
class ExpenseSummary:
    by_currency: Dict[str, float]
    by_category: List[CategoryTotal]
    total_in_base: float
    base_currency: str
    count: int


def total_in_base(expenses: Iterable[Expense], converter: Optional[CurrencyService] = None) -> float:
    svc = _service(converter)
    return sum(svc.to_base(e.amount, e.currency) for e in expenses)


def aggregate_expenses(
    expenses: Iterable[Expense], converter: Optional[CurrencyService] = None
) -> ExpenseSummary:
    svc = _service(converter)
    items = list(expenses)
    return ExpenseSummary(
        by_currency=compute_currency_totals(items),
        by_category=compute_category_breakdown(items, svc),
        total_in_base=total_in_base(items, svc),
        base_currency=svc.base_currency,
        count=len(items),
    )


# ---------------- Portfolio -----------------
@dataclass(frozen=True)
class WalletStatus:
    id: str
    name: str
    currency: str
    initial_balance: float
    spent: float
    current_balance: float
    transaction_count: int
    current_in_base: float
    can_delete: bool


@dataclass(frozen=True)
class PortfolioSummary:
    wallets: List[WalletStatus]
    total_in_base: float
    base_currency: str


def wallet_status(
    wallet: Wallet, expenses: Iterable[Expense], converter: Optional[CurrencyService] = None
) -> WalletStatus:
    svc = _service(converter)
    items = list(expenses)
    bal = wallet_balance(wallet, items)
    return WalletStatus(
        id=wallet.id,
        name=wallet.name,
        currency=wallet.currency,
        initial_balance=bal.initial,
        spent=bal.spent,
        current_balance=bal.current,
        transaction_count=bal.count,
        current_in_base=svc.to_base(bal.current, wallet.currency),
        can_delete=can_delete_wallet(wallet, items),
    )


def compute_portfolio(
    wallets: Iterable[Wallet],
    expenses: Iterable[Expense],
    converter: Optional[CurrencyService] = None,
) -> PortfolioSummary:
    svc = _service(converter)
    items = list(expenses)
    statuses = [wallet_status(w, items, svc) for w in wallets]
    return PortfolioSummary(
        wallets=statuses,
        total_in_base=sum(s.current_in_base for s in statuses),
        base_currency=svc.base_currency,
    )


# ---------------- Export summary -----------------
@dataclass(frozen=True)
class ExportSummary:
    count: int
    total_in_base: float
    base_currency: str
    earliest: Optional[date]
    latest: Optional[date]
    category_count: int
    wallet_count: int


def compute_export_summary(
    expenses: Iterable[Expense], converter: Optional[CurrencyService] = None
) -> ExportSummary:
    svc = _service(converter)
    items = list(expenses)
    dates = [e.date for e in items]
    return ExportSummary(
        count=len(items),
        total_in_base=total_in_base(items, svc),
        base_currency=svc.base_currency,
        earliest=min(dates) if dates else None,
        latest=max(dates) if dates else None,
        category_count=len({e.category for e in items}),
        wallet_count=len({e.wallet for e in items}),
    )
