"""Demo ledger contents.

Provides `demo_state`, the wallets and expenses a fresh process starts with
when `seed_demo_data` is enabled: two riel and three dollar wallets and five
sample expenses spread across them.
"""

from __future__ import annotations
from datetime import date

from expense_tracker.models.currency import CURRENCIES
from expense_tracker.models.expense import Expense
from expense_tracker.models.wallet import Wallet
from .state import LedgerState

DEMO_WALLETS = [
    ("1", "Cash (Riel)", 6150000.0, "KHR"),
    ("2", "Cash (Dollar)", 500.0, "USD"),
    ("3", "ABA Bank (USD)", 2500.0, "USD"),
    ("4", "ACLEDA Bank (KHR)", 12300000.0, "KHR"),
    ("5", "Credit Card (USD)", 1800.0, "USD"),
]

DEMO_EXPENSES = [
    ("1", 45.5, "Food & Dining", "Cash (Dollar)", "Lunch at Italian restaurant", date(2024, 1, 15), "USD"),
    ("2", 492000.0, "Transportation", "Cash (Riel)", "Gas for car", date(2024, 1, 14), "KHR"),
    ("3", 89.99, "Shopping", "Credit Card (USD)", "New shoes", date(2024, 1, 13), "USD"),
    ("4", 102500.0, "Entertainment", "ACLEDA Bank (KHR)", "Movie tickets", date(2024, 1, 12), "KHR"),
    ("5", 150.0, "Bills & Utilities", "ABA Bank (USD)", "Electricity bill", date(2024, 1, 11), "USD"),
]


def demo_state() -> LedgerState:
    wallets = tuple(
        Wallet(
            id=wid,
            name=name,
            balance=balance,
            currency=currency,
            exchange_rate=CURRENCIES[currency].exchange_rate,
        )
        for wid, name, balance, currency in DEMO_WALLETS
    )
    expenses = tuple(
        Expense(
            id=eid,
            amount=amount,
            category=category,
            wallet=wallet,
            description=description,
            date=day,
            currency=currency,
        )
        for eid, amount, category, wallet, description, day, currency in DEMO_EXPENSES
    )
    return LedgerState(expenses=expenses, wallets=wallets)
