"""Pydantic domain models for the expense tracker."""

from .constants import BASE_CURRENCY, CURRENCY_TABLE  # re-export
from .currency import Currency, Category, CURRENCIES, CATEGORIES
from .expense import ExpenseIn, Expense, ExpenseUpdateIn
from .wallet import WalletIn, Wallet, BalanceAdjustmentIn, BalanceAdjustment

__all__ = [
    "BASE_CURRENCY",
    "CURRENCY_TABLE",
    "Currency",
    "Category",
    "CURRENCIES",
    "CATEGORIES",
    "ExpenseIn",
    "Expense",
    "ExpenseUpdateIn",
    "WalletIn",
    "Wallet",
    "BalanceAdjustmentIn",
    "BalanceAdjustment",
]
