"""Wallet balance helpers.

A wallet records a balance; its current balance is that figure minus every
expense tagged with the wallet's name (case-sensitive equality). Amounts are
taken as-is: expenses are assumed to share the wallet's currency.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, List

from expense_tracker.models.expense import Expense
from expense_tracker.models.wallet import Wallet
from .money import round2

logger = logging.getLogger("expense_tracker.wallets")


@dataclass(frozen=True)
class WalletBalance:
    initial: float
    spent: float
    current: float
    count: int


def wallet_expenses(wallet: Wallet, expenses: Iterable[Expense]) -> List[Expense]:
    return [e for e in expenses if e.wallet == wallet.name]


def wallet_balance(wallet: Wallet, expenses: Iterable[Expense]) -> WalletBalance:
    matched = wallet_expenses(wallet, expenses)
    mismatched = [e for e in matched if e.currency != wallet.currency]
    if mismatched:
        logger.warning(
            "wallet %s (%s) has %d expense(s) in another currency; counted unconverted",
            wallet.name,
            wallet.currency,
            len(mismatched),
        )
    spent = sum(e.amount for e in matched)
    return WalletBalance(
        initial=wallet.balance,
        spent=round2(spent),
        current=round2(wallet.balance - spent),
        count=len(matched),
    )


def reference_count(wallet: Wallet, expenses: Iterable[Expense]) -> int:
    return sum(1 for e in expenses if e.wallet == wallet.name)


def can_delete_wallet(wallet: Wallet, expenses: Iterable[Expense]) -> bool:
    return not any(e.wallet == wallet.name for e in expenses)
