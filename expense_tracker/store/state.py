"""Immutable ledger state and the pure update functions over it.

Responsibilities
----------------
- Hold expenses, wallets and balance adjustments as tuples in insertion
  order (lookups are linear scans by id or name).
- Every update returns a *new* `LedgerState`; nothing is mutated in place,
  so a reader holding an old state never observes a partial change.
- Enforce the wallet invariants: unique names, no deletion while any
  expense references the wallet by name.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from expense_tracker.core.errors import (
    DuplicateWalletError,
    ExpenseNotFoundError,
    WalletInUseError,
    WalletNotFoundError,
)
from expense_tracker.models.expense import Expense
from expense_tracker.models.wallet import BalanceAdjustment, Wallet
from expense_tracker.services.wallet_utils import reference_count


@dataclass(frozen=True)
class LedgerState:
    expenses: Tuple[Expense, ...] = ()
    wallets: Tuple[Wallet, ...] = ()
    adjustments: Tuple[BalanceAdjustment, ...] = ()

    # ------------------------------------------------------------------
    # Lookups
    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def find_wallet(self, wallet_id: str) -> Optional[Wallet]:
        return next((w for w in self.wallets if w.id == wallet_id), None)

    def find_wallet_by_name(self, name: str) -> Optional[Wallet]:
        return next((w for w in self.wallets if w.name == name), None)

    def get_expense(self, expense_id: str) -> Expense:
        expense = self.find_expense(expense_id)
        if expense is None:
            raise ExpenseNotFoundError(expense_id)
        return expense

    def get_wallet(self, wallet_id: str) -> Wallet:
        wallet = self.find_wallet(wallet_id)
        if wallet is None:
            raise WalletNotFoundError(wallet_id)
        return wallet


# ----------------------------------------------------------------------
# Expenses
def add_expense(state: LedgerState, expense: Expense) -> LedgerState:
    # Most recent first
    return replace(state, expenses=(expense,) + state.expenses)


def replace_expense(state: LedgerState, expense_id: str, expense: Expense) -> LedgerState:
    state.get_expense(expense_id)
    updated = expense.model_copy(update={"id": expense_id})
    return replace(
        state,
        expenses=tuple(updated if e.id == expense_id else e for e in state.expenses),
    )


def remove_expense(state: LedgerState, expense_id: str) -> LedgerState:
    state.get_expense(expense_id)
    return replace(state, expenses=tuple(e for e in state.expenses if e.id != expense_id))


# ----------------------------------------------------------------------
# Wallets
def add_wallet(state: LedgerState, wallet: Wallet) -> LedgerState:
    if state.find_wallet_by_name(wallet.name) is not None:
        raise DuplicateWalletError(wallet.name)
    return replace(state, wallets=state.wallets + (wallet,))


def replace_wallet(state: LedgerState, wallet_id: str, wallet: Wallet) -> LedgerState:
    """Swap a wallet's data; a rename carries its expenses along."""
    current = state.get_wallet(wallet_id)
    clash = state.find_wallet_by_name(wallet.name)
    if clash is not None and clash.id != wallet_id:
        raise DuplicateWalletError(wallet.name)
    updated = wallet.model_copy(update={"id": wallet_id})
    expenses = state.expenses
    if current.name != updated.name:
        expenses = tuple(
            e.model_copy(update={"wallet": updated.name}) if e.wallet == current.name else e
            for e in expenses
        )
    return replace(
        state,
        wallets=tuple(updated if w.id == wallet_id else w for w in state.wallets),
        expenses=expenses,
    )


def remove_wallet(state: LedgerState, wallet_id: str) -> LedgerState:
    wallet = state.get_wallet(wallet_id)
    refs = reference_count(wallet, state.expenses)
    if refs:
        raise WalletInUseError(wallet.name, refs)
    return replace(state, wallets=tuple(w for w in state.wallets if w.id != wallet_id))


def apply_adjustment(state: LedgerState, adjustment: BalanceAdjustment) -> LedgerState:
    """Set the wallet's recorded balance to the adjustment's result and log it."""
    wallet = state.get_wallet(adjustment.wallet_id)
    adjusted = wallet.model_copy(update={"balance": adjustment.balance_after})
    return replace(
        state,
        wallets=tuple(adjusted if w.id == wallet.id else w for w in state.wallets),
        adjustments=state.adjustments + (adjustment,),
    )


__all__ = [
    "LedgerState",
    "add_expense",
    "replace_expense",
    "remove_expense",
    "add_wallet",
    "replace_wallet",
    "remove_wallet",
    "apply_adjustment",
]
