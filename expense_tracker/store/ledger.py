"""In-memory ledger owning the current `LedgerState`.

The application creates one `Ledger` and keeps it on `app.state`. Route
handlers go through its command methods, which build domain records from
validated input, run the pure update functions in `store.state`, and swap
in the resulting state in a single assignment.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import List, Optional

from expense_tracker.core.errors import WalletInUseError, WalletNotFoundError
from expense_tracker.models.constants import FILTER_ALL
from expense_tracker.models.currency import CURRENCIES
from expense_tracker.models.expense import Expense, ExpenseIn, ExpenseUpdateIn
from expense_tracker.models.wallet import (
    BalanceAdjustment,
    BalanceAdjustmentIn,
    Wallet,
    WalletIn,
)
from expense_tracker.services.filters import filter_expenses
from . import state as ops
from .state import LedgerState

logger = logging.getLogger("expense_tracker.ledger")


def _new_id() -> str:
    return uuid.uuid4().hex


class Ledger:
    def __init__(self, state: Optional[LedgerState] = None):
        self._state = state or LedgerState()

    @property
    def state(self) -> LedgerState:
        return self._state

    def _commit(self, new_state: LedgerState) -> LedgerState:
        self._state = new_state
        return new_state

    # ------------------------------------------------------------------
    # Expenses
    def list_expenses(
        self, search: str = "", category: str = FILTER_ALL, wallet: str = FILTER_ALL
    ) -> List[Expense]:
        return filter_expenses(self._state.expenses, search, category, wallet)

    def get_expense(self, expense_id: str) -> Expense:
        return self._state.get_expense(expense_id)

    def _wallet_named(self, name: str) -> Wallet:
        wallet = self._state.find_wallet_by_name(name)
        if wallet is None:
            raise WalletNotFoundError(name)
        return wallet

    def create_expense(self, payload: ExpenseIn) -> Expense:
        wallet = self._wallet_named(payload.wallet)
        expense = Expense(
            id=_new_id(),
            amount=payload.amount,
            category=payload.category,
            wallet=wallet.name,
            description=payload.description,
            date=payload.date or date.today(),
            currency=payload.currency or wallet.currency,
        )
        self._commit(ops.add_expense(self._state, expense))
        logger.info("expense %s added to wallet %s", expense.id, wallet.name)
        return expense

    def update_expense(self, expense_id: str, payload: ExpenseUpdateIn) -> Expense:
        existing = self._state.get_expense(expense_id)
        changes = payload.model_dump(exclude_none=True)
        if "wallet" in changes and changes["wallet"] != existing.wallet:
            wallet = self._wallet_named(changes["wallet"])
            changes.setdefault("currency", wallet.currency)
        updated = existing.model_copy(update=changes)
        self._commit(ops.replace_expense(self._state, expense_id, updated))
        logger.info("expense %s updated (%s)", expense_id, ", ".join(sorted(changes)))
        return updated

    def delete_expense(self, expense_id: str) -> None:
        self._commit(ops.remove_expense(self._state, expense_id))
        logger.info("expense %s deleted", expense_id)

    # ------------------------------------------------------------------
    # Wallets
    def list_wallets(self) -> List[Wallet]:
        return list(self._state.wallets)

    def get_wallet(self, wallet_id: str) -> Wallet:
        return self._state.get_wallet(wallet_id)

    def _build_wallet(self, wallet_id: str, payload: WalletIn) -> Wallet:
        return Wallet(
            id=wallet_id,
            name=payload.name,
            balance=payload.balance,
            currency=payload.currency,
            exchange_rate=CURRENCIES[payload.currency].exchange_rate,
        )

    def create_wallet(self, payload: WalletIn) -> Wallet:
        wallet = self._build_wallet(_new_id(), payload)
        self._commit(ops.add_wallet(self._state, wallet))
        logger.info("wallet %s (%s) created", wallet.name, wallet.currency)
        return wallet

    def update_wallet(self, wallet_id: str, payload: WalletIn) -> Wallet:
        wallet = self._build_wallet(wallet_id, payload)
        self._commit(ops.replace_wallet(self._state, wallet_id, wallet))
        logger.info("wallet %s updated", wallet_id)
        return wallet

    def delete_wallet(self, wallet_id: str) -> None:
        try:
            self._commit(ops.remove_wallet(self._state, wallet_id))
        except WalletInUseError as e:
            logger.warning("wallet delete blocked: %s", e)
            raise
        logger.info("wallet %s deleted", wallet_id)

    def adjust_balance(self, wallet_id: str, payload: BalanceAdjustmentIn) -> BalanceAdjustment:
        wallet = self._state.get_wallet(wallet_id)
        delta = payload.amount if payload.kind == "add" else -payload.amount
        adjustment = BalanceAdjustment(
            id=_new_id(),
            wallet_id=wallet_id,
            amount=payload.amount,
            kind=payload.kind,
            reason=payload.reason,
            date=date.today(),
            balance_before=wallet.balance,
            balance_after=wallet.balance + delta,
        )
        self._commit(ops.apply_adjustment(self._state, adjustment))
        logger.info(
            "wallet %s balance %s %s (%s)",
            wallet.name,
            payload.kind,
            payload.amount,
            payload.reason or "no reason",
        )
        return adjustment

    def list_adjustments(self, wallet_id: str) -> List[BalanceAdjustment]:
        self._state.get_wallet(wallet_id)
        return [a for a in self._state.adjustments if a.wallet_id == wallet_id]
