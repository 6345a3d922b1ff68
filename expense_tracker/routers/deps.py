"""Shared FastAPI dependencies and domain-error translation."""

from fastapi import HTTPException, Request

from expense_tracker.core.config import Settings
from expense_tracker.core.errors import (
    DuplicateWalletError,
    ExpenseNotFoundError,
    LedgerError,
    WalletInUseError,
    WalletNotFoundError,
)
from expense_tracker.services.currency import CurrencyService
from expense_tracker.store import Ledger


def get_ledger(request: Request) -> Ledger:
    return request.app.state.ledger


def get_currency_service(request: Request) -> CurrencyService:
    return request.app.state.currency_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def http_error(exc: LedgerError) -> HTTPException:
    """Map a domain error onto the HTTP status a client should see."""
    if isinstance(exc, (ExpenseNotFoundError, WalletNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (WalletInUseError, DuplicateWalletError)):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
