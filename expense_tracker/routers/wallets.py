from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from expense_tracker.core.errors import LedgerError
from expense_tracker.models.wallet import BalanceAdjustment, BalanceAdjustmentIn, Wallet, WalletIn
from expense_tracker.services.aggregation import wallet_status
from expense_tracker.services.currency import CurrencyService
from expense_tracker.store import Ledger
from .deps import get_currency_service, get_ledger, http_error

router = APIRouter(prefix="/wallets", tags=["wallets"])


class WalletOut(BaseModel):
    id: str
    name: str
    currency: str
    exchange_rate: Optional[float]
    balance: float
    spent: float
    current_balance: float
    transaction_count: int
    current_in_base: float
    balance_formatted: str
    current_formatted: str
    can_delete: bool
    delete_blocked_reason: Optional[str] = None

    @classmethod
    def build(cls, wallet: Wallet, ledger: Ledger, svc: CurrencyService) -> "WalletOut":
        status = wallet_status(wallet, ledger.state.expenses, svc)
        return cls(
            id=wallet.id,
            name=wallet.name,
            currency=wallet.currency,
            exchange_rate=wallet.exchange_rate,
            balance=wallet.balance,
            spent=status.spent,
            current_balance=status.current_balance,
            transaction_count=status.transaction_count,
            current_in_base=status.current_in_base,
            balance_formatted=svc.format(wallet.balance, wallet.currency),
            current_formatted=svc.format(status.current_balance, wallet.currency),
            can_delete=status.can_delete,
            delete_blocked_reason=None
            if status.can_delete
            else "This wallet cannot be deleted because it has associated transactions.",
        )


@router.get("/", response_model=List[WalletOut], summary="List wallets with balances")
async def list_wallets(
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    return [WalletOut.build(w, ledger, svc) for w in ledger.list_wallets()]


@router.post("/", response_model=WalletOut, status_code=201, summary="Create a wallet")
async def create_wallet(
    payload: WalletIn,
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    try:
        wallet = ledger.create_wallet(payload)
    except LedgerError as e:
        raise http_error(e) from e
    return WalletOut.build(wallet, ledger, svc)


@router.get("/{wallet_id}", response_model=WalletOut, summary="Fetch one wallet")
async def get_wallet(
    wallet_id: str,
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    try:
        wallet = ledger.get_wallet(wallet_id)
    except LedgerError as e:
        raise http_error(e) from e
    return WalletOut.build(wallet, ledger, svc)


@router.put("/{wallet_id}", response_model=WalletOut, summary="Replace a wallet's details")
async def update_wallet(
    wallet_id: str,
    payload: WalletIn,
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    try:
        wallet = ledger.update_wallet(wallet_id, payload)
    except LedgerError as e:
        raise http_error(e) from e
    return WalletOut.build(wallet, ledger, svc)


@router.delete(
    "/{wallet_id}",
    status_code=204,
    summary="Delete a wallet (refused while expenses reference it)",
)
async def delete_wallet(wallet_id: str, ledger: Ledger = Depends(get_ledger)):
    try:
        ledger.delete_wallet(wallet_id)
    except LedgerError as e:
        raise http_error(e) from e
    return None


@router.post(
    "/{wallet_id}/adjust",
    response_model=BalanceAdjustment,
    status_code=201,
    summary="Add to or subtract from a wallet's recorded balance",
)
async def adjust_balance(
    wallet_id: str,
    payload: BalanceAdjustmentIn,
    ledger: Ledger = Depends(get_ledger),
):
    try:
        return ledger.adjust_balance(wallet_id, payload)
    except LedgerError as e:
        raise http_error(e) from e


@router.get(
    "/{wallet_id}/adjustments",
    response_model=List[BalanceAdjustment],
    summary="Balance adjustment history for a wallet",
)
async def list_adjustments(wallet_id: str, ledger: Ledger = Depends(get_ledger)):
    try:
        return ledger.list_adjustments(wallet_id)
    except LedgerError as e:
        raise http_error(e) from e
