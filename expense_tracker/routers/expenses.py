from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from expense_tracker.core.errors import ExpenseNotFoundError, WalletNotFoundError
from expense_tracker.models.constants import FILTER_ALL
from expense_tracker.models.expense import Expense, ExpenseIn, ExpenseUpdateIn
from expense_tracker.store import Ledger
from .deps import get_ledger, http_error

router = APIRouter(prefix="/expenses", tags=["expenses"])


# Routes -----------------------------------------------------------
@router.post("/", response_model=Expense, status_code=201, summary="Record an expense")
async def create_expense(payload: ExpenseIn, ledger: Ledger = Depends(get_ledger)):
    # Wallet is referenced by name; an unknown name is a client error, not a 404
    try:
        return ledger.create_expense(payload)
    except WalletNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.get(
    "/", response_model=List[Expense], summary="List expenses with optional filters"
)
async def list_expenses_endpoint(
    search: str = Query(
        "", description="Case-insensitive substring of description or category"
    ),
    category: str = Query(FILTER_ALL, description="Exact category name or 'all'"),
    wallet: str = Query(FILTER_ALL, description="Exact wallet name or 'all'"),
    ledger: Ledger = Depends(get_ledger),
):
    return ledger.list_expenses(search=search, category=category, wallet=wallet)


@router.get("/{expense_id}", response_model=Expense, summary="Fetch one expense")
async def get_expense(expense_id: str, ledger: Ledger = Depends(get_ledger)):
    try:
        return ledger.get_expense(expense_id)
    except ExpenseNotFoundError as e:
        raise http_error(e) from e


@router.patch(
    "/{expense_id}", response_model=Expense, summary="Edit an expense (partial)"
)
async def patch_expense(
    expense_id: str,
    payload: ExpenseUpdateIn,
    ledger: Ledger = Depends(get_ledger),
):
    try:
        return ledger.update_expense(expense_id, payload)
    except ExpenseNotFoundError as e:
        raise http_error(e) from e
    except WalletNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.delete("/{expense_id}", status_code=204, summary="Delete an expense")
async def delete_expense(expense_id: str, ledger: Ledger = Depends(get_ledger)):
    try:
        ledger.delete_expense(expense_id)
    except ExpenseNotFoundError as e:
        raise http_error(e) from e
    return None
