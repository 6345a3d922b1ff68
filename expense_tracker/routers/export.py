import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel

from expense_tracker.core.config import Settings
from expense_tracker.models.constants import FILTER_ALL
from expense_tracker.services.aggregation import compute_export_summary
from expense_tracker.services.csv_export import (
    CSV_MEDIA_TYPE,
    CsvExport,
    content_disposition,
    export_csv,
    export_filtered_csv,
)
from expense_tracker.services.currency import CurrencyService
from expense_tracker.services.filters import filter_expenses, has_filters
from expense_tracker.store import Ledger
from .deps import get_app_settings, get_currency_service, get_ledger

router = APIRouter(prefix="/export", tags=["export"])
logger = logging.getLogger("expense_tracker.export")


class ExportSummaryOut(BaseModel):
    count: int
    total_in_base: float
    total_formatted: str
    base_currency: str
    earliest: Optional[date]
    latest: Optional[date]
    category_count: int
    wallet_count: int
    filtered: bool


def _download(export: CsvExport) -> Response:
    return Response(
        content=export.content,
        media_type=CSV_MEDIA_TYPE,
        headers={
            "Content-Disposition": content_disposition(export.filename),
            "X-Record-Count": str(export.count),
        },
    )


@router.get("/csv", summary="Download every expense as CSV")
async def export_all(
    ledger: Ledger = Depends(get_ledger),
    settings: Settings = Depends(get_app_settings),
):
    try:
        export = export_csv(ledger.state.expenses, settings.export_base_name)
        return _download(export)
    except Exception as e:
        logger.exception("csv export failed")
        raise HTTPException(status_code=500, detail="failed to export expenses") from e


@router.get("/csv/filtered", summary="Download expenses matching the list filters as CSV")
async def export_filtered(
    search: str = Query("", description="Case-insensitive substring of description or category"),
    category: str = Query(FILTER_ALL, description="Exact category name or 'all'"),
    wallet: str = Query(FILTER_ALL, description="Exact wallet name or 'all'"),
    ledger: Ledger = Depends(get_ledger),
):
    try:
        export = export_filtered_csv(ledger.state.expenses, search, category, wallet)
        return _download(export)
    except Exception as e:
        logger.exception("filtered csv export failed")
        raise HTTPException(status_code=500, detail="failed to export expenses") from e



@router.get(
    "/summary",
    response_model=ExportSummaryOut,
    summary="What an export would contain: count, total, date range",
)
async def export_summary(
    search: str = Query(""),
    category: str = Query(FILTER_ALL),
    wallet: str = Query(FILTER_ALL),
    ledger: Ledger = Depends(get_ledger),
    svc: CurrencyService = Depends(get_currency_service),
):
    expenses = filter_expenses(ledger.state.expenses, search, category, wallet)
    summary = compute_export_summary(expenses, svc)
    return ExportSummaryOut(
        count=summary.count,
        total_in_base=summary.total_in_base,
        total_formatted=svc.format(summary.total_in_base, summary.base_currency),
        base_currency=summary.base_currency,
        earliest=summary.earliest,
        latest=summary.latest,
        category_count=summary.category_count,
        wallet_count=summary.wallet_count,
        filtered=has_filters(search, category, wallet),
    )
