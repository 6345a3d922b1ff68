"""CSV export of expense records.

Output shape:
    Date,Category,Description,Wallet,Amount,Currency
one row per expense, lines separated by a bare newline, no trailing newline.
Every field (header included) is wrapped in double quotes with embedded
quotes doubled, so commas in category or wallet names survive a round trip
through a spreadsheet.

File names follow `<base>_<YYYY-MM-DD>.csv`; the filtered variant derives
its base from the active filters.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional
from urllib.parse import quote

from expense_tracker.models.constants import FILTER_ALL
from expense_tracker.models.expense import Expense
from .currency import plain_number
from .filters import filter_expenses

logger = logging.getLogger("expense_tracker.export")

CSV_HEADERS: List[str] = ["Date", "Category", "Description", "Wallet", "Amount", "Currency"]
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"
DEFAULT_EXPORT_BASE = "expenses"


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str
    count: int


def _row(expense: Expense) -> List[str]:
    return [
        expense.date.isoformat(),
        expense.category,
        expense.description,
        expense.wallet,
        plain_number(expense.amount),
        expense.currency,
    ]


def build_csv(expenses: Iterable[Expense]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for expense in expenses:
        writer.writerow(_row(expense))
    text = buffer.getvalue()
    return text[:-1] if text.endswith("\n") else text


def export_filename(base: str = DEFAULT_EXPORT_BASE, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{base}_{today.isoformat()}.csv"


def content_disposition(filename: str) -> str:
    """Attachment header value for `filename`.

    Header values travel as latin-1, so wallet or category names outside
    ASCII (Khmer, for instance) go in the RFC 5987 `filename*` parameter
    while `filename` carries an ASCII stand-in for older clients.
    """
    fallback = re.sub(r'[^\x20-\x7e]|["\\]', "_", filename)
    if fallback == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def _slug(value: str) -> str:
    return re.sub(r"\s+", "_", value.lower())


def filtered_export_base(
    search: str = "", category: str = FILTER_ALL, wallet: str = FILTER_ALL
) -> str:
    base = DEFAULT_EXPORT_BASE
    if category != FILTER_ALL:
        base += f"_{_slug(category)}"
    if wallet != FILTER_ALL:
        base += f"_{_slug(wallet)}"
    if search:
        base += "_filtered"
    return base


def export_csv(
    expenses: Iterable[Expense], base: str = DEFAULT_EXPORT_BASE, today: Optional[date] = None
) -> CsvExport:
    items = list(expenses)
    content = build_csv(items)
    filename = export_filename(base, today)
    logger.info("exported %d expense(s) to %s", len(items), filename)
    return CsvExport(filename=filename, content=content, count=len(items))


def export_filtered_csv(
    expenses: Iterable[Expense],
    search: str = "",
    category: str = FILTER_ALL,
    wallet: str = FILTER_ALL,
    today: Optional[date] = None,
) -> CsvExport:
    filtered = filter_expenses(expenses, search, category, wallet)
    return export_csv(filtered, filtered_export_base(search, category, wallet), today)
