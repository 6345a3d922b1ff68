from __future__ import annotations

from typing import Iterable, List

from expense_tracker.models.constants import FILTER_ALL
from expense_tracker.models.expense import Expense


def matches_filters(
    expense: Expense, search: str = "", category: str = FILTER_ALL, wallet: str = FILTER_ALL
) -> bool:
    """Expense list predicate.

    Search is a case-insensitive substring of the description or category;
    category and wallet filters are exact matches unless set to "all".
    """
    term = search.lower()
    matches_search = term in expense.description.lower() or term in expense.category.lower()
    matches_category = category == FILTER_ALL or expense.category == category
    matches_wallet = wallet == FILTER_ALL or expense.wallet == wallet
    return matches_search and matches_category and matches_wallet


def filter_expenses(
    expenses: Iterable[Expense],
    search: str = "",
    category: str = FILTER_ALL,
    wallet: str = FILTER_ALL,
) -> List[Expense]:
    return [e for e in expenses if matches_filters(e, search, category, wallet)]


def has_filters(search: str = "", category: str = FILTER_ALL, wallet: str = FILTER_ALL) -> bool:
    return search != "" or category != FILTER_ALL or wallet != FILTER_ALL
