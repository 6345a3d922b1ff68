from __future__ import annotations
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .constants import CURRENCY_TABLE, CATEGORY_TABLE, DEFAULT_CATEGORY_COLOR, DEFAULT_CATEGORY_ICON


class Currency(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    symbol: str
    name: str
    exchange_rate: float = Field(..., gt=0)
    decimals: int = Field(2, ge=0)


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    color: str
    icon: str


CURRENCIES: Dict[str, Currency] = {
    code: Currency(code=code, symbol=symbol, name=name, exchange_rate=rate, decimals=decimals)
    for code, (symbol, name, rate, decimals) in CURRENCY_TABLE.items()
}

CATEGORIES: List[Category] = [
    Category(id=cid, name=name, color=color, icon=icon)
    for cid, name, color, icon in CATEGORY_TABLE
]


def get_category(name: str) -> Optional[Category]:
    return next((c for c in CATEGORIES if c.name == name), None)


def category_style(name: str) -> Dict[str, str]:
    """Return color/icon for a category name, falling back for unknown names."""
    category = get_category(name)
    if category is None:
        return {"color": DEFAULT_CATEGORY_COLOR, "icon": DEFAULT_CATEGORY_ICON}
    return {"color": category.color, "icon": category.icon}
