"""Domain constants: the static currency table and the fixed category set.

Kept as plain data so services and routers can import them without pulling
in pydantic models.
"""

from typing import Dict, List, Tuple

BASE_CURRENCY = "USD"

# code -> (symbol, display name, units per 1 base unit, fraction digits)
CURRENCY_TABLE: Dict[str, Tuple[str, str, float, int]] = {
    "KHR": ("៛", "Cambodian Riel", 4100.0, 0),  # approximate
    "USD": ("$", "US Dollar", 1.0, 2),  # base
}

# (id, name, color, icon)
CATEGORY_TABLE: List[Tuple[str, str, str, str]] = [
    ("1", "Food & Dining", "#ef4444", "🍽️"),
    ("2", "Transportation", "#3b82f6", "🚗"),
    ("3", "Shopping", "#8b5cf6", "🛍️"),
    ("4", "Entertainment", "#f59e0b", "🎬"),
    ("5", "Bills & Utilities", "#10b981", "💡"),
    ("6", "Healthcare", "#ec4899", "🏥"),
    ("7", "Education", "#06b6d4", "📚"),
    ("8", "Travel", "#84cc16", "✈️"),
]

# Display fallback for categories outside the fixed set
DEFAULT_CATEGORY_COLOR = "#6b7280"
DEFAULT_CATEGORY_ICON = "💰"


# Sentinel used by list filters meaning "no restriction"
FILTER_ALL = "all"

# Largest magnitude accepted for any amount or balance; sums of many such
# values stay finite
MAX_AMOUNT = 1e15
