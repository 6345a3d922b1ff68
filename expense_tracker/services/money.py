"""Money / rounding helpers.

Centralized so aggregation, wallet balances and formatting use identical
half-up rounding semantics.
"""

from __future__ import annotations
import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

# Enough digits for any finite float quantized to a few places
_PRECISION = 400


def quantize(value: float, places: int) -> Decimal:
    if not math.isfinite(value):
        # NaN / Infinity have no fixed-point form; keep them as-is
        return Decimal(value)
    exp = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return Decimal(str(value)).quantize(exp, rounding=ROUND_HALF_UP)


def round2(value: float) -> float:
    return float(quantize(value, 2))
