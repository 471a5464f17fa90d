"""
Shared rounding conventions and business constants.

Currency values are rounded half away from zero on their decimal
representation, so 0.125 becomes 0.13 and -2.5 becomes -3.
"""

import math
from decimal import Context, Decimal, ROUND_HALF_UP

MONTHS_PER_YEAR = 12

# Business assumptions baked into the analysis functions
SELLING_COST_RATE = 0.06
DEFAULT_VACANCY_RATE = 0.08
DEFAULT_MANAGEMENT_RATE = 0.0
MAO_ARV_RATIO = 0.70
DEFAULT_LOAN_TERM_YEARS = 30

# Every float at or above 2**53 is already a whole number
_INTEGRAL_FLOAT = 2.0 ** 53

_CONTEXT = Context(prec=60)


def round_currency(value: float, places: int = 2) -> float:
    """
    Round a value to a fixed number of decimal places.

    Non-finite values, and values too large to carry a fraction, are
    returned unchanged.

    Args:
        value: Amount to round
        places: Number of decimal places (0 for whole units)

    Returns:
        Rounded amount as float
    """
    value = float(value)
    if not math.isfinite(value) or abs(value) >= _INTEGRAL_FLOAT:
        return value

    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(repr(value)).quantize(
        quantum, rounding=ROUND_HALF_UP, context=_CONTEXT
    )
    # Avoid returning -0.0 for tiny negative remainders
    return float(rounded) + 0.0


def round_whole(value: float) -> float:
    """Round to the nearest whole currency unit."""
    return round_currency(value, 0)


def round_percent(value: float) -> float:
    """Round a percentage to one decimal place."""
    return round_currency(value, 1)


def round_ratio(value: float) -> float:
    """Round a ratio or rate (cap rate, DSCR, effective rate) to two places."""
    return round_currency(value, 2)


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning ``default`` when the denominator is not positive."""
    if denominator <= 0:
        return default
    return numerator / denominator
