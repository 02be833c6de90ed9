"""Helper functions for due-state calculations."""

from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from .due_state import DueState

# Fraction-of-interval thresholds. Fixed for every item.
DUE_SOON_FRACTION = 0.8
DUE_FRACTION = 1.0
OVERDUE_FRACTION = 1.3
# Overdue past this fraction is Critical regardless of safety class
ESCALATION_FRACTION = 2.0


def parse_date(value: Union[str, date, None]) -> date:
    """Parse an ISO date (or pass a date through). Raises ValueError."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip())
    raise ValueError(f"Not a date: {value!r}")


def parse_odometer(value) -> float:
    """Parse an odometer reading. Raises ValueError for missing/negative values."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"Not an odometer reading: {value!r}")
    miles = float(value)
    if miles != miles or miles < 0:
        raise ValueError(f"Not an odometer reading: {value!r}")
    return miles


def add_months(start: date, interval_months: float) -> date:
    """start + interval months; the fractional part counts as 30-day months."""
    months = int(interval_months)
    days = int(round((interval_months - months) * 30))
    return start + relativedelta(months=months, days=days)


def calc_interval_days(
    start: Optional[date], interval_months: Optional[float]
) -> Optional[int]:
    """Length in days of a month-based interval beginning at start."""
    if start is None or interval_months is None:
        return None
    return (add_months(start, interval_months) - start).days


def calc_distance_since(current: float, baseline: float) -> float:
    """Miles driven since the baseline, clamped at zero for odometer rollback."""
    return max(0.0, current - baseline)


def calc_fraction(elapsed: Optional[float], interval: Optional[float]) -> Optional[float]:
    """Fraction of an interval used up, or None when the dimension doesn't apply."""
    if elapsed is None or not interval:
        return None
    return elapsed / interval


def classify(fraction: float) -> DueState:
    """Map a fraction of interval used onto a due-state."""
    if fraction > OVERDUE_FRACTION:
        return DueState.OVERDUE
    if fraction >= DUE_FRACTION:
        return DueState.DUE
    if fraction >= DUE_SOON_FRACTION:
        return DueState.DUE_SOON
    return DueState.NOT_DUE
