"""
Day counting against an injectable "today".
"""
import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

SECONDS_PER_DAY = 24 * 60 * 60

Clock = Union[date, datetime]


def days_until(expiration_date: date, today: Optional[Clock] = None) -> float:
    """
    Fractional days from ``today`` until midnight of the expiration date.

    Args:
        expiration_date: Contract expiration date
        today: Date or datetime to measure from (default: current date)

    Returns:
        Days remaining, negative once the date has passed
    """
    if today is None:
        today = date.today()

    # datetime is a date subclass, so check it first
    if isinstance(today, datetime):
        expiration = datetime.combine(expiration_date, time.min, tzinfo=today.tzinfo)
        return (expiration - today).total_seconds() / SECONDS_PER_DAY

    return float((expiration_date - today).days)


def days_to_expiration(expiration_date: date, today: Optional[Clock] = None) -> int:
    """Whole days to expiration, rounded up. Zero or negative once expired."""
    return math.ceil(days_until(expiration_date, today))


def advance(today: Optional[Clock], days: int) -> Clock:
    """Shift a clock value forward by whole days."""
    if today is None:
        today = date.today()
    return today + timedelta(days=days)
