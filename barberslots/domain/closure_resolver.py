"""
Resolution of ad-hoc shop closures for a single date.
"""

from datetime import date
from typing import Iterable, List

from .models import ClosureResult, FullDayClosure, NoClosure, PartialClosure, ShopClosure


def closures_on(day: date, closures: Iterable[ShopClosure]) -> List[ShopClosure]:
    """Return the closure records that fall on the given date."""
    return [closure for closure in closures if closure.date == day]


def resolve_closure(day: date, closures: Iterable[ShopClosure]) -> ClosureResult:
    """
    Determine how the shop is closed on a date.

    Precedence when several records share the date:
    1. Any full-day closure wins over partial closures
    2. Among partial closures the earliest start wins (input order breaks ties)

    Args:
        day: Target calendar date
        closures: All known closure records (any dates)

    Returns:
        NoClosure, FullDayClosure or PartialClosure
    """
    matching = closures_on(day, closures)

    if not matching:
        return NoClosure()

    for closure in matching:
        if closure.is_full_day:
            return FullDayClosure(reason=closure.reason)

    # sorted() is stable, so equal starts keep their input order
    partial = sorted(matching, key=lambda c: c.start_time)[0]
    return PartialClosure(start=partial.start_time, end=partial.end_time, reason=partial.reason)


def is_closed_at(day: date, minute: int, closures: Iterable[ShopClosure]) -> bool:
    """
    Check whether the shop is closed at a specific date and time.

    A full-day closure closes every minute of the date; a partial closure
    closes [start, end).
    """
    result = resolve_closure(day, closures)

    if isinstance(result, FullDayClosure):
        return True
    if isinstance(result, PartialClosure):
        return result.window.contains(minute)
    return False
