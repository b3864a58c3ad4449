import calendar
from collections import defaultdict
from datetime import date, datetime, timezone
from typing import Iterable, Iterator

from ledger.domain import Transaction


def day_key(instant: datetime) -> date:
    """UTC calendar day of ``instant``; naive values are read as UTC."""
    if instant.tzinfo is None:
        return instant.date()
    return instant.astimezone(timezone.utc).date()


def group_by_day(trans: Iterable[Transaction]) -> dict[date, tuple[Transaction, ...]]:
    grouped: dict[date, list[Transaction]] = defaultdict(list)
    for t in trans:
        grouped[day_key(t.transaction_date)].append(t)
    return {day: tuple(items) for day, items in grouped.items()}


def month_days(reference: date) -> tuple[date, ...]:
    _, last = calendar.monthrange(reference.year, reference.month)
    return tuple(date(reference.year, reference.month, d) for d in range(1, last + 1))


def leading_blanks(first_day: date) -> int:
    # Sunday-first grid: Monday is weekday() 0
    return (first_day.weekday() + 1) % 7


def daily_totals(trans: Iterable[Transaction]) -> Iterator[tuple[date, int]]:
    totals: dict[date, int] = defaultdict(int)
    for t in trans:
        totals[day_key(t.transaction_date)] += t.amount

    for day in sorted(totals):
        yield day, totals[day]
