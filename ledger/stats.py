from dataclasses import dataclass
from datetime import datetime
from fractions import Fraction
from functools import reduce
from typing import Iterable, Sequence, Union

from ledger.domain import Transaction
from ledger.functional import Maybe, Nothing, Some

Ratio = Union[int, Fraction]


@dataclass(frozen=True)
class Stats:
    transaction_count: int
    previous_count: int
    total_amount: int
    previous_total_amount: int
    average_amount: Ratio
    previous_average_amount: Ratio
    percent_change: Ratio
    count_change_percent: Ratio
    average_change_percent: Ratio
    most_recent_date: Maybe[datetime]


def total_amount(trans: Iterable[Transaction]) -> int:
    return reduce(lambda acc, t: acc + t.amount, trans, 0)


def percent_change(new: Ratio, old: Ratio) -> Ratio:
    # a zero baseline counts as a full 100% improvement, even when new is 0 too
    if old == 0:
        return 100
    return Fraction(new - old) / old * 100


def average(total: int, count: int) -> Ratio:
    return Fraction(total, count) if count > 0 else 0


def count_change_percent(current_count: int, previous_count: int) -> Fraction:
    return Fraction(current_count - previous_count, max(previous_count, 1)) * 100


def previous_average(previous: Sequence[Transaction]) -> Fraction:
    # an empty previous window averages to 0 rather than failing
    return Fraction(total_amount(previous), max(len(previous), 1))


def average_change_percent(current: Sequence[Transaction], previous: Sequence[Transaction]) -> Ratio:
    if not current:
        return 0
    current_avg = average(total_amount(current), len(current))
    previous_avg = previous_average(previous)
    return percent_change(current_avg, previous_avg)


def most_recent_date(current: Sequence[Transaction]) -> Maybe[datetime]:
    """Date of the first transaction; callers pass ``current`` newest first."""
    if not current:
        return Nothing()
    return Some(current[0].transaction_date)


def aggregate(current: Sequence[Transaction], previous: Sequence[Transaction]) -> Stats:
    total = total_amount(current)
    previous_total = total_amount(previous)
    return Stats(
        transaction_count=len(current),
        previous_count=len(previous),
        total_amount=total,
        previous_total_amount=previous_total,
        average_amount=average(total, len(current)),
        previous_average_amount=previous_average(previous),
        percent_change=percent_change(total, previous_total),
        count_change_percent=count_change_percent(len(current), len(previous)),
        average_change_percent=average_change_percent(current, previous),
        most_recent_date=most_recent_date(current),
    )


def change_type(value: Ratio) -> str:
    return "positive" if value >= 0 else "negative"
