import logging
from datetime import datetime, timedelta
from typing import Callable, NamedTuple, Sequence

from ledger.domain import Transaction
from ledger.errors import InvalidSelectionError

logger = logging.getLogger(__name__)

RANGES = (
    ("Last 7 days", "7d"),
    ("Last 30 days", "30d"),
    ("All-time", "all"),
)
RANGE_KEYS = tuple(key for _, key in RANGES)

_RANGE_DAYS = {"7d": 7, "30d": 30}


class Windows(NamedTuple):
    current: tuple[Transaction, ...]
    previous: tuple[Transaction, ...]


def after(cutoff: datetime) -> Callable[[Transaction], bool]:
    def _filter(t: Transaction) -> bool:
        return t.transaction_date > cutoff

    return _filter


def within(start: datetime, end: datetime) -> Callable[[Transaction], bool]:
    """Half-open on the left: ``start < date <= end``."""
    def _filter(t: Transaction) -> bool:
        return start < t.transaction_date <= end

    return _filter


def _cutoff(now: datetime, days: int, align_to_day: bool) -> datetime:
    cutoff = now - timedelta(days=days)
    if align_to_day:
        cutoff = cutoff.replace(hour=0, minute=0, second=0, microsecond=0)
    return cutoff


def select_windows(
    range_key: str,
    transactions: Sequence[Transaction],
    now: datetime,
    align_to_day: bool = False,
) -> Windows:
    """Split ``transactions`` into the current window and the one before it.

    ``7d`` and ``30d`` are time based: the current window holds everything
    strictly after ``now - days`` and the previous window the equally long
    span right before it, so a transaction sitting exactly on a cutoff lands
    in the older window. ``all`` returns every transaction as current and the
    first half of the input (by position, not by date) as previous.

    ``now`` and the transaction dates must be either all naive or all aware.
    """
    if range_key not in RANGE_KEYS:
        raise InvalidSelectionError("range", range_key, RANGE_KEYS)

    if range_key == "all":
        half = len(transactions) // 2
        windows = Windows(tuple(transactions), tuple(transactions[:half]))
    else:
        days = _RANGE_DAYS[range_key]
        current_start = _cutoff(now, days, align_to_day)
        previous_start = _cutoff(now, days * 2, align_to_day)
        windows = Windows(
            tuple(filter(after(current_start), transactions)),
            tuple(filter(within(previous_start, current_start), transactions)),
        )

    logger.debug(
        "select_windows range=%s current=%d previous=%d",
        range_key, len(windows.current), len(windows.previous),
    )
    return windows
