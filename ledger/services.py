from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List, Sequence

from ledger.domain import JoinedTransaction, Transaction
from ledger.errors import InvalidSelectionError
from ledger.query import DIRECTIONS, canonical_field, query_table
from ledger.stats import Stats, aggregate, change_type
from ledger.windows import select_windows


@dataclass(frozen=True)
class TableState:
    """Search term and sort order currently picked for the transactions table."""

    search: str = ""
    sort_field: str = "transactionDate"
    sort_direction: str = "desc"

    def __post_init__(self):
        object.__setattr__(self, "sort_field", canonical_field(self.sort_field))
        if self.sort_direction not in DIRECTIONS:
            raise InvalidSelectionError("sort direction", self.sort_direction, DIRECTIONS)

    def toggle_sort(self, field: str) -> "TableState":
        field = canonical_field(field)
        if field == self.sort_field:
            flipped = "desc" if self.sort_direction == "asc" else "asc"
            return replace(self, sort_direction=flipped)
        return replace(self, sort_field=field, sort_direction="asc")

    def with_search(self, term: str) -> "TableState":
        return replace(self, search=term)


class TableService:

    def view(self, rows: Sequence[JoinedTransaction], state: TableState) -> tuple[JoinedTransaction, ...]:
        return query_table(rows, state.search, state.sort_field, state.sort_direction)


class DashboardService:
    """Builds the dashboard report for one range selection.

    The report keeps raw numbers (ints, Fractions, Maybe dates); turning them
    into currency strings is left to the UI.
    """

    def __init__(self, align_to_day: bool = False):
        self.align_to_day = align_to_day

    def report(self, range_key: str, transactions: Sequence[Transaction], now: datetime) -> Dict[str, Any]:
        windows = select_windows(range_key, transactions, now, align_to_day=self.align_to_day)
        stats = aggregate(windows.current, windows.previous)
        return {
            "range": range_key,
            "windows": {"current": len(windows.current), "previous": len(windows.previous)},
            "stats": stats,
            "cards": self.cards(stats),
        }

    @staticmethod
    def cards(stats: Stats) -> List[Dict[str, Any]]:
        active = stats.transaction_count > 0
        return [
            {
                "name": "Total Transactions",
                "value": stats.transaction_count,
                "change": stats.count_change_percent,
                "change_type": change_type(stats.count_change_percent),
            },
            {
                "name": "Total Amount",
                "value": stats.total_amount,
                "change": stats.percent_change,
                "change_type": change_type(stats.percent_change),
            },
            {
                "name": "Average Transaction",
                "value": stats.average_amount,
                "change": stats.average_change_percent,
                "change_type": "positive" if stats.average_amount >= stats.previous_average_amount else "negative",
            },
            {
                "name": "Recent Activity",
                "value": stats.most_recent_date,
                "change": "Active" if active else "No activity",
                "change_type": "positive" if active else "negative",
            },
        ]
