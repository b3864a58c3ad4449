"""Search and sort for the transactions table."""

import logging
import unicodedata
from typing import Any, Callable, Sequence

from ledger.domain import JoinedTransaction
from ledger.errors import InvalidSelectionError

logger = logging.getLogger(__name__)

DIRECTIONS = ("asc", "desc")


def collation_key(text: str) -> tuple[str, str]:
    """Order text ignoring case and accents first, then by the exact string.

    Two strings only tie when they are identical, which keeps the order of
    the table reproducible.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


SORT_KEYS: dict[str, Callable[[JoinedTransaction], Any]] = {
    "title": lambda r: collation_key(r.title),
    "description": lambda r: collation_key(r.description or ""),
    "amount": lambda r: r.amount,
    "fromAccount": lambda r: collation_key(r.from_account.name),
    "toAccount": lambda r: collation_key(r.to_account.name),
    "transactionDate": lambda r: r.transaction_date,
}
SORT_FIELDS = tuple(SORT_KEYS)

_ALIASES = {
    "from_account": "fromAccount",
    "to_account": "toAccount",
    "transaction_date": "transactionDate",
}


def canonical_field(field: str) -> str:
    name = _ALIASES.get(field, field)
    if name not in SORT_KEYS:
        raise InvalidSelectionError("sort field", field, SORT_FIELDS)
    return name


def matches(row: JoinedTransaction, term: str) -> bool:
    if not term:
        return True
    needle = term.casefold()
    haystack = (
        row.title,
        row.description or "",
        row.from_account.name,
        row.to_account.name,
    )
    return any(needle in field.casefold() for field in haystack)


def sort_rows(rows: Sequence[JoinedTransaction], field: str, direction: str = "asc") -> list[JoinedTransaction]:
    if direction not in DIRECTIONS:
        raise InvalidSelectionError("sort direction", direction, DIRECTIONS)
    key = SORT_KEYS[canonical_field(field)]
    # sorted() stays stable with reverse=True, so ties keep their input order
    return sorted(rows, key=key, reverse=direction == "desc")


def query_table(
    rows: Sequence[JoinedTransaction],
    search_term: str,
    sort_field: str,
    sort_direction: str,
) -> tuple[JoinedTransaction, ...]:
    kept = [r for r in rows if matches(r, search_term)]
    result = tuple(sort_rows(kept, sort_field, sort_direction))
    logger.debug(
        "query_table term=%r field=%s direction=%s rows=%d kept=%d",
        search_term, sort_field, sort_direction, len(rows), len(result),
    )
    return result
