import logging
from typing import Iterable, Iterator, Mapping, Union

from ledger.domain import UNKNOWN_ACCOUNT, Account, AccountRef, JoinedTransaction, Transaction
from ledger.functional import Either, Left, Maybe, Right

logger = logging.getLogger(__name__)


class AccountIndex(Mapping[str, Account]):
    """Read-only accounts keyed by id. With duplicate ids the last one wins."""

    def __init__(self, accounts: Iterable[Account] = ()):
        self._by_id: dict[str, Account] = {a.id: a for a in accounts}

    def __getitem__(self, account_id: str) -> Account:
        return self._by_id[account_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._by_id)

    def __len__(self) -> int:
        return len(self._by_id)

    def lookup(self, account_id: str) -> Maybe[Account]:
        return Maybe.of(self._by_id.get(account_id))


Accounts = Union[AccountIndex, Iterable[Account]]


def as_index(accounts: Accounts) -> AccountIndex:
    return accounts if isinstance(accounts, AccountIndex) else AccountIndex(accounts)


def unresolved_ref(account_id: str) -> AccountRef:
    return AccountRef(id=account_id, name=UNKNOWN_ACCOUNT, resolved=False)


def _ref(index: AccountIndex, account_id: str) -> AccountRef:
    return (
        index.lookup(account_id)
        .map(lambda a: AccountRef(id=a.id, name=a.name))
        .get_or_else(unresolved_ref(account_id))
    )


def resolve(transaction: Transaction, accounts: Accounts) -> JoinedTransaction:
    """Attach account names to ``transaction``.

    A reference with no matching account becomes an unresolved
    :class:`AccountRef` instead of an error, so one dangling id never stops
    a whole table from rendering.
    """
    index = as_index(accounts)
    return JoinedTransaction(
        transaction=transaction,
        from_account=_ref(index, transaction.from_account_id),
        to_account=_ref(index, transaction.to_account_id),
    )


def resolve_all(transactions: Iterable[Transaction], accounts: Accounts) -> tuple[JoinedTransaction, ...]:
    index = as_index(accounts)
    rows = tuple(resolve(t, index) for t in transactions)
    dangling = sum(1 for r in rows if not r.is_resolved)
    if dangling:
        logger.warning("resolve_all unresolved_rows=%d of %d", dangling, len(rows))
    return rows


def check_references(t: Transaction, accounts: Accounts) -> Either[dict, Transaction]:
    index = as_index(accounts)
    for side, account_id in (("from", t.from_account_id), ("to", t.to_account_id)):
        if account_id not in index:
            return Left({
                "error": "account_not_found",
                "message": f"Account with ID {account_id} does not exist",
                "account_id": account_id,
                "side": side,
            })
    return Right(t)


def unresolved(rows: Iterable[JoinedTransaction]) -> tuple[JoinedTransaction, ...]:
    return tuple(r for r in rows if not r.is_resolved)
