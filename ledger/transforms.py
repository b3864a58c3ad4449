import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple
from uuid import uuid4

from ledger.domain import Account, Transaction
from ledger.errors import SeedFormatError
from ledger.functional import Maybe

logger = logging.getLogger(__name__)


def _pick(record: Mapping[str, Any], camel: str, snake: str, default: Any = KeyError) -> Any:
    if camel in record:
        return record[camel]
    if snake in record:
        return record[snake]
    if default is KeyError:
        raise KeyError(camel)
    return default


def parse_instant(value: Any) -> datetime:
    """Parse an ISO-8601 instant; values without an offset are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def account_from_record(record: Mapping[str, Any]) -> Account:
    created = parse_instant(_pick(record, "createdAt", "created_at"))
    updated = _pick(record, "updatedAt", "updated_at", None)
    return Account(
        id=str(record["id"]),
        name=str(record["name"]),
        created_at=created,
        updated_at=parse_instant(updated) if updated is not None else created,
    )


def transaction_from_record(record: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=str(record["id"]),
        title=str(record["title"]),
        amount=int(record["amount"]),
        transaction_date=parse_instant(_pick(record, "transactionDate", "transaction_date")),
        from_account_id=str(_pick(record, "fromAccountId", "from_account_id")),
        to_account_id=str(_pick(record, "toAccountId", "to_account_id")),
        description=record.get("description"),
    )


def load_seed(
    path: str, now: Optional[datetime] = None
) -> Tuple[Tuple[Account, ...], Tuple[Transaction, ...]]:
    """Read accounts and transactions from a JSON seed file.

    Two layouts are accepted: ``{"accounts": [...], "transactions": [...]}``
    with id references, or a list of transfers naming their accounts
    (also allowed under a lone ``"transactions"`` key). The second goes
    through :func:`import_named_transfers`, stamping new accounts with
    ``now`` (current UTC time when omitted).
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise SeedFormatError(f"{path}: not valid JSON ({exc})") from exc

    try:
        if isinstance(data, list) or "accounts" not in data:
            records = data if isinstance(data, list) else data["transactions"]
            accounts, transactions = import_named_transfers(records, now or datetime.now(timezone.utc))
        else:
            accounts = tuple(account_from_record(a) for a in data["accounts"])
            transactions = tuple(transaction_from_record(t) for t in data["transactions"])
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise SeedFormatError(f"{path}: malformed record ({exc!r})") from exc

    logger.info("load_seed path=%s accounts=%d transactions=%d", path, len(accounts), len(transactions))
    return accounts, transactions


def import_named_transfers(
    records: Iterable[Mapping[str, Any]],
    now: datetime,
    new_id: Callable[[], str] = lambda: str(uuid4()),
) -> Tuple[Tuple[Account, ...], Tuple[Transaction, ...]]:
    """Build accounts and transactions from records naming their accounts.

    Each record carries ``fromAccount``/``toAccount`` names instead of ids.
    One account is created per distinct name, in first-seen order; records
    missing either name are skipped.
    """
    records = list(records)
    ids_by_name: dict[str, str] = {}
    accounts = []
    for r in records:
        for name in (r.get("fromAccount"), r.get("toAccount")):
            if name and name not in ids_by_name:
                ids_by_name[name] = new_id()
                accounts.append(Account(id=ids_by_name[name], name=name, created_at=now, updated_at=now))

    transactions = []
    for r in records:
        from_id = ids_by_name.get(r.get("fromAccount") or "")
        to_id = ids_by_name.get(r.get("toAccount") or "")
        if from_id is None or to_id is None:
            logger.error("import_named_transfers missing account reference title=%r", r.get("title"))
            continue
        transactions.append(Transaction(
            id=str(r.get("id") or new_id()),
            title=r["title"],
            amount=int(r["amount"]),
            transaction_date=parse_instant(r["transactionDate"]),
            from_account_id=from_id,
            to_account_id=to_id,
            description=r.get("description"),
        ))

    return tuple(accounts), tuple(transactions)


def add_transaction(trans: Tuple[Transaction, ...], t: Transaction) -> Tuple[Transaction, ...]:
    return trans + (t,)


def replace_transaction(trans: Tuple[Transaction, ...], updated: Transaction) -> Tuple[Transaction, ...]:
    return tuple(updated if t.id == updated.id else t for t in trans)


def remove_transaction(trans: Tuple[Transaction, ...], tid: str) -> Tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.id != tid, trans))


def add_account(accs: Tuple[Account, ...], a: Account) -> Tuple[Account, ...]:
    return accs + (a,)


def rename_account(accs: Tuple[Account, ...], aid: str, name: str, now: datetime) -> Tuple[Account, ...]:
    return tuple(
        replace(a, name=name, updated_at=now) if a.id == aid else a
        for a in accs
    )


def remove_account(accs: Tuple[Account, ...], aid: str) -> Tuple[Account, ...]:
    # transactions pointing at the account are left alone and resolve as unknown
    return tuple(filter(lambda a: a.id != aid, accs))


def sort_by_date_desc(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return tuple(sorted(trans, key=lambda t: t.transaction_date, reverse=True))


def find_transaction(trans: Iterable[Transaction], tid: str) -> Maybe[Transaction]:
    return Maybe.of(next((t for t in trans if t.id == tid), None))
