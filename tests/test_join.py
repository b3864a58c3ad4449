from datetime import datetime, timezone

from ledger.domain import UNKNOWN_ACCOUNT, Account, AccountRef, Transaction
from ledger.join import AccountIndex, check_references, resolve, resolve_all, unresolved

NOW = datetime(2025, 3, 15, tzinfo=timezone.utc)


def make_accounts():
    return (
        Account("a1", "Checking", NOW, NOW),
        Account("a2", "Acme Corp", NOW, NOW),
    )


def test_resolve_attaches_names():
    t = Transaction("t1", "Invoice", 5000, NOW, "a1", "a2")
    row = resolve(t, make_accounts())

    assert row.transaction is t
    assert row.from_account == AccountRef("a1", "Checking")
    assert row.to_account == AccountRef("a2", "Acme Corp")
    assert row.is_resolved
    assert row.title == "Invoice"
    assert row.amount == 5000


def test_resolve_with_no_accounts_marks_both_sides():
    t = Transaction("t1", "Orphan", 5000, NOW, "a1", "a2")
    row = resolve(t, [])

    assert not row.from_account.resolved
    assert not row.to_account.resolved
    assert row.from_account.id == "a1"
    assert row.to_account.name == UNKNOWN_ACCOUNT
    assert not row.is_resolved


def test_resolve_one_dangling_side():
    t = Transaction("t1", "Half", 1, NOW, "a1", "gone")
    row = resolve(t, make_accounts())
    assert row.from_account.resolved
    assert not row.to_account.resolved


def test_self_transfer_resolves_both_sides():
    t = Transaction("t1", "Self", 1, NOW, "a1", "a1")
    row = resolve(t, make_accounts())
    assert row.from_account == row.to_account
    assert row.is_resolved


def test_account_index_lookup():
    index = AccountIndex(make_accounts())
    assert len(index) == 2
    assert index.lookup("a2").map(lambda a: a.name).get_or_else(None) == "Acme Corp"
    assert index.lookup("zzz").is_none()
    assert "a1" in index


def test_account_index_last_duplicate_wins():
    index = AccountIndex([Account("a1", "Old", NOW, NOW), Account("a1", "New", NOW, NOW)])
    assert index["a1"].name == "New"


def test_resolve_all_keeps_bad_rows_and_order():
    trans = [
        Transaction("t1", "ok", 1, NOW, "a1", "a2"),
        Transaction("t2", "bad", 1, NOW, "x", "a2"),
        Transaction("t3", "ok", 1, NOW, "a2", "a1"),
    ]
    rows = resolve_all(trans, AccountIndex(make_accounts()))
    assert [r.id for r in rows] == ["t1", "t2", "t3"]
    assert [r.id for r in unresolved(rows)] == ["t2"]


def test_check_references():
    accounts = make_accounts()
    good = Transaction("t1", "ok", 1, NOW, "a1", "a2")
    bad = Transaction("t2", "bad", 1, NOW, "a1", "missing")

    assert check_references(good, accounts).is_right()

    result = check_references(bad, accounts)
    assert result.is_left()
    error = result.get_error()
    assert error["error"] == "account_not_found"
    assert error["side"] == "to"
    assert "missing" in error["message"]


def test_unresolved_rows_each_report_a_reference_error():
    index = AccountIndex(make_accounts())
    trans = [
        Transaction("t1", "ok", 1, NOW, "a1", "a2"),
        Transaction("t2", "gone from", 1, NOW, "old", "a2"),
        Transaction("t3", "gone to", 1, NOW, "a1", "old"),
    ]
    problems = [check_references(r.transaction, index) for r in unresolved(resolve_all(trans, index))]
    assert [p.get_error()["side"] for p in problems] == ["from", "to"]
    assert unresolved(resolve_all(trans[:1], index)) == ()
