from datetime import date, datetime, timedelta, timezone
from itertools import islice

from ledger.calendar_view import daily_totals, day_key, group_by_day, leading_blanks, month_days
from ledger.domain import Transaction


def make_tx(id, amount, when):
    return Transaction(id, f"tx {id}", amount, when, "a1", "a2")


def test_day_key_uses_utc_date():
    plus_two = timezone(timedelta(hours=2))
    late_local = datetime(2025, 3, 1, 1, 0, tzinfo=plus_two)
    assert day_key(late_local) == date(2025, 2, 28)
    assert day_key(datetime(2025, 3, 1, 23, 59)) == date(2025, 3, 1)


def test_group_by_day_keeps_input_order_within_day():
    utc = timezone.utc
    trans = [
        make_tx("t1", 100, datetime(2025, 3, 2, 18, 0, tzinfo=utc)),
        make_tx("t2", 200, datetime(2025, 3, 1, 9, 0, tzinfo=utc)),
        make_tx("t3", 300, datetime(2025, 3, 2, 7, 0, tzinfo=utc)),
    ]
    grouped = group_by_day(trans)
    assert [t.id for t in grouped[date(2025, 3, 2)]] == ["t1", "t3"]
    assert [t.id for t in grouped[date(2025, 3, 1)]] == ["t2"]
    assert date(2025, 3, 3) not in grouped


def test_month_days():
    days = month_days(date(2024, 2, 17))
    assert len(days) == 29
    assert days[0] == date(2024, 2, 1)
    assert days[-1] == date(2024, 2, 29)


def test_leading_blanks_sunday_first():
    assert leading_blanks(date(2025, 6, 1)) == 0  # Sunday
    assert leading_blanks(date(2025, 9, 1)) == 1  # Monday
    assert leading_blanks(date(2025, 3, 1)) == 6  # Saturday


def test_daily_totals_sorted_by_day():
    utc = timezone.utc
    trans = [
        make_tx("t1", 100, datetime(2025, 3, 2, tzinfo=utc)),
        make_tx("t2", 50, datetime(2025, 3, 1, tzinfo=utc)),
        make_tx("t3", 25, datetime(2025, 3, 2, 12, tzinfo=utc)),
    ]
    assert list(daily_totals(trans)) == [(date(2025, 3, 1), 50), (date(2025, 3, 2), 125)]


def test_daily_totals_is_a_generator():
    trans = [make_tx(str(i), 1, datetime(2025, 1, 1 + i)) for i in range(10)]
    first_two = list(islice(daily_totals(trans), 2))
    assert first_two == [(date(2025, 1, 1), 1), (date(2025, 1, 2), 1)]
