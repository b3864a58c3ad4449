import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from datetime import datetime, time, timezone
from uuid import uuid4

import streamlit as st
import pandas as pd
import plotly.express as px

from ledger.config import load_settings, configure_logging
from ledger.domain import Account, Transaction
from ledger.calendar_view import group_by_day, month_days, leading_blanks, daily_totals
from ledger.join import AccountIndex, resolve_all, check_references, unresolved
from ledger.query import SORT_FIELDS
from ledger.services import DashboardService, TableService, TableState
from ledger.transforms import (
    load_seed,
    add_transaction,
    replace_transaction,
    remove_transaction,
    add_account,
    rename_account,
    remove_account,
    sort_by_date_desc,
    find_transaction,
)
from ledger.windows import RANGES

settings = load_settings()
configure_logging(settings.log_level)

st.set_page_config(page_title="Transfers", layout="wide")

SORT_LABELS = {
    "title": "Title",
    "description": "Description",
    "amount": "Amount",
    "fromAccount": "From Account",
    "toAccount": "To Account",
    "transactionDate": "Date",
}


def format_money(cents) -> str:
    return f"${float(cents) / 100:,.2f}"


def format_percent(value) -> str:
    return f"{float(value):.2f}%"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def at_noon_utc(day) -> datetime:
    return datetime.combine(day, time(12, 0), tzinfo=timezone.utc)


if "accounts" not in st.session_state:
    if os.path.exists(settings.seed_path):
        accounts, transactions = load_seed(settings.seed_path)
    else:
        accounts, transactions = (), ()
    st.session_state.accounts = accounts
    st.session_state.transactions = transactions

if "table_state" not in st.session_state:
    st.session_state.table_state = TableState()

accounts = st.session_state.accounts
transactions = st.session_state.transactions
index = AccountIndex(accounts)

menu = st.sidebar.radio("Menu", ["📊 Dashboard", "🧾 Transactions", "📅 Calendar", "💳 Accounts"])

if menu == "📊 Dashboard":
    st.title("Dashboard Overview")

    labels = [label for label, _ in RANGES]
    default_label = next(label for label, key in RANGES if key == settings.default_range)
    chosen = st.radio("Range", labels, index=labels.index(default_label), horizontal=True)
    range_key = dict(RANGES)[chosen]

    report = DashboardService(align_to_day=settings.align_to_day).report(
        range_key, sort_by_date_desc(transactions), utc_now()
    )

    cols = st.columns(4)
    for col, card in zip(cols, report["cards"]):
        if card["name"] == "Total Transactions":
            value = str(card["value"])
        elif card["name"] == "Recent Activity":
            value = card["value"].map(lambda d: d.strftime("%Y-%m-%d")).get_or_else("None")
        else:
            value = format_money(card["value"])
        if isinstance(card["change"], str):
            # streamlit colours by sign, a word carries none
            change = card["change"]
            colour = "normal" if card["change_type"] == "positive" else "off"
        else:
            change = format_percent(card["change"])
            colour = "normal"
        with col:
            st.metric(card["name"], value, change, delta_color=colour)

    totals = list(daily_totals(transactions))
    if totals:
        df_daily = pd.DataFrame(totals, columns=["day", "amount"])
        df_daily["amount"] = df_daily["amount"] / 100
        fig = px.bar(df_daily, x="day", y="amount", labels={"day": "Day", "amount": "Amount ($)"},
                     title="Daily transferred amount")
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No transactions to display.")

elif menu == "🧾 Transactions":
    st.title("🧾 Transactions")
    st.caption("A list of all transactions including their title, amount, and accounts involved.")

    state: TableState = st.session_state.table_state
    c1, c2, c3 = st.columns([3, 2, 1])
    with c1:
        term = st.text_input("Search", value=state.search)
    with c2:
        field = st.selectbox(
            "Sort by",
            options=list(SORT_FIELDS),
            index=list(SORT_FIELDS).index(state.sort_field),
            format_func=SORT_LABELS.get,
        )
    with c3:
        st.write("")
        flip = st.button("⇅ " + state.sort_direction, key="btn_toggle_sort")

    if field != state.sort_field or flip:
        state = state.toggle_sort(field)
    state = state.with_search(term)
    st.session_state.table_state = state

    rows = resolve_all(transactions, index)
    view = TableService().view(rows, state)

    for r in unresolved(rows):
        problem = check_references(r.transaction, index)
        if problem.is_left():
            st.warning(problem.get_error()["message"] + f" (transaction {r.title!r})")

    if view:
        st.dataframe(
            pd.DataFrame([
                {
                    "Title": r.title,
                    "Description": r.description or "",
                    "Amount": format_money(r.amount),
                    "From Account": r.from_account.name,
                    "To Account": r.to_account.name,
                    "Date": r.transaction_date.strftime("%Y-%m-%d"),
                }
                for r in view
            ]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No transactions match the search.")

    account_ids = [a.id for a in accounts]
    account_name = lambda aid: index.lookup(aid).map(lambda a: a.name).get_or_else(aid)

    with st.expander("➕ Add transaction"):
        if not account_ids:
            st.info("Create an account first.")
        else:
            with st.form("add_tx", clear_on_submit=True):
                title = st.text_input("Title")
                description = st.text_input("Description")
                amount = st.number_input("Amount ($)", min_value=0.0, step=1.0, format="%.2f")
                day = st.date_input("Date")
                from_id = st.selectbox("From account", account_ids, format_func=account_name)
                to_id = st.selectbox("To account", account_ids, format_func=account_name)
                if st.form_submit_button("Save"):
                    if not title.strip():
                        st.error("Title is required")
                    else:
                        st.session_state.transactions = add_transaction(transactions, Transaction(
                            id=str(uuid4()),
                            title=title.strip(),
                            amount=round(amount * 100),
                            transaction_date=at_noon_utc(day),
                            from_account_id=from_id,
                            to_account_id=to_id,
                            description=description or None,
                        ))
                        st.success("Transaction created successfully")
                        st.rerun()

    if transactions:
        tx_labels = {t.id: f"{t.title} · {t.transaction_date:%Y-%m-%d}" for t in transactions}
        with st.expander("✏️ Edit or delete transaction"):
            tid = st.selectbox("Transaction", list(tx_labels), format_func=tx_labels.get)
            current = find_transaction(transactions, tid).get_or_else(None)
            if current is not None:
                with st.form("edit_tx"):
                    title = st.text_input("Title", value=current.title)
                    description = st.text_input("Description", value=current.description or "")
                    amount = st.number_input("Amount ($)", min_value=0.0, value=current.amount / 100, step=1.0,
                                             format="%.2f")
                    day = st.date_input("Date", value=current.transaction_date.date())
                    if st.form_submit_button("Update"):
                        st.session_state.transactions = replace_transaction(transactions, Transaction(
                            id=current.id,
                            title=title.strip() or current.title,
                            amount=round(amount * 100),
                            transaction_date=at_noon_utc(day),
                            from_account_id=current.from_account_id,
                            to_account_id=current.to_account_id,
                            description=description or None,
                        ))
                        st.success("Transaction updated successfully")
                        st.rerun()
                if st.button("🗑 Delete", key="btn_delete_tx"):
                    st.session_state.transactions = remove_transaction(transactions, current.id)
                    st.success("Transaction deleted successfully")
                    st.rerun()

elif menu == "📅 Calendar":
    st.title("📅 Calendar")
    selected = st.date_input("Day", value=utc_now().date())

    by_day = group_by_day(transactions)
    days = month_days(selected)
    st.subheader(selected.strftime("%B %Y"))

    header = st.columns(7)
    for col, name in zip(header, ["S", "M", "T", "W", "T", "F", "S"]):
        col.markdown(f"**{name}**")

    cells = [None] * leading_blanks(days[0]) + list(days)
    for week_start in range(0, len(cells), 7):
        row = st.columns(7)
        for col, day in zip(row, cells[week_start:week_start + 7]):
            if day is None:
                continue
            marker = " •" if day in by_day else ""
            label = f"**{day.day}**{marker}" if day == selected else f"{day.day}{marker}"
            col.markdown(label)

    st.subheader(f"Transactions for {selected:%b %d, %Y}")
    day_items = by_day.get(selected, ())
    if day_items:
        for t in day_items:
            st.markdown(f"**{t.title}** · {format_money(t.amount)}")
    else:
        st.info("No transactions on this day.")

elif menu == "💳 Accounts":
    st.title("💳 Accounts")
    st.caption("A list of all accounts in the system.")

    if accounts:
        st.dataframe(
            pd.DataFrame([
                {
                    "Name": a.name,
                    "Created": a.created_at.strftime("%Y-%m-%d"),
                    "Last Updated": a.updated_at.strftime("%Y-%m-%d"),
                }
                for a in sorted(accounts, key=lambda a: a.name.casefold())
            ]),
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No accounts yet.")

    with st.form("add_account", clear_on_submit=True):
        name = st.text_input("New account name")
        if st.form_submit_button("Add account"):
            if not name.strip():
                st.error("Name is required")
            else:
                now = utc_now()
                st.session_state.accounts = add_account(
                    accounts, Account(id=str(uuid4()), name=name.strip(), created_at=now, updated_at=now)
                )
                st.success("Account created successfully")
                st.rerun()

    if accounts:
        names = {a.id: a.name for a in accounts}
        aid = st.selectbox("Account", list(names), format_func=names.get)
        with st.form("rename_account"):
            new_name = st.text_input("Name", value=names[aid])
            if st.form_submit_button("Rename"):
                st.session_state.accounts = rename_account(accounts, aid, new_name.strip() or names[aid], utc_now())
                st.success("Account updated successfully")
                st.rerun()
        if st.button("🗑 Delete account", key="btn_delete_account"):
            st.session_state.accounts = remove_account(accounts, aid)
            st.success("Account deleted; its transactions now show an unknown account")
            st.rerun()
