"""Conversion of raw weekly summaries into week buckets"""

from typing import List
from cashflow_scenarios.domain.models import (
    INFLOW,
    OUTFLOW,
    INITIAL_BALANCE_WEEK_INDEX,
    TopTransactionItem,
    Transaction,
    WeekAggregateRaw,
    WeeklyAggregate,
)


def _top_items(items: List[TopTransactionItem], direction: str, is_initial_balance: bool) -> List[Transaction]:
    return [
        Transaction(
            id=item.flow_id,
            type="transaction",
            direction=direction,
            amount_book_cents=item.amount_book_cents,
            date_due=item.date_due,
            counterparty=item.counterparty,
            description=item.description,
            is_initial_balance=is_initial_balance,
        )
        for item in items
    ]


def _other_bucket(week: WeekAggregateRaw, direction: str, amount_cents: int, is_initial_balance: bool) -> Transaction:
    return Transaction(
        id=f"other-{direction.lower()}-{week.week_index}",
        type="other",
        direction=direction,
        amount_book_cents=amount_cents,
        date_due=week.week_start_date or "",
        counterparty=None,
        description="Other",
        is_initial_balance=is_initial_balance,
    )


def transform_week_aggregate(week: WeekAggregateRaw) -> WeeklyAggregate:
    """
    Flatten a raw weekly summary into a week bucket.

    Order is part of the contract: top inflows, inflow "Other",
    top outflows, outflow "Other". "Other" entries only appear when
    their bucket is non-zero.
    """
    is_initial_balance = week.week_index == INITIAL_BALANCE_WEEK_INDEX

    transactions = _top_items(week.inflow_top5, INFLOW, is_initial_balance)
    if week.inflow_other_book_cents > 0:
        transactions.append(_other_bucket(week, INFLOW, week.inflow_other_book_cents, is_initial_balance))

    transactions.extend(_top_items(week.outflow_top5, OUTFLOW, is_initial_balance))
    if week.outflow_other_book_cents > 0:
        transactions.append(_other_bucket(week, OUTFLOW, week.outflow_other_book_cents, is_initial_balance))

    return WeeklyAggregate(
        week_index=week.week_index,
        week_label=week.week_label,
        week_start_date=week.week_start_date,
        inflow_total_book_cents=week.inflow_total_book_cents,
        outflow_total_book_cents=week.outflow_total_book_cents,
        transactions=transactions,
    )
