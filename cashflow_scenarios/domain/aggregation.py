"""Weekly aggregation of imported transactions - what the scenario API serves"""

from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Dict, List, Mapping
from cashflow_scenarios.domain.models import (
    INFLOW,
    OUTFLOW,
    INITIAL_BALANCE_WEEK_INDEX,
    DailyBalance,
    ImportedTransaction,
    ScenarioOverride,
    TopTransactionItem,
    WeekAggregateRaw,
)
from cashflow_scenarios.utils.date_utils import week_index_for, week_label, week_start_date

TOP_N = 5


def apply_overrides(
    transactions: List[ImportedTransaction],
    overrides: Mapping[str, ScenarioOverride],
) -> List[ImportedTransaction]:
    """Return transactions with override date/amount substituted where set"""
    effective = []
    for txn in transactions:
        override = overrides.get(txn.flow_id)
        if override is not None:
            txn = replace(
                txn,
                date_due=override.new_date_due if override.new_date_due is not None else txn.date_due,
                amount_book_cents=(
                    override.new_amount_book_cents
                    if override.new_amount_book_cents is not None
                    else txn.amount_book_cents
                ),
            )
        effective.append(txn)
    return effective


def _top_and_other(transactions: List[ImportedTransaction], top_n: int):
    ranked = sorted(transactions, key=lambda t: (-t.amount_book_cents, t.date_due, t.flow_id))
    top = [
        TopTransactionItem(
            flow_id=t.flow_id,
            amount_book_cents=t.amount_book_cents,
            counterparty=t.counterparty,
            description=t.description,
            date_due=t.date_due.isoformat(),
        )
        for t in ranked[:top_n]
    ]
    other = sum(t.amount_book_cents for t in ranked[top_n:])
    return top, other


def aggregate_weeks(
    transactions: List[ImportedTransaction],
    start_date: date,
    top_n: int = TOP_N,
) -> List[WeekAggregateRaw]:
    """
    Bucket transactions into weeks with top-N + "other" per direction.

    Week assignment:
    - Initial-balance rows -> week 0
    - Others -> week of their due date relative to `start_date`
      (rows dated before the start land in week 1)

    Only weeks holding at least one transaction are returned, ordered by index.
    """
    buckets: Dict[int, List[ImportedTransaction]] = defaultdict(list)
    for txn in transactions:
        index = INITIAL_BALANCE_WEEK_INDEX if txn.is_initial_balance else week_index_for(txn.date_due, start_date)
        buckets[index].append(txn)

    weeks = []
    for index in sorted(buckets):
        inflows = [t for t in buckets[index] if t.direction == INFLOW]
        outflows = [t for t in buckets[index] if t.direction == OUTFLOW]
        inflow_top, inflow_other = _top_and_other(inflows, top_n)
        outflow_top, outflow_other = _top_and_other(outflows, top_n)
        start = week_start_date(index, start_date)

        weeks.append(
            WeekAggregateRaw(
                week_index=index,
                week_label=week_label(index, start_date),
                week_start_date=start.isoformat() if start else None,
                inflow_total_book_cents=sum(t.amount_book_cents for t in inflows),
                outflow_total_book_cents=sum(t.amount_book_cents for t in outflows),
                inflow_top5=inflow_top,
                outflow_top5=outflow_top,
                inflow_other_book_cents=inflow_other,
                outflow_other_book_cents=outflow_other,
            )
        )

    return weeks


def daily_balances(transactions: List[ImportedTransaction]) -> List[DailyBalance]:
    """
    Per-date delta and cumulative balance in cents, starting from zero.

    The opening balance comes from the initial-balance rows themselves.
    """
    deltas: Dict[date, int] = defaultdict(int)
    for txn in transactions:
        sign = 1 if txn.direction == INFLOW else -1
        deltas[txn.date_due] += sign * txn.amount_book_cents

    running = 0
    balances = []
    for day in sorted(deltas):
        running += deltas[day]
        balances.append(DailyBalance(as_of_date=day, delta_book_cents=deltas[day], running_balance_book_cents=running))
    return balances
