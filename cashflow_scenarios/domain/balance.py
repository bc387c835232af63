"""Running balance calculation over weekly aggregates"""

from collections import defaultdict
from typing import Dict, Iterable, List
from cashflow_scenarios.domain.models import INFLOW, RunningBalancePoint, Transaction, WeeklyAggregate

DEFAULT_INITIAL_BALANCE_CENTS = 100_000


def recalculate_running_balance(
    weekly_aggregates: Iterable[WeeklyAggregate],
    initial_balance_cents: int = DEFAULT_INITIAL_BALANCE_CENTS,
) -> List[RunningBalancePoint]:
    """
    Derive the chronological running balance from weekly aggregates.

    Requirements:
    - Weeks ordered by week_index (week 0 has no start date)
    - Within a week, dates ascending (ISO strings sort chronologically)
    - One point per date that has transactions, no gap filling
    - Balance emitted in major units (cents / 100)

    Accumulation stays in integer cents; conversion happens once per point.
    """
    balance_cents = initial_balance_cents
    points: List[RunningBalancePoint] = []

    for week in sorted(weekly_aggregates, key=lambda w: w.week_index):
        by_date: Dict[str, List[Transaction]] = defaultdict(list)
        for txn in week.transactions:
            by_date[txn.date_due].append(txn)

        for day in sorted(by_date):
            for txn in by_date[day]:
                if txn.direction == INFLOW:
                    balance_cents += txn.amount_book_cents
                else:
                    balance_cents -= txn.amount_book_cents

            points.append(RunningBalancePoint(date=day, balance=balance_cents / 100))

    return points
