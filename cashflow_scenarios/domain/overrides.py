"""Override engine - moves and amends transactions across weekly aggregates"""

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple
from cashflow_scenarios.domain.balance import DEFAULT_INITIAL_BALANCE_CENTS, recalculate_running_balance
from cashflow_scenarios.domain.exceptions import (
    InvalidOperationError,
    TransactionNotFoundError,
    WeekNotFoundError,
)
from cashflow_scenarios.domain.models import (
    OverrideItem,
    ScenarioSnapshot,
    Transaction,
    TransactionUpdate,
    WeeklyAggregate,
)

logger = logging.getLogger(__name__)


def validate_transaction_move(transaction_id: str, weeks: Iterable[WeeklyAggregate]) -> None:
    """
    Reject moves of the Initial Balance entry.

    Raises:
        InvalidOperationError: If the id belongs to an initial-balance transaction in any week
    """
    for week in weeks:
        for txn in week.transactions:
            if txn.id == transaction_id and txn.is_initial_balance:
                raise InvalidOperationError(
                    "Cannot move Initial Balance (IB) transaction. IB transactions are read-only."
                )


def find_and_remove_transaction(
    weeks: List[WeeklyAggregate],
    transaction_id: str,
) -> Tuple[List[WeeklyAggregate], Optional[Transaction]]:
    """
    Remove the first transaction matching `transaction_id`.

    Returns a new list of weeks and the removed transaction, or the
    weeks unchanged and None when no week holds the id.
    """
    removed: Optional[Transaction] = None
    updated = []

    for week in weeks:
        if removed is None:
            idx = next((i for i, t in enumerate(week.transactions) if t.id == transaction_id), None)
            if idx is not None:
                removed = week.transactions[idx]
                week = replace(week, transactions=week.transactions[:idx] + week.transactions[idx + 1:])
        updated.append(week)

    return updated, removed


def _is_target_week(week: WeeklyAggregate, target_date: str) -> bool:
    return week.week_start_date == target_date or any(t.date_due == target_date for t in week.transactions)


def add_transaction_to_week(
    weeks: List[WeeklyAggregate],
    transaction: Transaction,
    target_date: str,
) -> List[WeeklyAggregate]:
    """
    Append `transaction` to the week matching `target_date`.

    A week matches when it starts on `target_date` or already holds a
    transaction due that day; only the first match in list order receives
    the transaction. The appended copy takes the due date of the week's
    first transaction (or `target_date` for an empty week) so all entries
    in a week group under one date. Without a match the weeks are returned
    unchanged.
    """
    target = next((i for i, week in enumerate(weeks) if _is_target_week(week, target_date)), None)
    if target is None:
        return list(weeks)

    week = weeks[target]
    date_due = week.transactions[0].date_due if week.transactions else target_date
    updated = list(weeks)
    updated[target] = replace(week, transactions=week.transactions + [replace(transaction, date_due=date_due)])
    return updated


def move_transaction(
    snapshot: ScenarioSnapshot,
    transaction_id: str,
    new_date: str,
    initial_balance_cents: int = DEFAULT_INITIAL_BALANCE_CENTS,
) -> ScenarioSnapshot:
    """
    Reschedule a transaction to the week of `new_date`.

    Flow:
    1. Validate (Initial Balance cannot move)
    2. Remove from its current week
    3. Check that a target week exists
    4. Add to the target week
    5. Recompute the running balance

    Nothing is returned unless every step succeeds; the input snapshot is
    never modified.

    Raises:
        InvalidOperationError: Transaction is the Initial Balance
        WeekNotFoundError: No week matches `new_date`
        TransactionNotFoundError: No week holds `transaction_id`
    """
    weeks = snapshot.weekly_aggregates
    validate_transaction_move(transaction_id, weeks)

    weeks_after_remove, moved = find_and_remove_transaction(weeks, transaction_id)
    if moved is None:
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    if not any(_is_target_week(week, new_date) for week in weeks_after_remove):
        raise WeekNotFoundError(f"No week found for date {new_date}")

    weeks_after_add = add_transaction_to_week(weeks_after_remove, moved, new_date)

    logger.info(
        "Transaction moved",
        extra={"flow_id": transaction_id, "from_date": moved.date_due, "target_date": new_date},
    )

    return replace(
        snapshot,
        weekly_aggregates=weeks_after_add,
        running_balance=recalculate_running_balance(weeks_after_add, initial_balance_cents),
    )


def _update_weeks(
    weeks: List[WeeklyAggregate],
    transaction_id: str,
    update: TransactionUpdate,
) -> List[WeeklyAggregate]:
    found = False
    updated = []

    for week in weeks:
        transactions = []
        for txn in week.transactions:
            if txn.id == transaction_id:
                found = True
                new_date = update.new_date_due if update.new_date_due is not None else txn.date_due
                if txn.is_initial_balance and new_date != txn.date_due:
                    raise InvalidOperationError("Cannot change the date of the Initial Balance (IB) transaction.")
                new_amount = (
                    update.new_amount_book_cents
                    if update.new_amount_book_cents is not None
                    else txn.amount_book_cents
                )
                if new_amount < 0:
                    raise InvalidOperationError("Amount cannot be negative")
                txn = replace(txn, date_due=new_date, amount_book_cents=new_amount)
            transactions.append(txn)
        updated.append(replace(week, transactions=transactions))

    if not found:
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    return updated


def update_transaction(
    snapshot: ScenarioSnapshot,
    transaction_id: str,
    update: TransactionUpdate,
    initial_balance_cents: int = DEFAULT_INITIAL_BALANCE_CENTS,
) -> ScenarioSnapshot:
    """
    Overwrite amount and/or due date of a transaction and recompute the balance.

    Fields left as None keep their current value.

    Raises:
        TransactionNotFoundError: No week holds `transaction_id`
        InvalidOperationError: Date change on the Initial Balance, or negative amount
    """
    weeks = _update_weeks(snapshot.weekly_aggregates, transaction_id, update)
    return replace(
        snapshot,
        weekly_aggregates=weeks,
        running_balance=recalculate_running_balance(weeks, initial_balance_cents),
    )


def apply_batch_updates(
    snapshot: ScenarioSnapshot,
    items: Iterable[OverrideItem],
    initial_balance_cents: int = DEFAULT_INITIAL_BALANCE_CENTS,
) -> ScenarioSnapshot:
    """
    Apply several overrides as one unit.

    Items are applied in order to a working list of weeks; the first
    failure propagates and the input snapshot stays as it was.
    """
    weeks = snapshot.weekly_aggregates
    for item in items:
        weeks = _update_weeks(
            weeks,
            item.flow_id,
            TransactionUpdate(new_date_due=item.new_date_due, new_amount_book_cents=item.new_amount_book_cents),
        )

    return replace(
        snapshot,
        weekly_aggregates=weeks,
        running_balance=recalculate_running_balance(weeks, initial_balance_cents),
    )
