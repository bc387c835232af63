"""Unit tests for the override engine"""

import pytest
from cashflow_scenarios.domain.balance import recalculate_running_balance
from cashflow_scenarios.domain.exceptions import (
    InvalidOperationError,
    TransactionNotFoundError,
    WeekNotFoundError,
)
from cashflow_scenarios.domain.models import OverrideItem, ScenarioSnapshot, TransactionUpdate
from cashflow_scenarios.domain.overrides import (
    add_transaction_to_week,
    apply_batch_updates,
    find_and_remove_transaction,
    move_transaction,
    update_transaction,
    validate_transaction_move,
)


@pytest.fixture
def snapshot(sample_weeks) -> ScenarioSnapshot:
    return ScenarioSnapshot(
        scenario=None,
        weekly_aggregates=sample_weeks,
        running_balance=recalculate_running_balance(sample_weeks, 100000),
    )


def _ids(week):
    return [t.id for t in week.transactions]


def test_validate_move_rejects_initial_balance(sample_weeks):
    with pytest.raises(InvalidOperationError, match="Cannot move Initial Balance"):
        validate_transaction_move("ib-1", sample_weeks)


def test_validate_move_scans_every_week(make_txn, make_week):
    """Test the IB flag is found regardless of which week holds it"""
    weeks = [
        make_week(1, "2026-01-06", [make_txn("tx-1", 100, "2026-01-06")]),
        make_week(4, "2026-01-27", [make_txn("ib-late", 100, "2026-01-27", is_initial_balance=True)]),
    ]
    with pytest.raises(InvalidOperationError):
        validate_transaction_move("ib-late", weeks)


def test_validate_move_allows_regular_and_unknown_ids(sample_weeks):
    validate_transaction_move("tx-1", sample_weeks)
    validate_transaction_move("tx-5", sample_weeks)
    validate_transaction_move("missing", sample_weeks)


def test_find_and_remove_transaction(sample_weeks):
    weeks, removed = find_and_remove_transaction(sample_weeks, "tx-2")

    assert removed.id == "tx-2"
    assert _ids(weeks[1]) == ["tx-1", "tx-3"]
    assert weeks[2] == sample_weeks[2]


def test_find_and_remove_does_not_mutate_input(sample_weeks):
    before = list(sample_weeks[1].transactions)
    find_and_remove_transaction(sample_weeks, "tx-1")
    assert sample_weeks[1].transactions == before


def test_find_and_remove_absent_id(sample_weeks):
    """Test an unknown id leaves weeks equal by value and returns None"""
    weeks, removed = find_and_remove_transaction(sample_weeks, "missing")

    assert removed is None
    assert weeks == sample_weeks


def test_find_and_remove_only_first_duplicate(make_txn, make_week):
    weeks = [
        make_week(1, "2026-01-06", [make_txn("dup", 100, "2026-01-06")]),
        make_week(2, "2026-01-13", [make_txn("dup", 200, "2026-01-13")]),
    ]

    updated, removed = find_and_remove_transaction(weeks, "dup")

    assert removed.amount_book_cents == 100
    assert updated[0].transactions == []
    assert _ids(updated[1]) == ["dup"]


def test_add_transaction_to_week_by_start_date_normalizes_date(sample_weeks, make_txn):
    """Test the added entry takes the due date of the week's first transaction"""
    txn = make_txn("new", 1000, "2026-01-09")

    weeks = add_transaction_to_week(sample_weeks, txn, "2026-01-13")

    assert _ids(weeks[2]) == ["tx-4", "tx-5", "new"]
    assert weeks[2].transactions[-1].date_due == "2026-01-15"


def test_add_transaction_to_empty_week_uses_target_date(sample_weeks, make_txn):
    weeks = add_transaction_to_week(sample_weeks, make_txn("new", 1000, "2026-01-09"), "2026-01-20")

    assert _ids(weeks[3]) == ["new"]
    assert weeks[3].transactions[0].date_due == "2026-01-20"


def test_add_transaction_matches_existing_due_date(sample_weeks, make_txn):
    weeks = add_transaction_to_week(sample_weeks, make_txn("new", 1000, "2026-01-20"), "2026-01-09")

    assert _ids(weeks[1]) == ["tx-1", "tx-2", "tx-3", "new"]
    assert weeks[1].transactions[-1].date_due == "2026-01-08"


def test_add_transaction_without_matching_week(sample_weeks, make_txn):
    weeks = add_transaction_to_week(sample_weeks, make_txn("new", 1000, "2026-01-09"), "2027-01-01")
    assert weeks == sample_weeks


def test_add_transaction_to_first_matching_week_only(make_txn, make_week):
    """Test a date matching one week's start and another week's due date adds a single copy"""
    weeks = [
        make_week(1, "2026-01-06", [make_txn("tx-1", 100, "2026-01-13")]),
        make_week(2, "2026-01-13", [make_txn("tx-2", 200, "2026-01-15")]),
    ]

    updated = add_transaction_to_week(weeks, make_txn("new", 1000, "2026-01-09"), "2026-01-13")

    assert _ids(updated[0]) == ["tx-1", "new"]
    assert updated[1] == weeks[1]


def test_remove_then_add_at_original_date_reproduces_balance(sample_weeks):
    original = recalculate_running_balance(sample_weeks, 100000)

    weeks, removed = find_and_remove_transaction(sample_weeks, "tx-2")
    weeks = add_transaction_to_week(weeks, removed, removed.date_due)

    assert recalculate_running_balance(weeks, 100000) == original


def test_move_transaction_between_weeks(snapshot):
    moved = move_transaction(snapshot, "tx-3", "2026-01-13", 100000)

    assert _ids(moved.weekly_aggregates[1]) == ["tx-1", "tx-2"]
    assert _ids(moved.weekly_aggregates[2]) == ["tx-4", "tx-5", "tx-3"]
    assert [p.date for p in moved.running_balance] == ["2026-01-05", "2026-01-08", "2026-01-15"]
    assert moved.running_balance[-1].balance == snapshot.running_balance[-1].balance
    # Input snapshot is untouched
    assert _ids(snapshot.weekly_aggregates[1]) == ["tx-1", "tx-2", "tx-3"]


def test_move_initial_balance_rejected(snapshot):
    with pytest.raises(InvalidOperationError):
        move_transaction(snapshot, "ib-1", "2026-01-13")


def test_move_unknown_transaction(snapshot):
    with pytest.raises(TransactionNotFoundError):
        move_transaction(snapshot, "missing", "2026-01-13")


def test_move_to_unknown_week_keeps_transaction(snapshot):
    """Test the transaction is never dropped when no week matches"""
    with pytest.raises(WeekNotFoundError):
        move_transaction(snapshot, "tx-1", "2027-01-01")
    assert "tx-1" in _ids(snapshot.weekly_aggregates[1])


def test_move_after_redate_counts_transaction_once(snapshot):
    """Test a move onto a date claimed by two weeks keeps one copy and one balance effect"""
    redated = update_transaction(snapshot, "tx-2", TransactionUpdate(new_date_due="2026-01-13"), 100000)

    moved = move_transaction(redated, "tx-4", "2026-01-13", 100000)

    holders = [w.week_index for w in moved.weekly_aggregates if "tx-4" in _ids(w)]
    assert holders == [1]
    assert moved.running_balance[-1].balance == redated.running_balance[-1].balance


def test_update_transaction_amount(snapshot):
    updated = update_transaction(snapshot, "tx-5", TransactionUpdate(new_amount_book_cents=0), 100000)

    assert updated.weekly_aggregates[2].transactions[1].amount_book_cents == 0
    assert updated.weekly_aggregates[2].transactions[1].date_due == "2026-01-15"
    assert updated.running_balance[-1].balance == 6375.0


def test_update_transaction_date(snapshot):
    updated = update_transaction(snapshot, "tx-3", TransactionUpdate(new_date_due="2026-01-10"), 100000)

    txn = updated.weekly_aggregates[1].transactions[2]
    assert txn.date_due == "2026-01-10"
    assert txn.amount_book_cents == 7500
    assert [p.date for p in updated.running_balance][:3] == ["2026-01-05", "2026-01-08", "2026-01-10"]


def test_update_unknown_transaction(snapshot):
    with pytest.raises(TransactionNotFoundError):
        update_transaction(snapshot, "missing", TransactionUpdate(new_amount_book_cents=1))


def test_update_initial_balance_date_rejected(snapshot):
    with pytest.raises(InvalidOperationError):
        update_transaction(snapshot, "ib-1", TransactionUpdate(new_date_due="2026-01-06"))


def test_update_initial_balance_amount_allowed(snapshot):
    updated = update_transaction(snapshot, "ib-1", TransactionUpdate(new_amount_book_cents=0), 100000)
    assert updated.running_balance[0].balance == 1000.0


def test_update_negative_amount_rejected(snapshot):
    with pytest.raises(InvalidOperationError):
        update_transaction(snapshot, "tx-1", TransactionUpdate(new_amount_book_cents=-1))


def test_apply_batch_updates(snapshot):
    updated = apply_batch_updates(
        snapshot,
        [
            OverrideItem(flow_id="tx-1", new_amount_book_cents=0),
            OverrideItem(flow_id="tx-4", new_date_due="2026-01-16"),
        ],
        100000,
    )

    assert updated.weekly_aggregates[1].transactions[0].amount_book_cents == 0
    assert updated.weekly_aggregates[2].transactions[0].date_due == "2026-01-16"
    assert updated.running_balance[-1].balance == 6075.0


def test_apply_batch_updates_is_all_or_nothing(snapshot):
    with pytest.raises(TransactionNotFoundError):
        apply_batch_updates(
            snapshot,
            [
                OverrideItem(flow_id="tx-1", new_amount_book_cents=0),
                OverrideItem(flow_id="missing", new_amount_book_cents=0),
            ],
        )
    assert snapshot.weekly_aggregates[1].transactions[0].amount_book_cents == 20000
