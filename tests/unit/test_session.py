"""Unit tests for ScenarioSession"""

import pytest
from unittest.mock import AsyncMock
from cashflow_scenarios.domain.balance import recalculate_running_balance
from cashflow_scenarios.domain.exceptions import InvalidOperationError, OverrideSubmitError
from cashflow_scenarios.domain.models import BatchOverrideResult, OverrideItem, ScenarioSnapshot, TransactionUpdate
from cashflow_scenarios.infrastructure.providers.base import ScenarioDataProvider
from cashflow_scenarios.session import ScenarioSession


@pytest.fixture
def snapshot(sample_weeks) -> ScenarioSnapshot:
    return ScenarioSnapshot(
        scenario=None,
        weekly_aggregates=sample_weeks,
        running_balance=recalculate_running_balance(sample_weeks, 100000),
    )


@pytest.fixture
def provider(snapshot):
    mock = AsyncMock(spec=ScenarioDataProvider)
    mock.fetch_scenario_data.return_value = snapshot
    return mock


async def test_refresh_holds_snapshot(provider, snapshot):
    session = ScenarioSession(provider)
    assert session.weekly_aggregates == []
    assert session.running_balance == []

    await session.refresh()

    assert session.snapshot is snapshot
    assert session.running_balance[-1].balance == 6275.0


async def test_move_initial_balance_never_reaches_provider(provider):
    session = ScenarioSession(provider)
    await session.refresh()

    with pytest.raises(InvalidOperationError):
        await session.move_transaction("ib-1", "2026-01-13")

    provider.move_transaction.assert_not_awaited()


async def test_move_refreshes_after_provider(provider):
    session = ScenarioSession(provider)
    await session.refresh()

    await session.move_transaction("tx-1", "2026-01-13")

    provider.move_transaction.assert_awaited_once_with("tx-1", "2026-01-13")
    assert provider.fetch_scenario_data.await_count == 2


async def test_update_refreshes_after_provider(provider):
    session = ScenarioSession(provider)
    update = TransactionUpdate(new_amount_book_cents=0)

    await session.update_transaction("tx-1", update)

    provider.update_transaction.assert_awaited_once_with("tx-1", update)
    assert session.snapshot is not None


async def test_failed_mutation_keeps_snapshot(provider, snapshot):
    provider.update_transaction.side_effect = OverrideSubmitError("Override rejected: 409")
    session = ScenarioSession(provider)
    await session.refresh()

    with pytest.raises(OverrideSubmitError):
        await session.update_transaction("tx-1", TransactionUpdate(new_amount_book_cents=0))

    assert session.snapshot is snapshot
    assert provider.fetch_scenario_data.await_count == 1


async def test_apply_overrides_returns_provider_result(provider):
    items = [OverrideItem(flow_id="tx-1", new_amount_book_cents=0)]
    provider.apply_overrides.return_value = BatchOverrideResult(updated_count=1, overrides=items)
    session = ScenarioSession(provider)

    result = await session.apply_overrides(items)

    assert result.updated_count == 1
    assert session.snapshot is not None
