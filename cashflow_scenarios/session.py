"""Editing session over a scenario data provider"""

import logging
from typing import List, Optional
from cashflow_scenarios.domain.exceptions import DomainException
from cashflow_scenarios.domain.models import (
    BatchOverrideResult,
    OverrideItem,
    RunningBalancePoint,
    Scenario,
    ScenarioSnapshot,
    TransactionUpdate,
    WeeklyAggregate,
)
from cashflow_scenarios.domain.overrides import validate_transaction_move
from cashflow_scenarios.infrastructure.observability.metrics import move_rejected_counter
from cashflow_scenarios.infrastructure.providers.base import ScenarioDataProvider

logger = logging.getLogger(__name__)


class ScenarioSession:
    """
    Owns the current scenario snapshot for one editing session.

    The snapshot is only ever replaced, never patched: after every successful
    mutation the provider is asked for a fresh one. A failed mutation leaves
    the held snapshot as it was and the error propagates to the caller.
    """

    def __init__(self, provider: ScenarioDataProvider):
        self.provider = provider
        self.snapshot: Optional[ScenarioSnapshot] = None

    @property
    def scenario(self) -> Optional[Scenario]:
        return self.snapshot.scenario if self.snapshot else None

    @property
    def weekly_aggregates(self) -> List[WeeklyAggregate]:
        return self.snapshot.weekly_aggregates if self.snapshot else []

    @property
    def running_balance(self) -> List[RunningBalancePoint]:
        return self.snapshot.running_balance if self.snapshot else []

    async def refresh(self) -> ScenarioSnapshot:
        self.snapshot = await self.provider.fetch_scenario_data()
        return self.snapshot

    async def update_transaction(self, flow_id: str, update: TransactionUpdate) -> ScenarioSnapshot:
        await self.provider.update_transaction(flow_id, update)
        return await self.refresh()

    async def move_transaction(self, flow_id: str, new_date: str) -> ScenarioSnapshot:
        """
        Validate against the held snapshot, then move through the provider.

        Raises:
            InvalidOperationError: flow_id is the Initial Balance (nothing is sent)
        """
        try:
            validate_transaction_move(flow_id, self.weekly_aggregates)
        except DomainException as e:
            move_rejected_counter.labels(reason=e.kind).inc()
            logger.warning("Move rejected", extra={"flow_id": flow_id, "target_date": new_date, "error": str(e)})
            raise

        await self.provider.move_transaction(flow_id, new_date)
        return await self.refresh()

    async def apply_overrides(self, items: List[OverrideItem]) -> BatchOverrideResult:
        result = await self.provider.apply_overrides(items)
        await self.refresh()
        return result
