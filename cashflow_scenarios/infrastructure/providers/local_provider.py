"""Offline provider: demo scenario held in memory and mirrored to a local file"""

import logging
from typing import List, Optional
from cashflow_scenarios.domain.exceptions import DomainException
from cashflow_scenarios.domain.models import BatchOverrideResult, OverrideItem, ScenarioSnapshot, TransactionUpdate
from cashflow_scenarios.domain.overrides import apply_batch_updates, move_transaction, update_transaction
from cashflow_scenarios.infrastructure.observability.logging import log_override
from cashflow_scenarios.infrastructure.observability.metrics import record_override
from cashflow_scenarios.infrastructure.providers.base import ScenarioDataProvider
from cashflow_scenarios.infrastructure.store.local_store import LocalScenarioStore

logger = logging.getLogger(__name__)


class LocalDataProvider(ScenarioDataProvider):
    """
    Demo backend with the same contract as ApiDataProvider.

    Each mutation builds a complete new snapshot, persists it, and only then
    replaces the held snapshot; a failure at any step leaves it untouched.
    """

    name = "local"

    def __init__(self, store: LocalScenarioStore, initial_balance_cents: Optional[int] = None):
        self.store = store
        self.initial_balance_cents = (
            initial_balance_cents if initial_balance_cents is not None else store.initial_balance_cents
        )
        self._snapshot = store.load()

    async def fetch_scenario_data(self) -> ScenarioSnapshot:
        return self._snapshot

    def _commit(self, snapshot: ScenarioSnapshot, flow_ids: List[str]) -> None:
        self.store.save(snapshot)
        self._snapshot = snapshot
        record_override(self.name, applied=True, count=len(flow_ids))
        log_override(self.name, snapshot.scenario.id if snapshot.scenario else None, flow_ids, "applied")

    def _reject(self, error: DomainException, flow_ids: List[str]) -> None:
        record_override(self.name, applied=False, count=len(flow_ids))
        logger.warning("Override rejected", extra={"flow_ids": flow_ids, "kind": error.kind, "error": str(error)})

    async def update_transaction(self, flow_id: str, update: TransactionUpdate) -> None:
        try:
            snapshot = update_transaction(self._snapshot, flow_id, update, self.initial_balance_cents)
        except DomainException as e:
            self._reject(e, [flow_id])
            raise
        self._commit(snapshot, [flow_id])

    async def move_transaction(self, flow_id: str, new_date: str) -> None:
        """
        Raises:
            TransactionNotFoundError: flow_id is in no week
            InvalidOperationError: flow_id is the Initial Balance
            WeekNotFoundError: no week matches new_date
        """
        try:
            snapshot = move_transaction(self._snapshot, flow_id, new_date, self.initial_balance_cents)
        except DomainException as e:
            self._reject(e, [flow_id])
            raise
        self._commit(snapshot, [flow_id])

    async def apply_overrides(self, items: List[OverrideItem]) -> BatchOverrideResult:
        flow_ids = [item.flow_id for item in items]
        try:
            snapshot = apply_batch_updates(self._snapshot, items, self.initial_balance_cents)
        except DomainException as e:
            self._reject(e, flow_ids)
            raise
        self._commit(snapshot, flow_ids)
        return BatchOverrideResult(updated_count=len(items), overrides=list(items))

    def reset(self) -> None:
        """Discard demo edits and return to the seed data"""
        self.store.reset()
        self._snapshot = self.store.load()
