"""In-memory scenario repository backing the scenario API"""

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple
from cashflow_scenarios.domain.aggregation import aggregate_weeks, apply_overrides, daily_balances
from cashflow_scenarios.domain.exceptions import (
    InvalidOperationError,
    ScenarioLockedError,
    ScenarioNotFoundError,
    ScenarioNotLockedError,
    TransactionNotFoundError,
)
from cashflow_scenarios.domain.models import (
    DailyBalance,
    ImportedTransaction,
    Scenario,
    ScenarioOverride,
    WeekAggregateRaw,
)
from cashflow_scenarios.infrastructure.store.demo_data import DEMO_SCENARIO, demo_transactions

# Fields a client may set on an override. Omitted keys keep the stored value, None clears it.
OVERRIDE_FIELDS = ("new_date_due", "new_amount_book_cents")


class ScenarioRepository:
    """Repository for one company's scenario, its imported transactions and overrides"""

    def __init__(self, scenario: Scenario, transactions: List[ImportedTransaction]):
        self.scenario = scenario
        self.transactions = list(transactions)
        self.overrides: Dict[str, ScenarioOverride] = {}

    @classmethod
    def demo(cls) -> "ScenarioRepository":
        return cls(DEMO_SCENARIO, demo_transactions())

    def get_scenario(self, company_id: str, scenario_id: int) -> Scenario:
        """Fetch scenario metadata"""
        if self.scenario.company_id != company_id or self.scenario.id != scenario_id:
            raise ScenarioNotFoundError(f"Scenario with ID {scenario_id} not found")
        return self.scenario

    def effective_transactions(self) -> List[ImportedTransaction]:
        return apply_overrides(self.transactions, self.overrides)

    def get_weekly_aggregates(self, company_id: str, scenario_id: int) -> List[WeekAggregateRaw]:
        scenario = self.get_scenario(company_id, scenario_id)
        return aggregate_weeks(self.effective_transactions(), date.fromisoformat(scenario.start_date))

    def get_running_balance(self, company_id: str, scenario_id: int) -> List[DailyBalance]:
        self.get_scenario(company_id, scenario_id)
        return daily_balances(self.effective_transactions())

    def lock(self, company_id: str, scenario_id: int) -> Scenario:
        scenario = self.get_scenario(company_id, scenario_id)
        if scenario.status == "Locked":
            raise ScenarioLockedError("Scenario is already locked")
        self.scenario = replace(scenario, status="Locked", locked_at=datetime.now(timezone.utc).isoformat())
        return self.scenario

    def export_transactions(self, company_id: str, scenario_id: int) -> List[Tuple[ImportedTransaction, bool]]:
        """
        Effective transactions of a Locked scenario with their override flag.

        Rows are ordered by due date, then flow_id.

        Raises:
            ScenarioNotLockedError: Scenario is still a Draft
            TransactionNotFoundError: Scenario has no transactions
        """
        scenario = self.get_scenario(company_id, scenario_id)
        if scenario.status != "Locked":
            raise ScenarioNotLockedError("Only locked scenarios can be exported")

        rows = sorted(self.effective_transactions(), key=lambda t: (t.date_due, t.flow_id))
        if not rows:
            raise TransactionNotFoundError("No transactions found for export")
        return [(txn, txn.flow_id in self.overrides) for txn in rows]

    def _writable(self, company_id: str, scenario_id: int) -> None:
        scenario = self.get_scenario(company_id, scenario_id)
        if scenario.status != "Draft":
            raise ScenarioLockedError("Cannot modify overrides for a Locked scenario")

    def _check_changes(self, txn: ImportedTransaction, changes: Mapping[str, Any]) -> None:
        new_date = changes.get("new_date_due")
        if txn.is_initial_balance and new_date is not None and new_date != txn.date_due:
            raise InvalidOperationError(
                f"Cannot change the date of the Initial Balance (IB) transaction {txn.flow_id}."
            )

    def _build_override(self, txn: ImportedTransaction, changes: Mapping[str, Any]) -> ScenarioOverride:
        existing = self.overrides.get(txn.flow_id)
        if existing is None:
            # Freeze original values on first override
            existing = ScenarioOverride(
                flow_id=txn.flow_id,
                original_date_due=txn.date_due,
                original_amount_book_cents=txn.amount_book_cents,
            )
        return replace(existing, **{k: v for k, v in changes.items() if k in OVERRIDE_FIELDS})

    def upsert_override(
        self,
        company_id: str,
        scenario_id: int,
        flow_id: str,
        changes: Mapping[str, Any],
    ) -> ScenarioOverride:
        """Create or update the override of a single transaction"""
        self._writable(company_id, scenario_id)

        txn = next((t for t in self.transactions if t.flow_id == flow_id), None)
        if txn is None:
            raise TransactionNotFoundError(f"Transaction {flow_id} not found")

        self._check_changes(txn, changes)
        override = self._build_override(txn, changes)
        self.overrides[flow_id] = override
        return override

    def batch_upsert_overrides(
        self,
        company_id: str,
        scenario_id: int,
        items: List[Tuple[str, Mapping[str, Any]]],
    ) -> List[ScenarioOverride]:
        """
        Upsert several overrides as one unit.

        Every item is checked before anything is written; one unknown id or
        a date change on the Initial Balance rejects the whole batch.
        """
        self._writable(company_id, scenario_id)

        by_flow_id = {t.flow_id: t for t in self.transactions}
        missing = [flow_id for flow_id, _ in items if flow_id not in by_flow_id]
        if missing:
            raise InvalidOperationError(f"Transactions not found for flow_ids: {', '.join(missing)}")
        for flow_id, changes in items:
            self._check_changes(by_flow_id[flow_id], changes)

        staged: Dict[str, ScenarioOverride] = {}
        for flow_id, changes in items:
            previous: Optional[ScenarioOverride] = staged.get(flow_id)
            if previous is not None:
                staged[flow_id] = replace(previous, **{k: v for k, v in changes.items() if k in OVERRIDE_FIELDS})
            else:
                staged[flow_id] = self._build_override(by_flow_id[flow_id], changes)

        self.overrides.update(staged)
        return list(staged.values())
