"""JSON file store for offline scenario edits"""

import json
import logging
from dataclasses import asdict
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional
from cashflow_scenarios.domain.aggregation import aggregate_weeks
from cashflow_scenarios.domain.balance import recalculate_running_balance
from cashflow_scenarios.domain.models import (
    RunningBalancePoint,
    ScenarioSnapshot,
    Transaction,
    WeeklyAggregate,
)
from cashflow_scenarios.domain.transformers import transform_week_aggregate
from cashflow_scenarios.infrastructure.store.demo_data import DEMO_SCENARIO, demo_transactions

logger = logging.getLogger(__name__)


def seed_snapshot(initial_balance_cents: int) -> ScenarioSnapshot:
    """Fresh demo snapshot built from the demo import"""
    start = date.fromisoformat(DEMO_SCENARIO.start_date)
    weeks = [transform_week_aggregate(w) for w in aggregate_weeks(demo_transactions(), start)]
    return ScenarioSnapshot(
        scenario=DEMO_SCENARIO,
        weekly_aggregates=weeks,
        running_balance=recalculate_running_balance(weeks, initial_balance_cents),
    )


def _week_from_dict(data: dict) -> WeeklyAggregate:
    return WeeklyAggregate(
        week_index=data["week_index"],
        week_label=data["week_label"],
        week_start_date=data.get("week_start_date"),
        inflow_total_book_cents=data["inflow_total_book_cents"],
        outflow_total_book_cents=data["outflow_total_book_cents"],
        transactions=[Transaction(**txn) for txn in data.get("transactions", [])],
    )


class LocalScenarioStore:
    """Persists demo weeks and running balance between sessions"""

    def __init__(self, path: Optional[str], initial_balance_cents: int):
        self.path = Path(path) if path else None
        self.initial_balance_cents = initial_balance_cents

    def load(self) -> ScenarioSnapshot:
        """
        Load stored edits, falling back to the demo seed.

        A missing or unreadable file is not an error: the demo always has data.
        """
        seed = seed_snapshot(self.initial_balance_cents)
        if self.path is None or not self.path.exists():
            return seed

        try:
            data = json.loads(self.path.read_text())
            weeks = [_week_from_dict(w) for w in data["weekly_aggregates"]]
            balance = [RunningBalancePoint(**p) for p in data["running_balance"]]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("Local store unreadable, using demo data", extra={"path": str(self.path), "error": str(e)})
            return seed

        return ScenarioSnapshot(scenario=seed.scenario, weekly_aggregates=weeks, running_balance=balance)

    def save(self, snapshot: ScenarioSnapshot) -> None:
        """Write weeks and running balance; raises OSError if the file cannot be written"""
        if self.path is None:
            return

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "weekly_aggregates": [asdict(w) for w in snapshot.weekly_aggregates],
            "running_balance": [asdict(p) for p in snapshot.running_balance],
            "last_modified": datetime.now(timezone.utc).isoformat(),
        }
        self.path.write_text(json.dumps(payload, indent=2))

    def reset(self) -> None:
        """Drop stored edits"""
        if self.path is not None and self.path.exists():
            self.path.unlink()
