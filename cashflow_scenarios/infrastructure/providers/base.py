"""Scenario data provider interface shared by the remote and local backends"""

from abc import ABC, abstractmethod
from typing import List
from cashflow_scenarios.domain.models import BatchOverrideResult, OverrideItem, ScenarioSnapshot, TransactionUpdate


class ScenarioDataProvider(ABC):
    """Capability set consumed by ScenarioSession: fetch, update, move, batch"""

    name: str = "provider"

    @abstractmethod
    async def fetch_scenario_data(self) -> ScenarioSnapshot:
        """Current scenario snapshot"""

    @abstractmethod
    async def update_transaction(self, flow_id: str, update: TransactionUpdate) -> None:
        """Amend amount and/or due date of one transaction"""

    @abstractmethod
    async def move_transaction(self, flow_id: str, new_date: str) -> None:
        """Reschedule one transaction to the week of `new_date`"""

    @abstractmethod
    async def apply_overrides(self, items: List[OverrideItem]) -> BatchOverrideResult:
        """Apply several overrides as one unit"""
