"""Scenario API HTTP client"""

import asyncio
import time
from typing import Any, Dict, List
import httpx
from cashflow_scenarios.config import settings
from cashflow_scenarios.domain.exceptions import OverrideSubmitError, ScenarioFetchError
from cashflow_scenarios.domain.models import (
    BatchOverrideResult,
    OverrideItem,
    RunningBalancePoint,
    Scenario,
    ScenarioSnapshot,
    TopTransactionItem,
    TransactionUpdate,
    WeekAggregateRaw,
)
from cashflow_scenarios.domain.transformers import transform_week_aggregate
from cashflow_scenarios.infrastructure.observability.logging import log_override
from cashflow_scenarios.infrastructure.observability.metrics import record_override, scenario_fetch_failures_counter
from cashflow_scenarios.infrastructure.providers.base import ScenarioDataProvider


def _top_item(data: Dict[str, Any]) -> TopTransactionItem:
    return TopTransactionItem(
        flow_id=data["flow_id"],
        amount_book_cents=data["amount_book_cents"],
        counterparty=data.get("counterparty"),
        description=data.get("description"),
        date_due=data["date_due"],
    )


def _week(data: Dict[str, Any]) -> WeekAggregateRaw:
    return WeekAggregateRaw(
        week_index=data["week_index"],
        week_label=data["week_label"],
        week_start_date=data.get("week_start_date"),
        inflow_total_book_cents=data["inflow_total_book_cents"],
        outflow_total_book_cents=data["outflow_total_book_cents"],
        inflow_top5=[_top_item(i) for i in data.get("inflow_top5", [])],
        outflow_top5=[_top_item(i) for i in data.get("outflow_top5", [])],
        inflow_other_book_cents=data.get("inflow_other_book_cents", 0),
        outflow_other_book_cents=data.get("outflow_other_book_cents", 0),
    )


def _override_payload(item: OverrideItem) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"flow_id": item.flow_id}
    if item.new_date_due is not None:
        payload["new_date_due"] = item.new_date_due
    if item.new_amount_book_cents is not None:
        payload["new_amount_book_cents"] = item.new_amount_book_cents
    return payload


class ApiDataProvider(ScenarioDataProvider):
    """Client for the scenario API of one company scenario"""

    name = "api"

    def __init__(
        self,
        company_id: str,
        scenario_id: int,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.company_id = company_id
        self.scenario_id = scenario_id
        self.base_url = base_url or settings.api_base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    @property
    def scenario_url(self) -> str:
        return f"{self.base_url}/api/companies/{self.company_id}/scenarios/{self.scenario_id}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def fetch_scenario_data(self) -> ScenarioSnapshot:
        """
        Fetch scenario, weekly aggregates and running balance concurrently.

        All three reads carry the same `_t` cache-busting timestamp and all
        three must succeed; there is no partial result.

        Raises:
            ScenarioFetchError: On timeout, HTTP errors, or invalid response
        """
        params = {"_t": int(time.time() * 1000)}
        async with self._client() as client:
            try:
                scenario_res, weekly_res, balance_res = await asyncio.gather(
                    client.get(self.scenario_url, params=params),
                    client.get(f"{self.scenario_url}/weekly-aggregates", params=params),
                    client.get(f"{self.scenario_url}/running-balance", params=params),
                )
                for response in (scenario_res, weekly_res, balance_res):
                    response.raise_for_status()

                scenario = Scenario(**scenario_res.json())
                weeks = [transform_week_aggregate(_week(w)) for w in weekly_res.json()["weeks"]]
                balance = [
                    RunningBalancePoint(
                        date=item["as_of_date"],
                        balance=item["running_balance_book_cents"] / 100,
                    )
                    for item in balance_res.json()["balances"]
                ]

            except httpx.TimeoutException as e:
                scenario_fetch_failures_counter.inc()
                raise ScenarioFetchError(f"Scenario API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                scenario_fetch_failures_counter.inc()
                raise ScenarioFetchError(f"Failed to fetch scenario data: {e.response.status_code}") from e
            except httpx.RequestError as e:
                scenario_fetch_failures_counter.inc()
                raise ScenarioFetchError(f"Failed to fetch scenario data: {e}") from e
            except (KeyError, ValueError, TypeError) as e:
                scenario_fetch_failures_counter.inc()
                raise ScenarioFetchError(f"Invalid scenario data from API: {e}") from e

        return ScenarioSnapshot(scenario=scenario, weekly_aggregates=weeks, running_balance=balance)

    async def _send(self, method: str, url: str, payload: Dict[str, Any], flow_ids: List[str]) -> httpx.Response:
        async with self._client() as client:
            try:
                response = await client.request(method, url, json=payload)
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                record_override(self.name, applied=False, count=len(flow_ids))
                log_override(self.name, self.scenario_id, flow_ids, "rejected")
                raise OverrideSubmitError(
                    f"Override rejected: {e.response.status_code} {e.response.text}"
                ) from e
            except httpx.RequestError as e:
                record_override(self.name, applied=False, count=len(flow_ids))
                log_override(self.name, self.scenario_id, flow_ids, "rejected")
                raise OverrideSubmitError(f"Override submission failed: {e}") from e

        record_override(self.name, applied=True, count=len(flow_ids))
        log_override(self.name, self.scenario_id, flow_ids, "applied")
        return response

    async def update_transaction(self, flow_id: str, update: TransactionUpdate) -> None:
        """PUT a single override"""
        payload = _override_payload(OverrideItem(flow_id, update.new_date_due, update.new_amount_book_cents))
        payload.pop("flow_id")
        await self._send("PUT", f"{self.scenario_url}/overrides/{flow_id}", payload, [flow_id])

    async def move_transaction(self, flow_id: str, new_date: str) -> None:
        """Reschedule through the batch endpoint, as drag-and-drop does"""
        await self.apply_overrides([OverrideItem(flow_id=flow_id, new_date_due=new_date)])

    async def apply_overrides(self, items: List[OverrideItem]) -> BatchOverrideResult:
        """POST a batch; the API applies it as one unit or rejects it"""
        response = await self._send(
            "POST",
            f"{self.scenario_url}/overrides/batch",
            {"overrides": [_override_payload(item) for item in items]},
            [item.flow_id for item in items],
        )
        try:
            data = response.json()
            return BatchOverrideResult(
                updated_count=data["updated_count"],
                overrides=[
                    OverrideItem(
                        flow_id=o["flow_id"],
                        new_date_due=o.get("new_date_due"),
                        new_amount_book_cents=o.get("new_amount_book_cents"),
                    )
                    for o in data["overrides"]
                ],
            )
        except (KeyError, ValueError, TypeError) as e:
            raise OverrideSubmitError(f"Invalid batch response from API: {e}") from e
