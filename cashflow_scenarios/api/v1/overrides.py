"""PUT /overrides/{flow_id} and POST /overrides/batch"""

import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends, Request

from cashflow_scenarios.api.dependencies import get_request_id, get_scenario_repository, http_error
from cashflow_scenarios.api.v1.scenarios import SCENARIO_PATH
from cashflow_scenarios.api.v1.schemas import (
    BatchOverrideResult,
    BatchUpdateOverridesRequest,
    BatchUpdateOverridesResponse,
    OverrideResponse,
    UpsertOverrideRequest,
)
from cashflow_scenarios.domain.exceptions import DomainException
from cashflow_scenarios.infrastructure.observability.logging import log_override
from cashflow_scenarios.infrastructure.observability.metrics import record_override
from cashflow_scenarios.infrastructure.store.scenario_repository import ScenarioRepository

router = APIRouter()


@router.put(f"{SCENARIO_PATH}/overrides/{{flow_id}}", response_model=OverrideResponse)
def upsert_override(
    company_id: str,
    scenario_id: int,
    flow_id: str,
    request_body: UpsertOverrideRequest,
    request: Request,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """Create or update the override of one transaction"""
    request_id = get_request_id(request)
    try:
        override = repo.upsert_override(company_id, scenario_id, flow_id, request_body.changes())
    except DomainException as e:
        record_override("server", applied=False)
        logging.warning(f"Override rejected: {e}", extra={"request_id": request_id, "kind": e.kind})
        raise http_error(e)

    record_override("server", applied=True)
    log_override("server", scenario_id, [flow_id], "applied")
    return OverrideResponse(**asdict(override))


@router.post(f"{SCENARIO_PATH}/overrides/batch", response_model=BatchUpdateOverridesResponse)
def batch_update_overrides(
    company_id: str,
    scenario_id: int,
    request_body: BatchUpdateOverridesRequest,
    request: Request,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """
    Batch upsert overrides, used by drag-and-drop moves.

    The batch is applied as one unit: any unknown flow_id rejects all items.
    """
    request_id = get_request_id(request)
    items = [(item.flow_id, item.changes()) for item in request_body.overrides]
    flow_ids = [flow_id for flow_id, _ in items]

    try:
        overrides = repo.batch_upsert_overrides(company_id, scenario_id, items)
    except DomainException as e:
        record_override("server", applied=False, count=len(items))
        logging.warning(f"Batch override rejected: {e}", extra={"request_id": request_id, "kind": e.kind})
        raise http_error(e)

    record_override("server", applied=True, count=len(overrides))
    log_override("server", scenario_id, flow_ids, "applied")

    return BatchUpdateOverridesResponse(
        updated_count=len(overrides),
        overrides=[
            BatchOverrideResult(
                flow_id=o.flow_id,
                new_date_due=o.new_date_due,
                new_amount_book_cents=o.new_amount_book_cents,
            )
            for o in overrides
        ],
    )
