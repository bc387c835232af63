"""GET scenario, weekly aggregates, running balance and export; POST lock"""

from dataclasses import asdict
from datetime import date
from fastapi import APIRouter, Depends
from starlette.responses import Response

from cashflow_scenarios.api.dependencies import get_scenario_repository, http_error
from cashflow_scenarios.api.v1.schemas import (
    RunningBalanceItem,
    RunningBalanceResponse,
    ScenarioResponse,
    WeekAggregateSchema,
    WeeklyAggregatesResponse,
)
from cashflow_scenarios.domain.exceptions import DomainException
from cashflow_scenarios.infrastructure.export.workbook import XLSX_MEDIA_TYPE, build_scenario_workbook, export_filename
from cashflow_scenarios.infrastructure.store.scenario_repository import ScenarioRepository

router = APIRouter()

SCENARIO_PATH = "/companies/{company_id}/scenarios/{scenario_id}"


@router.get(SCENARIO_PATH, response_model=ScenarioResponse)
def get_scenario(
    company_id: str,
    scenario_id: int,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """Retrieve scenario metadata"""
    try:
        scenario = repo.get_scenario(company_id, scenario_id)
    except DomainException as e:
        raise http_error(e)
    return ScenarioResponse(**asdict(scenario))


@router.get(f"{SCENARIO_PATH}/weekly-aggregates", response_model=WeeklyAggregatesResponse)
def get_weekly_aggregates(
    company_id: str,
    scenario_id: int,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """
    Weekly buckets with overrides applied.

    Returns:
        Week 0 (Initial Balance) plus one entry per week holding transactions,
        each with top-5 inflows/outflows and the "other" remainder
    """
    try:
        scenario = repo.get_scenario(company_id, scenario_id)
        weeks = repo.get_weekly_aggregates(company_id, scenario_id)
    except DomainException as e:
        raise http_error(e)

    return WeeklyAggregatesResponse(
        scenario_id=scenario_id,
        base_currency=scenario.base_currency,
        weeks=[WeekAggregateSchema(**asdict(week)) for week in weeks],
    )


@router.get(f"{SCENARIO_PATH}/running-balance", response_model=RunningBalanceResponse)
def get_running_balance(
    company_id: str,
    scenario_id: int,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """Daily delta and cumulative balance in cents"""
    try:
        scenario = repo.get_scenario(company_id, scenario_id)
        balances = repo.get_running_balance(company_id, scenario_id)
    except DomainException as e:
        raise http_error(e)

    return RunningBalanceResponse(
        scenario_id=scenario_id,
        base_currency=scenario.base_currency,
        balances=[RunningBalanceItem(**asdict(b)) for b in balances],
    )


@router.post(f"{SCENARIO_PATH}/lock", response_model=ScenarioResponse)
def lock_scenario(
    company_id: str,
    scenario_id: int,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """Lock a Draft scenario; overrides are rejected afterwards"""
    try:
        scenario = repo.lock(company_id, scenario_id)
    except DomainException as e:
        raise http_error(e)
    return ScenarioResponse(**asdict(scenario))


@router.get(f"{SCENARIO_PATH}/export")
def export_scenario(
    company_id: str,
    scenario_id: int,
    include_running_balance: bool = True,
    repo: ScenarioRepository = Depends(get_scenario_repository),
):
    """
    Download a Locked scenario as an Excel workbook.

    Sheets: weekly summary, transaction detail and, unless
    include_running_balance is false, the daily running balance.
    """
    try:
        scenario = repo.get_scenario(company_id, scenario_id)
        rows = repo.export_transactions(company_id, scenario_id)
        weeks = repo.get_weekly_aggregates(company_id, scenario_id)
        balances = repo.get_running_balance(company_id, scenario_id) if include_running_balance else None
    except DomainException as e:
        raise http_error(e)

    content = build_scenario_workbook(scenario, weeks, rows, balances)
    filename = export_filename(scenario, date.today())
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
