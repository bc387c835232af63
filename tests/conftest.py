"""Pytest fixtures for testing"""

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from cashflow_scenarios.api.main import create_app
from cashflow_scenarios.api.dependencies import get_scenario_repository
from cashflow_scenarios.domain.models import INFLOW, OUTFLOW, Transaction, WeeklyAggregate
from cashflow_scenarios.infrastructure.providers.api_provider import ApiDataProvider
from cashflow_scenarios.infrastructure.providers.local_provider import LocalDataProvider
from cashflow_scenarios.infrastructure.store.local_store import LocalScenarioStore
from cashflow_scenarios.infrastructure.store.scenario_repository import ScenarioRepository


def _txn(
    txn_id: str,
    amount: int,
    date_due: str,
    direction: str = INFLOW,
    is_initial_balance: bool = False,
) -> Transaction:
    return Transaction(
        id=txn_id,
        type="transaction",
        direction=direction,
        amount_book_cents=amount,
        date_due=date_due,
        counterparty="Counterparty",
        description="Payment",
        is_initial_balance=is_initial_balance,
    )


def _week(week_index: int, week_start_date, transactions) -> WeeklyAggregate:
    return WeeklyAggregate(
        week_index=week_index,
        week_label=f"W{week_index}",
        week_start_date=week_start_date,
        inflow_total_book_cents=sum(t.amount_book_cents for t in transactions if t.direction == INFLOW),
        outflow_total_book_cents=sum(t.amount_book_cents for t in transactions if t.direction == OUTFLOW),
        transactions=list(transactions),
    )


@pytest.fixture
def make_txn():
    """Factory for display transactions"""
    return _txn


@pytest.fixture
def make_week():
    """Factory for weekly aggregates"""
    return _week


@pytest.fixture
def sample_weeks() -> list[WeeklyAggregate]:
    """Initial balance week, two populated weeks and an empty one"""
    return [
        _week(0, None, [_txn("ib-1", 500000, "2026-01-05", is_initial_balance=True)]),
        _week(
            1,
            "2026-01-06",
            [
                _txn("tx-1", 20000, "2026-01-08"),
                _txn("tx-2", 5000, "2026-01-08", direction=OUTFLOW),
                _txn("tx-3", 7500, "2026-01-09", direction=OUTFLOW),
            ],
        ),
        _week(
            2,
            "2026-01-13",
            [
                _txn("tx-4", 30000, "2026-01-15"),
                _txn("tx-5", 10000, "2026-01-15", direction=OUTFLOW),
            ],
        ),
        _week(3, "2026-01-20", []),
    ]


@pytest.fixture
def repository() -> ScenarioRepository:
    """Fresh demo scenario repository"""
    return ScenarioRepository.demo()


@pytest.fixture
def app(repository: ScenarioRepository) -> FastAPI:
    """API application serving the test repository"""
    application = create_app()
    application.dependency_overrides[get_scenario_repository] = lambda: repository
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def api_provider(app: FastAPI) -> ApiDataProvider:
    """Remote provider talking to the in-process API"""
    return ApiDataProvider(
        company_id="demo-company",
        scenario_id=0,
        base_url="http://testserver",
        transport=httpx.ASGITransport(app=app),
    )


@pytest.fixture
def store_path(tmp_path) -> str:
    return str(tmp_path / "demo_scenario.json")


@pytest.fixture
def local_provider(store_path: str) -> LocalDataProvider:
    """Local provider backed by a temporary store file"""
    return LocalDataProvider(LocalScenarioStore(store_path, initial_balance_cents=100_000))
