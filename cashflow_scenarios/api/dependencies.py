"""Dependency injection for FastAPI endpoints"""

from fastapi import HTTPException, Request
from cashflow_scenarios.domain.exceptions import DomainException
from cashflow_scenarios.infrastructure.store.scenario_repository import ScenarioRepository

_repository = ScenarioRepository.demo()

_STATUS_BY_KIND = {
    "validation": 400,
    "forbidden": 403,
    "not_found": 404,
    "conflict": 409,
}


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_scenario_repository() -> ScenarioRepository:
    """Provide the scenario repository served by this process"""
    return _repository


def http_error(error: DomainException) -> HTTPException:
    """Map a domain error to an HTTP error carrying its kind and message"""
    status_code = _STATUS_BY_KIND.get(error.kind, 500)
    return HTTPException(status_code=status_code, detail={"code": error.kind, "message": str(error)})
