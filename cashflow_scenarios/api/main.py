"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cashflow_scenarios.api.middleware import RequestContextMiddleware
from cashflow_scenarios.api.v1 import overrides, scenarios
from cashflow_scenarios.infrastructure.observability.logging import setup_logging
from cashflow_scenarios.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Cash-flow Scenarios API",
        description="Weekly aggregates, running balance and overrides for cash-flow scenarios",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(RequestContextMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(scenarios.router, prefix="/api", tags=["scenarios"])
    app.include_router(overrides.router, prefix="/api", tags=["overrides"])

    return app


app = create_app()
