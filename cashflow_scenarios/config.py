"""Configuration management using Pydantic Settings"""

from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Data provider: "api" talks to the scenario API, "local" uses the demo store
    data_provider: Literal["api", "local"] = "local"

    # Scenario API
    api_base_url: str = "http://localhost:8000"
    company_id: Optional[str] = None
    scenario_id: Optional[int] = None

    # Local store (None keeps demo edits in memory only)
    local_store_path: Optional[str] = "./data/demo_scenario.json"

    # Running balance
    initial_balance_cents: int = 100_000

    # Service
    service_name: str = "cashflow-scenarios"
    log_level: str = "INFO"

    # HTTP Client
    http_timeout_seconds: float = 5.0


settings = Settings()
