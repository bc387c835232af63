"""Provider selection from explicit configuration"""

from cashflow_scenarios.config import Settings
from cashflow_scenarios.infrastructure.providers.api_provider import ApiDataProvider
from cashflow_scenarios.infrastructure.providers.base import ScenarioDataProvider
from cashflow_scenarios.infrastructure.providers.local_provider import LocalDataProvider
from cashflow_scenarios.infrastructure.store.local_store import LocalScenarioStore


def create_provider(config: Settings) -> ScenarioDataProvider:
    """
    Build the provider named by `config.data_provider`.

    The "api" provider needs both company_id and scenario_id.
    """
    if config.data_provider == "api":
        if not config.company_id or config.scenario_id is None:
            raise ValueError("company_id and scenario_id are required for the api data provider")
        return ApiDataProvider(
            company_id=config.company_id,
            scenario_id=config.scenario_id,
            base_url=config.api_base_url,
            timeout=config.http_timeout_seconds,
        )

    store = LocalScenarioStore(config.local_store_path, config.initial_balance_cents)
    return LocalDataProvider(store)
