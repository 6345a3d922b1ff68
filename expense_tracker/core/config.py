from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from expense_tracker.models.constants import CURRENCY_TABLE


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, BASE_CURRENCY, STRICT_CURRENCY, SEED_DEMO_DATA).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Expense Tracker"
    debug: bool = True
    version: str = "1.0.0"
    environment: str = "development"

    # Currency handling
    base_currency: str = "USD"
    # When False, unknown currency codes fall back to rate 1 / bare numbers
    strict_currency: bool = True

    # In-memory ledger
    seed_demo_data: bool = True

    # Export
    export_base_name: str = "all_expenses"

    # Hosting platform metadata surfaced by the detailed health check
    deployment_region: str = "unknown"
    deployment_id: str = "local"
    git_commit: Optional[str] = None

    def init_post_load(self) -> None:
        """Normalize and validate derived fields."""
        self.base_currency = self.base_currency.upper()
        if self.base_currency not in CURRENCY_TABLE:
            raise ValueError(
                f"Unsupported base_currency '{self.base_currency}'. Allowed: {set(CURRENCY_TABLE)}"
            )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
