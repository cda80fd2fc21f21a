"""Report settings, read from TOUR_UNLOAD_* environment variables or .env."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReportSettings(BaseSettings):
    # Feed exports
    data_dir: Path = Field(default=Path("data"))
    stock_feed_file: str = "sales_rep_stock.json"
    sales_reps_file: str = "sales_reps.json"

    # Printout header
    company_name: str = "Company"
    company_address: str = ""
    company_phone: str = ""
    generated_by: str = "Admin"
    include_only_counted: bool = True

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TOUR_UNLOAD_",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def company(self) -> dict[str, str]:
        return {
            "name": self.company_name,
            "address": self.company_address,
            "phone": self.company_phone,
        }


@lru_cache
def get_settings() -> ReportSettings:
    return ReportSettings()
