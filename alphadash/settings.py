"""Centralized application settings powered by Pydantic.

Environment matrix:

| Section  | Environment Variable              | Default                  | Purpose                                   |
|----------|-----------------------------------|--------------------------|-------------------------------------------|
| Data     | `DATA_SOURCE`                     | `local`                  | Dataset backend: local, blob or http      |
| Data     | `DATA_DIR`                        | `data`                   | Root folder for the local backend         |
| Data     | `DATA_CSV_FILE`                   | `dashboard_output.csv`   | Observation table file name               |
| Data     | `DATA_JSON_FILE`                  | `model.json`             | Model metadata file name                  |
| Data     | `PRICE_COLUMN`                    | `SBUX`                   | CSV column holding the instrument price   |
| Data     | `DATA_BASE_URL`                   | `None`                   | Base URL for the http backend             |
| Data     | `AZURE_STORAGE_CONNECTION_STRING` | `None`                   | Blob backend connection string            |
| Data     | `AZURE_STORAGE_ACCOUNT`           | `None`                   | Blob account when no connection string    |
| Data     | `AZURE_STORAGE_ACCOUNT_KEY`       | `None`                   | Blob account key                          |
| Data     | `AZURE_STORAGE_CONTAINER_NAME`    | `None`                   | Blob container holding the dataset        |
| Strategy | `BUY_THRESHOLD`                   | `0.03`                   | Default long entry threshold              |
| Strategy | `SELL_THRESHOLD`                  | `-0.03`                  | Default short entry threshold             |
| Strategy | `TRANSACTION_COST`                | `0.001`                  | Fractional cost per unit position change  |
| Strategy | `PERIODS_PER_YEAR`                | `52`                     | Annualization constant (weekly data)      |
| Sentry   | `SENTRY_DSN`                      | `None`                   | Sentry ingest DSN                         |
| Sentry   | `SENTRY_TRACES_SAMPLE_RATE`       | `0.0`                    | Fraction of transactions to trace         |
| Sentry   | `SENTRY_ENVIRONMENT`              | `None`                   | Deployment environment label              |

The settings objects source environment variables when instantiated and are
intended to be treated as read-only.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class _SettingsBase(BaseSettings):
    """Common configuration for BaseSettings subclasses."""

    model_config = SettingsConfigDict(
        env_prefix="",
        populate_by_name=True,
        extra="ignore",
        case_sensitive=True,
        frozen=True,
    )


class DataSourceSettings(_SettingsBase):
    """Where the dataset CSV and model metadata JSON are read from."""

    source: Literal["local", "blob", "http"] = Field(
        default="local", alias="DATA_SOURCE"
    )
    data_dir: str = Field(default="data", alias="DATA_DIR")
    csv_file: str = Field(default="dashboard_output.csv", alias="DATA_CSV_FILE")
    json_file: str = Field(default="model.json", alias="DATA_JSON_FILE")
    price_column: str = Field(default="SBUX", alias="PRICE_COLUMN")
    base_url: str | None = Field(default=None, alias="DATA_BASE_URL")
    blob_connection_string: str | None = Field(
        default=None, alias="AZURE_STORAGE_CONNECTION_STRING"
    )
    blob_account: str | None = Field(default=None, alias="AZURE_STORAGE_ACCOUNT")
    blob_key: str | None = Field(default=None, alias="AZURE_STORAGE_ACCOUNT_KEY")
    blob_container: str | None = Field(
        default=None, alias="AZURE_STORAGE_CONTAINER_NAME"
    )

    @field_validator("source", mode="before")
    @classmethod
    def _normalize_source(cls, value: str | None) -> str:
        if value in (None, ""):
            return "local"
        return str(value).strip().lower()

    @computed_field
    @property
    def blob_configured(self) -> bool:
        has_credentials = bool(self.blob_connection_string) or bool(
            self.blob_account and self.blob_key
        )
        return has_credentials and bool(self.blob_container)


class StrategySettings(_SettingsBase):
    """Default strategy parameters and the annualization constant."""

    buy_threshold: float = Field(default=0.03, alias="BUY_THRESHOLD")
    sell_threshold: float = Field(default=-0.03, alias="SELL_THRESHOLD")
    transaction_cost: float = Field(default=0.001, alias="TRANSACTION_COST")
    periods_per_year: int = Field(default=52, alias="PERIODS_PER_YEAR")

    @field_validator("periods_per_year", mode="before")
    @classmethod
    def _coerce_periods(cls, value: int | str | None) -> int:
        if value in (None, ""):
            return 52
        try:
            periods = int(value)
        except (TypeError, ValueError):
            return 52
        return periods if periods > 0 else 52


class SentrySettings(_SettingsBase):
    """Sentry SDK configuration."""

    dsn: str | None = Field(default=None, alias="SENTRY_DSN")
    traces_sample_rate: float = Field(default=0.0, alias="SENTRY_TRACES_SAMPLE_RATE")
    environment: str | None = Field(default=None, alias="SENTRY_ENVIRONMENT")

    @computed_field
    @property
    def enabled(self) -> bool:
        return bool(self.dsn)


class Settings(BaseModel):
    """Aggregate accessor for domain-specific settings."""

    data: DataSourceSettings = Field(default_factory=DataSourceSettings)
    strategy: StrategySettings = Field(default_factory=StrategySettings)
    sentry: SentrySettings = Field(default_factory=SentrySettings)

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }


def get_settings() -> Settings:
    """Instantiate settings from the current environment."""
    return Settings()


def reload_settings() -> Settings:
    """Alias for get_settings to maintain a consistent API."""
    return get_settings()


def get_data_settings() -> DataSourceSettings:
    return get_settings().data


def get_strategy_settings() -> StrategySettings:
    return get_settings().strategy


def get_sentry_settings() -> SentrySettings:
    return get_settings().sentry


__all__ = [
    "Settings",
    "get_settings",
    "reload_settings",
    "get_data_settings",
    "get_strategy_settings",
    "get_sentry_settings",
    "DataSourceSettings",
    "StrategySettings",
    "SentrySettings",
]
