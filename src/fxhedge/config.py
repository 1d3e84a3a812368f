"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Option pricing and rate-math parameters."""

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    trading_days_per_year: int = Field(default=252, gt=0)  # volatility annualization
    default_maturity_months: int = Field(default=1, gt=0)  # used when months_to_hedge == 0
    forward_compounding: Literal["continuous", "simple"] = "continuous"


class MatrixSettings(BaseSettings):
    """Risk matrix generation parameters."""

    model_config = SettingsConfigDict(env_prefix="MATRIX_")

    probability_tolerance: float = Field(default=0.01, ge=0)  # percentage points
    default_coverage_ratio: float = 100.0


class IngestionSettings(BaseSettings):
    """Historical rate ingestion parameters.

    Locale handling is explicit configuration: set decimal_comma for
    exports that write 1,0850 instead of 1.0850.
    """

    model_config = SettingsConfigDict(env_prefix="INGEST_")

    decimal_comma: bool = False
    skip_header: Literal["auto", "always", "never"] = "auto"


class BacktestSettings(BaseSettings):
    """Historical backtest defaults.

    Controls the notional and the fallback leg volatility used when a
    request leaves them out. All fields configurable via BACKTEST_ prefix.
    """

    model_config = SettingsConfigDict(env_prefix="BACKTEST_")

    default_total_volume: float = Field(default=1_000_000.0, gt=0)
    default_volatility: float = Field(default=15.0, ge=0)  # percent


class ForecastSettings(BaseSettings):
    """Forward schedule and Monte-Carlo defaults."""

    model_config = SettingsConfigDict(env_prefix="FORECAST_")

    default_num_simulations: int = Field(default=1000, gt=0)
    max_num_simulations: int = Field(default=100_000, gt=0)  # per request


class ServiceSettings(BaseSettings):
    """HTTP service configuration."""

    model_config = SettingsConfigDict(env_prefix="SERVICE_")

    host: str = "127.0.0.1"
    port: int = 8080
    enabled: bool = True


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"  # LOG_FORMAT
    pricing: PricingSettings = PricingSettings()
    matrix: MatrixSettings = MatrixSettings()
    ingestion: IngestionSettings = IngestionSettings()
    backtest: BacktestSettings = BacktestSettings()
    forecast: ForecastSettings = ForecastSettings()
    service: ServiceSettings = ServiceSettings()
