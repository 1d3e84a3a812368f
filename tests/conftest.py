"""Shared test fixtures for the FX hedging engine."""

import pytest

from fxhedge.config import AppSettings, IngestionSettings, MatrixSettings, PricingSettings
from fxhedge.models import ComponentType, ForexParams, StrategyComponent, StrikeType


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults (no .env influence on tested fields)."""
    return AppSettings(
        log_level="DEBUG",
        pricing=PricingSettings(
            trading_days_per_year=252,
            default_maturity_months=1,
            forward_compounding="continuous",
        ),
        matrix=MatrixSettings(probability_tolerance=0.01, default_coverage_ratio=100.0),
        ingestion=IngestionSettings(decimal_comma=False, skip_header="auto"),
    )


@pytest.fixture
def params() -> ForexParams:
    """EUR/USD-like market: 5% domestic, 3% foreign, 12-month horizon."""
    return ForexParams(domestic_rate=5.0, foreign_rate=3.0, months_to_hedge=12)


@pytest.fixture
def atm_call() -> StrategyComponent:
    """At-the-money call, 10% volatility, full quantity."""
    return StrategyComponent(
        type=ComponentType.CALL,
        strike=100.0,
        strike_type=StrikeType.PERCENT,
        volatility=10.0,
        quantity=100.0,
    )


@pytest.fixture
def otm_put() -> StrategyComponent:
    """95% put, 10% volatility, full quantity."""
    return StrategyComponent(
        type=ComponentType.PUT,
        strike=95.0,
        strike_type=StrikeType.PERCENT,
        volatility=10.0,
        quantity=100.0,
    )


@pytest.fixture
def three_month_data() -> str:
    """Three monthly observations, one per month."""
    return "2023-01-01,1.10\n2023-02-01,1.12\n2023-03-01,1.08\n"
