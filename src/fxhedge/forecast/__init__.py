"""Forward-looking hedge schedules settled at spot, simulated or pinned rates."""

from fxhedge.forecast.engine import add_months, hedge_schedule, run_forecast
from fxhedge.forecast.models import ForecastConfig, ForecastResult, RealRateSource
from fxhedge.forecast.simulation import mean_simulated_rates, simulate_price_paths

__all__ = [
    "ForecastConfig",
    "ForecastResult",
    "RealRateSource",
    "add_months",
    "hedge_schedule",
    "mean_simulated_rates",
    "run_forecast",
    "simulate_price_paths",
]
