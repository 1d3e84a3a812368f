"""High-level entry points for hosts of the engine.

Provides price_option(), evaluate_barrier_payoff(), generate_risk_matrix(),
run_backtest(), run_stress_test() and run_forecast(). Each takes data-model values
(percent rates and volatilities, as users enter them), wires the settings
through to the lower layers and either returns a result or raises a
HedgeEngineError subclass.
"""

import time

from fxhedge.backtest.engine import run_backtest as _run_backtest
from fxhedge.backtest.ingestion import parse_historical_data
from fxhedge.backtest.models import BacktestConfig, BacktestResult, HistoricalDataPoint
from fxhedge.backtest.stats import compute_monthly_stats
from fxhedge.backtest.stress import (
    StressScenario,
    StressTestResult,
    get_stress_scenario,
)
from fxhedge.backtest.stress import run_stress_test as _run_stress_test
from fxhedge.config import AppSettings
from fxhedge.exceptions import ValidationError
from fxhedge.forecast.engine import run_forecast as _run_forecast
from fxhedge.forecast.models import ForecastConfig, ForecastResult, RealRateSource
from fxhedge.logging import get_logger
from fxhedge.matrix.generator import generate_risk_matrix as _generate_risk_matrix
from fxhedge.matrix.models import RiskMatrixResult
from fxhedge.models import ForexParams, MatrixStrategy, PriceRange, StrategyComponent
from fxhedge.pricing import garman_kohlhagen
from fxhedge.pricing.barrier import evaluate_barrier_payoff as _evaluate_barrier_payoff
from fxhedge.pricing.rate_math import resolve_strike
from fxhedge.pricing.strategy import leg_vanilla_payoff

logger = get_logger(__name__)


def price_option(
    kind: str,
    spot: float,
    strike: float,
    params: ForexParams,
    volatility: float,
    time_to_maturity: float | None = None,
    settings: AppSettings | None = None,
) -> float:
    """Price a vanilla call or put from percent-unit inputs.

    Args:
        kind: "call" or "put".
        spot: Spot rate.
        strike: Absolute strike.
        params: Market parameters (percent rates).
        volatility: Volatility in percent.
        time_to_maturity: Years. Defaults to the horizon of params.
        settings: Application settings. Defaults to AppSettings().

    Returns:
        Premium per unit of foreign notional.
    """
    if settings is None:
        settings = AppSettings()
    if kind not in ("call", "put"):
        raise ValidationError(f"option kind must be 'call' or 'put', got {kind!r}")
    if time_to_maturity is None:
        time_to_maturity = params.time_to_maturity(settings.pricing.default_maturity_months)

    return garman_kohlhagen.price_option(
        kind,  # type: ignore[arg-type]
        spot,
        strike,
        params.r_d,
        params.r_f,
        time_to_maturity,
        volatility / 100,
    )


def evaluate_barrier_payoff(
    component: StrategyComponent,
    realized_rate: float,
    reference_spot: float,
    vanilla_payoff: float | None = None,
) -> float:
    """Evaluate one leg's payoff at a realized rate, barrier included.

    When vanilla_payoff is omitted it is derived from the leg's strike
    resolved against reference_spot.
    """
    if vanilla_payoff is None:
        strike = resolve_strike(component.strike, component.strike_type, reference_spot)
        vanilla_payoff = leg_vanilla_payoff(component, strike, realized_rate)
    return _evaluate_barrier_payoff(component, realized_rate, vanilla_payoff, reference_spot)


def generate_risk_matrix(
    strategies: list[MatrixStrategy],
    price_ranges: list[PriceRange],
    spot: float,
    params: ForexParams,
    settings: AppSettings | None = None,
) -> list[RiskMatrixResult]:
    """Generate the risk matrix with application settings applied."""
    if settings is None:
        settings = AppSettings()
    return _generate_risk_matrix(
        strategies,
        price_ranges,
        spot,
        params,
        settings=settings.matrix,
        pricing_settings=settings.pricing,
    )


def _as_points(
    data: str | list[HistoricalDataPoint], settings: AppSettings
) -> list[HistoricalDataPoint]:
    if isinstance(data, str):
        return parse_historical_data(
            data,
            decimal_comma=settings.ingestion.decimal_comma,
            skip_header=settings.ingestion.skip_header == "always",
        )
    return data


def run_backtest(
    config: BacktestConfig,
    data: str | list[HistoricalDataPoint],
    settings: AppSettings | None = None,
) -> BacktestResult:
    """Run a backtest over raw historical text or parsed data points.

    Args:
        config: Backtest configuration.
        data: Raw `YYYY-MM-DD,price` text or already parsed points.
        settings: Application settings. Defaults to AppSettings().

    Returns:
        BacktestResult with rows and summaries.
    """
    if settings is None:
        settings = AppSettings()

    start_time = time.monotonic()
    points = _as_points(data, settings)
    monthly_stats = compute_monthly_stats(points, settings.pricing)

    logger.info(
        "run_backtest_starting",
        points=len(points),
        months=len(monthly_stats),
        spot_rate=config.spot_rate,
        months_to_hedge=config.params.months_to_hedge,
    )

    result = _run_backtest(config, monthly_stats, settings.pricing)

    logger.info(
        "run_backtest_complete",
        periods=len(result.results),
        total_pnl=round(result.summary.total_pnl, 2),
        elapsed_seconds=round(time.monotonic() - start_time, 2),
    )
    return result


def run_stress_test(
    config: BacktestConfig,
    data: str | list[HistoricalDataPoint],
    scenario: StressScenario | str,
    settings: AppSettings | None = None,
) -> StressTestResult:
    """Run baseline and stressed backtests for a scenario (object or default key)."""
    if settings is None:
        settings = AppSettings()
    if isinstance(scenario, str):
        scenario = get_stress_scenario(scenario)

    points = _as_points(data, settings)
    monthly_stats = compute_monthly_stats(points, settings.pricing)
    return _run_stress_test(config, monthly_stats, scenario, settings.pricing)


def run_forecast(
    config: ForecastConfig,
    settings: AppSettings | None = None,
) -> ForecastResult:
    """Run a forward schedule settled at spot, simulated or pinned rates.

    Raises:
        ValidationError: If num_simulations exceeds the configured maximum.
    """
    if settings is None:
        settings = AppSettings()
    limit = settings.forecast.max_num_simulations
    if (
        config.real_rate_source is RealRateSource.SIMULATION
        and config.num_simulations > limit
    ):
        raise ValidationError(
            f"num_simulations must be at most {limit}, got {config.num_simulations}"
        )
    return _run_forecast(config, settings.pricing)
