"""Forecast driver: settle a hedge over a schedule of future months.

1. Schedule months_to_hedge dates, one month apart, from start_date
2. time_to_maturity = days since start_date / 365.25 + 1 day
3. Real rate from spot or the simulated mean, unless overridden
4. Forward from interest-rate parity, unless overridden
5. Premium priced with that month's implied volatility when one is set

Rows and summaries share the backtest's ForexResult layout.
"""

import calendar
import time
from datetime import date

import numpy as np

from fxhedge.backtest.engine import (
    DAYS_PER_YEAR,
    period_result,
    summarize_by_year,
    summarize_totals,
)
from fxhedge.config import PricingSettings
from fxhedge.exceptions import ConfigurationError
from fxhedge.forecast.models import ForecastConfig, ForecastResult, RealRateSource
from fxhedge.forecast.simulation import mean_simulated_rates
from fxhedge.logging import get_logger
from fxhedge.pricing.garman_kohlhagen import forward_rate
from fxhedge.pricing.rate_math import month_key
from fxhedge.pricing.strategy import aggregate

logger = get_logger(__name__)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month's end."""
    index = start.month - 1 + months
    year, month = start.year + index // 12, index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def hedge_schedule(start: date, months: int) -> list[date]:
    """Settlement dates: start and the following months - 1 monthly dates."""
    return [add_months(start, i) for i in range(months)]


def run_forecast(
    config: ForecastConfig,
    settings: PricingSettings | None = None,
    rng: np.random.Generator | None = None,
) -> ForecastResult:
    """Run the hedging strategy over a forward schedule.

    Args:
        config: Forecast configuration.
        settings: Pricing settings (forward compounding, default horizon).
        rng: Random generator for the simulation source. Defaults to
            np.random.default_rng(config.seed).

    Returns:
        ForecastResult with one ForexResult per scheduled month.

    Raises:
        ConfigurationError: If the schedule is empty.
    """
    if settings is None:
        settings = PricingSettings()

    params = config.params
    months = params.months_to_hedge or settings.default_maturity_months
    if months <= 0:
        raise ConfigurationError(f"Forecast needs at least one month, got {months}")

    start = date.fromisoformat(config.start_date)
    dates = hedge_schedule(start, months)
    elapsed = [(d - start).days / DAYS_PER_YEAR for d in dates]

    start_time = time.monotonic()
    logger.info(
        "forecast_starting",
        months=months,
        start_date=config.start_date,
        source=config.real_rate_source.value,
        legs=len(config.components),
        overridden_months=len(
            set(config.manual_forwards)
            | set(config.manual_real_rates)
            | set(config.custom_volumes)
            | set(config.implied_volatilities)
        ),
    )

    simulated: list[float] = []
    if config.real_rate_source is RealRateSource.SIMULATION:
        if rng is None:
            rng = np.random.default_rng(config.seed)
        simulated = mean_simulated_rates(
            config.spot_rate,
            params.r_d - params.r_f,
            config.simulation_volatility / 100,
            elapsed,
            config.num_simulations,
            rng,
        )
        base_rates = simulated
    else:
        base_rates = [config.spot_rate] * months

    even_volume = config.total_volume / months
    results = []
    for period_date, years, base_rate in zip(dates, elapsed, base_rates):
        key = month_key(period_date)
        t = years + 1 / DAYS_PER_YEAR

        forward = config.manual_forwards.get(key)
        if forward is None:
            forward = forward_rate(
                config.spot_rate, params.r_d, params.r_f, t, settings.forward_compounding
            )

        strategy = aggregate(
            config.components,
            config.spot_rate,
            params,
            config.coverage_ratio,
            time_to_maturity=t,
            volatility_override=config.implied_volatilities.get(key),
            reference_spot=config.reference_spot,
            settings=settings,
        )
        results.append(
            period_result(
                period_date,
                t,
                forward,
                config.manual_real_rates.get(key, base_rate),
                config.custom_volumes.get(key, even_volume),
                strategy,
            )
        )

    result = ForecastResult(
        config=config,
        results=results,
        yearly=summarize_by_year(results),
        summary=summarize_totals(results),
        simulated_rates=simulated,
    )

    logger.info(
        "forecast_complete",
        periods=len(results),
        total_pnl=round(result.summary.total_pnl, 2),
        average_effective_rate=round(result.summary.average_effective_rate, 6),
        elapsed_seconds=round(time.monotonic() - start_time, 4),
    )
    return result
