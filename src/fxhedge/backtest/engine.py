"""Historical backtest driver.

Treats every month of the historical series as one hedging period and
re-uses the strategy aggregator with that month's maturity:

1. Select months (from start_date, capped at params.months_to_hedge)
2. Date each period on the first day of its month
3. time_to_maturity = days since the first period / 365.25 + 1 day
4. Forward rate from interest-rate parity, real rate = month average
5. Premium and payoff per unit from the aggregator, scaled by volume

Each period is computed from its own inputs only; results keep the
chronological order of the input months.
"""

import math
import time
from collections import OrderedDict
from datetime import date

from fxhedge.backtest.models import (
    BacktestConfig,
    BacktestResult,
    BacktestSummary,
    ForexResult,
    MonthlyStats,
    YearlySummary,
)
from fxhedge.config import PricingSettings
from fxhedge.exceptions import ConfigurationError
from fxhedge.logging import get_logger
from fxhedge.pricing.garman_kohlhagen import forward_rate
from fxhedge.pricing.rate_math import month_key
from fxhedge.pricing.strategy import AggregatedStrategy, aggregate

logger = get_logger(__name__)

DAYS_PER_YEAR = 365.25

# A realized-vol estimate needs at least two log returns
MIN_VOLATILITY_OBSERVATIONS = 3


def _first_of_month(month: str) -> date:
    year, mon = month.split("-")
    return date(int(year), int(mon), 1)


def select_months(config: BacktestConfig, monthly_stats: list[MonthlyStats]) -> list[MonthlyStats]:
    """Pick the months a backtest covers, in chronological order."""
    months = sorted(monthly_stats, key=lambda s: s.month)
    if config.start_date:
        first = month_key(config.start_date)
        months = [m for m in months if m.month >= first]

    requested = config.params.months_to_hedge
    if requested > 0:
        if len(months) < requested:
            logger.warning(
                "backtest_months_truncated",
                requested=requested,
                available=len(months),
            )
        months = months[:requested]
    return months


def period_result(
    period_date: date,
    time_to_maturity: float,
    forward: float,
    real_rate: float,
    monthly_volume: float,
    strategy: AggregatedStrategy,
) -> ForexResult:
    """Settle one period's volume at real_rate under a priced strategy."""
    premium = strategy.premium_per_unit
    payoff = strategy.payoff_given_rate(real_rate)

    unhedged_revenue = monthly_volume * real_rate
    premium_paid = monthly_volume * premium
    payoff_from_hedge = monthly_volume * payoff

    return ForexResult(
        date=period_date.isoformat(),
        time_to_maturity=time_to_maturity,
        forward_rate=forward,
        real_rate=real_rate,
        monthly_volume=monthly_volume,
        premium_paid=premium_paid,
        payoff_from_hedge=payoff_from_hedge,
        hedged_revenue=unhedged_revenue + payoff_from_hedge - premium_paid,
        unhedged_revenue=unhedged_revenue,
        pnl_vs_unhedged=payoff_from_hedge - premium_paid,
        effective_rate=real_rate + payoff - premium,
        strategy_price=premium,
        total_payoff=payoff,
        leg_premiums=strategy.weighted_leg_premiums(),
    )


def run_backtest(
    config: BacktestConfig,
    monthly_stats: list[MonthlyStats],
    settings: PricingSettings | None = None,
) -> BacktestResult:
    """Run the hedging strategy over historical monthly data.

    Args:
        config: Backtest configuration.
        monthly_stats: Monthly aggregates of the historical series.
        settings: Pricing settings (forward compounding, default maturity).

    Returns:
        BacktestResult with one ForexResult per month plus summaries.

    Raises:
        ConfigurationError: If no month is available to backtest.
    """
    if settings is None:
        settings = PricingSettings()

    months = select_months(config, monthly_stats)
    if not months:
        raise ConfigurationError("No historical months available for the backtest")

    start_time = time.monotonic()
    logger.info(
        "backtest_starting",
        months=len(months),
        first_month=months[0].month,
        legs=len(config.components),
        total_volume=config.total_volume,
    )

    params = config.params
    divisor = params.months_to_hedge if params.months_to_hedge > 0 else len(months)
    monthly_volume = config.total_volume / divisor
    first_date = _first_of_month(months[0].month)

    results: list[ForexResult] = []
    for stats in months:
        period_date = _first_of_month(stats.month)
        t = (period_date - first_date).days / DAYS_PER_YEAR + 1 / DAYS_PER_YEAR

        volatility_override = None
        if (
            config.use_historical_volatility
            and stats.volatility is not None
            and stats.observations >= MIN_VOLATILITY_OBSERVATIONS
        ):
            volatility_override = stats.volatility * 100

        strategy = aggregate(
            config.components,
            config.spot_rate,
            params,
            config.coverage_ratio,
            time_to_maturity=t,
            volatility_override=volatility_override,
            reference_spot=config.reference_spot,
            settings=settings,
        )

        results.append(
            period_result(
                period_date,
                t,
                forward_rate(
                    config.spot_rate, params.r_d, params.r_f, t, settings.forward_compounding
                ),
                stats.avg_price,
                monthly_volume,
                strategy,
            )
        )

    result = BacktestResult(
        config=config,
        results=results,
        yearly=summarize_by_year(results),
        summary=summarize_totals(results),
    )

    logger.info(
        "backtest_complete",
        periods=len(results),
        total_pnl=round(result.summary.total_pnl, 2),
        average_effective_rate=round(result.summary.average_effective_rate, 6),
        elapsed_seconds=round(time.monotonic() - start_time, 4),
    )
    return result


def summarize_by_year(results: list[ForexResult]) -> dict[str, YearlySummary]:
    """Aggregate ForexResults by calendar year.

    cost_reduction_percent is (unhedged - hedged) / unhedged * 100, and 0
    when the year's unhedged revenue is 0.
    """
    grouped: OrderedDict[str, list[ForexResult]] = OrderedDict()
    for row in sorted(results, key=lambda r: r.date):
        grouped.setdefault(row.year, []).append(row)

    summaries = {}
    for year, rows in grouped.items():
        hedged = math.fsum(r.hedged_revenue for r in rows)
        unhedged = math.fsum(r.unhedged_revenue for r in rows)
        summaries[year] = YearlySummary(
            year=year,
            hedged_revenue=hedged,
            unhedged_revenue=unhedged,
            total_pnl=math.fsum(r.pnl_vs_unhedged for r in rows),
            total_premium=math.fsum(r.premium_paid for r in rows),
            total_volume=math.fsum(r.monthly_volume for r in rows),
            cost_reduction_percent=(
                (unhedged - hedged) / unhedged * 100 if unhedged != 0 else 0.0
            ),
            months=len(rows),
        )
    return summaries


def summarize_totals(results: list[ForexResult]) -> BacktestSummary:
    """Totals across all periods, with a volume-weighted average effective rate."""
    if not results:
        return BacktestSummary()

    total_volume = math.fsum(r.monthly_volume for r in results)
    total_pnl = math.fsum(r.pnl_vs_unhedged for r in results)
    if total_volume != 0:
        average_effective_rate = (
            math.fsum(r.effective_rate * r.monthly_volume for r in results) / total_volume
        )
        average_pnl_per_unit = total_pnl / total_volume
    else:
        average_effective_rate = math.fsum(r.effective_rate for r in results) / len(results)
        average_pnl_per_unit = 0.0

    return BacktestSummary(
        total_premium=math.fsum(r.premium_paid for r in results),
        total_payoff=math.fsum(r.payoff_from_hedge for r in results),
        total_pnl=total_pnl,
        hedged_revenue=math.fsum(r.hedged_revenue for r in results),
        unhedged_revenue=math.fsum(r.unhedged_revenue for r in results),
        total_volume=total_volume,
        average_effective_rate=average_effective_rate,
        average_pnl_per_unit=average_pnl_per_unit,
        periods=len(results),
    )
