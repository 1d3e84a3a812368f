"""Monthly bucketing of a historical series."""

from collections import defaultdict

from fxhedge.backtest.models import HistoricalDataPoint, MonthlyStats
from fxhedge.config import PricingSettings
from fxhedge.pricing.rate_math import annualized_volatility, month_key


def compute_monthly_stats(
    points: list[HistoricalDataPoint],
    settings: PricingSettings | None = None,
) -> list[MonthlyStats]:
    """Bucket observations by month and compute average price and volatility.

    Args:
        points: Observations, any order.
        settings: Pricing settings (volatility annualization factor).

    Returns:
        MonthlyStats in chronological order. Months with a single
        observation carry volatility None.
    """
    if settings is None:
        settings = PricingSettings()

    buckets: dict[str, list[float]] = defaultdict(list)
    for point in sorted(points, key=lambda p: p.date):
        buckets[month_key(point.date)].append(point.price)

    return [
        MonthlyStats(
            month=month,
            avg_price=sum(prices) / len(prices),
            volatility=annualized_volatility(prices, settings.trading_days_per_year),
            observations=len(prices),
        )
        for month, prices in sorted(buckets.items())
    ]
