"""Numeric helpers shared by the pricer, the matrix and the backtest.

Pure functions only: strike/barrier resolution against a reference spot,
month bucketing keys, and the log-return volatility estimator used to
seed strategy legs with realized volatility.
"""

import math
from datetime import date

from fxhedge.models import StrikeType

#: Trading days used to annualize daily log-return volatility.
TRADING_DAYS_PER_YEAR = 252


def resolve_strike(value: float, strike_type: StrikeType | str, spot: float) -> float:
    """Convert a strike or barrier quote into an absolute rate.

    Args:
        value: Quoted level.
        strike_type: "percent" (of spot) or "absolute".
        spot: Reference spot rate for percent quotes.

    Returns:
        Absolute level: ``spot * value / 100`` for percent quotes,
        ``value`` unchanged for absolute quotes.
    """
    if StrikeType(strike_type) is StrikeType.PERCENT:
        return spot * value / 100
    return value


def month_key(value: str | date) -> str:
    """Return the "YYYY-MM" bucket key of an ISO date string or date."""
    if isinstance(value, date):
        return value.strftime("%Y-%m")
    return value[:7]


def annualized_volatility(
    prices: list[float],
    trading_days: int = TRADING_DAYS_PER_YEAR,
) -> float | None:
    """Compute annualized historical volatility from an ordered price series.

    Log returns ln(p[i] / p[i-1]) are taken between consecutive prices,
    their sample standard deviation (N-1 denominator) is scaled by
    sqrt(trading_days).

    Args:
        prices: Prices ordered oldest-first. Must be positive.
        trading_days: Annualization factor in periods per year.

    Returns:
        Annualized volatility as a decimal fraction (0.10 = 10%), 0.0 for
        a constant series or a single return, None if fewer than 2 prices.
    """
    if len(prices) < 2:
        return None

    returns = [math.log(prices[i] / prices[i - 1]) for i in range(1, len(prices))]
    if len(returns) < 2:
        return 0.0

    n = len(returns)
    mean = sum(returns) / n
    variance = sum((r - mean) ** 2 for r in returns) / (n - 1)
    return math.sqrt(variance) * math.sqrt(trading_days)
