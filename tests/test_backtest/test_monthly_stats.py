"""Tests for monthly bucketing of historical data."""

import math

import pytest

from fxhedge.backtest.ingestion import parse_historical_data
from fxhedge.backtest.models import HistoricalDataPoint
from fxhedge.backtest.stats import compute_monthly_stats


class TestComputeMonthlyStats:
    """Average price and annualized volatility per month."""

    def test_single_point_months(self, three_month_data: str) -> None:
        """Each month has one observation: avg equals it, volatility is None."""
        stats = compute_monthly_stats(parse_historical_data(three_month_data))
        assert [s.month for s in stats] == ["2023-01", "2023-02", "2023-03"]
        assert [s.avg_price for s in stats] == [1.10, 1.12, 1.08]
        assert all(s.volatility is None for s in stats)

    def test_average_and_volatility(self) -> None:
        points = [
            HistoricalDataPoint("2023-01-02", 1.00),
            HistoricalDataPoint("2023-01-03", 1.01),
            HistoricalDataPoint("2023-01-04", 0.99),
            HistoricalDataPoint("2023-02-01", 1.05),
        ]
        stats = compute_monthly_stats(points)
        january = stats[0]
        assert january.avg_price == pytest.approx(1.0)
        assert january.observations == 3

        returns = [math.log(1.01), math.log(0.99 / 1.01)]
        mean = sum(returns) / 2
        std = math.sqrt(sum((r - mean) ** 2 for r in returns))
        assert january.volatility == pytest.approx(std * math.sqrt(252))

    def test_unsorted_input(self) -> None:
        points = [
            HistoricalDataPoint("2023-02-01", 1.05),
            HistoricalDataPoint("2022-12-30", 1.02),
        ]
        assert [s.month for s in compute_monthly_stats(points)] == ["2022-12", "2023-02"]

    def test_empty(self) -> None:
        assert compute_monthly_stats([]) == []
