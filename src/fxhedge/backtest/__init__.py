"""Historical backtest package.

Ingests a raw rate series, buckets it into monthly statistics and replays a
hedging strategy month by month. Includes CSV export of the result rows and
stress testing under shocked market parameters.
"""

from fxhedge.backtest.engine import run_backtest, summarize_by_year, summarize_totals
from fxhedge.backtest.export import export_results_csv, write_results_csv
from fxhedge.backtest.ingestion import load_historical_csv, parse_historical_data
from fxhedge.backtest.models import (
    BacktestConfig,
    BacktestResult,
    BacktestSummary,
    ForexResult,
    HistoricalDataPoint,
    MonthlyStats,
    YearlySummary,
)
from fxhedge.backtest.stats import compute_monthly_stats
from fxhedge.backtest.stress import (
    DEFAULT_STRESS_SCENARIOS,
    StressScenario,
    StressTestResult,
    apply_stress_scenario,
    run_stress_test,
)

__all__ = [
    "BacktestConfig",
    "BacktestResult",
    "BacktestSummary",
    "DEFAULT_STRESS_SCENARIOS",
    "ForexResult",
    "HistoricalDataPoint",
    "MonthlyStats",
    "StressScenario",
    "StressTestResult",
    "YearlySummary",
    "apply_stress_scenario",
    "compute_monthly_stats",
    "export_results_csv",
    "load_historical_csv",
    "parse_historical_data",
    "run_backtest",
    "run_stress_test",
    "summarize_by_year",
    "summarize_totals",
    "write_results_csv",
]
