"""Stress testing: re-run a backtest under shocked market parameters.

A scenario shocks the spot rate, the interest-rate differential and the
leg volatility. Shocks are decimals: rate_shock=-0.05 moves the spot 5%
down, rate_differential_shock=0.01 widens (r_d - r_f) by 100 bp.
"""

from __future__ import annotations

from dataclasses import dataclass

from fxhedge.backtest.engine import run_backtest
from fxhedge.backtest.models import BacktestConfig, BacktestResult, MonthlyStats
from fxhedge.config import PricingSettings
from fxhedge.exceptions import ConfigurationError
from fxhedge.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StressScenario:
    """Market shock applied on top of a backtest configuration.

    Attributes:
        name: Display name.
        description: One-line explanation.
        volatility: Leg volatility as a decimal; 0 keeps the legs' own.
        rate_shock: Relative spot shock.
        rate_differential_shock: Shift of (r_d - r_f), decimal.
    """

    name: str
    description: str
    volatility: float
    rate_shock: float
    rate_differential_shock: float = 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "volatility": self.volatility,
            "rate_shock": self.rate_shock,
            "rate_differential_shock": self.rate_differential_shock,
        }


DEFAULT_STRESS_SCENARIOS: dict[str, StressScenario] = {
    "base": StressScenario(
        name="Base Case",
        description="Normal market conditions",
        volatility=0.10,
        rate_shock=0.0,
    ),
    "high_vol": StressScenario(
        name="High Volatility",
        description="Increased volatility (+5%)",
        volatility=0.15,
        rate_shock=0.0,
    ),
    "rate_depreciation": StressScenario(
        name="Foreign Currency Weakens (-5%)",
        description="Negative shock to spot rate",
        volatility=0.12,
        rate_shock=-0.05,
    ),
    "rate_appreciation": StressScenario(
        name="Foreign Currency Strengthens (+5%)",
        description="Positive shock to spot rate",
        volatility=0.12,
        rate_shock=0.05,
    ),
    "diff_widens": StressScenario(
        name="Rate Differential Widens (+100 bps)",
        description="Shock increasing (r_d - r_f)",
        volatility=0.0,
        rate_shock=0.0,
        rate_differential_shock=0.01,
    ),
    "diff_narrows": StressScenario(
        name="Rate Differential Narrows (-100 bps)",
        description="Shock decreasing (r_d - r_f)",
        volatility=0.0,
        rate_shock=0.0,
        rate_differential_shock=-0.01,
    ),
}


@dataclass
class StressTestResult:
    """Baseline and stressed backtests side by side."""

    scenario: StressScenario
    baseline: BacktestResult
    stressed: BacktestResult

    @property
    def pnl_impact(self) -> float:
        """Change in total hedge P&L caused by the scenario."""
        return self.stressed.summary.total_pnl - self.baseline.summary.total_pnl

    def to_dict(self) -> dict:
        return {
            "scenario": self.scenario.to_dict(),
            "baseline": self.baseline.to_dict(),
            "stressed": self.stressed.to_dict(),
            "pnl_impact": self.pnl_impact,
        }


def get_stress_scenario(key: str) -> StressScenario:
    """Look up a default scenario by key.

    Raises:
        ConfigurationError: If the key is unknown.
    """
    try:
        return DEFAULT_STRESS_SCENARIOS[key]
    except KeyError as e:
        raise ConfigurationError(
            f"Unknown stress scenario {key!r}. "
            f"Available: {', '.join(DEFAULT_STRESS_SCENARIOS)}"
        ) from e


def apply_stress_scenario(config: BacktestConfig, scenario: StressScenario) -> BacktestConfig:
    """Return a copy of config with the scenario's shocks applied.

    The spot is scaled by (1 + rate_shock). The differential shock is split
    half on each rate (domestic up, foreign down). A positive scenario
    volatility replaces every option leg's volatility. Strikes and barriers
    stay anchored to the unshocked reference spot.
    """
    half_shift = scenario.rate_differential_shock * 100 / 2
    params = config.params.with_overrides(
        domestic_rate=config.params.domestic_rate + half_shift,
        foreign_rate=config.params.foreign_rate - half_shift,
    )

    components = config.components
    if scenario.volatility > 0:
        components = tuple(
            c.with_overrides(volatility=scenario.volatility * 100) if c.type.option_kind else c
            for c in components
        )

    return config.with_overrides(
        spot_rate=config.spot_rate * (1 + scenario.rate_shock),
        initial_spot_rate=config.reference_spot,
        params=params,
        components=components,
    )


def run_stress_test(
    config: BacktestConfig,
    monthly_stats: list[MonthlyStats],
    scenario: StressScenario,
    settings: PricingSettings | None = None,
) -> StressTestResult:
    """Run the baseline backtest and the stressed backtest.

    Args:
        config: Unshocked backtest configuration.
        monthly_stats: Monthly aggregates of the historical series.
        scenario: Shock to apply.
        settings: Pricing settings forwarded to both runs.

    Returns:
        StressTestResult with both results.
    """
    logger.info(
        "stress_test_starting",
        scenario=scenario.name,
        rate_shock=scenario.rate_shock,
        rate_differential_shock=scenario.rate_differential_shock,
        volatility=scenario.volatility,
    )

    baseline = run_backtest(config, monthly_stats, settings)
    stressed = run_backtest(apply_stress_scenario(config, scenario), monthly_stats, settings)
    result = StressTestResult(scenario=scenario, baseline=baseline, stressed=stressed)

    logger.info(
        "stress_test_complete",
        scenario=scenario.name,
        pnl_impact=round(result.pnl_impact, 2),
    )
    return result
