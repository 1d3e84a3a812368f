"""Data models for forward-looking hedge schedules.

A forecast settles the hedge on a schedule of future months. The rate each
month settles at comes from the current spot or from the mean of simulated
GBM paths, and any month can be pinned with per-month overrides keyed
"YYYY-MM".
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum

from fxhedge.backtest.models import BacktestSummary, ForexResult, YearlySummary
from fxhedge.exceptions import ValidationError
from fxhedge.models import ForexParams, StrategyComponent


class RealRateSource(str, Enum):
    """Where a forecast takes each month's settlement rate from."""

    SPOT = "spot"
    SIMULATION = "simulation"


def _check_overrides(name: str, overrides: dict[str, float], positive: bool) -> None:
    for key, value in overrides.items():
        if len(key) != 7 or key[4] != "-":
            raise ValidationError(f"{name} key must be 'YYYY-MM', got {key!r}")
        if not math.isfinite(value) or (positive and value <= 0) or value < 0:
            raise ValidationError(f"{name}[{key}] is out of range: {value}")


@dataclass(frozen=True)
class ForecastConfig:
    """Configuration for a forecast run.

    Attributes:
        components: Strategy legs applied to every month.
        spot_rate: Spot used for pricing, forwards and the spot source.
        params: Market parameters; months_to_hedge sets the schedule length.
        start_date: First settlement date, "YYYY-MM-DD".
        total_volume: Notional spread evenly over the schedule.
        coverage_ratio: Percent of notional hedged.
        initial_spot_rate: Spot used to resolve percent strikes and barriers.
            Defaults to spot_rate.
        real_rate_source: Spot or simulation.
        simulation_volatility: GBM volatility in percent.
        num_simulations: Number of simulated paths.
        seed: Random seed; None draws fresh entropy.
        manual_forwards: Forward rate per month, replacing parity.
        manual_real_rates: Settlement rate per month, replacing the source.
        custom_volumes: Notional per month, replacing the even split.
        implied_volatilities: Volatility in percent per month, applied to
            every option leg of that month.
    """

    components: tuple[StrategyComponent, ...]
    spot_rate: float
    params: ForexParams
    start_date: str
    total_volume: float = 1_000_000.0
    coverage_ratio: float = 100.0
    initial_spot_rate: float | None = None
    real_rate_source: RealRateSource = RealRateSource.SPOT
    simulation_volatility: float = 15.0
    num_simulations: int = 1000
    seed: int | None = None
    manual_forwards: dict[str, float] = field(default_factory=dict)
    manual_real_rates: dict[str, float] = field(default_factory=dict)
    custom_volumes: dict[str, float] = field(default_factory=dict)
    implied_volatilities: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "real_rate_source", RealRateSource(self.real_rate_source))
        try:
            date.fromisoformat(self.start_date)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"start_date must be 'YYYY-MM-DD', got {self.start_date!r}"
            ) from e
        if not (math.isfinite(self.spot_rate) and self.spot_rate > 0):
            raise ValidationError(f"spot_rate must be positive, got {self.spot_rate}")
        if self.num_simulations < 1:
            raise ValidationError(
                f"num_simulations must be at least 1, got {self.num_simulations}"
            )
        if not math.isfinite(self.simulation_volatility) or self.simulation_volatility < 0:
            raise ValidationError(
                f"simulation_volatility must be >= 0, got {self.simulation_volatility}"
            )
        _check_overrides("manual_forwards", self.manual_forwards, positive=True)
        _check_overrides("manual_real_rates", self.manual_real_rates, positive=True)
        _check_overrides("custom_volumes", self.custom_volumes, positive=False)
        _check_overrides("implied_volatilities", self.implied_volatilities, positive=False)

    @property
    def reference_spot(self) -> float:
        return self.spot_rate if self.initial_spot_rate is None else self.initial_spot_rate

    def with_overrides(self, **kwargs: object) -> ForecastConfig:
        """Return a new ForecastConfig with specified fields overridden."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "components": [c.to_dict() for c in self.components],
            "spot_rate": self.spot_rate,
            "domestic_rate": self.params.domestic_rate,
            "foreign_rate": self.params.foreign_rate,
            "months_to_hedge": self.params.months_to_hedge,
            "start_date": self.start_date,
            "total_volume": self.total_volume,
            "coverage_ratio": self.coverage_ratio,
            "initial_spot_rate": self.initial_spot_rate,
            "real_rate_source": self.real_rate_source.value,
            "simulation_volatility": self.simulation_volatility,
            "num_simulations": self.num_simulations,
            "seed": self.seed,
            "manual_forwards": dict(self.manual_forwards),
            "manual_real_rates": dict(self.manual_real_rates),
            "custom_volumes": dict(self.custom_volumes),
            "implied_volatilities": dict(self.implied_volatilities),
        }


@dataclass
class ForecastResult:
    """Complete result of a forecast run.

    Attributes:
        config: Configuration used.
        results: One ForexResult per scheduled month, chronological.
        yearly: Summaries keyed by "YYYY", chronological.
        summary: Totals across all periods.
        simulated_rates: Mean simulated rate per month, empty for the
            spot source.
    """

    config: ForecastConfig
    results: list[ForexResult] = field(default_factory=list)
    yearly: dict[str, YearlySummary] = field(default_factory=dict)
    summary: BacktestSummary = field(default_factory=BacktestSummary)
    simulated_rates: list[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "config": self.config.to_dict(),
            "results": [r.to_dict() for r in self.results],
            "yearly": {year: s.to_dict() for year, s in self.yearly.items()},
            "summary": self.summary.to_dict(),
            "simulated_rates": list(self.simulated_rates),
        }
