"""Data models for the historical backtest.

Defines the ingested series (HistoricalDataPoint, MonthlyStats), the run
configuration (BacktestConfig), the per-period output row (ForexResult) and
the yearly and overall summaries collected into a BacktestResult.

Rates keep their quoted precision; monetary values are in domestic currency
units for the configured notional.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from fxhedge.models import ForexParams, StrategyComponent


@dataclass(frozen=True)
class HistoricalDataPoint:
    """One observed rate: ISO date "YYYY-MM-DD" and price."""

    date: str
    price: float


@dataclass(frozen=True)
class MonthlyStats:
    """Per-month aggregate of a historical series.

    Attributes:
        month: "YYYY-MM" bucket key.
        avg_price: Arithmetic mean of the month's observations.
        volatility: Annualized volatility (decimal), None with fewer than
            2 observations.
        observations: Number of data points in the month.
    """

    month: str
    avg_price: float
    volatility: float | None
    observations: int = 1

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "avg_price": self.avg_price,
            "volatility": self.volatility,
            "observations": self.observations,
        }


@dataclass(frozen=True)
class BacktestConfig:
    """Configuration for a single backtest run.

    Attributes:
        components: Strategy legs applied to every month.
        spot_rate: Spot used for pricing each month's premium.
        params: Market parameters; months_to_hedge caps the months used.
        total_volume: Total notional (foreign units) over the horizon.
        coverage_ratio: Percent of notional hedged.
        start_date: First month to include ("YYYY-MM" or "YYYY-MM-DD").
            None starts at the first available month.
        initial_spot_rate: Spot used to resolve percent strikes and barriers.
            Defaults to spot_rate.
        use_historical_volatility: Price each month with its realized
            volatility instead of the legs' own volatility.
    """

    components: tuple[StrategyComponent, ...]
    spot_rate: float
    params: ForexParams
    total_volume: float = 1_000_000.0
    coverage_ratio: float = 100.0
    start_date: str | None = None
    initial_spot_rate: float | None = None
    use_historical_volatility: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))

    @property
    def reference_spot(self) -> float:
        return self.spot_rate if self.initial_spot_rate is None else self.initial_spot_rate

    def with_overrides(self, **kwargs: object) -> BacktestConfig:
        """Return a new BacktestConfig with specified fields overridden.

        Args:
            **kwargs: Fields to override.

        Returns:
            New BacktestConfig with overridden values.
        """
        return replace(self, **kwargs)

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "components": [c.to_dict() for c in self.components],
            "spot_rate": self.spot_rate,
            "domestic_rate": self.params.domestic_rate,
            "foreign_rate": self.params.foreign_rate,
            "months_to_hedge": self.params.months_to_hedge,
            "total_volume": self.total_volume,
            "coverage_ratio": self.coverage_ratio,
            "start_date": self.start_date,
            "initial_spot_rate": self.initial_spot_rate,
            "use_historical_volatility": self.use_historical_volatility,
        }


@dataclass(frozen=True)
class ForexResult:
    """Outcome of one hedged period.

    Attributes:
        date: First day of the period's month, "YYYY-MM-DD".
        time_to_maturity: Years from the first period, plus one day.
        forward_rate: Interest-rate-parity forward for the period.
        real_rate: Month average price.
        monthly_volume: Notional settled in the period.
        premium_paid: volume * premium per unit.
        payoff_from_hedge: volume * payoff per unit.
        hedged_revenue: Unhedged revenue plus payoff minus premium.
        unhedged_revenue: volume * real_rate.
        pnl_vs_unhedged: payoff_from_hedge - premium_paid.
        effective_rate: real_rate + payoff per unit - premium per unit.
        strategy_price: Premium per unit.
        total_payoff: Payoff per unit.
        leg_premiums: Quantity-weighted premium per unit of each leg,
            keyed "Leg<n>_<type>".
    """

    date: str
    time_to_maturity: float
    forward_rate: float
    real_rate: float
    monthly_volume: float
    premium_paid: float
    payoff_from_hedge: float
    hedged_revenue: float
    unhedged_revenue: float
    pnl_vs_unhedged: float
    effective_rate: float
    strategy_price: float = 0.0
    total_payoff: float = 0.0
    leg_premiums: dict[str, float] = field(default_factory=dict)

    @property
    def year(self) -> str:
        return self.date[:4]

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "time_to_maturity": self.time_to_maturity,
            "forward_rate": self.forward_rate,
            "real_rate": self.real_rate,
            "monthly_volume": self.monthly_volume,
            "premium_paid": self.premium_paid,
            "payoff_from_hedge": self.payoff_from_hedge,
            "hedged_revenue": self.hedged_revenue,
            "unhedged_revenue": self.unhedged_revenue,
            "pnl_vs_unhedged": self.pnl_vs_unhedged,
            "effective_rate": self.effective_rate,
            "strategy_price": self.strategy_price,
            "total_payoff": self.total_payoff,
            "leg_premiums": dict(self.leg_premiums),
        }


@dataclass(frozen=True)
class YearlySummary:
    """Aggregate of one calendar year of ForexResults."""

    year: str
    hedged_revenue: float
    unhedged_revenue: float
    total_pnl: float
    total_premium: float
    total_volume: float
    cost_reduction_percent: float
    months: int

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "hedged_revenue": self.hedged_revenue,
            "unhedged_revenue": self.unhedged_revenue,
            "total_pnl": self.total_pnl,
            "total_premium": self.total_premium,
            "total_volume": self.total_volume,
            "cost_reduction_percent": self.cost_reduction_percent,
            "months": self.months,
        }


@dataclass(frozen=True)
class BacktestSummary:
    """Totals across all periods of a backtest."""

    total_premium: float = 0.0
    total_payoff: float = 0.0
    total_pnl: float = 0.0
    hedged_revenue: float = 0.0
    unhedged_revenue: float = 0.0
    total_volume: float = 0.0
    average_effective_rate: float = 0.0
    average_pnl_per_unit: float = 0.0
    periods: int = 0

    def to_dict(self) -> dict:
        return {
            "total_premium": self.total_premium,
            "total_payoff": self.total_payoff,
            "total_pnl": self.total_pnl,
            "hedged_revenue": self.hedged_revenue,
            "unhedged_revenue": self.unhedged_revenue,
            "total_volume": self.total_volume,
            "average_effective_rate": self.average_effective_rate,
            "average_pnl_per_unit": self.average_pnl_per_unit,
            "periods": self.periods,
        }


@dataclass
class BacktestResult:
    """Complete result of a backtest run.

    Attributes:
        config: Configuration used.
        results: One ForexResult per period, chronological.
        yearly: Summaries keyed by "YYYY", chronological.
        summary: Totals across all periods.
    """

    config: BacktestConfig
    results: list[ForexResult] = field(default_factory=list)
    yearly: dict[str, YearlySummary] = field(default_factory=dict)
    summary: BacktestSummary = field(default_factory=BacktestSummary)

    def to_dict(self) -> dict:
        """Serialize to dict for JSON output."""
        return {
            "config": self.config.to_dict(),
            "results": [r.to_dict() for r in self.results],
            "yearly": {year: s.to_dict() for year, s in self.yearly.items()},
            "summary": self.summary.to_dict(),
        }
