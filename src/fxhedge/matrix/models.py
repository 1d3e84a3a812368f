"""Result model of the risk matrix."""

from __future__ import annotations

from dataclasses import dataclass, field

from fxhedge.models import StrategyComponent


@dataclass(frozen=True)
class RiskMatrixResult:
    """One matrix row: a strategy evaluated across every price range.

    Attributes:
        name: Strategy display name.
        coverage_ratio: Percent of notional hedged.
        hedging_cost: Probability-weighted P&L per unit (payoff - premium).
        costs: {"total_premium": premium per unit}.
        differences: Effective rate per range, keyed "range_<i>" in range
            declaration order.
        strategy: Components the row was computed with.
        expected_effective_rate: Probability-weighted effective rate.
    """

    name: str
    coverage_ratio: float
    hedging_cost: float
    costs: dict[str, float]
    differences: dict[str, float]
    strategy: tuple[StrategyComponent, ...] = field(default_factory=tuple)
    expected_effective_rate: float = 0.0

    @property
    def total_premium(self) -> float:
        return self.costs["total_premium"]

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "name": self.name,
            "coverage_ratio": self.coverage_ratio,
            "hedging_cost": self.hedging_cost,
            "costs": dict(self.costs),
            "differences": dict(self.differences),
            "strategy": [c.to_dict() for c in self.strategy],
            "expected_effective_rate": self.expected_effective_rate,
        }
