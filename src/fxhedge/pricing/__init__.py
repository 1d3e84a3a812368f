"""Option pricing, barrier evaluation and strategy aggregation.

Provides the Garman-Kohlhagen pricer, the point-in-time barrier evaluator,
the strategy aggregator, and helpers built on them (zero-cost collar
solver, payoff curve).
"""

from fxhedge.pricing.barrier import evaluate_barrier_payoff
from fxhedge.pricing.collar import CollarQuote, solve_zero_cost_collar
from fxhedge.pricing.garman_kohlhagen import forward_rate, norm_cdf, price_option
from fxhedge.pricing.payoff import PayoffPoint, payoff_curve
from fxhedge.pricing.rate_math import annualized_volatility, month_key, resolve_strike
from fxhedge.pricing.strategy import AggregatedStrategy, aggregate

__all__ = [
    "AggregatedStrategy",
    "CollarQuote",
    "PayoffPoint",
    "aggregate",
    "annualized_volatility",
    "evaluate_barrier_payoff",
    "forward_rate",
    "month_key",
    "norm_cdf",
    "payoff_curve",
    "price_option",
    "resolve_strike",
    "solve_zero_cost_collar",
]
