"""Risk matrix: strategies x price-range scenarios.

Each strategy is priced once at the initial spot. Each price range is
reduced to its midpoint, which serves as the realized rate of the bucket.
Per-range P&L and effective rate are weighted by the range probability
to give the expected hedging cost and expected effective rate.

Preconditions are checked before any pricing so that a rejected run never
produces partial results.
"""

import math
import time

from fxhedge.config import MatrixSettings, PricingSettings
from fxhedge.exceptions import ConfigurationError, ProbabilityMismatchError
from fxhedge.logging import get_logger
from fxhedge.matrix.models import RiskMatrixResult
from fxhedge.models import ForexParams, MatrixStrategy, PriceRange
from fxhedge.pricing.strategy import aggregate

logger = get_logger(__name__)


def range_key(index: int) -> str:
    """Key of the index-th price range in RiskMatrixResult.differences."""
    return f"range_{index}"


def validate_price_ranges(
    price_ranges: list[PriceRange], tolerance: float = 0.01
) -> float:
    """Check that range probabilities sum to 100 within tolerance.

    Returns:
        The probability total.

    Raises:
        ConfigurationError: If no range is given.
        ProbabilityMismatchError: If the total is not finite or
            |total - 100| exceeds tolerance.
    """
    if not price_ranges:
        raise ConfigurationError("At least one price range is required")
    try:
        total = math.fsum(r.probability for r in price_ranges)
    except OverflowError:
        total = math.inf
    if not math.isfinite(total) or abs(total - 100) > tolerance:
        raise ProbabilityMismatchError(total, tolerance)
    return total


def generate_risk_matrix(
    strategies: list[MatrixStrategy],
    price_ranges: list[PriceRange],
    spot: float,
    params: ForexParams,
    settings: MatrixSettings | None = None,
    pricing_settings: PricingSettings | None = None,
) -> list[RiskMatrixResult]:
    """Evaluate every strategy across every price range.

    Args:
        strategies: Matrix strategies, in display order.
        price_ranges: Scenario buckets whose probabilities sum to 100.
        spot: Initial spot rate used for pricing and strike resolution.
        params: Market parameters.
        settings: Matrix settings (probability tolerance).
        pricing_settings: Pricing settings forwarded to the aggregator.

    Returns:
        One RiskMatrixResult per strategy, in input order.

    Raises:
        ConfigurationError: If strategies or price_ranges is empty.
        ProbabilityMismatchError: If probabilities do not sum to 100.
    """
    if settings is None:
        settings = MatrixSettings()

    if not strategies:
        raise ConfigurationError("At least one matrix strategy is required")
    try:
        validate_price_ranges(price_ranges, settings.probability_tolerance)
    except ProbabilityMismatchError as e:
        logger.warning(
            "risk_matrix_rejected",
            probability_total=round(e.total, 4),
            tolerance=e.tolerance,
        )
        raise

    start_time = time.monotonic()
    results = []

    for strategy in strategies:
        priced = aggregate(
            strategy.components,
            spot,
            params,
            strategy.coverage_ratio,
            settings=pricing_settings,
        )

        expected_pnl = 0.0
        expected_effective_rate = 0.0
        differences: dict[str, float] = {}

        for index, price_range in enumerate(price_ranges):
            rate = price_range.midpoint
            payoff = priced.payoff_given_rate(rate)
            pnl = payoff - priced.premium_per_unit
            effective = rate + payoff - priced.premium_per_unit

            differences[range_key(index)] = effective
            expected_pnl += pnl * price_range.probability / 100
            expected_effective_rate += effective * price_range.probability / 100

        results.append(
            RiskMatrixResult(
                name=strategy.name,
                coverage_ratio=strategy.coverage_ratio,
                hedging_cost=expected_pnl,
                costs={"total_premium": priced.premium_per_unit},
                differences=differences,
                strategy=strategy.components,
                expected_effective_rate=expected_effective_rate,
            )
        )

    logger.info(
        "risk_matrix_generated",
        strategies=len(strategies),
        price_ranges=len(price_ranges),
        elapsed_seconds=round(time.monotonic() - start_time, 4),
    )
    return results
