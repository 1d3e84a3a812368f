"""Probability-weighted risk matrix of strategies across price ranges."""

from fxhedge.matrix.generator import generate_risk_matrix, range_key, validate_price_ranges
from fxhedge.matrix.models import RiskMatrixResult

__all__ = [
    "RiskMatrixResult",
    "generate_risk_matrix",
    "range_key",
    "validate_price_ranges",
]
