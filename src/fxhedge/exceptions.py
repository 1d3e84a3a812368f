"""Typed failures raised by the hedging engine.

Every entry point either returns a result value or raises one of these.
They live in one module so that pricing, matrix and backtest code can
share them without circular imports.
"""


class HedgeEngineError(Exception):
    """Base exception for all engine errors."""


class ValidationError(HedgeEngineError):
    """Raised when an input value or an ingested row is malformed.

    Attributes:
        line_number: 1-based line of the offending row for ingestion errors,
            None for value-object validation.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class ProbabilityMismatchError(HedgeEngineError):
    """Raised when price range probabilities do not sum to 100%."""

    def __init__(self, total: float, tolerance: float) -> None:
        self.total = total
        self.tolerance = tolerance
        super().__init__(
            f"Probabilities sum to {total:.2f}%, must sum to 100% "
            f"(tolerance {tolerance})"
        )


class ConfigurationError(HedgeEngineError):
    """Raised when a run is missing required inputs (strategies, ranges, data)."""


class NumericError(HedgeEngineError):
    """Raised when a pricing formula produces NaN/Infinity or cannot be evaluated."""
