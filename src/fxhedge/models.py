"""Shared data models for strategy definition and market parameters.

All entities are immutable value objects: a calculation takes a complete
snapshot of them and returns new values. Rates and volatilities keep the
units users type in (percent), conversion to decimals happens at the
pricing seam.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum

from fxhedge.exceptions import ValidationError


class ComponentType(str, Enum):
    """Strategy leg type.

    Single-barrier names follow the usual desk shorthand: KO/KI for the
    standard crossing direction (calls up, puts down), RKO/RKI for the
    reverse direction, DKO/DKI for a [lower, upper] corridor.
    """

    FORWARD = "forward"
    CALL = "call"
    PUT = "put"
    CALL_KO = "callKO"
    PUT_KO = "putKO"
    CALL_KI = "callKI"
    PUT_KI = "putKI"
    CALL_RKO = "callRKO"
    PUT_RKO = "putRKO"
    CALL_RKI = "callRKI"
    PUT_RKI = "putRKI"
    CALL_DKO = "callDKO"
    PUT_DKO = "putDKO"
    CALL_DKI = "callDKI"
    PUT_DKI = "putDKI"

    @property
    def is_call(self) -> bool:
        return self.value.startswith("call")

    @property
    def is_put(self) -> bool:
        return self.value.startswith("put")

    @property
    def is_barrier(self) -> bool:
        return self.is_knock_out or self.is_knock_in

    @property
    def is_knock_out(self) -> bool:
        return self.value.endswith("KO")

    @property
    def is_knock_in(self) -> bool:
        return self.value.endswith("KI")

    @property
    def is_double(self) -> bool:
        return self.value.endswith(("DKO", "DKI"))

    @property
    def is_reverse(self) -> bool:
        return self.value.endswith(("RKO", "RKI"))

    @property
    def option_kind(self) -> str | None:
        """'call' or 'put' for option legs, None for forwards."""
        if self.is_call:
            return "call"
        if self.is_put:
            return "put"
        return None


class StrikeType(str, Enum):
    """How a strike or barrier level is quoted."""

    PERCENT = "percent"  # percent of the reference spot
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class StrategyComponent:
    """One leg of a hedging strategy.

    Attributes:
        type: Leg type (forward, vanilla or barrier option).
        strike: Strike level, in percent of spot or absolute.
        strike_type: Quoting convention of strike.
        volatility: Annual volatility in percent (e.g. 10.0 for 10%).
        quantity: Percent of the hedged notional covered by this leg.
            Negative values denote a sold leg.
        upper_barrier: Upper (or single) barrier level.
        upper_barrier_type: Quoting convention of upper_barrier.
        lower_barrier: Lower barrier level (double barriers, or a
            single barrier quoted as the lower one).
        lower_barrier_type: Quoting convention of lower_barrier.
    """

    type: ComponentType
    strike: float
    strike_type: StrikeType = StrikeType.PERCENT
    volatility: float = 0.0
    quantity: float = 100.0
    upper_barrier: float | None = None
    upper_barrier_type: StrikeType | None = None
    lower_barrier: float | None = None
    lower_barrier_type: StrikeType | None = None

    def __post_init__(self) -> None:
        # Coerce raw strings so callers can pass enum values directly
        object.__setattr__(self, "type", ComponentType(self.type))
        object.__setattr__(self, "strike_type", StrikeType(self.strike_type))
        if self.upper_barrier is not None:
            object.__setattr__(
                self,
                "upper_barrier_type",
                StrikeType(self.upper_barrier_type or self.strike_type),
            )
        if self.lower_barrier is not None:
            object.__setattr__(
                self,
                "lower_barrier_type",
                StrikeType(self.lower_barrier_type or self.strike_type),
            )
        self._validate()

    def _validate(self) -> None:
        if not math.isfinite(self.strike):
            raise ValidationError(f"{self.type.value}: strike must be finite")
        if not math.isfinite(self.quantity):
            raise ValidationError(f"{self.type.value}: quantity must be finite")
        if not math.isfinite(self.volatility) or self.volatility < 0:
            raise ValidationError(
                f"{self.type.value}: volatility must be a non-negative percentage"
            )

        has_upper = self.upper_barrier is not None
        has_lower = self.lower_barrier is not None

        if not self.type.is_barrier:
            if has_upper or has_lower:
                raise ValidationError(
                    f"{self.type.value}: barrier levels are only allowed on knock-in/knock-out legs"
                )
            return

        if self.type.is_double:
            if not (has_upper and has_lower):
                raise ValidationError(
                    f"{self.type.value}: double barrier requires both upper and lower barriers"
                )
            if self.lower_barrier > self.upper_barrier and (  # type: ignore[operator]
                self.lower_barrier_type == self.upper_barrier_type
            ):
                raise ValidationError(
                    f"{self.type.value}: lower barrier {self.lower_barrier} "
                    f"is above upper barrier {self.upper_barrier}"
                )
        elif not (has_upper or has_lower):
            raise ValidationError(f"{self.type.value}: barrier level is required")

    def with_overrides(self, **kwargs: object) -> StrategyComponent:
        """Return a new component with the given fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict (enum values as strings)."""
        data: dict = {
            "type": self.type.value,
            "strike": self.strike,
            "strike_type": self.strike_type.value,
            "volatility": self.volatility,
            "quantity": self.quantity,
        }
        if self.upper_barrier is not None:
            data["upper_barrier"] = self.upper_barrier
            data["upper_barrier_type"] = self.upper_barrier_type.value  # type: ignore[union-attr]
        if self.lower_barrier is not None:
            data["lower_barrier"] = self.lower_barrier
            data["lower_barrier_type"] = self.lower_barrier_type.value  # type: ignore[union-attr]
        return data

    @staticmethod
    def from_dict(data: dict) -> StrategyComponent:
        """Build a component from a JSON-style dict.

        Raises:
            ValidationError: If required keys are missing or values are invalid.
        """
        try:
            leg_type = ComponentType(data["type"])
            strike = float(data["strike"])
        except KeyError as e:
            raise ValidationError(f"strategy component is missing field {e}") from e
        except (TypeError, ValueError) as e:
            raise ValidationError(f"invalid strategy component: {e}") from e

        def _optional_float(key: str) -> float | None:
            value = data.get(key)
            if value is None:
                return None
            try:
                return float(value)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"invalid {key}: {value!r}") from e

        try:
            return StrategyComponent(
                type=leg_type,
                strike=strike,
                strike_type=StrikeType(data.get("strike_type", "percent")),
                volatility=float(data.get("volatility", 0.0)),
                quantity=float(data.get("quantity", 100.0)),
                upper_barrier=_optional_float("upper_barrier"),
                upper_barrier_type=data.get("upper_barrier_type"),
                lower_barrier=_optional_float("lower_barrier"),
                lower_barrier_type=data.get("lower_barrier_type"),
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(f"invalid strategy component: {e}") from e


def clone_components(
    components: list[StrategyComponent] | tuple[StrategyComponent, ...],
) -> tuple[StrategyComponent, ...]:
    """Return an independent copy of a component sequence.

    Used when the current strategy seeds a new matrix entry: the copy
    shares no reference with the source sequence.
    """
    return tuple(replace(c) for c in components)


@dataclass(frozen=True)
class ForexParams:
    """Market parameters for one calculation pass.

    Attributes:
        domestic_rate: Domestic interest rate, percent p.a.
        foreign_rate: Foreign interest rate, percent p.a.
        months_to_hedge: Hedge horizon in months (0 means "use the default").
    """

    domestic_rate: float
    foreign_rate: float
    months_to_hedge: int = 12

    def __post_init__(self) -> None:
        if self.months_to_hedge < 0:
            raise ValidationError("months_to_hedge must be >= 0")
        if not (math.isfinite(self.domestic_rate) and math.isfinite(self.foreign_rate)):
            raise ValidationError("interest rates must be finite")

    @property
    def r_d(self) -> float:
        """Domestic rate as a decimal."""
        return self.domestic_rate / 100

    @property
    def r_f(self) -> float:
        """Foreign rate as a decimal."""
        return self.foreign_rate / 100

    def time_to_maturity(self, default_months: int = 1) -> float:
        """Hedge horizon in years; default_months is used when months_to_hedge is 0."""
        months = self.months_to_hedge if self.months_to_hedge > 0 else default_months
        return months / 12

    def with_overrides(self, **kwargs: object) -> ForexParams:
        """Return a new ForexParams with specified fields overridden."""
        return replace(self, **kwargs)


@dataclass(frozen=True)
class PriceRange:
    """A scenario bucket of realized rates with its probability (percent)."""

    min: float
    max: float
    probability: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.min, self.max, self.probability)):
            raise ValidationError("price range bounds and probability must be finite")
        if self.min > self.max:
            raise ValidationError(f"price range min {self.min} is above max {self.max}")
        if self.probability < 0:
            raise ValidationError(f"price range probability must be >= 0, got {self.probability}")

    @property
    def midpoint(self) -> float:
        """Representative realized rate of the bucket."""
        return (self.min + self.max) / 2


@dataclass(frozen=True)
class MatrixStrategy:
    """A named strategy variant compared in the risk matrix.

    Attributes:
        name: Display name.
        coverage_ratio: Percent of total notional hedged (may exceed 100).
        components: Ordered legs of the strategy.
    """

    name: str
    coverage_ratio: float = 100.0
    components: tuple[StrategyComponent, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "components", tuple(self.components))

    @staticmethod
    def from_components(
        components: list[StrategyComponent] | tuple[StrategyComponent, ...],
        name: str,
        coverage_ratio: float = 100.0,
    ) -> MatrixStrategy:
        """Seed a matrix entry from an existing strategy (value clone)."""
        return MatrixStrategy(
            name=name,
            coverage_ratio=coverage_ratio,
            components=clone_components(components),
        )
