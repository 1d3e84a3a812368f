"""Strategy templates for quick strategy set-up.

Each template lists its legs with strikes and barriers in percent of the
reference spot, so the same template applies to any currency pair.
Negative quantities are sold legs. Volatility is filled in by
build_strategy().
"""

from fxhedge.exceptions import ConfigurationError
from fxhedge.models import StrategyComponent

STRATEGY_TEMPLATES: dict[str, dict] = {
    "forward": {
        "label": "Forward Contract",
        "description": "Fixing the exchange rate at a future date.",
        "components": [
            {"type": "forward", "strike": 100.0, "quantity": 100.0},
        ],
    },
    "call": {
        "label": "Simple Call",
        "description": "Simple protection against upside, with premium payment.",
        "components": [
            {"type": "call", "strike": 105.0, "quantity": 100.0},
        ],
    },
    "put": {
        "label": "Simple Put",
        "description": "Simple protection against downside, with premium payment.",
        "components": [
            {"type": "put", "strike": 95.0, "quantity": 100.0},
        ],
    },
    "collar": {
        "label": "Collar",
        "description": "Bought put financed by a sold call.",
        "components": [
            {"type": "put", "strike": 95.0, "quantity": 100.0},
            {"type": "call", "strike": 105.0, "quantity": -100.0},
        ],
    },
    "strangle": {
        "label": "Strangle",
        "description": "Protection against extreme movements in both directions.",
        "components": [
            {"type": "put", "strike": 95.0, "quantity": 100.0},
            {"type": "call", "strike": 105.0, "quantity": 100.0},
        ],
    },
    "straddle": {
        "label": "Straddle",
        "description": "Protection against volatility, without predicting direction.",
        "components": [
            {"type": "put", "strike": 100.0, "quantity": 100.0},
            {"type": "call", "strike": 100.0, "quantity": 100.0},
        ],
    },
    "seagull": {
        "label": "Seagull",
        "description": "Asymmetric protection with partial funding.",
        "components": [
            {"type": "put", "strike": 100.0, "quantity": 100.0},
            {"type": "call", "strike": 110.0, "quantity": -100.0},
            {"type": "put", "strike": 90.0, "quantity": -100.0},
        ],
    },
    "callKO": {
        "label": "Call with KO Barrier",
        "description": "Protection against upside, deactivated above the barrier.",
        "components": [
            {"type": "callKO", "strike": 105.0, "quantity": 100.0, "upper_barrier": 115.0},
        ],
    },
    "putKI": {
        "label": "Put with KI Barrier",
        "description": "Protection against downside, activated below the barrier.",
        "components": [
            {"type": "putKI", "strike": 95.0, "quantity": 100.0, "lower_barrier": 90.0},
        ],
    },
    "callPutKI_KO": {
        "label": "Call KO + Put KI",
        "description": "Combines a Call KO and a Put KI to benefit from a downside to a barrier.",
        "components": [
            {"type": "callKO", "strike": 105.0, "quantity": 100.0, "upper_barrier": 115.0},
            {"type": "putKI", "strike": 95.0, "quantity": 100.0, "lower_barrier": 90.0},
        ],
    },
}


def build_strategy(name: str, volatility: float) -> tuple[StrategyComponent, ...]:
    """Instantiate a template as fresh StrategyComponents.

    Args:
        name: Template key in STRATEGY_TEMPLATES.
        volatility: Volatility in percent applied to every option leg.

    Returns:
        Tuple of components with percent-quoted strikes.

    Raises:
        ConfigurationError: If the template does not exist.
    """
    template = STRATEGY_TEMPLATES.get(name)
    if template is None:
        raise ConfigurationError(
            f"Unknown strategy template {name!r}. "
            f"Available: {', '.join(STRATEGY_TEMPLATES)}"
        )

    components = []
    for leg in template["components"]:
        data = {"strike_type": "percent", **leg}
        if leg["type"] != "forward":
            data["volatility"] = volatility
        components.append(StrategyComponent.from_dict(data))
    return tuple(components)
