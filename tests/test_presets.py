"""Tests for strategy templates."""

import pytest

from fxhedge.exceptions import ConfigurationError
from fxhedge.models import ComponentType, StrikeType
from fxhedge.presets import STRATEGY_TEMPLATES, build_strategy


class TestBuildStrategy:
    @pytest.mark.parametrize("name", list(STRATEGY_TEMPLATES))
    def test_every_template_builds(self, name: str) -> None:
        components = build_strategy(name, volatility=12.0)
        assert len(components) == len(STRATEGY_TEMPLATES[name]["components"])
        assert all(c.strike_type is StrikeType.PERCENT for c in components)

    def test_volatility_on_option_legs_only(self) -> None:
        (forward,) = build_strategy("forward", volatility=12.0)
        assert forward.type is ComponentType.FORWARD
        assert forward.volatility == 0.0

        put, call = build_strategy("collar", volatility=12.0)
        assert put.volatility == call.volatility == 12.0
        assert call.quantity == -100.0

    def test_barrier_template(self) -> None:
        call_ko, put_ki = build_strategy("callPutKI_KO", volatility=10.0)
        assert call_ko.upper_barrier == 115.0
        assert call_ko.upper_barrier_type is StrikeType.PERCENT
        assert put_ki.lower_barrier == 90.0

    def test_fresh_instances(self) -> None:
        assert build_strategy("call", 10.0) == build_strategy("call", 10.0)
        assert build_strategy("call", 10.0)[0] is not build_strategy("call", 10.0)[0]

    def test_unknown_template(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown strategy template"):
            build_strategy("butterfly", volatility=10.0)
