"""JSON API endpoints exposing the engine entry points.

Request bodies use the data-model field names (snake_case, percent units).
Engine errors map to 400 responses with an {"error": ...} body; ingestion
errors also carry the offending "line".
"""

from __future__ import annotations

import math
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from fxhedge import runner
from fxhedge.backtest.export import export_results_csv
from fxhedge.backtest.models import BacktestConfig
from fxhedge.backtest.stress import DEFAULT_STRESS_SCENARIOS, StressScenario
from fxhedge.config import AppSettings
from fxhedge.exceptions import HedgeEngineError, ValidationError
from fxhedge.forecast.models import ForecastConfig, RealRateSource
from fxhedge.logging import get_logger
from fxhedge.models import ForexParams, MatrixStrategy, PriceRange, StrategyComponent
from fxhedge.presets import STRATEGY_TEMPLATES

logger = get_logger(__name__)

router = APIRouter()


class BadRequest(Exception):
    """Malformed request body (missing or mistyped field)."""


def _error_response(error: Exception) -> JSONResponse:
    content: dict[str, Any] = {"error": str(error)}
    if isinstance(error, ValidationError) and error.line_number is not None:
        content["line"] = error.line_number
    logger.info("api_request_rejected", error=str(error), error_type=type(error).__name__)
    return JSONResponse(content=content, status_code=400)


async def _read_body(request: Request, required: tuple[str, ...]) -> dict:
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequest("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise BadRequest("JSON body must be an object")
    for field in required:
        if field not in body:
            raise BadRequest(f"Missing required field: {field}")
    return body


def _settings(request: Request) -> AppSettings:
    return request.app.state.settings


def _float(body: dict, key: str, default: float | None = None) -> float:
    value = body.get(key, default)
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise BadRequest(f"Field {key} must be a number") from e
    if not math.isfinite(number):
        raise BadRequest(f"Field {key} must be finite")
    return number


def _objects(body: dict, key: str) -> list[dict]:
    items = body.get(key)
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise BadRequest(f"Field {key} must be a list of objects")
    return items


def _params_from_body(body: dict) -> ForexParams:
    try:
        months = int(body.get("months_to_hedge", 12))
    except (TypeError, ValueError) as e:
        raise BadRequest("Field months_to_hedge must be an integer") from e
    return ForexParams(
        domestic_rate=_float(body, "domestic_rate"),
        foreign_rate=_float(body, "foreign_rate"),
        months_to_hedge=months,
    )


def _components_from_body(
    items: Any, default_volatility: float
) -> tuple[StrategyComponent, ...]:
    if not isinstance(items, list):
        raise BadRequest("Field components must be a list")
    components = []
    for item in items:
        if isinstance(item, dict) and "volatility" not in item and item.get("type") != "forward":
            item = {**item, "volatility": default_volatility}
        components.append(StrategyComponent.from_dict(item))
    return tuple(components)


def _backtest_config_from_body(body: dict, settings: AppSettings) -> BacktestConfig:
    initial_spot = body.get("initial_spot_rate")
    return BacktestConfig(
        components=_components_from_body(
            body["components"], settings.backtest.default_volatility
        ),
        spot_rate=_float(body, "spot_rate"),
        params=_params_from_body(body),
        total_volume=_float(body, "total_volume", settings.backtest.default_total_volume),
        coverage_ratio=_float(body, "coverage_ratio", settings.matrix.default_coverage_ratio),
        start_date=body.get("start_date"),
        initial_spot_rate=None if initial_spot is None else _float(body, "initial_spot_rate"),
        use_historical_volatility=bool(body.get("use_historical_volatility", False)),
    )


@router.post("/price")
async def price_endpoint(request: Request) -> JSONResponse:
    """Price a vanilla call or put.

    Body: kind, spot, strike, domestic_rate, foreign_rate, volatility and
    optional months_to_hedge or time_to_maturity (years).
    """
    try:
        body = await _read_body(
            request, ("kind", "spot", "strike", "domestic_rate", "foreign_rate", "volatility")
        )
        params = _params_from_body(body)
        t = body.get("time_to_maturity")
        price = runner.price_option(
            body["kind"],
            _float(body, "spot"),
            _float(body, "strike"),
            params,
            _float(body, "volatility"),
            time_to_maturity=None if t is None else _float(body, "time_to_maturity"),
            settings=_settings(request),
        )
    except (BadRequest, HedgeEngineError) as e:
        return _error_response(e)
    return JSONResponse(content={"kind": body["kind"], "price": price})


@router.post("/barrier-payoff")
async def barrier_payoff_endpoint(request: Request) -> JSONResponse:
    """Evaluate one leg's payoff at a realized rate.

    Body: component, realized_rate, reference_spot, optional vanilla_payoff.
    """
    try:
        body = await _read_body(request, ("component", "realized_rate", "reference_spot"))
        component = StrategyComponent.from_dict(body["component"])
        vanilla = body.get("vanilla_payoff")
        payoff = runner.evaluate_barrier_payoff(
            component,
            _float(body, "realized_rate"),
            _float(body, "reference_spot"),
            vanilla_payoff=None if vanilla is None else _float(body, "vanilla_payoff"),
        )
    except (BadRequest, HedgeEngineError) as e:
        return _error_response(e)
    return JSONResponse(content={"payoff": payoff})


@router.post("/risk-matrix")
async def risk_matrix_endpoint(request: Request) -> JSONResponse:
    """Generate the risk matrix.

    Body: spot, domestic_rate, foreign_rate, months_to_hedge, strategies
    [{name, coverage_ratio, components}], price_ranges [{min, max, probability}].
    """
    settings = _settings(request)
    try:
        body = await _read_body(
            request, ("spot", "domestic_rate", "foreign_rate", "strategies", "price_ranges")
        )
        strategies = [
            MatrixStrategy(
                name=str(item.get("name", f"Strategy {i + 1}")),
                coverage_ratio=_float(
                    item, "coverage_ratio", settings.matrix.default_coverage_ratio
                ),
                components=_components_from_body(
                    item.get("components", []), settings.backtest.default_volatility
                ),
            )
            for i, item in enumerate(_objects(body, "strategies"))
        ]
        price_ranges = [
            PriceRange(
                min=_float(item, "min"),
                max=_float(item, "max"),
                probability=_float(item, "probability"),
            )
            for item in _objects(body, "price_ranges")
        ]
        results = runner.generate_risk_matrix(
            strategies,
            price_ranges,
            _float(body, "spot"),
            _params_from_body(body),
            settings=settings,
        )
    except (BadRequest, HedgeEngineError) as e:
        return _error_response(e)
    return JSONResponse(content={"results": [r.to_dict() for r in results]})


@router.post("/backtest")
async def backtest_endpoint(request: Request) -> JSONResponse:
    """Run a historical backtest over raw `YYYY-MM-DD,price` text.

    Body: data, components, spot_rate, domestic_rate, foreign_rate and
    optional months_to_hedge, total_volume, coverage_ratio, start_date,
    initial_spot_rate, use_historical_volatility, include_csv, csv_extended.
    """
    settings = _settings(request)
    try:
        body = await _read_body(
            request, ("data", "components", "spot_rate", "domestic_rate", "foreign_rate")
        )
        config = _backtest_config_from_body(body, settings)
        result = runner.run_backtest(config, str(body["data"]), settings=settings)
    except (BadRequest, HedgeEngineError) as e:
        return _error_response(e)

    content = result.to_dict()
    if body.get("include_csv"):
        content["csv"] = export_results_csv(
            result.results, extended=bool(body.get("csv_extended", False))
        )
    return JSONResponse(content=content)


@router.post("/stress-test")
async def stress_test_endpoint(request: Request) -> JSONResponse:
    """Run a backtest under a default (scenario) or custom (custom_scenario) shock."""
    settings = _settings(request)
    try:
        body = await _read_body(
            request, ("data", "components", "spot_rate", "domestic_rate", "foreign_rate")
        )
        config = _backtest_config_from_body(body, settings)
        custom = body.get("custom_scenario")
        if custom is not None:
            if not isinstance(custom, dict):
                raise BadRequest("Field custom_scenario must be an object")
            scenario: StressScenario | str = StressScenario(
                name=str(custom.get("name", "Custom Case")),
                description=str(custom.get("description", "User-defined scenario")),
                volatility=_float(custom, "volatility", 0.0),
                rate_shock=_float(custom, "rate_shock", 0.0),
                rate_differential_shock=_float(custom, "rate_differential_shock", 0.0),
            )
        else:
            scenario = str(body.get("scenario", "base"))
        result = runner.run_stress_test(config, str(body["data"]), scenario, settings=settings)
    except (BadRequest, HedgeEngineError) as e:
        return _error_response(e)
    return JSONResponse(content=result.to_dict())


def _month_map(body: dict, key: str) -> dict[str, float]:
    items = body.get(key) or {}
    if not isinstance(items, dict):
        raise BadRequest(f"Field {key} must be an object keyed by YYYY-MM")
    return {str(month): _float(items, month) for month in items}


def _forecast_config_from_body(body: dict, settings: AppSettings) -> ForecastConfig:
    initial_spot = body.get("initial_spot_rate")
    seed = body.get("seed")
    try:
        num_simulations = int(
            body.get("num_simulations", settings.forecast.default_num_simulations)
        )
        seed = None if seed is None else int(seed)
    except (TypeError, ValueError) as e:
        raise BadRequest("Fields num_simulations and seed must be integers") from e
    try:
        source = RealRateSource(body.get("real_rate_source", "spot"))
    except ValueError as e:
        raise BadRequest("Field real_rate_source must be 'spot' or 'simulation'") from e
    return ForecastConfig(
        components=_components_from_body(
            body["components"], settings.backtest.default_volatility
        ),
        spot_rate=_float(body, "spot_rate"),
        params=_params_from_body(body),
        start_date=str(body["start_date"]),
        total_volume=_float(body, "total_volume", settings.backtest.default_total_volume),
        coverage_ratio=_float(body, "coverage_ratio", settings.matrix.default_coverage_ratio),
        initial_spot_rate=None if initial_spot is None else _float(body, "initial_spot_rate"),
        real_rate_source=source,
        simulation_volatility=_float(
            body, "simulation_volatility", settings.backtest.default_volatility
        ),
        num_simulations=num_simulations,
        seed=seed,
        manual_forwards=_month_map(body, "manual_forwards"),
        manual_real_rates=_month_map(body, "manual_real_rates"),
        custom_volumes=_month_map(body, "custom_volumes"),
        implied_volatilities=_month_map(body, "implied_volatilities"),
    )


@router.post("/forecast")
async def forecast_endpoint(request: Request) -> JSONResponse:
    """Settle a strategy over future months.

    Body: components, spot_rate, domestic_rate, foreign_rate, start_date and
    optional months_to_hedge, total_volume, coverage_ratio, initial_spot_rate,
    real_rate_source ("spot" or "simulation"), simulation_volatility,
    num_simulations, seed, include_csv, csv_extended and the per-month maps
    manual_forwards, manual_real_rates, custom_volumes, implied_volatilities.
    """
    settings = _settings(request)
    try:
        body = await _read_body(
            request, ("components", "spot_rate", "domestic_rate", "foreign_rate", "start_date")
        )
        config = _forecast_config_from_body(body, settings)
        result = runner.run_forecast(config, settings=settings)
    except (BadRequest, HedgeEngineError) as e:
        return _error_response(e)

    content = result.to_dict()
    if body.get("include_csv"):
        content["csv"] = export_results_csv(
            result.results, extended=bool(body.get("csv_extended", False))
        )
    return JSONResponse(content=content)


@router.get("/presets")
async def presets_endpoint() -> JSONResponse:
    """Return the strategy templates."""
    return JSONResponse(content=STRATEGY_TEMPLATES)


@router.get("/stress-scenarios")
async def stress_scenarios_endpoint() -> JSONResponse:
    """Return the default stress scenarios keyed by id."""
    return JSONResponse(
        content={key: s.to_dict() for key, s in DEFAULT_STRESS_SCENARIOS.items()}
    )
