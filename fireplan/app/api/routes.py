"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from fireplan.config import AppSettings
from fireplan.core.charts import compute_chart_bars, compute_debt_chart_bars, compute_split_chart_bars
from fireplan.core.formatting import format_compact_value
from fireplan.core.projection import Projection, fire_number, project_from_settings, target_fire_year
from fireplan.core.summaries import (
    build_debt_chart_summary,
    build_growth_chart_summary,
    build_split_chart_summary,
)
from fireplan.core.svg_charts import (
    ChartConfig,
    DebtChartConfig,
    SplitChartConfig,
    build_debt_projection_svg,
    build_projection_svg,
    build_split_projection_svg,
)
from fireplan.core.text_charts import build_projection_chart
from fireplan.logger import get_app_logger
from fireplan.schemas.charts import ChartRequest, ChartResponse
from fireplan.schemas.projection import (
    FireNumberRequest,
    FireNumberResponse,
    ProjectionRequest,
    ProjectionResponse,
)

api_bp = Blueprint("api", __name__)
logger = get_app_logger(__name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    logger.warning(f"Rejected {request.path}: {exc.error_count()} validation error(s)")
    return jsonify({"detail": exc.errors(include_url=False, include_context=False)}), HTTPStatus.BAD_REQUEST


# -----------------------------
# Helpers
# -----------------------------


def _app_settings() -> AppSettings:
    return current_app.config["FIREPLAN"]


def _chart_context(payload: ChartRequest) -> Tuple[Projection, str, str]:
    settings = _app_settings()
    theme = payload.theme or settings.theme
    currency = (payload.currency or settings.base_currency).upper()
    projection = project_from_settings(payload.settings, payload.currentPortfolioValue, now=payload.now)
    return projection, theme, currency


def _chart_response(svg: str, summary: str, bars: List[BaseModel], fallback: Optional[str]) -> Any:
    """JSON by default; `?format=svg` returns the image (or the text fallback)."""
    if request.args.get("format") == "svg":
        if svg:
            return Response(svg, mimetype="image/svg+xml")
        return Response(fallback or summary, mimetype="text/plain")

    response = ChartResponse(svg=svg, summary=summary, bars=bars, fallback=fallback)
    return jsonify(response.model_dump(mode="json"))


def _missing(field: str) -> Tuple[Any, HTTPStatus]:
    logger.warning(f"Rejected {request.path}: missing {field}")
    return jsonify({"detail": f"'{field}' is required for this chart"}), HTTPStatus.BAD_REQUEST


# -----------------------------
# Endpoints
# -----------------------------


@api_bp.get("/health")
def health() -> Any:
    """Health-check endpoint."""
    return jsonify({"status": "ok"})


@api_bp.post("/projection")
def projection() -> Any:
    """Year-by-year FIRE projection for the given settings."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = ProjectionRequest.model_validate(raw_payload)
    result = project_from_settings(payload.settings, payload.currentPortfolioValue, now=payload.now)
    logger.info(f"Projection computed: {len(result.years)} years, fire_year={result.fire_year}")

    response = ProjectionResponse(projection=result, targetFireYear=target_fire_year(payload.settings))
    return jsonify(response.model_dump(mode="json"))


@api_bp.post("/fire-number")
def fire_number_endpoint() -> Any:
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    payload = FireNumberRequest.model_validate(raw_payload)
    response = FireNumberResponse(fireNumber=fire_number(payload.monthlySpending, payload.withdrawalRate))
    return jsonify(response.model_dump())


@api_bp.post("/charts/growth")
def growth_chart() -> Any:
    payload = ChartRequest.model_validate(request.get_json(force=True, silent=False))
    projection_result, theme, currency = _chart_context(payload)

    summary = build_growth_chart_summary(projection_result, payload.settings, currency, now=payload.now)
    bars = compute_chart_bars(projection_result, currency)
    config = ChartConfig(
        target_value=projection_result.target_value,
        target_label=format_compact_value(projection_result.target_value, currency),
        theme=theme,
        title="Growth with contributions",
        tooltip=summary,
        target_year=target_fire_year(payload.settings),
    )
    svg = build_projection_svg(bars, config)

    fallback = None
    if not svg:
        fallback = build_projection_chart(
            projection_result.years,
            projection_result.target_value,
            currency,
            projection_result.fire_year,
        )
    logger.info(f"Growth chart rendered: {len(bars)} bars, svg={'yes' if svg else 'no'}")
    return _chart_response(svg, summary, bars, fallback)


@api_bp.post("/charts/split")
def split_chart() -> Any:
    payload = ChartRequest.model_validate(request.get_json(force=True, silent=False))
    if payload.split is None:
        return _missing("split")
    projection_result, theme, currency = _chart_context(payload)

    summary = build_split_chart_summary(projection_result, payload.settings, payload.split, currency)
    if not payload.split.has_locked:
        # nothing locked, the growth chart already tells the whole story
        logger.info("Split chart skipped: no locked value or contributions")
        return _chart_response("", summary, [], summary)

    bars = compute_split_chart_bars(projection_result, payload.split, payload.settings, currency)

    sipp_access_year: Optional[int] = payload.settings.yearOfBirth + payload.settings.sippAccessAge
    years = projection_result.years
    if not years or not years[0].year <= sipp_access_year <= years[-1].year:
        sipp_access_year = None

    config = SplitChartConfig(
        target_value=projection_result.target_value,
        target_label=format_compact_value(projection_result.target_value, currency),
        theme=theme,
        title="Accessible vs Locked",
        tooltip=summary,
        target_year=target_fire_year(payload.settings),
        sipp_access_year=sipp_access_year,
    )
    svg = build_split_projection_svg(bars, config)
    logger.info(f"Split chart rendered: {len(bars)} bars, svg={'yes' if svg else 'no'}")
    return _chart_response(svg, summary, bars, None if svg else summary)


@api_bp.post("/charts/debt")
def debt_chart() -> Any:
    payload = ChartRequest.model_validate(request.get_json(force=True, silent=False))
    if payload.debt is None:
        return _missing("debt")
    projection_result, theme, currency = _chart_context(payload)

    summary = build_debt_chart_summary(payload.debt, currency)
    bars = compute_debt_chart_bars(payload.debt, projection_result, currency)
    config = DebtChartConfig(
        starting_debt=payload.debt.totalDebt,
        starting_debt_label=format_compact_value(payload.debt.totalDebt, currency),
        theme=theme,
        title="Debt Repayment Projection",
        tooltip=summary,
    )
    svg = build_debt_projection_svg(bars, config)
    logger.info(f"Debt chart rendered: {len(bars)} bars, svg={'yes' if svg else 'no'}")
    return _chart_response(svg, summary, bars, None if svg else summary)
