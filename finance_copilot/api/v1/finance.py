"""/v1/finance - individual analytics metrics and what-if simulations"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from finance_copilot.api.dependencies import get_analytics_service, get_app_settings, get_request_id, get_user_id
from finance_copilot.api.errors import to_http_error
from finance_copilot.api.v1.schemas import MetricResponse, PercentChangeRequest, PurchaseSimulationRequest
from finance_copilot.config import Settings
from finance_copilot.domain.models import MetricResult
from finance_copilot.services.analytics import AnalyticsService

router = APIRouter(prefix="/finance")


async def _respond(request: Request, compute) -> dict:
    try:
        result: MetricResult = await compute
    except Exception as e:
        raise to_http_error(e, get_request_id(request)) from e
    return result.to_dict()


@router.get("/burn-rate", response_model=MetricResponse)
async def burn_rate(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Monthly spend from recurring expenses plus recent outflows"""
    return await _respond(request, service.get_burn_rate(user_id))


@router.get("/runway", response_model=MetricResponse)
async def runway(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.get_runway(user_id))


@router.get("/savings-rate", response_model=MetricResponse)
async def savings_rate(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.get_savings_rate(user_id))


@router.get("/classification", response_model=MetricResponse)
async def classification(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Fixed vs discretionary split of spending"""
    return await _respond(request, service.classify_expenses(user_id))


@router.get("/payment-priority", response_model=MetricResponse)
async def payment_priority(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.get_payment_priority(user_id))


@router.get("/cashflow-forecast", response_model=MetricResponse)
async def cashflow_forecast(
    request: Request,
    months: Optional[int] = Query(default=None, ge=1, le=24, description="Forecast horizon in months"),
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
    settings: Settings = Depends(get_app_settings),
):
    """
    Month-by-month balance projection.

    Defaults to the configured horizon when months is omitted.
    """
    horizon = months if months is not None else settings.forecast_default_months
    return await _respond(request, service.get_cashflow_forecast(user_id, horizon))


@router.get("/anomalies", response_model=MetricResponse)
async def anomalies(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.detect_spending_anomalies(user_id))


@router.get("/risk-score", response_model=MetricResponse)
async def risk_score(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.calculate_risk_score(user_id))


@router.post("/simulate-purchase", response_model=MetricResponse)
async def simulate_purchase(
    body: PurchaseSimulationRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.simulate_purchase(user_id, body.amount))


@router.post("/simulate-income", response_model=MetricResponse)
async def simulate_income(
    body: PercentChangeRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.simulate_income_change(user_id, body.percent))


@router.post("/simulate-expense", response_model=MetricResponse)
async def simulate_expense(
    body: PercentChangeRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await _respond(request, service.simulate_expense_change(user_id, body.percent))
