"""GET /v1/advisory - aggregated financial summary"""

from fastapi import APIRouter, Depends, Request

from finance_copilot.api.dependencies import get_analytics_service, get_request_id, get_user_id
from finance_copilot.api.errors import to_http_error
from finance_copilot.api.v1.schemas import AdvisoryResponse
from finance_copilot.services.analytics import AnalyticsService

router = APIRouter()


@router.get("/advisory", response_model=AdvisoryResponse)
async def get_advisory(
    request: Request,
    user_id: str = Depends(get_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """
    Current financial state, per-metric insights, anomalies and
    recommendations in one response.
    """
    try:
        summary = await service.get_financial_summary(user_id)
    except Exception as e:
        raise to_http_error(e, get_request_id(request)) from e
    return summary.to_dict()
