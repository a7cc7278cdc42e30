"""POST /v1/intent - answer a free-text question with the matching analytics bundle"""

from fastapi import APIRouter, Depends, Request

from finance_copilot.api.dependencies import get_intent_router, get_request_id, get_user_id
from finance_copilot.api.errors import to_http_error
from finance_copilot.api.v1.schemas import IntentRequest, IntentResponse
from finance_copilot.services.intent_router import IntentRouter

router = APIRouter()


@router.post("/intent", response_model=IntentResponse)
async def route_intent(
    body: IntentRequest,
    request: Request,
    user_id: str = Depends(get_user_id),
    intent_router: IntentRouter = Depends(get_intent_router),
):
    try:
        result = await intent_router.route_intent(body.query, user_id)
    except Exception as e:
        raise to_http_error(e, get_request_id(request)) from e
    return result.to_dict()
