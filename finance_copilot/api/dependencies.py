"""Dependency injection for FastAPI endpoints"""

from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from finance_copilot.config import Settings
from finance_copilot.infrastructure.database.repositories import SqlRecordStore
from finance_copilot.infrastructure.database.session import session_scope
from finance_copilot.infrastructure.store import RecordStore
from finance_copilot.services.analytics import AnalyticsService
from finance_copilot.services.intent_router import IntentRouter


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    """Session from the factory built in create_app, closed after the request"""
    yield from session_scope(request.app.state.session_factory)


def get_record_store(db: Session = Depends(get_db)) -> RecordStore:
    return SqlRecordStore(db)


def get_analytics_service(store: RecordStore = Depends(get_record_store)) -> AnalyticsService:
    return AnalyticsService(store)


def get_intent_router(
    service: AnalyticsService = Depends(get_analytics_service),
    settings: Settings = Depends(get_app_settings),
) -> IntentRouter:
    return IntentRouter(
        service,
        forecast_default_months=settings.forecast_default_months,
        planning_forecast_months=settings.planning_forecast_months,
    )


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    """Caller identity from the X-User-Id header"""
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(status_code=400, detail="Valid user ID is required")
    return x_user_id.strip()
