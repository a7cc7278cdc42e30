"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_copilot.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_copilot.api.v1 import advisory, finance, intent
from finance_copilot.config import Settings, get_settings
from finance_copilot.infrastructure.database.session import create_db_engine, create_session_factory
from finance_copilot.infrastructure.observability.logging import setup_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.service_name)

    app = FastAPI(
        title="Finance Copilot",
        description="Personal-finance analytics and intent routing",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.engine = create_db_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Malformed parameters are client errors, same as InvalidParameterError
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(finance.router, prefix="/v1", tags=["finance"])
    app.include_router(advisory.router, prefix="/v1", tags=["advisory"])
    app.include_router(intent.router, prefix="/v1", tags=["intent"])

    return app
