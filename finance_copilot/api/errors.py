"""Translate analytics failures into HTTP errors"""

import logging

from fastapi import HTTPException

from finance_copilot.domain.exceptions import InvalidParameterError, MetricComputationError

logger = logging.getLogger(__name__)


def to_http_error(error: Exception, request_id: str) -> HTTPException:
    """
    400 for bad parameters, 503 when the record store failed underneath,
    500 for everything else.
    """
    if isinstance(error, InvalidParameterError):
        logger.warning(f"Invalid parameter: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=400, detail=str(error))

    if isinstance(error, MetricComputationError) and error.upstream_failure:
        logger.error(f"Record store error: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail="Record store unavailable")

    logger.error(f"Unexpected error: {error}", extra={"request_id": request_id})
    if isinstance(error, MetricComputationError):
        return HTTPException(status_code=500, detail=str(error))
    return HTTPException(status_code=500, detail="Internal server error")
