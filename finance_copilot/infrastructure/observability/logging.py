"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "finance-copilot", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "finance-copilot") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_metric(user_id: str, metric: str, risk: str, duration_ms: float) -> None:
    """Log structured metric outcome for analysis"""
    logging.getLogger("finance_copilot.analytics").info(
        "Metric computed",
        extra={
            "user_id": user_id,
            "step": "metric_complete",
            "metric": metric,
            "risk": risk,
            "duration_ms": duration_ms,
        },
    )


def log_intent(user_id: str, intent: str, called_functions: list) -> None:
    """Log which analytics bundle a query was routed to"""
    logging.getLogger("finance_copilot.intent").info(
        "Intent routed",
        extra={
            "user_id": user_id,
            "step": "intent_routed",
            "intent": intent,
            "called_functions": called_functions,
        },
    )
