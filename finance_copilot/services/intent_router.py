"""Rule-based intent detection and routing to analytics bundles"""

import asyncio
import logging
import re
from typing import Dict, List, Optional, Tuple

from finance_copilot.domain.exceptions import InvalidParameterError, MetricComputationError
from finance_copilot.domain.models import IntentRouteResult, MetricResult
from finance_copilot.infrastructure.observability.logging import log_intent
from finance_copilot.infrastructure.observability.metrics import intent_counter
from finance_copilot.services.analytics import AnalyticsService
from finance_copilot.utils.validators import validate_user_id

logger = logging.getLogger(__name__)

# Checked in order; first match wins
INTENT_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("advisory", ("how am i doing", "financial health", "overall", "summary", "status", "advisory")),
    ("forecasting", ("forecast", "projection", "future", "months ahead", "cashflow")),
    (
        "simulation",
        ("what if", "simulate", "purchase", "buy", "if i spend", "if i earn", "if income", "if expense"),
    ),
    ("anomaly", ("anomaly", "unusual", "spike", "outlier", "strange")),
    ("planning", ("priority", "pay", "planning", "should i pay", "upcoming payments")),
)
DEFAULT_INTENT = "advisory"

PURCHASE_KEYWORDS = ("purchase", "buy", "spend")

MONTHS_PATTERN = re.compile(r"(\d+)\s*months?", re.IGNORECASE)
AMOUNT_PATTERN = re.compile(r"\$?(\d+(?:\.\d{2})?)")
PERCENT_PATTERN = re.compile(r"(\d+)\s*%")


def detect_intent(query: str) -> str:
    lowered = query.lower()
    for intent, keywords in INTENT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return intent
    return DEFAULT_INTENT


def extract_months(query: str) -> Optional[int]:
    match = MONTHS_PATTERN.search(query)
    return int(match.group(1)) if match else None


def extract_amount(query: str) -> float:
    """First number in the query, optionally prefixed with $; 0 when absent"""
    match = AMOUNT_PATTERN.search(query)
    return float(match.group(1)) if match else 0.0


def extract_percent(query: str) -> float:
    """Unsigned: "reduce expenses by 20%" yields 20, not -20"""
    match = PERCENT_PATTERN.search(query)
    return float(match.group(1)) if match else 0.0


class IntentRouter:
    """
    Maps a free-text question to a fixed bundle of analytics calls.

    Results are keyed by metric name; called_functions lists the service
    methods invoked, in order. A simulation query with no usable number calls
    nothing and returns an empty result map.
    """

    def __init__(self, service: AnalyticsService, forecast_default_months: int = 6, planning_forecast_months: int = 3):
        self.service = service
        self.forecast_default_months = forecast_default_months
        self.planning_forecast_months = planning_forecast_months

    async def route_intent(self, query: str, user_id: str) -> IntentRouteResult:
        user_id = validate_user_id(user_id)
        if not isinstance(query, str) or not query.strip():
            raise InvalidParameterError("Query is required")

        intent = detect_intent(query)
        try:
            called_functions, results = await self._dispatch(intent, query, user_id)
        except InvalidParameterError:
            raise
        except Exception as e:
            logger.error(f"Failed to route intent: {e}", extra={"user_id": user_id, "intent": intent})
            raise MetricComputationError("route intent", str(e) or e.__class__.__name__) from e

        intent_counter.labels(intent=intent).inc()
        log_intent(user_id, intent, called_functions)
        return IntentRouteResult(intent=intent, called_functions=called_functions, aggregated_results=results)

    async def _dispatch(self, intent: str, query: str, user_id: str) -> Tuple[List[str], Dict[str, MetricResult]]:
        service = self.service

        if intent == "forecasting":
            months = extract_months(query)
            if months is None:
                months = self.forecast_default_months
            forecast, runway = await asyncio.gather(
                service.get_cashflow_forecast(user_id, months),
                service.get_runway(user_id),
            )
            return ["get_cashflow_forecast", "get_runway"], {"forecast": forecast, "runway": runway}

        if intent == "simulation":
            return await self._simulate(query, user_id)

        if intent == "anomaly":
            anomalies = await service.detect_spending_anomalies(user_id)
            return ["detect_spending_anomalies"], {"anomalies": anomalies}

        if intent == "planning":
            payments, runway, forecast = await asyncio.gather(
                service.get_payment_priority(user_id),
                service.get_runway(user_id),
                service.get_cashflow_forecast(user_id, self.planning_forecast_months),
            )
            return (
                ["get_payment_priority", "get_runway", "get_cashflow_forecast"],
                {"payment_priority": payments, "runway": runway, "forecast": forecast},
            )

        burn_rate, savings_rate, runway, risk_score = await asyncio.gather(
            service.get_burn_rate(user_id),
            service.get_savings_rate(user_id),
            service.get_runway(user_id),
            service.calculate_risk_score(user_id),
        )
        return (
            ["get_burn_rate", "get_savings_rate", "get_runway", "calculate_risk_score"],
            {"burn_rate": burn_rate, "savings_rate": savings_rate, "runway": runway, "risk_score": risk_score},
        )

    async def _simulate(self, query: str, user_id: str) -> Tuple[List[str], Dict[str, MetricResult]]:
        lowered = query.lower()

        if any(keyword in lowered for keyword in PURCHASE_KEYWORDS):
            amount = extract_amount(query)
            if amount > 0:
                result = await self.service.simulate_purchase(user_id, amount)
                return ["simulate_purchase"], {"purchase_simulation": result}
        elif "income" in lowered:
            percent = extract_percent(query)
            if percent != 0:
                result = await self.service.simulate_income_change(user_id, percent)
                return ["simulate_income_change"], {"income_simulation": result}
        elif "expense" in lowered:
            percent = extract_percent(query)
            if percent != 0:
                result = await self.service.simulate_expense_change(user_id, percent)
                return ["simulate_expense_change"], {"expense_simulation": result}

        logger.info("Simulation skipped, no amount or percent in query", extra={"user_id": user_id})
        return [], {}
