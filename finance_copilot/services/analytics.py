"""Analytics service - reads records, runs the domain calculators, guards every operation"""

import asyncio
import logging
import math
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar, Union

from finance_copilot.domain.advisory import build_financial_summary
from finance_copilot.domain.anomalies import (
    BASELINE_END_MONTHS,
    BASELINE_START_MONTHS,
    DETECTION_MONTHS,
    detect_anomalies,
)
from finance_copilot.domain.burn_rate import TRANSACTION_WINDOW_MONTHS, calculate_burn_rate
from finance_copilot.domain.classification import classify_expenses
from finance_copilot.domain.exceptions import InvalidParameterError, MetricComputationError, RecordStoreError
from finance_copilot.domain.forecast import EXPENSE_LOOKBACK_MONTHS, project_cashflow
from finance_copilot.domain.models import (
    AnomalyResult,
    ClassificationResult,
    FinancialSummary,
    ForecastResult,
    MetricResult,
    PaymentPriorityResult,
    RiskScoreResult,
)
from finance_copilot.domain.payment_priority import prioritize_payments
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy
from finance_copilot.domain.runway import calculate_runway, resolve_balance
from finance_copilot.domain.savings_rate import calculate_savings_rate, monthly_income
from finance_copilot.domain.scoring import assess_risk, extract_risk_factors
from finance_copilot.domain import simulations
from finance_copilot.infrastructure.observability.logging import log_metric
from finance_copilot.infrastructure.observability.metrics import (
    metric_counter,
    record_metric,
    store_read_failures_counter,
)
from finance_copilot.infrastructure.store import RecordStore, TransactionQuery
from finance_copilot.utils.date_utils import months_ago
from finance_copilot.utils.validators import validate_amount, validate_months, validate_percent, validate_user_id

logger = logging.getLogger(__name__)

T = TypeVar("T")
Result = TypeVar("Result", bound=Union[MetricResult, FinancialSummary])


def _risk_label(result: Union[MetricResult, FinancialSummary]) -> str:
    if isinstance(result, FinancialSummary):
        return result.financial_state.risk_level
    return result.risk


def _number(value, default: float) -> float:
    return value if isinstance(value, (int, float)) and not isinstance(value, bool) else default


class AnalyticsService:
    """
    Personal-finance analytics for one record store.

    Every public coroutine validates its parameters before any read, then runs
    inside a single error boundary: store failures surface as RecordStoreError
    wrapped in MetricComputationError, parameter problems as
    InvalidParameterError. Nothing is cached between calls.
    """

    def __init__(
        self,
        store: RecordStore,
        policy: RiskPolicy = DEFAULT_POLICY,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.policy = policy
        self.clock = clock

    # ------------------------------------------------------------------
    # Plumbing

    async def _guard(self, user_id: str, metric: str, operation: str, compute: Callable[[], Awaitable[Result]]) -> Result:
        start_time = time.perf_counter()
        try:
            result = await compute()
        except InvalidParameterError:
            raise
        except Exception as e:
            metric_counter.labels(metric=metric, risk="error").inc()
            logger.error(f"Failed to {operation}: {e}", extra={"user_id": user_id, "metric": metric})
            raise MetricComputationError(operation, str(e) or e.__class__.__name__) from e

        duration = time.perf_counter() - start_time
        risk = _risk_label(result)
        record_metric(metric, risk, duration)
        log_metric(user_id, metric, risk, duration * 1000)
        return result

    async def _fetch(self, entity: str, read: Awaitable[T]) -> T:
        try:
            return await read
        except Exception as e:
            store_read_failures_counter.labels(entity=entity).inc()
            raise RecordStoreError(entity, str(e) or e.__class__.__name__) from e

    async def _recent_outflows(self, user_id: str, months: int):
        query = TransactionQuery(since=months_ago(self.clock(), months), outflows_only=True)
        return await self._fetch("transactions", self.store.get_transactions(user_id, query))

    async def _current_balance(self, user_id: str) -> Optional[float]:
        """Latest snapshot, else the sum of every transaction, else None"""
        snapshot = await self._fetch("balance", self.store.get_latest_balance(user_id))
        if snapshot is not None:
            return resolve_balance(snapshot)
        history = await self._fetch(
            "transactions", self.store.get_transactions(user_id, TransactionQuery(ascending=True))
        )
        return resolve_balance(None, history)

    async def _monthly_income(self, user_id: str) -> float:
        incomes = await self._fetch("incomes", self.store.get_incomes(user_id))
        return monthly_income(incomes)

    # ------------------------------------------------------------------
    # Core metrics

    async def get_burn_rate(self, user_id: str) -> MetricResult:
        user_id = validate_user_id(user_id)

        async def compute() -> MetricResult:
            expenses, outflows = await asyncio.gather(
                self._fetch("expenses", self.store.get_expenses(user_id)),
                self._recent_outflows(user_id, TRANSACTION_WINDOW_MONTHS),
            )
            return calculate_burn_rate(expenses, outflows, self.policy)

        return await self._guard(user_id, "burn_rate", "calculate burn rate", compute)

    async def get_runway(self, user_id: str) -> MetricResult:
        user_id = validate_user_id(user_id)

        async def compute() -> MetricResult:
            balance = await self._current_balance(user_id)
            if balance is None:
                return calculate_runway(None, 0, self.policy)
            burn_rate = await self.get_burn_rate(user_id)
            return calculate_runway(balance, _number(burn_rate.value, 0.0), self.policy)

        return await self._guard(user_id, "runway", "calculate runway", compute)

    async def get_savings_rate(self, user_id: str) -> MetricResult:
        user_id = validate_user_id(user_id)

        async def compute() -> MetricResult:
            incomes, burn_rate = await asyncio.gather(
                self._fetch("incomes", self.store.get_incomes(user_id)),
                self.get_burn_rate(user_id),
            )
            return calculate_savings_rate(incomes, _number(burn_rate.value, 0.0), self.policy)

        return await self._guard(user_id, "savings_rate", "calculate savings rate", compute)

    # ------------------------------------------------------------------
    # Spending structure

    async def classify_expenses(self, user_id: str) -> ClassificationResult:
        user_id = validate_user_id(user_id)

        async def compute() -> ClassificationResult:
            expenses, outflows = await asyncio.gather(
                self._fetch("expenses", self.store.get_expenses(user_id)),
                self._recent_outflows(user_id, TRANSACTION_WINDOW_MONTHS),
            )
            return classify_expenses(expenses, outflows, self.policy)

        return await self._guard(user_id, "expense_classification", "classify expenses", compute)

    async def get_payment_priority(self, user_id: str) -> PaymentPriorityResult:
        user_id = validate_user_id(user_id)

        async def compute() -> PaymentPriorityResult:
            today = self.clock().date()
            payments = await self._fetch(
                "recurring payments", self.store.get_recurring_payments(user_id, due_from=today)
            )
            return prioritize_payments(payments, today, self.policy)

        return await self._guard(user_id, "payment_priority", "get payment priority", compute)

    async def get_cashflow_forecast(self, user_id: str, months: int = 6) -> ForecastResult:
        user_id = validate_user_id(user_id)
        months = validate_months(months)

        async def compute() -> ForecastResult:
            since = months_ago(self.clock(), EXPENSE_LOOKBACK_MONTHS)
            balance, incomes, expenses, outflows = await asyncio.gather(
                self._current_balance(user_id),
                self._fetch("incomes", self.store.get_incomes(user_id)),
                self._fetch("expenses", self.store.get_expenses(user_id)),
                self._fetch(
                    "transactions",
                    self.store.get_transactions(user_id, TransactionQuery(since=since, outflows_only=True)),
                ),
            )
            return project_cashflow(
                current_balance=balance or 0.0,
                incomes=incomes,
                expenses=expenses,
                outflows=outflows,
                months=months,
                start=self.clock().date(),
                policy=self.policy,
            )

        return await self._guard(user_id, "cashflow_forecast", "generate cashflow forecast", compute)

    async def detect_spending_anomalies(self, user_id: str) -> AnomalyResult:
        user_id = validate_user_id(user_id)

        async def compute() -> AnomalyResult:
            now = self.clock()
            baseline_query = TransactionQuery(
                since=months_ago(now, BASELINE_START_MONTHS),
                until=months_ago(now, BASELINE_END_MONTHS),
                outflows_only=True,
            )
            recent, baseline = await asyncio.gather(
                self._recent_outflows(user_id, DETECTION_MONTHS),
                self._fetch("transactions", self.store.get_transactions(user_id, baseline_query)),
            )
            return detect_anomalies(recent, baseline, self.policy)

        return await self._guard(user_id, "spending_anomalies", "detect anomalies", compute)

    # ------------------------------------------------------------------
    # Composite metrics

    async def calculate_risk_score(self, user_id: str) -> RiskScoreResult:
        user_id = validate_user_id(user_id)

        async def compute() -> RiskScoreResult:
            runway, burn_rate, payments, incomes = await asyncio.gather(
                self.get_runway(user_id),
                self.get_burn_rate(user_id),
                self.get_payment_priority(user_id),
                self._fetch("incomes", self.store.get_incomes(user_id)),
            )
            factors = extract_risk_factors(runway, burn_rate, payments, len(incomes))
            return assess_risk(factors, self.policy)

        return await self._guard(user_id, "risk_score", "calculate risk score", compute)

    async def get_financial_summary(self, user_id: str) -> FinancialSummary:
        user_id = validate_user_id(user_id)

        async def compute() -> FinancialSummary:
            income, burn_rate, savings_rate, runway, risk_score, payments, anomalies = await asyncio.gather(
                self._monthly_income(user_id),
                self.get_burn_rate(user_id),
                self.get_savings_rate(user_id),
                self.get_runway(user_id),
                self.calculate_risk_score(user_id),
                self.get_payment_priority(user_id),
                self.detect_spending_anomalies(user_id),
            )
            return build_financial_summary(
                monthly_income=income,
                burn_rate=burn_rate,
                savings_rate=savings_rate,
                runway=runway,
                risk_score=risk_score,
                payment_priority=payments,
                anomalies=anomalies,
                policy=self.policy,
            )

        return await self._guard(user_id, "financial_summary", "generate financial summary", compute)

    # ------------------------------------------------------------------
    # What-if simulations (never write back)

    async def simulate_purchase(self, user_id: str, amount: float) -> MetricResult:
        user_id = validate_user_id(user_id)
        amount = validate_amount(amount)

        async def compute() -> MetricResult:
            runway, burn_rate = await asyncio.gather(self.get_runway(user_id), self.get_burn_rate(user_id))
            return simulations.simulate_purchase(
                amount=amount,
                current_balance=_number(runway.inputs.get("balance"), 0.0),
                monthly_burn_rate=_number(burn_rate.value, 0.0),
                current_runway_days=_number(runway.inputs.get("runway_days"), math.inf),
                policy=self.policy,
            )

        return await self._guard(user_id, "purchase_simulation", "simulate purchase", compute)

    async def simulate_income_change(self, user_id: str, percent: float) -> MetricResult:
        user_id = validate_user_id(user_id)
        percent = validate_percent(percent, subject="Income")

        async def compute() -> MetricResult:
            income, burn_rate, runway = await asyncio.gather(
                self._monthly_income(user_id),
                self.get_burn_rate(user_id),
                self.get_runway(user_id),
            )
            return simulations.simulate_income_change(
                percent=percent,
                current_monthly_income=income,
                monthly_burn_rate=_number(burn_rate.value, 0.0),
                current_balance=_number(runway.inputs.get("balance"), 0.0),
                policy=self.policy,
            )

        return await self._guard(user_id, "income_change_simulation", "simulate income change", compute)

    async def simulate_expense_change(self, user_id: str, percent: float) -> MetricResult:
        user_id = validate_user_id(user_id)
        percent = validate_percent(percent, subject="Expense")

        async def compute() -> MetricResult:
            income, burn_rate, runway = await asyncio.gather(
                self._monthly_income(user_id),
                self.get_burn_rate(user_id),
                self.get_runway(user_id),
            )
            return simulations.simulate_expense_change(
                percent=percent,
                monthly_income=income,
                current_monthly_burn_rate=_number(burn_rate.value, 0.0),
                current_balance=_number(runway.inputs.get("balance"), 0.0),
                policy=self.policy,
            )

        return await self._guard(user_id, "expense_change_simulation", "simulate expense change", compute)
