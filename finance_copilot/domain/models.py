"""Domain models - pure Python dataclasses representing financial records and metric results"""

import math
from dataclasses import dataclass, field, asdict
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

RiskLevel = Literal["low", "medium", "high", "critical"]


@dataclass(frozen=True)
class Income:
    """Income source with its payment frequency"""

    id: str
    user_id: str
    amount: float
    frequency: str  # daily | weekly | biweekly | monthly | yearly | one-time
    last_received: Optional[datetime] = None
    currency: str = "USD"
    source: Optional[str] = None


@dataclass(frozen=True)
class Expense:
    """Recorded expense; is_fixed is authoritative for classification"""

    id: str
    user_id: str
    amount: float
    category: str
    recurrence: str
    is_fixed: bool = False
    currency: str = "USD"


@dataclass(frozen=True)
class RecurringPayment:
    """Upcoming obligation (bill, debt, subscription)"""

    id: str
    user_id: str
    amount: float
    due_date: date
    recurrence: str
    type: str  # bill | debt | subscription | other
    priority_hint: int = 0
    currency: str = "USD"
    description: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Realized cash movement; negative amount = outflow"""

    id: str
    user_id: str
    amount: float
    category: str
    timestamp: datetime
    vendor: Optional[str] = None
    currency: str = "USD"
    account_id: Optional[str] = None
    is_recurring_flag: bool = False


@dataclass(frozen=True)
class BalanceSnapshot:
    """Point-in-time account balance"""

    id: str
    user_id: str
    timestamp: datetime
    balance: float
    currency: str = "USD"
    account_id: Optional[str] = None


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return None
        return "Infinite" if value > 0 else "-Infinite"
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


@dataclass
class MetricResult:
    """Uniform envelope returned by every analytics operation"""

    metric: str
    value: Any
    risk: RiskLevel
    explanation: str
    inputs: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        # Infinite runways are legitimate values but not valid JSON
        return _json_safe(asdict(self))


@dataclass
class ClassificationBucket:
    count: int = 0
    total: float = 0.0
    percentage: float = 0.0


@dataclass
class ClassificationSummary:
    fixed: ClassificationBucket
    discretionary: ClassificationBucket


@dataclass
class ClassificationResult(MetricResult):
    classification: Optional[ClassificationSummary] = None


@dataclass
class PaymentPriorityResult(MetricResult):
    payments: List[RecurringPayment] = field(default_factory=list)


@dataclass
class ForecastPoint:
    """Projected month-end position"""

    month: str  # e.g. "Nov 2026"
    projected_balance: float
    projected_income: float
    projected_expenses: float


@dataclass
class ForecastResult(MetricResult):
    forecast: List[ForecastPoint] = field(default_factory=list)


@dataclass
class Anomaly:
    """Transaction that spiked above its category baseline"""

    category: str
    vendor: Optional[str]
    amount: float
    baseline: float
    deviation_percent: float
    timestamp: datetime


@dataclass
class AnomalyResult(MetricResult):
    anomalies: List[Anomaly] = field(default_factory=list)


@dataclass
class RiskScoreResult(MetricResult):
    risk_score: RiskLevel = "low"


@dataclass
class FinancialState:
    balance: float
    income: float
    burn_rate: float
    runway: str
    risk_level: RiskLevel


@dataclass
class FinancialSummary:
    """Aggregated advisory view of a user's finances"""

    financial_state: FinancialState
    insights: List[Dict[str, Any]] = field(default_factory=list)
    simulations: List[Dict[str, Any]] = field(default_factory=list)
    anomalies: List[Anomaly] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return _json_safe(asdict(self))


@dataclass
class IntentRouteResult:
    """Outcome of routing a free-text query"""

    intent: str
    called_functions: List[str] = field(default_factory=list)
    aggregated_results: Dict[str, MetricResult] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "intent": self.intent,
            "called_functions": list(self.called_functions),
            "aggregated_results": {name: result.to_dict() for name, result in self.aggregated_results.items()},
        }
