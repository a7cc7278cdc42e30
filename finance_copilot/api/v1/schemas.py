"""Pydantic schemas for API request/response validation"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MetricResponse(BaseModel):
    """Envelope returned by every /v1/finance endpoint"""

    # Metric-specific payloads (forecast, payments, anomalies, classification) ride along
    model_config = ConfigDict(extra="allow")

    metric: str
    value: Any
    risk: str
    explanation: str
    inputs: Dict[str, Any] = Field(default_factory=dict)


class PurchaseSimulationRequest(BaseModel):
    """Request body for POST /v1/finance/simulate-purchase"""

    amount: float = Field(..., gt=0, description="One-off purchase amount")


class PercentChangeRequest(BaseModel):
    """Request body for POST /v1/finance/simulate-income and simulate-expense"""

    percent: float = Field(..., ge=-100, le=1000, description="Relative change, e.g. 10 for +10%")


class IntentRequest(BaseModel):
    """Request body for POST /v1/intent"""

    query: str = Field(..., min_length=1, description="Free-text question")

    @field_validator("query")
    @classmethod
    def query_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query is required")
        return v


class IntentResponse(BaseModel):
    """Response for POST /v1/intent"""

    intent: str
    called_functions: List[str]
    aggregated_results: Dict[str, MetricResponse]


class FinancialStateSchema(BaseModel):
    balance: float
    income: float
    burn_rate: float
    runway: str
    risk_level: str


class AdvisoryResponse(BaseModel):
    """Response for GET /v1/advisory"""

    financial_state: FinancialStateSchema
    insights: List[Dict[str, Any]]
    simulations: List[Dict[str, Any]]
    anomalies: List[Dict[str, Any]]
    recommendations: List[str]
