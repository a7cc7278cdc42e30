"""Payment prioritization - order upcoming obligations by urgency"""

from datetime import date
from typing import Dict, Sequence, Tuple

from finance_copilot.domain.models import PaymentPriorityResult, RecurringPayment
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_above

TYPE_PRIORITY: Dict[str, int] = {
    "debt": 1,
    "bill": 2,
    "subscription": 3,
    "other": 4,
}
UNKNOWN_TYPE_PRIORITY = 5


def payment_sort_key(payment: RecurringPayment) -> Tuple[date, int, float]:
    """Due date ascending, then debt > bill > subscription > other, then larger amount first"""
    return (
        payment.due_date,
        TYPE_PRIORITY.get(payment.type, UNKNOWN_TYPE_PRIORITY),
        -payment.amount,
    )


def prioritize_payments(
    payments: Sequence[RecurringPayment],
    today: date,
    policy: RiskPolicy = DEFAULT_POLICY,
) -> PaymentPriorityResult:
    """
    Sort upcoming payments and grade the total obligation.

    Callers normally pass only payments due today or later, so the overdue
    check never fires in practice; it stays so the contract reports it.
    """
    if not payments:
        return PaymentPriorityResult(
            metric="payment_priority",
            value=0,
            risk="low",
            explanation="No upcoming payments found.",
            inputs={"payment_count": 0},
            payments=[],
        )

    ordered = sorted(payments, key=payment_sort_key)
    total_amount = sum(p.amount for p in ordered)
    overdue = [p for p in ordered if p.due_date < today]

    if overdue:
        risk = "critical"
    else:
        risk = first_above(total_amount, policy.obligation_total_levels, "low")

    return PaymentPriorityResult(
        metric="payment_priority",
        value=len(ordered),
        risk=risk,
        explanation=(
            f"Found {len(ordered)} upcoming payment(s) totaling ${total_amount:.2f}. "
            "Payments are prioritized by due date, type (debt > bill > subscription), and amount."
        ),
        inputs={
            "payment_count": len(ordered),
            "total_amount": total_amount,
            "overdue_count": len(overdue),
        },
        payments=ordered,
    )
