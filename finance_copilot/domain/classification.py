"""Fixed vs discretionary classification of expenses and spending"""

from typing import Sequence

from finance_copilot.domain.burn_rate import TRANSACTION_WINDOW_MONTHS
from finance_copilot.domain.models import (
    ClassificationBucket,
    ClassificationResult,
    ClassificationSummary,
    Expense,
    Transaction,
)
from finance_copilot.domain.policy import DEFAULT_POLICY, RiskPolicy, first_above
from finance_copilot.domain.recurrence import to_monthly
from finance_copilot.domain.runway import round_cents

# Substring heuristic: "cartax" matches "tax". Expenses never use it, only transactions.
FIXED_CATEGORY_KEYWORDS = (
    "rent",
    "mortgage",
    "utilities",
    "insurance",
    "subscription",
    "loan",
    "debt",
    "tax",
    "phone",
    "internet",
    "electricity",
    "water",
    "gas",
    "health insurance",
    "car payment",
)


def is_fixed_category(category: str) -> bool:
    lowered = (category or "").lower()
    return any(keyword in lowered for keyword in FIXED_CATEGORY_KEYWORDS)


def _percentage(part: float, total: float) -> float:
    return part / total * 100 if total > 0 else 0.0


def classify_expenses(
    expenses: Sequence[Expense],
    outflows: Sequence[Transaction],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> ClassificationResult:
    """
    Split monthly spend into fixed and discretionary buckets.

    Expenses are bucketed by their is_fixed flag (normalized to monthly);
    outflow transactions from the trailing window by category keyword, each
    contributing a third of its absolute amount.
    """
    fixed = ClassificationBucket()
    discretionary = ClassificationBucket()

    for expense in expenses:
        bucket = fixed if expense.is_fixed else discretionary
        bucket.total += to_monthly(expense.amount, expense.recurrence)
        bucket.count += 1

    for txn in outflows:
        bucket = fixed if is_fixed_category(txn.category) else discretionary
        bucket.total += abs(txn.amount) / TRANSACTION_WINDOW_MONTHS
        bucket.count += 1

    total = fixed.total + discretionary.total
    fixed_pct = _percentage(fixed.total, total)
    discretionary_pct = _percentage(discretionary.total, total)

    # Higher fixed share = less room to cut back
    risk = first_above(fixed_pct, policy.fixed_share_levels, "low")

    summary = ClassificationSummary(
        fixed=ClassificationBucket(
            count=fixed.count,
            total=round_cents(fixed.total),
            percentage=round_cents(fixed_pct),
        ),
        discretionary=ClassificationBucket(
            count=discretionary.count,
            total=round_cents(discretionary.total),
            percentage=round_cents(discretionary_pct),
        ),
    )

    return ClassificationResult(
        metric="expense_classification",
        value=summary,
        risk=risk,
        explanation=(
            f"Expenses classified as {fixed_pct:.1f}% fixed (${fixed.total:.2f}/month) and "
            f"{discretionary_pct:.1f}% discretionary (${discretionary.total:.2f}/month)"
        ),
        inputs={
            "expense_count": len(expenses),
            "transaction_count": len(outflows),
            "total_monthly": total,
        },
        classification=summary,
    )
