"""
Success case classification.

Compares a reference period's revenue with the previous period and
assigns a tier for the fixed increase and for the percentage increase.
"""

from typing import Optional

from models import DateRange, SuccessMetrics, SuccessStatus, Thresholds


TIER_NONE = "none"
TIER_LOW = "low"
TIER_MEDIUM = "medium"
TIER_HIGH = "high"


def classify_tier(value: Optional[float], thresholds: Optional[Thresholds]) -> str:
    """Highest tier whose cutoff the value meets, or "none"."""
    if value is None or thresholds is None:
        return TIER_NONE
    if value >= thresholds.high:
        return TIER_HIGH
    if value >= thresholds.medium:
        return TIER_MEDIUM
    if value >= thresholds.low:
        return TIER_LOW
    return TIER_NONE


def percentage_increase(reference_revenue: float, previous_revenue: float) -> Optional[float]:
    """Growth in percent, or None when there is no previous revenue to divide by."""
    if previous_revenue == 0:
        return None
    return (reference_revenue - previous_revenue) / previous_revenue * 100


def calculate_success(
    reference_revenue: float,
    previous_revenue: float,
    fixed_thresholds: Optional[Thresholds],
    percentage_thresholds: Optional[Thresholds],
) -> SuccessMetrics:
    fixed = reference_revenue - previous_revenue
    percentage = percentage_increase(reference_revenue, previous_revenue)
    return SuccessMetrics(
        fixed_increase=fixed,
        percentage_increase=percentage,
        fixed_level=classify_tier(fixed, fixed_thresholds),
        percentage_level=classify_tier(percentage, percentage_thresholds),
    )


def build_success_status(
    store_name: str,
    reference: DateRange,
    previous: DateRange,
    reference_revenue: float,
    previous_revenue: float,
    fixed_thresholds: Optional[Thresholds] = None,
    percentage_thresholds: Optional[Thresholds] = None,
) -> SuccessStatus:
    return SuccessStatus(
        store_name=store_name,
        duration_in_days=max(reference.duration_days, 0),
        reference_period=reference,
        previous_period=previous,
        reference_revenue=reference_revenue,
        previous_revenue=previous_revenue,
        metrics=calculate_success(
            reference_revenue, previous_revenue, fixed_thresholds, percentage_thresholds
        ),
        fixed_thresholds=fixed_thresholds,
        percentage_thresholds=percentage_thresholds,
    )
