"""Drift checks over recent predictions"""

from datetime import datetime, timedelta
from typing import Sequence

from loan_gateway.domain.models import Confidence, Decision, DriftReport, ModelMetrics, ScoreResult


def calculate_drift(
    results: Sequence[ScoreResult],
    metrics: ModelMetrics,
    now: datetime,
    expected_approval_rate: float = 0.65,
    approval_rate_tolerance: float = 0.15,
    max_low_confidence_share: float = 0.3,
    max_model_age_days: int = 90,
) -> DriftReport:
    """
    Summarize recent predictions and decide whether the model looks stale.

    Retraining is flagged when any of these hold:
    - approval rate strays more than the tolerance from the expected rate
    - too large a share of predictions are low confidence
    - the model was last trained longer ago than the max age
    """
    if not results:
        return DriftReport(
            approval_rate=0.0,
            average_score=0.0,
            confidence_distribution={c.value: 0.0 for c in Confidence},
            needs_retraining=False,
        )

    total = len(results)
    approval_rate = sum(1 for r in results if r.decision is Decision.APPROVED) / total
    average_score = sum(r.score for r in results) / total
    distribution = {
        c.value: sum(1 for r in results if r.confidence is c) / total
        for c in Confidence
    }

    needs_retraining = (
        abs(approval_rate - expected_approval_rate) > approval_rate_tolerance
        or distribution[Confidence.LOW.value] > max_low_confidence_share
        or now - metrics.last_trained > timedelta(days=max_model_age_days)
    )

    return DriftReport(
        approval_rate=approval_rate,
        average_score=average_score,
        confidence_distribution=distribution,
        needs_retraining=needs_retraining,
        sample_size=total,
    )
