"""Scoring model configuration: feature weights, calibration and reported metrics

A ModelConfig is an immutable snapshot. "Retraining" never mutates a config;
it returns a new one, and the owner decides whether to publish it.
"""

import math
import random
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from loan_gateway.domain.bands import FEATURE_NAMES
from loan_gateway.domain.models import ModelMetrics

WEIGHT_SUM_TOLERANCE = 1e-9

# Hand-tuned importances. They add up to 1.01, so the default model is
# normalized before use.
BASE_WEIGHTS: Dict[str, float] = {
    "credit_score": 0.35,
    "debt_to_income": 0.25,
    "annual_income": 0.15,
    "employment_length": 0.08,
    "has_derogatory": 0.07,
    "delinquencies_last_2_years": 0.05,
    "inquiries_last_6_months": 0.03,
    "loan_amount": 0.02,
    "home_ownership": 0.005,
    "verification_status": 0.005,
}

BASE_METRICS = ModelMetrics(
    accuracy=0.87,
    precision=0.82,
    recall=0.91,
    f1_score=0.86,
    last_trained=datetime(2024, 1, 15, tzinfo=timezone.utc),
    training_size=10_000,
)

# Probability calibration. A score equal to the center maps to probability 0.5.
SIGMOID_CENTER = 650.0
SIGMOID_SCALE = 200.0
APPROVAL_THRESHOLD = 0.5


def normalize_weights(weights: Mapping[str, float]) -> Dict[str, float]:
    """Scale weights so they sum to 1.0"""
    total = sum(weights.values())
    if not math.isfinite(total):
        raise ValueError("Weights must be finite numbers")
    if total <= 0:
        raise ValueError("Weights must have a positive sum")
    return {name: weight / total for name, weight in weights.items()}


@dataclass(frozen=True)
class ModelConfig:
    """
    Immutable scoring model snapshot.

    Invariants checked on construction:
    - exactly one weight per scored feature
    - every weight finite and non-negative
    - weights sum to 1.0 (within WEIGHT_SUM_TOLERANCE)
    - scale > 0 and threshold in (0, 1)
    """

    weights: Mapping[str, float]
    metrics: ModelMetrics = BASE_METRICS
    sigmoid_center: float = SIGMOID_CENTER
    sigmoid_scale: float = SIGMOID_SCALE
    approval_threshold: float = APPROVAL_THRESHOLD
    version: int = field(default=1, compare=False)

    def __post_init__(self):
        missing = set(FEATURE_NAMES) - set(self.weights)
        unknown = set(self.weights) - set(FEATURE_NAMES)
        if missing or unknown:
            raise ValueError(f"Weight table mismatch: missing={sorted(missing)} unknown={sorted(unknown)}")
        if not all(math.isfinite(w) for w in self.weights.values()):
            raise ValueError("Weights must be finite numbers")
        if any(w < 0 for w in self.weights.values()):
            raise ValueError("Weights must be non-negative")

        total = math.fsum(self.weights.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.0, got {total!r}")

        if not (math.isfinite(self.sigmoid_center) and math.isfinite(self.sigmoid_scale)):
            raise ValueError("sigmoid_center and sigmoid_scale must be finite")
        if self.sigmoid_scale <= 0:
            raise ValueError("sigmoid_scale must be positive")
        if not 0 < self.approval_threshold < 1:
            raise ValueError("approval_threshold must be between 0 and 1")

        # Freeze a private copy so callers can't mutate the snapshot through their dict
        ordered = {name: float(self.weights[name]) for name in FEATURE_NAMES}
        object.__setattr__(self, "weights", MappingProxyType(ordered))

    @classmethod
    def default(
        cls,
        sigmoid_center: float = SIGMOID_CENTER,
        sigmoid_scale: float = SIGMOID_SCALE,
        approval_threshold: float = APPROVAL_THRESHOLD,
    ) -> "ModelConfig":
        """Model built from the hand-tuned weight table"""
        return cls(
            weights=normalize_weights(BASE_WEIGHTS),
            sigmoid_center=sigmoid_center,
            sigmoid_scale=sigmoid_scale,
            approval_threshold=approval_threshold,
        )

    def feature_importance(self) -> Dict[str, float]:
        return dict(self.weights)


DEFAULT_MODEL = ModelConfig.default()


def retrain(
    model: ModelConfig,
    rng: Optional[random.Random] = None,
    training_size: Optional[int] = None,
    now: Optional[datetime] = None,
    weight_jitter: float = 0.05,
    metric_ceiling: float = 0.95,
) -> ModelConfig:
    """
    Simulate a retraining run and return the resulting snapshot.

    This is demo scaffolding, not a training loop:
    - each weight moves by uniform(-jitter/2, +jitter/2), floored at 0
    - weights are renormalized to sum to 1.0
    - each quality metric improves by up to 0.02, capped at ``metric_ceiling``
    - training size is the given size, or the previous one plus up to 999

    The input snapshot is left untouched.
    """
    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)

    jittered = {
        name: max(0.0, weight + (rng.random() - 0.5) * weight_jitter)
        for name, weight in model.weights.items()
    }
    if sum(jittered.values()) == 0:
        # Every weight floored at zero; keep the previous table
        jittered = dict(model.weights)

    old = model.metrics
    metrics = ModelMetrics(
        accuracy=min(metric_ceiling, old.accuracy + rng.random() * 0.02),
        precision=min(metric_ceiling, old.precision + rng.random() * 0.02),
        recall=min(metric_ceiling, old.recall + rng.random() * 0.02),
        f1_score=min(metric_ceiling, old.f1_score + rng.random() * 0.02),
        last_trained=now,
        training_size=training_size if training_size is not None else old.training_size + rng.randrange(1000),
    )

    return replace(
        model,
        weights=normalize_weights(jittered),
        metrics=metrics,
        version=model.version + 1,
    )
