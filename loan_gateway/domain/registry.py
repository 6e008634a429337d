"""Process-wide holder of the active scoring model"""

import random
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Optional

from loan_gateway.domain.model_config import ModelConfig, retrain
from loan_gateway.domain.models import DriftReport, ScoreResult
from loan_gateway.domain.monitoring import calculate_drift


class ModelRegistry:
    """
    Owns the current ModelConfig snapshot and a window of recent results.

    Snapshots are immutable, so readers just take the current reference and
    score against it; a concurrent retrain swaps in a whole new snapshot and
    can never expose a partially updated weight table. Writers are serialized
    by a lock.
    """

    def __init__(self, model: ModelConfig, window_size: int = 500):
        self._lock = threading.Lock()
        self._model = model
        self._initial = model
        self._recent: Deque[ScoreResult] = deque(maxlen=window_size)

    def current(self) -> ModelConfig:
        return self._model

    def retrain(
        self,
        rng: Optional[random.Random] = None,
        training_size: Optional[int] = None,
        now: Optional[datetime] = None,
        weight_jitter: float = 0.05,
        metric_ceiling: float = 0.95,
    ) -> ModelConfig:
        """Publish a retrained snapshot and return it"""
        with self._lock:
            self._model = retrain(
                self._model,
                rng=rng,
                training_size=training_size,
                now=now,
                weight_jitter=weight_jitter,
                metric_ceiling=metric_ceiling,
            )
            return self._model

    def record(self, result: ScoreResult) -> None:
        with self._lock:
            self._recent.append(result)

    def recent_results(self) -> List[ScoreResult]:
        with self._lock:
            return list(self._recent)

    def drift(self, now: Optional[datetime] = None, **thresholds) -> DriftReport:
        """Drift report over the recent window against the current model"""
        return calculate_drift(
            self.recent_results(),
            self.current().metrics,
            now or datetime.now(timezone.utc),
            **thresholds,
        )

    def reset(self, model: Optional[ModelConfig] = None) -> None:
        """Restore the initial (or given) snapshot and clear the window"""
        with self._lock:
            self._model = model or self._initial
            self._recent.clear()
