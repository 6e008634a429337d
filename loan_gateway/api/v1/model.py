"""/v1/model - model metrics, feature importance, retraining and drift"""

from typing import Dict, Optional
from fastapi import APIRouter, Depends, Request

from loan_gateway.api.v1.schemas import DriftResponse, ModelMetricsResponse, RetrainRequest, camelize_weights
from loan_gateway.api.dependencies import get_model_registry, get_request_id
from loan_gateway.config import settings
from loan_gateway.domain.registry import ModelRegistry
from loan_gateway.infrastructure.observability.metrics import retrain_counter
from loan_gateway.infrastructure.observability.logging import log_retrain

router = APIRouter()


@router.get("/model/metrics", response_model=ModelMetricsResponse)
def get_model_metrics(registry: ModelRegistry = Depends(get_model_registry)):
    """Reported quality metrics of the active model"""
    model = registry.current()
    return ModelMetricsResponse.from_metrics(model.metrics, model.version)


@router.get("/model/feature-importance", response_model=Dict[str, float])
def get_feature_importance(registry: ModelRegistry = Depends(get_model_registry)):
    """Weight of each feature in the active model (sums to 1)"""
    return camelize_weights(registry.current().feature_importance())


@router.post("/model/retrain", response_model=ModelMetricsResponse)
def retrain_model(
    request: Request,
    request_body: Optional[RetrainRequest] = None,
    registry: ModelRegistry = Depends(get_model_registry),
):
    """
    Simulate retraining and publish the new snapshot.

    Weights are perturbed and renormalized; metrics are nudged upward.
    Predictions already in flight keep scoring against the snapshot they
    started with.
    """
    training_size = request_body.training_size if request_body else None
    model = registry.retrain(
        training_size=training_size,
        weight_jitter=settings.retrain_weight_jitter,
        metric_ceiling=settings.metric_ceiling,
    )

    retrain_counter.inc()
    log_retrain(get_request_id(request), model.version, model.metrics.training_size)

    return ModelMetricsResponse.from_metrics(model.metrics, model.version)


@router.get("/model/drift", response_model=DriftResponse)
def get_drift(registry: ModelRegistry = Depends(get_model_registry)):
    """Drift summary over the recent prediction window"""
    report = registry.drift(
        expected_approval_rate=settings.expected_approval_rate,
        approval_rate_tolerance=settings.approval_rate_tolerance,
        max_low_confidence_share=settings.max_low_confidence_share,
        max_model_age_days=settings.max_model_age_days,
    )
    return DriftResponse.from_report(report)
