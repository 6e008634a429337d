"""POST /v1/predict - loan approval likelihood endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, Request

from loan_gateway.api.v1.schemas import (
    ApplicantProfileSchema,
    BatchPredictionRequest,
    BatchPredictionResponse,
    PredictionResponse,
)
from loan_gateway.api.dependencies import get_model_registry, get_request_id
from loan_gateway.domain.exceptions import ValidationError
from loan_gateway.domain.registry import ModelRegistry
from loan_gateway.domain.scoring import evaluate, evaluate_batch
from loan_gateway.infrastructure.observability.metrics import record_prediction, validation_failures_counter
from loan_gateway.infrastructure.observability.logging import log_prediction

router = APIRouter()


@router.post("/predict", response_model=PredictionResponse)
def predict(
    request_body: ApplicantProfileSchema,
    request: Request,
    registry: ModelRegistry = Depends(get_model_registry),
):
    """
    Score a single loan application.

    Flow:
    1. Validate the applicant profile (all out-of-range fields reported at once)
    2. Evaluate against the current model snapshot
    3. Remember the result for drift monitoring
    4. Return decision, probability, confidence and explanations
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        result = evaluate(request_body.to_profile(), registry.current())
    except ValidationError as e:
        validation_failures_counter.inc()
        logging.warning(f"Invalid applicant data: {e}", extra={"request_id": request_id})
        raise

    registry.record(result)

    duration_ms = (time.time() - start_time) * 1000
    record_prediction(result.approved, result.score, result.confidence.value)
    log_prediction(request_id, result.approved, result.score, result.confidence.value, duration_ms)

    return PredictionResponse.from_result(result)


@router.post("/predict/batch", response_model=BatchPredictionResponse)
def predict_batch(
    request_body: BatchPredictionRequest,
    request: Request,
    registry: ModelRegistry = Depends(get_model_registry),
):
    """
    Score several applications against one model snapshot.

    The batch is rejected as a whole if any application is invalid; the
    error list names each failing item by index.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    profiles = [application.to_profile() for application in request_body.applications]

    try:
        results = evaluate_batch(profiles, registry.current(), field_prefix="applications")
    except ValidationError as e:
        validation_failures_counter.inc()
        logging.warning(f"Invalid batch: {e}", extra={"request_id": request_id})
        raise

    duration_ms = (time.time() - start_time) * 1000
    for result in results:
        registry.record(result)
        record_prediction(result.approved, result.score, result.confidence.value)
        log_prediction(request_id, result.approved, result.score, result.confidence.value, duration_ms)

    return BatchPredictionResponse(results=[PredictionResponse.from_result(r) for r in results])
