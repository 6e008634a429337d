"""Prometheus metrics for monitoring approval rates, score distribution, and model changes"""

from prometheus_client import Counter, Histogram

# Prediction metrics
prediction_counter = Counter(
    "loan_prediction_total",
    "Total loan approval predictions made",
    ["outcome"],  # approved | denied
)

confidence_counter = Counter(
    "loan_prediction_confidence_total",
    "Predictions by confidence tier",
    ["confidence"],  # high | medium | low
)

score_histogram = Histogram(
    "loan_prediction_score",
    "Distribution of 0-1000 approval scores",
    buckets=[100, 200, 300, 400, 500, 600, 650, 700, 800, 900, 1000],
)

validation_failures_counter = Counter(
    "loan_validation_failures_total",
    "Requests rejected for out-of-domain applicant data",
)

# Model metrics
retrain_counter = Counter(
    "loan_model_retrain_total",
    "Simulated model retraining runs",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_prediction(approved: bool, score: int, confidence: str) -> None:
    """Record prediction metrics for monitoring approval rates and score distribution"""
    outcome = "approved" if approved else "denied"
    prediction_counter.labels(outcome=outcome).inc()
    confidence_counter.labels(confidence=confidence).inc()
    score_histogram.observe(score)
