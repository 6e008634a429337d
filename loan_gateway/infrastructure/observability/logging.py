"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from loan_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_prediction(
    request_id: str,
    approved: bool,
    score: int,
    confidence: str,
    duration_ms: float,
) -> None:
    """Log structured prediction outcome for analysis"""
    logging.info(
        "Prediction completed",
        extra={
            "request_id": request_id,
            "step": "prediction_complete",
            "approval_outcome": "approved" if approved else "denied",
            "score": score,
            "confidence": confidence,
            "duration_ms": duration_ms,
        },
    )


def log_retrain(request_id: str, version: int, training_size: int) -> None:
    """Log a published model snapshot"""
    logging.info(
        "Model retrained",
        extra={
            "request_id": request_id,
            "step": "retrain_complete",
            "model_version": version,
            "training_size": training_size,
        },
    )
