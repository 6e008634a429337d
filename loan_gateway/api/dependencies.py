"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from loan_gateway.config import settings
from loan_gateway.domain.model_config import ModelConfig
from loan_gateway.domain.registry import ModelRegistry

_registry = ModelRegistry(
    ModelConfig.default(
        sigmoid_center=settings.sigmoid_center,
        sigmoid_scale=settings.sigmoid_scale,
        approval_threshold=settings.approval_threshold,
    ),
    window_size=settings.drift_window_size,
)


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_model_registry() -> ModelRegistry:
    """Provide the process-wide model registry"""
    return _registry
