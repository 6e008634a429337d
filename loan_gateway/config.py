"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "loan-gateway"
    log_level: str = "INFO"

    # Probability calibration (sigmoid over the 0-1000 score)
    sigmoid_center: float = 650.0
    sigmoid_scale: float = 200.0
    approval_threshold: float = 0.5

    # Simulated retraining
    retrain_weight_jitter: float = 0.05  # Total width of the uniform weight perturbation
    metric_ceiling: float = 0.95

    # Drift detection
    drift_window_size: int = 500
    expected_approval_rate: float = 0.65
    approval_rate_tolerance: float = 0.15
    max_low_confidence_share: float = 0.3
    max_model_age_days: int = 90


settings = Settings()
