"""Pydantic schemas for API request/response validation

Field names are snake_case in Python and camelCase on the wire. Requests
accept either spelling. Profile values are checked in the domain layer, not by
pydantic, so that every violated constraint is reported in one response.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from loan_gateway.domain.models import (
    ApplicantProfile,
    Confidence,
    Decision,
    DriftReport,
    HomeOwnership,
    LoanPurpose,
    ModelMetrics,
    ScoreResult,
    VerificationStatus,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


class ApplicantProfileSchema(_CamelModel):
    """
    Request body for POST /v1/predict

    Values pass through as sent. Type, range and presence checks all happen
    in ``validate_profile``, so a body with a wrong type and an out-of-range
    value reports both, and ``true`` is never read as 1.
    """

    credit_score: Any = Field(None, alias="creditScore", description="Credit score, integer 300-850")
    annual_income: Any = Field(None, alias="annualIncome", description="Annual income, >= 0")
    employment_length: Any = Field(None, alias="employmentLength", description="Years employed, >= 0")
    loan_amount: Any = Field(None, alias="loanAmount", description="Requested amount, > 0")
    loan_purpose: Any = Field(
        None, alias="loanPurpose", description=", ".join(p.value for p in LoanPurpose)
    )
    debt_to_income: Any = Field(None, alias="debtToIncome", description="Debt-to-income ratio, 0-1")
    has_derogatory: Any = Field(None, alias="hasDerogatory", description="Boolean")
    delinquencies_last_2_years: Any = Field(
        None, alias="delinquenciesLast2Years", description="Integer, >= 0"
    )
    inquiries_last_6_months: Any = Field(None, alias="inquiriesLast6Months", description="Integer, >= 0")
    home_ownership: Any = Field(
        None, alias="homeOwnership", description=", ".join(h.value for h in HomeOwnership)
    )
    verification_status: Any = Field(
        None, alias="verificationStatus", description=", ".join(v.value for v in VerificationStatus)
    )

    def to_profile(self) -> ApplicantProfile:
        return ApplicantProfile(**self.model_dump())


# snake_case field / feature name -> wire name
FIELD_ALIASES: Dict[str, str] = {
    name: info.alias for name, info in ApplicantProfileSchema.model_fields.items()
}


class BatchPredictionRequest(BaseModel):
    """Request body for POST /v1/predict/batch"""

    applications: List[ApplicantProfileSchema] = Field(..., min_length=1)


class PredictionResponse(_CamelModel):
    """Response for POST /v1/predict"""

    prediction: Decision
    probability: float
    confidence: Confidence
    score: int
    reasons: List[str]
    risk_factors: List[str] = Field(..., alias="riskFactors")
    positive_factors: List[str] = Field(..., alias="positiveFactors")
    recommendations: List[str]
    feature_importance: Dict[str, float] = Field(..., alias="featureImportance")

    @classmethod
    def from_result(cls, result: ScoreResult) -> "PredictionResponse":
        return cls(
            prediction=result.decision,
            probability=result.probability,
            confidence=result.confidence,
            score=result.score,
            reasons=result.reasons,
            risk_factors=result.risk_factors,
            positive_factors=result.positive_factors,
            recommendations=result.recommendations,
            feature_importance=camelize_weights(result.feature_importance),
        )


class BatchPredictionResponse(BaseModel):
    """Response for POST /v1/predict/batch"""

    results: List[PredictionResponse]


class ModelMetricsResponse(_CamelModel):
    """Response for GET /v1/model/metrics and POST /v1/model/retrain"""

    accuracy: float
    precision: float
    recall: float
    f1_score: float = Field(..., alias="f1Score")
    last_trained: datetime = Field(..., alias="lastTrained")
    training_size: int = Field(..., alias="trainingSize")
    model_version: int = Field(..., alias="modelVersion")

    @classmethod
    def from_metrics(cls, metrics: ModelMetrics, version: int) -> "ModelMetricsResponse":
        return cls(
            accuracy=metrics.accuracy,
            precision=metrics.precision,
            recall=metrics.recall,
            f1_score=metrics.f1_score,
            last_trained=metrics.last_trained,
            training_size=metrics.training_size,
            model_version=version,
        )


class RetrainRequest(_CamelModel):
    """Optional body for POST /v1/model/retrain"""

    training_size: Optional[StrictInt] = Field(None, alias="trainingSize", ge=1)


class DriftResponse(_CamelModel):
    """Response for GET /v1/model/drift"""

    approval_rate: float = Field(..., alias="approvalRate")
    average_score: float = Field(..., alias="averageScore")
    confidence_distribution: Dict[str, float] = Field(..., alias="confidenceDistribution")
    needs_retraining: bool = Field(..., alias="needsRetraining")
    sample_size: int = Field(..., alias="sampleSize")

    @classmethod
    def from_report(cls, report: DriftReport) -> "DriftResponse":
        return cls(
            approval_rate=report.approval_rate,
            average_score=report.average_score,
            confidence_distribution=report.confidence_distribution,
            needs_retraining=report.needs_retraining,
            sample_size=report.sample_size,
        )


class FieldErrorSchema(BaseModel):
    """One violated constraint"""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """422 body listing every invalid field"""

    detail: str = "Validation failed"
    errors: List[FieldErrorSchema]


def camelize_weights(weights: Dict[str, float]) -> Dict[str, float]:
    return {FIELD_ALIASES.get(name, name): weight for name, weight in weights.items()}
