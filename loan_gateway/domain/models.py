"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List


class LoanPurpose(str, Enum):
    HOME_LOAN = "home_loan"
    AUTO_LOAN = "auto_loan"
    PERSONAL_LOAN = "personal_loan"
    DEBT_CONSOLIDATION = "debt_consolidation"
    BUSINESS_LOAN = "business_loan"


class HomeOwnership(str, Enum):
    OWN = "own"
    RENT = "rent"
    MORTGAGE = "mortgage"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    SOURCE_VERIFIED = "source_verified"
    NOT_VERIFIED = "not_verified"


class Decision(str, Enum):
    APPROVED = "approved"
    DENIED = "denied"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ApplicantProfile:
    """Normalized applicant and loan attributes submitted for scoring"""

    credit_score: int
    annual_income: float
    employment_length: float  # years
    loan_amount: float
    loan_purpose: LoanPurpose
    debt_to_income: float  # fraction, 0-1
    has_derogatory: bool
    delinquencies_last_2_years: int
    inquiries_last_6_months: int
    home_ownership: HomeOwnership
    verification_status: VerificationStatus

    @property
    def loan_to_income_ratio(self) -> float:
        """Requested amount relative to annual income (infinite with no income)"""
        if self.annual_income == 0:
            return float("inf")
        return self.loan_amount / self.annual_income


@dataclass(frozen=True)
class ScoreResult:
    """Output of the approval likelihood evaluator"""

    decision: Decision
    probability: float
    score: int  # 0-1000, rounded for presentation
    confidence: Confidence
    reasons: List[str]
    risk_factors: List[str]
    positive_factors: List[str]
    recommendations: List[str]
    feature_importance: Dict[str, float]

    @property
    def approved(self) -> bool:
        return self.decision is Decision.APPROVED


@dataclass(frozen=True)
class ModelMetrics:
    """Reported quality metrics of the scoring model"""

    accuracy: float
    precision: float
    recall: float
    f1_score: float
    last_trained: datetime
    training_size: int


@dataclass(frozen=True)
class DriftReport:
    """Summary of recent predictions used to flag the model for retraining"""

    approval_rate: float
    average_score: float
    confidence_distribution: Dict[str, float] = field(default_factory=dict)
    needs_retraining: bool = False
    sample_size: int = 0
