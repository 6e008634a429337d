"""Pytest fixtures for testing"""

import pytest
from dataclasses import replace
from fastapi.testclient import TestClient
from loan_gateway.api.dependencies import get_model_registry
from loan_gateway.api.main import create_app
from loan_gateway.domain.model_config import ModelConfig
from loan_gateway.domain.models import ApplicantProfile, HomeOwnership, LoanPurpose, VerificationStatus
from loan_gateway.domain.registry import ModelRegistry


@pytest.fixture
def strong_profile() -> ApplicantProfile:
    """Well-qualified applicant: excellent credit, low DTI, owns home"""
    return ApplicantProfile(
        credit_score=780,
        annual_income=90000,
        employment_length=6,
        loan_amount=15000,
        loan_purpose=LoanPurpose.PERSONAL_LOAN,
        debt_to_income=0.18,
        has_derogatory=False,
        delinquencies_last_2_years=0,
        inquiries_last_6_months=1,
        home_ownership=HomeOwnership.OWN,
        verification_status=VerificationStatus.VERIFIED,
    )


@pytest.fixture
def weak_profile() -> ApplicantProfile:
    """High-risk applicant: poor credit, derogatory marks, heavy debt"""
    return ApplicantProfile(
        credit_score=540,
        annual_income=22000,
        employment_length=0.5,
        loan_amount=20000,
        loan_purpose=LoanPurpose.DEBT_CONSOLIDATION,
        debt_to_income=0.55,
        has_derogatory=True,
        delinquencies_last_2_years=3,
        inquiries_last_6_months=6,
        home_ownership=HomeOwnership.RENT,
        verification_status=VerificationStatus.NOT_VERIFIED,
    )


@pytest.fixture
def mid_profile() -> ApplicantProfile:
    """Average applicant whose score lands just above the approval line (652)"""
    return ApplicantProfile(
        credit_score=680,
        annual_income=60000,
        employment_length=3,
        loan_amount=12000,
        loan_purpose=LoanPurpose.AUTO_LOAN,
        debt_to_income=0.3,
        has_derogatory=False,
        delinquencies_last_2_years=0,
        inquiries_last_6_months=0,
        home_ownership=HomeOwnership.MORTGAGE,
        verification_status=VerificationStatus.SOURCE_VERIFIED,
    )


@pytest.fixture
def make_profile(mid_profile: ApplicantProfile):
    """Build a variant of the mid profile with some fields overridden"""

    def _make(**overrides) -> ApplicantProfile:
        return replace(mid_profile, **overrides)

    return _make


@pytest.fixture
def strong_payload() -> dict:
    """Wire-format (camelCase) request body for the strong applicant"""
    return {
        "creditScore": 780,
        "annualIncome": 90000,
        "employmentLength": 6,
        "loanAmount": 15000,
        "loanPurpose": "personal_loan",
        "debtToIncome": 0.18,
        "hasDerogatory": False,
        "delinquenciesLast2Years": 0,
        "inquiriesLast6Months": 1,
        "homeOwnership": "own",
        "verificationStatus": "verified",
    }


@pytest.fixture
def registry() -> ModelRegistry:
    """Fresh registry so tests never share retrained weights or drift windows"""
    return ModelRegistry(ModelConfig.default(), window_size=100)


@pytest.fixture
def client(registry: ModelRegistry) -> TestClient:
    """Create FastAPI test client backed by an isolated model registry"""
    app = create_app()
    app.dependency_overrides[get_model_registry] = lambda: registry
    return TestClient(app)
