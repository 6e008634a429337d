"""Unit tests for the approval likelihood evaluator"""

import math
import pytest
from unittest.mock import patch
from loan_gateway.domain.exceptions import ValidationError
from loan_gateway.domain.model_config import DEFAULT_MODEL, ModelConfig, normalize_weights, BASE_WEIGHTS
from loan_gateway.domain.models import Confidence, Decision
from loan_gateway.domain.scoring import (
    assess_features,
    calculate_score,
    decide,
    determine_confidence,
    evaluate,
    evaluate_batch,
    generate_recommendations,
    score_to_probability,
)


def test_strong_applicant_is_approved(strong_profile):
    """780 credit, $90k income, 18% DTI, owns home, verified"""
    result = evaluate(strong_profile)

    assert result.decision is Decision.APPROVED
    assert result.approved is True
    assert result.score > 700
    assert result.probability > 0.5
    assert result.confidence in (Confidence.HIGH, Confidence.MEDIUM)


def test_strong_applicant_explanations(strong_profile):
    result = evaluate(strong_profile)

    assert result.reasons == [
        "Excellent credit score demonstrates strong payment history",
        "Low debt-to-income ratio shows strong financial capacity",
        "High annual income provides strong repayment ability",
        "Stable employment history reduces risk",
        "Clean credit history with no major derogatory marks",
        "Home ownership indicates financial stability",
        "Verified income information increases confidence",
    ]
    assert result.risk_factors == []
    assert result.positive_factors == [
        "Excellent credit score",
        "Low debt-to-income ratio",
        "High annual income",
        "Long employment history",
        "Clean credit history",
        "No recent delinquencies",
        "Home ownership",
        "Verified income",
    ]


def test_weak_applicant_is_denied(weak_profile):
    """540 credit, derogatory marks, 3 delinquencies, 55% DTI"""
    result = evaluate(weak_profile)

    assert result.decision is Decision.DENIED
    assert result.score == 0  # Penalties push the raw score below zero; clamped
    assert result.probability < 0.5
    assert result.confidence is Confidence.HIGH  # All seven strong signals present
    assert len(result.risk_factors) > 3
    assert "Derogatory marks on credit report raise concerns" in result.reasons
    assert "Derogatory credit marks" in result.risk_factors
    assert result.positive_factors == []


def test_weak_applicant_denial_reasons_cover_every_failing_feature(weak_profile):
    result = evaluate(weak_profile)

    assert result.reasons == [
        "Credit score below acceptable threshold indicates high risk",
        "High debt-to-income ratio exceeds lending guidelines",
        "Low income may not support loan repayment",
        "Derogatory marks on credit report raise concerns",
        "Recent payment delinquencies indicate repayment risk",
        "Multiple recent credit inquiries suggest financial stress",
        "Short employment history increases income stability risk",
        "Loan amount is too high relative to annual income",
    ]


def test_weak_applicant_risk_factor_order(weak_profile):
    """Credit history problems come first, income and verification last"""
    result = evaluate(weak_profile)

    assert result.risk_factors == [
        "Below-average credit score",
        "High debt-to-income ratio",
        "Derogatory credit marks",
        "Recent payment delinquencies",
        "Multiple recent credit inquiries",
        "Short employment history",
        "Lower income level",
        "Unverified income",
    ]


def test_out_of_range_credit_score_is_rejected_not_clamped(make_profile):
    with pytest.raises(ValidationError) as exc_info:
        evaluate(make_profile(credit_score=851))

    assert exc_info.value.fields == ["credit_score"]


def test_tier_boundary_at_750(make_profile):
    """The jump between 749 and 750 is a designed step in the credit bands"""
    below = evaluate(make_profile(credit_score=749))
    at = evaluate(make_profile(credit_score=750))

    assert at.score >= below.score
    assert at.score > below.score  # Mid profile is not clamped, so the step shows


def test_score_and_probability_stay_in_range(strong_profile, weak_profile, mid_profile, make_profile):
    profiles = [
        strong_profile,
        weak_profile,
        mid_profile,
        make_profile(credit_score=850, debt_to_income=0.0, annual_income=500_000, employment_length=40),
        make_profile(credit_score=300, debt_to_income=1.0, annual_income=0, delinquencies_last_2_years=50),
    ]
    for profile in profiles:
        result = evaluate(profile)
        assert 0 <= result.score <= 1000
        assert 0.0 <= result.probability <= 1.0
        assert (result.probability >= 0.5) == (result.decision is Decision.APPROVED)


def test_probability_is_one_half_at_center():
    assert score_to_probability(650, 650, 200) == 0.5


@pytest.mark.parametrize(
    "score, expected",
    [
        (649, Decision.DENIED),
        (650, Decision.APPROVED),
        (651, Decision.APPROVED),
    ],
)
def test_decision_boundary_around_650(score, expected):
    probability = score_to_probability(score, 650, 200)
    assert decide(probability, 0.5) is expected


@pytest.mark.parametrize(
    "raw_score, expected",
    [
        (649.0, Decision.DENIED),
        (650.0, Decision.APPROVED),
        (651.0, Decision.APPROVED),
    ],
)
def test_evaluate_decision_boundary_around_650(mid_profile, raw_score, expected):
    """Full pipeline with the combined score pinned on either side of the center"""
    with patch("loan_gateway.domain.scoring.calculate_score", return_value=raw_score):
        result = evaluate(mid_profile)

    assert result.score == int(raw_score)
    assert result.decision is expected
    assert (result.probability >= 0.5) == result.approved
    if raw_score == 650.0:
        assert result.probability == 0.5


def test_just_above_boundary_profile_is_approved(mid_profile):
    result = evaluate(mid_profile)

    assert result.score == 652
    assert result.decision is Decision.APPROVED
    assert 0.5 < result.probability < 0.51


def test_credit_score_is_monotonic(make_profile):
    scores = [evaluate(make_profile(credit_score=cs)).score for cs in range(300, 851, 10)]
    assert scores == sorted(scores)


def test_delinquencies_never_raise_score(make_profile):
    scores = [evaluate(make_profile(delinquencies_last_2_years=n)).score for n in range(0, 12)]
    assert scores == sorted(scores, reverse=True)


def test_debt_to_income_never_raises_score(make_profile):
    scores = [evaluate(make_profile(debt_to_income=dti / 100)).score for dti in range(0, 101)]
    assert scores == sorted(scores, reverse=True)


def test_evaluate_is_deterministic(strong_profile):
    assert evaluate(strong_profile) == evaluate(strong_profile)


def test_feature_importance_sums_to_one(strong_profile):
    result = evaluate(strong_profile)
    assert math.isclose(sum(result.feature_importance.values()), 1.0, abs_tol=1e-9)


def test_feature_importance_is_a_copy(strong_profile):
    result = evaluate(strong_profile)
    result.feature_importance["credit_score"] = 99.0
    assert DEFAULT_MODEL.weights["credit_score"] != 99.0


def test_zero_income_scores_without_error(make_profile):
    """No income makes the loan-to-income ratio infinite, the worst tier"""
    result = evaluate(make_profile(annual_income=0))

    assert result.score == 562
    assert result.decision is Decision.DENIED
    assert "Low income may not support loan repayment" in result.reasons
    assert "Loan amount is too high relative to annual income" in result.reasons


def test_calculate_score_clamps_to_bounds(weak_profile, strong_profile):
    assert calculate_score(assess_features(weak_profile), DEFAULT_MODEL) == 0.0
    assert 0.0 < calculate_score(assess_features(strong_profile), DEFAULT_MODEL) <= 1000.0


def test_custom_calibration_moves_the_decision(mid_profile):
    """Center and threshold are parameters, not constants baked into the scorer"""
    stricter = ModelConfig(weights=normalize_weights(BASE_WEIGHTS), sigmoid_center=700.0)
    result = evaluate(mid_profile, stricter)

    assert result.score == 652
    assert result.decision is Decision.DENIED


def test_confidence_tiers(strong_profile, weak_profile, mid_profile):
    assert evaluate(weak_profile).confidence is Confidence.HIGH
    assert evaluate(strong_profile).confidence is Confidence.MEDIUM
    assert evaluate(mid_profile).confidence is Confidence.LOW


def test_extreme_score_counts_as_signal(make_profile):
    assert determine_confidence(850, []) is Confidence.LOW
    assert determine_confidence(400, []) is Confidence.LOW

    # Two strong signals from the profile: credit >= 750 and employment >= 5
    profile = make_profile(credit_score=760, employment_length=7)
    bands = [band for _, _, band in assess_features(profile)]
    assert determine_confidence(600, bands) is Confidence.MEDIUM
    assert determine_confidence(850, bands) is Confidence.MEDIUM
    assert determine_confidence(850, bands + bands) is Confidence.HIGH


def test_recommendations_for_denied_applicant(weak_profile):
    result = evaluate(weak_profile)

    assert result.recommendations == [
        "Consider working to improve your credit score before reapplying",
        "Pay down existing debts and ensure all payments are made on time",
        "Reduce monthly debt obligations to improve debt-to-income ratio",
        "Consider consolidating high-interest debt",
        "Consider waiting to establish longer employment history",
        "Consider applying for a smaller loan amount",
        "Provide documentation to verify your income",
    ]
    assert generate_recommendations(weak_profile, result) == result.recommendations


def test_recommendations_for_approved_applicant(strong_profile, make_profile):
    result = evaluate(strong_profile)
    assert result.recommendations == [
        "Your application shows strong approval potential",
        "Consider providing additional documentation to strengthen your application",
    ]

    # DTI above 30% suggests better rates are available
    higher_dti = evaluate(make_profile(credit_score=800, debt_to_income=0.32))
    assert higher_dti.approved
    assert "You may qualify for better rates with a lower debt-to-income ratio" in higher_dti.recommendations


def test_evaluate_batch_preserves_order(strong_profile, weak_profile):
    results = evaluate_batch([weak_profile, strong_profile])

    assert [r.decision for r in results] == [Decision.DENIED, Decision.APPROVED]


def test_evaluate_batch_reports_every_invalid_item(strong_profile, make_profile):
    with pytest.raises(ValidationError) as exc_info:
        evaluate_batch(
            [strong_profile, make_profile(credit_score=900), make_profile(debt_to_income=1.5)],
            field_prefix="applications",
        )

    assert exc_info.value.fields == [
        "applications[1].credit_score",
        "applications[2].debt_to_income",
    ]
