"""Approval likelihood evaluator - core business logic for loan decisions"""

import math
from typing import Iterable, List, Tuple

from loan_gateway.domain.bands import DENIAL_ORDER, FEATURES, RISK_ORDER, Band
from loan_gateway.domain.exceptions import FieldError, ValidationError
from loan_gateway.domain.model_config import DEFAULT_MODEL, ModelConfig
from loan_gateway.domain.models import ApplicantProfile, Confidence, Decision, ScoreResult
from loan_gateway.domain.validation import validate_profile

MAX_SCORE = 1000.0

# Final scores this far out count as a strong signal for confidence
STRONG_SCORE_HIGH = 800
STRONG_SCORE_LOW = 400


def assess_features(profile: ApplicantProfile) -> List[Tuple[str, float, Band]]:
    """Look up each feature's band once: (name, contribution, band) in feature order"""
    assessed = []
    for feature in FEATURES:
        contribution, band = feature.assess(profile)
        assessed.append((feature.name, contribution, band))
    return assessed


def calculate_score(assessed: List[Tuple[str, float, Band]], model: ModelConfig) -> float:
    """
    Combine weighted contributions into a 0-1000 score.

    Banded features contribute 0-1, penalties and bonuses are raw points
    (derogatory -50, -10 per delinquency, -5 per inquiry, ownership and
    verification bonuses). The weighted sum is scaled by 1000 and clamped.
    """
    combined = math.fsum(contribution * model.weights[name] for name, contribution, _ in assessed)
    return max(0.0, min(MAX_SCORE, combined * MAX_SCORE))


def score_to_probability(score: float, center: float, scale: float) -> float:
    """Logistic transform: probability 0.5 at ``center``, steepness set by ``scale``"""
    return 1.0 / (1.0 + math.exp(-(score - center) / scale))


def decide(probability: float, threshold: float) -> Decision:
    """
    Approve iff probability >= threshold.

    With the default calibration (center 650, threshold 0.5) a score of
    exactly 650 approves and anything below denies.
    """
    return Decision.APPROVED if probability >= threshold else Decision.DENIED


def determine_confidence(score: float, bands: Iterable[Band]) -> Confidence:
    """
    Count strong signals among the looked-up bands plus the final score.

    Signals: extreme credit score, DTI, income or employment length, any
    derogatory mark, 3+ delinquencies, and a score >= 800 or <= 400.
    4+ signals is high, 2+ medium, otherwise low.
    """
    signals = sum(1 for band in bands if band.strong_signal)
    if score >= STRONG_SCORE_HIGH or score <= STRONG_SCORE_LOW:
        signals += 1

    if signals >= 4:
        return Confidence.HIGH
    elif signals >= 2:
        return Confidence.MEDIUM
    else:
        return Confidence.LOW


def explain(
    assessed: List[Tuple[str, float, Band]], decision: Decision
) -> Tuple[List[str], List[str], List[str]]:
    """
    Collect (reasons, risk_factors, positive_factors) from the matched bands.

    Positives and approval reasons follow feature order. Risk factors and
    denial reasons follow RISK_ORDER and DENIAL_ORDER.
    """
    by_name = {name: band for name, _, band in assessed}
    bands = list(by_name.values())

    if decision is Decision.APPROVED:
        reasons = [b.approval_reason for b in bands if b.approval_reason]
    else:
        reasons = [by_name[n].denial_reason for n in DENIAL_ORDER if by_name[n].denial_reason]
    risks = [by_name[n].risk for n in RISK_ORDER if by_name[n].risk]
    positives = [b.positive for b in bands if b.positive]
    return reasons, risks, positives


def recommend(bands: List[Band], decision: Decision, confidence: Confidence) -> List[str]:
    """Next steps for the applicant, drawn from the matched bands"""
    if decision is Decision.DENIED:
        return [advice for b in bands for advice in b.denial_advice]

    recommendations = ["Your application shows strong approval potential"]
    if confidence in (Confidence.MEDIUM, Confidence.LOW):
        recommendations.append("Consider providing additional documentation to strengthen your application")
    recommendations.extend(advice for b in bands for advice in b.approval_advice)
    return recommendations


def evaluate(profile: ApplicantProfile, model: ModelConfig = DEFAULT_MODEL) -> ScoreResult:
    """
    Main entry point: validate the profile and produce the approval outcome.

    Pure: the result depends only on the profile and the model snapshot.

    Raises:
        ValidationError: if any field is outside its domain
    """
    profile = validate_profile(profile)

    assessed = assess_features(profile)
    bands = [band for _, _, band in assessed]

    score = calculate_score(assessed, model)
    probability = score_to_probability(score, model.sigmoid_center, model.sigmoid_scale)
    decision = decide(probability, model.approval_threshold)
    confidence = determine_confidence(score, bands)
    reasons, risks, positives = explain(assessed, decision)

    return ScoreResult(
        decision=decision,
        probability=probability,
        score=math.floor(score + 0.5),
        confidence=confidence,
        reasons=reasons,
        risk_factors=risks,
        positive_factors=positives,
        recommendations=recommend(bands, decision, confidence),
        feature_importance=model.feature_importance(),
    )


def evaluate_batch(
    profiles: Iterable[ApplicantProfile],
    model: ModelConfig = DEFAULT_MODEL,
    field_prefix: str = "",
) -> List[ScoreResult]:
    """
    Score several profiles against the same model snapshot, preserving order.

    Every profile is validated before any is scored; errors from all of them
    are reported together with indexed field names, e.g. ``[2].credit_score``
    (or ``applications[2].credit_score`` with field_prefix="applications").
    """
    profiles = list(profiles)
    errors: List[FieldError] = []
    for index, profile in enumerate(profiles):
        try:
            validate_profile(profile)
        except ValidationError as e:
            errors.extend(e.prefixed(f"{field_prefix}[{index}]").errors)
    if errors:
        raise ValidationError(errors)

    return [evaluate(profile, model) for profile in profiles]


def generate_recommendations(profile: ApplicantProfile, result: ScoreResult) -> List[str]:
    """Recompute the advice for an already-scored profile"""
    bands = [band for _, _, band in assess_features(validate_profile(profile))]
    return recommend(bands, result.decision, result.confidence)
