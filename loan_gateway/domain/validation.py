"""Domain checks on applicant profiles before scoring

Out-of-range values are rejected, never clamped: a silently clamped credit
score of 851 would hide an upstream data-entry bug.
"""

import math
from dataclasses import fields, replace
from enum import Enum
from numbers import Real
from typing import List, Optional, Type

from loan_gateway.domain.exceptions import FieldError, ValidationError
from loan_gateway.domain.models import ApplicantProfile, HomeOwnership, LoanPurpose, VerificationStatus

CREDIT_SCORE_MIN = 300
CREDIT_SCORE_MAX = 850

_FIELD_ORDER = {f.name: i for i, f in enumerate(fields(ApplicantProfile))}


def _is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _check_number(
    errors: List[FieldError],
    name: str,
    value,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    exclusive_minimum: bool = False,
) -> None:
    if value is None:
        return
    if not _is_number(value):
        errors.append(FieldError(name, "must be a finite number"))
        return
    if minimum is not None:
        if exclusive_minimum and value <= minimum:
            errors.append(FieldError(name, f"must be greater than {minimum:g}"))
        elif not exclusive_minimum and value < minimum:
            errors.append(FieldError(name, f"must be at least {minimum:g}"))
    if maximum is not None and value > maximum:
        errors.append(FieldError(name, f"must be at most {maximum:g}"))


def _check_count(errors: List[FieldError], name: str, value) -> None:
    if value is None:
        return
    if not _is_integer(value):
        errors.append(FieldError(name, "must be an integer"))
    elif value < 0:
        errors.append(FieldError(name, "must be at least 0"))


def _check_credit_score(errors: List[FieldError], value) -> None:
    if value is None:
        return
    if not _is_integer(value):
        errors.append(FieldError("credit_score", "must be an integer"))
    elif not CREDIT_SCORE_MIN <= value <= CREDIT_SCORE_MAX:
        errors.append(
            FieldError("credit_score", f"must be between {CREDIT_SCORE_MIN} and {CREDIT_SCORE_MAX}")
        )


def _coerce_choice(errors: List[FieldError], name: str, value, enum_type: Type[Enum]):
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        errors.append(FieldError(name, f"must be one of: {allowed}"))
        return value


def validate_profile(profile: ApplicantProfile) -> ApplicantProfile:
    """
    Check every field against its domain and return the profile with
    categorical fields coerced to their enums.

    A None value means the field was not supplied. Errors are listed in
    field order.

    Raises:
        ValidationError: listing every violated constraint
    """
    errors: List[FieldError] = [
        FieldError(f.name, "is required") for f in fields(profile) if getattr(profile, f.name) is None
    ]

    _check_credit_score(errors, profile.credit_score)

    _check_number(errors, "annual_income", profile.annual_income, minimum=0)
    _check_number(errors, "employment_length", profile.employment_length, minimum=0)
    _check_number(errors, "loan_amount", profile.loan_amount, minimum=0, exclusive_minimum=True)
    _check_number(errors, "debt_to_income", profile.debt_to_income, minimum=0, maximum=1)

    if profile.has_derogatory is not None and not isinstance(profile.has_derogatory, bool):
        errors.append(FieldError("has_derogatory", "must be a boolean"))

    _check_count(errors, "delinquencies_last_2_years", profile.delinquencies_last_2_years)
    _check_count(errors, "inquiries_last_6_months", profile.inquiries_last_6_months)

    loan_purpose = _coerce_choice(errors, "loan_purpose", profile.loan_purpose, LoanPurpose)
    home_ownership = _coerce_choice(errors, "home_ownership", profile.home_ownership, HomeOwnership)
    verification_status = _coerce_choice(
        errors, "verification_status", profile.verification_status, VerificationStatus
    )

    if errors:
        errors.sort(key=lambda e: _FIELD_ORDER[e.field])
        raise ValidationError(errors)

    return replace(
        profile,
        loan_purpose=loan_purpose,
        home_ownership=home_ownership,
        verification_status=verification_status,
    )
