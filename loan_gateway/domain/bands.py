"""Tier tables mapping applicant attributes to contributions and explanations

Each feature is looked up once. The band it lands in carries the numeric
contribution used by the scorer AND every human-readable string attached to
that tier, so the score and its explanation are read from the same row.

Some bands are split at extra thresholds (e.g. income at $40k and $30k) that
only the explanations care about. Both halves of a split carry the same
contribution, so the underlying step function is unchanged.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from loan_gateway.domain.models import ApplicantProfile, HomeOwnership, VerificationStatus


@dataclass(frozen=True)
class Band:
    """One tier of a feature: contribution plus the explanations it triggers"""

    contribution: float = 0.0
    positive: Optional[str] = None
    risk: Optional[str] = None
    approval_reason: Optional[str] = None
    denial_reason: Optional[str] = None
    approval_advice: Tuple[str, ...] = ()
    denial_advice: Tuple[str, ...] = ()
    strong_signal: bool = False


@dataclass(frozen=True)
class Cutoff:
    """Threshold a value must reach (or stay within) to land in ``band``"""

    limit: float
    band: Band
    inclusive: bool = True


@dataclass(frozen=True)
class BandTable:
    """
    Step function over a numeric attribute.

    Cutoffs are checked in order; the first one satisfied wins. With
    ``higher_is_better`` a cutoff is satisfied when value >= limit (or > limit
    if not inclusive), otherwise when value <= limit (or < limit).
    """

    cutoffs: Tuple[Cutoff, ...]
    fallback: Band
    higher_is_better: bool = True

    def lookup(self, value: float) -> Band:
        for cutoff in self.cutoffs:
            if self.higher_is_better:
                hit = value >= cutoff.limit if cutoff.inclusive else value > cutoff.limit
            else:
                hit = value <= cutoff.limit if cutoff.inclusive else value < cutoff.limit
            if hit:
                return cutoff.band
        return self.fallback


@dataclass(frozen=True)
class CategoryTable:
    """Fixed mapping from a categorical value to its band"""

    bands: Dict[Any, Band]

    def lookup(self, value: Any) -> Band:
        return self.bands[value]


@dataclass(frozen=True)
class Feature:
    """
    A scored attribute of the applicant.

    ``per_unit`` switches the feature to a linear contribution (value * per_unit);
    its bands then only carry explanations.
    """

    name: str
    extract: Callable[[ApplicantProfile], Any]
    table: Any  # BandTable | CategoryTable
    per_unit: Optional[float] = None

    def assess(self, profile: ApplicantProfile) -> Tuple[float, Band]:
        value = self.extract(profile)
        band = self.table.lookup(value)
        if self.per_unit is not None:
            return value * self.per_unit, band
        return band.contribution, band


# Advice shared by adjacent tiers
_CREDIT_ADVICE = (
    "Consider working to improve your credit score before reapplying",
    "Pay down existing debts and ensure all payments are made on time",
)
_DTI_ADVICE = (
    "Reduce monthly debt obligations to improve debt-to-income ratio",
    "Consider consolidating high-interest debt",
)
_BETTER_RATES = ("You may qualify for better rates with a lower debt-to-income ratio",)
_EMPLOYMENT_ADVICE = ("Consider waiting to establish longer employment history",)
_SMALLER_LOAN = ("Consider applying for a smaller loan amount",)

_LOW_CREDIT = Band(
    0.2,
    risk="Below-average credit score",
    denial_reason="Credit score below acceptable threshold indicates high risk",
    denial_advice=_CREDIT_ADVICE,
)

CREDIT_SCORE = BandTable(
    cutoffs=(
        Cutoff(750, Band(
            1.0,
            positive="Excellent credit score",
            approval_reason="Excellent credit score demonstrates strong payment history",
            strong_signal=True,
        )),
        Cutoff(700, Band(
            0.8,
            positive="Good credit score",
            approval_reason="Good credit score indicates reliable payment behavior",
        )),
        Cutoff(650, Band(0.6)),
        Cutoff(600, Band(0.4, risk="Below-average credit score", denial_advice=_CREDIT_ADVICE)),
        Cutoff(550, _LOW_CREDIT, inclusive=False),
        Cutoff(550, Band(
            0.2,
            risk=_LOW_CREDIT.risk,
            denial_reason=_LOW_CREDIT.denial_reason,
            denial_advice=_CREDIT_ADVICE,
            strong_signal=True,
        )),
    ),
    fallback=Band(
        0.1,
        risk=_LOW_CREDIT.risk,
        denial_reason=_LOW_CREDIT.denial_reason,
        denial_advice=_CREDIT_ADVICE,
        strong_signal=True,
    ),
)

_LOW_DTI = dict(
    positive="Low debt-to-income ratio",
    approval_reason="Low debt-to-income ratio shows strong financial capacity",
)
_HIGH_DTI = "High debt-to-income ratio"

DEBT_TO_INCOME = BandTable(
    cutoffs=(
        Cutoff(0.15, Band(1.0, strong_signal=True, **_LOW_DTI)),
        Cutoff(0.20, Band(0.8, strong_signal=True, **_LOW_DTI)),
        Cutoff(0.25, Band(0.8, **_LOW_DTI)),
        Cutoff(0.30, Band(0.6)),
        Cutoff(0.35, Band(0.6, approval_advice=_BETTER_RATES)),
        Cutoff(0.40, Band(0.4, risk=_HIGH_DTI, approval_advice=_BETTER_RATES), inclusive=False),
        Cutoff(0.43, Band(0.4, risk=_HIGH_DTI, approval_advice=_BETTER_RATES, strong_signal=True)),
    ),
    fallback=Band(
        0.1,
        risk=_HIGH_DTI,
        denial_reason="High debt-to-income ratio exceeds lending guidelines",
        approval_advice=_BETTER_RATES,
        denial_advice=_DTI_ADVICE,
        strong_signal=True,
    ),
    higher_is_better=False,
)

_HIGH_INCOME = dict(
    positive="High annual income",
    approval_reason="High annual income provides strong repayment ability",
)
_LOWER_INCOME = "Lower income level"
_LOW_INCOME_REASON = "Low income may not support loan repayment"

ANNUAL_INCOME = BandTable(
    cutoffs=(
        Cutoff(100_000, Band(1.0, strong_signal=True, **_HIGH_INCOME)),
        Cutoff(75_000, Band(0.8, **_HIGH_INCOME)),
        Cutoff(50_000, Band(0.6)),
        Cutoff(40_000, Band(0.4)),
        Cutoff(35_000, Band(0.4, risk=_LOWER_INCOME)),
        Cutoff(30_000, Band(0.2, risk=_LOWER_INCOME), inclusive=False),
        Cutoff(30_000, Band(0.2, risk=_LOWER_INCOME, strong_signal=True)),
        Cutoff(25_000, Band(0.2, risk=_LOWER_INCOME, denial_reason=_LOW_INCOME_REASON, strong_signal=True)),
    ),
    fallback=Band(0.1, risk=_LOWER_INCOME, denial_reason=_LOW_INCOME_REASON, strong_signal=True),
)

_SHORT_EMPLOYMENT = "Short employment history"

EMPLOYMENT_LENGTH = BandTable(
    cutoffs=(
        Cutoff(5, Band(
            1.0,
            positive="Long employment history",
            approval_reason="Stable employment history reduces risk",
            strong_signal=True,
        )),
        Cutoff(3, Band(0.8, approval_reason="Stable employment history reduces risk")),
        Cutoff(2, Band(0.6)),
        Cutoff(1, Band(0.4, risk=_SHORT_EMPLOYMENT, denial_advice=_EMPLOYMENT_ADVICE)),
    ),
    fallback=Band(
        0.2,
        risk=_SHORT_EMPLOYMENT,
        denial_reason="Short employment history increases income stability risk",
        denial_advice=_EMPLOYMENT_ADVICE,
        strong_signal=True,
    ),
)

# Requested amount / annual income; lower ratio scores higher
LOAN_TO_INCOME = BandTable(
    cutoffs=(
        Cutoff(0.2, Band(1.0)),
        Cutoff(0.3, Band(0.8)),
        Cutoff(0.4, Band(0.6)),
        Cutoff(0.5, Band(0.4, denial_advice=_SMALLER_LOAN)),
    ),
    fallback=Band(
        0.2,
        denial_reason="Loan amount is too high relative to annual income",
        denial_advice=_SMALLER_LOAN,
    ),
    higher_is_better=False,
)

DEROGATORY = CategoryTable({
    True: Band(
        -50,
        risk="Derogatory credit marks",
        denial_reason="Derogatory marks on credit report raise concerns",
        strong_signal=True,
    ),
    False: Band(
        0,
        positive="Clean credit history",
        approval_reason="Clean credit history with no major derogatory marks",
    ),
})

_DELINQUENT = "Recent payment delinquencies"
_DELINQUENT_REASON = "Recent payment delinquencies indicate repayment risk"

# Contribution is linear in the count; bands carry explanations only
DELINQUENCIES = BandTable(
    cutoffs=(
        Cutoff(0, Band(positive="No recent delinquencies")),
        Cutoff(1, Band(risk=_DELINQUENT)),
        Cutoff(2, Band(risk=_DELINQUENT, denial_reason=_DELINQUENT_REASON)),
    ),
    fallback=Band(risk=_DELINQUENT, denial_reason=_DELINQUENT_REASON, strong_signal=True),
    higher_is_better=False,
)

_INQUIRIES = "Multiple recent credit inquiries"

INQUIRIES = BandTable(
    cutoffs=(
        Cutoff(3, Band()),
        Cutoff(4, Band(risk=_INQUIRIES)),
    ),
    fallback=Band(risk=_INQUIRIES, denial_reason="Multiple recent credit inquiries suggest financial stress"),
    higher_is_better=False,
)

HOME_OWNERSHIP = CategoryTable({
    HomeOwnership.OWN: Band(
        20,
        positive="Home ownership",
        approval_reason="Home ownership indicates financial stability",
    ),
    HomeOwnership.MORTGAGE: Band(15),
    HomeOwnership.RENT: Band(5),
})

VERIFICATION_STATUS = CategoryTable({
    VerificationStatus.VERIFIED: Band(
        15,
        positive="Verified income",
        approval_reason="Verified income information increases confidence",
    ),
    VerificationStatus.SOURCE_VERIFIED: Band(10),
    VerificationStatus.NOT_VERIFIED: Band(
        0,
        risk="Unverified income",
        denial_advice=("Provide documentation to verify your income",),
    ),
})

DELINQUENCY_PENALTY = -10
INQUIRY_PENALTY = -5

# Weight-table order. Positives, approval reasons and advice follow it.
FEATURES: Tuple[Feature, ...] = (
    Feature("credit_score", lambda p: p.credit_score, CREDIT_SCORE),
    Feature("debt_to_income", lambda p: p.debt_to_income, DEBT_TO_INCOME),
    Feature("annual_income", lambda p: p.annual_income, ANNUAL_INCOME),
    Feature("employment_length", lambda p: p.employment_length, EMPLOYMENT_LENGTH),
    Feature("has_derogatory", lambda p: p.has_derogatory, DEROGATORY),
    Feature("delinquencies_last_2_years", lambda p: p.delinquencies_last_2_years, DELINQUENCIES,
            per_unit=DELINQUENCY_PENALTY),
    Feature("inquiries_last_6_months", lambda p: p.inquiries_last_6_months, INQUIRIES,
            per_unit=INQUIRY_PENALTY),
    Feature("loan_amount", lambda p: p.loan_to_income_ratio, LOAN_TO_INCOME),
    Feature("home_ownership", lambda p: p.home_ownership, HOME_OWNERSHIP),
    Feature("verification_status", lambda p: p.verification_status, VERIFICATION_STATUS),
)

FEATURE_NAMES: Tuple[str, ...] = tuple(f.name for f in FEATURES)

# Risk factors lead with credit history problems; income comes late
RISK_ORDER: Tuple[str, ...] = (
    "credit_score",
    "debt_to_income",
    "has_derogatory",
    "delinquencies_last_2_years",
    "inquiries_last_6_months",
    "employment_length",
    "annual_income",
    "verification_status",
)

DENIAL_ORDER: Tuple[str, ...] = (
    "credit_score",
    "debt_to_income",
    "annual_income",
    "has_derogatory",
    "delinquencies_last_2_years",
    "inquiries_last_6_months",
    "employment_length",
    "loan_amount",
)
