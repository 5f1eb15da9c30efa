"""Scoring rules for profile-to-scheme matching.

Each rule is a pure function ``(profile, scheme, context) -> RuleOutcome
| None``.  A rule reads one or more profile fields and one or more scheme
fields; when it fires it returns an additive score delta and, usually, a
:class:`~src.models.match.MatchingFactor` explaining why.  A rule whose
inputs are absent returns ``None`` -- missing data never counts against
a scheme.

:data:`RULES` fixes the evaluation order.  Deltas are additive, so the
order only affects which factors survive truncation in the matcher.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from src.models.enums import EmploymentStatus
from src.models.match import MatchingFactor
from src.models.scheme import SchemeCategory, SchemeDocument
from src.models.user_profile import UserProfile

# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

EXACT_MATCH: Final[int] = 25
HIGH_RELEVANCE: Final[int] = 20
MODERATE_RELEVANCE: Final[int] = 15
LOW_RELEVANCE: Final[int] = 10
BONUS_FACTORS: Final[int] = 8
BASE_SCORE: Final[int] = 40

_EMPLOYMENT_HIT_WEIGHT: Final[int] = 8
_INTEREST_HIT_WEIGHT: Final[int] = 10
_SECTOR_HIT_WEIGHT: Final[int] = 3
_LARGE_FARM_ACRES: Final[float] = 5.0
_RECENT_YEARS: Final[int] = 3

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------
# Scheme text is lowercased before lookup while these keywords keep their
# casing, so mixed-case acronyms ("IT", "SC", "PMEGP") never match.

_AGRICULTURE_KEYWORDS: Final[tuple[str, ...]] = (
    "agriculture", "farming", "farmer", "crop", "irrigation", "soil", "seed",
    "fertilizer", "organic", "livestock", "dairy", "fisheries", "horticulture",
    "rural", "agricultural", "farm", "cultivation", "harvest",
    "precision farming", "climate resilient",
)

SECTOR_KEYWORDS: Final[dict[SchemeCategory, tuple[str, ...]]] = {
    SchemeCategory.DIGITAL_INDIA: (
        "digital", "technology", "online", "internet", "e-governance", "cyber",
        "IT", "software", "tech", "innovation", "startup", "digital literacy",
        "broadband", "connectivity", "electronic", "computer", "mobile", "app",
        "website", "artificial intelligence", "AI", "data", "cloud",
    ),
    SchemeCategory.AGRICULTURE: _AGRICULTURE_KEYWORDS,
    SchemeCategory.AGRICULTURE_FARMING: _AGRICULTURE_KEYWORDS,
    SchemeCategory.ENTREPRENEURSHIP: (
        "business", "startup", "entrepreneur", "MSME", "loan", "credit",
        "enterprise", "self-employed", "trade", "commerce", "industry",
        "innovation", "incubation", "venture", "business development",
        "funding", "investment", "market access",
    ),
    SchemeCategory.EDUCATION: (
        "education", "student", "scholarship", "school", "college",
        "university", "research", "academic", "learning", "training", "skill",
        "degree", "diploma", "study", "educational", "digital education",
        "vocational",
    ),
    SchemeCategory.HEALTH: (
        "health", "medical", "hospital", "treatment", "insurance", "medicine",
        "healthcare", "wellness", "nutrition", "maternal", "child",
        "vaccination", "clinic", "Ayushman", "medical care",
    ),
    SchemeCategory.HOUSING: (
        "housing", "home", "construction", "shelter", "accommodation",
        "property", "residential", "urban", "rural housing", "slum",
        "affordable housing", "house", "PMAY",
    ),
    SchemeCategory.EMPLOYMENT: (
        "employment", "job", "work", "career", "unemployment", "placement",
        "training", "apprenticeship", "internship", "vocational",
        "job creation", "skill development",
    ),
    SchemeCategory.SOCIAL_WELFARE: (
        "welfare", "pension", "disability", "elderly", "women", "child",
        "widow", "minority", "tribal", "SC", "ST", "OBC", "BPL",
        "social security", "empowerment",
    ),
    SchemeCategory.SKILL_DEVELOPMENT: (
        "skill", "training", "development", "capacity building", "vocational",
        "technical", "professional", "certification", "upskilling",
        "reskilling", "PMKVY",
    ),
    SchemeCategory.FINANCE: (
        "finance", "loan", "credit", "banking", "insurance", "investment",
        "subsidy", "grant", "financial assistance", "micro credit",
        "financial", "MUDRA", "Jan Dhan",
    ),
}

OCCUPATION_RELEVANCE: Final[dict[str, tuple[SchemeCategory, ...]]] = {
    "farmer": (SchemeCategory.AGRICULTURE, SchemeCategory.AGRICULTURE_FARMING),
    "student": (SchemeCategory.EDUCATION, SchemeCategory.SKILL_DEVELOPMENT),
    "entrepreneur": (SchemeCategory.ENTREPRENEURSHIP, SchemeCategory.DIGITAL_INDIA),
    "teacher": (SchemeCategory.EDUCATION, SchemeCategory.SKILL_DEVELOPMENT),
    "software engineer": (SchemeCategory.DIGITAL_INDIA, SchemeCategory.ENTREPRENEURSHIP),
    "doctor": (SchemeCategory.HEALTH, SchemeCategory.EDUCATION),
    "unemployed": (
        SchemeCategory.EMPLOYMENT,
        SchemeCategory.SKILL_DEVELOPMENT,
        SchemeCategory.ENTREPRENEURSHIP,
    ),
    "self-employed": (SchemeCategory.ENTREPRENEURSHIP, SchemeCategory.FINANCE),
    "business owner": (
        SchemeCategory.ENTREPRENEURSHIP,
        SchemeCategory.FINANCE,
        SchemeCategory.DIGITAL_INDIA,
    ),
}

EMPLOYMENT_STATUS_KEYWORDS: Final[dict[EmploymentStatus, tuple[str, ...]]] = {
    EmploymentStatus.UNEMPLOYED: (
        "unemployment", "employment generation", "job creation", "employment", "PMEGP",
    ),
    EmploymentStatus.SELF_EMPLOYED: (
        "self-employed", "entrepreneur", "business", "MSME", "MUDRA",
    ),
    EmploymentStatus.STUDENT: (
        "student", "education", "scholarship", "academic", "skill development",
    ),
    EmploymentStatus.EMPLOYED: (
        "skill development", "training", "professional development", "upskilling",
    ),
    EmploymentStatus.RETIRED: (
        "pension", "senior citizen", "elderly", "social security",
    ),
}

_BPL_MARKERS: Final[tuple[str, ...]] = ("bpl", "below poverty", "poor")
_DISABILITY_MARKERS: Final[tuple[str, ...]] = ("disability", "divyang", "handicap")
_FARMING_CATEGORIES: Final[frozenset[SchemeCategory]] = frozenset({
    SchemeCategory.AGRICULTURE,
    SchemeCategory.AGRICULTURE_FARMING,
})
_ALL_STATES_LOWER: Final[str] = "all states"
_LEADING_INT_RE: Final[re.Pattern[str]] = re.compile(r"\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# Rule plumbing
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RuleContext:
    """Per-pass values shared by every rule."""

    current_year: int


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """Score delta produced by a rule, with an optional explanation."""

    delta: int
    factor: MatchingFactor | None = None


Rule = Callable[[UserProfile, SchemeDocument, RuleContext], RuleOutcome | None]


def _outcome(factor: str, description: str, weight: int) -> RuleOutcome:
    return RuleOutcome(
        delta=weight,
        factor=MatchingFactor(factor=factor, description=description, weight=weight),
    )


def _title_description(scheme: SchemeDocument) -> str:
    return f"{scheme.title} {scheme.description}".lower()


def _count_hits(keywords: tuple[str, ...], text: str) -> int:
    return sum(1 for keyword in keywords if keyword in text)


def _format_amount(value: float) -> str:
    """Grouped, up to three decimals: ``50000.75`` -> ``"50,000.75"``."""
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _format_quantity(value: float) -> str:
    """Plain decimal without exponent: ``1500000.0`` -> ``"1500000"``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.15g}"


def parse_launch_year(launch_date: str | None) -> int | None:
    """Return the leading integer of *launch_date* (``"2023-07-01"`` -> 2023)."""
    if not launch_date:
        return None
    match = _LEADING_INT_RE.match(launch_date)
    return int(match.group(1)) if match else None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def income_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    income = profile.income
    if not income:
        return None

    elig = scheme.eligibility
    if elig.income is not None and elig.income.max and income <= elig.income.max:
        return _outcome(
            "Income Eligibility",
            f"Your annual income ₹{_format_amount(income)} qualifies for this scheme",
            EXACT_MATCH,
        )
    if elig.max_income and income <= elig.max_income:
        return _outcome("Income Range", "Income requirement satisfied", HIGH_RELEVANCE)
    return None


def age_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    """Score the age range, or the separate min/max age limits.

    When only ``min_age``/``max_age`` are declared, each satisfied bound
    is worth :data:`MODERATE_RELEVANCE`, but only the minimum-age side is
    reported as a factor.
    """
    age = profile.age
    if not age:
        return None

    elig = scheme.eligibility
    if elig.age_range is not None:
        low = elig.age_range.min or 0
        high = elig.age_range.max or 100
        if low <= age <= high:
            return _outcome(
                "Perfect Age Match",
                f"Your age {age} falls within the eligible range ({low}-{high} years)",
                EXACT_MATCH,
            )
        return None

    delta = 0
    factor: MatchingFactor | None = None
    if elig.min_age and age >= elig.min_age:
        delta += MODERATE_RELEVANCE
        factor = MatchingFactor(
            factor="Age Eligibility",
            description=f"Meets minimum age requirement of {elig.min_age} years",
            weight=MODERATE_RELEVANCE,
        )
    if elig.max_age and age <= elig.max_age:
        delta += MODERATE_RELEVANCE

    return RuleOutcome(delta=delta, factor=factor) if delta else None


def gender_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    eligible = scheme.eligibility.gender
    if not profile.gender or not eligible:
        return None

    # A plain string is searched as a substring, a sequence by membership.
    if eligible == "all" or str(profile.gender) in eligible:
        return _outcome(
            "Gender Eligibility",
            f"Available for {profile.gender} applicants",
            HIGH_RELEVANCE,
        )
    return None


def category_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    eligible = scheme.eligibility.category
    if not profile.category or eligible is None:
        return None

    # "General" in the eligible list admits every category.
    if profile.category in eligible or "General" in eligible:
        return _outcome(
            "Category Match",
            f"Eligible for {profile.category} category",
            HIGH_RELEVANCE,
        )
    return None


def state_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    if not profile.state:
        return None

    scheme_state = scheme.state.lower() if scheme.state else None
    if scheme_state == profile.state.lower():
        return _outcome(
            "State Specific Scheme",
            f"Exclusive {profile.state} state scheme",
            EXACT_MATCH,
        )
    if scheme_state is None or scheme_state == _ALL_STATES_LOWER:
        return _outcome(
            "Pan India Scheme",
            "Available across all Indian states",
            MODERATE_RELEVANCE,
        )
    return None


def occupation_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    if not profile.occupation:
        return None

    occupation = profile.occupation.lower()
    if scheme.category in OCCUPATION_RELEVANCE.get(occupation, ()):
        return _outcome(
            "Perfect Occupation Match",
            f"Highly relevant for {profile.occupation}",
            EXACT_MATCH,
        )

    text = _title_description(scheme)
    if any(len(word) > 3 and word in text for word in occupation.split(" ")):
        return _outcome(
            "Occupation Relevance",
            "Related to your occupation field",
            MODERATE_RELEVANCE,
        )
    return None


def employment_status_rule(
    profile: UserProfile, scheme: SchemeDocument, _: RuleContext
) -> RuleOutcome | None:
    status = profile.employment_status
    if not status:
        return None

    hits = _count_hits(EMPLOYMENT_STATUS_KEYWORDS.get(status, ()), _title_description(scheme))
    if not hits:
        return None

    weight = min(hits * _EMPLOYMENT_HIT_WEIGHT, HIGH_RELEVANCE)
    return _outcome("Employment Status Match", f"Designed for {status} individuals", weight)


def interest_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    if not profile.interests:
        return None

    text = f"{scheme.title} {scheme.description} {scheme.category}".lower()
    matches = sum(1 for interest in profile.interests if interest.lower() in text)
    if not matches:
        return None

    weight = min(matches * _INTEREST_HIT_WEIGHT, HIGH_RELEVANCE)
    return _outcome("Interest Alignment", f"Matches {matches} of your interests", weight)


def bpl_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    if not profile.bpl_card_holder:
        return None

    text = _title_description(scheme)
    if any(marker in text for marker in _BPL_MARKERS):
        return _outcome("BPL Priority", "Special provisions for BPL families", HIGH_RELEVANCE)
    return None


def farming_land_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    land = profile.farming_land
    if not land or land <= 0 or scheme.category not in _FARMING_CATEGORIES:
        return None

    weight = EXACT_MATCH if land > _LARGE_FARM_ACRES else HIGH_RELEVANCE
    return _outcome(
        "Farming Land Ownership",
        f"Beneficial for farmers with {_format_quantity(land)} acres",
        weight,
    )


def disability_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    if not profile.disability:
        return None

    text = _title_description(scheme)
    if any(marker in text for marker in _DISABILITY_MARKERS):
        return _outcome(
            "Disability Support",
            "Special provisions for persons with disabilities",
            HIGH_RELEVANCE,
        )
    return None


def sector_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    """Reward schemes whose text uses their own sector's vocabulary.

    The delta is always added, but the factor is only reported for a
    strong alignment (at least :data:`LOW_RELEVANCE` points).
    """
    keywords = SECTOR_KEYWORDS.get(scheme.category)
    if not keywords:
        return None

    text = f"{scheme.title} {scheme.description} {' '.join(scheme.tags)}".lower()
    hits = _count_hits(keywords, text)
    if not hits:
        return None

    weight = min(hits * _SECTOR_HIT_WEIGHT, MODERATE_RELEVANCE)
    if weight < LOW_RELEVANCE:
        return RuleOutcome(delta=weight)
    return _outcome(
        "Sector Relevance",
        f"Strong alignment with {scheme.category} sector",
        weight,
    )


def popularity_rule(profile: UserProfile, scheme: SchemeDocument, _: RuleContext) -> RuleOutcome | None:
    if not scheme.is_popular:
        return None
    return _outcome("Popular Scheme", "High adoption rate and success stories", BONUS_FACTORS)


def recency_rule(profile: UserProfile, scheme: SchemeDocument, context: RuleContext) -> RuleOutcome | None:
    year = parse_launch_year(scheme.launch_date)
    if year is None or year < context.current_year - _RECENT_YEARS:
        return None
    return _outcome(
        "Recent Initiative",
        "Recently launched scheme with modern benefits",
        BONUS_FACTORS,
    )


RULES: Final[tuple[Rule, ...]] = (
    income_rule,
    age_rule,
    gender_rule,
    category_rule,
    state_rule,
    occupation_rule,
    employment_status_rule,
    interest_rule,
    bpl_rule,
    farming_land_rule,
    disability_rule,
    sector_rule,
    popularity_rule,
    recency_rule,
)
