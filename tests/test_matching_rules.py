"""Tests for the individual scoring rules."""

from __future__ import annotations

import pytest

from src.models.enums import EmploymentStatus, Gender
from src.models.scheme import AgeRange, EligibilityCriteria, IncomeLimit, SchemeCategory, SchemeDocument
from src.models.user_profile import UserProfile
from src.services.matching_rules import (
    RULES,
    RuleContext,
    age_rule,
    bpl_rule,
    category_rule,
    disability_rule,
    employment_status_rule,
    farming_land_rule,
    gender_rule,
    income_rule,
    interest_rule,
    occupation_rule,
    parse_launch_year,
    popularity_rule,
    recency_rule,
    sector_rule,
    state_rule,
)

CTX = RuleContext(current_year=2026)


def _scheme(**overrides) -> SchemeDocument:
    fields = {
        "scheme_id": "test",
        "title": "Test Scheme",
        "description": "Plain text",
        "category": SchemeCategory.OTHER,
    }
    fields.update(overrides)
    return SchemeDocument(**fields)


def _elig(**kwargs) -> SchemeDocument:
    return _scheme(eligibility=EligibilityCriteria(**kwargs))


class TestRuleOrder:
    def test_fourteen_rules_in_order(self) -> None:
        assert [r.__name__ for r in RULES] == [
            "income_rule",
            "age_rule",
            "gender_rule",
            "category_rule",
            "state_rule",
            "occupation_rule",
            "employment_status_rule",
            "interest_rule",
            "bpl_rule",
            "farming_land_rule",
            "disability_rule",
            "sector_rule",
            "popularity_rule",
            "recency_rule",
        ]


class TestIncomeRule:
    def test_within_income_limit(self) -> None:
        outcome = income_rule(UserProfile(income=50000), _elig(income=IncomeLimit(max=100000)), CTX)
        assert outcome.delta == 25
        assert outcome.factor.factor == "Income Eligibility"
        assert outcome.factor.description == "Your annual income ₹50,000 qualifies for this scheme"

    @pytest.mark.parametrize(
        ("income", "shown"),
        [(50000.75, "50,000.75"), (1234567.5, "1,234,567.5"), (999.1234, "999.123"), (80000.0, "80,000")],
    )
    def test_income_keeps_fractions(self, income, shown) -> None:
        outcome = income_rule(UserProfile(income=income), _elig(income=IncomeLimit(max=2000000)), CTX)
        assert outcome.factor.description == f"Your annual income ₹{shown} qualifies for this scheme"

    def test_falls_back_to_max_income(self) -> None:
        scheme = _elig(income=IncomeLimit(max=100000), max_income=200000)
        outcome = income_rule(UserProfile(income=150000), scheme, CTX)
        assert outcome.delta == 20
        assert outcome.factor.factor == "Income Range"

    def test_above_both_limits(self) -> None:
        scheme = _elig(income=IncomeLimit(max=100000), max_income=200000)
        assert income_rule(UserProfile(income=300000), scheme, CTX) is None

    @pytest.mark.parametrize("income", [None, 0])
    def test_missing_or_zero_income(self, income) -> None:
        assert income_rule(UserProfile(income=income), _elig(max_income=200000), CTX) is None

    def test_zero_limit_is_ignored(self) -> None:
        assert income_rule(UserProfile(income=10), _elig(income=IncomeLimit(max=0)), CTX) is None

    def test_no_eligibility(self) -> None:
        assert income_rule(UserProfile(income=10), _scheme(), CTX) is None


class TestAgeRule:
    def test_inside_range(self) -> None:
        outcome = age_rule(UserProfile(age=25), _elig(age_range=AgeRange(min=18, max=35)), CTX)
        assert outcome.delta == 25
        assert outcome.factor.factor == "Perfect Age Match"
        assert outcome.factor.description == "Your age 25 falls within the eligible range (18-35 years)"

    def test_open_ended_range(self) -> None:
        outcome = age_rule(UserProfile(age=70), _elig(age_range=AgeRange(min=60)), CTX)
        assert outcome.factor.description == "Your age 70 falls within the eligible range (60-100 years)"

    def test_outside_range_ignores_min_max(self) -> None:
        scheme = _elig(age_range=AgeRange(min=18, max=35), min_age=18)
        assert age_rule(UserProfile(age=40), scheme, CTX) is None

    def test_min_and_max_both_satisfied(self) -> None:
        outcome = age_rule(UserProfile(age=30), _elig(min_age=18, max_age=60), CTX)
        assert outcome.delta == 30
        assert outcome.factor.factor == "Age Eligibility"
        assert outcome.factor.weight == 15
        assert outcome.factor.description == "Meets minimum age requirement of 18 years"

    def test_max_age_alone_adds_points_without_factor(self) -> None:
        outcome = age_rule(UserProfile(age=30), _elig(min_age=40, max_age=60), CTX)
        assert outcome.delta == 15
        assert outcome.factor is None

    def test_neither_bound_satisfied(self) -> None:
        assert age_rule(UserProfile(age=70), _elig(min_age=75, max_age=60), CTX) is None

    def test_no_age(self) -> None:
        assert age_rule(UserProfile(), _elig(min_age=18), CTX) is None


class TestGenderRule:
    def test_all(self) -> None:
        outcome = gender_rule(UserProfile(gender=Gender.OTHER), _elig(gender="all"), CTX)
        assert outcome.delta == 20
        assert outcome.factor.description == "Available for other applicants"

    def test_sequence_membership(self) -> None:
        scheme = _elig(gender=("female", "other"))
        assert gender_rule(UserProfile(gender=Gender.FEMALE), scheme, CTX).delta == 20
        assert gender_rule(UserProfile(gender=Gender.MALE), scheme, CTX) is None

    def test_string_is_substring_search(self) -> None:
        scheme = _elig(gender="female")
        assert gender_rule(UserProfile(gender=Gender.FEMALE), scheme, CTX) is not None
        # "male" is a substring of "female".
        assert gender_rule(UserProfile(gender=Gender.MALE), scheme, CTX) is not None
        assert gender_rule(UserProfile(gender=Gender.OTHER), scheme, CTX) is None

    def test_missing(self) -> None:
        assert gender_rule(UserProfile(), _elig(gender="all"), CTX) is None
        assert gender_rule(UserProfile(gender=Gender.MALE), _scheme(), CTX) is None


class TestCategoryRule:
    def test_listed_category(self) -> None:
        outcome = category_rule(UserProfile(category="SC"), _elig(category=("SC", "ST")), CTX)
        assert outcome.delta == 20
        assert outcome.factor.description == "Eligible for SC category"

    def test_general_admits_everyone(self) -> None:
        outcome = category_rule(UserProfile(category="OBC"), _elig(category=("General",)), CTX)
        assert outcome.factor.factor == "Category Match"

    def test_not_listed(self) -> None:
        assert category_rule(UserProfile(category="OBC"), _elig(category=("SC", "ST")), CTX) is None

    def test_profile_without_category(self) -> None:
        assert category_rule(UserProfile(), _elig(category=("General",)), CTX) is None


class TestStateRule:
    def test_exact_state_case_insensitive(self) -> None:
        outcome = state_rule(UserProfile(state="maharashtra"), _scheme(state="Maharashtra"), CTX)
        assert outcome.delta == 25
        assert outcome.factor.factor == "State Specific Scheme"
        assert outcome.factor.description == "Exclusive maharashtra state scheme"

    @pytest.mark.parametrize("state", ["All States", "all states", None])
    def test_pan_india(self, state) -> None:
        outcome = state_rule(UserProfile(state="Goa"), _scheme(state=state), CTX)
        assert outcome.delta == 15
        assert outcome.factor.factor == "Pan India Scheme"

    def test_other_state(self) -> None:
        assert state_rule(UserProfile(state="Goa"), _scheme(state="Kerala"), CTX) is None

    def test_profile_without_state(self) -> None:
        assert state_rule(UserProfile(), _scheme(), CTX) is None


class TestOccupationRule:
    def test_table_match(self) -> None:
        scheme = _scheme(category=SchemeCategory.AGRICULTURE)
        outcome = occupation_rule(UserProfile(occupation="Farmer"), scheme, CTX)
        assert outcome.delta == 25
        assert outcome.factor.description == "Highly relevant for Farmer"

    def test_word_in_text(self) -> None:
        scheme = _scheme(title="Support for handloom weavers")
        outcome = occupation_rule(UserProfile(occupation="weaver artisan"), scheme, CTX)
        assert outcome.delta == 15
        assert outcome.factor.factor == "Occupation Relevance"

    def test_short_words_skipped(self) -> None:
        scheme = _scheme(title="Cab and bus drivers")
        assert occupation_rule(UserProfile(occupation="cab"), scheme, CTX) is None

    def test_unrelated(self) -> None:
        scheme = _scheme(category=SchemeCategory.HEALTH)
        assert occupation_rule(UserProfile(occupation="tailor"), scheme, CTX) is None


class TestEmploymentStatusRule:
    def test_weight_capped(self) -> None:
        scheme = _scheme(title="PMEGP", description="Employment generation and job creation")
        outcome = employment_status_rule(
            UserProfile(employment_status=EmploymentStatus.UNEMPLOYED), scheme, CTX
        )
        # "employment generation", "job creation", "employment" -> 24, capped.
        assert outcome.delta == 20
        assert outcome.factor.description == "Designed for unemployed individuals"

    def test_single_hit(self) -> None:
        scheme = _scheme(description="Monthly pension support")
        outcome = employment_status_rule(
            UserProfile(employment_status=EmploymentStatus.RETIRED), scheme, CTX
        )
        assert outcome.delta == 8

    def test_uppercase_keywords_never_match(self) -> None:
        scheme = _scheme(title="MUDRA", description="Loans")
        assert (
            employment_status_rule(
                UserProfile(employment_status=EmploymentStatus.SELF_EMPLOYED), scheme, CTX
            )
            is None
        )


class TestInterestRule:
    def test_category_counts_as_text(self) -> None:
        scheme = _scheme(title="Rooftop Solar", category=SchemeCategory.HOUSING)
        profile = UserProfile(interests=("solar", "Housing", "cricket"))
        outcome = interest_rule(profile, scheme, CTX)
        assert outcome.delta == 20
        assert outcome.factor.description == "Matches 2 of your interests"

    def test_single_match(self) -> None:
        scheme = _scheme(description="Solar pumps")
        assert interest_rule(UserProfile(interests=("solar",)), scheme, CTX).delta == 10

    def test_no_interests(self) -> None:
        assert interest_rule(UserProfile(), _scheme(), CTX) is None


class TestFlagRules:
    def test_bpl(self) -> None:
        scheme = _scheme(description="Support for families below poverty line")
        outcome = bpl_rule(UserProfile(bpl_card_holder=True), scheme, CTX)
        assert outcome.delta == 20
        assert bpl_rule(UserProfile(bpl_card_holder=False), scheme, CTX) is None
        assert bpl_rule(UserProfile(bpl_card_holder=True), _scheme(), CTX) is None

    def test_disability_case_insensitive(self) -> None:
        scheme = _scheme(title="Assistance to Divyang persons")
        outcome = disability_rule(UserProfile(disability=True), scheme, CTX)
        assert outcome.factor.factor == "Disability Support"
        assert disability_rule(UserProfile(disability=False), scheme, CTX) is None

    @pytest.mark.parametrize(
        ("land", "weight", "shown"),
        [(6, 25, "6"), (5, 20, "5"), (2.5, 20, "2.5"), (1500000, 25, "1500000"), (0.25, 20, "0.25")],
    )
    def test_farming_land(self, land, weight, shown) -> None:
        scheme = _scheme(category=SchemeCategory.AGRICULTURE_FARMING)
        outcome = farming_land_rule(UserProfile(farming_land=land), scheme, CTX)
        assert outcome.delta == weight
        assert outcome.factor.description == f"Beneficial for farmers with {shown} acres"

    def test_farming_land_needs_farming_category(self) -> None:
        scheme = _scheme(category=SchemeCategory.HEALTH)
        assert farming_land_rule(UserProfile(farming_land=6), scheme, CTX) is None
        farm = _scheme(category=SchemeCategory.AGRICULTURE)
        assert farming_land_rule(UserProfile(farming_land=0), farm, CTX) is None


class TestSectorRule:
    def test_weak_alignment_adds_points_only(self) -> None:
        scheme = _scheme(title="Crop Support", description="Help", category=SchemeCategory.AGRICULTURE)
        outcome = sector_rule(UserProfile(), scheme, CTX)
        assert outcome.delta == 3
        assert outcome.factor is None

    def test_strong_alignment_reported(self) -> None:
        scheme = _scheme(
            title="Dairy and fisheries",
            description="livestock and horticulture",
            category=SchemeCategory.AGRICULTURE,
        )
        outcome = sector_rule(UserProfile(), scheme, CTX)
        assert outcome.delta == 12
        assert outcome.factor.description == "Strong alignment with Agriculture sector"

    def test_capped(self) -> None:
        scheme = _scheme(
            title="Farmer crop irrigation scheme",
            description="soil and seed support",
            category=SchemeCategory.AGRICULTURE,
        )
        assert sector_rule(UserProfile(), scheme, CTX).delta == 15

    def test_tags_are_searched(self) -> None:
        scheme = _scheme(title="Plan", description="x", category=SchemeCategory.EDUCATION, tags=("scholarship",))
        assert sector_rule(UserProfile(), scheme, CTX).delta == 3

    def test_mixed_case_acronyms_ignored(self) -> None:
        scheme = _scheme(title="IT Services", description="", category=SchemeCategory.DIGITAL_INDIA)
        assert sector_rule(UserProfile(), scheme, CTX) is None

    def test_category_without_vocabulary(self) -> None:
        assert sector_rule(UserProfile(), _scheme(title="farmer crop"), CTX) is None


class TestCatalogRules:
    def test_popularity(self) -> None:
        outcome = popularity_rule(UserProfile(), _scheme(is_popular=True), CTX)
        assert outcome.delta == 8
        assert popularity_rule(UserProfile(), _scheme(), CTX) is None

    @pytest.mark.parametrize(
        ("launch_date", "fires"),
        [("2024-07-01", True), ("2023", True), ("2022", False), ("launched 2024", False), (None, False)],
    )
    def test_recency(self, launch_date, fires) -> None:
        outcome = recency_rule(UserProfile(), _scheme(launch_date=launch_date), CTX)
        assert (outcome is not None) is fires
        if fires:
            assert outcome.factor.factor == "Recent Initiative"

    def test_recency_uses_context_year(self) -> None:
        scheme = _scheme(launch_date="2020")
        assert recency_rule(UserProfile(), scheme, RuleContext(current_year=2023)) is not None
        assert recency_rule(UserProfile(), scheme, RuleContext(current_year=2024)) is None

    @pytest.mark.parametrize(
        ("value", "year"),
        [("2023-07-01", 2023), (" 2023abc", 2023), ("2016", 2016), ("July 2016", None), ("", None), (None, None)],
    )
    def test_parse_launch_year(self, value, year) -> None:
        assert parse_launch_year(value) == year
