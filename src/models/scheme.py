from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class SchemeCategory(StrEnum):
    __slots__ = ()

    DIGITAL_INDIA = "Digital India"
    AGRICULTURE = "Agriculture"
    AGRICULTURE_FARMING = "Agriculture & Farming"
    ENTREPRENEURSHIP = "Entrepreneurship"
    EDUCATION = "Education"
    HEALTH = "Health"
    HOUSING = "Housing"
    EMPLOYMENT = "Employment"
    SOCIAL_WELFARE = "Social Welfare"
    SKILL_DEVELOPMENT = "Skill Development"
    FINANCE = "Finance"
    OTHER = "Other"


# Jurisdiction value used by the catalog for central schemes.
ALL_STATES = "All States"


class IncomeLimit(BaseModel):
    model_config = ConfigDict(frozen=True)

    max: float | None = None


class AgeRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: int | None = None
    max: int | None = None


class EligibilityCriteria(BaseModel):
    """Optional eligibility metadata attached to a scheme.

    Catalog records use two conventions for income and age limits; both
    are kept side by side.  Any field may be ``None``, which means the
    corresponding matching rule does not apply.
    """

    model_config = ConfigDict(frozen=True)

    income: IncomeLimit | None = None
    max_income: float | None = None
    age_range: AgeRange | None = None
    min_age: int | None = None
    max_age: int | None = None
    gender: str | tuple[str, ...] | None = None  # "all", "female", ("male", "other")
    category: tuple[str, ...] | None = None  # ("SC", "ST", "General")


class SchemeDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    scheme_id: str
    title: str
    description: str
    category: SchemeCategory
    ministry: str = ""
    tags: tuple[str, ...] = ()
    state: str | None = ALL_STATES
    eligibility: EligibilityCriteria = Field(default_factory=EligibilityCriteria)
    is_popular: bool = False
    launch_date: str | None = None  # "2023", "2023-07-01"
    deadline: str | None = None
    benefits: str | None = None
    website: str | None = None
