from __future__ import annotations

from enum import StrEnum


class Gender(StrEnum):
    __slots__ = ()

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class MaritalStatus(StrEnum):
    __slots__ = ()

    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


class EmploymentStatus(StrEnum):
    __slots__ = ()

    EMPLOYED = "employed"
    UNEMPLOYED = "unemployed"
    SELF_EMPLOYED = "self-employed"
    STUDENT = "student"
    RETIRED = "retired"


class SortOption(StrEnum):
    """Secondary orderings offered on the results page."""

    __slots__ = ()

    RELEVANCE = "relevance"
    NEWEST = "newest"
    DEADLINE = "deadline"
