from src.models.enums import EmploymentStatus, Gender, MaritalStatus, SortOption
from src.models.match import MatchedScheme, MatchingFactor
from src.models.scheme import (
    ALL_STATES,
    AgeRange,
    EligibilityCriteria,
    IncomeLimit,
    SchemeCategory,
    SchemeDocument,
)
from src.models.user_profile import ProfileForm, ProfileSubmission, UserProfile

__all__ = [
    "ALL_STATES",
    "AgeRange",
    "EligibilityCriteria",
    "EmploymentStatus",
    "Gender",
    "IncomeLimit",
    "MaritalStatus",
    "MatchedScheme",
    "MatchingFactor",
    "ProfileForm",
    "ProfileSubmission",
    "SchemeCategory",
    "SchemeDocument",
    "SortOption",
    "UserProfile",
]
