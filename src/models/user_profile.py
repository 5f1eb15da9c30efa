"""User profile models for scheme matching.

Three shapes exist:

* :class:`ProfileSubmission` -- the raw payload collected by the
  multi-step form.  It carries both the legacy ``income`` field and the
  newer ``annual_income`` field, and accepts camelCase keys
  (``annualIncome``, ``bplCardHolder``) as sent by the web client.
* :class:`ProfileForm` -- the same payload as accepted over HTTP, with
  the form's own age bounds enforced.
* :class:`UserProfile` -- the canonical, read-only record consumed by
  the scoring engine, produced by
  :func:`src.services.profile.normalize_profile`.

Every field is optional.  A missing field means "the matching rule does
not apply", never "the user fails to match".
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.enums import EmploymentStatus, Gender, MaritalStatus


class ProfileSubmission(BaseModel):
    """Profile as submitted by the form, before normalization."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Basic information
    age: int | float | None = None
    gender: Gender | None = None
    category: str | None = None  # "SC", "ST", "OBC", "General"
    income: float | None = None  # legacy field
    annual_income: float | None = None
    occupation: str | None = None
    state: str | None = None

    # Personal details
    education: str | None = None
    marital_status: MaritalStatus | None = None
    disability: bool | None = None
    land_ownership: bool | None = None
    business_type: str | None = None

    # Employment & interests
    employment_status: EmploymentStatus | None = None
    interests: list[str] | str | None = None  # list or "farming, solar"
    bpl_card_holder: bool | None = None
    farming_land: float | None = None  # acres


class ProfileForm(ProfileSubmission):
    """HTTP payload of the profile form: the form only offers ages 18 to 100."""

    age: int | None = Field(default=None, ge=18, le=100)


class UserProfile(BaseModel):
    """Canonical profile consumed by :class:`~src.services.scheme_matcher.SchemeMatcher`."""

    model_config = ConfigDict(frozen=True)

    age: int | float | None = None
    gender: Gender | None = None
    category: str | None = None
    income: float | None = None  # resolved from annual_income / income
    occupation: str | None = None
    state: str | None = None
    education: str | None = None
    marital_status: MaritalStatus | None = None
    disability: bool | None = None
    land_ownership: bool | None = None
    business_type: str | None = None
    employment_status: EmploymentStatus | None = None
    interests: tuple[str, ...] = ()
    bpl_card_holder: bool | None = None
    farming_land: float | None = None
