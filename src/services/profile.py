"""Profile normalization: raw form submission -> canonical :class:`UserProfile`."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake

from src.models.user_profile import ProfileSubmission, UserProfile

logger = structlog.get_logger(__name__)


def normalize_profile(submission: ProfileSubmission | Mapping[str, Any]) -> UserProfile:
    """Reconcile overlapping form fields into a canonical profile.

    * ``income`` resolves to ``annual_income`` when it is set (and
      non-zero), falling back to the legacy ``income`` field.
    * ``interests`` may arrive as a list or as one comma-separated
      string; entries are stripped and blanks dropped.

    A plain mapping is accepted too (snake_case or camelCase keys).  It is
    read leniently: any numeric age is kept as given, and a field whose
    value has the wrong type is dropped rather than raising.
    """
    if not isinstance(submission, ProfileSubmission):
        submission = _read_mapping(submission)

    return UserProfile(
        age=submission.age,
        gender=submission.gender,
        category=submission.category,
        income=submission.annual_income or submission.income,
        occupation=submission.occupation,
        state=submission.state,
        education=submission.education,
        marital_status=submission.marital_status,
        disability=submission.disability,
        land_ownership=submission.land_ownership,
        business_type=submission.business_type,
        employment_status=submission.employment_status,
        interests=_split_interests(submission.interests),
        bpl_card_holder=submission.bpl_card_holder,
        farming_land=submission.farming_land,
    )


def _read_mapping(raw: Mapping[str, Any]) -> ProfileSubmission:
    data = dict(raw)
    try:
        return ProfileSubmission.model_validate(data)
    except ValidationError as exc:
        invalid = {str(error["loc"][0]) for error in exc.errors() if error["loc"]}

    logger.debug("profile.fields_dropped", fields=sorted(invalid))
    kept = {
        key: value
        for key, value in data.items()
        if not invalid & {str(key), to_camel(str(key)), to_snake(str(key))}
    }
    return ProfileSubmission.model_validate(kept)


def _split_interests(raw: Iterable[str] | str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    if isinstance(raw, str):
        raw = raw.split(",")
    return tuple(item.strip() for item in raw if item and item.strip())
