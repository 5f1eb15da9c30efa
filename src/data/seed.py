"""Loading utilities for the government scheme catalog.

Reads scheme records from the bundled ``schemes.json`` (or a custom
path) into validated :class:`SchemeDocument` instances.  Designed to run
once at application startup; the resulting list is treated as read-only
for the life of the process.

Catalog records come from a loosely-typed front-end data file: keys are
camelCase and the ``eligibility`` object may use either of two
conventions for income and age limits.  Eligibility fields with an
unexpected shape are dropped individually so the matching rule that
reads them simply does not apply.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from src.models.scheme import (
    ALL_STATES,
    AgeRange,
    EligibilityCriteria,
    IncomeLimit,
    SchemeCategory,
    SchemeDocument,
)

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

_DATA_DIR: Path = Path(__file__).resolve().parent / "schemes"
_SCHEMES_PATH: Path = _DATA_DIR / "schemes.json"

# ---------------------------------------------------------------------------
# Category mapping -- JSON string (any case) -> SchemeCategory enum
# ---------------------------------------------------------------------------

_CATEGORY_MAP: dict[str, SchemeCategory] = {c.value.lower(): c for c in SchemeCategory}


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_schemes(path: Path | str | None = None) -> list[SchemeDocument]:
    """Load government scheme data from a JSON file.

    Parameters
    ----------
    path:
        Path to the JSON file.  Defaults to the bundled ``schemes.json``.

    Returns
    -------
    list[SchemeDocument]
        Parsed scheme documents, in file order.  Records missing a
        required field are skipped with a warning.

    Raises
    ------
    FileNotFoundError
        If the JSON file does not exist.
    json.JSONDecodeError
        If the JSON is malformed.
    """
    file_path = Path(path) if path else _SCHEMES_PATH

    if not file_path.exists():
        raise FileNotFoundError(f"Scheme data file not found: {file_path}")

    with file_path.open("r", encoding="utf-8") as f:
        raw_schemes: list[dict] = json.load(f)

    schemes: list[SchemeDocument] = []
    for raw in raw_schemes:
        try:
            scheme = _parse_scheme(raw)
            schemes.append(scheme)
        except (KeyError, TypeError, ValueError):
            logger.warning(
                "seed.parse_error",
                scheme_id=raw.get("id", "unknown") if isinstance(raw, dict) else "unknown",
                exc_info=True,
            )

    logger.info("seed.loaded_schemes", count=len(schemes), source=str(file_path))
    return schemes


def _parse_scheme(raw: dict) -> SchemeDocument:
    """Parse a raw JSON dict into a validated :class:`SchemeDocument`."""
    scheme_id = str(raw["id"])

    category_str = str(raw.get("category", "")).strip().lower()
    category = _CATEGORY_MAP.get(category_str, SchemeCategory.OTHER)

    launch_date = raw.get("launchDate")
    tags = raw.get("tags") or []

    return SchemeDocument(
        scheme_id=scheme_id,
        title=raw["title"],
        description=raw["description"],
        category=category,
        ministry=raw.get("ministry", ""),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        state=raw.get("state", ALL_STATES),
        eligibility=_parse_eligibility(scheme_id, raw.get("eligibility")),
        is_popular=bool(raw.get("isPopular", False)),
        launch_date=str(launch_date) if launch_date is not None else None,
        deadline=raw.get("deadline"),
        benefits=raw.get("benefits"),
        website=raw.get("website"),
    )


def _parse_eligibility(scheme_id: str, raw: Any) -> EligibilityCriteria:
    """Map a loosely-typed eligibility record onto :class:`EligibilityCriteria`.

    Anything that is not a dict yields empty criteria.
    """
    if not isinstance(raw, dict):
        if raw is not None:
            logger.debug("seed.eligibility_ignored", scheme_id=scheme_id, kind=type(raw).__name__)
        return EligibilityCriteria()

    def dropped(field: str) -> None:
        logger.debug("seed.eligibility_field_dropped", scheme_id=scheme_id, field=field)

    income: IncomeLimit | None = None
    if "income" in raw:
        raw_income = raw["income"]
        income_max = _as_number(raw_income.get("max")) if isinstance(raw_income, dict) else None
        if income_max is not None:
            income = IncomeLimit(max=income_max)
        else:
            dropped("income")

    age_range: AgeRange | None = None
    if "ageRange" in raw:
        raw_range = raw["ageRange"]
        if isinstance(raw_range, dict):
            age_range = AgeRange(min=_as_int(raw_range.get("min")), max=_as_int(raw_range.get("max")))
        else:
            dropped("ageRange")

    gender = raw.get("gender")
    if isinstance(gender, list):
        gender = tuple(str(g) for g in gender)
    elif gender is not None and not isinstance(gender, str):
        dropped("gender")
        gender = None

    category = raw.get("category")
    if isinstance(category, list):
        category = tuple(str(c) for c in category)
    elif category is not None:
        dropped("category")
        category = None

    criteria = EligibilityCriteria(
        income=income,
        max_income=_as_number(raw.get("maxIncome")),
        age_range=age_range,
        min_age=_as_int(raw.get("minAge")),
        max_age=_as_int(raw.get("maxAge")),
        gender=gender,
        category=category,
    )

    for key, value in (("maxIncome", criteria.max_income), ("minAge", criteria.min_age), ("maxAge", criteria.max_age)):
        if raw.get(key) is not None and value is None:
            dropped(key)

    return criteria


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return float(value)


def _as_int(value: Any) -> int | None:
    number = _as_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)
