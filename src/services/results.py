"""Presentation helpers for ranked match lists.

The matcher always returns results in relevance order.  The results page
lets the user narrow them to one category and re-order them by launch
date or application deadline; those operations live here so that the
API and any other front end share them.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Final

from src.models.enums import SortOption
from src.models.match import MatchedScheme
from src.models.scheme import SchemeCategory

ALL_CATEGORIES: Final[str] = "all"

# Oldest possible launch date / farthest possible deadline for missing values.
_NO_LAUNCH_DATE: Final[datetime] = datetime.min.replace(tzinfo=UTC)
_NO_DEADLINE: Final[datetime] = datetime.max.replace(tzinfo=UTC)

_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d",
    "%Y-%m",
    "%Y",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%B %d, %Y",
    "%d %B %Y",
)


def available_categories() -> list[str]:
    """Category filter options, ``"all"`` first."""
    return [ALL_CATEGORIES, *(c.value for c in SchemeCategory if c is not SchemeCategory.OTHER)]


def filter_by_category(
    matches: Sequence[MatchedScheme], category: str | None
) -> list[MatchedScheme]:
    """Keep matches whose scheme is in *category* (``None``/``"all"`` keeps all)."""
    if not category or category == ALL_CATEGORIES:
        return list(matches)
    return [m for m in matches if m.scheme.category == category]


def sort_matches(
    matches: Sequence[MatchedScheme], option: SortOption | str = SortOption.RELEVANCE
) -> list[MatchedScheme]:
    """Re-order *matches* by the given option.

    * ``relevance`` -- unchanged (the matcher's order).
    * ``newest`` -- latest launch date first; undated schemes last.
    * ``deadline`` -- earliest deadline first; schemes without one last.

    The sort is stable, so equal dates keep relevance order.
    """
    option = SortOption(option)
    if option is SortOption.NEWEST:
        return sorted(
            matches,
            key=lambda m: parse_date(m.scheme.launch_date) or _NO_LAUNCH_DATE,
            reverse=True,
        )
    if option is SortOption.DEADLINE:
        return sorted(
            matches,
            key=lambda m: parse_date(m.scheme.deadline) or _NO_DEADLINE,
        )
    return list(matches)


def apply_view(
    matches: Sequence[MatchedScheme],
    category: str | None = None,
    sort: SortOption | str = SortOption.RELEVANCE,
) -> list[MatchedScheme]:
    """Filter by category, then sort."""
    return sort_matches(filter_by_category(matches, category), sort)


def parse_date(value: str | None) -> datetime | None:
    """Parse a catalog date string into an aware datetime.

    Handles common formats:
    - "2026-03-31" and ISO date-times ("2026-03-31T00:00:00Z")
    - "2023-07" / "2023"
    - "31/03/2026" / "31-03-2026"
    - "March 31, 2026" / "31 March 2026"

    Returns ``None`` when the value is missing or unparseable.
    """
    if not value:
        return None

    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        pass
    else:
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue

    return None
