"""Profile-based scheme matching endpoint.

The web form posts the collected profile here; the response is the full
ranked list of schemes with their matching factors, optionally narrowed
to one category and re-ordered by launch date or deadline.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from src.models.enums import SortOption
from src.models.match import MatchedScheme
from src.models.user_profile import ProfileForm, UserProfile
from src.services.profile import normalize_profile
from src.services.results import ALL_CATEGORIES, apply_view, available_categories
from src.services.scheme_matcher import SchemeMatcher

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/match", tags=["match"])


class MatchResponse(BaseModel):
    """Ranked matches for a submitted profile."""

    results: list[MatchedScheme]
    total: int
    categories: list[str]
    profile: UserProfile


def get_matcher(request: Request) -> SchemeMatcher:
    matcher: SchemeMatcher | None = getattr(request.app.state, "scheme_matcher", None)
    if matcher is None:
        matcher = SchemeMatcher(getattr(request.app.state, "scheme_data", []))
    return matcher


@router.post("", response_model=MatchResponse)
async def match_schemes(
    submission: ProfileForm,
    request: Request,
    category: str = Query(default=ALL_CATEGORIES, description="Category filter, or 'all'"),
    sort: SortOption = Query(default=SortOption.RELEVANCE, description="relevance, newest or deadline"),
) -> MatchResponse:
    """Match a submitted profile against every scheme in the catalog."""
    categories = available_categories()
    if category not in categories:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid category '{category}'. Valid categories: {categories}",
        )

    profile = normalize_profile(submission)
    matches = get_matcher(request).match(profile)
    results = apply_view(matches, category, sort)

    logger.info(
        "api.match",
        matched=len(matches),
        returned=len(results),
        category=category,
        sort=str(sort),
    )

    return MatchResponse(
        results=results,
        total=len(results),
        categories=categories,
        profile=profile,
    )
