"""Scheme catalog API endpoints.

Provides endpoints for listing the catalog, keyword search, the list of
filterable categories, and scheme detail.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from config.settings import settings
from src.models.match import MatchedScheme
from src.models.scheme import SchemeCategory, SchemeDocument
from src.services.results import available_categories
from src.services.scheme_search import SchemeSearchService

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/schemes", tags=["schemes"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SchemeListResponse(BaseModel):
    """Catalog listing."""

    schemes: list[SchemeDocument]
    total: int


class SchemeSearchResponse(BaseModel):
    """Search results for schemes."""

    results: list[MatchedScheme]
    query: str
    total: int


class CategoriesResponse(BaseModel):
    categories: list[str]


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=SchemeListResponse)
async def list_schemes(
    request: Request,
    category: str | None = Query(default=None, description="Filter by scheme category"),
) -> SchemeListResponse:
    """List the scheme catalog, optionally restricted to one category."""
    scheme_data: list[SchemeDocument] = getattr(request.app.state, "scheme_data", [])

    filtered = scheme_data
    if category:
        try:
            cat_enum = SchemeCategory(category)
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid category '{category}'. Valid categories: {[c.value for c in SchemeCategory]}",
            )
        filtered = [s for s in filtered if s.category == cat_enum]

    return SchemeListResponse(schemes=filtered, total=len(filtered))


@router.get("/search", response_model=SchemeSearchResponse)
async def search_schemes(
    request: Request,
    q: str = Query(default="", max_length=500, description="Search query; blank lists the catalog"),
    limit: int | None = Query(default=None, ge=1, le=100, description="Maximum number of results"),
) -> SchemeSearchResponse:
    """Keyword search over titles, descriptions, categories and tags."""
    scheme_search: SchemeSearchService | None = getattr(request.app.state, "scheme_search", None)
    if scheme_search is None:
        scheme_search = SchemeSearchService(getattr(request.app.state, "scheme_data", []))

    results = scheme_search.search(q, limit or settings.search_default_limit)

    return SchemeSearchResponse(results=results, query=q, total=len(results))


@router.get("/categories", response_model=CategoriesResponse)
async def list_categories() -> CategoriesResponse:
    """Category filter options for the results page."""
    return CategoriesResponse(categories=available_categories())


@router.get("/{scheme_id}", response_model=SchemeDocument)
async def get_scheme_detail(scheme_id: str, request: Request) -> SchemeDocument:
    """Get full details of a specific scheme by its ID."""
    scheme_data: list[SchemeDocument] = getattr(request.app.state, "scheme_data", [])

    for scheme in scheme_data:
        if scheme.scheme_id == scheme_id:
            return scheme

    logger.info("api.schemes.not_found", scheme_id=scheme_id)
    raise HTTPException(status_code=404, detail=f"Scheme '{scheme_id}' not found.")
