"""Scheme matcher service layer -- profile normalization, scoring, search and result views.

Everything here is pure Python over in-memory data; no service performs
I/O.  The catalog is loaded separately by :mod:`src.data.seed` and
injected into the matcher and search services.
"""

from __future__ import annotations

from src.services.profile import normalize_profile
from src.services.results import apply_view, available_categories, filter_by_category, sort_matches
from src.services.scheme_matcher import SchemeMatcher, match_schemes_to_user
from src.services.scheme_search import SchemeSearchService, search_schemes

__all__ = [
    "SchemeMatcher",
    "SchemeSearchService",
    "apply_view",
    "available_categories",
    "filter_by_category",
    "match_schemes_to_user",
    "normalize_profile",
    "search_schemes",
    "sort_matches",
]
