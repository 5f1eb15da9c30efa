"""Keyword search over the scheme catalog.

A free-text entry point that ignores the user profile entirely.  Each
query term is looked up in the scheme title, description, category and
tags, and the weighted hit counts become a relevance score in
``[70, 95]``.  Schemes that match nothing are left out.

A blank query is not an error: it lists the first ``limit`` schemes
with a flat score so the search page always has something to show.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

import structlog

from src.models.match import MatchedScheme, MatchingFactor
from src.models.scheme import SchemeDocument

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_LIMIT: Final[int] = 50

_TITLE_WEIGHT: Final[int] = 25
_DESCRIPTION_WEIGHT: Final[int] = 15
_CATEGORY_WEIGHT: Final[int] = 20
_TAG_WEIGHT: Final[int] = 10

_MIN_SEARCH_SCORE: Final[int] = 70
_MAX_SEARCH_SCORE: Final[int] = 95
_BROWSE_SCORE: Final[int] = 75
_MIN_TERM_LENGTH: Final[int] = 3
_FACTOR_LIMIT: Final[int] = 3


class SchemeSearchService:
    """Keyword-weighted scheme search over an immutable catalog.

    Parameters
    ----------
    schemes:
        The scheme catalog.  Copied into a tuple on construction.
    """

    __slots__ = ("_schemes",)

    def __init__(self, schemes: Iterable[SchemeDocument]) -> None:
        self._schemes: tuple[SchemeDocument, ...] = tuple(schemes)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> list[MatchedScheme]:
        """Search schemes for *query*.

        Parameters
        ----------
        query:
            Free text, e.g. ``"solar pump subsidy"``.  Terms shorter than
            three characters are ignored.
        limit:
            Maximum number of results to return.

        Returns
        -------
        list[MatchedScheme]
            Ranked results, highest score first; ties keep catalog order.
        """
        if not query.strip():
            return self._browse(limit)

        terms = [term for term in query.lower().split(" ") if len(term) >= _MIN_TERM_LENGTH]

        matches: list[MatchedScheme] = []
        for scheme in self._schemes:
            match = self._score(scheme, terms)
            if match.score > 0:
                matches.append(match)

        matches.sort(key=lambda m: m.score, reverse=True)
        results = matches[:limit]

        logger.info(
            "scheme_search.query",
            terms=len(terms),
            matched=len(matches),
            returned=len(results),
            top_score=results[0].score if results else 0,
        )

        return results

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _browse(self, limit: int) -> list[MatchedScheme]:
        """Blank-query listing: catalog order, flat score."""
        return [
            MatchedScheme(
                scheme=scheme,
                score=_BROWSE_SCORE,
                matching_factors=[
                    MatchingFactor(
                        factor="Available Scheme",
                        description="Open for eligible applicants",
                        weight=_BROWSE_SCORE,
                    )
                ],
            )
            for scheme in self._schemes[:limit]
        ]

    @staticmethod
    def _score(scheme: SchemeDocument, terms: list[str]) -> MatchedScheme:
        """Weight the query *terms* against one scheme.

        Title and description hits are counted per term; the category
        and tag bonuses are added once per term that appears in them.
        """
        score = 0
        factors: list[MatchingFactor] = []

        title = scheme.title.lower()
        title_hits = [term for term in terms if term in title]
        if title_hits:
            weight = len(title_hits) * _TITLE_WEIGHT
            score += weight
            factors.append(
                MatchingFactor(
                    factor="Title Match",
                    description=f'Title contains "{", ".join(title_hits)}"',
                    weight=weight,
                )
            )

        description = scheme.description.lower()
        description_hits = [term for term in terms if term in description]
        if description_hits:
            weight = len(description_hits) * _DESCRIPTION_WEIGHT
            score += weight
            factors.append(
                MatchingFactor(
                    factor="Description Match",
                    description="Description relevant to search terms",
                    weight=weight,
                )
            )

        category = str(scheme.category).lower()
        tags = [tag.lower() for tag in scheme.tags]
        for term in terms:
            if term in category:
                score += _CATEGORY_WEIGHT
            if any(term in tag for tag in tags):
                score += _TAG_WEIGHT

        if score > 0:
            score = min(max(score, _MIN_SEARCH_SCORE), _MAX_SEARCH_SCORE)

        return MatchedScheme(
            scheme=scheme,
            score=score,
            matching_factors=factors[:_FACTOR_LIMIT],
        )


def search_schemes(
    query: str, schemes: Iterable[SchemeDocument], limit: int = DEFAULT_LIMIT
) -> list[MatchedScheme]:
    """One-shot helper: build a :class:`SchemeSearchService` and search."""
    return SchemeSearchService(schemes).search(query, limit)
