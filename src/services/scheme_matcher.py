"""Rule-based scheme matching engine.

Scores every scheme in the catalog against a single user profile and
returns a ranked, explained list of matches.

Architecture:
    * The catalog is injected at construction and held as an immutable
      tuple; the matcher never mutates it.
    * Each scheme is scored independently: starting from
      :data:`~src.services.matching_rules.BASE_SCORE`, the ordered
      :data:`~src.services.matching_rules.RULES` are folded into a running
      total and a list of triggered matching factors.
    * Per-scheme normalization clamps the total into ``[60, 95]`` and
      rewards profiles that triggered many factors.
    * A global pass sorts all matches, spreads the top ten apart with a
      rank-dependent boost, and sorts again.

The heuristic ranks relevance; it does not decide legal eligibility.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Final

import structlog

from src.models.match import MatchedScheme, MatchingFactor
from src.models.scheme import SchemeDocument
from src.models.user_profile import UserProfile
from src.services.matching_rules import BASE_SCORE, RULES, Rule, RuleContext

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Normalization constants
# ---------------------------------------------------------------------------

MIN_SCORE: Final[int] = 60
MAX_SCORE: Final[int] = 95

_STRONG_MATCH_FACTORS: Final[int] = 4
_STRONG_MATCH_BONUS: Final[int] = 5
_STRONG_MATCH_FACTOR_LIMIT: Final[int] = 6
_FACTOR_LIMIT: Final[int] = 5

_RANK_BOOST_COUNT: Final[int] = 10
_RANK_BOOST_CEILING: Final[int] = 90  # scores at or above this are left alone


class SchemeMatcher:
    """Matches a user profile against an immutable scheme catalog.

    Parameters
    ----------
    schemes:
        The scheme catalog.  Copied into a tuple on construction.
    current_year:
        Year used by the recency rule.  Defaults to the current UTC year,
        read on every call.
    rules:
        Ordered rule evaluators.  Defaults to
        :data:`~src.services.matching_rules.RULES`.
    """

    __slots__ = ("_current_year", "_rules", "_schemes")

    def __init__(
        self,
        schemes: Iterable[SchemeDocument],
        *,
        current_year: int | None = None,
        rules: Iterable[Rule] = RULES,
    ) -> None:
        self._schemes: tuple[SchemeDocument, ...] = tuple(schemes)
        self._current_year = current_year
        self._rules: tuple[Rule, ...] = tuple(rules)

    @property
    def schemes(self) -> tuple[SchemeDocument, ...]:
        return self._schemes

    @property
    def current_year(self) -> int:
        return self._current_year or datetime.now(UTC).year

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def score(
        self, profile: UserProfile, scheme: SchemeDocument
    ) -> tuple[int, list[MatchingFactor]]:
        """Return the raw (unclamped) score and every factor triggered.

        Factors are listed in rule order; nothing is truncated or sorted
        here.
        """
        return self._score(profile, scheme, RuleContext(current_year=self.current_year))

    def score_scheme(self, profile: UserProfile, scheme: SchemeDocument) -> MatchedScheme:
        """Score one scheme and normalize it, without the global rank boost."""
        raw_score, factors = self.score(profile, scheme)
        return _normalize(scheme, raw_score, factors)

    def match(self, profile: UserProfile) -> list[MatchedScheme]:
        """Score every scheme and return the full ranked list.

        Returns
        -------
        list[MatchedScheme]
            One entry per catalog scheme, sorted by score descending.
            Ties keep catalog order.  An empty catalog yields ``[]``.
        """
        if not self._schemes:
            logger.warning("scheme_matcher.empty_catalog")
            return []

        context = RuleContext(current_year=self.current_year)
        matches: list[MatchedScheme] = []
        for scheme in self._schemes:
            raw_score, factors = self._score(profile, scheme, context)
            matches.append(_normalize(scheme, raw_score, factors))

        matches.sort(key=lambda m: m.score, reverse=True)
        _apply_rank_boost(matches)
        matches.sort(key=lambda m: m.score, reverse=True)

        logger.info(
            "scheme_matcher.match_complete",
            total_schemes=len(self._schemes),
            profile_fields=len(profile.model_dump(exclude_defaults=True)),
            top_scores=[(m.scheme.scheme_id, m.score) for m in matches[:5]],
            average_score=round(sum(m.score for m in matches) / len(matches)),
        )

        return matches

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _score(
        self, profile: UserProfile, scheme: SchemeDocument, context: RuleContext
    ) -> tuple[int, list[MatchingFactor]]:
        total = BASE_SCORE
        factors: list[MatchingFactor] = []

        for rule in self._rules:
            outcome = rule(profile, scheme, context)
            if outcome is None:
                continue
            total += outcome.delta
            if outcome.factor is not None:
                factors.append(outcome.factor)

        return total, factors


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------


def _normalize(
    scheme: SchemeDocument, raw_score: int, factors: list[MatchingFactor]
) -> MatchedScheme:
    """Clamp the raw score and keep the leading factors, heaviest first."""
    score = min(max(raw_score, MIN_SCORE), MAX_SCORE)

    if len(factors) >= _STRONG_MATCH_FACTORS:
        score = min(score + _STRONG_MATCH_BONUS, MAX_SCORE)
        kept = factors[:_STRONG_MATCH_FACTOR_LIMIT]
    else:
        kept = factors[:_FACTOR_LIMIT]

    return MatchedScheme(
        scheme=scheme,
        score=score,
        matching_factors=sorted(kept, key=lambda f: f.weight, reverse=True),
    )


def _apply_rank_boost(matches: list[MatchedScheme]) -> None:
    """Spread the top of an already-sorted list apart.

    The entry at index ``i`` (``i < 10``) gains ``10 - i`` points unless
    it already scores 90 or more.  Scores stay capped at :data:`MAX_SCORE`.
    """
    for index, match in enumerate(matches[:_RANK_BOOST_COUNT]):
        if match.score < _RANK_BOOST_CEILING:
            match.score = min(match.score + (_RANK_BOOST_COUNT - index), MAX_SCORE)


def match_schemes_to_user(
    profile: UserProfile, schemes: Iterable[SchemeDocument]
) -> list[MatchedScheme]:
    """One-shot helper: build a :class:`SchemeMatcher` and run it."""
    return SchemeMatcher(schemes).match(profile)
