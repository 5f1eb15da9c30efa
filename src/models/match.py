from __future__ import annotations

from pydantic import BaseModel, Field

from src.models.scheme import SchemeDocument


class MatchingFactor(BaseModel):
    """One human-readable reason that contributed to a match score."""

    factor: str
    description: str
    weight: int


class MatchedScheme(BaseModel):
    """A scheme together with its relevance score and explanation."""

    scheme: SchemeDocument
    score: int
    matching_factors: list[MatchingFactor] = Field(default_factory=list)
