"""Pydantic models for mentor suggestions."""

from pydantic import BaseModel, Field

from mentormatch.models.user import MentorProfile


class MatchResult(BaseModel):
    score: int = Field(0, ge=0)
    matched_keywords: list[str] = Field(default_factory=list)


class ScoredMentor(BaseModel):
    mentor: MentorProfile
    match_score: int
    matched_keywords: list[str]


class KeywordSearch(BaseModel):
    """Explicit keyword search; accepts a list or a comma/space separated string."""

    keywords: list[str] | str | None = None
    keyword: str | None = None
    limit: int | None = Field(None, ge=1, le=100)
