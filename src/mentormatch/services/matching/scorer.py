"""Mentor relevance scoring.

Each keyword earns points from the first tier it matches:

====================  ======  ==============================================
tier                  points  rule
====================  ======  ==============================================
expertise exact       3       equals an expertise entry, or appears in one as
                              a whole word
expertise partial     2       substring of an entry, or an entry is a
                              substring of the keyword
profile text          1       substring of summary, short description or
                              projects done
====================  ======  ==============================================
"""

import re
from collections.abc import Iterable

from mentormatch.models.suggestion import MatchResult
from mentormatch.models.user import MentorProfile

EXACT_POINTS = 3
PARTIAL_POINTS = 2
TEXT_POINTS = 1


def _expertise_terms(mentor: MentorProfile) -> list[str]:
    return [e.strip().lower() for e in mentor.expertise if e and e.strip()]


def _profile_text(mentor: MentorProfile) -> str:
    fields = (mentor.summary, mentor.short_description, mentor.projects_done)
    return " ".join((f or "").lower() for f in fields)


def keyword_points(keyword: str, expertise: list[str], profile_text: str) -> int:
    """Points a single normalized keyword earns against one mentor."""
    if not keyword:
        return 0
    word = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
    if any(term == keyword or word.search(term) for term in expertise):
        return EXACT_POINTS
    if any(keyword in term or term in keyword for term in expertise):
        return PARTIAL_POINTS
    if keyword in profile_text:
        return TEXT_POINTS
    return 0


def score_mentor(mentor: MentorProfile, keywords: Iterable[str]) -> MatchResult:
    """Score ``mentor`` against ``keywords`` in input order."""
    expertise = _expertise_terms(mentor)
    profile_text = _profile_text(mentor)

    score = 0
    matched: list[str] = []
    for keyword in keywords:
        points = keyword_points((keyword or "").strip().lower(), expertise, profile_text)
        if points:
            score += points
            if keyword not in matched:
                matched.append(keyword)

    return MatchResult(score=score, matched_keywords=matched)
