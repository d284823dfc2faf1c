"""Suggestion ranking across a pool of mentors."""

from collections.abc import Iterable, Sequence

from mentormatch.models.suggestion import ScoredMentor
from mentormatch.models.user import MentorProfile
from mentormatch.services.matching.scorer import score_mentor

DEFAULT_LIMIT = 10


def suggest(
    mentors: Iterable[MentorProfile],
    keywords: Sequence[str],
    limit: int = DEFAULT_LIMIT,
) -> list[ScoredMentor]:
    """Return the best ``limit`` mentors for ``keywords``, highest score first.

    No keywords means no suggestions. Mentors scoring 0 are dropped, and ties
    keep the order in which ``mentors`` were supplied.
    """
    if not keywords or limit <= 0:
        return []

    scored = []
    for mentor in mentors:
        result = score_mentor(mentor, keywords)
        if result.score > 0:
            scored.append(
                ScoredMentor(
                    mentor=mentor,
                    match_score=result.score,
                    matched_keywords=result.matched_keywords,
                )
            )

    scored.sort(key=lambda s: s.match_score, reverse=True)
    return scored[:limit]
