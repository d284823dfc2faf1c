"""Keyword-based mentor matching."""

from mentormatch.services.matching.keywords import (
    STOP_WORDS,
    extract_keywords,
    gather_keywords,
    normalize_keyword_input,
)
from mentormatch.services.matching.ranker import suggest
from mentormatch.services.matching.scorer import score_mentor

__all__ = [
    "STOP_WORDS",
    "extract_keywords",
    "gather_keywords",
    "normalize_keyword_input",
    "score_mentor",
    "suggest",
]
