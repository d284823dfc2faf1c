"""Keyword normalization for mentor matching.

Two feeds exist and must stay separate:

- ``extract_keywords`` tokenizes free text (project idea, title, guidance) and
  drops punctuation, short tokens and stop-words.
- ``normalize_keyword_input`` parses keywords the user typed on purpose. It only
  lower-cases and splits; stop-words are kept because they are intentional.
"""

import re
from collections.abc import Iterable, Sequence

STOP_WORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "from", "as", "is", "was", "are", "were", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might", "must",
    "can", "need", "dare", "ought", "used", "i", "me", "my", "we", "our", "you", "your",
    "it", "its", "this", "that", "these", "those", "am", "into", "through", "during",
})

_NON_WORD = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_INPUT_SEPARATORS = re.compile(r"[\s,;]+")


def extract_keywords(text: str | None) -> set[str]:
    """Return the distinct meaningful lower-case tokens of ``text``."""
    if not text or not isinstance(text, str):
        return set()
    normalized = _WHITESPACE.sub(" ", _NON_WORD.sub(" ", text.lower()))
    return {
        word
        for word in normalized.split(" ")
        if len(word) > 1 and word not in STOP_WORDS
    }


def normalize_keyword_input(value: str | Sequence[str] | None) -> list[str]:
    """Parse user-entered keywords such as ``"ML, Python; APIs"``.

    Lists keep their order and any duplicates; blank entries are dropped.
    """
    if isinstance(value, str):
        return [part.strip().lower() for part in _INPUT_SEPARATORS.split(value) if part.strip()]
    if isinstance(value, (list, tuple)):
        return [
            str(item).strip().lower()
            for item in value
            if item is not None and str(item).strip()
        ]
    return []


def gather_keywords(
    tags: Iterable[str] | None = None,
    idea: str | None = "",
    guidance_needed: str | None = "",
    title: str | None = "",
) -> list[str]:
    """Union of a project's explicit tags and the keywords of its text fields."""
    seen: dict[str, None] = {}
    for tag in tags or []:
        if tag and isinstance(tag, str) and tag.strip():
            seen.setdefault(tag.strip().lower(), None)
    for text in (idea, guidance_needed, title):
        for word in sorted(extract_keywords(text)):
            seen.setdefault(word, None)
    return list(seen)
