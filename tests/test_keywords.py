"""Tests for keyword extraction and user keyword parsing."""

from mentormatch.services.matching import (
    STOP_WORDS,
    extract_keywords,
    gather_keywords,
    normalize_keyword_input,
)


def test_extract_keywords_drops_stop_words_and_short_tokens():
    words = extract_keywords("I need a model for X-ray images, and the API!")
    assert words == {"model", "x-ray", "images", "api"}


def test_extract_keywords_empty_and_non_string():
    assert extract_keywords("") == set()
    assert extract_keywords(None) == set()
    assert extract_keywords(42) == set()


def test_extract_keywords_keeps_hyphens_and_underscores():
    assert extract_keywords("real-time snake_case!!") == {"real-time", "snake_case"}


def test_extract_keywords_is_idempotent():
    text = "Building a Real-Time chat app with WebSockets; scaling to 10k users."
    first = extract_keywords(text)
    assert extract_keywords(" ".join(first)) == first
    assert all(len(w) > 1 and w not in STOP_WORDS for w in first)


def test_stop_word_list():
    assert len(STOP_WORDS) == 57
    assert {"the", "ought", "during", "dare"} <= STOP_WORDS


def test_normalize_string_splits_on_commas_semicolons_and_spaces():
    assert normalize_keyword_input("ML, Python;  APIs") == ["ml", "python", "apis"]


def test_normalize_keeps_stop_words_and_single_letters():
    assert normalize_keyword_input("the r") == ["the", "r"]


def test_normalize_list_keeps_order_and_duplicates():
    assert normalize_keyword_input(["  Rust", "", None, "rust", 3]) == ["rust", "rust", "3"]


def test_normalize_other_types_give_empty_list():
    assert normalize_keyword_input(None) == []
    assert normalize_keyword_input({"python": 1}) == []
    assert normalize_keyword_input("  ,; ") == []


def test_gather_keywords_unions_tags_and_text():
    keywords = gather_keywords(
        ["Python", "python", " NLP "],
        idea="Summarize legal documents",
        guidance_needed=None,
        title="Legal summarizer",
    )
    assert keywords[:2] == ["python", "nlp"]
    assert set(keywords) == {"python", "nlp", "summarize", "legal", "documents", "summarizer"}
    assert len(keywords) == len(set(keywords))


def test_gather_keywords_nothing_to_gather():
    assert gather_keywords(None, "", None, "") == []
