"""Keyword relevance scoring for a single topic category."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Sequence

from paper_topics.topics.catalog import KeywordCatalog, KeywordEntry, default_catalog
from paper_topics.topics.categories import TopicCategory

# Share of a keyword's weight awarded when only some words of a phrase appear
PARTIAL_MATCH_MULTIPLIER = 0.6


def normalize_text(title: str, abstract: str) -> str:
    """Lowercase title and abstract joined by a space."""
    return f"{title or ''} {abstract or ''}".lower()


@lru_cache(maxsize=4096)
def _word_pattern(word: str) -> re.Pattern:
    return re.compile(r"\b" + re.escape(word) + r"\b", re.IGNORECASE)


def _has_word(text: str, word: str) -> bool:
    return _word_pattern(word).search(text) is not None


def match_keyword(text: str, keyword: KeywordEntry) -> float:
    """Score contribution of one keyword against normalised paper text.

    Exact keywords need a whole-word match. Other keywords score full weight
    on a substring hit; multi-word phrases that miss fall back to partial
    credit for the words that do appear on their own.
    """
    term = keyword.term.lower()
    if not term:
        return 0.0

    if keyword.exact:
        return float(keyword.weight) if _has_word(text, term) else 0.0

    if term in text:
        return float(keyword.weight)

    words = term.split()
    if len(words) > 1:
        matched = sum(1 for word in words if _has_word(text, word))
        if matched:
            return keyword.weight * PARTIAL_MATCH_MULTIPLIER * (matched / len(words))

    return 0.0


def matched_keywords(text: str, keywords: Iterable[KeywordEntry]) -> list[str]:
    """Terms that contribute a nonzero amount to the score, in keyword order."""
    return [k.term for k in keywords if match_keyword(text, k) > 0]


def score_category(
    text: str,
    category: TopicCategory,
    source_categories: Sequence[str],
    keywords: Iterable[KeywordEntry],
    catalog: KeywordCatalog | None = None,
) -> float:
    """Raw relevance score of normalised text for one category.

    Keyword contributions are summed, negative keyword penalties subtracted,
    and source-category boosts multiplied in the order the paper lists its
    categories. The result is floored at 0 after boosting; there is no upper
    cap here.
    """
    catalog = catalog if catalog is not None else default_catalog()

    score = sum(match_keyword(text, keyword) for keyword in keywords)

    for negative in catalog.negatives(category):
        if negative.term.lower() in text:
            score -= negative.penalty

    for source in source_categories:
        factor = catalog.boost(source, category)
        if factor is not None:
            score *= factor

    return max(0.0, score)
