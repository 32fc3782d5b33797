"""Multi-category classification and filtering of papers.

Every function here is a pure function of (paper, keyword configuration).
The keyword configuration is the packaged catalog, optionally customised by a
:class:`~paper_topics.topics.overlay.UserKeywordOverlay` passed by the caller.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from paper_topics.models import Paper
from paper_topics.topics.catalog import KeywordCatalog, KeywordEntry, clamp_score, default_catalog
from paper_topics.topics.categories import SCORED_CATEGORIES, TopicCategory
from paper_topics.topics.overlay import UserKeywordOverlay
from paper_topics.topics.scoring import matched_keywords, normalize_text, score_category

# Minimum raw score for a paper to count as relevant to a category
MIN_RELEVANCE_SCORE = 5
MARKET_POTENTIAL_MIN_SCORE = 10


@dataclass(frozen=True)
class CategoryMatch:
    category: TopicCategory
    score: float
    matched_keywords: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "score": round(self.score, 1),
            "matched_keywords": list(self.matched_keywords),
        }


def _resolve(
    overlay: UserKeywordOverlay | None, catalog: KeywordCatalog | None
) -> KeywordCatalog:
    if overlay is not None:
        if catalog is not None and catalog is not overlay.catalog:
            raise ValueError("overlay was built on a different keyword catalog")
        return overlay.catalog
    if catalog is not None:
        return catalog
    return default_catalog()


def _keywords_for(
    category: TopicCategory, overlay: UserKeywordOverlay | None, catalog: KeywordCatalog
) -> Sequence[KeywordEntry]:
    if overlay is not None:
        return overlay.get_effective_keywords(category)
    return catalog.keywords(category)


def category_score(
    paper: Paper,
    category: TopicCategory | str,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> float:
    """Raw (uncapped) relevance score of a paper for one category."""
    category = TopicCategory.parse(category)
    catalog = _resolve(overlay, catalog)
    return score_category(
        normalize_text(paper.title, paper.abstract),
        category,
        paper.categories,
        _keywords_for(category, overlay, catalog),
        catalog,
    )


def calculate_relevance_scores(
    paper: Paper,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> list[CategoryMatch]:
    """Score a paper against every category and return the relevant ones.

    A category is included when its raw score reaches MIN_RELEVANCE_SCORE.
    Returned scores are capped at 100 and sorted descending; ties keep the
    category priority order.
    """
    catalog = _resolve(overlay, catalog)
    text = normalize_text(paper.title, paper.abstract)
    results = []

    for category in SCORED_CATEGORIES:
        keywords = _keywords_for(category, overlay, catalog)
        score = score_category(text, category, paper.categories, keywords, catalog)
        if score >= MIN_RELEVANCE_SCORE:
            results.append(
                CategoryMatch(
                    category=category,
                    score=clamp_score(score),
                    matched_keywords=matched_keywords(text, keywords),
                )
            )

    results.sort(key=lambda m: m.score, reverse=True)
    return results


def get_primary_category(
    paper: Paper,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> TopicCategory:
    """Highest-scoring category, or OTHER when nothing clears the threshold."""
    matches = calculate_relevance_scores(paper, overlay, catalog)
    return matches[0].category if matches else TopicCategory.OTHER


def matches_category(
    paper: Paper,
    category: TopicCategory | str,
    min_score: float = MIN_RELEVANCE_SCORE,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> bool:
    return category_score(paper, category, overlay, catalog) >= min_score


def filter_by_category(
    papers: Iterable[Paper],
    category: TopicCategory | str,
    min_score: float = MIN_RELEVANCE_SCORE,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> list[Paper]:
    category = TopicCategory.parse(category)
    return [p for p in papers if matches_category(p, category, min_score, overlay, catalog)]


def filter_by_categories(
    papers: Iterable[Paper],
    categories: Iterable[TopicCategory | str],
    min_score: float = MIN_RELEVANCE_SCORE,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> list[Paper]:
    """Papers relevant to at least one of the given categories."""
    wanted = [TopicCategory.parse(c) for c in categories]
    return [
        p for p in papers
        if any(matches_category(p, c, min_score, overlay, catalog) for c in wanted)
    ]


def sort_by_relevance(
    papers: Iterable[Paper],
    category: TopicCategory | str,
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> list[Paper]:
    """Papers ordered by raw score for a category, highest first (stable)."""
    category = TopicCategory.parse(category)
    scored = [(category_score(p, category, overlay, catalog), p) for p in papers]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [p for _, p in scored]


def has_market_potential(
    paper: Paper,
    overlay: UserKeywordOverlay | None = None,
    min_score: float = MARKET_POTENTIAL_MIN_SCORE,
    catalog: KeywordCatalog | None = None,
) -> bool:
    return matches_category(
        paper, TopicCategory.MARKET_OPPORTUNITY, min_score, overlay, catalog
    )


def get_category_distribution(
    papers: Iterable[Paper],
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
) -> dict[TopicCategory, int]:
    """Count papers by primary category. Every category appears, defaulting to 0."""
    distribution = {c: 0 for c in TopicCategory}
    for paper in papers:
        distribution[get_primary_category(paper, overlay, catalog)] += 1
    return distribution


def categorize_papers(
    papers: Iterable[Paper],
    overlay: UserKeywordOverlay | None = None,
    catalog: KeywordCatalog | None = None,
    max_workers: int | None = None,
) -> dict[str, list[CategoryMatch]]:
    """Relevance scores for a batch of papers, keyed by paper id in input order.

    With ``max_workers`` > 1 papers are scored on a thread pool. Scoring has no
    shared mutable state, so results are identical either way.
    """
    papers = list(papers)
    catalog = _resolve(overlay, catalog)

    def _score(paper: Paper) -> list[CategoryMatch]:
        return calculate_relevance_scores(paper, overlay, catalog)

    if max_workers and max_workers > 1 and len(papers) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            matches = list(executor.map(_score, papers))
    else:
        matches = [_score(p) for p in papers]

    return {paper.id: m for paper, m in zip(papers, matches)}


class CategoryFilter:
    """The classifier operations bound to one user's overlay."""

    def __init__(
        self,
        overlay: UserKeywordOverlay | None = None,
        catalog: KeywordCatalog | None = None,
    ):
        self.overlay = overlay
        self.catalog = _resolve(overlay, catalog)

    def calculate_relevance_scores(self, paper: Paper) -> list[CategoryMatch]:
        return calculate_relevance_scores(paper, self.overlay, self.catalog)

    def get_primary_category(self, paper: Paper) -> TopicCategory:
        return get_primary_category(paper, self.overlay, self.catalog)

    def matches_category(
        self, paper: Paper, category: TopicCategory | str, min_score: float = MIN_RELEVANCE_SCORE
    ) -> bool:
        return matches_category(paper, category, min_score, self.overlay, self.catalog)

    def filter_by_category(
        self, papers: Iterable[Paper], category: TopicCategory | str,
        min_score: float = MIN_RELEVANCE_SCORE,
    ) -> list[Paper]:
        return filter_by_category(papers, category, min_score, self.overlay, self.catalog)

    def filter_by_categories(
        self, papers: Iterable[Paper], categories: Iterable[TopicCategory | str],
        min_score: float = MIN_RELEVANCE_SCORE,
    ) -> list[Paper]:
        return filter_by_categories(papers, categories, min_score, self.overlay, self.catalog)

    def sort_by_relevance(self, papers: Iterable[Paper], category: TopicCategory | str) -> list[Paper]:
        return sort_by_relevance(papers, category, self.overlay, self.catalog)

    def has_market_potential(
        self, paper: Paper, min_score: float = MARKET_POTENTIAL_MIN_SCORE
    ) -> bool:
        return has_market_potential(paper, self.overlay, min_score, self.catalog)

    def get_category_distribution(self, papers: Iterable[Paper]) -> dict[TopicCategory, int]:
        return get_category_distribution(papers, self.overlay, self.catalog)

    def categorize_papers(
        self, papers: Iterable[Paper], max_workers: int | None = None
    ) -> dict[str, list[CategoryMatch]]:
        return categorize_papers(papers, self.overlay, self.catalog, max_workers)
