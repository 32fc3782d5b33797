"""Tests for related-paper recommendations."""

from datetime import date

from paper_topics.models import Paper
from paper_topics.topics.categories import TopicCategory
from paper_topics.topics.classifier import CategoryMatch
from paper_topics.topics.related import find_related_papers, similarity_score

TODAY = date(2024, 3, 20)


def _match(category):
    return CategoryMatch(category, 20, [])


CURRENT = Paper(
    id="cur",
    title="Current",
    authors=("Ada Lovelace", "Alan Turing"),
    categories=("cs.AI", "cs.CL"),
)

MATCHES = {
    "cur": [_match(TopicCategory.AGENTIC_CODING), _match(TopicCategory.LLM)],
    "topic": [_match(TopicCategory.LLM)],
    "author": [],
    "both": [_match(TopicCategory.AGENTIC_CODING), _match(TopicCategory.LLM)],
}


class TestSimilarityScore:
    def test_shared_topics(self):
        candidate = Paper(id="both", title="x")
        assert similarity_score(CURRENT, candidate, MATCHES, TODAY) == 80

    def test_shared_authors_case_insensitive(self):
        candidate = Paper(id="author", title="x", authors=("ada lovelace", "Someone Else"))
        assert similarity_score(CURRENT, candidate, MATCHES, TODAY) == 30

    def test_shared_source_categories(self):
        candidate = Paper(id="src", title="x", categories=("cs.CL", "cs.LG"))
        assert similarity_score(CURRENT, candidate, MATCHES, TODAY) == 20

    def test_recency_bonus(self):
        week = Paper(id="w", title="x", published="2024-03-18T10:00:00Z")
        month = Paper(id="m", title="x", published="2024-03-01T10:00:00Z")
        old = Paper(id="o", title="x", published="2023-01-01T10:00:00Z")
        assert similarity_score(CURRENT, week, MATCHES, TODAY) == 10
        assert similarity_score(CURRENT, month, MATCHES, TODAY) == 5
        assert similarity_score(CURRENT, old, MATCHES, TODAY) == 0

    def test_bad_date_ignored(self):
        candidate = Paper(id="x", title="x", published="yesterday")
        assert similarity_score(CURRENT, candidate, MATCHES, TODAY) == 0


class TestFindRelatedPapers:
    papers = [
        CURRENT,
        Paper(id="none", title="unrelated"),
        Paper(id="topic", title="x"),
        Paper(id="author", title="x", authors=("Alan Turing",)),
        Paper(id="both", title="x", categories=("cs.AI",)),
    ]

    def test_ranked_and_excludes_self(self):
        related = find_related_papers(CURRENT, self.papers, MATCHES, today=TODAY)
        assert [p.id for p in related] == ["both", "topic", "author"]

    def test_limit(self):
        related = find_related_papers(CURRENT, self.papers, MATCHES, limit=1, today=TODAY)
        assert [p.id for p in related] == ["both"]

    def test_zero_similarity_never_returned(self):
        related = find_related_papers(CURRENT, self.papers, MATCHES, limit=10, today=TODAY)
        assert "none" not in [p.id for p in related]
