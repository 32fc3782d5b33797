"""Tests for monetization playbooks."""

import pytest

from paper_topics.models import Paper
from paper_topics.topics.catalog import CatalogError
from paper_topics.topics.categories import TopicCategory
from paper_topics.topics.classifier import CategoryMatch
from paper_topics.topics.insights import (
    default_insights,
    difficulty_label,
    generate_profit_insights,
    load_insights,
)

PAPER = Paper(id="2401.00001", title="Agents", abstract="tool calling")


class TestPlaybooks:
    def test_every_category_has_a_playbook(self):
        playbooks = default_insights()
        assert set(playbooks) == set(TopicCategory)
        for category, playbook in playbooks.items():
            assert playbook.category is category
            assert playbook.strategies
            assert playbook.market_context

    def test_strategy_difficulties_are_known(self):
        for playbook in default_insights().values():
            for strategy in playbook.strategies:
                assert difficulty_label(strategy.difficulty) != "Unknown"

    def test_missing_category_rejected(self, tmp_path):
        path = tmp_path / "insights.yaml"
        path.write_text(
            "rag:\n"
            "  market_context: 'x'\n"
            "  strategies:\n"
            "    - {title: t, description: d, steps: [a], estimated_revenue: r,"
            " time_to_market: w, difficulty: beginner}\n"
        )
        with pytest.raises(CatalogError, match="missing playbooks"):
            load_insights(path)

    def test_unknown_category_rejected(self, tmp_path):
        path = tmp_path / "insights.yaml"
        path.write_text("astrology:\n  market_context: 'x'\n")
        with pytest.raises(CatalogError, match="astrology"):
            load_insights(path)


class TestDifficultyLabel:
    def test_labels(self):
        assert difficulty_label("beginner") == "Beginner Friendly"
        assert difficulty_label("intermediate") == "Some Experience Needed"
        assert difficulty_label("advanced") == "Technical Expertise Required"
        assert difficulty_label("wizard") == "Unknown"


class TestGenerateProfitInsights:
    def test_no_matches_gives_none(self):
        assert generate_profit_insights(PAPER, []) is None

    def test_uses_primary_match(self):
        matches = [
            CategoryMatch(TopicCategory.AGENTIC_CODING, 40, ["tool calling", "llm agent"]),
            CategoryMatch(TopicCategory.LLM, 10, ["llm"]),
        ]
        insights = generate_profit_insights(PAPER, matches)
        assert insights.category is TopicCategory.AGENTIC_CODING
        assert insights.matched_keywords == ("tool calling", "llm agent")
        assert insights.strategies == default_insights()[TopicCategory.AGENTIC_CODING].strategies

    def test_does_not_mutate_cached_playbook(self):
        matches = [CategoryMatch(TopicCategory.RAG, 12, ["retrieval"])]
        generate_profit_insights(PAPER, matches)
        assert default_insights()[TopicCategory.RAG].matched_keywords == ()
