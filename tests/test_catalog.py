"""Tests for the keyword catalog and its validation."""

import pytest

from paper_topics.topics.catalog import (
    CatalogError,
    KeywordEntry,
    build_catalog,
    clamp_score,
    clamp_weight,
    default_catalog,
    load_catalog,
    validate_catalog,
)
from paper_topics.topics.categories import CATEGORY_PRIORITY, TopicCategory, UnknownCategoryError


class TestPackagedCatalog:
    def test_loads_and_validates(self):
        catalog = default_catalog()
        assert len(catalog) > 500

    def test_every_weight_in_range(self):
        catalog = default_catalog()
        for category in TopicCategory:
            for entry in catalog.keywords(category):
                assert 1 <= entry.weight <= 10, (category, entry)

    def test_every_penalty_non_negative(self):
        catalog = default_catalog()
        for category in TopicCategory:
            for negative in catalog.negatives(category):
                assert negative.penalty >= 0

    def test_every_boost_positive(self):
        for source, table in default_catalog().boosts.items():
            for category, factor in table.items():
                assert factor > 0, (source, category)

    def test_other_has_no_keywords(self):
        assert default_catalog().keywords(TopicCategory.OTHER) == ()

    def test_every_scored_category_has_keywords(self):
        catalog = default_catalog()
        for category in CATEGORY_PRIORITY:
            if category is not TopicCategory.OTHER:
                assert catalog.keywords(category), category

    def test_terms_are_lowercase(self):
        catalog = default_catalog()
        for category in TopicCategory:
            for entry in catalog.keywords(category):
                assert entry.term == entry.term.strip().lower()

    def test_known_entries(self):
        catalog = default_catalog()
        entries = {k.term: k for k in catalog.keywords(TopicCategory.AGENTIC_CODING)}
        assert entries["llm agent"] == KeywordEntry("llm agent", 10, exact=True)
        assert entries["tool calling"].weight == 9
        assert entries["function calling"].weight == 9

    def test_boost_lookup(self):
        catalog = default_catalog()
        assert catalog.boost("cs.CL", TopicCategory.NLP) == 1.4
        assert catalog.boost("cs.CL", TopicCategory.ROBOTICS) is None
        assert catalog.boost("astro-ph.GA", TopicCategory.NLP) is None

    def test_catalog_is_read_only(self):
        catalog = default_catalog()
        with pytest.raises(TypeError):
            catalog.boosts["cs.AI"] = {}
        assert isinstance(catalog.keywords(TopicCategory.LLM), tuple)

    def test_has_term_is_case_insensitive(self):
        assert default_catalog().has_term(TopicCategory.AGENTIC_CODING, "  Tool Calling ")


class TestValidation:
    def test_valid_data(self):
        data = {
            "keywords": {"rag": [{"term": "retrieval", "weight": 7}]},
            "negative_keywords": {"rag": [{"term": "rag doll", "penalty": 3}]},
            "source_boosts": {"cs.IR": {"rag": 1.5}},
        }
        assert validate_catalog(data) == []

    def test_weight_out_of_range(self):
        errors = validate_catalog({"keywords": {"rag": [{"term": "x", "weight": 11}]}})
        assert any("weight 11" in e for e in errors)

    def test_weight_zero(self):
        errors = validate_catalog({"keywords": {"rag": [{"term": "x", "weight": 0}]}})
        assert errors

    def test_negative_penalty(self):
        errors = validate_catalog({"negative_keywords": {"rag": [{"term": "x", "penalty": -1}]}})
        assert any("penalty" in e for e in errors)

    def test_non_positive_boost(self):
        errors = validate_catalog({"source_boosts": {"cs.IR": {"rag": 0}}})
        assert any("factor" in e for e in errors)

    def test_unknown_category(self):
        errors = validate_catalog({"keywords": {"astrology": [{"term": "x", "weight": 5}]}})
        assert any("astrology" in e for e in errors)

    def test_duplicate_and_empty_terms(self):
        errors = validate_catalog({
            "keywords": {"rag": [
                {"term": "vector db", "weight": 5},
                {"term": "Vector DB", "weight": 6},
                {"term": "  ", "weight": 6},
            ]},
        })
        assert any("duplicate" in e for e in errors)
        assert any("empty term" in e for e in errors)

    def test_other_must_be_empty(self):
        errors = validate_catalog({"keywords": {"other": [{"term": "misc", "weight": 5}]}})
        assert any("fallback" in e for e in errors)

    def test_build_catalog_raises(self):
        with pytest.raises(CatalogError, match="Invalid keyword catalog"):
            build_catalog({"keywords": {"rag": [{"term": "x", "weight": 42}]}})

    def test_load_catalog_from_file(self, tmp_path):
        path = tmp_path / "catalog.yaml"
        path.write_text(
            "version: 7\n"
            "keywords:\n"
            "  rag:\n"
            "    - {term: \"Retrieval\", weight: 7, exact: true}\n"
        )
        catalog = load_catalog(path)
        assert catalog.version == 7
        assert catalog.keywords(TopicCategory.RAG) == (KeywordEntry("retrieval", 7, True),)
        assert catalog.keywords(TopicCategory.LLM) == ()


class TestClamping:
    def test_clamp_weight(self):
        assert clamp_weight(0) == 1
        assert clamp_weight(-5) == 1
        assert clamp_weight(7) == 7
        assert clamp_weight(25) == 10

    def test_clamp_score(self):
        assert clamp_score(-3.0) == 0.0
        assert clamp_score(42.5) == 42.5
        assert clamp_score(180.0) == 100.0

    def test_keyword_entry_create_normalises(self):
        entry = KeywordEntry.create("  Mixture Of Experts ", 14)
        assert entry == KeywordEntry("mixture of experts", 10, False)


class TestTopicCategory:
    def test_parse_slug(self):
        assert TopicCategory.parse("agentic-coding") is TopicCategory.AGENTIC_CODING
        assert TopicCategory.parse(" RAG ") is TopicCategory.RAG
        assert TopicCategory.parse(TopicCategory.LLM) is TopicCategory.LLM

    def test_parse_unknown(self):
        with pytest.raises(UnknownCategoryError, match="astrology"):
            TopicCategory.parse("astrology")

    def test_parse_non_string(self):
        with pytest.raises(UnknownCategoryError):
            TopicCategory.parse(3)

    def test_priority_covers_every_category_once(self):
        assert sorted(CATEGORY_PRIORITY) == sorted(TopicCategory)
        assert CATEGORY_PRIORITY[-1] is TopicCategory.OTHER

    def test_labels(self):
        assert TopicCategory.RUNPOD.label == "RunPod/Deployment"
        assert str(TopicCategory.RUNPOD) == "runpod"
        assert TopicCategory.OTHER.description == "Other AI/ML papers"
