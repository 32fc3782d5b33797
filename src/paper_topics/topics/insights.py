"""Monetization playbooks keyed by a paper's primary topic."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml

from paper_topics.models import Paper
from paper_topics.topics.catalog import CatalogError
from paper_topics.topics.categories import TopicCategory, UnknownCategoryError

logger = logging.getLogger(__name__)

_DEFAULT_INSIGHTS = Path(__file__).resolve().parent / "data" / "insights.yaml"

DIFFICULTIES = ("beginner", "intermediate", "advanced")


@dataclass(frozen=True)
class ProfitStrategy:
    title: str
    description: str
    steps: tuple[str, ...]
    estimated_revenue: str
    time_to_market: str
    difficulty: str


@dataclass(frozen=True)
class ProfitInsights:
    category: TopicCategory
    market_context: str
    strategies: tuple[ProfitStrategy, ...]
    quick_wins: tuple[str, ...]
    resources: tuple[str, ...]
    matched_keywords: tuple[str, ...] = ()


def difficulty_label(difficulty: str) -> str:
    match difficulty:
        case "beginner":
            return "Beginner Friendly"
        case "intermediate":
            return "Some Experience Needed"
        case "advanced":
            return "Technical Expertise Required"
        case _:
            return "Unknown"


def _build_playbook(category: TopicCategory, raw: dict[str, Any], errors: list[str]) -> ProfitInsights:
    strategies = []
    for i, s in enumerate(raw.get("strategies") or []):
        if s.get("difficulty") not in DIFFICULTIES:
            errors.append(f"{category}.strategies[{i}]: bad difficulty {s.get('difficulty')!r}")
        strategies.append(
            ProfitStrategy(
                title=s.get("title", ""),
                description=s.get("description", ""),
                steps=tuple(s.get("steps") or ()),
                estimated_revenue=s.get("estimated_revenue", ""),
                time_to_market=s.get("time_to_market", ""),
                difficulty=s.get("difficulty", ""),
            )
        )
    if not strategies:
        errors.append(f"{category}: no strategies")
    return ProfitInsights(
        category=category,
        market_context=raw.get("market_context", ""),
        strategies=tuple(strategies),
        quick_wins=tuple(raw.get("quick_wins") or ()),
        resources=tuple(raw.get("resources") or ()),
    )


def load_insights(path: Path | str | None = None) -> Mapping[TopicCategory, ProfitInsights]:
    """Load playbooks for every topic category.

    Raises:
        CatalogError: If a category is missing, unknown, or malformed.
    """
    insights_path = Path(path) if path else _DEFAULT_INSIGHTS
    with open(insights_path) as f:
        raw = yaml.safe_load(f) or {}

    errors: list[str] = []
    playbooks: dict[TopicCategory, ProfitInsights] = {}
    for key, value in raw.items():
        try:
            category = TopicCategory.parse(key)
        except UnknownCategoryError:
            errors.append(f"unknown category {key!r}")
            continue
        playbooks[category] = _build_playbook(category, value or {}, errors)

    missing = [c.value for c in TopicCategory if c not in playbooks]
    if missing:
        errors.append(f"missing playbooks for: {', '.join(missing)}")
    if errors:
        raise CatalogError("Invalid insights data:\n  " + "\n  ".join(errors))

    logger.debug("Loaded %d profit playbooks from %s", len(playbooks), insights_path)
    return playbooks


@lru_cache(maxsize=1)
def default_insights() -> Mapping[TopicCategory, ProfitInsights]:
    return load_insights()


def generate_profit_insights(
    paper: Paper,
    matches: Sequence[Any],
    playbooks: Mapping[TopicCategory, ProfitInsights] | None = None,
) -> ProfitInsights | None:
    """Playbook for the paper's primary (first) category match.

    ``matches`` is the sorted output of ``calculate_relevance_scores``.
    Returns None when the paper matched no category.
    """
    if not matches:
        return None
    playbooks = playbooks if playbooks is not None else default_insights()
    primary = matches[0]
    playbook = playbooks[TopicCategory.parse(primary.category)]
    logger.debug("Profit insights for %s: %s", paper.id, playbook.category)
    return replace(playbook, matched_keywords=tuple(primary.matched_keywords))
