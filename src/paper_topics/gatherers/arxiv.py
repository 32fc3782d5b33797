"""arXiv gatherer: recent papers scored against every topic category."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import asdict
from typing import Any

import requests

from paper_topics.models import Paper
from paper_topics.topics.categories import TopicCategory
from paper_topics.topics.classifier import (
    MIN_RELEVANCE_SCORE,
    CategoryFilter,
)
from paper_topics.topics.insights import generate_profit_insights
from paper_topics.topics.overlay import UserKeywordOverlay
from paper_topics.topics.reading_time import estimate_reading_time
from paper_topics.topics.related import find_related_papers

logger = logging.getLogger(__name__)

_ARXIV_API = "https://export.arxiv.org/api/query"
_USER_AGENT = "PaperTopics/0.1.0"

DEFAULT_CATEGORIES = ["cs.AI", "cs.LG", "cs.CV", "cs.CL", "cs.NE", "cs.RO", "stat.ML"]

_NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
    "opensearch": "http://a9.com/-/spec/opensearch/1.1/",
}

_VERSION_SUFFIX = re.compile(r"v\d+$")


def _text(entry: ET.Element, path: str) -> str:
    el = entry.find(path, _NS)
    if el is None or el.text is None:
        return ""
    return " ".join(el.text.split())


def parse_arxiv_entries(xml_text: str) -> list[Paper]:
    """Parse arXiv Atom XML into Paper records."""
    root = ET.fromstring(xml_text)
    papers = []

    for entry in root.findall("atom:entry", _NS):
        raw_id = _text(entry, "atom:id")
        # Strip version suffix for canonical ID
        arxiv_id = _VERSION_SUFFIX.sub("", raw_id.split("/abs/")[-1])

        authors = [
            " ".join((a.findtext("atom:name", "", _NS) or "").split())
            for a in entry.findall("atom:author", _NS)
        ]
        categories = [c.get("term") for c in entry.findall("atom:category", _NS) if c.get("term")]
        primary_el = entry.find("arxiv:primary_category", _NS)
        primary = primary_el.get("term", "") if primary_el is not None else ""

        pdf_url = ""
        abs_url = ""
        for link in entry.findall("atom:link", _NS):
            href = link.get("href", "")
            if link.get("title") == "pdf" or link.get("type") == "application/pdf":
                pdf_url = href
            elif link.get("type") in (None, "text/html"):
                abs_url = href

        papers.append(
            Paper(
                id=arxiv_id,
                title=_text(entry, "atom:title"),
                abstract=_text(entry, "atom:summary"),
                categories=tuple(categories),
                authors=tuple(authors),
                primary_category=primary or (categories[0] if categories else ""),
                published=_text(entry, "atom:published"),
                updated=_text(entry, "atom:updated"),
                abs_url=abs_url or f"https://arxiv.org/abs/{arxiv_id}",
                pdf_url=pdf_url or f"https://arxiv.org/pdf/{arxiv_id}",
            )
        )

    return papers


def fetch_arxiv_papers(
    categories: list[str],
    max_results: int = 50,
    search_query: str = "",
    start: int = 0,
) -> list[Paper]:
    """Fetch the newest papers across arXiv categories, deduplicated by ID."""
    # Build category query: (cat:cs.AI OR cat:cs.LG OR ...)
    query = " OR ".join(f"cat:{cat}" for cat in categories)
    if search_query:
        query = f"({query}) AND (all:{search_query})"

    resp = requests.get(
        _ARXIV_API,
        params={
            "search_query": query,
            "start": start,
            "max_results": max_results,
            "sortBy": "submittedDate",
            "sortOrder": "descending",
        },
        headers={"User-Agent": _USER_AGENT},
        timeout=30,
    )
    resp.raise_for_status()

    papers = parse_arxiv_entries(resp.text)

    # Cross-listed papers can appear more than once
    seen = set()
    unique = []
    for p in papers:
        if p.id not in seen:
            seen.add(p.id)
            unique.append(p)

    logger.info("Fetched %d papers from arXiv (%s)", len(unique), ", ".join(categories))
    return unique


class ArxivGatherer:
    """Fetches new arXiv papers and classifies them into topic categories.

    The CLI calls :meth:`safe_gather`, which reports failures as a status
    instead of raising.
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        overlay: UserKeywordOverlay | None = None,
    ):
        self._config = config or {}
        self._categories = self._config.get("categories") or DEFAULT_CATEGORIES
        self._max_results = int(self._config.get("max_results", 50))
        self._search_query = self._config.get("search_query") or ""
        self._min_score = float(self._config.get("min_score", MIN_RELEVANCE_SCORE))
        self._max_workers = self._config.get("max_workers")
        self._filter = CategoryFilter(overlay)

    @property
    def name(self) -> str:
        return "arxiv"

    def is_available(self) -> bool:
        """False when the config asks for no papers at all."""
        return self._max_results > 0

    def safe_gather(self) -> dict[str, Any]:
        """Run gather(), turning a disabled config or any failure into a status dict."""
        if not self.is_available():
            return {"status": "skipped", "reason": "arxiv.max_results is 0"}
        try:
            result = self.gather()
        except Exception as e:
            logger.exception("arXiv gather failed")
            return {"status": "error", "error": str(e)}
        result["status"] = "ok"
        return result

    def _paper_summary(self, paper: Paper, matches: list, related: list[Paper]) -> dict[str, Any]:
        insights = generate_profit_insights(paper, matches)
        return {
            "arxiv_id": paper.id,
            "title": paper.title,
            "authors": list(paper.authors[:5]),
            "author_count": len(paper.authors),
            "categories": list(paper.categories),
            "primary_category": paper.primary_category,
            "published": paper.published,
            "abs_url": paper.abs_url,
            "pdf_url": paper.pdf_url,
            "topic": matches[0].category.value if matches else TopicCategory.OTHER.value,
            "matches": [m.to_dict() for m in matches],
            "market_potential": self._filter.has_market_potential(paper),
            "reading_time": asdict(estimate_reading_time(paper.abstract)),
            "insight": {
                "market_context": insights.market_context,
                "strategy": insights.strategies[0].title,
                "difficulty": insights.strategies[0].difficulty,
                "quick_wins": list(insights.quick_wins[:2]),
            } if insights else None,
            "related": [p.id for p in related],
        }

    def gather(self) -> dict[str, Any]:
        """Fetch papers, score every topic and group them by primary topic."""
        papers = fetch_arxiv_papers(self._categories, self._max_results, self._search_query)

        if not papers:
            return {
                "total_new": 0,
                "topics": {},
                "distribution": {c.value: 0 for c in TopicCategory},
                "market_opportunities": 0,
                "categories_searched": self._categories,
            }

        matches_by_id = self._filter.categorize_papers(papers, max_workers=self._max_workers)

        topics: dict[str, list[dict[str, Any]]] = {}
        for paper in papers:
            matches = [m for m in matches_by_id[paper.id] if m.score >= self._min_score]
            related = find_related_papers(paper, papers, matches_by_id)
            summary = self._paper_summary(paper, matches, related)
            topics.setdefault(summary["topic"], []).append(summary)

        # Highest-scoring papers first within each topic
        for summaries in topics.values():
            summaries.sort(
                key=lambda s: s["matches"][0]["score"] if s["matches"] else 0, reverse=True
            )

        distribution = self._filter.get_category_distribution(papers)
        return {
            "total_new": len(papers),
            "topics": topics,
            "distribution": {c.value: n for c, n in distribution.items()},
            "market_opportunities": sum(
                1 for summaries in topics.values() for s in summaries if s["market_potential"]
            ),
            "categories_searched": self._categories,
        }
