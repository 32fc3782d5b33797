"""Related-paper recommendations built on category matches."""

from __future__ import annotations

from datetime import date, datetime
from typing import Mapping, Sequence

from paper_topics.models import Paper

SHARED_TOPIC_POINTS = 40
SHARED_AUTHOR_POINTS = 30
SHARED_SOURCE_POINTS = 20
RECENT_WEEK_POINTS = 10
RECENT_MONTH_POINTS = 5


def _published_date(paper: Paper) -> date | None:
    if not paper.published:
        return None
    try:
        return datetime.fromisoformat(paper.published.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def similarity_score(
    current: Paper,
    candidate: Paper,
    matches_by_id: Mapping[str, Sequence],
    today: date | None = None,
) -> int:
    """Weighted overlap of topics, authors and source categories, plus recency."""
    today = today or date.today()
    current_topics = {m.category for m in matches_by_id.get(current.id, [])}
    candidate_topics = {m.category for m in matches_by_id.get(candidate.id, [])}
    current_authors = {a.lower() for a in current.authors}

    score = SHARED_TOPIC_POINTS * len(candidate_topics & current_topics)
    score += SHARED_AUTHOR_POINTS * sum(1 for a in candidate.authors if a.lower() in current_authors)
    score += SHARED_SOURCE_POINTS * sum(1 for c in candidate.categories if c in current.categories)

    published = _published_date(candidate)
    if published is not None:
        age = (today - published).days
        if age < 7:
            score += RECENT_WEEK_POINTS
        elif age < 30:
            score += RECENT_MONTH_POINTS
    return score


def find_related_papers(
    current: Paper,
    papers: Sequence[Paper],
    matches_by_id: Mapping[str, Sequence],
    limit: int = 3,
    today: date | None = None,
) -> list[Paper]:
    """Up to ``limit`` papers most similar to ``current``, best first.

    ``matches_by_id`` is the output of ``categorize_papers`` for the paper set.
    Papers with no similarity at all are never returned.
    """
    scored = [
        (similarity_score(current, p, matches_by_id, today), p)
        for p in papers
        if p.id != current.id
    ]
    scored = [item for item in scored if item[0] > 0]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [p for _, p in scored[:limit]]
