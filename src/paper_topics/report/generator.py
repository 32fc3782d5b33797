"""Digest generator: renders the Markdown topic digest from gathered data."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from paper_topics.topics.categories import CATEGORY_PRIORITY, TopicCategory, UnknownCategoryError
from paper_topics.topics.insights import difficulty_label

logger = logging.getLogger(__name__)

_TEMPLATES_DIR = Path(__file__).parent / "templates"


def _topic_label(slug: str) -> str:
    """Display label for a topic slug, falling back to the slug itself."""
    try:
        return TopicCategory.parse(slug).label
    except UnknownCategoryError:
        return slug


def _score(value: float) -> str:
    return f"{value:.0f}"


def _ordered_topics(topics: dict[str, Any]) -> list[tuple[str, Any]]:
    """Topic sections in display priority order; unknown slugs go last."""
    order = {c.value: i for i, c in enumerate(CATEGORY_PRIORITY)}
    return sorted(topics.items(), key=lambda item: order.get(item[0], len(order)))


def generate_report(
    data: dict[str, Any],
    output_dir: Path | None = None,
    date: datetime | None = None,
) -> str:
    """Render the topic digest from gathered data.

    Args:
        data: Dictionary mapping gatherer names to their results.
        output_dir: Directory to write the digest file. Not written if None.
        date: Date for the digest. Defaults to today.

    Returns:
        The rendered digest as a string.
    """
    date = date or datetime.now()
    date_str = date.strftime("%Y-%m-%d")

    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["topic_label"] = _topic_label
    env.filters["score"] = _score
    env.filters["difficulty_label"] = difficulty_label

    template = env.get_template("digest.md.j2")

    arxiv = data.get("arxiv", {})
    rendered = template.render(
        date=date_str,
        generated_at=datetime.now().strftime("%H:%M"),
        arxiv=arxiv,
        topics=_ordered_topics(arxiv.get("topics", {})),
    )

    if output_dir:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{date_str}.md"
        output_path.write_text(rendered)
        logger.info("Digest written to %s", output_path)

    return rendered


def save_gathered_data(data: dict[str, Any], output_dir: Path, date: datetime | None = None) -> Path:
    """Save raw gathered data as JSON so the digest can be re-rendered later."""
    date = date or datetime.now()
    date_str = date.strftime("%Y-%m-%d")
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{date_str}.json"
    with open(output_path, "w") as f:
        json.dump(data, f, indent=2, default=str)
    logger.info("Gathered data saved to %s", output_path)
    return output_path
