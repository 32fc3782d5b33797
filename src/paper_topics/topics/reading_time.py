"""Reading-time estimate for an arXiv paper."""

from __future__ import annotations

import math
from dataclasses import dataclass

# Academic reading speed, slower than for blog posts
WORDS_PER_MINUTE = 175
# Typical full arXiv paper: 8-12 pages at ~500 words/page
FULL_PAPER_WORDS = 5000


@dataclass(frozen=True)
class ReadingTimeEstimate:
    minutes: int
    display_text: str
    bucket: str  # quick, medium or long


def estimate_reading_time(abstract: str) -> ReadingTimeEstimate:
    """Minutes to read the abstract plus an average-length paper body."""
    words = len((abstract or "").split())
    minutes = math.ceil(words / WORDS_PER_MINUTE + FULL_PAPER_WORDS / WORDS_PER_MINUTE)

    if minutes <= 15:
        bucket = "quick"
    elif minutes <= 35:
        bucket = "medium"
    else:
        bucket = "long"

    if minutes < 5:
        display = "Quick read"
    elif minutes >= 60:
        hours, mins = divmod(minutes, 60)
        display = f"{hours}h {mins}m read" if mins else f"{hours}h read"
    else:
        display = f"{minutes} min read"

    return ReadingTimeEstimate(minutes=minutes, display_text=display, bucket=bucket)
