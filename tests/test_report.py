"""Tests for the digest generator."""

import json
from datetime import datetime

from paper_topics.report.generator import generate_report, save_gathered_data

DATE = datetime(2026, 2, 25)


def _paper(arxiv_id, title, topic, matches, insight=None, market=False):
    return {
        "arxiv_id": arxiv_id,
        "title": title,
        "authors": ["A. Smith"],
        "author_count": 7,
        "categories": ["cs.AI"],
        "primary_category": "cs.AI",
        "published": "2026-02-25T00:00:00Z",
        "abs_url": f"https://arxiv.org/abs/{arxiv_id}",
        "pdf_url": f"https://arxiv.org/pdf/{arxiv_id}",
        "topic": topic,
        "matches": matches,
        "market_potential": market,
        "reading_time": {"minutes": 30, "display_text": "30 min read", "bucket": "medium"},
        "insight": insight,
        "related": [],
    }


SAMPLE = {
    "arxiv": {
        "status": "ok",
        "total_new": 2,
        "categories_searched": ["cs.AI", "cs.CL"],
        "market_opportunities": 1,
        "distribution": {"agentic-coding": 1, "llm": 0, "other": 1},
        "topics": {
            "other": [_paper("2602.00002", "Zorblax Frobnication", "other", [])],
            "agentic-coding": [
                _paper(
                    "2602.00001",
                    "Tool-Using Agents",
                    "agentic-coding",
                    [{"category": "agentic-coding", "score": 42.4,
                      "matched_keywords": ["llm agent", "tool calling"]}],
                    insight={
                        "market_context": "Growing",
                        "strategy": "Build a Specialized AI Agent SaaS",
                        "difficulty": "intermediate",
                        "quick_wins": ["Write a blog post"],
                    },
                    market=True,
                ),
            ],
        },
    },
}


class TestGenerateReport:
    def test_renders_sections(self):
        report = generate_report(SAMPLE, date=DATE)
        assert "# arXiv Topic Digest: 2026-02-25" in report
        assert "**2** new papers from cs.AI, cs.CL." in report
        assert "| Agentic Coding | 1 |" in report
        assert "| Other | 1 |" in report
        assert "| LLM" not in report
        assert "Tool-Using Agents" in report
        assert "Agent Development" not in report
        assert "(42)" in report
        assert "llm agent, tool calling" in report
        assert "Build a Specialized AI Agent SaaS" in report
        assert "Some Experience Needed" in report
        assert "et al." in report

    def test_topics_in_priority_order(self):
        report = generate_report(SAMPLE, date=DATE)
        assert report.index("Tool-Using Agents") < report.index("Zorblax Frobnication")

    def test_error_status(self):
        report = generate_report({"arxiv": {"status": "error", "error": "offline"}}, date=DATE)
        assert "arXiv data unavailable (error): offline" in report

    def test_skipped_status(self):
        data = {"arxiv": {"status": "skipped", "reason": "arxiv.max_results is 0"}}
        report = generate_report(data, date=DATE)
        assert "arXiv data unavailable (skipped): arxiv.max_results is 0" in report

    def test_no_papers(self):
        report = generate_report({"arxiv": {"status": "ok", "total_new": 0}}, date=DATE)
        assert "No new papers." in report

    def test_writes_file(self, tmp_path):
        generate_report(SAMPLE, output_dir=tmp_path, date=DATE)
        assert (tmp_path / "2026-02-25.md").read_text().startswith("# arXiv Topic Digest")


def test_save_gathered_data(tmp_path):
    path = save_gathered_data(SAMPLE, tmp_path / "out", date=DATE)
    assert path == tmp_path / "out" / "2026-02-25.json"
    assert json.loads(path.read_text()) == SAMPLE
