"""Paper record shared by ingestion, classification and reporting."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Paper:
    """An arXiv paper as read by the topic engine. Never mutated after ingestion."""

    id: str
    title: str
    abstract: str = ""
    categories: tuple[str, ...] = ()
    authors: tuple[str, ...] = ()
    primary_category: str = ""
    published: str = ""
    updated: str = ""
    abs_url: str = ""
    pdf_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Paper:
        """Build a Paper from a gatherer/JSON dict (``arxiv_id`` or ``id`` key)."""
        authors = data.get("authors") or []
        # Authors may be plain names or {"name": ...} objects
        names = tuple(a["name"] if isinstance(a, dict) else str(a) for a in authors)
        return cls(
            id=str(data.get("arxiv_id") or data.get("id") or ""),
            title=data.get("title") or "",
            abstract=data.get("abstract") or "",
            categories=tuple(data.get("categories") or ()),
            authors=names,
            primary_category=data.get("primary_category") or "",
            published=data.get("published") or "",
            updated=data.get("updated") or "",
            abs_url=data.get("abs_url") or "",
            pdf_url=data.get("pdf_url") or "",
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["arxiv_id"] = data.pop("id")
        data["categories"] = list(self.categories)
        data["authors"] = list(self.authors)
        return data
